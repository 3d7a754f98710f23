"""
Elliptic Curves
^^^^^^^^^^^^^^^

secp256k1 signing, public key recovery and verification.
"""

from typing import Tuple, Union

import coincurve
from Crypto.Util.asn1 import DerSequence
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    decode_dss_signature,
)
from ethereum_types.bytes import Bytes, Bytes20
from ethereum_types.numeric import U256

from ..exceptions import InvalidPrivateKeyError, InvalidSignatureError
from ..utils.hexadecimal import hex_to_bytes
from .hash import Hash32, keccak256

SECP256K1B = U256(7)
SECP256K1P = U256(
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
)
SECP256K1N = U256(
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
)

PrivateKeyLike = Union[str, bytes]


def load_private_key(private_key: PrivateKeyLike) -> coincurve.PrivateKey:
    """
    Parse a private key given as a hex string (with or without `0x`) or as
    32 raw bytes.

    Raises
    ------
    InvalidPrivateKeyError
        If the key is malformed or not in `[1, N)`.
    """
    try:
        if isinstance(private_key, str):
            secret = hex_to_bytes(private_key)
        elif isinstance(private_key, (bytes, bytearray)):
            secret = bytes(private_key)
        else:
            raise InvalidPrivateKeyError(
                f"unsupported private key type {type(private_key).__name__}"
            )
    except ValueError as e:
        raise InvalidPrivateKeyError("private key is not valid hex") from e

    if len(secret) != 32:
        raise InvalidPrivateKeyError(
            f"private key must be 32 bytes, got {len(secret)}"
        )

    try:
        return coincurve.PrivateKey(secret)
    except ValueError as e:
        raise InvalidPrivateKeyError("private key is out of range") from e


def secp256k1_sign(
    msg_hash: Hash32,
    private_key: PrivateKeyLike,
    extra_entropy: bool = False,
) -> Tuple[U256, U256, U256]:
    """
    Signs a message hash.

    Without `extra_entropy` the nonce is derived deterministically
    ([RFC 6979]). With it, the nonce is drawn at random, so signing the same
    hash twice yields different signatures. Either way `s` is in the lower
    half of the curve order.

    Parameters
    ----------
    msg_hash :
        Hash of the message being signed.
    private_key :
        Key to sign with.
    extra_entropy :
        Whether to randomise the nonce.

    Returns
    -------
    signature : `Tuple[U256, U256, U256]`
        `r`, `s` and the recovery id (`y_parity`).

    [RFC 6979]: https://datatracker.ietf.org/doc/html/rfc6979
    """
    key = load_private_key(private_key)

    if extra_entropy:
        return _sign_randomized(msg_hash, key)

    signature = key.sign_recoverable(msg_hash, hasher=None)
    return (
        U256.from_be_bytes(signature[0:32]),
        U256.from_be_bytes(signature[32:64]),
        U256(signature[64]),
    )


def _sign_randomized(
    msg_hash: Hash32, key: coincurve.PrivateKey
) -> Tuple[U256, U256, U256]:
    signing_key = ec.derive_private_key(key.to_int(), ec.SECP256K1())
    der = signing_key.sign(msg_hash, ec.ECDSA(Prehashed(hashes.SHA256())))
    r, s = decode_dss_signature(der)

    n = int(SECP256K1N)
    if s > n // 2:
        s = n - s

    expected = key.public_key.format(compressed=False)[1:]
    for y_parity in (0, 1):
        try:
            recovered = secp256k1_recover(
                U256(r), U256(s), U256(y_parity), msg_hash
            )
        except InvalidSignatureError:
            continue
        if recovered == expected:
            return U256(r), U256(s), U256(y_parity)

    raise InvalidSignatureError("unable to determine recovery id")


def secp256k1_recover(r: U256, s: U256, v: U256, msg_hash: Hash32) -> Bytes:
    """
    Recovers the public key from a given signature.

    Parameters
    ----------
    r :
        The `r` component of the signature.
    s :
        The `s` component of the signature.
    v :
        The recovery id (0 or 1).
    msg_hash :
        Hash of the message being recovered.

    Returns
    -------
    public_key : `Bytes`
        Recovered public key, 64 bytes without the `0x04` prefix.
    """
    is_square = pow(
        pow(r, U256(3), SECP256K1P) + SECP256K1B,
        (SECP256K1P - U256(1)) // U256(2),
        SECP256K1P,
    )

    if is_square != 1:
        raise InvalidSignatureError(
            "r is not the x-coordinate of a point on the secp256k1 curve"
        )

    r_bytes = r.to_be_bytes32()
    s_bytes = s.to_be_bytes32()

    signature = bytearray([0] * 65)
    signature[32 - len(r_bytes) : 32] = r_bytes
    signature[64 - len(s_bytes) : 64] = s_bytes
    signature[64] = int(v)

    # If the recovery algorithm returns the point at infinity,
    # the signature is considered invalid
    # the below function will raise a ValueError.
    try:
        public_key = coincurve.PublicKey.from_signature_and_message(
            bytes(signature), msg_hash, hasher=None
        )
    except ValueError as e:
        raise InvalidSignatureError from e

    return public_key.format(compressed=False)[1:]


def secp256k1_verify(
    r: U256, s: U256, public_key: Bytes, msg_hash: Hash32
) -> bool:
    """
    Verifies a signature against a 64 byte uncompressed public key.
    """
    sig = DerSequence([int(r), int(s)]).encode()
    try:
        key = coincurve.PublicKey(b"\x04" + public_key)
        return key.verify(sig, msg_hash, hasher=None)
    except ValueError:
        return False


def compress_public_key(public_key: Bytes) -> Bytes:
    """
    Convert a 64 byte uncompressed public key into its 33 byte compressed
    form.
    """
    return coincurve.PublicKey(b"\x04" + public_key).format(compressed=True)


def public_key_to_address(public_key: Bytes) -> Bytes20:
    """
    Derive the account address of a 64 byte uncompressed public key.
    """
    return Bytes20(keccak256(public_key)[12:32])


def private_key_to_address(private_key: PrivateKeyLike) -> Bytes20:
    """
    Derive the account address controlled by `private_key`.
    """
    key = load_private_key(private_key)
    return public_key_to_address(key.public_key.format(compressed=False)[1:])
