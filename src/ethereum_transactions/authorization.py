"""
Set Code Authorizations
^^^^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

An [EIP-7702] authorization lets an externally owned account delegate to the
code of another address. The authorization is signed by the account (the
*authority*) independently of whoever submits the set code transaction
carrying it.

[EIP-7702]: https://eips.ethereum.org/EIPS/eip-7702
"""

import logging
from typing import Any

from ethereum_rlp import rlp
from ethereum_types.numeric import U256

from .crypto.elliptic_curve import (
    SECP256K1N,
    PrivateKeyLike,
    public_key_to_address,
    secp256k1_recover,
    secp256k1_sign,
)
from .crypto.hash import Hash32, keccak256
from .exceptions import InvalidSignatureError
from .fields import coerce_authorization, coerce_authorization_request
from .fork_types import Address, Authorization

logger = logging.getLogger(__name__)

SET_CODE_TX_MAGIC = b"\x05"


def authorization_hash(request: Any) -> Hash32:
    """
    Compute the hash an authorization's signature is made over.

    Parameters
    ----------
    request :
        An `AuthorizationRequest`, a signed `Authorization`, or a mapping
        with `chain_id`, `address` and `nonce`.

    Returns
    -------
    hash : `Hash32`
        `keccak256(0x05 || rlp([chain_id, address, nonce]))`.
    """
    if isinstance(request, Authorization):
        request = request.request()
    else:
        request = coerce_authorization_request(request)

    return keccak256(
        SET_CODE_TX_MAGIC
        + rlp.encode(
            (
                request.chain_id,
                request.address,
                request.nonce,
            )
        )
    )


def sign_authorization(
    request: Any, private_key: PrivateKeyLike
) -> Authorization:
    """
    Sign an authorization request.

    Returns
    -------
    authorization : `Authorization`
        The request fields together with `y_parity`, `r` and `s`.
    """
    request = coerce_authorization_request(request)
    r, s, y_parity = secp256k1_sign(authorization_hash(request), private_key)
    logger.debug(
        "signed authorization for %s on chain %d",
        request.address.hex(),
        int(request.chain_id),
    )
    return coerce_authorization(
        {
            "chain_id": request.chain_id,
            "address": request.address,
            "nonce": request.nonce,
            "y_parity": y_parity,
            "r": r,
            "s": s,
        }
    )


def recover_authority(authorization: Any) -> Address:
    """
    Recover the authority address from the authorization.

    Parameters
    ----------
    authorization
        The authorization to recover the authority from.

    Raises
    ------
    InvalidSignatureError
        If the signature is invalid.

    Returns
    -------
    authority : `Address`
        The recovered authority address.
    """
    authorization = coerce_authorization(authorization)
    y_parity, r, s = authorization.y_parity, authorization.r, authorization.s
    if y_parity not in (0, 1):
        raise InvalidSignatureError("Invalid y_parity in authorization")
    if U256(0) >= r or r >= SECP256K1N:
        raise InvalidSignatureError("Invalid r value in authorization")
    if U256(0) >= s or s > SECP256K1N // U256(2):
        raise InvalidSignatureError("Invalid s value in authorization")

    public_key = secp256k1_recover(
        r, s, U256(y_parity), authorization_hash(authorization)
    )
    return public_key_to_address(public_key)
