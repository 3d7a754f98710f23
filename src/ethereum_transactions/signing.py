"""
Signing Hashes
^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

The byte strings that get hashed to sign a transaction, recover its sender,
or identify it once signed.

The signing preimage of a typed transaction is its type byte followed by the
RLP list of its unsigned fields. A legacy transaction signs the RLP list of
its six base fields, followed by `(chain_id, 0, 0)` when it is replay
protected ([EIP-155]).

[EIP-155]: https://eips.ethereum.org/EIPS/eip-155
"""

from typing import Any

from ethereum_types.bytes import Bytes

from .codec import encode_transaction
from .crypto.hash import Hash32, keccak256


def signing_preimage(
    tx_type: Any, raw: Any, include_signature: bool
) -> Bytes:
    """
    The bytes hashed for signing (`include_signature=False`) or to compute
    the transaction hash (`include_signature=True`).
    """
    return encode_transaction(tx_type, raw, include_signature)


def signing_hash(tx_type: Any, raw: Any) -> Hash32:
    """
    Compute the hash a transaction's signature is made over.

    Parameters
    ----------
    tx_type :
        Type of the transaction.
    raw :
        The transaction's record.

    Returns
    -------
    hash : `Hash32`
        Hash of the unsigned transaction.
    """
    return keccak256(signing_preimage(tx_type, raw, include_signature=False))


def transaction_hash(tx_type: Any, raw: Any) -> Hash32:
    """
    Compute the hash identifying a signed transaction.

    Raises
    ------
    NotSignedError
        If the transaction carries no signature.
    """
    return keccak256(signing_preimage(tx_type, raw, include_signature=True))
