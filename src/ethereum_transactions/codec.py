"""
Transaction Encoding
^^^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Maps transaction records to and from their wire format. Typed transactions
([EIP-2718]) are the type byte followed by the RLP list of their fields;
legacy transactions are a bare RLP list, recognised by their first byte
being at least `0xc0`.

[EIP-2718]: https://eips.ethereum.org/EIPS/eip-2718
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from ethereum_rlp import Extended, rlp
from ethereum_rlp.exceptions import DecodingError
from ethereum_types.bytes import Bytes
from ethereum_types.numeric import U64, U256, Uint, Unsigned

from .exceptions import (
    InvalidFieldValueError,
    MalformedEncodingError,
    MissingFieldError,
    NotSignedError,
)
from .fields import (
    FIELD_TYPES,
    RECORD_TYPES,
    SIGNATURE_FIELDS,
    UNSIGNED_FIELDS,
    TransactionRecord,
    TransactionType,
    decode_legacy_v,
    encode_legacy_v,
    field_type,
    validate_fields,
)

logger = logging.getLogger(__name__)


def _as_record(tx_type: TransactionType, raw: Any) -> TransactionRecord:
    if isinstance(raw, RECORD_TYPES[tx_type]):
        return raw
    return validate_fields(tx_type, raw, strict=False)


def transaction_fields(
    tx_type: Any, raw: Any, include_signature: bool
) -> List[Extended]:
    """
    The values of `raw` in wire order, ready to be RLP encoded.

    Without the signature, legacy transactions that carry a chain id end with
    the [EIP-155] triple `(chain_id, 0, 0)` in place of `(v, r, s)`; this is
    both their signing preimage and their unsigned wire form.

    [EIP-155]: https://eips.ethereum.org/EIPS/eip-155
    """
    tx_type = TransactionType.from_name(tx_type)
    record = _as_record(tx_type, raw)

    items: List[Extended] = []
    for name in UNSIGNED_FIELDS[tx_type]:
        value = getattr(record, name)
        if value is None:
            raise MissingFieldError(name)
        items.append(value)

    legacy = tx_type == TransactionType.LEGACY
    if include_signature:
        if record.r is None or record.s is None:
            raise NotSignedError()
        if legacy:
            v = encode_legacy_v(record.chain_id, record.y_parity)
            items.extend((v, record.r, record.s))
        else:
            items.extend((record.y_parity, record.r, record.s))
    elif legacy and record.chain_id is not None:
        items.extend((record.chain_id, Uint(0), Uint(0)))

    return items


def encode_transaction(
    tx_type: Any, raw: Any, include_signature: bool
) -> Bytes:
    """
    Serialize a transaction.

    Parameters
    ----------
    tx_type :
        Type of the transaction.
    raw :
        The transaction's record (or a mapping of its fields).
    include_signature :
        Whether to append the signature fields.

    Returns
    -------
    encoded : `Bytes`
        The type byte (absent for legacy transactions) and the RLP list of
        the fields.
    """
    tx_type = TransactionType.from_name(tx_type)
    payload = rlp.encode(transaction_fields(tx_type, raw, include_signature))
    if tx_type == TransactionType.LEGACY:
        return payload
    return bytes([tx_type]) + payload


def _check_canonical_uint(name: str, value: Any) -> None:
    if isinstance(value, bytes) and value[:1] == b"\x00":
        raise MalformedEncodingError(f"{name}: leading zero bytes")


def _check_canonical_authorizations(value: Any) -> None:
    if isinstance(value, bytes):
        return
    for index, item in enumerate(value):
        if isinstance(item, bytes):
            continue
        for position, part in enumerate(item):
            if position != 1:
                _check_canonical_uint(f"authorization_list[{index}]", part)


def _deserialize_to(name: str, cls: Any, value: Any) -> Any:
    if isinstance(cls, type) and issubclass(cls, Unsigned):
        _check_canonical_uint(name, value)
    elif name == "authorization_list":
        _check_canonical_authorizations(value)
    try:
        return rlp.deserialize_to(cls, value)
    except DecodingError as e:
        raise MalformedEncodingError(f"cannot decode field `{name}`") from e


def _split_type(data: Bytes) -> Tuple[TransactionType, Bytes]:
    if len(data) == 0:
        raise MalformedEncodingError("empty transaction")
    if data[0] >= 0xC0:
        return TransactionType.LEGACY, data
    try:
        tx_type = TransactionType(data[0])
    except ValueError:
        raise MalformedEncodingError(
            f"unknown transaction type byte {data[0]:#04x}"
        ) from None
    if tx_type == TransactionType.LEGACY:
        raise MalformedEncodingError("legacy transactions have no type byte")
    return tx_type, data[1:]


def _decode_legacy_signature(
    values: Dict[str, Any], items: Sequence[Any]
) -> None:
    v = _deserialize_to("v", Uint, items[0])
    r = _deserialize_to("r", U256, items[1])
    s = _deserialize_to("s", U256, items[2])

    if r == 0 and s == 0:
        # Unsigned EIP-155 form: `v` holds the chain id.
        try:
            values["chain_id"] = U64(v)
        except OverflowError:
            raise MalformedEncodingError("chain id is out of range") from None
        return

    try:
        chain_id, y_parity = decode_legacy_v(v)
    except InvalidFieldValueError as e:
        raise MalformedEncodingError(str(e)) from e
    if chain_id is not None:
        values["chain_id"] = chain_id
    values.update(y_parity=y_parity, r=r, s=s)


def decode_transaction(
    data: Bytes,
) -> Tuple[TransactionType, Dict[str, Any]]:
    """
    Deserialize a transaction.

    Parameters
    ----------
    data :
        The encoded transaction, signed or unsigned.

    Returns
    -------
    tx_type : `TransactionType`
        The type, selected by the leading type byte.
    raw : `Dict[str, Any]`
        The decoded fields, with legacy `v` already split into `chain_id`
        and `y_parity`.
    """
    tx_type, payload = _split_type(bytes(data))

    try:
        decoded = rlp.decode(payload)
    except (DecodingError, IndexError) as e:
        raise MalformedEncodingError("invalid RLP") from e
    if isinstance(decoded, bytes):
        raise MalformedEncodingError("expected a list of fields")
    if rlp.encode(decoded) != payload:
        raise MalformedEncodingError("trailing or non-canonical data")

    names = UNSIGNED_FIELDS[tx_type]
    if len(decoded) not in (len(names), len(names) + 3):
        raise MalformedEncodingError(
            f"{tx_type.label} transaction needs {len(names)} or "
            f"{len(names) + 3} fields, but got {len(decoded)}"
        )

    values: Dict[str, Any] = {
        name: _deserialize_to(name, field_type(tx_type, name), item)
        for name, item in zip(names, decoded)
    }
    signature = decoded[len(names) :]
    if signature and tx_type == TransactionType.LEGACY:
        _decode_legacy_signature(values, signature)
    elif signature:
        for name, item in zip(SIGNATURE_FIELDS, signature):
            values[name] = _deserialize_to(name, FIELD_TYPES[name], item)

    logger.debug(
        "decoded %s transaction (%d fields)", tx_type.label, len(decoded)
    )
    return tx_type, values


