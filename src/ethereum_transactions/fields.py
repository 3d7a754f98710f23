"""
Transaction Fields
^^^^^^^^^^^^^^^^^^

.. contents:: Table of Contents
    :backlinks: none
    :local:

Introduction
------------

Every transaction type has a fixed, ordered set of fields. This module holds
one record class per type (the record *is* the schema: a field that doesn't
belong to a type has nowhere to be stored), and the validator that turns
loosely typed input into such a record.

Values are coerced into the `ethereum_types` used on the wire: integers from
`int`, any unsigned type, or `0x` hex strings; bytes from `bytes` or hex
strings. A value of `None` means the field is absent.
"""

from dataclasses import dataclass, fields, is_dataclass
from enum import IntEnum
from typing import (
    Any,
    Dict,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)

from ethereum_types.bytes import Bytes, Bytes0, Bytes32, FixedBytes
from ethereum_types.frozen import slotted_freezable
from ethereum_types.numeric import U8, U64, U256, Uint, Unsigned

from .crypto.elliptic_curve import SECP256K1N
from .exceptions import (
    InvalidFieldValueError,
    MissingFieldError,
    UnexpectedFieldError,
    UnknownTransactionTypeError,
)
from .fork_types import (
    VERSIONED_HASH_VERSION_KZG,
    Access,
    Address,
    Authorization,
    AuthorizationRequest,
    VersionedHash,
)
from .utils.hexadecimal import (
    has_hex_prefix,
    hex_to_bytes,
    hex_to_uint,
)


class TransactionType(IntEnum):
    """
    [EIP-2718] transaction types. The value is the discriminator byte that
    prefixes the encoding (legacy transactions have none).

    [EIP-2718]: https://eips.ethereum.org/EIPS/eip-2718
    """

    LEGACY = 0
    ACCESS_LIST = 1
    FEE_MARKET = 2
    BLOB = 3
    SET_CODE = 4

    @classmethod
    def from_name(cls, value: object) -> "TransactionType":
        """
        Resolve a type given as a member, a discriminator byte, or a name
        such as `"eip1559"`.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return TRANSACTION_TYPE_NAMES[value.lower()]
            except KeyError:
                raise UnknownTransactionTypeError(value) from None
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise UnknownTransactionTypeError(value) from None
        raise UnknownTransactionTypeError(value)

    @property
    def label(self) -> str:
        """
        Human readable name of the type, such as `"eip1559"`.
        """
        return _LABELS[self]


TRANSACTION_TYPE_NAMES: Dict[str, TransactionType] = {
    "legacy": TransactionType.LEGACY,
    "eip2930": TransactionType.ACCESS_LIST,
    "eip1559": TransactionType.FEE_MARKET,
    "eip4844": TransactionType.BLOB,
    "eip7702": TransactionType.SET_CODE,
}

_LABELS = {ty: name for name, ty in TRANSACTION_TYPE_NAMES.items()}


@slotted_freezable
@dataclass
class LegacyTransaction:
    """
    The original transaction format. The wire level `v` isn't stored: it is
    derived from `chain_id` (absent for transactions without [EIP-155]
    replay protection) and `y_parity`.

    [EIP-155]: https://eips.ethereum.org/EIPS/eip-155
    """

    nonce: Optional[U64]
    gas_price: Optional[Uint]
    gas_limit: Optional[Uint]
    to: Optional[Union[Bytes0, Address]]
    value: Optional[U256]
    data: Optional[Bytes]
    chain_id: Optional[U64]
    y_parity: Optional[U8]
    r: Optional[U256]
    s: Optional[U256]


@slotted_freezable
@dataclass
class AccessListTransaction:
    """
    The transaction type added in [EIP-2930] to support access lists.

    [EIP-2930]: https://eips.ethereum.org/EIPS/eip-2930
    """

    chain_id: Optional[U64]
    nonce: Optional[U64]
    gas_price: Optional[Uint]
    gas_limit: Optional[Uint]
    to: Optional[Union[Bytes0, Address]]
    value: Optional[U256]
    data: Optional[Bytes]
    access_list: Optional[Tuple[Access, ...]]
    y_parity: Optional[U8]
    r: Optional[U256]
    s: Optional[U256]


@slotted_freezable
@dataclass
class FeeMarketTransaction:
    """
    The transaction type added in [EIP-1559].

    [EIP-1559]: https://eips.ethereum.org/EIPS/eip-1559
    """

    chain_id: Optional[U64]
    nonce: Optional[U64]
    max_priority_fee_per_gas: Optional[Uint]
    max_fee_per_gas: Optional[Uint]
    gas_limit: Optional[Uint]
    to: Optional[Union[Bytes0, Address]]
    value: Optional[U256]
    data: Optional[Bytes]
    access_list: Optional[Tuple[Access, ...]]
    y_parity: Optional[U8]
    r: Optional[U256]
    s: Optional[U256]


@slotted_freezable
@dataclass
class BlobTransaction:
    """
    The transaction type added in [EIP-4844].

    [EIP-4844]: https://eips.ethereum.org/EIPS/eip-4844
    """

    chain_id: Optional[U64]
    nonce: Optional[U64]
    max_priority_fee_per_gas: Optional[Uint]
    max_fee_per_gas: Optional[Uint]
    gas_limit: Optional[Uint]
    to: Optional[Address]
    value: Optional[U256]
    data: Optional[Bytes]
    access_list: Optional[Tuple[Access, ...]]
    max_fee_per_blob_gas: Optional[U256]
    blob_versioned_hashes: Optional[Tuple[VersionedHash, ...]]
    y_parity: Optional[U8]
    r: Optional[U256]
    s: Optional[U256]


@slotted_freezable
@dataclass
class SetCodeTransaction:
    """
    The transaction type added in [EIP-7702].

    [EIP-7702]: https://eips.ethereum.org/EIPS/eip-7702
    """

    chain_id: Optional[U64]
    nonce: Optional[U64]
    max_priority_fee_per_gas: Optional[Uint]
    max_fee_per_gas: Optional[Uint]
    gas_limit: Optional[Uint]
    to: Optional[Address]
    value: Optional[U256]
    data: Optional[Bytes]
    access_list: Optional[Tuple[Access, ...]]
    authorization_list: Optional[Tuple[Authorization, ...]]
    y_parity: Optional[U8]
    r: Optional[U256]
    s: Optional[U256]


TransactionRecord = Union[
    LegacyTransaction,
    AccessListTransaction,
    FeeMarketTransaction,
    BlobTransaction,
    SetCodeTransaction,
]

RECORD_TYPES: Dict[TransactionType, Type[Any]] = {
    TransactionType.LEGACY: LegacyTransaction,
    TransactionType.ACCESS_LIST: AccessListTransaction,
    TransactionType.FEE_MARKET: FeeMarketTransaction,
    TransactionType.BLOB: BlobTransaction,
    TransactionType.SET_CODE: SetCodeTransaction,
}

_FEE_MARKET_FIELDS = (
    "chain_id",
    "nonce",
    "max_priority_fee_per_gas",
    "max_fee_per_gas",
    "gas_limit",
    "to",
    "value",
    "data",
    "access_list",
)

UNSIGNED_FIELDS: Dict[TransactionType, Tuple[str, ...]] = {
    TransactionType.LEGACY: (
        "nonce",
        "gas_price",
        "gas_limit",
        "to",
        "value",
        "data",
    ),
    TransactionType.ACCESS_LIST: (
        "chain_id",
        "nonce",
        "gas_price",
        "gas_limit",
        "to",
        "value",
        "data",
        "access_list",
    ),
    TransactionType.FEE_MARKET: _FEE_MARKET_FIELDS,
    TransactionType.BLOB: _FEE_MARKET_FIELDS
    + ("max_fee_per_blob_gas", "blob_versioned_hashes"),
    TransactionType.SET_CODE: _FEE_MARKET_FIELDS + ("authorization_list",),
}
"""
Fields covered by the signature, in wire order. Legacy transactions also
sign over `chain_id`, but it is optional and travels inside `v`.
"""

SIGNATURE_FIELDS = ("y_parity", "r", "s")

FIELD_TYPES: Dict[str, Any] = {
    "chain_id": U64,
    "nonce": U64,
    "gas_price": Uint,
    "gas_limit": Uint,
    "max_priority_fee_per_gas": Uint,
    "max_fee_per_gas": Uint,
    "to": Union[Bytes0, Address],
    "value": U256,
    "data": Bytes,
    "access_list": Tuple[Access, ...],
    "max_fee_per_blob_gas": U256,
    "blob_versioned_hashes": Tuple[VersionedHash, ...],
    "authorization_list": Tuple[Authorization, ...],
    "y_parity": U8,
    "r": U256,
    "s": U256,
}
"""
Wire type of every field, as understood by `ethereum_rlp`.
"""

CONTRACT_CREATION_TYPES = frozenset(
    (
        TransactionType.LEGACY,
        TransactionType.ACCESS_LIST,
        TransactionType.FEE_MARKET,
    )
)


def field_type(tx_type: TransactionType, name: str) -> Any:
    """
    Wire type of field `name` in transactions of type `tx_type`.
    """
    if name == "to" and tx_type not in CONTRACT_CREATION_TYPES:
        return Address
    return FIELD_TYPES[name]


def schema(tx_type: TransactionType) -> Tuple[str, ...]:
    """
    All fields a transaction of `tx_type` may hold, in record order.
    """
    return tuple(f.name for f in fields(RECORD_TYPES[tx_type]))


def required_fields(tx_type: TransactionType) -> Tuple[str, ...]:
    """
    Fields that must be present for a transaction of `tx_type` to be
    complete, signature excluded.
    """
    return UNSIGNED_FIELDS[tx_type]


def record_to_dict(record: Any) -> Dict[str, Any]:
    """
    The present (non `None`) fields of a record, in record order.
    """
    return {
        f.name: getattr(record, f.name)
        for f in fields(record)
        if getattr(record, f.name) is not None
    }


#
# Legacy replay protection
#


def encode_legacy_v(chain_id: Optional[U64], y_parity: U8) -> U256:
    """
    Combine the recovery id and (optional) [EIP-155] chain id into the
    legacy `v` value.

    [EIP-155]: https://eips.ethereum.org/EIPS/eip-155
    """
    if chain_id is None:
        return U256(27 + int(y_parity))
    return U256(35 + 2 * int(chain_id) + int(y_parity))


def decode_legacy_v(v: Union[int, Unsigned]) -> Tuple[Optional[U64], U8]:
    """
    Split a legacy `v` value into `(chain_id, y_parity)`. `chain_id` is
    `None` for `v` of 27 or 28 (no replay protection).

    Raises
    ------
    InvalidFieldValueError
        If `v` is neither 27, 28 nor `35 + 2 * chain_id + y_parity`.
    """
    number = int(v)
    if number in (27, 28):
        return None, U8(number - 27)
    if number < 35:
        raise InvalidFieldValueError("v", f"invalid legacy v value {number}")
    chain_id, y_parity = divmod(number - 35, 2)
    try:
        return U64(chain_id), U8(y_parity)
    except OverflowError:
        raise InvalidFieldValueError(
            "v", f"chain id {chain_id} is out of range"
        ) from None


#
# Coercion
#


def coerce_uint(name: str, value: Any, cls: Type[Any]) -> Any:
    """
    Coerce `value` into the unsigned integer type `cls`.
    """
    if isinstance(value, bool):
        raise InvalidFieldValueError(name, "expected an integer, got bool")
    if isinstance(value, (int, Unsigned)):
        number = int(value)
    elif isinstance(value, str):
        if not has_hex_prefix(value):
            raise InvalidFieldValueError(
                name, f"expected a 0x-prefixed hex string, got {value!r}"
            )
        try:
            number = int(hex_to_uint(value))
        except (ValueError, OverflowError):
            raise InvalidFieldValueError(
                name, f"invalid hex number {value!r}"
            ) from None
    else:
        raise InvalidFieldValueError(
            name, f"expected an integer, got {type(value).__name__}"
        )

    if number < 0:
        raise InvalidFieldValueError(name, "must not be negative")
    try:
        return cls(number)
    except OverflowError:
        raise InvalidFieldValueError(
            name, f"{number} is out of range for {cls.__name__}"
        ) from None


def coerce_bytes(name: str, value: Any) -> Bytes:
    """
    Coerce `value` into a byte string of any length.
    """
    if isinstance(value, (bytes, bytearray)):
        return Bytes(value)
    if isinstance(value, str):
        try:
            return hex_to_bytes(value)
        except ValueError:
            raise InvalidFieldValueError(
                name, f"invalid hex string {value!r}"
            ) from None
    raise InvalidFieldValueError(
        name, f"expected bytes, got {type(value).__name__}"
    )


def coerce_fixed_bytes(name: str, value: Any, cls: Type[Any]) -> Any:
    """
    Coerce `value` into the fixed size byte type `cls`.
    """
    if isinstance(value, cls):
        return value
    try:
        return cls(coerce_bytes(name, value))
    except ValueError:
        raise InvalidFieldValueError(
            name, f"expected exactly {cls.LENGTH} bytes"
        ) from None


def coerce_to(name: str, value: Any, allow_create: bool) -> Any:
    """
    Coerce a recipient. The empty byte string denotes contract creation.
    """
    raw = value if isinstance(value, FixedBytes) else coerce_bytes(name, value)
    if len(raw) == 0:
        if not allow_create:
            raise InvalidFieldValueError(
                name, "contract creation is not allowed for this type"
            )
        return Bytes0(b"")
    return coerce_fixed_bytes(name, raw, Address)


def _sequence(name: str, value: Any) -> Sequence[Any]:
    if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(
        value, Sequence
    ):
        raise InvalidFieldValueError(name, "expected a list")
    return value


def coerce_access_list(name: str, value: Any) -> Tuple[Access, ...]:
    """
    Coerce an [EIP-2930] access list. Entries may be `Access` records,
    `(address, storage_keys)` pairs, or mappings with `address` and
    `storage_keys` (or `storageKeys`) keys.

    [EIP-2930]: https://eips.ethereum.org/EIPS/eip-2930
    """
    entries = []
    for index, entry in enumerate(_sequence(name, value)):
        entry_name = f"{name}[{index}]"
        if isinstance(entry, Access):
            account, slots = entry.account, entry.slots
        elif isinstance(entry, Mapping):
            account = entry.get("address", entry.get("account"))
            slots = entry.get("storage_keys", entry.get("storageKeys", ()))
        elif isinstance(entry, Sequence) and len(entry) == 2:
            account, slots = entry
        else:
            raise InvalidFieldValueError(
                entry_name, "expected an (address, storage keys) pair"
            )
        if account is None:
            raise MissingFieldError(f"{entry_name}.address")
        keys_name = f"{entry_name}.storage_keys"
        entries.append(
            Access(
                account=coerce_fixed_bytes(
                    f"{entry_name}.address", account, Address
                ),
                slots=tuple(
                    coerce_fixed_bytes(keys_name, k, Bytes32)
                    for k in _sequence(keys_name, slots)
                ),
            )
        )
    return tuple(entries)


def _coerce_record(name: str, value: Any, cls: Type[Any]) -> Any:
    if isinstance(value, cls):
        return value
    if is_dataclass(value) and not isinstance(value, type):
        value = record_to_dict(value)
    if not isinstance(value, Mapping):
        raise InvalidFieldValueError(
            name, f"expected a mapping, got {type(value).__name__}"
        )
    names = [f.name for f in fields(cls)]
    for key in value:
        if key not in names:
            raise UnexpectedFieldError(f"{name}.{key}")
    kwargs = {}
    for f in fields(cls):
        if value.get(f.name) is None:
            raise MissingFieldError(f"{name}.{f.name}")
        if f.name == "address":
            kwargs[f.name] = coerce_fixed_bytes(
                f"{name}.address", value[f.name], Address
            )
        else:
            kwargs[f.name] = coerce_uint(
                f"{name}.{f.name}", value[f.name], f.type
            )
    return cls(**kwargs)


def coerce_authorization_request(
    value: Any, name: str = "authorization"
) -> AuthorizationRequest:
    """
    Coerce a mapping (or record) into an `AuthorizationRequest`.
    """
    return _coerce_record(name, value, AuthorizationRequest)


def coerce_authorization(
    value: Any, name: str = "authorization"
) -> Authorization:
    """
    Coerce a mapping (or record) into a signed `Authorization`.
    """
    return _coerce_record(name, value, Authorization)


def coerce_field(tx_type: TransactionType, name: str, value: Any) -> Any:
    """
    Coerce `value` into the wire type of field `name`.
    """
    if name == "to":
        return coerce_to(name, value, tx_type in CONTRACT_CREATION_TYPES)
    if name == "data":
        return coerce_bytes(name, value)
    if name == "access_list":
        return coerce_access_list(name, value)
    if name == "blob_versioned_hashes":
        return tuple(
            coerce_fixed_bytes(f"{name}[{i}]", h, Bytes32)
            for i, h in enumerate(_sequence(name, value))
        )
    if name == "authorization_list":
        return tuple(
            coerce_authorization(item, f"{name}[{i}]")
            for i, item in enumerate(_sequence(name, value))
        )
    return coerce_uint(name, value, FIELD_TYPES[name])


#
# Validation
#


def _input_values(raw: Any) -> Dict[str, Any]:
    if is_dataclass(raw) and not isinstance(raw, type):
        return record_to_dict(raw)
    if isinstance(raw, Mapping):
        return {k: v for k, v in raw.items() if v is not None}
    raise InvalidFieldValueError(
        "raw", f"expected a mapping, got {type(raw).__name__}"
    )


def _split_legacy_v(values: Dict[str, Any]) -> None:
    v = coerce_uint("v", values.pop("v"), U256)
    if "y_parity" in values:
        raise UnexpectedFieldError("v", "can't be combined with y_parity")
    chain_id, y_parity = decode_legacy_v(v)
    if "chain_id" in values:
        given = coerce_uint("chain_id", values["chain_id"], U64)
        if given != chain_id:
            raise InvalidFieldValueError("v", "doesn't match chain_id")
    if chain_id is not None:
        values["chain_id"] = chain_id
    values["y_parity"] = y_parity


def _check_signature(values: Dict[str, Any], strict: bool) -> None:
    has_r, has_s = "r" in values, "s" in values
    if has_r != has_s:
        raise MissingFieldError("s" if has_r else "r")
    if has_r and "y_parity" not in values:
        raise MissingFieldError("y_parity")
    if not has_r and "y_parity" in values:
        raise UnexpectedFieldError("y_parity", "signature is incomplete")
    if "y_parity" in values and values["y_parity"] not in (0, 1):
        raise InvalidFieldValueError("y_parity", "must be 0 or 1")
    if strict and has_r:
        n = int(SECP256K1N)
        for name in ("r", "s"):
            if not 0 < int(values[name]) < n:
                raise InvalidFieldValueError(name, "out of range")


def _check_complete(tx_type: TransactionType, values: Dict[str, Any]) -> None:
    for name in required_fields(tx_type):
        if name not in values:
            raise MissingFieldError(name)

    if "max_fee_per_gas" in values:
        if int(values["max_priority_fee_per_gas"]) > int(
            values["max_fee_per_gas"]
        ):
            raise InvalidFieldValueError(
                "max_priority_fee_per_gas", "exceeds max_fee_per_gas"
            )

    if tx_type == TransactionType.BLOB:
        hashes = values["blob_versioned_hashes"]
        if not hashes:
            raise InvalidFieldValueError(
                "blob_versioned_hashes", "at least one blob is required"
            )
        for index, versioned_hash in enumerate(hashes):
            if versioned_hash[:1] != VERSIONED_HASH_VERSION_KZG:
                raise InvalidFieldValueError(
                    f"blob_versioned_hashes[{index}]", "invalid version byte"
                )


def validate_fields(
    tx_type: Any,
    raw: Any,
    strict: bool = True,
    allow_signature_fields: bool = True,
) -> TransactionRecord:
    """
    Check `raw` against the schema of `tx_type` and build its record.

    Unknown fields are always rejected. In `strict` mode, which is meant for
    user input, every required field must be present and cross-field rules
    apply (priority fee not above max fee, blob hashes well formed, signature
    scalars in range). Outside `strict` mode only the fields present are
    checked, which suits records this package produced itself.

    Parameters
    ----------
    tx_type :
        The transaction type, see `TransactionType.from_name`.
    raw :
        Mapping of field name to value, or a record.
    strict :
        Whether to require a complete transaction.
    allow_signature_fields :
        Whether `y_parity`, `r`, `s` (and legacy `v`) may be present.

    Returns
    -------
    record : `TransactionRecord`
        The record of `tx_type` holding the coerced values.
    """
    tx_type = TransactionType.from_name(tx_type)
    values = _input_values(raw)

    if "type" in values:
        if TransactionType.from_name(values.pop("type")) != tx_type:
            raise UnexpectedFieldError("type", f"expected {tx_type.label}")

    if not allow_signature_fields:
        for name in SIGNATURE_FIELDS + ("v",):
            if name in values:
                raise UnexpectedFieldError(
                    name, "signature fields are not allowed"
                )

    if tx_type == TransactionType.LEGACY and "v" in values:
        _split_legacy_v(values)

    names = schema(tx_type)
    for name in values:
        if name not in names:
            raise UnexpectedFieldError(
                name, f"not a field of {tx_type.label} transactions"
            )

    coerced = {
        name: coerce_field(tx_type, name, value)
        for name, value in values.items()
    }

    if "gas_limit" in coerced and coerced["gas_limit"] == 0:
        raise InvalidFieldValueError("gas_limit", "must be positive")
    _check_signature(coerced, strict)
    if strict:
        _check_complete(tx_type, coerced)

    return RECORD_TYPES[tx_type](**{name: coerced.get(name) for name in names})
