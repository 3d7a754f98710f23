"""
Transactions are atomic units of work created externally to Ethereum and
submitted to be executed. If Ethereum is viewed as a state machine,
transactions are the events that move between states.

A `Transaction` pairs a `TransactionType` with the record holding that
type's fields. It can't be modified: signing, dropping the signature or
adjusting the amount all return a new `Transaction`.
"""

import logging
from typing import Any, Dict, Mapping, NamedTuple, Optional, Tuple

from eth_utils import to_checksum_address
from ethereum_types.bytes import Bytes
from ethereum_types.numeric import U256, Uint

from .codec import decode_transaction, encode_transaction
from .crypto.elliptic_curve import (
    SECP256K1N,
    PrivateKeyLike,
    compress_public_key,
    public_key_to_address,
    secp256k1_recover,
    secp256k1_sign,
    secp256k1_verify,
)
from .defaults import DEFAULTS, TransactionDefaults, default_fields
from .exceptions import (
    AlreadySignedError,
    InvalidAmountError,
    InvalidFieldValueError,
    InvalidSignatureError,
    MalformedEncodingError,
    MissingFieldError,
    NotSignedError,
)
from .fields import (
    SIGNATURE_FIELDS,
    TransactionRecord,
    TransactionType,
    coerce_uint,
    encode_legacy_v,
    record_to_dict,
    validate_fields,
)
from .fork_types import Address
from .signing import signing_hash, transaction_hash
from .utils.hexadecimal import bytes_to_hex, hex_to_bytes

logger = logging.getLogger(__name__)

GAS_PRICE_TYPES = frozenset(
    (TransactionType.LEGACY, TransactionType.ACCESS_LIST)
)
"""
Types that pay a flat `gas_price` rather than [EIP-1559] fees.

[EIP-1559]: https://eips.ethereum.org/EIPS/eip-1559
"""


class RecoveredSender(NamedTuple):
    """
    Result of `Transaction.recover_sender`.
    """

    public_key: Bytes
    """
    The sender's compressed (33 byte) public key.
    """

    address: Address
    """
    The sender's address.
    """


class Transaction:
    """
    A transaction of a given type.

    Parameters
    ----------
    tx_type :
        The type, as a `TransactionType`, its number, or its name
        (`"legacy"`, `"eip2930"`, `"eip1559"`, `"eip4844"`, `"eip7702"`).
    raw :
        Mapping of field name to value, or a record of `tx_type`.
    strict :
        Require a complete, consistent transaction. Leave on for user input.
    allow_signature_fields :
        Whether `raw` may carry a signature.
    """

    tx_type: TransactionType
    raw: TransactionRecord
    is_signed: bool

    def __init__(
        self,
        tx_type: Any,
        raw: Any,
        strict: bool = True,
        allow_signature_fields: bool = True,
    ) -> None:
        self.tx_type = TransactionType.from_name(tx_type)
        self.raw = validate_fields(
            self.tx_type, raw, strict, allow_signature_fields
        )
        self.is_signed = self.raw.r is not None and self.raw.s is not None

    @classmethod
    def prepare(
        cls,
        data: Mapping[str, Any],
        strict: bool = True,
        defaults: TransactionDefaults = DEFAULTS,
    ) -> "Transaction":
        """
        Build an unsigned transaction from partial input, filling the fields
        the caller left out from `defaults`.

        The type is `data["type"]` if given, `defaults.type` otherwise.
        Fields supplied by the caller win over defaults; passing `None`
        removes a default (a legacy transaction with `chain_id=None` is not
        replay protected). Signature fields are rejected.
        """
        requested = data.get("type")
        if requested is None:
            requested = defaults.type
        tx_type = TransactionType.from_name(requested)

        raw = default_fields(tx_type, defaults)
        raw.update((k, v) for k, v in data.items() if k != "type")
        return cls(tx_type, raw, strict=strict, allow_signature_fields=False)

    @classmethod
    def from_bytes(cls, data: Bytes, strict: bool = False) -> "Transaction":
        """
        Decode a serialized transaction, signed or unsigned.
        """
        tx_type, raw = decode_transaction(data)
        return cls(tx_type, raw, strict=strict)

    @classmethod
    def from_hex(cls, hex_string: str, strict: bool = False) -> "Transaction":
        """
        Decode a hex serialized transaction, with or without `0x` prefix.
        """
        try:
            data = hex_to_bytes(hex_string)
        except ValueError as e:
            raise MalformedEncodingError("invalid hex string") from e
        return cls.from_bytes(data, strict=strict)

    def _assert_signed(self) -> Tuple[U256, U256]:
        r, s = self.raw.r, self.raw.s
        if r is None or s is None:
            raise NotSignedError()
        return r, s

    def to_bytes(self, include_signature: Optional[bool] = None) -> Bytes:
        """
        Serialize the transaction. The signature is included by default iff
        the transaction is signed.
        """
        if include_signature is None:
            include_signature = self.is_signed
        return encode_transaction(self.tx_type, self.raw, include_signature)

    def to_hex(self, include_signature: Optional[bool] = None) -> str:
        """
        Serialize the transaction as a `0x` prefixed hex string.
        """
        return bytes_to_hex(self.to_bytes(include_signature))

    def to_dict(self) -> Dict[str, Any]:
        """
        The type label followed by the present fields.
        """
        return {"type": self.tx_type.label, **record_to_dict(self.raw)}

    @property
    def hash(self) -> str:
        """
        Keccak-256 hash of the signed transaction, as shown by block
        explorers.
        """
        self._assert_signed()
        return bytes_to_hex(transaction_hash(self.tx_type, self.raw))

    @property
    def sender(self) -> str:
        """
        Checksummed address of the signer.
        """
        return to_checksum_address(self.recover_sender().address)

    @property
    def v(self) -> Optional[U256]:
        """
        The legacy `v` value, or `y_parity` for typed transactions. `None`
        while unsigned.
        """
        if not self.is_signed:
            return None
        if self.tx_type == TransactionType.LEGACY:
            return encode_legacy_v(self.raw.chain_id, self.raw.y_parity)
        return U256(self.raw.y_parity)

    @property
    def fee(self) -> Uint:
        """
        The most, in wei, this transaction can spend on gas.

        Fee market transactions are charged the block's base fee plus their
        priority fee, capped at `max_fee_per_gas`. The base fee is unknown
        until the transaction is included, so the cap is used.
        """
        if self.tx_type in GAS_PRICE_TYPES:
            name = "gas_price"
        else:
            name = "max_fee_per_gas"
        per_gas = getattr(self.raw, name)
        if per_gas is None:
            raise MissingFieldError(name)
        if self.raw.gas_limit is None:
            raise MissingFieldError("gas_limit")
        return self.raw.gas_limit * per_gas

    def set_whole_amount(
        self, account_balance: Any, burn_remaining: bool = True
    ) -> "Transaction":
        """
        Create a transaction that sends the whole account balance:
        `value = account_balance - fee`.

        The part of the fee above the block's base fee is normally returned
        to the sender, which would leave dust in the account. With
        `burn_remaining`, fee market transactions set
        `max_priority_fee_per_gas = max_fee_per_gas` so the entire fee is
        spent and the balance ends at zero.

        Sending an account's exact balance singles a transfer out, as
        payments usually have round amounts.

        Parameters
        ----------
        account_balance :
            Balance of the sender in wei.
        burn_remaining :
            Give the unspent part of the fee to the block producer.

        Returns
        -------
        transaction : `Transaction`
            A new, unsigned transaction with the adjusted amounts.
        """
        try:
            balance = int(
                coerce_uint("account_balance", account_balance, U256)
            )
        except InvalidFieldValueError as e:
            raise InvalidAmountError(str(e)) from None
        if balance <= 0:
            raise InvalidAmountError("account balance must be bigger than 0")
        fee = int(self.fee)
        if balance <= fee:
            raise InvalidAmountError(
                f"account balance must be bigger than fee of {fee}"
            )

        raw = record_to_dict(self.remove_signature().raw)
        raw["value"] = balance - fee
        if self.tx_type not in GAS_PRICE_TYPES and burn_remaining:
            raw["max_priority_fee_per_gas"] = raw["max_fee_per_gas"]
        return Transaction(self.tx_type, raw)

    def clone(self) -> "Transaction":
        """
        A transaction equal to this one.
        """
        return Transaction(self.tx_type, self.raw, strict=False)

    def remove_signature(self) -> "Transaction":
        """
        The unsigned transaction this one was made from.
        """
        raw = record_to_dict(self.raw)
        for name in SIGNATURE_FIELDS:
            raw.pop(name, None)
        return Transaction(self.tx_type, raw, strict=False)

    def sign_by(
        self, private_key: PrivateKeyLike, extra_entropy: bool = False
    ) -> "Transaction":
        """
        Sign the transaction.

        Parameters
        ----------
        private_key :
            Key as a hex string (with or without `0x`) or 32 bytes.
        extra_entropy :
            Randomise the signature nonce instead of deriving it from the key
            and message ([RFC 6979]).

        Returns
        -------
        transaction : `Transaction`
            A new transaction with `y_parity`, `r` and `s` set.

        [RFC 6979]: https://datatracker.ietf.org/doc/html/rfc6979
        """
        if self.is_signed:
            raise AlreadySignedError()

        msg_hash = signing_hash(self.tx_type, self.raw)
        r, s, y_parity = secp256k1_sign(msg_hash, private_key, extra_entropy)

        raw = record_to_dict(self.raw)
        raw.update(y_parity=y_parity, r=r, s=s)
        logger.debug("signed %s transaction", self.tx_type.label)

        # Not user input, so completeness isn't re-checked.
        return Transaction(self.tx_type, raw, strict=False)

    def _recover_public_key(self) -> Bytes:
        r, s = self._assert_signed()
        if U256(0) >= r or r >= SECP256K1N:
            raise InvalidSignatureError("bad r")
        if U256(0) >= s or s > SECP256K1N // U256(2):
            raise InvalidSignatureError("bad s")

        return secp256k1_recover(
            r,
            s,
            U256(self.raw.y_parity),
            signing_hash(self.tx_type, self.raw),
        )

    def recover_sender(self) -> RecoveredSender:
        """
        Recover the public key and address that signed the transaction.

        Signatures with `s` in the upper half of the curve order are
        rejected, as consensus rules do since [EIP-2].

        [EIP-2]: https://eips.ethereum.org/EIPS/eip-2
        """
        public_key = self._recover_public_key()
        return RecoveredSender(
            public_key=compress_public_key(public_key),
            address=public_key_to_address(public_key),
        )

    def verify_signature(self) -> bool:
        """
        Check the signature against the recovered sender's public key.
        """
        r, s = self._assert_signed()
        try:
            public_key = self._recover_public_key()
        except InvalidSignatureError:
            return False
        return secp256k1_verify(
            r,
            s,
            public_key,
            signing_hash(self.tx_type, self.raw),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transaction):
            return NotImplemented
        return self.tx_type == other.tx_type and self.raw == other.raw

    def __repr__(self) -> str:
        return f"Transaction({self.tx_type.label!r}, {self.raw!r})"
