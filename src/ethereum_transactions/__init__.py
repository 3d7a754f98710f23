"""
Ethereum Transactions
^^^^^^^^^^^^^^^^^^^^^
Build, validate, serialize, sign and verify Ethereum transactions.

Five transaction types are supported: legacy transactions (with or without
[EIP-155] replay protection), [EIP-2930] access list transactions,
[EIP-1559] fee market transactions, [EIP-4844] blob transactions and
[EIP-7702] set code transactions, along with the [EIP-7702] authorizations
the latter carry.

[EIP-155]: https://eips.ethereum.org/EIPS/eip-155
[EIP-2930]: https://eips.ethereum.org/EIPS/eip-2930
[EIP-1559]: https://eips.ethereum.org/EIPS/eip-1559
[EIP-4844]: https://eips.ethereum.org/EIPS/eip-4844
[EIP-7702]: https://eips.ethereum.org/EIPS/eip-7702
"""

from .authorization import (
    authorization_hash,
    recover_authority,
    sign_authorization,
)
from .crypto.elliptic_curve import private_key_to_address
from .defaults import DEFAULTS, TransactionDefaults
from .exceptions import (
    AlreadySignedError,
    EthereumException,
    InvalidAmountError,
    InvalidFieldError,
    InvalidFieldValueError,
    InvalidPrivateKeyError,
    InvalidSignatureError,
    InvalidTransaction,
    MalformedEncodingError,
    MissingFieldError,
    NotSignedError,
    UnexpectedFieldError,
    UnknownTransactionTypeError,
)
from .fields import TransactionType, validate_fields
from .fork_types import Access, Authorization, AuthorizationRequest
from .transactions import RecoveredSender, Transaction
from .utils.units import format_ether, format_gwei, parse_ether, parse_gwei

__version__ = "0.1.0"

__all__ = (
    "DEFAULTS",
    "Access",
    "AlreadySignedError",
    "Authorization",
    "AuthorizationRequest",
    "EthereumException",
    "InvalidAmountError",
    "InvalidFieldError",
    "InvalidFieldValueError",
    "InvalidPrivateKeyError",
    "InvalidSignatureError",
    "InvalidTransaction",
    "MalformedEncodingError",
    "MissingFieldError",
    "NotSignedError",
    "RecoveredSender",
    "Transaction",
    "TransactionDefaults",
    "TransactionType",
    "UnexpectedFieldError",
    "UnknownTransactionTypeError",
    "authorization_hash",
    "format_ether",
    "format_gwei",
    "parse_ether",
    "parse_gwei",
    "private_key_to_address",
    "recover_authority",
    "sign_authorization",
    "validate_fields",
)
