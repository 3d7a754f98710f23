"""
Error types raised while building, encoding and signing transactions.
"""

from typing import Final


class EthereumException(Exception):
    """
    Base class for all exceptions _expected_ to be thrown during normal
    operation.
    """


class InvalidTransaction(EthereumException):
    """
    Thrown when a transaction being processed is found to be invalid.
    """


class UnknownTransactionTypeError(InvalidTransaction):
    """
    Unknown [EIP-2718] transaction type.

    [EIP-2718]: https://eips.ethereum.org/EIPS/eip-2718
    """

    transaction_type: Final[object]
    """
    The type (name or number) that could not be resolved.
    """

    def __init__(self, transaction_type: object):
        super().__init__(f"unknown transaction type `{transaction_type}`")
        self.transaction_type = transaction_type


class InvalidFieldError(InvalidTransaction):
    """
    Base class for errors about a single transaction field.
    """

    field: Final[str]
    """
    Name of the offending field.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class MissingFieldError(InvalidFieldError):
    """
    A field required by the transaction type is absent.
    """

    def __init__(self, field: str, message: str = "field is required"):
        super().__init__(field, message)


class UnexpectedFieldError(InvalidFieldError):
    """
    A field is not part of the transaction type, or signature fields were
    supplied where none are allowed.
    """

    def __init__(self, field: str, message: str = "unexpected field"):
        super().__init__(field, message)


class InvalidFieldValueError(InvalidFieldError):
    """
    A field has the wrong type or is out of range.
    """


class MalformedEncodingError(InvalidTransaction):
    """
    The serialized transaction could not be decoded.
    """


class AlreadySignedError(InvalidTransaction):
    """
    Thrown when signing a transaction that already carries a signature.
    """

    def __init__(self) -> None:
        super().__init__("expected unsigned transaction")


class NotSignedError(InvalidTransaction):
    """
    Thrown when an operation needs a signature the transaction doesn't have.
    """

    def __init__(self) -> None:
        super().__init__("expected signed transaction")


class InvalidSignatureError(InvalidTransaction):
    """
    Thrown when a transaction or authorization has an invalid signature.
    """


class InvalidAmountError(InvalidTransaction):
    """
    Thrown when an account balance can't cover the transaction.
    """


class InvalidPrivateKeyError(EthereumException):
    """
    Thrown when a private key can't be parsed or is outside the curve order.
    """
