"""
Utility Functions For Ether Denominations
^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^

Amounts are carried as integer wei everywhere in this package. These helpers
convert human readable decimal strings in gwei or ether to and from wei.
"""
from decimal import Decimal
from typing import Union

from eth_utils import from_wei, to_wei
from ethereum_types.numeric import U256, Uint

GWEI = Uint(10**9)

AmountLike = Union[str, int, Decimal]


def _parse(amount: AmountLike, unit: str) -> U256:
    try:
        return U256(to_wei(Decimal(amount), unit))
    except ArithmeticError as e:
        raise ValueError(f"invalid {unit} amount {amount!r}") from e


def _format(amount: Union[int, Uint, U256], unit: str) -> str:
    value = from_wei(int(amount), unit)
    if isinstance(value, Decimal):
        value = value.normalize()
        return f"{value:f}"
    return str(value)


def parse_gwei(amount: AmountLike) -> U256:
    """
    Convert a gwei amount such as `"1.5"` to wei.
    """
    return _parse(amount, "gwei")


def format_gwei(amount: Union[int, Uint, U256]) -> str:
    """
    Render a wei amount in gwei without trailing zeros.
    """
    return _format(amount, "gwei")


def parse_ether(amount: AmountLike) -> U256:
    """
    Convert an ether amount such as `"0.01"` to wei.
    """
    return _parse(amount, "ether")


def format_ether(amount: Union[int, Uint, U256]) -> str:
    """
    Render a wei amount in ether without trailing zeros.
    """
    return _format(amount, "ether")
