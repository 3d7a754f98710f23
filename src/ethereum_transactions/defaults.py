"""
Default values used when preparing a transaction from partial input.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Tuple

from .fields import TransactionType, schema
from .utils.units import GWEI


@dataclass(frozen=True)
class TransactionDefaults:
    """
    Values filled into fields the caller left out. A default only applies to
    transaction types whose schema has the field.

    Only four fields are left to the caller: `to`, `value`, `nonce` and the
    fee (`gas_price` or `max_fee_per_gas`).

    Sequence defaults are tuples, so a prepared transaction never shares a
    mutable list with this record or with another transaction.
    """

    type: str = "eip1559"
    chain_id: int = 1
    data: bytes = b""
    gas_limit: int = 21_000
    max_priority_fee_per_gas: int = int(GWEI)
    access_list: Tuple[Any, ...] = ()
    authorization_list: Tuple[Any, ...] = ()


DEFAULTS = TransactionDefaults()


def default_fields(
    tx_type: TransactionType, defaults: TransactionDefaults = DEFAULTS
) -> Dict[str, Any]:
    """
    The defaults that apply to `tx_type`, as a fresh mapping.
    """
    names = schema(tx_type)
    result: Dict[str, Any] = {}
    for f in fields(defaults):
        if f.name == "type" or f.name not in names:
            continue
        result[f.name] = getattr(defaults, f.name)
    return result
