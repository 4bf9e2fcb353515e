"""
Cached reserve view of the pair.

Reserves are the balances the pool last observed itself holding. They drive
pricing and the swap invariant, and lag the true ledger balances until the
next resynchronization. Reserves are stored in a 112-bit unsigned range; a
balance that does not fit raises `ReserveOverflow` instead of wrapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..errors import ReserveOverflow
from .balances import Amount


RESERVE_BITS = 112
MAX_RESERVE = (1 << RESERVE_BITS) - 1


def check_reserve(name: str, value: Amount) -> Amount:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    if value > MAX_RESERVE:
        raise ReserveOverflow(f"{name} {value} exceeds the {RESERVE_BITS}-bit reserve range")
    return value


@dataclass(frozen=True)
class ReserveState:
    reserve0: Amount = 0
    reserve1: Amount = 0

    def __post_init__(self) -> None:
        check_reserve("reserve0", self.reserve0)
        check_reserve("reserve1", self.reserve1)

    @classmethod
    def synced(cls, balance0: Amount, balance1: Amount) -> "ReserveState":
        """Reserve state matching the given true balances."""
        return cls(reserve0=balance0, reserve1=balance1)

    def as_tuple(self) -> Tuple[Amount, Amount]:
        return self.reserve0, self.reserve1

    @property
    def k(self) -> int:
        return self.reserve0 * self.reserve1
