"""
Swap and reserve-maintenance operations.

`exchange` follows the optimistic pattern: outputs leave the pool first, then
the inputs are inferred from the balances left behind and checked against the
fee-adjusted constant product. This is only safe because the enclosing
`Pool._operation()` undoes the payout if the check fails.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Tuple

from ..errors import (
    InsufficientLiquidity,
    InvalidAmount,
    InvalidRecipient,
    InvariantViolated,
    NoInputProvided,
    NoOutputRequested,
)
from ..events import Swapped
from ..state.balances import Amount, Holder, require_amount
from .math import effective_inputs, fee_adjusted_product, required_product, satisfies_invariant

if TYPE_CHECKING:
    from .pool import Pool


def exchange(
    pool: "Pool",
    amount0_out: Amount,
    amount1_out: Amount,
    recipient: Holder,
    *,
    sender: Holder,
    callback: Optional[Callable[[Holder, Amount, Amount], None]] = None,
) -> Tuple[Amount, Amount]:
    """
    Pay `amount0_out` / `amount1_out` to `recipient` against inputs already in the pool.

    Returns the inferred (amount0_in, amount1_in).

    Raises:
        NoOutputRequested: If both outputs are zero
        InsufficientLiquidity: If an output is >= its reserve
        InvalidRecipient: If the recipient is one of the pair's asset identifiers
        NoInputProvided: If nothing was paid in
        InvariantViolated: If the fee-adjusted product would decrease
    """
    require_amount("amount0_out", amount0_out)
    require_amount("amount1_out", amount1_out)
    if amount0_out < 0 or amount1_out < 0:
        raise InvalidAmount(f"Output amounts must be non-negative: ({amount0_out}, {amount1_out})")
    if amount0_out == 0 and amount1_out == 0:
        raise NoOutputRequested("Swap must request a positive output")

    reserve0, reserve1 = pool.get_reserves()
    if amount0_out >= reserve0 or amount1_out >= reserve1:
        raise InsufficientLiquidity(
            f"Requested ({amount0_out}, {amount1_out}) against reserves ({reserve0}, {reserve1})"
        )
    if recipient in (pool.asset0, pool.asset1):
        raise InvalidRecipient(f"Recipient must not be a pair asset: {recipient!r}")

    if amount0_out > 0:
        pool.ledger.transfer(pool.asset0, pool.address, recipient, amount0_out)
    if amount1_out > 0:
        pool.ledger.transfer(pool.asset1, pool.address, recipient, amount1_out)
    if callback is not None:
        callback(sender, amount0_out, amount1_out)

    balance0, balance1 = pool.balances()
    amount0_in, amount1_in = effective_inputs(
        balance0, balance1, reserve0, reserve1, amount0_out, amount1_out
    )
    if amount0_in == 0 and amount1_in == 0:
        raise NoInputProvided("No input reached the pool")

    if not satisfies_invariant(balance0, balance1, amount0_in, amount1_in, reserve0, reserve1):
        after = fee_adjusted_product(balance0, balance1, amount0_in, amount1_in)
        raise InvariantViolated(f"Fee-adjusted product {after} < required {required_product(reserve0, reserve1)}")

    pool.resync(balance0, balance1)
    pool.emit(
        Swapped(
            sender=sender,
            amount0_in=amount0_in,
            amount1_in=amount1_in,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
            recipient=recipient,
        )
    )
    return amount0_in, amount1_in


def skim(pool: "Pool", to: Holder) -> Tuple[Amount, Amount]:
    """Send any balance above the cached reserves to `to`. Reserves are unchanged."""
    reserve0, reserve1 = pool.get_reserves()
    balance0, balance1 = pool.balances()
    excess0 = max(balance0 - reserve0, 0)
    excess1 = max(balance1 - reserve1, 0)
    if excess0 > 0:
        pool.ledger.transfer(pool.asset0, pool.address, to, excess0)
    if excess1 > 0:
        pool.ledger.transfer(pool.asset1, pool.address, to, excess1)
    return excess0, excess1


def sync(pool: "Pool") -> Tuple[Amount, Amount]:
    """Force the cached reserves to match the true balances."""
    balance0, balance1 = pool.balances()
    pool.resync(balance0, balance1)
    return balance0, balance1
