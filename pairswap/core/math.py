"""
Constant-product pair math.

This module implements the integer arithmetic behind deposits, withdrawals and
swaps. Every rule here is value-critical: a rounding slip is a transfer of
value between participants.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding (always floor
  in the pool's favour)
- Time Complexity: O(1) per call
- Invariant: After each swap,
  (b0*1000 - in0*3) * (b1*1000 - in1*3) >= r0 * r1 * 1000**2
  i.e. the constant product net of the 0.3% input fee never decreases.
"""

import math
from typing import Tuple

from ..errors import InsufficientLiquidity, InsufficientShares, InvalidAmount
from ..state.balances import Amount, require_amount

# 0.3% fee on swap inputs, expressed as an integer ratio.
FEE_NUMERATOR = 3
FEE_DENOMINATOR = 1000


def initial_shares(amount0: Amount, amount1: Amount) -> Amount:
    """
    Shares minted by the first deposit into an empty pool.

        shares = floor(sqrt(amount0 * amount1))

    Uses `math.isqrt`: a float sqrt loses precision well before 112-bit inputs.
    """
    if amount0 < 0 or amount1 < 0:
        raise InvalidAmount(f"Deposit amounts must be non-negative: ({amount0}, {amount1})")
    return math.isqrt(amount0 * amount1)


def proportional_shares(
    amount0: Amount,
    amount1: Amount,
    reserve0: Amount,
    reserve1: Amount,
    total_shares: Amount,
) -> Amount:
    """
    Shares minted by a deposit into a non-empty pool.

        shares = min(floor(amount0 * total / reserve0), floor(amount1 * total / reserve1))

    The minimum prices the deposit at the worse of the two implied ratios; the
    non-proportional remainder stays in the pool for existing holders.
    """
    if reserve0 <= 0 or reserve1 <= 0:
        raise InsufficientLiquidity(
            f"Cannot price a deposit against empty reserves: ({reserve0}, {reserve1})"
        )
    if total_shares <= 0:
        raise InsufficientShares(f"Share supply must be positive: {total_shares}")
    share0 = (amount0 * total_shares) // reserve0
    share1 = (amount1 * total_shares) // reserve1
    return min(share0, share1)


def compute_deposit_shares(
    amount0: Amount,
    amount1: Amount,
    reserve0: Amount,
    reserve1: Amount,
    total_shares: Amount,
) -> Amount:
    if total_shares == 0:
        return initial_shares(amount0, amount1)
    return proportional_shares(amount0, amount1, reserve0, reserve1, total_shares)


def compute_redemption(
    shares: Amount,
    balance0: Amount,
    balance1: Amount,
    total_shares: Amount,
) -> Tuple[Amount, Amount]:
    """
    Assets returned for burning `shares`, priced against the pool's true balances.

        amount_i = floor(shares * balance_i / total_shares)
    """
    if total_shares <= 0:
        raise InsufficientShares("No shares outstanding; nothing to redeem")
    if shares < 0:
        raise InvalidAmount(f"Share amount must be non-negative: {shares}")
    amount0 = (shares * balance0) // total_shares
    amount1 = (shares * balance1) // total_shares
    return amount0, amount1


def effective_inputs(
    balance0: Amount,
    balance1: Amount,
    reserve0: Amount,
    reserve1: Amount,
    amount0_out: Amount,
    amount1_out: Amount,
) -> Tuple[Amount, Amount]:
    """
    Infer what a swapper actually paid in.

    After the optimistic payout the pool should hold `reserve - out`; anything
    above that was deposited by the caller.
    """
    floor0 = reserve0 - amount0_out
    floor1 = reserve1 - amount1_out
    amount0_in = balance0 - floor0 if balance0 > floor0 else 0
    amount1_in = balance1 - floor1 if balance1 > floor1 else 0
    return amount0_in, amount1_in


def fee_adjusted_product(
    balance0: Amount,
    balance1: Amount,
    amount0_in: Amount,
    amount1_in: Amount,
) -> int:
    adjusted0 = balance0 * FEE_DENOMINATOR - amount0_in * FEE_NUMERATOR
    adjusted1 = balance1 * FEE_DENOMINATOR - amount1_in * FEE_NUMERATOR
    return adjusted0 * adjusted1


def required_product(reserve0: Amount, reserve1: Amount) -> int:
    return reserve0 * reserve1 * FEE_DENOMINATOR * FEE_DENOMINATOR


def satisfies_invariant(
    balance0: Amount,
    balance1: Amount,
    amount0_in: Amount,
    amount1_in: Amount,
    reserve0: Amount,
    reserve1: Amount,
) -> bool:
    """True if the post-swap balances respect the fee-adjusted constant product."""
    return fee_adjusted_product(balance0, balance1, amount0_in, amount1_in) >= required_product(
        reserve0, reserve1
    )


def get_amount_out(amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
    """
    Largest output a swap can request for an exact `amount_in` and still pass the invariant.

        amount_out = floor(amount_in*997 * reserve_out / (reserve_in*1000 + amount_in*997))
    """
    require_amount("amount_in", amount_in)
    if amount_in <= 0:
        raise InvalidAmount(f"amount_in must be positive: {amount_in}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity(f"Reserves must be positive: ({reserve_in}, {reserve_out})")
    amount_in_with_fee = amount_in * (FEE_DENOMINATOR - FEE_NUMERATOR)
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * FEE_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


def get_amount_in(amount_out: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
    """
    Smallest input that pays for an exact `amount_out`.

        amount_in = floor(reserve_in * amount_out * 1000 / ((reserve_out - amount_out) * 997)) + 1
    """
    require_amount("amount_out", amount_out)
    if amount_out <= 0:
        raise InvalidAmount(f"amount_out must be positive: {amount_out}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity(f"Reserves must be positive: ({reserve_in}, {reserve_out})")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )
    numerator = reserve_in * amount_out * FEE_DENOMINATOR
    denominator = (reserve_out - amount_out) * (FEE_DENOMINATOR - FEE_NUMERATOR)
    return numerator // denominator + 1
