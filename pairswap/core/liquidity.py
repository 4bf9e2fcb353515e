"""
Liquidity operations: deposit (mint shares) and withdraw (burn shares).

Both functions expect to run inside `Pool._operation()`; they mutate the pool
freely and rely on the caller to roll everything back on failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from ..errors import InsufficientShares, InvalidAmount, ZeroRedemption, ZeroShareMint
from ..events import Deposited, Withdrawn
from ..state.balances import Amount, Holder, require_amount
from .math import compute_deposit_shares, compute_redemption

if TYPE_CHECKING:
    from .pool import Pool


def deposit(
    pool: "Pool",
    caller: Holder,
    amount0: Amount,
    amount1: Amount,
    *,
    to: Optional[Holder] = None,
) -> Amount:
    """
    Add liquidity.

    Shares minted:
        empty pool:  floor(sqrt(amount0 * amount1))
        otherwise:   min(floor(amount0 * total / reserve0), floor(amount1 * total / reserve1))

    An out-of-proportion deposit is priced at the worse ratio and its excess
    is kept by the pool (it accrues to every holder); nothing is refunded.
    Reserves are then resynchronized to the pool's true balances, which also
    absorbs any funds sent to the pool out of band.

    Raises:
        InvalidAmount: If either amount is negative
        TransferFailed: If the ledger cannot pull the funds from `caller`
        ZeroShareMint: If the deposit is too small to mint a single share
        ReserveOverflow: If the new balances do not fit the reserve width
    """
    require_amount("amount0", amount0)
    require_amount("amount1", amount1)
    if amount0 < 0 or amount1 < 0:
        raise InvalidAmount(f"Deposit amounts must be non-negative: ({amount0}, {amount1})")
    recipient = to if to is not None else caller

    pool.ledger.transfer_from(pool.asset0, caller, pool.address, pool.address, amount0)
    pool.ledger.transfer_from(pool.asset1, caller, pool.address, pool.address, amount1)

    reserve0, reserve1 = pool.get_reserves()
    shares = compute_deposit_shares(amount0, amount1, reserve0, reserve1, pool.shares.total_supply)
    if shares == 0:
        raise ZeroShareMint(
            f"Deposit ({amount0}, {amount1}) mints zero shares against reserves ({reserve0}, {reserve1})"
        )
    pool.shares.mint(recipient, shares)

    balance0, balance1 = pool.balances()
    pool.resync(balance0, balance1)
    pool.emit(Deposited(sender=caller, amount0=amount0, amount1=amount1, shares=shares, recipient=recipient))
    return shares


def withdraw(
    pool: "Pool",
    caller: Holder,
    shares: Amount,
    *,
    to: Optional[Holder] = None,
) -> Tuple[Amount, Amount]:
    """
    Remove liquidity.

    Outputs are priced against the pool's true balances, not the cached reserves:
        amount_i = floor(shares * balance_i / total_shares)

    Raises:
        InsufficientShares: If nothing is outstanding or `caller` holds fewer than `shares`
        ZeroRedemption: If either output rounds down to zero
    """
    require_amount("shares", shares)
    recipient = to if to is not None else caller
    total = pool.shares.total_supply
    if total == 0:
        raise InsufficientShares("Pool has no shares outstanding")

    balance0, balance1 = pool.balances()
    amount0, amount1 = compute_redemption(shares, balance0, balance1, total)
    if amount0 == 0 or amount1 == 0:
        raise ZeroRedemption(f"Burning {shares} of {total} shares redeems ({amount0}, {amount1})")

    pool.shares.burn(caller, shares)
    pool.ledger.transfer(pool.asset0, pool.address, recipient, amount0)
    pool.ledger.transfer(pool.asset1, pool.address, recipient, amount1)

    balance0, balance1 = pool.balances()
    pool.resync(balance0, balance1)
    pool.emit(Withdrawn(sender=caller, amount0=amount0, amount1=amount1, shares=shares, recipient=recipient))
    return amount0, amount1
