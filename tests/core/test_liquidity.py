# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.core import Pool
from pairswap.errors import (
    InsufficientShares,
    InvalidAmount,
    ReserveOverflow,
    TransferFailed,
    ZeroRedemption,
    ZeroShareMint,
)
from pairswap.events import Deposited, ReservesSynced, SharesTransferred, Withdrawn
from pairswap.integration import restore_pool
from pairswap.state import MAX_RESERVE

ASSET0 = "asset-a"
ASSET1 = "asset-b"


def test_first_deposit_mints_sqrt_of_product(pool: Pool, fund) -> None:
    fund("alice", 1000, 4000)
    shares = pool.deposit("alice", 1000, 4000)

    assert shares == 2000
    assert pool.total_shares == 2000
    assert pool.shares.balance_of("alice") == 2000
    assert pool.get_reserves() == (1000, 4000)


def test_dust_deposit_on_empty_pool_mints_one_share(pool: Pool, fund) -> None:
    fund("alice", 1, 1)
    assert pool.deposit("alice", 1, 1) == 1
    assert pool.get_reserves() == (1, 1)


def test_proportional_deposit_preserves_ratio(seeded_pool: Pool, fund) -> None:
    fund("bob", 500, 500)
    shares = seeded_pool.deposit("bob", 500, 500)

    assert shares == 500
    assert seeded_pool.total_shares == 1500
    assert seeded_pool.get_reserves() == (1500, 1500)


def test_out_of_proportion_deposit_donates_the_excess(seeded_pool: Pool, fund) -> None:
    fund("bob", 500, 1000)
    shares = seeded_pool.deposit("bob", 500, 1000)

    # priced at the worse ratio, the extra 500 of asset1 is not refunded
    assert shares == 500
    assert seeded_pool.get_reserves() == (1500, 2000)
    assert seeded_pool.ledger.balance_of(ASSET1, "bob") == 0


def test_deposit_events(pool: Pool, fund) -> None:
    fund("alice", 1000, 4000)
    pool.deposit("alice", 1000, 4000, to="carol")

    assert list(pool.events) == [
        SharesTransferred(sender=None, recipient="carol", amount=2000),
        ReservesSynced(reserve0=1000, reserve1=4000),
        Deposited(sender="alice", amount0=1000, amount1=4000, shares=2000, recipient="carol"),
    ]
    assert pool.shares.balance_of("alice") == 0
    assert pool.shares.balance_of("carol") == 2000


def test_deposit_without_authorization_fails_and_rolls_back(pool: Pool, ledger) -> None:
    ledger.mint(ASSET0, "alice", 1000)
    ledger.mint(ASSET1, "alice", 1000)
    ledger.approve(ASSET0, "alice", pool.address, 1000)
    # asset1 never approved: the asset0 pull must be undone too

    with pytest.raises(TransferFailed):
        pool.deposit("alice", 1000, 1000)

    assert ledger.balance_of(ASSET0, "alice") == 1000
    assert ledger.allowance(ASSET0, "alice", pool.address) == 1000
    assert pool.balances() == (0, 0)
    assert pool.total_shares == 0
    assert len(pool.events) == 0


def test_deposit_with_insufficient_balance_fails(pool: Pool, ledger) -> None:
    ledger.approve(ASSET0, "alice", pool.address, 10)
    ledger.approve(ASSET1, "alice", pool.address, 10)
    with pytest.raises(TransferFailed):
        pool.deposit("alice", 10, 10)


def test_deposit_too_small_to_register_fails(pool: Pool, fund, ledger) -> None:
    fund("alice", 10**6, 10**6)
    pool.deposit("alice", 10**6, 10**6)
    fund("bob", 1, 1)

    with pytest.raises(ZeroShareMint):
        pool.deposit("bob", 1, 1)

    assert ledger.balance_of(ASSET0, "bob") == 1
    assert pool.get_reserves() == (10**6, 10**6)
    assert pool.total_shares == 10**6


def test_one_sided_first_deposit_mints_nothing(pool: Pool, fund) -> None:
    fund("alice", 100, 0)
    with pytest.raises(ZeroShareMint):
        pool.deposit("alice", 100, 0)


def test_negative_deposit_is_invalid(pool: Pool) -> None:
    with pytest.raises(InvalidAmount):
        pool.deposit("alice", -1, 10)


def test_deposit_folds_out_of_band_donation_into_reserves(seeded_pool: Pool, fund, ledger) -> None:
    ledger.mint(ASSET0, "mallory", 100)
    ledger.transfer(ASSET0, "mallory", seeded_pool.address, 100)
    assert seeded_pool.get_reserves() == (1000, 1000)

    fund("bob", 1000, 1000)
    assert seeded_pool.deposit("bob", 1000, 1000) == 1000
    assert seeded_pool.get_reserves() == (2100, 2000)


def test_deposit_beyond_reserve_width_fails_and_rolls_back(seeded_pool: Pool, fund, ledger) -> None:
    fund("whale", MAX_RESERVE, MAX_RESERVE)
    events_before = len(seeded_pool.events)

    with pytest.raises(ReserveOverflow):
        seeded_pool.deposit("whale", MAX_RESERVE, MAX_RESERVE)

    assert ledger.balance_of(ASSET0, "whale") == MAX_RESERVE
    assert ledger.balance_of(ASSET1, "whale") == MAX_RESERVE
    assert ledger.allowance(ASSET0, "whale", seeded_pool.address) == MAX_RESERVE
    assert seeded_pool.shares.balance_of("whale") == 0
    assert seeded_pool.total_shares == 1000
    assert seeded_pool.get_reserves() == seeded_pool.balances() == (1000, 1000)
    assert len(seeded_pool.events) == events_before


def test_withdraw_half_of_2000_shares_from_1000_1000_pool(ledger) -> None:
    pool = restore_pool(
        {
            "version": 1,
            "address": "pair",
            "asset0": ASSET0,
            "asset1": ASSET1,
            "reserve0": 1000,
            "reserve1": 1000,
            "total_shares": 2000,
            "share_balances": [{"holder": "alice", "amount": 2000}],
        },
        ledger,
    )
    ledger.mint(ASSET0, "pair", 1000)
    ledger.mint(ASSET1, "pair", 1000)

    assert pool.withdraw("alice", 1000) == (500, 500)
    assert pool.get_reserves() == (500, 500)
    assert pool.total_shares == 1000
    assert ledger.balance_of(ASSET0, "alice") == 500
    assert ledger.balance_of(ASSET1, "alice") == 500


def test_full_withdrawal_by_sole_holder_empties_the_pool(pool: Pool, fund, ledger) -> None:
    fund("alice", 1234, 5678)
    shares = pool.deposit("alice", 1234, 5678)

    assert pool.withdraw("alice", shares) == (1234, 5678)
    assert pool.total_shares == 0
    assert pool.get_reserves() == (0, 0)
    assert pool.balances() == (0, 0)
    assert ledger.balance_of(ASSET0, "alice") == 1234


def test_withdraw_prices_against_true_balances(seeded_pool: Pool, ledger) -> None:
    ledger.mint(ASSET1, "mallory", 1000)
    ledger.transfer(ASSET1, "mallory", seeded_pool.address, 1000)

    assert seeded_pool.withdraw("alice", 500) == (500, 1000)
    assert seeded_pool.get_reserves() == (500, 1000)


def test_withdraw_to_other_recipient_and_events(seeded_pool: Pool, ledger) -> None:
    seeded_pool.withdraw("alice", 100, to="bob")

    assert ledger.balance_of(ASSET0, "bob") == 100
    assert ledger.balance_of(ASSET1, "bob") == 100
    assert seeded_pool.last_events == (
        SharesTransferred(sender="alice", recipient=None, amount=100),
        ReservesSynced(reserve0=900, reserve1=900),
        Withdrawn(sender="alice", amount0=100, amount1=100, shares=100, recipient="bob"),
    )


def test_withdraw_more_than_held_fails_and_rolls_back(seeded_pool: Pool, fund, ledger) -> None:
    fund("bob", 100, 100)
    seeded_pool.deposit("bob", 100, 100)
    events_before = len(seeded_pool.events)

    with pytest.raises(InsufficientShares):
        seeded_pool.withdraw("bob", 101)

    assert seeded_pool.shares.balance_of("bob") == 100
    assert seeded_pool.get_reserves() == (1100, 1100)
    assert ledger.balance_of(ASSET0, "bob") == 0
    assert len(seeded_pool.events) == events_before


def test_withdraw_zero_or_dust_fails(seeded_pool: Pool, fund) -> None:
    with pytest.raises(ZeroRedemption):
        seeded_pool.withdraw("alice", 0)


def test_withdraw_rounding_to_zero_on_one_side_fails(pool: Pool, fund) -> None:
    fund("alice", 1, 10**6)
    shares = pool.deposit("alice", 1, 10**6)
    assert shares == 1000
    with pytest.raises(ZeroRedemption):
        pool.withdraw("alice", 999)


def test_withdraw_before_any_deposit_is_guarded(pool: Pool) -> None:
    with pytest.raises(InsufficientShares):
        pool.withdraw("alice", 1)
