from __future__ import annotations

from typing import Callable

import pytest

from pairswap.core import Pool, create_pool
from pairswap.state import InMemoryAssetLedger

ASSET0 = "asset-a"
ASSET1 = "asset-b"

Fund = Callable[[str, int, int], None]


@pytest.fixture
def ledger() -> InMemoryAssetLedger:
    return InMemoryAssetLedger()


@pytest.fixture
def pool(ledger: InMemoryAssetLedger) -> Pool:
    return create_pool(ASSET0, ASSET1, ledger)


@pytest.fixture
def fund(ledger: InMemoryAssetLedger, pool: Pool) -> Fund:
    """Mint both assets to `holder` and approve the pool to pull them."""

    def _fund(holder: str, amount0: int, amount1: int) -> None:
        ledger.mint(ASSET0, holder, amount0)
        ledger.mint(ASSET1, holder, amount1)
        ledger.approve(ASSET0, holder, pool.address, ledger.allowance(ASSET0, holder, pool.address) + amount0)
        ledger.approve(ASSET1, holder, pool.address, ledger.allowance(ASSET1, holder, pool.address) + amount1)

    return _fund


@pytest.fixture
def seeded_pool(pool: Pool, fund: Fund) -> Pool:
    """A (1000, 1000) pool whose 1000 shares are all held by alice."""
    fund("alice", 1000, 1000)
    pool.deposit("alice", 1000, 1000)
    return pool
