"""
State management for PairSwap pools
"""

from .balances import BalanceTable
from .ledger import AssetLedger, InMemoryAssetLedger
from .reserves import MAX_RESERVE, ReserveState
from .shares import ShareLedger

__all__ = [
    "BalanceTable",
    "AssetLedger",
    "InMemoryAssetLedger",
    "MAX_RESERVE",
    "ReserveState",
    "ShareLedger",
]
