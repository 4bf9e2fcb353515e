"""
Integration helpers (persisted snapshots)
"""

from .snapshot import POOL_SNAPSHOT_VERSION, PoolSnapshot, restore_pool, snapshot_from_pool

__all__ = [
    "POOL_SNAPSHOT_VERSION",
    "PoolSnapshot",
    "restore_pool",
    "snapshot_from_pool",
]
