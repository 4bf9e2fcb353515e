"""
Pool state snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing / persistence across restarts.
- Round-trippable into a `Pool` bound to an asset ledger.
- Explicit versioning.

Only the pool's own state is persisted: assets, reserves, total shares, share
balances and share allowances. Asset balances belong to the ledger and are
not included. `share_allowances` may be absent (restored as no allowances).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from ..config import EngineConfig
from ..core.pool import Pool
from ..state.canonical import canonical_json_bytes, commitment
from ..state.ledger import AssetLedger
from ..state.reserves import ReserveState


POOL_SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str, max_len: int = 4096) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class PoolSnapshot:
    """
    Deterministic, versioned snapshot of a `Pool`.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        return commitment("pool_snapshot", self.version, self.data)

    def commitment_hex(self) -> str:
        return self.commitment_bytes().hex()


def snapshot_from_pool(pool: Pool, *, version: int = POOL_SNAPSHOT_VERSION) -> PoolSnapshot:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")

    share_entries = [
        {"holder": holder, "amount": int(amount)}
        for holder, amount in pool.shares.get_all_balances().items()
    ]
    share_entries.sort(key=lambda e: e["holder"])

    allowance_entries = [
        {"owner": owner, "spender": spender, "amount": int(amount)}
        for (owner, spender), amount in pool.shares.get_all_allowances().items()
    ]
    allowance_entries.sort(key=lambda e: (e["owner"], e["spender"]))

    reserve0, reserve1 = pool.get_reserves()
    data: Dict[str, Any] = {
        "version": int(version),
        "address": pool.address,
        "asset0": pool.asset0,
        "asset1": pool.asset1,
        "reserve0": int(reserve0),
        "reserve1": int(reserve1),
        "total_shares": int(pool.total_shares),
        "share_balances": share_entries,
        "share_allowances": allowance_entries,
    }
    return PoolSnapshot(version=version, data=data)


def restore_pool(
    snapshot: Mapping[str, Any],
    ledger: AssetLedger,
    *,
    config: Optional[EngineConfig] = None,
    max_holders: int = 1_000_000,
) -> Pool:
    """
    Rebuild a `Pool` from `PoolSnapshot.data`.

    Raises:
        TypeError / ValueError: If the snapshot is malformed or internally inconsistent
        ReserveOverflow: If a stored reserve exceeds the reserve width
        InvalidPairConfiguration: If the stored assets are not a valid pair
    """
    if not isinstance(snapshot, Mapping):
        raise TypeError("snapshot must be a mapping")

    version = snapshot.get("version", POOL_SNAPSHOT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("snapshot.version must be a positive int")
    if version != POOL_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")

    address = _require_str(snapshot.get("address"), name="address")
    asset0 = _require_str(snapshot.get("asset0"), name="asset0")
    asset1 = _require_str(snapshot.get("asset1"), name="asset1")
    reserves = ReserveState(
        reserve0=_require_int(snapshot.get("reserve0"), name="reserve0"),
        reserve1=_require_int(snapshot.get("reserve1"), name="reserve1"),
    )
    total_shares = _require_int(snapshot.get("total_shares"), name="total_shares")

    entries = snapshot.get("share_balances")
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise TypeError("snapshot.share_balances must be a list")
    if len(entries) > max_holders:
        raise ValueError(f"too many share_balances entries: {len(entries)} > {max_holders}")

    balances: Dict[str, int] = {}
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot.share_balances entries must be objects")
        holder = _require_str(entry.get("holder"), name="share_balance.holder", max_len=512)
        amount = _require_int(entry.get("amount"), name="share_balance.amount")
        if amount == 0:
            raise ValueError("zero share balances must be omitted")
        if holder in balances:
            raise ValueError(f"duplicate share balance entry: {holder}")
        balances[holder] = amount

    if sum(balances.values()) != total_shares:
        raise ValueError(
            f"share balances sum to {sum(balances.values())}, expected total_shares {total_shares}"
        )
    if total_shares > 0 and (reserves.reserve0 == 0 or reserves.reserve1 == 0):
        raise ValueError("a pool with shares outstanding must hold both assets")

    raw_allowances = snapshot.get("share_allowances")
    if raw_allowances is None:
        raw_allowances = []
    if not isinstance(raw_allowances, list):
        raise TypeError("snapshot.share_allowances must be a list")
    if len(raw_allowances) > max_holders:
        raise ValueError(f"too many share_allowances entries: {len(raw_allowances)} > {max_holders}")

    allowances: Dict[Tuple[str, str], int] = {}
    for entry in raw_allowances:
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot.share_allowances entries must be objects")
        owner = _require_str(entry.get("owner"), name="share_allowance.owner", max_len=512)
        spender = _require_str(entry.get("spender"), name="share_allowance.spender", max_len=512)
        amount = _require_int(entry.get("amount"), name="share_allowance.amount")
        if amount == 0:
            raise ValueError("zero share allowances must be omitted")
        if (owner, spender) in allowances:
            raise ValueError(f"duplicate share allowance entry: {owner} -> {spender}")
        allowances[(owner, spender)] = amount

    pool = Pool(asset0, asset1, ledger, address=address, config=config)
    pool.shares.restore((balances, allowances, total_shares))
    pool.reserves = reserves
    return pool
