#!/usr/bin/env python3
"""
Replay a deposit / swap / withdraw scenario against an in-memory pool.

Defaults reproduce the reference fixture: seed a (1000, 1000) pool, swap 100
of asset0 in for 90 of asset1 out, then withdraw half of the shares.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairswap.config import EngineConfig, configure_logging
from pairswap.core import PoolCommand, create_pool, get_amount_out, step
from pairswap.events import event_to_dict
from pairswap.integration import snapshot_from_pool
from pairswap.state import InMemoryAssetLedger

ASSET0 = "asset0"
ASSET1 = "asset1"
PROVIDER = "provider"
TRADER = "trader"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument("--deposit0", type=int, default=1000, help="initial deposit of asset0")
    p.add_argument("--deposit1", type=int, default=1000, help="initial deposit of asset1")
    p.add_argument("--swap-in", type=int, default=100, help="asset0 paid in by the trader")
    p.add_argument(
        "--swap-out",
        type=int,
        default=90,
        help="asset1 requested out (-1 = best quote for --swap-in)",
    )
    p.add_argument("--withdraw-bps", type=int, default=5000, help="share of the provider's shares to redeem")
    p.add_argument("--json", action="store_true", help="print events as JSON lines")
    return p.parse_args(argv)


def _print_event(event, as_json: bool) -> None:
    record = event_to_dict(event)
    if as_json:
        print(json.dumps(record, sort_keys=True))
        return
    name = record.pop("event")
    fields = " ".join(f"{k}={v}" for k, v in record.items())
    print(f"[pool-scenario] {name} {fields}")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    config = EngineConfig.from_env()
    configure_logging(config, stream=sys.stderr)

    ledger = InMemoryAssetLedger()
    pool = create_pool(ASSET0, ASSET1, ledger, config=config)
    pool.events.subscribe(lambda e: _print_event(e, args.json))

    ledger.mint(ASSET0, PROVIDER, args.deposit0)
    ledger.mint(ASSET1, PROVIDER, args.deposit1)
    ledger.approve(ASSET0, PROVIDER, pool.address, args.deposit0)
    ledger.approve(ASSET1, PROVIDER, pool.address, args.deposit1)

    res = step(pool, PoolCommand("deposit", {"caller": PROVIDER, "amount0": args.deposit0, "amount1": args.deposit1}))
    if not res.accepted:
        print(f"[pool-scenario] FAIL (deposit): {res.rejection}")
        return 1
    shares = res.value

    if args.swap_in > 0:
        reserve0, reserve1 = pool.get_reserves()
        amount_out = args.swap_out
        if amount_out < 0:
            amount_out = get_amount_out(args.swap_in, reserve0, reserve1)
        ledger.mint(ASSET0, TRADER, args.swap_in)
        ledger.transfer(ASSET0, TRADER, pool.address, args.swap_in)
        res = step(pool, PoolCommand("swap", {"amount1_out": amount_out, "recipient": TRADER}))
        if not res.accepted:
            print(f"[pool-scenario] FAIL (swap): {res.rejection}")
            return 1

    to_burn = shares * args.withdraw_bps // 10_000
    if to_burn > 0:
        res = step(pool, PoolCommand("withdraw", {"caller": PROVIDER, "shares": to_burn}))
        if not res.accepted:
            print(f"[pool-scenario] FAIL (withdraw): {res.rejection}")
            return 1

    snap = snapshot_from_pool(pool)
    print(f"[pool-scenario] reserves={pool.get_reserves()} total_shares={pool.total_shares}")
    print(f"[pool-scenario] snapshot commitment={snap.commitment_hex()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
