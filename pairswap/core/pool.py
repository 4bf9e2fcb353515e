"""
The pair aggregate.

A `Pool` owns the reserve snapshot, the composed claim-token ledger and the
event log; it only references the asset ledger collaborator. Every mutating
operation runs inside `_operation()`, which:

- serializes callers on a re-entrant lock shared by every pool on the same
  asset ledger (a nested call from a flash-swap callback, into this pool or
  any other pool on that ledger, is rejected with `Locked`),
- snapshots ledger, shares and reserves, and restores all three if anything
  raises, so an operation either commits completely or has no effect,
- publishes staged events only on commit.
"""

from __future__ import annotations

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple

from ..config import EngineConfig
from ..errors import InvalidPairConfiguration, Locked, PoolError
from ..events import Event, EventLog, ReservesSynced
from ..state.balances import Amount, AssetId, Holder
from ..state.ledger import AssetLedger
from ..state.reserves import ReserveState
from ..state.shares import ShareLedger
from . import liquidity, swap

logger = logging.getLogger(__name__)

SwapCallback = Callable[[Holder, Amount, Amount], None]


class _LedgerGuard:
    """Lock and active-operation marker shared by every pool on one asset ledger."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.active: Optional[str] = None


_guards: "weakref.WeakKeyDictionary[AssetLedger, _LedgerGuard]" = weakref.WeakKeyDictionary()
_guards_lock = threading.Lock()


def ledger_guard(ledger: AssetLedger) -> _LedgerGuard:
    """
    Return the guard for `ledger`, creating it on first use.

    Rollback restores the whole ledger, so operations are serialized per ledger,
    not per pool: a pool operation started while any other operation on the same
    ledger is in flight (for example from a flash-swap callback) raises `Locked`.
    """
    with _guards_lock:
        guard = _guards.get(ledger)
        if guard is None:
            guard = _LedgerGuard()
            _guards[ledger] = guard
        return guard


def _check_asset(name: str, value: object) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidPairConfiguration(f"{name} must be a non-empty string: {value!r}")


class Pool:
    def __init__(
        self,
        asset0: AssetId,
        asset1: AssetId,
        ledger: AssetLedger,
        *,
        address: Optional[Holder] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        _check_asset("asset0", asset0)
        _check_asset("asset1", asset1)
        if asset0 == asset1:
            raise InvalidPairConfiguration(f"Pair assets must differ: {asset0!r}")
        address = address if address is not None else f"pool:{asset0}/{asset1}"
        _check_asset("address", address)
        if address in (asset0, asset1):
            raise InvalidPairConfiguration(f"Pool address collides with an asset: {address!r}")

        config = config or EngineConfig()
        self._asset0 = asset0
        self._asset1 = asset1
        self._address = address
        self.ledger = ledger
        self.events = EventLog(limit=config.event_log_limit)
        self.shares = ShareLedger(on_event=self._stage)
        self.reserves = ReserveState()
        self.last_events: Tuple[Event, ...] = ()

        self._guard = ledger_guard(ledger)
        self._in_operation = False
        self._pending: List[Event] = []

    @property
    def _lock(self):
        return self._guard.lock

    @property
    def asset0(self) -> AssetId:
        return self._asset0

    @property
    def asset1(self) -> AssetId:
        return self._asset1

    @property
    def address(self) -> Holder:
        return self._address

    @property
    def total_shares(self) -> Amount:
        return self.shares.total_supply

    def get_reserves(self) -> Tuple[Amount, Amount]:
        return self.reserves.as_tuple()

    def balances(self) -> Tuple[Amount, Amount]:
        """True balances held by the pool, read from the asset ledger."""
        return (
            self.ledger.balance_of(self._asset0, self._address),
            self.ledger.balance_of(self._asset1, self._address),
        )

    # -- plumbing used by the engines ------------------------------------

    def _stage(self, event: Event) -> None:
        if self._in_operation:
            self._pending.append(event)
        else:
            self.events.extend([event])

    def emit(self, event: Event) -> None:
        self._stage(event)

    def resync(self, balance0: Amount, balance1: Amount) -> None:
        """Set reserves to the given true balances and record the snapshot."""
        self.reserves = ReserveState.synced(balance0, balance1)
        self.emit(ReservesSynced(reserve0=balance0, reserve1=balance1))

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        guard = self._guard
        with guard.lock:
            if guard.active is not None:
                raise Locked(
                    f"{name} on {self._address} started while {guard.active} is in flight on the same ledger"
                )
            guard.active = f"{name} on {self._address}"
            self._in_operation = True
            ledger_token = self.ledger.snapshot()
            shares_token = self.shares.snapshot()
            reserves = self.reserves
            self._pending = []
            try:
                yield
            except Exception as exc:
                self.ledger.restore(ledger_token)
                self.shares.restore(shares_token)
                self.reserves = reserves
                self._pending = []
                if isinstance(exc, PoolError):
                    logger.info("%s rejected on %s: %s (%s)", name, self._address, exc.reason, exc.message)
                else:
                    logger.debug("%s rolled back on %s after %s", name, self._address, type(exc).__name__)
                raise
            else:
                committed, self._pending = tuple(self._pending), []
                self.last_events = committed
                self.events.extend(committed)
                logger.debug(
                    "%s committed on %s: reserves=%s k=%d total_shares=%d",
                    name,
                    self._address,
                    self.reserves.as_tuple(),
                    self.reserves.k,
                    self.shares.total_supply,
                )
            finally:
                self._in_operation = False
                guard.active = None

    # -- operations -------------------------------------------------------

    def deposit(self, caller: Holder, amount0: Amount, amount1: Amount, *, to: Optional[Holder] = None) -> Amount:
        """Pull both assets from `caller` and mint shares to `to` (default: caller). Returns shares minted."""
        with self._operation("deposit"):
            return liquidity.deposit(self, caller, amount0, amount1, to=to)

    def withdraw(self, caller: Holder, shares: Amount, *, to: Optional[Holder] = None) -> Tuple[Amount, Amount]:
        """Burn `caller`'s shares and pay the proportional balances to `to` (default: caller)."""
        with self._operation("withdraw"):
            return liquidity.withdraw(self, caller, shares, to=to)

    def swap(
        self,
        amount0_out: Amount,
        amount1_out: Amount,
        recipient: Holder,
        *,
        sender: Optional[Holder] = None,
        callback: Optional[SwapCallback] = None,
    ) -> Tuple[Amount, Amount]:
        """
        Pay out the requested amounts, then require the inputs found in the pool to cover them.

        Inputs are whatever arrived since the last sync: transfer them to the pool
        beforehand, or from `callback(sender, amount0_out, amount1_out)`.
        Returns the inferred (amount0_in, amount1_in).
        """
        with self._operation("swap"):
            return swap.exchange(
                self,
                amount0_out,
                amount1_out,
                recipient,
                sender=sender if sender is not None else recipient,
                callback=callback,
            )

    def skim(self, to: Holder) -> Tuple[Amount, Amount]:
        with self._operation("skim"):
            return swap.skim(self, to)

    def sync(self) -> Tuple[Amount, Amount]:
        with self._operation("sync"):
            return swap.sync(self)

    # -- claim-token surface ---------------------------------------------

    def transfer_shares(self, sender: Holder, recipient: Holder, amount: Amount) -> None:
        with self._operation("transfer_shares"):
            self.shares.transfer(sender, recipient, amount)

    def approve_shares(self, owner: Holder, spender: Holder, amount: Amount) -> None:
        with self._operation("approve_shares"):
            self.shares.approve(owner, spender, amount)

    def transfer_shares_from(self, spender: Holder, owner: Holder, recipient: Holder, amount: Amount) -> None:
        with self._operation("transfer_shares_from"):
            self.shares.transfer_from(spender, owner, recipient, amount)

    def __repr__(self) -> str:
        return (
            f"Pool({self._asset0!r}/{self._asset1!r}, reserves={self.reserves.as_tuple()}, "
            f"total_shares={self.shares.total_supply})"
        )


def create_pool(
    asset0: AssetId,
    asset1: AssetId,
    ledger: AssetLedger,
    *,
    address: Optional[Holder] = None,
    config: Optional[EngineConfig] = None,
) -> Pool:
    """
    Create an empty pair.

    Raises:
        InvalidPairConfiguration: If the assets are identical or empty, or the address collides with one
    """
    pool = Pool(asset0, asset1, ledger, address=address, config=config)
    logger.debug("created %r at %s", pool, pool.address)
    return pool
