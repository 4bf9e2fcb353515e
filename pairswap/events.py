"""
Audit records emitted by the pair.

Records are append-only and are never re-read by the engine. A pool stages the
records of an operation and publishes them to its `EventLog` only when the
operation commits, so observers never see effects of a rolled-back operation.
"""

from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from typing import Any, Callable, Deque, Dict, Iterator, List, Optional, Sequence, Union


@dataclass(frozen=True)
class ReservesSynced:
    """Reserve snapshot after a deposit, withdrawal, swap or explicit sync."""

    reserve0: int
    reserve1: int

    name = "ReservesSynced"


@dataclass(frozen=True)
class Swapped:
    sender: str
    amount0_in: int
    amount1_in: int
    amount0_out: int
    amount1_out: int
    recipient: str

    name = "Swapped"


@dataclass(frozen=True)
class Deposited:
    sender: str
    amount0: int
    amount1: int
    shares: int
    recipient: str

    name = "Deposited"


@dataclass(frozen=True)
class Withdrawn:
    sender: str
    amount0: int
    amount1: int
    shares: int
    recipient: str

    name = "Withdrawn"


@dataclass(frozen=True)
class SharesTransferred:
    """Claim-token movement. `sender` is None for a mint, `recipient` is None for a burn."""

    sender: Optional[str]
    recipient: Optional[str]
    amount: int

    name = "SharesTransferred"


@dataclass(frozen=True)
class SharesApproved:
    owner: str
    spender: str
    amount: int

    name = "SharesApproved"


Event = Union[ReservesSynced, Swapped, Deposited, Withdrawn, SharesTransferred, SharesApproved]
Subscriber = Callable[[Event], None]


def event_to_dict(event: Event) -> Dict[str, Any]:
    out: Dict[str, Any] = {"event": event.name}
    out.update(asdict(event))
    return out


class EventLog:
    """
    Append-only log of committed events.

    `limit` bounds how many records are retained in memory (0 = unbounded);
    `published` keeps counting every record ever appended.
    """

    def __init__(self, limit: int = 0) -> None:
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
            raise ValueError(f"limit must be a non-negative int: {limit!r}")
        self._events: Deque[Event] = deque(maxlen=limit or None)
        self._subscribers: List[Subscriber] = []
        self.published = 0

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def extend(self, events: Sequence[Event]) -> None:
        for event in events:
            self._events.append(event)
            self.published += 1
        for event in events:
            for callback in self._subscribers:
                callback(event)

    def of_type(self, kind: type) -> List[Event]:
        return [e for e in self._events if isinstance(e, kind)]

    def last(self) -> Optional[Event]:
        return self._events[-1] if self._events else None

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        return f"EventLog({len(self._events)} retained, {self.published} published)"
