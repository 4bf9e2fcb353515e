"""Command dispatch for callers that prefer results over exceptions.

``step(pool, command)`` runs one operation and returns a ``StepResult``:
accepted with the operation's return value and the events it published, or
rejected with the failing error's ``reason`` tag. The pool is left untouched
by a rejected step.

``step_or_raise()`` runs the same dispatch but lets the error propagate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Literal, Mapping, Optional, Tuple

from ..errors import PoolError
from ..events import Event
from .pool import Pool

logger = logging.getLogger(__name__)

CommandTag = Literal[
    "deposit",
    "withdraw",
    "swap",
    "skim",
    "sync",
    "transfer_shares",
    "approve_shares",
    "transfer_shares_from",
]


@dataclass(frozen=True)
class PoolCommand:
    tag: CommandTag
    args: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StepResult:
    accepted: bool
    value: Any = None
    events: Tuple[Event, ...] = ()
    rejection: Optional[str] = None


def _deposit(pool: Pool, args: Mapping[str, Any]) -> Any:
    return pool.deposit(args["caller"], args["amount0"], args["amount1"], to=args.get("to"))


def _withdraw(pool: Pool, args: Mapping[str, Any]) -> Any:
    return pool.withdraw(args["caller"], args["shares"], to=args.get("to"))


def _swap(pool: Pool, args: Mapping[str, Any]) -> Any:
    return pool.swap(
        args.get("amount0_out", 0),
        args.get("amount1_out", 0),
        args["recipient"],
        sender=args.get("sender"),
        callback=args.get("callback"),
    )


def _skim(pool: Pool, args: Mapping[str, Any]) -> Any:
    return pool.skim(args["to"])


def _sync(pool: Pool, args: Mapping[str, Any]) -> Any:
    return pool.sync()


def _transfer_shares(pool: Pool, args: Mapping[str, Any]) -> Any:
    return pool.transfer_shares(args["sender"], args["recipient"], args["amount"])


def _approve_shares(pool: Pool, args: Mapping[str, Any]) -> Any:
    return pool.approve_shares(args["owner"], args["spender"], args["amount"])


def _transfer_shares_from(pool: Pool, args: Mapping[str, Any]) -> Any:
    return pool.transfer_shares_from(args["spender"], args["owner"], args["recipient"], args["amount"])


_DISPATCH: Dict[str, Callable[[Pool, Mapping[str, Any]], Any]] = {
    "deposit": _deposit,
    "withdraw": _withdraw,
    "swap": _swap,
    "skim": _skim,
    "sync": _sync,
    "transfer_shares": _transfer_shares,
    "approve_shares": _approve_shares,
    "transfer_shares_from": _transfer_shares_from,
}


def step_or_raise(pool: Pool, command: PoolCommand) -> StepResult:
    """Like ``step()`` but raises on rejection.

    Raises:
        PoolError: The operation's failure, carrying its ``reason`` tag.
        KeyError: A required argument is missing from ``command.args``.
        ValueError: ``command.tag`` is not a known operation.
    """
    handler = _DISPATCH.get(command.tag)
    if handler is None:
        raise ValueError(f"unknown command: {command.tag}")
    value = handler(pool, command.args)
    return StepResult(accepted=True, value=value, events=pool.last_events)


def step(pool: Pool, command: PoolCommand) -> StepResult:
    """Execute one command against ``pool``."""
    if command.tag not in _DISPATCH:
        return StepResult(accepted=False, rejection=f"unknown_command:{command.tag}")
    try:
        return step_or_raise(pool, command)
    except PoolError as exc:
        return StepResult(accepted=False, rejection=exc.reason)
    except KeyError as exc:
        logger.info("%s rejected: missing argument %s", command.tag, exc)
        return StepResult(accepted=False, rejection=f"missing_param:{exc.args[0]}")
    except TypeError as exc:
        logger.info("%s rejected: %s", command.tag, exc)
        return StepResult(accepted=False, rejection="invalid_param")
