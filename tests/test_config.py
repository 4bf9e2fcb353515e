# [TESTER] v1

from __future__ import annotations

import io
import logging

import pytest

from pairswap.config import EngineConfig, configure_logging
from pairswap.core import create_pool
from pairswap.state import InMemoryAssetLedger


def test_from_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PAIRSWAP_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PAIRSWAP_EVENT_LOG_LIMIT", raising=False)

    cfg = EngineConfig.from_env()

    assert cfg == EngineConfig()
    assert cfg.log_level == "WARNING"
    assert cfg.event_log_limit == 0


def test_from_env_reads_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAIRSWAP_LOG_LEVEL", " debug ")
    monkeypatch.setenv("PAIRSWAP_EVENT_LOG_LIMIT", "25")

    cfg = EngineConfig.from_env()

    assert cfg.log_level == "DEBUG"
    assert cfg.event_log_limit == 25


@pytest.mark.parametrize(
    "raw, expected",
    [("", 0), ("abc", 0), ("-5", 0), ("99999999999", 10_000_000)],
)
def test_event_log_limit_is_clamped(monkeypatch: pytest.MonkeyPatch, raw: str, expected: int) -> None:
    monkeypatch.setenv("PAIRSWAP_EVENT_LOG_LIMIT", raw)
    assert EngineConfig.from_env().event_log_limit == expected


def test_unknown_log_level_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAIRSWAP_LOG_LEVEL", "chatty")
    assert EngineConfig.from_env().log_level == "WARNING"


def test_direct_construction_is_validated() -> None:
    with pytest.raises(ValueError):
        EngineConfig(log_level="chatty")
    with pytest.raises(ValueError):
        EngineConfig(event_log_limit=-1)


def test_configure_logging_does_not_stack_handlers() -> None:
    first = io.StringIO()
    second = io.StringIO()

    configure_logging(EngineConfig(log_level="INFO"), stream=first)
    logger = configure_logging(EngineConfig(log_level="INFO"), stream=second)
    try:
        ours = [h for h in logger.handlers if getattr(h, "_pairswap", False)]
        assert len(ours) == 1
        assert logger.level == logging.INFO

        logging.getLogger("pairswap.core.pool").info("hello")
        assert "hello" in second.getvalue()
        assert first.getvalue() == ""
    finally:
        for handler in list(logger.handlers):
            if getattr(handler, "_pairswap", False):
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_event_log_limit_caps_retained_events() -> None:
    ledger = InMemoryAssetLedger()
    pool = create_pool("asset-a", "asset-b", ledger, config=EngineConfig(event_log_limit=2))
    ledger.mint("asset-a", "alice", 10)
    ledger.mint("asset-b", "alice", 10)
    ledger.approve("asset-a", "alice", pool.address, 10)
    ledger.approve("asset-b", "alice", pool.address, 10)

    pool.deposit("alice", 10, 10)

    assert len(pool.events) == 2
    assert pool.events.published == len(pool.last_events)
    assert len(pool.last_events) > 2
