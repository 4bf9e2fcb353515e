# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.errors import ReserveOverflow
from pairswap.state import MAX_RESERVE, ReserveState


def test_max_reserve_is_112_bits() -> None:
    assert MAX_RESERVE == 2**112 - 1
    state = ReserveState.synced(MAX_RESERVE, 1)
    assert state.as_tuple() == (MAX_RESERVE, 1)


def test_overflow_fails_fast_instead_of_wrapping() -> None:
    with pytest.raises(ReserveOverflow):
        ReserveState.synced(MAX_RESERVE + 1, 1)
    with pytest.raises(ReserveOverflow):
        ReserveState(reserve0=1, reserve1=2**200)


def test_negative_and_non_int_reserves_are_rejected() -> None:
    with pytest.raises(ValueError):
        ReserveState(reserve0=-1, reserve1=0)
    with pytest.raises(TypeError):
        ReserveState(reserve0=True, reserve1=0)


def test_product() -> None:
    assert ReserveState().k == 0
    assert ReserveState(reserve0=3, reserve1=7).k == 21
