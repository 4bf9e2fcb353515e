"""
Core pair algorithms
"""

from .math import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    compute_deposit_shares,
    compute_redemption,
    get_amount_in,
    get_amount_out,
    satisfies_invariant,
)
from .pool import Pool, create_pool
from .engine import PoolCommand, StepResult, step, step_or_raise

__all__ = [
    "FEE_DENOMINATOR",
    "FEE_NUMERATOR",
    "compute_deposit_shares",
    "compute_redemption",
    "get_amount_in",
    "get_amount_out",
    "satisfies_invariant",
    "Pool",
    "create_pool",
    "PoolCommand",
    "StepResult",
    "step",
    "step_or_raise",
]
