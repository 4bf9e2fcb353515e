"""Exception types for the pair engine.

Every failure carries a stable, externally observable ``reason`` tag so that
callers (and tests) can assert on the cause rather than on message text.
``core.engine.step()`` reports the same tag as its ``rejection`` string.
"""

from __future__ import annotations


class PoolError(Exception):
    """Base class for all pool failures. Any raised ``PoolError`` aborts the whole operation."""

    reason: str = "pool_error"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.reason
        super().__init__(self.message)


class InvalidPairConfiguration(PoolError):
    """Raised when a pool is created with identical (or empty) asset identifiers."""

    reason = "invalid_pair_configuration"


class TransferFailed(PoolError):
    """Raised by the asset ledger when it cannot move funds."""

    reason = "transfer_failed"


class InvalidAmount(PoolError):
    reason = "invalid_amount"


class ZeroShareMint(PoolError):
    reason = "zero_share_mint"


class ZeroRedemption(PoolError):
    reason = "zero_redemption"


class InsufficientShares(PoolError):
    reason = "insufficient_shares"


class InsufficientAllowance(PoolError):
    reason = "insufficient_allowance"


class NoOutputRequested(PoolError):
    reason = "no_output_requested"


class InsufficientLiquidity(PoolError):
    reason = "insufficient_liquidity"


class InvalidRecipient(PoolError):
    reason = "invalid_recipient"


class NoInputProvided(PoolError):
    reason = "no_input_provided"


class InvariantViolated(PoolError):
    """Raised when a swap would decrease the fee-adjusted constant product."""

    reason = "invariant_violated"


class ReserveOverflow(PoolError):
    """Raised when a balance no longer fits the 112-bit reserve width."""

    reason = "reserve_overflow"


class Locked(PoolError):
    """Raised when an operation re-enters a pool that is mid-operation."""

    reason = "locked"


ALL_ERRORS = (
    InvalidPairConfiguration,
    TransferFailed,
    InvalidAmount,
    ZeroShareMint,
    ZeroRedemption,
    InsufficientShares,
    InsufficientAllowance,
    NoOutputRequested,
    InsufficientLiquidity,
    InvalidRecipient,
    NoInputProvided,
    InvariantViolated,
    ReserveOverflow,
    Locked,
)
