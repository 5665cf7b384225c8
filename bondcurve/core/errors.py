"""Exception types for the linear bonding curve.

Every failure carries a stable ``code`` string so that ``try_trade()`` in
``curve_state.py`` can report a rejection without the caller matching on
exception classes.
"""

from __future__ import annotations


class BondingCurveError(Exception):
    """Base class for every rejection raised by the curve."""

    code = "bonding_curve_error"


class CalculationFailure(BondingCurveError):
    """Raised on overflow, division by zero or a negative intermediate result."""

    code = "calculation_failure"


class ZeroTradingTokens(BondingCurveError):
    """Raised when a trade would move zero tokens on either side."""

    code = "zero_trading_tokens"


class InvalidCurveState(BondingCurveError):
    """Raised when curve parameters or genesis balances are invalid."""

    code = "invalid_curve_state"


class UnsupportedOperation(BondingCurveError):
    """Raised when a liquidity operation reaches the linear curve."""

    code = "unsupported_operation"


class FeesNotAllowedForCurve(BondingCurveError):
    """Raised when a non-zero fee schedule is attached to the linear curve."""

    code = "fees_not_allowed_for_curve"


class ExceededSlippage(BondingCurveError):
    """Raised when the computed output falls below the caller's floor."""

    code = "exceeded_slippage"

    def __init__(self, amount_out: int, minimum_amount_out: int) -> None:
        self.amount_out = amount_out
        self.minimum_amount_out = minimum_amount_out
        super().__init__(f"amount_out {amount_out} below minimum_amount_out {minimum_amount_out}")
