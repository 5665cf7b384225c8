"""`core`: pure-Python linear price bonding curve.

- deterministic, integer-only fixed-point arithmetic,
- immutable parameters and results (frozen dataclasses),
- balances passed in on every call, never stored.

Public API:
- `initialize(...) -> CurveState`
- `trade(state, direction, ...) -> TradeResult` (raises on rejection)
- `try_trade(state, direction, ...) -> TradeOutcome`
"""

from .curve_state import CURVE_TAG_LINEAR_PRICE, CurveState, cumulative_sold, initialize, spot_price, trade, try_trade
from .errors import (
    BondingCurveError,
    CalculationFailure,
    ExceededSlippage,
    FeesNotAllowedForCurve,
    InvalidCurveState,
    UnsupportedOperation,
    ZeroTradingTokens,
)
from .fees import Fees
from .precise_number import ONE, PreciseNumber
from .types import LinearCurveParameters, TradeDirection, TradeOutcome, TradeResult

__all__ = [
    "initialize",
    "trade",
    "try_trade",
    "cumulative_sold",
    "spot_price",
    "CURVE_TAG_LINEAR_PRICE",
    "CurveState",
    "Fees",
    "LinearCurveParameters",
    "ONE",
    "PreciseNumber",
    "TradeDirection",
    "TradeOutcome",
    "TradeResult",
    "BondingCurveError",
    "CalculationFailure",
    "ExceededSlippage",
    "FeesNotAllowedForCurve",
    "InvalidCurveState",
    "UnsupportedOperation",
    "ZeroTradingTokens",
]
