"""
Curve state, initialization checks and the trade entry point.

``initialize(...)`` validates the curve and the genesis balances once.
``trade(...)`` is the single entry point for swaps. It:

1. Validates the caller-supplied balances and amount (unsigned 64-bit).
2. Dispatches to the direction's swap in ``linear_price.py``.
3. Enforces the caller's ``minimum_amount_out`` slippage floor.

``try_trade(...)`` wraps ``trade`` and returns a ``TradeOutcome`` instead of
raising, for callers that prefer result inspection.

Balances are never stored here; the ledger that owns them passes them in on
every call and applies the returned amounts itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from . import linear_price
from .errors import BondingCurveError, CalculationFailure, ExceededSlippage, InvalidCurveState, ZeroTradingTokens
from .fees import Fees, require_zero_fees
from .precise_number import PreciseNumber
from .types import U64_MAX, Amount, LinearCurveParameters, TradeDirection, TradeOutcome, TradeResult

logger = logging.getLogger(__name__)

CURVE_TAG_LINEAR_PRICE = "LINEAR_PRICE_V1"


def _require_amount(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if not (0 <= value <= U64_MAX):
        raise CalculationFailure(f"{name} must be in [0, {U64_MAX}]: {value}")


@dataclass(frozen=True)
class CurveState:
    """An initialized linear curve. Holds parameters only, never balances."""

    params: LinearCurveParameters
    fees: Fees = field(default_factory=Fees)

    @property
    def curve_tag(self) -> str:
        return CURVE_TAG_LINEAR_PRICE

    @property
    def allows_deposits(self) -> bool:
        return False

    @property
    def allows_withdrawals(self) -> bool:
        return False


def initialize(
    slope_numerator: int,
    slope_denominator: int,
    r0_numerator: int,
    r0_denominator: int,
    collateral_balance: Amount,
    bonded_balance: Amount,
    *,
    fees: Fees | None = None,
) -> CurveState:
    """
    Validate a new curve against its genesis balances.

    Raises:
        InvalidCurveState: Bad parameters, pre-seeded collateral or no bonded supply.
        FeesNotAllowedForCurve: Any non-zero fee numerator.
    """
    params = LinearCurveParameters(
        slope_numerator=slope_numerator,
        slope_denominator=slope_denominator,
        r0_numerator=r0_numerator,
        r0_denominator=r0_denominator,
    )
    for name, v in (("collateral_balance", collateral_balance), ("bonded_balance", bonded_balance)):
        if not isinstance(v, int) or isinstance(v, bool) or not (0 <= v <= U64_MAX):
            raise InvalidCurveState(f"{name} must be an int in [0, {U64_MAX}]: {v!r}")
    if collateral_balance != 0:
        raise InvalidCurveState(f"collateral balance must be zero at genesis: {collateral_balance}")
    if bonded_balance == 0:
        raise InvalidCurveState("bonded balance must be positive at genesis")

    fees = Fees() if fees is None else fees
    require_zero_fees(fees)
    return CurveState(params=params, fees=fees)


def trade(
    state: CurveState,
    direction: TradeDirection,
    collateral_balance: Amount,
    bonded_balance: Amount,
    amount_in: Amount,
    minimum_amount_out: Amount = 0,
) -> TradeResult:
    """
    Quote a trade against the supplied balances.

    Raises:
        CalculationFailure: Out-of-range amounts or an arithmetic failure in the solve.
        ZeroTradingTokens: Zero input, or an output that rounds to zero.
        FeesNotAllowedForCurve: The state carries a non-zero fee schedule.
        ExceededSlippage: Output below ``minimum_amount_out``.
    """
    require_zero_fees(state.fees)
    for name, v in (
        ("collateral_balance", collateral_balance),
        ("bonded_balance", bonded_balance),
        ("amount_in", amount_in),
        ("minimum_amount_out", minimum_amount_out),
    ):
        _require_amount(name, v)
    if amount_in == 0:
        raise ZeroTradingTokens("amount_in must be positive")

    if direction is TradeDirection.A_TO_B:
        result = linear_price.swap_a_to_b(
            state.params,
            collateral_balance=collateral_balance,
            bonded_balance=bonded_balance,
            amount_in=amount_in,
        )
    elif direction is TradeDirection.B_TO_A:
        result = linear_price.swap_b_to_a(
            state.params,
            collateral_balance=collateral_balance,
            amount_in=amount_in,
        )
    else:
        raise ValueError(f"unknown trade direction: {direction!r}")

    if result.amount_out < minimum_amount_out:
        raise ExceededSlippage(result.amount_out, minimum_amount_out)

    logger.debug(
        "%s trade: in=%d/%d out=%d capped=%s",
        direction.value,
        result.actual_amount_in,
        amount_in,
        result.amount_out,
        result.capped,
    )
    return result


def try_trade(
    state: CurveState,
    direction: TradeDirection,
    collateral_balance: Amount,
    bonded_balance: Amount,
    amount_in: Amount,
    minimum_amount_out: Amount = 0,
) -> TradeOutcome:
    """Like ``trade()`` but returns a rejected ``TradeOutcome`` instead of raising."""
    try:
        result = trade(state, direction, collateral_balance, bonded_balance, amount_in, minimum_amount_out)
    except BondingCurveError as exc:
        return TradeOutcome(accepted=False, rejection=str(exc), code=exc.code)
    return TradeOutcome(accepted=True, result=result)


def cumulative_sold(state: CurveState, collateral_balance: Amount) -> PreciseNumber:
    """Bonded volume sold so far, recovered from the collateral balance (rounded up)."""
    _require_amount("collateral_balance", collateral_balance)
    return linear_price.cumulative_sold_at(
        state.params, PreciseNumber.from_integer(collateral_balance), round_up=True
    )


def spot_price(state: CurveState, collateral_balance: Amount) -> PreciseNumber:
    """Marginal price of the next bonded token, in collateral per bonded token."""
    return linear_price.price_at(state.params, cumulative_sold(state, collateral_balance))
