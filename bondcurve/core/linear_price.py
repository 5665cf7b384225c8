"""
Linear price bonding curve: forward integral, inverse solve and swaps.

Price of one bonded token in collateral, as a function of the cumulative
bonded amount ``b`` ever sold out of the pool:

    price(b) = slope * b + r0

Collateral locked in the pool once ``b`` tokens have been sold:

    R(b) = (slope / 2) * b^2 + r0 * b

Inverse (positive root of the quadratic, rationalized so it has no
cancellation and stays defined at slope == 0):

    b(R) = (-r0 + sqrt(r0^2 + 2*slope*R)) / slope
         = 2R / (r0 + sqrt(r0^2 + 2*slope*R))

The pool's collateral balance is the only witness of ``b``: deposits,
withdrawals and fees are disabled, so ``R_current == R(b_current)`` always
holds and ``b_current`` is recomputed on every call.

Rounding: every step rounds in the pool's favour. ``b_current`` is rounded
up, requested/target positions are rounded so that outputs shrink and
charged inputs grow.
"""

from __future__ import annotations

import logging

from .errors import CalculationFailure, ZeroTradingTokens
from .precise_number import PreciseNumber
from .types import Amount, LinearCurveParameters, TradeDirection, TradeResult

logger = logging.getLogger(__name__)


def price_at(params: LinearCurveParameters, b: PreciseNumber, *, round_up: bool = False) -> PreciseNumber:
    """``slope * b + r0``."""
    slope_term = b.checked_mul(PreciseNumber.from_integer(params.slope_numerator)).checked_div(
        PreciseNumber.from_integer(params.slope_denominator), round_up=round_up
    )
    r0 = PreciseNumber.from_fraction(params.r0_numerator, params.r0_denominator, round_up=round_up)
    return slope_term.checked_add(r0)


def collateral_at(params: LinearCurveParameters, b: PreciseNumber, *, round_up: bool = False) -> PreciseNumber:
    """
    Forward integral ``R(b) = slope/2 * b^2 + r0 * b``.

    Multiplications run before divisions so the only precision loss is the
    final rounding of each term.
    """
    b_squared = b.checked_mul(b, round_up=round_up)
    quadratic = b_squared.checked_mul(PreciseNumber.from_integer(params.slope_numerator)).checked_div(
        PreciseNumber.from_integer(2 * params.slope_denominator), round_up=round_up
    )
    linear = b.checked_mul(PreciseNumber.from_integer(params.r0_numerator)).checked_div(
        PreciseNumber.from_integer(params.r0_denominator), round_up=round_up
    )
    return quadratic.checked_add(linear)


def cumulative_sold_at(
    params: LinearCurveParameters, collateral: PreciseNumber, *, round_up: bool = False
) -> PreciseNumber:
    """
    Inverse ``b(R) = 2R / (r0 + sqrt(r0^2 + 2*slope*R))``.

    The denominator terms are rounded against ``round_up`` so the quotient
    moves in the requested direction.
    """
    if collateral.is_zero():
        return PreciseNumber.zero()

    inner_up = not round_up
    r0_squared = PreciseNumber.from_fraction(
        params.r0_numerator * params.r0_numerator,
        params.r0_denominator * params.r0_denominator,
        round_up=inner_up,
    )
    growth = collateral.checked_mul(PreciseNumber.from_integer(2 * params.slope_numerator)).checked_div(
        PreciseNumber.from_integer(params.slope_denominator), round_up=inner_up
    )
    root = r0_squared.checked_add(growth).sqrt(round_up=inner_up)
    r0 = PreciseNumber.from_fraction(params.r0_numerator, params.r0_denominator, round_up=inner_up)
    denominator = r0.checked_add(root)
    if denominator.is_zero():
        raise CalculationFailure("curve solve degenerate: slope * collateral below precision")

    two_r = collateral.checked_mul(PreciseNumber.from_integer(2))
    return two_r.checked_div(denominator, round_up=round_up)


def swap_a_to_b(
    params: LinearCurveParameters,
    *,
    collateral_balance: Amount,
    bonded_balance: Amount,
    amount_in: Amount,
) -> TradeResult:
    """
    Spend collateral, receive bonded tokens (moves right on the curve).

    If the pool cannot supply everything ``amount_in`` would buy, the output
    is capped at ``bonded_balance`` and only the exact collateral needed to
    reach that point is charged.
    """
    r_current = PreciseNumber.from_integer(collateral_balance)
    b_current = cumulative_sold_at(params, r_current, round_up=True)

    r_requested = PreciseNumber.from_integer(collateral_balance + amount_in)
    b_requested = cumulative_sold_at(params, r_requested, round_up=False)

    if b_requested > b_current:
        raw_amount_out = b_requested.checked_sub(b_current).to_integer(round_up=False)
    else:
        raw_amount_out = 0

    capped = raw_amount_out > bonded_balance
    if capped:
        amount_out = bonded_balance
        r_capped = collateral_at(
            params, b_current.checked_add(PreciseNumber.from_integer(bonded_balance)), round_up=True
        )
        if r_capped > r_current:
            actual_amount_in = min(amount_in, r_capped.checked_sub(r_current).to_integer(round_up=True))
        else:
            actual_amount_in = 0
        logger.debug(
            "a_to_b capped: requested_out=%d available=%d charged=%d of %d",
            raw_amount_out,
            bonded_balance,
            actual_amount_in,
            amount_in,
        )
    else:
        amount_out = raw_amount_out
        actual_amount_in = amount_in

    if amount_out == 0 or actual_amount_in == 0:
        logger.debug("a_to_b rejected: amount_in=%d rounds to zero output", amount_in)
        raise ZeroTradingTokens(f"a_to_b trade of {amount_in} produces no output")

    return TradeResult(
        direction=TradeDirection.A_TO_B,
        actual_amount_in=actual_amount_in,
        amount_out=amount_out,
        capped=capped,
    )


def swap_b_to_a(
    params: LinearCurveParameters,
    *,
    collateral_balance: Amount,
    amount_in: Amount,
) -> TradeResult:
    """
    Spend bonded tokens, receive collateral (moves left on the curve).

    The cumulative sold amount cannot go below zero: an oversized offer is
    charged at most ``floor(b_current)`` and receives the whole collateral
    balance.
    """
    r_current = PreciseNumber.from_integer(collateral_balance)
    b_current = cumulative_sold_at(params, r_current, round_up=True)
    offered = PreciseNumber.from_integer(amount_in)

    capped = offered > b_current
    if capped:
        actual_amount_in = min(amount_in, b_current.to_integer(round_up=False))
        b_target = PreciseNumber.zero()
        logger.debug("b_to_a capped: offered=%d cumulative_sold=%s", amount_in, b_current)
    else:
        actual_amount_in = amount_in
        b_target = b_current.checked_sub(offered)

    r_target = collateral_at(params, b_target, round_up=True)
    if r_target < r_current:
        amount_out = r_current.checked_sub(r_target).to_integer(round_up=False)
    else:
        amount_out = 0

    if amount_out == 0 or actual_amount_in == 0:
        logger.debug("b_to_a rejected: amount_in=%d rounds to zero output", amount_in)
        raise ZeroTradingTokens(f"b_to_a trade of {amount_in} produces no output")

    return TradeResult(
        direction=TradeDirection.B_TO_A,
        actual_amount_in=actual_amount_in,
        amount_out=amount_out,
        capped=capped,
    )
