"""Tests for bondcurve/core/linear_price.py: forward/inverse curve and swaps.

The reference curve is price(b) = b / 200000000 + 50 with 8-decimal tokens,
chosen so every point below lands on a perfect square.
"""

import pytest

from bondcurve.core.errors import CalculationFailure, ZeroTradingTokens
from bondcurve.core.linear_price import (
    collateral_at,
    cumulative_sold_at,
    price_at,
    swap_a_to_b,
    swap_b_to_a,
)
from bondcurve.core.precise_number import PreciseNumber
from bondcurve.core.types import LinearCurveParameters, TradeDirection

E8 = 10**8

RLY = LinearCurveParameters(slope_numerator=1, slope_denominator=200_000_000, r0_numerator=150, r0_denominator=3)


def _p(n: int) -> PreciseNumber:
    return PreciseNumber.from_integer(n)


# ---------------------------------------------------------------------------
# Forward / inverse
# ---------------------------------------------------------------------------

class TestCurveMath:
    @pytest.mark.parametrize(
        "b, r",
        [(0, 0), (40 * E8, 2400 * E8), (60 * E8, 3900 * E8), (30 * E8, 1725 * E8), (500 * E8, 87500 * E8)],
    )
    def test_forward_integral(self, b, r):
        assert collateral_at(RLY, _p(b)) == _p(r)
        assert collateral_at(RLY, _p(b), round_up=True) == _p(r)

    @pytest.mark.parametrize(
        "r, b",
        [(2400 * E8, 40 * E8), (3900 * E8, 60 * E8), (1725 * E8, 30 * E8), (87500 * E8, 500 * E8)],
    )
    def test_inverse_exact_on_perfect_squares(self, r, b):
        assert cumulative_sold_at(RLY, _p(r)) == _p(b)
        assert cumulative_sold_at(RLY, _p(r), round_up=True) == _p(b)

    def test_inverse_of_zero_is_zero(self):
        assert cumulative_sold_at(RLY, PreciseNumber.zero()) == PreciseNumber.zero()

    def test_inverse_rounding_brackets(self):
        r = _p(1000 * E8 + 1)
        lo = cumulative_sold_at(RLY, r)
        hi = cumulative_sold_at(RLY, r, round_up=True)
        assert lo <= hi
        assert collateral_at(RLY, lo) <= r

    def test_price(self):
        assert price_at(RLY, PreciseNumber.zero()) == _p(50)
        assert price_at(RLY, _p(40 * E8)) == _p(70)

    def test_zero_slope_is_constant_price(self):
        flat = LinearCurveParameters(slope_numerator=0, slope_denominator=1, r0_numerator=2, r0_denominator=1)
        assert cumulative_sold_at(flat, _p(10)) == _p(5)
        assert collateral_at(flat, _p(5)) == _p(10)

    def test_zero_intercept(self):
        ramp = LinearCurveParameters(slope_numerator=1, slope_denominator=1, r0_numerator=0, r0_denominator=1)
        # R = b^2 / 2
        assert collateral_at(ramp, _p(4)) == _p(8)
        assert cumulative_sold_at(ramp, _p(8)) == _p(4)

    def test_overflow_surfaces_as_calculation_failure(self):
        with pytest.raises(CalculationFailure):
            collateral_at(RLY, PreciseNumber(2**255))


# ---------------------------------------------------------------------------
# Collateral in, bonded out
# ---------------------------------------------------------------------------

class TestSwapAToB:
    def test_first_buy(self):
        r = swap_a_to_b(RLY, collateral_balance=0, bonded_balance=500 * E8, amount_in=2400 * E8)
        assert r.direction == TradeDirection.A_TO_B
        assert r.amount_out == 40 * E8
        assert r.actual_amount_in == 2400 * E8
        assert not r.capped

    def test_second_buy_costs_more_per_token(self):
        r = swap_a_to_b(RLY, collateral_balance=2400 * E8, bonded_balance=460 * E8, amount_in=1500 * E8)
        assert r.amount_out == 20 * E8
        assert r.actual_amount_in == 1500 * E8

    def test_oversized_buy_capped_at_pool_balance(self):
        r = swap_a_to_b(RLY, collateral_balance=0, bonded_balance=500 * E8, amount_in=100_000 * E8)
        assert r.capped
        assert r.amount_out == 500 * E8
        assert r.actual_amount_in == 87_500 * E8

    def test_dust_rounds_to_zero_and_is_rejected(self):
        with pytest.raises(ZeroTradingTokens):
            swap_a_to_b(RLY, collateral_balance=0, bonded_balance=500 * E8, amount_in=1)

    def test_empty_pool_rejects(self):
        with pytest.raises(ZeroTradingTokens):
            swap_a_to_b(RLY, collateral_balance=87_500 * E8, bonded_balance=0, amount_in=1000 * E8)


# ---------------------------------------------------------------------------
# Bonded in, collateral out
# ---------------------------------------------------------------------------

class TestSwapBToA:
    def test_sell(self):
        r = swap_b_to_a(RLY, collateral_balance=3900 * E8, amount_in=30 * E8)
        assert r.direction == TradeDirection.B_TO_A
        assert r.amount_out == 2175 * E8
        assert r.actual_amount_in == 30 * E8
        assert not r.capped

    def test_oversized_sell_capped_at_cumulative_sold(self):
        r = swap_b_to_a(RLY, collateral_balance=1725 * E8, amount_in=50 * E8)
        assert r.capped
        assert r.actual_amount_in == 30 * E8
        assert r.amount_out == 1725 * E8

    def test_capped_sell_never_charges_more_than_was_sold(self):
        bought = swap_a_to_b(RLY, collateral_balance=0, bonded_balance=500 * E8, amount_in=51)
        assert bought.amount_out == 1
        # b_current is about 1.02 here, so only one whole token can be taken back.
        r = swap_b_to_a(RLY, collateral_balance=51, amount_in=2)
        assert r.capped
        assert r.actual_amount_in == 1
        assert r.amount_out == 51

    def test_sell_into_genesis_pool_rejected(self):
        with pytest.raises(ZeroTradingTokens):
            swap_b_to_a(RLY, collateral_balance=0, amount_in=1)


# ---------------------------------------------------------------------------
# Very small slope
# ---------------------------------------------------------------------------

class TestLowSlope:
    TAKI = LinearCurveParameters(
        slope_numerator=37,
        slope_denominator=1_400_000_000_000_000_000,
        r0_numerator=7,
        r0_denominator=2,
    )

    def test_single_unit_buy_rejected(self):
        with pytest.raises(ZeroTradingTokens):
            swap_a_to_b(self.TAKI, collateral_balance=0, bonded_balance=10**18, amount_in=1)

    def test_small_buy_priced_at_intercept(self):
        r = swap_a_to_b(self.TAKI, collateral_balance=0, bonded_balance=10**18, amount_in=1000)
        # 1000 / 3.5 = 285.7..., rounded down
        assert r.amount_out == 285
        assert r.actual_amount_in == 1000
