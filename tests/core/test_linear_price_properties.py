"""Property tests for the linear curve: rounding always favours the pool.

Runs only when Hypothesis is installed.
"""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from bondcurve.core.errors import ZeroTradingTokens
from bondcurve.core.linear_price import collateral_at, cumulative_sold_at, swap_a_to_b, swap_b_to_a
from bondcurve.core.precise_number import PreciseNumber
from bondcurve.core.types import LinearCurveParameters, TradeDirection
from bondcurve.state.pools import PoolSnapshot

E8 = 10**8

RLY = LinearCurveParameters(slope_numerator=1, slope_denominator=200_000_000, r0_numerator=50, r0_denominator=1)


@st.composite
def curve_params(draw) -> LinearCurveParameters:
    slope_num = draw(st.integers(min_value=0, max_value=1000))
    r0_num = draw(st.integers(min_value=1, max_value=1000))
    return LinearCurveParameters(
        slope_numerator=slope_num,
        slope_denominator=draw(st.integers(min_value=1, max_value=10**12)),
        r0_numerator=r0_num,
        r0_denominator=draw(st.integers(min_value=1, max_value=1000)),
    )


trade_step = st.tuples(
    st.sampled_from([TradeDirection.A_TO_B, TradeDirection.B_TO_A]),
    st.integers(min_value=1, max_value=200_000 * E8),
)


class TestInverseBrackets:
    @given(params=curve_params(), b=st.integers(min_value=0, max_value=10**12))
    @settings(max_examples=300, deadline=2000)
    def test_round_trip_rounds_in_requested_direction(self, params, b):
        pb = PreciseNumber.from_integer(b)
        down = cumulative_sold_at(params, collateral_at(params, pb), round_up=False)
        up = cumulative_sold_at(params, collateral_at(params, pb, round_up=True), round_up=True)
        assert down <= pb <= up

    @given(b=st.integers(min_value=0, max_value=10**12))
    @settings(max_examples=300, deadline=2000)
    def test_round_trip_is_tight_on_reference_curve(self, b):
        pb = PreciseNumber.from_integer(b)
        back = cumulative_sold_at(RLY, collateral_at(RLY, pb))
        assert abs(back.value - pb.value) <= 10**12


class TestSwapsFavourPool:
    @given(
        params=curve_params(),
        bonded=st.integers(min_value=1, max_value=10**15),
        amount_in=st.integers(min_value=1, max_value=10**15),
    )
    @settings(max_examples=300, deadline=2000)
    def test_buy_from_genesis(self, params, bonded, amount_in):
        try:
            r = swap_a_to_b(params, collateral_balance=0, bonded_balance=bonded, amount_in=amount_in)
        except ZeroTradingTokens:
            return
        assert 0 < r.actual_amount_in <= amount_in
        assert 0 < r.amount_out <= bonded
        sold_after = cumulative_sold_at(params, PreciseNumber.from_integer(r.actual_amount_in), round_up=True)
        assert sold_after >= PreciseNumber.from_integer(r.amount_out)

    @given(
        collateral=st.integers(min_value=0, max_value=10**15),
        a1=st.integers(min_value=1, max_value=10**14),
        delta=st.integers(min_value=0, max_value=10**14),
    )
    @settings(max_examples=300, deadline=2000)
    def test_buy_output_monotone_in_input(self, collateral, a1, delta):
        bonded = 10**18
        try:
            small = swap_a_to_b(RLY, collateral_balance=collateral, bonded_balance=bonded, amount_in=a1)
        except ZeroTradingTokens:
            return
        large = swap_a_to_b(RLY, collateral_balance=collateral, bonded_balance=bonded, amount_in=a1 + delta)
        assert large.amount_out >= small.amount_out

    @given(
        collateral=st.integers(min_value=0, max_value=10**15),
        amount_in=st.integers(min_value=1, max_value=10**15),
    )
    @settings(max_examples=300, deadline=2000)
    def test_sell_never_pays_more_than_collateral(self, collateral, amount_in):
        try:
            r = swap_b_to_a(RLY, collateral_balance=collateral, amount_in=amount_in)
        except ZeroTradingTokens:
            return
        assert 0 < r.amount_out <= collateral
        assert 0 < r.actual_amount_in <= amount_in
        sold_up = cumulative_sold_at(RLY, PreciseNumber.from_integer(collateral), round_up=True)
        assert PreciseNumber.from_integer(r.actual_amount_in) <= sold_up
        if r.capped:
            assert r.amount_out == collateral
            return
        before = cumulative_sold_at(RLY, PreciseNumber.from_integer(collateral))
        after = cumulative_sold_at(RLY, PreciseNumber.from_integer(collateral - r.amount_out), round_up=True)
        assert after.checked_add(PreciseNumber.from_integer(r.actual_amount_in)) >= before


class TestTradeSequences:
    @given(steps=st.lists(trade_step, min_size=1, max_size=25))
    @settings(max_examples=200, deadline=5000)
    def test_collateral_always_covers_outstanding_supply(self, steps):
        initial = 500 * E8
        pool = PoolSnapshot.create(RLY, initial)
        for direction, amount in steps:
            if direction is TradeDirection.B_TO_A:
                # A seller can only offer bonded tokens that are in circulation.
                amount = min(amount, initial - pool.bonded_balance)
                if amount == 0:
                    continue
            try:
                _, pool = pool.trade(direction, amount)
            except ZeroTradingTokens:
                continue
            outstanding = initial - pool.bonded_balance
            assert outstanding >= 0
            sold = cumulative_sold_at(RLY, PreciseNumber.from_integer(pool.collateral_balance), round_up=True)
            assert sold >= PreciseNumber.from_integer(outstanding)

    @given(
        prior=st.integers(min_value=0, max_value=10**13),
        amount_in=st.integers(min_value=1, max_value=10**12),
    )
    @settings(max_examples=500, deadline=2000)
    def test_buy_then_sell_back_is_never_profitable(self, prior, amount_in):
        pool = PoolSnapshot.create(RLY, 10**18)
        try:
            _, pool = pool.trade(TradeDirection.A_TO_B, prior)
        except ZeroTradingTokens:
            pass
        try:
            bought, after_buy = pool.trade(TradeDirection.A_TO_B, amount_in)
        except ZeroTradingTokens:
            return
        sold, after_sell = after_buy.trade(TradeDirection.B_TO_A, bought.amount_out)
        assert sold.actual_amount_in <= bought.amount_out
        assert sold.amount_out <= bought.actual_amount_in
        assert after_sell.collateral_balance >= pool.collateral_balance
        # The pool keeps at most the collateral worth of one bonded token, plus rounding.
        residue = after_sell.collateral_balance - pool.collateral_balance
        assert residue <= after_buy.spot_price().to_integer(round_up=True) + 2

    @given(
        r1=st.integers(min_value=0, max_value=10**13),
        delta=st.integers(min_value=0, max_value=10**13),
        amount_in=st.integers(min_value=1, max_value=10**12),
    )
    @settings(max_examples=500, deadline=2000)
    def test_later_buyers_get_no_more_for_the_same_input(self, r1, delta, amount_in):
        bonded = 10**18
        try:
            late = swap_a_to_b(RLY, collateral_balance=r1 + delta, bonded_balance=bonded, amount_in=amount_in)
        except ZeroTradingTokens:
            return
        early = swap_a_to_b(RLY, collateral_balance=r1, bonded_balance=bonded, amount_in=amount_in)
        assert early.amount_out >= late.amount_out
