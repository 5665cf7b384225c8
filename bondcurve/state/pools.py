"""
Pool snapshot for the linear bonding curve.

A ``PoolSnapshot`` pairs an initialized curve with the two token balances a
ledger would hold for it. Snapshots are immutable: ``trade`` and ``apply``
return the next snapshot and leave the current one untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from ..core import curve_state
from ..core.curve_state import CurveState
from ..core.errors import CalculationFailure
from ..core.fees import Fees
from ..core.precise_number import PreciseNumber
from ..core.types import U64_MAX, Amount, LinearCurveParameters, TradeDirection, TradeResult
from .curves import compute_curve_id, curve_to_dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolSnapshot:
    """
    Balances of a linear curve pool at one point in time.

    Attributes:
        curve: Initialized curve (parameters and fee schedule)
        collateral_balance: Token A held by the pool
        bonded_balance: Token B held by the pool
    """

    curve: CurveState
    collateral_balance: Amount
    bonded_balance: Amount

    def __post_init__(self) -> None:
        for name in ("collateral_balance", "bonded_balance"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if not (0 <= v <= U64_MAX):
                raise CalculationFailure(f"{name} must be in [0, {U64_MAX}]: {v}")

    @classmethod
    def create(
        cls,
        params: LinearCurveParameters,
        bonded_balance: Amount,
        *,
        fees: Optional[Fees] = None,
    ) -> "PoolSnapshot":
        """Genesis pool: zero collateral and ``bonded_balance`` tokens for sale."""
        curve = curve_state.initialize(
            params.slope_numerator,
            params.slope_denominator,
            params.r0_numerator,
            params.r0_denominator,
            0,
            bonded_balance,
            fees=fees,
        )
        return cls(curve=curve, collateral_balance=0, bonded_balance=bonded_balance)

    @property
    def curve_id(self) -> str:
        return compute_curve_id(self.curve.params)

    def trade(
        self,
        direction: TradeDirection,
        amount_in: Amount,
        minimum_amount_out: Amount = 0,
    ) -> Tuple[TradeResult, "PoolSnapshot"]:
        result = curve_state.trade(
            self.curve,
            direction,
            self.collateral_balance,
            self.bonded_balance,
            amount_in,
            minimum_amount_out,
        )
        return result, self.apply(result)

    def apply(self, result: TradeResult) -> "PoolSnapshot":
        """Move ``actual_amount_in`` into the pool and ``amount_out`` out of it."""
        if result.direction is TradeDirection.A_TO_B:
            collateral = self.collateral_balance + result.actual_amount_in
            bonded = self.bonded_balance - result.amount_out
        else:
            collateral = self.collateral_balance - result.amount_out
            bonded = self.bonded_balance + result.actual_amount_in
        if collateral < 0 or bonded < 0:
            raise CalculationFailure(
                f"trade result drains the pool below zero: collateral={collateral} bonded={bonded}"
            )
        nxt = replace(self, collateral_balance=collateral, bonded_balance=bonded)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "pool %s after %s: collateral=%d bonded=%d",
                self.curve_id[:10],
                result.direction.value,
                nxt.collateral_balance,
                nxt.bonded_balance,
            )
        return nxt

    def cumulative_sold(self) -> PreciseNumber:
        return curve_state.cumulative_sold(self.curve, self.collateral_balance)

    def spot_price(self) -> PreciseNumber:
        return curve_state.spot_price(self.curve, self.collateral_balance)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "curve_id": self.curve_id,
            "curve": curve_to_dict(self.curve.params),
            "collateral_balance": self.collateral_balance,
            "bonded_balance": self.bonded_balance,
            "cumulative_sold": str(self.cumulative_sold()),
        }
