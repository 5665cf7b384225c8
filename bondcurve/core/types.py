"""Data types for the linear bonding curve.

All types are frozen dataclasses (immutable).

Units/conventions:
- Token amounts are unsigned 64-bit integers in the smallest unit of each asset.
- Curve parameters are kept as unreduced ``numerator / denominator`` pairs.
- Token A is the collateral asset, token B the bonded asset.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from .errors import InvalidCurveState

Amount = int  # Non-negative integer, bounded by U64_MAX at the boundary

U64_MAX: int = 2**64 - 1


@unique
class TradeDirection(Enum):
    """Which side of the pool the caller pays into."""

    A_TO_B = "a_to_b"  # spend collateral, receive bonded
    B_TO_A = "b_to_a"  # spend bonded, receive collateral


@dataclass(frozen=True)
class LinearCurveParameters:
    """
    ``price(b) = slope * b + r0`` with both terms stored as rationals.

    ``b`` is the cumulative amount of bonded token ever sold out of the pool.
    """

    slope_numerator: int
    slope_denominator: int
    r0_numerator: int
    r0_denominator: int

    def __post_init__(self) -> None:
        for name, v in (
            ("slope_numerator", self.slope_numerator),
            ("slope_denominator", self.slope_denominator),
            ("r0_numerator", self.r0_numerator),
            ("r0_denominator", self.r0_denominator),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise InvalidCurveState(f"{name} must be an int")
            if not (0 <= v <= U64_MAX):
                raise InvalidCurveState(f"{name} must be in [0, {U64_MAX}]: {v}")
        if self.slope_denominator == 0:
            raise InvalidCurveState("slope_denominator must be non-zero")
        if self.r0_denominator == 0:
            raise InvalidCurveState("r0_denominator must be non-zero")
        if self.slope_numerator == 0 and self.r0_numerator == 0:
            raise InvalidCurveState("slope and r0 cannot both be zero")


@dataclass(frozen=True)
class TradeResult:
    """Outcome of a successful trade, in smallest token units."""

    direction: TradeDirection
    actual_amount_in: Amount
    amount_out: Amount
    capped: bool = False


@dataclass(frozen=True)
class TradeOutcome:
    """Result record returned by ``try_trade``."""

    accepted: bool
    result: TradeResult | None = None
    rejection: str | None = None
    code: str | None = None
