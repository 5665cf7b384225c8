"""
Fee schedule attached to a swap pool.

The linear curve uses the pool's collateral balance as the sole witness of
cumulative volume sold, so any fee that leaves value in (or takes value out
of) the pool would break ``R_current == R(b_current)``. The schedule is kept
so pools carry the same shape as other curve families, but every numerator
must be zero.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from .errors import FeesNotAllowedForCurve


@dataclass(frozen=True)
class Fees:
    trade_fee_numerator: int = 0
    trade_fee_denominator: int = 0
    owner_trade_fee_numerator: int = 0
    owner_trade_fee_denominator: int = 0
    owner_withdraw_fee_numerator: int = 0
    owner_withdraw_fee_denominator: int = 0
    host_fee_numerator: int = 0
    host_fee_denominator: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{f.name} must be an int")
            if v < 0:
                raise ValueError(f"{f.name} must be non-negative: {v}")

    def charged_fees(self) -> tuple[str, ...]:
        """Names of the fee numerators that are non-zero."""
        return tuple(
            f.name for f in fields(self) if f.name.endswith("_numerator") and getattr(self, f.name) != 0
        )

    def is_zero(self) -> bool:
        return not self.charged_fees()


def require_zero_fees(fees: Fees) -> None:
    """Raise ``FeesNotAllowedForCurve`` unless every fee numerator is zero."""
    charged = fees.charged_fees()
    if charged:
        raise FeesNotAllowedForCurve(f"linear curve does not support fees: {', '.join(charged)}")
