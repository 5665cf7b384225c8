"""
Fixed-point precise arithmetic for the linear bonding curve.

A ``PreciseNumber`` is a non-negative rational stored as an integer scaled by
``ONE`` (10**18). The stored value is bounded to 256 bits; products and
scaled dividends may use a 512-bit intermediate before being reduced.

Design:
- Type: Fixed-Point Integer Arithmetic / Explicit Rounding
- Every operation either returns a valid PreciseNumber or raises
  ``CalculationFailure``; there is no wrapping and no saturation.
- Rounding direction is always chosen by the caller (``round_up``), default floor.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import CalculationFailure

ONE: int = 10**18
MAX_VALUE: int = 2**256 - 1
MAX_WIDE_VALUE: int = 2**512 - 1

# Newton iteration from a start above the root at most halves the error per step
# before quadratic convergence; 512-bit inputs settle well within this bound.
MAX_SQRT_ITERATIONS: int = 600


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _div_rounded(numerator: int, denominator: int, round_up: bool) -> int:
    quotient, remainder = divmod(numerator, denominator)
    if round_up and remainder:
        quotient += 1
    return quotient


def isqrt_newton(n: int) -> int:
    """
    Floor integer square root by Newton's method.

    The starting guess is a power of two not below sqrt(n), so the iterates
    decrease monotonically until the floor root is reached.
    """
    _require_int("n", n)
    if n < 0:
        raise CalculationFailure("square root of a negative value")
    if n < 2:
        return n
    x = 1 << ((n.bit_length() + 1) // 2)
    for _ in range(MAX_SQRT_ITERATIONS):
        y = (x + n // x) // 2
        if y >= x:
            return x
        x = y
    raise CalculationFailure("square root did not converge")


@dataclass(frozen=True, order=True)
class PreciseNumber:
    """Non-negative fixed-point number: ``value / ONE``."""

    value: int

    def __post_init__(self) -> None:
        _require_int("value", self.value)
        if self.value < 0:
            raise CalculationFailure(f"negative precise value: {self.value}")
        if self.value > MAX_VALUE:
            raise CalculationFailure("precise value exceeds 256 bits")

    # -- Constructors ---------------------------------------------------------

    @classmethod
    def zero(cls) -> "PreciseNumber":
        return cls(0)

    @classmethod
    def from_integer(cls, n: int) -> "PreciseNumber":
        """Build ``n`` at scale ONE."""
        _require_int("n", n)
        if n < 0:
            raise CalculationFailure(f"cannot represent negative amount {n}")
        return cls(n * ONE)

    @classmethod
    def from_fraction(cls, numerator: int, denominator: int, *, round_up: bool = False) -> "PreciseNumber":
        """Build ``numerator / denominator`` at scale ONE."""
        _require_int("numerator", numerator)
        _require_int("denominator", denominator)
        if denominator == 0:
            raise CalculationFailure("division by zero")
        if numerator < 0 or denominator < 0:
            raise CalculationFailure("fraction terms must be non-negative")
        scaled = numerator * ONE
        if scaled > MAX_VALUE:
            raise CalculationFailure("fraction numerator overflows the working width")
        return cls(_div_rounded(scaled, denominator, round_up))

    # -- Arithmetic -----------------------------------------------------------

    def checked_add(self, other: "PreciseNumber") -> "PreciseNumber":
        total = self.value + other.value
        if total > MAX_VALUE:
            raise CalculationFailure("addition overflow")
        return PreciseNumber(total)

    def checked_sub(self, other: "PreciseNumber") -> "PreciseNumber":
        if other.value > self.value:
            raise CalculationFailure("subtraction would go negative")
        return PreciseNumber(self.value - other.value)

    def checked_mul(self, other: "PreciseNumber", *, round_up: bool = False) -> "PreciseNumber":
        product = self.value * other.value
        if product > MAX_WIDE_VALUE:
            raise CalculationFailure("multiplication overflows the wide intermediate")
        result = _div_rounded(product, ONE, round_up)
        if result > MAX_VALUE:
            raise CalculationFailure("multiplication overflow")
        return PreciseNumber(result)

    def checked_div(self, other: "PreciseNumber", *, round_up: bool = False) -> "PreciseNumber":
        if other.value == 0:
            raise CalculationFailure("division by zero")
        scaled = self.value * ONE
        if scaled > MAX_WIDE_VALUE:
            raise CalculationFailure("division overflows the wide intermediate")
        result = _div_rounded(scaled, other.value, round_up)
        if result > MAX_VALUE:
            raise CalculationFailure("division overflow")
        return PreciseNumber(result)

    def sqrt(self, *, round_up: bool = False) -> "PreciseNumber":
        """
        Square root at scale ONE.

        Floor by default: ``result * result <= self`` always holds. With
        ``round_up`` the smallest representable value whose square is at least
        ``self`` is returned instead.
        """
        radicand = self.value * ONE
        root = isqrt_newton(radicand)
        if round_up and root * root < radicand:
            root += 1
        return PreciseNumber(root)

    # -- Conversions ----------------------------------------------------------

    def to_integer(self, *, round_up: bool = False) -> int:
        return _div_rounded(self.value, ONE, round_up)

    def floor(self) -> "PreciseNumber":
        return PreciseNumber((self.value // ONE) * ONE)

    def ceiling(self) -> "PreciseNumber":
        return PreciseNumber(_div_rounded(self.value, ONE, True) * ONE)

    def is_zero(self) -> bool:
        return self.value == 0

    def __str__(self) -> str:
        whole, frac = divmod(self.value, ONE)
        if frac == 0:
            return str(whole)
        return f"{whole}.{frac:018d}".rstrip("0")
