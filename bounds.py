"""
Magnitude bounds for the arithmetic library.

Bounds define the domain within which a result is considered displayable.
Every operation checks its operands against the bounds before computing
and checks its result afterwards; anything outside is rejected with one of
the errors in ``errors``.

Unlike an integer domain there is no clamping or wrapping here: a value
either fits or the operation fails.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from errors import CalculatorOverflowError, InvalidOperandError


@dataclass(frozen=True)
class MagnitudeBounds:
    """
    A symmetric float domain [-limit, limit] plus a zero tolerance.

    ``epsilon`` is the distance from zero below which a divisor is treated
    as zero.
    """

    limit: float = 1e15
    epsilon: float = 1e-10

    def __post_init__(self):
        if not (math.isfinite(self.limit) and self.limit > 0):
            raise ValueError(f"limit ({self.limit}) must be a positive finite number")
        if not (0 <= self.epsilon < self.limit):
            raise ValueError(f"epsilon ({self.epsilon}) must be in [0, limit)")

    def contains(self, value: float) -> bool:
        return math.isfinite(value) and abs(value) <= self.limit

    def is_negligible(self, value: float) -> bool:
        """True when ``value`` is close enough to zero to divide by."""
        return abs(value) < self.epsilon

    def check_operands(self, *values: float) -> None:
        """Reject NaN and infinite operands.

        Branches: INPUT-NAN, INPUT-INF
        """
        for v in values:
            if math.isnan(v):                                     # INPUT-NAN
                raise InvalidOperandError("Input cannot be NaN")
            if math.isinf(v):                                     # INPUT-INF
                raise InvalidOperandError("Input cannot be infinite")

    def check_result(self, raw: float, label: str) -> float:
        """Return ``raw`` unchanged if it is displayable, else raise.

        Branches: RESULT-OK, RESULT-NAN, RESULT-INF, RESULT-TOO-LARGE
        """
        if math.isnan(raw):                                       # RESULT-NAN
            raise CalculatorOverflowError(f"{label} - result is NaN")
        if math.isinf(raw):                                       # RESULT-INF
            raise CalculatorOverflowError(f"{label} - result is infinite")
        if abs(raw) > self.limit:                                 # RESULT-TOO-LARGE
            raise CalculatorOverflowError(f"{label} - result too large")
        return raw                                                # RESULT-OK


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

DESK = MagnitudeBounds()

# Narrow bounds useful for exercising overflow with small operands
TINY = MagnitudeBounds(limit=1e3)
