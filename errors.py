"""Error taxonomy for the calculator core.

Arithmetic failures derive from ``CalculatorError`` and are expected: the
controller downgrades them to the sticky ``"Error"`` display.  Each also
subclasses the matching builtin so callers outside the controller can
catch them the usual way.

``InvalidDisplayStateError`` sits outside that family.  Only the
controller writes the display, so text that does not parse back is a bug
and propagates instead of becoming ``"Error"``.
"""
from __future__ import annotations


class CalculatorError(ArithmeticError):
    """Base class for arithmetic failures raised by the calculator."""


class InvalidOperandError(CalculatorError, ValueError):
    """NaN/infinite input, or an operand outside the operation's domain."""


class DivideByZeroError(CalculatorError, ZeroDivisionError):
    """Divisor (or reciprocal argument) within epsilon of zero."""


class CalculatorOverflowError(CalculatorError, OverflowError):
    """Result is NaN, infinite, or beyond the magnitude bound."""


class InvalidDisplayStateError(RuntimeError):
    """The display text is not a numeral the controller could have written."""

    def __init__(self, display: str) -> None:
        self.display = display
        super().__init__(f"Invalid display value: {display!r}")
