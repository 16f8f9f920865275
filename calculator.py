"""Stateless arithmetic library.

Every operation validates its operands, performs the arithmetic, and
validates the result against the configured magnitude bounds before
returning.  Decision branches are annotated with their branch-IDs (see
contracts.py BranchSpec) so white-box tests can trace coverage back to
the contracts.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from bounds import DESK, MagnitudeBounds
from errors import CalculatorOverflowError, DivideByZeroError, InvalidOperandError

MAX_FACTORIAL = 20


@dataclass(frozen=True)
class Calculator:
    bounds: MagnitudeBounds = DESK

    # -- binary operations ----------------------------------------------------

    def add(self, a: float, b: float) -> float:
        self.bounds.check_operands(a, b)
        return self.bounds.check_result(a + b, "Addition overflow")

    def subtract(self, a: float, b: float) -> float:
        self.bounds.check_operands(a, b)
        return self.bounds.check_result(a - b, "Subtraction overflow")

    def multiply(self, a: float, b: float) -> float:
        self.bounds.check_operands(a, b)
        return self.bounds.check_result(a * b, "Multiplication overflow")

    def divide(self, a: float, b: float) -> float:
        """Division with a zero tolerance of ``bounds.epsilon``.

        Branches: DIV-ZERO, DIV-NORMAL
        """
        self.bounds.check_operands(a, b)

        if self.bounds.is_negligible(b):                          # DIV-ZERO
            raise DivideByZeroError("Division by zero")

        return self.bounds.check_result(a / b, "Division overflow")  # DIV-NORMAL

    def power(self, base: float, exponent: float) -> float:
        """Raise ``base`` to ``exponent``.

        Branches: POW-ZERO-NEGATIVE, POW-DOMAIN, POW-OVERFLOW, POW-NORMAL
        """
        self.bounds.check_operands(base, exponent)

        if base == 0 and exponent < 0:                            # POW-ZERO-NEGATIVE
            raise InvalidOperandError("Zero cannot be raised to a negative power")

        try:
            raw = math.pow(base, exponent)
        except ValueError:                                        # POW-DOMAIN
            # negative base with a fractional exponent has no real result
            raw = math.nan
        except OverflowError:                                     # POW-OVERFLOW
            raw = math.inf

        return self.bounds.check_result(raw, "Power calculation overflow")  # POW-NORMAL

    # -- unary operations -----------------------------------------------------

    def percentage(self, x: float) -> float:
        self.bounds.check_operands(x)
        return self.bounds.check_result(x / 100.0, "Percentage overflow")

    def square_root(self, x: float) -> float:
        """Branches: SQRT-NEGATIVE, SQRT-NORMAL"""
        self.bounds.check_operands(x)

        if x < 0:                                                 # SQRT-NEGATIVE
            raise InvalidOperandError("Square root of negative number")

        return self.bounds.check_result(math.sqrt(x), "Square root calculation error")

    def reciprocal(self, x: float) -> float:
        """Branches: RECIP-ZERO, RECIP-NORMAL"""
        self.bounds.check_operands(x)

        if self.bounds.is_negligible(x):                          # RECIP-ZERO
            raise DivideByZeroError("Reciprocal of zero")

        return self.bounds.check_result(1.0 / x, "Reciprocal calculation overflow")

    def square(self, x: float) -> float:
        self.bounds.check_operands(x)
        return self.bounds.check_result(x * x, "Square calculation overflow")

    def absolute(self, x: float) -> float:
        self.bounds.check_operands(x)
        return self.bounds.check_result(abs(x), "Absolute value overflow")

    def negate(self, x: float) -> float:
        self.bounds.check_operands(x)
        return self.bounds.check_result(-x, "Negation overflow")

    def factorial(self, x: float) -> float:
        """n! by iterative integer accumulation, for integral 0 <= n <= 20.

        20! is roughly 2.4e18, past the magnitude bound, so the result is
        returned without the bound check.  It is still exact: every n! up
        to 20 is representable as a float.

        Branches: FACT-NEGATIVE, FACT-FRACTION, FACT-TOO-LARGE, FACT-NORMAL
        """
        self.bounds.check_operands(x)

        if x < 0:                                                 # FACT-NEGATIVE
            raise InvalidOperandError("Factorial of negative number is undefined")
        if x != math.floor(x):                                    # FACT-FRACTION
            raise InvalidOperandError("Factorial is only defined for integers")
        if x > MAX_FACTORIAL:                                     # FACT-TOO-LARGE
            raise CalculatorOverflowError(
                f"Factorial too large (maximum: {MAX_FACTORIAL}!)"
            )

        result = 1                                                # FACT-NORMAL
        for i in range(2, int(x) + 1):
            result *= i
        return float(result)
