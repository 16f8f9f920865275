"""Executable contracts for the arithmetic library and the controller.

Each arithmetic operation is described as a collection of:
- preconditions: what operands must satisfy before the operation
- postconditions: what the output must satisfy given valid operands
- error conditions: what operands must cause specific exceptions
- algebraic properties: mathematical relationships that must hold

The contracts are machine-readable.  Validation tools iterate over them to
auto-generate conformance tests and search for counterexamples.

Layers
------
MagnitudeBounds     domain constraints (see bounds.py)
OperationContract   per-operation contract (pre/post/error/properties)
BranchSpec          every decision point that white-box tests must cover
CalculatorContract  the full contract for a configured calculator
build_contracts()   constructs a CalculatorContract for given bounds
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from bounds import DESK, MagnitudeBounds
from calculator import MAX_FACTORIAL
from errors import CalculatorOverflowError, DivideByZeroError, InvalidOperandError


# ---------------------------------------------------------------------------
# Contract building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Precondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]     # (*operands, result) -> bool


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]   # (*operands) -> bool
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]     # (calc, *values) -> bool


@dataclass(frozen=True)
class OperationContract:
    name: str
    arity: int
    preconditions: list[Precondition]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]

    def expected_error(self, *operands: float) -> type | None:
        """The exception the operands must raise, or None if they are valid."""
        for ec in self.error_conditions:
            if ec.trigger(*operands):
                return ec.exception
        return None


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which operation / helper this belongs to


@dataclass(frozen=True)
class CalculatorContract:
    """Complete contract for a configured calculator."""

    bounds: MagnitudeBounds
    operations: dict[str, OperationContract]
    branches: list[BranchSpec]

    @property
    def all_properties(self) -> list[tuple[str, AlgebraicProperty]]:
        out: list[tuple[str, AlgebraicProperty]] = []
        for name, op in self.operations.items():
            for prop in op.properties:
                out.append((name, prop))
        return out

    def of_arity(self, arity: int) -> dict[str, OperationContract]:
        return {n: op for n, op in self.operations.items() if op.arity == arity}


# ---------------------------------------------------------------------------
# Helpers used inside the contract predicates
# ---------------------------------------------------------------------------

def raw_pow(base: float, exponent: float) -> float:
    """``math.pow`` that reports domain errors as NaN and overflow as inf."""
    try:
        return math.pow(base, exponent)
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf


def close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-12)


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def _is_integral(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x)


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contracts(bounds: MagnitudeBounds = DESK) -> CalculatorContract:
    """Construct the full calculator contract for the given bounds."""

    finite_inputs = Precondition(
        "inputs_finite", "Every operand is finite", _finite,
    )
    result_in_bounds = Postcondition(
        "result_in_bounds", "Result is finite and within the magnitude bound",
        lambda *args: bounds.contains(args[-1]),
    )
    invalid_input = ErrorCondition(
        "invalid_operand", "InvalidOperandError for NaN or infinite operands",
        lambda *args: not _finite(*args),
        InvalidOperandError,
    )

    def overflow(raw: Callable[..., float], description: str) -> ErrorCondition:
        return ErrorCondition(
            "overflow",
            description,
            lambda *args: _finite(*args) and not bounds.contains(raw(*args)),
            CalculatorOverflowError,
        )

    # ------------------------------------------------------------------ add
    add = OperationContract(
        name="add",
        arity=2,
        preconditions=[finite_inputs],
        postconditions=[
            result_in_bounds,
            Postcondition("result_correct", "Result equals a + b",
                          lambda a, b, r: r == a + b),
        ],
        error_conditions=[
            invalid_input,
            overflow(lambda a, b: a + b, "Overflow when the sum leaves the bound"),
        ],
        properties=[
            AlgebraicProperty(
                "commutativity", "add(a, b) == add(b, a)", 2,
                lambda calc, a, b: calc.add(a, b) == calc.add(b, a),
            ),
            AlgebraicProperty(
                "identity", "add(a, 0) == a", 1,
                lambda calc, a: calc.add(a, 0.0) == a,
            ),
        ],
    )

    # ------------------------------------------------------------- subtract
    subtract = OperationContract(
        name="subtract",
        arity=2,
        preconditions=[finite_inputs],
        postconditions=[
            result_in_bounds,
            Postcondition("result_correct", "Result equals a - b",
                          lambda a, b, r: r == a - b),
        ],
        error_conditions=[
            invalid_input,
            overflow(lambda a, b: a - b, "Overflow when the difference leaves the bound"),
        ],
        properties=[
            AlgebraicProperty(
                "self_inverse", "subtract(a, a) == 0", 1,
                lambda calc, a: calc.subtract(a, a) == 0,
            ),
            AlgebraicProperty(
                "anti_commutativity", "subtract(a, b) == -subtract(b, a)", 2,
                lambda calc, a, b: calc.subtract(a, b) == -calc.subtract(b, a),
            ),
        ],
    )

    # ------------------------------------------------------------- multiply
    multiply = OperationContract(
        name="multiply",
        arity=2,
        preconditions=[finite_inputs],
        postconditions=[
            result_in_bounds,
            Postcondition("result_correct", "Result equals a * b",
                          lambda a, b, r: r == a * b),
        ],
        error_conditions=[
            invalid_input,
            overflow(lambda a, b: a * b, "Overflow when the product leaves the bound"),
        ],
        properties=[
            AlgebraicProperty(
                "commutativity", "multiply(a, b) == multiply(b, a)", 2,
                lambda calc, a, b: calc.multiply(a, b) == calc.multiply(b, a),
            ),
            AlgebraicProperty(
                "identity", "multiply(a, 1) == a", 1,
                lambda calc, a: calc.multiply(a, 1.0) == a,
            ),
            AlgebraicProperty(
                "zero", "multiply(a, 0) == 0", 1,
                lambda calc, a: calc.multiply(a, 0.0) == 0,
            ),
        ],
    )

    # --------------------------------------------------------------- divide
    divide = OperationContract(
        name="divide",
        arity=2,
        preconditions=[finite_inputs],
        postconditions=[
            result_in_bounds,
            Postcondition("result_correct", "Result equals a / b",
                          lambda a, b, r: r == a / b),
        ],
        error_conditions=[
            invalid_input,
            ErrorCondition(
                "divide_by_zero",
                "DivideByZeroError when |b| is below epsilon",
                lambda a, b: _finite(a, b) and bounds.is_negligible(b),
                DivideByZeroError,
            ),
            overflow(
                lambda a, b: a / b if not bounds.is_negligible(b) else 0.0,
                "Overflow when the quotient leaves the bound",
            ),
        ],
        properties=[
            AlgebraicProperty(
                "identity", "divide(a, 1) == a", 1,
                lambda calc, a: calc.divide(a, 1.0) == a,
            ),
            AlgebraicProperty(
                "self", "divide(a, a) == 1 for non-negligible a", 1,
                lambda calc, a: bounds.is_negligible(a) or calc.divide(a, a) == 1,
            ),
        ],
    )

    # ---------------------------------------------------------------- power
    power = OperationContract(
        name="power",
        arity=2,
        preconditions=[finite_inputs],
        postconditions=[
            result_in_bounds,
            Postcondition("result_correct", "Result equals math.pow(a, b)",
                          lambda a, b, r: r == math.pow(a, b)),
        ],
        error_conditions=[
            invalid_input,
            ErrorCondition(
                "zero_negative_exponent",
                "InvalidOperandError for 0 raised to a negative power",
                lambda a, b: _finite(a, b) and a == 0 and b < 0,
                InvalidOperandError,
            ),
            overflow(
                lambda a, b: raw_pow(a, b) if not (a == 0 and b < 0) else 0.0,
                "Overflow when the power is NaN, infinite or leaves the bound",
            ),
        ],
        properties=[
            AlgebraicProperty(
                "exponent_zero", "power(a, 0) == 1", 1,
                lambda calc, a: calc.power(a, 0.0) == 1,
            ),
            AlgebraicProperty(
                "exponent_one", "power(a, 1) == a", 1,
                lambda calc, a: calc.power(a, 1.0) == a,
            ),
        ],
    )

    # ----------------------------------------------------------- percentage
    percentage = OperationContract(
        name="percentage",
        arity=1,
        preconditions=[finite_inputs],
        postconditions=[
            result_in_bounds,
            Postcondition("result_correct", "Result equals x / 100",
                          lambda x, r: r == x / 100.0),
        ],
        error_conditions=[
            invalid_input,
            overflow(lambda x: x / 100.0, "Overflow when x / 100 leaves the bound"),
        ],
        properties=[
            AlgebraicProperty(
                "scale", "percentage(x) * 100 ~= x", 1,
                lambda calc, x: close(calc.percentage(x) * 100.0, x),
            ),
        ],
    )

    # ---------------------------------------------------------- square_root
    square_root = OperationContract(
        name="square_root",
        arity=1,
        preconditions=[finite_inputs, Precondition("non_negative", "x >= 0", lambda x: x >= 0)],
        postconditions=[
            result_in_bounds,
            Postcondition("non_negative", "Result is >= 0", lambda x, r: r >= 0),
            Postcondition("result_correct", "Result equals math.sqrt(x)",
                          lambda x, r: r == math.sqrt(x)),
        ],
        error_conditions=[
            invalid_input,
            ErrorCondition(
                "negative", "InvalidOperandError for x < 0",
                lambda x: _finite(x) and x < 0, InvalidOperandError,
            ),
            overflow(
                lambda x: math.sqrt(x) if x >= 0 else 0.0,
                "Overflow when the root leaves the bound",
            ),
        ],
        properties=[
            AlgebraicProperty(
                "square_inverse", "square_root(square(x)) ~= |x|", 1,
                lambda calc, x: close(calc.square_root(calc.square(x)), abs(x)),
            ),
        ],
    )

    # ----------------------------------------------------------- reciprocal
    reciprocal = OperationContract(
        name="reciprocal",
        arity=1,
        preconditions=[finite_inputs],
        postconditions=[
            result_in_bounds,
            Postcondition("result_correct", "Result equals 1 / x",
                          lambda x, r: r == 1.0 / x),
        ],
        error_conditions=[
            invalid_input,
            ErrorCondition(
                "divide_by_zero", "DivideByZeroError when |x| is below epsilon",
                lambda x: _finite(x) and bounds.is_negligible(x), DivideByZeroError,
            ),
            overflow(
                lambda x: 1.0 / x if not bounds.is_negligible(x) else 0.0,
                "Overflow when 1/x leaves the bound",
            ),
        ],
        properties=[
            AlgebraicProperty(
                "involution", "reciprocal(reciprocal(x)) ~= x", 1,
                lambda calc, x: close(calc.reciprocal(calc.reciprocal(x)), x),
            ),
        ],
    )

    # --------------------------------------------------------------- square
    square = OperationContract(
        name="square",
        arity=1,
        preconditions=[finite_inputs],
        postconditions=[
            result_in_bounds,
            Postcondition("result_correct", "Result equals x * x",
                          lambda x, r: r == x * x),
        ],
        error_conditions=[
            invalid_input,
            overflow(lambda x: x * x, "Overflow when x * x leaves the bound"),
        ],
        properties=[
            AlgebraicProperty(
                "matches_multiply", "square(x) == multiply(x, x)", 1,
                lambda calc, x: calc.square(x) == calc.multiply(x, x),
            ),
        ],
    )

    # ------------------------------------------------------------- absolute
    absolute = OperationContract(
        name="absolute",
        arity=1,
        preconditions=[finite_inputs],
        postconditions=[
            Postcondition("non_negative", "Result is >= 0", lambda x, r: r >= 0),
            Postcondition("result_correct", "Result equals |x|",
                          lambda x, r: r == abs(x)),
        ],
        error_conditions=[
            invalid_input,
            overflow(abs, "Overflow when |x| leaves the bound"),
        ],
        properties=[
            AlgebraicProperty(
                "idempotent", "absolute(absolute(x)) == absolute(x)", 1,
                lambda calc, x: calc.absolute(calc.absolute(x)) == calc.absolute(x),
            ),
        ],
    )

    # --------------------------------------------------------------- negate
    negate = OperationContract(
        name="negate",
        arity=1,
        preconditions=[finite_inputs],
        postconditions=[
            Postcondition("result_correct", "Result equals -x",
                          lambda x, r: r == -x),
        ],
        error_conditions=[
            invalid_input,
            overflow(lambda x: -x, "Overflow when -x leaves the bound"),
        ],
        properties=[
            AlgebraicProperty(
                "involution", "negate(negate(x)) == x", 1,
                lambda calc, x: calc.negate(calc.negate(x)) == x,
            ),
        ],
    )

    # ------------------------------------------------------------ factorial
    factorial = OperationContract(
        name="factorial",
        arity=1,
        preconditions=[
            finite_inputs,
            Precondition("natural", "x is an integer in [0, 20]",
                         lambda x: _is_integral(x) and 0 <= x <= MAX_FACTORIAL),
        ],
        postconditions=[
            Postcondition("result_correct", "Result equals math.factorial(x)",
                          lambda x, r: r == math.factorial(int(x))),
        ],
        error_conditions=[
            invalid_input,
            ErrorCondition(
                "negative", "InvalidOperandError for x < 0",
                lambda x: _finite(x) and x < 0, InvalidOperandError,
            ),
            ErrorCondition(
                "fraction", "InvalidOperandError for non-integral x",
                lambda x: _finite(x) and x >= 0 and not _is_integral(x),
                InvalidOperandError,
            ),
            ErrorCondition(
                "too_large", "CalculatorOverflowError for x > 20",
                lambda x: _is_integral(x) and x > MAX_FACTORIAL,
                CalculatorOverflowError,
            ),
        ],
        properties=[
            AlgebraicProperty(
                "recurrence", "factorial(n) == n * factorial(n - 1) for 1 <= n <= 20", 1,
                lambda calc, n: (
                    calc.factorial(n) == n * calc.factorial(n - 1)
                    if _is_integral(n) and 1 <= n <= MAX_FACTORIAL else True
                ),
            ),
        ],
    )

    return CalculatorContract(
        bounds=bounds,
        operations={
            op.name: op
            for op in (
                add, subtract, multiply, divide, power,
                percentage, square_root, reciprocal, square,
                absolute, negate, factorial,
            )
        },
        branches=ARITHMETIC_BRANCHES + CONTROLLER_BRANCHES,
    )


# ---------------------------------------------------------------------------
# Branch maps
# ---------------------------------------------------------------------------

ARITHMETIC_BRANCHES = [
    # Operand and result validation (bounds.py)
    BranchSpec("INPUT-NAN", "NaN operand rejected", "isnan(v)", "validation"),
    BranchSpec("INPUT-INF", "Infinite operand rejected", "isinf(v)", "validation"),
    BranchSpec("RESULT-OK", "Result within bounds", "|raw| <= limit", "validation"),
    BranchSpec("RESULT-NAN", "NaN result rejected", "isnan(raw)", "validation"),
    BranchSpec("RESULT-INF", "Infinite result rejected", "isinf(raw)", "validation"),
    BranchSpec("RESULT-TOO-LARGE", "Result beyond the bound rejected",
               "|raw| > limit", "validation"),
    # Operation specifics (calculator.py)
    BranchSpec("DIV-ZERO", "Divisor within epsilon of zero", "|b| < epsilon", "divide"),
    BranchSpec("DIV-NORMAL", "Normal division", "|b| >= epsilon", "divide"),
    BranchSpec("POW-ZERO-NEGATIVE", "Zero to a negative power",
               "base == 0 and exponent < 0", "power"),
    BranchSpec("POW-DOMAIN", "No real result", "base < 0 and exponent fractional", "power"),
    BranchSpec("POW-OVERFLOW", "Power overflows a float", "math.pow raises OverflowError", "power"),
    BranchSpec("POW-NORMAL", "Normal power", "otherwise", "power"),
    BranchSpec("SQRT-NEGATIVE", "Negative radicand", "x < 0", "square_root"),
    BranchSpec("SQRT-NORMAL", "Normal square root", "x >= 0", "square_root"),
    BranchSpec("RECIP-ZERO", "Reciprocal of (near) zero", "|x| < epsilon", "reciprocal"),
    BranchSpec("RECIP-NORMAL", "Normal reciprocal", "|x| >= epsilon", "reciprocal"),
    BranchSpec("FACT-NEGATIVE", "Negative factorial argument", "x < 0", "factorial"),
    BranchSpec("FACT-FRACTION", "Non-integral factorial argument", "x != floor(x)", "factorial"),
    BranchSpec("FACT-TOO-LARGE", "Factorial argument above 20", "x > 20", "factorial"),
    BranchSpec("FACT-NORMAL", "Iterative factorial", "0 <= x <= 20, integral", "factorial"),
]

CONTROLLER_BRANCHES = [
    BranchSpec("ERR-LOCKED", "Input ignored while in error",
               "has_error and event not in (CLEAR, CLEAR_ENTRY)", "controller"),
    BranchSpec("ERR-CAUGHT", "Arithmetic failure becomes the error state",
               "CalculatorError raised during an operator", "controller"),
    BranchSpec("DIGIT-REPLACE", "Digit starts a new entry", "waiting_for_operand", "digit"),
    BranchSpec("DIGIT-LEADING-ZERO", "Digit replaces a bare zero",
               "not waiting and display == '0'", "digit"),
    BranchSpec("DIGIT-APPEND", "Digit extends the entry",
               "not waiting and display != '0'", "digit"),
    BranchSpec("DOT-START", "Decimal point starts '0.'", "waiting_for_operand", "decimal"),
    BranchSpec("DOT-APPEND", "Decimal point appended", "'.' not in display", "decimal"),
    BranchSpec("DOT-IGNORED", "Second decimal point ignored", "'.' in display", "decimal"),
    BranchSpec("BIN-CHAIN", "Pending operation evaluated before queuing",
               "pending and not waiting", "binary"),
    BranchSpec("BIN-QUEUE", "Operand recorded and operator queued",
               "no pending or waiting", "binary"),
    BranchSpec("EQ-NOOP", "Equals with nothing to evaluate",
               "pending is None or waiting", "equals"),
    BranchSpec("EQ-EVAL", "Equals evaluates the pending operation",
               "pending and not waiting", "equals"),
    BranchSpec("BS-NOOP", "Backspace while waiting", "waiting_for_operand", "backspace"),
    BranchSpec("BS-TRIM", "Backspace drops the last character",
               "len(display) > 1 and trimmed != '-'", "backspace"),
    BranchSpec("BS-SIGN", "Backspace leaves a bare sign", "trimmed == '-'", "backspace"),
    BranchSpec("BS-RESET", "Backspace on a single character", "len(display) == 1", "backspace"),
]
