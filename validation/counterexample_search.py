"""Counterexample search over a grid of awkward operands.

This module runs independently of the test suite.  It sweeps a fixed grid
of awkward operands (zero, values straddling epsilon and the magnitude
bound, factorial limits, NaN and infinities) and searches for:

1. Postcondition violations: valid operands where the implementation
   doesn't match the contract's expected output.
2. Error condition violations: operands that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some
   operand combination.
4. Display round-trip violations: fixed-point results that do not parse
   back to within 1e-10 of the original.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import itertools
import math
import sys
from dataclasses import dataclass, field

from bounds import DESK, TINY, MagnitudeBounds
from calculator import Calculator
from contracts import CalculatorContract, build_contracts
from errors import CalculatorError
from formatter import format_result, parse_display, uses_scientific


_BASE_VALUES = [
    0.0, 1e-11, 1e-10, 1e-5, 0.1, 0.5, 1.0, 2.0, 3.5, 7.0,
    20.0, 21.0, 1e3, 1e7, 1e10, 1e15, 2e15,
]

SAMPLE_VALUES: list[float] = (
    sorted({v for b in _BASE_VALUES for v in (b, -b)})
    + [math.nan, math.inf, -math.inf]
)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found.")
        return "\n".join(lines)


def _operand_tuples(arity: int):
    return itertools.product(SAMPLE_VALUES, repeat=arity)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_postcondition_violations(
    calc: Calculator,
    contract: CalculatorContract,
) -> tuple[list[Counterexample], int]:
    """Verify postconditions for every valid operand tuple on the grid."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_contract in contract.operations.items():
        op = getattr(calc, op_name)
        for args in _operand_tuples(op_contract.arity):
            checks += 1
            if op_contract.expected_error(*args) is not None:
                continue

            try:
                result = op(*args)
            except Exception as e:
                cxs.append(Counterexample(
                    category="unexpected_error",
                    operation=op_name,
                    inputs=args,
                    expected="no error",
                    actual=f"{type(e).__name__}: {e}",
                    description="Operation raised an unexpected exception",
                ))
                continue

            for post in op_contract.postconditions:
                if not post.check(*args, result):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=op_name,
                        inputs=args,
                        expected=post.description,
                        actual=f"result={result}",
                        description=f"Postcondition '{post.name}' violated",
                    ))

    return cxs, checks


def search_error_condition_violations(
    calc: Calculator,
    contract: CalculatorContract,
) -> tuple[list[Counterexample], int]:
    """Verify every triggered error condition raises the right exception."""
    cxs: list[Counterexample] = []
    checks = 0

    for op_name, op_contract in contract.operations.items():
        op = getattr(calc, op_name)
        for args in _operand_tuples(op_contract.arity):
            expected = op_contract.expected_error(*args)
            if expected is None:
                continue
            checks += 1
            try:
                result = op(*args)
                cxs.append(Counterexample(
                    category="missing_error",
                    operation=op_name,
                    inputs=args,
                    expected=expected.__name__,
                    actual=f"result={result}",
                    description="Error condition should have triggered but didn't",
                ))
            except expected:
                pass  # expected
            except Exception as e:
                cxs.append(Counterexample(
                    category="wrong_error",
                    operation=op_name,
                    inputs=args,
                    expected=expected.__name__,
                    actual=f"{type(e).__name__}: {e}",
                    description="Wrong exception type",
                ))

    return cxs, checks


def search_property_violations(
    calc: Calculator,
    contract: CalculatorContract,
) -> tuple[list[Counterexample], int]:
    """Check every algebraic property over the finite part of the grid."""
    cxs: list[Counterexample] = []
    checks = 0
    finite = [v for v in SAMPLE_VALUES if math.isfinite(v)]

    for op_name, prop in contract.all_properties:
        for args in itertools.product(finite, repeat=prop.arity):
            checks += 1
            try:
                ok = prop.check(calc, *args)
            except CalculatorError:
                continue
            if not ok:
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op_name,
                    inputs=args,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


def search_display_roundtrip_violations(
    calc: Calculator,
    contract: CalculatorContract,
) -> tuple[list[Counterexample], int]:
    """Fixed-point display text must parse back to within 1e-10."""
    cxs: list[Counterexample] = []
    checks = 0

    for value in SAMPLE_VALUES:
        if not contract.bounds.contains(value) or uses_scientific(value):
            continue
        checks += 1
        text = format_result(value)
        parsed = parse_display(text)
        if abs(parsed - value) > 1e-10:
            cxs.append(Counterexample(
                category="roundtrip_violation",
                operation="format_result",
                inputs=(value,),
                expected=f"within 1e-10 of {value}",
                actual=f"{text!r} -> {parsed}",
                description="Display text does not round-trip",
            ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(bounds: MagnitudeBounds) -> SearchReport:
    """Run complete counterexample search for one configuration."""
    calc = Calculator(bounds)
    contract = build_contracts(bounds)
    report = SearchReport()

    for search_fn in (
        search_postcondition_violations,
        search_error_condition_violations,
        search_property_violations,
        search_display_roundtrip_violations,
    ):
        cxs, checks = search_fn(calc, contract)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run counterexample search across the preset bounds."""
    configs = [
        ("DESK  |x| <= 1e15", DESK),
        ("TINY  |x| <= 1e3", TINY),
    ]

    all_passed = True
    for name, bounds in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(bounds)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
