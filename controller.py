"""Calculator controller: the input/display state machine.

The controller is the only writer of ``CalculatorState``.  Each input
event is handled to completion and returns the new display text.
Arithmetic failures raised while an operator is evaluated are caught here
and turned into the sticky error state; nothing else is caught.

Branches are annotated with their branch-IDs (see contracts.py
CONTROLLER_BRANCHES).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from calculator import Calculator
from errors import CalculatorError
from formatter import format_result, parse_display
from operators import Operator, OperatorKind
from state import CalculatorState

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789")


# ---------------------------------------------------------------------------
# Input events
# ---------------------------------------------------------------------------

class EventKind(str, Enum):
    DIGIT = "digit"
    DECIMAL = "decimal"
    OPERATOR = "operator"


@dataclass(frozen=True)
class InputEvent:
    """One decoded key press.

    ``digit`` is set for DIGIT events, ``operator`` for OPERATOR events,
    neither for DECIMAL.
    """

    kind: EventKind
    digit: str | None = None
    operator: Operator | None = None

    def __post_init__(self) -> None:
        if self.kind is EventKind.DIGIT and self.digit is None:
            raise ValueError("digit event requires a digit")
        if self.kind is EventKind.OPERATOR and self.operator is None:
            raise ValueError("operator event requires an operator")

    @classmethod
    def digit_pressed(cls, digit: str) -> InputEvent:
        return cls(EventKind.DIGIT, digit=digit)

    @classmethod
    def decimal_pressed(cls) -> InputEvent:
        return cls(EventKind.DECIMAL)

    @classmethod
    def operator_pressed(cls, operator: Operator) -> InputEvent:
        return cls(EventKind.OPERATOR, operator=operator)


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class CalculatorController:
    """Coordinates state, arithmetic and formatting for one calculator."""

    def __init__(self, calculator: Calculator | None = None) -> None:
        self._calculator = calculator or Calculator()
        self._state = CalculatorState()
        self._unary = {
            Operator.PERCENTAGE: self._calculator.percentage,
            Operator.SQUARE_ROOT: self._calculator.square_root,
            Operator.RECIPROCAL: self._calculator.reciprocal,
            Operator.FACTORIAL: self._calculator.factorial,
            Operator.SQUARE: self._calculator.square,
        }
        self._binary = {
            Operator.ADD: self._calculator.add,
            Operator.SUBTRACT: self._calculator.subtract,
            Operator.MULTIPLY: self._calculator.multiply,
            Operator.DIVIDE: self._calculator.divide,
            Operator.POWER: self._calculator.power,
        }

    # -- read access ------------------------------------------------------------

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def current_display(self) -> str:
        return self._state.display

    def has_error(self) -> bool:
        return self._state.has_error

    # -- single entry point -----------------------------------------------------

    def dispatch(self, event: InputEvent) -> str:
        """Route one input event and return the resulting display."""
        if event.kind is EventKind.DIGIT:
            return self.handle_number_input(event.digit)
        if event.kind is EventKind.DECIMAL:
            return self.handle_decimal_input()
        if event.kind is EventKind.OPERATOR:
            return self.handle_operation(event.operator)
        raise ValueError(f"Unknown event kind: {event.kind!r}")

    def replay(self, events: Iterable[InputEvent]) -> str:
        for event in events:
            self.dispatch(event)
        return self._state.display

    # -- digits and decimal point -----------------------------------------------

    def handle_number_input(self, digit: str) -> str:
        """Branches: ERR-LOCKED, DIGIT-REPLACE, DIGIT-LEADING-ZERO, DIGIT-APPEND"""
        if digit not in DIGITS:
            raise ValueError(f"Not a digit: {digit!r}")

        state = self._state
        if state.has_error:                                       # ERR-LOCKED
            return state.display

        if state.waiting_for_operand:                             # DIGIT-REPLACE
            state.display = digit
            state.waiting_for_operand = False
        elif state.display == "0":                                # DIGIT-LEADING-ZERO
            # "0" then "0" stays "0"; "0" then "7" becomes "7"
            state.display = digit
        else:                                                     # DIGIT-APPEND
            state.display += digit

        return state.display

    def handle_decimal_input(self) -> str:
        """Branches: ERR-LOCKED, DOT-START, DOT-APPEND, DOT-IGNORED"""
        state = self._state
        if state.has_error:                                       # ERR-LOCKED
            return state.display

        if state.waiting_for_operand:                             # DOT-START
            state.display = "0."
            state.waiting_for_operand = False
        elif "." not in state.display:                            # DOT-APPEND
            state.display += "."
        # else DOT-IGNORED

        return state.display

    # -- operators --------------------------------------------------------------

    def handle_operation(self, operation: Operator) -> str:
        """Apply a binary, unary or control operator.

        Branches: ERR-LOCKED, ERR-CAUGHT
        """
        state = self._state
        if state.has_error and operation not in (Operator.CLEAR, Operator.CLEAR_ENTRY):
            return state.display                                  # ERR-LOCKED

        try:
            if operation.kind is OperatorKind.CONTROL:
                self._handle_control(operation)
            elif operation.kind is OperatorKind.UNARY:
                self._handle_unary(operation)
            elif operation.kind is OperatorKind.BINARY:
                self._handle_binary(operation)
            else:
                raise ValueError(f"Unknown operator kind: {operation.kind!r}")
        except CalculatorError as e:                              # ERR-CAUGHT
            logger.warning("%s failed: %s", operation.name, e)
            state.set_error(str(e))

        logger.debug(
            "%s -> display=%r pending=%s waiting=%s",
            operation.name,
            state.display,
            state.pending_operation.name if state.pending_operation else None,
            state.waiting_for_operand,
        )
        return state.display

    def _handle_control(self, operation: Operator) -> None:
        if operation is Operator.CLEAR:
            self._state.reset()
        elif operation is Operator.CLEAR_ENTRY:
            self._state.clear_entry()
        elif operation is Operator.BACKSPACE:
            self._handle_backspace()
        elif operation is Operator.EQUALS:
            self._handle_equals()
        else:
            raise ValueError(f"Unknown control operator: {operation!r}")

    def _handle_backspace(self) -> None:
        """Branches: BS-NOOP, BS-TRIM, BS-SIGN, BS-RESET"""
        state = self._state
        if state.waiting_for_operand:                             # BS-NOOP
            return

        if len(state.display) > 1:
            trimmed = state.display[:-1]
            if trimmed == "-":                                    # BS-SIGN
                state.display = "0"
                state.waiting_for_operand = True
            else:                                                 # BS-TRIM
                state.display = trimmed
        else:                                                     # BS-RESET
            state.display = "0"
            state.waiting_for_operand = True

    def _handle_equals(self) -> None:
        """Branches: EQ-NOOP, EQ-EVAL"""
        state = self._state
        if state.pending_operation is None or state.waiting_for_operand:
            return                                                # EQ-NOOP

        right = parse_display(state.display)                      # EQ-EVAL
        result = self._evaluate(state.previous_value, right, state.pending_operation)
        self._show(result)
        state.pending_operation = None
        state.waiting_for_operand = True

    def _handle_unary(self, operation: Operator) -> None:
        state = self._state
        operand = parse_display(state.display)
        self._show(self._unary[operation](operand))
        state.waiting_for_operand = True

    def _handle_binary(self, operation: Operator) -> None:
        """Branches: BIN-CHAIN, BIN-QUEUE"""
        state = self._state
        operand = parse_display(state.display)

        if state.pending_operation is not None and not state.waiting_for_operand:
            # 3 + 4 × evaluates 3 + 4 before queuing ×                BIN-CHAIN
            self._show(self._evaluate(state.previous_value, operand, state.pending_operation))
        else:                                                     # BIN-QUEUE
            state.current_value = operand

        state.previous_value = state.current_value
        state.pending_operation = operation
        state.waiting_for_operand = True

    # -- helpers ----------------------------------------------------------------

    def _evaluate(self, left: float, right: float, operation: Operator) -> float:
        return self._binary[operation](left, right)

    def _show(self, result: float) -> None:
        self._state.current_value = result
        self._state.display = format_result(result)
