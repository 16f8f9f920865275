"""White-box tests for the calculator controller state machine.

Each test class targets decision branches documented in
``contracts.CONTROLLER_BRANCHES``; keys are pressed by caption through
the ``press`` fixture (see conftest.py).  A coverage matrix at the bottom
of this file maps each branch-ID to the test(s) that exercise it.
"""
from __future__ import annotations

import logging

import pytest

from contracts import CONTROLLER_BRANCHES
from controller import CalculatorController, EventKind, InputEvent
from errors import InvalidDisplayStateError
from operators import Operator


# ===================================================================
# DIGITS  (DIGIT-REPLACE, DIGIT-LEADING-ZERO, DIGIT-APPEND)
# ===================================================================

class TestDigits:

    def test_initial_display(self, controller):
        assert controller.current_display == "0"
        assert controller.state.waiting_for_operand

    def test_digit_replace(self, press, controller):
        """Branch: DIGIT-REPLACE — first digit replaces the initial zero."""
        assert press("7") == "7"
        assert not controller.state.waiting_for_operand

    def test_digit_replace_zero(self, press, controller):
        assert press("0") == "0"
        assert not controller.state.waiting_for_operand

    def test_digit_leading_zero_collapses(self, press):
        """Branch: DIGIT-LEADING-ZERO — "0" "0" stays "0"."""
        assert press("0", "0", "0") == "0"

    def test_digit_leading_zero_replaced(self, press):
        assert press("0", "5") == "5"

    def test_digit_append(self, press):
        """Branch: DIGIT-APPEND"""
        assert press("1", "2", "3") == "123"

    def test_digit_append_zeros_after_nonzero(self, press):
        assert press("1", "0", "0") == "100"

    def test_digit_after_operator_starts_new_number(self, press):
        press("4", "2", "+")
        assert press("9") == "9"

    def test_digit_after_equals_starts_new_number(self, press):
        press("2", "+", "3", "=")
        assert press("8") == "8"

    @pytest.mark.parametrize("bad", ["12", "", "a", ".", "-1"])
    def test_non_digit_rejected(self, controller, bad):
        with pytest.raises(ValueError):
            controller.handle_number_input(bad)


# ===================================================================
# DECIMAL POINT  (DOT-START, DOT-APPEND, DOT-IGNORED)
# ===================================================================

class TestDecimal:

    def test_dot_start(self, press, controller):
        """Branch: DOT-START"""
        assert press(".") == "0."
        assert not controller.state.waiting_for_operand

    def test_dot_start_then_digits(self, press):
        assert press(".", "5") == "0.5"

    def test_dot_append(self, press):
        """Branch: DOT-APPEND"""
        assert press("1", ".", "5") == "1.5"

    def test_dot_ignored(self, press):
        """Branch: DOT-IGNORED — never more than one decimal point."""
        assert press("1", ".", "5", ".", "2") == "1.52"
        assert press(".") == "1.52"

    def test_dot_after_operator(self, press):
        press("3", "+")
        assert press(".") == "0."

    def test_digits_after_zero_point(self, press):
        assert press("0", ".", "0", "0", "7") == "0.007"


# ===================================================================
# BINARY OPERATORS AND EQUALS  (BIN-*, EQ-*)
# ===================================================================

class TestBinary:

    def test_bin_queue(self, press, controller):
        """Branch: BIN-QUEUE"""
        assert press("3", "+") == "3"
        state = controller.state
        assert state.pending_operation is Operator.ADD
        assert state.previous_value == 3.0
        assert state.waiting_for_operand

    def test_bin_chain(self, press, controller):
        """Branch: BIN-CHAIN — 3 + 4 × evaluates 3 + 4 first."""
        assert press("3", "+", "4", "×") == "7"
        assert controller.state.pending_operation is Operator.MULTIPLY
        assert controller.state.previous_value == 7.0

    def test_chain_then_equals_with_no_new_operand(self, press, controller):
        """Equals right after chaining is a no-op: nothing new was entered."""
        assert press("3", "+", "4", "×", "=") == "7"
        assert controller.state.pending_operation is Operator.MULTIPLY

    def test_chain_completes_with_second_operand(self, press):
        assert press("3", "+", "4", "×", "2", "=") == "14"

    def test_operator_replaced_while_waiting(self, press):
        assert press("6", "+", "×", "2", "=") == "12"

    def test_eq_eval(self, press, controller):
        """Branch: EQ-EVAL"""
        assert press("8", "-", "5", "=") == "3"
        assert controller.state.pending_operation is None
        assert controller.state.waiting_for_operand
        assert controller.state.current_value == 3.0

    def test_eq_noop_without_pending(self, press):
        """Branch: EQ-NOOP"""
        assert press("5", "=") == "5"

    def test_eq_noop_while_waiting(self, press):
        assert press("5", "+", "=") == "5"

    def test_continue_from_result(self, press):
        assert press("2", "+", "3", "=", "×", "4", "=") == "20"

    def test_divide_fraction(self, press):
        assert press("1", "÷", "3", "=") == "0.3333333333"

    def test_power(self, press):
        assert press("2", "^", "1", "0", "=") == "1024"

    def test_negative_result(self, press):
        assert press("3", "-", "8", "=") == "-5"

    def test_decimal_operands(self, press):
        assert press("0", ".", "1", "+", "0", ".", "2", "=") == "0.3"

    def test_scientific_result(self, press):
        assert press("1", "0", "0", "0", "0", "0", "×",
                     "1", "0", "0", "0", "0", "0", "=") == "1.0000e+10"

    def test_scientific_result_feeds_next_operation(self, press):
        press("1", "0", "0", "0", "0", "0", "×", "1", "0", "0", "0", "0", "0", "=")
        assert press("÷", "1", "0", "=") == "1000000000"


# ===================================================================
# UNARY OPERATORS
# ===================================================================

class TestUnary:

    def test_square(self, press, controller):
        assert press("5", "x²") == "25"
        assert controller.state.waiting_for_operand

    def test_square_root(self, press):
        assert press("9", "√") == "3"

    def test_reciprocal(self, press):
        assert press("4", "1/x") == "0.25"

    def test_factorial(self, press):
        assert press("5", "x!") == "120"

    def test_factorial_twenty(self, press):
        assert press("2", "0", "x!") == "2.4329e+18"

    def test_percentage(self, press):
        assert press("5", "0", "%") == "0.5"

    def test_unary_keeps_pending_operation(self, press, controller):
        press("2", "+", "9", "√")
        assert controller.current_display == "3"
        assert controller.state.pending_operation is Operator.ADD
        assert controller.state.previous_value == 2.0

    def test_digit_after_unary_replaces(self, press):
        press("9", "√")
        assert press("4") == "4"

    def test_unary_on_partial_decimal(self, press):
        assert press("4", ".", "√") == "2"


# ===================================================================
# BACKSPACE  (BS-NOOP, BS-TRIM, BS-SIGN, BS-RESET)
# ===================================================================

class TestBackspace:

    def test_bs_trim(self, press, controller):
        """Branch: BS-TRIM"""
        assert press("1", "2", "3", "⌫") == "12"
        assert not controller.state.waiting_for_operand

    def test_bs_trim_decimal_point(self, press):
        assert press("1", ".", "⌫") == "1"

    def test_bs_reset(self, press, controller):
        """Branch: BS-RESET — single character becomes "0"."""
        assert press("7", "⌫") == "0"
        assert controller.state.waiting_for_operand

    def test_bs_reset_then_type(self, press):
        press("7", "⌫")
        assert press("5") == "5"

    def test_bs_sign(self, controller):
        """Branch: BS-SIGN — "-5" minus one digit is "0", waiting."""
        controller.state.display = "-5"
        controller.state.waiting_for_operand = False
        assert controller.handle_operation(Operator.BACKSPACE) == "0"
        assert controller.state.waiting_for_operand

    def test_bs_noop_while_waiting(self, press, controller):
        """Branch: BS-NOOP"""
        press("3", "-", "8", "=")
        assert press("⌫") == "-5"
        assert controller.state.waiting_for_operand

    def test_bs_noop_initially(self, press):
        assert press("⌫") == "0"


# ===================================================================
# CLEAR AND CLEAR ENTRY
# ===================================================================

class TestClear:

    def test_clear_resets_everything(self, press, controller):
        press("3", "+", "4")
        assert press("C") == "0"
        state = controller.state
        assert state.pending_operation is None
        assert state.previous_value == 0.0
        assert state.waiting_for_operand

    def test_clear_entry_keeps_chain(self, press, controller):
        press("3", "+", "9")
        assert press("CE") == "0"
        assert controller.state.pending_operation is Operator.ADD
        assert press("4", "=") == "7"


# ===================================================================
# ERRORS  (ERR-CAUGHT, ERR-LOCKED)
# ===================================================================

class TestErrors:

    def test_err_caught_divide_by_zero(self, press, controller):
        """Branch: ERR-CAUGHT"""
        assert press("1", "÷", "0", "=") == "Error"
        assert controller.has_error()
        assert controller.state.error_message == "Division by zero"

    def test_zero_divided_by_zero(self, press, controller):
        assert press("0", "÷", "0", "=") == "Error"
        assert controller.has_error()

    def test_err_locked_digits(self, press):
        """Branch: ERR-LOCKED — digits are ignored until cleared."""
        press("1", "÷", "0", "=")
        assert press("5", "6") == "Error"
        assert press(".") == "Error"

    def test_err_locked_operators(self, press):
        press("1", "÷", "0", "=")
        for key in ("+", "√", "=", "⌫"):
            assert press(key) == "Error"

    def test_clear_recovers(self, press, controller):
        press("1", "÷", "0", "=")
        assert press("C") == "0"
        assert not controller.has_error()
        assert press("4") == "4"

    def test_clear_entry_recovers_and_keeps_chain(self, press, controller):
        press("1", "÷", "0", "=")
        assert controller.state.pending_operation is Operator.DIVIDE
        press("CE")
        assert not controller.has_error()
        assert press("2", "=") == "0.5"

    def test_error_from_unary(self, press, controller):
        assert press("3", "-", "7", "=", "√") == "Error"
        assert "negative" in controller.state.error_message

    def test_error_from_chaining(self, press):
        assert press("5", "÷", "0", "+") == "Error"

    def test_overflow_error(self, press, controller):
        press("1", "0", "0", "0", "0", "0", "0", "0", "0", "x²")
        assert controller.has_error()

    def test_factorial_too_large(self, press, controller):
        assert press("2", "1", "x!") == "Error"
        assert "maximum" in controller.state.error_message

    def test_factorial_fraction(self, press):
        assert press("2", ".", "5", "x!") == "Error"

    def test_error_is_logged(self, press, caplog):
        with caplog.at_level(logging.WARNING, logger="controller"):
            press("1", "÷", "0", "=")
        assert any("Division by zero" in r.getMessage() for r in caplog.records)

    def test_invalid_display_state_propagates(self, controller):
        controller.state.display = "abc"
        controller.state.waiting_for_operand = False
        with pytest.raises(InvalidDisplayStateError):
            controller.handle_operation(Operator.ADD)
        assert not controller.has_error()


# ===================================================================
# EVENTS
# ===================================================================

class TestEvents:

    def test_dispatch_digit(self, controller):
        assert controller.dispatch(InputEvent.digit_pressed("4")) == "4"

    def test_dispatch_decimal(self, controller):
        assert controller.dispatch(InputEvent.decimal_pressed()) == "0."

    def test_dispatch_operator(self, controller):
        controller.dispatch(InputEvent.digit_pressed("4"))
        assert controller.dispatch(InputEvent.operator_pressed(Operator.SQUARE)) == "16"

    def test_replay(self, controller):
        events = [
            InputEvent.digit_pressed("1"),
            InputEvent.digit_pressed("2"),
            InputEvent.operator_pressed(Operator.DIVIDE),
            InputEvent.digit_pressed("5"),
            InputEvent.operator_pressed(Operator.EQUALS),
        ]
        assert controller.replay(events) == "2.4"

    def test_event_requires_payload(self):
        with pytest.raises(ValueError):
            InputEvent(EventKind.DIGIT)
        with pytest.raises(ValueError):
            InputEvent(EventKind.OPERATOR)

    def test_independent_controllers(self):
        a, b = CalculatorController(), CalculatorController()
        a.handle_number_input("9")
        assert b.current_display == "0"


# ===================================================================
# BRANCH COVERAGE MATRIX
# ===================================================================

BRANCH_COVERAGE = {
    "ERR-LOCKED": [
        "TestErrors::test_err_locked_digits",
        "TestErrors::test_err_locked_operators",
    ],
    "ERR-CAUGHT": ["TestErrors::test_err_caught_divide_by_zero"],
    "DIGIT-REPLACE": ["TestDigits::test_digit_replace"],
    "DIGIT-LEADING-ZERO": [
        "TestDigits::test_digit_leading_zero_collapses",
        "TestDigits::test_digit_leading_zero_replaced",
    ],
    "DIGIT-APPEND": ["TestDigits::test_digit_append"],
    "DOT-START": ["TestDecimal::test_dot_start"],
    "DOT-APPEND": ["TestDecimal::test_dot_append"],
    "DOT-IGNORED": ["TestDecimal::test_dot_ignored"],
    "BIN-CHAIN": ["TestBinary::test_bin_chain"],
    "BIN-QUEUE": ["TestBinary::test_bin_queue"],
    "EQ-NOOP": ["TestBinary::test_eq_noop_without_pending"],
    "EQ-EVAL": ["TestBinary::test_eq_eval"],
    "BS-NOOP": ["TestBackspace::test_bs_noop_while_waiting"],
    "BS-TRIM": ["TestBackspace::test_bs_trim"],
    "BS-SIGN": ["TestBackspace::test_bs_sign"],
    "BS-RESET": ["TestBackspace::test_bs_reset"],
}


def test_every_controller_branch_has_a_test():
    assert set(BRANCH_COVERAGE) == {b.id for b in CONTROLLER_BRANCHES}
