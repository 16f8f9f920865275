"""Shared fixtures for calculator tests."""
from __future__ import annotations

from typing import Callable

import pytest

from bounds import TINY
from calculator import Calculator
from controller import CalculatorController
from operators import Operator
from store import SessionStore


@pytest.fixture
def calc() -> Calculator:
    return Calculator()


@pytest.fixture
def tiny_calc() -> Calculator:
    return Calculator(TINY)


@pytest.fixture
def controller() -> CalculatorController:
    return CalculatorController()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def press(controller) -> Callable[..., str]:
    """Press keys by caption: digits, "." and operator symbols.

    ``press("3", "+", "4", "=")`` returns the display after the last key.
    """

    def _press(*keys: str) -> str:
        display = controller.current_display
        for key in keys:
            if key.isdigit():
                display = controller.handle_number_input(key)
            elif key == ".":
                display = controller.handle_decimal_input()
            else:
                display = controller.handle_operation(Operator.from_symbol(key))
        return display

    return _press
