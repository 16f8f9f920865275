"""Mutable calculator state, owned by a single controller."""
from __future__ import annotations

from dataclasses import dataclass

from formatter import ERROR_TEXT
from operators import Operator


@dataclass
class CalculatorState:
    """Display text plus the operand/operator chain behind it.

    ``pending_operation`` is always a binary operator or ``None``.  While
    ``waiting_for_operand`` is set the next digit replaces the display
    instead of extending it.
    """

    display: str = "0"
    current_value: float = 0.0
    previous_value: float = 0.0
    pending_operation: Operator | None = None
    waiting_for_operand: bool = True
    has_error: bool = False
    error_message: str | None = None

    def reset(self) -> None:
        """Return to the zero state, discarding any chain in progress."""
        self.display = "0"
        self.current_value = 0.0
        self.previous_value = 0.0
        self.pending_operation = None
        self.waiting_for_operand = True
        self.has_error = False
        self.error_message = None

    def clear_entry(self) -> None:
        """Clear the current entry; the pending operator and left operand survive."""
        self.display = "0"
        self.current_value = 0.0
        self.waiting_for_operand = True
        self.has_error = False
        self.error_message = None

    def set_error(self, message: str) -> None:
        self.has_error = True
        self.error_message = message
        self.display = ERROR_TEXT
