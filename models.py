"""Settings and API models.

Request payloads describe already-decoded key presses; response models
expose the display and a read-only snapshot of the calculator state.
This module defines the data models only -- no calculator logic.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from controller import EventKind, InputEvent
from operators import Operator
from state import CalculatorState


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    @property
    def display_name(self) -> str:
        return f"{self.value.capitalize()} Theme"


class CalculatorSettings(BaseModel):
    """Per-session user preferences."""

    theme: Theme = Theme.LIGHT

    @property
    def is_dark(self) -> bool:
        return self.theme == Theme.DARK

    def toggled(self) -> CalculatorSettings:
        """Return a copy with the other theme selected."""
        other = Theme.DARK if self.theme == Theme.LIGHT else Theme.LIGHT
        return self.model_copy(update={"theme": other})


class SessionCreate(BaseModel):
    """Payload for starting a calculator session."""

    settings: CalculatorSettings | None = None


# ---------------------------------------------------------------------------
# Input payloads
# ---------------------------------------------------------------------------

def _coerce_operator(v: Any) -> Any:
    if isinstance(v, str) and not isinstance(v, Operator):
        return Operator.from_symbol(v)
    return v


class DigitInput(BaseModel):
    digit: str = Field(..., pattern=r"^[0-9]$", description="A single digit 0-9")


class OperationInput(BaseModel):
    """An operator key, given by wire name (``"multiply"``) or caption (``"×"``)."""

    operation: Operator

    @field_validator("operation", mode="before")
    @classmethod
    def accept_symbol(cls, v: Any) -> Any:
        return _coerce_operator(v)


class EventInput(BaseModel):
    """One key press in a replayed sequence."""

    kind: EventKind
    digit: str | None = Field(default=None, pattern=r"^[0-9]$")
    operation: Operator | None = None

    @field_validator("operation", mode="before")
    @classmethod
    def accept_symbol(cls, v: Any) -> Any:
        return _coerce_operator(v)

    @model_validator(mode="after")
    def payload_matches_kind(self) -> EventInput:
        if self.kind == EventKind.DIGIT and self.digit is None:
            raise ValueError("digit events require 'digit'")
        if self.kind == EventKind.OPERATOR and self.operation is None:
            raise ValueError("operator events require 'operation'")
        return self

    def to_event(self) -> InputEvent:
        return InputEvent(self.kind, digit=self.digit, operator=self.operation)


class EventBatch(BaseModel):
    events: list[EventInput] = Field(..., min_length=1, max_length=256)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class DisplayResponse(BaseModel):
    display: str
    has_error: bool


class StateSnapshot(BaseModel):
    """Read-only copy of a controller's state."""

    display: str
    current_value: float
    previous_value: float
    pending_operation: Operator | None
    waiting_for_operand: bool
    has_error: bool
    error_message: str | None

    @classmethod
    def from_state(cls, state: CalculatorState) -> StateSnapshot:
        return cls(
            display=state.display,
            current_value=state.current_value,
            previous_value=state.previous_value,
            pending_operation=state.pending_operation,
            waiting_for_operand=state.waiting_for_operand,
            has_error=state.has_error,
            error_message=state.error_message,
        )


class SessionView(BaseModel):
    """Full session record as returned by the API."""

    id: str
    settings: CalculatorSettings
    state: StateSnapshot
    created_at: datetime
    updated_at: datetime
