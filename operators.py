"""Operator enumeration shared by the controller and the HTTP surface.

Each member is tagged with an ``OperatorKind`` so dispatch is a match on
the tag rather than a chain of membership tests.
"""
from __future__ import annotations

from enum import Enum


class OperatorKind(Enum):
    BINARY = "binary"
    UNARY = "unary"
    CONTROL = "control"


class Operator(str, Enum):
    """Calculator key that is not a digit or the decimal point.

    The enum value is the wire name (``"multiply"``); ``symbol`` is the
    key caption (``"×"``).
    """

    ADD = ("add", "+", OperatorKind.BINARY)
    SUBTRACT = ("subtract", "-", OperatorKind.BINARY)
    MULTIPLY = ("multiply", "×", OperatorKind.BINARY)
    DIVIDE = ("divide", "÷", OperatorKind.BINARY)
    POWER = ("power", "^", OperatorKind.BINARY)
    PERCENTAGE = ("percentage", "%", OperatorKind.UNARY)
    SQUARE_ROOT = ("square_root", "√", OperatorKind.UNARY)
    RECIPROCAL = ("reciprocal", "1/x", OperatorKind.UNARY)
    FACTORIAL = ("factorial", "x!", OperatorKind.UNARY)
    SQUARE = ("square", "x²", OperatorKind.UNARY)
    EQUALS = ("equals", "=", OperatorKind.CONTROL)
    CLEAR = ("clear", "C", OperatorKind.CONTROL)
    CLEAR_ENTRY = ("clear_entry", "CE", OperatorKind.CONTROL)
    BACKSPACE = ("backspace", "⌫", OperatorKind.CONTROL)

    symbol: str
    kind: OperatorKind

    def __new__(cls, value: str, symbol: str, kind: OperatorKind) -> Operator:
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.symbol = symbol
        obj.kind = kind
        return obj

    @property
    def is_binary(self) -> bool:
        return self.kind is OperatorKind.BINARY

    @property
    def is_unary(self) -> bool:
        return self.kind is OperatorKind.UNARY

    @classmethod
    def from_symbol(cls, text: str) -> Operator:
        """Resolve a key caption, wire name or member name to an operator."""
        for op in cls:
            if text in (op.symbol, op.value, op.name):
                return op
        raise ValueError(f"Unknown operator: {text!r}")

    @classmethod
    def of_kind(cls, kind: OperatorKind) -> list[Operator]:
        return [op for op in cls if op.kind is kind]
