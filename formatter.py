"""Display formatting and parsing.

``format_result`` turns a numeric result into the canonical display text;
``parse_display`` reads display text back into a float for the next
operation.  Both are pure.
"""
from __future__ import annotations

import math
import re

from errors import InvalidDisplayStateError

ERROR_TEXT = "Error"

SCIENTIFIC_UPPER = 1e10
SCIENTIFIC_LOWER = 1e-4
FIXED_DECIMALS = 10

# Everything the controller can write: typed entries (including a trailing
# "." mid-entry) and formatted results in fixed or scientific form.
_NUMERAL = re.compile(r"-?[0-9]+(\.[0-9]*)?([eE][+-]?[0-9]+)?")


def uses_scientific(value: float) -> bool:
    magnitude = abs(value)
    return magnitude >= SCIENTIFIC_UPPER or (
        magnitude < SCIENTIFIC_LOWER and value != 0
    )


def format_result(value: float) -> str:
    """Format a result for display.

    Precedence: non-finite values become ``"Error"``; very large or very
    small magnitudes use scientific notation with four fractional digits
    (``1.2346e+10``); everything else is fixed point with up to ten
    fractional digits and no trailing zeros.
    """
    if not math.isfinite(value):
        return ERROR_TEXT

    if uses_scientific(value):
        return f"{value:.4e}"

    text = f"{value:.{FIXED_DECIMALS}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")

    if text in ("", "-0"):
        return "0"
    return text


def is_numeral(text: str) -> bool:
    return bool(_NUMERAL.fullmatch(text))


def parse_display(text: str) -> float:
    """Parse display text written by the controller.

    Raises ``InvalidDisplayStateError`` for anything that is not a numeral,
    including the error token.  Unlike ``float()`` this rejects ``"inf"``,
    ``"nan"``, underscores and surrounding whitespace.
    """
    if not is_numeral(text):
        raise InvalidDisplayStateError(text)
    return float(text)
