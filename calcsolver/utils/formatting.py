"""
Number formatting shared by the calculator display and the step text.

NaN and infinities are shown as sentinel strings instead of raising, so
a result is always displayable.
"""

import math
from typing import Optional

ERROR_SENTINEL = "Error"
INFINITY_SENTINEL = "Infinity"

MAX_FRACTION_DIGITS = 8


def format_number(value: float, max_decimals: int = MAX_FRACTION_DIGITS) -> str:
    """Format a float for display.

    - NaN becomes ``"Error"``, infinities become ``"Infinity"`` / ``"-Infinity"``.
    - Integral values print without a decimal point (``7`` not ``7.0``).
    - Everything else is rounded to *max_decimals* fractional digits with
      trailing zeros removed. Formatting never depends on the locale.
    """
    if math.isnan(value):
        return ERROR_SENTINEL
    if math.isinf(value):
        return INFINITY_SENTINEL if value > 0 else f"-{INFINITY_SENTINEL}"

    if value == math.floor(value):
        return str(int(value))

    formatted = f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")
    if formatted in ("-0", ""):
        return "0"
    return formatted


def parse_number(text: str) -> Optional[float]:
    """Parse *text* as a float, returning None when it is not a number."""
    try:
        return float(text)
    except ValueError:
        return None


def format_buffer(text: str) -> str:
    """Format a calculator buffer, showing the error sentinel if unreadable."""
    value = parse_number(text)
    if value is None:
        return ERROR_SENTINEL
    return format_number(value)
