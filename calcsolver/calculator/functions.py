"""
Single-argument calculator functions.

Every function follows IEEE-style semantics: domain violations give NaN
and overflow gives a signed infinity. Nothing here raises for numeric
reasons, so a key press can never interrupt the calculator.
"""

import math
from typing import Callable, Dict, Optional, Tuple

from .state import AngleMode
from ..utils.formatting import format_number

RandomSource = Callable[[], float]

FACTORIAL_LIMIT = 20


def _safe(func: Callable[..., float], *args: float, overflow: float = math.inf) -> float:
    """Call a math function, mapping domain errors to NaN and overflow to *overflow*."""
    try:
        return func(*args)
    except ValueError:
        return math.nan
    except OverflowError:
        return overflow


def to_radians(value: float, mode: AngleMode) -> float:
    if mode is AngleMode.DEGREES:
        return value * math.pi / 180.0
    return value


def from_radians(value: float, mode: AngleMode) -> float:
    if mode is AngleMode.DEGREES:
        return value * 180.0 / math.pi
    return value


def power(base: float, exponent: float) -> float:
    """base ** exponent with IEEE outcomes instead of exceptions or complex numbers."""
    if base == 0 and exponent < 0:
        return math.inf
    negative = base < 0 and float(exponent).is_integer() and exponent % 2 == 1
    return _safe(math.pow, base, exponent, overflow=-math.inf if negative else math.inf)


def nth_root(base: float, degree: float) -> float:
    """The degree-th root of base; a zero degree has no meaning and gives NaN."""
    if degree == 0:
        return math.nan
    return power(base, 1.0 / degree)


def cube_root(value: float) -> float:
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


def natural_log(value: float) -> float:
    if value == 0:
        return -math.inf
    return _safe(math.log, value)


def log10(value: float) -> float:
    if value == 0:
        return -math.inf
    return _safe(math.log10, value)


def factorial(value: float) -> float:
    """
    n! for non-negative integers up to 20.

    Larger integers saturate to infinity; negative or fractional input
    gives NaN.
    """
    if math.isnan(value) or value < 0:
        return math.nan
    if math.isinf(value):
        return math.inf
    if value != math.floor(value):
        return math.nan
    if value > FACTORIAL_LIMIT:
        return math.inf
    return float(math.factorial(int(value)))


def reciprocal(value: float) -> float:
    # 1/0 is shown as 0, matching the division policy
    if value == 0:
        return 0.0
    return 1.0 / value


# symbol -> (function, history template)
SIMPLE_FUNCTIONS: Dict[str, Tuple[Callable[[float], float], str]] = {
    "x²": (lambda x: x * x, "({x})²"),
    "x³": (lambda x: x * x * x, "({x})³"),
    "%": (lambda x: x / 100.0, "({x})%"),
    "¹/ₓ": (reciprocal, "1/({x})"),
    "eˣ": (lambda x: _safe(math.exp, x), "e^({x})"),
    "10ˣ": (lambda x: power(10.0, x), "10^({x})"),
    "²√x": (lambda x: _safe(math.sqrt, x), "√({x})"),
    "³√x": (cube_root, "∛({x})"),
    "x!": (factorial, "({x})!"),
    "ln": (natural_log, "ln({x})"),
    "log₁₀": (log10, "log₁₀({x})"),
}


def _asin(x: float) -> float:
    return math.nan if abs(x) > 1 else math.asin(x)


def _acos(x: float) -> float:
    return math.nan if abs(x) > 1 else math.acos(x)


def _acosh(x: float) -> float:
    return math.nan if x < 1 else math.acosh(x)


def _atanh(x: float) -> float:
    return math.nan if abs(x) >= 1 else math.atanh(x)


def _sinh(x: float) -> float:
    return _safe(math.sinh, x, overflow=math.copysign(math.inf, x))


def _cosh(x: float) -> float:
    return _safe(math.cosh, x)


# symbol -> (function, inverse function); circular ones honour the angle mode
CIRCULAR_FUNCTIONS = {
    "sin": (math.sin, _asin),
    "cos": (math.cos, _acos),
    "tan": (math.tan, math.atan),
}

HYPERBOLIC_FUNCTIONS = {
    "sinh": (_sinh, math.asinh),
    "cosh": (_cosh, _acosh),
    "tanh": (math.tanh, _atanh),
}


def evaluate_function(
    symbol: str,
    value: float,
    *,
    angle_mode: AngleMode,
    inverse: bool,
    random_source: RandomSource,
) -> Optional[Tuple[float, str]]:
    """
    Apply an immediate single-argument function.

    Returns:
        (result, history text), or None if *symbol* is not an immediate
        function.
    """
    shown = format_number(value)

    if symbol in SIMPLE_FUNCTIONS:
        func, template = SIMPLE_FUNCTIONS[symbol]
        return func(value), template.format(x=shown)

    if symbol == "Rand":
        return random_source(), "rand()"

    if symbol in CIRCULAR_FUNCTIONS:
        forward, backward = CIRCULAR_FUNCTIONS[symbol]
        if inverse:
            result = backward(value)
            return from_radians(result, angle_mode), f"{symbol}⁻¹({shown})"
        return _safe(forward, to_radians(value, angle_mode)), f"{symbol}({shown})"

    if symbol in HYPERBOLIC_FUNCTIONS:
        forward, backward = HYPERBOLIC_FUNCTIONS[symbol]
        if inverse:
            return _safe(backward, value), f"{symbol}⁻¹({shown})"
        return _safe(forward, value), f"{symbol}({shown})"

    return None
