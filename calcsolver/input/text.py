"""
Text normalization and coefficient extraction for equation input.

Input may be typed, OCR output, or LaTeX-flavoured text from a
recognition model. Normalization maps it to compact ASCII, one equation
per line, before any family-specific parsing happens.
"""

import math
import re
from typing import Dict, List, Optional, Sequence, Tuple

CONSTANT = "const"

# Full-width forms U+FF01..U+FF5E sit at a fixed offset from ASCII
_FULLWIDTH = {cp: cp - 0xFEE0 for cp in range(0xFF01, 0xFF5F)}
_FULLWIDTH[0x3000] = ord(" ")  # ideographic space

GLYPH_FIXES = [
    ("−", "-"),
    ("–", "-"),
    ("—", "-"),
    ("﹣", "-"),
    ("﹦", "="),
    ("×", "*"),
    ("·", "*"),
    ("∙", "*"),
    ("÷", "/"),
    ("√", "sqrt"),
    ("∛", "cbrt"),
    ("²", "^2"),
    ("³", "^3"),
]

# LaTeX left behind by math OCR models
LATEX_FIXES = [
    (r"\\\\", "\n"),
    (r"\\begin\{[a-z*]+\}", ""),
    (r"\\end\{[a-z*]+\}", ""),
    (r"\\left|\\right", ""),
    (r"\\cdot|\\times", "*"),
    (r"\\div", "/"),
    (r"\\sqrt", "sqrt"),
    (r"\\[,;!: ]", ""),
    (r"[${}&]", ""),
]

# The OCR engine often reads x² as x2
SQUARED_MISREAD = re.compile(r"x2(?![\d.])")

_NUMBER = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([e][+-]?\d+)?$")
_ROOT = re.compile(r"([+-]?)(sqrt|cbrt)\(?(\d+\.?\d*|\.\d+)\)?$")


def normalize(text: str) -> str:
    """
    Canonicalize raw equation text.

    Returns lower-case ASCII with whitespace removed inside each line,
    blank lines dropped, lines joined by ``"\\n"``, and every squared
    variable written as ``x^2``.
    """
    result = text.translate(_FULLWIDTH)
    for pattern, replacement in LATEX_FIXES:
        result = re.sub(pattern, replacement, result)
    for glyph, replacement in GLYPH_FIXES:
        result = result.replace(glyph, replacement)

    lines = []
    for line in result.splitlines():
        compact = "".join(line.split()).lower()
        if not compact:
            continue
        compact = compact.replace("**", "^")
        compact = SQUARED_MISREAD.sub("x^2", compact)
        lines.append(compact)
    return "\n".join(lines)


def split_equation(line: str) -> Optional[Tuple[str, str]]:
    """Split ``lhs=rhs``; None unless there is exactly one ``=`` and both sides exist."""
    if line.count("=") != 1:
        return None
    lhs, rhs = line.split("=")
    if not lhs or not rhs:
        return None
    return lhs, rhs


def parse_coefficient(text: str) -> Optional[float]:
    """
    Read the numeric part of a term.

    An empty coefficient means 1 (``x``), a bare sign means ±1 (``-x``).
    Plain numbers, fractions such as ``1/2`` and simple radicals such as
    ``sqrt2`` are accepted.
    """
    if text in ("", "+"):
        return 1.0
    if text == "-":
        return -1.0

    if _NUMBER.match(text):
        value = float(text)
        return value if math.isfinite(value) else None

    if "/" in text:
        numerator, _, denominator = text.partition("/")
        top = parse_coefficient(numerator)
        bottom = parse_coefficient(denominator) if denominator else None
        if top is None or not bottom:
            return None
        return top / bottom

    match = _ROOT.match(text)
    if match:
        sign, func, radicand = match.groups()
        value = float(radicand)
        root = math.sqrt(value) if func == "sqrt" else value ** (1.0 / 3.0)
        return -root if sign == "-" else root

    return None


def split_terms(side: str) -> List[str]:
    """Split one side of an equation into signed terms."""
    return [term for term in side.replace("-", "+-").split("+") if term]


def extract_coefficients(
    side: str, variables: Sequence[str]
) -> Optional[Dict[str, float]]:
    """
    Collect the coefficient of each tracked variable and the constant term.

    A term that contains more than one variable name is credited to the
    first one in *variables* order, so longer names such as ``x^2`` must
    be listed before ``x``.

    Returns:
        Mapping of variable name (and ``CONSTANT``) to its summed
        coefficient, or None if any term cannot be read.
    """
    coefficients = {name: 0.0 for name in variables}
    coefficients[CONSTANT] = 0.0

    terms = split_terms(side)
    if not terms:
        return None

    for term in terms:
        term = term.replace("*", "")
        name = next((v for v in variables if v in term), None)
        if name is None:
            value = parse_coefficient(term)
            if value is None or term in ("", "+", "-"):
                return None
            coefficients[CONSTANT] += value
            continue

        prefix, _, suffix = term.partition(name)
        # Allow "x/2" style division after the variable
        if suffix.startswith("/"):
            divisor = parse_coefficient(suffix[1:])
            if not divisor:
                return None
            factor = 1.0 / divisor
        elif suffix:
            return None
        else:
            factor = 1.0

        value = parse_coefficient(prefix)
        if value is None:
            return None
        coefficients[name] += value * factor

    return coefficients
