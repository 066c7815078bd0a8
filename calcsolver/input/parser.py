"""
Equation text parser.

Turns loosely formatted equation text (typed, OCR output, or forwarded
from the photo-analysis service) into a ParsedEquation with solution
steps and a final answer.
"""

import logging
from typing import Optional, Tuple

from .text import normalize
from ..models import ParsedEquation
from ..solvers.base import SolverRegistry
from ..utils.errors import UnrecognizedEquationError, format_error_for_user

logger = logging.getLogger(__name__)


class EquationTextParser:
    """
    Classify and solve equation text.

    Families are tried in order, first match wins:
    1. a linear system (2 or 3 lines, one '=' each)
    2. a quadratic in x (standard or factored)
    3. a single linear equation in x

    Usage:
        parser = EquationTextParser()
        result = parser.parse("x+y=3\\nx-y=1")
        print(result.final_answer)  # x = 2, y = 1
    """

    def __init__(self, registry: Optional[SolverRegistry] = None):
        """
        Initialize the parser.

        Args:
            registry: Family solvers to try (default registry if None)
        """
        if registry is None:
            from ..solvers import get_default_registry

            registry = get_default_registry()
        self.registry = registry

    def parse(self, text: str) -> ParsedEquation:
        """
        Parse equation text.

        Never raises for malformed input; text that matches no family
        comes back tagged UNRECOGNIZED with no steps.
        """
        normalized = normalize(text)
        logger.debug("Normalized %r -> %r", text, normalized)

        if not normalized:
            return ParsedEquation.unrecognized(text, normalized)

        result = self.registry.solve(normalized)
        if result is None:
            logger.info("No equation family matched %r", normalized)
            return ParsedEquation.unrecognized(text, normalized)

        parsed = result.parsed
        parsed.raw_text = text
        parsed.normalized = normalized
        return parsed

    def try_parse(self, text: str) -> Tuple[Optional[ParsedEquation], Optional[str]]:
        """
        Parse, returning an error message instead of an unrecognized result.

        Returns:
            Tuple of (ParsedEquation or None, error message or None)
        """
        parsed = self.parse(text)
        if not parsed.recognized:
            return None, format_error_for_user(UnrecognizedEquationError(text))
        return parsed, None


def parse_equation(text: str) -> ParsedEquation:
    """
    Convenience function: parse text with the default families.
    """
    return EquationTextParser().parse(text)
