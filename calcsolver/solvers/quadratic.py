"""
Quadratic equations in x.

Two input shapes are accepted:
- standard, with terms on either side: ``x^2-5x+6=0``, ``2x^2=3x+5``
- factored into two linear factors: ``(x-2)(x-3)=0``
"""

import math
import re
from typing import Optional, Tuple

from .base import BaseSolver, SolverResult
from ..input.text import CONSTANT, extract_coefficients, split_equation
from ..models import EquationType, ParsedEquation
from ..output.step_generator import StepGenerator
from ..utils.formatting import format_number

SQUARE_MARKER = "x^2"

# Only this exact shape; other spacings or orderings go to the standard path
FACTORED_FORM = re.compile(r"^\(([^()]+)\)\(([^()]+)\)=0$")

REPEATED_ROOT_TOLERANCE = 1e-10


class QuadraticSolver(BaseSolver):
    """Solve ``ax^2 + bx + c = 0`` with the discriminant and quadratic formula."""

    name = "QuadraticSolver"
    description = "Quadratic equations in x, standard or factored"

    def __init__(self, step_generator: Optional[StepGenerator] = None):
        self.step_generator = step_generator or StepGenerator()

    def can_solve(self, text: str) -> bool:
        if "=" not in text:
            return False
        return SQUARE_MARKER in text or FACTORED_FORM.match(text) is not None

    def solve(self, text: str) -> SolverResult:
        match = FACTORED_FORM.match(text)
        if match:
            factored = self._solve_factored(text, match.group(1), match.group(2))
            if factored is not None:
                return factored

        sides = split_equation(text)
        if sides is None:
            return self._failure("Expected exactly one '='")

        variables = [SQUARE_MARKER, "x"]
        left = extract_coefficients(sides[0], variables)
        right = extract_coefficients(sides[1], variables)
        if left is None or right is None:
            return self._failure("Unreadable quadratic equation")

        a = left[SQUARE_MARKER] - right[SQUARE_MARKER]
        b = left["x"] - right["x"]
        c = left[CONSTANT] - right[CONSTANT]
        if a == 0:
            return self._failure("The x^2 terms cancel out")

        discriminant = b * b - 4 * a * c
        solutions, final_answer, conclusion = self._roots(a, b, discriminant)

        parsed = ParsedEquation(
            raw_text=text,
            normalized=text,
            equation_type=EquationType.QUADRATIC,
            subtype="standard",
            coefficients={"a": a, "b": b, "c": c},
            solutions=solutions,
            steps=self.step_generator.generate_quadratic_steps(
                a, b, c, discriminant, conclusion
            ),
            final_answer=final_answer,
        )
        parsed.solutions["discriminant"] = discriminant
        return SolverResult.from_parsed(parsed, solver_name=self.name)

    def _roots(self, a: float, b: float, discriminant: float) -> Tuple[dict, str, str]:
        """Return (solutions, final answer, closing step text)."""
        if abs(discriminant) < REPEATED_ROOT_TOLERANCE:
            root = -b / (2 * a)
            answer = f"x = {format_number(root)} (double root)"
            return (
                {"x": root},
                answer,
                f"Δ = 0, so there is one repeated real root: {answer}",
            )

        if discriminant > 0:
            sqrt_d = math.sqrt(discriminant)
            x1 = (-b + sqrt_d) / (2 * a)
            x2 = (-b - sqrt_d) / (2 * a)
            answer = f"x1 = {format_number(x1)}, x2 = {format_number(x2)}"
            return (
                {"x1": x1, "x2": x2},
                answer,
                f"Δ > 0, so there are two distinct real roots: {answer}",
            )

        real = -b / (2 * a)
        imaginary = math.sqrt(-discriminant) / (2 * abs(a))
        answer = f"x = {format_number(real)} ± {format_number(imaginary)}i"
        return (
            {"real": real, "imaginary": imaginary},
            answer,
            f"Δ < 0, so the roots are a complex conjugate pair: {answer}",
        )

    def _solve_factored(
        self, text: str, first: str, second: str
    ) -> Optional[SolverResult]:
        """Solve ``(px+q)(rx+s)=0``; None if either factor is not linear in x."""
        factors = []
        for factor in (first, second):
            coefficients = extract_coefficients(factor, ["x"])
            if coefficients is None or coefficients["x"] == 0:
                return None
            factors.append((coefficients["x"], coefficients[CONSTANT]))

        (p, q), (r, s) = factors
        roots = [-q / p, -s / r]
        a, b, c = p * r, p * s + q * r, q * s

        if roots[0] == roots[1]:
            final_answer = f"x = {format_number(roots[0])} (double root)"
            solutions = {"x": roots[0]}
        else:
            final_answer = (
                f"x1 = {format_number(roots[0])}, x2 = {format_number(roots[1])}"
            )
            solutions = {"x1": roots[0], "x2": roots[1]}
        solutions["discriminant"] = b * b - 4 * a * c

        parsed = ParsedEquation(
            raw_text=text,
            normalized=text,
            equation_type=EquationType.QUADRATIC,
            subtype="factored",
            coefficients={"a": a, "b": b, "c": c},
            solutions=solutions,
            steps=self.step_generator.generate_factored_steps([first, second], roots),
            final_answer=final_answer,
        )
        return SolverResult.from_parsed(parsed, solver_name=self.name)
