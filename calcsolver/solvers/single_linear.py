"""
Single linear equation in x, e.g. ``3x=9`` or ``2x+1=x-4``.
"""

from typing import Optional

from .base import BaseSolver, SolverResult
from .quadratic import SQUARE_MARKER
from ..input.text import CONSTANT, extract_coefficients, split_equation
from ..models import EquationType, ParsedEquation
from ..output.step_generator import StepGenerator
from ..utils.formatting import format_number


class SingleLinearSolver(BaseSolver):
    """Reduce ``a·x + b = c·x + d`` to ``x = (d - b) / (a - c)``."""

    name = "SingleLinearSolver"
    description = "Linear equations in one unknown x"

    def __init__(self, step_generator: Optional[StepGenerator] = None):
        self.step_generator = step_generator or StepGenerator()

    def can_solve(self, text: str) -> bool:
        return "x" in text and "=" in text

    def solve(self, text: str) -> SolverResult:
        sides = split_equation(text)
        if sides is None:
            return self._failure("Expected exactly one '='")

        # x^2 terms on both sides may cancel out
        variables = [SQUARE_MARKER, "x"]
        left = extract_coefficients(sides[0], variables)
        right = extract_coefficients(sides[1], variables)
        if left is None or right is None:
            return self._failure("Unreadable linear equation")
        if left[SQUARE_MARKER] != right[SQUARE_MARKER]:
            return self._failure("Not linear: x^2 terms remain")

        coefficient = left["x"] - right["x"]
        constant = right[CONSTANT] - left[CONSTANT]
        if coefficient == 0:
            return self._failure("x cancels out")

        solution = constant / coefficient
        parsed = ParsedEquation(
            raw_text=text,
            normalized=text,
            equation_type=EquationType.SINGLE_LINEAR,
            coefficients={"x": coefficient, CONSTANT: constant},
            solutions={"x": solution},
            steps=self.step_generator.generate_single_linear_steps(
                coefficient, constant, solution
            ),
            final_answer=f"x = {format_number(solution)}",
        )
        return SolverResult.from_parsed(parsed, solver_name=self.name)
