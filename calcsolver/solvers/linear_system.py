"""
Linear systems in two or three unknowns, one equation per line.

Example:
    x+y=3
    x-y=1
"""

from typing import List, Optional

from .base import BaseSolver, SolverResult
from .linear import NO_UNIQUE_SOLUTION, solve_linear_system
from ..input.text import CONSTANT, extract_coefficients, split_equation
from ..models import EquationType, ParsedEquation
from ..output.step_generator import StepGenerator
from ..utils.formatting import format_number

SYSTEM_VARIABLES = {2: ["x", "y"], 3: ["x", "y", "z"]}


class LinearSystemSolver(BaseSolver):
    """
    Parse each line into a coefficient row and solve by Gaussian elimination.

    A singular system is still a recognized system; its final answer
    reports that there is no unique solution.
    """

    name = "LinearSystemSolver"
    description = "Linear systems with 2 or 3 unknowns"

    def __init__(self, step_generator: Optional[StepGenerator] = None):
        self.step_generator = step_generator or StepGenerator()

    def can_solve(self, text: str) -> bool:
        lines = text.split("\n")
        return len(lines) in SYSTEM_VARIABLES and all(
            line.count("=") == 1 for line in lines
        )

    def solve(self, text: str) -> SolverResult:
        lines = text.split("\n")
        variables = SYSTEM_VARIABLES[len(lines)]

        matrix: List[List[float]] = []
        constants: List[float] = []
        for line in lines:
            sides = split_equation(line)
            if sides is None:
                return self._failure(f"Not an equation: {line!r}")
            left = extract_coefficients(sides[0], variables)
            right = extract_coefficients(sides[1], variables)
            if left is None or right is None:
                return self._failure(f"Unreadable linear equation: {line!r}")
            matrix.append([left[v] - right[v] for v in variables])
            constants.append(right[CONSTANT] - left[CONSTANT])

        result = solve_linear_system(matrix, constants)
        solution = result.solution if result.success else None

        if solution is None:
            final_answer = NO_UNIQUE_SOLUTION
            solutions = {}
        else:
            solutions = dict(zip(variables, solution))
            final_answer = ", ".join(
                f"{name} = {format_number(value)}" for name, value in solutions.items()
            )

        parsed = ParsedEquation(
            raw_text=text,
            normalized=text,
            equation_type=EquationType.LINEAR_SYSTEM,
            subtype=f"{len(variables)}_variables",
            coefficients={"matrix": matrix, "constants": constants},
            solutions=solutions,
            steps=self.step_generator.generate_linear_system_steps(
                variables, matrix, constants, solution
            ),
            final_answer=final_answer,
        )
        return SolverResult.from_parsed(parsed, solver_name=self.name)
