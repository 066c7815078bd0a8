"""
Step-by-step solution generator.

Generates human-readable explanations for each equation family. The
step text is deterministic for a given normalized input; the attached
SymPy expressions are only used to pre-render LaTeX for display.
"""

import math
from typing import List, Optional, Sequence

import sympy as sp

from ..models import SolutionStep
from ..utils.formatting import format_number


def format_term(coefficient: float, name: str, first: bool) -> str:
    """Render one signed term, e.g. ``-x``, `` + 3y``, `` - 2.5``."""
    magnitude = abs(coefficient)
    body = format_number(magnitude)
    if name:
        body = name if magnitude == 1 else f"{body}{name}"
    if first:
        return f"-{body}" if coefficient < 0 else body
    return f" - {body}" if coefficient < 0 else f" + {body}"


def format_polynomial(terms: Sequence[tuple]) -> str:
    """Render ``[(coefficient, name), ...]`` skipping zero terms; ``0`` if empty."""
    parts = []
    for coefficient, name in terms:
        if coefficient == 0:
            continue
        parts.append(format_term(coefficient, name, first=not parts))
    return "".join(parts) or "0"


def to_sympy_number(value: float) -> sp.Expr:
    if math.isnan(value):
        return sp.nan
    if math.isinf(value):
        return sp.oo if value > 0 else -sp.oo
    if value == int(value):
        return sp.Integer(int(value))
    return sp.Float(value, 8)


class StepGenerator:
    """
    Generate step-by-step explanations for equation solving.

    This class provides pedagogical output by breaking down
    the solution process into understandable steps.
    """

    def create_step(
        self, step_number: int, operation: str, equation_state: Optional[sp.Basic] = None
    ) -> SolutionStep:
        """
        Create a solution step.

        Args:
            step_number: Sequential step number
            operation: Human-readable description of the operation
            equation_state: SymPy expression at this step, if any

        Returns:
            SolutionStep object
        """
        return SolutionStep(
            step_number=step_number,
            operation=operation,
            equation_state=equation_state,
        )

    def generate_linear_system_steps(
        self,
        variables: Sequence[str],
        matrix: Sequence[Sequence[float]],
        constants: Sequence[float],
        solution: Optional[Sequence[float]],
    ) -> List[SolutionStep]:
        """Steps for an N-variable linear system solved by elimination."""
        steps = []
        n = len(variables)

        rows = []
        for row, constant in zip(matrix, constants):
            lhs = format_polynomial(list(zip(row, variables)))
            rows.append(f"{lhs} = {format_number(constant)}")
        steps.append(
            self.create_step(
                1,
                "Write the system in standard form: " + "; ".join(rows),
                sp.Matrix(
                    [
                        [to_sympy_number(v) for v in row] + [to_sympy_number(c)]
                        for row, c in zip(matrix, constants)
                    ]
                ),
            )
        )
        steps.append(
            self.create_step(
                2,
                f"Solve the {n}x{n} system by Gaussian elimination with partial pivoting",
            )
        )

        if solution is None:
            steps.append(
                self.create_step(
                    3,
                    "No usable pivot was found, so the equations are dependent "
                    "or inconsistent: the system has no unique solution",
                )
            )
            return steps

        steps.append(
            self.create_step(
                3,
                "Eliminate each variable in turn until every equation "
                "holds a single variable",
            )
        )
        for i, (name, value) in enumerate(zip(variables, solution)):
            steps.append(
                self.create_step(
                    4 + i,
                    f"{name} = {format_number(value)}",
                    sp.Eq(sp.Symbol(name), to_sympy_number(value)),
                )
            )
        return steps

    def generate_single_linear_steps(
        self, coefficient: float, constant: float, solution: float
    ) -> List[SolutionStep]:
        """
        Steps for ``coefficient·x = constant``.

        The caller has already moved every x term left and every constant right.
        """
        x = sp.Symbol("x")
        lhs = format_polynomial([(coefficient, "x")])
        steps = [
            self.create_step(
                1,
                f"Collect x terms on the left and constants on the right: "
                f"{lhs} = {format_number(constant)}",
                sp.Eq(to_sympy_number(coefficient) * x, to_sympy_number(constant)),
            ),
            self.create_step(
                2,
                f"Divide both sides by {format_number(coefficient)}: "
                f"x = {format_number(constant)} / {format_number(coefficient)}",
            ),
            self.create_step(
                3,
                f"x = {format_number(solution)}",
                sp.Eq(x, to_sympy_number(solution)),
            ),
        ]
        return steps

    def generate_quadratic_steps(
        self,
        a: float,
        b: float,
        c: float,
        discriminant: float,
        conclusion: str,
    ) -> List[SolutionStep]:
        """
        Steps for ``ax² + bx + c = 0`` via the quadratic formula.

        For equations of form: ax² + bx + c = 0
        """
        x = sp.Symbol("x")
        standard = format_polynomial([(a, "x^2"), (b, "x"), (c, "")])
        steps = [
            self.create_step(
                1,
                f"Write in standard form ax^2 + bx + c = 0: {standard} = 0",
                sp.Eq(
                    to_sympy_number(a) * x**2
                    + to_sympy_number(b) * x
                    + to_sympy_number(c),
                    0,
                ),
            ),
            self.create_step(
                2,
                f"Identify a = {format_number(a)}, b = {format_number(b)}, "
                f"c = {format_number(c)}",
            ),
            self.create_step(
                3,
                f"Calculate the discriminant Δ = b^2 - 4ac = {format_number(discriminant)}",
                sp.Eq(sp.Symbol("Δ"), to_sympy_number(discriminant)),
            ),
            self.create_step(
                4,
                "Apply the quadratic formula x = (-b ± √Δ) / (2a)",
                sp.Eq(
                    x,
                    (-sp.Symbol("b") + sp.sqrt(sp.Symbol("Δ"))) / (2 * sp.Symbol("a")),
                ),
            ),
            self.create_step(5, conclusion),
        ]
        return steps

    def generate_factored_steps(
        self, factors: Sequence[str], roots: Sequence[float]
    ) -> List[SolutionStep]:
        """Steps for ``(px + q)(rx + s) = 0`` via the zero product property."""
        x = sp.Symbol("x")
        steps = [
            self.create_step(
                1,
                "The equation is already factored: "
                + "".join(f"({f})" for f in factors)
                + " = 0",
            ),
            self.create_step(
                2, "Apply the zero product property: one of the factors must be 0"
            ),
        ]
        for i, (factor, root) in enumerate(zip(factors, roots)):
            steps.append(
                self.create_step(
                    3 + i,
                    f"{factor} = 0 gives x = {format_number(root)}",
                    sp.Eq(x, to_sympy_number(root)),
                )
            )
        return steps

    def format_step_text(self, step: SolutionStep) -> str:
        """
        Format a step for plain text display.
        """
        return f"Step {step.step_number}: {step.operation}"

    def steps_to_text(self, steps: List[SolutionStep]) -> str:
        """
        Convert all steps to plain text.
        """
        return "\n".join(self.format_step_text(s) for s in steps)
