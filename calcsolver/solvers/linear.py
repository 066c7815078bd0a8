"""
Dense linear system solver.

Gaussian elimination with partial pivoting (Gauss-Jordan form: every
pivot row is normalized and its column cleared in all other rows, so the
constant vector ends up holding the solution directly).
"""

import math
from typing import List, Sequence

from ..models import LinearSolveResult, LinearSystem
from ..utils.errors import InvalidCoefficientError

SINGULAR_THRESHOLD = 1e-10
ELIMINATION_THRESHOLD = 1e-12

NO_UNIQUE_SOLUTION = "No unique solution"


def solve_linear_system(
    matrix: Sequence[Sequence[float]], constants: Sequence[float]
) -> LinearSolveResult:
    """
    Solve ``matrix · v = constants``.

    The inputs are copied, never modified.

    Returns:
        LinearSolveResult with the solution vector in variable order, or a
        failed result when the system has no unique solution.

    Raises:
        ValueError: If the matrix is not square or does not match the
            length of *constants*.
    """
    n = len(constants)
    if len(matrix) != n or any(len(row) != n for row in matrix):
        raise ValueError(
            f"Expected a {n}x{n} matrix for {n} constants, "
            f"got {len(matrix)} rows of lengths {[len(row) for row in matrix]}"
        )

    a: List[List[float]] = [[float(v) for v in row] for row in matrix]
    b: List[float] = [float(v) for v in constants]

    for col in range(n):
        pivot_row = max(range(col, n), key=lambda r: abs(a[r][col]))
        if abs(a[pivot_row][col]) < SINGULAR_THRESHOLD:
            return LinearSolveResult.failure(NO_UNIQUE_SOLUTION)

        if pivot_row != col:
            a[col], a[pivot_row] = a[pivot_row], a[col]
            b[col], b[pivot_row] = b[pivot_row], b[col]

        pivot = a[col][col]
        a[col] = [v / pivot for v in a[col]]
        b[col] /= pivot

        for row in range(n):
            if row == col:
                continue
            factor = a[row][col]
            if abs(factor) < ELIMINATION_THRESHOLD:
                continue
            a[row] = [v - factor * p for v, p in zip(a[row], a[col])]
            b[row] -= factor * b[col]

    return LinearSolveResult.from_solution(b)


def solve(system: LinearSystem) -> LinearSolveResult:
    """Solve a LinearSystem."""
    return solve_linear_system(system.matrix, system.constants)


def solve_coefficient_form(rows: Sequence[Sequence[str]]) -> LinearSolveResult:
    """
    Solve the N-variable equation form.

    Each row holds the N coefficient fields followed by the constant field,
    all as raw text. Every field is validated before anything is solved.

    Raises:
        InvalidCoefficientError: If a field is not a number.
    """
    matrix: List[List[float]] = []
    constants: List[float] = []
    for r, row in enumerate(rows):
        values = []
        for c, cell in enumerate(row):
            try:
                value = float(cell.strip())
            except ValueError:
                raise InvalidCoefficientError(cell, r, c) from None
            if not math.isfinite(value):
                raise InvalidCoefficientError(cell, r, c)
            values.append(value)
        if len(values) < 2:
            raise ValueError(f"Row {r + 1} needs coefficients and a constant")
        matrix.append(values[:-1])
        constants.append(values[-1])

    return solve_linear_system(matrix, constants)
