"""Solver layer: the linear system solver and one solver per equation family."""

from .base import BaseSolver, SolverResult, SolverRegistry
from .linear import solve_linear_system, solve_coefficient_form
from .linear_system import LinearSystemSolver
from .quadratic import QuadraticSolver
from .single_linear import SingleLinearSolver

__all__ = [
    "BaseSolver",
    "SolverResult",
    "SolverRegistry",
    "solve_linear_system",
    "solve_coefficient_form",
    "LinearSystemSolver",
    "QuadraticSolver",
    "SingleLinearSolver",
    "get_default_registry",
]


def get_default_registry() -> SolverRegistry:
    """
    Create and return a solver registry with all families at standard priorities.

    Priority order (lower = higher priority):
    - Linear system: 10 (two or three lines, one '=' each)
    - Quadratic: 20 (contains x^2, or a factored product equal to 0)
    - Single linear: 30 (contains x and '=')
    """
    registry = SolverRegistry()
    registry.register(LinearSystemSolver(), priority=10)
    registry.register(QuadraticSolver(), priority=20)
    registry.register(SingleLinearSolver(), priority=30)
    return registry
