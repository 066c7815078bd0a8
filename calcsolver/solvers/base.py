"""
Base solver interface and common result types.

Each equation family has one solver. Solvers inherit from BaseSolver,
receive normalized text and return SolverResult.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Tuple
from dataclasses import dataclass
import logging

from ..models import ParsedEquation

logger = logging.getLogger(__name__)


@dataclass
class SolverResult:
    """
    Result from a solver operation.

    A failure means "this family does not apply after all"; the registry
    then tries the next family.
    """

    success: bool
    parsed: Optional[ParsedEquation] = None
    error_message: Optional[str] = None
    solver_name: str = ""

    @classmethod
    def failure(cls, message: str, solver_name: str = "") -> "SolverResult":
        """Create a failed result."""
        return cls(success=False, error_message=message, solver_name=solver_name)

    @classmethod
    def from_parsed(cls, parsed: ParsedEquation, solver_name: str = "") -> "SolverResult":
        """Create a successful result from a ParsedEquation."""
        return cls(success=True, parsed=parsed, solver_name=solver_name)


class BaseSolver(ABC):
    """
    Abstract base class for equation family solvers.

    Subclasses implement can_solve() as a cheap shape check and solve()
    as the full parse.
    """

    # Human-readable name for this solver
    name: str = "BaseSolver"

    # Description of what this solver handles
    description: str = "Base solver class"

    @abstractmethod
    def can_solve(self, text: str) -> bool:
        """
        Check if this solver should attempt the normalized text.

        Args:
            text: Output of ``normalize()``

        Returns:
            True if this solver can attempt to solve it
        """
        pass

    @abstractmethod
    def solve(self, text: str) -> SolverResult:
        """
        Attempt to parse and solve the normalized text.

        Must not raise for malformed input; return a failure instead.
        """
        pass

    def _failure(self, message: str) -> SolverResult:
        logger.debug("%s declined: %s", self.name, message)
        return SolverResult.failure(message, solver_name=self.name)


class SolverRegistry:
    """
    Registry of available solvers.

    Maintains priority order for solver selection.
    """

    def __init__(self):
        self._solvers: List[Tuple[int, BaseSolver]] = []

    def register(self, solver: BaseSolver, priority: int = 100):
        """
        Register a solver with given priority (lower = higher priority).
        """
        self._solvers.append((priority, solver))
        self._solvers.sort(key=lambda x: x[0])

    def get_all_capable(self, text: str) -> List[BaseSolver]:
        """Get all solvers that can handle this text."""
        return [solver for _, solver in self._solvers if solver.can_solve(text)]

    def solve(self, text: str) -> Optional[SolverResult]:
        """
        Try each capable solver in priority order.

        Returns:
            The first successful result, or None if every family declined.
        """
        for solver in self.get_all_capable(text):
            try:
                result = solver.solve(text)
            except (ArithmeticError, ValueError) as e:
                logger.debug("%s failed on %r: %s", solver.name, text, e)
                continue
            if result.success:
                logger.debug("Solved %r with %s", text, solver.name)
                return result
        return None

    @property
    def solvers(self) -> List[BaseSolver]:
        """Get all registered solvers in priority order."""
        return [solver for _, solver in self._solvers]
