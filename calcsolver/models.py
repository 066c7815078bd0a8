"""
Core data structures for CalcSolver.

These dataclasses define the contract between the parser, the solvers
and the output layer.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from enum import Enum, auto

import sympy as sp


UNRECOGNIZED_MESSAGE = (
    "Could not recognize the equation. Supported formats: a linear system "
    "with 2 or 3 unknowns (one equation per line), a linear equation in x, "
    "or a quadratic equation in x."
)


class EquationType(Enum):
    """Equation families the text parser recognizes."""

    LINEAR_SYSTEM = auto()
    SINGLE_LINEAR = auto()
    QUADRATIC = auto()
    UNRECOGNIZED = auto()


CATEGORY_LABELS = {
    EquationType.LINEAR_SYSTEM: "Linear system",
    EquationType.SINGLE_LINEAR: "Linear equation",
    EquationType.QUADRATIC: "Quadratic equation",
    EquationType.UNRECOGNIZED: "Unrecognized",
}


@dataclass
class SolutionStep:
    """A single step in a solution derivation."""

    step_number: int
    operation: str  # Human-readable text, e.g. "Apply the quadratic formula"
    equation_state: Optional[sp.Basic] = None  # SymPy expression at this step
    latex_repr: str = ""  # Pre-rendered LaTeX for display

    def __post_init__(self):
        if not self.latex_repr and self.equation_state is not None:
            self.latex_repr = sp.latex(self.equation_state)


@dataclass
class LinearSystem:
    """
    A square linear system A·v = b.

    Built per solve call and never retained.
    """

    matrix: List[List[float]]
    constants: List[float]

    @property
    def size(self) -> int:
        return len(self.constants)


@dataclass
class LinearSolveResult:
    """
    Result of solving a linear system.

    A singular system is a normal outcome, reported with success=False.
    """

    success: bool
    solution: Optional[List[float]] = None
    error_message: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> "LinearSolveResult":
        """Create a failed result."""
        return cls(success=False, error_message=message)

    @classmethod
    def from_solution(cls, solution: List[float]) -> "LinearSolveResult":
        """Create a successful result from a solution vector."""
        return cls(success=True, solution=solution)


@dataclass
class ParsedEquation:
    """
    Outcome of parsing equation text.

    Produced and consumed within one parse call. Coefficients and
    solutions are keyed by name (``"x"``, ``"a"``, ``"discriminant"``...).
    """

    raw_text: str
    normalized: str
    equation_type: EquationType
    subtype: Optional[str] = None
    coefficients: Dict[str, Any] = field(default_factory=dict)
    solutions: Dict[str, Any] = field(default_factory=dict)
    steps: List[SolutionStep] = field(default_factory=list)
    final_answer: str = ""

    @classmethod
    def unrecognized(cls, raw_text: str, normalized: str = "") -> "ParsedEquation":
        """Create the result for text that matches no equation family."""
        return cls(
            raw_text=raw_text,
            normalized=normalized,
            equation_type=EquationType.UNRECOGNIZED,
            final_answer=UNRECOGNIZED_MESSAGE,
        )

    @property
    def recognized(self) -> bool:
        return self.equation_type != EquationType.UNRECOGNIZED

    @property
    def category_label(self) -> str:
        """Human-readable family name, e.g. ``"Linear system (2 variables)"``."""
        label = CATEGORY_LABELS[self.equation_type]
        if self.subtype:
            label += f" ({self.subtype.replace('_', ' ')})"
        return label

    @property
    def step_texts(self) -> List[str]:
        return [step.operation for step in self.steps]


@dataclass
class OCRResult:
    """Result from OCR processing."""

    text: str
    confidence: float
    processing_time_ms: int
    image_path: Optional[str] = None
