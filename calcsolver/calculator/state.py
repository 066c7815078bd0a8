"""
Calculator state.

The state is an immutable value; every event produces a new one. The
pending operation is a single tagged slot, so a basic operator and a
chained power/root can never be armed at the same time.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union


class AngleMode(Enum):
    RADIANS = "radians"
    DEGREES = "degrees"


class BasicOperation(Enum):
    """Arithmetic operators, valued by their key label."""

    ADD = "+"
    SUBTRACT = "−"
    MULTIPLY = "×"
    DIVIDE = "÷"

    def apply(self, first: float, second: float) -> float:
        if self is BasicOperation.ADD:
            return first + second
        if self is BasicOperation.SUBTRACT:
            return first - second
        if self is BasicOperation.MULTIPLY:
            return first * second
        # Division by zero yields 0 rather than an error or infinity
        if second == 0:
            return 0.0
        return first / second


class AdvancedOperation(Enum):
    POWER = "power"
    ROOT = "root"


@dataclass(frozen=True)
class PendingBasic:
    """A basic operator waiting for its second operand."""

    operation: BasicOperation
    operand: float


@dataclass(frozen=True)
class PendingAdvanced:
    """A power/root operator waiting for its exponent or root degree."""

    operation: AdvancedOperation
    operand: float


Pending = Optional[Union[PendingBasic, PendingAdvanced]]


@dataclass(frozen=True)
class CalculatorState:
    """Everything the calculator remembers between key presses."""

    current_input: str = "0"
    pending: Pending = None
    is_entering_digit: bool = False
    history: str = ""
    memory: float = 0.0
    angle_mode: AngleMode = AngleMode.RADIANS
    inverse_mode: bool = False

    @property
    def pending_basic(self) -> Optional[PendingBasic]:
        return self.pending if isinstance(self.pending, PendingBasic) else None

    @property
    def pending_advanced(self) -> Optional[PendingAdvanced]:
        return self.pending if isinstance(self.pending, PendingAdvanced) else None

    def evolve(self, **changes) -> "CalculatorState":
        """Return a copy with *changes* applied."""
        return replace(self, **changes)
