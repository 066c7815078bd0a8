"""Calculator layer: event vocabulary, immutable state and the state engine."""

from .events import CalculatorEvent, EventKind, parse_key, parse_key_sequence
from .state import AngleMode, CalculatorState
from .engine import CalculatorEngine, DisplaySnapshot, transition

__all__ = [
    "CalculatorEvent",
    "EventKind",
    "parse_key",
    "parse_key_sequence",
    "AngleMode",
    "CalculatorState",
    "CalculatorEngine",
    "DisplaySnapshot",
    "transition",
]
