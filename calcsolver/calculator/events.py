"""
Discrete input events for the calculator engine.

Each keypad button maps to exactly one CalculatorEvent. The vocabulary is
closed: digits, the basic operators and equals, a fixed catalog of
function keys, four memory keys and two clear keys.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List

from ..utils.errors import KeyTokenError


class EventKind(Enum):
    """Event categories accepted by the engine."""

    DIGIT = auto()
    BINARY_OP = auto()
    UNARY_FN = auto()
    MEMORY_OP = auto()
    CONTROL_OP = auto()


DIGITS = tuple("0123456789.")

EQUALS = "="
BINARY_OPERATORS = ("+", "−", "×", "÷", EQUALS)

# ASCII spellings accepted when typing key sequences
OPERATOR_ALIASES = {"-": "−", "*": "×", "x": "×", "/": "÷"}

FUNCTIONS = (
    "x²",
    "x³",
    "xʸ",
    "eˣ",
    "10ˣ",
    "¹/ₓ",
    "%",
    "²√x",
    "³√x",
    "ʸ√x",
    "ln",
    "log₁₀",
    "x!",
    "sin",
    "cos",
    "tan",
    "sinh",
    "cosh",
    "tanh",
    "π",
    "e",
    "Rand",
    "EE",
    "2nd",
    "Rad",
)

MEMORY_KEYS = ("m+", "m-", "mc", "mr")

FULL_CLEAR = "AC"
SINGLE_CLEAR = "C"
CONTROL_KEYS = (FULL_CLEAR, SINGLE_CLEAR)


@dataclass(frozen=True)
class CalculatorEvent:
    """One button press."""

    kind: EventKind
    token: str

    @classmethod
    def digit(cls, char: str) -> "CalculatorEvent":
        return cls(EventKind.DIGIT, char)

    @classmethod
    def binary_op(cls, symbol: str) -> "CalculatorEvent":
        return cls(EventKind.BINARY_OP, OPERATOR_ALIASES.get(symbol, symbol))

    @classmethod
    def unary_fn(cls, symbol: str) -> "CalculatorEvent":
        return cls(EventKind.UNARY_FN, symbol)

    @classmethod
    def memory_op(cls, token: str) -> "CalculatorEvent":
        return cls(EventKind.MEMORY_OP, token)

    @classmethod
    def control_op(cls, token: str) -> "CalculatorEvent":
        return cls(EventKind.CONTROL_OP, token)


def parse_key(token: str) -> CalculatorEvent:
    """
    Map a key label to its event.

    Raises:
        KeyTokenError: If the label is not on the keypad.
    """
    if token in DIGITS:
        return CalculatorEvent.digit(token)
    if token in BINARY_OPERATORS or token in OPERATOR_ALIASES:
        return CalculatorEvent.binary_op(token)
    if token in FUNCTIONS:
        return CalculatorEvent.unary_fn(token)
    if token in MEMORY_KEYS:
        return CalculatorEvent.memory_op(token)
    if token in CONTROL_KEYS:
        return CalculatorEvent.control_op(token)
    raise KeyTokenError(token)


def parse_key_sequence(text: str) -> List[CalculatorEvent]:
    """
    Split a typed key sequence into events.

    Keys are separated by whitespace; a run of digits such as ``"12.5"``
    is expanded into one event per character.
    """
    events = []
    for word in text.split():
        if len(word) > 1 and all(ch in DIGITS for ch in word):
            events.extend(CalculatorEvent.digit(ch) for ch in word)
        else:
            events.append(parse_key(word))
    return events
