"""
Scientific calculator state engine.

The engine is an explicit transition function ``(state, event) -> state``
plus a thin stateful wrapper for interactive sessions. Operators fold
strictly left to right: ``2 + 3 × 4 =`` gives 20.

Usage:
    engine = CalculatorEngine()
    for key in "2 + 3 × 4 =".split():
        engine.press(key)
    print(engine.display)  # 20
"""

import math
import random
from typing import NamedTuple, Optional

from .events import (
    CalculatorEvent,
    EventKind,
    EQUALS,
    FULL_CLEAR,
    SINGLE_CLEAR,
    parse_key,
)
from .functions import RandomSource, evaluate_function, nth_root, power
from .state import (
    AdvancedOperation,
    AngleMode,
    BasicOperation,
    CalculatorState,
    PendingAdvanced,
    PendingBasic,
)
from ..utils.formatting import format_buffer, format_number, parse_number

MAX_INPUT_LENGTH = 15


class DisplaySnapshot(NamedTuple):
    """What a display polls after each event."""

    display: str
    history: str
    is_entering_digit: bool


def value_to_buffer(value: float) -> str:
    """Store a computed value in the input buffer without losing precision."""
    if math.isfinite(value) and value == math.floor(value) and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def display_text(state: CalculatorState) -> str:
    """
    Text for the main display.

    A buffer the user is typing is shown verbatim; anything else (results,
    constants, recalled memory longer than the typing limit) goes through
    the number formatter.
    """
    if state.is_entering_digit and len(state.current_input) <= MAX_INPUT_LENGTH:
        return state.current_input
    return format_buffer(state.current_input)


def transition(
    state: CalculatorState,
    event: CalculatorEvent,
    random_source: RandomSource = random.random,
) -> CalculatorState:
    """Return the state that follows *state* after *event*."""
    if event.kind is EventKind.DIGIT:
        return _handle_digit(state, event.token)
    if event.kind is EventKind.BINARY_OP:
        if event.token == EQUALS:
            return _handle_equals(state)
        return _handle_operator(state, event.token)
    if event.kind is EventKind.UNARY_FN:
        return _handle_function(state, event.token, random_source)
    if event.kind is EventKind.MEMORY_OP:
        return _handle_memory(state, event.token)
    if event.kind is EventKind.CONTROL_OP:
        return _handle_control(state, event.token)
    return state


def _handle_digit(state: CalculatorState, digit: str) -> CalculatorState:
    if not state.is_entering_digit:
        return state.evolve(current_input=digit, is_entering_digit=True)

    buffer = state.current_input
    if len(buffer) >= MAX_INPUT_LENGTH:
        return state
    if buffer == "0" and digit != ".":
        return state.evolve(current_input=digit)
    if digit == "." and "." in buffer:
        return state
    return state.evolve(current_input=buffer + digit)


def _handle_operator(state: CalculatorState, symbol: str) -> CalculatorState:
    value = parse_number(state.current_input)
    if value is None:
        return state
    try:
        operation = BasicOperation(symbol)
    except ValueError:
        return state

    pending = state.pending_basic
    if pending is None:
        # Also replaces an armed power/root
        return state.evolve(
            pending=PendingBasic(operation, value),
            is_entering_digit=False,
            history=f"{format_number(value)} {operation.value}",
        )

    result = pending.operation.apply(pending.operand, value)
    return state.evolve(
        pending=PendingBasic(operation, result),
        current_input=value_to_buffer(result),
        is_entering_digit=False,
        history=f"{format_number(result)} {operation.value}",
    )


def _handle_equals(state: CalculatorState) -> CalculatorState:
    value = parse_number(state.current_input)
    if value is None:
        return state

    advanced = state.pending_advanced
    if advanced is not None:
        base = advanced.operand
        if advanced.operation is AdvancedOperation.POWER:
            result = power(base, value)
            history = f"{format_number(base)} ^ {format_number(value)} ="
        else:
            result = nth_root(base, value)
            history = f"{format_number(value)}√{format_number(base)} ="
        return state.evolve(
            pending=None,
            current_input=value_to_buffer(result),
            is_entering_digit=False,
            history=history,
        )

    basic = state.pending_basic
    if basic is not None:
        result = basic.operation.apply(basic.operand, value)
        return state.evolve(
            pending=None,
            current_input=value_to_buffer(result),
            is_entering_digit=False,
            history=(
                f"{format_number(basic.operand)} {basic.operation.value} "
                f"{format_number(value)} ="
            ),
        )

    return state


def _handle_function(
    state: CalculatorState, symbol: str, random_source: RandomSource
) -> CalculatorState:
    # Toggles never end digit entry
    if symbol == "2nd":
        inverse = not state.inverse_mode
        return state.evolve(
            inverse_mode=inverse,
            history="2nd functions on" if inverse else "2nd functions off",
        )
    if symbol == "Rad":
        mode = (
            AngleMode.DEGREES
            if state.angle_mode is AngleMode.RADIANS
            else AngleMode.RADIANS
        )
        return state.evolve(angle_mode=mode, history=f"Angle mode: {mode.value}")
    if symbol == "EE":
        buffer = state.current_input
        if "e" not in buffer:
            buffer = buffer + "e" if state.is_entering_digit else "1e"
        return state.evolve(current_input=buffer, is_entering_digit=True)

    # Constants replace the buffer and start a fresh entry
    if symbol == "π":
        return state.evolve(
            current_input=repr(math.pi), is_entering_digit=True, history=""
        )
    if symbol == "e":
        return state.evolve(
            current_input=repr(math.e), is_entering_digit=True, history=""
        )

    value = parse_number(state.current_input)
    if value is None:
        return state

    if symbol == "xʸ":
        return state.evolve(
            pending=PendingAdvanced(AdvancedOperation.POWER, value),
            is_entering_digit=False,
            history=f"{format_number(value)} ^",
        )
    if symbol == "ʸ√x":
        return state.evolve(
            pending=PendingAdvanced(AdvancedOperation.ROOT, value),
            is_entering_digit=False,
            history=f"ʸ√({format_number(value)})",
        )

    evaluated = evaluate_function(
        symbol,
        value,
        angle_mode=state.angle_mode,
        inverse=state.inverse_mode,
        random_source=random_source,
    )
    if evaluated is None:
        return state

    result, history = evaluated
    return state.evolve(
        current_input=value_to_buffer(result),
        is_entering_digit=False,
        history=history,
        pending=None if state.pending_advanced else state.pending,
    )


def _handle_memory(state: CalculatorState, token: str) -> CalculatorState:
    value = parse_number(state.current_input)
    if value is None:
        return state

    if token == "m+":
        return state.evolve(memory=state.memory + value, is_entering_digit=False)
    if token == "m-":
        return state.evolve(memory=state.memory - value, is_entering_digit=False)
    if token == "mc":
        return state.evolve(memory=0.0)
    if token == "mr":
        return state.evolve(
            current_input=value_to_buffer(state.memory), is_entering_digit=True
        )
    return state


def _handle_control(state: CalculatorState, token: str) -> CalculatorState:
    if token == FULL_CLEAR:
        # Angle mode is a preference, not part of the calculation
        return CalculatorState(angle_mode=state.angle_mode)
    if token == SINGLE_CLEAR:
        return state.evolve(current_input="0", is_entering_digit=True)
    return state


class CalculatorEngine:
    """
    Interactive calculator session.

    Owns one CalculatorState and feeds it events one at a time. The random
    source used by the Rand key is injectable so tests can fix its output.
    """

    def __init__(
        self,
        random_source: Optional[RandomSource] = None,
        state: Optional[CalculatorState] = None,
    ):
        self._random_source = random_source or random.random
        self._state = state or CalculatorState()

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def display(self) -> str:
        return display_text(self._state)

    @property
    def history(self) -> str:
        return self._state.history

    @property
    def is_entering_digit(self) -> bool:
        return self._state.is_entering_digit

    def snapshot(self) -> DisplaySnapshot:
        return DisplaySnapshot(self.display, self.history, self.is_entering_digit)

    def apply(self, event: CalculatorEvent) -> DisplaySnapshot:
        """Dispatch one event and return the refreshed display fields."""
        self._state = transition(self._state, event, self._random_source)
        return self.snapshot()

    def press(self, key: str) -> DisplaySnapshot:
        """Dispatch the event for a key label such as ``"7"`` or ``"sin"``."""
        return self.apply(parse_key(key))

    def control_event(self) -> CalculatorEvent:
        """
        The event the clear key should send right now.

        While a number is being typed the key clears only that entry;
        otherwise it clears everything.
        """
        token = SINGLE_CLEAR if self.is_entering_digit else FULL_CLEAR
        return CalculatorEvent.control_op(token)

    @property
    def control_label(self) -> str:
        return self.control_event().token
