"""
Calculator Engine for TabCalc
Handles digit entry, operator chaining, memory and result formatting
"""
import logging
import math
import re
from dataclasses import dataclass, replace
from decimal import Decimal, Context, ROUND_HALF_UP
from enum import Enum
from typing import Callable, Optional

import config

logger = logging.getLogger(__name__)


class Operator(Enum):
    ADD = '+'
    SUBTRACT = '-'
    MULTIPLY = '*'
    DIVIDE = '/'

    @property
    def symbol(self):
        """Symbol shown on the keypad"""
        return {'*': '×', '/': '÷'}.get(self.value, self.value)


class Phase(Enum):
    READY = 'ready'
    PENDING_OPERATOR = 'pending_operator'
    ERROR = 'error'


# ── Number conversions ────────────────────────────────────────────────────────

_NUMERAL_PREFIX = re.compile(r'\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')

# Wide enough to quantize anything below 1e21 to ten places
_FIXED_CONTEXT = Context(prec=64, rounding=ROUND_HALF_UP)


def _shortest_digits(value):
    """Return (digits, point) with value == 0.digits * 10**point, shortest round-trip."""
    sign, digits, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = ''.join(map(str, digits))
    return digits, len(digits) + exponent


def number_to_string(value: float) -> str:
    """Default number-to-string conversion used for display values.

    Plain notation for decimal exponents in [-6, 21), otherwise
    ``1.5e+21`` / ``1e-7`` style.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value == 0:
        return '0'

    sign = '-' if value < 0 else ''
    digits, point = _shortest_digits(value)
    k = len(digits)

    if k <= point <= 21:
        return sign + digits + '0' * (point - k)
    if 0 < point <= 21:
        return sign + digits[:point] + '.' + digits[point:]
    if -6 < point <= 0:
        return sign + '0.' + '0' * (-point) + digits

    exponent = point - 1
    mantissa = digits[0] + ('.' + digits[1:] if k > 1 else '')
    return f"{sign}{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"


def round_fixed(value: float, places: int) -> float:
    """Round half away from zero on the exact binary value, as a fixed-point rendering would."""
    if abs(value) >= 1e21:
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, context=_FIXED_CONTEXT))


def to_exponential(value: float, fraction_digits: int) -> str:
    """Exponential rendering with a fixed number of mantissa fraction digits."""
    if value == 0:
        return '0.' + '0' * fraction_digits + 'e+0' if fraction_digits else '0e+0'

    context = Context(prec=fraction_digits + 1, rounding=ROUND_HALF_UP)
    rounded = context.plus(Decimal(abs(value)))
    digits = ''.join(map(str, rounded.as_tuple().digits)).ljust(fraction_digits + 1, '0')
    exponent = rounded.adjusted()

    sign = '-' if value < 0 else ''
    mantissa = digits[0] + ('.' + digits[1:] if fraction_digits else '')
    return f"{sign}{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"


def parse_number(text: str) -> Optional[float]:
    """Parse the leading numeral of a display string, None if there is none."""
    match = _NUMERAL_PREFIX.match(text)
    if not match:
        return None
    return float(match.group(0))


def format_number(value: float) -> str:
    """Render a computed result for the display, or the error sentinel"""
    if math.isnan(value) or math.isinf(value):
        return config.ERROR_TEXT

    text = number_to_string(value)
    if len(text) > config.MAX_INPUT_LENGTH:
        magnitude = abs(value)
        if magnitude > config.EXPONENT_THRESHOLD or (magnitude < config.TINY_THRESHOLD and value != 0):
            return to_exponential(value, config.EXPONENT_DIGITS)
        decimals = text.split('.')[1] if '.' in text else ''
        if len(decimals) > config.LONG_DECIMALS:
            return number_to_string(round_fixed(value, config.LONG_DECIMALS))

    return number_to_string(round_fixed(value, config.DEFAULT_DECIMALS))


def calculate(first: float, second: float, operator: Operator) -> float:
    """Binary result of a chained operation; division by zero gives NaN"""
    if operator is Operator.ADD:
        return first + second
    if operator is Operator.SUBTRACT:
        return first - second
    if operator is Operator.MULTIPLY:
        return first * second
    if operator is Operator.DIVIDE:
        return math.nan if second == 0 else first / second
    raise ValueError(f"Unknown operator: {operator!r}")


# ── State and transitions ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class EngineState:
    entry: str = '0'
    first_operand: Optional[float] = None
    operator: Optional[Operator] = None
    awaiting_operand: bool = False
    memory: float = 0.0
    error: bool = False

    @property
    def display(self) -> str:
        return config.ERROR_TEXT if self.error else self.entry

    @property
    def phase(self) -> Phase:
        if self.error:
            return Phase.ERROR
        if self.operator is not None:
            return Phase.PENDING_OPERATOR
        return Phase.READY

    @property
    def value(self) -> Optional[float]:
        """Numeric value of the display, None in the error state"""
        if self.error:
            return None
        return parse_number(self.entry)


@dataclass(frozen=True)
class Action:
    name: str
    value: object = None


def _show_result(state, result, **changes):
    """Format a computed result into the display, entering the error state if needed."""
    text = format_number(result)
    if text == config.ERROR_TEXT:
        return _show_error(state, **changes)
    return replace(state, entry=text, error=False, **changes)


def _show_error(state, **changes):
    logger.debug("Calculation entered the error state from %r", state.entry)
    changes.setdefault('awaiting_operand', True)
    changes.update(entry='0', error=True, first_operand=None, operator=None)
    return replace(state, **changes)


def _input_digit(state, digit):
    if not (isinstance(digit, str) and len(digit) == 1 and digit in '0123456789'):
        raise ValueError(f"Not a digit: {digit!r}")

    if state.error or state.awaiting_operand:
        return replace(state, entry=digit, error=False, awaiting_operand=False)

    entry = state.entry
    if entry == '0':
        if digit == '0':
            return state
        return replace(state, entry=digit)
    if len(entry) < config.MAX_INPUT_LENGTH:
        return replace(state, entry=entry + digit)
    return state


def _input_decimal(state, _=None):
    if state.error or state.awaiting_operand:
        return replace(state, entry='0.', error=False, awaiting_operand=False)
    if '.' not in state.entry and len(state.entry) < config.MAX_INPUT_LENGTH:
        return replace(state, entry=state.entry + '.')
    return state


def _apply_operator(state, operator):
    if not isinstance(operator, Operator):
        operator = Operator(operator)
    if state.error:
        return state
    current = state.value
    if current is None:
        return state

    if state.first_operand is None:
        state = replace(state, first_operand=current)
    elif state.operator is not None:
        result = calculate(state.first_operand, current, state.operator)
        state = _show_result(state, result, first_operand=result)
        if state.error:
            return state

    return replace(state, awaiting_operand=True, operator=operator)


def _evaluate(state, _=None):
    if state.error or state.operator is None or state.first_operand is None or state.awaiting_operand:
        return state
    current = state.value
    if current is None:
        return _show_error(state)

    result = calculate(state.first_operand, current, state.operator)
    return _show_result(state, result, first_operand=None, operator=None, awaiting_operand=True)


def _clear_all(state, _=None):
    return EngineState(memory=state.memory)


def _backspace(state, _=None):
    if state.error:
        return _clear_all(state)
    if state.awaiting_operand:
        return state

    entry = state.entry
    if len(entry) == 1 or (len(entry) == 2 and entry.startswith('-')):
        return replace(state, entry='0')
    return replace(state, entry=entry[:-1])


def _toggle_sign(state, _=None):
    current = state.value
    if current is None or current == 0:
        return state
    return replace(state, entry=number_to_string(-current))


def _percent(state, _=None):
    current = state.value
    if current is None:
        return state

    if state.first_operand is not None and state.operator is not None:
        return _show_result(state, state.first_operand * current / 100, awaiting_operand=False)
    return _show_result(state, current / 100, awaiting_operand=True)


def _sqrt(state, _=None):
    if state.error:
        return state
    current = state.value
    if current is None or current < 0:
        return _show_error(state)
    return _show_result(state, math.sqrt(current), awaiting_operand=True)


def _square(state, _=None):
    if state.error:
        return state
    current = state.value
    if current is None:
        return _show_error(state)
    # float ** raises OverflowError, multiplication saturates to inf
    return _show_result(state, current * current, awaiting_operand=True)


def _reciprocal(state, _=None):
    if state.error:
        return state
    current = state.value
    if current is None or current == 0:
        return _show_error(state)
    return _show_result(state, 1 / current, awaiting_operand=True)


def _memory_clear(state, _=None):
    return replace(state, memory=0.0)


def _memory_recall(state, _=None):
    return replace(state, entry=number_to_string(state.memory), error=False, awaiting_operand=True)


def _memory_add(state, _=None):
    current = state.value
    memory = state.memory if current is None else state.memory + current
    return replace(state, memory=memory, awaiting_operand=True)


def _memory_subtract(state, _=None):
    current = state.value
    memory = state.memory if current is None else state.memory - current
    return replace(state, memory=memory, awaiting_operand=True)


TRANSITIONS = {
    'digit': _input_digit,
    'decimal': _input_decimal,
    'operator': _apply_operator,
    'evaluate': _evaluate,
    'clear_all': _clear_all,
    'backspace': _backspace,
    'toggle_sign': _toggle_sign,
    'percent': _percent,
    'sqrt': _sqrt,
    'square': _square,
    'reciprocal': _reciprocal,
    'memory_clear': _memory_clear,
    'memory_recall': _memory_recall,
    'memory_add': _memory_add,
    'memory_subtract': _memory_subtract,
}


def transition(state: EngineState, action: Action) -> EngineState:
    """Apply one action to a state and return the resulting state"""
    try:
        handler = TRANSITIONS[action.name]
    except KeyError:
        raise ValueError(f"Unknown action: {action.name!r}") from None
    return handler(state, action.value)


# ── Stateful facade ───────────────────────────────────────────────────────────

class Calculator:
    """One calculator session: owns a state and applies actions to it.

    ``on_calculation(expression, result)`` is called after every completed
    equals press, e.g. to record history.
    """

    def __init__(self, on_calculation: Optional[Callable[[str, str], None]] = None):
        self.state = EngineState()
        self.on_calculation = on_calculation

    @property
    def display(self) -> str:
        return self.state.display

    @property
    def memory(self) -> float:
        return self.state.memory

    @property
    def has_memory(self) -> bool:
        return self.state.memory != 0

    @property
    def is_error(self) -> bool:
        return self.state.error

    def dispatch(self, action: Action) -> str:
        """Apply an action and return the new display"""
        self.state = transition(self.state, action)
        return self.state.display

    def input_digit(self, digit):
        return self.dispatch(Action('digit', str(digit)))

    def input_decimal(self):
        return self.dispatch(Action('decimal'))

    def apply_operator(self, operator):
        return self.dispatch(Action('operator', operator))

    def evaluate(self):
        """Complete the pending operation and report it to on_calculation"""
        before = self.state
        display = self.dispatch(Action('evaluate'))
        if self.on_calculation and self.state is not before:
            expression = f"{number_to_string(before.first_operand)} {before.operator.symbol} {before.entry}"
            self.on_calculation(expression, display)
        return display

    def clear_all(self):
        return self.dispatch(Action('clear_all'))

    def backspace(self):
        return self.dispatch(Action('backspace'))

    def toggle_sign(self):
        return self.dispatch(Action('toggle_sign'))

    def percent(self):
        return self.dispatch(Action('percent'))

    def sqrt(self):
        return self.dispatch(Action('sqrt'))

    def square(self):
        return self.dispatch(Action('square'))

    def reciprocal(self):
        return self.dispatch(Action('reciprocal'))

    def memory_clear(self):
        return self.dispatch(Action('memory_clear'))

    def memory_recall(self):
        return self.dispatch(Action('memory_recall'))

    def memory_add(self):
        return self.dispatch(Action('memory_add'))

    def memory_subtract(self):
        return self.dispatch(Action('memory_subtract'))
