"""
Keypad mapping for TabCalc
Maps key labels and keyboard input onto calculator engine operations
"""
from calculator import Operator, EngineState

DIGITS = tuple('0123456789')

OPERATOR_KEYS = {
    '+': Operator.ADD,
    '-': Operator.SUBTRACT,
    '×': Operator.MULTIPLY,
    '÷': Operator.DIVIDE,
}

# Label -> Calculator method name
FUNCTION_KEYS = {
    'MC': 'memory_clear',
    'MR': 'memory_recall',
    'M+': 'memory_add',
    'M-': 'memory_subtract',
    '←': 'backspace',
    'AC': 'clear_all',
    '+/-': 'toggle_sign',
    '%': 'percent',
    '1/x': 'reciprocal',
    'x²': 'square',
    '√': 'sqrt',
    '.': 'input_decimal',
    '=': 'evaluate',
}

KEY_ROWS = [
    ['MC', 'MR', 'M+', 'M-'],
    ['←', 'AC', '+/-', '%'],
    ['1/x', 'x²', '√', '÷'],
    ['7', '8', '9', '×'],
    ['4', '5', '6', '-'],
    ['1', '2', '3', '+'],
    ['0', '.', '='],
]

ALL_KEYS = [label for row in KEY_ROWS for label in row]

# Keys still usable while the display shows the error sentinel
ERROR_STATE_KEYS = frozenset(('AC', '←', '.') + DIGITS)

_CHAR_KEYS = {
    '*': '×',
    '/': '÷',
    '\r': '=',
    '\n': '=',
    '=': '=',
    '+': '+',
    '-': '-',
    '%': '%',
    '.': '.',
}

_KEYSYM_KEYS = {
    'BackSpace': '←',
    'Escape': 'AC',
    'Delete': 'AC',
    'Return': '=',
    'KP_Enter': '=',
}


def press(calculator, label):
    """Apply one key press to a calculator and return the new display"""
    if label in DIGITS:
        return calculator.input_digit(label)
    if label in OPERATOR_KEYS:
        return calculator.apply_operator(OPERATOR_KEYS[label])
    if label in FUNCTION_KEYS:
        return getattr(calculator, FUNCTION_KEYS[label])()
    raise KeyError(label)


def is_enabled(label, state: EngineState) -> bool:
    """Whether a key may be pressed in the given state"""
    if state.error:
        return label in ERROR_STATE_KEYS
    return True


def enabled_keys(state: EngineState):
    return [label for label in ALL_KEYS if is_enabled(label, state)]


def memory_indicator(state: EngineState) -> str:
    """Text of the memory indicator, empty when memory holds zero"""
    return 'M' if state.memory != 0 else ''


def key_for_char(char, keysym=None):
    """Translate a keyboard event into a key label, None if it has no key"""
    if keysym in _KEYSYM_KEYS:
        return _KEYSYM_KEYS[keysym]
    if char and char in DIGITS:
        return char
    return _CHAR_KEYS.get(char)
