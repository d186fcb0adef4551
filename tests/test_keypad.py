"""
Tests for the keypad mapping.

Validates:
1. Every key label maps onto one engine operation
2. Error-state enablement of keys
3. Keyboard translation and the memory indicator
"""

import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import keypad
from calculator import Calculator, EngineState


def press_all(calc, *labels):
    for label in labels:
        keypad.press(calc, label)
    return calc.display


class TestLayout:
    """The key grid."""

    def test_labels_unique(self):
        assert len(keypad.ALL_KEYS) == 27
        assert len(set(keypad.ALL_KEYS)) == 27

    @pytest.mark.parametrize('label', keypad.ALL_KEYS)
    def test_every_label_is_pressable(self, label):
        calc = Calculator()
        keypad.press(calc, label)
        assert calc.display

    def test_unknown_label(self):
        with pytest.raises(KeyError):
            keypad.press(Calculator(), 'sin')


class TestPress:
    """Key presses drive the engine like direct calls."""

    def test_chain(self):
        calc = Calculator()
        assert press_all(calc, '2', '+', '3', '×', '4', '=') == '20'

    def test_division_by_zero(self):
        calc = Calculator()
        assert press_all(calc, '1', '÷', '0', '=') == 'Error'
        assert press_all(calc, '7') == '7'

    def test_function_keys(self):
        calc = Calculator()
        assert press_all(calc, '9', '√') == '3'
        assert press_all(calc, '3', 'x²') == '9'
        assert press_all(calc, '8', '1/x') == '0.125'
        assert press_all(calc, '5', '+/-') == '-5'
        assert press_all(calc, '←') == '0'

    def test_memory_keys(self):
        calc = Calculator()
        press_all(calc, '5', 'M+', 'AC', '2', 'M-')
        assert press_all(calc, 'MR') == '3'
        press_all(calc, 'MC')
        assert calc.memory == 0


class TestEnablement:
    """Keys allowed in the error state."""

    def test_all_enabled_normally(self):
        assert keypad.enabled_keys(EngineState()) == keypad.ALL_KEYS

    def test_error_state(self):
        state = EngineState(error=True)
        enabled = set(keypad.enabled_keys(state))
        assert enabled == set('0123456789') | {'AC', '←', '.'}
        for label in ('+', '=', '%', '+/-', '√', 'MR', 'M+'):
            assert not keypad.is_enabled(label, state)


class TestKeyboard:
    """Keyboard event translation."""

    @pytest.mark.parametrize('char, keysym, expected', [
        ('7', '7', '7'),
        ('*', 'asterisk', '×'),
        ('/', 'slash', '÷'),
        ('\r', 'Return', '='),
        ('=', 'equal', '='),
        ('', 'BackSpace', '←'),
        ('\x1b', 'Escape', 'AC'),
        ('.', 'period', '.'),
        ('%', 'percent', '%'),
        ('q', 'q', None),
        ('', 'Shift_L', None),
    ])
    def test_key_for_char(self, char, keysym, expected):
        assert keypad.key_for_char(char, keysym) == expected


class TestIndicators:
    """Memory indicator."""

    def test_memory_indicator(self):
        assert keypad.memory_indicator(EngineState()) == ''
        assert keypad.memory_indicator(EngineState(memory=-2.0)) == 'M'

