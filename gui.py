"""
TabCalc GUI
tkinter keypad window driving the calculator engine
"""
import logging
import tkinter as tk

import config
import keypad
from calculator import Calculator
from database import Database
from history_manager import HistoryManager

logger = logging.getLogger(__name__)


class TabCalcGUI:
    def __init__(self, root, db=None, dark=False):
        self.root = root
        self.root.title(config.APP_NAME)
        self.root.geometry(f"{config.WINDOW_WIDTH}x{config.WINDOW_HEIGHT}")
        self.T = config.get_theme(dark)
        self.root.configure(bg=self.T["bg"])

        self.db = db if db is not None else Database()
        self.history_manager = HistoryManager(self.db)
        self.calculator = Calculator(on_calculation=self.on_calculation)

        self.buttons = {}
        self.create_widgets()
        self.root.bind('<Key>', self.on_key_press)
        self.refresh()

    def create_widgets(self):
        """Build display, keypad and history list"""
        T = self.T

        display_frame = tk.Frame(self.root, bg=T["display_bg"])
        display_frame.pack(fill=tk.X, padx=6, pady=(6, 4))

        self.memory_label = tk.Label(display_frame, text="", font=config.LABEL_FONT,
                                     bg=T["display_bg"], fg=T["indicator_fg"], anchor=tk.W)
        self.memory_label.pack(fill=tk.X, padx=8)

        self.display = tk.Label(display_frame, text="0", font=config.DISPLAY_FONT,
                                bg=T["display_bg"], fg=T["display_fg"], anchor=tk.E)
        self.display.pack(fill=tk.X, padx=8, pady=(0, 8))

        keys_frame = tk.Frame(self.root, bg=T["bg"])
        keys_frame.pack(fill=tk.BOTH, expand=True, padx=6)

        for r, row in enumerate(keypad.KEY_ROWS):
            keys_frame.rowconfigure(r, weight=1)
            column = 0
            for label in row:
                # Zero spans two columns on the last row
                span = 2 if label == '0' else 1
                if label in keypad.OPERATOR_KEYS or label == '=':
                    bg, fg = T["operator_bg"], T["operator_fg"]
                elif label in keypad.DIGITS or label == '.':
                    bg, fg = T["btn_bg"], T["btn_fg"]
                else:
                    bg, fg = T["func_bg"], T["btn_fg"]
                button = tk.Button(keys_frame, text=label, font=config.BUTTON_FONT,
                                   bg=bg, fg=fg, relief=tk.FLAT,
                                   disabledforeground=T["disabled_fg"],
                                   command=lambda key=label: self.button_click(key))
                button.grid(row=r, column=column, columnspan=span, sticky=tk.NSEW, padx=2, pady=2)
                self.buttons[label] = button
                column += span
        for c in range(4):
            keys_frame.columnconfigure(c, weight=1)

        self.history_list = tk.Listbox(self.root, height=4, font=config.LABEL_FONT,
                                       bg=T["listbox_bg"], fg=T["listbox_fg"], relief=tk.FLAT)
        self.history_list.pack(fill=tk.X, padx=6, pady=6)
        self.load_history()

    def button_click(self, label):
        """Handle calculator button clicks"""
        if not keypad.is_enabled(label, self.calculator.state):
            return
        keypad.press(self.calculator, label)
        self.refresh()

    def on_key_press(self, event):
        """Handle keyboard input"""
        label = keypad.key_for_char(event.char, event.keysym)
        if label is not None:
            self.button_click(label)

    def on_calculation(self, expression, result):
        self.history_manager.record(expression, result)
        self.load_history()

    def refresh(self):
        """Show the engine state: display, memory indicator and enabled keys"""
        state = self.calculator.state
        self.display.config(text=state.display)
        self.memory_label.config(text=keypad.memory_indicator(state))
        for label, button in self.buttons.items():
            button.config(state=tk.NORMAL if keypad.is_enabled(label, state) else tk.DISABLED)

    def load_history(self):
        self.history_list.delete(0, tk.END)
        for line in self.history_manager.format_calculation_history(limit=20):
            self.history_list.insert(tk.END, line)
