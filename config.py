"""
TabCalc Configuration Settings
"""
import os

# Application Settings
APP_NAME = "TabCalc"
VERSION = "1.0.0"

# Engine Settings
MAX_INPUT_LENGTH = 15        # digit entry stops here; also the "long result" threshold
ERROR_TEXT = "Error"
EXPONENT_THRESHOLD = 1e15    # larger long results switch to exponential notation
TINY_THRESHOLD = 1e-7        # smaller non-zero long results too
EXPONENT_DIGITS = 9
LONG_DECIMALS = 7
DEFAULT_DECIMALS = 10

# Display Settings
WINDOW_WIDTH = 320
WINDOW_HEIGHT = 520
DISPLAY_FONT = ("Consolas", 28, "bold")
BUTTON_FONT = ("Segoe UI", 14)
LABEL_FONT = ("Segoe UI", 10)

# ── Palettes ──────────────────────────────────────────────────────────────────

LIGHT = {
    "bg":           "#DDE6ED",
    "display_bg":   "#C8D4DF",
    "display_fg":   "#1A2332",
    "indicator_fg": "#2C5F8A",
    "btn_bg":       "#E8EEF4",
    "btn_fg":       "#2B3A4A",
    "func_bg":      "#C8D4DF",
    "operator_bg":  "#2E8B57",
    "operator_fg":  "#FFFFFF",
    "disabled_fg":  "#9AA8B4",
    "listbox_bg":   "#C8D4DF",
    "listbox_fg":   "#1A2332",
}

DARK = {
    "bg":           "#1E2530",
    "display_bg":   "#161C26",
    "display_fg":   "#9ADDB0",
    "indicator_fg": "#5E8FC8",
    "btn_bg":       "#283040",
    "btn_fg":       "#BDD0E0",
    "func_bg":      "#232E3C",
    "operator_bg":  "#2D8A58",
    "operator_fg":  "#FFFFFF",
    "disabled_fg":  "#4E6070",
    "listbox_bg":   "#161C26",
    "listbox_fg":   "#9ADDB0",
}


def get_theme(dark: bool) -> dict:
    """Return the active colour palette."""
    return DARK if dark else LIGHT


# Database Settings
DB_PATH = os.environ.get(
    "TABCALC_DB_PATH",
    os.path.join(os.path.dirname(__file__), "tabcalc.db"),
)

# History Settings
MAX_HISTORY_ITEMS = 100

# Web API settings
WEB_HOST = os.environ.get("TABCALC_HOST", "127.0.0.1")
WEB_PORT = int(os.environ.get("TABCALC_PORT", 8888))
SESSION_TTL_HOURS = float(os.environ.get("TABCALC_SESSION_TTL_HOURS", 24))

# Logging
LOG_LEVEL = os.environ.get("TABCALC_LOG_LEVEL", "INFO")
