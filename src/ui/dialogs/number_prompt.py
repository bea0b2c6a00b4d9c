"""
Number Prompt - Modal numeric input used for calibration and structure size
"""

from PySide6.QtWidgets import QInputDialog, QLineEdit


class QtNumberPrompt:
    """Callable prompt: ask(message) -> float, or None if cancelled or empty.

    Text that is not a number comes back as NaN so callers can tell an invalid
    entry apart from a cancel.
    """

    def __init__(self, parent=None, title="Site Plan"):
        self.parent = parent
        self.title = title

    def __call__(self, message):
        text, ok = QInputDialog.getText(self.parent, self.title, message, QLineEdit.Normal, "")
        if not ok or not text.strip():
            return None
        try:
            return float(text.strip().rstrip("'"))
        except ValueError:
            return float('nan')
