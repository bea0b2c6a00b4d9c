"""
UI Dialogs package
"""

from .help_dialog import HelpDialog
from .number_prompt import QtNumberPrompt

__all__ = [
	'HelpDialog',
	'QtNumberPrompt',
]
