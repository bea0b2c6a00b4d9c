"""
Help Dialog - Usage steps for the Site Plan Annotator
"""

from PySide6.QtWidgets import QDialog, QVBoxLayout, QLabel, QPushButton, QHBoxLayout
from PySide6.QtCore import Qt


HELP_STEPS = [
    "Click <b>Set Scale</b> and then two points a known distance apart.",
    "Select a tool: <b>Well, Septic, Structure, or Ruler</b>.",
    "Click on the canvas to place the selected item.",
    "<b>Structure:</b> prompts for length and width in feet. Resize/rotate using the blue handles.",
    "<b>Ruler:</b> drag the endpoints to measure distances. Click the label to edit the length.",
    "Click on a measurement to change it; Enter commits, Escape cancels.",
    "<b>Right-click</b> on any shape to delete it.",
    "Measurements follow the scale you set; recalibrating updates every label.",
    "Click anywhere on the canvas to deselect a shape.",
]


class HelpDialog(QDialog):
    """Dialog listing how to use the annotator"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.init_ui()

    def init_ui(self):
        """Initialize the user interface"""
        self.setWindowTitle("How to Use the Site Plan Annotator")
        self.setModal(True)
        self.resize(520, 360)

        layout = QVBoxLayout()

        items = "".join(f"<li>{step}</li>" for step in HELP_STEPS)
        text = QLabel(f"<ul>{items}</ul>")
        text.setWordWrap(True)
        text.setTextFormat(Qt.RichText)
        layout.addWidget(text)

        button_layout = QHBoxLayout()
        button_layout.addStretch()
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        button_layout.addWidget(close_btn)
        layout.addLayout(button_layout)

        self.setLayout(layout)
