"""
Site Plan Window - Main window: toolbar, scrollable canvas and status bar
"""

import os

from PySide6.QtWidgets import (QMainWindow, QScrollArea, QToolBar, QLabel, QMessageBox,
                               QFileDialog)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup

from drawing.session import SitePlanSession
from drawing.site_plan_canvas import SitePlanCanvas
from drawing.drawing_tools import ToolType
from drawing.export_adapter import ExportAdapter, DEFAULT_EXPORT_NAME
from drawing.image_loader import IMAGE_FILE_FILTER
from drawing.errors import ExportError
from ui.dialogs.help_dialog import HelpDialog
from ui.dialogs.number_prompt import QtNumberPrompt
from utils.settings_manager import get_settings_manager


class SitePlanWindow(QMainWindow):
    """Main window for annotating one site plan"""

    def __init__(self, settings_manager=None):
        super().__init__()
        self.settings_manager = settings_manager or get_settings_manager()
        self.session = SitePlanSession(
            prompt=QtNumberPrompt(self),
            icon_default_size=self.settings_manager.get_icon_default_size(),
            ruler_default_length=self.settings_manager.get_ruler_default_length(),
        )
        self.export_adapter = ExportAdapter(self.session)
        self.tool_actions = {}
        self.init_ui()
        self.setup_connections()

    def init_ui(self):
        """Initialize the user interface"""
        self.setWindowTitle("Site Plan Annotator")
        self.setGeometry(100, 100, 1100, 800)

        self.create_menu_bar()
        self.create_toolbar()

        self.canvas = SitePlanCanvas(self.session)
        scroll = QScrollArea()
        scroll.setWidget(self.canvas)
        scroll.setAlignment(Qt.AlignCenter)
        scroll.setStyleSheet("background-color: #222;")
        self.setCentralWidget(scroll)

        self.status_bar = self.statusBar()
        self.scale_label = QLabel(self.session.scale_manager.format_scale())
        self.status_bar.addPermanentWidget(self.scale_label)

    def create_menu_bar(self):
        """Create the menu bar"""
        menubar = self.menuBar()

        file_menu = menubar.addMenu('File')
        file_menu.addAction('Upload Image...', self.upload_image)
        file_menu.addAction('Export Image...', self.export_image)
        file_menu.addSeparator()
        file_menu.addAction('Close', self.close)

        help_menu = menubar.addMenu('Help')
        help_menu.addAction('How to Use', self.show_help)

    def create_toolbar(self):
        """Create the main toolbar"""
        toolbar = QToolBar()
        toolbar.setToolButtonStyle(Qt.ToolButtonTextOnly)
        self.addToolBar(toolbar)

        toolbar.addAction('📂 Upload', self.upload_image)
        toolbar.addAction('📏 Set Scale', self.begin_calibration)
        toolbar.addSeparator()

        self.tool_group = QActionGroup(self)
        self.tool_group.setExclusionPolicy(QActionGroup.ExclusionPolicy.ExclusiveOptional)
        for tool_type, text in ((ToolType.WELL, '● Well'), (ToolType.SEPTIC, '☁ Septic'),
                                (ToolType.STRUCTURE, '▭ Structure'), (ToolType.RULER, '━ Ruler')):
            action = QAction(text, self)
            action.setCheckable(True)
            action.triggered.connect(lambda checked, t=tool_type: self.set_drawing_tool(t, checked))
            self.tool_group.addAction(action)
            toolbar.addAction(action)
            self.tool_actions[tool_type] = action

        toolbar.addSeparator()
        toolbar.addAction('💾 Export', self.export_image)
        toolbar.addAction('❓ Help', self.show_help)

    def setup_connections(self):
        scale_manager = self.session.scale_manager
        scale_manager.scale_changed.connect(self.scale_updated)
        scale_manager.calibration_failed.connect(self.calibration_failed)
        self.session.shape_store.placement_rejected.connect(
            lambda message: self.status_bar.showMessage(f"Placement cancelled: {message}", 4000))
        self.session.label_engine.edit_rejected.connect(
            lambda message: self.status_bar.showMessage(f"Measurement unchanged: {message}", 4000))
        self.session.router.status_message.connect(lambda message: self.status_bar.showMessage(message, 4000))
        self.session.tool_manager.tool_changed.connect(self.tool_changed)

    # Toolbar actions
    def set_drawing_tool(self, tool_type, checked=True):
        self.session.router.arm_tool(tool_type if checked else ToolType.SELECT)
        self.canvas.setFocus()

    def tool_changed(self, tool_name):
        for tool_type, action in self.tool_actions.items():
            action.setChecked(tool_type.value == tool_name)

    def begin_calibration(self):
        self.session.router.begin_calibration()
        self.canvas.update()
        self.canvas.setFocus()

    def scale_updated(self, scale_factor):
        self.scale_label.setText(self.session.scale_manager.format_scale())
        QMessageBox.information(self, "Scale", f"Scale set: {scale_factor:.2f} px/ft")

    def calibration_failed(self, message):
        QMessageBox.warning(self, "Scale", message)

    def upload_image(self):
        """Choose a background image or PDF"""
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Upload Site Plan", self.settings_manager.get_last_directory('image'), IMAGE_FILE_FILTER
        )
        if not file_path:
            return
        self.settings_manager.set_last_directory('image', file_path)
        result = self.session.load_background_file(file_path)
        if not result.success:
            QMessageBox.critical(self, "Error", f"Failed to load image:\n{result.message}")
            return
        self.status_bar.showMessage(f"Loaded: {os.path.basename(file_path)}", 4000)

    def export_image(self):
        """Save the annotated site plan as PNG"""
        default_path = os.path.join(self.settings_manager.get_last_directory('export'), DEFAULT_EXPORT_NAME)
        file_path, _ = QFileDialog.getSaveFileName(self, "Export Image", default_path, "PNG Image (*.png)")
        if not file_path:
            return
        self.settings_manager.set_last_directory('export', file_path)
        try:
            self.export_adapter.save_to_file(file_path, self.settings_manager.get_export_pixel_ratio())
        except ExportError as e:
            QMessageBox.critical(self, "Error", f"Failed to export image:\n{str(e)}")
            return
        self.status_bar.showMessage(f"Exported: {file_path}", 4000)

    def show_help(self):
        HelpDialog(self).exec()
