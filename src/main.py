#!/usr/bin/env python3
"""
Site Plan Annotator - Main Application Entry Point
Desktop application for calibrating and annotating site plans
"""

import sys
import os
from PySide6.QtWidgets import QApplication, QStyleFactory

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ui.site_plan_window import SitePlanWindow
from utils.settings_manager import SettingsManager


class SitePlanApp(QApplication):
    """Main application class"""

    def __init__(self, argv):
        super().__init__(argv)
        self.setApplicationName(SettingsManager.APPLICATION)
        self.setApplicationVersion("1.0.0")
        self.setOrganizationName(SettingsManager.ORGANIZATION)

        # Set application style
        self.setStyle(QStyleFactory.create('Fusion'))

        self.main_window = None

    def start(self, image_path=None):
        """Start the application"""
        self.main_window = SitePlanWindow()
        if image_path:
            self.main_window.session.load_background_file(image_path)
        self.main_window.show()

        return self.exec()


def main():
    """Application entry point"""
    app = SitePlanApp(sys.argv)
    image_path = sys.argv[1] if len(sys.argv) > 1 else None
    return app.start(image_path)


if __name__ == '__main__':
    sys.exit(main())
