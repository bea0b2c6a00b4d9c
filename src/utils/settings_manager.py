"""
Settings Manager - Handles application settings persistence using QSettings
"""

import logging
import os
from PySide6.QtCore import QSettings


logger = logging.getLogger(__name__)


class SettingsManager:
    """Manages application settings using QSettings"""

    ORGANIZATION = "Site Plan Tools"
    APPLICATION = "Site Plan Annotator"

    # Settings keys
    KEY_EXPORT_PIXEL_RATIO = "export/pixel_ratio"
    KEY_EXPORT_LAST_DIRECTORY = "export/last_directory"
    KEY_IMAGE_LAST_DIRECTORY = "image/last_directory"
    KEY_ICON_DEFAULT_SIZE = "shapes/icon_default_size"
    KEY_RULER_DEFAULT_LENGTH = "shapes/ruler_default_length"

    DEFAULT_PIXEL_RATIO = 2.0
    DEFAULT_ICON_SIZE = 80.0
    DEFAULT_RULER_LENGTH = 100.0

    def __init__(self, settings: QSettings = None):
        """Initialize the settings manager

        Args:
            settings: QSettings to use instead of the per-user application store
        """
        self.settings = settings or QSettings(SettingsManager.ORGANIZATION, SettingsManager.APPLICATION)

    def _positive_float(self, key, default):
        value = self.settings.value(key, default, type=float)
        if value is None or value <= 0:
            logger.warning("Ignoring non-positive setting %s=%r", key, value)
            return default
        return value

    def get_export_pixel_ratio(self):
        """
        Get the pixel ratio used when exporting the site plan

        Returns:
            float: Output pixels per drawing pixel (default 2.0)
        """
        return self._positive_float(self.KEY_EXPORT_PIXEL_RATIO, self.DEFAULT_PIXEL_RATIO)

    def set_export_pixel_ratio(self, ratio):
        if ratio is None or ratio <= 0:
            self.settings.remove(self.KEY_EXPORT_PIXEL_RATIO)
        else:
            self.settings.setValue(self.KEY_EXPORT_PIXEL_RATIO, float(ratio))
        self.settings.sync()

    def get_icon_default_size(self):
        """Pixel size given to newly placed wells and septic fields"""
        return self._positive_float(self.KEY_ICON_DEFAULT_SIZE, self.DEFAULT_ICON_SIZE)

    def get_ruler_default_length(self):
        """Pixel length given to newly placed rulers"""
        return self._positive_float(self.KEY_RULER_DEFAULT_LENGTH, self.DEFAULT_RULER_LENGTH)

    def get_last_directory(self, kind):
        """
        Get the directory last used for a file dialog

        Args:
            kind (str): 'image' or 'export'

        Returns:
            str: Existing directory, or the user's home directory
        """
        key = self.KEY_EXPORT_LAST_DIRECTORY if kind == 'export' else self.KEY_IMAGE_LAST_DIRECTORY
        directory = self.settings.value(key, "", type=str)
        if directory and os.path.isdir(directory):
            return directory
        return os.path.expanduser("~")

    def set_last_directory(self, kind, path):
        """Remember the directory of a chosen file (or directory) path"""
        key = self.KEY_EXPORT_LAST_DIRECTORY if kind == 'export' else self.KEY_IMAGE_LAST_DIRECTORY
        directory = path if os.path.isdir(path) else os.path.dirname(path)
        if directory:
            self.settings.setValue(key, directory)
            self.settings.sync()


# Global instance
_settings_manager = None


def get_settings_manager():
    """Get the global settings manager instance"""
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager
