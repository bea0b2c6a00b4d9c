"""
Debug logging framework for the site plan tools
Centralizes and standardizes debug output across calibration, shapes and export
"""

import os
import logging
from typing import Any, Dict, Optional
import json


class SitePlanDebugLogger:
    """Centralized debug logger for the annotation core"""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._setup_logger()
            SitePlanDebugLogger._initialized = True

    def _setup_logger(self):
        """Initialize the logging configuration"""
        # Check environment variable for debug output
        env_val = str(os.environ.get("SITEPLAN_DEBUG", "")).strip().lower()
        self.debug_enabled = env_val in {"1", "true", "yes", "on"}

        # Set up logging level
        debug_level = os.environ.get("SITEPLAN_DEBUG_LEVEL", "INFO").upper()

        # Create logger
        self.logger = logging.getLogger('siteplan_debug')
        self.logger.setLevel(getattr(logging, debug_level, logging.INFO))

        # Clear existing handlers
        self.logger.handlers.clear()

        # Only add handlers if debug is enabled
        if self.debug_enabled:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.DEBUG)

            # Format with timestamp and component
            formatter = logging.Formatter(
                '%(asctime)s [SITEPLAN-%(levelname)s] %(component)s: %(message)s',
                datefmt='%H:%M:%S'
            )
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

            if os.environ.get("SITEPLAN_DEBUG_FILE"):
                file_handler = logging.FileHandler('siteplan_debug.log')
                file_handler.setLevel(logging.DEBUG)
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)

    def _compose(self, message: str, data: Optional[Dict[str, Any]]) -> str:
        if data:
            return f"{message} {self._format_debug_data(data)}"
        return message

    def debug(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Log debug message with component context"""
        if not self.debug_enabled:
            return
        self.logger.debug(self._compose(message, data), extra={'component': component})

    def info(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Log info message with component context"""
        if not self.debug_enabled:
            return
        self.logger.info(self._compose(message, data), extra={'component': component})

    def warning(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        """Log warning message with component context"""
        if not self.debug_enabled:
            return
        self.logger.warning(self._compose(message, data), extra={'component': component})

    def error(self, component: str, message: str, error: Optional[Exception] = None, data: Optional[Dict[str, Any]] = None):
        """Log error message with component context"""
        if not self.debug_enabled:
            return

        full_message = message
        if error:
            full_message += f" Error: {str(error)}"
        self.logger.error(self._compose(full_message, data), extra={'component': component})

    def _format_debug_data(self, data: Dict[str, Any]) -> str:
        """Format debug data for logging"""
        try:
            formatted = {}
            for key, value in data.items():
                if isinstance(value, float):
                    formatted[key] = round(value, 3)
                elif isinstance(value, tuple) and len(value) == 2:
                    # Pixel positions
                    formatted[key] = [round(float(v), 1) for v in value]
                else:
                    formatted[key] = value

            return json.dumps(formatted, separators=(',', ':'), default=str)
        except (TypeError, ValueError):
            # Fallback to string representation
            return str(data)

    def log_state_transition(self, component: str, from_state: str, to_state: str, data: Optional[Dict[str, Any]] = None):
        """Log a mode/state machine transition"""
        payload = {'from': from_state, 'to': to_state}
        if data:
            payload.update(data)
        self.debug(component, "State transition", payload)

    def log_shape_change(self, component: str, action: str, shape_id: str, attrs: Optional[Dict[str, Any]] = None):
        """Log a shape store mutation"""
        data = {'action': action, 'id': shape_id}
        if attrs:
            data.update(attrs)
        self.info(component, "Shape changed", data)


# Global logger instance
debug_logger = SitePlanDebugLogger()
