"""
Scale Manager - Two-click calibration of the pixels-per-foot scale factor
"""

import math
from enum import Enum
from typing import Callable, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from calculations.geometry import line_length
from calculations.result_types import OperationResult
from calculations.debug_logger import debug_logger
from drawing.errors import InvalidCalibrationInput


Point = Tuple[float, float]
NumberPrompt = Callable[[str], Optional[float]]

CALIBRATION_PROMPT = "Enter real-world distance (feet):"
INVALID_DISTANCE_MESSAGE = "Invalid distance"


class CalibrationState(Enum):
    """Calibration state machine states"""
    IDLE = "idle"
    AWAITING_FIRST_POINT = "awaiting_first_point"
    AWAITING_SECOND_POINT = "awaiting_second_point"


class ScaleManager(QObject):
    """Owns the scale factor (pixels per foot) and the calibration state machine.

    The scale factor is None until the first successful calibration. Every
    successful calibration replaces it outright; a failed one leaves it alone.
    """

    scale_changed = Signal(float)  # pixels per foot
    calibration_state_changed = Signal(str)  # CalibrationState value
    calibration_failed = Signal(str)  # user-facing message
    calibration_preview_changed = Signal()  # points or hover moved

    def __init__(self, prompt: Optional[NumberPrompt] = None):
        super().__init__()
        self.scale_factor: Optional[float] = None
        self.state = CalibrationState.IDLE
        self.points: List[Point] = []
        self.hover_position: Optional[Point] = None
        self._prompt = prompt

    def set_prompt(self, prompt: Optional[NumberPrompt]):
        """Set the collaborator asked for the real-world distance"""
        self._prompt = prompt

    @property
    def is_calibrating(self) -> bool:
        return self.state != CalibrationState.IDLE

    @property
    def is_calibrated(self) -> bool:
        return self.scale_factor is not None

    @property
    def effective_scale_factor(self) -> float:
        """Scale factor used for conversions; 1 px/ft before calibration"""
        return self.scale_factor if self.scale_factor is not None else 1.0

    def _set_state(self, new_state: CalibrationState):
        if new_state == self.state:
            return
        debug_logger.log_state_transition("Calibration", self.state.value, new_state.value,
                                          {'points': len(self.points)})
        self.state = new_state
        self.calibration_state_changed.emit(new_state.value)

    def begin_calibration(self):
        """Start (or restart) calibration, discarding any in-flight points"""
        self.points = []
        self.hover_position = None
        # Re-entering while already awaiting the first point still resets
        if self.state == CalibrationState.AWAITING_FIRST_POINT:
            self.calibration_state_changed.emit(self.state.value)
        self._set_state(CalibrationState.AWAITING_FIRST_POINT)
        self.calibration_preview_changed.emit()

    def cancel_calibration(self):
        """Abandon calibration without touching the scale factor"""
        if not self.is_calibrating:
            return
        debug_logger.info("Calibration", "Calibration cancelled", {'points': len(self.points)})
        self._reset_to_idle()

    def _reset_to_idle(self):
        self.points = []
        self.hover_position = None
        self._set_state(CalibrationState.IDLE)
        self.calibration_preview_changed.emit()

    def update_hover(self, point: Point):
        """Track the pointer for the preview segment while one point is recorded"""
        if self.state != CalibrationState.AWAITING_SECOND_POINT or len(self.points) != 1:
            return
        self.hover_position = (float(point[0]), float(point[1]))
        self.calibration_preview_changed.emit()

    def preview_segment(self) -> Optional[Tuple[Point, Point]]:
        """Segment from the first point to the hover position, if any"""
        if len(self.points) == 1 and self.hover_position is not None:
            return (self.points[0], self.hover_position)
        return None

    def handle_calibration_click(self, point: Point) -> OperationResult:
        """Record a calibration click. The second click finishes calibration."""
        if not self.is_calibrating:
            return OperationResult.error_result("Calibration is not active")

        self.points.append((float(point[0]), float(point[1])))
        debug_logger.debug("Calibration", "Point recorded",
                           {'index': len(self.points), 'point': self.points[-1]})

        if len(self.points) == 1:
            self._set_state(CalibrationState.AWAITING_SECOND_POINT)
            self.calibration_preview_changed.emit()
            return OperationResult.pending("Click the second calibration point")

        return self._finish_calibration()

    def _finish_calibration(self) -> OperationResult:
        p1, p2 = self.points[0], self.points[1]
        pixel_distance = line_length(p1, p2)

        answer = self._prompt(CALIBRATION_PROMPT) if self._prompt else None
        try:
            real_distance = self._validate_real_distance(answer)
            self._apply_scale(pixel_distance, real_distance)
        except InvalidCalibrationInput as e:
            debug_logger.warning("Calibration", "Calibration aborted",
                                 {'reason': str(e), 'pixel_distance': pixel_distance})
            self._reset_to_idle()
            self.calibration_failed.emit(INVALID_DISTANCE_MESSAGE)
            return OperationResult.error_result(INVALID_DISTANCE_MESSAGE, {'reason': str(e)})

        self._reset_to_idle()
        message = f"Scale set: {self.scale_factor:.2f} px/ft"
        return OperationResult.success_result(message, {
            'scale_factor': self.scale_factor,
            'pixel_distance': pixel_distance,
            'real_distance': real_distance,
        })

    @staticmethod
    def _validate_real_distance(value) -> float:
        if value is None:
            raise InvalidCalibrationInput("No distance entered")
        try:
            distance = float(value)
        except (TypeError, ValueError):
            raise InvalidCalibrationInput(f"Not a number: {value!r}")
        if not math.isfinite(distance) or distance <= 0:
            raise InvalidCalibrationInput(f"Distance must be positive: {value!r}")
        return distance

    def _apply_scale(self, pixel_distance: float, real_distance: float):
        if not math.isfinite(pixel_distance) or pixel_distance <= 0:
            raise InvalidCalibrationInput("Calibration points coincide")

        previous = self.scale_factor
        self.scale_factor = pixel_distance / real_distance
        debug_logger.info("Calibration", "Scale factor set", {
            'previous': previous,
            'scale_factor': self.scale_factor,
            'pixel_distance': pixel_distance,
            'real_distance': real_distance,
        })
        self.scale_changed.emit(self.scale_factor)

    def pixels_to_real(self, pixels: float) -> float:
        """Convert pixels to feet"""
        return pixels / self.effective_scale_factor

    def real_to_pixels(self, feet: float) -> float:
        """Convert feet to pixels"""
        return feet * self.effective_scale_factor

    def format_scale(self) -> str:
        if self.scale_factor is None:
            return "Scale: not set"
        return f"Scale: {self.scale_factor:.2f} px/ft"

