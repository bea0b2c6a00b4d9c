"""
Measurement Labels - Derives measurement text from shapes and the scale factor,
and runs the inline edit that writes an entered length back into pixel geometry
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from models.shapes import Shape, Structure, Ruler
from calculations.geometry import rotate_point, line_length, line_angle_degrees, midpoint
from calculations.result_types import OperationResult
from calculations.debug_logger import debug_logger
from drawing.errors import InvalidLabelInput


Point = Tuple[float, float]

LABEL_FONT_SIZE = 14
STRUCTURE_LABEL_GAP = 20
RULER_LABEL_PADDING = 14

FIELD_SUFFIX = {'width': " W", 'length': " L"}


def format_feet(value: float) -> str:
    """Format feet with one decimal, e.g. 3.0'"""
    return f"{value:.1f}'"


def label_hit_id(shape_id: str, field: str) -> str:
    return f"{shape_id}_label_{field}"


def parse_label_hit(hit_id: Optional[str]) -> Optional[Tuple[str, str]]:
    """Split '<shape id>_label_<field>' into (shape id, field)"""
    if not hit_id or '_label_' not in hit_id:
        return None
    shape_id, field = hit_id.rsplit('_label_', 1)
    if field not in FIELD_SUFFIX:
        return None
    return shape_id, field


@dataclass
class MeasurementLabel:
    """One drawable measurement label, in pixel space"""
    shape_id: str
    field: str
    text: str
    x: float
    y: float
    rotation: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    font_size: int = LABEL_FONT_SIZE

    @property
    def hit_id(self) -> str:
        return label_hit_id(self.shape_id, self.field)


@dataclass
class LabelEdit:
    """The single open inline edit"""
    shape_id: str
    field: str
    text: str


class MeasurementLabelEngine(QObject):
    """Read-only consumer of the shape store for display, plus one inline editor"""

    edit_started = Signal(str, str)  # shape id, field
    edit_finished = Signal(str, str)  # shape id, field
    edit_rejected = Signal(str)  # message

    def __init__(self, shape_store, scale_manager):
        super().__init__()
        self.shape_store = shape_store
        self.scale_manager = scale_manager
        self.editing: Optional[LabelEdit] = None

    @property
    def is_editing(self) -> bool:
        return self.editing is not None

    # Derivation

    def _has_scale(self, shape: Shape) -> bool:
        # Rulers read against 1 px/ft until calibrated; structures stay unlabelled
        return isinstance(shape, Ruler) or self.scale_manager.is_calibrated

    @staticmethod
    def pixel_dimension(shape: Shape, field: str) -> float:
        if isinstance(shape, Ruler):
            return line_length(shape.anchor, shape.end)
        return float(getattr(shape, field))

    def value_for(self, shape: Shape, field: str) -> Optional[float]:
        """Real-world value in feet, or None if the shape shows no such label"""
        if field not in shape.labelled_fields:
            return None
        if not self._has_scale(shape):
            return None
        return self.scale_manager.pixels_to_real(self.pixel_dimension(shape, field))

    def display_value(self, shape_id: str, field: str) -> Optional[float]:
        shape = self.shape_store.get(shape_id)
        if shape is None:
            return None
        value = self.value_for(shape, field)
        return round(value, 1) if value is not None else None

    def label_text(self, shape: Shape, field: str) -> Optional[str]:
        value = self.value_for(shape, field)
        if value is None:
            return None
        if isinstance(shape, Structure):
            return format_feet(value) + FIELD_SUFFIX[field]
        return format_feet(value)

    def labels_for(self, shape: Shape) -> List[MeasurementLabel]:
        """Labels to draw for a shape, skipping the field being edited"""
        labels = []
        for field in shape.labelled_fields:
            if self.editing and self.editing.shape_id == shape.id and self.editing.field == field:
                continue
            text = self.label_text(shape, field)
            if text is None:
                continue
            labels.append(self._place_label(shape, field, text))
        return labels

    def _place_label(self, shape: Shape, field: str, text: str) -> MeasurementLabel:
        if isinstance(shape, Ruler):
            dx, dy = shape.x2 - shape.x, shape.y2 - shape.y
            angle = math.atan2(dy, dx)
            mx, my = midpoint(shape.anchor, shape.end)
            return MeasurementLabel(
                shape.id, field, text,
                x=mx + RULER_LABEL_PADDING * math.sin(angle),
                y=my - RULER_LABEL_PADDING * math.cos(angle),
                rotation=line_angle_degrees(shape.anchor, shape.end),
                offset_x=len(text) * 3,
                offset_y=7,
            )

        anchor = shape.anchor
        if field == 'width':
            x, y = rotate_point((shape.x, shape.y - STRUCTURE_LABEL_GAP), shape.rotation, anchor)
            return MeasurementLabel(shape.id, field, text, x, y, rotation=shape.rotation)
        x, y = rotate_point((shape.x + shape.width + STRUCTURE_LABEL_GAP, shape.y), shape.rotation, anchor)
        return MeasurementLabel(shape.id, field, text, x, y, rotation=shape.rotation + 90)

    def editor_position(self, shape: Shape, field: str) -> Point:
        """Where the inline editor box sits for a label"""
        if isinstance(shape, Ruler):
            label = self._place_label(shape, field, "")
            return (label.x, label.y)
        if field == 'width':
            local = (shape.x + shape.width / 2, shape.y - STRUCTURE_LABEL_GAP)
        else:
            local = (shape.x + shape.width + 6, shape.y + shape.length / 2 - 7)
        return rotate_point(local, shape.rotation, shape.anchor)

    # Inline editing

    def begin_edit(self, shape_id: str, field: str) -> bool:
        """Open the editor on a label, seeded with its displayed value"""
        shape = self.shape_store.get(shape_id)
        if shape is None:
            return False
        value = self.value_for(shape, field)
        if value is None:
            return False

        if self.editing:
            self.commit_edit()

        self.editing = LabelEdit(shape_id, field, f"{value:.1f}")
        debug_logger.debug("Labels", "Edit started", {'id': shape_id, 'field': field, 'seed': self.editing.text})
        self.edit_started.emit(shape_id, field)
        return True

    def set_edit_text(self, text: str):
        if self.editing:
            self.editing.text = text

    def cancel_edit(self):
        """Close the editor without touching geometry"""
        if not self.editing:
            return
        edit = self._close_edit()
        debug_logger.debug("Labels", "Edit cancelled", {'id': edit.shape_id, 'field': edit.field})
        self.edit_finished.emit(edit.shape_id, edit.field)

    def _close_edit(self) -> LabelEdit:
        edit = self.editing
        self.editing = None
        return edit

    @staticmethod
    def parse_feet(text) -> float:
        """Parse editor text like '12.5' or 12.5' into feet"""
        cleaned = str(text if text is not None else "").strip()
        if cleaned.endswith("'"):
            cleaned = cleaned[:-1].strip()
        if not cleaned:
            raise InvalidLabelInput("Enter a length in feet")
        try:
            value = float(cleaned)
        except ValueError:
            raise InvalidLabelInput(f"Not a number: {cleaned}")
        if not math.isfinite(value) or value < 0:
            raise InvalidLabelInput(f"Length must be zero or more: {cleaned}")
        return value

    def commit_edit(self, text: Optional[str] = None) -> OperationResult:
        """Write the entered length back into the shape and close the editor"""
        if not self.editing:
            return OperationResult.error_result("No label is being edited")
        if text is not None:
            self.editing.text = text

        edit = self._close_edit()
        shape = self.shape_store.get(edit.shape_id)
        if shape is None:
            self.edit_finished.emit(edit.shape_id, edit.field)
            return OperationResult.error_result("Shape no longer exists")

        try:
            feet = self.parse_feet(edit.text)
        except InvalidLabelInput as e:
            debug_logger.info("Labels", "Edit rejected", {'id': edit.shape_id, 'text': edit.text})
            self.edit_finished.emit(edit.shape_id, edit.field)
            self.edit_rejected.emit(str(e))
            return OperationResult.error_result(str(e))

        pixels = self.scale_manager.real_to_pixels(feet)
        if isinstance(shape, Ruler):
            attrs = self._ruler_end_for_length(shape, pixels)
        else:
            attrs = {edit.field: pixels}

        self.shape_store.update(edit.shape_id, attrs)
        debug_logger.info("Labels", "Edit committed",
                          {'id': edit.shape_id, 'field': edit.field, 'feet': feet, 'pixels': pixels})
        self.edit_finished.emit(edit.shape_id, edit.field)
        return OperationResult.success_result(data=dict(attrs, feet=feet))

    @staticmethod
    def _ruler_end_for_length(ruler: Ruler, new_length: float) -> dict:
        """Move the far endpoint so the ruler has new_length at the same angle"""
        dx, dy = ruler.x2 - ruler.x, ruler.y2 - ruler.y
        old_length = math.hypot(dx, dy)
        if old_length == 0:
            return {'x2': ruler.x + new_length, 'y2': ruler.y}
        ratio = new_length / old_length
        return {'x2': ruler.x + dx * ratio, 'y2': ruler.y + dy * ratio}
