"""
Shape Store - Authoritative collection of placed annotations and the selection
"""

import math
import uuid
from typing import Callable, Dict, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from models.shapes import ShapeKind, Shape, SHAPE_CLASSES
from calculations.debug_logger import debug_logger
from drawing.errors import InvalidPlacementInput, InvalidShapeUpdate, UnknownShapeReference


Point = Tuple[float, float]

DEFAULT_ICON_SIZE = 80
DEFAULT_RULER_LENGTH = 100


def _new_shape_id() -> str:
    return str(uuid.uuid4())


class ShapeStore(QObject):
    """Maps shape id to shape record.

    All mutation goes through place/update/remove. Readers get copies, so a
    record held outside the store can never drift from the stored one.
    """

    shape_added = Signal(str)
    shape_updated = Signal(str)
    shape_removed = Signal(str)
    shapes_changed = Signal()
    selection_changed = Signal(object)  # shape id or None
    placement_rejected = Signal(str)

    def __init__(self, scale_manager, icon_default_size: float = DEFAULT_ICON_SIZE,
                 ruler_default_length: float = DEFAULT_RULER_LENGTH,
                 id_factory: Optional[Callable[[], str]] = None):
        super().__init__()
        self.scale_manager = scale_manager
        self.icon_default_size = float(icon_default_size)
        self.ruler_default_length = float(ruler_default_length)
        self._id_factory = id_factory or _new_shape_id
        self._shapes: Dict[str, Shape] = {}
        self._issued_ids = set()
        self._selected_id: Optional[str] = None

    # Read access

    def __len__(self):
        return len(self._shapes)

    def __contains__(self, shape_id):
        return shape_id in self._shapes

    def ids(self) -> List[str]:
        return list(self._shapes.keys())

    def shapes(self) -> List[Shape]:
        """Copies of all shapes in placement order"""
        return [shape.copy() for shape in self._shapes.values()]

    def get(self, shape_id: Optional[str]) -> Optional[Shape]:
        shape = self._shapes.get(shape_id) if shape_id is not None else None
        return shape.copy() if shape else None

    def require(self, shape_id: str) -> Shape:
        """Like get() but raises UnknownShapeReference for a missing id"""
        shape = self._shapes.get(shape_id)
        if shape is None:
            raise UnknownShapeReference(shape_id)
        return shape.copy()

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    # Creation

    def _next_id(self) -> str:
        shape_id = self._id_factory()
        while shape_id in self._issued_ids:
            shape_id = self._id_factory()
        self._issued_ids.add(shape_id)
        return shape_id

    def place(self, kind: ShapeKind, anchor: Point, parameters: Optional[Dict] = None) -> Optional[str]:
        """Create a shape at anchor and return its id.

        For a structure, parameters carries 'length' and 'width' in feet.
        Returns None (and emits placement_rejected) if they are unusable.
        """
        x, y = float(anchor[0]), float(anchor[1])
        try:
            attrs = self._placement_attributes(kind, x, y, parameters or {})
        except InvalidPlacementInput as e:
            debug_logger.info("ShapeStore", "Placement rejected",
                              {'kind': kind.value, 'reason': str(e)})
            self.placement_rejected.emit(str(e))
            return None

        shape_id = self._next_id()
        shape = SHAPE_CLASSES[kind](id=shape_id, x=x, y=y, **attrs)
        self._shapes[shape_id] = shape
        debug_logger.log_shape_change("ShapeStore", "place", shape_id, dict(attrs, kind=kind.value, x=x, y=y))
        self.shape_added.emit(shape_id)
        self.shapes_changed.emit()
        return shape_id

    def _placement_attributes(self, kind: ShapeKind, x: float, y: float, parameters: Dict) -> Dict:
        if kind == ShapeKind.STRUCTURE:
            length_ft = self._positive_dimension(parameters.get('length'), 'length')
            width_ft = self._positive_dimension(parameters.get('width'), 'width')
            if not self.scale_manager.is_calibrated:
                debug_logger.warning("ShapeStore", "Placing structure without calibration; using 1 px/ft",
                                     {'length_ft': length_ft, 'width_ft': width_ft})
            to_pixels = self.scale_manager.real_to_pixels
            return {'width': to_pixels(width_ft), 'length': to_pixels(length_ft)}

        if kind in (ShapeKind.WELL, ShapeKind.SEPTIC):
            return {'width': self.icon_default_size, 'length': self.icon_default_size}

        if kind == ShapeKind.RULER:
            return {'x2': x + self.ruler_default_length, 'y2': y}

        raise InvalidPlacementInput(f"Unsupported shape kind: {kind}")

    @staticmethod
    def _positive_dimension(value, name: str) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidPlacementInput(f"Structure {name} is not a number")
        if not math.isfinite(number) or number <= 0:
            raise InvalidPlacementInput(f"Structure {name} must be positive")
        return number

    # Mutation

    def update(self, shape_id: str, attrs: Dict) -> bool:
        """Merge the given fields into a shape.

        Fields left out (or passed as None) keep their value. Unknown ids are a
        silent no-op. Returns True if the record changed.
        """
        shape = self._shapes.get(shape_id)
        if shape is None:
            debug_logger.warning("ShapeStore", "Update of unknown shape ignored", {'id': shape_id})
            return False

        try:
            changes = self._validated_changes(shape, attrs)
        except InvalidShapeUpdate as e:
            debug_logger.warning("ShapeStore", "Update rejected", {'id': shape_id, 'reason': str(e)})
            return False

        changes = {k: v for k, v in changes.items() if getattr(shape, k) != v}
        if not changes:
            return False

        for name, value in changes.items():
            setattr(shape, name, value)
        debug_logger.log_shape_change("ShapeStore", "update", shape_id, changes)
        self.shape_updated.emit(shape_id)
        self.shapes_changed.emit()
        return True

    @staticmethod
    def _validated_changes(shape: Shape, attrs: Dict) -> Dict:
        allowed = shape.editable_fields()
        changes = {}
        for name, value in attrs.items():
            if value is None or name not in allowed:
                continue
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise InvalidShapeUpdate(f"{name} is not a number")
            if not math.isfinite(number):
                raise InvalidShapeUpdate(f"{name} is not finite")
            if name in shape.non_negative_fields and number < 0:
                raise InvalidShapeUpdate(f"{name} cannot be negative")
            changes[name] = number
        return changes

    def remove(self, shape_id: str) -> bool:
        """Delete a shape; clears the selection if it was selected"""
        if shape_id not in self._shapes:
            debug_logger.warning("ShapeStore", "Remove of unknown shape ignored", {'id': shape_id})
            return False

        del self._shapes[shape_id]
        debug_logger.log_shape_change("ShapeStore", "remove", shape_id)
        if self._selected_id == shape_id:
            self.select(None)
        self.shape_removed.emit(shape_id)
        self.shapes_changed.emit()
        return True

    # Selection

    def select(self, shape_id: Optional[str]) -> Optional[str]:
        """Select a shape by id (None, or an unknown id, clears the selection)"""
        if shape_id is not None and shape_id not in self._shapes:
            shape_id = None
        if shape_id == self._selected_id:
            return shape_id
        debug_logger.debug("ShapeStore", "Selection changed", {'from': self._selected_id, 'to': shape_id})
        self._selected_id = shape_id
        self.selection_changed.emit(shape_id)
        return shape_id

    # Hit resolution

    def find_containing_shape(self, hit_id: Optional[str]) -> Optional[str]:
        """Resolve a rendered node id to the shape that owns it.

        Sub-parts are named '<shape id>_<part>' (ruler endpoints, labels), so
        trailing '_' segments are dropped until a stored id matches.
        """
        candidate = hit_id
        while candidate:
            if candidate in self._shapes:
                return candidate
            if '_' not in candidate:
                return None
            candidate = candidate.rsplit('_', 1)[0]
        return None
