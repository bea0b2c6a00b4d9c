"""
Interaction Router - Dispatches pointer and keyboard input to calibration,
placement, selection, dragging, label editing and the delete menu
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from PySide6.QtCore import QObject, Qt, Signal

from models.shapes import Ruler
from calculations.geometry import midpoint
from calculations.result_types import OperationResult
from calculations.debug_logger import debug_logger
from drawing.drawing_tools import ToolType
from drawing.measurement_labels import parse_label_hit
from drawing.transform_handles import TransformBox, attributes_from_box, is_transformer_hit, supports_transform


Point = Tuple[float, float]


class InteractionMode(Enum):
    """What a primary click currently means"""
    IDLE = "idle"
    PLACING = "placing"
    CALIBRATING = "calibrating"
    EDITING_LABEL = "editing_label"


class PointerButton(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass
class ContextMenuRequest:
    """Delete confirmation for one shape, shown at a canvas position"""
    shape_id: str
    x: float
    y: float


@dataclass
class DragState:
    """A captured drag: which shape, which part of it, and the grab offset"""
    shape_id: str
    part: str  # 'body', 'start' or 'end'
    grab_offset: Point = (0.0, 0.0)


class InteractionRouter(QObject):
    """Single entry point for user input on the drawing surface.

    The rendering surface reports the pointer position and the id of the
    topmost node under it (None for the background). Primary presses are
    handled in priority order: calibration, placement on empty canvas,
    transform handles (left to the overlay), then selection.
    """

    mode_changed = Signal(str)
    context_menu_changed = Signal(object)  # ContextMenuRequest or None
    status_message = Signal(str)

    def __init__(self, scale_manager, shape_store, label_engine, tool_manager, prompt=None):
        super().__init__()
        self.scale_manager = scale_manager
        self.shape_store = shape_store
        self.label_engine = label_engine
        self.tool_manager = tool_manager
        self.prompt = prompt

        self.context_menu: Optional[ContextMenuRequest] = None
        self.drag: Optional[DragState] = None
        self._mode = self._current_mode()

        self.scale_manager.calibration_state_changed.connect(self._refresh_mode)
        self.label_engine.edit_started.connect(self._refresh_mode)
        self.label_engine.edit_finished.connect(self._refresh_mode)
        self.tool_manager.tool_changed.connect(self._refresh_mode)

    # Mode

    def _current_mode(self) -> InteractionMode:
        if self.scale_manager.is_calibrating:
            return InteractionMode.CALIBRATING
        if self.label_engine.is_editing:
            return InteractionMode.EDITING_LABEL
        if self.tool_manager.is_placement_armed:
            return InteractionMode.PLACING
        return InteractionMode.IDLE

    @property
    def mode(self) -> InteractionMode:
        return self._mode

    def _refresh_mode(self, *args):
        mode = self._current_mode()
        if mode != self._mode:
            debug_logger.log_state_transition("Router", self._mode.value, mode.value)
            self._mode = mode
            self.mode_changed.emit(mode.value)

    # Mode triggers from the toolbar

    def begin_calibration(self):
        """Start calibration; any edit, selection, armed tool or menu is dropped"""
        self.label_engine.cancel_edit()
        self.dismiss_context_menu()
        self.drag = None
        self.tool_manager.cancel_tool()
        self.shape_store.select(None)
        self.scale_manager.begin_calibration()
        self.status_message.emit("Click two points a known distance apart")

    def arm_tool(self, tool_type: ToolType):
        """Arm a placement tool for the next click on empty canvas"""
        if self.label_engine.is_editing:
            self.label_engine.commit_edit()
        self.scale_manager.cancel_calibration()
        self.dismiss_context_menu()
        self.tool_manager.set_tool(tool_type)

    # Pointer input

    def pointer_down(self, point: Point, hit_id: Optional[str] = None,
                     button: PointerButton = PointerButton.PRIMARY) -> Optional[OperationResult]:
        point = (float(point[0]), float(point[1]))
        if button == PointerButton.SECONDARY:
            self.open_context_menu(point, hit_id)
            return None

        # The inline editor loses focus on any press on the surface
        if self.label_engine.is_editing:
            self.label_engine.commit_edit()

        # 1. Calibration takes every click
        if self.scale_manager.is_calibrating:
            self.dismiss_context_menu()
            result = self.scale_manager.handle_calibration_click(point)
            if result.message:
                self.status_message.emit(result.message)
            return result

        shape_id = self.shape_store.find_containing_shape(hit_id)

        # 2. Placement on empty canvas
        if self.tool_manager.is_placement_armed and shape_id is None and not is_transformer_hit(hit_id):
            self.dismiss_context_menu()
            return self._place_armed_shape(point)

        # 3. Transform handles run their own gesture
        if is_transformer_hit(hit_id):
            return None

        # 4. Selection
        self.shape_store.select(shape_id)
        self.dismiss_context_menu()
        if shape_id is None:
            return None

        label = parse_label_hit(hit_id)
        if label and label[0] == shape_id:
            self.label_engine.begin_edit(shape_id, label[1])
            return None

        self._begin_drag(shape_id, hit_id, point)
        return None

    def _place_armed_shape(self, point: Point) -> OperationResult:
        tool = self.tool_manager.get_current_tool()
        parameters = tool.collect_parameters(self.prompt)
        # One placement per arming, successful or not
        self.tool_manager.cancel_tool()
        new_id = self.shape_store.place(tool.kind, point, parameters)
        if new_id is None:
            return OperationResult.error_result("Placement cancelled", {'kind': tool.kind.value})
        return OperationResult.success_result(data={'id': new_id, 'kind': tool.kind.value})

    def _begin_drag(self, shape_id: str, hit_id: Optional[str], point: Point):
        shape = self.shape_store.get(shape_id)
        if isinstance(shape, Ruler):
            if hit_id == f"{shape_id}_start":
                self.drag = DragState(shape_id, 'start')
            elif hit_id == f"{shape_id}_end":
                self.drag = DragState(shape_id, 'end')
            else:
                self.drag = DragState(shape_id, 'body')
            return
        self.drag = DragState(shape_id, 'body', (point[0] - shape.x, point[1] - shape.y))

    def pointer_move(self, point: Point):
        point = (float(point[0]), float(point[1]))
        if self.scale_manager.is_calibrating:
            self.scale_manager.update_hover(point)
            return
        if self.drag:
            self._apply_drag(point)

    def _apply_drag(self, point: Point):
        shape = self.shape_store.get(self.drag.shape_id)
        if shape is None:
            self.drag = None
            return

        if isinstance(shape, Ruler):
            if self.drag.part == 'start':
                self.shape_store.update(shape.id, {'x': point[0], 'y': point[1]})
            elif self.drag.part == 'end':
                self.shape_store.update(shape.id, {'x2': point[0], 'y2': point[1]})
            else:
                # Delta is measured from the current midpoint, so each move
                # starts from the already-translated segment
                mx, my = midpoint(shape.anchor, shape.end)
                dx, dy = point[0] - mx, point[1] - my
                self.shape_store.update(shape.id, {
                    'x': shape.x + dx, 'y': shape.y + dy,
                    'x2': shape.x2 + dx, 'y2': shape.y2 + dy,
                })
            return

        gx, gy = self.drag.grab_offset
        self.shape_store.update(shape.id, {'x': point[0] - gx, 'y': point[1] - gy})

    def pointer_up(self, point: Optional[Point] = None):
        if self.drag:
            if point is not None:
                self._apply_drag((float(point[0]), float(point[1])))
            debug_logger.debug("Router", "Drag finished", {'id': self.drag.shape_id, 'part': self.drag.part})
            self.drag = None

    def transform_finished(self, shape_id: str, box: TransformBox) -> bool:
        """Write the final box of a resize/rotate gesture back to the shape"""
        shape = self.shape_store.get(shape_id)
        if shape is None or not supports_transform(shape):
            return False
        attrs = attributes_from_box(shape, box)
        debug_logger.info("Router", "Transform finished", dict(attrs, id=shape_id))
        self.shape_store.update(shape_id, attrs)
        return True

    # Context menu

    def open_context_menu(self, point: Point, hit_id: Optional[str]) -> bool:
        """Offer deletion of the shape under the pointer"""
        if self.scale_manager.is_calibrating:
            return False
        shape_id = self.shape_store.find_containing_shape(hit_id)
        if shape_id is None:
            return False
        self.context_menu = ContextMenuRequest(shape_id, point[0], point[1])
        self.context_menu_changed.emit(self.context_menu)
        return True

    def confirm_delete(self) -> bool:
        """Delete the shape the open menu points at"""
        if not self.context_menu:
            return False
        shape_id = self.context_menu.shape_id
        self.dismiss_context_menu()
        if self.label_engine.editing and self.label_engine.editing.shape_id == shape_id:
            self.label_engine.cancel_edit()
        if self.drag and self.drag.shape_id == shape_id:
            self.drag = None
        return self.shape_store.remove(shape_id)

    def dismiss_context_menu(self) -> bool:
        if not self.context_menu:
            return False
        self.context_menu = None
        self.context_menu_changed.emit(None)
        return True

    # Keyboard

    def key_press(self, key) -> bool:
        """Escape backs out of the innermost mode; Enter commits a label edit"""
        if key == Qt.Key_Escape:
            if self.dismiss_context_menu():
                return True
            if self.label_engine.is_editing:
                self.label_engine.cancel_edit()
                return True
            if self.scale_manager.is_calibrating:
                self.scale_manager.cancel_calibration()
                self.status_message.emit("Calibration cancelled")
                return True
            if self.tool_manager.is_placement_armed:
                self.tool_manager.cancel_tool()
                return True
            return False

        if key in (Qt.Key_Return, Qt.Key_Enter) and self.label_engine.is_editing:
            self.label_engine.commit_edit()
            return True
        return False
