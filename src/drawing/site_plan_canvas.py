"""
Site Plan Canvas - Widget that paints the session scene and feeds pointer and
keyboard input to the interaction router
"""

from typing import Optional

from PySide6.QtWidgets import QWidget, QLineEdit, QMenu
from PySide6.QtCore import Qt, QPoint, Signal
from PySide6.QtGui import QPainter, QColor

from calculations.debug_logger import debug_logger
from drawing.interaction_router import PointerButton
from drawing.scene_painter import paint_scene
from drawing.transform_handles import TransformGesture, box_for_shape, handle_name, is_transformer_hit


class LabelEditor(QLineEdit):
    """Inline editor for a measurement label"""

    cancelled = Signal()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.cancelled.emit()
            return
        super().keyPressEvent(event)


class SitePlanCanvas(QWidget):
    """Drawing surface for one SitePlanSession"""

    def __init__(self, session, parent=None):
        super().__init__(parent)
        self.session = session
        self._transform: Optional[TransformGesture] = None

        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(True)
        self.setFixedSize(*session.surface_size)

        self.label_editor = LabelEditor(self)
        self.label_editor.setFixedWidth(50)
        self.label_editor.setAlignment(Qt.AlignCenter)
        self.label_editor.hide()
        self.label_editor.textEdited.connect(self.session.label_engine.set_edit_text)
        self.label_editor.editingFinished.connect(self._commit_label_editor)
        self.label_editor.cancelled.connect(self.session.label_engine.cancel_edit)

        # Repaint on any state change
        store = session.shape_store
        store.shapes_changed.connect(self.update)
        store.selection_changed.connect(self.update)
        session.scale_manager.calibration_preview_changed.connect(self.update)
        session.scale_manager.scale_changed.connect(self.update)
        session.background_changed.connect(self.update)
        session.surface_size_changed.connect(self._resize_surface)
        session.label_engine.edit_started.connect(self._show_label_editor)
        session.label_engine.edit_finished.connect(self._hide_label_editor)

    # ---------------------- Painting ----------------------
    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            if self.session.background is None:
                painter.fillRect(self.rect(), QColor(255, 255, 255))
            paint_scene(painter, self.session.scene(True, self._transform), self.session.background)
        finally:
            painter.end()

    def _resize_surface(self, width, height):
        self.setFixedSize(width, height)
        self.update()

    # ---------------------- Mouse/keyboard events ----------------------
    def mousePressEvent(self, event):
        point = (event.position().x(), event.position().y())
        hit = self.session.hit_test(point, self._transform)
        self.setFocus()

        try:
            if event.button() == Qt.LeftButton:
                if is_transformer_hit(hit) and not self.session.scale_manager.is_calibrating:
                    self._begin_transform(hit)
                self.session.router.pointer_down(point, hit, PointerButton.PRIMARY)
            elif event.button() == Qt.RightButton:
                self.session.router.pointer_down(point, hit, PointerButton.SECONDARY)
                if self.session.router.context_menu is not None:
                    self._show_context_menu()
        except Exception as e:
            debug_logger.error("Canvas", "Pointer press dropped", e, {'point': point, 'hit': hit})
        self.update()

    def mouseMoveEvent(self, event):
        point = (event.position().x(), event.position().y())
        try:
            if self._transform is not None:
                self._transform.update(point)
                self.update()
                return
            self.session.router.pointer_move(point)
        except Exception as e:
            debug_logger.error("Canvas", "Pointer move dropped", e, {'point': point})

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.LeftButton:
            return
        point = (event.position().x(), event.position().y())
        gesture = self._transform
        self._transform = None
        try:
            if gesture is not None:
                self.session.router.transform_finished(gesture.shape_id, gesture.box)
            else:
                self.session.router.pointer_up(point)
        except Exception as e:
            debug_logger.error("Canvas", "Pointer release dropped", e, {'point': point})
        self.update()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape and self._transform is not None:
            self._transform = None
            self.update()
            return
        try:
            handled = self.session.router.key_press(event.key())
        except Exception as e:
            debug_logger.error("Canvas", "Key press dropped", e, {'key': event.key()})
            handled = True
        if handled:
            self.update()
            return
        super().keyPressEvent(event)

    # ---------------------- Transform handles ----------------------
    def _begin_transform(self, hit_id):
        shape = self.session.shape_store.get(self.session.shape_store.selected_id)
        box = box_for_shape(shape) if shape is not None else None
        if box is None:
            return
        self._transform = TransformGesture(shape.id, box, handle_name(hit_id))
        debug_logger.debug("Canvas", "Transform started", {'id': shape.id, 'handle': self._transform.handle})

    # ---------------------- Context menu ----------------------
    def _show_context_menu(self):
        request = self.session.router.context_menu
        menu = QMenu(self)
        delete_action = menu.addAction("✕ Delete")
        chosen = menu.exec(self.mapToGlobal(QPoint(int(request.x), int(request.y))))
        if chosen is delete_action:
            self.session.router.confirm_delete()
        else:
            self.session.router.dismiss_context_menu()
        self.update()

    # ---------------------- Label editor ----------------------
    def _show_label_editor(self, shape_id, field):
        engine = self.session.label_engine
        shape = self.session.shape_store.get(shape_id)
        if shape is None or engine.editing is None:
            return
        x, y = engine.editor_position(shape, field)
        self.label_editor.setText(engine.editing.text)
        self.label_editor.move(int(x), int(y))
        self.label_editor.show()
        self.label_editor.setFocus()
        self.label_editor.selectAll()
        self.update()

    def _commit_label_editor(self):
        if self.session.label_engine.is_editing:
            self.session.label_engine.commit_edit(self.label_editor.text())

    def _hide_label_editor(self, shape_id, field):
        self.label_editor.hide()
        self.setFocus()
        self.update()
