"""
Site Plan Session - The single owner of calibration, shapes, labels, tools
and the background image for one open drawing
"""

from typing import Optional, Tuple

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QImage

from calculations.result_types import OperationResult
from calculations.debug_logger import debug_logger
from drawing.scale_manager import ScaleManager
from drawing.shape_store import ShapeStore, DEFAULT_ICON_SIZE, DEFAULT_RULER_LENGTH
from drawing.measurement_labels import MeasurementLabelEngine
from drawing.drawing_tools import DrawingToolManager
from drawing.interaction_router import InteractionRouter
from drawing.scene import SceneBuilder, hit_test
from drawing.image_loader import load_background
from drawing.errors import ImageLoadError


DEFAULT_SURFACE_SIZE = (800, 600)


class SitePlanSession(QObject):
    """Wires the annotation components together around shared state.

    Components hold references to each other only through this object; the
    canvas, window and export all talk to the session.
    """

    background_changed = Signal()
    surface_size_changed = Signal(int, int)

    def __init__(self, prompt=None, icon_default_size: float = DEFAULT_ICON_SIZE,
                 ruler_default_length: float = DEFAULT_RULER_LENGTH, id_factory=None):
        super().__init__()
        self.scale_manager = ScaleManager(prompt)
        self.shape_store = ShapeStore(self.scale_manager, icon_default_size, ruler_default_length, id_factory)
        self.label_engine = MeasurementLabelEngine(self.shape_store, self.scale_manager)
        self.tool_manager = DrawingToolManager()
        self.router = InteractionRouter(self.scale_manager, self.shape_store, self.label_engine,
                                        self.tool_manager, prompt)
        self.scene_builder = SceneBuilder(self.shape_store, self.scale_manager, self.label_engine)
        self.background: Optional[QImage] = None

    def set_prompt(self, prompt):
        """Set the collaborator asked for numbers (calibration and structures)"""
        self.scale_manager.set_prompt(prompt)
        self.router.prompt = prompt

    @property
    def surface_size(self) -> Tuple[int, int]:
        if self.background is not None and not self.background.isNull():
            return (self.background.width(), self.background.height())
        return DEFAULT_SURFACE_SIZE

    def set_background(self, image: Optional[QImage]):
        """Replace the background; shapes are left exactly as they are"""
        self.background = image
        width, height = self.surface_size
        debug_logger.info("Session", "Background replaced", {'width': width, 'height': height,
                                                             'shapes': len(self.shape_store)})
        self.background_changed.emit()
        self.surface_size_changed.emit(width, height)

    def load_background_file(self, path: str) -> OperationResult:
        try:
            image = load_background(path)
        except ImageLoadError as e:
            debug_logger.error("Session", "Background load failed", e, {'path': path})
            return OperationResult.error_result(str(e))
        self.set_background(image)
        return OperationResult.success_result(data={'path': path, 'size': self.surface_size})

    def scene(self, include_overlays: bool = True, transform=None):
        return self.scene_builder.build(include_overlays, transform)

    def hit_test(self, point, transform=None) -> Optional[str]:
        """Id of the node under point in the current scene"""
        return hit_test(self.scene(True, transform), point)
