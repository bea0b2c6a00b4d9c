"""
Drawing components: calibration, shape store, measurement labels, input routing,
scene building, painting and export
"""

from .scale_manager import ScaleManager, CalibrationState
from .shape_store import ShapeStore
from .measurement_labels import MeasurementLabelEngine, MeasurementLabel
from .drawing_tools import DrawingToolManager, ToolType
from .interaction_router import InteractionRouter, InteractionMode, PointerButton
from .scene import SceneBuilder, hit_test
from .session import SitePlanSession
from .export_adapter import ExportAdapter
from .image_loader import load_background

__all__ = [
    'ScaleManager',
    'CalibrationState',
    'ShapeStore',
    'MeasurementLabelEngine',
    'MeasurementLabel',
    'DrawingToolManager',
    'ToolType',
    'InteractionRouter',
    'InteractionMode',
    'PointerButton',
    'SceneBuilder',
    'hit_test',
    'SitePlanSession',
    'ExportAdapter',
    'load_background',
]
