"""
Geometry helpers, result types and debug logging for the site plan core
"""

from .geometry import rotate_point, line_length, line_angle_degrees, midpoint, distance_to_segment
from .result_types import OperationResult
from .debug_logger import debug_logger, SitePlanDebugLogger

__all__ = [
    'rotate_point',
    'line_length',
    'line_angle_degrees',
    'midpoint',
    'distance_to_segment',
    'OperationResult',
    'debug_logger',
    'SitePlanDebugLogger',
]
