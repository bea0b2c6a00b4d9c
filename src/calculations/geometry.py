"""
Geometry utilities for site plan annotation

Point rotation about a center, segment length and a label-friendly segment
angle. Points are plain (x, y) tuples in screen pixels (y grows downward).
"""

import math
from typing import Tuple

Point = Tuple[float, float]


def rotate_point(point: Point, rotation_degrees: float, center: Point) -> Point:
	"""Rotate ``point`` about ``center``.

	Rotation is clockwise-positive on a y-down screen, the same convention
	used for every shape rotation in the drawing.
	"""
	rad = math.radians(rotation_degrees)
	dx = point[0] - center[0]
	dy = point[1] - center[1]
	cos_a = math.cos(rad)
	sin_a = math.sin(rad)
	return (
		center[0] + dx * cos_a - dy * sin_a,
		center[1] + dx * sin_a + dy * cos_a,
	)


def line_length(p1: Point, p2: Point) -> float:
	"""Euclidean distance between two points in pixels."""
	return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def line_angle_degrees(p1: Point, p2: Point) -> float:
	"""Angle of the segment p1->p2 folded into (-90, 90].

	Text laid along the segment with this angle never renders upside-down.
	"""
	angle = math.degrees(math.atan2(p2[1] - p1[1], p2[0] - p1[0]))
	if angle > 90:
		angle -= 180
	elif angle <= -90:
		angle += 180
	return angle


def midpoint(p1: Point, p2: Point) -> Point:
	return ((p1[0] + p2[0]) / 2.0, (p1[1] + p2[1]) / 2.0)


def distance_to_segment(point: Point, p1: Point, p2: Point) -> float:
	"""Shortest distance from ``point`` to the segment p1-p2."""
	dx = p2[0] - p1[0]
	dy = p2[1] - p1[1]
	seg_len2 = dx * dx + dy * dy
	if seg_len2 == 0:
		return line_length(point, p1)
	t = ((point[0] - p1[0]) * dx + (point[1] - p1[1]) * dy) / seg_len2
	t = max(0.0, min(1.0, t))
	proj = (p1[0] + t * dx, p1[1] + t * dy)
	return line_length(point, proj)
