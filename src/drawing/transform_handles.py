"""
Transform Handles - Resize/rotate overlay geometry for structures and septic icons

Boxes are anchored at their top-left corner and rotated about it, the same
frame the shapes themselves use.
"""

import math
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from models.shapes import Shape, Structure, Septic
from calculations.geometry import rotate_point


Point = Tuple[float, float]

TRANSFORMER_PREFIX = "__transformer__:"
MIN_TRANSFORM_SIZE = 20
ROTATE_HANDLE_OFFSET = 30
HANDLE_SIZE = 10

# Nominal size of the septic icon path at scale 1
SEPTIC_ICON_SIZE = (128.0, 124.0)

# handle name -> (local x fraction, local y fraction)
RESIZE_HANDLES = {
    'top-left': (0.0, 0.0),
    'top-center': (0.5, 0.0),
    'top-right': (1.0, 0.0),
    'middle-left': (0.0, 0.5),
    'middle-right': (1.0, 0.5),
    'bottom-left': (0.0, 1.0),
    'bottom-center': (0.5, 1.0),
    'bottom-right': (1.0, 1.0),
}
ROTATE_HANDLE = 'rotater'


def handle_hit_id(name: str) -> str:
    return TRANSFORMER_PREFIX + name


def is_transformer_hit(hit_id: Optional[str]) -> bool:
    return bool(hit_id) and hit_id.startswith(TRANSFORMER_PREFIX)


def handle_name(hit_id: str) -> str:
    return hit_id[len(TRANSFORMER_PREFIX):]


@dataclass
class TransformBox:
    """Rotated rectangle: top-left anchor, size, rotation in degrees"""
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0

    def to_scene(self, local: Point) -> Point:
        """Map a point given relative to the unrotated box into scene pixels"""
        return rotate_point((self.x + local[0], self.y + local[1]), self.rotation, (self.x, self.y))

    def to_local(self, point: Point) -> Point:
        px, py = rotate_point(point, -self.rotation, (self.x, self.y))
        return (px - self.x, py - self.y)

    @property
    def center(self) -> Point:
        return self.to_scene((self.width / 2, self.height / 2))

    def handle_positions(self) -> Dict[str, Point]:
        positions = {
            name: self.to_scene((fx * self.width, fy * self.height))
            for name, (fx, fy) in RESIZE_HANDLES.items()
        }
        positions[ROTATE_HANDLE] = self.to_scene((self.width / 2, -ROTATE_HANDLE_OFFSET))
        return positions


def supports_transform(shape: Shape) -> bool:
    return isinstance(shape, (Structure, Septic))


def box_for_shape(shape: Shape) -> Optional[TransformBox]:
    """The transform box around a structure or septic icon"""
    if isinstance(shape, Structure):
        return TransformBox(shape.x, shape.y, shape.width, shape.length, shape.rotation)
    if isinstance(shape, Septic):
        w, h = SEPTIC_ICON_SIZE
        return TransformBox(shape.x, shape.y, w * shape.scale_x, h * shape.scale_y, shape.rotation)
    return None


def attributes_from_box(shape: Shape, box: TransformBox) -> Dict:
    """Shape fields after a transform ends.

    A structure takes the box size as its width/length. A septic icon keeps
    its size as visual scale factors against the nominal icon size.
    """
    if isinstance(shape, Structure):
        return {'x': box.x, 'y': box.y, 'width': box.width, 'length': box.height, 'rotation': box.rotation}
    if isinstance(shape, Septic):
        w, h = SEPTIC_ICON_SIZE
        return {'x': box.x, 'y': box.y, 'scale_x': box.width / w, 'scale_y': box.height / h,
                'rotation': box.rotation}
    return {}


class TransformGesture:
    """One drag of a transform handle, from press to release"""

    def __init__(self, shape_id: str, box: TransformBox, handle: str):
        self.shape_id = shape_id
        self.start_box = box
        self.box = replace(box)
        self.handle = handle

    @property
    def is_rotation(self) -> bool:
        return self.handle == ROTATE_HANDLE

    def update(self, pointer: Point) -> TransformBox:
        if self.is_rotation:
            self.box = self._rotated(pointer)
        elif self.handle in RESIZE_HANDLES:
            candidate = self._resized(pointer)
            # Too small: keep the previous box
            if candidate.width >= MIN_TRANSFORM_SIZE and candidate.height >= MIN_TRANSFORM_SIZE:
                self.box = candidate
        return self.box

    def _resized(self, pointer: Point) -> TransformBox:
        start = self.start_box
        lx, ly = start.to_local(pointer)
        left, top, right, bottom = 0.0, 0.0, start.width, start.height
        fx, fy = RESIZE_HANDLES[self.handle]
        if fx == 0.0:
            left = lx
        elif fx == 1.0:
            right = lx
        if fy == 0.0:
            top = ly
        elif fy == 1.0:
            bottom = ly

        anchor = start.to_scene((left, top))
        return TransformBox(anchor[0], anchor[1], right - left, bottom - top, start.rotation)

    def _rotated(self, pointer: Point) -> TransformBox:
        start = self.start_box
        cx, cy = start.center
        # The rotate handle sits straight above the center at rotation 0
        rotation = math.degrees(math.atan2(pointer[1] - cy, pointer[0] - cx)) + 90
        if rotation > 180:
            rotation -= 360
        anchor = rotate_point((start.x, start.y), rotation - start.rotation, (cx, cy))
        return TransformBox(anchor[0], anchor[1], start.width, start.height, rotation)
