"""
Scene - Drawable primitives for one render pass, and hit testing over them

The scene is rebuilt from the shape store, the scale manager and the label
engine on every repaint. Primitives carry literal pixel coordinates and the
id reported back to the router when the pointer lands on them.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from models.shapes import Shape, Well, Septic, Ruler
from calculations.geometry import rotate_point, distance_to_segment, line_length
from drawing.transform_handles import (
    HANDLE_SIZE, ROTATE_HANDLE, SEPTIC_ICON_SIZE, TransformGesture,
    attributes_from_box, box_for_shape, handle_hit_id, supports_transform,
)


Point = Tuple[float, float]

WELL_RADIUS = 8
RULER_STROKE_WIDTH = 2
RULER_HITBOX_WIDTH = 20
RULER_ENDPOINT_RADIUS = 6
CALIBRATION_POINT_RADIUS = 5

STRUCTURE_FILL = "brown"
WELL_FILL = "blue"
SEPTIC_FILL = "green"
HANDLE_COLOR = "#00a1ff"

SEPTIC_PATH = (
    "M82.844,107.964h0s-.039.295-.039.295c-2.518,18.994-29.278,20.857-34.404,2.395h0s-.076.07-.076.07"
    "c-14.047,12.967-35.751-2.724-27.842-20.128h0s0,0,0,0c-19.1.985-25.77-24.958-8.564-33.308l.235-.114h0"
    "c-15.293-11.62-3.665-35.853,14.968-31.195l.189.047-.042-.19C23.123,7.083,47.666-3.876,58.863,11.729h0"
    "s.121-.232.121-.232c8.818-16.971,34.568-9.593,33.061,9.473h0s0,0,0,0c17.614-7.43,32.705,14.696,19.358,28.383"
    "l-.072.074h0c18.314,5.63,15.719,32.329-3.337,34.326l-.296.031h0c10.366,16.211-8.932,34.987-24.853,24.181Z"
)


def septic_svg(fill: str = SEPTIC_FILL, stroke: str = "black", stroke_width: float = 2) -> str:
    """SVG document for the septic icon at its nominal size"""
    w, h = SEPTIC_ICON_SIZE
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{w:g}" height="{h:g}" viewBox="0 0 {w:g} {h:g}">'
        f'<path d="{SEPTIC_PATH}" fill="{fill}" stroke="{stroke}" stroke-width="{stroke_width:g}"/>'
        '</svg>'
    )


@dataclass
class Primitive:
    hit_id: Optional[str] = None
    listening: bool = True

    def contains(self, point: Point) -> bool:
        return False


@dataclass
class LinePrimitive(Primitive):
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0
    stroke: str = "black"
    stroke_width: float = 1.0
    dash: Optional[Tuple[float, float]] = None

    def contains(self, point: Point) -> bool:
        return distance_to_segment(point, (self.x1, self.y1), (self.x2, self.y2)) <= self.stroke_width / 2


@dataclass
class CirclePrimitive(Primitive):
    cx: float = 0.0
    cy: float = 0.0
    radius: float = 1.0
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 0.0

    def contains(self, point: Point) -> bool:
        return line_length(point, (self.cx, self.cy)) <= self.radius + self.stroke_width / 2


@dataclass
class RectPrimitive(Primitive):
    """Rectangle anchored at its top-left corner and rotated about it"""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 0.0
    dash: Optional[Tuple[float, float]] = None

    def contains(self, point: Point) -> bool:
        lx, ly = rotate_point(point, -self.rotation, (self.x, self.y))
        return 0 <= lx - self.x <= self.width and 0 <= ly - self.y <= self.height


@dataclass
class IconPrimitive(Primitive):
    """Fixed SVG icon drawn into its scaled, rotated bounding box"""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    svg: str = ""

    def contains(self, point: Point) -> bool:
        lx, ly = rotate_point(point, -self.rotation, (self.x, self.y))
        return 0 <= lx - self.x <= self.width and 0 <= ly - self.y <= self.height


@dataclass
class TextPrimitive(Primitive):
    """Text whose top-left sits at (x - offset_x, y - offset_y) before rotation about (x, y)"""
    x: float = 0.0
    y: float = 0.0
    text: str = ""
    rotation: float = 0.0
    font_size: int = 14
    fill: str = "black"
    offset_x: float = 0.0
    offset_y: float = 0.0

    @property
    def approx_width(self) -> float:
        return len(self.text) * self.font_size * 0.6

    def contains(self, point: Point) -> bool:
        lx, ly = rotate_point(point, -self.rotation, (self.x, self.y))
        left = self.x - self.offset_x
        top = self.y - self.offset_y
        return left <= lx <= left + self.approx_width and top <= ly <= top + self.font_size


def hit_test(primitives: List[Primitive], point: Point) -> Optional[str]:
    """Id of the topmost listening primitive under point (None for background)"""
    for primitive in reversed(primitives):
        if primitive.listening and primitive.contains(point):
            return primitive.hit_id
    return None


class SceneBuilder:
    """Turns the current session state into an ordered primitive list"""

    def __init__(self, shape_store, scale_manager, label_engine):
        self.shape_store = shape_store
        self.scale_manager = scale_manager
        self.label_engine = label_engine

    def build(self, include_overlays: bool = True,
              transform: Optional[TransformGesture] = None) -> List[Primitive]:
        """Primitives bottom to top.

        Overlays are the calibration preview and the transform handles; export
        leaves them out. A running transform gesture is drawn in place of the
        stored geometry of its shape.
        """
        primitives: List[Primitive] = []
        for shape in self.shape_store.shapes():
            if transform is not None and transform.shape_id == shape.id:
                for name, value in attributes_from_box(shape, transform.box).items():
                    setattr(shape, name, value)
            primitives.extend(self.shape_primitives(shape))

        if include_overlays:
            primitives.extend(self.calibration_primitives())
            selected = self.shape_store.get(self.shape_store.selected_id)
            if selected is not None and supports_transform(selected):
                if transform is not None and transform.shape_id == selected.id:
                    box = transform.box
                else:
                    box = box_for_shape(selected)
                primitives.extend(self.transform_primitives(box))
        return primitives

    def shape_primitives(self, shape: Shape) -> List[Primitive]:
        if isinstance(shape, Ruler):
            return self._ruler_primitives(shape)

        if isinstance(shape, Well):
            body = CirclePrimitive(hit_id=shape.id, cx=shape.x, cy=shape.y, radius=WELL_RADIUS, fill=WELL_FILL)
        elif isinstance(shape, Septic):
            w, h = SEPTIC_ICON_SIZE
            body = IconPrimitive(hit_id=shape.id, x=shape.x, y=shape.y,
                                 width=w * shape.scale_x, height=h * shape.scale_y,
                                 rotation=shape.rotation, svg=septic_svg())
        else:
            body = RectPrimitive(hit_id=shape.id, x=shape.x, y=shape.y, width=shape.width,
                                 height=shape.length, rotation=shape.rotation, fill=STRUCTURE_FILL)
        return [body] + self._label_primitives(shape)

    def _ruler_primitives(self, ruler: Ruler) -> List[Primitive]:
        primitives = [
            # Wide invisible line so the thin ruler is easy to grab
            LinePrimitive(hit_id=ruler.id, x1=ruler.x, y1=ruler.y, x2=ruler.x2, y2=ruler.y2,
                          stroke="transparent", stroke_width=RULER_HITBOX_WIDTH),
            LinePrimitive(hit_id=ruler.id, listening=False, x1=ruler.x, y1=ruler.y, x2=ruler.x2, y2=ruler.y2,
                          stroke="black", stroke_width=RULER_STROKE_WIDTH),
        ]
        primitives.extend(self._label_primitives(ruler))
        primitives.append(CirclePrimitive(hit_id=f"{ruler.id}_start", cx=ruler.x, cy=ruler.y,
                                          radius=RULER_ENDPOINT_RADIUS, fill="blue"))
        primitives.append(CirclePrimitive(hit_id=f"{ruler.id}_end", cx=ruler.x2, cy=ruler.y2,
                                          radius=RULER_ENDPOINT_RADIUS, fill="blue"))
        return primitives

    def _label_primitives(self, shape: Shape) -> List[Primitive]:
        return [
            TextPrimitive(hit_id=label.hit_id, x=label.x, y=label.y, text=label.text,
                          rotation=label.rotation, font_size=label.font_size,
                          offset_x=label.offset_x, offset_y=label.offset_y)
            for label in self.label_engine.labels_for(shape)
        ]

    def calibration_primitives(self) -> List[Primitive]:
        sm = self.scale_manager
        if not sm.is_calibrating:
            return []
        primitives: List[Primitive] = []
        segment = sm.preview_segment()
        if segment is not None:
            (x1, y1), (x2, y2) = segment
            primitives.append(LinePrimitive(listening=False, x1=x1, y1=y1, x2=x2, y2=y2,
                                            stroke="red", stroke_width=2, dash=(4, 4)))
        for x, y in sm.points:
            primitives.append(CirclePrimitive(listening=False, cx=x, cy=y,
                                              radius=CALIBRATION_POINT_RADIUS, fill="red"))
        return primitives

    def transform_primitives(self, box) -> List[Primitive]:
        primitives: List[Primitive] = [
            RectPrimitive(listening=False, x=box.x, y=box.y, width=box.width, height=box.height,
                          rotation=box.rotation, stroke=HANDLE_COLOR, stroke_width=1),
        ]
        positions = box.handle_positions()
        top_center = positions['top-center']
        rotater = positions[ROTATE_HANDLE]
        primitives.append(LinePrimitive(listening=False, x1=top_center[0], y1=top_center[1],
                                        x2=rotater[0], y2=rotater[1], stroke=HANDLE_COLOR, stroke_width=1))
        half = HANDLE_SIZE / 2
        for name, (hx, hy) in positions.items():
            if name == ROTATE_HANDLE:
                primitives.append(CirclePrimitive(hit_id=handle_hit_id(name), cx=hx, cy=hy, radius=half,
                                                  fill="white", stroke=HANDLE_COLOR, stroke_width=1))
                continue
            # Square handle centered on the anchor point, aligned with the box
            corner = rotate_point((hx - half, hy - half), box.rotation, (hx, hy))
            primitives.append(RectPrimitive(hit_id=handle_hit_id(name), x=corner[0], y=corner[1],
                                            width=HANDLE_SIZE, height=HANDLE_SIZE, rotation=box.rotation,
                                            fill="white", stroke=HANDLE_COLOR, stroke_width=1))
        return primitives
