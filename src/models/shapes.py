"""
Shapes - Records for the annotations placed on a site plan

All geometry is stored in image pixels. Real-world measurements are never
stored on a shape; they are derived from the current scale factor when drawn.
"""

from dataclasses import dataclass, asdict, fields, replace
from enum import Enum
from typing import ClassVar, Dict, Tuple


class ShapeKind(Enum):
	"""Kinds of annotation that can be placed"""
	WELL = "well"
	SEPTIC = "septic"
	STRUCTURE = "structure"
	RULER = "ruler"


@dataclass
class Shape:
	"""Base record: an id and the anchor point"""
	id: str
	x: float
	y: float

	kind: ClassVar[ShapeKind]

	# Fields that are real-world dimensions and get a measurement label
	labelled_fields: ClassVar[Tuple[str, ...]] = ()

	# Fields that may never go below zero
	non_negative_fields: ClassVar[Tuple[str, ...]] = ()

	@classmethod
	def editable_fields(cls) -> Tuple[str, ...]:
		return tuple(f.name for f in fields(cls) if f.name != 'id')

	@property
	def anchor(self) -> Tuple[float, float]:
		return (self.x, self.y)

	def copy(self) -> 'Shape':
		return replace(self)

	def to_dict(self) -> Dict:
		data = asdict(self)
		data['type'] = self.kind.value
		return data


@dataclass
class IconShape(Shape):
	"""Point-anchored icon with a nominal pixel size and its own visual scale"""
	width: float = 0.0
	length: float = 0.0
	scale_x: float = 1.0
	scale_y: float = 1.0

	non_negative_fields: ClassVar[Tuple[str, ...]] = ('width', 'length')


@dataclass
class Well(IconShape):
	kind: ClassVar[ShapeKind] = ShapeKind.WELL


@dataclass
class Septic(IconShape):
	scale_x: float = 0.5
	scale_y: float = 0.5
	rotation: float = 0.0

	kind: ClassVar[ShapeKind] = ShapeKind.SEPTIC


@dataclass
class Structure(Shape):
	"""Rectangle anchored at its top-left corner, rotated about that corner.

	``width`` runs along the local x axis and ``length`` along the local y
	axis, both in pixels.
	"""
	width: float = 0.0
	length: float = 0.0
	rotation: float = 0.0

	kind: ClassVar[ShapeKind] = ShapeKind.STRUCTURE
	labelled_fields: ClassVar[Tuple[str, ...]] = ('width', 'length')
	non_negative_fields: ClassVar[Tuple[str, ...]] = ('width', 'length')


@dataclass
class Ruler(Shape):
	"""Segment from (x, y) to (x2, y2); orientation comes from the endpoints"""
	x2: float = 0.0
	y2: float = 0.0

	kind: ClassVar[ShapeKind] = ShapeKind.RULER
	labelled_fields: ClassVar[Tuple[str, ...]] = ('length',)

	@property
	def end(self) -> Tuple[float, float]:
		return (self.x2, self.y2)


SHAPE_CLASSES = {
	ShapeKind.WELL: Well,
	ShapeKind.SEPTIC: Septic,
	ShapeKind.STRUCTURE: Structure,
	ShapeKind.RULER: Ruler,
}
