"""
Annotation models for the Site Plan tool
"""

from .shapes import ShapeKind, Shape, IconShape, Well, Septic, Structure, Ruler, SHAPE_CLASSES

__all__ = [
	'ShapeKind',
	'Shape',
	'IconShape',
	'Well',
	'Septic',
	'Structure',
	'Ruler',
	'SHAPE_CLASSES',
]
