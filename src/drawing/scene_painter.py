"""
Scene Painter - Paints scene primitives with QPainter

Shared by the on-screen canvas and the raster export so both show the same
picture.
"""

from typing import Dict, List, Optional

from PySide6.QtCore import Qt, QByteArray, QPointF, QRectF
from PySide6.QtGui import QBrush, QColor, QFont, QImage, QPainter, QPen
from PySide6.QtSvg import QSvgRenderer

from drawing.scene import (
    Primitive, LinePrimitive, CirclePrimitive, RectPrimitive, IconPrimitive, TextPrimitive,
)


_svg_renderers: Dict[str, QSvgRenderer] = {}


def _svg_renderer(svg: str) -> QSvgRenderer:
    renderer = _svg_renderers.get(svg)
    if renderer is None:
        renderer = QSvgRenderer(QByteArray(svg.encode('utf-8')))
        _svg_renderers[svg] = renderer
    return renderer


def _pen(color: Optional[str], width: float, dash=None) -> QPen:
    if not color or color == "transparent" or width <= 0:
        return QPen(Qt.NoPen)
    pen = QPen(QColor(color), width, Qt.SolidLine)
    if dash:
        # Qt dash lengths are in units of the pen width
        pen.setDashPattern([d / width for d in dash])
    return pen


def _brush(color: Optional[str]) -> QBrush:
    if not color or color == "transparent":
        return QBrush(Qt.NoBrush)
    return QBrush(QColor(color))


def paint_scene(painter: QPainter, primitives: List[Primitive], background: Optional[QImage] = None):
    """Paint the background image (if any) and then primitives bottom to top"""
    painter.setRenderHint(QPainter.Antialiasing)
    if background is not None and not background.isNull():
        painter.drawImage(0, 0, background)

    for primitive in primitives:
        if isinstance(primitive, LinePrimitive):
            if primitive.stroke == "transparent":
                continue
            painter.setPen(_pen(primitive.stroke, primitive.stroke_width, primitive.dash))
            painter.drawLine(QPointF(primitive.x1, primitive.y1), QPointF(primitive.x2, primitive.y2))
        elif isinstance(primitive, CirclePrimitive):
            painter.setPen(_pen(primitive.stroke, primitive.stroke_width))
            painter.setBrush(_brush(primitive.fill))
            painter.drawEllipse(QPointF(primitive.cx, primitive.cy), primitive.radius, primitive.radius)
        elif isinstance(primitive, RectPrimitive):
            painter.save()
            painter.translate(primitive.x, primitive.y)
            painter.rotate(primitive.rotation)
            painter.setPen(_pen(primitive.stroke, primitive.stroke_width, primitive.dash))
            painter.setBrush(_brush(primitive.fill))
            painter.drawRect(QRectF(0, 0, primitive.width, primitive.height))
            painter.restore()
        elif isinstance(primitive, IconPrimitive):
            painter.save()
            painter.translate(primitive.x, primitive.y)
            painter.rotate(primitive.rotation)
            _svg_renderer(primitive.svg).render(painter, QRectF(0, 0, primitive.width, primitive.height))
            painter.restore()
        elif isinstance(primitive, TextPrimitive):
            painter.save()
            painter.translate(primitive.x, primitive.y)
            painter.rotate(primitive.rotation)
            font = QFont("Arial")
            font.setPixelSize(primitive.font_size)
            painter.setFont(font)
            painter.setPen(QPen(QColor(primitive.fill)))
            # Text origin is the top-left corner, shifted back by the offset
            painter.drawText(QRectF(-primitive.offset_x, -primitive.offset_y,
                                    primitive.approx_width + primitive.font_size, primitive.font_size * 1.4),
                             Qt.AlignLeft | Qt.AlignTop, primitive.text)
            painter.restore()
