"""
Export Adapter - Renders the current site plan to PNG bytes
"""

import logging
import math

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, Qt
from PySide6.QtGui import QImage, QPainter

from drawing.errors import ExportError
from drawing.scene_painter import paint_scene


logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "site_plan.png"
DEFAULT_PIXEL_RATIO = 2.0


class ExportAdapter:
    """Rasterizes a session without its interactive overlays"""

    def __init__(self, session):
        self.session = session

    def render_image(self, pixel_ratio: float = DEFAULT_PIXEL_RATIO) -> QImage:
        if not pixel_ratio or not math.isfinite(pixel_ratio) or pixel_ratio <= 0:
            raise ExportError(f"Invalid pixel ratio: {pixel_ratio}")

        # An open label edit is committed first, as if the editor lost focus
        if self.session.label_engine.is_editing:
            self.session.label_engine.commit_edit()

        width, height = self.session.surface_size
        image = QImage(int(math.ceil(width * pixel_ratio)), int(math.ceil(height * pixel_ratio)),
                       QImage.Format_ARGB32)
        if image.isNull():
            raise ExportError(f"Could not allocate {width}x{height} image at ratio {pixel_ratio}")
        image.fill(Qt.transparent)

        painter = QPainter(image)
        try:
            painter.scale(pixel_ratio, pixel_ratio)
            paint_scene(painter, self.session.scene(include_overlays=False), self.session.background)
        finally:
            painter.end()
        return image

    def render_to_image(self, pixel_ratio: float = DEFAULT_PIXEL_RATIO) -> bytes:
        """PNG bytes of the background and shapes at pixel_ratio"""
        image = self.render_image(pixel_ratio)
        data = QByteArray()
        buffer = QBuffer(data)
        buffer.open(QIODevice.WriteOnly)
        ok = image.save(buffer, "PNG")
        buffer.close()
        if not ok:
            raise ExportError("PNG encoding failed")
        logger.info("Rendered site plan %dx%d at ratio %s", image.width(), image.height(), pixel_ratio)
        return bytes(data.data())

    def save_to_file(self, path: str, pixel_ratio: float = DEFAULT_PIXEL_RATIO) -> str:
        png = self.render_to_image(pixel_ratio)
        try:
            with open(path, 'wb') as f:
                f.write(png)
        except OSError as e:
            raise ExportError(f"Could not write {path}: {e}") from e
        logger.info("Exported site plan to %s", path)
        return path
