"""
Image Loader - Reads a background site plan from a raster image or a PDF
"""

import logging
import os

import fitz  # PyMuPDF
from PySide6.QtGui import QImage

from drawing.errors import ImageLoadError


logger = logging.getLogger(__name__)

RASTER_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.gif')
PDF_EXTENSIONS = ('.pdf',)

IMAGE_FILE_FILTER = "Site plans (*.png *.jpg *.jpeg *.bmp *.gif *.pdf);;All files (*)"


def load_background(path: str, pdf_zoom: float = 1.0) -> QImage:
    """Load a background image.

    PDFs contribute their first page, rendered at ``pdf_zoom`` (1.0 = 72 dpi).
    Raises ImageLoadError if the file is missing or cannot be decoded.
    """
    if not path or not os.path.exists(path):
        raise ImageLoadError(f"Image file not found: {path}")

    if path.lower().endswith(PDF_EXTENSIONS):
        image = _render_pdf_first_page(path, pdf_zoom)
    else:
        image = QImage(path)

    if image.isNull():
        raise ImageLoadError(f"Could not decode image: {os.path.basename(path)}")

    logger.info("Loaded background %s (%dx%d)", path, image.width(), image.height())
    return image


def _render_pdf_first_page(path: str, zoom: float) -> QImage:
    try:
        document = fitz.open(path)
    except (RuntimeError, ValueError) as e:
        raise ImageLoadError(f"Failed to open PDF: {e}") from e

    try:
        if len(document) == 0:
            raise ImageLoadError("PDF has no pages")
        page = document[0]
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
        # QImage.fromData copies the bytes, so the document can close afterwards
        return QImage.fromData(pix.tobytes("ppm"))
    finally:
        document.close()
