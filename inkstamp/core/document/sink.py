"""
PyMuPDF-backed document sink: receives draw commands in PDF space and
writes the final document.
"""
import logging
from typing import Set, Tuple

import fitz  # PyMuPDF

from inkstamp.core.errors import DocumentDecodeError, ExportError
from inkstamp.core.fonts import ResolvedFont

from .transform import ImageDrawCommand, TextDrawCommand

logger = logging.getLogger(__name__)


class FitzDocumentSink:
    """Opens a PDF from bytes, draws on its pages, serializes it back."""

    def __init__(self, document_bytes: bytes):
        try:
            self.doc = fitz.open(stream=document_bytes, filetype="pdf")
        except Exception as e:
            raise DocumentDecodeError(f"Could not open PDF: {e}") from e
        self._registered_fonts: Set[Tuple[int, str]] = set()

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    def has_page(self, page_number: int) -> bool:
        """Check a 1-based page number against the document."""
        return 1 <= page_number <= self.doc.page_count

    def page_size(self, page_number: int) -> Tuple[float, float]:
        """
        Get the size of a page in points.

        Args:
            page_number: 1-based page number

        Returns:
            Tuple of (width, height)
        """
        rect = self.doc[page_number - 1].rect
        return rect.width, rect.height

    def _to_page_point(self, page: fitz.Page, x: float, y: float) -> fitz.Point:
        # Y-up coordinates relative to the visible page (page.rect, i.e. the
        # cropbox) to PyMuPDF's top-down frame of the unrotated page
        return fitz.Point(x, page.rect.height - y) * page.derotation_matrix

    def draw_text(self, page_number: int, command: TextDrawCommand, font: ResolvedFont) -> None:
        page = self.doc[page_number - 1]

        if font.is_embedded and (page_number, font.name) not in self._registered_fonts:
            page.insert_font(fontname=font.name, fontbuffer=font.buffer)
            self._registered_fonts.add((page_number, font.name))

        page.insert_text(
            self._to_page_point(page, command.x, command.y),
            command.text,
            fontsize=command.size,
            fontname=font.name,
            color=command.color,
        )

    def draw_image(self, page_number: int, command: ImageDrawCommand, image_bytes: bytes) -> None:
        page = self.doc[page_number - 1]
        bottom_left = self._to_page_point(page, command.x, command.y)
        top_right = self._to_page_point(page, command.x + command.width, command.y + command.height)
        rect = fitz.Rect(bottom_left, top_right).normalize()
        page.insert_image(rect, stream=image_bytes, keep_proportion=True)

    def to_bytes(self) -> bytes:
        """Serialize the modified document."""
        try:
            return self.doc.tobytes(garbage=4, deflate=True)
        except Exception as e:
            raise ExportError(f"Could not write PDF: {e}") from e

    def close(self) -> None:
        if self.doc is not None:
            self.doc.close()
            self.doc = None
