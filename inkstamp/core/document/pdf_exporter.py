"""
Bake annotations into a copy of the source PDF.
"""
import logging
from typing import Dict, List, Optional

from inkstamp.config import AppConfig
from inkstamp.core.annotations.models import Annotation, ImageAnnotation, TextAnnotation
from inkstamp.core.errors import DocumentDecodeError, ExportError
from inkstamp.core.fonts import FontProvider
from inkstamp.core.layout import FitzTextMeasurer

from .image_source import ImageSourceError, ImageSourceLoader
from .sink import FitzDocumentSink
from .transform import BASELINE_RATIO, transform_image, transform_text

logger = logging.getLogger(__name__)

ANNOTATED_SUFFIX = "-annotated.pdf"


def build_download_name(name: Optional[str]) -> str:
    """
    Name of the exported file: ``<original-stem>-annotated.pdf``.

    Args:
        name: Original file name

    Returns:
        File name for the annotated copy
    """
    name = name or "document"
    stem = name[:-4] if name.lower().endswith(".pdf") else name
    return f"{stem}{ANNOTATED_SUFFIX}"


class PDFExporter:
    """Handles exporting annotations to PDF documents."""

    def __init__(self, font_provider: Optional[FontProvider] = None,
                 image_loader: Optional[ImageSourceLoader] = None,
                 baseline_ratio: float = BASELINE_RATIO):
        self.font_provider = font_provider or FontProvider()
        self.image_loader = image_loader or ImageSourceLoader()
        self.baseline_ratio = baseline_ratio

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs) -> "PDFExporter":
        kwargs.setdefault("font_provider", FontProvider(config.fonts))
        kwargs.setdefault("image_loader", ImageSourceLoader(
            config.export.signatures_dir or None, timeout=config.fonts.font_fetch_timeout))
        return cls(baseline_ratio=config.export.baseline_ratio, **kwargs)

    def export_annotated(self, document_bytes: Optional[bytes],
                         annotations: List[Annotation]) -> bytes:
        """
        Draw all annotations onto a copy of the document.

        Annotations pointing past the last page, text annotations without
        text, and images that cannot be read are skipped.

        Args:
            document_bytes: The original PDF
            annotations: Annotations to draw

        Returns:
            The annotated PDF

        Raises:
            ExportError: No source document, or the result cannot be written
        """
        if not document_bytes:
            raise ExportError("There is no PDF to export")

        try:
            sink = FitzDocumentSink(document_bytes)
        except DocumentDecodeError as e:
            raise ExportError(str(e)) from e

        try:
            # Group annotations by page
            annotations_by_page: Dict[int, List[Annotation]] = {}
            for ann in annotations:
                annotations_by_page.setdefault(ann.page, []).append(ann)

            drawn = 0
            for page_number, page_annotations in annotations_by_page.items():
                if not sink.has_page(page_number):
                    logger.warning("Skipping %d annotation(s) on missing page %d",
                                   len(page_annotations), page_number)
                    continue

                page_width, page_height = sink.page_size(page_number)
                for ann in page_annotations:
                    if self._add_annotation_to_page(sink, page_number, page_width, page_height, ann):
                        drawn += 1

            logger.info("Exported %d of %d annotation(s)", drawn, len(annotations))
            return sink.to_bytes()
        finally:
            sink.close()

    def _add_annotation_to_page(self, sink: FitzDocumentSink, page_number: int,
                                page_width: float, page_height: float,
                                annotation: Annotation) -> bool:
        """Add a single annotation to a page. Returns False if it was skipped."""
        try:
            if isinstance(annotation, TextAnnotation):
                return self._draw_text(sink, page_number, page_width, page_height, annotation)
            elif isinstance(annotation, ImageAnnotation):
                return self._draw_image(sink, page_number, page_width, page_height, annotation)
            else:
                raise TypeError(f"Unknown annotation type: {type(annotation).__name__}")
        except ImageSourceError as e:
            logger.warning("Skipping image %s on page %d: %s", annotation.id, page_number, e)
        except Exception:
            logger.exception("Failed to add annotation %s on page %d", annotation.id, page_number)
        return False

    def _draw_text(self, sink: FitzDocumentSink, page_number: int, page_width: float,
                   page_height: float, annotation: TextAnnotation) -> bool:
        if not annotation.text:
            return False

        font = self.font_provider.for_family(annotation.font_family)
        placement = transform_text(
            annotation, page_width, page_height,
            FitzTextMeasurer(font.font),
            font_key=font.key,
            baseline_ratio=self.baseline_ratio,
        )
        for command in placement.commands:
            sink.draw_text(page_number, command, font)
        return True

    def _draw_image(self, sink: FitzDocumentSink, page_number: int, page_width: float,
                    page_height: float, annotation: ImageAnnotation) -> bool:
        image_bytes = self.image_loader.load(annotation.image_src)
        command = transform_image(annotation, page_width, page_height)
        sink.draw_image(page_number, command, image_bytes)
        return True
