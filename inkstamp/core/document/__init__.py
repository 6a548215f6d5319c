"""
PDF document handling: loading, coordinate transform and export.
"""
from .image_source import ImageSourceError, ImageSourceLoader
from .load_worker import DocumentLoadWorker
from .loader import (
    DecodedDocument,
    DocumentSession,
    PDF_MEDIA_TYPE,
    decode_document,
    validate_upload,
)
from .pdf_exporter import PDFExporter, build_download_name
from .sink import FitzDocumentSink
from .transform import (
    BASELINE_RATIO,
    ImageDrawCommand,
    TextDrawCommand,
    TextPlacement,
    transform_image,
    transform_text,
)

__all__ = [
    'ImageSourceError',
    'ImageSourceLoader',
    'DocumentLoadWorker',
    'DecodedDocument',
    'DocumentSession',
    'PDF_MEDIA_TYPE',
    'decode_document',
    'validate_upload',
    'PDFExporter',
    'build_download_name',
    'FitzDocumentSink',
    'BASELINE_RATIO',
    'ImageDrawCommand',
    'TextDrawCommand',
    'TextPlacement',
    'transform_image',
    'transform_text',
]
