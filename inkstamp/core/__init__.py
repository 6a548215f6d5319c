"""
Core logic for Inkstamp PDF.
"""
from .annotations import (
    ActiveTool,
    Annotation,
    ImageAnnotation,
    PlacementStore,
    TextAlign,
    TextAnnotation,
)
from .errors import DocumentDecodeError, ExportError, InkstampError, UploadRejectedError

__all__ = [
    'ActiveTool',
    'Annotation',
    'ImageAnnotation',
    'PlacementStore',
    'TextAlign',
    'TextAnnotation',
    'DocumentDecodeError',
    'ExportError',
    'InkstampError',
    'UploadRejectedError',
]
