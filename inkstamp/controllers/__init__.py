"""
Application controllers connecting the UI to the core logic.
"""
from .annotation_controller import AnnotationController
from .document_controller import DocumentController
from .export_controller import ExportController

__all__ = [
    'AnnotationController',
    'DocumentController',
    'ExportController',
]
