"""
Annotation model and placement store.
"""
from .models import (
    Annotation,
    AnnotationKind,
    FONT_FAMILIES,
    ImageAnnotation,
    TextAlign,
    TextAnnotation,
    annotation_from_dict,
    clamp,
    parse_hex_color,
)
from .store import ActiveTool, PlacementStore

__all__ = [
    'Annotation',
    'AnnotationKind',
    'FONT_FAMILIES',
    'ImageAnnotation',
    'TextAlign',
    'TextAnnotation',
    'annotation_from_dict',
    'clamp',
    'parse_hex_color',
    'ActiveTool',
    'PlacementStore',
]
