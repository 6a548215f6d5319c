"""
Viewport to page coordinate mapping.
"""
from .normalizer import (
    DragSession,
    PageRect,
    denormalize_point,
    normalize_point,
)

__all__ = [
    'DragSession',
    'PageRect',
    'denormalize_point',
    'normalize_point',
]
