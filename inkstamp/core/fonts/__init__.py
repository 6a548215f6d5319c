"""
Font selection for export.
"""
from .font_resolver import (
    BUILTIN_FONTS,
    DEFAULT_FONT_KEY,
    FontKey,
    FontProvider,
    ResolvedFont,
    fetch_font_bytes,
    resolve_font_key,
)

__all__ = [
    'BUILTIN_FONTS',
    'DEFAULT_FONT_KEY',
    'FontKey',
    'FontProvider',
    'ResolvedFont',
    'fetch_font_bytes',
    'resolve_font_key',
]
