"""
Text block layout: line splitting, widths and alignment.
"""
from .metrics import FitzTextMeasurer
from .text_layout import (
    LineLayout,
    TextBlockLayout,
    TextMeasurer,
    alignment_offset,
    layout_text_block,
    split_lines,
)

__all__ = [
    'FitzTextMeasurer',
    'LineLayout',
    'TextBlockLayout',
    'TextMeasurer',
    'alignment_offset',
    'layout_text_block',
    'split_lines',
]
