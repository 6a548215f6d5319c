"""
Block layout for text annotations.

A text annotation renders as a block of explicit lines (no wrapping). The
block's container is as wide as its widest line and each line is offset
inside the container according to the alignment. The same formulas are
used for on-screen rendering and for export, only the metrics differ.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from inkstamp.core.annotations.models import TextAlign

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class TextMeasurer(Protocol):
    def width(self, text: str, size: float) -> float:
        """Advance width of ``text`` rendered at ``size``."""


@dataclass
class LineLayout:
    text: str
    width: float
    offset: float  # from the container's left edge

    @property
    def is_blank(self) -> bool:
        return self.text.strip() == ""


@dataclass
class TextBlockLayout:
    lines: List[LineLayout] = field(default_factory=list)
    size: float = 0.0
    line_height: float = 1.2
    container_width: float = 0.0
    estimated_height: float = 0.0
    measured_height: Optional[float] = None

    @property
    def line_advance(self) -> float:
        """Vertical distance between consecutive baselines."""
        return self.size * self.line_height

    @property
    def height(self) -> float:
        """Block height; a measured box takes precedence over the estimate."""
        if self.measured_height is not None and self.measured_height > 0:
            return self.measured_height
        return self.estimated_height


def split_lines(text: str) -> List[str]:
    """Split on explicit line breaks only; ``"A\\n"`` gives ``["A", ""]``."""
    return _LINE_BREAK.split(text)


def alignment_offset(align: TextAlign, container_width: float, line_width: float) -> float:
    """
    Horizontal offset of a line inside its container.

    Args:
        align: Text alignment
        container_width: Width of the widest line in the block
        line_width: Width of this line

    Returns:
        Offset from the container's left edge
    """
    if align is TextAlign.CENTER:
        return (container_width - line_width) / 2
    if align is TextAlign.RIGHT:
        return container_width - line_width
    return 0.0


def layout_text_block(text: str, size: float, line_height: float,
                      align: TextAlign, measurer: TextMeasurer,
                      measured_height: Optional[float] = None) -> TextBlockLayout:
    """
    Lay out a text block.

    Args:
        text: Annotation text, may contain line breaks
        size: Font size in the target space
        line_height: Line height multiplier
        align: Alignment of lines inside the container
        measurer: Font metrics for the target space
        measured_height: Rendered block height in the target space, if known

    Returns:
        The computed block layout
    """
    raw_lines = split_lines(text)
    widths = [measurer.width(line, size) for line in raw_lines]
    container_width = max(widths) if widths else 0.0

    lines = [
        LineLayout(text=line, width=width,
                   offset=alignment_offset(align, container_width, width))
        for line, width in zip(raw_lines, widths)
    ]

    return TextBlockLayout(
        lines=lines,
        size=size,
        line_height=line_height,
        container_width=container_width,
        estimated_height=len(lines) * size * line_height,
        measured_height=measured_height,
    )
