"""
Translate annotations from normalized display space into PDF page space.

Output coordinates are PDF points with the origin at the bottom-left of the
page and Y growing upwards. Text commands carry the baseline position of
each line; image commands carry the bottom-left corner of the box.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from inkstamp.core.annotations.models import ImageAnnotation, TextAnnotation, clamp
from inkstamp.core.fonts import FontKey
from inkstamp.core.layout import TextBlockLayout, TextMeasurer, layout_text_block

logger = logging.getLogger(__name__)

# Distance from the top of the text box to the first baseline, as a fraction
# of the font size. Empirically tuned against browser rendering.
BASELINE_RATIO = 0.8


@dataclass
class TextDrawCommand:
    text: str
    x: float
    y: float  # baseline
    size: float
    color: Tuple[float, float, float]  # RGB in 0..1
    font_key: FontKey


@dataclass
class ImageDrawCommand:
    image_src: str
    x: float
    y: float  # bottom edge
    width: float
    height: float


@dataclass
class TextPlacement:
    """Result of transforming one text annotation."""
    commands: List[TextDrawCommand] = field(default_factory=list)
    size: float = 0.0
    container_left: float = 0.0
    container_width: float = 0.0
    text_top: float = 0.0
    first_baseline: float = 0.0
    block_height: float = 0.0
    layout: Optional[TextBlockLayout] = None


def scale_factors(display_width: float, display_height: float,
                  page_width: float, page_height: float) -> Tuple[float, float]:
    """
    Display-to-page scale factors.

    A missing display size means the annotation was placed on a page
    rendered at its natural size.
    """
    display_width = display_width or page_width
    display_height = display_height or page_height
    return page_width / display_width, page_height / display_height


def transform_text(annotation: TextAnnotation, page_width: float, page_height: float,
                   measurer: TextMeasurer, font_key: FontKey = FontKey.HELVETICA,
                   baseline_ratio: float = BASELINE_RATIO) -> TextPlacement:
    """
    Compute the draw commands for a text annotation.

    Args:
        annotation: Text annotation to place
        page_width, page_height: Target page size in points
        measurer: Metrics of the font the text will be drawn with
        font_key: Font recorded on the emitted commands
        baseline_ratio: First baseline offset below the box top, times size

    Returns:
        The placement with one command per non-blank line, top to bottom
    """
    _, scale_y = scale_factors(annotation.display_width, annotation.display_height,
                               page_width, page_height)
    size = annotation.font_size * scale_y

    measured_height = annotation.box_height * scale_y if annotation.box_height else None
    layout = layout_text_block(annotation.text, size, annotation.line_height,
                               annotation.text_align, measurer, measured_height)

    container_left = annotation.x * page_width
    text_top = page_height - annotation.y * page_height
    first_baseline = clamp(text_top - size * baseline_ratio, size, page_height)

    color = tuple(c / 255.0 for c in annotation.color)

    commands = []
    for index, line in enumerate(layout.lines):
        if line.is_blank:
            continue
        line_x = clamp(container_left + line.offset, 0.0, page_width - line.width)
        commands.append(TextDrawCommand(
            text=line.text,
            x=line_x,
            y=first_baseline - index * layout.line_advance,
            size=size,
            color=color,
            font_key=font_key,
        ))

    logger.debug(
        "Text %s: size=%.2f container=(%.2f, w=%.2f) top=%.2f baseline=%.2f lines=%d",
        annotation.id, size, container_left, layout.container_width,
        text_top, first_baseline, len(layout.lines),
    )

    return TextPlacement(
        commands=commands,
        size=size,
        container_left=container_left,
        container_width=layout.container_width,
        text_top=text_top,
        first_baseline=first_baseline,
        block_height=layout.height,
        layout=layout,
    )


def transform_image(annotation: ImageAnnotation, page_width: float,
                    page_height: float) -> ImageDrawCommand:
    """
    Compute the draw command for an image annotation.

    Args:
        annotation: Image annotation to place
        page_width, page_height: Target page size in points

    Returns:
        Command with the box in page space
    """
    scale_x, scale_y = scale_factors(annotation.display_width, annotation.display_height,
                                     page_width, page_height)
    width = annotation.width * scale_x
    height = annotation.height * scale_y
    top = page_height - annotation.y * page_height

    return ImageDrawCommand(
        image_src=annotation.image_src,
        x=annotation.x * page_width,
        y=top - height,
        width=width,
        height=height,
    )
