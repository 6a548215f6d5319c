"""
Annotation data model: text and image items placed on PDF pages.

Positions are normalized to the rendered page (0..1 on both axes, origin
top-left). ``display_width``/``display_height`` record the rendered page
size in pixels at the moment of placement and never change afterwards.
"""
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

MIN_FONT_SIZE = 8.0
MAX_FONT_SIZE = 72.0
MIN_LINE_HEIGHT = 0.8
DEFAULT_LINE_HEIGHT = 1.2
DEFAULT_COLOR = (17, 17, 17)

# Families offered by the editor; export maps them onto embeddable fonts.
FONT_FAMILIES = (
    "Inter, system-ui, sans-serif",
    "Arial, sans-serif",
    "Georgia, serif",
    "Courier New, monospace",
)

# Fields that are snapshots taken at creation and may not be patched.
IMMUTABLE_FIELDS = frozenset({"id", "display_width", "display_height"})


class AnnotationKind(Enum):
    TEXT = "text"
    IMAGE = "image"


class TextAlign(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return min(max(value, low), high)


def new_annotation_id() -> str:
    return uuid.uuid4().hex


def parse_hex_color(value: Union[str, Tuple[int, int, int], None]) -> Tuple[int, int, int]:
    """
    Convert ``#rrggbb`` (or an RGB tuple) to an RGB tuple.

    Malformed strings fall back to the default ink color.

    Args:
        value: Hex color string or RGB tuple

    Returns:
        RGB tuple (0-255)
    """
    if value is None:
        return DEFAULT_COLOR
    if isinstance(value, (tuple, list)):
        if len(value) != 3:
            return DEFAULT_COLOR
        return tuple(int(clamp(int(c), 0, 255)) for c in value)

    hex_value = value[1:] if value.startswith("#") else value
    if len(hex_value) != 6:
        return DEFAULT_COLOR
    try:
        num = int(hex_value, 16)
    except ValueError:
        return DEFAULT_COLOR
    return ((num >> 16) & 255, (num >> 8) & 255, num & 255)


def color_to_hex(color: Tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


@dataclass
class TextAnnotation:
    """A block of (possibly multi-line) text anchored at its left/top edge."""
    page: int  # 1-based page number
    x: float
    y: float
    display_width: float
    display_height: float
    text: str = ""
    color: Tuple[int, int, int] = DEFAULT_COLOR
    font_size: float = 14.0
    font_family: str = FONT_FAMILIES[0]
    line_height: float = DEFAULT_LINE_HEIGHT
    text_align: TextAlign = TextAlign.LEFT

    # Measured on-screen box; derived data, overrides the estimated height
    box_width: Optional[float] = None
    box_height: Optional[float] = None

    id: str = field(default_factory=new_annotation_id)

    kind = AnnotationKind.TEXT

    def __post_init__(self):
        _check_common(self)
        self.color = parse_hex_color(self.color)
        self.font_size = clamp(float(self.font_size), MIN_FONT_SIZE, MAX_FONT_SIZE)
        self.line_height = max(float(self.line_height), MIN_LINE_HEIGHT)
        if not isinstance(self.text_align, TextAlign):
            self.text_align = TextAlign(self.text_align)

    def to_dict(self) -> Dict[str, Any]:
        """Convert annotation to dictionary for JSON serialization."""
        data = _common_dict(self)
        data.update({
            'text': self.text,
            'color': color_to_hex(self.color),
            'fontSize': self.font_size,
            'fontFamily': self.font_family,
            'lineHeight': self.line_height,
            'textAlign': self.text_align.value,
        })
        if self.box_width is not None:
            data['boxWidth'] = self.box_width
        if self.box_height is not None:
            data['boxHeight'] = self.box_height
        return data


@dataclass
class ImageAnnotation:
    """A bitmap (typically a signature) anchored at its top-left corner."""
    page: int  # 1-based page number
    x: float
    y: float
    display_width: float
    display_height: float
    image_src: str = ""
    width: float = 150.0   # px, rendered box size
    height: float = 75.0

    id: str = field(default_factory=new_annotation_id)

    kind = AnnotationKind.IMAGE

    def __post_init__(self):
        _check_common(self)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert annotation to dictionary for JSON serialization."""
        data = _common_dict(self)
        data.update({
            'imageSrc': self.image_src,
            'width': self.width,
            'height': self.height,
        })
        return data


Annotation = Union[TextAnnotation, ImageAnnotation]


def _check_common(ann: Annotation) -> None:
    if int(ann.page) < 1:
        raise ValueError(f"Page numbers are 1-based, got {ann.page}")
    ann.page = int(ann.page)
    ann.x = clamp(float(ann.x), 0.0, 1.0)
    ann.y = clamp(float(ann.y), 0.0, 1.0)


def _common_dict(ann: Annotation) -> Dict[str, Any]:
    return {
        'id': ann.id,
        'type': ann.kind.value,
        'page': ann.page,
        'x': ann.x,
        'y': ann.y,
        'displayWidth': ann.display_width,
        'displayHeight': ann.display_height,
    }


def annotation_from_dict(data: Dict[str, Any]) -> Annotation:
    """
    Create an annotation from a dictionary produced by ``to_dict``.

    Args:
        data: Serialized annotation

    Returns:
        TextAnnotation or ImageAnnotation depending on ``type``
    """
    kind = AnnotationKind(data.get('type', AnnotationKind.TEXT.value))
    common = dict(
        page=data['page'],
        x=data['x'],
        y=data['y'],
        display_width=data.get('displayWidth', 0.0),
        display_height=data.get('displayHeight', 0.0),
    )
    if 'id' in data:
        common['id'] = data['id']

    if kind is AnnotationKind.IMAGE:
        return ImageAnnotation(
            image_src=data.get('imageSrc', ''),
            width=data.get('width', 150.0),
            height=data.get('height', 75.0),
            **common
        )

    return TextAnnotation(
        text=data.get('text', ''),
        color=parse_hex_color(data.get('color')),
        font_size=data.get('fontSize', 14.0),
        font_family=data.get('fontFamily', FONT_FAMILIES[0]),
        line_height=data.get('lineHeight', DEFAULT_LINE_HEIGHT),
        text_align=TextAlign(data.get('textAlign', TextAlign.LEFT.value)),
        box_width=data.get('boxWidth'),
        box_height=data.get('boxHeight'),
        **common
    )
