"""
Conversion between viewport pixels and normalized page coordinates.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from PyQt5.QtCore import QRectF

from inkstamp.core.annotations.models import clamp


@dataclass(frozen=True)
class PageRect:
    """Bounding rectangle of a rendered page surface, in viewport pixels."""
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_qrect(cls, rect: QRectF) -> "PageRect":
        return cls(rect.left(), rect.top(), rect.width(), rect.height())

    def to_qrect(self) -> QRectF:
        return QRectF(self.left, self.top, self.width, self.height)


def _fraction(offset: float, extent: float) -> float:
    if extent <= 0:
        return 0.0
    return clamp(offset / extent, 0.0, 1.0)


def normalize_point(client_x: float, client_y: float, rect: PageRect) -> Tuple[float, float]:
    """
    Map a viewport point onto the page as fractions of its size.

    Points outside the rectangle are clamped onto its edge.

    Args:
        client_x, client_y: Pointer position in viewport pixels
        rect: Current bounding rectangle of the page surface

    Returns:
        (x, y) in [0, 1]
    """
    return (
        _fraction(client_x - rect.left, rect.width),
        _fraction(client_y - rect.top, rect.height),
    )


def denormalize_point(x: float, y: float, rect: PageRect) -> Tuple[float, float]:
    """Inverse of :func:`normalize_point`."""
    return rect.left + x * rect.width, rect.top + y * rect.height


class DragSession:
    """
    Tracks one annotation being dragged.

    Every move is resolved against the rectangle passed with that move,
    since the page surface can reflow while the pointer is down.
    """

    def __init__(self):
        self.annotation_id: Optional[str] = None
        self.page: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.annotation_id is not None

    def begin(self, annotation_id: str, page: int) -> None:
        self.annotation_id = annotation_id
        self.page = page

    def move(self, page: int, client_x: float, client_y: float,
             rect: PageRect) -> Optional[Tuple[float, float]]:
        """
        Compute the new normalized position for the dragged annotation.

        Returns:
            (x, y), or None when no drag is active or the pointer is over
            another page
        """
        if not self.active or page != self.page:
            return None
        return normalize_point(client_x, client_y, rect)

    def end(self) -> None:
        self.annotation_id = None
        self.page = None
