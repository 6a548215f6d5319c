"""
Placement store: the single owned collection of annotations plus the
active placement tool.
"""
import dataclasses
import logging
from enum import Enum
from typing import List, Optional

from .models import (
    Annotation,
    IMMUTABLE_FIELDS,
    ImageAnnotation,
    TextAnnotation,
    clamp,
    new_annotation_id,
)

logger = logging.getLogger(__name__)

CLONE_OFFSET = 0.02
CLONE_MAX = 0.98
MEASURE_TOLERANCE = 0.5


class ActiveTool(Enum):
    NONE = "none"
    TEXT = "text"
    IMAGE = "image"


class PlacementStore:
    """Holds every annotation of the loaded document and the tool state."""

    def __init__(self, clone_offset: float = CLONE_OFFSET, clone_max: float = CLONE_MAX):
        self._items: List[Annotation] = []
        self.active_tool: ActiveTool = ActiveTool.NONE
        self.pending_image: Optional[str] = None
        # 0 means "no document loaded": page references are not checked
        self.page_count: int = 0

        self.clone_offset = clone_offset
        self.clone_max = clone_max

    # ------------------------------------------------------------------
    # Tool state
    # ------------------------------------------------------------------

    def start_text_placement(self) -> None:
        self.active_tool = ActiveTool.TEXT
        self.pending_image = None

    def start_image_placement(self, image_ref: str) -> None:
        """
        Arm the image tool with the bitmap to place on the next click.

        Args:
            image_ref: Reference to the image resource (path or URL)
        """
        self.active_tool = ActiveTool.IMAGE
        self.pending_image = image_ref

    def stop_tool(self) -> None:
        self.active_tool = ActiveTool.NONE
        self.pending_image = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def annotations(self) -> List[Annotation]:
        """Snapshot of all annotations in creation order."""
        return list(self._items)

    def get_annotation(self, annotation_id: str) -> Optional[Annotation]:
        for item in self._items:
            if item.id == annotation_id:
                return item
        return None

    def get_annotations_for_page(self, page: int) -> List[Annotation]:
        """
        Get all annotations for a specific page.

        Args:
            page: 1-based page number

        Returns:
            List of annotations on the specified page
        """
        return [item for item in self._items if item.page == page]

    def get_annotation_count(self) -> int:
        return len(self._items)

    def set_page_count(self, page_count: int) -> None:
        self.page_count = max(0, int(page_count))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_text(self, **fields) -> str:
        """
        Create a text annotation with a fresh id.

        Args:
            **fields: TextAnnotation fields except ``id``

        Returns:
            The new annotation id
        """
        fields.pop("id", None)
        annotation = TextAnnotation(**fields)
        return self._append(annotation)

    def add_image(self, **fields) -> str:
        """
        Create an image annotation with a fresh id.

        Args:
            **fields: ImageAnnotation fields except ``id``

        Returns:
            The new annotation id
        """
        fields.pop("id", None)
        annotation = ImageAnnotation(**fields)
        return self._append(annotation)

    def update_annotation(self, annotation_id: str, **patch) -> bool:
        """
        Replace an annotation by id with a patched copy.

        Snapshot fields (id, display size) are ignored, as are fields that
        belong to the other variant.

        Returns:
            True if the annotation was found
        """
        index = self._index_of(annotation_id)
        if index is None:
            return False

        current = self._items[index]
        allowed = {f.name for f in dataclasses.fields(current)} - IMMUTABLE_FIELDS
        ignored = set(patch) - allowed
        if ignored:
            logger.debug("Ignoring fields %s for %s annotation", sorted(ignored), current.kind.value)

        changes = {k: v for k, v in patch.items() if k in allowed}
        if "page" in changes:
            self._check_page(int(changes["page"]))

        self._items[index] = dataclasses.replace(current, **changes)
        return True

    def move_annotation(self, annotation_id: str, x: float, y: float) -> bool:
        return self.update_annotation(annotation_id, x=clamp(x, 0.0, 1.0), y=clamp(y, 0.0, 1.0))

    def nudge_annotation(self, annotation_id: str, dx_px: float, dy_px: float,
                         page_width: float, page_height: float) -> bool:
        """
        Shift an annotation by a pixel amount measured on the current page.

        Args:
            annotation_id: Annotation to move
            dx_px, dy_px: Offset in display pixels
            page_width, page_height: Current rendered page size in pixels

        Returns:
            True if the annotation was found
        """
        current = self.get_annotation(annotation_id)
        if current is None or page_width <= 0 or page_height <= 0:
            return False
        return self.move_annotation(
            annotation_id,
            current.x + dx_px / page_width,
            current.y + dy_px / page_height,
        )

    def clone_annotation(self, annotation_id: str) -> Optional[str]:
        """
        Duplicate an annotation next to the original.

        Returns:
            The id of the copy, or None if the source does not exist
        """
        source = self.get_annotation(annotation_id)
        if source is None:
            return None

        copy = dataclasses.replace(
            source,
            id=new_annotation_id(),
            x=min(source.x + self.clone_offset, self.clone_max),
            y=min(source.y + self.clone_offset, self.clone_max),
        )
        self._items.append(copy)
        return copy.id

    def record_measurement(self, annotation_id: str, width: float, height: float) -> bool:
        """
        Store the measured on-screen box of a text annotation.

        Changes below half a pixel are dropped to avoid feedback loops.

        Returns:
            True if the stored box was updated
        """
        current = self.get_annotation(annotation_id)
        if not isinstance(current, TextAnnotation):
            return False
        if (abs((current.box_width or 0.0) - width) <= MEASURE_TOLERANCE
                and abs((current.box_height or 0.0) - height) <= MEASURE_TOLERANCE):
            return False
        return self.update_annotation(annotation_id, box_width=width, box_height=height)

    def remove_annotation(self, annotation_id: str) -> bool:
        index = self._index_of(annotation_id)
        if index is None:
            return False
        del self._items[index]
        return True

    def clear_all(self) -> None:
        """Remove all annotations and reset the tool."""
        self._items.clear()
        self.stop_tool()

    # ------------------------------------------------------------------

    def _append(self, annotation: Annotation) -> str:
        self._check_page(annotation.page)
        self._items.append(annotation)
        return annotation.id

    def _check_page(self, page: int) -> None:
        if self.page_count and page > self.page_count:
            raise ValueError(f"Page {page} is beyond the document ({self.page_count} pages)")

    def _index_of(self, annotation_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == annotation_id:
                return index
        return None
