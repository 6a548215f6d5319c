"""
Controller for placing, dragging and editing annotations.
"""
import logging
from typing import Optional

from PyQt5.QtCore import QObject, Qt, pyqtSignal

from inkstamp.config import EditorConfig
from inkstamp.core.annotations import ActiveTool, PlacementStore
from inkstamp.core.annotations.models import parse_hex_color
from inkstamp.core.geometry import DragSession, PageRect, normalize_point

logger = logging.getLogger(__name__)

_ARROW_STEPS = {
    Qt.Key_Left: (-1, 0),
    Qt.Key_Right: (1, 0),
    Qt.Key_Up: (0, -1),
    Qt.Key_Down: (0, 1),
}


class AnnotationController(QObject):
    """Translates page interactions into placement store mutations."""

    # Signals
    annotations_changed = pyqtSignal()  # Emitted when annotations change
    tool_changed = pyqtSignal(str)  # ActiveTool value
    annotation_selected = pyqtSignal(object)  # annotation id or None

    def __init__(self, store: PlacementStore, config: Optional[EditorConfig] = None,
                 parent: QObject = None):
        super().__init__(parent)
        self.store = store
        self.config = config or EditorConfig()
        self.selected_id: Optional[str] = None
        self.drag = DragSession()

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def start_text_placement(self) -> None:
        self.store.start_text_placement()
        self.tool_changed.emit(self.store.active_tool.value)

    def start_image_placement(self, image_ref: str) -> None:
        self.store.start_image_placement(image_ref)
        self.tool_changed.emit(self.store.active_tool.value)

    def stop_tool(self) -> None:
        self.store.stop_tool()
        self.tool_changed.emit(self.store.active_tool.value)

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def handle_page_click(self, page_index: int, client_x: float, client_y: float,
                          rect: PageRect, text: Optional[str] = None) -> Optional[str]:
        """
        Handle a click on a page surface.

        With the text tool active a text annotation is created from ``text``
        (a missing or empty text cancels the tool); with the image tool
        active the pending image is placed. Without a tool the click clears
        the selection.

        Args:
            page_index: 0-based index of the clicked page
            client_x, client_y: Click position in viewport pixels
            rect: Current bounding rectangle of the page surface
            text: Text entered by the user for the text tool

        Returns:
            The id of the created annotation, or None
        """
        tool = self.store.active_tool
        if tool is ActiveTool.NONE:
            self.select(None)
            return None

        if self.store.page_count == 0 or page_index >= self.store.page_count:
            # Document still loading: nothing to place onto yet
            logger.debug("Ignoring click on page %d without a loaded document", page_index + 1)
            return None

        x, y = normalize_point(client_x, client_y, rect)
        common = dict(
            page=page_index + 1,
            x=x,
            y=y,
            display_width=rect.width,
            display_height=rect.height,
        )

        if tool is ActiveTool.TEXT:
            if not text:
                self.stop_tool()
                return None
            annotation_id = self.store.add_text(
                text=text,
                color=parse_hex_color(self.config.default_color),
                font_size=self.config.default_font_size,
                font_family=self.config.default_font_family,
                **common
            )
        else:
            annotation_id = self.store.add_image(
                image_src=self.store.pending_image or "",
                width=self.config.default_image_width,
                height=self.config.default_image_height,
                **common
            )

        self.stop_tool()
        self.annotations_changed.emit()
        self.select(annotation_id)
        return annotation_id

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def select(self, annotation_id: Optional[str]) -> None:
        self.selected_id = annotation_id
        self.annotation_selected.emit(annotation_id)

    def update_annotation(self, annotation_id: str, **patch) -> bool:
        if self.store.update_annotation(annotation_id, **patch):
            self.annotations_changed.emit()
            return True
        return False

    def clone_annotation(self, annotation_id: str) -> Optional[str]:
        clone_id = self.store.clone_annotation(annotation_id)
        if clone_id is not None:
            self.annotations_changed.emit()
            self.select(clone_id)
        return clone_id

    def delete_annotation(self, annotation_id: str) -> bool:
        if not self.store.remove_annotation(annotation_id):
            return False
        if self.selected_id == annotation_id:
            self.select(None)
        self.annotations_changed.emit()
        return True

    def clear_all(self) -> None:
        self.store.clear_all()
        self.drag.end()
        self.select(None)
        self.tool_changed.emit(self.store.active_tool.value)
        self.annotations_changed.emit()

    def record_measurement(self, annotation_id: str, width: float, height: float) -> bool:
        """Feed back the rendered size of a text annotation."""
        if self.store.record_measurement(annotation_id, width, height):
            self.annotations_changed.emit()
            return True
        return False

    # ------------------------------------------------------------------
    # Dragging and keyboard nudges
    # ------------------------------------------------------------------

    def begin_drag(self, annotation_id: str) -> bool:
        annotation = self.store.get_annotation(annotation_id)
        if annotation is None:
            return False
        self.drag.begin(annotation_id, annotation.page)
        self.select(annotation_id)
        return True

    def drag_to(self, page_index: int, client_x: float, client_y: float, rect: PageRect) -> bool:
        """
        Move the dragged annotation to the pointer.

        Args:
            page_index: 0-based index of the page under the pointer
            client_x, client_y: Pointer position in viewport pixels
            rect: Bounding rectangle of that page right now

        Returns:
            True if an annotation moved
        """
        position = self.drag.move(page_index + 1, client_x, client_y, rect)
        if position is None:
            return False
        if self.store.move_annotation(self.drag.annotation_id, *position):
            self.annotations_changed.emit()
            return True
        return False

    def end_drag(self) -> None:
        self.drag.end()

    def nudge_selected(self, key: int, shift: bool, rect: PageRect) -> bool:
        """
        Move the selected annotation with the arrow keys.

        Args:
            key: Qt key code
            shift: Whether Shift is held (larger step)
            rect: Current bounding rectangle of the annotation's page

        Returns:
            True if the key was handled
        """
        if self.selected_id is None or key not in _ARROW_STEPS:
            return False

        step = self.config.nudge_step_shift_px if shift else self.config.nudge_step_px
        dx, dy = _ARROW_STEPS[key]
        if self.store.nudge_annotation(self.selected_id, dx * step, dy * step,
                                       rect.width, rect.height):
            self.annotations_changed.emit()
            return True
        return False
