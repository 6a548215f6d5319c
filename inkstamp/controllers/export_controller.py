"""
Controller for exporting the annotated PDF.
"""
import logging
import os
from typing import Callable, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from inkstamp.core.annotations import PlacementStore
from inkstamp.core.document import DocumentSession, PDFExporter, build_download_name
from inkstamp.core.export import ExportWorker

logger = logging.getLogger(__name__)

GENERIC_EXPORT_ERROR = "The PDF could not be exported."


class ExportController(QObject):
    """Runs one export at a time and reports the outcome."""

    # Signals
    export_started = pyqtSignal()
    export_finished = pyqtSignal(bool, str)  # success, output path or message

    def __init__(self, session: DocumentSession, store: PlacementStore,
                 exporter: Optional[PDFExporter] = None,
                 worker_factory: Optional[Callable[..., ExportWorker]] = None,
                 parent: QObject = None):
        super().__init__(parent)
        self.session = session
        self.store = store
        self.exporter = exporter or PDFExporter()
        self._worker_factory = worker_factory or ExportWorker
        self._worker = None
        self.is_exporting = False

    def output_path_for(self, output_dir: str) -> str:
        return os.path.join(output_dir, build_download_name(self.session.file_name))

    def start_export(self, output_dir: str) -> bool:
        """
        Export the current document with all annotations.

        Args:
            output_dir: Directory that receives ``<stem>-annotated.pdf``

        Returns:
            False if an export is already running or could not be started
        """
        if self.is_exporting:
            logger.info("Export already in progress, ignoring request")
            return False

        self.is_exporting = True
        self.export_started.emit()

        try:
            if self._worker is not None:
                self._worker.wait()

            self._worker = self._worker_factory(
                self.exporter,
                self.session.data,
                self.store.annotations,
                self.output_path_for(output_dir),
            )
            self._worker.finished.connect(self._on_worker_finished)
            self._worker.start()
        except Exception:
            logger.exception("Could not start export")
            self._worker = None
            self.is_exporting = False
            self.export_finished.emit(False, GENERIC_EXPORT_ERROR)
            return False
        return True

    def _on_worker_finished(self, success: bool, message: str) -> None:
        try:
            if success:
                logger.info("Exported annotated PDF to %s", message)
                self.export_finished.emit(True, message)
            else:
                logger.error("Export failed: %s", message)
                self.export_finished.emit(False, GENERIC_EXPORT_ERROR)
        finally:
            self.is_exporting = False
