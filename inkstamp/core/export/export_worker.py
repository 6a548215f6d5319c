"""
Background export of annotated PDFs.
"""
import logging
import os
import shutil
import tempfile
from typing import List, Optional

from PyQt5.QtCore import QThread, pyqtSignal

from inkstamp.core.annotations.models import Annotation
from inkstamp.core.document.pdf_exporter import PDFExporter
from inkstamp.core.errors import ExportError

logger = logging.getLogger(__name__)


class ExportWorker(QThread):
    """Worker thread for exporting annotations to PDF without freezing the UI."""

    # Signals
    finished = pyqtSignal(bool, str)  # success, message
    progress = pyqtSignal(str)  # status message

    def __init__(self, exporter: PDFExporter, document_bytes: Optional[bytes],
                 annotations: List[Annotation], output_path: str, parent=None):
        super().__init__(parent)
        self.exporter = exporter
        self.document_bytes = document_bytes
        # Snapshot so later edits do not leak into this export
        self.annotations = list(annotations)
        self.output_path = output_path
        self.temp_path: Optional[str] = None

    def run(self):
        """Execute the export in a background thread."""
        try:
            self.progress.emit("Exporting annotations...")
            data = self.exporter.export_annotated(self.document_bytes, self.annotations)

            self.progress.emit("Finalizing...")
            self._write_atomically(data)
        except ExportError as e:
            logger.error("Export failed: %s", e)
            self._cleanup_temp()
            self.finished.emit(False, f"Export failed: {e}")
            return
        except Exception as e:
            logger.exception("Unexpected error during export")
            self._cleanup_temp()
            self.finished.emit(False, f"Error during export: {e}")
            return

        self.finished.emit(True, self.output_path)

    def _write_atomically(self, data: bytes) -> None:
        output_dir = os.path.dirname(os.path.abspath(self.output_path))
        temp_fd, self.temp_path = tempfile.mkstemp(suffix='.pdf', dir=output_dir)
        try:
            with os.fdopen(temp_fd, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise ExportError(f"Could not write {self.output_path}: {e}") from e
        shutil.move(self.temp_path, self.output_path)
        self.temp_path = None

    def _cleanup_temp(self) -> None:
        if self.temp_path and os.path.exists(self.temp_path):
            os.remove(self.temp_path)
        self.temp_path = None
