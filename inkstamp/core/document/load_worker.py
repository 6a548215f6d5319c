"""
Background decoding of an uploaded PDF.
"""
import logging

from PyQt5.QtCore import QThread, pyqtSignal

from inkstamp.core.errors import DocumentDecodeError

from .loader import decode_document

logger = logging.getLogger(__name__)


class DocumentLoadWorker(QThread):
    """Worker thread for decoding a PDF without freezing the UI."""

    # Signals
    loaded = pyqtSignal(object)  # DecodedDocument
    failed = pyqtSignal(str)  # error message

    def __init__(self, data: bytes, parent=None):
        super().__init__(parent)
        self._data = data

    def run(self):
        """Decode the document in a background thread."""
        try:
            decoded = decode_document(self._data)
        except DocumentDecodeError as e:
            self.failed.emit(str(e))
            return
        except Exception as e:
            logger.exception("Unexpected error while decoding PDF")
            self.failed.emit(f"Error loading PDF: {e}")
            return
        self.loaded.emit(decoded)
