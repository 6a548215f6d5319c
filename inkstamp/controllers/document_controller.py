"""
Controller for opening PDFs.
"""
import logging
from typing import Callable, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from inkstamp.core.annotations import PlacementStore
from inkstamp.core.document import DecodedDocument, DocumentLoadWorker, DocumentSession
from inkstamp.core.errors import UploadRejectedError

logger = logging.getLogger(__name__)

WorkerFactory = Callable[[bytes], DocumentLoadWorker]


class DocumentController(QObject):
    """Validates uploads and decodes them in the background."""

    # Signals
    loading_changed = pyqtSignal(bool)
    document_loaded = pyqtSignal(int)  # page count
    error_occurred = pyqtSignal(str)  # user-facing message

    def __init__(self, session: DocumentSession, store: PlacementStore,
                 worker_factory: Optional[WorkerFactory] = None, parent: QObject = None):
        super().__init__(parent)
        self.session = session
        self.store = store
        self._worker_factory = worker_factory or DocumentLoadWorker
        self._worker = None

    def open_file(self, path: str, media_type: Optional[str] = None) -> bool:
        """
        Open a PDF from disk.

        Args:
            path: File to open
            media_type: Declared media type, guessed from the name when None

        Returns:
            True if the file was accepted and decoding started
        """
        try:
            self.session.accept_path(path, media_type)
        except (UploadRejectedError, OSError) as e:
            self.error_occurred.emit(str(e))
            return False
        return self._start_loading()

    def open_bytes(self, file_name: str, data: bytes, media_type: Optional[str] = None) -> bool:
        """Same as :meth:`open_file` for an in-memory upload."""
        try:
            self.session.accept_upload(file_name, data, media_type)
        except UploadRejectedError as e:
            self.error_occurred.emit(str(e))
            return False
        return self._start_loading()

    def _start_loading(self) -> bool:
        # A new document invalidates every annotation
        self.store.clear_all()
        self.store.set_page_count(0)
        self.loading_changed.emit(True)

        self._discard_worker()
        self._worker = self._worker_factory(self.session.data)
        self._worker.loaded.connect(self._on_loaded)
        self._worker.failed.connect(self._on_failed)
        self._worker.start()
        return True

    def _discard_worker(self) -> None:
        previous = self._worker
        if previous is None:
            return
        # Results of a superseded load must not reach the new session
        previous.loaded.disconnect(self._on_loaded)
        previous.failed.disconnect(self._on_failed)
        previous.wait()
        self._worker = None

    def _on_loaded(self, decoded: DecodedDocument) -> None:
        self.session.finish_loading(decoded)
        self.store.set_page_count(decoded.page_count)
        self.loading_changed.emit(False)
        self.document_loaded.emit(decoded.page_count)

    def _on_failed(self, message: str) -> None:
        self.session.fail_loading(message)
        self.loading_changed.emit(False)
        self.error_occurred.emit(message)
