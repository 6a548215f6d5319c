"""
Upload validation and document decoding.
"""
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import fitz  # PyMuPDF

from inkstamp.core.errors import DocumentDecodeError, UploadRejectedError

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DEFAULT_MAX_UPLOAD_MB = 20


@dataclass
class DecodedDocument:
    page_count: int
    page_sizes: List[Tuple[float, float]] = field(default_factory=list)


def guess_media_type(file_name: str) -> str:
    media_type, _ = mimetypes.guess_type(file_name)
    return media_type or "application/octet-stream"


def validate_upload(file_name: str, media_type: Optional[str], size: int,
                    max_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024) -> None:
    """
    Check an uploaded file before it replaces the current document.

    Args:
        file_name: Name of the uploaded file
        media_type: Declared media type; guessed from the name when None
        size: File size in bytes
        max_bytes: Upload ceiling

    Raises:
        UploadRejectedError: With a message suitable for the user
    """
    if media_type is None:
        media_type = guess_media_type(file_name)

    if media_type != PDF_MEDIA_TYPE:
        raise UploadRejectedError("Only PDF files are allowed.")

    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise UploadRejectedError(f"The file exceeds {limit_mb:g} MB.")


def decode_document(data: bytes) -> DecodedDocument:
    """
    Open a PDF and read its page geometry.

    Args:
        data: PDF file contents

    Returns:
        Page count and page sizes in points

    Raises:
        DocumentDecodeError: If the data is not a readable PDF
    """
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise DocumentDecodeError(f"Error loading PDF: {e}") from e

    try:
        if doc.page_count == 0:
            raise DocumentDecodeError("The PDF has no pages.")
        sizes = [(page.rect.width, page.rect.height) for page in doc]
        return DecodedDocument(page_count=doc.page_count, page_sizes=sizes)
    finally:
        doc.close()


class DocumentSession:
    """State of the currently loaded document."""

    def __init__(self, max_upload_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024):
        self.max_upload_bytes = max_upload_bytes
        self.file_name: Optional[str] = None
        self.data: Optional[bytes] = None
        self.page_count: int = 0
        self.page_sizes: List[Tuple[float, float]] = []
        self.is_loading: bool = False
        self.error: Optional[str] = None

    @property
    def is_loaded(self) -> bool:
        return self.data is not None and self.page_count > 0 and not self.is_loading

    def reset(self) -> None:
        self.file_name = None
        self.data = None
        self.page_count = 0
        self.page_sizes = []
        self.is_loading = False
        self.error = None

    def accept_upload(self, file_name: str, data: bytes,
                      media_type: Optional[str] = None) -> None:
        """
        Validate an upload and, if accepted, make it the pending document.

        A rejected upload only records the error message.

        Raises:
            UploadRejectedError: If the file is not an acceptable PDF
        """
        try:
            validate_upload(file_name, media_type, len(data), self.max_upload_bytes)
        except UploadRejectedError as e:
            self.error = str(e)
            raise

        self.reset()
        self.file_name = file_name
        self.data = data
        self.is_loading = True

    def accept_path(self, path: str, media_type: Optional[str] = None) -> None:
        """Read a file from disk and pass it to :meth:`accept_upload`."""
        file_path = Path(path)
        size = file_path.stat().st_size
        # Check the size before reading a file that would be rejected anyway
        try:
            validate_upload(file_path.name, media_type, size, self.max_upload_bytes)
        except UploadRejectedError as e:
            self.error = str(e)
            raise
        self.accept_upload(file_path.name, file_path.read_bytes(), media_type)

    def finish_loading(self, decoded: DecodedDocument) -> None:
        self.page_count = decoded.page_count
        self.page_sizes = list(decoded.page_sizes)
        self.is_loading = False
        self.error = None
        logger.info("Loaded %s (%d pages)", self.file_name, self.page_count)

    def fail_loading(self, message: str) -> None:
        """Record a decode failure; no annotations are possible afterwards."""
        self.data = None
        self.page_count = 0
        self.page_sizes = []
        self.is_loading = False
        self.error = message
        logger.error("Failed to load %s: %s", self.file_name, message)

    def load(self) -> DecodedDocument:
        """Decode the pending document synchronously."""
        if self.data is None:
            raise DocumentDecodeError("No document to load")
        try:
            decoded = decode_document(self.data)
        except DocumentDecodeError as e:
            self.fail_loading(str(e))
            raise
        self.finish_loading(decoded)
        return decoded
