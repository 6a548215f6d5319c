"""
Exception types shared by the document, upload and export layers.
"""


class InkstampError(Exception):
    """Base class for all Inkstamp errors."""


class UploadRejectedError(InkstampError):
    """Raised when an uploaded file fails validation (type or size)."""


class DocumentDecodeError(InkstampError):
    """Raised when the source PDF cannot be decoded."""


class ExportError(InkstampError):
    """Raised when a whole export fails (no source document, write failure)."""
