"""Tests for upload validation and document decoding."""
import pytest

from inkstamp.core.document import DocumentSession, decode_document, validate_upload
from inkstamp.core.errors import DocumentDecodeError, UploadRejectedError

from tests.conftest import make_pdf_bytes

MB = 1024 * 1024


def test_rejects_non_pdf():
    with pytest.raises(UploadRejectedError, match="Only PDF files are allowed."):
        validate_upload("photo.png", "image/png", 100)


def test_guesses_media_type_from_name():
    validate_upload("contract.pdf", None, 100)
    with pytest.raises(UploadRejectedError):
        validate_upload("contract.docx", None, 100)


def test_rejects_oversized_upload():
    with pytest.raises(UploadRejectedError, match="20 MB"):
        validate_upload("big.pdf", "application/pdf", 20 * MB + 1)
    validate_upload("edge.pdf", "application/pdf", 20 * MB)


def test_decode_reads_page_sizes():
    decoded = decode_document(make_pdf_bytes(page_count=3, size=(595.0, 842.0)))
    assert decoded.page_count == 3
    assert decoded.page_sizes == [(595.0, 842.0)] * 3


def test_decode_rejects_garbage():
    with pytest.raises(DocumentDecodeError):
        decode_document(b"%PDF-nonsense")


def test_rejected_upload_keeps_current_document(pdf_bytes):
    session = DocumentSession()
    session.accept_upload("a.pdf", pdf_bytes)
    session.load()

    with pytest.raises(UploadRejectedError):
        session.accept_upload("b.txt", b"text", "text/plain")

    assert session.file_name == "a.pdf"
    assert session.is_loaded
    assert session.error == "Only PDF files are allowed."


def test_session_load_lifecycle(pdf_bytes):
    session = DocumentSession()
    session.accept_upload("a.pdf", pdf_bytes)
    assert session.is_loading
    assert not session.is_loaded

    decoded = session.load()
    assert decoded.page_count == 2
    assert session.page_count == 2
    assert session.is_loaded
    assert session.error is None


def test_session_failed_decode():
    session = DocumentSession()
    session.accept_upload("broken.pdf", b"garbage", "application/pdf")

    with pytest.raises(DocumentDecodeError):
        session.load()

    assert not session.is_loading
    assert not session.is_loaded
    assert session.page_count == 0
    assert session.error


def test_accept_path_checks_size_first(tmp_path):
    path = tmp_path / "large.pdf"
    path.write_bytes(b"x" * 2048)
    session = DocumentSession(max_upload_bytes=1024)

    with pytest.raises(UploadRejectedError):
        session.accept_path(str(path))
    assert session.data is None


def test_accept_path_reads_file(tmp_path, pdf_bytes):
    path = tmp_path / "doc.pdf"
    path.write_bytes(pdf_bytes)
    session = DocumentSession()

    session.accept_path(str(path))
    assert session.file_name == "doc.pdf"
    assert session.data == pdf_bytes
