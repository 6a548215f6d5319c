"""Shared fixtures for the Inkstamp test suite."""
import os

import fitz  # PyMuPDF
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtCore import QCoreApplication  # noqa: E402

LETTER = (612.0, 792.0)


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    """QObject-based controllers expect an application instance."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def make_pdf_bytes(page_count: int = 1, size=LETTER) -> bytes:
    doc = fitz.open()
    for _ in range(page_count):
        doc.new_page(width=size[0], height=size[1])
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_bytes() -> bytes:
    """A blank two-page US Letter PDF."""
    return make_pdf_bytes(page_count=2)


@pytest.fixture
def png_bytes() -> bytes:
    """A small opaque red PNG."""
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 20, 10), False)
    pix.set_rect(pix.irect, (255, 0, 0))
    return pix.tobytes("png")


class FixedWidthMeasurer:
    """Every character is half the font size wide."""

    def width(self, text: str, size: float) -> float:
        return len(text) * size * 0.5


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    return FixedWidthMeasurer()


class FakeSignal:
    """Stand-in for a pyqtSignal on fake workers."""

    def __init__(self):
        self._slots = []

    def connect(self, slot):
        self._slots.append(slot)

    def disconnect(self, slot):
        self._slots.remove(slot)

    def emit(self, *args):
        for slot in list(self._slots):
            slot(*args)
