"""
Font metrics for the layout engine.
"""
import fitz  # PyMuPDF


class FitzTextMeasurer:
    """Widths from a PyMuPDF font, in PDF points."""

    def __init__(self, font: fitz.Font):
        self.font = font

    def width(self, text: str, size: float) -> float:
        if not text:
            return 0.0
        return self.font.text_length(text, fontsize=size)
