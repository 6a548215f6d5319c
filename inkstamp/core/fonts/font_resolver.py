"""
Mapping of editor font families onto fonts the exporter can embed.
"""
import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

import fitz  # PyMuPDF
import requests

from inkstamp.config import FontsConfig

logger = logging.getLogger(__name__)


class FontKey(Enum):
    HELVETICA = "helvetica"
    TIMES = "times"
    COURIER = "courier"
    INTER = "inter"


# PyMuPDF Base-14 names for the built-in fonts
BUILTIN_FONTS: Dict[FontKey, str] = {
    FontKey.HELVETICA: "helv",
    FontKey.TIMES: "tiro",
    FontKey.COURIER: "cour",
}

DEFAULT_FONT_KEY = FontKey.HELVETICA

FontFetcher = Callable[[str, float], bytes]


def resolve_font_key(family: Optional[str]) -> FontKey:
    """
    Pick the export font for a CSS-like family string.

    Args:
        family: Font family as stored on the annotation

    Returns:
        Matching font key, Helvetica when nothing matches
    """
    name = (family or "").lower()
    if "inter" in name:
        return FontKey.INTER
    if "courier" in name:
        return FontKey.COURIER
    if "georgia" in name or "times" in name:
        return FontKey.TIMES
    return DEFAULT_FONT_KEY


@dataclass
class ResolvedFont:
    """A font ready for measuring and drawing."""
    key: FontKey
    name: str               # font name used when drawing on a page
    font: fitz.Font
    buffer: Optional[bytes] = None  # set for fonts that must be embedded

    @property
    def is_embedded(self) -> bool:
        return self.buffer is not None


def fetch_font_bytes(url: str, timeout: float) -> bytes:
    """Download a font file."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


class FontProvider:
    """
    Resolves font keys to fonts, once per key.

    Fonts that are not built into PDF viewers are downloaded; if that fails
    the default font is used instead so the export can go on.
    """

    def __init__(self, config: Optional[FontsConfig] = None,
                 fetcher: Optional[FontFetcher] = None,
                 cache_dir: Optional[Path] = None):
        self.config = config or FontsConfig()
        self._fetcher = fetcher or fetch_font_bytes
        self._cache_dir = cache_dir
        self._resolved: Dict[FontKey, ResolvedFont] = {}

    def get(self, key: FontKey) -> ResolvedFont:
        if key not in self._resolved:
            self._resolved[key] = self._load(key)
        return self._resolved[key]

    def for_family(self, family: Optional[str]) -> ResolvedFont:
        return self.get(resolve_font_key(family))

    def _load(self, key: FontKey) -> ResolvedFont:
        if key in BUILTIN_FONTS:
            name = BUILTIN_FONTS[key]
            return ResolvedFont(key=key, name=name, font=fitz.Font(name))

        try:
            buffer, font = self._load_inter()
        except Exception as e:
            logger.warning("Could not load font %s, falling back to %s: %s",
                           key.value, DEFAULT_FONT_KEY.value, e)
            return self.get(DEFAULT_FONT_KEY)

        return ResolvedFont(key=key, name=key.value, font=font, buffer=buffer)

    @property
    def _cache_file(self) -> Optional[Path]:
        if not self.config.cache_fonts or self._cache_dir is None:
            return None
        return self._cache_dir / "Inter-Regular.ttf"

    def _load_inter(self) -> Tuple[bytes, fitz.Font]:
        cache_file = self._cache_file
        if cache_file is not None and cache_file.is_file():
            data = cache_file.read_bytes()
            try:
                return data, fitz.Font(fontbuffer=data)
            except Exception as e:
                # Truncated or corrupt entry: download again
                logger.warning("Discarding unreadable cached font %s: %s", cache_file, e)
                cache_file.unlink()

        data = self._fetcher(self.config.inter_font_url, self.config.font_fetch_timeout)
        if not data:
            raise ValueError("empty font download")
        font = fitz.Font(fontbuffer=data)

        if cache_file is not None:
            self._write_cache(cache_file, data)
        return data, font

    def _write_cache(self, cache_file: Path, data: bytes) -> None:
        temp_path = None
        try:
            temp_fd, temp_path = tempfile.mkstemp(suffix='.ttf', dir=str(cache_file.parent))
            with os.fdopen(temp_fd, 'wb') as f:
                f.write(data)
            os.replace(temp_path, cache_file)
        except OSError as e:
            logger.debug("Font cache write failed: %s", e)
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
