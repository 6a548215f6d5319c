"""
Resolve image references (data URLs, web URLs, file paths) to bytes.
"""
import base64
import binascii
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import requests

logger = logging.getLogger(__name__)


class ImageSourceError(Exception):
    """Raised when an image reference cannot be read."""


class ImageSourceLoader:
    """
    Loads image bytes for signature annotations, caching by reference.

    Relative paths (including web-root style ``/signs/name.png``) are looked
    up under ``base_dir`` when they do not exist as given.
    """

    def __init__(self, base_dir: Optional[Union[str, Path]] = None, timeout: float = 10.0):
        self.base_dir = Path(base_dir) if base_dir else None
        self.timeout = timeout
        self._cache: Dict[str, bytes] = {}

    def load(self, image_src: str) -> bytes:
        if not image_src:
            raise ImageSourceError("empty image reference")
        if image_src not in self._cache:
            self._cache[image_src] = self._read(image_src)
        return self._cache[image_src]

    def _read(self, image_src: str) -> bytes:
        if image_src.startswith("data:"):
            return self._read_data_url(image_src)
        if image_src.startswith(("http://", "https://")):
            try:
                response = requests.get(image_src, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as e:
                raise ImageSourceError(f"could not download {image_src}: {e}") from e
            return response.content
        return self._read_path(image_src)

    def _read_data_url(self, image_src: str) -> bytes:
        header, sep, payload = image_src.partition(",")
        if not sep:
            raise ImageSourceError("malformed data URL")
        if header.endswith(";base64"):
            try:
                return base64.b64decode(payload, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ImageSourceError(f"invalid base64 payload: {e}") from e
        return payload.encode("latin-1")

    def _read_path(self, image_src: str) -> bytes:
        candidates = [Path(image_src)]
        if self.base_dir is not None:
            candidates.append(self.base_dir / image_src.lstrip("/"))

        for path in candidates:
            if path.is_file():
                try:
                    return path.read_bytes()
                except OSError as e:
                    raise ImageSourceError(f"could not read {path}: {e}") from e
        raise ImageSourceError(f"image not found: {image_src}")
