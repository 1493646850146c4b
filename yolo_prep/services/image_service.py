"""
Image service implementation for yolo-prep.
Handles image decoding, header-only size probing and budgeted JPEG encoding.
"""

from __future__ import annotations
from typing import Optional, Tuple, Any, Dict
from pathlib import Path
import threading

from cachetools import LRUCache

from .interfaces import IImageService, ILogger
from ..core.encoding import encode_within_budget
from ..core.yolo_io import imread_unicode, probe_image_size


class ImageService(IImageService):
    """Concrete implementation of image service; shared by pipeline workers."""

    def __init__(self, logger: ILogger, max_cached_sizes: int = 4096):
        self._logger = logger
        self._size_cache: LRUCache = LRUCache(maxsize=max_cached_sizes)
        self._lock = threading.Lock()

    def load_image(self, path: Path) -> Optional[Any]:
        """Decode an image to a BGR array; None if it cannot be decoded."""
        try:
            image = imread_unicode(path)
        except (OSError, ValueError) as e:
            self._logger.warning(f"Error reading image {path}: {e}")
            return None

        if image is None:
            self._logger.debug(f"Failed to decode image: {path}")
            return None

        with self._lock:
            self._size_cache[self._key(path)] = (image.shape[1], image.shape[0])
        return image

    def get_image_size(self, path: Path) -> Optional[Tuple[int, int]]:
        """(width, height) from the file header."""
        key = self._key(path)
        with self._lock:
            cached = self._size_cache.get(key)
        if cached is not None:
            return cached

        size = probe_image_size(path)
        if size is None:
            self._logger.debug(f"Cannot read image header: {path}")
            return None

        with self._lock:
            self._size_cache[key] = size
        return size

    def encode_within_budget(self, image: Any, max_kb: int) -> bytes:
        return encode_within_budget(image, max_kb)

    def clear_cache(self) -> None:
        with self._lock:
            self._size_cache.clear()
        self._logger.debug("Image size cache cleared")

    def get_cache_stats(self) -> Dict[str, int]:
        with self._lock:
            return {"sizes": len(self._size_cache)}

    @staticmethod
    def _key(path: Path) -> str:
        return str(Path(path).resolve())
