"""Card preview decoding with a small in-memory cache.

Qt's reader handles the common formats and scales while decoding; Pillow
covers the rest, HEIC/HEIF included through the pillow-heif opener.
"""

from __future__ import annotations

from collections import OrderedDict
import os
from pathlib import Path
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError
from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor, QImage, QImageReader
from loguru import logger
from pillow_heif import register_heif_opener

register_heif_opener()

HEIF_SUFFIXES = frozenset({".heic", ".heif"})
PLACEHOLDER_SIDE = 64

PreviewKey = tuple[str, int, int, int]


def preview_key(path: str, side: int) -> PreviewKey:
    """Cache key that changes whenever the file is rewritten."""
    try:
        st = os.stat(path)
        return (path, st.st_mtime_ns, st.st_size, side)
    except OSError:
        return (path, 0, 0, side)


def fit_within(width: int, height: int, side: int) -> QSize:
    """Size of `width` x `height` scaled down so the longer edge is at most `side`."""
    longest = max(width, height)
    if side <= 0 or longest <= side:
        return QSize(width, height)
    ratio = side / longest
    return QSize(max(1, round(width * ratio)), max(1, round(height * ratio)))


class PreviewCache:
    """Least-recently-used mapping of preview keys to decoded images."""

    def __init__(self, capacity: int) -> None:
        self.capacity = max(1, int(capacity or 1))
        self._images: OrderedDict[PreviewKey, QImage] = OrderedDict()

    def __len__(self) -> int:
        return len(self._images)

    def lookup(self, key: PreviewKey) -> QImage | None:
        image = self._images.get(key)
        if image is not None:
            self._images.move_to_end(key)
        return image

    def store(self, key: PreviewKey, image: QImage) -> None:
        self._images[key] = image
        self._images.move_to_end(key)
        if len(self._images) > self.capacity:
            self._images.popitem(last=False)


class ImageService:
    """Decodes the image behind a photo locator for the swipe card."""

    def __init__(self, settings: Any | None = None) -> None:
        capacity = 32
        if settings is not None:
            try:
                capacity = int(settings.get("preview.mem_cache", capacity) or capacity)
            except (ValueError, TypeError):
                logger.warning("Invalid preview.mem_cache setting, using {}", capacity)
        self._cache = PreviewCache(capacity)

    def get_preview(self, path: str, max_side: int) -> QImage:
        """Image for `path` whose longer edge is at most `max_side`.

        Never returns a null image: undecodable files yield a grey placeholder
        so the card still renders.
        """
        key = preview_key(path, max_side)
        cached = self._cache.lookup(key)
        if cached is not None:
            return cached

        image = self._decode(path, max_side)
        if image is None:
            logger.warning("Could not decode {}; showing placeholder", path)
            image = QImage(PLACEHOLDER_SIDE, PLACEHOLDER_SIDE, QImage.Format_ARGB32)
            image.fill(QColor(220, 220, 220))
        self._cache.store(key, image)
        return image

    def _decode(self, path: str, side: int) -> QImage | None:
        # HEIF goes straight to Pillow
        if Path(path).suffix.lower() not in HEIF_SUFFIXES:
            image = self._decode_with_qt(path, side)
            if image is not None:
                return image
        return self._decode_with_pillow(path, side)

    def _decode_with_qt(self, path: str, side: int) -> QImage | None:
        reader = QImageReader(path)
        reader.setAutoTransform(True)
        size = reader.size()
        if size.isValid() and size.width() > 0 and size.height() > 0:
            reader.setScaledSize(fit_within(size.width(), size.height(), side))
        image = reader.read()
        if image.isNull():
            logger.debug("Qt could not read {}: {}", path, reader.errorString())
            return None
        if side > 0 and max(image.width(), image.height()) > side:
            # Auto-transform may rotate after scaling
            image = image.scaled(side, side, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        return image

    def _decode_with_pillow(self, path: str, side: int) -> QImage | None:
        try:
            with Image.open(path) as opened:
                im = ImageOps.exif_transpose(opened)
                if side > 0:
                    im.thumbnail((side, side), Image.Resampling.LANCZOS)
                rgba = im.convert("RGBA")
        except (OSError, UnidentifiedImageError, ValueError) as ex:
            logger.debug("Pillow could not read {}: {}", path, ex)
            return None
        buffer = rgba.tobytes("raw", "RGBA")
        image = QImage(buffer, rgba.width, rgba.height, rgba.width * 4, QImage.Format_RGBA8888)
        # The QImage must own its pixels; `buffer` is freed on return
        return None if image.isNull() else image.copy()
