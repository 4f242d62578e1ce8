"""Utilities for photo creation-date extraction (EXIF and filesystem).

This module centralizes date extraction so the catalog can depend on a single
behavior. It uses best-effort parsing and will not raise on errors; callers
should expect `None` when data is not available.
"""

from __future__ import annotations

from datetime import datetime
import os
from typing import Any

from PIL import Image, UnidentifiedImageError
from loguru import logger

EXIF_DT_FMT = "%Y:%m:%d %H:%M:%S"
# EXIF tags: 36867 DateTimeOriginal (Exif IFD), 306 DateTime (IFD0)
_TAG_DATETIME_ORIGINAL = 36867
_TAG_DATETIME = 306
_EXIF_IFD_POINTER = 0x8769


def parse_exif_datetime(value: Any) -> datetime | None:
    """Parse an EXIF timestamp such as "2023:07:01 12:30:00"; None on failure."""
    if not value:
        return None
    val_str = str(value).strip().rstrip("\x00")
    try:
        if len(val_str) >= 19 and val_str[4] == ":" and val_str[7] == ":":
            return datetime.strptime(val_str[:19], EXIF_DT_FMT)
        return datetime.fromisoformat(val_str.replace("/", "-"))
    except ValueError:
        return None


def get_filesystem_creation_datetime(path: str) -> datetime | None:
    """Best-effort file creation time.

    Uses `st_birthtime` where the platform reports it, otherwise
    `os.path.getctime` (creation time on Windows, metadata change elsewhere).
    """
    try:
        st = os.stat(path)
        ts = getattr(st, "st_birthtime", None) or os.path.getctime(path)
        return datetime.fromtimestamp(ts)
    except (OSError, ValueError) as ex:
        logger.debug("creation time lookup failed for {}: {}", path, ex)
        return None


def get_exif_datetime_original(path: str) -> datetime | None:
    """Extract EXIF DateTimeOriginal (or DateTime) via Pillow."""
    try:
        with Image.open(path) as im:
            exif = im.getexif()
            if not exif:
                return None
            val = exif.get_ifd(_EXIF_IFD_POINTER).get(_TAG_DATETIME_ORIGINAL)
            return parse_exif_datetime(val or exif.get(_TAG_DATETIME))
    except (OSError, UnidentifiedImageError, ValueError, TypeError) as ex:
        logger.debug("EXIF read failed for {}: {}", path, ex)
        return None


def get_creation_datetime(path: str) -> datetime:
    """EXIF capture time, else filesystem creation time, else the epoch."""
    return (
        get_exif_datetime_original(path)
        or get_filesystem_creation_datetime(path)
        or datetime.fromtimestamp(0)
    )
