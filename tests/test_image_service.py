from __future__ import annotations

import pytest

pytest.importorskip("PySide6.QtGui")

from PIL import Image  # noqa: E402
from PySide6.QtGui import QImage  # noqa: E402

from infrastructure.image_service import (  # noqa: E402
    PLACEHOLDER_SIDE,
    ImageService,
    PreviewCache,
    fit_within,
    preview_key,
)


def test_fit_within_scales_longer_edge() -> None:
    assert fit_within(4000, 3000, 2000).width() == 2000
    assert fit_within(4000, 3000, 2000).height() == 1500
    assert fit_within(300, 600, 200).height() == 200
    assert fit_within(100, 50, 2000).width() == 100


def test_preview_cache_evicts_least_recent() -> None:
    cache = PreviewCache(2)
    a, b, c = (("a", 0, 0, 1), ("b", 0, 0, 1), ("c", 0, 0, 1))
    cache.store(a, QImage(1, 1, QImage.Format_ARGB32))
    cache.store(b, QImage(1, 1, QImage.Format_ARGB32))
    assert cache.lookup(a) is not None
    cache.store(c, QImage(1, 1, QImage.Format_ARGB32))
    assert cache.lookup(b) is None
    assert len(cache) == 2


def test_preview_key_tracks_file_changes(tmp_path) -> None:
    f = tmp_path / "a.png"
    f.write_bytes(b"1")
    first = preview_key(str(f), 100)
    f.write_bytes(b"12")
    assert preview_key(str(f), 100) != first
    assert preview_key(str(tmp_path / "missing.png"), 100)[1:3] == (0, 0)


def test_get_preview_decodes_and_bounds(tmp_path) -> None:
    path = tmp_path / "wide.png"
    Image.new("RGB", (400, 200), (255, 0, 0)).save(path)
    image = ImageService().get_preview(str(path), 100)
    assert not image.isNull()
    assert max(image.width(), image.height()) <= 100


def test_get_preview_placeholder_for_unreadable_file(tmp_path) -> None:
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"not an image")
    image = ImageService().get_preview(str(path), 100)
    assert image.width() == PLACEHOLDER_SIDE
