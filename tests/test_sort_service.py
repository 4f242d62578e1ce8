from __future__ import annotations

from datetime import datetime

from core.models import Photo
from core.services.sort_service import SortService


def _photo(pid: str, ts: datetime) -> Photo:
    return Photo(photo_id=pid, created_at=ts, locator=f"/p/{pid}.jpg")


def test_newest_first_orders_by_creation_time() -> None:
    photos = [
        _photo("old", datetime(2020, 1, 1)),
        _photo("new", datetime(2024, 1, 1)),
        _photo("mid", datetime(2022, 1, 1)),
    ]
    result = SortService().newest_first(photos)
    assert [p.photo_id for p in result] == ["new", "mid", "old"]


def test_ties_break_by_id_ascending() -> None:
    ts = datetime(2023, 5, 5)
    photos = [_photo("b", ts), _photo("ab", ts), _photo("a", ts)]
    result = SortService().newest_first(photos)
    assert [p.photo_id for p in result] == ["a", "ab", "b"]


def test_descending_string_key_handles_prefixes() -> None:
    ts = datetime(2023, 5, 5)
    photos = [_photo("a", ts), _photo("ab", ts), _photo("b", ts)]
    result = SortService().sort(photos, [("photo_id", False)])
    assert [p.photo_id for p in result] == ["b", "ab", "a"]


def test_no_keys_keeps_input_order() -> None:
    photos = [_photo("x", datetime(2020, 1, 1)), _photo("y", datetime(2024, 1, 1))]
    assert SortService().sort(photos, []) == photos
