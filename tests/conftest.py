from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from core.errors import DeletionError
from core.models import Photo
from core.services.interfaces import ICatalogSource

BASE_TIME = datetime(2024, 6, 1, 12, 0, 0)


def make_photos(*ids: str) -> list[Photo]:
    """Photos in the given order, each one minute older than the previous."""
    return [
        Photo(
            photo_id=pid,
            created_at=BASE_TIME - timedelta(minutes=i),
            locator=f"/photos/{pid}.jpg",
        )
        for i, pid in enumerate(ids)
    ]


class FakeCatalogSource(ICatalogSource):
    """In-memory catalog source recording every delete request."""

    def __init__(self, photos: list[Photo] | None = None) -> None:
        self.photos: list[Photo] = list(photos or [])
        self.delete_calls: list[frozenset[str]] = []
        self.list_error: Exception | None = None
        self.delete_error: DeletionError | None = None

    def list_photos(self) -> list[Photo]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.photos)

    def delete(self, photo_ids: frozenset[str]) -> None:
        self.delete_calls.append(frozenset(photo_ids))
        if self.delete_error is not None:
            error, self.delete_error = self.delete_error, None
            raise error
        self.photos = [p for p in self.photos if p.photo_id not in photo_ids]


class ManualRunner:
    """Deletion runner that holds batches until the test completes them."""

    def __init__(self, source: FakeCatalogSource) -> None:
        self.source = source
        self.pending: list = []

    def __call__(self, batch, on_done) -> None:
        self.pending.append((batch, on_done))

    def finish(self, error: DeletionError | None = None):
        batch, on_done = self.pending.pop(0)
        if error is None:
            try:
                self.source.delete(batch.photo_ids)
            except DeletionError as ex:
                error = ex
        return on_done(batch, error)


@pytest.fixture
def source() -> FakeCatalogSource:
    return FakeCatalogSource(make_photos("A", "B", "C"))
