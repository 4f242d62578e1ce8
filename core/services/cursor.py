"""Review cursor: which queue element is presented, or whether review finished.

All functions are pure. The session calls them synchronously after every
mutation and catalog refresh, passing the freshly projected queue.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from core.models import Photo, SessionPhase


@dataclass(frozen=True)
class Cursor:
    """Cursor state; `index` is meaningful only while reviewing."""

    phase: SessionPhase
    index: int = 0

    @property
    def is_reviewing(self) -> bool:
        return self.phase is SessionPhase.REVIEWING

    @property
    def is_finished(self) -> bool:
        return self.phase is SessionPhase.FINISHED


LOADING = Cursor(SessionPhase.LOADING)
FINISHED = Cursor(SessionPhase.FINISHED)


def clamp_cursor(index: int, queue_len: int) -> Cursor:
    """Reviewing at `index`, or Finished once `index` reaches the queue end."""
    if queue_len <= 0 or index >= queue_len:
        return FINISHED
    return Cursor(SessionPhase.REVIEWING, max(0, index))


def _index_of(queue: Sequence[Photo], photo_id: str | None) -> int | None:
    if photo_id is None:
        return None
    for i, photo in enumerate(queue):
        if photo.photo_id == photo_id:
            return i
    return None


def advance_cursor(cursor: Cursor, queue_len: int) -> Cursor:
    """Cursor after a keep / mark-for-deletion.

    The decided photo left the queue, so the same index already points at the
    next photo.
    """
    if not cursor.is_reviewing:
        return cursor
    return clamp_cursor(cursor.index, queue_len)


def cursor_for_undo(queue: Sequence[Photo], photo_id: str | None) -> Cursor:
    """Reviewing at the restored photo's position, else at the front."""
    index = _index_of(queue, photo_id)
    return clamp_cursor(index if index is not None else 0, len(queue))


def cursor_after_refresh(
    cursor: Cursor, queue_len: int, old_count: int, new_count: int
) -> Cursor:
    """Cursor after the catalog was replaced.

    Args:
        cursor: Cursor before the refresh.
        queue_len: Length of the queue projected from the new catalog.
        old_count: Catalog length before the refresh.
        new_count: Catalog length after the refresh.

    New photos are prepended (newest first), so a clamped index presents
    them before older undecided photos.
    """
    if cursor.phase is SessionPhase.LOADING:
        return clamp_cursor(0, queue_len)
    if cursor.is_finished:
        if new_count > old_count and queue_len > 0:
            return Cursor(SessionPhase.REVIEWING, 0)
        return cursor
    return clamp_cursor(cursor.index, queue_len)


def cursor_after_rollback(cursor: Cursor, queue_len: int) -> Cursor:
    """Cursor after a failed deletion returned marked photos to the queue.

    A finished session reopens review from the front.
    """
    if cursor.is_reviewing:
        return clamp_cursor(cursor.index, queue_len)
    return clamp_cursor(0, queue_len)
