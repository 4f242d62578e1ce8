"""Derive the still-to-review queue from the catalog and the triage sets."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from core.models import Photo
from core.services.triage_store import TriageStore


def project(
    catalog: Sequence[Photo],
    kept: Iterable[str],
    marked_for_deletion: Iterable[str],
    deleted: Iterable[str],
) -> tuple[Photo, ...]:
    """Return `catalog` minus every decided id, preserving catalog order."""
    excluded = set(kept)
    excluded.update(marked_for_deletion)
    excluded.update(deleted)
    return tuple(photo for photo in catalog if photo.photo_id not in excluded)


def project_store(catalog: Sequence[Photo], store: TriageStore) -> tuple[Photo, ...]:
    """Shorthand for `project` using the sets held by `store`."""
    return project(catalog, store.kept, store.marked_for_deletion, store.deleted)
