"""Error kinds raised by the triage core and catalog sources."""

from __future__ import annotations

from collections.abc import Iterable


class TriageError(Exception):
    """Base class for all triage errors."""


class CatalogError(TriageError):
    """Listing the photo catalog failed."""


class AccessDenied(CatalogError):
    """Catalog listing is not authorized; the user must grant access."""


class Unavailable(CatalogError):
    """Catalog listing failed transiently; retrying may succeed."""


class DeletionError(TriageError):
    """Physical deletion failed, was denied, or was cancelled.

    Attributes:
        deleted_ids: Ids the back end did remove before failing.
        failed: Tuples of (photo_id, reason) for ids that were not removed.
    """

    def __init__(
        self,
        message: str,
        deleted_ids: Iterable[str] = (),
        failed: Iterable[tuple[str, str]] = (),
    ) -> None:
        super().__init__(message)
        self.deleted_ids: frozenset[str] = frozenset(deleted_ids)
        self.failed: list[tuple[str, str]] = list(failed)


class NotInQueue(TriageError, LookupError):
    """A transition targeted a photo that is not awaiting a decision."""

    def __init__(self, photo_id: str | None) -> None:
        super().__init__(f"Photo is not in the active queue: {photo_id}")
        self.photo_id = photo_id
