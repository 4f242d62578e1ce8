"""Core service interfaces and shared data structures.

This module defines the catalog source contract plus simple dataclasses that
describe delete requests and results, shared by the infrastructure, the
session view-model and the UI layer.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from core.errors import DeletionError
from core.models import Photo


@dataclass
class DeleteResult:
    """Outcome of a physical delete against the file system.

    Attributes:
        success_paths: Paths successfully sent to the recycle bin.
        failed: Tuples of (path, reason) for failures.
        log_path: Optional path to the audit CSV written for the request.
    """

    success_paths: list[str]
    failed: list[tuple[str, str]]
    log_path: str | None = None


@dataclass(frozen=True)
class DeletionBatch:
    """A batch of marked photos handed to the catalog source in one call.

    Attributes:
        batch_id: Process-wide unique, increasing number of the batch.
        photo_ids: Ids captured from `marked_for_deletion` when the batch began.
    """

    batch_id: int
    photo_ids: frozenset[str]


@dataclass
class DeletionOutcome:
    """Result of a batch deletion as seen by the triage store.

    Attributes:
        deleted_ids: Ids reconciled into `deleted`.
        rolled_back_ids: Ids whose marks were rolled back.
        error: The failure, when the physical call did not fully succeed.
        skipped: True when no physical call was made (nothing marked, or a
            batch was already in flight).
    """

    deleted_ids: frozenset[str] = field(default_factory=frozenset)
    rolled_back_ids: frozenset[str] = field(default_factory=frozenset)
    error: DeletionError | None = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        """True when no error was reported."""
        return self.error is None


class ICatalogSource:
    """Interface for photo catalog sources.

    Implementations own listing and physical deletion only; they never hold
    triage state.
    """

    def list_photos(self) -> Sequence[Photo]:
        """Return every candidate photo, newest first.

        Raises:
            AccessDenied: Listing is not authorized.
            Unavailable: Listing failed transiently.
        """
        raise NotImplementedError

    def delete(self, photo_ids: frozenset[str]) -> None:
        """Physically delete the given photos.

        Raises:
            DeletionError: When any photo could not be deleted, including a
                denied or cancelled request.
        """
        raise NotImplementedError
