"""Batch deletion of marked photos with store reconciliation.

Provides a high-level API to delete every photo marked for deletion in a
single call to the catalog source, then reconcile the triage store: confirmed
deletions move to `deleted`, everything else in the batch has its mark rolled
back. Only one batch may be in flight at a time.
"""

from __future__ import annotations

from collections.abc import Iterable
import itertools

from loguru import logger

from core.errors import DeletionError
from core.services.interfaces import DeletionBatch, DeletionOutcome, ICatalogSource
from core.services.triage_store import TriageStore

# Process-wide so a completion from a discarded session never matches a new batch
_batch_ids = itertools.count(1)


def run_physical_delete(source: ICatalogSource, batch: DeletionBatch) -> DeletionError | None:
    """Call `source.delete` for `batch`; return the failure, if any.

    Safe to run off the GUI thread: it touches no triage state.
    """
    try:
        source.delete(batch.photo_ids)
    except DeletionError as ex:
        return ex
    return None


class BatchDeletionCoordinator:
    """Coordinates physical deletion against a catalog source."""

    def __init__(self, store: TriageStore, source: ICatalogSource) -> None:
        self._store = store
        self._source = source
        self._in_flight: DeletionBatch | None = None

    @property
    def in_flight(self) -> bool:
        """True while a physical delete call is outstanding."""
        return self._in_flight is not None

    @property
    def current_batch(self) -> DeletionBatch | None:
        return self._in_flight

    def begin(self, marked_ids: Iterable[str]) -> DeletionBatch | None:
        """Start a batch for `marked_ids`.

        Returns None when there is nothing to delete or another batch is
        still in flight.
        """
        photo_ids = frozenset(marked_ids)
        if not photo_ids:
            return None
        if self._in_flight is not None:
            logger.warning(
                "Deletion batch {} still in flight; not starting another",
                self._in_flight.batch_id,
            )
            return None
        batch = DeletionBatch(batch_id=next(_batch_ids), photo_ids=photo_ids)
        self._in_flight = batch
        logger.info("Deletion batch {} started: {} photos", batch.batch_id, len(photo_ids))
        return batch

    def run_physical_delete(
        self, batch: DeletionBatch, source: ICatalogSource | None = None
    ) -> DeletionError | None:
        """Run the physical delete for `batch` against `source` or the bound source."""
        return run_physical_delete(source or self._source, batch)

    def complete(self, batch: DeletionBatch, error: DeletionError | None = None) -> DeletionOutcome:
        """Reconcile the store with the outcome of `batch` and clear the in-flight flag."""
        if self._in_flight is not None and self._in_flight.batch_id == batch.batch_id:
            self._in_flight = None
        else:
            logger.warning("Completion for deletion batch {} that is not in flight", batch.batch_id)

        if error is None:
            deleted = self._store.reconcile_after_deletion(batch.photo_ids)
            logger.info("Deletion batch {} finished: {} deleted", batch.batch_id, len(deleted))
            return DeletionOutcome(deleted_ids=deleted)

        confirmed = error.deleted_ids & batch.photo_ids
        deleted = self._store.reconcile_after_deletion(confirmed)
        rolled_back = self._store.rollback_marks(batch.photo_ids - confirmed)
        logger.warning(
            "Deletion batch {} failed ({}): {} deleted, {} marks rolled back",
            batch.batch_id,
            error,
            len(deleted),
            len(rolled_back),
        )
        return DeletionOutcome(deleted_ids=deleted, rolled_back_ids=rolled_back, error=error)

    def execute(
        self, marked_ids: Iterable[str], source: ICatalogSource | None = None
    ) -> DeletionOutcome:
        """Delete `marked_ids` synchronously and reconcile the store."""
        batch = self.begin(marked_ids)
        if batch is None:
            return DeletionOutcome(skipped=True)
        return self.complete(batch, self.run_physical_delete(batch, source))
