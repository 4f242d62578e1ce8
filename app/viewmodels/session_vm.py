"""ViewModel owning one triage session: catalog, decisions, cursor and deletion."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.errors import AccessDenied, DeletionError, Unavailable
from core.models import LastAction, Photo, SessionPhase
from core.services.cursor import (
    LOADING,
    Cursor,
    advance_cursor,
    clamp_cursor,
    cursor_after_refresh,
    cursor_after_rollback,
    cursor_for_undo,
)
from core.services.deletion_coordinator import BatchDeletionCoordinator
from core.services.interfaces import DeletionBatch, DeletionOutcome, ICatalogSource
from core.services.queue_projector import project_store
from core.services.triage_store import TriageStore

ConfirmCallback = Callable[[str, str], bool]
CompletionCallback = Callable[[DeletionBatch, DeletionError | None], DeletionOutcome]
# Runs the physical delete for a batch and later reports back through the callback
DeletionRunner = Callable[[DeletionBatch, CompletionCallback], None]

RESET_TITLE = "Reset Everything"
RESET_MESSAGE = "This will clear all your keep and delete choices and start over. Are you sure?"
DELETE_TITLE = "Confirm Deletion"
NO_MARKS_MESSAGE = "No photos are marked for deletion."


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


class TriageSession:
    """Session view-model.

    Mediates between a catalog source providing `Photo` items and a front end.
    Every command mutates the triage store, re-projects the active queue and
    re-evaluates the cursor before returning, so the front end only ever
    re-renders from the properties below.
    """

    def __init__(self, source: ICatalogSource, runner: DeletionRunner | None = None) -> None:
        """Create a session.

        Args:
            source: Catalog source used for listing and physical deletion.
            runner: Optional asynchronous deletion runner. When omitted the
                physical delete runs synchronously inside the command.
        """
        self._source = source
        self._runner = runner
        self.reset()

    def reset(self) -> None:
        """Drop all state and return to `Loading`."""
        self._store = TriageStore()
        self._coordinator = BatchDeletionCoordinator(self._store, self._source)
        self._catalog: tuple[Photo, ...] = ()
        self._queue: tuple[Photo, ...] = ()
        self._cursor: Cursor = LOADING
        self._notice: str | None = None
        self._access_denied = False
        self._deferred_auto_delete = False
        self._restart_pending = False

    # State
    @property
    def store(self) -> TriageStore:
        return self._store

    @property
    def catalog(self) -> tuple[Photo, ...]:
        return self._catalog

    @property
    def queue(self) -> tuple[Photo, ...]:
        """Photos still awaiting a decision, newest first."""
        return self._queue

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def phase(self) -> SessionPhase:
        return self._cursor.phase

    @property
    def current_photo(self) -> Photo | None:
        if not self._cursor.is_reviewing:
            return None
        return self._queue[self._cursor.index]

    @property
    def last_action(self) -> LastAction | None:
        return self._store.last_action

    @property
    def can_undo(self) -> bool:
        return self._store.last_action is not None

    @property
    def marked_count(self) -> int:
        return len(self._store.marked_for_deletion)

    @property
    def is_deleting(self) -> bool:
        """True while a physical delete is outstanding."""
        return self._coordinator.in_flight

    @property
    def access_denied(self) -> bool:
        return self._access_denied

    @property
    def finished_message(self) -> str:
        """Subtitle shown once the queue is exhausted."""
        if self.is_deleting:
            batch = self._coordinator.current_batch
            count = len(batch.photo_ids) if batch is not None else self.marked_count
            return f"Deleting {count} photos..."
        if self.marked_count > 0:
            return f"{self.marked_count} photos marked for deletion"
        return "You've seen all your photos!"

    def pop_notice(self) -> str | None:
        """Return and clear the pending non-blocking notice."""
        notice, self._notice = self._notice, None
        return notice

    # Catalog
    def load(self) -> tuple[Photo, ...]:
        """List the catalog and re-derive queue and cursor.

        Raises:
            AccessDenied: The source refused listing; the session keeps its
                previous catalog and stays unusable until access is granted.
            Unavailable: Transient failure; the previous catalog is kept.
        """
        try:
            photos = tuple(self._source.list_photos())
        except AccessDenied:
            self._access_denied = True
            logger.error("Photo library access denied")
            raise
        except Unavailable as ex:
            logger.warning("Photo library unavailable: {}", ex)
            raise
        self._access_denied = False

        old_count = len(self._catalog)
        self._catalog = photos
        self._store.bind_catalog(p.photo_id for p in photos)
        self._recompute()
        self._set_cursor(
            cursor_after_refresh(self._cursor, len(self._queue), old_count, len(photos))
        )
        logger.info(
            "Catalog loaded: {} photos ({} previously), {} to review",
            len(photos),
            old_count,
            len(self._queue),
        )
        return photos

    def refresh(self) -> tuple[Photo, ...]:
        """Re-list the catalog; alias of `load` for a session already loaded."""
        return self.load()

    # Decisions
    def keep(self, photo_id: str) -> None:
        """Keep `photo_id`; raises `NotInQueue` if it is not awaiting a decision."""
        self._store.keep(photo_id)
        self._after_decision()

    def mark_for_deletion(self, photo_id: str) -> None:
        """Mark `photo_id` for deletion; raises `NotInQueue` if already decided."""
        self._store.mark_for_deletion(photo_id)
        self._after_decision()

    def keep_current(self) -> Photo | None:
        """Keep the presented photo. Returns it, or None when nothing is presented."""
        photo = self.current_photo
        if photo is None:
            logger.debug("keep_current ignored: no photo presented")
            return None
        self.keep(photo.photo_id)
        return photo

    def mark_current_for_deletion(self) -> Photo | None:
        """Mark the presented photo for deletion."""
        photo = self.current_photo
        if photo is None:
            logger.debug("mark_current_for_deletion ignored: no photo presented")
            return None
        self.mark_for_deletion(photo.photo_id)
        return photo

    def _after_decision(self) -> None:
        self._recompute()
        self._set_cursor(advance_cursor(self._cursor, len(self._queue)))

    # Commands
    def undo(self) -> LastAction | None:
        """Undo the most recent decision; no-op when there is none."""
        action = self._store.undo()
        if action is None:
            return None
        self._recompute()
        self._set_cursor(cursor_for_undo(self._queue, action.photo_id))
        return action

    def reset_all(self) -> None:
        """Clear kept and marked photos; deleted photos never return."""
        self._store.reset_all()
        self._recompute()
        if self._cursor.phase is not SessionPhase.LOADING:
            self._set_cursor(clamp_cursor(0, len(self._queue)))

    def reset_all_with_confirmation(self, confirm: ConfirmCallback) -> bool:
        """Ask `confirm` and reset on approval. Returns True when reset."""
        if not confirm(RESET_TITLE, RESET_MESSAGE):
            return False
        self.reset_all()
        return True

    def confirm_and_execute_deletion(self, confirm: ConfirmCallback) -> DeletionOutcome | None:
        """Ask `confirm`, then delete every marked photo.

        Returns the outcome for a synchronous deletion, None when nothing was
        started or the deletion runs asynchronously.
        """
        count = self.marked_count
        if count == 0:
            self._notice = NO_MARKS_MESSAGE
            return None
        if self.is_deleting:
            self._notice = "A deletion is already in progress."
            return None
        message = (
            f"Are you sure you want to delete {count} photo{_plural(count)}? "
            "This cannot be undone."
        )
        if not confirm(DELETE_TITLE, message):
            return None
        return self._start_deletion()

    def restart_session(self) -> None:
        """Delete pending marks, then reset and review everything not deleted.

        While a batch is in flight the reset waits for its completion.
        """
        if self._store.marked_for_deletion:
            self._start_deletion()
        if self._coordinator.in_flight:
            self._restart_pending = True
            logger.info("Restart deferred until the deletion in flight completes")
            return
        self._finish_restart()

    def _finish_restart(self) -> None:
        self._restart_pending = False
        self._store.reset_all()
        self._recompute()
        self._set_cursor(clamp_cursor(0, len(self._queue)))
        logger.info("Session restarted: {} photos to review", len(self._queue))

    # Deletion
    def complete_deletion(
        self, batch: DeletionBatch, error: DeletionError | None = None
    ) -> DeletionOutcome:
        """Apply the outcome of a physical delete for `batch`."""
        outcome = self._coordinator.complete(batch, error)
        self._recompute()
        if outcome.error is not None:
            count = len(outcome.rolled_back_ids)
            self._notice = (
                f"Deletion was cancelled or failed; {count} photo{_plural(count)} "
                "returned to review."
            )
            cursor = cursor_after_rollback(self._cursor, len(self._queue))
        else:
            count = len(outcome.deleted_ids)
            self._notice = f"Deleted {count} photo{_plural(count)}."
            cursor = advance_cursor(self._cursor, len(self._queue))

        if self._restart_pending:
            self._finish_restart()
            return outcome

        self._set_cursor(cursor)
        if (
            self._deferred_auto_delete
            and self._cursor.is_finished
            and self._store.marked_for_deletion
        ):
            self._deferred_auto_delete = False
            self._start_deletion()
        return outcome

    def _start_deletion(self) -> DeletionOutcome | None:
        batch = self._coordinator.begin(self._store.marked_for_deletion)
        if batch is None:
            return None
        if self._runner is None:
            return self.complete_deletion(batch, self._coordinator.run_physical_delete(batch))
        self._runner(batch, self.complete_deletion)
        return None

    # Internals
    def _recompute(self) -> None:
        self._queue = project_store(self._catalog, self._store)

    def _set_cursor(self, cursor: Cursor) -> None:
        entering_finished = cursor.is_finished and not self._cursor.is_finished
        self._cursor = cursor
        if not cursor.is_finished:
            self._deferred_auto_delete = False
            return
        if not entering_finished:
            return
        logger.info(
            "Review finished: {} kept, {} marked, {} deleted",
            len(self._store.kept),
            len(self._store.marked_for_deletion),
            len(self._store.deleted),
        )
        if not self._store.marked_for_deletion:
            return
        if self._coordinator.in_flight:
            self._deferred_auto_delete = True
            return
        self._start_deletion()


def create_session(source: ICatalogSource, runner: DeletionRunner | None = None) -> TriageSession:
    """Create a session in `Loading`; call `load()` to list the catalog."""
    return TriageSession(source, runner=runner)
