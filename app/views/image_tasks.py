"""Thread-pool tasks for preview decoding and physical deletion.

Workers never touch widgets or session state: results travel back to the GUI
thread through signals owned by the receiver (normally `MainWindow`).
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

from app.viewmodels.session_vm import CompletionCallback
from core.errors import DeletionError
from core.services.deletion_coordinator import run_physical_delete
from core.services.interfaces import DeletionBatch, DeletionOutcome, ICatalogSource


def preview_token(path: str, side: int) -> str:
    return f"card|{path}|{side}"


class _PreviewTask(QRunnable):
    """Decodes one preview and emits `receiver.imageLoaded(token, path, image)`."""

    def __init__(self, service: Any, receiver: QObject, path: str, side: int) -> None:
        super().__init__()
        self._service = service
        self._receiver = receiver
        self._path = path
        self._side = side

    def run(self) -> None:  # type: ignore[override]
        image = None
        try:
            image = self._service.get_preview(self._path, self._side)
        except Exception as ex:  # pylint: disable=broad-except
            logger.exception("Preview decode crashed for {}: {}", self._path, ex)
        token = preview_token(self._path, self._side)
        self._receiver.imageLoaded.emit(token, self._path, image)  # type: ignore[attr-defined]


class ImageTaskRunner:
    """Queues preview decodes on the global thread pool."""

    def __init__(self, *, service: Any, receiver: QObject) -> None:
        self._service = service
        self._receiver = receiver

    def request_preview(self, path: str, side: int) -> str:
        """Start decoding `path`; returns the token the result will carry."""
        if self._service is not None:
            task = _PreviewTask(self._service, self._receiver, path, side)
            QThreadPool.globalInstance().start(task)
        return preview_token(path, side)


class _DeletionTask(QRunnable):
    """Runs the physical delete of one batch and emits `receiver.deletionFinished`."""

    def __init__(self, batch: DeletionBatch, source: ICatalogSource, receiver: QObject) -> None:
        super().__init__()
        self._batch = batch
        self._source = source
        self._receiver = receiver

    def run(self) -> None:  # type: ignore[override]
        try:
            error = run_physical_delete(self._source, self._batch)
        except Exception as ex:  # pylint: disable=broad-except
            # A crash still completes the batch, as a failure
            logger.exception("Deletion batch {} crashed: {}", self._batch.batch_id, ex)
            error = DeletionError(f"Unexpected error: {ex}")
        self._receiver.deletionFinished.emit(self._batch, error)  # type: ignore[attr-defined]


class DeletionTaskRunner:
    """Deletion runner for `TriageSession` backed by the global thread pool.

    The session's completion callback is parked per batch id until the
    receiver's `deletionFinished` slot hands the result to `dispatch` on the
    GUI thread.
    """

    def __init__(self, *, source: ICatalogSource, receiver: QObject) -> None:
        self._source = source
        self._receiver = receiver
        self._pending: dict[int, CompletionCallback] = {}

    def __call__(self, batch: DeletionBatch, on_done: CompletionCallback) -> None:
        self._pending[batch.batch_id] = on_done
        task = _DeletionTask(batch, self._source, self._receiver)
        QThreadPool.globalInstance().start(task)

    def dispatch(self, batch: DeletionBatch, error: DeletionError | None) -> DeletionOutcome | None:
        on_done = self._pending.pop(batch.batch_id, None)
        if on_done is None:
            logger.warning("No session waiting for deletion batch {}", batch.batch_id)
            return None
        return on_done(batch, error)
