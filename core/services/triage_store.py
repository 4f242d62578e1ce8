"""Authoritative partition of photo ids into kept / marked / deleted sets.

The store is plain data plus transition rules. It never touches the file
system and never derives the review order; see `queue_projector.project` for
that. Every public operation either applies completely or raises before
mutating anything.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from core.errors import NotInQueue
from core.models import DecisionKind, LastAction


class TriageStore:
    """Holds the triage sets and the single-slot undo record."""

    def __init__(self) -> None:
        self._catalog_ids: frozenset[str] = frozenset()
        self._kept: set[str] = set()
        self._marked: set[str] = set()
        self._deleted: set[str] = set()
        self._last_action: LastAction | None = None

    @property
    def kept(self) -> frozenset[str]:
        return frozenset(self._kept)

    @property
    def marked_for_deletion(self) -> frozenset[str]:
        return frozenset(self._marked)

    @property
    def deleted(self) -> frozenset[str]:
        return frozenset(self._deleted)

    @property
    def last_action(self) -> LastAction | None:
        return self._last_action

    def bind_catalog(self, photo_ids: Iterable[str]) -> None:
        """Record which ids the current catalog contains.

        Binding never prunes the triage sets: a photo missing from a refresh
        keeps its decision until triage itself removes it.
        """
        self._catalog_ids = frozenset(photo_ids)

    def is_pending(self, photo_id: str) -> bool:
        """True if `photo_id` is in the catalog and not yet decided."""
        return (
            photo_id in self._catalog_ids
            and photo_id not in self._kept
            and photo_id not in self._marked
            and photo_id not in self._deleted
        )

    def keep(self, photo_id: str) -> None:
        """Move a pending photo into `kept`."""
        self._decide(photo_id, DecisionKind.KEEP)

    def mark_for_deletion(self, photo_id: str) -> None:
        """Move a pending photo into `marked_for_deletion`."""
        self._decide(photo_id, DecisionKind.DELETE)

    def _decide(self, photo_id: str, kind: DecisionKind) -> None:
        if not self.is_pending(photo_id):
            raise NotInQueue(photo_id)
        target = self._kept if kind is DecisionKind.KEEP else self._marked
        target.add(photo_id)
        self._last_action = LastAction(kind=kind, photo_id=photo_id)
        logger.debug("Decision {} for {}", kind.value, photo_id)

    def undo(self) -> LastAction | None:
        """Revert the last decision, returning it; no-op when there is none."""
        action = self._last_action
        if action is None:
            return None
        if action.kind is DecisionKind.KEEP:
            self._kept.discard(action.photo_id)
        else:
            self._marked.discard(action.photo_id)
        self._last_action = None
        logger.debug("Undid {} for {}", action.kind.value, action.photo_id)
        return action

    def reset_all(self) -> None:
        """Forget every keep/delete opinion. Physically deleted photos stay deleted."""
        logger.info(
            "Reset triage: dropping {} kept and {} marked ({} deleted retained)",
            len(self._kept),
            len(self._marked),
            len(self._deleted),
        )
        self._kept.clear()
        self._marked.clear()
        self._last_action = None

    def reconcile_after_deletion(self, confirmed_ids: Iterable[str]) -> frozenset[str]:
        """Record photos the catalog source confirmed as physically deleted.

        Returns the ids that were reconciled.
        """
        confirmed = frozenset(confirmed_ids)
        if not confirmed:
            return confirmed
        self._marked.difference_update(confirmed)
        # Physical reality wins over a decision taken while the batch was in flight
        self._kept.difference_update(confirmed)
        self._deleted.update(confirmed)
        if self._last_action is not None and self._last_action.photo_id in confirmed:
            self._last_action = None
        return confirmed

    def rollback_marks(self, photo_ids: Iterable[str] | None = None) -> frozenset[str]:
        """Drop deletion marks without recording any deletion.

        Args:
            photo_ids: Marks to roll back; all marks when omitted.

        Returns the ids whose marks were removed.
        """
        if photo_ids is None:
            rolled = frozenset(self._marked)
        else:
            rolled = frozenset(photo_ids) & self._marked
        self._marked.difference_update(rolled)
        action = self._last_action
        if action is not None and action.kind is DecisionKind.DELETE and action.photo_id in rolled:
            self._last_action = None
        return rolled
