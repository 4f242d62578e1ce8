from __future__ import annotations

import pytest

from core.errors import NotInQueue
from core.models import DecisionKind, LastAction
from core.services.triage_store import TriageStore


@pytest.fixture
def store() -> TriageStore:
    s = TriageStore()
    s.bind_catalog(["A", "B", "C"])
    return s


def test_keep_and_mark_partition_ids(store: TriageStore) -> None:
    store.keep("A")
    store.mark_for_deletion("B")
    assert store.kept == {"A"}
    assert store.marked_for_deletion == {"B"}
    assert store.deleted == frozenset()
    assert store.last_action == LastAction(DecisionKind.DELETE, "B")


def test_decision_on_decided_photo_raises_without_mutation(store: TriageStore) -> None:
    store.keep("A")
    with pytest.raises(NotInQueue) as info:
        store.mark_for_deletion("A")
    assert info.value.photo_id == "A"
    assert store.kept == {"A"}
    assert store.marked_for_deletion == frozenset()
    assert store.last_action == LastAction(DecisionKind.KEEP, "A")


def test_decision_on_unknown_photo_raises(store: TriageStore) -> None:
    with pytest.raises(LookupError):
        store.keep("Z")


def test_undo_reverts_last_decision_once(store: TriageStore) -> None:
    store.keep("A")
    store.mark_for_deletion("B")
    action = store.undo()
    assert action == LastAction(DecisionKind.DELETE, "B")
    assert store.marked_for_deletion == frozenset()
    assert store.kept == {"A"}
    assert store.last_action is None
    # Single slot: a second undo does nothing
    assert store.undo() is None
    assert store.kept == {"A"}


def test_reset_all_keeps_deleted(store: TriageStore) -> None:
    store.keep("A")
    store.mark_for_deletion("B")
    store.mark_for_deletion("C")
    store.reconcile_after_deletion({"C"})
    store.reset_all()
    assert store.kept == frozenset()
    assert store.marked_for_deletion == frozenset()
    assert store.deleted == {"C"}
    assert store.last_action is None


def test_reconcile_moves_marks_to_deleted(store: TriageStore) -> None:
    store.mark_for_deletion("A")
    store.mark_for_deletion("B")
    assert store.reconcile_after_deletion({"A", "B"}) == {"A", "B"}
    assert store.marked_for_deletion == frozenset()
    assert store.deleted == {"A", "B"}
    assert store.last_action is None
    assert not store.is_pending("A")


def test_reconcile_overrides_keep(store: TriageStore) -> None:
    store.keep("A")
    store.reconcile_after_deletion({"A"})
    assert store.kept == frozenset()
    assert store.deleted == {"A"}


def test_rollback_all_marks(store: TriageStore) -> None:
    store.mark_for_deletion("A")
    store.mark_for_deletion("B")
    assert store.rollback_marks() == {"A", "B"}
    assert store.marked_for_deletion == frozenset()
    assert store.deleted == frozenset()
    assert store.last_action is None
    assert store.is_pending("A") and store.is_pending("B")


def test_rollback_subset_keeps_other_marks_and_last_action(store: TriageStore) -> None:
    store.mark_for_deletion("A")
    store.mark_for_deletion("B")
    assert store.rollback_marks({"A", "C"}) == {"A"}
    assert store.marked_for_deletion == {"B"}
    assert store.last_action == LastAction(DecisionKind.DELETE, "B")


def test_bind_catalog_does_not_prune_decisions(store: TriageStore) -> None:
    store.keep("A")
    store.bind_catalog(["B"])
    assert store.kept == {"A"}
    assert not store.is_pending("C")
