from __future__ import annotations

from core.services.queue_projector import project, project_store
from core.services.triage_store import TriageStore
from tests.conftest import make_photos


def _ids(queue) -> list[str]:
    return [p.photo_id for p in queue]


def test_project_excludes_every_decided_set_and_keeps_order() -> None:
    catalog = make_photos("A", "B", "C", "D", "E")
    queue = project(catalog, kept={"B"}, marked_for_deletion={"D"}, deleted={"A"})
    assert _ids(queue) == ["C", "E"]


def test_project_with_empty_sets_is_catalog() -> None:
    catalog = make_photos("A", "B")
    assert _ids(project(catalog, (), (), ())) == ["A", "B"]


def test_project_ignores_ids_missing_from_catalog() -> None:
    catalog = make_photos("A")
    assert _ids(project(catalog, {"Z"}, (), {"Y"})) == ["A"]


def test_project_store_uses_store_sets() -> None:
    catalog = make_photos("A", "B", "C")
    store = TriageStore()
    store.bind_catalog(p.photo_id for p in catalog)
    store.keep("A")
    store.mark_for_deletion("C")
    assert _ids(project_store(catalog, store)) == ["B"]
