from __future__ import annotations

import pytest

from app.viewmodels.session_vm import create_session
from app.viewmodels.swipe_vm import SwipeDecision, SwipeGestureAdapter, SwipeThresholds
from infrastructure.settings import JsonSettings
from tests.conftest import FakeCatalogSource, make_photos


@pytest.fixture
def adapter() -> SwipeGestureAdapter:
    return SwipeGestureAdapter(SwipeThresholds(distance=100))


def test_drag_updates_presentation(adapter: SwipeGestureAdapter) -> None:
    adapter.begin()
    assert adapter.presentation.scale == pytest.approx(0.95)

    p = adapter.update(120)
    assert p.rotation == pytest.approx(12.0)
    assert p.keep_opacity == pytest.approx(0.8)
    assert p.delete_opacity == 0.0

    p = adapter.update(-200)
    assert p.delete_opacity == 1.0
    assert p.keep_opacity == 0.0


def test_indicators_hidden_inside_dead_zone(adapter: SwipeGestureAdapter) -> None:
    adapter.begin()
    p = adapter.update(40)
    assert p.keep_opacity == 0.0 and p.delete_opacity == 0.0


def test_swipe_needs_distance_and_velocity(adapter: SwipeGestureAdapter) -> None:
    adapter.begin()
    assert adapter.end(150, 800) is SwipeDecision.KEEP
    assert adapter.presentation.rotation == pytest.approx(15.0)

    adapter.begin()
    assert adapter.end(-150, -800) is SwipeDecision.DELETE

    adapter.begin()
    assert adapter.end(150, 100) is SwipeDecision.CANCEL
    assert adapter.presentation.translate_x == 0.0

    adapter.begin()
    assert adapter.end(50, 2000) is SwipeDecision.CANCEL


def test_opposite_velocity_cancels(adapter: SwipeGestureAdapter) -> None:
    adapter.begin()
    assert adapter.end(150, -800) is SwipeDecision.CANCEL


def test_end_without_begin_is_ignored(adapter: SwipeGestureAdapter) -> None:
    assert adapter.end(500, 5000) is SwipeDecision.NONE


def test_commit_applies_one_decision() -> None:
    session = create_session(FakeCatalogSource(make_photos("A", "B")))
    session.load()
    adapter = SwipeGestureAdapter(SwipeThresholds(distance=100))

    assert adapter.commit(SwipeDecision.KEEP, session).photo_id == "A"
    assert session.store.kept == {"A"}
    assert adapter.commit(SwipeDecision.CANCEL, session) is None
    assert adapter.commit(SwipeDecision.DELETE, session).photo_id == "B"
    # Marking the last photo finishes review, which deletes it
    assert session.store.deleted == {"B"}
    assert adapter.presentation.translate_x == 0.0


def test_thresholds_from_settings(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"gesture": {"threshold_ratio": 0.5, "min_velocity": 300}}', encoding="utf-8")
    t = SwipeThresholds.from_settings(JsonSettings(path), 400)
    assert t.distance == pytest.approx(200)
    assert t.min_velocity == pytest.approx(300)
    assert t.indicator_full == pytest.approx(150)


def test_thresholds_default_without_settings() -> None:
    t = SwipeThresholds.from_settings(None, 400)
    assert t.distance == pytest.approx(100)
    assert t.min_velocity == pytest.approx(500)


def test_thresholds_follow_card_width_with_configured_ratio(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"gesture": {"threshold_ratio": 0.5, "min_velocity": 300}}', encoding="utf-8")
    t = SwipeThresholds.from_settings(JsonSettings(path), 400)
    assert t.threshold_ratio == pytest.approx(0.5)

    resized = t.for_card_width(600)
    assert resized.distance == pytest.approx(300)
    assert resized.min_velocity == pytest.approx(300)
    assert SwipeThresholds(distance=100).for_card_width(0).distance == pytest.approx(1.0)
