"""Swipe gesture adapter: turns drag deltas into a single triage decision.

The adapter owns presentation state only (card offset, rotation, scale and
indicator opacity). It never reads triage state; a completed swipe is handed
to the session as one discrete call.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from loguru import logger

from core.models import Photo


class SwipeDecision(Enum):
    """Outcome of a released gesture."""

    NONE = "none"
    KEEP = "keep"
    DELETE = "delete"
    CANCEL = "cancel"


@dataclass(frozen=True)
class SwipeThresholds:
    """Gesture tuning.

    Attributes:
        distance: Horizontal displacement (px) a swipe must exceed.
        threshold_ratio: Fraction of the card width `distance` is derived from.
        min_velocity: Release velocity (px/s) a swipe must exceed, same direction.
        indicator_dead_zone: Displacement (px) before an indicator shows.
        indicator_full: Displacement (px) at which an indicator is fully opaque.
        rotation_factor: Card rotation in degrees per px of displacement.
        pressed_scale: Card scale while the pointer is down.
        exit_rotation: Rotation (degrees) the card leaves the screen with.
    """

    distance: float
    threshold_ratio: float = 0.25
    min_velocity: float = 500.0
    indicator_dead_zone: float = 50.0
    indicator_full: float = 150.0
    rotation_factor: float = 0.1
    pressed_scale: float = 0.95
    exit_rotation: float = 15.0

    @classmethod
    def from_settings(cls, settings: Any | None, card_width: float) -> SwipeThresholds:
        """Build thresholds for a card `card_width` px wide from `gesture.*` settings."""
        ratio = 0.25
        values: dict[str, float] = {}
        if settings is not None:
            try:
                ratio = float(settings.get("gesture.threshold_ratio", ratio))
                for key in ("min_velocity", "indicator_dead_zone", "indicator_full"):
                    raw = settings.get(f"gesture.{key}")
                    if raw is not None:
                        values[key] = float(raw)
            except (ValueError, TypeError) as ex:
                logger.warning("Invalid gesture settings, using defaults: {}", ex)
                ratio, values = 0.25, {}
        return cls(distance=max(1.0, card_width * ratio), threshold_ratio=ratio, **values)

    def for_card_width(self, card_width: float) -> SwipeThresholds:
        """Copy with `distance` re-derived for a card `card_width` px wide."""
        return replace(self, distance=max(1.0, card_width * self.threshold_ratio))


@dataclass
class CardPresentation:
    """Visual state of the card being dragged."""

    translate_x: float = 0.0
    rotation: float = 0.0
    scale: float = 1.0
    keep_opacity: float = 0.0
    delete_opacity: float = 0.0


class SwipeGestureAdapter:
    """Converts a drag into presentation updates and one decision."""

    def __init__(self, thresholds: SwipeThresholds) -> None:
        self.thresholds = thresholds
        self.presentation = CardPresentation()
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def begin(self) -> None:
        """Pointer went down on the card."""
        self._active = True
        self.presentation.scale = self.thresholds.pressed_scale

    def update(self, translation_x: float) -> CardPresentation:
        """Pointer moved; `translation_x` is the total displacement since `begin`."""
        t = self.thresholds
        p = self.presentation
        p.translate_x = translation_x
        p.rotation = translation_x * t.rotation_factor
        if translation_x > t.indicator_dead_zone:
            p.keep_opacity = min(translation_x / t.indicator_full, 1.0)
            p.delete_opacity = 0.0
        elif translation_x < -t.indicator_dead_zone:
            p.delete_opacity = min(abs(translation_x) / t.indicator_full, 1.0)
            p.keep_opacity = 0.0
        else:
            p.keep_opacity = 0.0
            p.delete_opacity = 0.0
        return p

    def end(self, translation_x: float, velocity_x: float) -> SwipeDecision:
        """Pointer released; classify the gesture.

        A decision needs both the displacement and the velocity past their
        thresholds in the same direction. Anything else cancels and resets
        the presentation.
        """
        if not self._active:
            return SwipeDecision.NONE
        self._active = False
        t = self.thresholds
        p = self.presentation
        if translation_x < -t.distance and velocity_x < -t.min_velocity:
            p.rotation = -t.exit_rotation
            p.delete_opacity, p.keep_opacity = 1.0, 0.0
            return SwipeDecision.DELETE
        if translation_x > t.distance and velocity_x > t.min_velocity:
            p.rotation = t.exit_rotation
            p.keep_opacity, p.delete_opacity = 1.0, 0.0
            return SwipeDecision.KEEP
        self.reset()
        return SwipeDecision.CANCEL

    def reset(self) -> None:
        """Return the card to rest."""
        self.presentation = CardPresentation()

    def commit(self, decision: SwipeDecision, session: Any) -> Photo | None:
        """Apply a decision to `session` and reset the card.

        Returns the decided photo, or None for cancel / no-op.
        """
        photo: Photo | None = None
        if decision is SwipeDecision.KEEP:
            photo = session.keep_current()
        elif decision is SwipeDecision.DELETE:
            photo = session.mark_current_for_deletion()
        self.reset()
        return photo
