"""Core domain models for photos, triage decisions and session phases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class Photo:
    """A single catalog entry.

    Attributes:
        photo_id: Opaque identifier, stable and unique within a session.
        created_at: Creation timestamp used for newest-first ordering.
        locator: Value the image loader can fetch pixels from (a file path).
    """

    photo_id: str
    created_at: datetime
    locator: str


class DecisionKind(Enum):
    """Kind of a triage decision recorded for undo."""

    KEEP = "keep"
    DELETE = "delete"


@dataclass(frozen=True)
class LastAction:
    """Single-slot undo record."""

    kind: DecisionKind
    photo_id: str


class SessionPhase(Enum):
    """Phase of the review cursor."""

    LOADING = "loading"
    REVIEWING = "reviewing"
    FINISHED = "finished"
