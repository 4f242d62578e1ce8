"""Sorting service for photo catalogs.

The service performs multi-key sorting across photos, handling None values and
per-key ascending/descending ordering without mutating original values.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from core.models import Photo

# Newest first; ties broken by id so repeated listings order identically
NEWEST_FIRST: list[tuple[str, bool]] = [("created_at", False), ("photo_id", True)]


class SortService:
    """Provides sorting utilities for photo sequences."""

    def sort(self, photos: Iterable[Photo], sort_keys: list[tuple[str, bool]]) -> list[Photo]:
        """Return photos sorted by the provided keys.

        Args:
            photos: Photos to sort.
            sort_keys: List of tuples (field_name, ascending).
        """
        items = list(photos)
        if not sort_keys:
            return items

        # Build a decorated list with adjusted values for per-key order
        decorated: list[tuple[tuple[Any, ...], Photo]] = []
        for item in items:
            row: list[Any] = []
            for field_name, ascending in sort_keys:
                value = getattr(item, field_name, None)
                if isinstance(value, datetime):
                    value = value.timestamp()
                if value is None:
                    value = 0
                if isinstance(value, (int, float)):
                    row.append(value if ascending else -value)
                else:
                    # Negated code points plus a terminator that outranks any character
                    text = str(value)
                    row.append(text if ascending else (*(-ord(ch) for ch in text), 1))
            decorated.append((tuple(row), item))

        decorated.sort(key=lambda x: x[0])
        return [it for _, it in decorated]

    def newest_first(self, photos: Iterable[Photo]) -> list[Photo]:
        """Sort by creation timestamp descending."""
        return self.sort(photos, NEWEST_FIRST)
