"""Lightweight view model wrapper around `Photo`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.models import Photo

DISPLAY_DT_FMT = "%Y-%m-%d %H:%M"


@dataclass
class PhotoVM:
    """Expose convenient properties for bindings/templates."""

    photo: Photo

    @property
    def file_name(self) -> str:
        """Base name of the locator."""
        return Path(self.photo.locator).name

    @property
    def created_text(self) -> str:
        """Creation timestamp formatted for the status bar."""
        return self.photo.created_at.strftime(DISPLAY_DT_FMT)

    @property
    def caption(self) -> str:
        return f"{self.file_name}  ·  {self.created_text}"
