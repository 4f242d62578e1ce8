"""Folder-backed photo catalog.

Lists image files under a root directory, newest first, and deletes photos by
sending their files to the recycle bin. Photo ids are resolved absolute paths.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
import os
from pathlib import Path

from loguru import logger

from core.errors import AccessDenied, DeletionError, Unavailable
from core.models import Photo
from core.services.interfaces import ICatalogSource
from core.services.sort_service import SortService
from infrastructure.delete_service import DeleteService
from infrastructure.settings import DEFAULT_SETTINGS
from infrastructure.utils import get_creation_datetime

DEFAULT_EXTENSIONS: tuple[str, ...] = tuple(DEFAULT_SETTINGS["catalog"]["extensions"])
DEFAULT_LIMIT: int = int(DEFAULT_SETTINGS["catalog"]["limit"])


class FolderCatalogSource(ICatalogSource):
    """Catalog source over a directory tree."""

    def __init__(
        self,
        root: str | Path,
        *,
        extensions: Iterable[str] | None = None,
        limit: int | None = DEFAULT_LIMIT,
        recursive: bool = True,
        delete_service: DeleteService | None = None,
        sorter: SortService | None = None,
    ) -> None:
        """Create a folder catalog.

        Args:
            root: Directory to scan.
            extensions: File suffixes treated as photos (case-insensitive).
            limit: Keep only the newest `limit` photos; None for no cap.
            recursive: Scan sub-directories too.
            delete_service: Recycle-bin service used by `delete`.
            sorter: Sorting service (defaults to `SortService`).
        """
        self._root = Path(root).expanduser()
        self._extensions = frozenset(
            (e if e.startswith(".") else f".{e}").lower()
            for e in (extensions or DEFAULT_EXTENSIONS)
        )
        self._limit = limit
        self._recursive = recursive
        self._deleter = delete_service or DeleteService()
        self._sorter = sorter or SortService()
        self._paths_by_id: dict[str, str] = {}

    @property
    def root(self) -> Path:
        return self._root

    def _iter_files(self) -> Iterator[Path]:
        def _on_error(err: OSError) -> None:
            # Only an unreadable root aborts the listing
            if err.filename is None or Path(err.filename) == self._root:
                raise err
            logger.warning("Skipping unreadable folder {}: {}", err.filename, err)

        if not self._recursive:
            for entry in self._root.iterdir():
                if entry.is_file():
                    yield entry
            return
        for dirpath, dirnames, filenames in os.walk(self._root, onerror=_on_error):
            # Skip hidden folders such as .thumbnails or .Trash
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for name in filenames:
                yield Path(dirpath) / name

    def list_photos(self) -> Sequence[Photo]:
        """Scan the root and return photos newest first."""
        if not self._root.exists():
            raise Unavailable(f"Photo folder not found: {self._root}")
        if not self._root.is_dir():
            raise Unavailable(f"Photo folder is not a directory: {self._root}")

        photos: list[Photo] = []
        try:
            for path in self._iter_files():
                if path.name.startswith(".") or path.suffix.lower() not in self._extensions:
                    continue
                locator = str(path)
                photo_id = str(path.resolve())
                photos.append(
                    Photo(
                        photo_id=photo_id,
                        created_at=get_creation_datetime(locator),
                        locator=locator,
                    )
                )
        except PermissionError as ex:
            raise AccessDenied(f"Access to {self._root} denied: {ex}") from ex
        except OSError as ex:
            raise Unavailable(f"Listing {self._root} failed: {ex}") from ex

        ordered = self._sorter.newest_first(photos)
        if self._limit is not None and len(ordered) > self._limit:
            logger.info("Catalog capped at {} of {} photos", self._limit, len(ordered))
            ordered = ordered[: self._limit]
        self._paths_by_id = {p.photo_id: p.locator for p in ordered}
        logger.info("Listed {} photos under {}", len(ordered), self._root)
        return ordered

    def delete(self, photo_ids: frozenset[str]) -> None:
        """Send the photos' files to the recycle bin.

        Raises:
            DeletionError: If any file could not be removed; `deleted_ids`
                lists the photos that were.
        """
        paths: dict[str, str] = {}
        for photo_id in photo_ids:
            paths[self._paths_by_id.get(photo_id, photo_id)] = photo_id
        result = self._deleter.execute_delete(sorted(paths), photo_ids=paths)
        deleted = [paths[p] for p in result.success_paths]
        for p in result.success_paths:
            self._paths_by_id.pop(paths[p], None)
        if result.failed:
            raise DeletionError(
                f"{len(result.failed)} of {len(paths)} photos could not be deleted",
                deleted_ids=deleted,
                failed=[(paths[p], reason) for p, reason in result.failed],
            )
