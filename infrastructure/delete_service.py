"""Recycle-bin deletion service.

Executes deletes by moving files to the recycle bin with `send2trash`, and
writes an audit CSV log for every request.
"""

from __future__ import annotations

from collections.abc import Mapping
import csv
from datetime import datetime
import os
from pathlib import Path

from loguru import logger
from send2trash import send2trash
from send2trash.exceptions import TrashPermissionError

from core.services.interfaces import DeleteResult
from infrastructure.logging import get_delete_log_directory


class DeleteService:
    """Coordinates recycle-bin deletes and audit logging."""

    def __init__(self, log_dir: str | None = None) -> None:
        """Create the service.

        Args:
            log_dir: Directory for audit CSVs; defaults to the app's
                delete-log directory.
        """
        self._log_dir = os.path.expandvars(log_dir) if log_dir else get_delete_log_directory()

    @staticmethod
    def _trash_one(path: str) -> str | None:
        """Move one file to the recycle bin. Returns the failure reason, or None."""
        target = os.path.normpath(path)
        if not os.path.exists(target):
            logger.error("Cannot delete missing file {}", target)
            return "File does not exist"
        try:
            send2trash(target)
            return None
        except TrashPermissionError as ex:
            logger.error("Recycle bin refused {}: {}", target, ex)
            return f"Permission denied: {ex}"
        except (UnicodeEncodeError, OSError) as first:
            # Some back ends reject relative or non-ASCII normalized paths
            logger.warning("Recycling {} failed, retrying with absolute path: {}", target, first)
            try:
                send2trash(os.path.abspath(path))
                return None
            except (UnicodeEncodeError, OSError) as second:
                logger.error("Recycling {} failed twice: {} / {}", path, first, second)
                return f"Multiple delete failures: {first}, {second}"

    def delete_to_recycle(self, paths: list[str]) -> DeleteResult:
        """Send each file to the recycle bin, collecting per-path outcomes."""
        result = DeleteResult(success_paths=[], failed=[])
        for path in paths:
            reason = self._trash_one(path)
            if reason is None:
                result.success_paths.append(path)
            else:
                result.failed.append((path, reason))
        return result

    def execute_delete(
        self, paths: list[str], photo_ids: Mapping[str, str] | None = None
    ) -> DeleteResult:
        """Delete `paths` and write an audit CSV log.

        Args:
            paths: Files to send to the recycle bin.
            photo_ids: Optional path -> photo id mapping recorded in the log.
        """
        result = self.delete_to_recycle(paths)
        try:
            result.log_path = self._write_audit(result, photo_ids or {})
        except (OSError, ValueError) as ex:
            logger.error("Could not write delete audit log: {}", ex)
        return result

    def _write_audit(self, result: DeleteResult, photo_ids: Mapping[str, str]) -> str:
        log_dir = Path(self._log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"delete_{datetime.now():%Y%m%d_%H%M%S_%f}.csv"
        rows = [(p, 1, "") for p in result.success_paths]
        rows += [(p, 0, reason) for p, reason in result.failed]
        with log_path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["PhotoId", "FilePath", "Success", "Reason"])
            writer.writerows([photo_ids.get(p, p), p, ok, reason] for p, ok, reason in rows)
        logger.info(
            "Delete audit {}: {} recycled, {} failed",
            log_path,
            len(result.success_paths),
            len(result.failed),
        )
        return str(log_path)
