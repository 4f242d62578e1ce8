from __future__ import annotations

import argparse
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication, QFileDialog
from loguru import logger

from app.views.main_window import MainWindow
from infrastructure.delete_service import DeleteService
from infrastructure.folder_catalog import FolderCatalogSource
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="swipe-triage", description="Swipe through photos, newest first."
    )
    parser.add_argument("folder", nargs="?", help="Photo folder to review")
    parser.add_argument(
        "--settings", default=str(BASE_DIR / "settings.json"), help="Path to settings.json"
    )
    parser.add_argument("--log-level", default=None, help="Override logging.level")
    # Qt consumes its own arguments from sys.argv
    args, _unknown = parser.parse_known_args(argv)
    return args


def _build_source(settings: JsonSettings, root: str) -> FolderCatalogSource:
    limit = settings.get("catalog.limit", 1000)
    deleter = DeleteService(log_dir=settings.get("delete.log_dir") or None)
    return FolderCatalogSource(
        root,
        extensions=settings.get("catalog.extensions"),
        limit=int(limit) if limit else None,
        recursive=bool(settings.get("catalog.recursive", True)),
        delete_service=deleter,
    )


def main() -> int:
    args = _parse_args(sys.argv[1:])
    settings = JsonSettings(args.settings, required=False)
    level = (args.log_level or settings.get("logging.level", "INFO") or "INFO").upper()
    log_dir = init_logging(settings.get("logging.dir") or None, level=level)
    logger.info("Starting; settings={} logs={}", settings.path, log_dir)

    app = QApplication(sys.argv)

    root = args.folder or settings.get("catalog.root") or ""
    if not root:
        root = QFileDialog.getExistingDirectory(None, "Choose photo folder", str(Path.home()))
    if not root:
        logger.info("No photo folder chosen; exiting")
        return 0

    source = _build_source(settings, root)
    win = MainWindow(source=source, image_service=ImageService(settings), settings=settings)
    win.show()
    win.commands.load_catalog()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
