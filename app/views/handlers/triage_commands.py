"""TriageCommandsHandler: user-facing session commands with dialogs and status."""

from __future__ import annotations

from typing import Any, Protocol

from PySide6.QtWidgets import QMessageBox, QWidget
from loguru import logger

from core.errors import AccessDenied, NotInQueue, Unavailable


class UIUpdateCallback(Protocol):
    """Protocol for UI update callbacks."""

    def render(self) -> None:
        """Re-render every view from the session state."""
        ...


class StatusReporter(Protocol):
    """Protocol for status reporting callback."""

    def show_status(self, message: str, timeout: int = 3000) -> None:
        """Show status message."""
        ...


class TriageCommandsHandler:
    """Runs session commands and reports their results.

    This class encapsulates the command workflows of the window:
    - catalog load / refresh with error dialogs
    - undo, reset with confirmation, deletion with confirmation
    - restart
    """

    def __init__(
        self,
        session: Any,
        settings: Any,
        parent_widget: QWidget,
        ui_updater: UIUpdateCallback,
        status_reporter: StatusReporter,
    ) -> None:
        """Initialize with required services and callbacks.

        Args:
            session: `TriageSession` driven by the commands
            settings: Settings instance for configuration
            parent_widget: Parent widget for dialogs
            ui_updater: Callback for UI updates
            status_reporter: Callback for status messages
        """
        self.session = session
        self.settings = settings
        self.parent = parent_widget
        self.ui_updater = ui_updater
        self.status_reporter = status_reporter

    def confirm(self, title: str, message: str) -> bool:
        """Modal yes/no confirmation used by destructive commands."""
        resp = QMessageBox.question(
            self.parent, title, message, QMessageBox.Yes | QMessageBox.Cancel, QMessageBox.Cancel
        )
        return resp == QMessageBox.Yes

    def _confirm_delete(self, title: str, message: str) -> bool:
        if self.settings is not None and not bool(self.settings.get("delete.confirm", True)):
            return True
        return self.confirm(title, message)

    def load_catalog(self, is_refresh: bool = False) -> bool:
        """Load or refresh the catalog. Returns True on success."""
        try:
            self.session.load()
        except AccessDenied as ex:
            if not is_refresh:
                QMessageBox.warning(
                    self.parent,
                    "Permission denied",
                    f"Please grant photo library access to use this app.\n{ex}",
                )
            self.status_reporter.show_status("Photo library access denied")
            return False
        except Unavailable as ex:
            if not is_refresh:
                QMessageBox.warning(self.parent, "Photos unavailable", str(ex))
            self.status_reporter.show_status("Photo library unavailable; try refreshing")
            return False
        finally:
            self.ui_updater.render()
        if not is_refresh:
            self.status_reporter.show_status(f"Loaded {len(self.session.catalog)} photos")
        return True

    def keep_current(self) -> None:
        self._decide(self.session.keep_current)

    def delete_current(self) -> None:
        self._decide(self.session.mark_current_for_deletion)

    def _decide(self, transition: Any) -> None:
        try:
            transition()
        except NotInQueue as ex:
            logger.error("Decision rejected: {}", ex)
        self._report_notice()
        self.ui_updater.render()

    def commit_swipe(self, adapter: Any, decision: Any) -> None:
        """Apply a completed swipe through the gesture adapter."""
        self._decide(lambda: adapter.commit(decision, self.session))

    def undo(self) -> None:
        action = self.session.undo()
        if action is not None:
            self.status_reporter.show_status(f"Undid {action.kind.value}")
        self._report_notice()
        self.ui_updater.render()

    def reset_all(self) -> None:
        if self.session.reset_all_with_confirmation(self.confirm):
            self.status_reporter.show_status("All choices cleared")
        self.ui_updater.render()

    def confirm_deletion(self) -> None:
        if self.session.marked_count == 0:
            QMessageBox.information(self.parent, "No Photos", "No photos are marked for deletion.")
            return
        self.session.confirm_and_execute_deletion(self._confirm_delete)
        self._report_notice()
        self.ui_updater.render()

    def restart(self) -> None:
        self.session.restart_session()
        self._report_notice()
        self.ui_updater.render()

    def deletion_finished(self) -> None:
        """Report a completed asynchronous deletion."""
        self._report_notice()
        self.ui_updater.render()

    def _report_notice(self) -> None:
        notice = self.session.pop_notice()
        if notice:
            self.status_reporter.show_status(notice, timeout=5000)
