"""MainWindow: header commands, the swipe card, and the finished / message page."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QEvent, Qt, Signal
from PySide6.QtGui import QFont, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.photo_vm import PhotoVM
from app.viewmodels.session_vm import create_session
from app.viewmodels.swipe_vm import SwipeDecision, SwipeGestureAdapter, SwipeThresholds
from app.views.constants import (
    BACKGROUND_COLOR,
    NOTICE_TIMEOUT_MS,
    SUBTITLE_COLOR,
    TEXT_COLOR,
)
from app.views.handlers.triage_commands import TriageCommandsHandler
from app.views.image_tasks import DeletionTaskRunner, ImageTaskRunner, preview_token
from app.views.widgets.swipe_card import SwipeCard
from core.models import SessionPhase
from core.services.interfaces import ICatalogSource

_PAGE_MESSAGE = 0
_PAGE_CARD = 1


class MainWindow(QMainWindow):
    """Main application window.

    Owns the triage session and re-renders every view from it after each
    command; the session itself never calls back into the UI.
    """

    imageLoaded = Signal(str, str, object)  # token, path, QImage
    deletionFinished = Signal(object, object)  # DeletionBatch, DeletionError | None

    def __init__(
        self,
        source: ICatalogSource,
        image_service: Any | None = None,
        settings: Any | None = None,
    ) -> None:
        """Initialize MainWindow with its services.

        Args:
            source: Catalog source the session lists and deletes through
            image_service: Image service for decoding card previews
            settings: Settings instance for configuration
        """
        super().__init__()
        self._settings = settings
        self._preview_side = 2048
        if settings is not None:
            try:
                self._preview_side = int(settings.get("preview.max_side", 2048) or 2048)
            except (ValueError, TypeError):
                logger.warning("Invalid preview.max_side setting, using 2048")

        self._image_runner = ImageTaskRunner(service=image_service, receiver=self)
        self._deletion_runner = DeletionTaskRunner(source=source, receiver=self)
        self.session = create_session(source, runner=self._deletion_runner)

        self._adapter = SwipeGestureAdapter(SwipeThresholds.from_settings(settings, 400))
        self._current_token: str | None = None
        self._was_inactive = False

        self.commands = TriageCommandsHandler(
            session=self.session,
            settings=settings,
            parent_widget=self,
            ui_updater=self,
            status_reporter=self,
        )

        self._setup_ui()
        self._connect_signals()

    # Setup
    def _setup_ui(self) -> None:
        self.setWindowTitle("Swipe Triage")
        self.resize(480, 860)
        self.setStyleSheet(f"background-color: {BACKGROUND_COLOR}; color: {TEXT_COLOR};")

        central = QWidget()
        root = QVBoxLayout(central)
        root.setContentsMargins(20, 20, 20, 20)

        header = QHBoxLayout()
        self.btn_undo = QPushButton("Undo")
        self.btn_reset = QPushButton("Reset")
        self.btn_confirm = QPushButton("Delete Marked")
        header.addWidget(self.btn_undo)
        header.addStretch(1)
        header.addWidget(self.btn_reset)
        header.addStretch(1)
        header.addWidget(self.btn_confirm)
        root.addLayout(header)

        self.pages = QStackedWidget()

        message_page = QWidget()
        msg_layout = QVBoxLayout(message_page)
        msg_layout.addStretch(1)
        self.title_label = QLabel()
        title_font = QFont()
        title_font.setPointSize(28)
        title_font.setBold(True)
        self.title_label.setFont(title_font)
        self.title_label.setAlignment(Qt.AlignCenter)
        self.subtitle_label = QLabel()
        self.subtitle_label.setAlignment(Qt.AlignCenter)
        self.subtitle_label.setWordWrap(True)
        self.subtitle_label.setStyleSheet(f"color: {SUBTITLE_COLOR}; font-size: 16px;")
        self.btn_restart = QPushButton("Start Over")
        self.btn_retry = QPushButton("Retry")
        msg_layout.addWidget(self.title_label)
        msg_layout.addWidget(self.subtitle_label)
        msg_layout.addSpacing(30)
        msg_layout.addWidget(self.btn_restart, alignment=Qt.AlignCenter)
        msg_layout.addWidget(self.btn_retry, alignment=Qt.AlignCenter)
        msg_layout.addStretch(1)
        self.pages.addWidget(message_page)

        self.card = SwipeCard(self._adapter)
        self.pages.addWidget(self.card)
        root.addWidget(self.pages, 1)

        self.setCentralWidget(central)

    def _connect_signals(self) -> None:
        self.imageLoaded.connect(self._on_image_loaded)
        self.deletionFinished.connect(self._on_deletion_finished)
        self.card.decided.connect(self._on_swipe_decided)

        self.btn_undo.clicked.connect(self.commands.undo)
        self.btn_reset.clicked.connect(self.commands.reset_all)
        self.btn_confirm.clicked.connect(self.commands.confirm_deletion)
        self.btn_restart.clicked.connect(self.commands.restart)
        self.btn_retry.clicked.connect(lambda: self.commands.load_catalog())

        QShortcut(QKeySequence(Qt.Key_Right), self, activated=self.commands.keep_current)
        QShortcut(QKeySequence(Qt.Key_Left), self, activated=self.commands.delete_current)
        QShortcut(QKeySequence.Undo, self, activated=self.commands.undo)
        QShortcut(QKeySequence.Refresh, self, activated=self._refresh)

    def _refresh(self) -> None:
        self.commands.load_catalog(is_refresh=True)

    # StatusReporter
    def show_status(self, message: str, timeout: int = NOTICE_TIMEOUT_MS) -> None:
        self.statusBar().showMessage(message, timeout)

    # UIUpdateCallback
    def render(self) -> None:
        """Re-render header, card and message page from the session."""
        s = self.session
        self.btn_undo.setEnabled(s.can_undo)
        self.btn_confirm.setEnabled(s.marked_count > 0 and not s.is_deleting)
        self.btn_reset.setEnabled(s.phase is not SessionPhase.LOADING)
        self.btn_retry.setVisible(False)
        self.btn_restart.setVisible(False)

        if s.access_denied:
            self._show_message(
                "Photo Access Needed", "Grant access to the photo folder, then retry."
            )
            self.btn_retry.setVisible(True)
            return
        if s.phase is SessionPhase.LOADING:
            self._show_message("Loading…", "")
            self.btn_retry.setVisible(True)
            return
        if not s.catalog:
            self._show_message("No Photos Found", "Your photo library appears to be empty.")
            return
        photo = s.current_photo
        if photo is None:
            self._show_message("No More Images", s.finished_message)
            self.btn_restart.setVisible(True)
            self.btn_restart.setEnabled(not s.is_deleting)
            return

        self.pages.setCurrentIndex(_PAGE_CARD)
        vm = PhotoVM(photo)
        token = preview_token(photo.locator, self._preview_side)
        if token != self._current_token:
            self.card.reset()
            self.card.set_image(None)
            self._current_token = self._image_runner.request_preview(
                photo.locator, self._preview_side
            )
        self.setWindowTitle(f"Swipe Triage - {vm.file_name} ({len(s.queue)} left)")

    def _show_message(self, title: str, subtitle: str) -> None:
        self._current_token = None
        self.card.reset()
        self.title_label.setText(title)
        self.subtitle_label.setText(subtitle)
        self.pages.setCurrentIndex(_PAGE_MESSAGE)
        self.setWindowTitle("Swipe Triage")

    # Slots
    def _on_image_loaded(self, token: str, path: str, image: object) -> None:
        if token != self._current_token:
            return
        if image is None:
            logger.warning("Preview unavailable for {}", path)
        self.card.set_image(image)  # type: ignore[arg-type]
        photo = self.session.current_photo
        if photo is not None:
            self.show_status(PhotoVM(photo).caption, 0)

    def _on_swipe_decided(self, decision: SwipeDecision) -> None:
        self.commands.commit_swipe(self._adapter, decision)
        self.card.reset()

    def _on_deletion_finished(self, batch: object, error: object) -> None:
        self._deletion_runner.dispatch(batch, error)  # type: ignore[arg-type]
        self.commands.deletion_finished()

    def changeEvent(self, event: QEvent) -> None:  # type: ignore[override]
        # Coming back to the foreground picks up photos added meanwhile
        if event.type() == QEvent.ActivationChange:
            if not self.isActiveWindow():
                self._was_inactive = True
            elif self._was_inactive and self.session.phase is not SessionPhase.LOADING:
                self._was_inactive = False
                self._refresh()
        super().changeEvent(event)
