"""Photo card that follows the pointer and reports completed swipes."""

from __future__ import annotations

import time

from PySide6.QtCore import QPointF, QRectF, Qt, QVariantAnimation, Signal
from PySide6.QtGui import (
    QColor,
    QFont,
    QImage,
    QMouseEvent,
    QPainter,
    QPainterPath,
    QPaintEvent,
    QPixmap,
)
from PySide6.QtWidgets import QSizePolicy, QWidget

from app.viewmodels.swipe_vm import SwipeDecision, SwipeGestureAdapter
from app.views.constants import (
    CARD_HEIGHT_RATIO,
    CARD_MARGIN_PX,
    CARD_RADIUS_PX,
    DELETE_COLOR,
    DELETE_TEXT,
    EXIT_ANIMATION_MS,
    INDICATOR_FONT_PT,
    INDICATOR_SIDE_PX,
    INDICATOR_TILT_DEG,
    INDICATOR_TOP_PX,
    KEEP_COLOR,
    KEEP_TEXT,
    RESET_ANIMATION_MS,
    VELOCITY_WINDOW_S,
)


class SwipeCard(QWidget):
    """Renders one photo and turns drags into `decided(SwipeDecision)`.

    The widget only animates; applying the decision is up to the receiver
    of `decided`, which is emitted once the exit animation completes.
    """

    decided = Signal(object)  # SwipeDecision

    def __init__(
        self,
        adapter: SwipeGestureAdapter,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._adapter = adapter
        self._pixmap: QPixmap | None = None
        self._press_x: float | None = None
        self._samples: list[tuple[float, float]] = []
        self._animation: QVariantAnimation | None = None
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(240, 320)

    @property
    def adapter(self) -> SwipeGestureAdapter:
        return self._adapter

    def set_image(self, image: QImage | None) -> None:
        self._pixmap = QPixmap.fromImage(image) if image is not None else None
        self.update()

    def reset(self) -> None:
        """Stop any animation and put the card back at rest."""
        if self._animation is not None:
            self._animation.stop()
            self._animation = None
        self._adapter.reset()
        self.update()

    def card_rect(self) -> QRectF:
        width = max(1.0, self.width() - 2 * CARD_MARGIN_PX)
        available = self.height() - 2 * CARD_MARGIN_PX
        height = max(1.0, min(available, self.height() * CARD_HEIGHT_RATIO))
        return QRectF((self.width() - width) / 2, (self.height() - height) / 2, width, height)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        # Distance threshold tracks the card width
        self._adapter.thresholds = self._adapter.thresholds.for_card_width(
            self.card_rect().width()
        )
        super().resizeEvent(event)

    # Pointer handling
    def mousePressEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if event.button() != Qt.LeftButton or self._pixmap is None or self._animation is not None:
            return
        x = event.position().x()
        self._press_x = x
        self._samples = [(time.monotonic(), x)]
        self._adapter.begin()
        self.update()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if self._press_x is None:
            return
        x = event.position().x()
        now = time.monotonic()
        self._samples.append((now, x))
        self._samples = [s for s in self._samples if now - s[0] <= VELOCITY_WINDOW_S]
        self._adapter.update(x - self._press_x)
        self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        if self._press_x is None or event.button() != Qt.LeftButton:
            return
        x = event.position().x()
        translation = x - self._press_x
        velocity = self._velocity(time.monotonic(), x)
        self._press_x = None
        decision = self._adapter.end(translation, velocity)
        if decision in (SwipeDecision.KEEP, SwipeDecision.DELETE):
            direction = 1.0 if decision is SwipeDecision.KEEP else -1.0
            self._animate_to(direction * self.width(), EXIT_ANIMATION_MS, decision)
        else:
            self._animate_back(translation)

    def _velocity(self, now: float, x: float) -> float:
        """Horizontal velocity in px/s over the recent sample window."""
        if not self._samples:
            return 0.0
        t0, x0 = self._samples[0]
        dt = now - t0
        if dt <= 0:
            return 0.0
        return (x - x0) / dt

    def _animate_to(self, target: float, duration: int, decision: SwipeDecision) -> None:
        start = self._adapter.presentation.translate_x
        anim = QVariantAnimation(self)
        anim.setStartValue(float(start))
        anim.setEndValue(float(target))
        anim.setDuration(duration)
        anim.valueChanged.connect(self._on_exit_step)
        anim.finished.connect(lambda: self._on_exit_finished(decision))
        self._animation = anim
        anim.start()

    def _on_exit_step(self, value: float) -> None:
        self._adapter.presentation.translate_x = float(value)
        self.update()

    def _on_exit_finished(self, decision: SwipeDecision) -> None:
        self._animation = None
        self.decided.emit(decision)

    def _animate_back(self, start: float) -> None:
        anim = QVariantAnimation(self)
        anim.setStartValue(float(start))
        anim.setEndValue(0.0)
        anim.setDuration(RESET_ANIMATION_MS)
        anim.valueChanged.connect(lambda v: self._on_reset_step(float(v)))
        anim.finished.connect(self._on_reset_finished)
        self._animation = anim
        anim.start()

    def _on_reset_step(self, value: float) -> None:
        # Presentation was already reset by the adapter; replay the drag visually
        self._adapter.update(value)
        self.update()

    def _on_reset_finished(self) -> None:
        self._animation = None
        self._adapter.reset()
        self.update()

    # Painting
    def paintEvent(self, event: QPaintEvent) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        p = self._adapter.presentation
        rect = self.card_rect()
        center = rect.center()

        painter.translate(center.x() + p.translate_x, center.y())
        painter.rotate(p.rotation)
        painter.scale(p.scale, p.scale)
        local = QRectF(-rect.width() / 2, -rect.height() / 2, rect.width(), rect.height())

        clip = QPainterPath()
        clip.addRoundedRect(local, CARD_RADIUS_PX, CARD_RADIUS_PX)
        painter.fillPath(clip, QColor(Qt.white))
        if self._pixmap is not None and not self._pixmap.isNull():
            painter.save()
            painter.setClipPath(clip)
            self._draw_cover(painter, local)
            painter.restore()

        self._draw_indicator(painter, local, KEEP_TEXT, KEEP_COLOR, p.keep_opacity, left=True)
        self._draw_indicator(
            painter, local, DELETE_TEXT, DELETE_COLOR, p.delete_opacity, left=False
        )
        painter.end()

    def _draw_cover(self, painter: QPainter, target: QRectF) -> None:
        """Scale the pixmap to cover `target`, cropping the overflow."""
        pm = self._pixmap
        assert pm is not None
        scale = max(target.width() / pm.width(), target.height() / pm.height())
        w, h = pm.width() * scale, pm.height() * scale
        dest = QRectF(target.center().x() - w / 2, target.center().y() - h / 2, w, h)
        painter.drawPixmap(dest, pm, QRectF(pm.rect()))

    def _draw_indicator(
        self, painter: QPainter, card: QRectF, text: str, color, opacity: float, left: bool
    ) -> None:
        if opacity <= 0:
            return
        painter.save()
        painter.setOpacity(opacity)
        font = QFont()
        font.setPointSize(INDICATOR_FONT_PT)
        font.setBold(True)
        painter.setFont(font)
        metrics = painter.fontMetrics()
        box_w = metrics.horizontalAdvance(text) + 40
        box_h = metrics.height() + 20
        x = card.left() + INDICATOR_SIDE_PX if left else card.right() - INDICATOR_SIDE_PX - box_w
        y = card.top() + INDICATOR_TOP_PX
        painter.translate(QPointF(x + box_w / 2, y + box_h / 2))
        painter.rotate(-INDICATOR_TILT_DEG if left else INDICATOR_TILT_DEG)
        box = QRectF(-box_w / 2, -box_h / 2, box_w, box_h)
        path = QPainterPath()
        path.addRoundedRect(box, 8, 8)
        painter.fillPath(path, color)
        painter.setPen(QColor(Qt.white))
        painter.drawText(box, Qt.AlignCenter, text)
        painter.restore()
