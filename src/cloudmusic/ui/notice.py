from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QEvent, Qt, QTimer, Signal
from PySide6.QtGui import QRegion
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QToolButton, QWidget

from cloudmusic.core.logger import get_logger

_logger = get_logger("notice")

NOTICE_TIMEOUT_MS = 3000
_MARGIN = 14


class InAppNotification(QFrame):
    """A single transient message with a close button."""

    dismissed = Signal(object)  # emits self

    def __init__(self, text: str, timeout_ms: int = NOTICE_TIMEOUT_MS):
        super().__init__()
        self.text = text
        self._timeout_ms = int(timeout_ms)
        self._destroyed = False

        self.setObjectName("InAppNotification")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet("""
        QFrame#InAppNotification {
            background: #0b1222;
            border: 1px solid #38bdf8;
            border-radius: 14px;
        }
        QLabel {
            color: #e5e7eb;
            font-size: 12px;
        }
        QToolButton {
            border: none;
            background: transparent;
            color: #e5e7eb;
            padding: 2px 6px;
        }
        QToolButton:hover {
            background: rgba(255,255,255,0.06);
            border-radius: 8px;
        }
        """)

        root = QHBoxLayout(self)
        root.setContentsMargins(12, 10, 10, 10)
        root.setSpacing(10)

        self.lbl = QLabel(text)
        self.lbl.setWordWrap(True)

        self.btn_close = QToolButton()
        self.btn_close.setText("✕")
        self.btn_close.setCursor(Qt.CursorShape.PointingHandCursor)
        self.btn_close.clicked.connect(self._dismiss)

        root.addWidget(self.lbl, 1)
        root.addWidget(self.btn_close, 0, Qt.AlignmentFlag.AlignTop)

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._dismiss)

    def show_on(self, overlay: "Overlay") -> None:
        self.setParent(overlay)
        self.setFixedWidth(min(420, max(260, overlay.width() // 2)))
        self.adjustSize()
        x = max(_MARGIN, (overlay.width() - self.width()) // 2)
        self.move(x, _MARGIN)
        self.show()
        self.raise_()
        overlay.hold(self)
        if self._timeout_ms > 0:
            self._timer.start(self._timeout_ms)

    def destroy_notification(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        self._timer.stop()
        self.hide()
        self.setParent(None)
        self.deleteLater()

    def _dismiss(self) -> None:
        self.dismissed.emit(self)


def mark_all_notif(text: str) -> InAppNotification:
    return InAppNotification(text)


class NoticeSlot:
    """
    Holds at most one visible notification on the overlay.

    Only the dispatcher (UI thread) writes the slot: `show()` takes the old
    notification out, destroys it, then installs and shows the new one.
    """

    def __init__(self, overlay: "Overlay"):
        self.overlay = overlay
        self._notice: Optional[InAppNotification] = None

    def show(self, text: str) -> None:
        notif = mark_all_notif(text)
        notif.dismissed.connect(self._on_dismissed)

        old, self._notice = self._notice, notif
        if old is not None:
            old.destroy_notification()

        notif.show_on(self.overlay)
        _logger.debug("notice: %s", text)

    def current(self) -> Optional[InAppNotification]:
        return self._notice

    def clear(self) -> None:
        old, self._notice = self._notice, None
        if old is not None:
            old.destroy_notification()
        self.overlay.release()

    def _on_dismissed(self, notif: InAppNotification) -> None:
        # A late timeout from a replaced notification must not clear the new one.
        if notif is self._notice:
            self.clear()


class Overlay(QWidget):
    """
    Full-window layer that notifications float on.

    Mouse events pass through to the window below except over the notification
    currently held.
    """

    def __init__(self, host: QWidget):
        super().__init__(host)
        self.host = host
        self.setObjectName("overlay")
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        host.installEventFilter(self)
        self.setGeometry(host.rect())
        self.show()

    def eventFilter(self, obj, event):
        if obj is self.host and event.type() == QEvent.Type.Resize:
            self.setGeometry(self.host.rect())
        return False

    def hold(self, widget: QWidget) -> None:
        self.setGeometry(self.host.rect())
        self.setMask(QRegion(widget.geometry()))
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, False)
        self.raise_()

    def release(self) -> None:
        self.clearMask()
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
