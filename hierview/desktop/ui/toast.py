"""Toast notification system"""
from enum import Enum

from PySide6.QtCore import QEasingCurve, QPoint, QPropertyAnimation, Qt, QTimer
from PySide6.QtWidgets import QFrame, QGraphicsOpacityEffect, QLabel, QVBoxLayout, QWidget


class ToastType(Enum):
    """Toast notification types"""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


# background, icon
TOAST_STYLES = {
    ToastType.INFO: ("#3a6ea5", "ℹ"),
    ToastType.SUCCESS: ("#2e7d32", "✓"),
    ToastType.WARNING: ("#b26a00", "⚠"),
    ToastType.ERROR: ("#b3261e", "✕"),
}


class ToastWidget(QFrame):
    """Single toast notification, fades in and out on its own"""

    def __init__(self, parent: QWidget, message: str, toast_type: ToastType, duration: int):
        super().__init__(parent)
        self.duration = duration
        self.toast_type = toast_type
        self.message = message
        self.on_closed = None

        background, icon = TOAST_STYLES[toast_type]
        self.setStyleSheet(
            f"QFrame {{ background-color: {background}; color: white; border-radius: 8px; }}"
        )

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 10, 16, 10)

        self.label = QLabel(f"{icon}  {message}", self)
        self.label.setStyleSheet("background: transparent; color: white;")
        self.label.setWordWrap(True)
        self.label.setMaximumWidth(360)
        layout.addWidget(self.label)
        self.adjustSize()

        self.opacity_effect = QGraphicsOpacityEffect(self)
        self.setGraphicsEffect(self.opacity_effect)
        self._fade = None

    def show_animated(self):
        self.show()
        self._run_fade(0.0, 1.0, QEasingCurve.OutCubic)
        QTimer.singleShot(self.duration, self.hide_animated)

    def hide_animated(self):
        self._run_fade(1.0, 0.0, QEasingCurve.InCubic)
        self._fade.finished.connect(self._cleanup)

    def _run_fade(self, start: float, end: float, curve: QEasingCurve.Type):
        self._fade = QPropertyAnimation(self.opacity_effect, b"opacity")
        self._fade.setDuration(250)
        self._fade.setStartValue(start)
        self._fade.setEndValue(end)
        self._fade.setEasingCurve(curve)
        self._fade.start()

    def _cleanup(self):
        if self.on_closed:
            self.on_closed(self)
        self.deleteLater()


class ToastManager:
    """Stacks toasts in the top right corner of the parent widget"""

    SPACING = 8
    MARGIN_TOP = 16
    MARGIN_RIGHT = 16

    def __init__(self, parent: QWidget):
        self.parent = parent
        self.toasts: list[ToastWidget] = []

    def info(self, message: str, duration: int = 3000):
        self._show_toast(message, ToastType.INFO, duration)

    def success(self, message: str, duration: int = 3000):
        self._show_toast(message, ToastType.SUCCESS, duration)

    def warning(self, message: str, duration: int = 4000):
        self._show_toast(message, ToastType.WARNING, duration)

    def error(self, message: str, duration: int = 5000):
        self._show_toast(message, ToastType.ERROR, duration)

    def _show_toast(self, message: str, toast_type: ToastType, duration: int):
        toast = ToastWidget(self.parent, message, toast_type, duration)
        toast.on_closed = self._remove_toast
        self.toasts.append(toast)
        self._reposition_toasts()
        toast.show_animated()

    def _remove_toast(self, toast: ToastWidget):
        if toast in self.toasts:
            self.toasts.remove(toast)
            self._reposition_toasts()

    def _reposition_toasts(self):
        y_offset = self.MARGIN_TOP
        for toast in self.toasts:
            x = self.parent.width() - toast.width() - self.MARGIN_RIGHT
            toast.move(QPoint(max(x, 0), y_offset))
            toast.raise_()
            y_offset += toast.height() + self.SPACING
