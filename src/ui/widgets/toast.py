from __future__ import annotations

from PySide6.QtCore import Qt, QTimer, QPoint, QPropertyAnimation, QEasingCurve
from PySide6.QtWidgets import (
    QWidget, QFrame, QLabel, QHBoxLayout, QGraphicsOpacityEffect,
)

# kind -> (background, border)
_KIND_COLORS = {
    "info": ("#0b1222", "#38bdf8"),
    "success": ("#052e1a", "#16a34a"),
    "warning": ("#2a1a05", "#f59e0b"),
    "error": ("#2a0a0a", "#ef4444"),
}


class ToastWidget(QFrame):
    def __init__(self, message: str, kind: str, parent: "ToastManager"):
        super().__init__(parent)
        bg, border = _KIND_COLORS.get(kind, _KIND_COLORS["info"])

        self.setObjectName("Toast")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet(f"""
        QFrame#Toast {{
            background: {bg};
            border: 1px solid {border};
            border-radius: 12px;
        }}
        QLabel {{ color: #e5e7eb; font-size: 12px; }}
        """)

        row = QHBoxLayout(self)
        row.setContentsMargins(12, 8, 8, 8)
        label = QLabel(message)
        label.setWordWrap(True)
        row.addWidget(label, 1)

        self._opacity = QGraphicsOpacityEffect(self)
        self._opacity.setOpacity(1.0)
        self.setGraphicsEffect(self._opacity)
        self._fade: QPropertyAnimation | None = None

    def fade_out(self, on_done):
        self._fade = QPropertyAnimation(self._opacity, b"opacity", self)
        self._fade.setDuration(180)
        self._fade.setStartValue(self._opacity.opacity())
        self._fade.setEndValue(0.0)
        self._fade.setEasingCurve(QEasingCurve.Type.InCubic)
        self._fade.finished.connect(on_done)
        self._fade.start()


class ToastManager(QWidget):
    """
    Transparent overlay on the host window; toasts stack top-right, newest first.
    """
    MAX_VISIBLE = 4
    MARGIN = 14
    SPACING = 8

    def __init__(self, host: QWidget):
        super().__init__(host)
        self.host = host
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self._toasts: list[ToastWidget] = []
        self.show()

    def show_toast(self, message: str, notify_type: str = "info", timeout_ms: int = 3000):
        toast = ToastWidget(message, notify_type, self)
        toast.setFixedWidth(min(420, max(260, self.host.width() // 2)))
        self._toasts.insert(0, toast)

        for old in self._toasts[self.MAX_VISIBLE:]:
            self._remove(old)

        self._layout()
        toast.show()
        QTimer.singleShot(max(500, int(timeout_ms)), lambda: self.dismiss(toast))

    def dismiss(self, toast: ToastWidget):
        if toast in self._toasts:
            toast.fade_out(lambda: self._remove(toast))

    def _remove(self, toast: ToastWidget):
        if toast in self._toasts:
            self._toasts.remove(toast)
        toast.hide()
        toast.deleteLater()
        self._layout()

    def _layout(self):
        self.setGeometry(self.host.rect())
        self.raise_()
        y = self.MARGIN
        for toast in self._toasts:
            toast.adjustSize()
            toast.move(QPoint(self.width() - self.MARGIN - toast.width(), y))
            y += toast.sizeHint().height() + self.SPACING
