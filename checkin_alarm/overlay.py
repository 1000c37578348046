# -*- coding: utf-8 -*-
import logging

from PyQt5.QtWidgets import QApplication, QWidget, QVBoxLayout, QLabel, QPushButton
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QPainter, QColor, QFont

logger = logging.getLogger(__name__)

TEST_TEXT = "テスト通知\nアラームが動作しています"


class PresentationFailure(RuntimeError):
    """The overlay window could not be shown."""

# --- Full-Screen Overlay Class ---

class ReminderOverlay(QWidget):
    closed = pyqtSignal(QWidget)

    def __init__(self, text, screen=None, background=(0, 0, 0), opacity=80):
        super().__init__()
        self.text = text
        self.background = background
        self.alpha = int(opacity * 255 / 100)
        self.setWindowFlags(Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint | Qt.Tool)
        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setAttribute(Qt.WA_DeleteOnClose)

        if screen is None: screen = QApplication.primaryScreen()
        if screen is None:
            raise PresentationFailure("no screen available")
        self.setGeometry(screen.geometry())

        layout = QVBoxLayout(self)
        layout.addStretch(1)
        self.label = QLabel(text)
        self.label.setAlignment(Qt.AlignCenter)
        self.label.setWordWrap(True)
        self.label.setFont(QFont("Arial", 40))
        self.label.setStyleSheet("color: white;")
        layout.addWidget(self.label)
        self.dismiss_button = QPushButton("閉じる")
        self.dismiss_button.setFont(QFont("Arial", 16))
        self.dismiss_button.setFixedWidth(200)
        self.dismiss_button.clicked.connect(self.close)
        layout.addWidget(self.dismiss_button, 0, Qt.AlignHCenter)
        layout.addStretch(1)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.close()
        else:
            super().keyPressEvent(event)

    def closeEvent(self, event):
        self.closed.emit(self)
        super().closeEvent(event)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(*self.background, self.alpha))
        painter.drawRect(self.rect())


class OverlayPresenter:
    """Keeps at most one ReminderOverlay on screen."""

    def __init__(self):
        self.window = None

    @property
    def is_active(self):
        return self.window is not None

    def display(self, text):
        if self.is_active:
            logger.debug("Overlay already visible, ignoring display request.")
            return False
        overlay = ReminderOverlay(text)
        overlay.closed.connect(self._on_closed)
        overlay.showFullScreen()
        overlay.raise_(); overlay.activateWindow()
        self.window = overlay
        logger.debug("Overlay shown: %s", text.replace("\n", " / "))
        return True

    def dismiss(self):
        if self.window is not None:
            self.window.close()

    def _on_closed(self, overlay_widget):
        """Callback slot when the overlay closes itself."""
        if overlay_widget is self.window:
            self.window = None
            logger.debug("Overlay dismissed.")
