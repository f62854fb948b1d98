"""
Cents meter widget - horizontal scale with a needle for the tuning deviation.
"""

from PySide6.QtCore import Qt
from PySide6.QtGui import QBrush, QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from .styles import (
    ACCENT_GREEN,
    BORDER_COLOR,
    METER_BACKGROUND,
    PANEL_BACKGROUND,
    TEXT_SECONDARY,
    WARNING_ORANGE,
)


class CentsMeter(QWidget):
    """
    Horizontal tuning meter spanning -50 to +50 cents.

    Displays:
    - A scale with ticks every 10 cents and a center mark
    - A needle at the indicator position (0-100%)
    - Green needle when in tune, orange otherwise, gray without signal
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._percentage = 50.0
        self._in_tune = False
        self._active = False

        self.setMinimumSize(300, 48)

    def set_position(self, percentage: float, in_tune: bool):
        """
        Move the needle.

        Args:
            percentage: 0 = -50 cents, 50 = centered, 100 = +50 cents
            in_tune: Whether to draw the needle in the in-tune color
        """
        self._percentage = max(0.0, min(100.0, percentage))
        self._in_tune = in_tune
        self._active = True
        self.update()

    def set_inactive(self):
        """Center the needle and gray it out."""
        self._percentage = 50.0
        self._in_tune = False
        self._active = False
        self.update()

    def paintEvent(self, event):
        """Paint the meter."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        margin = 4
        width = self.width() - 2 * margin
        height = self.height() - 2 * margin

        # Background with border
        painter.setPen(QPen(QColor(BORDER_COLOR), 1))
        painter.setBrush(QBrush(QColor(PANEL_BACKGROUND)))
        painter.drawRoundedRect(margin, margin, width, height, 4, 4)

        # Scale track
        track_y = margin + height // 2
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(QColor(METER_BACKGROUND)))
        painter.drawRect(margin + 6, track_y - 2, width - 12, 4)

        # Ticks every 10 cents, longer at the center
        scale_x = margin + 6
        scale_width = width - 12
        painter.setPen(QPen(QColor(TEXT_SECONDARY), 1))
        for i in range(11):
            x = scale_x + int(scale_width * i / 10)
            tick = height // 3 if i == 5 else height // 6
            painter.drawLine(x, track_y - tick, x, track_y + tick)

        # Needle
        if self._active:
            color = QColor(ACCENT_GREEN if self._in_tune else WARNING_ORANGE)
        else:
            color = QColor(TEXT_SECONDARY).darker(150)
        needle_x = scale_x + int(scale_width * self._percentage / 100.0)
        painter.setPen(QPen(color, 4))
        painter.drawLine(needle_x, margin + 4, needle_x, margin + height - 4)
