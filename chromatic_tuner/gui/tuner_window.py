"""
Main application window for the chromatic tuner.
"""

import logging
import math
import sys

from PySide6.QtCore import QSettings, Qt, QTimer
from PySide6.QtWidgets import (
    QApplication,
    QDoubleSpinBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..config import TunerConfig
from ..display_smoother import DisplayValues
from ..tuner import STARTING_MESSAGE, TunerSession
from .cents_meter import CentsMeter
from .styles import (
    ACCENT_GREEN,
    MAIN_WINDOW_STYLE,
    STATUS_COLORS,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
    WARNING_ORANGE,
)

logger = logging.getLogger(__name__)


class TunerWindow(QMainWindow):
    """
    Main window for the chromatic tuner.

    Features:
    - Large note display with in-tune coloring
    - Smoothed frequency and cents readout
    - Cents meter needle
    - Start/Stop buttons and a status line
    - Reference (A4) setting, applied when the tuner is started
    """

    DEFAULTS = {
        "reference": 440.0,
    }

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Chromatic Tuner")
        self.setMinimumSize(420, 360)

        self._session = TunerSession()

        self._setup_ui()
        self.setStyleSheet(MAIN_WINDOW_STYLE)
        self._load_settings()

        # Tick timer, roughly once per display frame
        self._timer = QTimer()
        self._timer.timeout.connect(self._tick)

        self._show_display(DisplayValues.no_signal())
        self._show_status()
        self._show_level(0.0)

    def _setup_ui(self):
        """Set up the UI components."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(12)

        self._note_label = QLabel()
        self._note_label.setObjectName("noteLabel")
        self._note_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._note_label)

        self._frequency_label = QLabel()
        self._frequency_label.setObjectName("frequencyLabel")
        self._frequency_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._frequency_label)

        self._cents_label = QLabel()
        self._cents_label.setObjectName("centsLabel")
        self._cents_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._cents_label)

        self._cents_meter = CentsMeter()
        layout.addWidget(self._cents_meter)

        controls = QHBoxLayout()

        self._start_button = QPushButton("Start Tuner")
        self._start_button.clicked.connect(self._on_start)
        controls.addWidget(self._start_button)

        self._stop_button = QPushButton("Stop")
        self._stop_button.setEnabled(False)
        self._stop_button.clicked.connect(self._on_stop)
        controls.addWidget(self._stop_button)

        controls.addStretch()

        controls.addWidget(QLabel("A4:"))
        self._ref_spinbox = QDoubleSpinBox()
        self._ref_spinbox.setRange(400.0, 480.0)
        self._ref_spinbox.setDecimals(1)
        self._ref_spinbox.setSingleStep(0.5)
        self._ref_spinbox.setSuffix(" Hz")
        self._ref_spinbox.setValue(self.DEFAULTS["reference"])
        controls.addWidget(self._ref_spinbox)

        layout.addLayout(controls)

        self._status_label = QLabel()
        self._status_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self._status_label)

        self._level_label = QLabel()
        self._level_label.setAlignment(Qt.AlignCenter)
        self._level_label.setStyleSheet(f"color: {TEXT_SECONDARY};")
        layout.addWidget(self._level_label)

    def _on_start(self):
        """Start listening with the current settings."""
        self._start_button.setEnabled(False)
        self._session = TunerSession(TunerConfig(reference=self._ref_spinbox.value()))
        self._status_label.setText(STARTING_MESSAGE)
        QApplication.processEvents()

        if self._session.start():
            self._stop_button.setEnabled(True)
            self._ref_spinbox.setEnabled(False)
            self._timer.start(16)
        else:
            self._start_button.setEnabled(True)
        self._show_status()

    def _on_stop(self):
        """Stop listening and reset the display."""
        self._timer.stop()
        self._session.stop()
        self._start_button.setEnabled(True)
        self._stop_button.setEnabled(False)
        self._ref_spinbox.setEnabled(True)
        self._show_level(0.0)
        self._show_display(DisplayValues.no_signal())
        self._show_status()

    def _tick(self):
        display = self._session.tick()
        if display is not None:
            self._show_display(display)
        self._show_level(self._session.input_levels[0])

    def _show_level(self, rms: float):
        """Show the input RMS level in dBFS."""
        if rms <= 0.0:
            self._level_label.setText("Input: -- dB")
            return
        self._level_label.setText(f"Input: {20 * math.log10(rms):.0f} dB")

    def _show_display(self, display: DisplayValues):
        """Apply one tick's display values to the widgets."""
        self._note_label.setText(display.note_text)
        self._frequency_label.setText(display.frequency_text)
        self._cents_label.setText(display.cents_text)

        if not display.has_signal:
            self._note_label.setStyleSheet(f"color: {TEXT_PRIMARY};")
            self._cents_meter.set_inactive()
            return

        color = ACCENT_GREEN if display.is_in_tune else WARNING_ORANGE
        self._note_label.setStyleSheet(f"color: {color};")
        self._cents_meter.set_position(display.indicator_percentage, display.is_in_tune)

    def _show_status(self):
        status = self._session.status
        self._status_label.setText(status.text)
        self._status_label.setStyleSheet(f"color: {STATUS_COLORS[status.level.value]};")

    def closeEvent(self, event):
        """Handle window close."""
        self._save_settings()
        self._timer.stop()
        self._session.stop()
        event.accept()

    def _load_settings(self):
        """Load saved settings from QSettings."""
        settings = QSettings("chromatic-tuner", "ChromaticTuner")
        reference = settings.value("reference", self.DEFAULTS["reference"], type=float)
        self._ref_spinbox.setValue(reference)

    def _save_settings(self):
        """Save current settings to QSettings."""
        settings = QSettings("chromatic-tuner", "ChromaticTuner")
        settings.setValue("reference", self._ref_spinbox.value())


def main():
    """Main entry point for the chromatic tuner GUI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    window = TunerWindow()
    window.show()
    logger.info("Chromatic tuner initialized")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
