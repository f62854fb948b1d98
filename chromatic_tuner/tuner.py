"""
Tuning session: capture, detect and smooth once per tick.

The session does not schedule itself. A host loop (a Qt timer, a terminal
loop, a test) calls tick() at its own rate between start() and stop().
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

import numpy as np

from .audio_capture import AudioCapture, AudioCaptureError, MicrophoneNotFoundError
from .config import TunerConfig
from .display_smoother import DisplaySmoother, DisplayValues
from .pitch_detector import PitchDetector

logger = logging.getLogger(__name__)

IDLE_MESSAGE = 'Click "Start Tuner" to begin'
STARTING_MESSAGE = "Requesting microphone access..."
LISTENING_MESSAGE = "Listening..."


class AudioSource(Protocol):
    """Anything that can feed the session with analysis windows."""

    sample_rate: int

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read(self) -> np.ndarray | None: ...

    @property
    def levels(self) -> tuple[float, float]: ...


class StatusLevel(Enum):
    """Kind of status message."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: StatusLevel = StatusLevel.INFO


class TunerSession:
    """
    Runs the tuner pipeline for one audio input.

    The detector is created on start() for the sample rate the input actually
    opened with, so the same session can be restarted on another device.
    """

    def __init__(
        self,
        config: TunerConfig | None = None,
        capture_factory: Callable[[TunerConfig], AudioSource] | None = None,
    ):
        """
        Initialize tuner session.

        Args:
            config: Tuner settings (defaults when None)
            capture_factory: Builds the audio source for a config
                (sounddevice microphone capture by default)
        """
        self.config = config or TunerConfig()
        self._capture_factory = capture_factory or _default_capture

        self._capture: AudioSource | None = None
        self._detector: PitchDetector | None = None
        self._smoother = DisplaySmoother.from_config(self.config)

        self._running = False
        self._status = StatusMessage(IDLE_MESSAGE)
        self._last_display = DisplayValues.no_signal()

    def start(self) -> bool:
        """
        Open the audio input and begin listening.

        Returns:
            True if the session is running afterwards
        """
        if self._running:
            return True

        self._status = StatusMessage(STARTING_MESSAGE)
        try:
            capture = self._capture_factory(self.config)
            self._capture = capture
            capture.start()

            config = self.config.with_sample_rate(capture.sample_rate)
            self._detector = PitchDetector.from_config(config)
        except (AudioCaptureError, OSError, ValueError) as e:
            logger.error("Failed to start tuner: %s", e)
            self._status = StatusMessage(_start_error_text(e), StatusLevel.ERROR)
            self._cleanup()
            return False

        self._smoother.reset()
        self._running = True
        self._status = StatusMessage(LISTENING_MESSAGE, StatusLevel.SUCCESS)
        logger.info("Tuner listening at %d Hz", self._detector.sample_rate)
        return True

    def stop(self):
        """Stop listening and reset the display."""
        if not self._running:
            return

        self._running = False
        self._cleanup()
        self.reset()
        logger.info("Tuner stopped")

    def reset(self):
        """Show the idle state again."""
        self._smoother.reset()
        self._last_display = DisplayValues.no_signal()
        self._status = StatusMessage(IDLE_MESSAGE)

    def tick(self) -> DisplayValues | None:
        """
        Analyze the newest audio window.

        Returns:
            Display values for this tick, or None if nothing was analyzed
        """
        if not self._running or self._capture is None or self._detector is None:
            return None

        buffer = self._capture.read()
        if buffer is None:
            return None

        result = self._detector.detect(buffer)
        self._last_display = self._smoother.update(result)
        return self._last_display

    def _cleanup(self):
        if self._capture is not None:
            try:
                self._capture.stop()
            except AudioCaptureError as e:
                logger.warning("Error stopping audio capture: %s", e)
            self._capture = None
        self._detector = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def status(self) -> StatusMessage:
        return self._status

    @property
    def last_display(self) -> DisplayValues:
        """Display values from the latest tick (no signal before any tick)."""
        return self._last_display

    @property
    def input_levels(self) -> tuple[float, float]:
        """(rms, peak) of the latest audio block, zero when not running."""
        if not self._running or self._capture is None:
            return 0.0, 0.0
        return self._capture.levels


def _default_capture(config: TunerConfig) -> AudioCapture:
    return AudioCapture(sample_rate=config.sample_rate, buffer_size=config.buffer_size)


def _start_error_text(error: Exception) -> str:
    message = "Failed to start tuner. "
    if isinstance(error, MicrophoneNotFoundError):
        return message + "No microphone found."
    return message + str(error)
