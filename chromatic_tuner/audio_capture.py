"""
Microphone capture with sounddevice.

The stream callback keeps the newest buffer_size samples in a ring buffer.
The tuner reads a copy of that window once per tick, so the analysis rate is
independent of the audio block size.
"""

import logging
import threading

import numpy as np

from .constants import BUFFER_SIZE, SAMPLE_RATE

logger = logging.getLogger(__name__)


class AudioCaptureError(RuntimeError):
    """The audio input could not be opened or read."""


class MicrophoneNotFoundError(AudioCaptureError):
    """No usable input device is available."""


class AudioCapture:
    """
    Mono input stream exposing the latest analysis window.
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        buffer_size: int = BUFFER_SIZE,
        device: int | str | None = None,
        block_size: int = 1024,
    ):
        """
        Initialize audio capture.

        Args:
            sample_rate: Requested sample rate in Hz
            buffer_size: Number of samples returned by read()
            device: Input device index or name (None = default device)
            block_size: Samples per stream callback
        """
        self._requested_rate = sample_rate
        self.buffer_size = buffer_size
        self.device = device
        self.block_size = block_size

        self._stream = None
        self._sample_rate = sample_rate
        self._lock = threading.Lock()
        self._buffer = np.zeros(buffer_size, dtype=np.float32)
        self._rms = 0.0
        self._peak = 0.0
        self._received = False

    def start(self):
        """
        Open the input stream.

        Raises:
            MicrophoneNotFoundError: If there is no input device
            AudioCaptureError: If the stream cannot be opened
        """
        if self._stream is not None:
            return

        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            # OSError: sounddevice is installed but PortAudio is missing
            raise AudioCaptureError(f"Audio backend unavailable: {e}") from e

        try:
            info = sd.query_devices(self.device, kind="input")
        except (ValueError, sd.PortAudioError) as e:
            raise MicrophoneNotFoundError(f"No microphone found: {e}") from e

        logger.info("Opening input device %r at %d Hz", info.get("name"), self._requested_rate)

        with self._lock:
            self._buffer = np.zeros(self.buffer_size, dtype=np.float32)
            self._rms = 0.0
            self._peak = 0.0
            self._received = False

        try:
            stream = sd.InputStream(
                device=self.device,
                samplerate=self._requested_rate,
                blocksize=self.block_size,
                channels=1,
                dtype=np.float32,
                callback=self._audio_callback,
            )
            stream.start()
        except (sd.PortAudioError, OSError, ValueError) as e:
            raise AudioCaptureError(str(e)) from e

        self._stream = stream
        self._sample_rate = int(stream.samplerate)
        logger.info("Audio capture started at %d Hz", self._sample_rate)

    def stop(self):
        """Stop and close the input stream."""
        if self._stream is None:
            return
        stream = self._stream
        self._stream = None
        stream.stop()
        stream.close()
        logger.info("Audio capture stopped")

    def _audio_callback(self, indata, frames, time, status):
        """Audio callback - append the new block to the ring buffer."""
        if status:
            logger.warning("Audio status: %s", status)

        samples = indata[:, 0]
        self.push(samples)

    def push(self, samples: np.ndarray):
        """Append samples to the analysis window, dropping the oldest."""
        samples = np.asarray(samples, dtype=np.float32)
        n = len(samples)
        if n == 0:
            return

        with self._lock:
            if n >= self.buffer_size:
                self._buffer[:] = samples[-self.buffer_size :]
            else:
                self._buffer = np.roll(self._buffer, -n)
                self._buffer[-n:] = samples
            self._rms = float(np.sqrt(np.mean(samples**2)))
            self._peak = float(np.max(np.abs(samples)))
            self._received = True

    def read(self) -> np.ndarray | None:
        """
        Latest analysis window, oldest sample first.

        Returns:
            Copy of the window, or None if no audio arrived yet
        """
        with self._lock:
            if not self._received:
                return None
            return self._buffer.copy()

    @property
    def sample_rate(self) -> int:
        """Actual stream sample rate (requested rate until started)."""
        return self._sample_rate

    @property
    def levels(self) -> tuple[float, float]:
        """(rms, peak) of the most recent audio block."""
        with self._lock:
            return self._rms, self._peak
