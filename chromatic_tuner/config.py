"""
Tuner configuration.

All values are fixed for the lifetime of a tuning session. A new session is
started to apply changed settings.
"""

from dataclasses import dataclass, replace

from .constants import (
    A4_REFERENCE,
    BUFFER_SIZE,
    CORRELATION_THRESHOLD,
    IN_TUNE_CENTS,
    MAX_FREQUENCY,
    MIN_FREQUENCY,
    RMS_THRESHOLD,
    SAMPLE_RATE,
    SMOOTHING_FACTOR,
)


@dataclass(frozen=True)
class TunerConfig:
    """
    Settings shared by the detector, the smoother and the audio capture.

    Attributes:
        sample_rate: Capture sample rate in Hz
        buffer_size: Number of samples analyzed per tick
        min_frequency: Lowest accepted pitch in Hz (inclusive)
        max_frequency: Highest accepted pitch in Hz (inclusive)
        reference: Frequency of A4 in Hz
        rms_threshold: Buffers quieter than this are treated as silence
        correlation_threshold: Minimum normalized autocorrelation for a pitch
        smoothing_factor: Weight of the previous display value (0 = none)
        in_tune_threshold: Largest |cents| shown as in tune
    """
    sample_rate: int = SAMPLE_RATE
    buffer_size: int = BUFFER_SIZE
    min_frequency: float = MIN_FREQUENCY
    max_frequency: float = MAX_FREQUENCY
    reference: float = A4_REFERENCE
    rms_threshold: float = RMS_THRESHOLD
    correlation_threshold: float = CORRELATION_THRESHOLD
    smoothing_factor: float = SMOOTHING_FACTOR
    in_tune_threshold: int = IN_TUNE_CENTS

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")
        if self.min_frequency <= 0:
            raise ValueError(f"min_frequency must be positive, got {self.min_frequency}")
        if self.max_frequency <= self.min_frequency:
            raise ValueError(
                f"max_frequency ({self.max_frequency}) must be above "
                f"min_frequency ({self.min_frequency})"
            )
        if self.max_frequency > self.sample_rate / 2:
            raise ValueError(
                f"max_frequency ({self.max_frequency}) exceeds the Nyquist "
                f"frequency of {self.sample_rate} Hz"
            )
        if self.reference <= 0:
            raise ValueError(f"reference must be positive, got {self.reference}")
        if self.rms_threshold <= 0:
            raise ValueError(f"rms_threshold must be positive, got {self.rms_threshold}")
        if not 0.0 <= self.correlation_threshold < 1.0:
            raise ValueError(
                f"correlation_threshold must be in [0, 1), got {self.correlation_threshold}"
            )
        if not 0.0 <= self.smoothing_factor < 1.0:
            raise ValueError(
                f"smoothing_factor must be in [0, 1), got {self.smoothing_factor}"
            )
        if self.in_tune_threshold < 0:
            raise ValueError(
                f"in_tune_threshold must not be negative, got {self.in_tune_threshold}"
            )

    def with_sample_rate(self, sample_rate: int) -> "TunerConfig":
        """Return a copy for the rate the audio device actually runs at."""
        return replace(self, sample_rate=int(sample_rate))
