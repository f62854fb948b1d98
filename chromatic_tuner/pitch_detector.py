"""
Monophonic pitch detection for the tuner display.
"""

from dataclasses import dataclass

import numpy as np

from .config import TunerConfig
from .constants import (
    A4_REFERENCE,
    CORRELATION_THRESHOLD,
    MAX_FREQUENCY,
    MIN_FREQUENCY,
    RMS_THRESHOLD,
    SAMPLE_RATE,
)
from .note_mapper import NoteMapper, round_half_up
from .signal_analyzer import SignalAnalyzer


@dataclass(frozen=True)
class PitchResult:
    """Detected pitch for one buffer."""
    frequency: float  # Hz, rounded to 0.1
    note: str  # e.g., "A4"
    cents: int  # Deviation from the nearest note
    note_name: str = ""  # e.g., "A"
    octave: int = 0
    confidence: float = 0.0


class PitchDetector:
    """
    Detects the pitch of a mono buffer and names the nearest note.

    Frequencies outside [min_frequency, max_frequency] are rejected even when
    the analyzer reports them, since parabolic refinement can move an
    estimate slightly past the searched lag range.
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        reference: float = A4_REFERENCE,
        min_frequency: float = MIN_FREQUENCY,
        max_frequency: float = MAX_FREQUENCY,
        rms_threshold: float = RMS_THRESHOLD,
        correlation_threshold: float = CORRELATION_THRESHOLD,
        analyzer: SignalAnalyzer | None = None,
        mapper: NoteMapper | None = None,
    ):
        """
        Initialize detector.

        Args:
            sample_rate: Audio sample rate in Hz
            reference: Reference frequency for A4 in Hz
            min_frequency: Lowest accepted frequency in Hz
            max_frequency: Highest accepted frequency in Hz
            rms_threshold: Silence threshold passed to the analyzer
            correlation_threshold: Acceptance threshold passed to the analyzer
            analyzer: Use this analyzer instead of building one
            mapper: Use this note mapper instead of building one
        """
        self.sample_rate = sample_rate
        self.reference = reference
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency

        self._analyzer = analyzer or SignalAnalyzer(
            sample_rate=sample_rate,
            min_frequency=min_frequency,
            max_frequency=max_frequency,
            rms_threshold=rms_threshold,
            correlation_threshold=correlation_threshold,
        )
        self._mapper = mapper or NoteMapper(reference)

    @classmethod
    def from_config(cls, config: TunerConfig) -> "PitchDetector":
        return cls(
            sample_rate=config.sample_rate,
            reference=config.reference,
            min_frequency=config.min_frequency,
            max_frequency=config.max_frequency,
            rms_threshold=config.rms_threshold,
            correlation_threshold=config.correlation_threshold,
        )

    def detect(self, buffer: np.ndarray) -> PitchResult | None:
        """
        Detect the pitch of a buffer.

        Args:
            buffer: Mono audio samples in [-1, 1]

        Returns:
            PitchResult, or None when no pitch in range was found
        """
        estimate = self._analyzer.estimate(buffer)
        if estimate is None:
            return None

        frequency = estimate.frequency
        if frequency < self.min_frequency or frequency > self.max_frequency:
            return None

        label = self._mapper.to_note(frequency)
        return PitchResult(
            frequency=round_half_up(frequency, 1),
            note=label.label,
            cents=label.cents,
            note_name=label.name,
            octave=label.octave,
            confidence=estimate.confidence,
        )
