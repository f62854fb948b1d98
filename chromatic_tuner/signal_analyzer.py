"""
Autocorrelation pitch estimation.

The buffer is normalized by its RMS level so that the correlation threshold
does not depend on input loudness. The best integer lag is then refined with
a parabola through the neighbouring correlation values, which gives continuous
frequency resolution without a longer buffer.
"""

from typing import NamedTuple

import numpy as np

from .constants import (
    CORRELATION_THRESHOLD,
    MAX_FREQUENCY,
    MIN_FREQUENCY,
    RMS_THRESHOLD,
    SAMPLE_RATE,
)


class PitchEstimate(NamedTuple):
    """Raw frequency estimate for one buffer."""
    frequency: float
    confidence: float  # Best normalized autocorrelation value


def rms(buffer: np.ndarray) -> float:
    """Root mean square level of a buffer."""
    if len(buffer) == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(buffer))))


def correlation_at(normalized: np.ndarray, lag: int) -> float:
    """Normalized autocorrelation of a buffer at a single lag."""
    size = len(normalized)
    return float(np.dot(normalized[: size - lag], normalized[lag:]) / (size - lag))


def best_lag(correlations: np.ndarray, first_lag: int) -> tuple[int, float]:
    """
    Pick the lag with the highest correlation.

    On equal values the smallest lag wins.

    Args:
        correlations: Correlation values for consecutive lags
        first_lag: Lag of correlations[0]

    Returns:
        (lag, correlation)
    """
    index = int(np.argmax(correlations))
    return first_lag + index, float(correlations[index])


class SignalAnalyzer:
    """
    Fundamental frequency estimator based on normalized autocorrelation.

    Only lags between sample_rate / max_frequency and sample_rate /
    min_frequency are searched, and never more than half the buffer, so the
    estimate is always backed by at least half the samples.
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        min_frequency: float = MIN_FREQUENCY,
        max_frequency: float = MAX_FREQUENCY,
        rms_threshold: float = RMS_THRESHOLD,
        correlation_threshold: float = CORRELATION_THRESHOLD,
    ):
        """
        Initialize analyzer.

        Args:
            sample_rate: Audio sample rate in Hz
            min_frequency: Lowest frequency to search for in Hz
            max_frequency: Highest frequency to search for in Hz
            rms_threshold: Buffers below this RMS level are treated as silence
            correlation_threshold: Best correlation must exceed this value
        """
        self.sample_rate = sample_rate
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency
        self.rms_threshold = rms_threshold
        self.correlation_threshold = correlation_threshold

    def lag_range(self, size: int) -> tuple[int, int]:
        """
        Lags searched for a buffer of the given size.

        Returns:
            (first, stop) with stop exclusive
        """
        first = int(self.sample_rate // self.max_frequency)
        stop = min(int(self.sample_rate // self.min_frequency), (size + 1) // 2)
        return first, stop

    def estimate_frequency(self, buffer: np.ndarray) -> float | None:
        """Frequency in Hz, or None if no reliable pitch was found."""
        estimate = self.estimate(buffer)
        if estimate is None:
            return None
        return estimate.frequency

    def estimate(self, buffer: np.ndarray) -> PitchEstimate | None:
        """
        Estimate the fundamental frequency of a buffer.

        Args:
            buffer: Mono audio samples in [-1, 1]

        Returns:
            PitchEstimate, or None for silence, noise and unusable buffers
        """
        samples = np.asarray(buffer, dtype=np.float64)
        if samples.ndim != 1:
            raise ValueError(f"Expected a mono buffer, got shape {samples.shape}")

        size = len(samples)
        first, stop = self.lag_range(size)
        if first < 1 or size < 2 * first or stop <= first:
            return None
        if not np.all(np.isfinite(samples)):
            return None

        level = rms(samples)
        if level < self.rms_threshold or not np.isfinite(level):
            return None

        normalized = samples / level

        correlations = np.array(
            [correlation_at(normalized, lag) for lag in range(first, stop)]
        )
        lag, correlation = best_lag(correlations, first)

        if correlation <= self.correlation_threshold:
            return None

        period = lag + self._parabolic_shift(normalized, lag)
        if period <= 0:
            return None
        return PitchEstimate(self.sample_rate / period, correlation)

    def _parabolic_shift(self, normalized: np.ndarray, lag: int) -> float:
        """Sub-sample offset of the correlation peak around an integer lag."""
        if lag - 1 < 0 or lag + 1 >= len(normalized):
            return 0.0

        y0 = correlation_at(normalized, lag - 1)
        y1 = correlation_at(normalized, lag)
        y2 = correlation_at(normalized, lag + 1)

        curvature = (y0 + y2 - 2 * y1) / 2
        if curvature == 0:
            return 0.0
        return (y0 - y2) / (2 * curvature)
