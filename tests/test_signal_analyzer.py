"""
Tests for SignalAnalyzer using synthetic signals.

Most tones are generated with an exponential decay, like a plucked string,
which makes the first period the clear correlation winner. Steady pure sines
are covered separately: their correlation peaks at every multiple of the
period are almost equal, so above roughly 164 Hz a subharmonic can win.
"""

import numpy as np
import pytest

from chromatic_tuner import BUFFER_SIZE, SAMPLE_RATE
from chromatic_tuner.signal_analyzer import (
    PitchEstimate,
    SignalAnalyzer,
    best_lag,
    correlation_at,
    rms,
)


def generate_plucked_tone(
    frequency: float,
    duration_samples: int = BUFFER_SIZE,
    sample_rate: int = SAMPLE_RATE,
    amplitude: float = 0.5,
    decay_seconds: float = 0.075,
) -> np.ndarray:
    """Generate a decaying sine wave at the given frequency."""
    t = np.arange(duration_samples) / sample_rate
    envelope = np.exp(-t / decay_seconds)
    return (amplitude * envelope * np.sin(2 * np.pi * frequency * t)).astype(np.float64)


class TestHelpers:
    """Tests for the module-level helpers."""

    def test_rms_of_constant(self):
        assert rms(np.full(100, 0.5)) == pytest.approx(0.5)

    def test_rms_of_empty_buffer(self):
        assert rms(np.array([])) == 0.0

    def test_correlation_at_lag(self):
        """Correlation is the mean product over the overlapping samples."""
        x = np.array([1.0, 2.0, 3.0, 4.0])
        # (1*3 + 2*4) / 2
        assert correlation_at(x, 2) == pytest.approx(5.5)

    def test_best_lag_first_maximum_wins(self):
        """Equal correlations keep the smallest lag."""
        lag, correlation = best_lag(np.array([0.2, 0.5, 0.5, 0.1]), first_lag=10)
        assert lag == 11
        assert correlation == pytest.approx(0.5)


class TestLagRange:
    """Tests for the searched lag range."""

    def test_default_range(self):
        analyzer = SignalAnalyzer()
        # 44100 / 1047 = 42.1, 44100 / 82 = 537.8
        assert analyzer.lag_range(BUFFER_SIZE) == (42, 537)

    def test_range_limited_to_half_buffer(self):
        analyzer = SignalAnalyzer()
        assert analyzer.lag_range(100) == (42, 50)

    def test_odd_buffer_size(self):
        """Lags must stay below N/2, also for odd N."""
        analyzer = SignalAnalyzer()
        assert analyzer.lag_range(101) == (42, 51)


class TestSilenceAndInvalidInput:
    """Buffers that must not produce a pitch."""

    def setup_method(self):
        self.analyzer = SignalAnalyzer()

    def test_all_zeros(self):
        assert self.analyzer.estimate(np.zeros(BUFFER_SIZE)) is None

    def test_below_rms_threshold(self):
        signal = generate_plucked_tone(440.0, amplitude=0.001)
        assert rms(signal) < 0.005
        assert self.analyzer.estimate_frequency(signal) is None

    def test_white_noise(self):
        """Noise has no dominant periodicity."""
        rng = np.random.default_rng(0)
        noise = rng.normal(0.0, 0.3, BUFFER_SIZE)
        assert self.analyzer.estimate(noise) is None

    def test_empty_buffer(self):
        assert self.analyzer.estimate(np.array([])) is None

    def test_undersized_buffer(self):
        """Buffers shorter than twice the smallest lag are rejected."""
        signal = generate_plucked_tone(440.0, duration_samples=80)
        assert self.analyzer.estimate(signal) is None

    def test_nan_sample(self):
        signal = generate_plucked_tone(440.0)
        signal[100] = np.nan
        assert self.analyzer.estimate(signal) is None

    def test_infinite_sample(self):
        signal = generate_plucked_tone(440.0)
        signal[5000] = np.inf
        assert self.analyzer.estimate(signal) is None

    def test_multichannel_buffer_rejected(self):
        with pytest.raises(ValueError):
            self.analyzer.estimate(np.zeros((BUFFER_SIZE, 2)))

    def test_plain_list_accepted(self):
        assert self.analyzer.estimate([0.0] * BUFFER_SIZE) is None


class TestFrequencyEstimation:
    """Pitch accuracy on synthetic tones."""

    def setup_method(self):
        self.analyzer = SignalAnalyzer()

    @pytest.mark.parametrize("frequency", [110.0, 146.83, 196.0, 220.0, 329.63, 440.0])
    def test_within_one_percent(self, frequency):
        estimate = self.analyzer.estimate(generate_plucked_tone(frequency))

        assert estimate is not None, f"No pitch for {frequency} Hz"
        assert isinstance(estimate, PitchEstimate)
        error = abs(estimate.frequency - frequency) / frequency
        assert error < 0.01, f"Detected {estimate.frequency:.2f} Hz for {frequency} Hz"

    def test_exact_period_tone(self):
        """441 Hz has a period of exactly 100 samples at 44.1 kHz."""
        t = np.arange(BUFFER_SIZE) / SAMPLE_RATE
        signal = 0.5 * np.cos(2 * np.pi * 441.0 * t)

        frequency = self.analyzer.estimate_frequency(signal)
        assert frequency == pytest.approx(441.0, rel=0.005)

    def test_confidence_is_best_correlation(self):
        estimate = self.analyzer.estimate(generate_plucked_tone(220.0))
        assert estimate is not None
        assert 0.5 < estimate.confidence < 1.1

    def test_loudness_does_not_change_estimate(self):
        """Normalization makes the result independent of input level."""
        quiet = self.analyzer.estimate(generate_plucked_tone(196.0, amplitude=0.05))
        loud = self.analyzer.estimate(generate_plucked_tone(196.0, amplitude=0.9))

        assert quiet is not None and loud is not None
        assert quiet.frequency == pytest.approx(loud.frequency, rel=1e-9)
        assert quiet.confidence == pytest.approx(loud.confidence, rel=1e-9)

    def test_other_sample_rate(self):
        analyzer = SignalAnalyzer(sample_rate=48000)
        signal = generate_plucked_tone(220.0, sample_rate=48000)

        frequency = analyzer.estimate_frequency(signal)
        assert frequency is not None
        assert abs(frequency - 220.0) / 220.0 < 0.01

    def test_flat_correlation_skips_refinement(self):
        """A constant signal correlates equally at every lag: first lag, no shift."""
        frequency = self.analyzer.estimate_frequency(np.full(BUFFER_SIZE, 0.5))
        assert frequency == pytest.approx(SAMPLE_RATE / 42)

    def test_correlation_threshold(self):
        """A stricter threshold than any correlation rejects the tone."""
        analyzer = SignalAnalyzer(correlation_threshold=0.999999)
        assert analyzer.estimate(generate_plucked_tone(220.0)) is None

    @pytest.mark.parametrize("overshoot", [0.0, 1.0])
    def test_non_positive_period_rejected(self, monkeypatch, overshoot):
        """A refinement that moves the period to zero or below gives no pitch."""
        monkeypatch.setattr(
            self.analyzer, "_parabolic_shift", lambda normalized, lag: -lag - overshoot
        )
        tone = generate_plucked_tone(220.0)

        assert self.analyzer.estimate(tone) is None
        assert self.analyzer.estimate_frequency(tone) is None


def generate_sine(frequency: float, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Generate a steady sine wave filling one buffer."""
    t = np.arange(BUFFER_SIZE) / sample_rate
    return 0.5 * np.sin(2 * np.pi * frequency * t)


class TestPureSine:
    """
    Steady sines follow the plain correlation peak search.

    Below about 164 Hz two periods no longer fit in the 537-sample lag range,
    so the fundamental is the only candidate. Higher sines can lock onto the
    multiple of the period that lands closest to a whole-sample lag and read
    as frequency / k.
    """

    def setup_method(self):
        self.analyzer = SignalAnalyzer()

    @pytest.mark.parametrize("frequency", [82.41, 98.0, 110.0, 130.81, 146.83, 155.56])
    def test_single_period_in_range(self, frequency):
        _, stop = self.analyzer.lag_range(BUFFER_SIZE)
        assert 2 * SAMPLE_RATE / frequency >= stop

        detected = self.analyzer.estimate_frequency(generate_sine(frequency))

        assert detected is not None
        assert abs(detected - frequency) / frequency < 0.01

    @pytest.mark.parametrize(
        "frequency,divisor",
        [
            (196.0, 2),
            (220.0, 2),
            (246.94, 3),
            (261.63, 2),
            (329.63, 4),
            (440.0, 4),
            (523.25, 4),
            (880.0, 9),
            (1000.0, 10),
        ],
    )
    def test_subharmonic_lock(self, frequency, divisor):
        detected = self.analyzer.estimate_frequency(generate_sine(frequency))

        assert detected == pytest.approx(frequency / divisor, rel=0.01)
