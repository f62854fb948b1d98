"""
Exponential smoothing of pitch results for display.

Raw detections jitter by a few cents from frame to frame. Blending each new
value with the previous display value keeps the needle readable while still
following real tuning changes within a few ticks.
"""

from dataclasses import dataclass, replace

from .config import TunerConfig
from .constants import (
    CENTS_RANGE,
    IN_TUNE_CENTS,
    NO_SIGNAL_FREQUENCY,
    NO_SIGNAL_NOTE,
    SMOOTHING_FACTOR,
)
from .note_mapper import round_half_up
from .pitch_detector import PitchResult


@dataclass
class SmoothingState:
    """Smoothed values carried between ticks."""
    smoothed_frequency: float | None = None  # None until the first detection
    smoothed_cents: float = 0.0


@dataclass(frozen=True)
class DisplayValues:
    """Everything the presentation layer needs for one tick."""
    note_text: str
    frequency_text: str
    cents_text: str
    indicator_percentage: float  # 0 = -50 cents, 50 = centered, 100 = +50 cents
    is_in_tune: bool
    has_signal: bool

    @classmethod
    def no_signal(cls) -> "DisplayValues":
        return cls(
            note_text=NO_SIGNAL_NOTE,
            frequency_text=NO_SIGNAL_FREQUENCY,
            cents_text="0",
            indicator_percentage=50.0,
            is_in_tune=False,
            has_signal=False,
        )


def smooth(
    state: SmoothingState,
    result: PitchResult | None,
    factor: float = SMOOTHING_FACTOR,
) -> SmoothingState:
    """
    Advance the smoothing state by one detection.

    The frequency is seeded from the first detection after silence, but the
    cents value restarts from 0 and is always blended, so the needle swings
    in from the center when a note starts.

    Args:
        state: State after the previous tick
        result: Detection for this tick, None for no pitch
        factor: Weight of the previous value, in [0, 1)

    Returns:
        New state; the input state is not modified
    """
    if result is None:
        return SmoothingState()

    if state.smoothed_frequency is None:
        frequency = result.frequency
    else:
        frequency = factor * state.smoothed_frequency + (1 - factor) * result.frequency

    cents = factor * state.smoothed_cents + (1 - factor) * result.cents
    return SmoothingState(smoothed_frequency=frequency, smoothed_cents=cents)


def format_frequency(frequency: float) -> str:
    """Frequency text with one decimal, dropping a trailing ".0"."""
    value = round_half_up(frequency, 1)
    return f"{value:g} Hz"


def format_cents(cents: int) -> str:
    sign = "+" if cents > 0 else ""
    return f"{sign}{cents}"


def indicator_percentage(cents: int) -> float:
    """Position of the cents indicator, 0-100 across -50..+50 cents."""
    clamped = max(-CENTS_RANGE, min(CENTS_RANGE, cents))
    return ((clamped + CENTS_RANGE) / (2 * CENTS_RANGE)) * 100


class DisplaySmoother:
    """
    Turns successive pitch results into stable display values.

    A smoother owns its state; update() must be called from one place at a
    time, once per tick.
    """

    def __init__(
        self,
        smoothing_factor: float = SMOOTHING_FACTOR,
        in_tune_threshold: int = IN_TUNE_CENTS,
    ):
        """
        Initialize display smoother.

        Args:
            smoothing_factor: Weight of the previous value (0 = no smoothing)
            in_tune_threshold: Largest |cents| shown as in tune
        """
        if not 0.0 <= smoothing_factor < 1.0:
            raise ValueError(f"smoothing_factor must be in [0, 1), got {smoothing_factor}")
        self.smoothing_factor = smoothing_factor
        self.in_tune_threshold = in_tune_threshold
        self._state = SmoothingState()

    @classmethod
    def from_config(cls, config: TunerConfig) -> "DisplaySmoother":
        return cls(
            smoothing_factor=config.smoothing_factor,
            in_tune_threshold=config.in_tune_threshold,
        )

    def update(self, result: PitchResult | None) -> DisplayValues:
        """
        Add a detection and return the values to display.

        Args:
            result: Detection for this tick, None for no pitch

        Returns:
            DisplayValues for this tick
        """
        self._state = smooth(self._state, result, self.smoothing_factor)

        if result is None:
            return DisplayValues.no_signal()

        display_cents = int(round_half_up(self._state.smoothed_cents))
        return DisplayValues(
            note_text=result.note,
            frequency_text=format_frequency(self._state.smoothed_frequency),
            cents_text=format_cents(display_cents),
            indicator_percentage=indicator_percentage(display_cents),
            is_in_tune=abs(display_cents) <= self.in_tune_threshold,
            has_signal=True,
        )

    def reset(self):
        """Forget smoothed values (e.g., when the tuner stops)."""
        self._state = SmoothingState()

    @property
    def state(self) -> SmoothingState:
        """Copy of the current smoothing state."""
        return replace(self._state)
