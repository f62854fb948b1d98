"""
chromatic_tuner - Real-time chromatic instrument tuner using autocorrelation pitch detection
"""

from .config import TunerConfig
from .constants import A4_REFERENCE, BUFFER_SIZE, NOTE_NAMES, SAMPLE_RATE
from .display_smoother import DisplaySmoother, DisplayValues, SmoothingState
from .note_mapper import NoteLabel, NoteMapper, frequency_to_note
from .pitch_detector import PitchDetector, PitchResult
from .signal_analyzer import PitchEstimate, SignalAnalyzer
from .tuner import StatusLevel, StatusMessage, TunerSession

__version__ = "0.1.0"
__all__ = [
    "SignalAnalyzer",
    "PitchEstimate",
    "NoteMapper",
    "NoteLabel",
    "frequency_to_note",
    "PitchDetector",
    "PitchResult",
    "DisplaySmoother",
    "DisplayValues",
    "SmoothingState",
    "TunerConfig",
    "TunerSession",
    "StatusLevel",
    "StatusMessage",
    "SAMPLE_RATE",
    "BUFFER_SIZE",
    "A4_REFERENCE",
    "NOTE_NAMES",
]
