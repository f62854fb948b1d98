"""
Frequency to note conversion in 12-tone equal temperament.
"""

import math
from dataclasses import dataclass

from .constants import A4_MIDI, A4_REFERENCE, NOTE_NAMES, OCTAVE


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up (2.5 -> 3, -2.5 -> -2)."""
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale


@dataclass(frozen=True)
class NoteLabel:
    """Nearest equal-tempered note for a frequency."""
    name: str  # e.g., "C", "F#"
    octave: int  # e.g., 4
    cents: int  # Deviation from the note, -50..50

    @property
    def label(self) -> str:
        """Note name with octave, e.g. "A4"."""
        return f"{self.name}{self.octave}"

    @property
    def midi_note(self) -> int:
        """Note number counting semitones from C-1."""
        return (self.octave + 1) * OCTAVE + NOTE_NAMES.index(self.name)


def frequency_to_note(frequency: float, reference: float = A4_REFERENCE) -> NoteLabel:
    """
    Map a frequency to the nearest note and its cents deviation.

    Args:
        frequency: Frequency in Hz, must be positive
        reference: Frequency of A4 in Hz

    Returns:
        NoteLabel with |cents| <= 50
    """
    if not math.isfinite(frequency) or frequency <= 0:
        raise ValueError(f"Frequency must be positive and finite, got {frequency}")
    if reference <= 0:
        raise ValueError(f"Reference must be positive, got {reference}")

    semitones = OCTAVE * math.log2(frequency / reference)
    nearest = int(round_half_up(semitones))
    cents = int(round_half_up((semitones - nearest) * 100))

    note = nearest + A4_MIDI
    # Python's % and // already floor towards negative infinity
    name = NOTE_NAMES[note % OCTAVE]
    octave = note // OCTAVE - 1
    return NoteLabel(name=name, octave=octave, cents=cents)


def note_frequency(midi_note: int, reference: float = A4_REFERENCE) -> float:
    """Equal-tempered frequency of a note number."""
    return reference * 2 ** ((midi_note - A4_MIDI) / OCTAVE)


class NoteMapper:
    """Converts frequencies to note labels for a fixed A4 reference."""

    def __init__(self, reference: float = A4_REFERENCE):
        if reference <= 0:
            raise ValueError(f"Reference must be positive, got {reference}")
        self.reference = reference

    def to_note(self, frequency: float) -> NoteLabel:
        return frequency_to_note(frequency, self.reference)

    def note_frequency(self, label: NoteLabel) -> float:
        """Exact frequency of the note a label points at."""
        return note_frequency(label.midi_note, self.reference)
