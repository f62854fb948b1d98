"""Tests for frequency to note conversion."""

import numpy as np
import pytest

from chromatic_tuner.note_mapper import (
    NoteLabel,
    NoteMapper,
    frequency_to_note,
    note_frequency,
    round_half_up,
)


class TestRoundHalfUp:
    """Tests for the rounding used for notes, cents and display values."""

    def test_positive_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_negative_half_rounds_up(self):
        assert round_half_up(-2.5) == -2
        assert round_half_up(-0.5) == 0

    def test_one_decimal(self):
        assert round_half_up(1.25, 1) == pytest.approx(1.3)
        assert round_half_up(440.04, 1) == pytest.approx(440.0)


class TestFrequencyToNote:
    """Tests for note name, octave and cents."""

    def test_reference_is_a4(self):
        note = frequency_to_note(440.0)
        assert note == NoteLabel(name="A", octave=4, cents=0)
        assert note.label == "A4"

    def test_one_semitone_above_reference(self):
        note = frequency_to_note(440.0 * 2 ** (1 / 12))
        assert note.name == "A#"
        assert note.octave == 4
        assert note.cents == 0

    def test_middle_c(self):
        note = frequency_to_note(261.63)
        assert note.label == "C4"
        assert note.cents == 0

    def test_octave_changes_at_c(self):
        """B3 and C4 are in different octaves."""
        assert frequency_to_note(246.94).label == "B3"
        assert frequency_to_note(261.63).label == "C4"

    def test_low_e_string(self):
        assert frequency_to_note(82.41).label == "E2"

    def test_high_c(self):
        assert frequency_to_note(1046.5).label == "C6"

    def test_sharp_cents(self):
        note = frequency_to_note(440.0 * 2 ** (10 / 1200))
        assert note.label == "A4"
        assert note.cents == 10

    def test_flat_cents(self):
        note = frequency_to_note(440.0 * 2 ** (-15 / 1200))
        assert note.label == "A4"
        assert note.cents == -15

    def test_nearest_note_switches_past_half_semitone(self):
        """51 cents above A4 is 49 cents below A#4."""
        assert frequency_to_note(440.0 * 2 ** (49 / 1200)) == NoteLabel("A", 4, 49)
        assert frequency_to_note(440.0 * 2 ** (51 / 1200)) == NoteLabel("A#", 4, -49)

    def test_cents_always_within_half_semitone(self):
        for frequency in np.geomspace(30.0, 4000.0, 500):
            note = frequency_to_note(float(frequency))
            assert -50 <= note.cents <= 50, f"{frequency} Hz gave {note}"

    def test_below_note_zero(self):
        """Negative note numbers wrap into the scale and lower octaves."""
        assert frequency_to_note(note_frequency(0)).label == "C-1"
        assert frequency_to_note(note_frequency(-1)).label == "B-2"

    def test_custom_reference(self):
        assert frequency_to_note(442.0, reference=442.0) == NoteLabel("A", 4, 0)
        # 1200 * log2(440 / 442) = -7.85
        assert frequency_to_note(440.0, reference=442.0) == NoteLabel("A", 4, -8)

    @pytest.mark.parametrize("frequency", [0.0, -440.0, float("nan"), float("inf")])
    def test_invalid_frequency(self, frequency):
        with pytest.raises(ValueError):
            frequency_to_note(frequency)


class TestNoteMapper:
    """Tests for the mapper object."""

    def test_to_note_uses_reference(self):
        mapper = NoteMapper(reference=432.0)
        assert mapper.to_note(432.0).label == "A4"

    def test_midi_note(self):
        assert NoteLabel("A", 4, 0).midi_note == 69
        assert NoteLabel("C", 4, 0).midi_note == 60
        assert NoteLabel("C", -1, 0).midi_note == 0

    def test_note_frequency(self):
        mapper = NoteMapper()
        assert mapper.note_frequency(NoteLabel("A", 4, 0)) == pytest.approx(440.0)
        assert mapper.note_frequency(NoteLabel("A", 5, 0)) == pytest.approx(880.0)
        assert mapper.note_frequency(NoteLabel("C", 4, 0)) == pytest.approx(261.6256, abs=1e-3)

    def test_invalid_reference(self):
        with pytest.raises(ValueError):
            NoteMapper(reference=0.0)
