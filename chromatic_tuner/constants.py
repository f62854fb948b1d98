"""
Session-wide defaults for the chromatic tuner.
"""

SAMPLE_RATE = 44100
BUFFER_SIZE = 8192  # Analysis window, long enough for low E2

# Detectable range: E2 (lowest guitar string) to C6
MIN_FREQUENCY = 82.0
MAX_FREQUENCY = 1047.0

A4_REFERENCE = 440.0
A4_MIDI = 69  # Note number of A4, counting from C-1
OCTAVE = 12
NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

RMS_THRESHOLD = 0.005
CORRELATION_THRESHOLD = 0.1

SMOOTHING_FACTOR = 0.7  # Higher = more smoothing
IN_TUNE_CENTS = 5
CENTS_RANGE = 50  # Indicator spans -50..+50 cents

NO_SIGNAL_NOTE = "--"
NO_SIGNAL_FREQUENCY = "-- Hz"
