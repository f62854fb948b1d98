"""
Offline analysis of recorded audio.

Runs the same detector and smoother the live tuner uses over a WAV file,
frame by frame, so detection problems can be reproduced from a recording.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import numpy as np
from scipy.io import wavfile

from .config import TunerConfig
from .constants import A4_REFERENCE
from .display_smoother import DisplaySmoother, DisplayValues
from .note_mapper import NoteLabel, NoteMapper
from .pitch_detector import PitchDetector, PitchResult

logger = logging.getLogger(__name__)


@dataclass
class TrackPoint:
    """Detection at one frame of a recording."""
    time: float  # Start of the frame in seconds
    result: PitchResult | None
    display: DisplayValues


@dataclass
class TrackSummary:
    """Statistics over the detected frames of a recording."""
    frame_count: int
    detected_count: int
    median_frequency: float | None = None
    most_common_note: str | None = None
    mean_cents: float | None = None
    target_frequency: float | None = None  # Exact frequency of most_common_note
    median_offset_cents: float | None = None  # median_frequency relative to the target

    @property
    def detection_rate(self) -> float:
        if self.frame_count == 0:
            return 0.0
        return self.detected_count / self.frame_count


def load_wav(path: str | Path) -> tuple[np.ndarray, int]:
    """
    Load a WAV file as mono float samples.

    Integer formats are scaled to [-1, 1]. Multi-channel files are mixed
    down by averaging the channels.

    Args:
        path: Path to the WAV file

    Returns:
        (samples, sample_rate)

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Recording not found: {path}")

    sample_rate, data = wavfile.read(file_path)

    if data.dtype == np.uint8:
        samples = (data.astype(np.float64) - 128.0) / 128.0
    elif np.issubdtype(data.dtype, np.integer):
        samples = data.astype(np.float64) / float(np.iinfo(data.dtype).max + 1)
    else:
        samples = data.astype(np.float64)

    if samples.ndim > 1:
        samples = samples.mean(axis=1)

    logger.info(
        "Loaded %s: %d samples at %d Hz (%.1fs)",
        file_path.name, len(samples), sample_rate, len(samples) / sample_rate,
    )
    return samples, int(sample_rate)


def iter_frames(samples: np.ndarray, size: int, hop: int) -> Iterator[tuple[int, np.ndarray]]:
    """Yield (start, frame) for every complete frame."""
    if size <= 0 or hop <= 0:
        raise ValueError(f"Frame size and hop must be positive, got {size} and {hop}")
    for start in range(0, len(samples) - size + 1, hop):
        yield start, samples[start : start + size]


def analyze_recording(
    samples: np.ndarray,
    sample_rate: int,
    config: TunerConfig | None = None,
    hop_size: int | None = None,
) -> list[TrackPoint]:
    """
    Run the tuner pipeline over a recording.

    Args:
        samples: Mono samples in [-1, 1]
        sample_rate: Sample rate of the recording in Hz
        config: Tuner settings (its sample rate is replaced by the recording's)
        hop_size: Samples between frames (default: a quarter frame)

    Returns:
        One TrackPoint per analyzed frame
    """
    config = (config or TunerConfig()).with_sample_rate(sample_rate)
    hop = hop_size or max(1, config.buffer_size // 4)

    detector = PitchDetector.from_config(config)
    smoother = DisplaySmoother.from_config(config)

    points = []
    for start, frame in iter_frames(samples, config.buffer_size, hop):
        result = detector.detect(frame)
        display = smoother.update(result)
        points.append(TrackPoint(time=start / sample_rate, result=result, display=display))

    logger.debug("Analyzed %d frames", len(points))
    return points


def summarize_track(points: list[TrackPoint], reference: float = A4_REFERENCE) -> TrackSummary:
    """
    Summarize the detected frames of a pitch track.

    Args:
        points: Pitch track from analyze_recording
        reference: A4 frequency the track was analyzed with

    Returns:
        TrackSummary (detection statistics only when nothing was detected)
    """
    detected = [p.result for p in points if p.result is not None]
    summary = TrackSummary(frame_count=len(points), detected_count=len(detected))
    if not detected:
        return summary

    summary.median_frequency = float(np.median([r.frequency for r in detected]))
    summary.most_common_note = Counter(r.note for r in detected).most_common(1)[0][0]
    summary.mean_cents = float(np.mean([r.cents for r in detected]))

    target = next(r for r in detected if r.note == summary.most_common_note)
    label = NoteLabel(name=target.note_name, octave=target.octave, cents=0)
    summary.target_frequency = NoteMapper(reference).note_frequency(label)
    summary.median_offset_cents = float(
        1200 * np.log2(summary.median_frequency / summary.target_frequency)
    )
    return summary
