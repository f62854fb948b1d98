"""
Analyze a WAV recording with the tuner pipeline.

Prints the detected note track and a summary, and optionally plots the
smoothed frequency and cents over time.

Usage:
    python scripts/analyze_recording.py guitar_e2.wav
    python scripts/analyze_recording.py guitar_e2.wav --reference 442 --plot track.png
"""

import argparse
import logging
from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from chromatic_tuner.config import TunerConfig
from chromatic_tuner.constants import A4_REFERENCE, BUFFER_SIZE
from chromatic_tuner.recording import TrackPoint, analyze_recording, load_wav, summarize_track


def plot_track(points: list[TrackPoint], output_path: Path, title: str) -> None:
    """Plot detected frequency and cents over time.

    Args:
        points: Pitch track from analyze_recording
        output_path: Where to save the PNG
        title: Figure title
    """
    detected = [p for p in points if p.result is not None]
    times = [p.time for p in detected]

    fig, (ax_freq, ax_cents) = plt.subplots(2, 1, figsize=(12, 7), sharex=True)

    ax_freq.plot(times, [p.result.frequency for p in detected], '.', color='tab:blue', markersize=4)
    ax_freq.set_ylabel('Frequency (Hz)')
    ax_freq.set_title(title)
    ax_freq.grid(True, alpha=0.3)

    ax_cents.plot(times, [p.result.cents for p in detected], '.', color='tab:gray',
                  markersize=3, label='raw')
    ax_cents.plot(times, [int(p.display.cents_text) for p in detected], '-', color='tab:green',
                  label='display')
    ax_cents.axhspan(-5, 5, color='tab:green', alpha=0.1)
    ax_cents.set_ylim(-50, 50)
    ax_cents.set_ylabel('Cents')
    ax_cents.set_xlabel('Time (s)')
    ax_cents.legend(loc='upper right')
    ax_cents.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_path, dpi=120)
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description=__doc__.split('\n\n')[0])
    parser.add_argument('wav', type=Path, help='Recording to analyze')
    parser.add_argument('--reference', type=float, default=A4_REFERENCE, help='A4 frequency in Hz')
    parser.add_argument('--buffer-size', type=int, default=BUFFER_SIZE, help='Samples per frame')
    parser.add_argument('--hop', type=int, default=None, help='Samples between frames')
    parser.add_argument('--plot', type=Path, default=None, help='Save a plot of the track')
    parser.add_argument('-v', '--verbose', action='store_true', help='Print every frame')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    samples, sample_rate = load_wav(args.wav)
    config = TunerConfig(
        sample_rate=sample_rate,
        buffer_size=args.buffer_size,
        reference=args.reference,
    )
    points = analyze_recording(samples, sample_rate, config=config, hop_size=args.hop)

    if args.verbose:
        print(f"{'Time':>8}  {'Note':>5}  {'Freq':>10}  {'Cents':>6}  {'Display':>10}")
        for p in points:
            if p.result is None:
                print(f"{p.time:8.3f}  {'--':>5}")
                continue
            print(f"{p.time:8.3f}  {p.result.note:>5}  {p.result.frequency:10.1f}  "
                  f"{p.result.cents:+6d}  {p.display.cents_text:>10}")

    summary = summarize_track(points, reference=args.reference)
    print("=" * 60)
    print(f"Recording:       {args.wav.name}")
    print(f"Frames:          {summary.frame_count}")
    print(f"Detected:        {summary.detected_count} ({summary.detection_rate:.0%})")
    if summary.detected_count:
        print(f"Note:            {summary.most_common_note} ({summary.target_frequency:.2f} Hz)")
        print(f"Median freq:     {summary.median_frequency:.1f} Hz "
              f"({summary.median_offset_cents:+.1f} cents)")
        print(f"Mean deviation:  {summary.mean_cents:+.1f} cents")
    print("=" * 60)

    if args.plot is not None:
        plot_track(points, args.plot, title=args.wav.name)
        print(f"Saved plot: {args.plot}")


if __name__ == "__main__":
    main()
