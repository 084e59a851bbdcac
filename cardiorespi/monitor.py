"""Turns decoded ADS1292R samples into ECG, respiration, heart and breathing rates."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .ads1292r import FRAME_LENGTH, Sample, decode_frame
from .filters import EcgFilter, RespirationFilter, int16
from .qrs import QrsDetector
from .respiration import RespirationRateDetector

LEAD_OFF_MESSAGE = "Lead-off detected!"


@dataclass(frozen=True)
class Reading:
    """One processed output line."""

    ecg: int
    respiration: int
    heart_rate: int
    respiration_rate: int
    lead_off: bool = False


class VitalsMonitor:
    """Runs the filters and rate detectors over a stream of samples."""

    def __init__(self) -> None:
        self._ecg_filter = EcgFilter()
        self._resp_filter = RespirationFilter()
        self._qrs = QrsDetector()
        self._resp_rate = RespirationRateDetector()

    def process(self, sample: Sample) -> Reading:
        """Process one sample; lead-off samples leave the signal chain untouched."""
        if sample.lead_off:
            return Reading(
                0, 0, self._qrs.heart_rate, self._resp_rate.respiration_rate, lead_off=True
            )
        ecg = self._ecg_filter.process(int16(sample.ecg >> 8))
        heart_rate = self._qrs.update(ecg) & 0xFF
        respiration = self._resp_filter.process(int16(sample.respiration_raw >> 8))
        respiration_rate = self._resp_rate.update(respiration) & 0xFF
        return Reading(ecg, respiration, heart_rate, respiration_rate)


def format_reading(reading: Reading) -> str:
    """Render a reading as a serial-plotter line."""
    if reading.lead_off:
        return LEAD_OFF_MESSAGE
    return (
        f"ECG:{reading.ecg},RESP:{reading.respiration},"
        f"HR:{reading.heart_rate},RR:{reading.respiration_rate}"
    )


def parse_frames(lines: Iterable[str]) -> Iterator[bytes]:
    """Yield raw frames from lines of hex; blank lines and '#' comments are skipped."""
    for number, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        try:
            frame = bytes.fromhex(text)
        except ValueError as exc:
            raise ValueError(f"line {number}: invalid hex: {exc}") from exc
        if len(frame) != FRAME_LENGTH:
            raise ValueError(
                f"line {number}: frame must be {FRAME_LENGTH} bytes, got {len(frame)}"
            )
        yield frame


def main(argv: list[str] | None = None) -> int:
    """Process recorded frames (one hex frame per line) and print readings."""
    parser = argparse.ArgumentParser(
        prog="cardiorespi",
        description="Compute ECG, respiration, heart rate and breathing rate from recorded frames.",
    )
    parser.add_argument("frames", nargs="?", default="-", help="file of hex frames, '-' for stdin")
    args = parser.parse_args(argv)

    monitor = VitalsMonitor()
    try:
        if args.frames == "-":
            source = sys.stdin
            for frame in parse_frames(source):
                print(format_reading(monitor.process(decode_frame(frame))))
        else:
            with open(args.frames, encoding="utf-8") as source:
                for frame in parse_frames(source):
                    print(format_reading(monitor.process(decode_frame(frame))))
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0