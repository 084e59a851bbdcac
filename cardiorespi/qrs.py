"""Heart-rate detection from the filtered ECG signal."""

from __future__ import annotations

from collections import deque

from .filters import int16

SAMPLING_RATE = 125
TWO_SEC_SAMPLES = 2 * SAMPLING_RATE
MAX_PEAK_TO_SEARCH = 5
MAXIMA_SEARCH_WINDOW = 25
MINIMUM_SKIP_WINDOW = 30
MAX_HEART_RATE = 250


class QrsDetector:
    """Derivative-threshold QRS detector producing beats per minute."""

    def __init__(self) -> None:
        self._history: deque[int] = deque([0] * 32, maxlen=32)
        self._samples = [0] * 5  # oldest first: second prev .. second next
        self._running_max = 0
        self._buffer_count = 0
        self._armed = False
        self._threshold_old = 0
        self._threshold_new = 0
        self._heart_rate = 0
        self._counting = False
        self._sample_count = 0
        self._crossings = 0
        self._last_crossing = 0
        self._threshold_crossed = False
        self._maxima_search = 0
        self._peak_detected = False
        self._skip_window = 0
        self._maxima_sum = 0
        self._peak = 0
        self._interval_sum = 0
        self._no_peak = 0

    @property
    def heart_rate(self) -> int:
        return self._heart_rate

    def update(self, sample: int) -> int:
        """Feed one filtered ECG sample; return the current heart rate."""
        self._history.append(int16(sample))
        smoothed = int16(sum(self._history) >> 2)
        self._samples = self._samples[1:] + [smoothed]

        derivative = int16(abs(int16(self._samples[3] - self._samples[1])))
        if derivative > self._running_max:
            self._running_max = derivative
        self._buffer_count += 1
        if self._buffer_count == TWO_SEC_SAMPLES:
            self._threshold_old = int16(self._running_max * 7 // 10)
            self._threshold_new = self._threshold_old
            self._armed = True
            self._running_max = 0
            self._buffer_count = 0
        if self._armed:
            self._check_threshold(derivative & 0xFFFF)
        return self._heart_rate

    def _reset_search(self) -> None:
        self._sample_count = 0
        self._crossings = 0
        self._last_crossing = 0
        self._maxima_sum = 0
        self._counting = False
        self._interval_sum = 0

    def _check_threshold(self, value: int) -> None:
        if self._threshold_crossed:
            self._sample_count += 1
            self._maxima_search += 1
            self._peak = max(self._peak, value)
            if self._maxima_search >= MAXIMA_SEARCH_WINDOW:
                self._maxima_sum += self._peak
                self._maxima_search = 0
                self._threshold_crossed = False
                self._peak_detected = True
        elif self._peak_detected:
            self._sample_count += 1
            self._skip_window += 1
            if self._skip_window >= MINIMUM_SKIP_WINDOW:
                self._skip_window = 0
                self._peak_detected = False
            if self._crossings == MAX_PEAK_TO_SEARCH:
                self._finish_search()
        elif value > self._threshold_new:
            self._counting = True
            self._sample_count += 1
            self._crossings += 1
            self._threshold_crossed = True
            self._peak = value
            self._no_peak = 0
            if self._crossings > 1:
                self._interval_sum += self._sample_count - self._last_crossing
            self._last_crossing = self._sample_count
        else:
            if value < self._threshold_new and self._counting:
                self._sample_count += 1
            self._no_peak += 1
            if self._no_peak > 3 * SAMPLING_RATE:
                self._reset_search()
                self._peak_detected = False
                self._armed = False
                self._no_peak = 0
                self._heart_rate = 0

    def _finish_search(self) -> None:
        average = (self._interval_sum // (MAX_PEAK_TO_SEARCH - 1)) & 0xFFFF
        rate = (60 * SAMPLING_RATE) // average if average else 0
        self._heart_rate = min(rate, MAX_HEART_RATE)
        mean_max = (self._maxima_sum // MAX_PEAK_TO_SEARCH) & 0xFFFF
        new_threshold = int16(mean_max * 7 // 10)
        if new_threshold > 4 * self._threshold_old:
            new_threshold = self._threshold_old
        self._threshold_new = new_threshold
        self._reset_search()