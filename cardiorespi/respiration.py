"""Respiration-rate detection from the filtered respiration signal."""

from __future__ import annotations

from collections import deque

from .filters import int16

_WINDOW = 500
_MIN_SWING = 400


class RespirationRateDetector:
    """Threshold-crossing breath detector producing breaths per minute."""

    def __init__(self) -> None:
        self._history: deque[int] = deque([0] * 64, maxlen=64)
        self._rate = 0
        self._skip = 0
        self._count_pos = 0
        self._count_neg = 0
        self._time = 0
        self._pos_interval = 0
        self._neg_interval = 0
        self._min_new = 0x7FFF
        self._max_new = -0x8000
        self._avg = 0
        self._prev = [0, 0, 0]  # newest first
        self._started = False
        self._pos_edge = False
        self._neg_edge = False
        self._intervals: list[int] = []

    @property
    def respiration_rate(self) -> int:
        return self._rate

    def update(self, sample: int) -> int:
        """Feed one filtered respiration sample; return the current rate."""
        self._history.append(int16(sample))
        return self._detect(int16(sum(self._history)) >> 1)

    def _set_thresholds(self) -> None:
        self._avg = int16(self._max_new + self._min_new) >> 1

    def _detect(self, wave: int) -> int:
        self._count_pos = (self._count_pos + 1) & 0xFFFF
        self._count_neg = (self._count_neg + 1) & 0xFFFF
        self._time += 1
        self._min_new = min(self._min_new, wave)
        self._max_new = max(self._max_new, wave)
        if self._count_pos > 1000:
            self._count_pos = 0
        if self._count_neg > 1000:
            self._count_neg = 0

        if self._started:
            if self._time >= _WINDOW:
                self._time = 0
                if self._max_new - self._min_new > _MIN_SWING:
                    self._set_thresholds()
                else:
                    self._started = False
                    self._rate = 0
            oldest = self._prev[2]
            self._prev = [wave, self._prev[0], self._prev[1]]
            if self._skip == 0:
                self._check_edges(oldest, wave)
            else:
                self._skip -= 1
        else:
            self._time += 1
            if self._time >= _WINDOW:
                self._time = 0
                if self._max_new - self._min_new > _MIN_SWING:
                    self._started = True
                    self._set_thresholds()
                    self._prev = [wave, wave, wave]
        return self._rate

    def _check_edges(self, oldest: int, wave: int) -> None:
        crossed = oldest < self._avg and wave > self._avg
        if crossed:
            if 40 < self._count_pos < 700:
                self._pos_edge = True
                self._pos_interval = self._count_pos
                self._skip = 4
            self._count_pos = 0
            if 40 < self._count_neg < 700:
                self._neg_edge = True
                self._neg_interval = self._count_neg
                self._skip = 4
            self._count_neg = 0
        if self._pos_edge and self._neg_edge:
            self._pos_edge = self._neg_edge = False
            if abs(self._pos_interval - self._neg_interval) < 5:
                self._intervals += [self._pos_interval, self._neg_interval]
                if len(self._intervals) == 8:
                    mean = (sum(self._intervals) & 0xFFFF) >> 3
                    self._pos_interval = mean
                    self._intervals = []
                    self._rate = (6000 // mean) & 0xFF