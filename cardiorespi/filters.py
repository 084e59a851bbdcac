"""FIR low-pass filtering of ECG and respiration samples (125 SPS, Q15 coefficients)."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence

FILTER_ORDER = 161
DC_REMOVAL_COEFFICIENT = 0.992

_ACC_MAX = 0x3FFFFFFF
_ACC_MIN = -0x40000000


def _symmetric(half: Sequence[int]) -> tuple[int, ...]:
    """Build a linear-phase tap set from its first half, centre tap included."""
    return tuple(half) + tuple(reversed(half[:-1]))


# 40 Hz low-pass for the ECG channel: first half of the taps, ending at the centre.
_ECG_HALF = (
    -72, 122, -31, -99, 117, 0, -121, 105, 34, -137,
    84, 70, -146, 55, 104, -147, 20, 135, -137, -21,
    160, -117, -64, 177, -87, -108, 185, -48, -151, 181,
    0, -188, 164, 54, -218, 134, 112, -238, 90, 171,
    -244, 33, 229, -235, -36, 280, -208, -115, 322, -161,
    -203, 350, -92, -296, 361, 0, -391, 348, 117, -486,
    305, 264, -577, 225, 445, -660, 93, 676, -733, -119,
    991, -793, -480, 1486, -837, -1226, 2561, -865, -4018, 9438,
    20972,
)

# 2 Hz low-pass for the respiration channel: first half of the taps, ending at the centre.
_RESP_HALF = (
    120, 124, 126, 127, 127, 125, 122, 118, 113, 106,
    97, 88, 77, 65, 52, 38, 24, 8, -8, -25,
    -42, -59, -76, -93, -110, -126, -142, -156, -170, -183,
    -194, -203, -211, -217, -221, -223, -223, -220, -215, -208,
    -198, -185, -170, -152, -132, -108, -83, -55, -24, 8,
    43, 80, 119, 159, 201, 244, 288, 333, 378, 424,
    470, 516, 561, 606, 650, 693, 734, 773, 811, 847,
    880, 911, 939, 964, 986, 1005, 1020, 1033, 1041, 1047,
    1049,
)

ECG_COEFFICIENTS: tuple[int, ...] = _symmetric(_ECG_HALF)
RESP_COEFFICIENTS: tuple[int, ...] = _symmetric(_RESP_HALF)


def int16(value: int) -> int:
    """Wrap an integer to the signed 16-bit range."""
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def fir_filter(window: Sequence[int], coefficients: Sequence[int]) -> int:
    """Apply Q15 coefficients to a window of samples ordered newest first.

    The Q30 accumulator is saturated and scaled back to Q15.
    """
    if len(window) != len(coefficients):
        raise ValueError(
            f"window has {len(window)} samples but there are {len(coefficients)} coefficients"
        )
    acc = sum(c * s for c, s in zip(coefficients, window))
    acc = max(_ACC_MIN, min(_ACC_MAX, acc))
    return int16(acc >> 15)


class _FirStage:
    def __init__(self, coefficients: Sequence[int]) -> None:
        self._coefficients = tuple(coefficients)
        size = len(self._coefficients)
        self._window: deque[int] = deque([0] * size, maxlen=size)

    def push(self, value: int) -> int:
        self._window.appendleft(value)
        return fir_filter(self._window, self._coefficients)


class _DcRemover:
    """First-order IIR high-pass that strips the baseline."""

    def __init__(self) -> None:
        self._prev_dc = 0
        self._prev_sample = 0

    def push(self, sample: int) -> int:
        decayed = int16(int(DC_REMOVAL_COEFFICIENT * self._prev_dc))
        self._prev_dc = int16(sample - self._prev_sample + decayed)
        self._prev_sample = sample
        return self._prev_dc


class EcgFilter:
    """Baseline removal followed by a 40 Hz low-pass FIR."""

    def __init__(self) -> None:
        self._dc = _DcRemover()
        self._fir = _FirStage(ECG_COEFFICIENTS)

    def process(self, sample: int) -> int:
        """Filter one raw ECG sample and return the filtered value."""
        return self._fir.push(self._dc.push(int16(sample)) >> 2)


class RespirationFilter:
    """2 Hz low-pass FIR applied to the raw respiration signal."""

    def __init__(self) -> None:
        self._dc = _DcRemover()
        self._fir = _FirStage(RESP_COEFFICIENTS)

    def process(self, sample: int) -> int:
        """Filter one raw respiration sample and return the filtered value."""
        sample = int16(sample)
        # The baseline tracker runs, but the raw sample is what gets filtered.
        self._dc.push(sample)
        return self._fir.push(sample)