import math

from cardiorespi.respiration import RespirationRateDetector


def _sine(period, count, amplitude=100):
    return [round(amplitude * math.sin(2 * math.pi * n / period)) for n in range(count)]


def test_flat_signal_has_no_rate():
    det = RespirationRateDetector()
    rates = [det.update(0) for _ in range(3000)]
    assert set(rates) == {0}


def test_small_signal_never_starts():
    det = RespirationRateDetector()
    for s in _sine(200, 3000, amplitude=2):
        rate = det.update(s)
    assert rate == 0


def test_periodic_breathing_gives_rate_near_period():
    det = RespirationRateDetector()
    for s in _sine(200, 4000):
        rate = det.update(s)
    assert 25 <= rate <= 35
    assert det.respiration_rate == rate


def test_rate_fits_in_a_byte():
    det = RespirationRateDetector()
    for s in _sine(90, 4000, amplitude=150):
        assert 0 <= det.update(s) <= 255