# cardiorespi

Signal processing for the ADS1292R analog front end. The package decodes the
chip's 9-byte sample frames, filters the ECG and respiration channels, and
derives heart rate and respiration rate from them. It works on data sampled
at 125 samples per second. All arithmetic is fixed-point integer arithmetic
with 16-bit wrap-around, so results are deterministic sample for sample.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `cardiorespi.filters`
  - `fir_filter(window, coefficients)` applies Q15 coefficients to a window of
    samples ordered newest first. It saturates the Q30 accumulator and scales
    the result back to Q15. It raises `ValueError` if the two lengths differ.
  - `EcgFilter.process(sample)` removes the baseline with a first-order IIR,
    then applies a 161-tap 40 Hz low-pass FIR.
  - `RespirationFilter.process(sample)` applies a 161-tap 2 Hz low-pass FIR to
    the raw respiration sample.
  - `ECG_COEFFICIENTS` and `RESP_COEFFICIENTS` are the tap sets.
- `cardiorespi.qrs`
  - `QrsDetector.update(sample)` takes one filtered ECG sample and returns the
    current heart rate in beats per minute. The rate is capped at 250, and it
    returns 0 until a rate has been measured or after 3 seconds with no peak.
    The last value is also available as `heart_rate`.
- `cardiorespi.respiration`
  - `RespirationRateDetector.update(sample)` takes one filtered respiration
    sample and returns breaths per minute. It returns 0 while the signal's
    swing is too small to measure. The last value is also available as
    `respiration_rate`.
- `cardiorespi.ads1292r`
  - `decode_frame(frame)` turns a 9-byte frame into a `Sample`. The frame
    holds 24 status bits, then respiration, then ECG. The `Sample` has the
    fields `ecg`, `respiration`, `respiration_raw`, `lead_status` and `lead_off`.
  - `mask_register_value(address, value)` forces the reserved bits of a
    register value.
  - `Register` and `Command` hold the register map and the SPI opcodes.
  - `Ads1292R` is the chip driver. It provides `reset`, `initialize`,
    `send_command`, `write_register`, `read_sample` and `read_chip_id`.
- `cardiorespi.monitor`
  - `VitalsMonitor.process(sample)` runs both filters and both detectors on a
    `Sample` and returns a `Reading`. A lead-off sample leaves the signal chain
    untouched.
  - `format_reading(reading)` renders a reading as
    `ECG:<n>,RESP:<n>,HR:<n>,RR:<n>`. A lead-off reading is rendered as
    `Lead-off detected!`.
  - `parse_frames(lines)` yields the raw 9-byte frames from lines of hex. It
    skips blank lines and lines starting with `#`, and raises `ValueError` for
    bad hex or a wrong length.

## Processing samples in code

```python
from cardiorespi.filters import EcgFilter, RespirationFilter
from cardiorespi.qrs import QrsDetector
from cardiorespi.respiration import RespirationRateDetector

ecg_filter = EcgFilter()
resp_filter = RespirationFilter()
qrs = QrsDetector()
breathing = RespirationRateDetector()

for ecg_raw, resp_raw in samples:          # 16-bit values at 125 SPS
    heart_rate = qrs.update(ecg_filter.process(ecg_raw))
    respiration_rate = breathing.update(resp_filter.process(resp_raw))
```

Every object keeps its own state, so use one set of objects for each signal
source.

## Talking to the chip

`Ads1292R` does all its I/O through a `Bus` object that you supply. The bus
must provide these methods:

- `transfer(value)` clocks one byte out and returns the byte clocked in.
- `write_pin(pin, high)` drives a GPIO pin high or low.
- `read_pin(pin)` returns `True` when a GPIO pin reads high.
- `delay_ms(milliseconds)` waits for the given time.

```python
from cardiorespi.ads1292r import CHIP_ID, Ads1292R
from cardiorespi.monitor import VitalsMonitor, format_reading

device = Ads1292R(bus, chip_select=5, pwdn_pin=15, start_pin=4, data_ready=2)
device.initialize()
print(device.read_chip_id() == CHIP_ID)

monitor = VitalsMonitor()
while True:
    sample = device.read_sample()          # None until DRDY goes low
    if sample is not None:
        print(format_reading(monitor.process(sample)))
```

## Command line

```
cardiorespi-monitor capture.txt
cardiorespi-monitor < capture.txt
```

The command reads recorded frames from a file, or from standard input when no
file is given or the file is `-`. Each frame is one line of 18 hex digits. For
each frame the command prints one line in the form that `format_reading`
produces. If a file cannot be read or a line is malformed, the command prints
an error to standard error and exits with status 1.

## What it does not do

The package contains no SPI or GPIO implementation, so it cannot reach a
physical board on its own. `Ads1292R` works only through the `Bus` you give
it. The command line tool only processes frames that were recorded earlier.
It does not capture live data from a device.