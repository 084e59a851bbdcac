"""ADS1292R frame decoding, ECG and respiration filtering, and heart and breathing rate detection."""

__version__ = "0.1.0"
__all__ = ["ads1292r", "filters", "monitor", "qrs", "respiration"]