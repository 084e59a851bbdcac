"""Driver for the ADS1292R ECG/respiration front end over an SPI bus."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

FRAME_LENGTH = 9
DUMMY_BYTE = 0xFF
CHIP_ID = 0x73


class Register(IntEnum):
    """Register addresses of the ADS1292R."""

    ID = 0x00
    CONFIG1 = 0x01
    CONFIG2 = 0x02
    LOFF = 0x03
    CH1SET = 0x04
    CH2SET = 0x05
    RLDSENS = 0x06
    LOFFSENS = 0x07
    LOFFSTAT = 0x08
    RESP1 = 0x09
    RESP2 = 0x0A


class Command(IntEnum):
    """SPI opcodes understood by the ADS1292R."""

    RREG = 0x20
    WREG = 0x40
    START = 0x08
    STOP = 0x0A
    RDATAC = 0x10
    SDATAC = 0x11
    RDATA = 0x12


# Register configuration applied by Ads1292R.initialize, in order.
DEFAULT_CONFIGURATION: tuple[tuple[Register, int], ...] = (
    (Register.CONFIG1, 0x00),        # 125 SPS
    (Register.CONFIG2, 0b10100000),  # lead-off comparator off, test signal disabled
    (Register.LOFF, 0b00010000),
    (Register.CH1SET, 0b01000000),   # channel 1 enabled, gain 6
    (Register.CH2SET, 0b01100000),   # channel 2 enabled, gain 6
    (Register.RLDSENS, 0b00101100),  # RLD enabled, inputs from channel 2
    (Register.LOFFSENS, 0x00),
    (Register.RESP1, 0b11110010),    # respiration modulation/demodulation on
    (Register.RESP2, 0b00000011),
)

# Bit adjustments applied before a register write, keyed by the address given.
_REGISTER_MASKS: dict[int, tuple[int, int]] = {
    1: (0x87, 0x00),
    2: (0xFB, 0x80),
    3: (0xFD, 0x10),
    7: (0x3F, 0x00),
    8: (0x5F, 0x00),
    9: (0xFF, 0x02),
    10: (0x87, 0x01),
    11: (0x0F, 0x00),
}


def _int32(value: int) -> int:
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def _int24(value: int) -> int:
    return ((value + 0x800000) & 0xFFFFFF) - 0x800000


@dataclass(frozen=True)
class Sample:
    """One decoded conversion result."""

    ecg: int
    respiration: int
    respiration_raw: int
    lead_status: int

    @property
    def lead_off(self) -> bool:
        """True when any lead-off status bit is set."""
        return (self.lead_status & 0x1F) != 0


class Bus(Protocol):
    """The SPI bus and GPIO lines the device is wired to."""

    def transfer(self, value: int) -> int:
        """Clock one byte out and return the byte clocked in."""

    def write_pin(self, pin: int, high: bool) -> None:
        """Drive a GPIO pin high or low."""

    def read_pin(self, pin: int) -> bool:
        """Return True when a GPIO pin reads high."""

    def delay_ms(self, milliseconds: float) -> None:
        """Wait for the given number of milliseconds."""


def decode_frame(frame: bytes) -> Sample:
    """Decode a 9-byte frame: 24 status bits, respiration, then ECG."""
    frame = bytes(frame)
    if len(frame) != FRAME_LENGTH:
        raise ValueError(f"frame must be {FRAME_LENGTH} bytes, got {len(frame)}")
    status = int.from_bytes(frame[0:3], "big")
    respiration_bits = int.from_bytes(frame[3:6], "big")
    ecg_bits = int.from_bytes(frame[6:9], "big")
    return Sample(
        ecg=_int24(ecg_bits),
        respiration=_int24(respiration_bits),
        respiration_raw=_int32(respiration_bits << 8),
        lead_status=(status & 0x0F8000) >> 15,
    )


def mask_register_value(address: int, value: int) -> int:
    """Force the reserved bits of a register value before it is written."""
    value &= 0xFF
    keep, force = _REGISTER_MASKS.get(address, (0xFF, 0x00))
    return (value & keep) | force


class Ads1292R:
    """An ADS1292R wired to a bus with chip-select, power-down, start and DRDY pins."""

    def __init__(self, bus: Bus, chip_select: int, pwdn_pin: int, start_pin: int, data_ready: int) -> None:
        self.bus = bus
        self.chip_select = chip_select
        self.pwdn_pin = pwdn_pin
        self.start_pin = start_pin
        self.data_ready = data_ready

    def reset(self) -> None:
        """Pulse the power-down line to reset the device."""
        for level in (True, False, True):
            self.bus.write_pin(self.pwdn_pin, level)
            self.bus.delay_ms(100)

    def _set_start(self, high: bool, wait: float) -> None:
        self.bus.write_pin(self.start_pin, high)
        self.bus.delay_ms(wait)

    def _select(self) -> None:
        for level in (False, True, False):
            self.bus.write_pin(self.chip_select, level)
            self.bus.delay_ms(2)

    def _deselect(self) -> None:
        self.bus.delay_ms(2)
        self.bus.write_pin(self.chip_select, True)

    def initialize(self) -> None:
        """Reset the device, configure its registers and start continuous conversion."""
        self.reset()
        self.bus.delay_ms(100)
        self._set_start(False, 20)
        self._set_start(True, 20)
        self._set_start(False, 100)
        self.send_command(Command.START)
        self.send_command(Command.STOP)
        self.bus.delay_ms(50)
        self.send_command(Command.SDATAC)
        self.bus.delay_ms(300)
        for register, value in DEFAULT_CONFIGURATION:
            self.write_register(register, value)
            self.bus.delay_ms(10)
        self.send_command(Command.RDATAC)
        self.bus.delay_ms(10)
        self._set_start(True, 20)

    def send_command(self, command: int) -> None:
        """Send a single-byte opcode."""
        self._select()
        self.bus.transfer(int(command) & 0xFF)
        self._deselect()

    def write_register(self, address: int, value: int) -> None:
        """Write one register, adjusting reserved bits first."""
        data = mask_register_value(address, value)
        self._select()
        self.bus.transfer((int(address) | Command.WREG) & 0xFF)
        self.bus.transfer(0x00)
        self.bus.transfer(data)
        self._deselect()

    def read_sample(self) -> Sample | None:
        """Return a decoded sample when DRDY is low, otherwise None."""
        if self.bus.read_pin(self.data_ready):
            return None
        self.bus.write_pin(self.chip_select, False)
        frame = bytes(self.bus.transfer(DUMMY_BYTE) & 0xFF for _ in range(FRAME_LENGTH))
        self.bus.write_pin(self.chip_select, True)
        return decode_frame(frame)

    def read_chip_id(self) -> int:
        """Read the ID register."""
        self.bus.write_pin(self.chip_select, False)
        self.bus.delay_ms(0.002)
        self.bus.transfer(Command.RREG | Register.ID)
        self.bus.transfer(0x00)
        chip_id = self.bus.transfer(0x00) & 0xFF
        self.bus.write_pin(self.chip_select, True)
        return chip_id