import pytest

from cardiorespi.ads1292r import (
    CHIP_ID,
    Ads1292R,
    Command,
    Register,
    decode_frame,
    mask_register_value,
)

CS, PWDN, START, DRDY = 5, 15, 4, 2


class FakeBus:
    def __init__(self, responses=(), levels=None):
        self._responses = iter(responses)
        self.levels = levels or {}
        self.sent = []
        self.pins = []
        self.delays = []

    def transfer(self, value):
        self.sent.append(value)
        return next(self._responses, 0)

    def write_pin(self, pin, high):
        self.pins.append((pin, high))

    def read_pin(self, pin):
        return self.levels.get(pin, True)

    def delay_ms(self, milliseconds):
        self.delays.append(milliseconds)


def make_device(bus):
    return Ads1292R(bus, CS, PWDN, START, DRDY)


def test_decode_sign_extends_channels():
    sample = decode_frame(bytes([0, 0, 0, 0x00, 0x01, 0x00, 0xFF, 0xFF, 0xFF]))
    assert sample.respiration == 256
    assert sample.ecg == -1
    assert sample.lead_off is False


@pytest.mark.parametrize("resp", [b"\x00\x00\x00", b"\x12\x34\x56", b"\x80\x00\x00", b"\xff\xff\xff"])
def test_raw_respiration_is_shifted_value(resp):
    sample = decode_frame(bytes(3) + resp + bytes(3))
    assert sample.respiration_raw == sample.respiration * 256
    assert sample.respiration_raw >> 8 == sample.respiration


def test_lead_off_from_status_bits():
    assert decode_frame(bytes([0x0F, 0x80, 0x00]) + bytes(6)).lead_off is True
    assert decode_frame(bytes([0x00, 0x80, 0x00]) + bytes(6)).lead_off is True
    assert decode_frame(bytes([0x00, 0x7F, 0xFF]) + bytes(6)).lead_off is False
    assert decode_frame(bytes([0xF0, 0x7F, 0xFF]) + bytes(6)).lead_status == 0


@pytest.mark.parametrize("length", [0, 8, 10])
def test_decode_rejects_bad_length(length):
    with pytest.raises(ValueError):
        decode_frame(bytes(length))


def test_mask_register_value_forced_bits():
    assert mask_register_value(2, 0x00) == 0x80
    assert mask_register_value(2, 0xFF) == 0xFB
    assert mask_register_value(9, 0x00) == 0x02
    assert mask_register_value(3, 0x00) == 0x10


@pytest.mark.parametrize("address", [0, 4, 5, 6, 12])
def test_mask_register_value_leaves_others(address):
    for value in (0x00, 0x5A, 0xFF):
        assert mask_register_value(address, value) == value


def test_write_register_wire_bytes():
    bus = FakeBus()
    make_device(bus).write_register(Register.CH1SET, 0b01000000)
    assert bus.sent == [0x44, 0x00, 0b01000000]
    assert bus.pins[-1] == (CS, True)


def test_write_register_applies_mask():
    bus = FakeBus()
    make_device(bus).write_register(Register.RESP1, 0b11110000)
    assert bus.sent == [Command.WREG | Register.RESP1, 0x00, mask_register_value(9, 0b11110000)]


def test_send_command_selects_and_deselects():
    bus = FakeBus()
    make_device(bus).send_command(Command.START)
    assert bus.sent == [0x08]
    assert bus.pins == [(CS, False), (CS, True), (CS, False), (CS, True)]


def test_reset_pulses_power_down():
    bus = FakeBus()
    make_device(bus).reset()
    assert bus.pins == [(PWDN, True), (PWDN, False), (PWDN, True)]
    assert bus.delays == [100, 100, 100]


def test_read_sample_waits_for_data_ready():
    bus = FakeBus(levels={DRDY: True})
    assert make_device(bus).read_sample() is None
    assert bus.sent == []


def test_read_sample_decodes_frame():
    frame = bytes([0x00, 0x00, 0x00, 0x01, 0x02, 0x03, 0xFE, 0x00, 0x10])
    bus = FakeBus(responses=frame, levels={DRDY: False})
    sample = make_device(bus).read_sample()
    assert sample == decode_frame(frame)
    assert bus.sent == [0xFF] * 9
    assert bus.pins == [(CS, False), (CS, True)]


def test_read_chip_id():
    bus = FakeBus(responses=[0x00, 0x00, 0x73])
    assert make_device(bus).read_chip_id() == CHIP_ID
    assert bus.sent == [0x20, 0x00, 0x00]


def test_initialize_sequence():
    bus = FakeBus()
    make_device(bus).initialize()
    assert bus.sent[:3] == [0x08, 0x0A, 0x11]
    assert bus.sent[3:6] == [0x41, 0x00, mask_register_value(1, 0x00)]
    assert bus.sent[-1] == 0x10
    assert len(bus.sent) == 3 + 3 * 9 + 1
    assert bus.pins[-1] == (START, True)
    assert bus.pins[:3] == [(PWDN, True), (PWDN, False), (PWDN, True)]