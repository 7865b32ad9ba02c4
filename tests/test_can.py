import struct

import pytest

from swervebot.can import (
    AmmoBoosterData,
    CanId,
    MotorBus,
    MotorMeasure,
    MotorRange,
    command_frame_id,
    encode_motor_currents,
)


def _frame(ecd, speed, current, temp):
    return struct.pack(">hhhB", ecd, speed, current, temp) + b"\x00"


def test_update_decodes_fields():
    m = MotorMeasure()
    m.update(_frame(4000, -250, 1200, 37))
    assert (m.ecd, m.speed_rpm, m.given_current, m.temperate) == (4000, -250, 1200, 37)


def test_update_shifts_history():
    m = MotorMeasure()
    m.update(_frame(10, 0, 0, 0))
    m.update(_frame(20, 0, 0, 0))
    m.update(_frame(30, 0, 0, 0))
    assert (m.last_last_ecd, m.last_ecd, m.ecd) == (10, 20, 30)


def test_update_short_frame_raises():
    with pytest.raises(ValueError):
        MotorMeasure().update(b"\x00\x01\x02")


def test_total_angle_unwraps_rollover():
    m = MotorMeasure()
    for ecd in (8000, 100, 4000, 8100, 50):
        m.update(_frame(ecd, 0, 0, 0))
        m.update_total_angle()
        assert m.total_ecd % 8192 == ecd % 8192
    assert m.total_ecd == 50


def test_total_angle_small_steps_accumulate():
    m = MotorMeasure()
    m.update(_frame(100, 0, 0, 0))
    assert m.update_total_angle() == 100
    m.update(_frame(300, 0, 0, 0))
    assert m.update_total_angle() == 300


def test_ammo_booster_from_bytes():
    data = bytes([1, 2, 0x34, 0x12, 5, 6, 7, 8])
    info = AmmoBoosterData.from_bytes(data)
    assert info.booster_id == 1
    assert info.shooting_rate == 2
    assert info.bullet_speed == 0x1234
    assert (info.muzzle_heat, info.muzzle_heat_lim) == (5, 6)
    assert (info.muzzle_cooling_rate, info.muzzle_speed_lim) == (7, 8)


def test_ammo_booster_short_frame():
    with pytest.raises(ValueError):
        AmmoBoosterData.from_bytes(b"\x01\x02")


def test_encode_pins_wire_bytes():
    assert encode_motor_currents(1, -1, 0x0102, 0) == b"\x00\x01\xff\xff\x01\x02\x00\x00"


@pytest.mark.parametrize("values", [(1000, -1000, 0, 16384), (-32768, 32767, 5, -5)])
def test_encode_round_trip(values):
    payload = encode_motor_currents(*values)
    assert len(payload) == 8
    assert struct.unpack(">4h", payload) == values


def test_command_frame_ids():
    assert command_frame_id(MotorRange.MOTOR_1234) == CanId.CHASSIS_ALL
    assert command_frame_id(MotorRange.MOTOR_5678) == CanId.GIMBAL_ALL
    assert command_frame_id(MotorRange.ECD_REPORT) == CanId.ECD_REPORT


def test_command_frame_id_unknown():
    with pytest.raises(ValueError):
        command_frame_id(9)


def test_bus_measure_identity_and_bounds():
    bus = MotorBus()
    assert len(bus) == 8
    assert bus.measure(3) is bus.measure(3)
    assert bus.measure(3) is not bus.measure(4)
    with pytest.raises(IndexError):
        bus.measure(8)
    with pytest.raises(IndexError):
        bus.measure(-1)