"""CAN bus frames: motor feedback decoding, current commands and booster data."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Sequence

ENCODER_MAX_VALUE = 8191
ENCODER_THRESHOLD = ENCODER_MAX_VALUE // 2
MOTOR_COUNT = 8


class CanId(IntEnum):
    """Standard identifiers used on the robot's CAN buses."""

    CHASSIS_ALL = 0x200
    M3508_M1 = 0x201
    M3508_M2 = 0x202
    M3508_M3 = 0x203
    M3508_M4 = 0x204
    YAW_MOTOR = 0x205
    PIT_MOTOR = 0x206
    TRIGGER_MOTOR = 0x207
    GIMBAL_ALL = 0x1FF
    CHASSIS_CONTROLLER = 0x519
    ECD_REPORT = 0x520
    AMMO_BOOSTER = 0x521
    RC_SWITCH = 0x420


class MotorRange(IntEnum):
    """Which group of motors a command frame addresses."""

    MOTOR_1234 = 1
    MOTOR_5678 = 2
    ECD_REPORT = 3


def _int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value >= 0x8000 else value


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


@dataclass
class MotorMeasure:
    """Latest feedback of one motor plus its accumulated encoder position."""

    ecd: int = 0
    speed_rpm: int = 0
    given_current: int = 0
    temperate: int = 0
    last_ecd: int = 0
    last_last_ecd: int = 0
    total_ecd: int = 0

    def update(self, data: Sequence[int]) -> None:
        """Decode a feedback frame (big-endian fields), keeping encoder history."""
        if len(data) < 7:
            raise ValueError("motor feedback frame needs at least 7 bytes")
        self.last_last_ecd = self.last_ecd
        self.last_ecd = self.ecd
        self.ecd = _int16(data[0] << 8 | data[1])
        self.speed_rpm = _int16(data[2] << 8 | data[3])
        self.given_current = _int16(data[4] << 8 | data[5])
        self.temperate = data[6] & 0xFF

    def update_total_angle(self) -> int:
        """Accumulate the encoder step, unwrapping the 8191 -> 0 rollover."""
        difference = _int16(self.ecd - self.last_ecd)
        if difference > ENCODER_THRESHOLD:
            difference -= ENCODER_MAX_VALUE + 1
        elif difference < -ENCODER_THRESHOLD:
            difference += ENCODER_MAX_VALUE + 1
        self.total_ecd = _int32(self.total_ecd + _int16(difference))
        return self.total_ecd


@dataclass
class AmmoBoosterData:
    """Status reported by the ammo booster board."""

    booster_id: int = 0
    shooting_rate: int = 0
    bullet_speed: int = 0
    muzzle_heat: int = 0
    muzzle_heat_lim: int = 0
    muzzle_cooling_rate: int = 0
    muzzle_speed_lim: int = 0

    @classmethod
    def from_bytes(cls, data: Sequence[int]) -> "AmmoBoosterData":
        """Decode an 8-byte booster frame; the bullet speed is little-endian."""
        if len(data) < 8:
            raise ValueError("ammo booster frame needs 8 bytes")
        return cls(
            booster_id=data[0],
            shooting_rate=data[1],
            bullet_speed=(data[3] << 8 | data[2]) & 0xFFFF,
            muzzle_heat=data[4],
            muzzle_heat_lim=data[5],
            muzzle_cooling_rate=data[6],
            muzzle_speed_lim=data[7],
        )


@dataclass
class MotorBus:
    """Feedback of the eight motors plus the last booster report."""

    motors: list[MotorMeasure] = field(
        default_factory=lambda: [MotorMeasure() for _ in range(MOTOR_COUNT)]
    )
    ammo_booster: AmmoBoosterData = field(default_factory=AmmoBoosterData)

    def measure(self, index: int) -> MotorMeasure:
        """Return the feedback record of motor ``index`` (0-7)."""
        if not 0 <= index < len(self.motors):
            raise IndexError(f"no motor {index}")
        return self.motors[index]

    def __iter__(self) -> Iterator[MotorMeasure]:
        return iter(self.motors)

    def __len__(self) -> int:
        return len(self.motors)


def encode_motor_currents(motor1: int, motor2: int, motor3: int, motor4: int) -> bytes:
    """Pack four signed 16-bit currents big-endian into an 8-byte payload."""
    return b"".join(
        (value & 0xFFFF).to_bytes(2, "big") for value in (motor1, motor2, motor3, motor4)
    )


_FRAME_IDS = {
    MotorRange.MOTOR_1234: CanId.CHASSIS_ALL,
    MotorRange.MOTOR_5678: CanId.GIMBAL_ALL,
    MotorRange.ECD_REPORT: CanId.ECD_REPORT,
}


def command_frame_id(motor_range: MotorRange) -> CanId:
    """Return the standard identifier used to command a motor group."""
    try:
        return _FRAME_IDS[MotorRange(motor_range)]
    except (KeyError, ValueError):
        raise ValueError(f"unknown motor range {motor_range!r}") from None