"""Swerve-drive kinematics, chassis mode selection and stick-to-wheel navigation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Sequence

from swervebot.pid import PidBank, default_controllers
from swervebot.rc import RemoteControl, Switch

ENCODER_RANGE = 8191.0
DEGREE_TO_ECD = 22.7527777777777777
WHEEL_PERIMETER = 364.4247478164160156  # mm
M3508_RATIO = 19
RADIUS = 116  # mm
HALF_SQRT2 = 0.707107
FLIP_THRESHOLD = 2048
HALF_TURN = 4096

RC_SW_LEFT = 0
RC_SW_RIGHT = 1

# Steering encoder value when each wheel points along +Y.
DEFAULT_OFFSETS: tuple[int, int, int, int] = (
    3514 + 1024,
    1714 - 1024,
    3751 - 1024,
    4239 + 1024,
)
_BASE_DIRECTIONS: tuple[int, int, int, int] = (1, -1, 1, -1)

# Scale factors from raw stick values to chassis velocities.
_VX_SCALE = 0.03
_VY_SCALE = -0.03
_VW_SCALE = -0.0001


class ChassisMode(IntEnum):
    """Operating modes of the chassis."""

    ZERO_FORCE = 0
    RC_GYROSCOPE = 1
    RC_FOLLOW_GIMBAL = 2
    PC_CONTROL = 3


def angle_limit(angle: float, maximum: float) -> float:
    """Fold an angle that overshot by at most one turn back into 0..maximum."""
    if angle > maximum:
        angle -= maximum
    if angle < 0:
        angle += maximum
    return angle


def map_degree_to_8191(value: float) -> float:
    """Convert degrees into encoder counts (360 degrees = 8191 counts)."""
    return value * DEGREE_TO_ECD


def _wheel_rpm_ratio() -> float:
    return 60.0 / (WHEEL_PERIMETER * 3.14159) * M3508_RATIO * 1000


@dataclass
class SwerveChassis:
    """Four-module swerve chassis: drive speeds and steering targets."""

    offsets: tuple[int, int, int, int] = DEFAULT_OFFSETS
    directions: list[int] = field(default_factory=lambda: list(_BASE_DIRECTIONS))
    mode: ChassisMode = ChassisMode.ZERO_FORCE
    _headings: list[float] = field(default_factory=lambda: [0.0] * 4, repr=False)

    def wheel_speeds(self, vx: float, vy: float, wz: float) -> list[float]:
        """Drive motor speeds in rpm, signed by each module's current direction."""
        r = wz * RADIUS * HALF_SQRT2
        ratio = _wheel_rpm_ratio()
        magnitudes = (
            math.hypot(vy + r, vx - r),
            math.hypot(vy - r, vx - r),
            math.hypot(vy - r, vx + r),
            math.hypot(vy + r, vx + r),
        )
        return [d * m * ratio for d, m in zip(self.directions, magnitudes)]

    def wheel_angles(
        self, vx: float, vy: float, wz: float, encoders: Sequence[float]
    ) -> list[float]:
        """Steering encoder targets, taking the shorter way round.

        A module whose encoder is more than a quarter turn from its target is
        turned to the opposite heading and its drive direction is reversed.
        With all inputs zero the previous headings are kept.
        """
        if len(encoders) != 4:
            raise ValueError("four steering encoder values are required")
        if not (vx == 0 and vy == 0 and wz == 0):
            r = wz * RADIUS * HALF_SQRT2
            self._headings = [
                math.degrees(math.atan2(vx - r, vy + r)),
                math.degrees(math.atan2(vx - r, vy - r)),
                math.degrees(math.atan2(vx + r, vy + r)),
                math.degrees(math.atan2(vx + r, vy - r)),
            ]

        angles: list[float] = []
        directions: list[int] = []
        for offset, heading, encoder, base in zip(
            self.offsets, self._headings, encoders, _BASE_DIRECTIONS
        ):
            target = angle_limit(offset + heading * 22.75277777777, ENCODER_RANGE)
            if abs(float(encoder) - target) > FLIP_THRESHOLD:
                directions.append(-base)
                target = angle_limit(target - HALF_TURN, ENCODER_RANGE)
            else:
                directions.append(base)
            angles.append(target)
        self.directions = directions
        return angles

    def select_mode(self, rc: RemoteControl) -> ChassisMode:
        """Choose the mode from the switches: right down disables the chassis."""
        right = rc.switches[RC_SW_RIGHT]
        left = rc.switches[RC_SW_LEFT]
        if right in (Switch.MID, Switch.UP):
            if left == Switch.DOWN:
                self.mode = ChassisMode.RC_GYROSCOPE
            elif left == Switch.MID:
                self.mode = ChassisMode.RC_FOLLOW_GIMBAL
            elif left == Switch.UP:
                self.mode = ChassisMode.PC_CONTROL
        else:
            self.mode = ChassisMode.ZERO_FORCE
        return self.mode


@dataclass
class Navigator:
    """Turns stick positions into drive speed and steering position targets."""

    chassis: SwerveChassis = field(default_factory=SwerveChassis)
    bank: PidBank = field(default_factory=default_controllers)
    vx: float = 0.0
    vy: float = 0.0
    vw: float = 0.0
    speeds: list[float] = field(default_factory=lambda: [0.0] * 4)
    angles: list[float] = field(default_factory=lambda: [0.0] * 4)

    def step(
        self, rc: RemoteControl, encoders: Optional[Sequence[float]] = None
    ) -> tuple[list[float], list[float]]:
        """Compute targets, load them into the controllers and return (speeds, angles).

        Steering encoders default to the accumulated positions of motors 4-7.
        """
        if encoders is None:
            encoders = [float(self.bank.motors.measure(i).total_ecd) for i in range(4, 8)]

        self.vx = float(rc.channels[3]) * _VX_SCALE
        self.vy = float(-rc.channels[2]) * _VY_SCALE
        self.vw = float(-rc.channels[0]) * _VW_SCALE

        self.angles = self.chassis.wheel_angles(self.vy, self.vx, self.vw, encoders)
        self.speeds = self.chassis.wheel_speeds(self.vy, self.vx, self.vw)

        for index, speed in enumerate(self.speeds):
            self.bank.controller(index).ideal = speed
        for index, angle in enumerate(self.angles):
            self.bank.controller(8 + index).ideal = angle
        return list(self.speeds), list(self.angles)