"""Incremental PID controllers for the drive and steering motors."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum

from swervebot.can import MotorBus

PID_COUNT = 12
SERVO_SPEED_LIMIT = 50.0


class EulerAxis(IntEnum):
    """Attitude axis an IMU-driven controller follows."""

    YAW = 0
    PIT = 1
    ROL = 2


@dataclass
class ImuReading:
    """Attitude and angular rates supplied by the inertial navigation task."""

    yaw_total_angle: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    gyro: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def angle(self, axis: EulerAxis) -> float:
        return {
            EulerAxis.YAW: self.yaw_total_angle,
            EulerAxis.PIT: self.pitch,
            EulerAxis.ROL: self.roll,
        }.get(axis, 0.0)

    def rate(self, axis: EulerAxis) -> float:
        index = {EulerAxis.YAW: 2, EulerAxis.PIT: 0, EulerAxis.ROL: 1}.get(axis)
        return 0.0 if index is None else self.gyro[index]


@dataclass
class Pid:
    """One PID loop; ``error`` holds motor fault flags that suspend it."""

    motor_number: int = 0
    active: bool = True
    ideal: float = 0.0
    actual: float = 0.0
    output: float = 0.0
    integral: float = 0.0
    err: float = 0.0
    err_last: float = 0.0
    err_last_last: float = 0.0
    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0
    pout: float = 0.0
    iout: float = 0.0
    dout: float = 0.0
    limit_iout: float = 0.0
    limit_out: float = 0.0
    angular_velocity_mode: bool = False
    axis: EulerAxis = EulerAxis.YAW
    error: int = 0

    def update(self, actual: float) -> float:
        """Record the measurement and, if running without faults, recompute output."""
        self.actual = actual
        if self.active and self.error == 0:
            self.err = self.ideal - self.actual
            self.integral += self.err
            self.pout = self.kp * self.err
            self.iout = self.ki * self.integral
            self.dout = self.kd * (self.err - 2.0 * self.err_last + self.err_last_last)
            self.output = self.pout + self.iout + self.dout
            self.err_last = self.err
            self.clamp()
        return self.output

    def clamp(self) -> None:
        """Bound the integral and the output to their symmetric limits."""
        self.integral = max(-self.limit_iout, min(self.limit_iout, self.integral))
        self.output = max(-self.limit_out, min(self.limit_out, self.output))


@dataclass
class PidCommand:
    """A tuning command received over a serial link."""

    run: int = 0
    motor: int = 0
    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0


_INT = r"\s*([+-]?\d+)"
_FLOAT = r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))"
_COMMAND = re.compile(
    rf"set{_INT}(?:/{_INT}(?:/{_FLOAT}(?:/{_FLOAT}(?:/{_FLOAT})?)?)?)?",
    re.IGNORECASE,
)


def parse_command(text: str) -> PidCommand:
    """Parse ``set<run>/<motor>/<kp>/<ki>/<kd>``; fields that do not match stay zero."""
    command = PidCommand()
    match = _COMMAND.match(text)
    if match is None:
        return command
    run, motor, kp, ki, kd = match.groups()
    command.run = int(run)
    if motor is not None:
        command.motor = int(motor)
    if kp is not None:
        command.kp = float(kp)
    if ki is not None:
        command.ki = float(ki)
    if kd is not None:
        command.kd = float(kd)
    return command


def _setup_controllers() -> list[Pid]:
    controllers: list[Pid] = []
    for index in range(4):
        limit = 16384.0 if index == 2 else 30000.0
        controllers.append(
            Pid(motor_number=index, kp=6.5, ki=0.05, kd=0.001, limit_iout=limit, limit_out=limit)
        )
    for index in range(4, 8):
        pid = Pid(motor_number=index, kp=165.0, ki=7.0, kd=0.0, limit_iout=30000.0, limit_out=30000.0)
        if index == 4:
            pid.angular_velocity_mode, pid.axis = True, EulerAxis.YAW
        elif index == 5:
            pid.angular_velocity_mode, pid.axis = True, EulerAxis.PIT
        controllers.append(pid)
    for index in range(8, 12):
        controllers.append(
            Pid(
                motor_number=index,
                kp=0.15,
                ki=0.0,
                kd=0.0,
                limit_iout=SERVO_SPEED_LIMIT,
                limit_out=SERVO_SPEED_LIMIT,
                angular_velocity_mode=index in (8, 9),
            )
        )
    return controllers


@dataclass
class PidBank:
    """The twelve controllers: speed loops 0-7 and steering position loops 8-11."""

    motors: MotorBus = field(default_factory=MotorBus)
    controllers: list[Pid] = field(default_factory=_setup_controllers)

    def controller(self, index: int) -> Pid:
        if not 0 <= index < len(self.controllers):
            raise IndexError(f"no controller {index}")
        return self.controllers[index]

    def cascade(self, speed_index: int, position_index: int, imu: ImuReading | None = None) -> float:
        """Run a position loop feeding a speed loop; return the speed loop output."""
        imu = imu or ImuReading()
        speed = self.controller(speed_index)
        position = self.controller(position_index)
        motor = self.motors.measure(speed.motor_number)

        if position.angular_velocity_mode:
            position_actual = imu.angle(position.axis)
        else:
            position_actual = float(motor.total_ecd)
        position.update(position_actual)
        if position.active:
            if position.error == 0:
                speed.ideal = position.output
        else:
            speed.ideal = position.ideal

        if speed.angular_velocity_mode:
            speed_actual = imu.rate(speed.axis)
        else:
            speed_actual = float(motor.speed_rpm)
        return speed.update(speed_actual)

    def single(self, index: int) -> float:
        """Run one speed loop against its motor's measured speed."""
        pid = self.controller(index)
        return pid.update(float(self.motors.measure(pid.motor_number).speed_rpm))

    def chassis_step(self) -> list[float]:
        """Run the four drive speed loops against motors 0-3; return their outputs."""
        for pid, motor in zip(self.controllers[:4], self.motors):
            if pid.active and pid.error == 0:
                pid.update(float(motor.speed_rpm))
        return [pid.output for pid in self.controllers[:4]]

    def apply_command(self, text: str) -> PidCommand:
        """Apply a tuning command; raise ValueError for a motor outside 0-11."""
        command = parse_command(text)
        if not 0 <= command.motor <= 11:
            raise ValueError(f"motor {command.motor} out of range")
        pid = self.controllers[command.motor]
        if command.run == 1:
            pid.active = True
        elif command.run == 0:
            pid.active = False
            pid.output = 0.0
        pid.kp, pid.ki, pid.kd = command.kp, command.ki, command.kd
        return command


def default_controllers(motors: MotorBus | None = None) -> PidBank:
    """Build the bank with the robot's tuned gains and limits."""
    return PidBank(motors=motors if motors is not None else MotorBus())


@dataclass
class StepTarget:
    """Shared target value for step-response experiments."""

    value: float = 0.0