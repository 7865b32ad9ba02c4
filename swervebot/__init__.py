"""Control logic for a four-wheel swerve-drive robot: CAN feedback, PID loops, remote frames, kinematics and board dispatch."""

__version__ = "0.1.0"

__all__ = ["buzzer", "can", "chassis", "dispatch", "dwt", "led", "pid", "rc"]