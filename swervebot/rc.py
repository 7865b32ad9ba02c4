"""Remote-control receiver: SBUS-like frame decoding and sanity checking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Callable, Optional, Sequence

SBUS_RX_BUF_NUM = 36
RC_FRAME_LENGTH = 18
RC_CH_VALUE_MIN = 364
RC_CH_VALUE_OFFSET = 1024
RC_CH_VALUE_MAX = 1684
RC_CHANNEL_ERROR_VALUE = 700
FORWARD_HEADER = 0xA6
FORWARD_LENGTH = 20


class Switch(IntEnum):
    """Positions of a three-way toggle switch."""

    UP = 1
    DOWN = 2
    MID = 3


class Key(IntFlag):
    """Keyboard bits carried in the key field of a frame."""

    W = 1 << 0
    S = 1 << 1
    A = 1 << 2
    D = 1 << 3
    SHIFT = 1 << 4
    CTRL = 1 << 5
    Q = 1 << 6
    E = 1 << 7
    R = 1 << 8
    F = 1 << 9
    G = 1 << 10
    Z = 1 << 11
    X = 1 << 12
    C = 1 << 13
    V = 1 << 14
    B = 1 << 15


def _int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value >= 0x8000 else value


@dataclass
class RemoteControl:
    """Decoded state of the remote: sticks, switches, mouse and keyboard."""

    channels: list[int] = field(default_factory=lambda: [0] * 5)
    switches: list[int] = field(default_factory=lambda: [0, 0])
    mouse_x: int = 0
    mouse_y: int = 0
    mouse_z: int = 0
    press_l: int = 0
    press_r: int = 0
    key: int = 0

    @property
    def keys(self) -> Key:
        """The key field as a set of flags."""
        return Key(self.key & 0xFFFF)

    def check(self) -> bool:
        """Return True if the data is implausible, resetting it to a safe state."""
        faulty = any(abs(ch) > RC_CHANNEL_ERROR_VALUE for ch in self.channels[:4]) or any(
            s == 0 for s in self.switches
        )
        if not faulty:
            return False
        self.channels = [0] * 5
        self.switches = [int(Switch.DOWN), int(Switch.DOWN)]
        self.mouse_x = self.mouse_y = self.mouse_z = 0
        self.press_l = self.press_r = 0
        self.key = 0
        return True


def parse_sbus(frame: Sequence[int]) -> RemoteControl:
    """Decode an 18-byte receiver frame into a RemoteControl."""
    if len(frame) < RC_FRAME_LENGTH:
        raise ValueError(f"remote frame needs {RC_FRAME_LENGTH} bytes, got {len(frame)}")
    b = [value & 0xFF for value in frame[:RC_FRAME_LENGTH]]
    raw = [
        (b[0] | b[1] << 8) & 0x07FF,
        (b[1] >> 3 | b[2] << 5) & 0x07FF,
        (b[2] >> 6 | b[3] << 2 | b[4] << 10) & 0x07FF,
        (b[4] >> 1 | b[5] << 7) & 0x07FF,
        _int16(b[16] | b[17] << 8),
    ]
    return RemoteControl(
        channels=[_int16(value - RC_CH_VALUE_OFFSET) for value in raw],
        switches=[(b[5] >> 4) & 0x03, ((b[5] >> 4) & 0x0C) >> 2],
        mouse_x=_int16(b[6] | b[7] << 8),
        mouse_y=_int16(b[8] | b[9] << 8),
        mouse_z=_int16(b[10] | b[11] << 8),
        press_l=b[12],
        press_r=b[13],
        key=(b[14] | b[15] << 8) & 0xFFFF,
    )


def forward_frame(sbus: Sequence[int]) -> bytes:
    """Wrap an 18-byte frame as header, payload and an 8-bit additive checksum."""
    if len(sbus) != RC_FRAME_LENGTH:
        raise ValueError(f"forwarded frame must be {RC_FRAME_LENGTH} bytes")
    body = bytes([FORWARD_HEADER]) + bytes(value & 0xFF for value in sbus)
    return body + bytes([sum(body) & 0xFF])


@dataclass
class RcReceiver:
    """Accepts received chunks, decoding those that are whole frames."""

    rc: RemoteControl = field(default_factory=RemoteControl)
    sink: Optional[Callable[[bytes], None]] = None

    def receive(self, data: Sequence[int]) -> bool:
        """Decode ``data`` if it is exactly one frame and forward it; report acceptance."""
        if len(data) != RC_FRAME_LENGTH:
            return False
        self.rc = parse_sbus(data)
        if self.sink is not None:
            self.sink(forward_frame(data))
        return True