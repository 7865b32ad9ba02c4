"""Board-level dispatch: CAN feedback routing, serial tuning commands and printf."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Deque, Dict, Optional, Union

from swervebot.can import CanId, MotorBus
from swervebot.led import LedColor, Leds
from swervebot.pid import PidBank, PidCommand, default_controllers

MESSAGE_BUFFER_SIZE = 1024
PRINTF_BUFFER_SIZE = MESSAGE_BUFFER_SIZE // 4
LENGTH_HEADER_SIZE = 4

CAN_BUS_1 = 1
CAN_BUS_2 = 2

_CAN1_MOTOR_IDS = range(CanId.M3508_M1, CanId.M3508_M4 + 1)
_CAN2_MOTOR_IDS = range(CanId.YAW_MOTOR, 0x208 + 1)


class UartPort(IntEnum):
    """Serial outputs; the USB CDC port shares the first UART's channel."""

    CDC = 0
    UART1 = 1
    UART6 = 6


class MessageChannel:
    """A bounded queue of whole messages, each stored with a length header."""

    def __init__(self, capacity: int = MESSAGE_BUFFER_SIZE) -> None:
        if capacity <= LENGTH_HEADER_SIZE:
            raise ValueError("capacity must exceed the length header size")
        self.capacity = capacity
        self._messages: Deque[bytes] = deque()
        self._used = 0

    @property
    def free(self) -> int:
        return self.capacity - self._used

    def send(self, data: bytes) -> int:
        """Queue ``data`` as one message; return its length, or 0 if it does not fit."""
        data = bytes(data)
        needed = len(data) + LENGTH_HEADER_SIZE
        if not data or needed > self.free:
            return 0
        self._messages.append(data)
        self._used += needed
        return len(data)

    def receive(self) -> Optional[bytes]:
        """Take the oldest message, or None if the channel is empty."""
        if not self._messages:
            return None
        message = self._messages.popleft()
        self._used -= len(message) + LENGTH_HEADER_SIZE
        return message

    def __len__(self) -> int:
        return len(self._messages)


@dataclass
class Board:
    """Ties the motor feedback, controllers, status LED and serial channels together."""

    bank: PidBank = field(default_factory=default_controllers)
    leds: Leds = field(default_factory=Leds)
    channel_capacity: int = MESSAGE_BUFFER_SIZE
    channels: Dict[UartPort, MessageChannel] = field(init=False)
    rx_events: Dict[UartPort, int] = field(init=False)

    def __post_init__(self) -> None:
        self.channels = {
            UartPort.UART1: MessageChannel(self.channel_capacity),
            UartPort.UART6: MessageChannel(self.channel_capacity),
        }
        self.rx_events = {UartPort.UART1: 0, UartPort.UART6: 0}

    @property
    def motors(self) -> MotorBus:
        return self.bank.motors

    def on_can_message(self, bus: int, std_id: int, data: bytes) -> Optional[int]:
        """Store motor feedback from a received frame; return the motor index or None."""
        if bus == CAN_BUS_1 and std_id in _CAN1_MOTOR_IDS:
            index = std_id - CanId.M3508_M1
        elif bus == CAN_BUS_2 and std_id in _CAN2_MOTOR_IDS:
            index = std_id - CanId.M3508_M1
        else:
            return None
        motor = self.motors.measure(index)
        motor.update(data)
        motor.update_total_angle()
        return index

    def on_uart_rx(self, port: UartPort, text: Union[str, bytes]) -> Optional[PidCommand]:
        """Handle a received tuning line; return the applied command or None."""
        try:
            port = UartPort(port)
        except ValueError:
            return None
        if port not in self.rx_events:
            return None
        self.rx_events[port] += 1
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).split(b"\0", 1)[0].decode("latin-1")
        try:
            command: Optional[PidCommand] = self.bank.apply_command(text)
        except ValueError:
            command = None
        self.leds.toggle(LedColor.GREEN)
        return command

    def printf(self, port: UartPort, fmt: str, *args: object) -> int:
        """Format and queue a message; return the untruncated formatted length.

        At most 255 bytes are queued. Raises BufferError if the channel is full.
        """
        try:
            port = UartPort(port)
        except ValueError:
            port = UartPort.UART1
        channel = self.channels.get(port, self.channels[UartPort.UART1])
        encoded = (fmt % args if args else fmt).encode("utf-8")
        written = len(encoded)
        if written > 0:
            payload = encoded[: PRINTF_BUFFER_SIZE - 1]
            if channel.send(payload) != len(payload):
                raise BufferError("message channel has no room for the message")
        return written