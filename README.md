# swervebot

`swervebot` holds the control logic of a four-wheel swerve-drive robot as
plain Python objects. It has no dependencies beyond the standard library and
touches no hardware: incoming CAN frames, serial lines and remote-control
frames are passed in as bytes or text, and what would be written to timers,
LEDs or buses comes back as return values and object state.

## Modules

| Module | Purpose |
| --- | --- |
| `swervebot.can` | Motor feedback decoding (`MotorMeasure.update`), encoder rollover tracking (`MotorMeasure.update_total_angle`), the eight-motor `MotorBus`, ammo-booster reports (`AmmoBoosterData.from_bytes`), current command payloads (`encode_motor_currents`) and their frame identifiers (`command_frame_id`, `CanId`, `MotorRange`). |
| `swervebot.pid` | Incremental PID loops (`Pid`), the twelve tuned controllers (`default_controllers`, `PidBank`), cascaded position/speed loops fed by motor encoders or an `ImuReading`, and the serial tuning command `set<run>/<motor>/<kp>/<ki>/<kd>` (`parse_command`, `PidBank.apply_command`). `StepTarget` holds a shared step-response target. |
| `swervebot.rc` | Decoding of 18-byte SBUS-like remote frames (`parse_sbus`), the `RemoteControl` state with its sanity check (`RemoteControl.check`), switch and key enums (`Switch`, `Key`), the checksummed 20-byte forwarded frame (`forward_frame`) and `RcReceiver`, which accepts only whole frames. |
| `swervebot.buzzer` | `Buzzer` pitch selection by major key (`Major`) and scale degree (`Tone`), returning frequencies and keeping the PWM `TimerSetting` (prescaler, reload, compare). `note_frequency` gives the equal-tempered frequency of a MIDI note. |
| `swervebot.chassis` | Swerve kinematics (`SwerveChassis.wheel_speeds`, `SwerveChassis.wheel_angles` with shortest-turn reversal), mode selection from the switches (`SwerveChassis.select_mode`, `ChassisMode`), `angle_limit`, `map_degree_to_8191`, and `Navigator`, which turns stick positions into controller targets. |
| `swervebot.dwt` | `CycleClock`, a 32-bit cycle-counter clock that counts rollovers and reports `SystemTime`, timelines in s/ms/µs, deltas and busy-wait delays. |
| `swervebot.led` | `Leds`: brightness and on/off state of the blue, green and red channels (`LedColor`). |
| `swervebot.dispatch` | `Board`, which routes received CAN frames to motor feedback, applies serial tuning lines (toggling the green LED) and queues formatted messages on bounded `MessageChannel`s per `UartPort`. |

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from swervebot.can import MotorBus
from swervebot.pid import PidBank

motors = MotorBus()
bank = PidBank(motors)

# Feedback frame for motor 0: encoder 0x0100, speed 0x0064 rpm, 30 degrees.
motors.measure(0).update(bytes([0x01, 0x00, 0x00, 0x64, 0, 0, 30, 0]))

bank.controller(0).ideal = 500.0
print(bank.single(0))

# Retune controller 2 over the serial link.
bank.apply_command("set1/2/7.0/0.05/0.001\r\n")
```

Kinematics for a pure forward motion:

```python
from swervebot.chassis import SwerveChassis

chassis = SwerveChassis()
angles = chassis.wheel_angles(0.0, 1.0, 0.0, encoders=[0, 0, 0, 0])
speeds = chassis.wheel_speeds(0.0, 1.0, 0.0)
```

`wheel_angles` may reverse a module's drive direction, and `wheel_speeds`
uses the directions left by the last call, so call them in that order.

Routing traffic through a board:

```python
from swervebot.dispatch import Board, UartPort

board = Board()
board.on_can_message(1, 0x201, bytes([0x01, 0x00, 0x00, 0x64, 0, 0, 30, 0]))
board.on_uart_rx(UartPort.UART1, "set1/0/6.5/0.05/0.001")
board.printf(UartPort.UART1, "speed %d\n", 100)
print(board.channels[UartPort.UART1].receive())
```

## Errors

- `PidBank.apply_command` raises `ValueError` for a motor index outside 0-11.
  `parse_command` itself never raises: fields that do not match stay zero, so
  a line that is not a `set` command applies run 0 to controller 0, which
  stops it and zeroes its gains. `Board.on_uart_rx` returns `None` when the
  command is rejected.
- Short CAN or remote frames, out-of-range notes, LED brightness outside
  0-255 and unknown motor ranges raise `ValueError`; unknown motor or
  controller indices raise `IndexError`.
- `Board.printf` raises `BufferError` when the message channel is full.

## What it does not do

The package does not talk to devices. There are no CAN, UART, timer or DMA
drivers, no task scheduler or control loop that runs on its own, and no
inertial navigation: attitude and gyro values must be supplied as an
`ImuReading`. It has no command-line program.