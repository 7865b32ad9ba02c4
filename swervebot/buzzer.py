"""Buzzer pitch control through a PWM timer's prescaler and reload values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

NOTE_COUNT = 128


class Major(IntEnum):
    """MIDI note of the tonic of each major scale."""

    C = 60
    D = 62
    E = 64
    F = 65
    G = 67
    A = 69
    B = 71


class Tone(IntEnum):
    """Scale degrees (solfege)."""

    DO = 1
    RE = 2
    MI = 3
    FA = 4
    SOL = 5
    LA = 6
    SI = 7


_SEMITONE_OFFSETS = (0, 2, 4, 5, 7, 9, 11)

PSC_TABLE: tuple[int, ...] = (
    313, 295, 279, 263, 248, 234, 221, 209, 197, 186,
    175, 166, 156, 147, 139, 131, 124, 117, 110, 104,
    98, 93, 87, 83, 78, 73, 69, 65, 62, 58,
    55, 52, 49, 46, 43, 41, 39, 36, 34, 32,
    31, 29, 27, 26, 24, 23, 21, 20, 19, 18,
    17, 16, 15, 14, 13, 13, 12, 11, 10, 10,
    9, 9, 8, 8, 7, 7, 6, 6, 6, 5,
    5, 5, 4, 4, 4, 4, 3, 3, 3, 3,
    3, 2, 2, 2, 2, 2, 2, 2, 1, 1,
    1, 1, 1, 1, 1, 1, 1, 1, 1, 1,
) + (0,) * 28

ARR_TABLE: tuple[int, ...] = (
    65439, 65523, 65379, 65450, 65498, 65505, 65449, 65305, 65376, 65336,
    65524, 65179, 65439, 65523, 65379, 65450, 65236, 65227, 65449, 65305,
    65376, 64989, 65524, 64791, 65025, 65523, 65379, 65450, 64718, 65227,
    64864, 64689, 64722, 64989, 65524, 64791, 64212, 65523, 65379, 65450,
    63707, 64140, 64864, 63491, 64722, 63635, 65524, 64791, 64212, 63798,
    63563, 63525, 63707, 64140, 64864, 61224, 62233, 63635, 65524, 61846,
    64212, 60608, 63563, 59995, 63707, 60131, 64864, 61224, 57787, 63635,
    60063, 56692, 64212, 60608, 57207, 53996, 63707, 60131, 56756, 53571,
    50564, 63635, 60063, 56692, 53510, 50507, 47672, 44996, 63707, 60131,
    56756, 53571, 50564, 47726, 45047, 42519, 40132, 37880, 35754, 33747,
    63707, 60131, 56756, 53571, 50564, 47726, 45047, 42519, 40132, 37880,
    35754, 33747, 31853, 30065, 28377, 26785, 25281, 23862, 22523, 21259,
    20065, 18939, 17876, 16873, 15926, 15032, 14188, 13392,
)


@dataclass(frozen=True)
class TimerSetting:
    """Register values loaded into the PWM timer."""

    prescaler: int
    reload: int
    compare: int


def _check_note(note: int) -> int:
    if not 0 <= note < NOTE_COUNT:
        raise ValueError(f"note {note} outside 0-{NOTE_COUNT - 1}")
    return note


def note_frequency(note: int) -> int:
    """Equal-tempered frequency of a MIDI note, truncated to whole hertz."""
    _check_note(note)
    return int(440.0 * 2.0 ** ((note - 69) / 12.0))


def _setting(index: int) -> TimerSetting:
    reload = ARR_TABLE[index]
    return TimerSetting(prescaler=PSC_TABLE[index], reload=reload, compare=reload // 16)


class Buzzer:
    """Plays scale degrees of the selected major key on the PWM buzzer."""

    def __init__(self, major: int = Major.C) -> None:
        self.major = int(major)
        self.running = True
        self.setting: Optional[TimerSetting] = None

    def set_major(self, major: int) -> None:
        """Select the key whose tonic later tones are relative to."""
        self.major = int(major)

    def set_pitch(self, tone: int) -> int:
        """Tune to a scale degree of the current key; return its frequency in hertz.

        Degrees outside 1-7 play the tonic.
        """
        offset = _SEMITONE_OFFSETS[tone - 1] if 0 < tone <= 7 else 0
        note = _check_note(self.major + offset)
        self.setting = _setting(note)
        return note_frequency(note)

    def apply_frequency(self, frequency: int) -> int:
        """Load the timer setting stored in table slot ``frequency``; return the slot."""
        self.setting = _setting(_check_note(frequency))
        return frequency

    def mute(self) -> None:
        self.running = False

    def start(self) -> None:
        self.running = True