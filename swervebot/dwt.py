"""Timing from a free-running 32-bit CPU cycle counter."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

UINT32_MASK = 0xFFFFFFFF
UINT32_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class SystemTime:
    """Elapsed time split into seconds, milliseconds and microseconds."""

    s: int
    ms: int
    us: int


class CycleClock:
    """Keeps time from a 32-bit cycle counter, counting its rollovers.

    ``counter`` returns the raw counter value; by default it is derived from
    the host's performance counter at the given CPU frequency. The counter is
    treated as zero at construction.
    """

    def __init__(self, cpu_freq_mhz: int, counter: Optional[Callable[[], int]] = None) -> None:
        if cpu_freq_mhz <= 0:
            raise ValueError("CPU frequency must be positive")
        self.freq_hz = cpu_freq_mhz * 1_000_000
        self.freq_hz_ms = self.freq_hz // 1000
        self.freq_hz_us = self.freq_hz // 1_000_000
        self._counter = counter if counter is not None else self._host_counter
        self._origin = self._counter() & UINT32_MASK
        self._rounds = 0
        self._last = 0
        self.cycles64 = 0
        self.time = SystemTime(0, 0, 0)

    def _host_counter(self) -> int:
        return (time.perf_counter_ns() * self.freq_hz // 1_000_000_000) & UINT32_MASK

    def _read(self) -> int:
        return (self._counter() - self._origin) & UINT32_MASK

    def _track_rollover(self) -> None:
        now = self._read()
        if now < self._last:
            self._rounds += 1
        self._last = now

    def delta(self, last: int) -> tuple[float, int]:
        """Return seconds since counter value ``last`` and the current value."""
        now = self._read()
        dt = ((now - last) & UINT32_MASK) / self.freq_hz
        self._track_rollover()
        return dt, now

    def system_time(self) -> SystemTime:
        """Update and return the time elapsed since construction."""
        now = self._read()
        self._track_rollover()
        self.cycles64 = self._rounds * UINT32_MAX + now
        seconds = self.cycles64 // self.freq_hz
        rest = self.cycles64 - seconds * self.freq_hz
        ms = rest // self.freq_hz_ms
        us = (rest - ms * self.freq_hz_ms) // self.freq_hz_us
        self.time = SystemTime(seconds, ms, us)
        return self.time

    def timeline_s(self) -> float:
        t = self.system_time()
        return t.s + t.ms * 0.001 + t.us * 0.000001

    def timeline_ms(self) -> float:
        t = self.system_time()
        return t.s * 1000 + t.ms + t.us * 0.001

    def timeline_us(self) -> int:
        t = self.system_time()
        return t.s * 1_000_000 + t.ms * 1000 + t.us

    def delay(self, seconds: float) -> None:
        """Busy-wait until ``seconds`` worth of cycles have passed."""
        start = self._read()
        target = seconds * self.freq_hz
        while ((self._read() - start) & UINT32_MASK) < target:
            pass