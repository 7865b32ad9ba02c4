"""RGB status LED driven by three PWM channels."""

from __future__ import annotations

from enum import IntEnum


class LedColor(IntEnum):
    """LED colours, valued by the timer channel that drives them."""

    BLUE = 0x00
    GREEN = 0x04
    RED = 0x08


FULL_BRIGHTNESS = 255


class Leds:
    """Tracks brightness and on/off state of each LED channel."""

    def __init__(self) -> None:
        self.on: dict[LedColor, bool] = {color: False for color in LedColor}
        self._compare: dict[LedColor, int] = {color: 0 for color in LedColor}

    def write(self, color: LedColor, brightness: int) -> None:
        """Set a channel's brightness (0-255) and mark it active."""
        color = LedColor(color)
        if not 0 <= brightness <= FULL_BRIGHTNESS:
            raise ValueError(f"brightness {brightness} outside 0-{FULL_BRIGHTNESS}")
        self.on[color] = True
        self._compare[color] = brightness

    def toggle(self, color: LedColor) -> bool:
        """Switch a channel fully on or off; return the new state."""
        color = LedColor(color)
        if self.on[color]:
            self._compare[color] = 0
            self.on[color] = False
        else:
            self._compare[color] = FULL_BRIGHTNESS
            self.on[color] = True
        return self.on[color]

    def brightness(self, color: LedColor) -> int:
        return self._compare[LedColor(color)]