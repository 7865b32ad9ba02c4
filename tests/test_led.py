import pytest

from swervebot.led import LedColor, Leds


def test_initially_dark():
    leds = Leds()
    assert all(leds.brightness(c) == 0 for c in LedColor)
    assert not any(leds.on.values())


def test_toggle_on_and_off():
    leds = Leds()
    assert leds.toggle(LedColor.GREEN) is True
    assert leds.brightness(LedColor.GREEN) == 255
    assert leds.toggle(LedColor.GREEN) is False
    assert leds.brightness(LedColor.GREEN) == 0


def test_toggle_twice_restores_state():
    leds = Leds()
    leds.toggle(LedColor.RED)
    leds.toggle(LedColor.RED)
    assert leds.on[LedColor.RED] is False
    assert leds.brightness(LedColor.RED) == 0


def test_write_sets_brightness_and_state():
    leds = Leds()
    leds.write(LedColor.BLUE, 128)
    assert leds.brightness(LedColor.BLUE) == 128
    assert leds.on[LedColor.BLUE] is True
    assert leds.brightness(LedColor.RED) == 0


def test_toggle_after_write_turns_off():
    leds = Leds()
    leds.write(LedColor.BLUE, 10)
    assert leds.toggle(LedColor.BLUE) is False
    assert leds.brightness(LedColor.BLUE) == 0


@pytest.mark.parametrize("value", [-1, 256])
def test_write_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        Leds().write(LedColor.RED, value)


def test_unknown_colour_rejected():
    with pytest.raises(ValueError):
        Leds().toggle(3)


@pytest.mark.parametrize(
    "channel, colour",
    [(0, LedColor.BLUE), (4, LedColor.GREEN), (8, LedColor.RED)],
)
def test_channel_values_drive_matching_colour(channel, colour):
    leds = Leds()
    leds.write(LedColor(channel), 77)
    assert leds.brightness(colour) == 77
    others = [c for c in LedColor if c is not colour]
    assert all(leds.brightness(c) == 0 for c in others)