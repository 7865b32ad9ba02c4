import pytest

from swervebot.rc import (
    FORWARD_HEADER,
    Key,
    RcReceiver,
    RemoteControl,
    Switch,
    forward_frame,
    parse_sbus,
)

# All channels centred (1024), left switch mid, right switch up.
NEUTRAL = bytes([0x00, 0x04, 0x20, 0x00, 0x01, 0x78] + [0] * 11 + [0x04])


def test_neutral_frame_centres_channels():
    rc = parse_sbus(NEUTRAL)
    assert rc.channels == [0, 0, 0, 0, 0]
    assert rc.switches == [Switch.MID, Switch.UP]


def test_neutral_frame_passes_check():
    rc = parse_sbus(NEUTRAL)
    assert rc.check() is False
    assert rc.switches == [3, 1]


def test_zero_frame_gives_offset_channels():
    rc = parse_sbus(bytes(18))
    assert rc.channels == [-1024] * 5
    assert rc.switches == [0, 0]


def test_mouse_and_keys_decoded():
    frame = bytearray(NEUTRAL)
    frame[6], frame[7] = 0xFF, 0xFF
    frame[12], frame[13] = 1, 0
    frame[14], frame[15] = 0x01, 0x80
    rc = parse_sbus(frame)
    assert rc.mouse_x == -1
    assert rc.press_l == 1
    assert rc.keys == Key.W | Key.B


def test_check_resets_on_bad_channel():
    rc = RemoteControl(channels=[701, 0, 0, 0, 5], switches=[1, 1], mouse_x=3, key=7)
    assert rc.check() is True
    assert rc.channels == [0] * 5
    assert rc.switches == [Switch.DOWN, Switch.DOWN]
    assert rc.mouse_x == 0 and rc.key == 0


def test_check_resets_on_zero_switch():
    rc = RemoteControl(channels=[0, 0, 0, 0, 0], switches=[3, 0])
    assert rc.check() is True
    assert rc.switches == [2, 2]


def test_channel_at_limit_is_accepted():
    rc = RemoteControl(channels=[700, -700, 0, 0, 0], switches=[1, 3])
    assert rc.check() is False
    assert rc.channels[0] == 700


def test_short_frame_rejected():
    with pytest.raises(ValueError):
        parse_sbus(bytes(17))


def test_forward_frame_layout():
    out = forward_frame(NEUTRAL)
    assert len(out) == 20
    assert out[0] == FORWARD_HEADER
    assert out[1:19] == NEUTRAL
    assert out[19] == sum(out[:19]) & 0xFF


def test_forward_frame_zero_checksum_is_header():
    assert forward_frame(bytes(18))[19] == 0xA6


def test_forward_frame_wrong_length():
    with pytest.raises(ValueError):
        forward_frame(bytes(10))


def test_receiver_accepts_full_frame():
    sent = []
    receiver = RcReceiver(sink=sent.append)
    assert receiver.receive(NEUTRAL) is True
    assert receiver.rc.switches == [3, 1]
    assert sent == [forward_frame(NEUTRAL)]


def test_receiver_ignores_partial_frame():
    sent = []
    receiver = RcReceiver(sink=sent.append)
    assert receiver.receive(NEUTRAL[:10]) is False
    assert receiver.rc.switches == [0, 0]
    assert sent == []