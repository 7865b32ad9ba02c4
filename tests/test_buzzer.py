import pytest

from swervebot.buzzer import (
    ARR_TABLE,
    PSC_TABLE,
    Buzzer,
    Major,
    Tone,
    note_frequency,
)


def _settings_for_all_slots():
    buzzer = Buzzer()
    settings = []
    for slot in range(128):
        assert buzzer.apply_frequency(slot) == slot
        settings.append(
            (buzzer.setting.prescaler, buzzer.setting.reload, buzzer.setting.compare)
        )
    return settings


def test_every_slot_loads_from_tables():
    settings = _settings_for_all_slots()
    assert len(settings) == 128
    assert [s[0] for s in settings] == list(PSC_TABLE)
    assert [s[1] for s in settings] == list(ARR_TABLE)
    assert all(compare == reload // 16 for _, reload, compare in settings)


def test_table_endpoints():
    buzzer = Buzzer()
    buzzer.apply_frequency(0)
    assert buzzer.setting.prescaler == 313
    assert buzzer.setting.reload == 65439
    buzzer.apply_frequency(127)
    assert buzzer.setting.prescaler == 0
    assert buzzer.setting.reload == 13392


def test_prescaler_never_increases():
    prescalers = [p for p, _, _ in _settings_for_all_slots()]
    assert all(a >= b for a, b in zip(prescalers, prescalers[1:]))


def test_note_frequency_pinned_values():
    assert note_frequency(69) == 440
    assert note_frequency(60) == 261
    assert note_frequency(0) == 8
    assert note_frequency(127) == 12543


def test_note_frequency_octave_doubles():
    for note in range(0, 116, 7):
        assert abs(note_frequency(note + 12) - 2 * note_frequency(note)) <= 2


def test_note_frequency_out_of_range():
    with pytest.raises(ValueError):
        note_frequency(128)
    with pytest.raises(ValueError):
        note_frequency(-1)


def test_set_pitch_la_in_c_is_a440():
    buzzer = Buzzer()
    assert buzzer.set_pitch(Tone.LA) == 440
    assert buzzer.setting.prescaler == PSC_TABLE[69]
    assert buzzer.setting.reload == ARR_TABLE[69]
    assert buzzer.setting.compare == ARR_TABLE[69] // 16


def test_set_pitch_follows_major():
    buzzer = Buzzer()
    buzzer.set_major(Major.A)
    assert buzzer.set_pitch(Tone.DO) == note_frequency(Major.A)


def test_invalid_tone_plays_tonic():
    buzzer = Buzzer(Major.G)
    assert buzzer.set_pitch(0) == buzzer.set_pitch(Tone.DO)


def test_set_pitch_out_of_table_raises():
    buzzer = Buzzer()
    buzzer.set_major(125)
    with pytest.raises(ValueError):
        buzzer.set_pitch(Tone.SI)


def test_apply_frequency_loads_slot():
    buzzer = Buzzer()
    assert buzzer.apply_frequency(0) == 0
    assert buzzer.setting.prescaler == 313
    assert buzzer.setting.compare == buzzer.setting.reload // 16


def test_apply_frequency_rejects_unknown_slot():
    with pytest.raises(ValueError):
        Buzzer().apply_frequency(261)


def test_mute_and_start():
    buzzer = Buzzer()
    assert buzzer.running is True
    buzzer.mute()
    assert buzzer.running is False
    buzzer.start()
    assert buzzer.running is True