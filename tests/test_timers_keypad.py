import pytest

from chip8vm import Timers, Keypad


def test_timers_count_down_to_zero():
    t = Timers()
    t.delay, t.sound = 2, 1
    t.tick()
    assert (t.delay, t.sound) == (1, 0)
    assert not t.sound_active
    t.tick()
    t.tick()
    assert (t.delay, t.sound) == (0, 0)


def test_timers_tick_independently():
    t = Timers()
    t.delay, t.sound = 5, 5
    t.tick_delay()
    assert (t.delay, t.sound) == (4, 5)
    t.tick_sound()
    assert (t.delay, t.sound) == (4, 4)
    assert t.sound_active


def test_keypad_first_pressed_is_lowest_index():
    k = Keypad()
    assert k.first_pressed() is None
    k.set_key_pressed(0xB, True)
    k.set_key_pressed(0x3, True)
    assert k.first_pressed() == 3
    k.set_key_pressed(0x3, False)
    assert k.first_pressed() == 0xB
    assert k.is_pressed(0xB)
    k.release_all()
    assert k.first_pressed() is None


@pytest.mark.parametrize("index", [-1, 16, 100])
def test_keypad_rejects_bad_index(index):
    with pytest.raises(ValueError):
        Keypad().set_key_pressed(index, True)
