import pytest

from chip8vm import Display


def test_xor_pixel_reports_collision():
    d = Display()
    assert d.xor_pixel(3, 4) is False
    assert d.pixels[4, 3] == 1
    assert d.xor_pixel(3, 4) is True
    assert d.pixels[4, 3] == 0


@pytest.mark.parametrize("x, y, expected", [
    (64, 0, (0, 0)),
    (0, 32, (0, 0)),
    (65, 33, (1, 1)),
    (127, 63, (63, 31)),
])
def test_xor_pixel_wraps_both_axes(x, y, expected):
    d = Display()
    d.xor_pixel(x, y)
    ex, ey = expected
    assert d.pixels[ey, ex] == 1
    assert d.pixels.sum() == 1


def test_sprite_wraps_right_edge():
    d = Display()
    d.draw_sprite(62, 0, [0xF0])
    assert list(d.pixels[0, 62:]) == [1, 1]
    assert list(d.pixels[0, :2]) == [1, 1]
    assert d.pixels.sum() == 4


def test_sprite_wraps_bottom_edge():
    d = Display()
    d.draw_sprite(0, 30, [0x80, 0x80, 0x80, 0x80])
    assert [d.pixels[y, 0] for y in (30, 31, 0, 1)] == [1, 1, 1, 1]
    assert d.pixels.sum() == 4


def test_snapshot_is_a_copy():
    d = Display()
    snap = d.snapshot()
    d.xor_pixel(0, 0)
    assert snap[0, 0] == 0
    assert snap.shape == (32, 64)


def test_clear_and_text():
    d = Display()
    d.draw_sprite(0, 0, [0xC0])
    assert d.to_text().splitlines()[0].startswith("##..")
    d.clear()
    assert not d.pixels.any()
    assert len(d.to_text().splitlines()) == 32
