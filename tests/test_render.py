""" tests for the Pillow renderer """

import pytest

from thinlens import config
from thinlens.frame import FrameDriver
from thinlens.optics import lens_state
from thinlens.render import PillowRenderer, clip_line

RED = (255, 0, 0, 255)


def test_clip_line_inside_is_unchanged():
    assert clip_line(10, 10, 50, 40, 0, 100, 0, 100) == (10, 10, 50, 40)


def test_clip_line_crossing_edges():
    x0, y0, x1, y1 = clip_line(-50, 20, 150, 20, 0, 100, 0, 100)
    assert (x0, y0) == pytest.approx((0, 20))
    assert (x1, y1) == pytest.approx((100, 20))
    x0, y0, x1, y1 = clip_line(50, -100, 50, 300, 0, 100, 0, 100)
    assert (y0, y1) == pytest.approx((0, 100))


def test_clip_line_outside():
    assert clip_line(-50, 20, -10, 20, 0, 100, 0, 100) is None
    assert clip_line(10, 120, 90, 150, 0, 100, 0, 100) is None
    assert clip_line(-50, 60, 30, 140, 0, 100, 0, 100) is None


def _column(img, x, rows):
    return [img.getpixel((x, y)) for y in rows]


def test_solid_line():
    r = PillowRenderer(100, 100)
    r.clear(config.BACKGROUND)
    r.line((0, 50), (99, 50), RED)
    assert RED in _column(r.image, 30, range(48, 53))


def test_dashed_line_has_gaps():
    r = PillowRenderer(200, 100, dash_length=8)
    r.clear(config.BACKGROUND)
    r.line((0, 50), (199, 50), RED, dashed=True)
    assert RED in _column(r.image, 4, range(48, 53))
    assert RED not in _column(r.image, 12, range(48, 53))


def test_offscreen_line_draws_nothing():
    r = PillowRenderer(100, 100)
    r.clear(config.BACKGROUND)
    r.line((-500, -500), (-100, 20000), RED)
    r.line((1e6, 50), (2e6, 50), RED, dashed=True)
    assert RED not in r.image.getdata()


def test_point_and_text():
    r = PillowRenderer(100, 100)
    r.clear(config.BACKGROUND)
    r.point((50, 50), 4, RED)
    assert r.image.getpixel((50, 50)) == RED
    r.text((5, 5), "F'", config.TEXT)
    box = r.image.crop((0, 0, 40, 30))
    assert any(px != config.BACKGROUND for px in box.getdata())


def test_full_frame_on_pillow():
    r = PillowRenderer(config.CANVAS_WIDTH, config.CANVAS_HEIGHT)
    driver = FrameDriver(r, config.CANVAS_WIDTH, config.CANVAS_HEIGHT, object_height=60.0)
    driver.render_frame((200.0, 0.0), lens_state(config.FOCAL_LENGTH))
    assert r.image.size == (config.CANVAS_WIDTH, config.CANVAS_HEIGHT)
    # parallel ray between object and lens, object tip at canvas y=190
    assert config.RAY_PARALLEL in _column(r.image, 300, range(187, 194))
    # central ray at optical x=100 passes y=-30, canvas (500, 280)
    assert config.RAY_CENTRAL in _column(r.image, 500, range(277, 284))
