# frame.py
# Per-frame orchestration: pointer -> clamped object position -> optics ->
# drawing commands. The renderer only ever sees canvas pixels; to_canvas is
# the single place where optical-axis units become pixels.

import math

import numpy as np
from kivy.logger import Logger

from thinlens import config
from thinlens.optics import (
    SceneInput, image_of, is_real, is_upright, signed_focal_length,
    singular_object_x, trace_rays,
)


def to_canvas(point, width, height):
    """Optical-axis units (origin at lens, y up) to canvas pixels (origin top-left, y down)."""
    x, y = point
    return x + width / 2.0, height / 2.0 - y


def clamp_object_x(pointer_x, half_width, signed_f,
                   margin=config.EDGE_MARGIN, min_gap=config.MIN_LENS_GAP,
                   guard=config.FOCAL_GUARD):
    """ Map a canvas pointer x to a valid object position.

    The result lies in [-half_width + margin, -min_gap], so the object stays
    left of the lens, and at least `guard` away from the position where the
    lens equation is singular.
    """
    lo, hi = -half_width + margin, -min_gap
    x = float(np.clip(pointer_x - half_width, lo, hi))
    singular = singular_object_x(signed_f)
    if abs(x - singular) < guard:
        nudged = singular + guard if x >= singular else singular - guard
        if not lo <= nudged <= hi:
            nudged = 2 * singular - nudged
        Logger.debug(f"ThinLens: object x {x:.3f} within {guard} of focal point, moved to {nudged:.3f}")
        x = nudged
    return x


class FrameDriver:
    """ Draws one complete ray diagram per call to render_frame.

    renderer must provide clear(color), line(p0, p1, color, width, dashed),
    point(p, radius, color) and text(p, label, color), all in canvas pixels.
    """

    def __init__(self, renderer, width=config.CANVAS_WIDTH, height=config.CANVAS_HEIGHT,
                 object_height=config.OBJECT_HEIGHT, show_grid=False):
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive, got {width}x{height}")
        if not object_height > 0:
            raise ValueError(f"object height must be positive, got {object_height}")
        usable = width / 2.0 - config.EDGE_MARGIN - config.MIN_LENS_GAP
        if usable <= 2 * config.FOCAL_GUARD:
            raise ValueError(f"canvas width {width} leaves no room for the object")
        self.renderer = renderer
        self.width = width
        self.height = height
        self.object_height = float(object_height)
        self.show_grid = show_grid

    @property
    def half_width(self):
        return self.width / 2.0

    def _px(self, point):
        return to_canvas(point, self.width, self.height)

    def _line(self, p0, p1, color, width=2, dashed=False):
        self.renderer.line(self._px(p0), self._px(p1), color, width=width, dashed=dashed)

    def render_frame(self, pointer, state):
        signed_f = signed_focal_length(state)
        u = clamp_object_x(pointer[0], self.half_width, signed_f)
        scene = SceneInput(u, self.object_height)
        result = image_of(scene, signed_f)

        self.renderer.clear(config.BACKGROUND)
        if self.show_grid:
            self._draw_grid()
        self._draw_axis()
        self._draw_lens(state.is_converging)
        self._draw_focal_points(signed_f)
        self._draw_arrow(u, scene.object_height, config.OBJECT, "Object")
        self._draw_arrow(result.image_x, result.image_height, config.IMAGE, "Image")
        for ray in trace_rays(scene, signed_f, self.half_width):
            for seg in ray.segments:
                self._line(seg.start, seg.end, ray.color, dashed=seg.dashed)
        self._draw_readout(state, scene, result)
        return result

    def _draw_grid(self):
        hw, hh = self.half_width, self.height / 2.0
        step = config.GRID_STEP
        for xi in range(-int(hw // step) * step, int(hw) + 1, step):
            self._line((xi, -hh), (xi, hh), config.GRID, width=1)
        for yi in range(-int(hh // step) * step, int(hh) + 1, step):
            self._line((-hw, yi), (hw, yi), config.GRID, width=1)

    def _draw_axis(self):
        self._line((-self.half_width, 0.0), (self.half_width, 0.0), config.AXIS, width=1)

    def _draw_lens(self, converging):
        L, a = config.LENS_HALF_HEIGHT, config.ARROWHEAD
        self._line((0.0, -L), (0.0, L), config.LENS, width=3)
        # tips point outward on a converging lens, inward on a diverging one
        sign = -1 if converging else 1
        for end in (L, -L):
            back = end + sign * math.copysign(a, end)
            self._line((0.0, end), (-a, back), config.LENS, width=3)
            self._line((0.0, end), (a, back), config.LENS, width=3)

    def _draw_focal_points(self, signed_f):
        for x, label in ((-signed_f, "F"), (signed_f, "F'")):
            px, py = self._px((x, 0.0))
            self.renderer.point((px, py), config.FOCAL_MARKER_RADIUS, config.FOCUS)
            self.renderer.text((px - 4, py + 8), label, config.FOCUS)

    def _draw_arrow(self, x, h, color, label):
        a = config.ARROWHEAD
        self._line((x, 0.0), (x, h), color, width=3)
        back = h - math.copysign(a, h)
        self._line((x, h), (x - a, back), color, width=3)
        self._line((x, h), (x + a, back), color, width=3)
        px, py = self._px((x, h))
        self.renderer.text((px + 6, py - 14 if h > 0 else py + 4), label, color)

    def _draw_readout(self, state, scene, result):
        kind = "real" if is_real(result) else "virtual"
        orientation = "upright" if is_upright(result) else "inverted"
        lines = (
            f"Lens: {'converging' if state.is_converging else 'diverging'}",
            f"Object distance: {round(abs(scene.object_x))}",
            f"Image distance: {round(abs(result.image_x))}",
            f"Magnification: {result.magnification:.2f} ({kind}, {orientation})",
        )
        for i, line in enumerate(lines):
            self.renderer.text((10, 10 + 18 * i), line, config.TEXT)
