# render.py
# Pillow renderer for FrameDriver: every command arrives in canvas pixels and
# is drawn onto one RGBA image per frame.

from PIL import Image, ImageDraw
from kivy.logger import Logger

from thinlens import config


def clip_line(x0, y0, x1, y1, xmin, xmax, ymin, ymax):
    """Liang-Barsky clipping; returns the visible part or None."""
    dx = x1 - x0; dy = y1 - y0
    p = [-dx, dx, -dy, dy]
    q = [x0 - xmin, xmax - x0, y0 - ymin, ymax - y0]
    u1, u2 = 0.0, 1.0
    for pi, qi in zip(p, q):
        if abs(pi) < 1e-12:
            if qi < 0:  # parallel and outside
                return None
            continue
        r = qi / pi
        if pi < 0:  # entering
            if r > u2: return None
            if r > u1: u1 = r
        else:       # leaving
            if r < u1: return None
            if r < u2: u2 = r
    return x0 + u1 * dx, y0 + u1 * dy, x0 + u2 * dx, y0 + u2 * dy


class PillowRenderer:

    def __init__(self, width=config.CANVAS_WIDTH, height=config.CANVAS_HEIGHT,
                 dash_length=config.DASH_LENGTH):
        self.width = int(width)
        self.height = int(height)
        self.dash_length = float(dash_length)
        self.reset()

    def reset(self, color=config.BACKGROUND):
        self.image = Image.new('RGBA', (self.width, self.height), color)
        self._draw = ImageDraw.Draw(self.image, 'RGBA')

    def clear(self, color):
        self._draw.rectangle([(0, 0), (self.width, self.height)], fill=color)

    def _clip(self, p0, p1):
        return clip_line(p0[0], p0[1], p1[0], p1[1], 0, self.width - 1, 0, self.height - 1)

    def line(self, p0, p1, color, width=2, dashed=False):
        clipped = self._clip(p0, p1)
        if clipped is None:
            return
        ax0, ay0, ax1, ay1 = clipped
        if not dashed:
            self._draw.line([(ax0, ay0), (ax1, ay1)], fill=color, width=width)
            return
        dist = ((ax1 - ax0)**2 + (ay1 - ay0)**2) ** 0.5
        if dist < 1e-9:
            return
        n = max(1, int(dist / self.dash_length))
        for i in range(0, n, 2):
            t0 = i / n; t1 = min((i + 1) / n, 1.0)
            xa = ax0 + (ax1 - ax0) * t0; ya = ay0 + (ay1 - ay0) * t0
            xb = ax0 + (ax1 - ax0) * t1; yb = ay0 + (ay1 - ay0) * t1
            self._draw.line([(xa, ya), (xb, yb)], fill=color, width=width)

    def point(self, p, radius, color):
        x, y = p
        self._draw.ellipse([(x - radius, y - radius), (x + radius, y + radius)], fill=color)

    def text(self, p, label, color):
        try:
            self._draw.text(p, label, fill=color)
        except (ValueError, OverflowError) as e:
            Logger.warning(f"ThinLens: text {label!r} at {p} not drawn: {e}")
