# config.py
# Scene constants for the thin lens ray diagram. One optical-axis unit maps to
# one canvas pixel, so the scene half width is CANVAS_WIDTH / 2.

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 500

FOCAL_LENGTH = 150.0
OBJECT_HEIGHT = 60.0

# Pointer clamping (optical units)
EDGE_MARGIN = 20.0
MIN_LENS_GAP = 10.0
FOCAL_GUARD = 1.0

FRAME_RATE = 60.0

LENS_HALF_HEIGHT = 120.0
ARROWHEAD = 8.0
FOCAL_MARKER_RADIUS = 4
DASH_LENGTH = 8.0
GRID_STEP = 50

# RGBA
BACKGROUND = (18, 18, 24, 255)
GRID = (40, 40, 52, 255)
AXIS = (150, 150, 160, 255)
LENS = (120, 180, 255, 255)
FOCUS = (255, 255, 255, 255)
OBJECT = (255, 110, 60, 255)
IMAGE = (80, 200, 255, 255)
TEXT = (230, 230, 230, 255)
RAY_PARALLEL = (255, 230, 40, 255)    # yellow
RAY_CENTRAL = (60, 220, 90, 255)      # green
RAY_FOCAL = (240, 60, 240, 255)       # magenta
