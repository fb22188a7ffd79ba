# optics.py
# Thin lens imaging and ray construction in optical-axis units.
# Lens at x=0, optical axis along y=0, object on the left (x < 0).
# Nothing here knows about pixels or drawing; colours are plain RGBA tuples.

from collections import namedtuple

import numpy as np

from thinlens import config

PARALLEL = 'parallel'
CENTRAL = 'central'
FOCAL = 'focal'

LensState = namedtuple('LensState', ['is_converging', 'focal_length'])
LensState.is_converging.__doc__ = "True for a converging lens, False for diverging"
LensState.focal_length.__doc__ = "focal length magnitude, always > 0"

SceneInput = namedtuple('SceneInput', ['object_x', 'object_height'])
SceneInput.object_x.__doc__ = "object position on the axis, strictly < 0"
SceneInput.object_height.__doc__ = "object arrow height"

OpticsResult = namedtuple('OpticsResult', ['image_x', 'magnification', 'image_height'])
OpticsResult.image_x.__doc__ = "image position on the axis; > 0 is real, < 0 virtual"
OpticsResult.magnification.__doc__ = "lateral magnification; > 0 upright, < 0 inverted"
OpticsResult.image_height.__doc__ = "object_height * magnification"

RaySegment = namedtuple('RaySegment', ['start', 'end', 'dashed'])
RayPath = namedtuple('RayPath', ['kind', 'color', 'segments'])


def lens_state(focal_length, is_converging=True):
    """ Build a LensState, rejecting a non-positive focal length.

    Raises:
        ValueError: if focal_length <= 0
    """
    focal_length = float(focal_length)
    if not focal_length > 0:
        raise ValueError(f"focal length must be positive, got {focal_length}")
    return LensState(bool(is_converging), focal_length)


def toggle_lens(state):
    return state._replace(is_converging=not state.is_converging)


def signed_focal_length(state):
    return state.focal_length if state.is_converging else -state.focal_length


def singular_object_x(signed_f):
    """ Object position where the lens equation has no finite image. """
    return -signed_f


def compute_image(u, signed_f):
    """ Image position and lateral magnification for an object at u.

    Gaussian form 1/f = 1/v - 1/u solved for v:

        v = f*u / (u + f),   m = v / u

    u must be nonzero and differ from -signed_f; callers clamp the object
    position so neither case reaches this function. If one does, the result
    is inf or nan rather than an exception.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        v = (np.float64(signed_f) * u) / (u + np.float64(signed_f))
        m = v / u
    return float(v), float(m)


def image_of(scene, signed_f):
    v, m = compute_image(scene.object_x, signed_f)
    return OpticsResult(v, m, scene.object_height * m)


def is_real(result):
    return result.image_x > 0


def is_upright(result):
    return result.magnification > 0


def _line_y(p0, p1, x):
    # y on the line through p0 and p1, evaluated at x
    (x0, y0), (x1, y1) = p0, p1
    with np.errstate(divide='ignore', invalid='ignore'):
        y = y0 + (np.float64(y1) - y0) * (x - x0) / (np.float64(x1) - x0)
    return float(y)


def compute_parallel_ray(u, obj_h, signed_f, converging, extent=config.CANVAS_WIDTH / 2):
    """ Ray leaving the object tip parallel to the axis.

    After the lens it follows the line through the lens-plane point
    (0, obj_h) and the image-side focal point (signed_f, 0). For a diverging
    lens that focal point is virtual and sits on the object side, so the
    back-trace to it is dashed. A converging lens forming a virtual image
    gets a dashed back-trace to the image tip instead.
    """
    lens_pt = (0.0, obj_h)
    focus = (signed_f, 0.0)
    exit_pt = (extent, _line_y(lens_pt, focus, extent))
    segments = [
        RaySegment((u, obj_h), lens_pt, False),
        RaySegment(lens_pt, exit_pt, False),
    ]
    if not converging:
        segments.append(RaySegment(focus, lens_pt, True))
    else:
        v, m = compute_image(u, signed_f)
        if v < 0:
            segments.append(RaySegment(lens_pt, (v, obj_h * m), True))
    return RayPath(PARALLEL, config.RAY_PARALLEL, tuple(segments))


def compute_central_ray(u, obj_h, extent=config.CANVAS_WIDTH / 2):
    """ Undeviated ray through the optical centre, edge to edge. """
    with np.errstate(divide='ignore', invalid='ignore'):
        slope = float(np.float64(obj_h) / u)
    origin = (0.0, 0.0)
    segments = (
        RaySegment((-extent, -extent * slope), origin, False),
        RaySegment(origin, (extent, extent * slope), False),
    )
    return RayPath(CENTRAL, config.RAY_CENTRAL, segments)


def compute_focal_ray(u, obj_h, signed_f, converging, extent=config.CANVAS_WIDTH / 2):
    """ Ray through the front focal point, leaving the lens parallel to the axis.

    Only drawn for converging lenses; returns None otherwise.
    """
    if not converging:
        return None
    y_intercept = _line_y((u, obj_h), (-signed_f, 0.0), 0.0)
    lens_pt = (0.0, y_intercept)
    segments = [
        RaySegment((u, obj_h), lens_pt, False),
        RaySegment(lens_pt, (extent, y_intercept), False),
    ]
    v, _ = compute_image(u, signed_f)
    if v < 0:
        segments.append(RaySegment(lens_pt, (v, y_intercept), True))
    return RayPath(FOCAL, config.RAY_FOCAL, tuple(segments))


def trace_rays(scene, signed_f, extent=config.CANVAS_WIDTH / 2):
    u, obj_h = scene
    converging = signed_f > 0
    rays = [
        compute_parallel_ray(u, obj_h, signed_f, converging, extent),
        compute_central_ray(u, obj_h, extent),
    ]
    focal = compute_focal_ray(u, obj_h, signed_f, converging, extent)
    if focal is not None:
        rays.append(focal)
    return tuple(rays)
