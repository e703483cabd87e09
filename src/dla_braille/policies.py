"""
Stateless walk policies shared by the walk kernel and the settings layer.

Everything in here is a pure Numba function over plain scalars and arrays so the
same code path is used by the compiled walk loop and by unit tests.  Policy
selectors are passed as small integers; the enums in :mod:`.settings` take their
values from the constants below.
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit

###############################################################################
# Constants
###############################################################################

BOUNDARY_MARGIN = 1.0
TWO_PI = 2.0 * math.pi

# Upper bound on rejection draws for the Random spawn mode.
RANDOM_SPAWN_ATTEMPTS = 10_000

NEIGHBORHOOD_VON_NEUMANN = 0
NEIGHBORHOOD_MOORE = 1
NEIGHBORHOOD_EXTENDED = 2

SPAWN_CIRCLE = 0
SPAWN_EDGES = 1
SPAWN_CORNERS = 2
SPAWN_RANDOM = 3
SPAWN_TOP = 4
SPAWN_BOTTOM = 5
SPAWN_LEFT = 6
SPAWN_RIGHT = 7

BOUNDARY_CLAMP = 0
BOUNDARY_WRAP = 1
BOUNDARY_BOUNCE = 2
BOUNDARY_STICK = 3
BOUNDARY_ABSORB = 4

VON_NEUMANN_OFFSETS = np.array([(-1, 0), (1, 0), (0, -1), (0, 1)], dtype=np.int64)

MOORE_OFFSETS = np.array(
    [
        (-1, -1), (0, -1), (1, -1),
        (-1, 0),           (1, 0),
        (-1, 1),  (0, 1),  (1, 1),
    ],
    dtype=np.int64,
)

EXTENDED_OFFSETS = np.array(
    [(dx, dy) for dy in range(-2, 3) for dx in range(-2, 3) if (dx, dy) != (0, 0)],
    dtype=np.int64,
)


###############################################################################
# Small numeric helpers
###############################################################################


@njit(cache=True, fastmath=True)
def _clamp(value: float, lo: float, hi: float) -> float:
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


@njit(cache=True)
def _uniform(rng, lo: float, hi: float) -> float:
    """Uniform draw in [lo, hi) from the injected generator."""
    return lo + (hi - lo) * rng.random()


@njit(cache=True)
def _pick(rng, n: int) -> int:
    """Uniform integer in [0, n)."""
    k = int(rng.random() * n)
    if k >= n:
        k = n - 1
    return k


###############################################################################
# Sticking
###############################################################################


@njit(cache=True, fastmath=True)
def effective_stickiness(
    neighbor_count: int,
    max_neighbors: int,
    distance: float,
    base_stickiness: float,
    tip_stickiness: float,
    side_stickiness: float,
    stickiness_gradient: float,
) -> float:
    """
    Probability that a qualifying contact attaches.

    Interpolates between tip stickiness (few neighbours) and side stickiness
    (many neighbours), scales by a linear gradient per 100 cells of distance
    from the centre and by the base stickiness, then clamps to [0, 1].
    """
    ratio = neighbor_count / max_neighbors
    directional = tip_stickiness * (1.0 - ratio) + side_stickiness * ratio
    gradient_factor = 1.0 + (distance / 100.0) * stickiness_gradient
    return _clamp(base_stickiness * directional * gradient_factor, 0.0, 1.0)


@njit(cache=True)
def count_neighbors(occupied: np.ndarray, offsets: np.ndarray, ix: int, iy: int):
    """Return ``(count, has_any)`` of occupied cells at ``offsets`` around (ix, iy)."""
    height, width = occupied.shape
    count = 0
    for k in range(offsets.shape[0]):
        nx = ix + offsets[k, 0]
        ny = iy + offsets[k, 1]
        if 0 <= nx < width and 0 <= ny < height and occupied[ny, nx]:
            count += 1
    return count, count > 0


###############################################################################
# Movement
###############################################################################


@njit(cache=True, fastmath=True)
def apply_walk_bias(
    angle: float,
    x: float,
    y: float,
    center_x: float,
    center_y: float,
    bias_angle_rad: float,
    bias_strength: float,
    radial_bias: float,
) -> float:
    """Nudge a uniformly drawn walk angle toward the drift direction and/or the centre."""
    base_angle = angle
    if bias_strength > 0.0:
        angle += bias_strength * math.sin(bias_angle_rad - base_angle)

    if abs(radial_bias) > 0.001:
        radial_angle = math.atan2(y - center_y, x - center_x)
        # positive pulls toward the centre, negative pushes away
        if radial_bias > 0.0:
            target = radial_angle + math.pi
        else:
            target = radial_angle
        angle += abs(radial_bias) * math.sin(target - angle)

    return angle


@njit(cache=True, fastmath=True)
def apply_boundary(mode: int, x: float, y: float, x_max: float, y_max: float):
    """
    Map a post-move position back into ``[BOUNDARY_MARGIN, max]``.

    Stick and Absorb clamp exactly like Clamp here; Absorb's respawn is decided
    by the walk loop after this transform.
    """
    lo = BOUNDARY_MARGIN
    if mode == BOUNDARY_WRAP:
        width = x_max - lo
        height = y_max - lo
        if x < lo:
            x += width
        elif x > x_max:
            x -= width
        if y < lo:
            y += height
        elif y > y_max:
            y -= height
    elif mode == BOUNDARY_BOUNCE:
        if x < lo:
            x = lo + (lo - x)
        elif x > x_max:
            x = x_max - (x - x_max)
        if y < lo:
            y = lo + (lo - y)
        elif y > y_max:
            y = y_max - (y - y_max)
    else:
        x = _clamp(x, lo, x_max)
        y = _clamp(y, lo, y_max)
    return x, y


@njit(cache=True, fastmath=True)
def on_interior_edge(x: float, y: float, x_max: float, y_max: float) -> bool:
    """True when a clamped position touches the interior margin (Absorb respawn test)."""
    lo = BOUNDARY_MARGIN
    return x <= lo or x >= x_max or y <= lo or y >= y_max


###############################################################################
# Spawning
###############################################################################


@njit(cache=True)
def _spawn_corner(rng, w: float, h: float):
    k = _pick(rng, 4)
    if k == 0:
        return 1.0, 1.0
    if k == 1:
        return w - 2.0, 1.0
    if k == 2:
        return 1.0, h - 2.0
    return w - 2.0, h - 2.0


@njit(cache=True)
def spawn_particle(
    rng, mode: int, center_x: float, center_y: float, spawn_radius: float, width: int, height: int
):
    """Starting position of a new walker for the given spawn mode."""
    w = float(width)
    h = float(height)

    if mode == SPAWN_CIRCLE:
        angle = _uniform(rng, 0.0, TWO_PI)
        x = _clamp(center_x + spawn_radius * math.cos(angle), 1.0, w - 2.0)
        y = _clamp(center_y + spawn_radius * math.sin(angle), 1.0, h - 2.0)
        return x, y

    if mode == SPAWN_EDGES:
        edge = _pick(rng, 4)
        if edge == 0:
            return _uniform(rng, 1.0, w - 1.0), 1.0
        if edge == 1:
            return _uniform(rng, 1.0, w - 1.0), h - 2.0
        if edge == 2:
            return 1.0, _uniform(rng, 1.0, h - 1.0)
        return w - 2.0, _uniform(rng, 1.0, h - 1.0)

    if mode == SPAWN_CORNERS:
        return _spawn_corner(rng, w, h)

    if mode == SPAWN_RANDOM:
        threshold = spawn_radius * spawn_radius * 0.5
        for _ in range(RANDOM_SPAWN_ATTEMPTS):
            x = _uniform(rng, 1.0, w - 1.0)
            y = _uniform(rng, 1.0, h - 1.0)
            dx = x - center_x
            dy = y - center_y
            if dx * dx + dy * dy > threshold:
                return x, y
        # spawn radius larger than the grid allows
        return _spawn_corner(rng, w, h)

    if mode == SPAWN_TOP:
        return _uniform(rng, 1.0, w - 1.0), 1.0
    if mode == SPAWN_BOTTOM:
        return _uniform(rng, 1.0, w - 1.0), h - 2.0
    if mode == SPAWN_LEFT:
        return 1.0, _uniform(rng, 1.0, h - 1.0)
    return w - 2.0, _uniform(rng, 1.0, h - 1.0)
