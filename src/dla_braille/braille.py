"""
Braille rendering of the simulation grid.

Each braille glyph is a 2x4 block of dots, so a canvas of ``w x h`` character
cells has an effective resolution of ``2w x 4h``.  Dot positions and bits::

    (0,0)=0x01  (1,0)=0x08
    (0,1)=0x02  (1,1)=0x10
    (0,2)=0x04  (1,2)=0x20
    (0,3)=0x40  (1,3)=0x80

The grid is nearest-neighbour sampled at every dot position.  When the grid is
larger than ``2w x 4h`` some cells fall between samples and are not drawn; this
is a known approximation of the terminal view, not a data loss.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .color import HIGHLIGHT_COLOR, PLAIN_COLOR, RGB, lut_indices
from .settings import ColorMode

BRAILLE_BASE = 0x2800
DOTS_X = 2
DOTS_Y = 4
MIN_SIM_SIZE = 64

# BRAILLE_DOTS[dx][dy]
BRAILLE_DOTS = np.array(
    [
        [0x01, 0x02, 0x04, 0x40],
        [0x08, 0x10, 0x20, 0x80],
    ],
    dtype=np.int64,
)


@dataclass(frozen=True)
class BrailleCell:
    x: int
    y: int
    char: str
    color: RGB

    @property
    def pattern(self) -> int:
        return ord(self.char) - BRAILLE_BASE


def calculate_simulation_size(canvas_width: int, canvas_height: int) -> Tuple[int, int]:
    """Grid size matching the braille resolution of a canvas, at least 64x64."""
    return max(canvas_width * DOTS_X, MIN_SIM_SIZE), max(canvas_height * DOTS_Y, MIN_SIM_SIZE)


def _sample_positions(count: int, scale: float, limit: int) -> Tuple[np.ndarray, np.ndarray]:
    idx = np.floor(np.arange(count) * scale).astype(np.int64)
    valid = idx < limit
    return np.minimum(idx, limit - 1), valid


def _mode_values(simulation, color_mode: ColorMode) -> np.ndarray:
    g = simulation.grid
    if color_mode == ColorMode.AGE:
        return g.age * (1.0 / max(simulation.num_particles, 1))
    if color_mode == ColorMode.DISTANCE:
        return g.distance / max(simulation.max_radius, 1.0)
    if color_mode == ColorMode.DENSITY:
        return g.neighbor_count / 8.0
    # direction in (-pi, pi] mapped to [0, 1]
    return (g.direction + math.pi) / (2.0 * math.pi)


def render_to_braille(
    simulation,
    canvas_width: int,
    canvas_height: int,
    color_lut: np.ndarray,
    color_mode: ColorMode = ColorMode.AGE,
    highlight_recent: int = 0,
    invert_colors: bool = False,
    color_by_age: bool = True,
) -> List[BrailleCell]:
    """
    Sample the simulation grid into coloured braille cells.

    Only cells with at least one dot are returned, in row-major order.  The
    grid is read, never written.

    Args:
        simulation: object exposing ``grid``, ``num_particles``, ``max_radius``
            and ``particles_stuck`` (normally a :class:`DlaSimulation`)
        canvas_width, canvas_height: canvas size in character cells
        color_lut: ``(n, 3)`` uint8 lookup table from :func:`color.build_lut`
        color_mode: particle property mapped through the LUT
        highlight_recent: cells holding one of the last N particles are drawn in
            the highlight colour (0 disables)
        invert_colors: use ``1 - t`` instead of ``t``
        color_by_age: when False every cell gets the plain foreground colour
    """
    canvas_width = int(canvas_width)
    canvas_height = int(canvas_height)
    if canvas_width <= 0 or canvas_height <= 0:
        return []

    grid = simulation.grid
    sim_h, sim_w = grid.shape
    bw = canvas_width * DOTS_X
    bh = canvas_height * DOTS_Y

    sx, valid_x = _sample_positions(bw, sim_w / bw, sim_w)
    sy, valid_y = _sample_positions(bh, sim_h / bh, sim_h)
    rows = np.ix_(sy, sx)

    lit = grid.occupied[rows] & valid_y[:, None] & valid_x[None, :]
    # (cy, dy, cx, dx) blocks per glyph
    lit4 = lit.reshape(canvas_height, DOTS_Y, canvas_width, DOTS_X)

    patterns = np.einsum("aybx,xy->ab", lit4.astype(np.int64), BRAILLE_DOTS)
    dot_counts = lit4.sum(axis=(1, 3))

    values = np.where(lit, _mode_values(simulation, color_mode)[rows], 0.0)
    totals = values.reshape(lit4.shape).sum(axis=(1, 3))
    t = totals / np.maximum(dot_counts, 1)
    if invert_colors:
        t = 1.0 - t
    colors = color_lut[lut_indices(color_lut, t)]

    if highlight_recent > 0:
        recent = grid.age[rows] + highlight_recent >= simulation.particles_stuck
        is_recent = (lit & recent).reshape(lit4.shape).any(axis=(1, 3))
    else:
        is_recent = np.zeros(patterns.shape, dtype=bool)

    cells: List[BrailleCell] = []
    for cy, cx in np.argwhere(patterns != 0):
        if is_recent[cy, cx]:
            color = HIGHLIGHT_COLOR
        elif color_by_age:
            r, g, b = colors[cy, cx]
            color = (int(r), int(g), int(b))
        else:
            color = PLAIN_COLOR
        cells.append(
            BrailleCell(
                x=int(cx),
                y=int(cy),
                char=chr(BRAILLE_BASE + int(patterns[cy, cx])),
                color=color,
            )
        )
    return cells


def cells_to_text(
    cells: List[BrailleCell], canvas_width: int, canvas_height: int, *, ansi: bool = True
) -> str:
    """Lay cells out as lines of text, optionally with 24-bit ANSI colour."""
    rows = [[" "] * canvas_width for _ in range(canvas_height)]
    for cell in cells:
        if ansi:
            r, g, b = cell.color
            rows[cell.y][cell.x] = f"\x1b[38;2;{r};{g};{b}m{cell.char}\x1b[0m"
        else:
            rows[cell.y][cell.x] = cell.char
    return "\n".join("".join(row).rstrip() for row in rows)
