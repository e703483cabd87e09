"""
Initial structures placed on an empty grid before growth starts.

Each seeder writes seed particles (age 0, no direction) into the grid and
returns ``(particles_placed, max_radius)``.  Only NoisePatch and Scatter draw
from the random generator.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Tuple

import numpy as np

from .lattice import SEED_PARTICLE, ParticleGrid
from .settings import CyclicEnum

SeedResult = Tuple[int, float]

_LABELS = {
    "NOISE_PATCH": "Noise Patch",
    "MULTI_POINT": "Multi-Point",
}

# Command-line spellings accepted besides the plain names.
_ALIASES = {
    "filled": "BLOCK",
    "noise": "NOISE_PATCH",
    "noise-patch": "NOISE_PATCH",
    "multipoint": "MULTI_POINT",
    "multi-point": "MULTI_POINT",
    "spokes": "STARBURST",
    "star": "STARBURST",
}


class SeedPattern(CyclicEnum):
    POINT = 0
    LINE = 1
    CROSS = 2
    CIRCLE = 3
    RING = 4
    BLOCK = 5
    NOISE_PATCH = 6
    SCATTER = 7
    MULTI_POINT = 8
    STARBURST = 9

    @property
    def label(self) -> str:
        return _LABELS.get(self.name, self.tag)

    @classmethod
    def from_name(cls, name: str) -> "SeedPattern":
        """Lenient lookup used by the CLI; unknown names fall back to POINT."""
        key = name.strip().lower()
        key = _ALIASES.get(key, key.replace("-", "_")).upper()
        return cls.__members__.get(key, cls.POINT)


def _round_half_away(x: float) -> int:
    """Round half away from zero (Python's round() is banker's rounding)."""
    if x >= 0.0:
        return int(x + 0.5)
    return int(x - 0.5)


def _place(grid: ParticleGrid, x: int, y: int) -> int:
    return 1 if grid.set(x, y, SEED_PARTICLE) else 0


def _seed_point(grid: ParticleGrid, rng) -> SeedResult:
    count = _place(grid, grid.width // 2, grid.height // 2)
    # radius 1.0 even though the seed sits on the centre
    return count, 1.0


def _seed_line(grid: ParticleGrid, rng) -> SeedResult:
    cy = grid.height // 2
    half_len = min(20, grid.width // 4)
    count = 0
    for x in range(grid.width // 2 - half_len, grid.width // 2 + half_len):
        count += _place(grid, x, cy)
    return count, float(half_len)


def _seed_cross(grid: ParticleGrid, rng) -> SeedResult:
    cx = grid.width // 2
    cy = grid.height // 2
    arm_len = min(10, grid.width // 8, grid.height // 8)
    count = 0
    for i in range(arm_len):
        count += _place(grid, cx - i, cy)
        count += _place(grid, cx + i, cy)
        count += _place(grid, cx, cy - i)
        count += _place(grid, cx, cy + i)
    return count, float(arm_len)


def _seed_circle(grid: ParticleGrid, rng) -> SeedResult:
    cx = grid.width / 2.0
    cy = grid.height / 2.0
    radius = float(min(15, grid.width // 8, grid.height // 8))
    count = 0
    for angle_deg in range(360):
        angle = math.radians(angle_deg)
        x = int(cx + radius * math.cos(angle))
        y = int(cy + radius * math.sin(angle))
        count += _place(grid, x, y)
    return count, radius


def _seed_ring(grid: ParticleGrid, rng) -> SeedResult:
    cx = grid.width / 2.0
    cy = grid.height / 2.0
    min_dim = float(min(grid.width, grid.height))
    radius = min(max(min_dim * 0.30, 6.0), min_dim * 0.45)
    thickness = 2.5

    ys, xs = np.mgrid[0 : grid.height, 0 : grid.width]
    dist = np.hypot(xs - cx, ys - cy)
    mask = (dist >= radius - thickness) & (dist <= radius + thickness)
    return grid.fill_mask(mask), radius + thickness


def _seed_block(grid: ParticleGrid, rng) -> SeedResult:
    cx = grid.width // 2
    cy = grid.height // 2
    half_size = max(min(grid.width, grid.height) // 8, 4)
    x0 = max(cx - half_size, 0)
    x1 = min(cx + half_size, max(grid.width - 1, 0))
    y0 = max(cy - half_size, 0)
    y1 = min(cy + half_size, max(grid.height - 1, 0))

    mask = np.zeros(grid.shape, dtype=bool)
    mask[y0 : y1 + 1, x0 : x1 + 1] = True
    return grid.fill_mask(mask), half_size * 1.414


def _seed_noise_patch(grid: ParticleGrid, rng) -> SeedResult:
    grid_cx = grid.width / 2.0
    grid_cy = grid.height / 2.0
    min_dim = float(min(grid.width, grid.height))
    radius = min(max(min_dim * 0.22, 6.0), 30.0)
    radius_i = int(radius)
    jitter = max(radius_i // 3, 1)

    patch_cx = grid.width // 3 + int(rng.integers(-jitter, jitter + 1))
    patch_cy = grid.height // 3 + int(rng.integers(-jitter, jitter + 1))
    patch_cx = min(max(patch_cx, 1), grid.width - 2)
    patch_cy = min(max(patch_cy, 1), grid.height - 2)

    count = 0
    max_dist = 1.0
    for y in range(max(patch_cy - radius_i, 1), min(patch_cy + radius_i, grid.height - 2) + 1):
        for x in range(max(patch_cx - radius_i, 1), min(patch_cx + radius_i, grid.width - 2) + 1):
            dist = math.hypot(x - patch_cx, y - patch_cy)
            if dist > radius:
                continue
            falloff = 1.0 - dist / radius
            # dense core, noisy rim
            if rng.random() < 0.35 + falloff * 0.65 and _place(grid, x, y):
                count += 1
                max_dist = max(max_dist, math.hypot(x - grid_cx, y - grid_cy))

    if count == 0:
        count = _place(grid, patch_cx, patch_cy)
        max_dist = math.hypot(patch_cx - grid_cx, patch_cy - grid_cy)

    return count, max_dist


def _seed_scatter(grid: ParticleGrid, rng) -> SeedResult:
    cx = grid.width // 2
    cy = grid.height // 2
    scatter_radius = min(20, grid.width // 6, grid.height // 6)
    count = 0
    for _ in range(15):
        angle = rng.random() * 2.0 * math.pi
        r = rng.random() * scatter_radius
        count += _place(grid, int(cx + r * math.cos(angle)), int(cy + r * math.sin(angle)))
    if count == 0:
        count = _place(grid, cx, cy)
    return count, float(scatter_radius)


def _seed_multi_point(grid: ParticleGrid, rng) -> SeedResult:
    cx = grid.width // 2
    cy = grid.height // 2
    spread = min(25, grid.width // 5, grid.height // 5)
    points = [
        (cx, cy),
        (cx - spread, cy),
        (cx + spread, cy),
        (cx, cy - spread),
        (cx, cy + spread),
    ]
    count = sum(_place(grid, px, py) for px, py in points)
    return count, float(spread)


def _seed_starburst(grid: ParticleGrid, rng) -> SeedResult:
    cx = grid.width / 2.0
    cy = grid.height / 2.0
    spoke_len = min(max(min(grid.width, grid.height) * 0.35, 8.0), 40.0)
    spokes = 8

    def interior(x: int, y: int) -> bool:
        return 0 < x < grid.width - 1 and 0 < y < grid.height - 1

    count = _place(grid, int(cx), int(cy))

    for s in range(spokes):
        angle = s * (2.0 * math.pi / spokes)
        for step in range(1, int(spoke_len) + 1):
            x = _round_half_away(cx + step * math.cos(angle))
            y = _round_half_away(cy + step * math.sin(angle))
            if interior(x, y):
                count += _place(grid, x, y)

    # sparse rim joining the spoke tips
    for angle_deg in range(0, 360, 4):
        angle = math.radians(angle_deg)
        x = int(cx + spoke_len * math.cos(angle))
        y = int(cy + spoke_len * math.sin(angle))
        if interior(x, y):
            count += _place(grid, x, y)

    return count, spoke_len


_SEEDERS: Dict[SeedPattern, Callable[[ParticleGrid, np.random.Generator], SeedResult]] = {
    SeedPattern.POINT: _seed_point,
    SeedPattern.LINE: _seed_line,
    SeedPattern.CROSS: _seed_cross,
    SeedPattern.CIRCLE: _seed_circle,
    SeedPattern.RING: _seed_ring,
    SeedPattern.BLOCK: _seed_block,
    SeedPattern.NOISE_PATCH: _seed_noise_patch,
    SeedPattern.SCATTER: _seed_scatter,
    SeedPattern.MULTI_POINT: _seed_multi_point,
    SeedPattern.STARBURST: _seed_starburst,
}


def seed_grid(grid: ParticleGrid, pattern: SeedPattern, rng: np.random.Generator) -> SeedResult:
    """Place ``pattern`` on ``grid`` (expected empty). Returns (count, max_radius)."""
    return _SEEDERS[SeedPattern(pattern)](grid, rng)
