"""
Tests for the initial seed structures.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dla_braille.lattice import ParticleGrid
from dla_braille.seeds import SeedPattern, seed_grid


class _ConstantRng:
    """Generator stand-in that never lets a probabilistic placement through."""

    def random(self):
        return 1.0

    def integers(self, low, high=None):
        return low


def _seed(pattern, width=64, height=64, seed=0):
    grid = ParticleGrid(width, height)
    count, max_radius = seed_grid(grid, pattern, np.random.default_rng(seed))
    return grid, count, max_radius


@pytest.mark.parametrize("pattern", list(SeedPattern))
@pytest.mark.parametrize("size", [(64, 64), (80, 120), (200, 90)])
def test_count_matches_grid(pattern, size):
    grid, count, max_radius = _seed(pattern, *size)
    assert count >= 1
    assert count == grid.occupied_count()
    assert max_radius >= 1.0


@pytest.mark.parametrize("pattern", list(SeedPattern))
def test_seed_particles_are_age_zero(pattern):
    grid, _, _ = _seed(pattern)
    assert not grid.age.any()
    assert not grid.neighbor_count.any()


def test_point():
    grid, count, max_radius = _seed(SeedPattern.POINT)
    assert count == 1
    assert max_radius == 1.0
    assert grid.is_occupied(32, 32)


def test_line():
    grid, count, max_radius = _seed(SeedPattern.LINE)
    # half length min(20, 64 // 4) = 16
    assert count == 32
    assert max_radius == 16.0
    assert grid.occupied[32, 16:48].all()


def test_cross_counts_centre_once():
    grid, count, max_radius = _seed(SeedPattern.CROSS)
    # arm length min(10, 8, 8) = 8: four arms sharing the centre
    assert count == 4 * 8 - 3
    assert max_radius == 8.0


def test_block():
    grid, count, max_radius = _seed(SeedPattern.BLOCK)
    # half size max(64 // 8, 4) = 8 -> 17 x 17
    assert count == 17 * 17
    assert max_radius == pytest.approx(8 * 1.414)


def test_multi_point():
    grid, count, max_radius = _seed(SeedPattern.MULTI_POINT)
    assert count == 5
    assert max_radius == 12.0
    for x, y in [(32, 32), (20, 32), (44, 32), (32, 20), (32, 44)]:
        assert grid.is_occupied(x, y)


def test_ring_is_hollow():
    grid, count, max_radius = _seed(SeedPattern.RING)
    assert not grid.is_occupied(32, 32)
    assert max_radius == pytest.approx(64 * 0.30 + 2.5)


def test_starburst_spoke_length():
    grid, _, max_radius = _seed(SeedPattern.STARBURST)
    assert max_radius == pytest.approx(64 * 0.35)
    assert grid.is_occupied(32, 32)
    # spokes never touch the outer ring of cells
    assert not grid.occupied[0, :].any()
    assert not grid.occupied[:, 0].any()


def test_noise_patch_always_places_one():
    grid = ParticleGrid(64, 64)
    count, _ = seed_grid(grid, SeedPattern.NOISE_PATCH, _ConstantRng())
    assert count == 1
    assert grid.occupied_count() == 1


def test_scatter_always_places_one():
    grid = ParticleGrid(64, 64)
    count, _ = seed_grid(grid, SeedPattern.SCATTER, _ConstantRng())
    assert count >= 1
    assert count == grid.occupied_count()


def test_random_patterns_are_reproducible():
    for pattern in (SeedPattern.NOISE_PATCH, SeedPattern.SCATTER):
        a, _, _ = _seed(pattern, seed=5)
        b, _, _ = _seed(pattern, seed=5)
        assert a.equals(b)


def test_cycle_and_names():
    assert SeedPattern.POINT.next() is SeedPattern.LINE
    assert SeedPattern.STARBURST.next() is SeedPattern.POINT
    assert SeedPattern.POINT.prev() is SeedPattern.STARBURST
    assert SeedPattern.NOISE_PATCH.label == "Noise Patch"
    assert SeedPattern.MULTI_POINT.label == "Multi-Point"
    assert SeedPattern.CROSS.label == "Cross"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("point", SeedPattern.POINT),
        ("Ring", SeedPattern.RING),
        ("noise", SeedPattern.NOISE_PATCH),
        ("noise-patch", SeedPattern.NOISE_PATCH),
        ("multipoint", SeedPattern.MULTI_POINT),
        ("filled", SeedPattern.BLOCK),
        ("spokes", SeedPattern.STARBURST),
        ("nonsense", SeedPattern.POINT),
    ],
)
def test_from_name(name, expected):
    assert SeedPattern.from_name(name) is expected
