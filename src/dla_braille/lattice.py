from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from . import policies
from .settings import NeighborhoodType


@dataclass(frozen=True)
class ParticleData:
    """Per-particle record written once, when the particle sticks."""

    age: int = 0
    distance: float = 0.0
    direction: float = 0.0
    neighbor_count: int = 0


SEED_PARTICLE = ParticleData()


class ParticleGrid:
    """
    Dense width x height occupancy grid with per-cell particle data.

    Cells are stored row-major in parallel numpy arrays indexed ``[y, x]``
    (flat index ``y * width + x``).  A cell goes from empty to occupied at most
    once; only :meth:`clear` or a new grid empties it again.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        shape = (self.height, self.width)
        self.occupied = np.zeros(shape, dtype=bool)
        self.age = np.zeros(shape, dtype=np.int64)
        self.distance = np.zeros(shape, dtype=np.float64)
        self.direction = np.zeros(shape, dtype=np.float64)
        self.neighbor_count = np.zeros(shape, dtype=np.uint8)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and bool(self.occupied[y, x])

    def get(self, x: int, y: int) -> Optional[ParticleData]:
        """Particle data at (x, y), or None when empty or outside the grid."""
        if not self.is_occupied(x, y):
            return None
        return ParticleData(
            age=int(self.age[y, x]),
            distance=float(self.distance[y, x]),
            direction=float(self.direction[y, x]),
            neighbor_count=int(self.neighbor_count[y, x]),
        )

    def set(self, x: int, y: int, data: ParticleData) -> bool:
        """Occupy an empty in-bounds cell. Returns False (no write) otherwise."""
        if not self.in_bounds(x, y) or self.occupied[y, x]:
            return False
        self.occupied[y, x] = True
        self.age[y, x] = data.age
        self.distance[y, x] = data.distance
        self.direction[y, x] = data.direction
        self.neighbor_count[y, x] = data.neighbor_count
        return True

    def fill_mask(self, mask: np.ndarray, data: ParticleData = SEED_PARTICLE) -> int:
        """Occupy every empty cell selected by ``mask``; returns how many were new."""
        new = mask & ~self.occupied
        self.occupied[new] = True
        self.age[new] = data.age
        self.distance[new] = data.distance
        self.direction[new] = data.direction
        self.neighbor_count[new] = data.neighbor_count
        return int(np.count_nonzero(new))

    def clear(self) -> None:
        self.occupied.fill(False)
        self.age.fill(0)
        self.distance.fill(0.0)
        self.direction.fill(0.0)
        self.neighbor_count.fill(0)

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.occupied))

    def count_neighbors(self, x: int, y: int, neighborhood: NeighborhoodType) -> Tuple[int, bool]:
        """Occupied neighbours of (x, y) under ``neighborhood`` as ``(count, has_any)``."""
        count, has_any = policies.count_neighbors(
            self.occupied, neighborhood.offsets(), int(x), int(y)
        )
        return int(count), bool(has_any)

    def snapshot(self) -> "ParticleGrid":
        """Independent copy, safe to hold across a reset."""
        other = ParticleGrid.__new__(ParticleGrid)
        other.width = self.width
        other.height = self.height
        other.occupied = self.occupied.copy()
        other.age = self.age.copy()
        other.distance = self.distance.copy()
        other.direction = self.direction.copy()
        other.neighbor_count = self.neighbor_count.copy()
        return other

    def equals(self, other: "ParticleGrid") -> bool:
        return (
            self.shape == other.shape
            and np.array_equal(self.occupied, other.occupied)
            and np.array_equal(self.age, other.age)
            and np.array_equal(self.distance, other.distance)
            and np.array_equal(self.direction, other.direction)
            and np.array_equal(self.neighbor_count, other.neighbor_count)
        )
