"""
Incremental DLA simulator on a dense grid.

One call to :meth:`DlaSimulation.step` releases one walker: it spawns according
to the spawn mode, random-walks with directional/radial bias inside the
boundary policy and either sticks next to the aggregate, escapes, is absorbed
at the edge, or runs out of iterations.  The walk itself runs in a Numba
kernel that only reads the occupancy array; the simulator performs the single
write when the kernel reports a stick, so a discarded walker never touches the
grid.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
from numba import njit

from . import policies, utils
from .lattice import ParticleData, ParticleGrid
from .seeds import SeedPattern, seed_grid
from .settings import SimulationSettings

logger = logging.getLogger(__name__)

###############################################################################
# Walk outcomes
###############################################################################

STUCK = 0
ESCAPED = 1
ABSORBED = 2
TIMEOUT = 3


###############################################################################
# Kernel
###############################################################################


@njit(cache=True)
def _walk_particle(
    rng,
    occupied: np.ndarray,
    offsets: np.ndarray,
    max_neighbors: int,
    center_x: float,
    center_y: float,
    spawn_radius: float,
    escape_dist_sq: float,
    spawn_mode: int,
    boundary_mode: int,
    walk_step: float,
    bias_angle_rad: float,
    bias_strength: float,
    radial_bias: float,
    multi_contact_min: int,
    base_stickiness: float,
    tip_stickiness: float,
    side_stickiness: float,
    stickiness_gradient: float,
    max_iterations: int,
):
    """
    Walk one particle until it sticks, escapes, is absorbed or times out.

    Returns ``(outcome, ix, iy, distance, direction, neighbor_count)``; only the
    STUCK outcome carries a meaningful cell and particle data.
    """
    height, width = occupied.shape
    x_max = width - policies.BOUNDARY_MARGIN - 1.0
    y_max = height - policies.BOUNDARY_MARGIN - 1.0

    x, y = policies.spawn_particle(
        rng, spawn_mode, center_x, center_y, spawn_radius, width, height
    )

    # approach direction is the position before the last move
    last_dx = x - center_x
    last_dy = y - center_y

    for _ in range(max_iterations):
        dx = x - center_x
        dy = y - center_y
        dist_sq = dx * dx + dy * dy
        if dist_sq > escape_dist_sq:
            return ESCAPED, -1, -1, 0.0, 0.0, 0

        ix = int(x)
        iy = int(y)
        if 0 < ix < width - 1 and 0 < iy < height - 1:
            count, has_any = policies.count_neighbors(occupied, offsets, ix, iy)
            if has_any and count >= multi_contact_min:
                distance = math.sqrt(dist_sq)
                threshold = policies.effective_stickiness(
                    count,
                    max_neighbors,
                    distance,
                    base_stickiness,
                    tip_stickiness,
                    side_stickiness,
                    stickiness_gradient,
                )
                # an occupied candidate keeps walking
                if rng.random() < threshold and not occupied[iy, ix]:
                    return STUCK, ix, iy, distance, math.atan2(last_dy, last_dx), count

        last_dx = dx
        last_dy = dy

        angle = policies.apply_walk_bias(
            rng.random() * policies.TWO_PI,
            x,
            y,
            center_x,
            center_y,
            bias_angle_rad,
            bias_strength,
            radial_bias,
        )
        x += walk_step * math.cos(angle)
        y += walk_step * math.sin(angle)
        x, y = policies.apply_boundary(boundary_mode, x, y, x_max, y_max)

        if boundary_mode == policies.BOUNDARY_ABSORB and policies.on_interior_edge(
            x, y, x_max, y_max
        ):
            return ABSORBED, -1, -1, 0.0, 0.0, 0

    return TIMEOUT, -1, -1, 0.0, 0.0, 0


###############################################################################
# Simulator
###############################################################################


class DlaSimulation:
    """
    Owns the grid, the settings and the random generator of one run.

    Responsibilities:
    1. Seed the grid with the selected pattern (reset / resize).
    2. Drive the walk kernel one particle per :meth:`step`.
    3. Expose read-only queries used by the renderer and the driver.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        settings: SimulationSettings | None = None,
        num_particles: int = 5000,
        stickiness: float = 1.0,
        seed_pattern: SeedPattern = SeedPattern.POINT,
        seed: Optional[int] = None,
    ) -> None:
        self.grid_width = int(width)
        self.grid_height = int(height)
        self.settings = settings or SimulationSettings()
        self.num_particles = int(num_particles)
        self.stickiness = float(stickiness)
        self.seed_pattern = SeedPattern(seed_pattern)
        self.rng = np.random.default_rng(seed)

        self.grid = ParticleGrid(self.grid_width, self.grid_height)
        self.particles_stuck = 0
        self.max_radius = 1.0
        self.paused = False
        self.reset()

    # ------------------------------------------------------------------ geometry
    def center(self) -> tuple[float, float]:
        return self.grid_width / 2.0, self.grid_height / 2.0

    def max_particles(self) -> int:
        """Up to 75% of the grid area, never below 100."""
        return max(self.grid_width * self.grid_height * 3 // 4, 100)

    # ------------------------------------------------------------------ stepping
    def step(self) -> bool:
        """
        Release one walker.

        Returns False when paused or complete (nothing happens), True otherwise,
        whether or not the walker stuck.
        """
        if self.paused or self.particles_stuck >= self.num_particles:
            return False

        s = self.settings
        center_x, center_y = self.center()
        spawn_radius = max(self.max_radius + s.spawn_radius_offset, s.min_spawn_radius)
        escape_dist = spawn_radius * s.escape_multiplier

        outcome, ix, iy, distance, direction, count = _walk_particle(
            self.rng,
            self.grid.occupied,
            s.neighborhood.offsets(),
            s.neighborhood.max_neighbors,
            center_x,
            center_y,
            float(spawn_radius),
            float(escape_dist * escape_dist),
            int(s.spawn_mode),
            int(s.boundary_behavior),
            float(s.walk_step_size),
            s.bias_angle_radians,
            float(s.walk_bias_strength),
            float(s.radial_bias),
            int(s.multi_contact_min),
            float(self.stickiness),
            float(s.tip_stickiness),
            float(s.side_stickiness),
            float(s.stickiness_gradient),
            int(s.max_walk_iterations),
        )

        if outcome == STUCK:
            self.grid.set(
                ix,
                iy,
                ParticleData(
                    age=self.particles_stuck,
                    distance=float(distance),
                    direction=float(direction),
                    neighbor_count=int(count),
                ),
            )
            self.particles_stuck += 1
            self.max_radius = max(self.max_radius, float(distance))
        return True

    def run(self, max_steps: Optional[int] = None) -> int:
        """Step until complete (or ``max_steps`` calls); returns steps taken."""
        steps = 0
        while max_steps is None or steps < max_steps:
            if not self.step():
                break
            steps += 1
        return steps

    # ------------------------------------------------------------------ lifecycle
    def reset(self) -> None:
        self.reset_with_seed(self.seed_pattern)

    def reset_with_seed(self, pattern: SeedPattern) -> None:
        if self.grid.shape != (self.grid_height, self.grid_width):
            self.grid = ParticleGrid(self.grid_width, self.grid_height)
        else:
            self.grid.clear()

        self.seed_pattern = SeedPattern(pattern)
        self.particles_stuck, self.max_radius = seed_grid(self.grid, self.seed_pattern, self.rng)
        self.paused = False
        logger.info(
            "Seeded %s on %dx%d grid: %d particles, max_radius=%.2f",
            self.seed_pattern.label,
            self.grid_width,
            self.grid_height,
            self.particles_stuck,
            self.max_radius,
        )

    def resize(self, new_width: int, new_height: int) -> None:
        """
        Re-seed on a grid of the given size.

        A size change reallocates the grid and caps ``num_particles`` to the new
        maximum; the same size clears the existing buffers in place.
        """
        new_width = int(new_width)
        new_height = int(new_height)
        if new_width != self.grid_width or new_height != self.grid_height:
            logger.info(
                "Resizing grid %dx%d -> %dx%d",
                self.grid_width,
                self.grid_height,
                new_width,
                new_height,
            )
            self.grid_width = new_width
            self.grid_height = new_height
            self.num_particles = min(self.num_particles, self.max_particles())
        self.reset()

    def toggle_pause(self) -> None:
        self.paused = not self.paused

    # ------------------------------------------------------------------ queries
    def get_particle(self, x: int, y: int) -> Optional[ParticleData]:
        return self.grid.get(x, y)

    def progress(self) -> float:
        return self.particles_stuck / max(self.num_particles, 1)

    def is_complete(self) -> bool:
        return self.particles_stuck >= self.num_particles

    # ------------------------------------------------------------------ adjusters
    def adjust_particles(self, delta: int) -> None:
        self.num_particles = max(100, min(self.max_particles(), self.num_particles + delta))

    def adjust_stickiness(self, delta: float) -> None:
        self.stickiness = max(0.1, min(1.0, self.stickiness + delta))

    # ------------------------------------------------------------------ export
    def to_result(self) -> utils.ClusterResult:
        """Package the grid and its per-particle arrays for :func:`utils.save_cluster_result`."""
        g = self.grid
        meta = {
            "model": "dla-braille",
            "num": int(self.num_particles),
            "particles_stuck": int(self.particles_stuck),
            "max_radius": float(self.max_radius),
            "stickiness": float(self.stickiness),
            "seed_pattern": self.seed_pattern.tag,
            "settings": self.settings.to_dict(),
            "age": g.age.copy(),
            "distance": g.distance.copy(),
            "direction": g.direction.copy(),
            "neighbor_count": g.neighbor_count.copy(),
        }
        ys, xs = np.nonzero(g.occupied)
        order = np.argsort(g.age[ys, xs], kind="stable")
        positions = np.column_stack((xs[order], ys[order])).astype(np.float64)
        return utils.ClusterResult(occupied=g.occupied.copy(), positions=positions, meta=meta)


__all__ = ["DlaSimulation", "STUCK", "ESCAPED", "ABSORBED", "TIMEOUT"]


if __name__ == "__main__":
    sim = DlaSimulation(128, 128, num_particles=2000, seed=42)
    sim.run()
    print(f"stuck={sim.particles_stuck} max_radius={sim.max_radius:.1f}")
