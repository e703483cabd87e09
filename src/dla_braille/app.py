"""
Headless frame driver: advances the simulation a few steps per frame and
renders it, keeping colour/speed state and config import/export together.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Tuple

from .braille import BrailleCell, calculate_simulation_size, render_to_braille
from .color import ColorScheme
from .config import CONFIG_VERSION, AppConfig, ConfigError
from .seeds import SeedPattern
from .simulation import DlaSimulation

logger = logging.getLogger(__name__)

MIN_SPEED = 1
MAX_SPEED = 50


class App:
    def __init__(self, canvas_width: int, canvas_height: int, *, seed: Optional[int] = None) -> None:
        self.canvas_width = int(canvas_width)
        self.canvas_height = int(canvas_height)
        sim_w, sim_h = calculate_simulation_size(self.canvas_width, self.canvas_height)
        self.simulation = DlaSimulation(sim_w, sim_h, seed=seed)
        self.color_scheme = ColorScheme.ICE
        self.color_lut = self.color_scheme.build_lut()
        self.color_by_age = True
        self.steps_per_frame = 5

    # ------------------------------------------------------------------ frame loop
    def tick(self) -> int:
        """Run up to ``steps_per_frame`` steps; returns how many were taken."""
        taken = 0
        if self.simulation.paused:
            return taken
        for _ in range(self.steps_per_frame):
            if not self.simulation.step():
                break
            taken += 1
        return taken

    def render(self) -> List[BrailleCell]:
        s = self.simulation.settings
        return render_to_braille(
            self.simulation,
            self.canvas_width,
            self.canvas_height,
            self.color_lut,
            color_mode=s.color_mode,
            highlight_recent=s.highlight_recent,
            invert_colors=s.invert_colors,
            color_by_age=self.color_by_age,
        )

    def resize(self, canvas_width: int, canvas_height: int) -> None:
        self.canvas_width = int(canvas_width)
        self.canvas_height = int(canvas_height)
        sim_w, sim_h = calculate_simulation_size(self.canvas_width, self.canvas_height)
        # a terminal resize that maps to the same grid keeps the current run
        if (sim_w, sim_h) != (self.simulation.grid_width, self.simulation.grid_height):
            self.simulation.resize(sim_w, sim_h)

    # ------------------------------------------------------------------ simulation controls
    def toggle_pause(self) -> None:
        self.simulation.toggle_pause()

    def reset(self) -> None:
        self.simulation.reset()

    def set_seed_pattern(self, pattern: SeedPattern) -> None:
        self.simulation.reset_with_seed(pattern)

    def increase_speed(self) -> None:
        self.steps_per_frame = min(self.steps_per_frame + 1, MAX_SPEED)

    def decrease_speed(self) -> None:
        self.steps_per_frame = max(self.steps_per_frame - 1, MIN_SPEED)

    def set_speed(self, steps: int) -> None:
        self.steps_per_frame = max(MIN_SPEED, min(MAX_SPEED, int(steps)))

    def adjust_walk_step(self, delta: float) -> None:
        self.simulation.settings.adjust_walk_step_size(delta)

    def adjust_highlight(self, delta: int) -> None:
        self.simulation.settings.adjust_highlight_recent(delta)

    def cycle_neighborhood(self, backward: bool = False) -> None:
        s = self.simulation.settings
        s.neighborhood = s.neighborhood.prev() if backward else s.neighborhood.next()

    def cycle_spawn_mode(self, backward: bool = False) -> None:
        s = self.simulation.settings
        s.spawn_mode = s.spawn_mode.prev() if backward else s.spawn_mode.next()

    def cycle_boundary(self, backward: bool = False) -> None:
        s = self.simulation.settings
        s.boundary_behavior = s.boundary_behavior.prev() if backward else s.boundary_behavior.next()

    def cycle_color_mode(self, backward: bool = False) -> None:
        s = self.simulation.settings
        s.color_mode = s.color_mode.prev() if backward else s.color_mode.next()

    def toggle_invert_colors(self) -> None:
        self.simulation.settings.toggle_invert_colors()

    # ------------------------------------------------------------------ colour
    def set_color_scheme(self, scheme: ColorScheme) -> None:
        self.color_scheme = ColorScheme(scheme)
        self.color_lut = self.color_scheme.build_lut()

    def cycle_color_scheme(self, backward: bool = False) -> None:
        self.set_color_scheme(self.color_scheme.prev() if backward else self.color_scheme.next())

    def toggle_color_by_age(self) -> None:
        self.color_by_age = not self.color_by_age

    # ------------------------------------------------------------------ config
    def to_config(self) -> AppConfig:
        sim = self.simulation
        return AppConfig(
            version=CONFIG_VERSION,
            settings=sim.settings.copy(),
            seed_pattern=sim.seed_pattern,
            stickiness=sim.stickiness,
            num_particles=sim.num_particles,
            color_scheme=self.color_scheme,
            steps_per_frame=self.steps_per_frame,
            color_by_age=self.color_by_age,
        )

    def apply_config(self, config: AppConfig) -> None:
        """Adopt a config; the running structure is kept until the next reset."""
        sim = self.simulation
        sim.settings = config.settings.copy()
        sim.seed_pattern = config.seed_pattern
        sim.stickiness = max(0.1, min(1.0, config.stickiness))
        sim.num_particles = max(100, min(config.num_particles, sim.max_particles()))
        self.set_color_scheme(config.color_scheme)
        self.set_speed(config.steps_per_frame)
        self.color_by_age = config.color_by_age

    def export_config(self, path: str | os.PathLike[str]) -> Tuple[bool, str]:
        """Save the current config. Never raises; returns ``(ok, path or error)``."""
        try:
            self.to_config().save_to_file(path)
        except ConfigError as e:
            logger.error("%s", e)
            return False, str(e)
        return True, str(path)

    def import_config(self, path: str | os.PathLike[str]) -> Tuple[bool, str]:
        """Load and apply a config. Never raises; returns ``(ok, path or error)``."""
        try:
            config = AppConfig.load_from_file(path)
        except ConfigError as e:
            logger.error("%s", e)
            return False, str(e)
        self.apply_config(config)
        return True, str(path)
