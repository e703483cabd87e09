"""
Tests for the headless frame driver.
"""

import json
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dla_braille.app import MAX_SPEED, MIN_SPEED, App
from dla_braille.color import PLAIN_COLOR, ColorScheme
from dla_braille.config import AppConfig
from dla_braille.seeds import SeedPattern
from dla_braille.settings import BoundaryBehavior, ColorMode, NeighborhoodType, SpawnMode


def test_simulation_matches_canvas():
    app = App(40, 20, seed=0)
    assert (app.simulation.grid_width, app.simulation.grid_height) == (80, 80)
    small = App(10, 5, seed=0)
    assert (small.simulation.grid_width, small.simulation.grid_height) == (64, 64)


def test_tick_respects_speed():
    app = App(40, 20, seed=1)
    app.set_speed(3)
    assert app.tick() == 3
    app.toggle_pause()
    assert app.tick() == 0


def test_tick_stops_when_complete():
    app = App(32, 16, seed=2)
    app.simulation.num_particles = 1
    assert app.tick() == 0


def test_speed_clamps():
    app = App(40, 20)
    app.set_speed(1000)
    assert app.steps_per_frame == MAX_SPEED
    app.increase_speed()
    assert app.steps_per_frame == MAX_SPEED
    app.set_speed(-5)
    assert app.steps_per_frame == MIN_SPEED
    app.decrease_speed()
    assert app.steps_per_frame == MIN_SPEED
    app.increase_speed()
    assert app.steps_per_frame == 2


def test_resize_to_same_grid_keeps_run():
    app = App(20, 10, seed=3)
    app.set_speed(50)
    for _ in range(20):
        app.tick()
    stuck = app.simulation.particles_stuck
    grid = app.simulation.grid

    # both canvases map to the minimum 64x64 grid
    app.resize(25, 12)
    assert app.simulation.grid is grid
    assert app.simulation.particles_stuck == stuck

    app.resize(100, 50)
    assert (app.simulation.grid_width, app.simulation.grid_height) == (200, 200)
    assert app.simulation.particles_stuck == 1
    assert (app.canvas_width, app.canvas_height) == (100, 50)


def test_cycles():
    app = App(40, 20)
    s = app.simulation.settings
    app.cycle_neighborhood(backward=True)
    assert s.neighborhood is NeighborhoodType.EXTENDED
    app.cycle_spawn_mode()
    assert s.spawn_mode is SpawnMode.EDGES
    app.cycle_boundary()
    assert s.boundary_behavior is BoundaryBehavior.CLAMP
    app.cycle_color_mode(backward=True)
    assert s.color_mode is ColorMode.DIRECTION
    app.adjust_walk_step(0.5)
    assert s.walk_step_size == 1.5
    app.adjust_highlight(3)
    assert s.highlight_recent == 3
    app.toggle_invert_colors()
    assert s.invert_colors is True


def test_color_scheme_rebuilds_lut():
    app = App(40, 20)
    before = app.color_lut.copy()
    app.cycle_color_scheme()
    assert app.color_scheme is ColorScheme.FIRE
    assert (app.color_lut != before).any()
    app.cycle_color_scheme(backward=True)
    assert app.color_scheme is ColorScheme.ICE


def test_render_plain_colour():
    app = App(32, 16, seed=4)
    app.toggle_color_by_age()
    cells = app.render()
    assert cells
    assert all(c.color == PLAIN_COLOR for c in cells)


def test_set_seed_pattern():
    app = App(40, 20, seed=5)
    app.set_seed_pattern(SeedPattern.CROSS)
    assert app.simulation.seed_pattern is SeedPattern.CROSS
    assert app.simulation.particles_stuck == app.simulation.grid.occupied_count()


def test_export_import(tmp_path):
    app = App(40, 20)
    app.set_color_scheme(ColorScheme.OCEAN)
    app.set_speed(9)
    app.cycle_boundary()
    app.simulation.stickiness = 0.6
    app.simulation.num_particles = 2000

    path = tmp_path / "exported.json"
    ok, message = app.export_config(path)
    assert ok
    assert message == str(path)

    other = App(40, 20)
    ok, _ = other.import_config(path)
    assert ok
    assert other.to_config() == app.to_config()
    assert other.color_scheme is ColorScheme.OCEAN
    assert other.steps_per_frame == 9


def test_export_failure_is_reported(tmp_path):
    app = App(40, 20)
    ok, message = app.export_config(tmp_path / "no-such-dir" / "config.json")
    assert not ok
    assert message.startswith("Failed to write config file")


def test_import_failure_leaves_state(tmp_path):
    app = App(40, 20)
    app.set_speed(7)
    ok, message = app.import_config(tmp_path / "missing.json")
    assert not ok
    assert message.startswith("Failed to read config file")
    assert app.steps_per_frame == 7


def test_import_clamps_out_of_range_values(tmp_path):
    path = tmp_path / "zero.json"
    AppConfig(num_particles=0, stickiness=3.0, steps_per_frame=500).save_to_file(path)

    app = App(40, 20, seed=6)
    ok, _ = app.import_config(path)
    assert ok
    assert app.simulation.num_particles == 100
    assert app.simulation.stickiness == 1.0
    assert app.steps_per_frame == MAX_SPEED
    assert app.tick() == MAX_SPEED
    assert 0.0 < app.simulation.progress() <= 1.0


def test_import_rejects_string_booleans(tmp_path):
    path = tmp_path / "strings.json"
    path.write_text(json.dumps({"color_by_age": "false"}))
    app = App(40, 20)
    ok, message = app.import_config(path)
    assert not ok
    assert message.startswith("Failed to parse config file")
    assert app.color_by_age is True
