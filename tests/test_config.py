"""
Tests for configuration export/import.
"""

import json
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dla_braille import utils
from dla_braille.color import ColorScheme
from dla_braille.config import CONFIG_VERSION, AppConfig, ConfigError
from dla_braille.seeds import SeedPattern
from dla_braille.settings import (
    BoundaryBehavior,
    ColorMode,
    NeighborhoodType,
    SimulationSettings,
    SpawnMode,
)


def _custom_config():
    settings = SimulationSettings(
        walk_step_size=2.5,
        walk_bias_angle=45.0,
        walk_bias_strength=0.3,
        radial_bias=0.1,
        neighborhood=NeighborhoodType.MOORE,
        multi_contact_min=2,
        tip_stickiness=0.8,
        side_stickiness=0.6,
        stickiness_gradient=-0.2,
        spawn_mode=SpawnMode.EDGES,
        boundary_behavior=BoundaryBehavior.BOUNCE,
        escape_multiplier=4.0,
        min_spawn_radius=30.0,
        max_walk_iterations=20_000,
        color_mode=ColorMode.DIRECTION,
        highlight_recent=5,
        invert_colors=True,
    )
    return AppConfig(
        settings=settings,
        seed_pattern=SeedPattern.STARBURST,
        stickiness=0.7,
        num_particles=3000,
        color_scheme=ColorScheme.NEON,
        steps_per_frame=12,
        color_by_age=False,
    )


def test_defaults():
    config = AppConfig()
    assert config.version == CONFIG_VERSION
    assert config.seed_pattern is SeedPattern.POINT
    assert config.color_scheme is ColorScheme.ICE
    assert config.num_particles == 5000
    assert config.steps_per_frame == 5
    assert config.color_by_age is True


def test_json_uses_tags():
    data = json.loads(_custom_config().to_json())
    assert data["seed_pattern"] == "Starburst"
    assert data["color_scheme"] == "Neon"
    assert data["settings"]["spawn_mode"] == "Edges"
    assert data["settings"]["color_mode"] == "Direction"


def test_dict_round_trip():
    config = _custom_config()
    assert AppConfig.from_dict(config.to_dict()) == config


def test_file_round_trip(tmp_path):
    path = tmp_path / "config.json"
    config = _custom_config()
    config.save_to_file(path)
    assert AppConfig.load_from_file(path) == config


def test_missing_keys_use_defaults(tmp_path):
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"version": 1, "stickiness": 0.5}))
    config = AppConfig.load_from_file(path)
    assert config.stickiness == 0.5
    assert config.settings == SimulationSettings()
    assert config.seed_pattern is SeedPattern.POINT


@pytest.mark.skipif(utils.tomllib is None, reason="tomllib requires Python 3.11+")
def test_toml_config(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        'seed_pattern = "Cross"\n'
        "stickiness = 0.6\n"
        "\n"
        "[settings]\n"
        "walk_step_size = 2.0\n"
        'neighborhood = "Extended"\n'
    )
    config = AppConfig.load_from_file(path)
    assert config.seed_pattern is SeedPattern.CROSS
    assert config.settings.neighborhood is NeighborhoodType.EXTENDED
    assert config.settings.walk_step_size == 2.0


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Failed to read config file"):
        AppConfig.load_from_file(tmp_path / "nope.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="Failed to parse config file"):
        AppConfig.load_from_file(path)


def test_unknown_tag(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"settings": {"boundary_behavior": "Teleport"}}))
    with pytest.raises(ConfigError, match="Failed to parse config file"):
        AppConfig.load_from_file(path)


def test_non_object_document(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ConfigError, match="Failed to parse config file"):
        AppConfig.load_from_file(path)


def test_unwritable_path(tmp_path):
    with pytest.raises(ConfigError, match="Failed to write config file"):
        AppConfig().save_to_file(tmp_path / "missing-dir" / "config.json")


def test_string_boolean_is_a_parse_error(tmp_path):
    path = tmp_path / "strings.json"
    path.write_text(json.dumps({"settings": {"lattice_walk": "false"}}))
    with pytest.raises(ConfigError, match="Failed to parse config file"):
        AppConfig.load_from_file(path)
