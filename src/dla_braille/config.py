"""
Versioned export/import of the full application configuration.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from . import utils
from .color import ColorScheme
from .seeds import SeedPattern
from .settings import SimulationSettings, parse_bool

logger = logging.getLogger(__name__)

CONFIG_VERSION = 1


class ConfigError(Exception):
    """Configuration or preset I/O failure; ``str(err)`` is the user-facing message."""


@dataclass
class AppConfig:
    version: int = CONFIG_VERSION
    settings: SimulationSettings = field(default_factory=SimulationSettings)
    seed_pattern: SeedPattern = SeedPattern.POINT
    stickiness: float = 1.0
    num_particles: int = 5000
    color_scheme: ColorScheme = ColorScheme.ICE
    steps_per_frame: int = 5
    color_by_age: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "settings": self.settings.to_dict(),
            "seed_pattern": self.seed_pattern.tag,
            "stickiness": self.stickiness,
            "num_particles": self.num_particles,
            "color_scheme": self.color_scheme.tag,
            "steps_per_frame": self.steps_per_frame,
            "color_by_age": self.color_by_age,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Missing keys keep their defaults; unknown enum tags raise ValueError."""
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        default = cls()
        return cls(
            version=int(data.get("version", default.version)),
            settings=SimulationSettings.from_dict(data.get("settings", {})),
            seed_pattern=SeedPattern.from_tag(data.get("seed_pattern", default.seed_pattern.tag)),
            stickiness=float(data.get("stickiness", default.stickiness)),
            num_particles=int(data.get("num_particles", default.num_particles)),
            color_scheme=ColorScheme.from_tag(data.get("color_scheme", default.color_scheme.tag)),
            steps_per_frame=int(data.get("steps_per_frame", default.steps_per_frame)),
            color_by_age=parse_bool("color_by_age", data.get("color_by_age", default.color_by_age)),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def save_to_file(self, path: str | os.PathLike[str]) -> None:
        try:
            text = self.to_json()
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Failed to serialize config: {e}") from e
        try:
            Path(path).write_text(text, encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to write config file: {e}") from e
        logger.info("Config saved to %s", path)

    @classmethod
    def load_from_file(cls, path: str | os.PathLike[str]) -> "AppConfig":
        try:
            data = utils.load_params(path)
        except OSError as e:
            raise ConfigError(f"Failed to read config file: {e}") from e
        except (ValueError, RuntimeError) as e:
            # JSONDecodeError, TOMLDecodeError and unsupported suffixes
            raise ConfigError(f"Failed to parse config file: {e}") from e
        try:
            config = cls.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Failed to parse config file: {e}") from e
        logger.info("Config loaded from %s", path)
        return config
