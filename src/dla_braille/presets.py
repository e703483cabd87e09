"""
Named parameter presets: a built-in set plus user presets stored as JSON.
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .config import ConfigError
from .seeds import SeedPattern
from .settings import BoundaryBehavior, NeighborhoodType, SimulationSettings, SpawnMode

logger = logging.getLogger(__name__)

APP_DIR_NAME = "dla-simulation"


@dataclass
class Preset:
    name: str
    description: str
    settings: SimulationSettings = field(default_factory=SimulationSettings)
    seed_pattern: SeedPattern = SeedPattern.POINT
    base_stickiness: float = 1.0
    num_particles: int = 5000

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "settings": self.settings.to_dict(),
            "seed_pattern": self.seed_pattern.tag,
            "base_stickiness": self.base_stickiness,
            "num_particles": self.num_particles,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preset":
        return cls(
            name=str(data["name"]),
            description=str(data.get("description", "")),
            settings=SimulationSettings.from_dict(data.get("settings", {})),
            seed_pattern=SeedPattern.from_tag(data.get("seed_pattern", "Point")),
            base_stickiness=float(data.get("base_stickiness", 1.0)),
            num_particles=int(data.get("num_particles", 5000)),
        )

    def apply(self, simulation) -> None:
        """Load this preset into a simulation and re-seed it."""
        simulation.settings = self.settings.copy()
        simulation.stickiness = self.base_stickiness
        simulation.num_particles = max(100, min(self.num_particles, simulation.max_particles()))
        simulation.reset_with_seed(self.seed_pattern)


def _builtin_presets() -> List[Preset]:
    base = SimulationSettings()
    return [
        Preset("Classic", "Standard DLA with default settings", base),
        Preset(
            "Dense",
            "Compact structures with multiple contact requirement",
            replace(base, walk_step_size=1.0, multi_contact_min=2, neighborhood=NeighborhoodType.MOORE),
        ),
        Preset(
            "Dendritic",
            "Thin, branching dendrite patterns",
            replace(base, walk_step_size=3.0, tip_stickiness=1.0, side_stickiness=0.3),
            base_stickiness=0.3,
        ),
        Preset(
            "Snowflake",
            "Symmetric snowflake-like growth",
            replace(base, walk_step_size=2.0, neighborhood=NeighborhoodType.VON_NEUMANN),
            SeedPattern.CROSS,
            0.8,
        ),
        Preset(
            "Coral",
            "Thick, coral-like structures",
            replace(
                base,
                walk_step_size=1.5,
                tip_stickiness=0.5,
                side_stickiness=1.0,
                neighborhood=NeighborhoodType.MOORE,
            ),
            SeedPattern.RING,
            0.7,
        ),
        Preset(
            "Wind-swept",
            "Asymmetric growth with directional bias",
            replace(base, walk_bias_angle=45.0, walk_bias_strength=0.3),
            base_stickiness=0.8,
        ),
        Preset(
            "Fractal Forest",
            "Multiple growth centers competing",
            replace(base, walk_step_size=2.5, escape_multiplier=3.0),
            SeedPattern.SCATTER,
            0.4,
            8000,
        ),
        Preset(
            "Edge Growth",
            "Particles spawn from grid edges",
            replace(base, spawn_mode=SpawnMode.EDGES, boundary_behavior=BoundaryBehavior.BOUNCE),
            base_stickiness=0.9,
        ),
        Preset(
            "Angular",
            "Sharp, angular growth patterns",
            replace(base, neighborhood=NeighborhoodType.VON_NEUMANN, walk_step_size=1.5),
        ),
        Preset(
            "Blob",
            "Dense, blob-like structures",
            replace(
                base,
                neighborhood=NeighborhoodType.EXTENDED,
                multi_contact_min=3,
                walk_step_size=1.0,
            ),
            SeedPattern.BLOCK,
        ),
        Preset(
            "Gradient",
            "Dense core with sparse edges",
            replace(base, stickiness_gradient=-0.3),
        ),
        Preset(
            "Rain",
            "Particles fall from top edge",
            replace(base, spawn_mode=SpawnMode.TOP, radial_bias=0.1),
            SeedPattern.LINE,
            0.8,
        ),
    ]


def default_presets_dir() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    root = Path(config_home) if config_home else Path.home() / ".config"
    return root / APP_DIR_NAME / "presets"


def sanitize_filename(name: str) -> str:
    return re.sub(r"[^0-9A-Za-z_\-]", "_", name)


class PresetManager:
    """Built-in presets plus user presets loaded from ``presets_dir``."""

    def __init__(self, presets_dir: Optional[os.PathLike[str] | str] = None) -> None:
        self.presets_dir = Path(presets_dir) if presets_dir is not None else default_presets_dir()
        self.builtin: List[Preset] = _builtin_presets()
        self.user: List[Preset] = []
        self.load_user_presets()

    def load_user_presets(self) -> None:
        self.user = []
        if not self.presets_dir.is_dir():
            return
        for path in sorted(self.presets_dir.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                self.user.append(Preset.from_dict(data))
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.warning("Skipping preset file %s: %s", path, e)
        logger.debug("Loaded %d user presets from %s", len(self.user), self.presets_dir)

    def _path_for(self, name: str) -> Path:
        return self.presets_dir / f"{sanitize_filename(name)}.json"

    def save_preset(self, preset: Preset) -> Path:
        try:
            self.presets_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Failed to create presets directory: {e}") from e

        path = self._path_for(preset.name)
        try:
            text = json.dumps(preset.to_dict(), indent=2)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Failed to serialize preset: {e}") from e
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to write preset file: {e}") from e

        if not any(p.name == preset.name for p in self.user):
            self.user.append(preset)
        logger.info("Saved preset %r to %s", preset.name, path)
        return path

    def delete_preset(self, name: str) -> None:
        self.user = [p for p in self.user if p.name != name]
        path = self._path_for(name)
        if path.exists():
            try:
                path.unlink()
            except OSError as e:
                raise ConfigError(f"Failed to delete preset file: {e}") from e

    def all_presets(self) -> Iterator[Preset]:
        yield from self.builtin
        yield from self.user

    def find(self, name: str) -> Optional[Preset]:
        wanted = name.casefold()
        return next((p for p in self.all_presets() if p.name.casefold() == wanted), None)

    def preset_names(self) -> List[str]:
        return [p.name for p in self.all_presets()]
