"""
DLA Braille - Diffusion-Limited Aggregation on a dense grid with braille rendering

This package provides:
- DlaSimulation: incremental on-grid DLA with tunable walk/stick/spawn/boundary policies
- ParticleGrid / SeedPattern: the grid store and its starting structures
- render_to_braille: 2x4 sub-cell sampling of the grid into coloured glyphs
- AppConfig / PresetManager: persisted configuration and presets
"""

from .app import App
from .braille import BrailleCell, calculate_simulation_size, render_to_braille
from .color import ColorScheme, build_lut, map_from_lut
from .config import AppConfig, ConfigError
from .lattice import ParticleData, ParticleGrid
from .presets import Preset, PresetManager
from .seeds import SeedPattern
from .settings import (
    BoundaryBehavior,
    ColorMode,
    NeighborhoodType,
    SimulationSettings,
    SpawnMode,
)
from .simulation import DlaSimulation
from . import utils

__all__ = [
    # Simulation
    "DlaSimulation",
    "ParticleGrid",
    "ParticleData",
    "SeedPattern",
    # Settings
    "SimulationSettings",
    "NeighborhoodType",
    "SpawnMode",
    "BoundaryBehavior",
    "ColorMode",
    # Rendering
    "BrailleCell",
    "render_to_braille",
    "calculate_simulation_size",
    "ColorScheme",
    "build_lut",
    "map_from_lut",
    # Configuration
    "AppConfig",
    "ConfigError",
    "Preset",
    "PresetManager",
    "App",
    # Utilities
    "utils",
]
