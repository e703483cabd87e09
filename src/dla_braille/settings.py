"""
Tunable simulation settings and the closed policy selectors they refer to.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, fields
from enum import IntEnum
from typing import Any, Dict

import numpy as np

from . import policies


class CyclicEnum(IntEnum):
    """IntEnum whose declaration order doubles as a wrap-around cycle."""

    def next(self):
        members = list(type(self))
        return members[(members.index(self) + 1) % len(members)]

    def prev(self):
        members = list(type(self))
        return members[(members.index(self) - 1) % len(members)]

    @property
    def tag(self) -> str:
        """Serialised name, e.g. ``VON_NEUMANN`` -> ``"VonNeumann"``."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def label(self) -> str:
        return self.tag

    @classmethod
    def from_tag(cls, tag: str):
        for member in cls:
            if member.tag == tag:
                return member
        raise ValueError(f"Unknown {cls.__name__} tag: {tag!r}")


class NeighborhoodType(CyclicEnum):
    VON_NEUMANN = policies.NEIGHBORHOOD_VON_NEUMANN
    MOORE = policies.NEIGHBORHOOD_MOORE
    EXTENDED = policies.NEIGHBORHOOD_EXTENDED

    def offsets(self) -> np.ndarray:
        """(n, 2) int64 table of (dx, dy) offsets. Shared; do not mutate."""
        if self is NeighborhoodType.VON_NEUMANN:
            return policies.VON_NEUMANN_OFFSETS
        if self is NeighborhoodType.MOORE:
            return policies.MOORE_OFFSETS
        return policies.EXTENDED_OFFSETS

    @property
    def max_neighbors(self) -> int:
        return len(self.offsets())


class SpawnMode(CyclicEnum):
    CIRCLE = policies.SPAWN_CIRCLE
    EDGES = policies.SPAWN_EDGES
    CORNERS = policies.SPAWN_CORNERS
    RANDOM = policies.SPAWN_RANDOM
    TOP = policies.SPAWN_TOP
    BOTTOM = policies.SPAWN_BOTTOM
    LEFT = policies.SPAWN_LEFT
    RIGHT = policies.SPAWN_RIGHT


class BoundaryBehavior(CyclicEnum):
    CLAMP = policies.BOUNDARY_CLAMP
    WRAP = policies.BOUNDARY_WRAP
    BOUNCE = policies.BOUNDARY_BOUNCE
    STICK = policies.BOUNDARY_STICK
    ABSORB = policies.BOUNDARY_ABSORB


class ColorMode(CyclicEnum):
    AGE = 0
    DISTANCE = 1
    DENSITY = 2
    DIRECTION = 3


_ENUM_FIELDS = {
    "neighborhood": NeighborhoodType,
    "spawn_mode": SpawnMode,
    "boundary_behavior": BoundaryBehavior,
    "color_mode": ColorMode,
}


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def parse_bool(name: str, value: Any) -> bool:
    """Strict boolean field; strings such as ``"false"`` are rejected."""
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


@dataclass
class SimulationSettings:
    """Movement, sticking, spawn/boundary and visual tunables."""

    # movement
    walk_step_size: float = 1.0
    walk_bias_angle: float = 0.0  # degrees
    walk_bias_strength: float = 0.0
    radial_bias: float = 0.0
    adaptive_step: bool = False
    adaptive_step_factor: float = 3.0
    lattice_walk: bool = True

    # sticking
    neighborhood: NeighborhoodType = NeighborhoodType.VON_NEUMANN
    multi_contact_min: int = 1
    tip_stickiness: float = 1.0
    side_stickiness: float = 1.0
    stickiness_gradient: float = 0.0

    # spawn / boundary
    spawn_mode: SpawnMode = SpawnMode.CIRCLE
    boundary_behavior: BoundaryBehavior = BoundaryBehavior.ABSORB
    spawn_radius_offset: float = 10.0
    escape_multiplier: float = 3.0
    min_spawn_radius: float = 15.0
    max_walk_iterations: int = 10_000

    # visual
    color_mode: ColorMode = ColorMode.AGE
    highlight_recent: int = 0
    invert_colors: bool = False

    # ------------------------------------------------------------------ helpers
    @property
    def bias_angle_radians(self) -> float:
        return math.radians(self.walk_bias_angle)

    def effective_stickiness(
        self, neighbor_count: int, distance_from_center: float, base_stickiness: float
    ) -> float:
        return policies.effective_stickiness(
            int(neighbor_count),
            self.neighborhood.max_neighbors,
            float(distance_from_center),
            float(base_stickiness),
            float(self.tip_stickiness),
            float(self.side_stickiness),
            float(self.stickiness_gradient),
        )

    def copy(self) -> "SimulationSettings":
        return copy.deepcopy(self)

    # ------------------------------------------------------------------ adjusters
    def adjust_walk_step_size(self, delta: float) -> None:
        self.walk_step_size = _clamp(self.walk_step_size + delta, 0.5, 5.0)

    def adjust_walk_bias_angle(self, delta: float) -> None:
        self.walk_bias_angle = (self.walk_bias_angle + delta) % 360.0

    def adjust_walk_bias_strength(self, delta: float) -> None:
        self.walk_bias_strength = _clamp(self.walk_bias_strength + delta, 0.0, 0.5)

    def adjust_radial_bias(self, delta: float) -> None:
        self.radial_bias = _clamp(self.radial_bias + delta, -0.3, 0.3)

    def adjust_multi_contact_min(self, delta: int) -> None:
        self.multi_contact_min = int(_clamp(self.multi_contact_min + delta, 1, 4))

    def adjust_tip_stickiness(self, delta: float) -> None:
        self.tip_stickiness = _clamp(self.tip_stickiness + delta, 0.1, 1.0)

    def adjust_side_stickiness(self, delta: float) -> None:
        self.side_stickiness = _clamp(self.side_stickiness + delta, 0.1, 1.0)

    def adjust_stickiness_gradient(self, delta: float) -> None:
        self.stickiness_gradient = _clamp(self.stickiness_gradient + delta, -0.5, 0.5)

    def adjust_spawn_radius_offset(self, delta: float) -> None:
        self.spawn_radius_offset = _clamp(self.spawn_radius_offset + delta, 5.0, 50.0)

    def adjust_escape_multiplier(self, delta: float) -> None:
        self.escape_multiplier = _clamp(self.escape_multiplier + delta, 2.0, 6.0)

    def adjust_min_spawn_radius(self, delta: float) -> None:
        self.min_spawn_radius = _clamp(self.min_spawn_radius + delta, 20.0, 100.0)

    def adjust_max_walk_iterations(self, delta: int) -> None:
        self.max_walk_iterations = int(_clamp(self.max_walk_iterations + delta, 1000, 50_000))

    def adjust_highlight_recent(self, delta: int) -> None:
        self.highlight_recent = int(_clamp(self.highlight_recent + delta, 0, 50))

    def adjust_adaptive_step_factor(self, delta: float) -> None:
        self.adaptive_step_factor = _clamp(self.adaptive_step_factor + delta, 1.0, 10.0)

    def toggle_adaptive_step(self) -> None:
        self.adaptive_step = not self.adaptive_step

    def toggle_lattice_walk(self) -> None:
        self.lattice_walk = not self.lattice_walk

    def toggle_invert_colors(self) -> None:
        self.invert_colors = not self.invert_colors

    # ------------------------------------------------------------------ serialisation
    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            out[f.name] = value.tag if isinstance(value, CyclicEnum) else value
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationSettings":
        """Build settings from a dict; missing keys keep their defaults."""
        settings = cls()
        for f in fields(cls):
            if f.name not in data:
                continue
            value = data[f.name]
            enum_cls = _ENUM_FIELDS.get(f.name)
            if enum_cls is not None:
                value = enum_cls.from_tag(value)
            elif isinstance(f.default, bool):
                value = parse_bool(f.name, value)
            elif isinstance(f.default, int):
                value = int(value)
            elif isinstance(f.default, float):
                value = float(value)
            setattr(settings, f.name, value)
        return settings
