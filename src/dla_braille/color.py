"""
Colour schemes and their precomputed lookup tables.

A lookup table is a ``(n, 3)`` uint8 array sampled once from a matplotlib
colormap so the per-frame renderer only does an index lookup.
"""

from __future__ import annotations

from typing import Tuple

import matplotlib
import matplotlib.colors as mcolors
import numpy as np

from .settings import CyclicEnum

RGB = Tuple[int, int, int]

LUT_SIZE = 256
HIGHLIGHT_COLOR: RGB = (255, 255, 255)
PLAIN_COLOR: RGB = (229, 229, 229)

# Custom gradients; the other schemes use matplotlib's built-in colormaps.
_CUSTOM_GRADIENTS = {
    "ice": ["#0a1a3a", "#1f5fa8", "#6ec6f0", "#e8fbff"],
    "neon": ["#ff00c8", "#8a2be2", "#00e5ff", "#39ff14"],
}


class ColorScheme(CyclicEnum):
    ICE = 0
    FIRE = 1
    PLASMA = 2
    VIRIDIS = 3
    RAINBOW = 4
    GRAYSCALE = 5
    OCEAN = 6
    NEON = 7

    @property
    def cmap_name(self) -> str:
        return {
            ColorScheme.ICE: "ice",
            ColorScheme.FIRE: "inferno",
            ColorScheme.PLASMA: "plasma",
            ColorScheme.VIRIDIS: "viridis",
            ColorScheme.RAINBOW: "rainbow",
            ColorScheme.GRAYSCALE: "gray",
            ColorScheme.OCEAN: "ocean_r",
            ColorScheme.NEON: "neon",
        }[self]

    def colormap(self) -> mcolors.Colormap:
        name = self.cmap_name
        if name in _CUSTOM_GRADIENTS:
            return mcolors.LinearSegmentedColormap.from_list(name, _CUSTOM_GRADIENTS[name])
        return matplotlib.colormaps[name]

    def build_lut(self, size: int = LUT_SIZE) -> np.ndarray:
        return build_lut(self, size)


def build_lut(scheme: ColorScheme, size: int = LUT_SIZE) -> np.ndarray:
    """Sample ``scheme`` at ``size`` evenly spaced points in [0, 1]."""
    rgba = scheme.colormap()(np.linspace(0.0, 1.0, size))
    return np.round(rgba[:, :3] * 255.0).astype(np.uint8)


def lut_indices(lut: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Vectorised index of each ``t`` (clamped to [0, 1]) into ``lut``."""
    t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
    return np.floor(t * (len(lut) - 1) + 0.5).astype(np.int64)


def map_from_lut(lut: np.ndarray, t: float) -> RGB:
    idx = int(lut_indices(lut, t))
    r, g, b = lut[idx]
    return int(r), int(g), int(b)
