# src/dla_braille/utils.py
from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore

# Per-cell arrays stored next to the occupancy mask in snapshot files.
PARTICLE_ARRAYS = ("age", "distance", "direction", "neighbor_count")


@dataclass
class ClusterResult:
    """Grid snapshot: occupancy mask, attachment-ordered positions and metadata."""

    occupied: Optional[np.ndarray] = None
    positions: Optional[np.ndarray] = None
    meta: Optional[Dict[str, Any]] = None


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def save_cluster_result(
    path: str | os.PathLike[str], result: ClusterResult, *, overwrite: bool = True
) -> None:
    """Serialize a ClusterResult to a compressed .npz file."""
    if not overwrite and Path(path).exists():
        raise FileExistsError(f"{path} already exists")
    Path(path).parent.mkdir(parents=True, exist_ok=True)

    out: Dict[str, Any] = {}
    if result.occupied is not None:
        out["occupied"] = result.occupied.astype("uint8")
    if result.positions is not None:
        out["positions"] = np.asarray(result.positions, dtype=np.float64)

    # numpy arrays go to the top level, everything else into the meta record
    meta_clean = {}
    for key, value in (result.meta or {}).items():
        if isinstance(value, np.ndarray):
            out[key] = value
        else:
            meta_clean[key] = value
    out["meta"] = json.dumps(meta_clean)
    np.savez_compressed(path, **out)


def load_cluster(path: str | os.PathLike[str]) -> ClusterResult:
    """Load a .npz snapshot written by :func:`save_cluster_result`."""
    with np.load(path, allow_pickle=False) as data:
        occupied = data["occupied"].astype(bool) if "occupied" in data else None
        positions = data["positions"].astype(float) if "positions" in data else None
        meta: Dict[str, Any] = {}
        if "meta" in data:
            meta = json.loads(str(data["meta"]))
        for key in PARTICLE_ARRAYS:
            if key in data and key not in meta:
                meta[key] = data[key]
    return ClusterResult(occupied=occupied, positions=positions, meta=meta)


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        if tomllib is None:
            raise RuntimeError("tomllib is unavailable; cannot parse TOML files")
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")
