# src/scripts/plot_cluster.py
import argparse
import math
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

SRC = Path(__file__).resolve().parents[1]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dla_braille import ColorMode, ColorScheme, utils  # type: ignore[import]


def mode_image(result, color_mode):
    """
    Per-cell colour value in [0, 1] for occupied cells, NaN elsewhere.

    Args:
        result: ClusterResult loaded from a snapshot
        color_mode: ColorMode used to pick the particle property

    Returns:
        2D float array shaped like the grid
    """
    meta = result.meta or {}
    occupied = result.occupied
    if occupied is None:
        raise ValueError("Snapshot has no occupancy grid")

    if color_mode == ColorMode.AGE:
        values = meta["age"] / max(int(meta.get("num", 1)), 1)
    elif color_mode == ColorMode.DISTANCE:
        values = meta["distance"] / max(float(meta.get("max_radius", 1.0)), 1.0)
    elif color_mode == ColorMode.DENSITY:
        values = meta["neighbor_count"] / 8.0
    else:
        values = (meta["direction"] + math.pi) / (2.0 * math.pi)

    image = np.full(occupied.shape, np.nan, dtype=np.float64)
    image[occupied] = np.clip(values[occupied], 0.0, 1.0)
    return image


def format_title(meta):
    if not meta:
        return None
    parts = [
        f"seed={meta.get('seed_pattern', '?')}",
        f"N={meta.get('particles_stuck', '?')}/{meta.get('num', '?')}",
    ]
    stickiness = meta.get("stickiness")
    if stickiness is not None:
        parts.append(f"stick={stickiness:.2f}")
    max_radius = meta.get("max_radius")
    if max_radius is not None:
        parts.append(f"R={max_radius:.1f}")
    return " | ".join(parts)


def render(result, color_mode, scheme, output, dpi=200, invert=False):
    image = mode_image(result, color_mode)
    if invert:
        image = 1.0 - image

    fig, ax = plt.subplots(figsize=(8, 8 * image.shape[0] / max(image.shape[1], 1)))
    fig.patch.set_facecolor("black")
    ax.set_facecolor("black")
    cmap = scheme.colormap().with_extremes(bad="black")
    ax.imshow(image, interpolation="nearest", cmap=cmap, vmin=0.0, vmax=1.0)
    ax.set_axis_off()

    title = format_title(result.meta)
    if title:
        ax.set_title(title, color="white", fontsize=9)

    fig.savefig(output, dpi=dpi, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render a DLA snapshot (.npz) to PNG")
    parser.add_argument("input", help="Snapshot written by run_single.py --out")
    parser.add_argument(
        "--mode",
        choices=[m.tag.lower() for m in ColorMode],
        default="age",
        help="Particle property to colour by",
    )
    parser.add_argument(
        "--scheme",
        choices=[s.tag.lower() for s in ColorScheme],
        default="ice",
        help="Colour scheme",
    )
    parser.add_argument("--invert", action="store_true", help="Invert the gradient")
    parser.add_argument("--dpi", type=int, default=200)
    parser.add_argument("--out", default=None, help="Output PNG (default: next to input)")
    args = parser.parse_args(argv)

    input_path = Path(args.input)
    output_path = Path(args.out) if args.out else input_path.with_name(
        f"{input_path.stem}_{args.mode}_{args.scheme}.png"
    )

    color_mode = ColorMode[args.mode.upper()]
    scheme = next(s for s in ColorScheme if s.tag.lower() == args.scheme)

    result = utils.load_cluster(input_path)
    render(result, color_mode, scheme, output_path, dpi=args.dpi, invert=args.invert)
    print(f"✅ Saved {output_path}")


if __name__ == "__main__":
    main()
