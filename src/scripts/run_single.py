#!/usr/bin/env python3
"""
Single DLA Growth Runner

Grows one aggregate headlessly, prints the final braille frame and optionally
saves a .npz snapshot and/or the configuration used.
"""

import argparse
import sys
import time
from pathlib import Path

# Add src/ to path
SRC = Path(__file__).resolve().parents[1]
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dla_braille import App, AppConfig, ConfigError, PresetManager, SeedPattern, utils
from dla_braille.braille import cells_to_text

STALL_FRAMES = 2000


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Diffusion-Limited Aggregation rendered with braille characters",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-p", "--particles", type=int, default=5000,
        help="Number of particles (capped to 75%% of the grid area, default: 5000)",
    )
    parser.add_argument(
        "-s", "--stickiness", type=float, default=1.0,
        help="Base stickiness 0.1-1.0 (default: 1.0)",
    )
    parser.add_argument(
        "--seed", type=str, default="point",
        help="Seed pattern: point, line, cross, circle, ring, block, noise, scatter, multipoint, starburst",
    )
    parser.add_argument(
        "--speed", type=int, default=5,
        help="Steps per frame 1-50 (default: 5)",
    )
    parser.add_argument("--width", type=int, default=80, help="Canvas width in characters")
    parser.add_argument("--height", type=int, default=30, help="Canvas height in characters")
    parser.add_argument(
        "--frames", type=int, default=None,
        help="Stop after this many frames (default: run to completion)",
    )
    parser.add_argument(
        "--rng-seed", type=int, default=None,
        help="Random seed for a reproducible run",
    )
    parser.add_argument("--config", type=str, default=None, help="Load settings from a JSON/TOML config")
    parser.add_argument("--preset", type=str, default=None, help="Apply a named preset")
    parser.add_argument(
        "--export-config", type=str, default=None,
        help="Write the effective configuration to this JSON file",
    )
    parser.add_argument(
        "--out", type=str, default=None,
        help="Save a .npz snapshot of the final grid (a directory gets a timestamped name)",
    )
    parser.add_argument("--no-color", action="store_true", help="Plain braille output")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    app = App(args.width, args.height, seed=args.rng_seed)
    sim = app.simulation

    if args.config:
        try:
            app.apply_config(AppConfig.load_from_file(args.config))
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if args.preset:
        preset = PresetManager().find(args.preset)
        if preset is None:
            print(f"Error: unknown preset {args.preset!r}", file=sys.stderr)
            return 1
        preset.apply(sim)

    # a config or preset supersedes the individual options
    if not args.config and not args.preset:
        sim.num_particles = max(100, min(args.particles, sim.max_particles()))
        sim.stickiness = max(0.1, min(1.0, args.stickiness))
        app.set_speed(args.speed)
        sim.reset_with_seed(SeedPattern.from_name(args.seed))
    else:
        sim.reset()

    print(
        f"Growing {sim.seed_pattern.label} seed on {sim.grid_width}x{sim.grid_height} grid: "
        f"N={sim.num_particles}, stickiness={sim.stickiness:.2f}"
    )
    start_time = time.time()

    frames = 0
    stalled = 0
    while not sim.is_complete():
        if args.frames is not None and frames >= args.frames:
            break
        before = sim.particles_stuck
        app.tick()
        frames += 1
        stalled = stalled + 1 if sim.particles_stuck == before else 0
        if stalled >= STALL_FRAMES:
            print(f"Stopping: no growth in {STALL_FRAMES} frames")
            break

    elapsed_time = time.time() - start_time

    print(cells_to_text(app.render(), app.canvas_width, app.canvas_height, ansi=not args.no_color))

    if args.export_config:
        ok, message = app.export_config(args.export_config)
        print(f"   Config: {message}" if ok else f"Error: {message}")

    out_path = None
    if args.out:
        out_path = Path(args.out)
        if out_path.is_dir():
            out_path = out_path / f"dla_{sim.seed_pattern.tag.lower()}_{utils.now_str()}.npz"
        utils.save_cluster_result(out_path, sim.to_result())

    print(f"\n✅ {sim.particles_stuck}/{sim.num_particles} particles ({sim.progress():.0%})")
    print(f"   Frames: {frames}, time elapsed: {elapsed_time:.2f} seconds")
    if out_path is not None:
        print(f"   Snapshot saved to: {out_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
