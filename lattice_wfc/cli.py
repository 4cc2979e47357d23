#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
lattice-wfc: synthesize an image or voxel model that locally resembles an exemplar.

  lattice-wfc flowers.png out.png -o 128 128 1 -s flowerdaddy -p 2 2 1
  lattice-wfc monu10.vox out.vox -o 10 10 20 -s monudaddy -p 2 2 2 -t 8 8 8

Input type follows the extension (.vox -> voxel model, anything else -> image).
Sizes are given as X Y Z; images use Z = 1. Output and pattern sizes count tiles.
Exit codes: 0 ok, 1 bad configuration, 2 codec error, 3 no solution, 130 cancelled.
"""

import argparse, signal, sys, threading, time
from pathlib import Path
from typing import List, Optional

import numpy as np

from .config import DEFAULT_MAX_ATTEMPTS, DEFAULT_SEED, SynthesisConfig
from .errors import InvalidConfiguration, WFCError
from .image_io import load_image, save_image
from .log import dbg, err, hb, info, ok, warn
from .palette import pattern_palette, save_catalog
from .synthesize import index_exemplar, synthesize
from .tiles import TileSet
from .vox_io import EMPTY_VOXEL, load_vox, save_vox

TRANSPARENT = 0


# -------------------------- CLI --------------------------
def parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser("lattice-wfc", description="Overlapping wave function collapse for images and voxels.")
    ap.add_argument("input", type=Path, help="exemplar image or .vox file")
    ap.add_argument("output", type=Path, help="where to write the result (same kind as input)")
    ap.add_argument("-o", "--output-size", type=int, nargs=3, required=True, metavar=("X", "Y", "Z"),
                    help="size of the generated output, in tiles")
    ap.add_argument("-p", "--pattern-size", type=int, nargs=3, required=True, metavar=("X", "Y", "Z"),
                    help="size of the extracted patterns, in tiles")
    ap.add_argument("-t", "--tile-size", type=int, nargs=3, default=[1, 1, 1], metavar=("X", "Y", "Z"),
                    help="treat blocks of this many symbols as one tile")
    ap.add_argument("-s", "--seed", default=DEFAULT_SEED, help="any string; results are reproducible per seed")
    ap.add_argument("--input-periodic", type=int, nargs=3, default=[1, 1, 1], metavar=("X", "Y", "Z"),
                    help="1 = exemplar wraps around on that axis, 0 = clamp")
    ap.add_argument("--output-periodic", type=int, nargs=3, default=[1, 1, 1], metavar=("X", "Y", "Z"),
                    help="1 = output tiles seamlessly on that axis, 0 = hard edge")
    ap.add_argument("--attempts", type=int, default=DEFAULT_MAX_ATTEMPTS,
                    help="max full restarts before giving up")
    ap.add_argument("--palette", type=Path, default=None, help="save all patterns side by side (image or .vox)")
    ap.add_argument("--catalog", type=Path, default=None, help="save pattern ids/weights as CSV")
    ap.add_argument("--every", type=int, default=0, help="heartbeat every N decided cells (0 = off)")
    ap.add_argument("--debug", action="store_true", help="verbose progress logging")
    return ap.parse_args(argv)


def _planar(values: List[int], what: str) -> List[int]:
    if values[2] != 1:
        raise InvalidConfiguration(f"3D images not supported, use --{what} x y 1")
    return values[:2]


def heartbeat(every: int, t0: float):
    """Progress callback printing [hb] each time another `every` cells are decided."""
    last = 0

    def report(decided: int, total: int):
        nonlocal last
        step = decided // every
        if step > last:
            hb(f"decided={decided}/{total} elapsed={time.time() - t0:.1f}s")
        last = step  # drops back after a restart
    return report


# -------------------------- run --------------------------
def run(args, cancel: threading.Event) -> int:
    t0 = time.time()
    is_vox = args.input.suffix.lower() == ".vox"
    tile_size, pattern_size, output_size = args.tile_size, args.pattern_size, args.output_size
    input_periodic, output_periodic = args.input_periodic, args.output_periodic

    palette = None
    if is_vox:
        model = load_vox(args.input)
        grid, palette = model.grid, model.palette
    else:
        grid = load_image(args.input)
        tile_size = _planar(tile_size, "tile-size")
        pattern_size = _planar(pattern_size, "pattern-size")
        output_size = _planar(output_size, "output-size")
        input_periodic, output_periodic = input_periodic[:2], output_periodic[:2]
    info(f"Input size = {tuple(grid.shape)}")

    tiles, tile_grid = TileSet.from_grid(grid, tile_size)
    dbg(args.debug, f"{tiles.num_tiles} unique tiles of {tiles.tile_size}; tile grid {tuple(tile_grid.shape)}")

    config = SynthesisConfig(
        output_extent=output_size,
        pattern_extent=pattern_size,
        input_periodic=[bool(v) for v in input_periodic],
        output_periodic=[bool(v) for v in output_periodic],
        seed=args.seed,
        max_attempts=args.attempts,
        debug=args.debug,
    )
    pattern_set = index_exemplar(tile_grid, config)
    info(f"Found {pattern_set.num_patterns} patterns in input lattice")
    if pattern_set.num_patterns == 1:
        warn("exemplar yields a single pattern; the output will just repeat it")

    if args.palette:
        pal = pattern_palette(pattern_set, EMPTY_VOXEL if is_vox else TRANSPARENT, tiles)
        if is_vox: save_vox(args.palette, pal, palette)
        else: save_image(args.palette, pal)
        ok(f"pattern palette -> {args.palette}")
    if args.catalog:
        save_catalog(pattern_set, args.catalog)
        ok(f"pattern catalog -> {args.catalog}")

    every = max(0, int(args.every))
    info(f"Trying to generate with seed {args.seed!r}")
    result = synthesize(tile_grid, config, cancel=cancel, progress=heartbeat(every, t0) if every else None,
                        pattern_set=pattern_set)
    out = tiles.expand(result.grid)

    print(f"Writing {args.output}", flush=True)
    if is_vox: save_vox(args.output, out.astype(np.uint8), palette)
    else: save_image(args.output, out)
    ok(f"{tuple(out.shape)} after {result.attempts} attempt(s) in {time.time() - t0:.1f}s -> {args.output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cancel = threading.Event()
    prev = None
    if threading.current_thread() is threading.main_thread():
        prev = signal.signal(signal.SIGINT, lambda *_: cancel.set())
    try:
        return run(args, cancel)
    except WFCError as e:
        err(f"{type(e).__name__}: {e}")
        return e.exit_code
    finally:
        if prev is not None:
            signal.signal(signal.SIGINT, prev)


if __name__ == "__main__":
    sys.exit(main())
