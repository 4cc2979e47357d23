# -*- coding: utf-8 -*-
# Debug views of the extracted patterns: a side-by-side palette grid and a CSV catalog.

from pathlib import Path
from typing import Optional

import numpy as np

from .patterns import PatternSet
from .tiles import TileSet


def pattern_palette(pattern_set: PatternSet, background, tiles: Optional[TileSet] = None) -> np.ndarray:
    """Every pattern window laid out along x, separated by one background symbol."""
    windows = [tiles.expand(p) if tiles is not None else p for p in pattern_set.patterns]
    w = windows[0].shape
    n = len(windows)
    dtype = tiles.tiles.dtype if tiles is not None else pattern_set.patterns.dtype
    out = np.full(((w[0] + 1) * n - 1,) + w[1:], background, dtype=dtype)
    for i, win in enumerate(windows):
        x0 = i * (w[0] + 1)
        out[x0:x0 + w[0]] = win
    return out


def save_catalog(pattern_set: PatternSet, path: Path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pattern_set.catalog().to_csv(path, index=False)
