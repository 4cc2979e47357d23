# -*- coding: utf-8 -*-
"""
Image codec: RGBA rasters <-> 2-D grids of packed 32-bit RGBA symbols.

Grids are indexed [x, y]; a pixel's symbol is its RGBA bytes read as a
little-endian uint32.
"""

from pathlib import Path

import numpy as np
from PIL import Image

from .errors import InvalidConfiguration, UnsupportedFormat

SYMBOL_DTYPE = np.dtype("<u4")


def rgba_symbol(r: int, g: int, b: int, a: int = 255) -> int:
    return int(np.array([r, g, b, a], dtype=np.uint8).view(SYMBOL_DTYPE)[0])


def symbols_from_rgba(rgba: np.ndarray) -> np.ndarray:
    """(H, W, 4) uint8 -> (W, H) symbols."""
    packed = np.ascontiguousarray(rgba, dtype=np.uint8).view(SYMBOL_DTYPE)[..., 0]
    return np.ascontiguousarray(packed.T)


def rgba_from_symbols(grid: np.ndarray) -> np.ndarray:
    """(W, H) symbols -> (H, W, 4) uint8."""
    g = np.ascontiguousarray(np.asarray(grid).T, dtype=SYMBOL_DTYPE)
    return g.view(np.uint8).reshape(g.shape[0], g.shape[1], 4)


def load_image(path: Path) -> np.ndarray:
    path = Path(path)
    try:
        with Image.open(path) as img:
            rgba = np.asarray(img.convert("RGBA"), dtype=np.uint8)
    except (OSError, ValueError) as e:
        raise UnsupportedFormat(f"cannot read image {path}: {e}") from e
    return symbols_from_rgba(rgba)


def save_image(path: Path, grid: np.ndarray):
    g = np.asarray(grid)
    if g.ndim == 3 and g.shape[2] == 1:
        g = g[..., 0]
    if g.ndim != 2:
        raise InvalidConfiguration(f"images are 2-D; got a grid of shape {g.shape}")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        Image.fromarray(rgba_from_symbols(g)).save(path)
    except (OSError, ValueError, KeyError) as e:
        raise UnsupportedFormat(f"cannot write image {path}: {e}") from e
