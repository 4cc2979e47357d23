# -*- coding: utf-8 -*-
"""
Tiling: treat fixed-size blocks of the exemplar as single symbols.

Repeated structure larger than one symbol (e.g. 8x8x8 voxel blocks) is then
captured by small patterns, which is also much cheaper to synthesize.
"""

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

import numpy as np

from .errors import InvalidConfiguration


def _blocks(grid: np.ndarray, tile_size: Sequence[int]) -> np.ndarray:
    # (n0*t0, n1*t1, ...) -> (n0, n1, ..., t0, t1, ...)
    split = []
    for e, t in zip(grid.shape, tile_size):
        split += [e // t, t]
    nd = grid.ndim
    order = list(range(0, 2 * nd, 2)) + list(range(1, 2 * nd, 2))
    return grid.reshape(split).transpose(order)


@dataclass
class TileSet:
    tiles: np.ndarray               # (n_tiles, *tile_size)
    tile_size: Tuple[int, ...]

    @property
    def num_tiles(self) -> int:
        return int(self.tiles.shape[0])

    @classmethod
    def from_grid(cls, grid, tile_size: Sequence[int]):
        """Returns (TileSet, tile-index grid)."""
        grid = np.asarray(grid)
        T = tuple(int(t) for t in tile_size)
        if len(T) != grid.ndim:
            raise InvalidConfiguration(f"tile size {T} does not match a {grid.ndim}-D grid")
        if any(t <= 0 for t in T):
            raise InvalidConfiguration(f"tile size must be positive, got {T}")
        if grid.size == 0:
            raise InvalidConfiguration("exemplar grid is empty")
        for axis, (e, t) in enumerate(zip(grid.shape, T)):
            if e % t:
                raise InvalidConfiguration(f"exemplar extent {e} on axis {axis} is not a multiple of tile size {t}")

        blocks = _blocks(grid, T)
        counts_shape = blocks.shape[:grid.ndim]
        ids: Dict[bytes, int] = {}
        reps = []
        tile_grid = np.empty(counts_shape, dtype=np.int32)
        for at in np.ndindex(*counts_shape):
            block = blocks[at]
            key = block.tobytes()
            tid = ids.get(key)
            if tid is None:
                tid = ids[key] = len(reps)
                reps.append(np.array(block))
            tile_grid[at] = tid
        return cls(np.stack(reps), T), tile_grid

    def expand(self, tile_grid) -> np.ndarray:
        g = np.asarray(tile_grid)
        nd = g.ndim
        blocks = self.tiles[g]                      # (*g.shape, *tile_size)
        order = [i for pair in zip(range(nd), range(nd, 2 * nd)) for i in pair]
        return blocks.transpose(order).reshape(tuple(e * t for e, t in zip(g.shape, self.tile_size)))
