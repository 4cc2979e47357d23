# -*- coding: utf-8 -*-
"""
Voxel codec: MagicaVoxel .vox models <-> 3-D grids of palette indices.

Grids are indexed [x, y, z]; 0 is an empty voxel. The 256-entry palette is
carried through untouched. Files written by MagicaVoxel 0.99+ (version 200,
with material and scene-graph chunks) are read too; only SIZE, XYZI and
RGBA are kept.
"""

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np
from pyvox.models import Color, Model, Size, Vox, Voxel
from pyvox.parser import Chunk, ParsingException, VoxParser
from pyvox.writer import VoxWriter

from .errors import InvalidConfiguration, UnsupportedFormat

EMPTY_VOXEL = 0
MAX_VOX_EXTENT = 256
PALETTE_SIZE = 256
VOX_VERSIONS = (150, 200)
MODEL_CHUNKS = (b"MAIN", b"PACK", b"SIZE", b"XYZI", b"RGBA")


@dataclass
class VoxModel:
    grid: np.ndarray
    palette: Optional[List] = None


class ModelParser(VoxParser):
    """VoxParser that steps over MATL / nTRN / nGRP / nSHP / LAYR / rOBJ / rCAM / NOTE / IMAP chunks."""

    def _parseChunk(self):
        cid, n_content, n_children = self.unpack("4sii")
        content = self.unpack("%ds" % n_content)[0]
        end = self.offset + n_children
        if cid not in MODEL_CHUNKS:
            self.offset = end
            return None
        children = []
        while self.offset < end:
            child = self._parseChunk()
            if child is not None:
                children.append(child)
        chunk = Chunk(cid, content, children)
        if cid == b"RGBA":
            # pyvox stops at 255 entries
            chunk.palette = [Color(*struct.unpack_from("BBBB", content, 4 * i)) for i in range(len(content) // 4)]
        return chunk

    def parse(self):
        header, version = self.unpack("4si")
        if header != b"VOX ":
            raise ParsingException("not a vox file")
        if version not in VOX_VERSIONS:
            raise ParsingException(f"unknown vox version {version}")
        main = self._parseChunk()
        if main is None or main.id != b"MAIN":
            raise ParsingException("missing MAIN chunk")
        sizes = [c.size for c in main.chunks if c.id == b"SIZE"]
        voxels = [c.voxels for c in main.chunks if c.id == b"XYZI"]
        if len(sizes) != len(voxels):
            raise ParsingException(f"{len(sizes)} SIZE chunk(s) but {len(voxels)} XYZI chunk(s)")
        palettes = [c.palette for c in main.chunks if c.id == b"RGBA"]
        return Vox([Model(s, v) for s, v in zip(sizes, voxels)], palettes[0] if palettes else None)


def load_vox(path: Path, model_index: int = 0) -> VoxModel:
    path = Path(path)
    try:
        vox = ModelParser(str(path)).parse()
    except (OSError, ParsingException, struct.error) as e:
        raise UnsupportedFormat(f"cannot read vox {path}: {e}") from e
    if model_index >= len(vox.models):
        raise UnsupportedFormat(f"{path} has {len(vox.models)} model(s), wanted index {model_index}")
    m = vox.models[model_index]
    grid = np.full((m.size.x, m.size.y, m.size.z), EMPTY_VOXEL, dtype=np.uint8)
    for v in m.voxels:
        grid[v.x, v.y, v.z] = v.c
    return VoxModel(grid=grid, palette=list(vox.palette))


def full_palette(palette) -> List:
    """Exactly PALETTE_SIZE colors; short palettes are padded with transparent black."""
    colors = [Color(*c) for c in palette]
    if len(colors) > PALETTE_SIZE:
        raise UnsupportedFormat(f"vox palettes hold {PALETTE_SIZE} colors; got {len(colors)}")
    return colors + [Color(0, 0, 0, 0)] * (PALETTE_SIZE - len(colors))


def save_vox(path: Path, grid: np.ndarray, palette: Optional[List] = None):
    g = np.asarray(grid)
    if g.ndim != 3:
        raise InvalidConfiguration(f"vox models are 3-D; got a grid of shape {g.shape}")
    if any(e > MAX_VOX_EXTENT for e in g.shape):
        raise UnsupportedFormat(f"vox models are limited to {MAX_VOX_EXTENT} per axis; got {g.shape}")
    voxels = [Voxel(int(x), int(y), int(z), int(g[x, y, z])) for x, y, z in zip(*np.nonzero(g != EMPTY_VOXEL))]
    model = Model(Size(*(int(e) for e in g.shape)), voxels)
    vox = Vox([model], palette=full_palette(palette)) if palette else Vox([model])
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        VoxWriter(str(path), vox).write()
    except (OSError, ValueError, struct.error) as e:
        raise UnsupportedFormat(f"cannot write vox {path}: {e}") from e
