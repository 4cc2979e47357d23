"""Tests for the image and vox codecs."""

import struct

import numpy as np
import pytest
from PIL import Image

from lattice_wfc import UnsupportedFormat
from lattice_wfc.image_io import load_image, rgba_symbol, save_image
from lattice_wfc.vox_io import load_vox, save_vox


def test_image_is_indexed_x_then_y(tmp_path):
    img = Image.new("RGBA", (3, 2), (0, 0, 0, 255))
    img.putpixel((2, 1), (255, 0, 0, 255))
    img.save(tmp_path / "in.png")
    grid = load_image(tmp_path / "in.png")
    assert grid.shape == (3, 2)
    assert grid[2, 1] == rgba_symbol(255, 0, 0)
    assert grid[0, 0] == rgba_symbol(0, 0, 0)


def test_image_round_trip(tmp_path):
    rng = np.random.default_rng(0)
    colors = np.array([rgba_symbol(10, 20, 30), rgba_symbol(200, 100, 0, 128)], dtype=np.uint32)
    grid = colors[rng.integers(0, 2, size=(5, 4))]
    save_image(tmp_path / "out" / "x.png", grid)
    assert np.array_equal(load_image(tmp_path / "out" / "x.png"), grid)


def test_rgb_images_become_opaque(tmp_path):
    Image.new("RGB", (2, 2), (1, 2, 3)).save(tmp_path / "rgb.png")
    assert (load_image(tmp_path / "rgb.png") == rgba_symbol(1, 2, 3, 255)).all()


def test_unreadable_image(tmp_path):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image")
    with pytest.raises(UnsupportedFormat):
        load_image(bad)
    with pytest.raises(UnsupportedFormat):
        load_image(tmp_path / "missing.png")


def test_vox_round_trip(tmp_path):
    grid = np.zeros((4, 3, 2), dtype=np.uint8)
    grid[0, 0, 0] = 1
    grid[3, 2, 1] = 7
    grid[1, 2, 0] = 200
    save_vox(tmp_path / "m.vox", grid)
    model = load_vox(tmp_path / "m.vox")
    assert np.array_equal(model.grid, grid)
    assert model.palette


def test_unreadable_vox(tmp_path):
    with pytest.raises(UnsupportedFormat):
        load_vox(tmp_path / "missing.vox")


def _chunk(cid, content=b"", children=b""):
    return struct.pack("<4sii", cid, len(content), len(children)) + content + children


def _magicavoxel_file(path, palette):
    # SIZE/XYZI/RGBA followed by the material and scene chunks MagicaVoxel 0.99+ writes
    voxels = [(0, 0, 0, 3), (1, 2, 1, 255)]
    body = _chunk(b"SIZE", struct.pack("<iii", 2, 3, 2))
    body += _chunk(b"XYZI", struct.pack("<i", len(voxels)) + b"".join(struct.pack("BBBB", *v) for v in voxels))
    body += _chunk(b"nTRN", struct.pack("<iiiiii", 0, 0, 1, -1, -1, 1) + struct.pack("<i", 0))
    body += _chunk(b"nSHP", struct.pack("<iiii", 1, 0, 1, 0) + struct.pack("<i", 0))
    body += _chunk(b"LAYR", struct.pack("<iii", 0, 0, -1))
    body += _chunk(b"RGBA", b"".join(struct.pack("BBBB", *c) for c in palette))
    body += _chunk(b"MATL", struct.pack("<ii", 1, 0))
    body += _chunk(b"rOBJ", struct.pack("<i", 0))
    path.write_bytes(struct.pack("<4si", b"VOX ", 200) + _chunk(b"MAIN", children=body))


def _rgba_chunk_size(path):
    data = path.read_bytes()
    return struct.unpack_from("<i", data, data.index(b"RGBA") + 4)[0]


def _palette():
    return [(i, 255 - i, i // 2, 255) for i in range(256)]


def test_reads_files_with_scene_and_material_chunks(tmp_path):
    src = tmp_path / "scene.vox"
    _magicavoxel_file(src, _palette())
    model = load_vox(src)
    assert model.grid.shape == (2, 3, 2)
    assert model.grid[0, 0, 0] == 3
    assert model.grid[1, 2, 1] == 255
    assert int(np.count_nonzero(model.grid)) == 2
    assert len(model.palette) == 256
    assert tuple(model.palette[255]) == (255, 0, 127, 255)


def test_palette_passes_through_save(tmp_path):
    src, out = tmp_path / "scene.vox", tmp_path / "copy.vox"
    _magicavoxel_file(src, _palette())
    model = load_vox(src)
    save_vox(out, model.grid, model.palette)
    assert _rgba_chunk_size(out) == 1024
    again = load_vox(out)
    assert [tuple(c) for c in again.palette] == _palette()
    assert np.array_equal(again.grid, model.grid)


def test_short_palette_is_padded(tmp_path):
    out = tmp_path / "short.vox"
    save_vox(out, np.ones((1, 1, 1), dtype=np.uint8), _palette()[:255])
    assert _rgba_chunk_size(out) == 1024
    assert tuple(load_vox(out).palette[255]) == (0, 0, 0, 0)
