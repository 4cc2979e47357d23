"""Shared exemplars and independent checks for the synthesis tests."""

import itertools

import numpy as np
import pytest


def checkerboard(shape):
    return (np.indices(shape).sum(axis=0) % 2).astype(np.int32)


def windows_match_output(result, periodic):
    """Every decided window, painted at its cell, agrees with the output grid."""
    out = result.grid
    pats = result.patterns.patterns
    P = result.patterns.pattern_extent
    for cell in np.ndindex(*out.shape):
        win = pats[result.pattern_grid[cell]]
        for delta in itertools.product(*(range(p) for p in P)):
            at = []
            for c, d, e, wrap in zip(cell, delta, out.shape, periodic):
                x = c + d
                if wrap:
                    x %= e
                elif x >= e:
                    break
                at.append(x)
            else:
                if out[tuple(at)] != win[delta]:
                    return False
    return True


def exemplar_windows(exemplar, P):
    """Window bytes of a periodic exemplar."""
    grid = np.asarray(exemplar)
    for axis, p in enumerate(P):
        grid = np.take(grid, np.arange(grid.shape[axis] + p - 1) % grid.shape[axis], axis=axis)
    out = set()
    for anchor in np.ndindex(*np.asarray(exemplar).shape):
        sl = tuple(slice(a, a + p) for a, p in zip(anchor, P))
        out.add(np.ascontiguousarray(grid[sl]).tobytes())
    return out


@pytest.fixture
def board():
    return checkerboard((4, 4))


@pytest.fixture
def stripes():
    # Columns follow 0 0 1 2 2 1 along x, constant along y.
    f = np.array([0, 0, 1, 2, 2, 1], dtype=np.int32)
    return np.repeat(f[:, None], 4, axis=1)


@pytest.fixture
def noise():
    return np.random.default_rng(7).integers(0, 3, size=(6, 6)).astype(np.int32)
