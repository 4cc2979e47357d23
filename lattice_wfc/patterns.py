# -*- coding: utf-8 -*-
"""
Exemplar indexer: every overlapping window of the exemplar becomes a pattern.

Anchors are scanned in C order. Periodic axes use every anchor and wrap the
window; non-periodic axes only use anchors whose window stays inside the grid.
Identical windows share one dense ID (first encounter wins) and a weight equal
to their occurrence count.
"""

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from .errors import InvalidConfiguration


@dataclass
class PatternSet:
    patterns: np.ndarray        # (n, *pattern_extent)
    weights: np.ndarray         # (n,) occurrence counts
    flush: np.ndarray           # (n, ndim) seen flush with the exemplar's far edge, per axis
    pattern_extent: Tuple[int, ...]

    @property
    def num_patterns(self) -> int:
        return int(self.patterns.shape[0])

    @property
    def ndim(self) -> int:
        return len(self.pattern_extent)

    @property
    def anchor_symbols(self) -> np.ndarray:
        return self.patterns[(slice(None),) + (0,) * self.ndim]

    def counts(self) -> Dict[bytes, int]:
        """Window bytes -> weight; independent of ID assignment order."""
        return {self.patterns[i].tobytes(): int(self.weights[i]) for i in range(self.num_patterns)}

    def catalog(self) -> pd.DataFrame:
        total = float(self.weights.sum()) or 1.0
        df = pd.DataFrame({
            "pattern_id": np.arange(self.num_patterns),
            "weight": self.weights.astype(np.int64),
            "frequency": self.weights / total,
            "anchor_symbol": self.anchor_symbols.astype(np.int64),
        })
        for axis in range(self.ndim):
            df[f"flush_{'xyz'[axis]}"] = self.flush[:, axis]
        return df


def _wrap_axes(grid: np.ndarray, pattern_extent: Sequence[int], periodic: Sequence[bool]) -> np.ndarray:
    for axis, (p, wrap) in enumerate(zip(pattern_extent, periodic)):
        if wrap and p > 1:
            e = grid.shape[axis]
            grid = np.take(grid, np.arange(e + p - 1) % e, axis=axis)
    return grid


def extract_patterns(exemplar, pattern_extent: Sequence[int], periodic: Sequence[bool]) -> PatternSet:
    grid = np.asarray(exemplar)
    P = tuple(int(p) for p in pattern_extent)
    periodic = tuple(bool(w) for w in periodic)
    if grid.size == 0:
        raise InvalidConfiguration("exemplar grid is empty")
    if len(P) != grid.ndim or len(periodic) != grid.ndim:
        raise InvalidConfiguration(f"pattern extent {P} does not match a {grid.ndim}-D exemplar")
    if any(p <= 0 for p in P):
        raise InvalidConfiguration(f"pattern extent must be positive, got {P}")
    for axis, (p, e, wrap) in enumerate(zip(P, grid.shape, periodic)):
        if not wrap and p > e:
            raise InvalidConfiguration(f"pattern extent {p} exceeds exemplar extent {e} on non-periodic axis {axis}")

    anchor_shape = tuple(e if wrap else e - p + 1 for e, p, wrap in zip(grid.shape, P, periodic))
    last_anchor = tuple(e - p for e, p in zip(grid.shape, P))
    windows = sliding_window_view(_wrap_axes(grid, P, periodic), P)

    ids: Dict[bytes, int] = {}
    reps, weights, flush = [], [], []
    for anchor in np.ndindex(*anchor_shape):
        win = windows[anchor]
        key = win.tobytes()
        pid = ids.get(key)
        if pid is None:
            pid = ids[key] = len(reps)
            reps.append(np.array(win))
            weights.append(0)
            flush.append([False] * len(P))
        weights[pid] += 1
        for axis, wrap in enumerate(periodic):
            if wrap or anchor[axis] == last_anchor[axis]:
                flush[pid][axis] = True

    return PatternSet(
        patterns=np.stack(reps),
        weights=np.asarray(weights, dtype=np.int64),
        flush=np.asarray(flush, dtype=bool),
        pattern_extent=P,
    )
