# -*- coding: utf-8 -*-
"""
The wave: one candidate set per output cell, stored as a flat boolean arena
(n_cells, n_patterns) keyed by the C-order linear index of the coordinate.

Entropy per cell is the weighted Shannon entropy of its candidates,
log2(sum w) - sum(w log2 w) / sum w, updated incrementally on every removal.
Decided cells (one candidate) have entropy 0; empty cells are contradictions.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from .errors import SynthesisContradiction, WFCError
from .offsets import OffsetGroup
from .patterns import PatternSet


# ---------- topology ----------
def neighbor_table(extent: Sequence[int], offsets: OffsetGroup, periodic: Sequence[bool]) -> np.ndarray:
    """(n_offsets, n_cells) linear index of each cell's neighbor, -1 off the grid."""
    extent = tuple(int(e) for e in extent)
    coords = np.indices(extent).reshape(len(extent), -1)
    out = np.empty((len(offsets), coords.shape[1]), dtype=np.int64)
    for oid, d in offsets:
        nb = coords + np.asarray(d, dtype=np.int64)[:, None]
        inside = np.ones(coords.shape[1], dtype=bool)
        for axis, (e, wrap) in enumerate(zip(extent, periodic)):
            if wrap:
                nb[axis] %= e
            else:
                inside &= (nb[axis] >= 0) & (nb[axis] < e)
                nb[axis] = np.clip(nb[axis], 0, e - 1)
        out[oid] = np.where(inside, np.ravel_multi_index(tuple(nb), extent), -1)
    return out


# ---------- boundary restrictions ----------
def boundary_candidates(pattern_set: PatternSet,
                        output_extent: Sequence[int],
                        input_periodic: Sequence[bool],
                        output_periodic: Sequence[bool]) -> np.ndarray:
    """
    Initial (n_cells, n_patterns) candidate mask.

    Only axes that are non-periodic in both exemplar and output are restricted:
    the cell flush with the output's far edge takes patterns seen flush with the
    exemplar's far edge, and each cell k past it takes patterns whose leading
    P-k slices continue some flush pattern's trailing P-k slices.
    """
    extent = tuple(int(e) for e in output_extent)
    n = pattern_set.num_patterns
    mask = np.ones(extent + (n,), dtype=bool)
    pats = pattern_set.patterns
    for axis, (P, E) in enumerate(zip(pattern_set.pattern_extent, extent)):
        if input_periodic[axis] or output_periodic[axis]:
            continue
        flush_ids = np.flatnonzero(pattern_set.flush[:, axis])
        for k in range(P):
            x = E - P + k
            if x < 0:
                continue
            if k == 0:
                allowed = pattern_set.flush[:, axis].copy()
            else:
                tails = {np.take(pats[a], np.arange(k, P), axis=axis).tobytes() for a in flush_ids}
                allowed = np.array([np.take(pats[b], np.arange(P - k), axis=axis).tobytes() in tails
                                    for b in range(n)], dtype=bool)
            index = [slice(None)] * len(extent)
            index[axis] = x
            mask[tuple(index)] &= allowed
    return mask.reshape(-1, n)


# ---------- wave ----------
class Wave:
    def __init__(self, pattern_set: PatternSet, output_extent: Sequence[int], initial: Optional[np.ndarray] = None):
        self.extent: Tuple[int, ...] = tuple(int(e) for e in output_extent)
        self.num_cells = int(np.prod(self.extent))
        self.num_patterns = pattern_set.num_patterns
        self.weights = pattern_set.weights.astype(np.float64)
        self.wlogw = self.weights * np.log2(self.weights)
        if initial is None:
            initial = np.ones((self.num_cells, self.num_patterns), dtype=bool)
        if initial.shape != (self.num_cells, self.num_patterns):
            raise WFCError(f"initial candidate mask has shape {initial.shape}")
        self._initial = np.array(initial, dtype=bool)
        self.possible = self._initial.copy()
        self._recompute()
        empty = np.flatnonzero(self.counts == 0)
        if empty.size:
            coord = np.unravel_index(int(empty[0]), self.extent)
            raise SynthesisContradiction(f"boundary constraints leave no pattern for cell {tuple(int(c) for c in coord)}")
        self._start = (self.counts.copy(), self.sum_w.copy(), self.sum_wlogw.copy(), self.entropy.copy())

    def _recompute(self):
        self.counts = self.possible.sum(axis=1).astype(np.int64)
        self.sum_w = self.possible @ self.weights
        self.sum_wlogw = self.possible @ self.wlogw
        self.entropy = np.zeros(self.num_cells, dtype=np.float64)
        open_ = self.counts > 1
        self.entropy[open_] = np.log2(self.sum_w[open_]) - self.sum_wlogw[open_] / self.sum_w[open_]

    def rebase(self):
        """Make the current state the one `reset` returns to."""
        self._initial = self.possible.copy()
        self._start = (self.counts.copy(), self.sum_w.copy(), self.sum_wlogw.copy(), self.entropy.copy())

    def reset(self):
        """Full restart: every cell back to its initial candidate set."""
        np.copyto(self.possible, self._initial)
        counts, sum_w, sum_wlogw, entropy = self._start
        self.counts = counts.copy()
        self.sum_w = sum_w.copy()
        self.sum_wlogw = sum_wlogw.copy()
        self.entropy = entropy.copy()

    # ---- queries ----
    def candidates(self, cell: int) -> np.ndarray:
        return np.flatnonzero(self.possible[cell])

    def total_weight(self, cell: int) -> float:
        return float(self.sum_w[cell])

    def is_decided(self, cell: int) -> bool:
        return int(self.counts[cell]) == 1

    def num_decided(self) -> int:
        return int((self.counts == 1).sum())

    def is_fully_decided(self) -> bool:
        return bool((self.counts == 1).all())

    def lowest_entropy_cells(self, eps: float = 1e-9) -> np.ndarray:
        """Undecided cells tied for minimum entropy, in index order."""
        open_ = self.counts > 1
        if not open_.any():
            return np.zeros(0, dtype=np.int64)
        e = np.where(open_, self.entropy, np.inf)
        return np.flatnonzero(open_ & (e <= e.min() + eps))

    def coord(self, cell: int) -> Tuple[int, ...]:
        return tuple(int(c) for c in np.unravel_index(int(cell), self.extent))

    # ---- updates ----
    def remove(self, cell: int, pattern_ids: np.ndarray):
        if len(pattern_ids) == 0:
            return
        self.possible[cell, pattern_ids] = False
        self.counts[cell] -= len(pattern_ids)
        self.sum_w[cell] -= self.weights[pattern_ids].sum()
        self.sum_wlogw[cell] -= self.wlogw[pattern_ids].sum()
        if self.counts[cell] > 1:
            self.entropy[cell] = np.log2(self.sum_w[cell]) - self.sum_wlogw[cell] / self.sum_w[cell]
        else:
            self.entropy[cell] = 0.0

    def restrict(self, cell: int, allowed: np.ndarray) -> bool:
        """Intersect the cell's candidates with `allowed`; True if the set shrank."""
        removed = np.flatnonzero(self.possible[cell] & ~allowed)
        self.remove(cell, removed)
        return removed.size > 0

    def collapse(self, cell: int, pattern_id: int):
        cands = self.candidates(cell)
        self.remove(cell, cands[cands != pattern_id])

    def pattern_grid(self) -> np.ndarray:
        if not self.is_fully_decided():
            raise WFCError("wave is not fully decided")
        return np.argmax(self.possible, axis=1).reshape(self.extent)
