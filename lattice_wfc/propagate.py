# -*- coding: utf-8 -*-
# Worklist propagation of candidate-set reductions to a fixed point.

from typing import Iterable

import numpy as np

from .adjacency import AdjacencyModel
from .log import dbg
from .wave import Wave


def propagate(wave: Wave, adjacency: AdjacencyModel, neighbors: np.ndarray,
              changed: Iterable[int], debug: bool = False) -> bool:
    """
    Shrink neighbors of every changed cell until nothing changes.

    Returns False as soon as some cell has no candidate left; the wave is then
    left as it was at that point.
    """
    stack = [int(c) for c in changed]
    pending = np.zeros(wave.num_cells, dtype=bool)
    pending[stack] = True
    allowed = np.zeros(wave.num_patterns, dtype=bool)
    live_offsets = [oid for oid, _ in adjacency.offsets if not adjacency.trivial[oid]]

    while stack:
        cell = stack.pop()
        pending[cell] = False
        cands = wave.candidates(cell)
        for oid in live_offsets:
            nb = int(neighbors[oid, cell])
            if nb < 0:
                continue
            adjacency.allowed_union(oid, cands, allowed)
            if not wave.restrict(nb, allowed):
                continue
            if wave.counts[nb] == 0:
                dbg(debug, f"contradiction at {wave.coord(nb)} (from {wave.coord(cell)})")
                return False
            if nb == cell:
                cands = wave.candidates(cell)
            if not pending[nb]:
                pending[nb] = True
                stack.append(nb)
    return True
