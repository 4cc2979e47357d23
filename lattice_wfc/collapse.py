# -*- coding: utf-8 -*-
"""
Collapse loop with bounded restarts.

Each attempt repeatedly decides the lowest-entropy cell and propagates. A
contradiction resets the whole wave and starts over, still drawing from the
same seed stream, until the attempt budget runs out.
"""

import threading
from typing import Callable, Optional

import numpy as np

from .adjacency import AdjacencyModel
from .errors import Cancelled, SynthesisContradiction
from .log import dbg
from .propagate import propagate
from .seed import SeedStream
from .wave import Wave

ProgressFn = Callable[[int, int], None]


class Collapser:
    def __init__(self, wave: Wave, adjacency: AdjacencyModel, neighbors: np.ndarray, stream: SeedStream,
                 max_attempts: int = 10,
                 cancel: Optional[threading.Event] = None,
                 progress: Optional[ProgressFn] = None,
                 debug: bool = False):
        self.wave = wave
        self.adjacency = adjacency
        self.neighbors = neighbors
        self.stream = stream
        self.max_attempts = max(1, int(max_attempts))
        self.cancel = cancel
        self.progress = progress
        self.debug = debug
        self.attempts = 0
        self._settle_boundaries()

    def _settle_boundaries(self):
        # Boundary restrictions are propagated once; restarts return to the settled state.
        restricted = np.flatnonzero(self.wave.counts < self.wave.num_patterns)
        if restricted.size and not propagate(self.wave, self.adjacency, self.neighbors, restricted, self.debug):
            raise SynthesisContradiction("boundary constraints are unsatisfiable for this exemplar")
        self.wave.rebase()

    # ---- single decisions ----
    def select_cell(self) -> int:
        ties = self.wave.lowest_entropy_cells()
        return int(ties[self.stream.integer(ties.size)])

    def sample_pattern(self, cell: int) -> int:
        cands = self.wave.candidates(cell)
        return int(cands[self.stream.weighted_index(self.wave.weights[cands])])

    def step(self) -> bool:
        """Decide one cell and propagate; False on contradiction."""
        cell = self.select_cell()
        pattern = self.sample_pattern(cell)
        if self.debug:
            dbg(True, f"cell {self.wave.coord(cell)} entropy={self.wave.entropy[cell]:.4f} -> pattern {pattern}")
        self.wave.collapse(cell, pattern)
        return propagate(self.wave, self.adjacency, self.neighbors, [cell], self.debug)

    # ---- control loop ----
    def _attempt(self) -> bool:
        while not self.wave.is_fully_decided():
            if self.cancel is not None and self.cancel.is_set():
                raise Cancelled(f"cancelled during attempt {self.attempts}")
            ok = self.step()
            if self.progress is not None:
                self.progress(self.wave.num_decided(), self.wave.num_cells)
            if not ok:
                return False
        return True

    def run(self) -> np.ndarray:
        """Resolve the wave and return the (output_extent) grid of pattern IDs."""
        while True:
            self.attempts += 1
            if self._attempt():
                dbg(self.debug, f"resolved after {self.attempts} attempt(s), {self.stream.draws} draws")
                return self.wave.pattern_grid()
            if self.attempts >= self.max_attempts:
                raise SynthesisContradiction(
                    f"no solution after {self.attempts} attempt(s); try another seed or a smaller pattern",
                    attempts=self.attempts)
            dbg(self.debug, f"attempt {self.attempts} hit a contradiction; restarting")
            self.wave.reset()
