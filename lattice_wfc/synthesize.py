# -*- coding: utf-8 -*-
"""
End-to-end synthesis over an in-memory symbol grid.

    exemplar -> patterns -> adjacency -> wave -> collapse loop -> output grid
"""

import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .adjacency import AdjacencyModel
from .collapse import Collapser, ProgressFn
from .config import SynthesisConfig
from .errors import WFCError
from .log import dbg
from .patterns import PatternSet, extract_patterns
from .seed import SeedStream
from .wave import Wave, boundary_candidates, neighbor_table


@dataclass
class SynthesisResult:
    grid: np.ndarray            # output symbols
    pattern_grid: np.ndarray    # decided pattern ID per output cell
    patterns: PatternSet
    attempts: int


def materialize(pattern_grid: np.ndarray, pattern_set: PatternSet) -> np.ndarray:
    """Each cell shows the origin symbol of its decided window."""
    return pattern_set.anchor_symbols[np.asarray(pattern_grid)]


def index_exemplar(exemplar, config: SynthesisConfig) -> PatternSet:
    grid = np.asarray(exemplar)
    config.validate(grid.shape)
    return extract_patterns(grid, config.pattern_extent, config.input_periodic)


def synthesize(exemplar,
               config: SynthesisConfig,
               cancel: Optional[threading.Event] = None,
               progress: Optional[ProgressFn] = None,
               pattern_set: Optional[PatternSet] = None) -> SynthesisResult:
    grid = np.asarray(exemplar)
    config.validate(grid.shape)
    if pattern_set is None:
        pattern_set = extract_patterns(grid, config.pattern_extent, config.input_periodic)
    dbg(config.debug, f"{pattern_set.num_patterns} patterns, total weight {int(pattern_set.weights.sum())}")

    adjacency = AdjacencyModel.build(pattern_set)
    initial = boundary_candidates(pattern_set, config.output_extent, config.input_periodic, config.output_periodic)
    wave = Wave(pattern_set, config.output_extent, initial)
    neighbors = neighbor_table(config.output_extent, adjacency.offsets, config.output_periodic)
    dbg(config.debug, f"wave {wave.extent} cells={wave.num_cells} offsets={len(adjacency.offsets)} seed={config.seed!r}")

    collapser = Collapser(wave, adjacency, neighbors, SeedStream(config.seed),
                          max_attempts=config.max_attempts, cancel=cancel, progress=progress, debug=config.debug)
    pattern_grid = collapser.run()
    if not adjacency.assignment_is_valid(pattern_grid, config.output_periodic):
        raise WFCError("BUG: produced output that doesn't satisfy constraints")

    return SynthesisResult(
        grid=materialize(pattern_grid, pattern_set),
        pattern_grid=pattern_grid,
        patterns=pattern_set,
        attempts=collapser.attempts,
    )
