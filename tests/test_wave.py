"""Tests for wave initialization, entropy bookkeeping and restarts."""

import numpy as np
import pytest

from lattice_wfc import OffsetGroup, SynthesisContradiction, Wave, boundary_candidates, extract_patterns
from lattice_wfc.wave import neighbor_table


def _alternating():
    # x: 0 1 0 1, constant along y
    return (np.arange(4) % 2).astype(np.int32).reshape(4, 1).repeat(3, axis=1)


def test_full_periodic_start(stripes):
    ps = extract_patterns(stripes, (2, 2), (True, True))
    wave = Wave(ps, (5, 4))
    assert wave.num_cells == 20
    assert (wave.counts == ps.num_patterns).all()
    for cell in range(wave.num_cells):
        assert wave.total_weight(cell) == pytest.approx(ps.weights.sum())
    w = ps.weights / ps.weights.sum()
    assert wave.entropy[0] == pytest.approx(-(w * np.log2(w)).sum())


def test_weight_conservation_at_clamped_far_edge():
    ps = extract_patterns(_alternating(), (2, 2), (False, False))
    mask = boundary_candidates(ps, (5, 3), (False, False), (False, False))
    wave = Wave(ps, (5, 3), mask)

    flush = ps.flush[:, 0]
    tails = {ps.patterns[a][1:, :].tobytes() for a in np.flatnonzero(flush)}
    follows = np.array([ps.patterns[b][:1, :].tobytes() in tails for b in range(ps.num_patterns)])
    expected = {3: ps.weights[flush].sum(), 4: ps.weights[follows].sum()}
    for cell in range(wave.num_cells):
        x, _ = wave.coord(cell)
        assert wave.total_weight(cell) == pytest.approx(expected.get(x, ps.weights.sum()))


def test_no_restriction_over_periodic_exemplar():
    ps = extract_patterns(_alternating(), (2, 2), (True, True))
    mask = boundary_candidates(ps, (5, 3), (True, True), (False, False))
    assert mask.all()


def test_unreachable_far_edge_is_a_contradiction():
    ramp = np.arange(4, dtype=np.int32).reshape(4, 1).repeat(3, axis=1)
    ps = extract_patterns(ramp, (2, 2), (False, False))
    mask = boundary_candidates(ps, (5, 3), (False, False), (False, False))
    with pytest.raises(SynthesisContradiction):
        Wave(ps, (5, 3), mask)


def test_remove_updates_entropy_and_decides(board):
    ps = extract_patterns(board, (2, 2), (True, True))
    wave = Wave(ps, (4, 4))
    assert wave.entropy[5] == pytest.approx(1.0)
    wave.collapse(5, 1)
    assert wave.is_decided(5)
    assert wave.entropy[5] == 0.0
    assert wave.candidates(5).tolist() == [1]
    assert 5 not in wave.lowest_entropy_cells().tolist()
    assert wave.num_decided() == 1


def test_restrict_reports_shrink(board):
    ps = extract_patterns(board, (2, 2), (True, True))
    wave = Wave(ps, (2, 2))
    assert not wave.restrict(0, np.array([True, True]))
    assert wave.restrict(0, np.array([False, True]))
    assert wave.candidates(0).tolist() == [1]


def test_reset_restores_initial_state(stripes):
    ps = extract_patterns(stripes, (2, 2), (True, True))
    wave = Wave(ps, (4, 4))
    before = (wave.possible.copy(), wave.entropy.copy())
    wave.collapse(0, 2)
    wave.remove(3, np.array([0, 1]))
    wave.reset()
    assert np.array_equal(wave.possible, before[0])
    assert np.array_equal(wave.entropy, before[1])


def test_pattern_grid_requires_full_resolution(board):
    ps = extract_patterns(board, (2, 2), (True, True))
    wave = Wave(ps, (2, 2))
    with pytest.raises(Exception, match="not fully decided"):
        wave.pattern_grid()


def test_neighbor_table_wraps_and_clips():
    offsets = OffsetGroup(2)
    right = offsets.offset_id((1, 0))
    left = offsets.offset_id((-1, 0))
    wrapped = neighbor_table((3, 2), offsets, (True, True))
    clipped = neighbor_table((3, 2), offsets, (False, True))
    last = np.ravel_multi_index((2, 1), (3, 2))
    assert wrapped[right, last] == np.ravel_multi_index((0, 1), (3, 2))
    assert clipped[right, last] == -1
    assert clipped[left, 0] == -1
    assert clipped[offsets.offset_id((0, 1)), last] == np.ravel_multi_index((2, 0), (3, 2))
