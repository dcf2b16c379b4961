"""Tests for population codes and occupancy grids."""
import numpy as np
import pytest

from saccade_sim.simulator.encoding import EYE_POP, SACCADE_POP, PopCode2D, occupancy_grid


def test_bump_peaks_at_encoded_value():
    pop = PopCode2D(min=(-1.0, -1.0), max=(1.0, 1.0), shape=(5, 5))
    act = pop.encode([0.5, -1.0])  # x unit 3, y unit 0
    assert act.shape == (5, 5)
    assert np.unravel_index(np.argmax(act), act.shape) == (0, 3)
    assert act.max() == pytest.approx(1.0)
    assert np.all(act > 0.0)


def test_encode_is_vectorised():
    values = np.array([[0.0, 0.0], [0.2, -0.3], [1.0, 1.0]])
    act = EYE_POP.encode(values)
    assert act.shape == (3, 21, 21)
    for v, a in zip(values, act):
        assert np.allclose(a, EYE_POP.encode(v))


def test_out_of_range_values_are_clipped():
    assert np.allclose(SACCADE_POP.encode([2.0, -2.0]), SACCADE_POP.encode([0.45, -0.45]))


def test_unclipped_code_keeps_moving():
    pop = PopCode2D(min=(0.0, 0.0), max=(1.0, 1.0), shape=(3, 3), clip=False)
    assert pop.encode([2.0, 0.0]).max() < pop.encode([1.0, 0.0]).max()


def test_occupancy_grid_marks_cells():
    positions = np.array([[[-1.0, -1.0], [0.99, 0.0]]])  # (T=1, N=2, 2)
    grid = occupancy_grid(positions, -1.0, 1.0, (4, 4))
    assert grid.shape == (1, 4, 4)
    assert grid[0, 0, 0] == 1.0  # row y=-1, col x=-1
    assert grid[0, 2, 3] == 1.0  # row y=0, col x=0.99
    assert grid.sum() == 2.0


def test_occupancy_grid_skips_outside_positions():
    grid = occupancy_grid(np.array([[1.0, 0.0], [0.0, 0.0]]), -1.0, 1.0, (4, 4))
    assert grid.shape == (4, 4)
    assert grid.sum() == 1.0
