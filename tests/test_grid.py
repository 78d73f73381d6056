from __future__ import annotations

import numpy as np

from blockfall.game import GameGrid, TetrominoType, shape_of

I_FLAT = shape_of(TetrominoType.I, 0)
I_TALL = shape_of(TetrominoType.I, 1)
O = shape_of(TetrominoType.O, 0)


def test_collides_with_walls_and_floor() -> None:
    grid = GameGrid(10, 20)
    assert not grid.collides(I_FLAT, 0, 0)
    assert not grid.collides(I_FLAT, 6, 19)
    assert grid.collides(I_FLAT, -1, 0)
    assert grid.collides(I_FLAT, 7, 0)
    assert grid.collides(I_FLAT, 0, 20)
    assert grid.collides(I_TALL, 0, 17)


def test_rows_above_the_top_are_never_occupied() -> None:
    grid = GameGrid(10, 20)
    grid.grid[0, :] = 1
    assert not grid.collides(I_TALL, 3, -4)
    assert grid.collides(I_TALL, 3, -3)


def test_collides_with_locked_cells() -> None:
    grid = GameGrid(10, 20)
    grid.grid[19, 5] = int(TetrominoType.T)
    assert grid.collides(O, 4, 18)
    assert not grid.collides(O, 4, 17)
    assert not grid.collides(O, 6, 18)


def test_lock_skips_cells_above_the_board() -> None:
    grid = GameGrid(10, 20)
    grid.lock([(2, -1), (2, 0), (3, 0)], int(TetrominoType.L))
    assert grid.grid[0, 2] == int(TetrominoType.L)
    assert grid.grid[0, 3] == int(TetrominoType.L)
    assert int(np.count_nonzero(grid.grid)) == 2


def test_find_full_lines_does_not_mutate() -> None:
    grid = GameGrid(10, 20)
    grid.grid[5, :] = 2
    grid.grid[12, :] = 3
    grid.grid[13, :9] = 4
    before = grid.clone_state()
    assert grid.find_full_lines() == [5, 12]
    assert np.array_equal(grid.grid, before)


def test_apply_clear_removes_rows_and_shifts_down() -> None:
    grid = GameGrid(10, 20)
    # every other row is only partially filled
    for y in range(20):
        grid.grid[y, 0] = (y % 7) + 1
        grid.grid[y, 1 + (y % 9)] = 1
    grid.grid[3, :] = 5
    grid.grid[7, :] = 6
    before = grid.clone_state()

    assert grid.apply_clear([7, 3]) == 2

    assert np.all(grid.grid[0:2] == 0)
    # rows above 3 move down by two
    assert np.array_equal(grid.grid[2:5], before[0:3])
    # rows between 3 and 7 move down by one
    assert np.array_equal(grid.grid[5:8], before[4:7])
    # rows below 7 stay put
    assert np.array_equal(grid.grid[8:], before[8:])
    assert grid.find_full_lines() == []
    assert grid.grid.shape == (20, 10)


def test_apply_clear_adjacent_rows() -> None:
    grid = GameGrid(4, 6)
    grid.grid[2, 0] = 1
    grid.grid[3:6, :] = 7
    assert grid.apply_clear(grid.find_full_lines()) == 3
    assert np.all(grid.grid[0:5] == 0)
    assert grid.grid[5, 0] == 1


def test_apply_clear_with_no_rows_is_noop() -> None:
    grid = GameGrid(10, 20)
    grid.grid[19, 0] = 1
    assert grid.apply_clear([]) == 0
    assert grid.grid[19, 0] == 1


def test_landing_y_flat_i_on_empty_board() -> None:
    grid = GameGrid(10, 20)
    assert grid.landing_y(I_FLAT, 3, 0) == 19


def test_landing_y_rests_on_stack() -> None:
    grid = GameGrid(10, 20)
    grid.grid[15, 4] = 1
    assert grid.landing_y(O, 4, 0) == 13
    assert grid.landing_y(O, 6, 0) == 18
