"""Unit tests for positions, grids and captures."""

import pytest

from cephalopod.models import COMBINATIONS, Capture, CombinationTable, Grid, Position


class TestPosition:

    def test_from_index_is_row_major(self):
        assert Position.from_index(0) == Position(0, 0)
        assert Position.from_index(5) == Position(1, 2)
        assert Position.from_index(8) == Position(2, 2)

    def test_index_round_trip(self):
        for index in range(9):
            assert Position.from_index(index).index == index

    def test_centre_has_all_neighbours(self):
        centre = Position(1, 1)
        assert centre.up() == Position(0, 1)
        assert centre.right() == Position(1, 2)
        assert centre.down() == Position(2, 1)
        assert centre.left() == Position(1, 0)

    def test_edges_have_no_wraparound(self):
        assert Position(0, 0).up() is None
        assert Position(0, 0).left() is None
        assert Position(2, 2).down() is None
        assert Position(2, 2).right() is None
        assert Position(0, 2).right() is None
        assert Position(2, 0).left() is None

    def test_neighbour_order(self):
        assert Position(1, 1).neighbours() == (
            Position(0, 1), Position(1, 2), Position(2, 1), Position(1, 0)
        )
        assert Position(0, 1).neighbours() == (Position(0, 2), Position(1, 1), Position(0, 0))

    @pytest.mark.parametrize("line,column", [(3, 0), (0, 3), (-1, 0), (0, -1)])
    def test_outside_board_is_rejected(self, line, column):
        with pytest.raises(ValueError):
            Position(line, column)


class TestCombinationTable:

    def test_pairs_only_for_two_neighbours(self):
        assert COMBINATIONS.get(2) == ((0, 1),)

    def test_three_neighbours(self):
        assert COMBINATIONS.get(3) == ((0, 1), (0, 2), (1, 2), (0, 1, 2))

    def test_four_neighbours(self):
        assert COMBINATIONS.get(4) == (
            (0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3),
            (0, 1, 2), (0, 1, 3), (0, 2, 3), (1, 2, 3),
            (0, 1, 2, 3),
        )

    def test_no_subsets_below_two_neighbours(self):
        assert COMBINATIONS.get(0) == ()
        assert COMBINATIONS.get(1) == ()

    def test_covers_two_to_four(self):
        assert len(CombinationTable()) == 3


class TestGrid:

    def test_empty_grid(self):
        grid = Grid.empty()
        assert grid.cells == [0] * 9
        assert len(grid.free_cells()) == 9

    def test_wrong_cell_count_is_rejected(self):
        with pytest.raises(ValueError):
            Grid([0] * 8)

    def test_get_and_set(self):
        grid = Grid.empty()
        assert grid.set(Position(2, 1), 4) is grid
        assert grid.get(Position(2, 1)) == 4
        assert grid.cells[7] == 4

    def test_copy_does_not_alias(self, full_grid):
        clone = full_grid.copy()
        clone.set(Position(0, 0), 0)
        assert full_grid.get(Position(0, 0)) == 1
        assert clone.get(Position(0, 0)) == 0

    def test_free_cells_order(self):
        grid = Grid.from_rows([[1, 0, 2], [0, 3, 0], [4, 5, 0]])
        assert [p.index for p in grid.free_cells()] == [1, 3, 5, 8]

    def test_rows(self, full_grid):
        assert full_grid.rows() == [[1, 2, 3], [4, 5, 6], [1, 2, 3]]
        assert str(full_grid) == "1 2 3\n4 5 6\n1 2 3"

    def test_neighbour_dices_order(self):
        grid = Grid.from_rows([[0, 2, 0], [3, 0, 4], [0, 5, 0]])
        assert grid.neighbour_dices(Position(1, 1)) == [
            Position(0, 1), Position(1, 2), Position(2, 1), Position(1, 0)
        ]

    def test_neighbour_dices_skip_empty_cells(self):
        grid = Grid.from_rows([[0, 2, 0], [0, 0, 4], [0, 0, 0]])
        assert grid.neighbour_dices(Position(1, 1)) == [Position(0, 1), Position(1, 2)]


class TestCaptures:

    def test_fewer_than_two_neighbours(self):
        grid = Grid.from_rows([[0, 2, 0], [0, 0, 0], [0, 0, 0]])
        assert grid.captures(Position(1, 1)) == []
        assert Grid.empty().captures(Position(1, 1)) == []

    def test_four_neighbours(self, center_capture_grid):
        captures = center_capture_grid.captures(Position(1, 1), COMBINATIONS)
        assert captures == [
            Capture(6, (Position(0, 1), Position(1, 2))),
            Capture(5, (Position(0, 1), Position(1, 0))),
        ]

    def test_three_neighbours_all_capturable(self):
        grid = Grid.from_rows([[1, 0, 2], [0, 3, 0], [0, 0, 0]])
        captures = grid.captures(Position(0, 1))
        assert [c.value for c in captures] == [5, 3, 4, 6]
        assert captures[-1].positions == (Position(0, 2), Position(1, 1), Position(0, 0))

    def test_sum_over_limit_is_dropped(self):
        grid = Grid.from_rows([[0, 6, 0], [6, 0, 0], [0, 0, 0]])
        assert grid.captures(Position(0, 0)) == []

    def test_exact_limit_is_kept(self):
        grid = Grid.from_rows([[0, 5, 0], [1, 0, 0], [0, 0, 0]])
        assert grid.captures(Position(0, 0)) == [Capture(6, (Position(0, 1), Position(1, 0)))]
