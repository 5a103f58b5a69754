"""Shared pytest fixtures for the Cephalopod solver tests."""

import pytest

from cephalopod.models import Grid


@pytest.fixture
def full_grid():
    """Board with every cell occupied."""
    return Grid.from_rows([[1, 2, 3], [4, 5, 6], [1, 2, 3]])


@pytest.fixture
def center_capture_grid():
    """Board with only the centre free; two of its neighbour pairs can be captured.

    Neighbours of the centre in up, right, down, left order: 2, 4, 5, 3.
    """
    return Grid.from_rows([[1, 2, 1], [3, 0, 4], [1, 5, 1]])


@pytest.fixture
def corner_gap_grid():
    """Board of ones with only the top-left corner free."""
    return Grid.from_rows([[0, 1, 1], [1, 1, 1], [1, 1, 1]])


@pytest.fixture
def board_file(tmp_path):
    """Write an input file and return its path."""
    def _write(text):
        path = tmp_path / "board.txt"
        path.write_text(text)
        return path
    return _write
