"""Board Models for the Cephalopod Solver

This module defines the core data structures of the dice placement game:
positions on the board, the grid of dice, captures and the table of neighbour
combinations used to find them.

Game Rules:
    - The board is a 3x3 grid, each cell is empty (0) or holds a die (1-6)
    - A die placed next to two or more dice may capture any subset of them
      whose face values sum to at most 6
    - A capturing die shows the sum of the captured faces, captured dice
      are removed from the board
    - A die placed without capture always shows 1
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from itertools import combinations
from typing import ClassVar, Dict, Iterable, List, Optional, Sequence, Tuple

GRID_SIZE = 3
CELL_COUNT = GRID_SIZE * GRID_SIZE
DICE_MAX_VALUE = 6


@dataclass(frozen=True)
class Position:
    """A cell coordinate on the board.

    Attributes:
        line (int): Row index, 0 at the top
        column (int): Column index, 0 on the left

    Example:
        >>> pos = Position(1, 1)
        >>> pos.up()
        Position(line=0, column=1)
        >>> Position(0, 1).up() is None
        True
    """

    line: int
    column: int

    def __post_init__(self) -> None:
        """Reject coordinates outside the board.

        Raises:
            ValueError: If line or column is not in 0..GRID_SIZE-1
        """
        if not (0 <= self.line < GRID_SIZE and 0 <= self.column < GRID_SIZE):
            raise ValueError(f"Position ({self.line}, {self.column}) is outside the {GRID_SIZE}x{GRID_SIZE} board")

    @staticmethod
    @lru_cache(maxsize=CELL_COUNT)
    def from_index(index: int) -> Position:
        """Build the position of a row-major flat index."""
        return Position(index // GRID_SIZE, index % GRID_SIZE)

    @property
    def index(self) -> int:
        return GRID_SIZE * self.line + self.column

    def up(self) -> Optional[Position]:
        if self.line >= 1:
            return Position(self.line - 1, self.column)
        return None

    def right(self) -> Optional[Position]:
        if self.column < GRID_SIZE - 1:
            return Position(self.line, self.column + 1)
        return None

    def down(self) -> Optional[Position]:
        if self.line < GRID_SIZE - 1:
            return Position(self.line + 1, self.column)
        return None

    def left(self) -> Optional[Position]:
        if self.column >= 1:
            return Position(self.line, self.column - 1)
        return None

    def neighbours(self) -> Tuple[Position, ...]:
        """Orthogonal neighbours in the fixed order up, right, down, left."""
        return _neighbours_of(self.index)


@lru_cache(maxsize=CELL_COUNT)
def _neighbours_of(index: int) -> Tuple[Position, ...]:
    position = Position.from_index(index)
    candidates = (position.up(), position.right(), position.down(), position.left())
    return tuple(neighbour for neighbour in candidates if neighbour is not None)


@dataclass(frozen=True)
class Capture:
    """A set of neighbour dice merged into a newly placed die.

    Attributes:
        value (int): Sum of the captured faces, at most DICE_MAX_VALUE
        positions (Tuple[Position, ...]): Cells emptied by the capture
    """

    value: int
    positions: Tuple[Position, ...]


class CombinationTable:
    """Index subsets of size >= 2 for every possible neighbour count.

    For a neighbour count n the table holds every subset of {0, ..., n-1}
    with at least two elements, ordered by size then lexicographically:

        >>> CombinationTable().get(3)
        ((0, 1), (0, 2), (1, 2), (0, 1, 2))

    The table is immutable once built and shared by every search.
    """

    MIN_SIZE: ClassVar[int] = 2
    MAX_NEIGHBOURS: ClassVar[int] = 4

    def __init__(self) -> None:
        self._data: Dict[int, Tuple[Tuple[int, ...], ...]] = {
            count: tuple(
                subset
                for size in range(self.MIN_SIZE, count + 1)
                for subset in combinations(range(count), size)
            )
            for count in range(self.MIN_SIZE, self.MAX_NEIGHBOURS + 1)
        }

    def get(self, count: int) -> Tuple[Tuple[int, ...], ...]:
        """Return the subsets for `count` neighbours, empty below two."""
        return self._data.get(count, ())

    def __len__(self) -> int:
        return len(self._data)


COMBINATIONS = CombinationTable()


@dataclass
class Grid:
    """The 3x3 board as a row-major list of cell values.

    Grids are mutated only right after being copied for a new game state,
    so no two states ever share a cell list.

    Attributes:
        cells (List[int]): Cell values, 0 for an empty cell
    """

    cells: List[int] = field(default_factory=lambda: [0] * CELL_COUNT)

    def __post_init__(self) -> None:
        if len(self.cells) != CELL_COUNT:
            raise ValueError(f"Grid needs {CELL_COUNT} cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> Grid:
        return cls()

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[int]]) -> Grid:
        """Build a grid from rows of cell values.

        Example:
            >>> Grid.from_rows([[1, 2, 3], [4, 5, 6], [1, 2, 3]]).cells[4]
            5
        """
        return cls([value for row in rows for value in row])

    def copy(self) -> Grid:
        return Grid(list(self.cells))

    def get(self, position: Position) -> int:
        return self.cells[position.index]

    def set(self, position: Position, value: int) -> Grid:
        self.cells[position.index] = value
        return self

    def rows(self) -> List[List[int]]:
        return [self.cells[i:i + GRID_SIZE] for i in range(0, CELL_COUNT, GRID_SIZE)]

    def free_cells(self) -> List[Position]:
        """Return empty cells in row-major order."""
        return [Position.from_index(i) for i, value in enumerate(self.cells) if value == 0]

    def neighbour_dices(self, position: Position) -> List[Position]:
        """Return occupied neighbours of `position` in the order up, right, down, left.

        The order decides which neighbour each index of a combination refers to.
        """
        return [neighbour for neighbour in position.neighbours() if self.get(neighbour) > 0]

    def captures(self, position: Position, combinations_table: CombinationTable = COMBINATIONS) -> List[Capture]:
        """List every capture available when placing a die at `position`.

        Each subset of the occupied neighbours (two or more dice) whose faces
        sum to at most DICE_MAX_VALUE is a separate capture. A subset is
        dropped as soon as its running sum goes over the limit.

        Args:
            position: Empty landing cell
            combinations_table: Neighbour index subsets by neighbour count

        Returns:
            Captures in combination table order, empty when fewer than two
            neighbours are occupied
        """
        dices = self.neighbour_dices(position)
        captures: List[Capture] = []

        for combination in combinations_table.get(len(dices)):
            value = 0
            for index in combination:
                value += self.get(dices[index])
                if value > DICE_MAX_VALUE:
                    break
            else:
                captures.append(Capture(value, tuple(dices[index] for index in combination)))

        return captures

    def __str__(self) -> str:
        return "\n".join(" ".join(str(value) for value in row) for row in self.rows())
