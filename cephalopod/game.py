"""Game State for the Cephalopod Solver

A GameState is an immutable snapshot of the board together with the number
of moves played since the initial position. States never change once built:
every move produces a new state holding a fresh copy of the grid.

Example:
    >>> state = GameState.init(Grid.empty())
    >>> [child.depth for child in state.play(Position(1, 1))]
    [1]
    >>> state.compute(max_depth=1)
    111111111
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from .models import COMBINATIONS, Capture, CombinationTable, Grid, Position

if TYPE_CHECKING:
    from .search import ResultCache

# Bits used by each cell in the state hash
CELL_BITS = 4


@dataclass(frozen=True)
class GameState:
    """A board configuration reached after `depth` moves.

    Attributes:
        grid (Grid): Cell values, owned by this state only
        depth (int): Number of moves played from the initial position
    """

    grid: Grid
    depth: int = 0

    @classmethod
    def init(cls, grid: Grid) -> GameState:
        """Create the root state of a search from a copy of `grid`."""
        return cls(grid.copy(), 0)

    def next(self, position: Position, capture: Optional[Capture] = None) -> GameState:
        """Return the state after placing a die at `position`.

        Args:
            position: Empty cell receiving the die
            capture: Capture to apply, None for a plain placement

        Returns:
            New state one move deeper. A plain placement shows 1; a capture
            shows the captured sum and empties the captured cells.
        """
        grid = self.grid.copy()

        if capture is None:
            grid.set(position, 1)
        else:
            grid.set(position, capture.value)
            for captured in capture.positions:
                grid.set(captured, 0)

        return GameState(grid, self.depth + 1)

    def play(self, position: Position, combinations: CombinationTable = COMBINATIONS) -> List[GameState]:
        """Return every state reachable by playing at `position`.

        One state per available capture, or the single plain placement when
        no capture is possible.
        """
        captures = self.grid.captures(position, combinations)

        if not captures:
            return [self.next(position)]

        return [self.next(position, capture) for capture in captures]

    def is_final(self) -> bool:
        """Check if every cell holds a die."""
        return all(self.grid.cells)

    def result(self) -> int:
        """Read the nine cells as the digits of a decimal number.

        Cell 0 is the most significant digit:

            >>> GameState(Grid.from_rows([[1, 2, 3], [4, 5, 6], [1, 2, 3]])).result()
            123456123
        """
        result = 0
        for value in self.grid.cells:
            result = 10 * result + value
        return result

    def hash(self) -> int:
        """Pack depth and cell values into a single integer key.

        The depth occupies the high bits, followed by one 4-bit nibble per
        cell in row-major order. Distinct states get distinct keys as long as
        every cell value fits in a nibble.
        """
        key = self.depth
        for value in self.grid.cells:
            key = (key << CELL_BITS) | value
        return key

    def compute(self, max_depth: int, cache: Optional[ResultCache] = None,
                combinations: CombinationTable = COMBINATIONS) -> int:
        """Aggregate the results of every terminal state reachable from here.

        Args:
            max_depth: Depth at which states stop being expanded
            cache: Memoization table to use, a fresh one when None
            combinations: Neighbour index subsets by neighbour count

        Returns:
            Sum of terminal results modulo RESULT_MOD
        """
        from .search import SearchEngine

        return SearchEngine(max_depth, cache, combinations).compute(self)
