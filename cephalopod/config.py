"""Search Configuration Input

Reads the depth bound and the initial board from a text source:

    20          <- max depth (moves played from the initial board)
    0 6 0       <- three rows of three cell values,
    2 2 2          0 for an empty cell, 1-6 for a die
    1 6 1

Malformed input is rejected before any search starts, with a distinct
exception type for each kind of problem.
"""

import io
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Union

from .models import DICE_MAX_VALUE, GRID_SIZE, Grid

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Base class for invalid search input."""


class MissingLineError(ConfigError):
    """The input ended before a required line."""


class IntegerParseError(ConfigError):
    """A token could not be read as an integer."""


class FieldCountError(ConfigError):
    """A line holds the wrong number of values."""


class ValueRangeError(ConfigError):
    """A value is outside its allowed range."""


@dataclass
class GameConfig:
    """Depth bound and initial board of a search.

    Attributes:
        depth (int): Number of moves after which states are scored
        grid (Grid): Initial board
    """

    depth: int
    grid: Grid

    @classmethod
    def from_stream(cls, stream: TextIO) -> "GameConfig":
        return parse_config(stream)

    @classmethod
    def from_text(cls, text: str) -> "GameConfig":
        return parse_config(io.StringIO(text))


def _read_line(lines: Iterator[str], description: str, line_number: int) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise MissingLineError(f"Line {line_number}: missing {description}") from None


def _parse_integers(line: str, description: str, line_number: int, expected: int) -> List[int]:
    tokens = line.split()
    if len(tokens) != expected:
        raise FieldCountError(
            f"Line {line_number}: {description} needs {expected} value(s), got {len(tokens)}"
        )

    values = []
    for token in tokens:
        try:
            values.append(int(token))
        except ValueError:
            raise IntegerParseError(
                f"Line {line_number}: {description} has non-integer value {token!r}"
            ) from None
    return values


def parse_config(lines: Iterable[str]) -> GameConfig:
    """Parse a depth line followed by GRID_SIZE rows of cell values.

    Args:
        lines: Input lines; anything after the last grid row is ignored

    Returns:
        Parsed GameConfig

    Raises:
        MissingLineError: If the input has fewer than GRID_SIZE + 1 lines
        FieldCountError: If a line has the wrong number of values
        IntegerParseError: If a value is not an integer
        ValueRangeError: If the depth is negative or a cell is not in 0..6
    """
    line_iter = iter(lines)

    depth_line = _read_line(line_iter, "depth", 1)
    depth, = _parse_integers(depth_line, "depth", 1, 1)
    if depth < 0:
        raise ValueRangeError(f"Line 1: depth must be non-negative, got {depth}")

    rows = []
    for row in range(GRID_SIZE):
        line_number = row + 2
        description = f"grid row {row + 1}"
        values = _parse_integers(_read_line(line_iter, description, line_number),
                                 description, line_number, GRID_SIZE)
        for value in values:
            if not 0 <= value <= DICE_MAX_VALUE:
                raise ValueRangeError(
                    f"Line {line_number}: cell value must be between 0 and {DICE_MAX_VALUE}, got {value}"
                )
        rows.append(values)

    config = GameConfig(depth, Grid.from_rows(rows))
    logger.debug("Parsed config: depth=%d grid=%s", config.depth, config.grid.cells)
    return config


def load_config(path: Optional[Union[str, Path]] = None) -> GameConfig:
    """Read the configuration from `path`, or from stdin when no path is given.

    Raises:
        ConfigError: If the input is malformed
        OSError: If the file cannot be read
    """
    if path is None:
        return parse_config(sys.stdin)

    with open(path, encoding="utf-8") as stream:
        return parse_config(stream)
