"""Data models for the pipe connectivity engine."""

from enum import Enum
from typing import Optional, Set, NamedTuple, Tuple
from pydantic import BaseModel, Field


class Direction(str, Enum):
    """Cardinal direction a pipe opening can face."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def delta(self) -> Tuple[int, int]:
        """(row, col) offset of one step in this direction."""
        return _DELTAS[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


def opposite(direction: Direction) -> Direction:
    return direction.opposite


class TileType(str, Enum):
    """Pipe shapes. Values are the names used by the transport format."""
    DEAD_END = "deadEnd"
    STRAIGHT = "straight"
    CORNER = "corner"
    T_JUNCTION = "tJunction"


class Position(NamedTuple):
    """A cell on the grid."""
    row: int
    col: int

    def adjacent(self, direction: Direction) -> "Position":
        return adjacent(self, direction)


def adjacent(position: Position, direction: Direction) -> Position:
    """Shift a position one cell in `direction`. No bounds checking."""
    dr, dc = direction.delta
    return Position(position[0] + dr, position[1] + dc)


class DirectedConnection(NamedTuple):
    """A single pipe opening: the tile it belongs to and the way it faces."""
    position: Position
    direction: Direction

    @property
    def adjacent_position(self) -> Position:
        return adjacent(self.position, self.direction)

    @property
    def return_direction(self) -> Direction:
        return self.direction.opposite


class ValidationResult(BaseModel):
    """Derived state of a board, recomputed after every mutation."""
    leaking: Set[DirectedConnection] = Field(default_factory=set)
    reachable: Set[Position] = Field(default_factory=set)  # Source excluded
    is_complete: bool = False

    @property
    def total_leaks(self) -> int:
        return len(self.leaking)


class BoardChange(BaseModel):
    """What changed between two validation passes.

    `position` is the rotated cell, or None when the whole board was
    regenerated.
    """
    position: Optional[Position] = None
    leaks_added: Set[DirectedConnection] = Field(default_factory=set)
    leaks_removed: Set[DirectedConnection] = Field(default_factory=set)
    newly_reachable: Set[Position] = Field(default_factory=set)
    no_longer_reachable: Set[Position] = Field(default_factory=set)
    is_complete: bool = False
    was_complete: bool = False

    @property
    def completed(self) -> bool:
        """True when this change is the one that solved the board."""
        return self.is_complete and not self.was_complete
