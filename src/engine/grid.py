"""Board model and text rendering."""

from typing import Callable, Iterator, List, Optional

from pydantic import BaseModel, Field, model_validator

from .models import Position, ValidationResult
from .tiles import Tile, default_tile


class Board(BaseModel):
    """
    A square grid of pipe tiles around a single water source.

    The grid size is fixed at construction. Tiles are mutated in place
    (rotation only); nothing is ever inserted or removed.

    Attributes:
        size: Width and height of the grid
        tiles: Row-major `size` x `size` array of tiles
        source: Position of the water source, always in bounds
    """

    size: int = Field(..., ge=1)
    tiles: List[List[Tile]]
    source: Position

    @model_validator(mode="after")
    def _check_shape(self) -> "Board":
        if len(self.tiles) != self.size or any(len(row) != self.size for row in self.tiles):
            raise ValueError(f"Board tiles must be a {self.size}x{self.size} grid")
        if not self.in_bounds(self.source):
            raise ValueError(f"Source {tuple(self.source)} is outside a {self.size}x{self.size} grid")
        return self

    @classmethod
    def filled(
        cls,
        size: int,
        source: Optional[Position] = None,
        tile_factory: Callable[[], Tile] = default_tile,
    ) -> "Board":
        """Create a board with every cell produced by `tile_factory`."""
        if source is None:
            source = Position(size // 2, size // 2)
        tiles = [[tile_factory() for _ in range(size)] for _ in range(size)]
        return cls(size=size, tiles=tiles, source=Position(*source))

    def in_bounds(self, position: Position) -> bool:
        row, col = position
        return 0 <= row < self.size and 0 <= col < self.size

    def tile_at(self, position: Position) -> Tile:
        row, col = position
        return self.tiles[row][col]

    def set_tile(self, position: Position, tile: Tile) -> None:
        row, col = position
        self.tiles[row][col] = tile

    def positions(self) -> Iterator[Position]:
        """All positions in row-major order."""
        for row in range(self.size):
            for col in range(self.size):
                yield Position(row, col)

    def non_source_positions(self) -> Iterator[Position]:
        return (pos for pos in self.positions() if pos != self.source)

    def rotate_tile(self, position: Position) -> bool:
        """Rotate one tile. Returns False (and does nothing) when out of bounds."""
        if not self.in_bounds(position):
            return False
        self.tile_at(position).rotate()
        return True

    def rotations(self) -> List[List[int]]:
        return [[tile.rotation for tile in row] for row in self.tiles]


def render_board(board: Board) -> str:
    """Render the board as rows of box-drawing glyphs."""
    return '\n'.join(
        ''.join(tile.symbol for tile in row)
        for row in board.tiles
    )


def render_status(board: Board, result: ValidationResult) -> str:
    """
    Render connection status, one character per cell.

    S = source, x = tile with a leak, o = connected to source, . = neither.
    A leaking tile is shown as `x` even when it is connected.
    """
    leaking_positions = {conn.position for conn in result.leaking}
    lines = []

    for row in range(board.size):
        chars = []
        for col in range(board.size):
            pos = Position(row, col)
            if pos == board.source:
                chars.append('S')
            elif pos in leaking_positions:
                chars.append('x')
            elif pos in result.reachable:
                chars.append('o')
            else:
                chars.append('.')
        lines.append(''.join(chars))

    return '\n'.join(lines)
