"""
Pydantic models for pipe levels.

Two level kinds cross the system boundary:

- `pipe_custom`: the editor transport format, one explicit type and rotation per pipe
- `pipe_layout`: a declarative layout, one set of openings per cell

`Level` is the tagged union of both, discriminated by `kind`.
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..engine.grid import Board
from ..engine.models import Direction, Position, TileType

# Largest grid a level file may declare
MAX_GRID_SIZE = 10


def _check_source(grid_size: int, source: Position) -> None:
    row, col = source
    if not (0 <= row < grid_size and 0 <= col < grid_size):
        raise ValueError(f"Source {tuple(source)} is outside a {grid_size}x{grid_size} grid")


class GridPosition(BaseModel):
    """A cell reference as it appears in level files."""
    row: int
    col: int

    @classmethod
    def from_position(cls, position: Position) -> "GridPosition":
        return cls(row=position[0], col=position[1])

    def to_position(self) -> Position:
        return Position(self.row, self.col)


class PipePlacement(BaseModel):
    """One pipe in the transport format."""
    row: int
    col: int
    type: TileType
    rotation: int = Field(0, ge=0, le=3)


class PipeLevel(BaseModel):
    """A hand-built board as exported by the level editor."""
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["pipe_custom"] = "pipe_custom"
    id: str
    difficulty: int = Field(1, ge=1)
    grid_size: int = Field(..., ge=1, le=MAX_GRID_SIZE, alias="gridSize")
    source_position: GridPosition = Field(..., alias="sourcePosition")
    pipes: List[PipePlacement] = Field(default_factory=list)

    @model_validator(mode="after")
    def _source_in_bounds(self) -> "PipeLevel":
        _check_source(self.grid_size, self.source_position.to_position())
        return self

    @classmethod
    def from_board(cls, board: Board, level_id: str, difficulty: int = 1) -> "PipeLevel":
        """Snapshot every tile of a board into the transport format."""
        pipes = []
        for pos in board.positions():
            tile = board.tile_at(pos)
            pipes.append(PipePlacement(row=pos.row, col=pos.col, type=tile.type, rotation=tile.rotation))

        return cls(
            id=level_id,
            difficulty=difficulty,
            grid_size=board.size,
            source_position=GridPosition.from_position(board.source),
            pipes=pipes,
        )


class LayoutCell(BaseModel):
    """One cell of a declarative layout: where it is and which ways it opens."""
    row: int
    col: int
    connections: List[Direction] = Field(default_factory=list)


class LevelDescription(BaseModel):
    """A declarative pipe layout. The source defaults to the grid centre."""
    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["pipe_layout"] = "pipe_layout"
    id: str
    difficulty: int = Field(1, ge=1)
    grid_size: int = Field(..., ge=1, le=MAX_GRID_SIZE, alias="gridSize")
    source_position: Optional[GridPosition] = Field(None, alias="sourcePosition")
    pipes: List[LayoutCell] = Field(default_factory=list)

    @model_validator(mode="after")
    def _source_in_bounds(self) -> "LevelDescription":
        _check_source(self.grid_size, self.source)
        return self

    @property
    def source(self) -> Position:
        if self.source_position is not None:
            return self.source_position.to_position()
        return Position(self.grid_size // 2, self.grid_size // 2)


Level = Annotated[Union[PipeLevel, LevelDescription], Field(discriminator="kind")]

LevelKind = Literal["pipe_custom", "pipe_layout"]
