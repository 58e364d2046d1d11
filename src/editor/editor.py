import logging
import time
from typing import List, Optional, Tuple, Union
from pydantic import BaseModel, Field

from ..engine.grid import Board
from ..engine.models import Position, TileType
from ..engine.tiles import Tile, default_tile
from ..generator.generator import build_board_from_level
from ..generator.scramble import ScrambleTier
from ..levels.codec import decode_level, encode_level
from ..levels.models import MAX_GRID_SIZE, PipeLevel
from ..puzzle.game import PipeGame

logger = logging.getLogger(__name__)

MIN_GRID_SIZE = 3

PositionLike = Union[Position, Tuple[int, int]]


class LevelEditor(BaseModel):
    """
    Manual level builder.

    Keeps its own unscrambled board, separate from any puzzle being played.
    Clicking a cell places the selected tile type (or moves the source when
    `is_placing_source` is set); exports go through the transport format.

    Attributes:
        grid_size: Width and height, between 3 and 10
        grid: Row-major tiles being edited
        source_position: Where the source sits
        selected_type: Tile type placed by `place_pipe`
        is_placing_source: When set, the next `place_pipe` moves the source
    """

    grid_size: int = Field(default=4, ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    grid: List[List[Tile]] = Field(default_factory=list)
    source_position: Position = Position(2, 2)
    selected_type: TileType = TileType.STRAIGHT
    is_placing_source: bool = False

    def model_post_init(self, __context) -> None:
        if not self.grid:
            self.reset_grid()

    def reset_grid(self) -> None:
        """Clear to default tiles with the source at the centre."""
        self.source_position = Position(self.grid_size // 2, self.grid_size // 2)
        self.grid = [[default_tile() for _ in range(self.grid_size)] for _ in range(self.grid_size)]

    def set_grid_size(self, size: int) -> bool:
        """Resize and clear the grid. Sizes outside 3..10 are ignored."""
        if not MIN_GRID_SIZE <= size <= MAX_GRID_SIZE:
            logger.warning("Ignoring grid size %d (allowed %d-%d)", size, MIN_GRID_SIZE, MAX_GRID_SIZE)
            return False

        self.grid_size = size
        self.reset_grid()
        return True

    def is_valid_position(self, position: PositionLike) -> bool:
        row, col = position
        return 0 <= row < self.grid_size and 0 <= col < self.grid_size

    def place_pipe(self, position: PositionLike) -> bool:
        """Place the selected type at rotation 0, or move the source there."""
        if not self.is_valid_position(position):
            logger.warning("Invalid position %s for grid size %d", tuple(position), self.grid_size)
            return False

        row, col = position
        if self.is_placing_source:
            self.source_position = Position(row, col)
            self.is_placing_source = False
        else:
            self.grid[row][col] = Tile(type=self.selected_type, rotation=0)
        return True

    def rotate_pipe(self, position: PositionLike) -> bool:
        if not self.is_valid_position(position):
            logger.warning("Cannot rotate at %s for grid size %d", tuple(position), self.grid_size)
            return False

        row, col = position
        self.grid[row][col].rotate()
        return True

    def to_board(self) -> Board:
        """A copy of the edited grid as an (unscrambled) board."""
        tiles = [[tile.model_copy() for tile in row] for row in self.grid]
        return Board(size=self.grid_size, tiles=tiles, source=self.source_position)

    def export_level(self, level_id: Optional[str] = None, difficulty: int = 1) -> PipeLevel:
        """Export the edited grid in the transport format."""
        if level_id is None:
            level_id = f"custom_level_{int(time.time())}"
        return PipeLevel.from_board(self.to_board(), level_id, difficulty)

    def export_json(self, level_id: Optional[str] = None, difficulty: int = 1) -> str:
        return encode_level(self.export_level(level_id, difficulty), indent=2)

    def import_level(self, level: PipeLevel) -> None:
        """
        Replace the edited grid with a transport level.

        Raises:
            ValueError: If the level's grid size is outside 3..10
        """
        if not MIN_GRID_SIZE <= level.grid_size <= MAX_GRID_SIZE:
            raise ValueError(
                f"Grid size {level.grid_size} outside editor range {MIN_GRID_SIZE}-{MAX_GRID_SIZE}"
            )

        board = build_board_from_level(level)
        self.grid_size = board.size
        self.grid = board.tiles
        self.source_position = board.source
        self.is_placing_source = False

    def import_json(self, payload: str) -> None:
        """
        Load an editor export.

        Raises:
            LevelDecodeError: If the payload is not a valid level
            ValueError: If it is a declarative layout rather than an editor export
        """
        level = decode_level(payload)
        if not isinstance(level, PipeLevel):
            raise ValueError(f"Level '{level.id}' is a {level.kind} level, not an editor export")
        self.import_level(level)

    def test_level(
        self,
        seed: Optional[int] = None,
        tier: Optional[ScrambleTier] = None,
        difficulty: int = 3,
    ) -> PipeGame:
        """Build a disposable, scrambled game from the current grid."""
        level = self.export_level(level_id="editor_test", difficulty=difficulty)
        return PipeGame.from_level(level, seed=seed, tier=tier)
