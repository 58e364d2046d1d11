"""
Board generation for the pipe puzzle.

Boards come from one of three places:
1. Procedural generation around a centred source
2. A declarative layout (`LevelDescription`), one set of openings per cell
3. An editor export (`PipeLevel`), one explicit type and rotation per cell

Every path lays out an unscrambled board first and then scrambles it.
Solvability is not guaranteed; the unscrambled layout is checked once and
its coverage is logged.
"""

import logging
import random
from typing import Dict, List, Optional

from ..engine.grid import Board
from ..engine.models import Position, TileType
from ..engine.tiles import ROTATIONS, Tile, default_tile, tile_for_connections
from ..engine.validate import validate
from ..levels.models import Level, LevelDescription, PipeLevel
from .scramble import ScrambleTier, scramble_board, tier_for_difficulty

logger = logging.getLogger(__name__)

# Tile types used to fill cells outside the seeded neighbourhood, by difficulty
FILL_TYPES: Dict[int, List[TileType]] = {
    1: [TileType.DEAD_END],
    2: [TileType.DEAD_END, TileType.STRAIGHT],
    3: [TileType.DEAD_END, TileType.STRAIGHT, TileType.CORNER, TileType.T_JUNCTION],
}


def source_tile() -> Tile:
    return Tile(type=TileType.T_JUNCTION, rotation=0)


def fill_types_for(difficulty: int) -> List[TileType]:
    return FILL_TYPES[min(max(difficulty, 1), max(FILL_TYPES))]


def seed_source_arms(board: Board) -> List[Position]:
    """
    Lay a correctly oriented straight on every in-bounds cell the source opens to.

    Only this local neighbourhood is guaranteed to connect.

    Returns:
        Positions that received an arm tile
    """
    seeded = []
    for direction in board.tile_at(board.source).connections:
        pos = board.source.adjacent(direction)
        if not board.in_bounds(pos):
            continue
        vertical = direction.delta[1] == 0
        board.set_tile(pos, Tile(type=TileType.STRAIGHT, rotation=1 if vertical else 0))
        seeded.append(pos)
    return seeded


def layout_board(size: int, difficulty: int, rng: random.Random) -> Board:
    """Unscrambled procedural layout: source, seeded arms, varied fill."""
    types = fill_types_for(difficulty)

    board = Board.filled(
        size,
        tile_factory=lambda: Tile(type=rng.choice(types), rotation=rng.randrange(ROTATIONS)),
    )
    board.set_tile(board.source, source_tile())
    seed_source_arms(board)
    return board


def report_layout(board: Board, label: str) -> bool:
    """Log whether an unscrambled layout already solves itself."""
    result = validate(board)
    total = board.size * board.size - 1

    if result.is_complete:
        logger.debug("%s: layout fully connected (%d tiles)", label, total)
    else:
        logger.info(
            "%s: layout not fully connected (%d/%d reachable, %d leaks); puzzle may be unsolvable",
            label, len(result.reachable), total, result.total_leaks,
        )
    return result.is_complete


def generate_board(
    size: int = 4,
    difficulty: int = 3,
    rng: Optional[random.Random] = None,
    tier: Optional[ScrambleTier] = None,
) -> Board:
    """
    Procedurally generate and scramble a board.

    Args:
        size: Grid width and height
        difficulty: Picks the fill tile types and the default scramble tier
        rng: Random source; a fresh unseeded one when omitted
        tier: Overrides the scramble tier derived from difficulty

    Returns:
        A scrambled board with the source at the grid centre
    """
    if size < 1:
        raise ValueError(f"Board size must be at least 1, got {size}")

    rng = rng or random.Random()
    board = layout_board(size, difficulty, rng)
    report_layout(board, f"generated {size}x{size}")

    scramble_board(board, rng, tier or tier_for_difficulty(difficulty))
    return board


def build_board_from_description(description: LevelDescription) -> Board:
    """
    Lay out a declarative description without scrambling.

    Each declared cell gets the tile type matching its number and shape of
    openings, at the first rotation that reproduces them (rotation 0 when
    none does). Undeclared cells, empty declarations and out-of-bounds cells
    fall back to the default tile. An undeclared source becomes a T-junction.
    """
    size = description.grid_size
    source = description.source
    board = Board.filled(size, source=source)
    declared = set()

    for cell in description.pipes:
        pos = Position(cell.row, cell.col)
        if not board.in_bounds(pos):
            logger.warning("%s: skipping out-of-bounds cell %s", description.id, tuple(pos))
            continue
        tile = tile_for_connections(cell.connections)
        board.set_tile(pos, tile or default_tile())
        declared.add(pos)

    if board.source not in declared:
        board.set_tile(board.source, source_tile())

    return board


def build_board_from_level(level: PipeLevel) -> Board:
    """Lay out an editor export without scrambling. Omitted cells get the default tile."""
    board = Board.filled(level.grid_size, source=level.source_position.to_position())

    for pipe in level.pipes:
        pos = Position(pipe.row, pipe.col)
        if not board.in_bounds(pos):
            logger.warning("%s: skipping out-of-bounds pipe %s", level.id, tuple(pos))
            continue
        board.set_tile(pos, Tile(type=pipe.type, rotation=pipe.rotation))

    return board


def build_board(level: Level) -> Board:
    """Lay out any level kind without scrambling."""
    if level.kind == "pipe_layout":
        return build_board_from_description(level)
    if level.kind == "pipe_custom":
        return build_board_from_level(level)
    raise ValueError(f"Unknown level kind: {level.kind!r}")


def level_tier(level: Level) -> ScrambleTier:
    """
    Default scramble tier for a level.

    Editor exports are always scrambled heavily; their difficulty only
    matters to whoever picks the level. Layouts follow their difficulty.
    """
    if level.kind == "pipe_custom":
        return ScrambleTier.HEAVY
    return tier_for_difficulty(level.difficulty)


def load_board(
    level: Level,
    rng: Optional[random.Random] = None,
    tier: Optional[ScrambleTier] = None,
) -> Board:
    """Lay out a level and scramble it the same way procedural boards are."""
    rng = rng or random.Random()
    board = build_board(level)
    report_layout(board, f"level {level.id}")

    scramble_board(board, rng, tier or level_tier(level))
    return board
