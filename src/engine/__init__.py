"""Pipe connectivity engine: tiles, boards and leak/reachability validation."""

from .models import (
    Direction,
    TileType,
    Position,
    DirectedConnection,
    ValidationResult,
    BoardChange,
    opposite,
    adjacent,
)
from .tiles import (
    Tile,
    CONNECTIONS,
    ARITY,
    connections,
    default_tile,
    infer_tile_type,
    find_rotation,
    tile_for_connections,
)
from .grid import Board, render_board, render_status
from .validate import validate, find_leaks, find_reachable, has_leak, is_connected, diff_results

__all__ = [
    # Models
    "Direction",
    "TileType",
    "Position",
    "DirectedConnection",
    "ValidationResult",
    "BoardChange",
    "opposite",
    "adjacent",
    # Tiles
    "Tile",
    "CONNECTIONS",
    "ARITY",
    "connections",
    "default_tile",
    "infer_tile_type",
    "find_rotation",
    "tile_for_connections",
    # Board
    "Board",
    "render_board",
    "render_status",
    # Validation
    "validate",
    "find_leaks",
    "find_reachable",
    "has_leak",
    "is_connected",
    "diff_results",
]
