"""Tile shapes, rotation and connection tables."""

from typing import Dict, FrozenSet, Iterable, Optional, Tuple
from pydantic import BaseModel, field_validator

from .models import Direction, TileType

UP, DOWN, LEFT, RIGHT = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT

ROTATIONS = 4

# Connections for each type, indexed by rotation (quarter turns)
CONNECTIONS: Dict[TileType, Tuple[FrozenSet[Direction], ...]] = {
    TileType.STRAIGHT: (
        frozenset({LEFT, RIGHT}),
        frozenset({UP, DOWN}),
        frozenset({LEFT, RIGHT}),
        frozenset({UP, DOWN}),
    ),
    TileType.CORNER: (
        frozenset({DOWN, RIGHT}),
        frozenset({LEFT, DOWN}),
        frozenset({LEFT, UP}),
        frozenset({UP, RIGHT}),
    ),
    TileType.T_JUNCTION: (
        frozenset({LEFT, RIGHT, DOWN}),
        frozenset({UP, DOWN, LEFT}),
        frozenset({LEFT, RIGHT, UP}),
        frozenset({UP, DOWN, RIGHT}),
    ),
    TileType.DEAD_END: (
        frozenset({RIGHT}),
        frozenset({UP}),
        frozenset({LEFT}),
        frozenset({DOWN}),
    ),
}

GLYPHS: Dict[TileType, Tuple[str, ...]] = {
    TileType.STRAIGHT: ("━", "┃", "━", "┃"),
    TileType.CORNER: ("┏", "┓", "┛", "┗"),
    TileType.T_JUNCTION: ("┳", "┫", "┻", "┣"),
    TileType.DEAD_END: ("╶", "╵", "╴", "╷"),
}

ARITY: Dict[TileType, int] = {
    TileType.DEAD_END: 1,
    TileType.STRAIGHT: 2,
    TileType.CORNER: 2,
    TileType.T_JUNCTION: 3,
}


def connections(tile_type: TileType, rotation: int) -> FrozenSet[Direction]:
    """Directions a tile of `tile_type` opens to at `rotation` (taken mod 4)."""
    return CONNECTIONS[tile_type][rotation % ROTATIONS]


def glyph(tile_type: TileType, rotation: int) -> str:
    return GLYPHS[tile_type][rotation % ROTATIONS]


class Tile(BaseModel):
    """A pipe piece. Connections are always derived from type and rotation."""
    type: TileType
    rotation: int = 0

    @field_validator("rotation")
    @classmethod
    def _normalize_rotation(cls, value: int) -> int:
        return value % ROTATIONS

    @property
    def connections(self) -> FrozenSet[Direction]:
        return connections(self.type, self.rotation)

    @property
    def symbol(self) -> str:
        return glyph(self.type, self.rotation)

    def rotate(self) -> None:
        """Quarter turn: rotation -> (rotation + 1) mod 4."""
        self.rotation = (self.rotation + 1) % ROTATIONS

    def __str__(self) -> str:
        return self.symbol


def default_tile() -> Tile:
    """The neutral tile used for cells a level does not describe."""
    return Tile(type=TileType.DEAD_END, rotation=0)


def infer_tile_type(directions: Iterable[Direction]) -> Optional[TileType]:
    """
    Pick the tile type whose shape matches a declared set of openings.

    Four openings map to a T-junction since there is no cross piece.
    Returns None for an empty set.
    """
    dirs = frozenset(directions)

    if len(dirs) == 1:
        return TileType.DEAD_END
    if len(dirs) == 2:
        if dirs == {UP, DOWN} or dirs == {LEFT, RIGHT}:
            return TileType.STRAIGHT
        return TileType.CORNER
    if len(dirs) >= 3:
        return TileType.T_JUNCTION
    return None


def find_rotation(tile_type: TileType, directions: Iterable[Direction]) -> int:
    """First rotation of `tile_type` whose openings equal `directions`, else 0."""
    target = frozenset(directions)
    for rotation in range(ROTATIONS):
        if connections(tile_type, rotation) == target:
            return rotation
    return 0


def tile_for_connections(directions: Iterable[Direction]) -> Optional[Tile]:
    """Build the tile matching a declared set of openings, or None if empty."""
    dirs = frozenset(directions)
    tile_type = infer_tile_type(dirs)
    if tile_type is None:
        return None
    return Tile(type=tile_type, rotation=find_rotation(tile_type, dirs))
