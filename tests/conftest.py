from typing import List, Optional, Tuple

import pytest

from src.engine import Board, Position, Tile
from src.engine.tiles import GLYPHS

# Glyph -> (type, rotation); straights use the lower of their two rotations
_GLYPH_TILES = {}
for _tile_type, _glyphs in GLYPHS.items():
    for _rotation, _glyph in enumerate(_glyphs):
        _GLYPH_TILES.setdefault(_glyph, (_tile_type, _rotation))


def board_from_glyphs(rows: List[str], source: Optional[Tuple[int, int]] = None) -> Board:
    """Build a board from rows of box-drawing glyphs, e.g. ["┏╴╷", "┗┳┛", "╶┻╴"]."""
    size = len(rows)
    tiles = []
    for row in rows:
        assert len(row) == size, f"Row '{row}' is not {size} wide"
        tiles.append([Tile(type=t, rotation=r) for t, r in (_GLYPH_TILES[ch] for ch in row)])

    if source is None:
        source = (size // 2, size // 2)
    return Board(size=size, tiles=tiles, source=Position(*source))


@pytest.fixture
def make_board():
    return board_from_glyphs


@pytest.fixture
def solved_board():
    """3x3 board, source at the centre, every tile connected with no leaks."""
    return board_from_glyphs([
        "┏╴╷",
        "┗┳┛",
        "╶┻╴",
    ])
