"""Level formats, decoding and storage."""

from .models import (
    MAX_GRID_SIZE,
    GridPosition,
    PipePlacement,
    PipeLevel,
    LayoutCell,
    LevelDescription,
    Level,
    LevelKind,
)
from .codec import (
    LevelDecodeError,
    decode_level,
    decode_level_data,
    encode_level,
    load_level_file,
    save_level_file,
)
from .repository import LevelRepository

__all__ = [
    # Models
    "MAX_GRID_SIZE",
    "GridPosition",
    "PipePlacement",
    "PipeLevel",
    "LayoutCell",
    "LevelDescription",
    "Level",
    "LevelKind",
    # Codec
    "LevelDecodeError",
    "decode_level",
    "decode_level_data",
    "encode_level",
    "load_level_file",
    "save_level_file",
    # Storage
    "LevelRepository",
]
