"""Manual level editor."""

from .editor import LevelEditor, MIN_GRID_SIZE, MAX_GRID_SIZE

__all__ = [
    "LevelEditor",
    "MIN_GRID_SIZE",
    "MAX_GRID_SIZE",
]
