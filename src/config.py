"""Puzzle configuration loaded from YAML."""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field

from .generator.scramble import ScrambleTier
from .levels.models import MAX_GRID_SIZE


class PuzzleConfig(BaseModel):
    """Configuration for a puzzle run."""
    size: int = Field(default=4, ge=3, le=MAX_GRID_SIZE)
    difficulty: int = Field(default=3, ge=1)
    seed: Optional[int] = None
    scramble: Optional[ScrambleTier] = None  # None derives the tier from difficulty
    level: Optional[str] = None  # Path to a level file; overrides size/difficulty
    levels_dir: Optional[str] = None
    level_id: Optional[str] = None  # Level to pick from levels_dir


def load_config(config_path: Union[str, Path]) -> PuzzleConfig:
    """Load puzzle configuration from a YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return PuzzleConfig(**data)
