"""Board generation and scrambling."""

from .scramble import ScrambleTier, SCRAMBLE_RANGES, scramble_board, tier_for_difficulty
from .generator import (
    FILL_TYPES,
    generate_board,
    layout_board,
    seed_source_arms,
    build_board,
    build_board_from_description,
    build_board_from_level,
    level_tier,
    load_board,
)

__all__ = [
    # Scrambling
    "ScrambleTier",
    "SCRAMBLE_RANGES",
    "scramble_board",
    "tier_for_difficulty",
    # Generation
    "FILL_TYPES",
    "generate_board",
    "layout_board",
    "seed_source_arms",
    # Loading
    "build_board",
    "build_board_from_description",
    "build_board_from_level",
    "level_tier",
    "load_board",
]
