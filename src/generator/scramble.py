"""Rotation scrambling that turns a laid-out board into a puzzle."""

import random
from enum import Enum
from typing import Dict, Tuple

from ..engine.grid import Board


class ScrambleTier(str, Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


# Inclusive (min, max) quarter turns applied to each non-source tile
SCRAMBLE_RANGES: Dict[ScrambleTier, Tuple[int, int]] = {
    ScrambleTier.LIGHT: (0, 1),
    ScrambleTier.MEDIUM: (0, 2),
    ScrambleTier.HEAVY: (1, 3),
}


def tier_for_difficulty(difficulty: int) -> ScrambleTier:
    """Difficulty 1 scrambles lightly, 2 moderately, 3 and up heavily."""
    if difficulty <= 1:
        return ScrambleTier.LIGHT
    if difficulty == 2:
        return ScrambleTier.MEDIUM
    return ScrambleTier.HEAVY


def scramble_board(
    board: Board,
    rng: random.Random,
    tier: ScrambleTier = ScrambleTier.HEAVY,
) -> int:
    """
    Rotate every non-source tile a random number of quarter turns.

    The source tile is never touched. Mutates `board` in place.

    Returns:
        Total number of quarter turns applied
    """
    low, high = SCRAMBLE_RANGES[ScrambleTier(tier)]
    total = 0

    for pos in board.non_source_positions():
        turns = rng.randint(low, high)
        for _ in range(turns):
            board.rotate_tile(pos)
        total += turns

    return total
