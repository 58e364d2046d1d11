"""
Connectivity and leak validation for pipe boards.

Computes, from scratch on every call:
1. Leaks (openings that point off the grid or at a neighbour that does not open back)
2. Tiles reachable from the source through mutually connected openings
3. Completion (no leaks and every non-source tile reachable)

The validator is total: it never raises for any board state.
"""

from collections import deque
from typing import Optional, Set

from .grid import Board
from .models import BoardChange, DirectedConnection, Position, ValidationResult


def find_leaks(board: Board) -> Set[DirectedConnection]:
    """Collect every opening that is not reciprocated by its neighbour."""
    leaking: Set[DirectedConnection] = set()

    for pos in board.positions():
        for direction in board.tile_at(pos).connections:
            connection = DirectedConnection(pos, direction)
            neighbour = connection.adjacent_position

            if not board.in_bounds(neighbour):
                leaking.add(connection)
                continue

            if connection.return_direction not in board.tile_at(neighbour).connections:
                leaking.add(connection)

    return leaking


def find_reachable(board: Board) -> Set[Position]:
    """Breadth-first search from the source over bidirectional edges.

    The source itself is not included in the result.
    """
    visited: Set[Position] = {board.source}
    reachable: Set[Position] = set()
    queue = deque([board.source])

    while queue:
        current = queue.popleft()

        for direction in board.tile_at(current).connections:
            neighbour = current.adjacent(direction)
            if not board.in_bounds(neighbour) or neighbour in visited:
                continue

            if direction.opposite in board.tile_at(neighbour).connections:
                visited.add(neighbour)
                reachable.add(neighbour)
                queue.append(neighbour)

    return reachable


def check_complete(board: Board, leaking: Set[DirectedConnection], reachable: Set[Position]) -> bool:
    if leaking:
        return False
    return reachable == set(board.non_source_positions())


def validate(board: Board) -> ValidationResult:
    """Full recomputation of leaks, reachability and completion."""
    leaking = find_leaks(board)
    reachable = find_reachable(board)

    return ValidationResult(
        leaking=leaking,
        reachable=reachable,
        is_complete=check_complete(board, leaking, reachable),
    )


def has_leak(result: ValidationResult, position: Position) -> bool:
    """True if any opening of the tile at `position` leaks."""
    return any(conn.position == position for conn in result.leaking)


def is_connected(result: ValidationResult, board: Board, position: Position) -> bool:
    """True if `position` is reachable from the source. The source trivially is."""
    return position == board.source or position in result.reachable


def diff_results(
    before: ValidationResult,
    after: ValidationResult,
    position: Optional[Position] = None,
) -> BoardChange:
    """Describe how validation state moved from `before` to `after`."""
    return BoardChange(
        position=position,
        leaks_added=after.leaking - before.leaking,
        leaks_removed=before.leaking - after.leaking,
        newly_reachable=after.reachable - before.reachable,
        no_longer_reachable=before.reachable - after.reachable,
        is_complete=after.is_complete,
        was_complete=before.is_complete,
    )
