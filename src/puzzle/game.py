import random
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, Field, ConfigDict

from ..engine.grid import Board
from ..engine.models import BoardChange, Position, ValidationResult
from ..engine.validate import diff_results, has_leak, is_connected, validate
from ..generator.generator import generate_board, load_board
from ..generator.scramble import ScrambleTier
from ..levels.models import Level


Listener = Callable[[BoardChange], None]
PositionLike = Union[Position, Tuple[int, int]]


class PipeGame(BaseModel):
    """
    One pipe puzzle session: a board and its always-current validation state.

    Every command (rotate, reset) revalidates the whole board before it
    returns, so readers never see a rotated tile next to a stale result.
    Listeners registered with `subscribe` receive a `BoardChange` after each
    command.

    Attributes:
        board: The tiles and source position
        result: Leaks, reachable set and completion for the current board
        size: Grid size used when regenerating
        difficulty: Difficulty used when regenerating
        tier: Scramble tier override (None derives it from difficulty)
        level: The level this game was loaded from, if any
        seed: Optional random seed for reproducibility
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    board: Board
    result: ValidationResult = Field(default_factory=ValidationResult)
    size: int = Field(default=4, ge=1)
    difficulty: int = Field(default=3, ge=1)
    tier: Optional[ScrambleTier] = None
    level: Optional[Level] = None
    seed: Optional[int] = None
    _rng: random.Random = None
    _listeners: List[Listener] = None

    def model_post_init(self, __context) -> None:
        """Validate the initial board and set up the random generator."""
        self._rng = random.Random(self.seed)
        self._listeners = []
        self.size = self.board.size
        self.result = validate(self.board)

    @classmethod
    def create(
        cls,
        size: int = 4,
        difficulty: int = 3,
        seed: Optional[int] = None,
        tier: Optional[ScrambleTier] = None,
    ) -> "PipeGame":
        """
        Factory method to create a procedurally generated puzzle.

        Args:
            size: Grid width and height
            difficulty: Fill variety and default scramble tier
            seed: Optional random seed for reproducibility
            tier: Optional scramble tier override

        Returns:
            A new PipeGame with a scrambled, validated board
        """
        game = cls(
            board=Board.filled(size),
            size=size,
            difficulty=difficulty,
            seed=seed,
            tier=tier,
        )
        game._regenerate()
        return game

    @classmethod
    def from_level(
        cls,
        level: Level,
        seed: Optional[int] = None,
        tier: Optional[ScrambleTier] = None,
    ) -> "PipeGame":
        """
        Factory method to create a puzzle from a level of any kind.

        Resetting the game reloads and rescrambles the same level.
        """
        game = cls(
            board=Board.filled(level.grid_size),
            size=level.grid_size,
            difficulty=level.difficulty,
            level=level,
            seed=seed,
            tier=tier,
        )
        game._regenerate()
        return game

    from_description = from_level

    def _regenerate(self) -> None:
        if self.level is not None:
            self.board = load_board(self.level, self._rng, self.tier)
        else:
            self.board = generate_board(self.size, self.difficulty, self._rng, self.tier)
        self.result = validate(self.board)

    def _notify(self, change: BoardChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked with a `BoardChange` after every command."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def rotate(self, position: PositionLike) -> Optional[BoardChange]:
        """
        Rotate the tile at `position` a quarter turn and revalidate.

        Out-of-bounds positions are ignored.

        Returns:
            The resulting change, or None if nothing happened
        """
        position = Position(*position)
        if not self.board.rotate_tile(position):
            return None

        before = self.result
        self.result = validate(self.board)

        change = diff_results(before, self.result, position)
        self._notify(change)
        return change

    def reset(self) -> BoardChange:
        """Discard the board and build a fresh puzzle."""
        before = self.result
        self._regenerate()

        change = diff_results(before, self.result)
        self._notify(change)
        return change

    new_puzzle = reset

    def has_leak(self, position: PositionLike) -> bool:
        return has_leak(self.result, Position(*position))

    def is_reachable_from_source(self, position: PositionLike) -> bool:
        return is_connected(self.result, self.board, Position(*position))

    @property
    def source(self) -> Position:
        return self.board.source

    @property
    def total_leaks(self) -> int:
        """Number of leaking openings on the board."""
        return self.result.total_leaks

    @property
    def is_complete(self) -> bool:
        return self.result.is_complete

    def get_state(self) -> Dict[str, Any]:
        """
        Get the current game state as a dictionary.

        Useful for serialization and logging.

        Returns:
            Dictionary containing game state
        """
        return {
            "size": self.board.size,
            "source": list(self.board.source),
            "difficulty": self.difficulty,
            "level_id": self.level.id if self.level is not None else None,
            "rotations": self.board.rotations(),
            "total_leaks": self.total_leaks,
            "reachable": len(self.result.reachable),
            "is_complete": self.is_complete,
        }
