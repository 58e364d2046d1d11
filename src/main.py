"""
Main entry point for generating and playing pipe puzzles.

Usage:
    python -m src.main
    python -m src.main config.yaml --seed 42 --verbose
    python -m src.main --level levels/custom.json --rotate 1,2 --rotate 0,0
    python -m src.main --size 6 --difficulty 2 --export results/board.json
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import PuzzleConfig, load_config
from .engine import Position, render_board, render_status
from .levels import LevelRepository, PipeLevel, load_level_file, save_level_file
from .puzzle import PipeGame


def parse_position(text: str) -> Position:
    """Parse 'ROW,COL' into a position."""
    try:
        row, col = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected ROW,COL but got '{text}'")
    return Position(row, col)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def build_config(args: argparse.Namespace) -> PuzzleConfig:
    """Load the YAML config (if any) and apply command-line overrides."""
    config = load_config(args.config) if args.config else PuzzleConfig()

    overrides = {
        "size": args.size,
        "difficulty": args.difficulty,
        "seed": args.seed,
        "scramble": args.scramble,
        "level": args.level,
        "levels_dir": args.levels_dir,
        "level_id": args.level_id,
    }
    data = config.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})
    return PuzzleConfig(**data)


def build_game(config: PuzzleConfig) -> PipeGame:
    """Create the puzzle described by the config."""
    if config.level:
        level = load_level_file(config.level)
        return PipeGame.from_level(level, seed=config.seed, tier=config.scramble)

    if config.levels_dir:
        repo = LevelRepository.from_directory(config.levels_dir)
        if config.level_id:
            level = repo.get(config.level_id)
            if level is None:
                raise KeyError(f"Level '{config.level_id}' not found in {config.levels_dir}")
        else:
            if not len(repo):
                raise ValueError(f"No levels found in {config.levels_dir}")
            level = next(iter(repo))
        return PipeGame.from_level(level, seed=config.seed, tier=config.scramble)

    return PipeGame.create(
        size=config.size,
        difficulty=config.difficulty,
        seed=config.seed,
        tier=config.scramble,
    )


def print_game(game: PipeGame) -> None:
    print(render_board(game.board))
    print()
    print(render_status(game.board, game.result))
    print()
    print(f"Leaks: {game.total_leaks}")
    print(f"Connected: {len(game.result.reachable)}/{game.board.size ** 2 - 1}")
    print(f"Complete: {'yes' if game.is_complete else 'no'}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate, load and play pipe connection puzzles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example config.yaml:
  size: 5
  difficulty: 2
  seed: 42
  scramble: medium
        """
    )
    parser.add_argument(
        "config",
        nargs="?",
        help="Path to YAML configuration file"
    )
    parser.add_argument("--size", type=int, help="Grid width and height (3-10)")
    parser.add_argument("--difficulty", type=int, help="Difficulty tier (1 = easiest)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible boards")
    parser.add_argument(
        "--scramble",
        choices=["light", "medium", "heavy"],
        help="Scramble intensity (default: derived from difficulty)"
    )
    parser.add_argument("--level", help="Load a level file (JSON or YAML)")
    parser.add_argument("--levels-dir", help="Directory of level files")
    parser.add_argument("--level-id", help="Level id to pick from --levels-dir")
    parser.add_argument(
        "--rotate",
        action="append",
        type=parse_position,
        default=[],
        metavar="ROW,COL",
        help="Rotate the tile at ROW,COL (repeatable, applied in order)"
    )
    parser.add_argument(
        "--export", "-o",
        help="Save the resulting board to a JSON level file"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress and debug logging"
    )

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = build_config(args)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    try:
        game = build_game(config)
    except Exception as e:
        print(f"Error creating puzzle: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Board: {game.board.size}x{game.board.size}, source at {tuple(game.source)}")
        print()

    for position in args.rotate:
        change = game.rotate(position)
        if args.verbose:
            if change is None:
                print(f"Ignored rotation outside the grid: {tuple(position)}")
            else:
                print(
                    f"Rotated {tuple(position)}: "
                    f"+{len(change.leaks_added)}/-{len(change.leaks_removed)} leaks"
                )

    print_game(game)

    if args.export:
        level_id = game.level.id if game.level is not None else f"board_{config.seed or 'random'}"
        level = PipeLevel.from_board(game.board, level_id, game.difficulty)
        path = save_level_file(level, args.export)
        print()
        print(f"Board saved to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
