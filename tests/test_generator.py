"""Tests for procedural generation, scrambling and level loading."""

import logging
import random

import pytest

from src.engine import Board, Direction, Position, Tile, TileType, has_leak, validate
from src.generator import (
    SCRAMBLE_RANGES,
    ScrambleTier,
    build_board,
    build_board_from_description,
    build_board_from_level,
    generate_board,
    level_tier,
    layout_board,
    load_board,
    scramble_board,
    tier_for_difficulty,
)
from src.levels import LayoutCell, LevelDescription, PipeLevel, PipePlacement, GridPosition

UP, DOWN, LEFT, RIGHT = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT


def description_from_board(board: Board, level_id: str = "layout") -> LevelDescription:
    cells = [
        LayoutCell(row=pos.row, col=pos.col, connections=sorted(board.tile_at(pos).connections, key=lambda d: d.value))
        for pos in board.positions()
    ]
    return LevelDescription(
        id=level_id,
        grid_size=board.size,
        source_position=GridPosition.from_position(board.source),
        pipes=cells,
    )


def rotation_deltas(before: Board, after: Board):
    return {
        pos: (after.tile_at(pos).rotation - before.tile_at(pos).rotation) % 4
        for pos in before.non_source_positions()
    }


class TestProceduralLayout:
    """Unscrambled procedural layouts."""

    def test_source_at_centre_as_t_junction(self):
        """The source sits at the centre as a T-junction at rotation 0."""
        board = layout_board(5, 3, random.Random(1))
        assert board.source == Position(2, 2)
        source = board.tile_at(board.source)
        assert source.type == TileType.T_JUNCTION
        assert source.rotation == 0

    def test_arms_are_seeded(self):
        """Every cell the source opens to gets a straight that connects back."""
        board = layout_board(5, 1, random.Random(1))
        assert board.tile_at(Position(2, 1)) == Tile(type=TileType.STRAIGHT, rotation=0)
        assert board.tile_at(Position(2, 3)) == Tile(type=TileType.STRAIGHT, rotation=0)
        assert board.tile_at(Position(3, 2)) == Tile(type=TileType.STRAIGHT, rotation=1)

        result = validate(board)
        assert not has_leak(result, board.source)
        assert {Position(2, 1), Position(2, 3), Position(3, 2)} <= result.reachable

    def test_easy_fill_uses_dead_ends(self):
        """Difficulty 1 fills everything else with dead ends."""
        board = layout_board(4, 1, random.Random(3))
        arms = {board.source.adjacent(d) for d in board.tile_at(board.source).connections}
        for pos in board.non_source_positions():
            if pos not in arms:
                assert board.tile_at(pos).type == TileType.DEAD_END

    def test_hard_fill_varies_types(self):
        """Higher difficulties use more than one tile type."""
        board = layout_board(10, 3, random.Random(5))
        types = {board.tile_at(pos).type for pos in board.positions()}
        assert len(types) > 2

    def test_single_cell_board(self):
        """A 1x1 board is just the source."""
        board = generate_board(1, rng=random.Random(0))
        assert board.tile_at(Position(0, 0)).type == TileType.T_JUNCTION

    def test_rejects_empty_board(self):
        """Size must be at least 1."""
        with pytest.raises(ValueError):
            generate_board(0)

    def test_layout_coverage_is_logged(self, caplog):
        """An incomplete layout is reported, not retried."""
        with caplog.at_level(logging.INFO, logger="src.generator.generator"):
            generate_board(4, difficulty=1, rng=random.Random(2))
        assert "not fully connected" in caplog.text


class TestScramble:
    """Rotation scrambling."""

    def test_tier_for_difficulty(self):
        """Difficulty picks the scramble tier."""
        assert tier_for_difficulty(1) == ScrambleTier.LIGHT
        assert tier_for_difficulty(2) == ScrambleTier.MEDIUM
        assert tier_for_difficulty(3) == ScrambleTier.HEAVY
        assert tier_for_difficulty(9) == ScrambleTier.HEAVY

    @pytest.mark.parametrize("tier", list(ScrambleTier))
    def test_turns_within_tier_range(self, tier):
        """Each non-source tile turns within the tier's range."""
        board = layout_board(6, 3, random.Random(11))
        before = board.model_copy(deep=True)

        total = scramble_board(board, random.Random(4), tier)

        low, high = SCRAMBLE_RANGES[tier]
        deltas = rotation_deltas(before, board)
        assert all(low <= delta <= high for delta in deltas.values())
        assert low * len(deltas) <= total <= high * len(deltas)

    def test_heavy_turns_every_tile(self):
        """Heavy scrambling rotates every non-source tile at least once."""
        board = layout_board(5, 3, random.Random(8))
        before = board.model_copy(deep=True)
        scramble_board(board, random.Random(8), ScrambleTier.HEAVY)
        assert all(delta != 0 for delta in rotation_deltas(before, board).values())

    def test_source_never_scrambled(self):
        """The source keeps its rotation."""
        for seed in range(10):
            board = generate_board(5, rng=random.Random(seed))
            assert board.tile_at(board.source).rotation == 0

    def test_same_seed_same_board(self):
        """Generation is reproducible with a seeded random source."""
        first = generate_board(6, 3, random.Random(42))
        second = generate_board(6, 3, random.Random(42))
        assert first == second


class TestDescriptionLoading:
    """Declarative layouts."""

    def test_cells_get_matching_tiles(self):
        """Declared openings become the matching type and rotation."""
        description = LevelDescription(
            id="shapes",
            grid_size=3,
            pipes=[
                LayoutCell(row=0, col=0, connections=[DOWN, RIGHT]),
                LayoutCell(row=0, col=1, connections=[LEFT]),
                LayoutCell(row=2, col=1, connections=[UP, LEFT, RIGHT]),
                LayoutCell(row=1, col=0, connections=[UP, DOWN]),
            ],
        )
        board = build_board_from_description(description)

        assert board.tile_at(Position(0, 0)) == Tile(type=TileType.CORNER, rotation=0)
        assert board.tile_at(Position(0, 1)) == Tile(type=TileType.DEAD_END, rotation=2)
        assert board.tile_at(Position(2, 1)) == Tile(type=TileType.T_JUNCTION, rotation=2)
        assert board.tile_at(Position(1, 0)) == Tile(type=TileType.STRAIGHT, rotation=1)

    def test_missing_cells_get_default_tile(self):
        """Undeclared and empty cells fall back to the default dead end."""
        description = LevelDescription(
            id="sparse",
            grid_size=3,
            pipes=[LayoutCell(row=0, col=2, connections=[])],
        )
        board = build_board_from_description(description)

        assert board.tile_at(Position(0, 2)) == Tile(type=TileType.DEAD_END, rotation=0)
        assert board.tile_at(Position(2, 0)) == Tile(type=TileType.DEAD_END, rotation=0)

    def test_undeclared_source_is_t_junction(self):
        """A source the layout does not describe becomes a T-junction."""
        board = build_board_from_description(LevelDescription(id="empty", grid_size=4))
        assert board.source == Position(2, 2)
        assert board.tile_at(board.source) == Tile(type=TileType.T_JUNCTION, rotation=0)

    def test_declared_source_is_kept(self):
        """A described source cell keeps its described shape."""
        description = LevelDescription(
            id="src",
            grid_size=3,
            source_position=GridPosition(row=0, col=0),
            pipes=[LayoutCell(row=0, col=0, connections=[RIGHT])],
        )
        board = build_board_from_description(description)
        assert board.source == Position(0, 0)
        assert board.tile_at(board.source) == Tile(type=TileType.DEAD_END, rotation=0)

    def test_unmatched_rotation_falls_back_to_zero(self):
        """Openings no rotation of the inferred type can produce give rotation 0."""
        description = LevelDescription(
            id="cross",
            grid_size=3,
            pipes=[LayoutCell(row=0, col=0, connections=[UP, DOWN, LEFT, RIGHT])],
        )
        board = build_board_from_description(description)
        assert board.tile_at(Position(0, 0)) == Tile(type=TileType.T_JUNCTION, rotation=0)

    def test_out_of_bounds_cells_skipped(self, caplog):
        """Cells outside the grid are ignored with a warning."""
        description = LevelDescription(
            id="oob",
            grid_size=3,
            pipes=[LayoutCell(row=3, col=0, connections=[UP]), LayoutCell(row=0, col=-1, connections=[UP])],
        )
        with caplog.at_level(logging.WARNING, logger="src.generator.generator"):
            board = build_board_from_description(description)

        assert board.size == 3
        assert "out-of-bounds" in caplog.text

    def test_repeated_builds_identical(self):
        """Building the same description twice gives the same board."""
        description = LevelDescription(
            id="repeat",
            grid_size=4,
            pipes=[
                LayoutCell(row=0, col=0, connections=[DOWN, RIGHT]),
                LayoutCell(row=3, col=3, connections=[UP, DOWN, LEFT, RIGHT]),
            ],
        )
        assert build_board_from_description(description) == build_board_from_description(description)

    def test_seeded_loads_identical(self, solved_board):
        """Loading with the same seed scrambles identically."""
        description = description_from_board(solved_board)
        first = load_board(description, random.Random(7))
        second = load_board(description, random.Random(7))
        assert first == second

    def test_solved_layout_round_trips(self, solved_board):
        """A description of a solved board lays out a solved board."""
        board = build_board_from_description(description_from_board(solved_board))
        assert validate(board).is_complete

    def test_load_scrambles_by_difficulty(self, solved_board):
        """Difficulty 1 loads use the light tier."""
        description = description_from_board(solved_board)
        laid_out = build_board_from_description(description)
        loaded = load_board(description, random.Random(3))

        assert loaded.tile_at(loaded.source) == laid_out.tile_at(laid_out.source)
        assert all(delta in (0, 1) for delta in rotation_deltas(laid_out, loaded).values())


class TestEditorLevelLoading:
    """Editor transport levels."""

    def test_pipes_placed_as_given(self):
        """Type and rotation come straight from the level."""
        level = PipeLevel(
            id="custom",
            grid_size=3,
            source_position=GridPosition(row=1, col=1),
            pipes=[
                PipePlacement(row=1, col=1, type=TileType.T_JUNCTION, rotation=2),
                PipePlacement(row=0, col=0, type=TileType.CORNER, rotation=3),
            ],
        )
        board = build_board_from_level(level)

        assert board.tile_at(Position(1, 1)) == Tile(type=TileType.T_JUNCTION, rotation=2)
        assert board.tile_at(Position(0, 0)) == Tile(type=TileType.CORNER, rotation=3)
        assert board.tile_at(Position(2, 2)) == Tile(type=TileType.DEAD_END, rotation=0)

    def test_out_of_bounds_pipes_skipped(self):
        """Pipes outside the grid are dropped."""
        level = PipeLevel(
            id="oob",
            grid_size=2,
            source_position=GridPosition(row=0, col=0),
            pipes=[PipePlacement(row=2, col=0, type=TileType.STRAIGHT, rotation=1)],
        )
        board = build_board_from_level(level)
        assert board.size == 2
        assert all(tile.type == TileType.DEAD_END for row in board.tiles for tile in row)

    def test_build_board_dispatches_on_kind(self, solved_board):
        """Both level kinds build through the same entry point."""
        custom = PipeLevel.from_board(solved_board, "custom")
        layout = description_from_board(solved_board)
        assert build_board(custom) == solved_board
        assert validate(build_board(layout)).is_complete

    def test_load_keeps_source_rotation(self, solved_board):
        """Scrambling a loaded level leaves the source alone."""
        level = PipeLevel.from_board(solved_board, "custom", difficulty=3)
        board = load_board(level, random.Random(9))
        assert board.tile_at(board.source) == solved_board.tile_at(solved_board.source)
        assert all(delta != 0 for delta in rotation_deltas(solved_board, board).values())

    def test_editor_exports_scramble_heavily(self, solved_board):
        """Editor exports turn every non-source tile, whatever their difficulty."""
        level = PipeLevel.from_board(solved_board, "easy", difficulty=1)
        assert level_tier(level) == ScrambleTier.HEAVY
        assert level_tier(description_from_board(solved_board)) == ScrambleTier.LIGHT

        board = load_board(level, random.Random(2))
        assert all(delta != 0 for delta in rotation_deltas(solved_board, board).values())

    def test_explicit_tier_overrides_level(self, solved_board):
        """A caller-chosen tier wins over the level default."""
        level = PipeLevel.from_board(solved_board, "light", difficulty=3)
        board = load_board(level, random.Random(2), ScrambleTier.LIGHT)
        assert all(delta in (0, 1) for delta in rotation_deltas(solved_board, board).values())
