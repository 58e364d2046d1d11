"""Puzzle sessions: the query/command surface over one board."""

from .game import PipeGame, Listener

__all__ = [
    "PipeGame",
    "Listener",
]
