"""
Pytest fixtures for Rats tests.

Scenario tests use fixed text layouts instead of generated mazes, so every
position in a test is known to be open or walled.
"""
import random
from typing import List

import pytest

from rats.config import GameSettings
from rats.gameplay.game import Game
from rats.gameplay.grid import Position
from rats.gameplay.maze import Maze


def open_layout(rows: int = 20, cols: int = 40) -> List[str]:
    """A wall-free arena."""
    return [' ' * cols for _ in range(rows)]


def boxed_layout(rows: int = 20, cols: int = 40) -> List[str]:
    """An arena ringed by walls. Nothing wraps past the ring."""
    edge = '#' * cols
    middle = '#' + ' ' * (cols - 2) + '#'
    return [edge] + [middle] * (rows - 2) + [edge]


class RecordingSounds:
    """Sound hooks that remember what was played."""

    def __init__(self):
        self.played: List[str] = []

    def play_gunshot(self) -> None:
        self.played.append("gunshot")

    def play_impact(self) -> None:
        self.played.append("impact")

    def play_short_explosion(self) -> None:
        self.played.append("short_explosion")

    def play_long_explosion(self) -> None:
        self.played.append("long_explosion")


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def open_maze():
    return Maze.from_text(open_layout())


@pytest.fixture
def boxed_maze():
    return Maze.from_text(boxed_layout())


@pytest.fixture
def settings():
    """Settings with no factories so scenarios control every entity."""
    return GameSettings(factories=0, seed=1234)


@pytest.fixture
def sounds():
    return RecordingSounds()


@pytest.fixture
def game(settings, open_maze, sounds):
    """A session on the open arena with the player at (10, 10)."""
    return Game(
        settings=settings,
        rng=random.Random(1234),
        sounds=sounds,
        maze=open_maze,
        player_start=Position(10, 10),
    )
