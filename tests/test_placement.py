"""
Tests for factory placement.
"""
import random

from rats.gameplay.grid import Position
from rats.gameplay.maze import Maze
from rats.gameplay.placement import place_factories
from rats.gameplay.constants import FACTORY_PLAYER_CLEARANCE_SQUARED, FACTORY_SPACING_SQUARED

from conftest import open_layout


class TestPlaceFactories:
    """Tests for random factory placement."""

    def test_constraints_hold(self):
        """Factories sit on open ground, away from the player and each other."""
        maze = Maze(6, 6)
        maze.generate(85, random.Random(3))
        player = Position(2, 5)
        positions = place_factories(maze, 5, player, random.Random(4))
        dims = maze.dimensions

        assert 0 < len(positions) <= 5
        for i, pos in enumerate(positions):
            assert not maze.is_wall_quad(pos.row, pos.col)
            assert pos.distance_squared(player, dims) >= FACTORY_PLAYER_CLEARANCE_SQUARED
            for other in positions[i + 1:]:
                assert pos.distance_squared(other, dims) >= FACTORY_SPACING_SQUARED

    def test_zero_requested(self, rng):
        maze = Maze.from_text(open_layout())
        assert place_factories(maze, 0, Position(0, 0), rng) == []

    def test_gives_up_when_there_is_no_room(self, rng):
        """A maze too small for the clearance rule gets no factories, not a hang."""
        maze = Maze.from_text(open_layout(rows=6, cols=6))
        assert place_factories(maze, 3, Position(0, 0), rng, attempts=50) == []

    def test_same_seed_same_spots(self):
        maze = Maze.from_text(open_layout(rows=40, cols=80))
        first = place_factories(maze, 4, Position(0, 0), random.Random(8))
        second = place_factories(maze, 4, Position(0, 0), random.Random(8))
        assert first == second
        assert len(first) == 4
