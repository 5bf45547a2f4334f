"""
Random placement of factories.
NO UI DEPENDENCIES.
"""
import logging
import random
from typing import List

from .grid import Position
from .maze import Maze
from .constants import (
    PLACEMENT_ATTEMPTS, FACTORY_PLAYER_CLEARANCE_SQUARED, FACTORY_SPACING_SQUARED,
)

logger = logging.getLogger(__name__)


def place_factories(
    maze: Maze,
    count: int,
    player_pos: Position,
    rng: random.Random,
    attempts: int = PLACEMENT_ATTEMPTS,
) -> List[Position]:
    """
    Pick up to count open 2x2 spots away from the player and from each other.

    The search gives up after a bounded number of attempts, so a cramped
    maze may get fewer factories than requested.
    """
    dims = maze.dimensions
    positions: List[Position] = []
    tries = 0
    while len(positions) < count and tries < attempts:
        tries += 1
        pos = Position(rng.randrange(dims.rows), rng.randrange(dims.cols))
        if maze.is_wall_quad(pos.row, pos.col):
            continue
        if pos.distance_squared(player_pos, dims) < FACTORY_PLAYER_CLEARANCE_SQUARED:
            continue
        if any(pos.distance_squared(p, dims) < FACTORY_SPACING_SQUARED for p in positions):
            continue
        positions.append(pos)

    if len(positions) < count:
        logger.info(f"Placed {len(positions)} of {count} factories after {tries} attempts")
    return positions
