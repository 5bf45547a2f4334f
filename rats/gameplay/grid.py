"""
Toroidal grid primitives.
NO UI DEPENDENCIES.

Every coordinate lives on a torus: stepping off the right edge lands in
column 0, stepping above row 0 lands in the last row.
"""
from dataclasses import dataclass
from enum import IntFlag
from typing import Tuple


class Direction(IntFlag):
    """Direction bitmask. Diagonals are the OR of two orthogonal bits."""
    NONE = 0
    UP = 0x01
    DOWN = 0x02
    LEFT = 0x04
    RIGHT = 0x08

    def effective(self) -> 'Direction':
        """Strip mutually cancelling UP+DOWN and LEFT+RIGHT pairs."""
        value = int(self)
        if value & Direction.UP and value & Direction.DOWN:
            value &= ~int(Direction.UP | Direction.DOWN)
        if value & Direction.LEFT and value & Direction.RIGHT:
            value &= ~int(Direction.LEFT | Direction.RIGHT)
        return Direction(value)

    def stop(self) -> 'Direction':
        """Direction to face when idle after moving this way."""
        if self in CARDINALS:
            return self
        if self in (UP_LEFT, DOWN_LEFT):
            return Direction.LEFT
        if self in (UP_RIGHT, DOWN_RIGHT):
            return Direction.RIGHT
        return Direction.UP

    def inverse(self) -> 'Direction':
        """Swap each axis bit for its opposite."""
        value = Direction.NONE
        for bit, opposite in _OPPOSITES:
            if self & bit:
                value |= opposite
        return value

    def without(self, mask: 'Direction') -> 'Direction':
        """Clear the bits in mask."""
        return Direction(int(self) & ~int(mask))

    def components(self) -> Tuple['Direction', ...]:
        """Cardinal bits set in this mask, in preference order."""
        return tuple(d for d in CARDINALS if self & d)


UP_LEFT = Direction.UP | Direction.LEFT
UP_RIGHT = Direction.UP | Direction.RIGHT
DOWN_LEFT = Direction.DOWN | Direction.LEFT
DOWN_RIGHT = Direction.DOWN | Direction.RIGHT

# Preference order for tie-breaking
CARDINALS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)

_OPPOSITES = (
    (Direction.UP, Direction.DOWN),
    (Direction.DOWN, Direction.UP),
    (Direction.LEFT, Direction.RIGHT),
    (Direction.RIGHT, Direction.LEFT),
)


def inc(value: int, limit: int) -> int:
    """Increment with wrap-around."""
    return value + 1 if value < limit - 1 else 0


def dec(value: int, limit: int) -> int:
    """Decrement with wrap-around."""
    return value - 1 if value > 0 else limit - 1


@dataclass(frozen=True)
class Dimensions:
    """Size of a maze in character cells."""
    rows: int
    cols: int


@dataclass(frozen=True)
class Position:
    """A character cell on the torus."""
    row: int
    col: int

    def up(self, dims: Dimensions) -> 'Position':
        return Position(dec(self.row, dims.rows), self.col)

    def down(self, dims: Dimensions) -> 'Position':
        return Position(inc(self.row, dims.rows), self.col)

    def left(self, dims: Dimensions) -> 'Position':
        return Position(self.row, dec(self.col, dims.cols))

    def right(self, dims: Dimensions) -> 'Position':
        return Position(self.row, inc(self.col, dims.cols))

    def advance(self, direction: Direction, dims: Dimensions, steps: int = 1) -> 'Position':
        """Move steps cells along every bit set in direction."""
        pos = self
        for _ in range(steps):
            if direction & Direction.UP:
                pos = pos.up(dims)
            if direction & Direction.DOWN:
                pos = pos.down(dims)
            if direction & Direction.LEFT:
                pos = pos.left(dims)
            if direction & Direction.RIGHT:
                pos = pos.right(dims)
        return pos

    def quad(self, dims: Dimensions) -> Tuple['Position', 'Position', 'Position', 'Position']:
        """The 2x2 block whose top-left corner is this position."""
        below = self.down(dims)
        return (self, self.right(dims), below, below.right(dims))

    def distance_squared(self, other: 'Position', dims: Dimensions) -> int:
        """Square of the shortest distance between two points on the torus."""
        dx = abs(self.col - other.col)
        dy = abs(self.row - other.row)
        mx = min(dx, dims.cols - dx)
        my = min(dy, dims.rows - dy)
        return mx * mx + my * my

    def direction_to(self, target: 'Position', dims: Dimensions) -> Direction:
        """
        Cardinal step that brings us closest to target.
        Ties go to the earlier of UP, DOWN, LEFT, RIGHT.
        """
        return min(
            CARDINALS,
            key=lambda d: self.advance(d, dims).distance_squared(target, dims),
        )

    def __str__(self) -> str:
        return f"r{self.row},c{self.col}"
