"""
Maze entities: Player, Rat, Brat, Factory, Bullet.
NO UI DEPENDENCIES.

Every kind shares position, direction, explosion state, an animation cycle
and the timestamp of its next eligible update. Player and Factory occupy a
2x2 quad; everything else occupies a single cell.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Union

from .grid import Dimensions, Direction, Position
from .constants import (
    PLAYER_UPDATE_MS, RAT_UPDATE_MS, BRAT_UPDATE_MS, FACTORY_UPDATE_MS,
    BULLET_UPDATE_MS, RAT_KILL, BRAT_KILL, FACTORY_KILL,
)


class Kind(Enum):
    """Closed set of entity kinds."""
    PLAYER = auto()
    RAT = auto()
    BRAT = auto()
    FACTORY = auto()
    BULLET = auto()


class State(Enum):
    """Explosion progression. Only ever moves forward, except Player respawn."""
    ALIVE = 0
    EXPLODING1 = 1
    EXPLODING2 = 2
    EXPLODING3 = 3
    DEAD = 4

    def next(self) -> 'State':
        """The following state; DEAD is terminal."""
        if self is State.DEAD:
            return State.DEAD
        return State(self.value + 1)

    @property
    def exploding(self) -> bool:
        return self in (State.EXPLODING1, State.EXPLODING2, State.EXPLODING3)


@dataclass
class _Body:
    pos: Position
    dir: Direction = Direction.NONE
    state: State = State.ALIVE
    cycle: int = 0
    next_update: int = 0

    kind: ClassVar[Kind]
    interval: ClassVar[int]
    points: ClassVar[int] = 0
    quad: ClassVar[bool] = False

    def hit(self, pos: Position, dims: Dimensions) -> bool:
        """Check if pos falls on this entity's footprint while it is alive."""
        if self.state is not State.ALIVE:
            return False
        if self.quad:
            return pos in self.pos.quad(dims)
        return pos == self.pos

    def explode(self) -> None:
        self.state = State.EXPLODING1

    @property
    def alive(self) -> bool:
        return self.state is State.ALIVE


@dataclass
class Player(_Body):
    stop_dir: Direction = Direction.DOWN

    kind: ClassVar[Kind] = Kind.PLAYER
    interval: ClassVar[int] = PLAYER_UPDATE_MS
    quad: ClassVar[bool] = True

    def facing(self) -> Direction:
        """Direction the player faces: where it is heading, or stop_dir when idle."""
        effective = self.dir.effective()
        return effective if effective else self.stop_dir


@dataclass
class Rat(_Body):
    distance: int = 0

    kind: ClassVar[Kind] = Kind.RAT
    interval: ClassVar[int] = RAT_UPDATE_MS
    points: ClassVar[int] = RAT_KILL


@dataclass
class Brat(_Body):
    """A baby rat: faster, worth less, chases without needing line of sight."""
    distance: int = 0

    kind: ClassVar[Kind] = Kind.BRAT
    interval: ClassVar[int] = BRAT_UPDATE_MS
    points: ClassVar[int] = BRAT_KILL


@dataclass
class Factory(_Body):
    kind: ClassVar[Kind] = Kind.FACTORY
    interval: ClassVar[int] = FACTORY_UPDATE_MS
    points: ClassVar[int] = FACTORY_KILL
    quad: ClassVar[bool] = True


@dataclass
class Bullet(_Body):
    lifetime: int = 0   # ticks since fired

    kind: ClassVar[Kind] = Kind.BULLET
    interval: ClassVar[int] = BULLET_UPDATE_MS


Entity = Union[Player, Rat, Brat, Factory, Bullet]
