"""
Bullet hit-testing and collateral blasts.
NO UI DEPENDENCIES.

These passes mutate entities in place (explode) but never remove them;
the caller sweeps spent bullets afterwards in descending index order.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .entities import Entity, Bullet, Player, Rat, Brat, State
from .grid import Dimensions, Direction, Position, UP_LEFT, UP_RIGHT, DOWN_LEFT, DOWN_RIGHT
from .constants import BULLET_HARMLESS_TICKS, BLAST_RADIUS_SQUARED


@dataclass(frozen=True)
class Hit:
    """A bullet that struck an entity."""
    bullet_index: int
    target_index: int


# Muzzle offsets for a 2x2 firer, relative to its top-left cell
QUAD_MUZZLE = {
    Direction.UP: (-1, 1),
    Direction.DOWN: (2, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 2),
    UP_LEFT: (-1, -1),
    UP_RIGHT: (-1, 2),
    DOWN_LEFT: (1, -1),
    DOWN_RIGHT: (1, 2),
}


def muzzle_position(pos: Position, direction: Direction, dims: Dimensions, quad: bool) -> Optional[Position]:
    """
    Cell a new bullet appears in, just ahead of the firer.
    Returns None when direction has no effective bits.
    """
    direction = direction.effective()
    if not direction:
        return None
    if not quad:
        return pos.advance(direction, dims)
    drow, dcol = QUAD_MUZZLE[direction]
    return Position((pos.row + drow) % dims.rows, (pos.col + dcol) % dims.cols)


def bullet_hits(bullet: Bullet, bullet_index: int, target: Entity, target_index: int, dims: Dimensions) -> bool:
    """
    Check a single bullet against a single entity.
    A fresh bullet cannot hit the player, so it is not credited with
    killing its own firer when both move in the same frame.
    """
    if bullet_index == target_index:
        raise ValueError(f"bullet {bullet_index} tested against itself")
    if isinstance(target, Player) and bullet.lifetime < BULLET_HARMLESS_TICKS:
        return False
    return target.hit(bullet.pos, dims)


def resolve_bullet_hits(entities: Sequence[Entity], dims: Dimensions) -> List[Hit]:
    """
    Test every live bullet against every other entity.

    Bullets are checked newest first. The first entity a bullet hits is
    exploded; an entity that already exploded this pass cannot be hit again,
    so two bullets on the same target resolve to one kill.
    """
    hits: List[Hit] = []
    spent = set()
    bullet_indices = [
        i for i, e in enumerate(entities)
        if isinstance(e, Bullet) and e.state is State.ALIVE
    ]
    for bullet_index in reversed(bullet_indices):
        bullet = entities[bullet_index]
        if bullet.state is not State.ALIVE:
            continue
        for target_index, target in enumerate(entities):
            if target_index == bullet_index or target_index in spent:
                continue
            if bullet_hits(bullet, bullet_index, target, target_index, dims):
                target.explode()
                hits.append(Hit(bullet_index, target_index))
                spent.add(bullet_index)
                break
    return hits


def collateral_blast(entities: Sequence[Entity], dims: Dimensions) -> List[int]:
    """
    While the player is down, explode every nearby rat, brat and bullet.
    Returns the indices exploded. Nothing is scored.
    """
    player = entities[0]
    if player.state is State.ALIVE:
        return []
    exploded = []
    for index, entity in enumerate(entities):
        if not isinstance(entity, (Rat, Brat, Bullet)) or entity.state is not State.ALIVE:
            continue
        if entity.pos.distance_squared(player.pos, dims) < BLAST_RADIUS_SQUARED:
            entity.explode()
            exploded.append(index)
    return exploded
