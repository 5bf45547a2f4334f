"""
Per-entity update scheduler.
NO UI DEPENDENCIES.

decide() looks at one entity and returns the Action it wants this frame.
It never mutates the entity or the entity list, so every entity in a frame
sees the same world.
"""
import random
from dataclasses import dataclass, replace
from typing import Callable, Dict, Type

from .actions import Action, Attack, New, Update, NOTHING, DELETE
from .entities import Entity, Player, Rat, Brat, Factory, Bullet, State
from .grid import Direction, Position, CARDINALS
from .maze import Maze
from .constants import (
    WANDER_MIN_STEPS, WANDER_MAX_STEPS, DETECT_RADIUS_SQUARED, BREED_CHANCE,
)


@dataclass
class UpdateContext:
    """Everything a decision may read. Built once per frame."""
    maze: Maze
    player: Player
    now: int
    rng: random.Random
    spawn_rats: bool = False
    spawn_brats: bool = False
    rat_damage: int = 0
    brat_damage: int = 0


# =============================================================================
# MOVEMENT
# =============================================================================

def can_advance(maze: Maze, pos: Position, direction: Direction, quad: bool = False) -> bool:
    """
    Check if moving from pos along direction stays off walls.
    Only the cells that become newly occupied are sampled.
    """
    if not direction:
        return False
    dims = maze.dimensions
    new = pos.advance(direction, dims)
    if not quad:
        return not maze.is_wall(new.row, new.col)

    top_left, top_right, bottom_left, bottom_right = new.quad(dims)
    edges = {
        Direction.UP: (top_left, top_right),
        Direction.DOWN: (bottom_left, bottom_right),
        Direction.LEFT: (top_left, bottom_left),
        Direction.RIGHT: (top_right, bottom_right),
    }
    for bit in direction.components():
        for cell in edges[bit]:
            if maze.is_wall(cell.row, cell.col):
                return False
    return True


def move_player(maze: Maze, player: Player) -> Position:
    """
    Move the player one step, sliding along walls.
    If the combined direction is blocked each component is tried on its own.
    """
    direction = player.dir.effective()
    pos = player.pos
    if not direction:
        return pos
    if can_advance(maze, pos, direction, quad=True):
        return pos.advance(direction, maze.dimensions)
    for bit in direction.components():
        if can_advance(maze, pos, bit, quad=True):
            pos = pos.advance(bit, maze.dimensions)
    return pos


def line_of_sight(maze: Maze, start: Position, direction: Direction, player: Player) -> bool:
    """Check for a straight, wall-free run from start to the player's footprint."""
    dims = maze.dimensions
    limit = max(dims.rows, dims.cols)
    pos = start
    for _ in range(limit):
        if player.hit(pos, dims):
            return True
        if maze.is_wall(pos.row, pos.col):
            return False
        pos = pos.advance(direction, dims)
    return False


def _explosion_step(entity: Entity, now: int) -> Action:
    """Exploding1 -> Exploding2 -> Exploding3 -> Dead at twice the normal pace."""
    return Update(replace(entity, state=entity.state.next(), next_update=now + entity.interval // 2))


def _touching_player(pos: Position, ctx: UpdateContext) -> bool:
    return ctx.player.hit(pos, ctx.maze.dimensions)


def _wander(enemy, ctx: UpdateContext, needs_sight: bool):
    """Chase the player when close, otherwise walk and re-roll on walls."""
    dims = ctx.maze.dimensions
    direction = enemy.dir
    distance = enemy.distance
    pos = enemy.pos

    if ctx.player.alive and pos.distance_squared(ctx.player.pos, dims) < DETECT_RADIUS_SQUARED:
        chase = pos.direction_to(ctx.player.pos, dims)
        if not needs_sight or line_of_sight(ctx.maze, pos, chase, ctx.player):
            direction = chase

    if distance <= 0 or direction not in CARDINALS or not can_advance(ctx.maze, pos, direction):
        direction = ctx.rng.choice(CARDINALS)
        distance = ctx.rng.randint(WANDER_MIN_STEPS, WANDER_MAX_STEPS)
    else:
        pos = pos.advance(direction, dims)
        distance -= 1

    return replace(
        enemy,
        pos=pos,
        dir=direction,
        distance=distance,
        cycle=(enemy.cycle + 1) & 0x3,
        next_update=ctx.now + enemy.interval,
    )


# =============================================================================
# PER-KIND DECISIONS
# =============================================================================

def update_player(player: Player, ctx: UpdateContext) -> Action:
    if player.state is State.ALIVE:
        return Update(replace(
            player,
            pos=move_player(ctx.maze, player),
            cycle=(player.cycle + 1) & 0x3,
            next_update=ctx.now + player.interval,
        ))
    if player.state is State.EXPLODING3:
        # Dead lasts a full cooldown before respawn
        return Update(replace(player, state=State.DEAD, next_update=ctx.now + player.interval * 2))
    if player.state is State.DEAD:
        return Update(replace(player, state=State.ALIVE, next_update=ctx.now + player.interval))
    return _explosion_step(player, ctx.now)


def update_rat(rat: Rat, ctx: UpdateContext) -> Action:
    if rat.state is State.DEAD:
        return DELETE
    if rat.state is not State.ALIVE:
        return _explosion_step(rat, ctx.now)

    if _touching_player(rat.pos, ctx):
        return Attack(ctx.rat_damage)
    if ctx.spawn_brats and ctx.rng.random() < BREED_CHANCE:
        return New(Brat(
            pos=rat.pos,
            dir=ctx.rng.choice(CARDINALS),
            distance=ctx.rng.randint(WANDER_MIN_STEPS, WANDER_MAX_STEPS),
            next_update=ctx.now,
        ))
    return Update(_wander(rat, ctx, needs_sight=True))


def update_brat(brat: Brat, ctx: UpdateContext) -> Action:
    if brat.state is State.DEAD:
        return DELETE
    if brat.state is not State.ALIVE:
        return _explosion_step(brat, ctx.now)

    if _touching_player(brat.pos, ctx):
        return Attack(ctx.brat_damage)
    return Update(_wander(brat, ctx, needs_sight=False))


def update_factory(factory: Factory, ctx: UpdateContext) -> Action:
    if factory.state is State.DEAD:
        return DELETE
    if factory.state is not State.ALIVE:
        return _explosion_step(factory, ctx.now)

    if ctx.spawn_rats:
        return New(Rat(
            pos=factory.pos,
            dir=ctx.rng.choice(CARDINALS),
            distance=ctx.rng.randint(WANDER_MIN_STEPS, WANDER_MAX_STEPS),
            next_update=ctx.now,
        ))
    return Update(replace(
        factory,
        cycle=(factory.cycle + 1) & 0x1,
        next_update=ctx.now + factory.interval,
    ))


def update_bullet(bullet: Bullet, ctx: UpdateContext) -> Action:
    if bullet.state is State.DEAD:
        return DELETE
    if bullet.state is not State.ALIVE:
        return _explosion_step(bullet, ctx.now)

    pos = bullet.pos.advance(bullet.dir, ctx.maze.dimensions)
    if ctx.maze.is_wall(pos.row, pos.col):
        return DELETE
    return Update(replace(
        bullet,
        pos=pos,
        lifetime=bullet.lifetime + 1,
        next_update=ctx.now + bullet.interval,
    ))


_DECIDERS: Dict[Type, Callable[..., Action]] = {
    Player: update_player,
    Rat: update_rat,
    Brat: update_brat,
    Factory: update_factory,
    Bullet: update_bullet,
}


def decide(entity: Entity, ctx: UpdateContext) -> Action:
    """Decision for one entity this frame. Nothing until its timer is due."""
    if ctx.now < entity.next_update:
        return NOTHING
    return _DECIDERS[type(entity)](entity, ctx)
