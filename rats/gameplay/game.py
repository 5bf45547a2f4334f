"""
Main Game class - orchestrates all gameplay systems.
NO UI DEPENDENCIES.

This is the central gameplay module. It can be fully tested
without any UI framework.
"""
import logging
import math
import random
from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple

from rats.config import GameSettings, get_settings

from .actions import Action, Attack, Delete, New, Update
from .behavior import UpdateContext, decide
from .combat import muzzle_position, resolve_bullet_hits, collateral_blast
from .entities import Entity, Kind, Player, Rat, Brat, Factory, Bullet, State
from .grid import Direction, Position
from .maze import Maze
from .placement import place_factories
from .sounds import SoundEffects, SilentSounds
from .constants import (
    MAZE_CELL_ROWS, MAZE_CELL_COLS, MAX_HEALTH, PLAYER_FIRE_RATE_MS,
    RAT_SPAWN_MS, BRAT_SPAWN_MS, RATS_PER_FACTORY, BRATS_PER_RAT,
    SUPER_BOOM_FRAMES,
)

logger = logging.getLogger(__name__)

# Kinds tracked by the live/dead counters
COUNTED_KINDS = (Kind.RAT, Kind.BRAT, Kind.FACTORY)


class GamePhase(Enum):
    """Current phase of the session."""
    RUNNING = auto()    # Simulation advancing
    PAUSED = auto()     # Frozen, still rendered
    FINISHED = auto()   # Maze cleared or lives exhausted
    RESTART = auto()    # Reset pending for the next frame
    QUIT = auto()       # Terminal


@dataclass
class GameEvent:
    """An event that occurred during gameplay (for UI to react to)."""
    pass


@dataclass
class PhaseChangedEvent(GameEvent):
    """Session phase changed."""
    old_phase: GamePhase
    new_phase: GamePhase


@dataclass
class KillEvent(GameEvent):
    """An enemy was destroyed."""
    kind: Kind
    points: int


@dataclass
class PlayerHitEvent(GameEvent):
    """Player took damage from a rat or brat."""
    damage: int
    health: int


@dataclass
class LifeLostEvent(GameEvent):
    """Player exploded."""
    lives_left: int


class Game:
    """
    A single play session.

    This class is COMPLETELY DECOUPLED from UI.
    It exposes state as plain data and accepts intents as method calls.

    Usage:
        game = Game()
        game.start_moving(Direction.RIGHT)
        while game.phase != GamePhase.QUIT:
            events = game.update(dt_ms)
            # UI reads game state and renders
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
        sounds: Optional[SoundEffects] = None,
        maze: Optional[Maze] = None,
        player_start: Optional[Position] = None,
    ):
        self.settings = settings if settings is not None else get_settings()
        self.rng = rng if rng is not None else random.Random(self.settings.seed)
        self.sounds: SoundEffects = sounds if sounds is not None else SilentSounds()

        # A fixed maze survives restarts; otherwise each reset draws a new one
        self._fixed_maze = maze
        self._player_start = player_start or Position(MAZE_CELL_ROWS // 2, MAZE_CELL_COLS // 2)

        self.phase = GamePhase.RUNNING
        self._events: List[GameEvent] = []
        self.diagnostics = False
        self._reset()

    def _reset(self) -> None:
        """Full session reset: new maze, new player, fresh counters."""
        if self._fixed_maze is not None:
            self.maze = self._fixed_maze
        else:
            self.maze = Maze(self.settings.maze_height, self.settings.maze_width)
            self.maze.generate(self.settings.density, self.rng)

        self.entities: List[Entity] = [Player(pos=self._player_start)]

        # Counters
        self.score = 0
        self.health = MAX_HEALTH
        self.lives = self.settings.lives
        self.live: Counter = Counter()
        self.dead: Counter = Counter()
        self.spawned: Counter = Counter()
        self.new_rats = 0
        self.new_brats = 0

        # Clock
        self.elapsed = 0
        self.frames = 0
        self.next_fire_time = 0
        self.rat_spawn_due = 0
        self.brat_spawn_due = BRAT_SPAWN_MS

        # Intents and effects
        self.firing_dir = Direction.NONE
        self.super_boom = 0

        for pos in place_factories(self.maze, self.settings.factories, self._player_start, self.rng):
            self.spawn(Factory(pos=pos))

        self.phase = GamePhase.RUNNING
        logger.info(
            f"Session started: {self.maze!r}, {self.live[Kind.FACTORY]} factories, "
            f"{self.lives} lives"
        )

    # =========================================================================
    # ENTITY LIST
    # =========================================================================

    @property
    def player(self) -> Player:
        """The player, always at index 0."""
        if not self.entities or not isinstance(self.entities[0], Player):
            raise RuntimeError("entity list lost its player at index 0")
        return self.entities[0]

    def spawn(self, entity: Entity) -> int:
        """Append an entity and count it. Returns its index."""
        self.entities.append(entity)
        if entity.kind in COUNTED_KINDS:
            self.live[entity.kind] += 1
            self.spawned[entity.kind] += 1
        return len(self.entities) - 1

    def _remove(self, index: int) -> None:
        """Swap-remove. Moves the last entity into index."""
        if index == 0:
            raise RuntimeError("the player cannot be removed from the entity list")
        last = len(self.entities) - 1
        self.entities[index] = self.entities[last]
        self.entities.pop()

    # =========================================================================
    # INTENTS
    # =========================================================================

    def start_moving(self, direction: Direction) -> None:
        player = self.player
        player.dir |= direction
        effective = player.dir.effective()
        if effective:
            player.stop_dir = effective.stop()

    def stop_moving(self, direction: Direction) -> None:
        player = self.player
        player.dir = player.dir.without(direction)

    def start_firing(self, direction: Direction) -> None:
        """Add a firing direction. A newly pressed direction fires at once."""
        if not self.firing_dir & direction:
            self.firing_dir |= direction
            self.fire()

    def stop_firing(self, direction: Direction) -> None:
        self.firing_dir = self.firing_dir.without(direction)

    def pause(self) -> None:
        """Toggle between RUNNING and PAUSED."""
        if self.phase == GamePhase.RUNNING:
            self._set_phase(GamePhase.PAUSED)
        elif self.phase == GamePhase.PAUSED:
            self._set_phase(GamePhase.RUNNING)

    def quit(self) -> None:
        if self.phase != GamePhase.QUIT:
            self._set_phase(GamePhase.QUIT)

    def restart(self) -> None:
        """Request a full reset. Takes effect at the top of the next frame."""
        if self.phase != GamePhase.QUIT:
            self._set_phase(GamePhase.RESTART)

    def toggle_diagnostics(self) -> None:
        self.diagnostics = not self.diagnostics

    def _set_phase(self, new_phase: GamePhase) -> None:
        old_phase = self.phase
        self.phase = new_phase
        self._events.append(PhaseChangedEvent(old_phase, new_phase))
        logger.info(f"Phase {old_phase.name} -> {new_phase.name}")

    # =========================================================================
    # FIRING
    # =========================================================================

    def fire(self) -> bool:
        """
        Fire one bullet in the current firing direction.

        Anything standing on the muzzle cell explodes at once and no bullet
        is created. Returns True if a shot went off.
        """
        if self.phase != GamePhase.RUNNING:
            return False
        player = self.player
        if not player.alive or self.elapsed < self.next_fire_time:
            return False

        direction = self.firing_dir.effective()
        dims = self.maze.dimensions
        pos = muzzle_position(player.pos, direction, dims, quad=player.quad)
        if pos is None or self.maze.is_wall(pos.row, pos.col):
            return False

        self.next_fire_time = self.elapsed + PLAYER_FIRE_RATE_MS
        self.sounds.play_gunshot()

        for entity in self.entities[1:]:
            if entity.hit(pos, dims):
                entity.explode()
                self.sounds.play_impact()
                self._on_exploded(entity, scored=True)
                return True

        self.spawn(Bullet(pos=pos, dir=direction, next_update=self.elapsed + Bullet.interval))
        return True

    # =========================================================================
    # UPDATE LOOP
    # =========================================================================

    def update(self, dt_ms: int) -> List[GameEvent]:
        """
        Advance the session by dt_ms milliseconds.
        Returns list of events that occurred since the last call,
        including those raised by intents in between.
        """
        self._step(dt_ms)
        events, self._events = self._events, []
        return events

    def _step(self, dt_ms: int) -> None:
        if self.phase == GamePhase.RESTART:
            logger.info("Restarting session")
            self._reset()
            self._events.append(PhaseChangedEvent(GamePhase.RESTART, GamePhase.RUNNING))

        if self.phase != GamePhase.RUNNING:
            # PAUSED, FINISHED and QUIT freeze the clock
            return

        self.elapsed += dt_ms
        self.frames += 1
        now = self.elapsed
        if self.super_boom > 0:
            self.super_boom -= 1

        actions = self._schedule(now)
        self._apply(actions, now)
        self._check_health()
        self._hit_test()
        self._collateral_blast()
        self._auto_fire()
        self._spawn_timers(now)
        self._check_finished()

    def _schedule(self, now: int) -> List[Action]:
        """One decision per entity, all against the same snapshot."""
        ctx = UpdateContext(
            maze=self.maze,
            player=self.player,
            now=now,
            rng=self.rng,
            spawn_rats=self.new_rats > 0,
            spawn_brats=self.new_brats > 0,
            rat_damage=self.settings.rat_damage,
            brat_damage=self.settings.brat_damage,
        )
        return [decide(entity, ctx) for entity in self.entities]

    def _apply(self, actions: List[Action], now: int) -> None:
        """Commit decisions in descending index order so swap-removes stay safe."""
        for index in reversed(range(len(actions))):
            action = actions[index]
            if isinstance(action, Update):
                if index == 0:
                    self._on_player_update(action.entity)
                self.entities[index] = action.entity
            elif isinstance(action, Delete):
                self._remove(index)
            elif isinstance(action, New):
                self._accept_spawn(action.entity)
            elif isinstance(action, Attack):
                self._attack(index, action.damage, now)

    def _on_player_update(self, new: Player) -> None:
        if self.player.state is State.DEAD and new.state is State.ALIVE:
            self.health = MAX_HEALTH
            logger.debug(f"Player respawned at {new.pos}")

    def _accept_spawn(self, entity: Entity) -> None:
        """Append a spawn if its pending counter allows it, else drop it."""
        if isinstance(entity, Rat):
            if self.new_rats <= 0:
                return
            self.new_rats -= 1
        elif isinstance(entity, Brat):
            if self.new_brats <= 0:
                return
            self.new_brats -= 1
        self.spawn(entity)

    def _attack(self, index: int, damage: int, now: int) -> None:
        attacker = self.entities[index]
        self.entities[index] = replace(attacker, next_update=now + attacker.interval)

        player = self.player
        if not player.alive:
            return
        self.health = max(0, self.health - damage)
        self.sounds.play_impact()
        self._events.append(PlayerHitEvent(damage, self.health))

    def _check_health(self) -> None:
        """Explode the player once attacks have drained its health."""
        player = self.player
        if player.alive and self.health == 0:
            player.explode()
            self._on_exploded(player, scored=False)

    def _hit_test(self) -> None:
        hits = resolve_bullet_hits(self.entities, self.maze.dimensions)
        for hit in hits:
            self.sounds.play_impact()
            self._on_exploded(self.entities[hit.target_index], scored=True)
        for index in sorted({hit.bullet_index for hit in hits}, reverse=True):
            self._remove(index)

    def _collateral_blast(self) -> None:
        for index in collateral_blast(self.entities, self.maze.dimensions):
            self._on_exploded(self.entities[index], scored=False)

    def _on_exploded(self, entity: Entity, scored: bool) -> None:
        """Bookkeeping for an entity that just went from ALIVE to EXPLODING1."""
        if isinstance(entity, Player):
            self.lives -= 1
            self.health = 0
            self.super_boom = SUPER_BOOM_FRAMES
            self.sounds.play_long_explosion()
            self._events.append(LifeLostEvent(self.lives))
            logger.info(f"Player down, {self.lives} lives left")
            return

        if entity.kind in COUNTED_KINDS:
            self.live[entity.kind] -= 1
            self.dead[entity.kind] += 1
        if scored and entity.points:
            self.score += entity.points
            self._events.append(KillEvent(entity.kind, entity.points))

        if isinstance(entity, Factory):
            self.super_boom = SUPER_BOOM_FRAMES
            self.sounds.play_long_explosion()
        elif not isinstance(entity, Bullet):
            self.sounds.play_short_explosion()

    def _auto_fire(self) -> None:
        if self.firing_dir and self.elapsed >= self.next_fire_time:
            self.fire()

    def _spawn_timers(self, now: int) -> None:
        """
        Refill pending spawns.
        Rats are refilled from the starting factory count, so surviving
        factories pick up the pace as others are destroyed.
        """
        if now >= self.rat_spawn_due:
            self.new_rats = self.spawned[Kind.FACTORY] * RATS_PER_FACTORY
            self.rat_spawn_due = now + RAT_SPAWN_MS
        if now >= self.brat_spawn_due:
            self.new_brats = math.ceil(self.live[Kind.RAT] * BRATS_PER_RAT)
            self.brat_spawn_due = now + BRAT_SPAWN_MS

    def _check_finished(self) -> None:
        if self.lives <= 0 and self.player.state is State.DEAD:
            self._set_phase(GamePhase.FINISHED)
            return
        hazards = sum(self.live[kind] for kind in COUNTED_KINDS)
        if self.spawned[Kind.FACTORY] > 0 and hazards == 0:
            self._set_phase(GamePhase.FINISHED)

    # =========================================================================
    # STATE QUERIES (for UI to read)
    # =========================================================================

    def get_entities(self) -> Tuple[Entity, ...]:
        """Read-only snapshot of the entity list. Index 0 is the player."""
        return tuple(self.entities)

    def player_position(self) -> Position:
        return self.player.pos

    def get_counts(self) -> Dict[str, Tuple[int, int]]:
        """Get {kind: (live, dead)} for the counted kinds."""
        return {kind.name: (self.live[kind], self.dead[kind]) for kind in COUNTED_KINDS}

    def status(self) -> dict:
        """Plain-data summary for HUDs."""
        return {
            'phase': self.phase.name,
            'score': self.score,
            'health': self.health,
            'lives': self.lives,
            'counts': self.get_counts(),
            'super_boom': self.super_boom,
            'diagnostics': self.diagnostics,
            'elapsed_ms': self.elapsed,
            'frames': self.frames,
        }

    # =========================================================================
    # CONVENIENCE METHODS FOR TESTING
    # =========================================================================

    def simulate(self, ms: int, dt_ms: int = 10) -> List[GameEvent]:
        """
        Run the session for ms milliseconds in dt_ms frames.
        Returns all events that occurred.
        """
        all_events = []
        elapsed = 0
        while elapsed < ms and self.phase == GamePhase.RUNNING:
            all_events.extend(self.update(dt_ms))
            elapsed += dt_ms
        return all_events
