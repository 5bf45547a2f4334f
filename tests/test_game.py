"""
END-TO-END GAMEPLAY TESTS

These tests drive a whole session through its public surface:
- Phase changes: pause, restart, quit, game over
- Firing, bullets and scoring
- Rats attacking, the player dying and respawning
- Spawn counters feeding factories and breeding

NO UI DEPENDENCIES - pure gameplay logic testing.
"""
import random

import pytest
from rats.config import GameSettings
from rats.gameplay.game import (
    Game, GamePhase, PhaseChangedEvent, KillEvent, PlayerHitEvent, LifeLostEvent,
)
from rats.gameplay.entities import Kind, Player, Rat, Brat, Factory, Bullet, State
from rats.gameplay.grid import Direction, Position, UP_LEFT
from rats.gameplay.maze import Maze
from rats.gameplay.constants import MAX_HEALTH, SUPER_BOOM_FRAMES, PLAYER_FIRE_RATE_MS

from conftest import open_layout

# Parks an entity so the scheduler never gets to it during a test
FROZEN = 10 ** 9


class TestSessionSetup:
    """Tests for a fresh session."""

    def test_initial_state(self, game):
        """The player is alone at index 0 with full health."""
        assert isinstance(game.entities[0], Player)
        assert game.player.pos == Position(10, 10)
        assert game.phase == GamePhase.RUNNING
        assert game.score == 0
        assert game.health == MAX_HEALTH
        assert game.lives == 3

    def test_status_is_plain_data(self, game):
        status = game.status()
        assert status['phase'] == 'RUNNING'
        assert status['score'] == 0
        assert status['counts'] == {'RAT': (0, 0), 'BRAT': (0, 0), 'FACTORY': (0, 0)}

    def test_generated_session_places_factories(self):
        """Without a fixed maze a seeded session builds its own maze and factories."""
        settings = GameSettings(maze_height=4, maze_width=4, factories=3, seed=5)
        game = Game(settings=settings)
        factories = [e for e in game.entities if isinstance(e, Factory)]
        assert 0 < len(factories) <= 3
        for factory in factories:
            assert not game.maze.is_wall_quad(factory.pos.row, factory.pos.col)
        assert game.live[Kind.FACTORY] == len(factories)

    def test_seeded_sessions_match(self):
        settings = GameSettings(maze_height=4, maze_width=4, factories=3, seed=5)
        first = Game(settings=settings)
        second = Game(settings=settings)
        assert first.maze.lines() == second.maze.lines()
        assert [e.pos for e in first.entities] == [e.pos for e in second.entities]

    def test_player_is_required_at_index_zero(self, game):
        """Losing the player from index 0 is a programming error."""
        game.entities[0] = Rat(pos=Position(1, 1))
        with pytest.raises(RuntimeError):
            _ = game.player

    def test_player_cannot_be_removed(self, game):
        with pytest.raises(RuntimeError):
            game._remove(0)


class TestPhases:
    """Tests for the session state machine."""

    def test_pause_freezes_time(self, game):
        """While paused, updates do not advance the clock."""
        game.pause()
        events = game.update(100)
        assert game.phase == GamePhase.PAUSED
        assert game.elapsed == 0
        assert PhaseChangedEvent(GamePhase.RUNNING, GamePhase.PAUSED) in events

        game.pause()
        game.update(100)
        assert game.phase == GamePhase.RUNNING
        assert game.elapsed == 100

    def test_restart_takes_effect_next_frame(self, game):
        """restart() is only a request; the reset happens in update()."""
        game.spawn(Rat(pos=Position(2, 2), next_update=FROZEN))
        game.score = 500
        game.restart()
        assert game.phase == GamePhase.RESTART
        assert len(game.entities) == 2

        events = game.update(10)
        assert game.phase == GamePhase.RUNNING
        assert game.score == 0
        assert len(game.entities) == 1
        assert game.elapsed == 10
        assert PhaseChangedEvent(GamePhase.RESTART, GamePhase.RUNNING) in events

    def test_restart_draws_new_maze(self):
        settings = GameSettings(maze_height=3, maze_width=3, factories=0, seed=9)
        game = Game(settings=settings)
        old = game.maze
        game.restart()
        game.update(10)
        assert game.maze is not old

    def test_quit_is_terminal(self, game):
        game.quit()
        game.pause()
        game.restart()
        game.update(100)
        assert game.phase == GamePhase.QUIT
        assert game.elapsed == 0

    def test_diagnostics_toggle(self, game):
        assert not game.status()['diagnostics']
        game.toggle_diagnostics()
        assert game.status()['diagnostics']
        game.toggle_diagnostics()
        assert not game.status()['diagnostics']


class TestMovementIntents:
    """Tests for steering the player."""

    def test_start_moving(self, game):
        game.start_moving(Direction.RIGHT)
        game.update(10)
        assert game.player.pos == Position(10, 11)
        assert game.player.stop_dir == Direction.RIGHT

    def test_diagonal_stop_direction(self, game):
        """Idle facing after a diagonal follows the horizontal axis."""
        game.start_moving(Direction.UP)
        game.start_moving(Direction.LEFT)
        assert game.player.dir == UP_LEFT
        assert game.player.stop_dir == Direction.LEFT

    def test_stop_moving(self, game):
        game.start_moving(Direction.RIGHT)
        game.stop_moving(Direction.RIGHT)
        game.update(10)
        assert game.player.pos == Position(10, 10)
        assert game.player.facing() == Direction.RIGHT

    def test_player_moves_at_its_own_pace(self, game):
        """The player steps once per 50 ms however often update() is called."""
        game.start_moving(Direction.DOWN)
        game.simulate(100, dt_ms=10)
        # Steps at 10, 60
        assert game.player.pos == Position(12, 10)


class TestFiring:
    """Tests for firing and bullets."""

    def test_fire_spawns_bullet_ahead(self, game, sounds):
        """A shot appears just past the player's edge and flies that way."""
        game.start_firing(Direction.RIGHT)
        bullet = game.entities[1]
        assert isinstance(bullet, Bullet)
        assert bullet.pos == Position(10, 12)
        assert bullet.dir == Direction.RIGHT
        assert sounds.played == ["gunshot"]

    def test_fire_rate_limit(self, game, sounds):
        """Holding fire shoots eight times a second, not every frame."""
        game.start_firing(Direction.RIGHT)
        game.simulate(250, dt_ms=10)
        assert sounds.played.count("gunshot") == 2
        assert game.next_fire_time == 130 + PLAYER_FIRE_RATE_MS

    def test_new_direction_fires_at_once(self, game, sounds):
        """Pressing a second direction shoots immediately if the rate allows."""
        game.start_firing(Direction.RIGHT)
        game.stop_firing(Direction.RIGHT)
        game.simulate(PLAYER_FIRE_RATE_MS + 10, dt_ms=10)
        game.start_firing(Direction.UP)
        assert sounds.played.count("gunshot") == 2

    def test_no_shot_into_wall(self, settings, sounds):
        layout = open_layout()
        layout[10] = layout[10][:12] + '#' + layout[10][13:]
        game = Game(
            settings=settings, sounds=sounds,
            maze=Maze.from_text(layout), player_start=Position(10, 10),
        )
        game.start_firing(Direction.RIGHT)
        assert len(game.entities) == 1
        assert sounds.played == []

    def test_no_shot_while_dead(self, game, sounds):
        game.player.explode()
        game.start_firing(Direction.RIGHT)
        assert len(game.entities) == 1

    def test_point_blank_hit(self, game, sounds):
        """Something on the muzzle cell explodes at once and no bullet is made."""
        game.spawn(Rat(pos=Position(10, 12), next_update=FROZEN))
        game.start_firing(Direction.RIGHT)
        assert len(game.entities) == 2
        assert game.entities[1].state is State.EXPLODING1
        assert game.score == 50
        assert game.get_counts()['RAT'] == (0, 1)
        assert "impact" in sounds.played

    def test_bullet_kills_rat(self, game):
        """A bullet flies down the corridor and scores on contact."""
        game.spawn(Rat(pos=Position(10, 20), next_update=FROZEN))
        game.start_firing(Direction.RIGHT)
        game.stop_firing(Direction.RIGHT)
        events = game.simulate(100, dt_ms=10)
        assert game.score == 50
        assert KillEvent(Kind.RAT, 50) in events
        assert not any(isinstance(e, Bullet) for e in game.entities)

    def test_bullet_wraps_and_hits_player(self, game):
        """A bullet that circles the torus can hit its own firer, scoring nothing."""
        game.start_firing(Direction.RIGHT)
        game.stop_firing(Direction.RIGHT)
        events = game.simulate(400, dt_ms=10)
        assert game.lives == 2
        assert game.score == 0
        assert LifeLostEvent(2) in events


class TestScoring:
    """Tests for score and counters."""

    def test_score_accounting(self, game):
        """Each kind scores its own value and counts one death."""
        game.spawn(Rat(pos=Position(10, 12), next_update=FROZEN))
        game.spawn(Brat(pos=Position(9, 11), next_update=FROZEN))
        game.start_firing(Direction.RIGHT)
        game.stop_firing(Direction.RIGHT)
        game.simulate(PLAYER_FIRE_RATE_MS + 10, dt_ms=10)
        game.start_firing(Direction.UP)
        assert game.score == 50 + 25
        counts = game.get_counts()
        assert counts['RAT'] == (0, 1)
        assert counts['BRAT'] == (0, 1)

    def test_factory_kill_sets_super_boom(self, game, sounds):
        game.spawn(Factory(pos=Position(10, 12), next_update=FROZEN))
        game.start_firing(Direction.RIGHT)
        assert game.score == 250
        assert game.super_boom == SUPER_BOOM_FRAMES
        assert "long_explosion" in sounds.played

    def test_clearing_the_maze_finishes(self, game):
        """With the last factory gone and no rats left the session is over."""
        game.spawn(Factory(pos=Position(10, 12), next_update=FROZEN))
        game.start_firing(Direction.RIGHT)
        game.stop_firing(Direction.RIGHT)
        game.update(10)
        assert game.phase == GamePhase.FINISHED

    def test_live_rats_keep_session_going(self, game):
        game.spawn(Factory(pos=Position(10, 12), next_update=FROZEN))
        game.spawn(Rat(pos=Position(2, 30), next_update=FROZEN))
        game.start_firing(Direction.RIGHT)
        game.stop_firing(Direction.RIGHT)
        game.update(10)
        assert game.phase == GamePhase.RUNNING

    def test_live_brats_keep_session_going(self, game):
        """Brats count as rats when deciding the maze is clear."""
        game.spawn(Factory(pos=Position(10, 12), next_update=FROZEN))
        game.spawn(Brat(pos=Position(2, 30), next_update=FROZEN))
        game.start_firing(Direction.RIGHT)
        game.stop_firing(Direction.RIGHT)
        game.update(10)
        assert game.phase == GamePhase.RUNNING


class TestDamage:
    """Tests for rats hurting the player."""

    def test_attack_costs_health(self, game, sounds):
        game.spawn(Rat(pos=Position(11, 11)))
        events = game.update(10)
        assert game.health == MAX_HEALTH - 10
        assert PlayerHitEvent(10, MAX_HEALTH - 10) in events
        # The attacker waits a full interval before striking again
        assert game.entities[1].next_update == 10 + Rat.interval

    def test_brat_damage(self, game):
        game.spawn(Brat(pos=Position(10, 10)))
        game.update(10)
        assert game.health == MAX_HEALTH - 5

    def test_death_costs_a_life_and_blasts_neighbours(self, game):
        """At zero health the player explodes; nearby rats go with it, unscored."""
        game.health = 10
        game.spawn(Rat(pos=Position(11, 11)))
        events = game.update(10)
        assert game.lives == 2
        assert game.player.state is State.EXPLODING1
        assert LifeLostEvent(2) in events
        assert game.entities[1].state is State.EXPLODING1
        assert game.score == 0
        assert game.get_counts()['RAT'] == (0, 1)

    def test_respawn_restores_health(self, game):
        game.health = 10
        game.spawn(Rat(pos=Position(11, 11)))
        game.simulate(300, dt_ms=10)
        assert game.player.alive
        assert game.health == MAX_HEALTH
        assert game.lives == 2

    def test_last_life_finishes(self, open_maze):
        settings = GameSettings(factories=0, lives=1)
        game = Game(settings=settings, rng=random.Random(0), maze=open_maze, player_start=Position(10, 10))
        game.health = 5
        game.spawn(Rat(pos=Position(11, 11)))
        game.simulate(1000, dt_ms=10)
        assert game.phase == GamePhase.FINISHED
        assert game.player.state is State.DEAD

        frozen_at = game.elapsed
        game.update(100)
        assert game.elapsed == frozen_at

        game.restart()
        game.update(10)
        assert game.phase == GamePhase.RUNNING
        assert game.lives == 1
        assert game.health == MAX_HEALTH


class TestSpawning:
    """Tests for pending spawn counters."""

    def test_factory_emits_pending_rats(self, game):
        game.spawn(Factory(pos=Position(2, 30)))
        game.simulate(300, dt_ms=10)
        assert game.live[Kind.RAT] == 1
        assert game.new_rats == 0

    def test_spawns_beyond_pending_are_dropped(self, game):
        """Two factories, one pending rat: only one rat appears."""
        game.spawn(Factory(pos=Position(2, 30)))
        game.spawn(Factory(pos=Position(15, 30)))
        game.new_rats = 1
        game.rat_spawn_due = FROZEN
        game.update(10)
        assert game.live[Kind.RAT] == 1
        assert game.new_rats == 0

    def test_brats_pending_from_rat_population(self, game):
        """Every brat period, half the live rats (rounded up) may breed."""
        for col in (20, 25, 30):
            game.spawn(Rat(pos=Position(2, col), next_update=FROZEN))
        game.simulate(10_000, dt_ms=100)
        assert game.new_brats == 2
