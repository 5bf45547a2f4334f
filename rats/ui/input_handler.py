"""
Input Handler - Translates key presses to gameplay commands.
This is a THIN ADAPTER - no game logic here.
"""
import pygame

from rats.gameplay.game import Game, GamePhase
from rats.gameplay.grid import Direction


# Held keys -> direction bits
MOVE_KEYS = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
}

FIRE_KEYS = {
    pygame.K_w: Direction.UP,
    pygame.K_s: Direction.DOWN,
    pygame.K_a: Direction.LEFT,
    pygame.K_d: Direction.RIGHT,
}


def held_direction(keys, mapping) -> Direction:
    """OR together the directions of every held key in mapping."""
    direction = Direction.NONE
    for key, bit in mapping.items():
        if keys[key]:
            direction |= bit
    return direction


class InputHandler:
    """
    Handles keyboard input and translates to game commands.

    Movement and firing follow the held keys: every frame the held set is
    compared with the previous frame and only the changes are sent.
    """

    def __init__(self, game: Game):
        self.game = game
        self.moving = Direction.NONE
        self.firing = Direction.NONE

    def handle_key(self, key: int) -> bool:
        """
        Handle a single key press.
        Returns True if the game should quit.
        """
        if key in (pygame.K_ESCAPE, pygame.K_q):
            self.game.quit()
            return True

        if key == pygame.K_r:
            self.game.restart()
            # A reset player has no held intents; resend them next frame
            self.moving = Direction.NONE
            self.firing = Direction.NONE
        elif key == pygame.K_p:
            self.game.pause()
        elif key == pygame.K_TAB:
            self.game.toggle_diagnostics()

        return False

    def handle_held_keys(self):
        """
        Handle continuously held keys.
        Called every frame.
        """
        if self.game.phase == GamePhase.RESTART:
            return
        keys = pygame.key.get_pressed()

        moving = held_direction(keys, MOVE_KEYS)
        if moving != self.moving:
            released = self.moving.without(moving)
            pressed = moving.without(self.moving)
            if released:
                self.game.stop_moving(released)
            if pressed:
                self.game.start_moving(pressed)
            self.moving = moving

        firing = held_direction(keys, FIRE_KEYS)
        if firing != self.firing:
            released = self.firing.without(firing)
            pressed = firing.without(self.firing)
            if released:
                self.game.stop_firing(released)
            if pressed:
                self.game.start_firing(pressed)
            self.firing = firing
