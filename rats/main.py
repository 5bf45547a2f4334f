#!/usr/bin/env python3
"""
Rats - Main Entry Point

Shoot your way out of a wrap-around maze while rat factories fill it
with rats, and the rats breed.

Usage:
    python -m rats.main

Settings come from RATS_* environment variables or a .env file
(RATS_MAZE_HEIGHT, RATS_DENSITY, RATS_FACTORIES, RATS_SEED, RATS_QUIET, ...).

Controls:
    Arrow keys: Move (hold two for diagonals)
    W/A/S/D: Fire (hold to keep firing)
    P: Pause / resume
    R: Restart
    Tab: Toggle diagnostics
    Escape/Q: Quit
"""
import logging

import pyunicodegame

from rats.config import get_settings
from rats.gameplay.game import Game, GamePhase
from rats.gameplay.sounds import SilentSounds
from rats.ui.renderer import Renderer, SCREEN_WIDTH, SCREEN_HEIGHT
from rats.ui.input_handler import InputHandler
from rats.ui.sounds import MixerSounds

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = get_settings()
    logger.info(f"Starting Rats: {settings.maze_height}x{settings.maze_width} cells, "
                f"density {settings.density}, {settings.factories} factories")

    # Initialize pyunicodegame before the mixer so pygame is up
    pyunicodegame.init(
        "Rats",
        width=SCREEN_WIDTH,
        height=SCREEN_HEIGHT,
        bg=(10, 10, 14, 255)
    )

    sounds = SilentSounds() if settings.quiet else MixerSounds(settings.sounds_dir)
    game = Game(settings=settings, sounds=sounds)

    renderer = Renderer(game)
    renderer.init_windows()
    input_handler = InputHandler(game)

    # Frame cap: simulation steps only once a full frame interval has passed
    frame_ms = 1000.0 / settings.fps_limit
    pending_ms = 0.0

    def update(dt: float):
        """Update game state."""
        nonlocal pending_ms

        input_handler.handle_held_keys()

        pending_ms += dt * 1000.0
        if pending_ms < frame_ms:
            return
        step = int(pending_ms)
        pending_ms -= step
        game.update(step)

        if game.phase == GamePhase.QUIT:
            pyunicodegame.quit()

    def render():
        """Render game state."""
        renderer.render()

    def on_key(key: int):
        """Handle key press."""
        if input_handler.handle_key(key):
            pyunicodegame.quit()

    pyunicodegame.run(update=update, render=render, on_key=on_key)
    logger.info(f"Session over, final score {game.score}")


if __name__ == "__main__":
    main()
