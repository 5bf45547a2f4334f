"""
Sound effect hooks.
NO UI DEPENDENCIES.

The game calls these as side effects of firing, hits and explosions.
Any object with these four methods can be plugged in.
"""
from typing import Protocol


class SoundEffects(Protocol):
    def play_gunshot(self) -> None: ...

    def play_impact(self) -> None: ...

    def play_short_explosion(self) -> None: ...

    def play_long_explosion(self) -> None: ...


class SilentSounds:
    """Plays nothing. Default for tests and headless runs."""

    def play_gunshot(self) -> None:
        pass

    def play_impact(self) -> None:
        pass

    def play_short_explosion(self) -> None:
        pass

    def play_long_explosion(self) -> None:
        pass
