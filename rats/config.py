"""
Configuration management for Rats.
Uses pydantic-settings for environment variable parsing.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rats.gameplay.constants import DEFAULT_LIVES, MIN_MAZE_CELLS


class GameSettings(BaseSettings):
    """Session settings loaded from RATS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RATS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Maze
    maze_height: int = Field(
        default=15,
        ge=MIN_MAZE_CELLS,
        description="Maze height in maze cells"
    )
    maze_width: int = Field(
        default=15,
        ge=MIN_MAZE_CELLS,
        description="Maze width in maze cells"
    )
    density: int = Field(
        default=85,
        ge=0,
        le=100,
        description="Percentage of spanning-tree walls kept. 100 is a perfect maze, 0 an open arena"
    )

    # Enemies
    factories: int = Field(
        default=5,
        ge=0,
        description="Number of rat factories placed at session start"
    )
    rat_damage: int = Field(
        default=10,
        ge=0,
        description="Health a rat takes from the player per attack"
    )
    brat_damage: int = Field(
        default=5,
        ge=0,
        description="Health a baby rat takes from the player per attack"
    )

    # Player
    lives: int = Field(
        default=DEFAULT_LIVES,
        ge=1,
        description="Lives at session start"
    )

    # Frame loop
    fps_limit: int = Field(
        default=60,
        ge=1,
        description="Frame-rate cap"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed. Unset means a fresh random source every run"
    )

    # Audio
    quiet: bool = Field(
        default=False,
        description="Disable sound effects"
    )
    sounds_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding gunshot/impact/short_explosion/long_explosion .wav files"
    )


@lru_cache()
def get_settings() -> GameSettings:
    """
    Get cached settings instance.
    Read once at startup; restarts reuse the same object.
    """
    return GameSettings()
