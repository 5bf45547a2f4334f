"""
Scheduler decisions.
NO UI DEPENDENCIES.

The scheduler never touches the entity list. It returns one of these per
entity and the game commits them afterwards.
"""
from dataclasses import dataclass

from .entities import Entity


@dataclass(frozen=True)
class Action:
    """A decision about one entity for the current frame."""
    pass


@dataclass(frozen=True)
class Nothing(Action):
    """Not eligible yet, or nothing changed."""
    pass


@dataclass(frozen=True)
class Delete(Action):
    """Remove the entity from the list."""
    pass


@dataclass(frozen=True)
class Update(Action):
    """Replace the entity with a new value."""
    entity: Entity


@dataclass(frozen=True)
class New(Action):
    """Append a spawned entity. The spawner itself is left unchanged."""
    entity: Entity


@dataclass(frozen=True)
class Attack(Action):
    """Damage the player."""
    damage: int


NOTHING = Nothing()
DELETE = Delete()
