"""
Outpost Entities - What a node can hold, and the ship

A node holds at most one occupant: a Stockpile of one resource kind or a
Construction counting down to its next production cycle.
"""
from dataclasses import dataclass
from typing import Optional, Union

from .bunch import ResourceKind
from .catalog import ConstructionSpec, get_spec


@dataclass
class Stockpile:
    """A pile of a single resource kind sitting on a node."""
    kind: ResourceKind
    amount: int


@dataclass
class Construction:
    """A built structure. cooldown is the number of turns until it may run."""
    kind: str
    cooldown: int = 0

    @property
    def spec(self) -> ConstructionSpec:
        return get_spec(self.kind)

    @property
    def ready(self) -> bool:
        return self.cooldown <= 0

    def tick(self) -> None:
        """Count down one turn, never below zero."""
        if self.cooldown > 0:
            self.cooldown -= 1

    def reset_cooldown(self) -> None:
        self.cooldown = self.spec.cooldown


Occupant = Union[Stockpile, Construction]


def create_construction(kind: str) -> Construction:
    """Factory for freshly built constructions (full cooldown)."""
    return Construction(kind=kind, cooldown=get_spec(kind).cooldown)


@dataclass
class Ship:
    """The single mobile unit.

    home_group is the ship's own sector; its adjacency follows the ship.
    """
    current_group: int
    home_group: int
    destination: Optional[int] = None

    @property
    def has_destination(self) -> bool:
        return self.destination is not None

    def clear_destination(self) -> None:
        self.destination = None
