"""
Outpost Events - Action log entries, notifications and the EventBus

Action log entries record committed mutations in commit order; the
presentation layer replays them without feeding anything back. The other
dataclasses are notifications for handlers (logging, HUD messages).
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple, Union

from .bunch import ResourceKind


# === Action Log Entries ===

@dataclass(frozen=True)
class ConsumeResource:
    """Resource taken from the stockpile at source on behalf of target.

    amount is what is left at source; delta is the amount requested, not
    what was actually taken from this particular pile.
    """
    source: int
    target: int
    kind: ResourceKind
    amount: int
    delta: int


@dataclass(frozen=True)
class ProduceResource:
    """Resource produced by source and stored at target (amount = new total)."""
    source: int
    target: int
    kind: ResourceKind
    amount: int
    delta: int


@dataclass(frozen=True)
class ShipMove:
    """The ship jumped between two groups."""
    from_group: int
    to_group: int


Action = Union[ConsumeResource, ProduceResource, ShipMove]


# === Notifications ===

@dataclass
class TurnStartedEvent:
    """Fired when an end-turn signal is accepted."""
    turn: int


@dataclass
class ConstructionRanEvent:
    """Fired when a construction completes a production cycle."""
    node: int
    kind: str
    group: int


@dataclass
class ProductionStarvedEvent:
    """Fired when ready constructions could not run this turn."""
    turn: int
    nodes: Tuple[int, ...]


@dataclass
class ResourceDiscardedEvent:
    """Fired when produced resources found no room in their group."""
    group: int
    kind: ResourceKind
    amount: int


@dataclass
class ShipStrandedEvent:
    """Fired when a planned jump fails for lack of fuel."""
    home_group: int
    destination: int


@dataclass
class TurnResolvedEvent:
    """Fired after a turn has been committed."""
    turn: int
    action_count: int
    status: str


@dataclass
class EndTurnIgnoredEvent:
    """Fired when an end-turn signal is dropped."""
    reason: str  # "busy" or "game_over"


@dataclass
class GameOverEvent:
    """Fired once when the run reaches a terminal state."""
    status: str  # "won" or "lost"
    turn: int


@dataclass
class ConstructionBuiltEvent:
    """Fired when a construction is placed on a node."""
    node: int
    kind: str
    group: int


@dataclass
class ConstructionDemolishedEvent:
    """Fired when a construction is removed."""
    node: int
    kind: str


@dataclass
class StockpileTransferredEvent:
    """Fired when the player moves resources between nodes."""
    source: int
    target: int
    kind: ResourceKind
    amount: int


@dataclass
class DestinationSetEvent:
    """Fired when the player plans the ship's next jump."""
    from_group: int
    destination: int


@dataclass
class InsufficientResourcesEvent:
    """Fired when a build is refused for lack of materials."""
    node: int
    kind: str
    cost: Dict[str, int]
    available: Dict[str, int]


@dataclass
class ActionStartedEvent:
    """Fired by playback when an action log entry begins to animate."""
    action: Any


@dataclass
class ActionFinishedEvent:
    """Fired by playback when an entry is done; displays sync state here."""
    action: Any


# === EventBus ===

class EventBus:
    """Dispatches notifications to subscribed handlers, by event type."""

    def __init__(self):
        self._subscribers: Dict[type, List[Callable]] = {}
        self._event_history: List[Any] = []
        self._recording = False

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Register a handler for an event type."""
        self._subscribers.setdefault(event_type, []).append(handler)

    def publish(self, event: Any) -> None:
        """Notify all handlers subscribed to this event's type."""
        if self._recording:
            self._event_history.append(event)

        for handler in list(self._subscribers.get(type(event), [])):
            handler(event)

    def clear(self) -> None:
        """Clear all subscribers."""
        self._subscribers.clear()

    def start_recording(self) -> None:
        """Start recording events for replay/debugging."""
        self._recording = True
        self._event_history.clear()

    def stop_recording(self) -> List[Any]:
        """Stop recording and return event history."""
        self._recording = False
        return self._event_history.copy()
