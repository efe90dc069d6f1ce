"""
Outpost Handlers - Console and file logging of engine events

Handlers subscribe to a game's EventBus; the engine never calls them
directly.
"""
from typing import List, Optional

from .events import (
    ActionStartedEvent,
    ConstructionBuiltEvent,
    ConstructionDemolishedEvent,
    ConstructionRanEvent,
    ConsumeResource,
    DestinationSetEvent,
    EndTurnIgnoredEvent,
    EventBus,
    GameOverEvent,
    InsufficientResourcesEvent,
    ProduceResource,
    ProductionStarvedEvent,
    ResourceDiscardedEvent,
    ShipMove,
    ShipStrandedEvent,
    StockpileTransferredEvent,
    TurnResolvedEvent,
)


def describe_action(action) -> str:
    """One-line description of an action log entry."""
    if isinstance(action, ConsumeResource):
        return (f"node {action.source} -> node {action.target}: "
                f"{action.kind.value} {action.delta:+d} (left {action.amount})")
    if isinstance(action, ProduceResource):
        return (f"node {action.source} -> node {action.target}: "
                f"{action.kind.value} +{action.delta} (now {action.amount})")
    if isinstance(action, ShipMove):
        return f"ship {action.from_group} -> {action.to_group}"
    return repr(action)


class LoggerHandler:
    """Simple handler that logs events to console."""

    def __init__(self, event_bus: EventBus, verbose: bool = False):
        self.verbose = verbose
        event_bus.subscribe(TurnResolvedEvent, self.on_turn)
        event_bus.subscribe(GameOverEvent, self.on_game_over)
        event_bus.subscribe(ShipStrandedEvent, self.on_stranded)
        if verbose:
            event_bus.subscribe(ProductionStarvedEvent, self.on_starved)
            event_bus.subscribe(ResourceDiscardedEvent, self.on_discarded)
            event_bus.subscribe(ActionStartedEvent, self.on_action)
            event_bus.subscribe(EndTurnIgnoredEvent, self.on_ignored)

    def on_turn(self, event: TurnResolvedEvent) -> None:
        print(f"[TURN] Turn {event.turn} resolved with {event.action_count} actions ({event.status})")

    def on_game_over(self, event: GameOverEvent) -> None:
        print(f"[GAME] Run {event.status} on turn {event.turn}")

    def on_stranded(self, event: ShipStrandedEvent) -> None:
        print(f"[SHIP] Not enough fuel to reach sector {event.destination}")

    def on_starved(self, event: ProductionStarvedEvent) -> None:
        nodes = ", ".join(str(n) for n in event.nodes)
        print(f"[STARVED] Turn {event.turn}: nodes {nodes} lacked resources")

    def on_discarded(self, event: ResourceDiscardedEvent) -> None:
        print(f"[STARVED] Sector {event.group} had no room for {event.amount} {event.kind.value}")

    def on_action(self, event: ActionStartedEvent) -> None:
        print(f"[ACTION] {describe_action(event.action)}")

    def on_ignored(self, event: EndTurnIgnoredEvent) -> None:
        print(f"[TURN] End turn ignored ({event.reason})")


class TurnLogHandler:
    """Keeps a history of turn and player events, optionally mirrored to a file."""

    def __init__(self, event_bus: EventBus, log_file: Optional[str] = None):
        self.log_file = log_file
        self.logs: List[str] = []
        event_bus.subscribe(TurnResolvedEvent,
                            lambda e: self._log("TURN", f"{e.turn} resolved, {e.action_count} actions, {e.status}"))
        event_bus.subscribe(ConstructionRanEvent,
                            lambda e: self._log("RUN", f"{e.kind} at node {e.node}"))
        event_bus.subscribe(ProductionStarvedEvent,
                            lambda e: self._log("STARVED", f"nodes {list(e.nodes)}"))
        event_bus.subscribe(ConstructionBuiltEvent,
                            lambda e: self._log("BUILD", f"{e.kind} at node {e.node}"))
        event_bus.subscribe(ConstructionDemolishedEvent,
                            lambda e: self._log("DEMOLISH", f"{e.kind} at node {e.node}"))
        event_bus.subscribe(InsufficientResourcesEvent,
                            lambda e: self._log("BUILD", f"{e.kind} refused, cost {e.cost}, have {e.available}"))
        event_bus.subscribe(StockpileTransferredEvent,
                            lambda e: self._log("MOVE", f"{e.amount} {e.kind.value} node {e.source} -> {e.target}"))
        event_bus.subscribe(DestinationSetEvent,
                            lambda e: self._log("SHIP", f"course set {e.from_group} -> {e.destination}"))
        event_bus.subscribe(ShipStrandedEvent,
                            lambda e: self._log("SHIP", f"stranded, no fuel for {e.destination}"))
        event_bus.subscribe(GameOverEvent,
                            lambda e: self._log("GAME", f"{e.status} on turn {e.turn}"))

    def _log(self, tag: str, message: str) -> None:
        log_line = f"[{tag}] {message}"
        self.logs.append(log_line)

        if self.log_file:
            with open(self.log_file, 'a') as f:
                f.write(log_line + '\n')

    def get_recent_logs(self, count: int = 10) -> List[str]:
        """Get most recent log entries."""
        return self.logs[-count:]

    def save_logs(self, filename: str) -> None:
        """Save all logs to a file."""
        with open(filename, 'w') as f:
            for line in self.logs:
                f.write(line + '\n')
