"""
Outpost Systems - Turn resolution and player-facing placement

Systems:
- ProductionSystem: cooldowns, candidate selection, consume/produce
- SurvivalSystem: per-turn food consumption and win/lose checks
- TravelSystem: ship destination planning and jumps
- BuildingPlacementSystem: build and demolish
- TurnSystem: runs the above for one end-turn, atomically

Systems that run during a turn take a `notify` callable instead of the bus
so that notifications are only published once the turn is committed.
"""
from typing import Callable, List, Optional, Tuple

from ..config import FUEL_PER_JUMP, MAX_TURN_ITERS, SURVIVAL_PER_TURN
from .catalog import get_spec
from .entities import Construction, create_construction
from .errors import InvalidActionError, InvariantViolation
from .events import (
    Action,
    ConsumeResource,
    EventBus,
    ProduceResource,
    ShipMove,
    TurnStartedEvent,
    ConstructionRanEvent,
    ProductionStarvedEvent,
    ResourceDiscardedEvent,
    ShipStrandedEvent,
    TurnResolvedEvent,
    GameOverEvent,
    ConstructionBuiltEvent,
    ConstructionDemolishedEvent,
    DestinationSetEvent,
    InsufficientResourcesEvent,
)
from .world import GameStatus, World


Notify = Callable[[object], None]


def _ignore(event) -> None:
    pass


class ProductionSystem:
    """Runs every ready construction whose group can pay for it."""

    def __init__(self, world: World, notify: Notify = _ignore):
        self.world = world
        self.notify = notify

    def tick_cooldowns(self) -> None:
        for _, construction in self.world.constructions():
            construction.tick()

    def collect_candidates(self) -> List[Tuple[int, Construction]]:
        """Ready constructions, in ascending node order."""
        return [(node, c) for node, c in self.world.constructions() if c.ready]

    def find_runnable(self, candidates: List[Tuple[int, Construction]]) -> Optional[int]:
        """Index of the first candidate its group can currently supply."""
        for index, (node, construction) in enumerate(candidates):
            group = self.world.group_of(node)
            if self.world.pooled_bunch(group).contains(construction.spec.request):
                return index
        return None

    def update(self) -> List[Action]:
        """Resolve production for one turn and return the committed actions."""
        self.tick_cooldowns()
        candidates = self.collect_candidates()
        actions: List[Action] = []

        for _ in range(MAX_TURN_ITERS):
            index = self.find_runnable(candidates)
            if index is None:
                if candidates:
                    self.notify(ProductionStarvedEvent(
                        turn=self.world.turn,
                        nodes=tuple(node for node, _ in candidates),
                    ))
                break
            node, construction = candidates.pop(index)
            actions.extend(self.run(node, construction))

        return actions

    def run(self, node: int, construction: Construction) -> List[Action]:
        """One production cycle of a single construction."""
        world = self.world
        group = world.group_of(node)
        spec = construction.spec
        construction.reset_cooldown()
        actions: List[Action] = []

        for kind, amount in spec.request.items():
            actions.extend(world.take_resource(group, kind, amount, target=node))

        for kind, amount in spec.produce.items():
            allocations = world.add_resource(group, kind, amount)
            for allocation in allocations:
                actions.append(ProduceResource(
                    source=node,
                    target=allocation.node,
                    kind=kind,
                    amount=allocation.amount,
                    delta=allocation.delta,
                ))
            stored = sum(a.delta for a in allocations)
            if stored < amount:
                self.notify(ResourceDiscardedEvent(group=group, kind=kind, amount=amount - stored))

        self.notify(ConstructionRanEvent(node=node, kind=construction.kind, group=group))
        return actions


class SurvivalSystem:
    """Feeds the crew and decides whether the run is won or lost."""

    def __init__(self, world: World, notify: Notify = _ignore):
        self.world = world
        self.notify = notify

    def update(self) -> List[Action]:
        world = self.world
        if world.ship is None:
            return []
        home = world.ship.home_group
        kind = world.survival_kind

        if not any(True for _ in world.stockpiles(home, kind)):
            self._finish(GameStatus.LOST)
            return []

        available = world.pooled_bunch(home)[kind]
        actions = world.take_resource(home, kind, min(SURVIVAL_PER_TURN, available),
                                      delta=-SURVIVAL_PER_TURN)

        if self.has_won():
            self._finish(GameStatus.WON)
        return actions

    def has_won(self) -> bool:
        """Home pool exceeds every victory threshold."""
        thresholds = self.world.victory_thresholds
        if not thresholds:
            return False
        pool = self.world.pooled_bunch(self.world.ship.home_group)
        return all(pool[kind] > limit for kind, limit in thresholds.items())

    def _finish(self, status: str) -> None:
        self.world.status = status
        self.notify(GameOverEvent(status=status, turn=self.world.turn))


class TravelSystem:
    """Moves the ship (and its home group's adjacency) between groups."""

    def __init__(self, world: World, notify: Notify = _ignore):
        self.world = world
        self.notify = notify

    def destinations(self) -> List[int]:
        """Groups the ship can currently jump to."""
        ship = self.world.ship
        if ship is None:
            return []
        return [g for g in self.world.neighbors(ship.current_group)
                if g not in (ship.current_group, ship.home_group)]

    def plan(self, group: int) -> None:
        """Set the ship's destination for the next turn."""
        ship = self.world.ship
        if ship is None:
            raise InvalidActionError("There is no ship")
        if group not in self.destinations():
            raise InvalidActionError("Destination is not a neighbor of the ship",
                                     context={"from": ship.current_group, "to": group})
        ship.destination = group
        self.notify(DestinationSetEvent(from_group=ship.current_group, destination=group))

    def update(self) -> List[Action]:
        """Jump if planned and fueled. The plan is cleared either way."""
        ship = self.world.ship
        if ship is None:
            return []
        try:
            if not ship.has_destination or ship.destination == ship.current_group:
                return []
            return self._jump(ship.destination)
        finally:
            ship.clear_destination()

    def _jump(self, destination: int) -> List[Action]:
        world = self.world
        ship = world.ship
        fuel = world.fuel_kind
        if world.pooled_bunch(ship.home_group)[fuel] < FUEL_PER_JUMP:
            self.notify(ShipStrandedEvent(home_group=ship.home_group, destination=destination))
            return []

        actions: List[Action] = list(world.take_resource(
            ship.home_group, fuel, FUEL_PER_JUMP, delta=-FUEL_PER_JUMP))
        actions.append(ShipMove(from_group=ship.current_group, to_group=destination))
        ship.current_group = destination
        world.relocate(ship.home_group, destination)
        return actions


class BuildingPlacementSystem:
    """Builds and demolishes constructions on behalf of the player."""

    def __init__(self, world: World, event_bus: Optional[EventBus] = None):
        self.world = world
        self.event_bus = event_bus

    def _publish(self, event) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event)

    def can_build(self, node: int, kind: str) -> bool:
        if not self.world.is_empty(node):
            return False
        group = self.world.group_of(node)
        return self.world.pooled_bunch(group).contains(get_spec(kind).cost)

    def build(self, node: int, kind: str) -> List[ConsumeResource]:
        """Place a construction and pay its cost from the node's group."""
        world = self.world
        spec = get_spec(kind)
        try:
            group = world.group_of(node)
        except InvariantViolation as e:
            raise InvalidActionError(e.message, context=e.context) from e
        if not world.is_empty(node):
            raise InvalidActionError("Node is occupied", context={"node": node})

        available = world.pooled_bunch(group)
        if not available.contains(spec.cost):
            self._publish(InsufficientResourcesEvent(
                node=node,
                kind=kind,
                cost=spec.cost.to_dict(),
                available=available.to_dict(),
            ))
            raise InvalidActionError("Not enough resources to build",
                                     context={"kind": kind, "cost": spec.cost})

        actions: List[ConsumeResource] = []
        for resource, amount in spec.cost.items():
            actions.extend(world.take_resource(group, resource, amount, target=node))
        world.set_occupant(node, create_construction(kind))

        self._publish(ConstructionBuiltEvent(node=node, kind=kind, group=group))
        return actions

    def demolish(self, node: int) -> None:
        occ = self.world.occupant_at(node)
        if not isinstance(occ, Construction):
            raise InvalidActionError("No construction to demolish", context={"node": node})
        self.world.clear_occupant(node)
        self._publish(ConstructionDemolishedEvent(node=node, kind=occ.kind))


class TurnSystem:
    """Resolves one end-turn signal against a world.

    The turn runs on the live world but rolls back to a snapshot if an
    invariant is violated, so a failed turn leaves no partial mutation.
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus

    def resolve(self, world: World) -> List[Action]:
        """Run one turn and return its action log, in commit order."""
        if world.game_over:
            return []

        snapshot = world.copy()
        pending: List[object] = []
        try:
            actions = self._resolve(world, pending.append)
        except InvariantViolation:
            world.restore(snapshot)
            raise

        if self.event_bus is not None:
            for event in pending:
                self.event_bus.publish(event)
            self.event_bus.publish(TurnResolvedEvent(
                turn=world.turn,
                action_count=len(actions),
                status=world.status,
            ))
        return actions

    def _resolve(self, world: World, notify: Notify) -> List[Action]:
        world.turn += 1
        notify(TurnStartedEvent(turn=world.turn))

        actions: List[Action] = []
        actions.extend(ProductionSystem(world, notify).update())
        actions.extend(SurvivalSystem(world, notify).update())
        # Travel runs even on the turn that ends the run
        actions.extend(TravelSystem(world, notify).update())
        return actions
