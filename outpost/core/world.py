"""
Outpost World - Map, graph and simulation state container

Features:
- Nodes (one occupant each) clustered into groups (sectors)
- Undirected, mutable adjacency between groups
- Pooled stockpiles per group with the allocation/consumption policies
- Scenario loading and atomic snapshot/restore for turn resolution

Selection among equal stockpiles always goes to the lowest node id, and
groups are scanned in ascending node id order.
"""
import copy
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple, Union

from ..config import (
    ALLOCATION_PASSES,
    FUEL_KIND,
    MAX_STOCKPILE,
    MAX_TURN_ITERS,
    SURVIVAL_KIND,
    VICTORY_THRESHOLDS,
    load_scenario,
)
from .bunch import Bunch, ResourceKind
from .catalog import get_spec
from .entities import Construction, Occupant, Ship, Stockpile
from .errors import InvalidActionError, InvariantViolation, ScenarioError
from .events import ConsumeResource, ProduceResource


class Allocation(NamedTuple):
    """One step of add_resource: node now holds amount after gaining delta."""
    node: int
    amount: int
    delta: int


class GameStatus:
    """Run states. WON and LOST are terminal until reset."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    TERMINAL = (WON, LOST)


def _edge(a: int, b: int) -> Tuple[int, int]:
    return (a, b) if a <= b else (b, a)


class World:
    """Simulation state container: map, occupants, ship and turn counter."""

    def __init__(self):
        self.groups: Dict[int, List[int]] = {}
        self.group_names: Dict[int, str] = {}
        self.edges: List[Tuple[int, int]] = []
        self.occupation: Dict[int, Occupant] = {}

        # Presentation only
        self.positions: Dict[int, Tuple[float, float]] = {}
        self.group_positions: Dict[int, Tuple[float, float]] = {}

        self.ship: Optional[Ship] = None
        self.turn = 0
        self.status = GameStatus.PLAYING

        # Rules (scenario may override)
        self.fuel_kind = ResourceKind.parse(FUEL_KIND)
        self.survival_kind = ResourceKind.parse(SURVIVAL_KIND)
        self.victory_thresholds = Bunch.from_dict(VICTORY_THRESHOLDS)

    # === Construction ===

    def add_group(self, group: int, nodes: List[int] = (), name: str = None,
                  pos: Tuple[float, float] = (0.0, 0.0)) -> None:
        """Register a group and (optionally) its nodes."""
        self.groups.setdefault(group, [])
        self.group_names[group] = name or f"Sector {group}"
        self.group_positions[group] = tuple(pos)
        for node in nodes:
            self.add_node(node, group)

    def add_node(self, node: int, group: int, pos: Tuple[float, float] = (0.0, 0.0)) -> None:
        """Assign a node to a group. A node belongs to one group for its lifetime."""
        for other_group, nodes in self.groups.items():
            if node in nodes and other_group != group:
                raise InvariantViolation("Node already belongs to another group",
                                         context={"node": node, "group": other_group})
        members = self.groups.setdefault(group, [])
        if node not in members:
            members.append(node)
        self.positions[node] = tuple(pos)

    def add_edge(self, a: int, b: int) -> None:
        """Connect two groups (undirected). Duplicates are ignored."""
        edge = _edge(a, b)
        if edge not in self.edges:
            self.edges.append(edge)

    def load_scenario(self, scenario: Union[dict, str, Path, None] = None) -> None:
        """Populate the world from scenario data (dict or JSON path)."""
        if not isinstance(scenario, dict):
            scenario = load_scenario(scenario)

        try:
            rules = scenario.get("rules", {})
            if "fuel" in rules:
                self.fuel_kind = ResourceKind.parse(rules["fuel"])
            if "survival" in rules:
                self.survival_kind = ResourceKind.parse(rules["survival"])
            if "victory" in rules:
                self.victory_thresholds = Bunch.from_dict(rules["victory"])

            for group_data in scenario.get("groups", []):
                group = int(group_data["id"])
                self.add_group(group, name=group_data.get("name"),
                               pos=group_data.get("pos", (0.0, 0.0)))
                for node_data in group_data.get("nodes", []):
                    self.add_node(int(node_data["id"]), group,
                                  pos=node_data.get("pos", (0.0, 0.0)))

            for a, b in scenario.get("edges", []):
                self.add_edge(int(a), int(b))

            for occ in scenario.get("occupants", []):
                node = int(occ["node"])
                if "construction" in occ:
                    kind = occ["construction"]
                    cooldown = occ.get("cooldown", get_spec(kind).cooldown)
                    self.set_occupant(node, Construction(kind=kind, cooldown=int(cooldown)))
                else:
                    kind = ResourceKind.parse(occ["stockpile"])
                    self.set_occupant(node, Stockpile(kind=kind, amount=int(occ["amount"])))

            ship_data = scenario.get("ship")
            if ship_data:
                self.ship = Ship(current_group=int(ship_data["current"]),
                                 home_group=int(ship_data["home"]))
        except (KeyError, TypeError, ValueError, InvalidActionError, InvariantViolation) as e:
            raise ScenarioError(f"Malformed scenario: {e}") from e

        self.validate()

    def validate(self) -> None:
        """Check structural invariants. Raises ScenarioError."""
        seen: Dict[int, int] = {}
        for group, nodes in self.groups.items():
            for node in nodes:
                if node in seen:
                    raise ScenarioError("Node in two groups",
                                        context={"node": node, "groups": (seen[node], group)})
                seen[node] = group

        for a, b in self.edges:
            if a not in self.groups or b not in self.groups:
                raise ScenarioError("Edge references unknown group", context={"edge": (a, b)})

        for node, occ in self.occupation.items():
            if node not in seen:
                raise ScenarioError("Occupant on node without group", context={"node": node})
            if isinstance(occ, Stockpile) and occ.amount <= 0:
                raise ScenarioError("Empty stockpile", context={"node": node})
            if isinstance(occ, Stockpile) and occ.amount > MAX_STOCKPILE:
                raise ScenarioError("Stockpile above capacity",
                                    context={"node": node, "amount": occ.amount})

        if self.ship is not None:
            for group in (self.ship.current_group, self.ship.home_group):
                if group not in self.groups:
                    raise ScenarioError("Ship references unknown group", context={"group": group})

    # === Queries ===

    @property
    def nodes(self) -> List[int]:
        """Every node id, ascending."""
        return sorted(node for nodes in self.groups.values() for node in nodes)

    def nodes_in(self, group: int) -> List[int]:
        """Nodes of a group in ascending id order."""
        if group not in self.groups:
            raise InvariantViolation("Unknown group", context={"group": group})
        return sorted(self.groups[group])

    def group_of(self, node: int) -> int:
        """Find the group a node belongs to."""
        for group, nodes in self.groups.items():
            if node in nodes:
                return group
        raise InvariantViolation("Node belongs to no group", context={"node": node})

    def neighbors(self, group: int) -> List[int]:
        """Groups sharing an edge with group."""
        found = set()
        for a, b in self.edges:
            if a == group:
                found.add(b)
            elif b == group:
                found.add(a)
        found.discard(group)
        return sorted(found)

    def are_adjacent(self, a: int, b: int) -> bool:
        return _edge(a, b) in self.edges

    def occupant_at(self, node: int) -> Optional[Occupant]:
        return self.occupation.get(node)

    def is_empty(self, node: int) -> bool:
        return node not in self.occupation

    def stockpile_at(self, node: int) -> Stockpile:
        """The stockpile on a node; anything else is an invariant violation."""
        occ = self.occupation.get(node)
        if not isinstance(occ, Stockpile):
            raise InvariantViolation("Expected a stockpile", context={"node": node, "found": occ})
        return occ

    def stockpiles(self, group: int, kind: ResourceKind = None) -> Iterator[Tuple[int, Stockpile]]:
        """(node, stockpile) pairs in a group, optionally of one kind."""
        for node in self.nodes_in(group):
            occ = self.occupation.get(node)
            if isinstance(occ, Stockpile) and (kind is None or occ.kind == kind):
                yield node, occ

    def constructions(self) -> List[Tuple[int, Construction]]:
        """(node, construction) pairs in ascending node order."""
        return [(node, occ) for node, occ in sorted(self.occupation.items())
                if isinstance(occ, Construction)]

    def pooled_bunch(self, group: int) -> Bunch:
        """Sum of every stockpile in a group."""
        return Bunch.sum(Bunch.single(pile.kind, pile.amount)
                         for _, pile in self.stockpiles(group))

    def lowest_stockpile(self, group: int, kind: ResourceKind) -> int:
        """Node holding the smallest stockpile of kind in group."""
        best = None
        for node, pile in self.stockpiles(group, kind):
            if best is None or pile.amount < best[1]:
                best = (node, pile.amount)
        if best is None:
            raise InvariantViolation("No stockpile to draw from",
                                     context={"group": group, "kind": kind.value})
        return best[0]

    def highest_open_stockpile(self, group: int, kind: ResourceKind) -> Optional[int]:
        """Node holding the largest stockpile of kind that is still below the cap."""
        best = None
        for node, pile in self.stockpiles(group, kind):
            if pile.amount < MAX_STOCKPILE and (best is None or pile.amount > best[1]):
                best = (node, pile.amount)
        return best[0] if best else None

    def first_empty_node(self, group: int) -> Optional[int]:
        for node in self.nodes_in(group):
            if node not in self.occupation:
                return node
        return None

    # === Mutation ===

    def set_occupant(self, node: int, occupant: Occupant) -> None:
        """Overwrite whatever is on node. Callers check occupancy first."""
        self.occupation[node] = occupant

    def clear_occupant(self, node: int) -> Optional[Occupant]:
        return self.occupation.pop(node, None)

    def add_resource(self, group: int, kind: ResourceKind, amount: int) -> List[Allocation]:
        """Store amount of kind in group.

        Tops up the fullest open pile first. When no pile has room, the whole
        remainder goes uncapped onto one empty node. With neither, the
        remainder is discarded.
        """
        left = amount
        allocations: List[Allocation] = []
        for _ in range(ALLOCATION_PASSES):
            if left <= 0:
                break
            node = self.highest_open_stockpile(group, kind)
            if node is not None:
                pile = self.occupation[node]
                clamped = min(left, MAX_STOCKPILE - pile.amount)
                pile.amount += clamped
                left -= clamped
                allocations.append(Allocation(node, pile.amount, clamped))
                continue

            empty = self.first_empty_node(group)
            if empty is not None:
                # Overflow path: not capped at MAX_STOCKPILE
                self.set_occupant(empty, Stockpile(kind=kind, amount=left))
                allocations.append(Allocation(empty, left, left))
                left = 0
            break
        return allocations

    def take_resource(self, group: int, kind: ResourceKind, amount: int,
                      target: Optional[int] = None, delta: Optional[int] = None) -> List[ConsumeResource]:
        """Remove amount of kind from group, lowest stockpiles first.

        Each pile touched yields one ConsumeResource entry. delta defaults to
        the full amount. Empty piles are removed. Callers must have checked
        that the group holds enough.
        """
        if delta is None:
            delta = amount
        left = amount
        entries: List[ConsumeResource] = []
        for _ in range(MAX_TURN_ITERS):
            if left <= 0:
                break
            node = self.lowest_stockpile(group, kind)
            pile = self.stockpile_at(node)
            clamped = min(left, pile.amount)
            pile.amount -= clamped
            left -= clamped
            entries.append(ConsumeResource(
                source=node,
                target=node if target is None else target,
                kind=kind,
                amount=pile.amount,
                delta=delta,
            ))
            if pile.amount <= 0:
                del self.occupation[node]
        return entries

    def move_stockpile(self, source: int, target: int,
                       amount: Optional[int] = None) -> Tuple[ConsumeResource, ProduceResource]:
        """Move some or all of a stockpile to another node.

        Both nodes must be in the same or adjacent groups; the target must be
        empty or hold the same kind, and never ends up above the cap.
        """
        pile = self.occupation.get(source)
        if not isinstance(pile, Stockpile):
            raise InvalidActionError("No stockpile at source", context={"node": source})
        if source == target:
            raise InvalidActionError("Source and target are the same node", context={"node": source})

        try:
            source_group = self.group_of(source)
            target_group = self.group_of(target)
        except InvariantViolation as e:
            raise InvalidActionError(e.message, context=e.context) from e
        if source_group != target_group and not self.are_adjacent(source_group, target_group):
            raise InvalidActionError("Target is out of reach",
                                     context={"from": source_group, "to": target_group})

        if amount is None:
            amount = pile.amount
        if amount <= 0 or amount > pile.amount:
            raise InvalidActionError("Invalid transfer amount",
                                     context={"amount": amount, "available": pile.amount})

        dest = self.occupation.get(target)
        if dest is None:
            moved = min(amount, MAX_STOCKPILE)
        elif isinstance(dest, Stockpile) and dest.kind == pile.kind:
            moved = min(amount, MAX_STOCKPILE - dest.amount)
            if moved <= 0:
                raise InvalidActionError("Target stockpile is full", context={"node": target})
        else:
            raise InvalidActionError("Target is occupied", context={"node": target})

        pile.amount -= moved
        if pile.amount <= 0:
            del self.occupation[source]
        if dest is None:
            dest = Stockpile(kind=pile.kind, amount=0)
            self.set_occupant(target, dest)
        dest.amount += moved

        return (
            ConsumeResource(source=source, target=target, kind=pile.kind,
                            amount=pile.amount, delta=moved),
            ProduceResource(source=source, target=target, kind=pile.kind,
                            amount=dest.amount, delta=moved),
        )

    def relocate(self, vertex: int, new_neighbor: int) -> None:
        """Make vertex adjacent to new_neighbor only."""
        self.edges = [edge for edge in self.edges if vertex not in edge]
        if vertex != new_neighbor:
            self.add_edge(vertex, new_neighbor)

    # === Snapshots ===

    def copy(self) -> "World":
        return copy.deepcopy(self)

    def restore(self, snapshot: "World") -> None:
        """Roll back to a snapshot taken with copy(). The snapshot is consumed."""
        self.__dict__.clear()
        self.__dict__.update(snapshot.__dict__)

    @property
    def game_over(self) -> bool:
        return self.status in GameStatus.TERMINAL

