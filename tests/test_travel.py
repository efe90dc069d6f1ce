"""Test ship destination planning and jumps."""
import pytest
from outpost.core.bunch import ResourceKind
from outpost.core.entities import Ship, Stockpile
from outpost.core.errors import InvalidActionError
from outpost.core.events import (
    ConsumeResource,
    DestinationSetEvent,
    ShipMove,
    ShipStrandedEvent,
)
from outpost.core.systems import TravelSystem, TurnSystem
from outpost.core.world import GameStatus

FOOD = ResourceKind.FOOD
ROCKET_FUEL = ResourceKind.ROCKET_FUEL


@pytest.fixture
def star_world(build_world):
    """Home sector 0 docked at hub 1, which links sectors 2 and 3."""
    return build_world(
        {0: [0, 1], 1: [2], 2: [3], 3: [4], 4: [5]},
        edges=[(0, 1), (1, 2), (1, 3)],
        occupants={0: Stockpile(FOOD, 5), 1: Stockpile(ROCKET_FUEL, 1)},
        ship=Ship(current_group=1, home_group=0),
    )


class TestPlanning:
    """Tests for setting a destination."""

    def test_destinations_exclude_home(self, star_world):
        assert TravelSystem(star_world).destinations() == [2, 3]

    def test_plan_sets_destination(self, star_world):
        events = []
        TravelSystem(star_world, events.append).plan(2)
        assert star_world.ship.destination == 2
        assert events == [DestinationSetEvent(from_group=1, destination=2)]

    def test_plan_can_be_changed(self, star_world):
        travel = TravelSystem(star_world)
        travel.plan(2)
        travel.plan(3)
        assert star_world.ship.destination == 3

    def test_plan_rejects_home_group(self, star_world):
        with pytest.raises(InvalidActionError):
            TravelSystem(star_world).plan(0)
        assert star_world.ship.destination is None

    def test_plan_rejects_unlinked_group(self, star_world):
        with pytest.raises(InvalidActionError):
            TravelSystem(star_world).plan(4)

    def test_plan_without_ship(self, build_world):
        w = build_world({0: [0]})
        with pytest.raises(InvalidActionError):
            TravelSystem(w).plan(0)


class TestJump:
    """Tests for travel during turn resolution."""

    def test_jump_burns_fuel_and_drags_home(self, star_world):
        TravelSystem(star_world).plan(2)
        actions = TurnSystem().resolve(star_world)
        assert actions == [
            ConsumeResource(source=0, target=0, kind=FOOD, amount=4, delta=-1),
            ConsumeResource(source=1, target=1, kind=ROCKET_FUEL, amount=0, delta=-1),
            ShipMove(from_group=1, to_group=2),
        ]
        ship = star_world.ship
        assert ship.current_group == 2
        assert ship.destination is None
        assert sorted(star_world.edges) == [(0, 2), (1, 2), (1, 3)]
        assert star_world.neighbors(0) == [2]
        assert star_world.is_empty(1)

    def test_ship_move_is_last_entry(self, star_world):
        TravelSystem(star_world).plan(3)
        actions = TurnSystem().resolve(star_world)
        assert actions[-1] == ShipMove(from_group=1, to_group=3)
        assert not any(isinstance(a, ShipMove) for a in actions[:-1])

    def test_no_fuel_strands_ship(self, star_world):
        star_world.clear_occupant(1)
        events = []
        travel = TravelSystem(star_world, events.append)
        travel.plan(2)
        assert travel.update() == []
        assert ShipStrandedEvent(home_group=0, destination=2) in events
        assert star_world.ship.current_group == 1
        assert star_world.ship.destination is None
        assert sorted(star_world.edges) == [(0, 1), (1, 2), (1, 3)]

    def test_no_destination_no_jump(self, star_world):
        assert TravelSystem(star_world).update() == []
        assert star_world.occupant_at(1) == Stockpile(ROCKET_FUEL, 1)

    def test_losing_turn_still_jumps(self, star_world):
        star_world.clear_occupant(0)
        TravelSystem(star_world).plan(2)
        actions = TurnSystem().resolve(star_world)
        assert star_world.status == GameStatus.LOST
        assert actions == [
            ConsumeResource(source=1, target=1, kind=ROCKET_FUEL, amount=0, delta=-1),
            ShipMove(from_group=1, to_group=2),
        ]
        assert star_world.ship.current_group == 2
        assert star_world.ship.destination is None
        assert star_world.neighbors(0) == [2]

    def test_winning_turn_still_jumps(self, build_world):
        w = build_world(
            {0: [0, 1, 2, 3], 1: [4], 2: [5]},
            edges=[(0, 1), (1, 2)],
            occupants={
                0: Stockpile(ResourceKind.MATERIAL, 101),
                1: Stockpile(ResourceKind.FUSION_FUEL, 101),
                2: Stockpile(FOOD, 5),
                3: Stockpile(ROCKET_FUEL, 3),
            },
            ship=Ship(current_group=1, home_group=0),
        )
        TravelSystem(w).plan(2)
        actions = TurnSystem().resolve(w)
        assert w.status == GameStatus.WON
        assert actions == [
            ConsumeResource(source=2, target=2, kind=FOOD, amount=4, delta=-1),
            ConsumeResource(source=3, target=3, kind=ROCKET_FUEL, amount=2, delta=-1),
            ShipMove(from_group=1, to_group=2),
        ]
        assert w.ship.current_group == 2
        assert sorted(w.edges) == [(0, 2), (1, 2)]

    def test_no_turn_resolves_after_the_final_jump(self, star_world):
        star_world.clear_occupant(0)
        turns = TurnSystem()
        TravelSystem(star_world).plan(2)
        turns.resolve(star_world)
        assert turns.resolve(star_world) == []
        assert star_world.turn == 1
        assert star_world.ship.current_group == 2

    def test_home_follows_ship_across_jumps(self, star_world):
        star_world.set_occupant(1, Stockpile(ROCKET_FUEL, 5))
        turns = TurnSystem()
        TravelSystem(star_world).plan(2)
        turns.resolve(star_world)
        # From sector 2 the hub is reachable again
        assert TravelSystem(star_world).destinations() == [1]
        TravelSystem(star_world).plan(1)
        turns.resolve(star_world)
        assert star_world.ship.current_group == 1
        assert star_world.neighbors(0) == [1]
        assert star_world.neighbors(2) == [1]
