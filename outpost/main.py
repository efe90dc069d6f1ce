#!/usr/bin/env python3
"""
Outpost - Colony Logistics Turn Engine
======================================

Run with: python -m outpost.main [--verbose] [--log-file FILE] [--scenario FILE]

Features:
- Sectors of production sites sharing pooled stockpiles
- Deterministic end-turn resolution with an ordered action log
- A ship that drags its home sector across the map
- Food upkeep, victory thresholds
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional, Union

from .commands import (
    USAGE,
    Build,
    Command,
    Demolish,
    EndTurn,
    Reset,
    SetDestination,
    Transfer,
    parse_command,
)
from .core.entities import Construction, Stockpile
from .core.errors import InvalidActionError
from .core.events import (
    Action,
    EndTurnIgnoredEvent,
    EventBus,
    StockpileTransferredEvent,
)
from .core.handlers import LoggerHandler, TurnLogHandler
from .core.playback import ActionPlayback
from .core.systems import BuildingPlacementSystem, TravelSystem, TurnSystem
from .core.world import GameStatus, World


class Game:
    """Owns the world, the event bus and playback; the only entry point for input."""

    def __init__(self, scenario: Union[dict, str, Path, None] = None,
                 verbose: bool = False, log_file: Optional[str] = None):
        self.scenario = scenario
        self.verbose = verbose
        self.events = EventBus()
        self.world = World()
        self.playback = ActionPlayback(self.events)
        self.turns = TurnSystem(self.events)

        self.logger = LoggerHandler(self.events, verbose=verbose)
        self.turn_log = TurnLogHandler(self.events, log_file=log_file)
        self.running = True

    def setup(self) -> None:
        """Load the scenario into a fresh world."""
        self.world.load_scenario(self.scenario)

    # === Read-only state ===

    @property
    def turn(self) -> int:
        return self.world.turn

    @property
    def status(self) -> str:
        return self.world.status

    @property
    def busy(self) -> bool:
        """True while the last action log is still playing."""
        return not self.playback.done

    # === Turn ===

    def end_turn(self) -> Optional[List[Action]]:
        """Resolve one turn. Returns None if the signal was dropped."""
        if self.world.game_over:
            self.events.publish(EndTurnIgnoredEvent(reason="game_over"))
            return None
        if self.busy:
            self.events.publish(EndTurnIgnoredEvent(reason="busy"))
            return None

        actions = self.turns.resolve(self.world)
        self.playback.load(actions)
        return actions

    def update(self, dt: float) -> None:
        """Advance playback (called every frame by a frontend)."""
        self.playback.update(dt)

    # === Player interactions ===

    def build(self, node: int, kind: str) -> List[Action]:
        actions = BuildingPlacementSystem(self.world, self.events).build(node, kind)
        self.playback.load(actions)
        return actions

    def demolish(self, node: int) -> None:
        BuildingPlacementSystem(self.world, self.events).demolish(node)

    def transfer(self, source: int, target: int, amount: Optional[int] = None) -> List[Action]:
        consume, produce = self.world.move_stockpile(source, target, amount)
        self.events.publish(StockpileTransferredEvent(
            source=source, target=target, kind=consume.kind, amount=consume.delta))
        actions = [consume, produce]
        self.playback.load(actions)
        return actions

    def set_destination(self, group: int) -> None:
        TravelSystem(self.world, self.events.publish).plan(group)

    def execute(self, command: Command) -> Optional[List[Action]]:
        """Dispatch a command object to the matching interaction."""
        if isinstance(command, EndTurn):
            return self.end_turn()
        if isinstance(command, Build):
            return self.build(command.node, command.kind)
        if isinstance(command, Demolish):
            self.demolish(command.node)
        elif isinstance(command, Transfer):
            return self.transfer(command.source, command.target, command.amount)
        elif isinstance(command, SetDestination):
            self.set_destination(command.group)
        elif isinstance(command, Reset):
            self.reset()
        else:
            raise InvalidActionError(f"Unsupported command: {command!r}")
        return None

    def reset(self) -> None:
        """Reset game to initial state for a new run."""
        self.world = World()
        self.playback.clear()
        self.setup()

    def cleanup(self) -> None:
        """Drop all event subscriptions."""
        self.events.clear()


def format_status(game: Game) -> str:
    """Text snapshot of the colony for the console."""
    world = game.world
    lines = [f"Turn {world.turn} - {world.status}"]
    ship = world.ship
    if ship is not None:
        lines.append(f"Ship: home sector {ship.home_group}, docked at sector {ship.current_group}")
    for group in sorted(world.groups):
        neighbors = ", ".join(str(g) for g in world.neighbors(group)) or "-"
        pool = ", ".join(f"{k.value} {n}" for k, n in world.pooled_bunch(group).items()) or "empty"
        lines.append(f"[{group}] {world.group_names.get(group, '')} (links: {neighbors}) pool: {pool}")
        for node in world.nodes_in(group):
            occ = world.occupant_at(node)
            if isinstance(occ, Stockpile):
                text = f"{occ.kind.value} x{occ.amount}"
            elif isinstance(occ, Construction):
                text = f"{occ.kind} (cooldown {occ.cooldown})"
            else:
                text = "."
            lines.append(f"    node {node}: {text}")
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(description="Outpost - colony logistics turn engine")
    parser.add_argument('--verbose', action='store_true',
                        help='Print every action log entry')
    parser.add_argument('--log-file', default=None,
                        help='Append turn events to this file')
    parser.add_argument('--scenario', default=None,
                        help='Scenario JSON (defaults to the bundled one)')
    args = parser.parse_args()

    game = Game(scenario=args.scenario, verbose=args.verbose, log_file=args.log_file)
    game.setup()

    print("Outpost started!")
    print(USAGE)
    print(format_status(game))

    try:
        while game.running:
            try:
                line = input("> ").strip()
            except EOFError:
                break
            if not line:
                continue
            if line in ("quit", "q"):
                game.running = False
                break
            if line == "status":
                print(format_status(game))
                continue
            try:
                game.execute(parse_command(line))
            except InvalidActionError as e:
                print(f"[ERROR] {e}")
                continue
            # No animation in the console
            game.playback.skip()
            print(format_status(game))
    except KeyboardInterrupt:
        pass
    finally:
        game.cleanup()

    if game.status == GameStatus.WON:
        print("\nVictory! The colony is self-sufficient.")
    elif game.status == GameStatus.LOST:
        print("\nDefeat! The crew ran out of food.")
    else:
        print("\nGame ended.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
