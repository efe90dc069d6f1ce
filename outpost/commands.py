"""
Commands
Command objects for every player interaction, plus a parser for the
text console. The console and tests go through the same Game.execute().
"""
from dataclasses import dataclass
from typing import Optional

from .core.errors import InvalidActionError


@dataclass
class EndTurn:
    """Resolve the current turn"""


@dataclass
class Build:
    """Place a construction on an empty node"""
    node: int
    kind: str


@dataclass
class Demolish:
    """Remove the construction on a node"""
    node: int


@dataclass
class Transfer:
    """Move a stockpile (or part of it) to another node"""
    source: int
    target: int
    amount: Optional[int] = None


@dataclass
class SetDestination:
    """Plan the ship's next jump"""
    group: int


@dataclass
class Reset:
    """Start over from the scenario"""


# Type alias for any command
Command = EndTurn | Build | Demolish | Transfer | SetDestination | Reset


USAGE = """Commands:
  end                     resolve the turn
  build NODE KIND         place a construction
  demolish NODE           remove a construction
  move SRC DST [AMOUNT]   move a stockpile
  travel GROUP            set the ship's destination
  status                  show the colony
  reset                   start over
  quit                    leave"""


def parse_command(line: str) -> Command:
    """Turn a console line into a command."""
    words = line.split()
    if not words:
        raise InvalidActionError("Empty command")
    verb, args = words[0].lower(), words[1:]
    try:
        if verb in ("end", "e") and not args:
            return EndTurn()
        if verb == "build" and len(args) == 2:
            return Build(node=int(args[0]), kind=args[1])
        if verb == "demolish" and len(args) == 1:
            return Demolish(node=int(args[0]))
        if verb == "move" and len(args) in (2, 3):
            amount = int(args[2]) if len(args) == 3 else None
            return Transfer(source=int(args[0]), target=int(args[1]), amount=amount)
        if verb == "travel" and len(args) == 1:
            return SetDestination(group=int(args[0]))
        if verb == "reset" and not args:
            return Reset()
    except ValueError:
        raise InvalidActionError(f"Bad arguments: {line}") from None
    raise InvalidActionError(f"Unknown command: {line}")
