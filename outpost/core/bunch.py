"""
Outpost Resources - Resource kinds and the Bunch value type

A Bunch is a multiset of resource kinds: it maps each kind to a
non-negative amount, treating missing kinds as zero.
"""
from enum import Enum
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple


class ResourceKind(Enum):
    """Every resource a stockpile can hold."""
    POWER = "Power"
    ROCKET_FUEL = "RocketFuel"
    FOOD = "Food"
    MATERIAL = "Material"
    FUSION_FUEL = "FusionFuel"

    @classmethod
    def parse(cls, name) -> "ResourceKind":
        """Accept a kind, its value ("RocketFuel") or its member name."""
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            pass
        try:
            return cls[str(name).upper()]
        except KeyError:
            raise ValueError(f"Unknown resource kind: {name}") from None


# Declaration order doubles as iteration order for every bunch
_ORDER = {kind: index for index, kind in enumerate(ResourceKind)}


class Bunch:
    """Immutable mapping of resource kind to amount."""

    __slots__ = ("_amounts",)

    def __init__(self, amounts: Optional[Mapping[ResourceKind, int]] = None):
        cleaned: Dict[ResourceKind, int] = {}
        for kind, amount in (amounts or {}).items():
            if amount < 0:
                raise ValueError(f"Negative amount for {kind}: {amount}")
            if amount:
                cleaned[kind] = amount
        self._amounts = dict(sorted(cleaned.items(), key=lambda item: _ORDER[item[0]]))

    @classmethod
    def single(cls, kind: ResourceKind, amount: int) -> "Bunch":
        return cls({kind: amount})

    @classmethod
    def from_dict(cls, data: Mapping[str, int]) -> "Bunch":
        """Build from JSON-style data, e.g. {"Power": 2}."""
        return cls({ResourceKind.parse(name): int(amount) for name, amount in data.items()})

    @classmethod
    def sum(cls, bunches: Iterable["Bunch"]) -> "Bunch":
        total = cls()
        for bunch in bunches:
            total = total + bunch
        return total

    def contains(self, required: "Bunch") -> bool:
        """True if every requested amount is available here."""
        return all(self[kind] >= amount for kind, amount in required.items())

    def items(self) -> Iterator[Tuple[ResourceKind, int]]:
        return iter(self._amounts.items())

    def kinds(self) -> Tuple[ResourceKind, ...]:
        return tuple(self._amounts)

    def to_dict(self) -> Dict[str, int]:
        return {kind.value: amount for kind, amount in self._amounts.items()}

    def __getitem__(self, kind: ResourceKind) -> int:
        return self._amounts.get(kind, 0)

    def __add__(self, other: "Bunch") -> "Bunch":
        if not isinstance(other, Bunch):
            return NotImplemented
        merged = dict(self._amounts)
        for kind, amount in other.items():
            merged[kind] = merged.get(kind, 0) + amount
        return Bunch(merged)

    def __iter__(self) -> Iterator[ResourceKind]:
        return iter(self._amounts)

    def __len__(self) -> int:
        return len(self._amounts)

    def __bool__(self) -> bool:
        return bool(self._amounts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bunch):
            return NotImplemented
        return self._amounts == other._amounts

    def __hash__(self) -> int:
        return hash(tuple(self._amounts.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{kind.value}={amount}" for kind, amount in self._amounts.items())
        return f"Bunch({inner})"


def add(a: Bunch, b: Bunch) -> Bunch:
    """Pointwise sum of two bunches."""
    return a + b
