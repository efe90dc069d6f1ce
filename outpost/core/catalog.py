"""
Outpost Construction Catalog

Static lookup of construction kinds, loaded once from constructions.json.
Catalog order is only meant for listing; resolution derives its own order.
"""
from dataclasses import dataclass
from typing import Dict, List

from ..config import load_constructions
from .bunch import Bunch
from .errors import UnknownConstructionError


@dataclass(frozen=True)
class ConstructionSpec:
    """Per-kind descriptor shared by every instance of that kind."""
    kind: str
    sprite_index: int
    cost: Bunch      # materials spent to build
    request: Bunch   # consumed per production cycle
    produce: Bunch   # produced per production cycle
    cooldown: int    # turns between cycles

    @classmethod
    def from_stats(cls, kind: str, stats: dict) -> "ConstructionSpec":
        return cls(
            kind=kind,
            sprite_index=stats.get("sprite", 0),
            cost=Bunch.from_dict(stats.get("cost", {})),
            request=Bunch.from_dict(stats.get("request", {})),
            produce=Bunch.from_dict(stats.get("produce", {})),
            cooldown=int(stats.get("cooldown", 1)),
        )


CONSTRUCTION_STATS = load_constructions()

CATALOG: Dict[str, ConstructionSpec] = {
    kind: ConstructionSpec.from_stats(kind, stats)
    for kind, stats in CONSTRUCTION_STATS.items()
}


def get_spec(kind: str) -> ConstructionSpec:
    """Look up a construction kind."""
    try:
        return CATALOG[kind]
    except KeyError:
        raise UnknownConstructionError(f"Unknown construction kind: {kind}",
                                       context={"known": ", ".join(CATALOG)}) from None


def all_specs() -> List[ConstructionSpec]:
    """All catalog rows in file order (for listings)."""
    return list(CATALOG.values())


def construction_kinds() -> List[str]:
    return list(CATALOG)
