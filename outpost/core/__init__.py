"""Outpost Core - Economy and turn resolution"""
from .bunch import Bunch, ResourceKind
from .catalog import ConstructionSpec, get_spec, all_specs
from .entities import Stockpile, Construction, Ship
from .errors import (
    OutpostError,
    InvariantViolation,
    InvalidActionError,
    UnknownConstructionError,
    ScenarioError,
)
from .events import (
    EventBus,
    ConsumeResource,
    ProduceResource,
    ShipMove,
)
from .world import World, Allocation, GameStatus
from .playback import ActionPlayback
from .systems import (
    ProductionSystem,
    SurvivalSystem,
    TravelSystem,
    BuildingPlacementSystem,
    TurnSystem,
)
