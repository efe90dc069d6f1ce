"""
Outpost Configuration
Contains engine constants, data paths, and loaders.
"""
import json
from pathlib import Path
from typing import Optional, Union

# Paths
PACKAGE_ROOT = Path(__file__).parent
DATA_DIR = PACKAGE_ROOT / "data"
DEFAULT_SCENARIO = DATA_DIR / "scenario.json"

# Stockpiles
MAX_STOCKPILE = 100

# Iteration caps (saturation truncates silently)
ALLOCATION_PASSES = 16
MAX_TURN_ITERS = 10000

# Travel and survival rules (resource kind names as in constructions.json)
FUEL_KIND = "RocketFuel"
FUEL_PER_JUMP = 1
SURVIVAL_KIND = "Food"
SURVIVAL_PER_TURN = 1
VICTORY_THRESHOLDS = {"Material": 100, "FusionFuel": 100}

# Playback
PLAYBACK_STEP = 0.3  # seconds per action log entry


def load_constructions() -> dict:
    """Load construction stats from constructions.json"""
    with open(DATA_DIR / "constructions.json", "r") as f:
        return json.load(f)


def load_scenario(path: Optional[Union[str, Path]] = None) -> dict:
    """Load scenario configuration (the bundled one when path is None)"""
    with open(path or DEFAULT_SCENARIO, "r") as f:
        return json.load(f)
