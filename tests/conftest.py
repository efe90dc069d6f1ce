"""Pytest fixtures for Outpost tests."""
import pytest
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def data_dir():
    """Return the bundled data directory path."""
    from outpost.config import DATA_DIR
    return DATA_DIR


@pytest.fixture
def world():
    """Create a World with the bundled scenario loaded."""
    from outpost.core.world import World
    w = World()
    w.load_scenario()
    return w


@pytest.fixture
def build_world():
    """Factory for small hand-built worlds.

    groups maps group id -> node ids; occupants maps node -> occupant.
    """
    from outpost.core.world import World

    def _build(groups, edges=(), occupants=None, ship=None):
        w = World()
        for group, nodes in groups.items():
            w.add_group(group, nodes)
        for a, b in edges:
            w.add_edge(a, b)
        for node, occupant in (occupants or {}).items():
            w.set_occupant(node, occupant)
        w.ship = ship
        return w

    return _build


@pytest.fixture
def event_bus():
    """A recording EventBus."""
    from outpost.core.events import EventBus
    bus = EventBus()
    bus.start_recording()
    return bus


@pytest.fixture
def game():
    """Create a full Game instance with the bundled scenario."""
    from outpost.main import Game
    g = Game()
    g.setup()
    return g
