"""Pytest fixtures for all tests."""

import random

import pytest
from httpx import AsyncClient, ASGITransport

from communication.bus import EventBus
from config import Config, SimulationConfig
from simulation.engine import SimulationEngine
from simulation.geometry import Point2
from simulation.surface import Surface
from simulation.world import World
from ui.app import create_app


@pytest.fixture
def sim_config():
    """Default physics on an 800x600 surface, seeded."""
    return SimulationConfig(surface_width=800, surface_height=600, seed=7)


@pytest.fixture
def still_config():
    """No gravity and no ring rotation, for hand-placed collision scenarios."""
    return SimulationConfig(surface_width=1000, surface_height=1000, seed=3, gravity=0, rotation_speed=0)


@pytest.fixture
def surface(sim_config):
    return Surface(sim_config.surface_width, sim_config.surface_height)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def world(sim_config, surface, rng):
    return World(sim_config, surface, rng)


@pytest.fixture
def center():
    return Point2(400, 300)


@pytest.fixture
async def bus():
    """Create test event bus."""
    return EventBus(queue_size=10)


@pytest.fixture
async def engine(bus):
    """Engine ticking fast enough for short tests."""
    eng = SimulationEngine(bus=bus, config=SimulationConfig(frame_rate=200, seed=11))
    yield eng
    if eng._task:
        await eng.stop()


@pytest.fixture
async def app():
    """Create test FastAPI app."""
    return create_app(Config(simulation=SimulationConfig(seed=5)))


@pytest.fixture
async def client(app):
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
