import sys
from datetime import date
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from methods import MUSLIM_WORLD_LEAGUE
from models import GeoCoordinate


@pytest.fixture
def dhaka():
    return GeoCoordinate(latitude=23.8103, longitude=90.4125)


@pytest.fixture
def tromso():
    return GeoCoordinate(latitude=69.6492, longitude=18.9553)


@pytest.fixture
def london():
    return GeoCoordinate(latitude=51.5074, longitude=-0.1278)


@pytest.fixture
def mwl():
    return MUSLIM_WORLD_LEAGUE


@pytest.fixture
def ramadan_start():
    return date(2026, 2, 18)
