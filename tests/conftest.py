"""Shared test fixtures for map generation tests."""

import pytest

from cartograph.terrain.config import MapConfig
from cartograph.terrain.generator import generate_terrain
from cartograph.types import MapResult


@pytest.fixture(scope="session")
def small_config() -> MapConfig:
    """48x48 map with default tuning."""
    return MapConfig(seed=7, width=48, height=48)


@pytest.fixture(scope="session")
def small_map(small_config: MapConfig) -> MapResult:
    """Map generated once from small_config and shared across tests."""
    return generate_terrain(small_config)


@pytest.fixture(scope="session")
def wide_map() -> MapResult:
    """Non-square map to catch width/height mix-ups."""
    return generate_terrain(MapConfig(seed=123, width=40, height=24, sea_level=0.45))
