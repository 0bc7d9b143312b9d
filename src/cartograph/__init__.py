"""Procedural terrain map generation."""

from .biomes import Biome
from .conversion import (
    map_from_payload,
    map_to_payload,
    road_to_payload,
    settlement_from_payload,
    settlement_to_payload,
)
from .exceptions import (
    InvalidDimensionsError,
    InvalidParameterError,
    MapError,
    PayloadError,
)
from .terrain import MapConfig, generate_map, generate_terrain
from .types import REGION_SIZE, MapResult, RoadEdge, Settlement

__all__ = [
    # Types
    "Biome",
    "MapResult",
    "REGION_SIZE",
    "RoadEdge",
    "Settlement",
    # Generation
    "MapConfig",
    "generate_map",
    "generate_terrain",
    # Conversion
    "map_to_payload",
    "map_from_payload",
    "settlement_to_payload",
    "settlement_from_payload",
    "road_to_payload",
    # Exceptions
    "MapError",
    "InvalidDimensionsError",
    "InvalidParameterError",
    "PayloadError",
]
