"""Procedural terrain map generation package.

This package implements the generation pipeline: warped noise elevation,
thermal erosion, flow hydrology, climate, biome classification, settlement
placement, and road networks.
"""

from .config import MapConfig, find_config, load_config
from .generator import (
    compute_biome_histogram,
    generate_map,
    generate_terrain,
    land_fraction,
)
from .validation import ValidationResult, validate_map

__all__ = [
    "MapConfig",
    "ValidationResult",
    "compute_biome_histogram",
    "find_config",
    "generate_map",
    "generate_terrain",
    "land_fraction",
    "load_config",
    "validate_map",
]
