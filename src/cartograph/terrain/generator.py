"""Main map generation orchestration."""

import math
import time
from collections.abc import Iterator
from contextlib import contextmanager

import numpy as np
import structlog
from pydantic import ValidationError

from ..biomes import Biome
from ..exceptions import InvalidDimensionsError, InvalidParameterError
from ..types import MapResult
from .classification import classify_biomes
from .climate import enhance_moisture
from .config import MAX_SEED, MapConfig
from .erosion import apply_thermal_erosion
from .fields import make_base_fields
from .hydrology import build_flow_map
from .roads import build_roads
from .settlements import place_settlements

logger = structlog.get_logger()


@contextmanager
def _stage(name: str) -> Iterator[None]:
    """Log the wall time of a pipeline stage."""
    start = time.perf_counter()
    yield
    duration_ms = (time.perf_counter() - start) * 1000
    logger.debug("stage_complete", stage=name, duration_ms=round(duration_ms, 2))


def generate_terrain(config: MapConfig) -> MapResult:
    """Generate a complete map from configuration.

    Stages run in order: noise fields, thermal erosion, hydrology,
    moisture enhancement, biome classification, settlements, roads.

    Args:
        config: Map generation configuration.

    Returns:
        Immutable MapResult.
    """
    start = time.perf_counter()
    logger.info(
        "map_generation_started",
        width=config.width,
        height=config.height,
        seed=config.seed,
    )

    with _stage("fields"):
        fields = make_base_fields(config)

    with _stage("erosion"):
        heightmap = apply_thermal_erosion(fields.heightmap, config.erosion_iterations)

    with _stage("hydrology"):
        hydrology = build_flow_map(heightmap, config.sea_level)

    with _stage("climate"):
        moisture = enhance_moisture(
            fields.moisture,
            hydrology.water,
            hydrology.flow,
            config.moisture_scale,
            max_flow=hydrology.max_flow,
        )

    with _stage("biomes"):
        biome = classify_biomes(
            heightmap,
            hydrology.water,
            fields.temperature,
            moisture,
            config.sea_level,
        )

    with _stage("settlements"):
        settlements = place_settlements(
            heightmap, hydrology.water, moisture, config.sea_level, config.seed
        )

    with _stage("roads"):
        roads = build_roads(settlements)

    result = MapResult(
        width=config.width,
        height=config.height,
        heightmap=heightmap,
        flow=hydrology.flow,
        moisture=moisture,
        temperature=fields.temperature,
        water=hydrology.water,
        biome=biome,
        settlements=tuple(settlements),
        roads=tuple(roads),
    )

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "map_generation_complete",
        duration_ms=round(duration_ms, 1),
        land_fraction=round(land_fraction(result), 4),
        settlements=len(result.settlements),
        roads=len(result.roads),
    )
    logger.debug("biome_histogram", **compute_biome_histogram(result))

    return result


def generate_map(
    width: int,
    height: int,
    seed: int,
    sea_level: float,
    elevation_amplitude: float,
    warp_strength: float,
    erosion_iterations: int,
    moisture_scale: float,
) -> MapResult:
    """Generate a map from scalar parameters.

    Arguments are checked before any work is done.

    Raises:
        InvalidDimensionsError: If width or height is not a positive integer.
        InvalidParameterError: If a float parameter is NaN or infinite,
            the seed is not an unsigned 32-bit integer, or
            erosion_iterations is not a non-negative integer.
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensionsError(
            f"width and height must be positive, got {width}x{height}"
        )
    if not 0 <= seed <= MAX_SEED:
        raise InvalidParameterError(f"seed must be in [0, {MAX_SEED}], got {seed}")
    if erosion_iterations < 0:
        raise InvalidParameterError(
            f"erosion_iterations must be >= 0, got {erosion_iterations}"
        )

    floats = {
        "sea_level": sea_level,
        "elevation_amplitude": elevation_amplitude,
        "warp_strength": warp_strength,
        "moisture_scale": moisture_scale,
    }
    for name, value in floats.items():
        if not math.isfinite(value):
            raise InvalidParameterError(f"{name} must be finite, got {value}")

    try:
        config = MapConfig(
            width=width,
            height=height,
            seed=seed,
            erosion_iterations=erosion_iterations,
            **floats,
        )
    except ValidationError as e:
        fields = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
        if fields & {"width", "height"}:
            raise InvalidDimensionsError(str(e)) from e
        raise InvalidParameterError(str(e)) from e
    return generate_terrain(config)


def land_fraction(result: MapResult) -> float:
    """Fraction of cells that are not ocean or lake."""
    water_codes = [int(b) for b in Biome if b.is_water]
    return float(np.mean(~np.isin(result.biome, water_codes)))


def compute_biome_histogram(result: MapResult) -> dict[str, int]:
    """Count cells per biome, keyed by biome label."""
    counts = np.bincount(result.biome.ravel(), minlength=len(Biome))
    return {biome.label: int(counts[biome]) for biome in Biome}
