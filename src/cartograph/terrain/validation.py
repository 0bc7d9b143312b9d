"""Post-generation validation of map invariants."""

import itertools

import numpy as np
import structlog
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components

from ..biomes import Biome
from ..types import FLOAT_FIELDS, REGION_SIZE, MapResult
from .config import MapConfig
from .classification import OCEAN_MARGIN
from .settlements import JITTER_RANGE, MAX_SETTLEMENTS, MIN_SPACING

logger = structlog.get_logger()


class ValidationResult:
    """Result of map validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_map(result: MapResult, config: MapConfig) -> ValidationResult:
    """Validate a generated map against its invariants.

    Args:
        result: Generated map.
        config: Configuration the map was generated with.

    Returns:
        ValidationResult with any errors/warnings.
    """
    validation = ValidationResult()

    # Check 1: Field shapes and finiteness
    _check_fields(result, validation)

    # Check 2: Sea level cells are fully submerged
    _check_sea_level_water(result, config.sea_level, validation)

    # Check 3: Every cell carries at least its own unit of flow
    _check_flow(result, validation)

    # Check 4: Biome codes and ocean placement
    _check_biomes(result, config.sea_level, validation)

    # Check 5: Settlement count, spacing, bounds
    _check_settlements(result, validation)

    # Check 6: Roads form a spanning tree
    _check_roads(result, validation)

    if validation.passed:
        logger.info("map_validation_passed", warnings=len(validation.warnings))
    else:
        logger.warning("map_validation_failed", errors=validation.errors)

    for warning in validation.warnings:
        logger.warning("map_validation_warning", message=warning)

    return validation


def _check_fields(result: MapResult, validation: ValidationResult) -> None:
    """Check per-cell arrays have the grid shape and finite values in [0, 1]."""
    expected = (result.height, result.width)
    for name in FLOAT_FIELDS:
        array = getattr(result, name)
        if array.shape != expected:
            validation.add_error(f"{name} has shape {array.shape}, expected {expected}")
            continue
        if not np.all(np.isfinite(array)):
            validation.add_error(f"{name} contains non-finite values")
            continue
        if name != "flow" and (array.min() < 0.0 or array.max() > 1.0):
            validation.add_error(
                f"{name} outside [0, 1]: [{array.min():.4f}, {array.max():.4f}]"
            )


def _check_sea_level_water(
    result: MapResult,
    sea_level: float,
    validation: ValidationResult,
) -> None:
    """Check cells at or below sea level have water == 1."""
    submerged = result.heightmap <= sea_level
    dry = np.sum(result.water[submerged] != 1.0)
    if dry > 0:
        validation.add_error(f"{dry} cells at or below sea level are not fully water")


def _check_flow(result: MapResult, validation: ValidationResult) -> None:
    """Check flow is at least 1 everywhere."""
    low = np.sum(result.flow < 1.0)
    if low > 0:
        validation.add_error(f"{low} cells have flow below 1.0")


def _check_biomes(
    result: MapResult,
    sea_level: float,
    validation: ValidationResult,
) -> None:
    """Check biome codes are valid and ocean matches the depth rule."""
    if result.biome.size and result.biome.max() > max(Biome):
        validation.add_error(f"Invalid biome code {result.biome.max()}")

    deep = result.heightmap <= sea_level - OCEAN_MARGIN
    ocean = result.biome == Biome.OCEAN
    mismatched = np.sum(deep != ocean)
    if mismatched > 0:
        validation.add_error(f"{mismatched} cells disagree between depth and ocean biome")


def _check_settlements(result: MapResult, validation: ValidationResult) -> None:
    """Check settlement count, ids, spacing, and region bounds."""
    settlements = result.settlements
    if len(settlements) > MAX_SETTLEMENTS:
        validation.add_error(
            f"{len(settlements)} settlements exceeds cap of {MAX_SETTLEMENTS}"
        )

    ids = [s.id for s in settlements]
    if ids != list(range(len(settlements))):
        validation.add_error(f"Settlement ids are not sequential: {ids}")

    # Jitter can move each endpoint by up to half the range on both axes
    slack = JITTER_RANGE * np.sqrt(2.0)
    for a, b in itertools.combinations(settlements, 2):
        distance = a.distance_to(b)
        if distance < MIN_SPACING - slack:
            validation.add_error(
                f"Settlements {a.id} and {b.id} are {distance:.1f} apart"
            )
        elif distance < MIN_SPACING:
            validation.add_warning(
                f"Settlements {a.id} and {b.id} are {distance:.1f} apart after jitter"
            )

    half_jitter = JITTER_RANGE / 2
    for s in settlements:
        if not (
            -half_jitter <= s.x < REGION_SIZE + half_jitter
            and -half_jitter <= s.y < REGION_SIZE + half_jitter
        ):
            validation.add_error(f"Settlement {s.id} at ({s.x:.1f}, {s.y:.1f}) is off-map")


def _check_roads(result: MapResult, validation: ValidationResult) -> None:
    """Check roads form a spanning tree over all settlements."""
    count = len(result.settlements)
    roads = result.roads
    expected = max(count - 1, 0)

    if len(roads) != expected:
        validation.add_error(f"Expected {expected} roads, found {len(roads)}")
        return

    if count < 2:
        return

    if any(not (0 <= a < count and 0 <= b < count) for a, b in roads):
        validation.add_error("Road references unknown settlement")
        return

    rows = [a for a, _ in roads]
    cols = [b for _, b in roads]
    graph = coo_matrix((np.ones(len(roads)), (rows, cols)), shape=(count, count))
    num_components, _ = connected_components(graph, directed=False)

    # n - 1 edges and one component means a tree
    if num_components != 1:
        validation.add_error(f"Road network has {num_components} components")
