"""Settlement placement: habitability scoring and greedy spaced selection."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..types import REGION_SIZE, Settlement
from .grid import NEIGHBOR_DX, NEIGHBOR_DY
from .rng import U32_MASK, XorShiftRng

# Cells closer than this to any grid edge are never candidates
EDGE_MARGIN = 2
COAST_MARGIN = 0.02
MAX_WATER = 0.2
MAX_FLATNESS = 0.08
MIN_SCORE = 0.35

MOISTURE_WEIGHT = 0.6
FLATNESS_WEIGHT = 0.3
ELEVATION_WEIGHT = 0.1

MAX_SETTLEMENTS = 16
MAX_CANDIDATES = 200
# Minimum world-space distance between settlements, before jitter
MIN_SPACING = 120.0
# Jitter spans +/- half of this on each axis
JITTER_RANGE = 25.0

SIZE_SCALE = 6.0
MIN_SIZE = 1.2
MAX_SIZE = 6.5

# Multiplier applied to the map seed for the jitter generator
JITTER_SEED_MULTIPLIER = 747


@dataclass
class Candidate:
    """A habitable cell and its suitability score."""

    index: int
    score: float


def local_flatness(heightmap: NDArray[np.float32]) -> NDArray[np.float32]:
    """Mean absolute elevation difference to the 8 neighbours.

    Neighbour coordinates are clamped to the grid, so edge cells compare
    against themselves where a neighbour would fall outside.

    Args:
        heightmap: Elevation field, shape (height, width).

    Returns:
        Flatness field (lower is flatter).
    """
    padded = np.pad(heightmap, 1, mode="edge")
    height, width = heightmap.shape
    total = np.zeros_like(heightmap)

    for dx, dy in zip(NEIGHBOR_DX, NEIGHBOR_DY):
        neighbor = padded[1 + dy : height + 1 + dy, 1 + dx : width + 1 + dx]
        total += np.abs(heightmap - neighbor)

    return total / np.float32(len(NEIGHBOR_DX))


def find_candidates(
    heightmap: NDArray[np.float32],
    water: NDArray[np.float32],
    moisture: NDArray[np.float32],
    sea_level: float,
) -> list[Candidate]:
    """Score habitable cells and return them best first.

    Candidates lie at least EDGE_MARGIN cells from every edge, sit above
    the coast, are dry and flat, and score above MIN_SCORE. Equal scores
    keep row-major order.

    Args:
        heightmap: Elevation field.
        water: Water field.
        moisture: Enhanced moisture field.
        sea_level: Sea level threshold.

    Returns:
        Candidates sorted by descending score.
    """
    height, width = heightmap.shape
    flatness = local_flatness(heightmap)
    score = (
        moisture * MOISTURE_WEIGHT
        + (1.0 - flatness) * FLATNESS_WEIGHT
        + heightmap * ELEVATION_WEIGHT
    )

    habitable = (
        (heightmap > sea_level + COAST_MARGIN)
        & (water <= MAX_WATER)
        & (flatness <= MAX_FLATNESS)
        & (score > MIN_SCORE)
    )

    # Only the interior away from the edge margin is eligible
    interior = np.zeros_like(habitable)
    interior[EDGE_MARGIN : height - EDGE_MARGIN, EDGE_MARGIN : width - EDGE_MARGIN] = True
    habitable &= interior

    indices = np.flatnonzero(habitable)
    scores = score.ravel()[indices]
    order = np.argsort(-scores, kind="stable")

    return [
        Candidate(index=int(indices[i]), score=float(scores[i]))
        for i in order
    ]


def place_settlements(
    heightmap: NDArray[np.float32],
    water: NDArray[np.float32],
    moisture: NDArray[np.float32],
    sea_level: float,
    seed: int,
) -> list[Settlement]:
    """Greedily place well-spaced settlements on the best candidates.

    Walks the top candidates in score order, skipping any within
    MIN_SPACING world units of an accepted site, and jitters accepted
    positions. Jittered positions are not clamped to the region.

    Args:
        heightmap: Elevation field.
        water: Water field.
        moisture: Enhanced moisture field.
        sea_level: Sea level threshold.
        seed: Map seed; the jitter generator is derived from it.

    Returns:
        Settlements with ids in acceptance order.
    """
    height, width = heightmap.shape
    candidates = find_candidates(heightmap, water, moisture, sea_level)
    rng = XorShiftRng((seed * JITTER_SEED_MULTIPLIER) & U32_MASK)

    settlements: list[Settlement] = []
    # Pre-jitter grid positions of accepted sites
    anchors: list[tuple[float, float]] = []

    for candidate in candidates[:MAX_CANDIDATES]:
        x = candidate.index % width
        y = candidate.index // width
        world_x = (x / width) * REGION_SIZE
        world_y = (y / height) * REGION_SIZE

        if any(
            np.hypot(ax - world_x, ay - world_y) < MIN_SPACING for ax, ay in anchors
        ):
            continue

        jitter_x = (rng.next_f32() - 0.5) * JITTER_RANGE
        jitter_y = (rng.next_f32() - 0.5) * JITTER_RANGE
        size = min(max(candidate.score * SIZE_SCALE, MIN_SIZE), MAX_SIZE)

        settlements.append(
            Settlement(
                id=len(settlements),
                x=world_x + jitter_x,
                y=world_y + jitter_y,
                size=size,
            )
        )
        anchors.append((world_x, world_y))

        if len(settlements) >= MAX_SETTLEMENTS:
            break

    return settlements
