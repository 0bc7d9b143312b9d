"""Thermal erosion: relax steep drops between neighbouring cells."""

import numpy as np
from numpy.typing import NDArray

from .grid import NEIGHBOR_DX, NEIGHBOR_DY, interior_neighbor

# Drops at or below this are considered stable
TALUS_THRESHOLD = 0.03
# Fraction of the drop removed when levelling toward a neighbour
LEVELING_FACTOR = 0.5


def thermal_erosion_pass(heightmap: NDArray[np.float32]) -> NDArray[np.float32]:
    """Run one relaxation pass and return a new heightmap.

    Every interior cell becomes the mean of its own elevation and, for each
    neighbour lower by more than the talus threshold, the point halfway
    down toward that neighbour. All reads come from the input snapshot.
    The outermost ring is copied through unchanged.

    Args:
        heightmap: Elevation field, shape (height, width).

    Returns:
        Relaxed elevation field (new array).
    """
    result = heightmap.copy()
    height, width = heightmap.shape
    if height < 3 or width < 3:
        return result

    center = heightmap[1:-1, 1:-1]
    total = center.copy()
    count = np.ones_like(center)

    for dx, dy in zip(NEIGHBOR_DX, NEIGHBOR_DY):
        neighbor = interior_neighbor(heightmap, int(dx), int(dy))
        drop = center - neighbor
        steep = drop > TALUS_THRESHOLD
        total += np.where(steep, neighbor + drop * LEVELING_FACTOR, 0.0).astype(
            heightmap.dtype
        )
        count += steep

    result[1:-1, 1:-1] = total / count
    return result


def apply_thermal_erosion(
    heightmap: NDArray[np.float32],
    iterations: int,
) -> NDArray[np.float32]:
    """Apply thermal erosion for a number of passes.

    Args:
        heightmap: Elevation field.
        iterations: Number of passes; 0 returns an unchanged copy.

    Returns:
        Eroded elevation field.
    """
    result = heightmap.copy()
    for _ in range(iterations):
        result = thermal_erosion_pass(result)
    return result
