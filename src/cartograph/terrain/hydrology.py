"""Hydrology: steepest-descent routing, flow accumulation, water field.

Every cell drains to its single lowest neighbour. Flow is accumulated by
visiting cells from highest to lowest so each cell has received all of its
upstream flow before passing it on.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..exceptions import InvalidParameterError
from .grid import NEIGHBOR_DX, NEIGHBOR_DY, NO_TARGET

# Runoff below this does not register as surface water
RIVER_THRESHOLD = 0.3
# Exponent applied to normalized flow; < 1 widens visible channels
RUNOFF_EXPONENT = 0.4


@dataclass
class HydrologyResult:
    """Outputs of the hydrology stage.

    ``downslope`` is flat (linear cell indices, NO_TARGET for sinks);
    ``flow`` and ``water`` have shape (height, width).
    """

    downslope: NDArray[np.int64]
    flow: NDArray[np.float32]
    water: NDArray[np.float32]

    @property
    def max_flow(self) -> float:
        """Largest accumulated flow on the grid."""
        return float(self.flow.max())


def compute_downslope(heightmap: NDArray[np.float32]) -> NDArray[np.int64]:
    """Find each cell's strictly lowest neighbour (vectorized).

    Neighbours outside the grid are skipped. Among equally low neighbours
    the first in scan order wins. Cells with no strictly lower neighbour
    are sinks.

    Args:
        heightmap: Elevation field, shape (height, width).

    Returns:
        Flat int64 array of target indices, NO_TARGET for sinks.

    Raises:
        InvalidParameterError: If the heightmap contains NaN.
    """
    if np.isnan(heightmap).any():
        raise InvalidParameterError("heightmap contains NaN; flow order is undefined")

    height, width = heightmap.shape

    # Pad with +inf so out-of-bounds neighbours are never lower
    padded = np.pad(heightmap, 1, mode="constant", constant_values=np.inf)
    ys, xs = np.meshgrid(np.arange(height), np.arange(width), indexing="ij")

    lowest = heightmap.copy()
    target = np.full((height, width), NO_TARGET, dtype=np.int64)

    for dx, dy in zip(NEIGHBOR_DX, NEIGHBOR_DY):
        neighbor = padded[1 + dy : height + 1 + dy, 1 + dx : width + 1 + dx]
        lower = neighbor < lowest
        lowest = np.where(lower, neighbor, lowest)
        target = np.where(lower, (ys + dy) * width + (xs + dx), target)

    return target.ravel()


def descending_order(heightmap: NDArray[np.float32]) -> NDArray[np.int64]:
    """Linear cell indices sorted highest elevation first.

    Equal elevations keep ascending index order.
    """
    return np.argsort(-heightmap.ravel(), kind="stable")


def accumulate_flow(
    heightmap: NDArray[np.float32],
    downslope: NDArray[np.int64],
) -> NDArray[np.float32]:
    """Accumulate unit flow along downslope pointers.

    Args:
        heightmap: Elevation field, shape (height, width).
        downslope: Flat target indices from compute_downslope.

    Returns:
        Flow field of shape (height, width), every value >= 1.
    """
    flow = [1.0] * heightmap.size
    targets = downslope.tolist()

    for cell in descending_order(heightmap).tolist():
        target = targets[cell]
        if target != NO_TARGET:
            flow[target] += flow[cell]

    return np.asarray(flow, dtype=np.float32).reshape(heightmap.shape)


def compute_water(
    heightmap: NDArray[np.float32],
    flow: NDArray[np.float32],
    sea_level: float,
) -> NDArray[np.float32]:
    """Derive surface water from sea level and accumulated flow.

    Cells at or below sea level are fully submerged. Above sea level,
    ``(flow / (max_flow + 1)) ** 0.4`` marks a river where it exceeds the
    river threshold.

    Args:
        heightmap: Elevation field.
        flow: Flow accumulation field.
        sea_level: Sea level threshold.

    Returns:
        Water field in [0, 1].
    """
    max_flow = flow.max()
    runoff = (flow / (max_flow + 1.0)) ** RUNOFF_EXPONENT
    water = np.where(runoff > RIVER_THRESHOLD, runoff, 0.0).astype(np.float32)
    water[heightmap <= sea_level] = 1.0
    return water


def build_flow_map(
    heightmap: NDArray[np.float32],
    sea_level: float,
) -> HydrologyResult:
    """Run the full hydrology stage.

    Args:
        heightmap: Eroded elevation field.
        sea_level: Sea level threshold.

    Returns:
        HydrologyResult with downslope pointers, flow, and water.
    """
    downslope = compute_downslope(heightmap)
    flow = accumulate_flow(heightmap, downslope)
    water = compute_water(heightmap, flow, sea_level)
    return HydrologyResult(downslope=downslope, flow=flow, water=water)
