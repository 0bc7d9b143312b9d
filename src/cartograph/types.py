"""Core types for generated maps."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel

# Side length of the logical world region settlements are placed in,
# independent of grid resolution.
REGION_SIZE = 2048.0

# Road edge as a pair of settlement ids
RoadEdge = tuple[int, int]

# Per-cell float fields carried by every MapResult, in payload order
FLOAT_FIELDS: tuple[str, ...] = (
    "heightmap",
    "flow",
    "moisture",
    "temperature",
    "water",
)


class Settlement(BaseModel, frozen=True):
    """Immutable settlement placed in world-space coordinates."""

    id: int
    x: float
    y: float
    size: float

    def distance_to(self, other: "Settlement") -> float:
        """Euclidean distance to another settlement in world units."""
        return float(np.hypot(self.x - other.x, self.y - other.y))


@dataclass(frozen=True)
class MapResult:
    """Immutable snapshot of a generated map.

    Every per-cell array is 2D with shape (height, width); flattening it
    row-major yields the linear layout ``index = y * width + x``.
    """

    width: int
    height: int
    heightmap: NDArray[np.float32]
    flow: NDArray[np.float32]
    moisture: NDArray[np.float32]
    temperature: NDArray[np.float32]
    water: NDArray[np.float32]
    biome: NDArray[np.uint8]
    settlements: tuple[Settlement, ...] = ()
    roads: tuple[RoadEdge, ...] = ()

    def __post_init__(self) -> None:
        for name in (*FLOAT_FIELDS, "biome"):
            array = getattr(self, name)
            if array.shape != (self.height, self.width):
                raise ValueError(
                    f"{name} has shape {array.shape}, "
                    f"expected {(self.height, self.width)}"
                )
            array.flags.writeable = False

    @property
    def cell_count(self) -> int:
        """Number of cells in the grid."""
        return self.width * self.height

    def index(self, x: int, y: int) -> int:
        """Linear index of cell (x, y)."""
        return y * self.width + x
