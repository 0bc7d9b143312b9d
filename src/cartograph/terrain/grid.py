"""Grid neighbourhood constants shared by the per-cell stages."""

import numpy as np
from numpy.typing import NDArray

# 8-neighbourhood offsets in scan order: row above, same row, row below.
# Scan order decides ties wherever the first neighbour wins.
NEIGHBOR_DX = np.array([-1, 0, 1, -1, 1, -1, 0, 1], dtype=np.int64)
NEIGHBOR_DY = np.array([-1, -1, -1, 0, 0, 1, 1, 1], dtype=np.int64)

# Marks a cell without a downslope target (sink)
NO_TARGET = -1


def interior_neighbor(
    field: NDArray,
    dx: int,
    dy: int,
    margin: int = 1,
) -> NDArray:
    """View of each interior cell's neighbour at offset (dx, dy).

    The interior excludes ``margin`` cells on every side; the returned view
    is aligned with ``field[margin:-margin, margin:-margin]``.
    """
    height, width = field.shape
    return field[
        margin + dy : height - margin + dy,
        margin + dx : width - margin + dx,
    ]
