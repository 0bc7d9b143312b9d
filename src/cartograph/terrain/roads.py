"""Road network: greedy spanning tree over settlements."""

import numpy as np
from scipy.spatial.distance import cdist

from ..types import RoadEdge, Settlement


def build_roads(settlements: list[Settlement]) -> list[RoadEdge]:
    """Connect settlements with a Prim-style nearest-neighbour tree.

    Settlement 0 starts connected. Each step links the closest
    (connected, unconnected) pair, scanning connected ids then unconnected
    ids in ascending order so the first of equally close pairs wins.

    Args:
        settlements: Settlements in id order.

    Returns:
        ``len(settlements) - 1`` edges as (connected, newly connected)
        id pairs, or an empty list for fewer than two settlements.
    """
    count = len(settlements)
    if count < 2:
        return []

    points = np.array([(s.x, s.y) for s in settlements], dtype=np.float64)
    distances = cdist(points, points)

    connected = np.zeros(count, dtype=bool)
    connected[0] = True
    edges: list[RoadEdge] = []

    while len(edges) < count - 1:
        # Rows: connected sources; columns: unconnected targets
        masked = np.where(connected[:, None] & ~connected[None, :], distances, np.inf)
        best = int(np.argmin(masked))
        source, target = divmod(best, count)
        if not np.isfinite(masked[source, target]):
            break

        connected[target] = True
        edges.append((settlements[source].id, settlements[target].id))

    return edges
