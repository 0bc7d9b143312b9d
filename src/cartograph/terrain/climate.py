"""Climate fields: moisture enhancement from hydrology."""

import numpy as np
from numpy.typing import NDArray

WATER_BONUS_WEIGHT = 0.7
WATER_BONUS_CAP = 0.7
FLOW_BONUS_WEIGHT = 1.8
FLOW_BONUS_CAP = 0.8


def enhance_moisture(
    moisture: NDArray[np.float32],
    water: NDArray[np.float32],
    flow: NDArray[np.float32],
    moisture_scale: float,
    max_flow: float | None = None,
) -> NDArray[np.float32]:
    """Boost moisture near surface water and along high-flow cells.

    Args:
        moisture: Noise-derived moisture in [0, 1].
        water: Water field from hydrology.
        flow: Flow accumulation field.
        moisture_scale: Scale from the map config; damps the boosted sum.
        max_flow: Largest value in flow, if already known.

    Returns:
        New moisture field clamped to [0, 1].
    """
    if max_flow is None:
        max_flow = float(flow.max())
    water_bonus = np.minimum(water * WATER_BONUS_WEIGHT, WATER_BONUS_CAP)
    flow_bonus = np.minimum((flow / (max_flow + 1.0)) * FLOW_BONUS_WEIGHT, FLOW_BONUS_CAP)
    enhanced = (moisture + water_bonus + flow_bonus) / (1.0 + moisture_scale * 0.5)
    return np.clip(enhanced, 0.0, 1.0).astype(np.float32)
