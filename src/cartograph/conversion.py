"""Conversion between MapResult and the caller-facing payload.

The payload is a plain dict: scalar ``width``/``height``, one flat
row-major list per per-cell field (``index = y * width + x``), a
``settlements`` list of ``{id, x, y, size}`` records, and a ``roadGraph``
list of ``[from, to]`` id pairs.
"""

from typing import Any

import numpy as np
from pydantic import ValidationError

from .biomes import Biome
from .exceptions import PayloadError
from .types import FLOAT_FIELDS, MapResult, RoadEdge, Settlement


def settlement_to_payload(settlement: Settlement) -> dict[str, Any]:
    """Convert Settlement to a payload record."""
    return {
        "id": settlement.id,
        "x": settlement.x,
        "y": settlement.y,
        "size": settlement.size,
    }


def settlement_from_payload(record: dict[str, Any]) -> Settlement:
    """Convert a payload record to Settlement."""
    return Settlement(
        id=record["id"],
        x=record["x"],
        y=record["y"],
        size=record["size"],
    )


def road_to_payload(edge: RoadEdge) -> list[int]:
    """Convert a road edge to a [from, to] pair."""
    return [int(edge[0]), int(edge[1])]


def map_to_payload(result: MapResult) -> dict[str, Any]:
    """Flatten a MapResult into the caller-facing payload."""
    payload: dict[str, Any] = {
        "width": result.width,
        "height": result.height,
    }
    for name in FLOAT_FIELDS:
        payload[name] = getattr(result, name).ravel().tolist()
    payload["biome"] = result.biome.ravel().tolist()
    payload["settlements"] = [settlement_to_payload(s) for s in result.settlements]
    payload["roadGraph"] = [road_to_payload(edge) for edge in result.roads]
    return payload


def map_from_payload(payload: dict[str, Any]) -> MapResult:
    """Rebuild a MapResult from a caller-facing payload.

    Raises:
        PayloadError: If a key is missing, a value cannot be parsed, the
            dimensions are not positive, a field has the wrong length, or
            a biome code is unknown.
    """
    try:
        width = int(payload["width"])
        height = int(payload["height"])

        arrays: dict[str, np.ndarray] = {}
        for name in FLOAT_FIELDS:
            arrays[name] = np.asarray(payload[name], dtype=np.float32)
        # Parsed wide so out-of-range codes are caught before narrowing
        biome = np.asarray(payload["biome"], dtype=np.int64)

        settlements = tuple(
            settlement_from_payload(record) for record in payload.get("settlements", [])
        )
        roads = tuple(
            (int(a), int(b)) for a, b in payload.get("roadGraph", [])
        )
    except KeyError as e:
        raise PayloadError(f"Payload missing key: {e.args[0]}") from e
    except (ValueError, TypeError, OverflowError, ValidationError) as e:
        raise PayloadError(f"Malformed payload: {e}") from e

    if width <= 0 or height <= 0:
        raise PayloadError(f"width and height must be positive, got {width}x{height}")
    expected = width * height

    arrays["biome"] = biome
    for name, array in arrays.items():
        if array.size != expected:
            raise PayloadError(
                f"{name} has {array.size} values, expected {expected} ({width}x{height})"
            )
        arrays[name] = array.reshape(height, width)

    if biome.size and (biome.min() < 0 or biome.max() > max(Biome)):
        raise PayloadError(
            f"biome codes must be in [0, {int(max(Biome))}], "
            f"got [{biome.min()}, {biome.max()}]"
        )
    arrays["biome"] = arrays["biome"].astype(np.uint8)

    return MapResult(
        width=width,
        height=height,
        settlements=settlements,
        roads=roads,
        **arrays,
    )
