"""Field generation: warped elevation, base moisture, and temperature."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import MapConfig
from .noise import NoiseSource, fbm, wrap_seed

# Seed offsets for the three independent noise sources
ELEVATION_SEED_OFFSET = 0
WARP_SEED_OFFSET = 13
MOISTURE_SEED_OFFSET = 97

WARP_FREQUENCY = 1.5
WARP_DIVISOR = 400.0

ELEVATION_OCTAVES = 5
ELEVATION_FREQUENCY = 1.2
# Sum of octave amplitudes is bounded by the geometric series limit
ELEVATION_NORMALIZER = 2.5

CONTINENT_EXPONENT = 1.6
CONTINENT_WEIGHT = 0.65
ELEVATION_GAMMA = 1.18

MOISTURE_FREQUENCY = 1.8

LATITUDE_FALLOFF = 1.8
ALTITUDE_LAPSE = 1.5


@dataclass
class BaseFields:
    """Per-cell fields produced by the noise pass, shape (height, width)."""

    heightmap: NDArray[np.float32]
    moisture: NDArray[np.float32]
    temperature: NDArray[np.float32]


def continentality(nx: ArrayLike, ny: ArrayLike) -> NDArray[np.float64]:
    """Radial falloff from map center, 1 at center and 0 past the rim.

    Args:
        nx: Normalized x coordinates in [-1, 1].
        ny: Normalized y coordinates in [-1, 1].
    """
    distance = np.hypot(nx, ny)
    return np.clip(1.0 - distance**CONTINENT_EXPONENT, 0.0, 1.0)


def shape_elevation(
    elevation: ArrayLike,
    continent: ArrayLike,
    elevation_amplitude: float,
) -> NDArray[np.float64]:
    """Blend fractal elevation with continentality and map it to [0, 1].

    The blend is clamped to [-1, 1], remapped to [0, 1], then gamma
    corrected so low, flat land is more common than peaks.
    """
    value = (
        np.asarray(elevation) * elevation_amplitude
        + np.asarray(continent) * CONTINENT_WEIGHT
    ) / (1.0 + CONTINENT_WEIGHT)
    value = np.clip(value, -1.0, 1.0)
    return ((value + 1.0) * 0.5) ** ELEVATION_GAMMA


def base_temperature(
    latitude: ArrayLike,
    elevation: ArrayLike,
    sea_level: float,
) -> NDArray[np.float64]:
    """Temperature from latitude minus an altitude penalty.

    Args:
        latitude: Offset from the equator row, in [-0.5, 0.5].
        elevation: Normalized elevation.
        sea_level: Sea level threshold.

    Returns:
        Temperature in [0, 1], broadcast over the inputs.
    """
    altitude_penalty = np.clip(
        (np.asarray(elevation) - sea_level) * ALTITUDE_LAPSE, 0.0, 1.0
    )
    latitude_temperature = np.clip(
        1.0 - np.abs(latitude) * LATITUDE_FALLOFF, 0.0, 1.0
    )
    return np.clip(latitude_temperature - altitude_penalty, 0.0, 1.0)


def make_base_fields(config: MapConfig) -> BaseFields:
    """Generate elevation, moisture, and temperature.

    Each cell samples a warp offset, displaces its coordinates along both
    axes, then samples elevation fBm and moisture noise at the warped
    position. No state is carried between cells.

    Args:
        config: Map generation configuration.

    Returns:
        BaseFields with float32 arrays of shape (height, width).
    """
    width, height = config.width, config.height

    base_noise = NoiseSource(wrap_seed(config.seed, ELEVATION_SEED_OFFSET))
    warp_noise = NoiseSource(wrap_seed(config.seed, WARP_SEED_OFFSET))
    moisture_noise = NoiseSource(wrap_seed(config.seed, MOISTURE_SEED_OFFSET))

    nx = (np.arange(width) / width) * 2.0 - 1.0
    ny = (np.arange(height) / height) * 2.0 - 1.0
    latitude = np.arange(height) / height - 0.5

    # Warp samples lie on the regular grid; everything after them does not
    warp = warp_noise.sample_grid(nx * WARP_FREQUENCY, ny * WARP_FREQUENCY)
    offset = warp * (config.warp_strength / WARP_DIVISOR)
    warped_x = nx[np.newaxis, :] + offset
    warped_y = ny[:, np.newaxis] + offset

    elevation = np.zeros((height, width), dtype=np.float64)
    moisture_sample = np.zeros((height, width), dtype=np.float64)
    for y, (row_x, row_y) in enumerate(zip(warped_x.tolist(), warped_y.tolist())):
        for x, (wx, wy) in enumerate(zip(row_x, row_y)):
            elevation[y, x] = fbm(
                base_noise,
                wx,
                wy,
                octaves=ELEVATION_OCTAVES,
                frequency=ELEVATION_FREQUENCY,
            )
            moisture_sample[y, x] = moisture_noise.sample(
                wx * MOISTURE_FREQUENCY, wy * MOISTURE_FREQUENCY
            )

    grid_x, grid_y = np.meshgrid(nx, ny)
    heightmap = shape_elevation(
        elevation / ELEVATION_NORMALIZER,
        continentality(grid_x, grid_y),
        config.elevation_amplitude,
    )
    moisture = np.clip((moisture_sample * 0.5 + 0.5) * config.moisture_scale, 0.0, 1.0)
    temperature = base_temperature(latitude[:, np.newaxis], heightmap, config.sea_level)

    return BaseFields(
        heightmap=heightmap.astype(np.float32),
        moisture=moisture.astype(np.float32),
        temperature=temperature.astype(np.float32),
    )
