"""Biome classification from elevation, water, temperature, and moisture."""

import numpy as np
from numpy.typing import NDArray

from ..biomes import Biome

# Elevation margin below sea level that counts as open ocean
OCEAN_MARGIN = 0.02
LAKE_WATER_THRESHOLD = 0.6
ALPINE_ELEVATION = 0.82

# Temperature bands, coldest first. Each band holds its upper temperature
# bound, moisture cuts checked wettest first as (moisture above, biome),
# and the biome used when no cut matches.
CLIMATE_BANDS: tuple[tuple[float, tuple[tuple[float, Biome], ...], Biome], ...] = (
    (0.2, (), Biome.TUNDRA),
    (0.35, ((0.4, Biome.TAIGA),), Biome.TUNDRA),
    (0.55, ((0.55, Biome.SWAMP), (0.35, Biome.FOREST)), Biome.DESERT),
    (0.75, ((0.65, Biome.SWAMP), (0.4, Biome.FOREST)), Biome.PLAINS),
    (float("inf"), ((0.7, Biome.SAVANNA), (0.45, Biome.PLAINS)), Biome.DESERT),
)


def climate_biome(temperature: float, moisture: float) -> Biome:
    """Pick a land biome from temperature band and moisture."""
    for upper, cuts, fallback in CLIMATE_BANDS:
        if temperature < upper:
            for threshold, biome in cuts:
                if moisture > threshold:
                    return biome
            return fallback
    return CLIMATE_BANDS[-1][2]


def classify_cell(
    elevation: float,
    water: float,
    temperature: float,
    moisture: float,
    sea_level: float,
) -> Biome:
    """Classify a single cell.

    Ocean, lake, and alpine checks take precedence over climate.
    """
    if elevation <= sea_level - OCEAN_MARGIN:
        return Biome.OCEAN
    if water > LAKE_WATER_THRESHOLD:
        return Biome.LAKE
    if elevation > ALPINE_ELEVATION:
        return Biome.ALPINE
    return climate_biome(temperature, moisture)


def classify_biomes(
    heightmap: NDArray[np.float32],
    water: NDArray[np.float32],
    temperature: NDArray[np.float32],
    moisture: NDArray[np.float32],
    sea_level: float,
) -> NDArray[np.uint8]:
    """Classify every cell into a biome code (vectorized).

    Within a band, moisture cuts are written driest first so wetter cuts
    override them. Overrides then follow lowest priority first, ending
    with the ocean check.

    Args:
        heightmap: Elevation field.
        water: Water field.
        temperature: Temperature field.
        moisture: Enhanced moisture field.
        sea_level: Sea level threshold.

    Returns:
        uint8 array of Biome codes with the input shape.
    """
    biome = np.full(heightmap.shape, CLIMATE_BANDS[-1][2], dtype=np.uint8)
    assigned = np.zeros(heightmap.shape, dtype=bool)

    for upper, cuts, fallback in CLIMATE_BANDS:
        in_band = (temperature < upper) & ~assigned
        biome[in_band] = fallback
        for threshold, band_biome in reversed(cuts):
            biome[in_band & (moisture > threshold)] = band_biome
        assigned |= in_band

    biome[heightmap > ALPINE_ELEVATION] = Biome.ALPINE
    biome[water > LAKE_WATER_THRESHOLD] = Biome.LAKE
    biome[heightmap <= sea_level - OCEAN_MARGIN] = Biome.OCEAN

    return biome
