"""Biome codes and their properties."""

from enum import IntEnum


class Biome(IntEnum):
    """Discrete biome classification stored per cell as uint8.

    Codes are the stored map values. Labels are the caller-facing names;
    swamp keeps its plain name as no other identifier exists for it.
    """

    OCEAN = 0
    LAKE = 1
    TUNDRA = 2
    TAIGA = 3
    SWAMP = 4
    FOREST = 5
    SAVANNA = 6
    PLAINS = 7
    DESERT = 8
    ALPINE = 9

    @property
    def label(self) -> str:
        """Caller-facing biome identifier."""
        return _LABELS[self]

    @property
    def is_water(self) -> bool:
        """Whether this biome is open water."""
        return self in _WATER_BIOMES


_LABELS: dict[Biome, str] = {
    Biome.OCEAN: "ocean",
    Biome.LAKE: "lake",
    Biome.TUNDRA: "tundra",
    Biome.TAIGA: "boreal-forest",
    Biome.SWAMP: "swamp",
    Biome.FOREST: "temperate-forest",
    Biome.SAVANNA: "savanna",
    Biome.PLAINS: "temperate-grassland",
    Biome.DESERT: "desert",
    Biome.ALPINE: "alpine",
}

# Define sets for O(1) lookup
_WATER_BIOMES = frozenset({
    Biome.OCEAN,
    Biome.LAKE,
})
