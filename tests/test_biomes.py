"""Tests for biome codes."""

from cartograph.biomes import Biome


class TestBiome:
    """Tests for the Biome enum."""

    def test_codes(self):
        """Biome codes match the documented table."""
        assert Biome.OCEAN == 0
        assert Biome.LAKE == 1
        assert Biome.TUNDRA == 2
        assert Biome.TAIGA == 3
        assert Biome.SWAMP == 4
        assert Biome.FOREST == 5
        assert Biome.SAVANNA == 6
        assert Biome.PLAINS == 7
        assert Biome.DESERT == 8
        assert Biome.ALPINE == 9

    def test_codes_contiguous(self):
        """Codes cover 0-9 with no gaps."""
        assert sorted(int(b) for b in Biome) == list(range(10))

    def test_labels_unique(self):
        """Each biome has a distinct label."""
        labels = [b.label for b in Biome]
        assert len(labels) == len(set(labels))

    def test_specific_labels(self):
        """Labels use the caller-facing identifiers."""
        assert Biome.TAIGA.label == "boreal-forest"
        assert Biome.FOREST.label == "temperate-forest"
        assert Biome.PLAINS.label == "temperate-grassland"

    def test_full_label_table(self) -> None:
        """Labels are listed in code order."""
        assert [b.label for b in Biome] == [
            "ocean",
            "lake",
            "tundra",
            "boreal-forest",
            "swamp",
            "temperate-forest",
            "savanna",
            "temperate-grassland",
            "desert",
            "alpine",
        ]

    def test_water_biomes(self):
        """Only ocean and lake are water."""
        water = {b for b in Biome if b.is_water}
        assert water == {Biome.OCEAN, Biome.LAKE}
