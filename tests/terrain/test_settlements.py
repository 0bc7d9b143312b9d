"""Tests for settlement placement."""

import itertools

import numpy as np
import pytest

from cartograph.terrain.settlements import (
    EDGE_MARGIN,
    JITTER_RANGE,
    MAX_SETTLEMENTS,
    MIN_SPACING,
    find_candidates,
    local_flatness,
    place_settlements,
)
from cartograph.types import REGION_SIZE


def _flat_land(size: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Uniform habitable terrain: heightmap, water, moisture."""
    heightmap = np.full((size, size), 0.6, dtype=np.float32)
    water = np.zeros((size, size), dtype=np.float32)
    moisture = np.full((size, size), 0.8, dtype=np.float32)
    return heightmap, water, moisture


class TestLocalFlatness:
    """Tests for flatness measurement."""

    def test_flat_is_zero(self) -> None:
        """Uniform terrain has zero flatness everywhere."""
        heightmap = np.full((6, 6), 0.3, dtype=np.float32)
        np.testing.assert_array_equal(local_flatness(heightmap), np.zeros((6, 6)))

    def test_spike(self) -> None:
        """A spike differs from all 8 neighbours by its height."""
        heightmap = np.zeros((5, 5), dtype=np.float32)
        heightmap[2, 2] = 0.8
        flatness = local_flatness(heightmap)
        assert flatness[2, 2] == pytest.approx(0.8)
        # Each neighbour sees the spike once
        assert flatness[1, 1] == pytest.approx(0.1)

    def test_edges_clamped(self) -> None:
        """Out-of-grid neighbours fall back to the nearest edge cell."""
        heightmap = np.array([[0.0, 0.8]], dtype=np.float32)
        flatness = local_flatness(heightmap)
        # Left cell: three neighbour slots clamp to the right cell
        assert flatness[0, 0] == pytest.approx(3 * 0.8 / 8)


class TestFindCandidates:
    """Tests for candidate scoring."""

    def test_tiny_grid_has_none(self) -> None:
        """A 4x4 grid has no cells beyond the edge margin."""
        heightmap, water, moisture = _flat_land(4)
        assert find_candidates(heightmap, water, moisture, sea_level=0.3) == []

    def test_edge_margin_respected(self) -> None:
        """Candidates stay EDGE_MARGIN cells from every edge."""
        heightmap, water, moisture = _flat_land(10)
        candidates = find_candidates(heightmap, water, moisture, sea_level=0.3)
        assert len(candidates) == (10 - 2 * EDGE_MARGIN) ** 2
        for c in candidates:
            x, y = c.index % 10, c.index // 10
            assert EDGE_MARGIN <= x < 10 - EDGE_MARGIN
            assert EDGE_MARGIN <= y < 10 - EDGE_MARGIN

    def test_score_formula(self) -> None:
        """Score weighs moisture, flatness, and elevation."""
        heightmap, water, moisture = _flat_land(6)
        candidates = find_candidates(heightmap, water, moisture, sea_level=0.3)
        assert candidates[0].score == pytest.approx(0.8 * 0.6 + 0.3 + 0.6 * 0.1, rel=1e-6)

    def test_sorted_descending(self) -> None:
        """Best candidates come first."""
        heightmap, water, moisture = _flat_land(12)
        moisture[5, 7] = 1.0
        moisture[8, 3] = 0.9
        candidates = find_candidates(heightmap, water, moisture, sea_level=0.3)
        scores = [c.score for c in candidates]
        assert scores == sorted(scores, reverse=True)
        assert candidates[0].index == 5 * 12 + 7
        assert candidates[1].index == 8 * 12 + 3

    def test_ties_keep_scan_order(self) -> None:
        """Equal scores stay in row-major order."""
        heightmap, water, moisture = _flat_land(8)
        candidates = find_candidates(heightmap, water, moisture, sea_level=0.3)
        indices = [c.index for c in candidates]
        assert indices == sorted(indices)

    def test_filters(self) -> None:
        """Wet, low, steep, and low-scoring cells are excluded."""
        heightmap, water, moisture = _flat_land(12)
        water[4, 4] = 0.5  # too wet
        heightmap[6, 6] = 0.31  # near the coast and a steep pit
        moisture[:, 9] = 0.0  # score drops but stays above the minimum
        candidates = {c.index for c in find_candidates(heightmap, water, moisture, 0.3)}
        assert 4 * 12 + 4 not in candidates
        assert 6 * 12 + 6 not in candidates
        assert 3 * 12 + 9 in candidates

    def test_low_score_excluded(self) -> None:
        """Scores at or below the minimum are dropped."""
        heightmap = np.full((8, 8), 0.35, dtype=np.float32)
        water = np.zeros((8, 8), dtype=np.float32)
        moisture = np.zeros((8, 8), dtype=np.float32)
        # Score = 0.3 + 0.035, below 0.35
        assert find_candidates(heightmap, water, moisture, sea_level=0.1) == []


class TestPlaceSettlements:
    """Tests for greedy placement."""

    def test_tiny_grid_empty(self) -> None:
        """No candidates means no settlements."""
        heightmap, water, moisture = _flat_land(4)
        assert place_settlements(heightmap, water, moisture, 0.3, seed=1) == []

    def test_row_spacing_on_flat_land(self) -> None:
        """On a 64-cell flat map every fourth cell of the first row is used."""
        heightmap, water, moisture = _flat_land(64)
        settlements = place_settlements(heightmap, water, moisture, 0.3, seed=1)
        # 32 world units per cell; 4 cells (128) is the first gap >= 120
        assert len(settlements) == 15
        half = JITTER_RANGE / 2
        for i, s in enumerate(settlements):
            anchor_x = (2 + 4 * i) / 64 * REGION_SIZE
            anchor_y = 2 / 64 * REGION_SIZE
            assert abs(s.x - anchor_x) <= half
            assert abs(s.y - anchor_y) <= half

    def test_capped_at_max(self) -> None:
        """At most MAX_SETTLEMENTS are placed."""
        heightmap, water, moisture = _flat_land(128)
        settlements = place_settlements(heightmap, water, moisture, 0.3, seed=9)
        assert len(settlements) == MAX_SETTLEMENTS

    def test_ids_sequential(self) -> None:
        """Ids follow acceptance order from zero."""
        heightmap, water, moisture = _flat_land(64)
        settlements = place_settlements(heightmap, water, moisture, 0.3, seed=3)
        assert [s.id for s in settlements] == list(range(len(settlements)))

    def test_size_from_score(self) -> None:
        """Size is score * 6 clamped to [1.2, 6.5]."""
        heightmap, water, moisture = _flat_land(32)
        settlements = place_settlements(heightmap, water, moisture, 0.3, seed=3)
        expected = (0.8 * 0.6 + 0.3 + 0.6 * 0.1) * 6.0
        for s in settlements:
            assert s.size == pytest.approx(expected, rel=1e-5)
            assert 1.2 <= s.size <= 6.5

    def test_spacing_within_jitter_slack(self) -> None:
        """Settlements keep MIN_SPACING apart up to the jitter magnitude."""
        rng = np.random.default_rng(0)
        heightmap = (0.6 + rng.random((96, 96)) * 0.05).astype(np.float32)
        water = np.zeros((96, 96), dtype=np.float32)
        moisture = rng.random((96, 96)).astype(np.float32)
        settlements = place_settlements(heightmap, water, moisture, 0.3, seed=5)
        assert settlements
        slack = JITTER_RANGE * np.sqrt(2.0)
        for a, b in itertools.combinations(settlements, 2):
            assert a.distance_to(b) >= MIN_SPACING - slack

    def test_grid_positions_keep_full_spacing(self) -> None:
        """Before jitter, settlements sit at least MIN_SPACING apart."""
        rng = np.random.default_rng(17)
        heightmap = (0.6 + rng.random((64, 64)) * 0.05).astype(np.float32)
        water = np.zeros((64, 64), dtype=np.float32)
        moisture = rng.random((64, 64)).astype(np.float32)
        settlements = place_settlements(heightmap, water, moisture, 0.3, seed=5)
        assert len(settlements) > 1

        # Cells are 32 units wide and jitter moves at most 12.5 per axis,
        # so rounding to the nearest cell recovers the grid position
        cell = REGION_SIZE / 64
        anchors = [
            (round(s.x / cell) * cell, round(s.y / cell) * cell) for s in settlements
        ]
        for (ax, ay), (bx, by) in itertools.combinations(anchors, 2):
            assert np.hypot(ax - bx, ay - by) >= MIN_SPACING

    def test_deterministic(self) -> None:
        """Same inputs and seed give the same settlements."""
        heightmap, water, moisture = _flat_land(48)
        a = place_settlements(heightmap, water, moisture, 0.3, seed=77)
        b = place_settlements(heightmap, water, moisture, 0.3, seed=77)
        assert a == b

    def test_seed_changes_jitter(self) -> None:
        """A different seed moves settlements but not their count."""
        heightmap, water, moisture = _flat_land(48)
        a = place_settlements(heightmap, water, moisture, 0.3, seed=1)
        b = place_settlements(heightmap, water, moisture, 0.3, seed=2)
        assert len(a) == len(b)
        assert [(s.x, s.y) for s in a] != [(s.x, s.y) for s in b]
