"""
Unit tests for mine field generation.

Tests exclusion zones, run compression, sampling, the index remap and
adjacency counting.
"""
import random
from collections import Counter

import pytest
from sweeper import Cell, MINE
from sweeper.minefield import (
    compress_runs,
    exclusion_indices,
    generate_mines,
    neighbors,
    place_mines,
    remap,
    sample_indices,
)


# ============================================================================
# Exclusion Zone Tests
# ============================================================================

class TestExclusionZone:
    """Test the first-move exclusion zone."""

    def test_center_has_nine_cells(self) -> None:
        """An interior move excludes its full 3x3 block."""
        assert exclusion_indices(4, 4, 9, 9) == [30, 31, 32, 39, 40, 41, 48, 49, 50]

    def test_corner_is_clipped(self) -> None:
        """A corner move excludes only the in-bounds 2x2 block."""
        assert exclusion_indices(0, 0, 9, 9) == [0, 1, 9, 10]

    def test_single_cell_board(self) -> None:
        """A 1x1 board excludes its only cell."""
        assert exclusion_indices(0, 0, 1, 1) == [0]

    def test_neighbors_exclude_center(self) -> None:
        """Neighbors never include the cell itself."""
        assert (1, 1) not in set(neighbors(1, 1, 3, 3))
        assert len(list(neighbors(1, 1, 3, 3))) == 8


# ============================================================================
# Run Compression Tests
# ============================================================================

class TestCompressRuns:
    """Test contiguous run compression."""

    @pytest.mark.parametrize(
        "indices, expected",
        [
            ([], []),
            ([5], [(5, 1)]),
            ([0, 1, 2, 9, 10, 11], [(0, 3), (9, 3)]),
            ([2, 3, 4, 5, 6, 7], [(2, 6)]),
            ([1, 3, 5], [(1, 1), (3, 1), (5, 1)]),
        ],
    )
    def test_runs(self, indices, expected) -> None:
        """Sorted indices compress into maximal runs."""
        assert compress_runs(indices) == expected


# ============================================================================
# Sampling Tests
# ============================================================================

class TestSampleIndices:
    """Test sparse partial-shuffle sampling."""

    def test_samples_are_distinct_and_in_range(self) -> None:
        """Every sample is unique and inside the space."""
        samples = sample_indices(1000, 200, random.Random(7))
        assert len(samples) == 200
        assert len(set(samples)) == 200
        assert all(0 <= sample < 1000 for sample in samples)

    def test_full_draw_is_permutation(self) -> None:
        """Drawing the whole space yields a permutation."""
        samples = sample_indices(50, 50, random.Random(7))
        assert sorted(samples) == list(range(50))

    def test_zero_count(self) -> None:
        """Drawing nothing returns an empty list."""
        assert sample_indices(10, 0, random.Random(7)) == []

    def test_too_many_rejected(self) -> None:
        """Cannot draw more values than exist."""
        with pytest.raises(ValueError):
            sample_indices(3, 4, random.Random(7))

    def test_roughly_uniform(self) -> None:
        """Each value is drawn about equally often."""
        rng = random.Random(99)
        counts = Counter()
        for _ in range(4000):
            counts.update(sample_indices(10, 2, rng))
        # expected 800 per value
        assert all(650 < counts[value] < 950 for value in range(10))

    def test_same_seed_same_samples(self) -> None:
        """Sampling is reproducible with a seeded source."""
        first = sample_indices(100, 10, random.Random(3))
        second = sample_indices(100, 10, random.Random(3))
        assert first == second


# ============================================================================
# Remap Tests
# ============================================================================

class TestRemap:
    """Test translating reduced indices back into the grid."""

    def test_no_runs_is_identity(self) -> None:
        """Without exclusions indices are unchanged."""
        assert remap([4, 1, 3], []) == [1, 3, 4]

    def test_skips_leading_run(self) -> None:
        """Indices shift past a run at the start of the grid."""
        assert remap([0, 1], [(0, 2)]) == [2, 3]

    def test_skips_multiple_runs(self) -> None:
        """Indices shift past every run at or before them."""
        runs = [(3, 3), (12, 3)]
        assert remap([2, 3, 8, 9], runs) == [2, 6, 11, 15]

    def test_every_reduced_index_maps_to_free_cell(self) -> None:
        """The remap is a bijection onto the non-excluded cells."""
        rows, cols = 9, 9
        excluded = exclusion_indices(4, 4, rows, cols)
        runs = compress_runs(excluded)
        space = rows * cols - len(excluded)
        mapped = remap(range(space), runs)
        assert mapped == [i for i in range(rows * cols) if i not in excluded]


# ============================================================================
# Generation Tests
# ============================================================================

class TestGenerateMines:
    """Test full mine position generation."""

    @pytest.mark.parametrize("x, y", [(0, 0), (4, 4), (8, 8), (0, 5), (8, 3)])
    def test_no_mine_near_first_move(self, x: int, y: int) -> None:
        """No mine lies within one cell of the first move."""
        rng = random.Random(11)
        for _ in range(50):
            positions = generate_mines(x, y, 9, 9, 10, rng=rng)
            assert len(set(positions)) == 10
            for row, col in positions:
                assert max(abs(row - x), abs(col - y)) > 1

    def test_dense_board_fills_every_free_cell(self) -> None:
        """With mines equal to free cells, every free cell is mined."""
        positions = generate_mines(1, 1, 4, 4, 7, rng=random.Random(5))
        assert positions == [(0, 3), (1, 3), (2, 3), (3, 0), (3, 1), (3, 2), (3, 3)]

    def test_overfull_zone_keeps_first_cell_free(self) -> None:
        """Too many mines shrink the exclusion to the first cell."""
        positions = generate_mines(1, 1, 3, 3, 8, rng=random.Random(5))
        assert (1, 1) not in positions
        assert len(positions) == 8

    def test_too_many_mines_rejected(self) -> None:
        """A mine on every cell cannot keep the first move safe."""
        with pytest.raises(ValueError, match="Too many mines"):
            generate_mines(0, 0, 2, 2, 4, rng=random.Random(5))

    def test_unshifted_variant_uses_reduced_indices(self) -> None:
        """Without shifting, positions come straight from the reduced space."""
        positions = generate_mines(0, 0, 3, 3, 5, shift=False, rng=random.Random(5))
        assert positions == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1)]

    def test_zero_mines(self) -> None:
        """No mines requested gives no positions."""
        assert generate_mines(0, 0, 1, 1, 0) == []


# ============================================================================
# Placement Tests
# ============================================================================

class TestPlaceMines:
    """Test sentinel placement and adjacency counts."""

    def test_counts_match_neighbors(self) -> None:
        """Every safe cell counts its neighboring mines."""
        grid = [[Cell() for _ in range(4)] for _ in range(4)]
        mines = [(0, 0), (0, 1), (2, 2)]
        place_mines(grid, mines)
        for row in range(4):
            for col in range(4):
                cell = grid[row][col]
                if (row, col) in mines:
                    assert cell.value == MINE
                else:
                    expected = sum(
                        1 for pos in neighbors(row, col, 4, 4) if pos in mines
                    )
                    assert cell.value == expected

    def test_mine_keeps_display_state(self) -> None:
        """A flagged cell stays flagged when it becomes a mine."""
        grid = [[Cell() for _ in range(2)] for _ in range(2)]
        grid[1][1].cycle_flag()
        place_mines(grid, [(1, 1)])
        assert grid[1][1].is_flagged is True
        assert grid[1][1].is_mine is True
        assert grid[0][0].value == 1
