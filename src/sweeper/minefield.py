"""
Mine field generation.

Mines are placed uniformly at random over every cell outside the 3x3
exclusion zone around the first move. The exclusion zone is kept as a
handful of contiguous index runs, so sampling works on the reduced index
space and each sample is shifted past the runs it falls behind, without
ever building the list of candidate cells.
"""
import logging
import random
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .cell import Cell, MINE

logger = logging.getLogger(__name__)

Run = Tuple[int, int]
Position = Tuple[int, int]


# ============================================================================
# Neighbor Utilities
# ============================================================================

def neighbors(x: int, y: int, rows: int, cols: int) -> Iterator[Position]:
    """Yield in-bounds positions adjacent to (x, y), excluding (x, y)."""
    for delta_row in (-1, 0, 1):
        for delta_col in (-1, 0, 1):
            if delta_row == 0 and delta_col == 0:
                continue
            new_row = x + delta_row
            new_col = y + delta_col
            if 0 <= new_row < rows and 0 <= new_col < cols:
                yield new_row, new_col


# ============================================================================
# Exclusion Zone
# ============================================================================

def exclusion_indices(x: int, y: int, rows: int, cols: int) -> List[int]:
    """
    Get row-major indices of the 3x3 neighborhood around (x, y).

    Args:
        x: Row of the first move.
        y: Column of the first move.
        rows: Number of rows.
        cols: Number of columns.

    Returns:
        Sorted list of at most 9 in-bounds indices, (x, y) included.
    """
    indices = [x * cols + y]
    indices.extend(row * cols + col for row, col in neighbors(x, y, rows, cols))
    return sorted(indices)


def compress_runs(indices: Sequence[int]) -> List[Run]:
    """
    Compress a sorted index list into maximal contiguous runs.

    Example:
        [0, 1, 2, 9, 10, 11] -> [(0, 3), (9, 3)]
    """
    runs: List[Run] = []
    for index in indices:
        if runs and runs[-1][0] + runs[-1][1] == index:
            start, length = runs[-1]
            runs[-1] = (start, length + 1)
        else:
            runs.append((index, 1))
    return runs


# ============================================================================
# Sampling
# ============================================================================

def sample_indices(
    space: int, count: int, rng: Optional[random.Random] = None
) -> List[int]:
    """
    Draw `count` distinct values uniformly from range(space).

    Runs the first `count` steps of a Fisher-Yates shuffle, recording
    only the swapped slots in a dict.

    Args:
        space: Size of the index space.
        count: Number of values to draw.
        rng: Random source; defaults to the process-level `random` module.

    Returns:
        Sampled indices in draw order.
    """
    if count < 0 or count > space:
        raise ValueError(f"Cannot sample {count} indices from {space}")
    if rng is None:
        rng = random
    swapped: Dict[int, int] = {}
    samples = []
    for i in range(count):
        j = rng.randrange(i, space)
        samples.append(swapped.get(j, j))
        swapped[j] = swapped.get(i, i)
    return samples


def remap(samples: Sequence[int], runs: Sequence[Run]) -> List[int]:
    """
    Translate indices from the reduced space back into grid indices.

    Each sample, taken in ascending order, is shifted by the total length
    of every exclusion run that starts at or before its shifted position.

    Args:
        samples: Indices into the space with the runs removed.
        runs: Sorted, non-overlapping (start, length) exclusion runs.

    Returns:
        Sorted grid indices, none of which lie inside a run.
    """
    result = []
    delta = 0
    run_index = 0
    for sample in sorted(samples):
        while run_index < len(runs) and runs[run_index][0] <= sample + delta:
            delta += runs[run_index][1]
            run_index += 1
        result.append(sample + delta)
    return result


# ============================================================================
# Generation / Placement
# ============================================================================

def generate_mines(
    x: int,
    y: int,
    rows: int,
    cols: int,
    mines: int,
    shift: bool = True,
    rng: Optional[random.Random] = None,
) -> List[Position]:
    """
    Choose mine positions that avoid the area around the first move.

    Args:
        x: Row of the first move.
        y: Column of the first move.
        rows: Number of rows.
        cols: Number of columns.
        mines: Number of mines to place.
        shift: Translate samples past the exclusion runs. Without it the
            samples are used as grid indices directly, which can put mines
            next to the first move. Kept only to reproduce the legacy
            placement of boards first activated by a flag; Board always
            shifts.
        rng: Random source; defaults to the process-level `random` module.

    Returns:
        Sorted list of (row, col) mine positions.

    Raises:
        ValueError: If even the first-move cell alone cannot be kept free.
    """
    if rng is None:
        rng = random
    total = rows * cols
    excluded = exclusion_indices(x, y, rows, cols)
    if mines > total - len(excluded):
        logger.warning(
            "%d mines do not fit outside the 3x3 zone at (%d, %d); "
            "keeping only the first cell free", mines, x, y,
        )
        excluded = [x * cols + y]
    if mines > total - len(excluded):
        raise ValueError(f"Too many mines ({mines}) for {rows}x{cols} board")

    runs = compress_runs(excluded)
    samples = sample_indices(total - len(excluded), mines, rng)
    positions = remap(samples, runs) if shift else sorted(samples)
    logger.debug("Generated %d mines, exclusion runs %s", mines, runs)
    return [divmod(position, cols) for position in positions]


def place_mines(
    grid: List[List[Cell]], positions: Sequence[Position]
) -> None:
    """
    Mark mines on the grid and update neighbor counts.

    Each mine keeps its current display state. Every in-bounds non-mine
    neighbor gains one to its adjacency value.
    """
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    for row, col in positions:
        grid[row][col].value = MINE
        for neighbor_row, neighbor_col in neighbors(row, col, rows, cols):
            neighbor = grid[neighbor_row][neighbor_col]
            if not neighbor.is_mine:
                neighbor.value += 1
