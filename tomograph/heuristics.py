from typing import Optional

from .constraints import Constraints
from .grid import Grid
from .types import EMPTY, FILLED, LINE_FAMILIES, CellState, Heatmap, LineFamily, Position
from .utils import line_indexes


TIGHTNESS_WEIGHT = 0.7
CONFIDENCE_WEIGHT = 0.3

# (remaining, unassigned) per line, keyed by family
LineStats = dict[LineFamily, list[tuple[int, int]]]


def compute_line_stats(grid: Grid, constraints: Constraints) -> LineStats:
    stats: LineStats = {}
    for family in LINE_FAMILIES:
        family_stats: list[tuple[int, int]] = []
        for index in range(constraints.line_count(family)):
            filled, unassigned = grid.line_counts(family, index)
            family_stats.append((constraints.target(family, index) - filled, unassigned))
        stats[family] = family_stats
    return stats


def cell_score(line_stats: LineStats, heatmap: Heatmap, row: int, col: int, size: int) -> float:
    tightness = 0.0
    for family, index in line_indexes(row, col, size):
        remaining, unassigned = line_stats[family][index]
        if unassigned > 0:
            tightness += 1.0 - remaining / unassigned

    confidence = abs(heatmap[row][col] - 0.5) * 2
    return tightness * TIGHTNESS_WEIGHT + confidence * CONFIDENCE_WEIGHT


def select_next_cell(grid: Grid, constraints: Constraints) -> Optional[Position]:
    """Pick the unassigned cell with the highest score, or None when the grid is complete.

    Cells are scanned row-major and only a strictly greater score replaces
    the current best, so ties go to the first cell scanned.
    """
    size = grid.size
    line_stats: Optional[LineStats] = None
    best: Optional[Position] = None
    best_score = float("-inf")

    for r in range(size):
        for c in range(size):
            if grid.is_assigned(r, c):
                continue
            if line_stats is None:
                line_stats = compute_line_stats(grid, constraints)
            score = cell_score(line_stats, constraints.heatmap, r, c, size)
            if score > best_score:
                best_score = score
                best = (r, c)

    return best


def value_order(heatmap: Heatmap, row: int, col: int) -> tuple[CellState, CellState]:
    if heatmap[row][col] >= 0.5:
        return FILLED, EMPTY
    return EMPTY, FILLED
