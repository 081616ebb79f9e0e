from .constraints import Constraints
from .grid import Grid
from .types import EMPTY, FILLED, LINE_FAMILIES, CellState, LineFamily
from .utils import line_indexes, line_positions


def propagate(grid: Grid, constraints: Constraints) -> bool:
    """Assign every cell forced by a single line's budget until nothing changes.

    A line forces its unassigned cells when the filled cells it still needs
    equal its unassigned cells (all filled) or are zero (all empty). Returns
    False on the first line whose sum can no longer be met; the grid is then
    left partially updated and must be discarded by the caller.
    """
    changed = True
    while changed:
        changed = False
        for family in LINE_FAMILIES:
            for index in range(constraints.line_count(family)):
                ok, line_changed = propagate_line(grid, constraints, family, index)
                if not ok:
                    return False
                if line_changed:
                    changed = True
    return True


def propagate_line(grid: Grid, constraints: Constraints, family: LineFamily, index: int) -> tuple[bool, bool]:
    filled, unassigned = grid.line_counts(family, index)
    remaining = constraints.target(family, index) - filled

    if remaining < 0 or remaining > unassigned:
        return False, False
    if unassigned == 0:
        return True, False

    forced: CellState
    if remaining == unassigned:
        forced = FILLED
    elif remaining == 0:
        forced = EMPTY
    else:
        return True, False

    changed = False
    for r, c in line_positions(family, index, grid.size):
        if not grid.is_assigned(r, c):
            grid.set(r, c, forced)
            changed = True
    return True, changed


def is_value_feasible(grid: Grid, constraints: Constraints, row: int, col: int, value: CellState) -> bool:
    for family, index in line_indexes(row, col, grid.size):
        filled, unassigned = grid.line_counts(family, index)
        target = constraints.target(family, index)
        if value == FILLED:
            if filled >= target:
                return False
        elif unassigned - 1 < target - filled:
            return False
    return True


def is_valid_solution(grid: Grid, constraints: Constraints) -> bool:
    for family in LINE_FAMILIES:
        for index in range(constraints.line_count(family)):
            filled, _ = grid.line_counts(family, index)
            if filled != constraints.target(family, index):
                return False
    return True
