from typing import Optional, Sequence

from .constraints import Constraints
from .grid import Grid
from .types import EMPTY, FILLED, UNASSIGNED, CellState, GridRows, Heatmap


CELL_SYMBOLS: dict[CellState, str] = {FILLED: "#", EMPTY: ".", UNASSIGNED: "?"}
SYMBOL_STATES: dict[str, CellState] = {symbol: state for state, symbol in CELL_SYMBOLS.items()}
PREVIEW_SOLUTIONS = 3


def render_grid_rows(grid: Grid) -> list[str]:
    return ["".join(CELL_SYMBOLS[value] for value in row) for row in grid.cells]


def render_grid(grid: Grid) -> str:
    return "\n".join(render_grid_rows(grid))


def grid_from_rows(rows: Sequence[str]) -> Grid:
    size = len(rows)
    cells: GridRows = []
    for row in rows:
        if len(row) != size:
            raise ValueError("grid rows must form a square")
        try:
            cells.append([SYMBOL_STATES[symbol] for symbol in row])
        except KeyError as exc:
            raise ValueError(f"unknown grid symbol: {exc.args[0]!r}") from exc
    return Grid(size, cells)


def format_heatmap_rows(heatmap: Heatmap) -> list[str]:
    return [" ".join(f"{value:.2f}" for value in row) for row in heatmap]


def format_solve_report(
    constraints: Constraints,
    solutions: Sequence[Grid],
    combined: Optional[Grid],
    node_count: int,
    elapsed_ms: float,
) -> str:
    lines = [constraints.describe(), "", "Heatmap:"]
    lines.extend(format_heatmap_rows(constraints.heatmap))
    lines.append("")
    lines.append(f"Solutions found: {len(solutions)}")
    lines.append(f"Nodes visited: {node_count}")
    lines.append(f"Elapsed: {elapsed_ms:.0f} ms")
    lines.append("")

    if combined is None:
        lines.append("No solution found.")
    elif len(solutions) == 1:
        lines.append("Unique solution:")
        lines.extend(render_grid_rows(combined))
    else:
        lines.append("Multiple solutions found. Combined grid (? = ambiguous):")
        lines.extend(render_grid_rows(combined))
        lines.append("")
        lines.append(f"First {min(PREVIEW_SOLUTIONS, len(solutions))} solutions:")
        for index, solution in enumerate(solutions[:PREVIEW_SOLUTIONS], start=1):
            lines.append(f"Solution {index}:")
            lines.extend(render_grid_rows(solution))
    return "\n".join(lines)
