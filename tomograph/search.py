from typing import Optional

from .constraints import Constraints
from .grid import Grid
from .heuristics import select_next_cell, value_order
from .propagation import is_valid_solution, is_value_feasible, propagate
from .types import CellState, TraceLog, TraceStep
from .utils import indent, trace


INFEASIBLE = "infeasible"
CONFLICT = "conflict"
EXPANDED = "expanded"

ProgressState = dict[str, int]


def branch_on_value(
    grid: Grid,
    constraints: Constraints,
    row: int,
    col: int,
    value: CellState,
) -> tuple[str, Optional[Grid]]:
    if not is_value_feasible(grid, constraints, row, col, value):
        return INFEASIBLE, None

    branch = grid.clone()
    branch.set(row, col, value)
    if not propagate(branch, constraints):
        return CONFLICT, None
    return EXPANDED, branch


def search_solutions(
    grid: Grid,
    constraints: Constraints,
    solutions: list[Grid],
    max_solutions: int,
    progress_state: ProgressState,
    trace_enabled: bool,
    trace_log: Optional[TraceLog],
    trace_steps: Optional[list[TraceStep]],
    trace_meta: Optional[dict[str, bool]],
    trace_max_steps: int,
    depth: int,
) -> None:
    if len(solutions) >= max_solutions:
        return

    progress_state["nodes_visited"] += 1

    def record_step(
        event: str,
        message: str,
        row: Optional[int] = None,
        col: Optional[int] = None,
        value: Optional[int] = None,
    ) -> None:
        trace(trace_enabled, trace_log, message)
        if trace_steps is None:
            return
        if len(trace_steps) >= trace_max_steps:
            if trace_meta is not None:
                trace_meta["truncated"] = True
            return
        trace_steps.append(
            {
                "event": event,
                "message": message,
                "depth": depth,
                "row": row,
                "col": col,
                "value": value,
                "grid": grid.to_rows(),
            }
        )

    choice = select_next_cell(grid, constraints)
    if choice is None:
        if not is_valid_solution(grid, constraints):
            record_step("reject_leaf", f"{indent(depth)}Complete grid does not match the sums")
            return

        solutions.append(grid)
        record_step("accept_solution", f"{indent(depth)}Accept solution #{len(solutions)}")
        if len(solutions) >= max_solutions:
            record_step("limit_reached", f"{indent(depth)}Reached solution limit {max_solutions}")
        return

    r, c = choice
    record_step("select_cell", f"{indent(depth)}Select cell ({r}, {c})", row=r, col=c)

    for value in value_order(constraints.heatmap, r, c):
        if len(solutions) >= max_solutions:
            return

        outcome, branch = branch_on_value(grid, constraints, r, c, value)
        if outcome == INFEASIBLE:
            record_step("skip_value", f"{indent(depth)}Skip value {value} at ({r}, {c})", row=r, col=c, value=value)
            continue

        record_step("try_value", f"{indent(depth)}Try value {value} at ({r}, {c})", row=r, col=c, value=value)
        if branch is None:
            record_step(
                "propagation_conflict",
                f"{indent(depth)}Propagation conflict after {value} at ({r}, {c})",
                row=r,
                col=c,
                value=value,
            )
            continue

        search_solutions(
            grid=branch,
            constraints=constraints,
            solutions=solutions,
            max_solutions=max_solutions,
            progress_state=progress_state,
            trace_enabled=trace_enabled,
            trace_log=trace_log,
            trace_steps=trace_steps,
            trace_meta=trace_meta,
            trace_max_steps=trace_max_steps,
            depth=depth + 1,
        )
