import os
from concurrent.futures import ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from typing import Optional

from .constraints import Constraints
from .grid import Grid
from .heuristics import select_next_cell, value_order
from .propagation import propagate
from .search import ProgressState, branch_on_value, search_solutions
from .types import GridRows


def default_split_depth(workers: int) -> int:
    depth = 0
    while 2 ** depth < 2 * workers:
        depth += 1
    return depth


def collect_frontier(
    grid: Grid,
    constraints: Constraints,
    split_depth: int,
    frontier: list[Grid],
    progress_state: ProgressState,
    depth: int,
) -> None:
    """Expand the search tree depth-first down to split_depth, keeping the subtrees in discovery order."""
    if depth >= split_depth:
        frontier.append(grid)
        return

    choice = select_next_cell(grid, constraints)
    if choice is None:
        frontier.append(grid)
        return

    progress_state["nodes_visited"] += 1
    r, c = choice
    for value in value_order(constraints.heatmap, r, c):
        _, branch = branch_on_value(grid, constraints, r, c, value)
        if branch is not None:
            collect_frontier(branch, constraints, split_depth, frontier, progress_state, depth + 1)


def solve_parallel(
    constraints: Constraints,
    max_solutions: int,
    workers: Optional[int] = None,
    split_depth: Optional[int] = None,
) -> tuple[list[Grid], int]:
    root = Grid(constraints.size)
    if not propagate(root, constraints):
        return [], 0

    worker_count = workers or max(1, (os.cpu_count() or 1) - 1)
    depth_limit = default_split_depth(worker_count) if split_depth is None else split_depth

    progress_state: ProgressState = {"nodes_visited": 0}
    frontier: list[Grid] = []
    collect_frontier(root, constraints, depth_limit, frontier, progress_state, depth=0)

    if len(frontier) <= 1:
        return _search_frontier(frontier, constraints, max_solutions, progress_state)

    try:
        executor = ProcessPoolExecutor(max_workers=worker_count)
    except (PermissionError, OSError):
        return _search_frontier(frontier, constraints, max_solutions, progress_state)

    frontier_nodes = progress_state["nodes_visited"]
    solutions: list[Grid] = []
    try:
        with executor:
            futures = [
                executor.submit(solve_subproblem_worker, constraints, branch.cells, max_solutions)
                for branch in frontier
            ]
            for index, future in enumerate(futures):
                if len(solutions) >= max_solutions:
                    for pending in futures[index:]:
                        pending.cancel()
                    break
                solved_rows, nodes_visited = future.result()
                progress_state["nodes_visited"] += nodes_visited
                for rows in solved_rows[: max_solutions - len(solutions)]:
                    solutions.append(Grid(constraints.size, rows))
    except (BrokenProcessPool, PermissionError, OSError):
        # pool died before finishing; redo the frontier in this process
        progress_state["nodes_visited"] = frontier_nodes
        return _search_frontier(frontier, constraints, max_solutions, progress_state)

    return solutions, progress_state["nodes_visited"]


def solve_subproblem_worker(
    constraints: Constraints,
    cells: GridRows,
    max_solutions: int,
) -> tuple[list[GridRows], int]:
    progress_state: ProgressState = {"nodes_visited": 0}
    solutions: list[Grid] = []
    search_solutions(
        grid=Grid(constraints.size, cells),
        constraints=constraints,
        solutions=solutions,
        max_solutions=max_solutions,
        progress_state=progress_state,
        trace_enabled=False,
        trace_log=None,
        trace_steps=None,
        trace_meta=None,
        trace_max_steps=1,
        depth=0,
    )
    return [solution.cells for solution in solutions], progress_state["nodes_visited"]


def _search_frontier(
    frontier: list[Grid],
    constraints: Constraints,
    max_solutions: int,
    progress_state: ProgressState,
) -> tuple[list[Grid], int]:
    solutions: list[Grid] = []
    for branch in frontier:
        search_solutions(
            grid=branch,
            constraints=constraints,
            solutions=solutions,
            max_solutions=max_solutions,
            progress_state=progress_state,
            trace_enabled=False,
            trace_log=None,
            trace_steps=None,
            trace_meta=None,
            trace_max_steps=1,
            depth=0,
        )
    return solutions, progress_state["nodes_visited"]
