import time
from typing import Optional, Sequence

from .constraints import Constraints
from .grid import Grid
from .merge import combine_solutions
from .parallel import solve_parallel
from .propagation import propagate
from .search import ProgressState, search_solutions
from .types import SolveResult, TraceLog, TraceStep
from .utils import trace
from .validation import validate_solve_options


DEFAULT_MAX_SOLUTIONS = 100


class TomographSolver:
    """Enumerates grids matching a set of line sums, up to a solution limit."""

    def __init__(self, constraints: Constraints) -> None:
        self.constraints = constraints
        self.heatmap = constraints.heatmap
        self.max_solutions = DEFAULT_MAX_SOLUTIONS
        self._node_count = 0

    def set_max_solutions(self, max_solutions: int) -> None:
        self.max_solutions = max_solutions

    def node_count(self) -> int:
        return self._node_count

    def solve(
        self,
        trace_enabled: bool = False,
        trace_log: Optional[TraceLog] = None,
        trace_steps: Optional[list[TraceStep]] = None,
        trace_meta: Optional[dict[str, bool]] = None,
        trace_max_steps: int = 1000,
    ) -> list[Grid]:
        solutions: list[Grid] = []
        progress_state: ProgressState = {"nodes_visited": 0}
        self._node_count = 0

        grid = Grid(self.constraints.size)
        trace(trace_enabled, trace_log, f"Initialized search: size={grid.size}, max_solutions={self.max_solutions}")

        if not propagate(grid, self.constraints):
            message = "Initial propagation found a conflict; no solution exists"
            trace(trace_enabled, trace_log, message)
            if trace_steps is not None:
                trace_steps.append(
                    {
                        "event": "initial_propagation_conflict",
                        "message": message,
                        "depth": 0,
                        "row": None,
                        "col": None,
                        "value": None,
                        "grid": grid.to_rows(),
                    }
                )
            return solutions

        search_solutions(
            grid=grid,
            constraints=self.constraints,
            solutions=solutions,
            max_solutions=self.max_solutions,
            progress_state=progress_state,
            trace_enabled=trace_enabled,
            trace_log=trace_log,
            trace_steps=trace_steps,
            trace_meta=trace_meta,
            trace_max_steps=trace_max_steps,
            depth=0,
        )
        self._node_count = progress_state["nodes_visited"]
        return solutions

    def solve_parallel(self, workers: Optional[int] = None, split_depth: Optional[int] = None) -> list[Grid]:
        solutions, self._node_count = solve_parallel(
            self.constraints,
            max_solutions=self.max_solutions,
            workers=workers,
            split_depth=split_depth,
        )
        return solutions

    @staticmethod
    def combine_solutions(solutions: Sequence[Grid]) -> Optional[Grid]:
        return combine_solutions(solutions)


def solve_tomograph(
    constraints: Constraints,
    max_solutions: int = DEFAULT_MAX_SOLUTIONS,
    use_multiprocessing: bool = False,
    workers: Optional[int] = None,
    split_depth: Optional[int] = None,
    trace: bool = False,
    trace_log: Optional[TraceLog] = None,
    trace_steps: Optional[list[TraceStep]] = None,
    trace_meta: Optional[dict[str, bool]] = None,
    trace_max_steps: int = 1000,
) -> SolveResult:
    validate_solve_options(max_solutions, workers, trace_max_steps, split_depth)
    if use_multiprocessing and (trace or trace_steps is not None):
        raise ValueError("trace output is not available with multiprocessing")

    solver = TomographSolver(constraints)
    solver.set_max_solutions(max_solutions)

    started = time.perf_counter()
    if use_multiprocessing:
        solutions = solver.solve_parallel(workers=workers, split_depth=split_depth)
    else:
        solutions = solver.solve(
            trace_enabled=trace or trace_steps is not None,
            trace_log=trace_log,
            trace_steps=trace_steps,
            trace_meta=trace_meta,
            trace_max_steps=trace_max_steps,
        )
    elapsed_ms = (time.perf_counter() - started) * 1000.0

    return {
        "solutions": solutions,
        "node_count": solver.node_count(),
        "combined": combine_solutions(solutions),
        "limit_reached": len(solutions) >= max_solutions,
        "elapsed_ms": elapsed_ms,
    }
