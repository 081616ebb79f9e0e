from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from tomograph.constraints import Constraints
from tomograph.render import format_heatmap_rows, render_grid_rows
from tomograph.solver import DEFAULT_MAX_SOLUTIONS, solve_tomograph
from tomograph.validation import build_constraints


class ConstraintsRequest(BaseModel):
    size: int = Field(..., description="Side length of the square grid")
    col_sums: list[int] = Field(..., description="Filled cells per column, left to right")
    row_sums: list[int] = Field(..., description="Filled cells per row, top to bottom")
    diag_down_sums: list[int] = Field(
        ...,
        description="Filled cells per top-left to bottom-right diagonal, indexed by row + col",
    )
    diag_up_sums: list[int] = Field(
        ...,
        description="Filled cells per bottom-left to top-right diagonal, indexed by col - row + size - 1",
    )


class SolveRequest(ConstraintsRequest):
    max_solutions: int = Field(default=DEFAULT_MAX_SOLUTIONS, ge=1, description="Stop after this many solutions")
    use_multiprocessing: bool = Field(
        default=False,
        description="Explore search subtrees in worker processes.",
    )
    workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Number of worker processes to use when multiprocessing is enabled.",
    )
    trace: bool = Field(default=False, description="Include solver trace output in the response")
    trace_steps: bool = Field(default=False, description="Include structured trace steps for walkthrough/debugging.")
    trace_max_steps: int = Field(default=1000, ge=1, le=20000, description="Maximum number of trace steps to return.")


class TraceStepResponse(BaseModel):
    event: str
    message: str
    depth: int
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[int] = None
    grid: list[list[Optional[int]]]


class SolveResponse(BaseModel):
    solution_count: int
    node_count: int
    limit_reached: bool
    elapsed_ms: float
    solutions: list[list[str]]
    combined_rows: Optional[list[str]] = None
    combined_text: Optional[str] = None
    trace: Optional[list[str]] = None
    trace_steps: Optional[list[TraceStepResponse]] = None
    trace_truncated: bool = False


class HeatmapResponse(BaseModel):
    heatmap: list[list[float]]
    heatmap_rows: list[str]


app = FastAPI(
    title="Tomograph Solver API",
    description="Reconstruct binary square grids from row, column and diagonal filled-cell counts.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://127.0.0.1:5173", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/solve", response_model=SolveResponse)
def solve(request: SolveRequest) -> SolveResponse:
    try:
        constraints = _build_constraints(request)
        if request.trace or request.trace_steps:
            trace_log: list[str] = []
            trace_steps: list[dict[str, object]] = []
            trace_meta = {"truncated": False}
            result = solve_tomograph(
                constraints,
                max_solutions=request.max_solutions,
                use_multiprocessing=request.use_multiprocessing,
                workers=request.workers,
                trace=True,
                trace_log=trace_log,
                trace_steps=trace_steps if request.trace_steps else None,
                trace_meta=trace_meta,
                trace_max_steps=request.trace_max_steps,
            )
            response = _build_solve_response(result)
            response.trace = trace_log if request.trace else None
            response.trace_steps = (
                [TraceStepResponse(**step) for step in trace_steps] if request.trace_steps else None
            )
            response.trace_truncated = trace_meta["truncated"]
            return response

        result = solve_tomograph(
            constraints,
            max_solutions=request.max_solutions,
            use_multiprocessing=request.use_multiprocessing,
            workers=request.workers,
        )
        return _build_solve_response(result)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/heatmap", response_model=HeatmapResponse)
def heatmap(request: ConstraintsRequest) -> HeatmapResponse:
    try:
        constraints = _build_constraints(request)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return HeatmapResponse(
        heatmap=[list(row) for row in constraints.heatmap],
        heatmap_rows=format_heatmap_rows(constraints.heatmap),
    )


def _build_constraints(request: ConstraintsRequest) -> Constraints:
    return build_constraints(
        size=request.size,
        col_sums=request.col_sums,
        row_sums=request.row_sums,
        diag_down_sums=request.diag_down_sums,
        diag_up_sums=request.diag_up_sums,
    )


def _build_solve_response(result: dict) -> SolveResponse:
    combined = result["combined"]
    combined_rows = None if combined is None else render_grid_rows(combined)
    return SolveResponse(
        solution_count=len(result["solutions"]),
        node_count=result["node_count"],
        limit_reached=result["limit_reached"],
        elapsed_ms=result["elapsed_ms"],
        solutions=[render_grid_rows(solution) for solution in result["solutions"]],
        combined_rows=combined_rows,
        combined_text=None if combined_rows is None else "\n".join(combined_rows),
    )
