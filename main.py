import argparse
import json
from pathlib import Path
from typing import Any, Optional

from tomograph.constraints import Constraints
from tomograph.render import format_heatmap_rows, format_solve_report, render_grid_rows
from tomograph.solver import DEFAULT_MAX_SOLUTIONS, solve_tomograph
from tomograph.types import SolveResult
from tomograph.utils import diag_count
from tomograph.validation import build_constraints


SUM_FIELDS = ("col_sums", "row_sums", "diag_down_sums", "diag_up_sums")


def run(
    constraints: Constraints,
    max_solutions: int = DEFAULT_MAX_SOLUTIONS,
    use_multiprocessing: bool = False,
    workers: Optional[int] = None,
) -> SolveResult:
    return solve_tomograph(
        constraints,
        max_solutions=max_solutions,
        use_multiprocessing=use_multiprocessing,
        workers=workers,
    )


def run_with_trace(constraints: Constraints, max_solutions: int = DEFAULT_MAX_SOLUTIONS) -> tuple[SolveResult, list[str]]:
    trace_log: list[str] = []
    result = solve_tomograph(constraints, max_solutions=max_solutions, trace=True, trace_log=trace_log)
    return result, trace_log


def load_constraints_from_file(input_path: str) -> Constraints:
    path = Path(input_path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ValueError(f"input file not found: {input_path}") from exc

    if path.suffix.lower() == ".json":
        return parse_constraints_json(text, input_path)
    return parse_constraints_text(text)


def parse_constraints_json(text: str, source: str = "<json>") -> Constraints:
    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"input file is not valid JSON: {source}") from exc

    if not isinstance(payload, dict):
        raise ValueError("JSON root must be an object")
    if payload.get("size") is None:
        raise ValueError("JSON must include 'size'")
    for field in SUM_FIELDS:
        if payload.get(field) is None:
            raise ValueError(f"JSON must include '{field}'")

    return build_constraints(
        size=payload["size"],
        col_sums=payload["col_sums"],
        row_sums=payload["row_sums"],
        diag_down_sums=payload["diag_down_sums"],
        diag_up_sums=payload["diag_up_sums"],
    )


def parse_constraints_text(text: str) -> Constraints:
    # size, then column, row, down-diagonal and up-diagonal sums, one line each
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        raise ValueError("input file is empty")

    size = _parse_int(lines[0].strip(), "size")
    if size < 1:
        raise ValueError("size must be at least 1")

    expected = [size, size, diag_count(size), diag_count(size)]
    labels = ["column sums", "row sums", "down-diagonal sums", "up-diagonal sums"]
    values: list[list[int]] = []
    for offset, (label, count) in enumerate(zip(labels, expected), start=1):
        if offset >= len(lines):
            raise ValueError(f"{label} are missing")
        values.append(_parse_int_line(lines[offset], count, label))

    col_sums, row_sums, diag_down_sums, diag_up_sums = values
    return build_constraints(size, col_sums, row_sums, diag_down_sums, diag_up_sums)


def result_to_json(constraints: Constraints, result: SolveResult) -> dict[str, Any]:
    combined = result["combined"]
    return {
        "size": constraints.size,
        "solution_count": len(result["solutions"]),
        "node_count": result["node_count"],
        "limit_reached": result["limit_reached"],
        "elapsed_ms": round(result["elapsed_ms"], 3),
        "heatmap": format_heatmap_rows(constraints.heatmap),
        "combined": None if combined is None else render_grid_rows(combined),
        "solutions": [render_grid_rows(solution) for solution in result["solutions"]],
    }


def _parse_int(token: str, label: str) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise ValueError(f"{label} must be an integer, got {token!r}") from exc


def _parse_int_line(line: str, expected_length: int, label: str) -> list[int]:
    parts = line.split()
    if len(parts) != expected_length:
        raise ValueError(f"expected {expected_length} {label}, found {len(parts)}: {line.strip()}")
    return [_parse_int(part, label) for part in parts]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reconstruct a binary grid from row, column and diagonal sums")
    parser.add_argument("--input", required=True, help="Path to a constraint file (5-line text format or .json)")
    parser.add_argument(
        "--max-solutions",
        type=int,
        default=DEFAULT_MAX_SOLUTIONS,
        help="Stop after this many solutions",
    )
    parser.add_argument("--format", choices=["json", "text"], default="json", help="Output format")
    parser.add_argument("--trace", action="store_true", help="Include solver trace output")
    parser.add_argument("--parallel", action="store_true", help="Explore search subtrees in worker processes")
    parser.add_argument("--workers", type=int, default=None, help="Number of worker processes for --parallel")
    return parser


if __name__ == "__main__":
    args = _build_parser().parse_args()

    try:
        constraints = load_constraints_from_file(args.input)
        trace_log: Optional[list[str]] = None
        if args.trace:
            result, trace_log = run_with_trace(constraints, max_solutions=args.max_solutions)
        else:
            result = run(
                constraints,
                max_solutions=args.max_solutions,
                use_multiprocessing=args.parallel,
                workers=args.workers,
            )

        if args.format == "text":
            if trace_log is not None:
                print("\n".join(trace_log))
                print()
            print(
                format_solve_report(
                    constraints,
                    result["solutions"],
                    result["combined"],
                    result["node_count"],
                    result["elapsed_ms"],
                )
            )
        else:
            payload = result_to_json(constraints, result)
            if trace_log is not None:
                payload["trace"] = trace_log
            print(json.dumps(payload, indent=2))
    except ValueError as exc:
        raise SystemExit(f"Error: {exc}")
