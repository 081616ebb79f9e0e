from typing import Any, Optional

from .constraints import Constraints
from .utils import diag_count


def validate_size(size: Any) -> int:
    if not isinstance(size, int) or isinstance(size, bool):
        raise ValueError("size must be an integer")
    if size < 1:
        raise ValueError("size must be at least 1")
    return size


def validate_sums(sums: Any, expected_length: int, name: str) -> list[int]:
    if not isinstance(sums, (list, tuple)):
        raise ValueError(f"{name} must be a list of integers")
    if len(sums) != expected_length:
        raise ValueError(f"{name} must contain {expected_length} values, got {len(sums)}")

    normalized: list[int] = []
    for index, value in enumerate(sums):
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"{name}[{index}] must be an integer")
        if value < 0:
            raise ValueError(f"{name}[{index}] must be non-negative")
        normalized.append(value)
    return normalized


def build_constraints(
    size: Any,
    col_sums: Any,
    row_sums: Any,
    diag_down_sums: Any,
    diag_up_sums: Any,
) -> Constraints:
    size = validate_size(size)
    diagonals = diag_count(size)
    return Constraints(
        size=size,
        col_sums=validate_sums(col_sums, size, "col_sums"),
        row_sums=validate_sums(row_sums, size, "row_sums"),
        diag_down_sums=validate_sums(diag_down_sums, diagonals, "diag_down_sums"),
        diag_up_sums=validate_sums(diag_up_sums, diagonals, "diag_up_sums"),
    )


def validate_solve_options(
    max_solutions: int,
    workers: Optional[int],
    trace_max_steps: int,
    split_depth: Optional[int] = None,
) -> None:
    if max_solutions < 1:
        raise ValueError("max_solutions must be >= 1")
    if workers is not None and workers < 1:
        raise ValueError("workers must be >= 1")
    if trace_max_steps < 1:
        raise ValueError("trace_max_steps must be >= 1")
    if split_depth is not None and split_depth < 0:
        raise ValueError("split_depth must be >= 0")
