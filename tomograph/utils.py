from typing import Optional

from .types import COLUMN, DIAG_DOWN, DIAG_UP, ROW, LineFamily, Position, TraceLog


def diag_down_index(r: int, c: int) -> int:
    return r + c


def diag_up_index(r: int, c: int, size: int) -> int:
    return c - r + (size - 1)


def diag_count(size: int) -> int:
    return 2 * size - 1


def diag_length(k: int, size: int) -> int:
    return size - abs(k - (size - 1))


def line_count(family: LineFamily, size: int) -> int:
    if family in (ROW, COLUMN):
        return size
    return diag_count(size)


def line_indexes(r: int, c: int, size: int) -> list[tuple[LineFamily, int]]:
    return [
        (ROW, r),
        (COLUMN, c),
        (DIAG_DOWN, diag_down_index(r, c)),
        (DIAG_UP, diag_up_index(r, c, size)),
    ]


def line_positions(family: LineFamily, index: int, size: int) -> list[Position]:
    if family == ROW:
        return [(index, c) for c in range(size)]
    if family == COLUMN:
        return [(r, index) for r in range(size)]
    positions: list[Position] = []
    for r in range(size):
        # diagonals near the corners are shorter than size
        c = index - r if family == DIAG_DOWN else index - (size - 1) + r
        if 0 <= c < size:
            positions.append((r, c))
    return positions


def trace(enabled: bool, trace_log: Optional[TraceLog], message: str) -> None:
    if not enabled:
        return
    if trace_log is not None:
        trace_log.append(message)
    else:
        print(message)


def indent(depth: int) -> str:
    return "  " * depth
