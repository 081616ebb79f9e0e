from typing import Optional


CellState = Optional[int]
GridRows = list[list[CellState]]
Heatmap = tuple[tuple[float, ...], ...]
LineFamily = str
Position = tuple[int, int]
LineCounts = tuple[int, int]
TraceLog = list[str]
TraceStep = dict[str, object]
SolveResult = dict[str, object]

UNASSIGNED: CellState = None
EMPTY: CellState = 0
FILLED: CellState = 1

ROW: LineFamily = "row"
COLUMN: LineFamily = "column"
DIAG_DOWN: LineFamily = "diag_down"
DIAG_UP: LineFamily = "diag_up"
LINE_FAMILIES: tuple[LineFamily, ...] = (ROW, COLUMN, DIAG_DOWN, DIAG_UP)
