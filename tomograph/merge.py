from typing import Optional, Sequence

from .grid import Grid


def combine_solutions(solutions: Sequence[Grid]) -> Optional[Grid]:
    """Merge solutions into one grid that keeps only the cells they all agree on.

    Returns None for no solutions and the grid itself for a single one.
    Disagreeing cells stay unassigned, which renders as ``?``.
    """
    if not solutions:
        return None
    if len(solutions) == 1:
        return solutions[0]

    first = solutions[0]
    combined = Grid(first.size)
    for r in range(first.size):
        for c in range(first.size):
            value = first.get(r, c)
            if all(solution.get(r, c) == value for solution in solutions[1:]):
                combined.set(r, c, value)
    return combined
