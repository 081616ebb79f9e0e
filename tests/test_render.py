import unittest

from tomograph.constraints import Constraints
from tomograph.grid import Grid
from tomograph.merge import combine_solutions
from tomograph.render import (
    format_heatmap_rows,
    format_solve_report,
    grid_from_rows,
    render_grid,
    render_grid_rows,
)


SWITCHING_PAIR = (
    ("..#.", "#...", "...#", ".#.."),
    (".#..", "...#", "#...", "..#."),
)


class TestRender(unittest.TestCase):
    def test_renders_cell_states(self) -> None:
        grid = Grid.from_cells([[1, 0], [None, 1]])
        self.assertEqual(render_grid_rows(grid), ["#.", "?#"])
        self.assertEqual(render_grid(grid), "#.\n?#")

    def test_grid_from_rows_parses_symbols(self) -> None:
        grid = grid_from_rows(["#.", "?#"])
        self.assertEqual(grid.to_rows(), [[1, 0], [None, 1]])

    def test_grid_from_rows_rejects_bad_input(self) -> None:
        with self.assertRaises(ValueError):
            grid_from_rows(["#.", "x#"])
        with self.assertRaises(ValueError):
            grid_from_rows(["#..", ".#"])

    def test_formats_heatmap_with_two_decimals(self) -> None:
        constraints = Constraints(2, [1, 1], [1, 1], [1, 0, 1], [0, 2, 0])
        self.assertEqual(format_heatmap_rows(constraints.heatmap), ["0.75 0.25", "0.25 0.75"])

    def test_report_for_unique_solution(self) -> None:
        constraints = Constraints(2, [1, 1], [1, 1], [1, 0, 1], [0, 2, 0])
        solution = grid_from_rows(["#.", ".#"])
        report = format_solve_report(constraints, [solution], solution, node_count=1, elapsed_ms=2.4)
        lines = report.splitlines()
        self.assertIn("Solutions found: 1", lines)
        self.assertIn("Nodes visited: 1", lines)
        self.assertIn("Elapsed: 2 ms", lines)
        self.assertEqual(lines[-3:], ["Unique solution:", "#.", ".#"])

    def test_report_without_solution(self) -> None:
        constraints = Constraints(2, [0, 0], [2, 2], [0, 0, 0], [0, 0, 0])
        report = format_solve_report(constraints, [], None, node_count=0, elapsed_ms=0.0)
        self.assertTrue(report.endswith("No solution found."))

    def test_report_for_multiple_solutions_previews_three(self) -> None:
        solutions = [grid_from_rows(rows) for rows in SWITCHING_PAIR * 2]
        constraints = Constraints.from_grid(solutions[0])
        report = format_solve_report(constraints, solutions, combine_solutions(solutions), node_count=7, elapsed_ms=1.0)
        self.assertIn("Multiple solutions found. Combined grid (? = ambiguous):", report)
        self.assertIn("First 3 solutions:", report)
        self.assertIn("Solution 3:", report)
        self.assertNotIn("Solution 4:", report)


class TestCombineSolutions(unittest.TestCase):
    def test_empty_sequence_has_no_combined_grid(self) -> None:
        self.assertIsNone(combine_solutions([]))

    def test_single_solution_is_returned_unchanged(self) -> None:
        solution = grid_from_rows(["#.", ".#"])
        self.assertIs(combine_solutions([solution]), solution)

    def test_disagreeing_cells_become_unassigned(self) -> None:
        solutions = [grid_from_rows(rows) for rows in SWITCHING_PAIR]
        combined = combine_solutions(solutions)
        self.assertEqual(render_grid_rows(combined), [".??.", "?..?", "?..?", ".??."])

    def test_unanimous_cells_are_kept(self) -> None:
        solutions = [grid_from_rows(["#..", ".#.", "..#"]), grid_from_rows(["#..", "..#", ".#."])]
        combined = combine_solutions(solutions)
        self.assertEqual(render_grid_rows(combined), ["#..", ".??", ".??"])

    def test_inputs_are_not_mutated(self) -> None:
        solutions = [grid_from_rows(rows) for rows in SWITCHING_PAIR]
        before = [solution.to_rows() for solution in solutions]
        combined = combine_solutions(solutions)
        self.assertEqual([solution.to_rows() for solution in solutions], before)
        self.assertIsNot(combined, solutions[0])


if __name__ == "__main__":
    unittest.main()
