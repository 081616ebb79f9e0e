import json
import tempfile
import unittest
from pathlib import Path

from main import (
    _build_parser,
    load_constraints_from_file,
    parse_constraints_text,
    result_to_json,
    run,
    run_with_trace,
)


DIAGONAL_TEXT = "2\n1 1\n1 1\n1 0 1\n0 2 0\n"


class TestMainInput(unittest.TestCase):
    def test_loads_text_file(self) -> None:
        file_path = self._write_file(DIAGONAL_TEXT, ".txt")
        constraints = load_constraints_from_file(file_path)

        self.assertEqual(constraints.size, 2)
        self.assertEqual(constraints.col_sums, (1, 1))
        self.assertEqual(constraints.row_sums, (1, 1))
        self.assertEqual(constraints.diag_down_sums, (1, 0, 1))
        self.assertEqual(constraints.diag_up_sums, (0, 2, 0))

    def test_text_format_keeps_family_order(self) -> None:
        constraints = parse_constraints_text("3\n1 2 0\n0 1 2\n0 0 1 1 1\n1 0 0 1 1\n")
        self.assertEqual(constraints.col_sums, (1, 2, 0))
        self.assertEqual(constraints.row_sums, (0, 1, 2))
        self.assertEqual(constraints.diag_down_sums, (0, 0, 1, 1, 1))
        self.assertEqual(constraints.diag_up_sums, (1, 0, 0, 1, 1))

    def test_loads_json_file(self) -> None:
        payload = {
            "size": 2,
            "col_sums": [1, 1],
            "row_sums": [1, 1],
            "diag_down_sums": [1, 0, 1],
            "diag_up_sums": [0, 2, 0],
        }
        file_path = self._write_file(json.dumps(payload), ".json")
        constraints = load_constraints_from_file(file_path)
        self.assertEqual(constraints.to_dict(), payload)

    def test_raises_when_file_is_missing(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(ValueError):
                load_constraints_from_file(str(Path(temp_dir) / "missing.txt"))

    def test_raises_when_text_is_empty(self) -> None:
        with self.assertRaises(ValueError):
            parse_constraints_text("\n\n")

    def test_raises_when_a_line_is_missing(self) -> None:
        with self.assertRaises(ValueError):
            parse_constraints_text("2\n1 1\n1 1\n1 0 1\n")

    def test_raises_when_value_count_is_wrong(self) -> None:
        with self.assertRaises(ValueError):
            parse_constraints_text("2\n1 1\n1 1\n1 0\n0 2 0\n")

    def test_raises_when_value_is_not_an_integer(self) -> None:
        with self.assertRaises(ValueError):
            parse_constraints_text("2\n1 x\n1 1\n1 0 1\n0 2 0\n")
        with self.assertRaises(ValueError):
            parse_constraints_text("two\n1 1\n1 1\n1 0 1\n0 2 0\n")

    def test_raises_when_sum_is_negative(self) -> None:
        with self.assertRaises(ValueError):
            parse_constraints_text("2\n1 -1\n1 1\n1 0 1\n0 2 0\n")

    def test_raises_when_json_is_invalid(self) -> None:
        file_path = self._write_file("{ not valid json", ".json")
        with self.assertRaises(ValueError):
            load_constraints_from_file(file_path)

    def test_raises_when_json_fields_are_missing(self) -> None:
        file_path = self._write_file(json.dumps({"size": 2, "col_sums": [1, 1]}), ".json")
        with self.assertRaises(ValueError):
            load_constraints_from_file(file_path)

    def test_loaded_constraints_can_be_solved(self) -> None:
        constraints = load_constraints_from_file(self._write_file(DIAGONAL_TEXT, ".txt"))
        result = run(constraints)
        payload = result_to_json(constraints, result)

        self.assertEqual(payload["solution_count"], 1)
        self.assertEqual(payload["node_count"], 1)
        self.assertEqual(payload["solutions"], [["#.", ".#"]])
        self.assertEqual(payload["combined"], ["#.", ".#"])
        self.assertEqual(payload["heatmap"], ["0.75 0.25", "0.25 0.75"])
        self.assertFalse(payload["limit_reached"])
        json.dumps(payload)

    def test_run_with_trace_returns_trace_log(self) -> None:
        constraints = parse_constraints_text(DIAGONAL_TEXT)
        result, trace_log = run_with_trace(constraints)
        self.assertEqual(len(result["solutions"]), 1)
        self.assertTrue(any("Initialized search" in line for line in trace_log))

    def test_parser_defaults(self) -> None:
        args = _build_parser().parse_args(["--input", "puzzle.txt"])
        self.assertEqual(args.input, "puzzle.txt")
        self.assertEqual(args.max_solutions, 100)
        self.assertEqual(args.format, "json")
        self.assertFalse(args.trace)
        self.assertFalse(args.parallel)
        self.assertIsNone(args.workers)

    def _write_file(self, content: str, suffix: str) -> str:
        tmp_file = tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False, encoding="utf-8")
        tmp_file.write(content)
        tmp_file.flush()
        tmp_file.close()
        self.addCleanup(lambda: Path(tmp_file.name).unlink(missing_ok=True))
        return tmp_file.name


if __name__ == "__main__":
    unittest.main()
