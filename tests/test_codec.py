import json
import unittest

from puzzlebox.core.constants import SolveStatus, Visibility
from puzzlebox.core.exceptions import MalformedPuzzleError
from puzzlebox.core.models import Hint, SolveResult, ValidationResult
from puzzlebox.io.codec import (
    grid_from_payload,
    kenken_from_dict,
    kenken_to_dict,
    nonogram_from_dict,
    nonogram_to_dict,
    nurikabe_from_dict,
    nurikabe_to_dict,
    skyscrapers_from_dict,
    skyscrapers_to_dict,
    to_jsonable,
)
from puzzlebox.puzzles.kenken.generator import KenKenConfig, generate_kenken
from puzzlebox.puzzles.nonograms.generator import NonogramConfig, generate_nonogram
from puzzlebox.puzzles.nurikabe.generator import NurikabeConfig, generate_nurikabe
from puzzlebox.puzzles.skyscrapers.generator import SkyscrapersConfig, generate_skyscrapers


class PuzzlePayloadTests(unittest.TestCase):
    def test_kenken_payload(self) -> None:
        puzzle = generate_kenken(KenKenConfig(size=4, seed=1))
        payload = json.loads(json.dumps(kenken_to_dict(puzzle)))
        self.assertEqual(payload["size"], 4)
        self.assertEqual(set(payload["cages"][0]["cells"][0]), {"r", "c"})
        self.assertEqual(kenken_from_dict(payload), puzzle)

    def test_nonogram_payload(self) -> None:
        puzzle = generate_nonogram(NonogramConfig(width=6, height=4, seed=2))
        payload = json.loads(json.dumps(nonogram_to_dict(puzzle)))
        self.assertEqual(nonogram_from_dict(payload), puzzle)

    def test_nurikabe_payload(self) -> None:
        puzzle = generate_nurikabe(NurikabeConfig(width=5, height=4, seed=3))
        payload = json.loads(json.dumps(nurikabe_to_dict(puzzle)))
        self.assertEqual(nurikabe_from_dict(payload), puzzle)

    def test_skyscrapers_payload(self) -> None:
        config = SkyscrapersConfig(size=5, visibility=Visibility.SUM, diagonals=True, seed=4)
        puzzle = generate_skyscrapers(config)
        payload = json.loads(json.dumps(skyscrapers_to_dict(puzzle)))
        self.assertEqual(payload["mode"], {"visibility": "sum", "diagonals": True})
        self.assertEqual(skyscrapers_from_dict(payload), puzzle)

    def test_solution_is_optional(self) -> None:
        puzzle = generate_kenken(KenKenConfig(size=3, seed=5)).without_solution()
        payload = kenken_to_dict(puzzle)
        self.assertNotIn("solution", payload)
        self.assertIsNone(kenken_from_dict(payload).solution)

    def test_skyscrapers_mode_defaults_to_count(self) -> None:
        payload = {"size": 3, "top": [0, 0, 0], "bottom": [0, 0, 0], "left": [1, 0, 0], "right": [0, 0, 0]}
        puzzle = skyscrapers_from_dict(payload)
        self.assertEqual(puzzle.visibility, Visibility.COUNT)
        self.assertFalse(puzzle.diagonals)


class MalformedPayloadTests(unittest.TestCase):
    def assertMalformed(self, decode, payload, fragment: str) -> None:
        with self.assertRaises(MalformedPuzzleError) as ctx:
            decode(payload)
        self.assertIn(fragment, str(ctx.exception))

    def test_kenken(self) -> None:
        cage = {"cells": [{"r": 0, "c": 0}], "op": "add", "target": 1}
        self.assertMalformed(kenken_from_dict, {"cages": [cage]}, "kenken.size is missing")
        self.assertMalformed(kenken_from_dict, {"size": "4", "cages": []}, "kenken.size must be an integer")
        self.assertMalformed(kenken_from_dict, {"size": 3, "cages": {}}, "kenken.cages must be a list")
        self.assertMalformed(
            kenken_from_dict, {"size": 3, "cages": [dict(cage, op="pow")]}, "kenken.cages[0].op"
        )
        self.assertMalformed(
            kenken_from_dict,
            {"size": 3, "cages": [dict(cage, cells=[{"r": 3, "c": 0}])]},
            "outside the 3x3 grid",
        )
        self.assertMalformed(
            kenken_from_dict, {"size": 3, "cages": [dict(cage, cells=[])]}, "must be a non-empty list"
        )
        self.assertMalformed(kenken_from_dict, [], "kenken must be an object")

    def test_nonogram(self) -> None:
        self.assertMalformed(nonogram_from_dict, {"rows": [[1]]}, "nonogram.cols is missing")
        self.assertMalformed(nonogram_from_dict, {"rows": [[0]], "cols": [[1]]}, "runs must be positive")
        self.assertMalformed(nonogram_from_dict, {"rows": [[True]], "cols": [[1]]}, "nonogram.rows[0][0]")
        self.assertMalformed(
            nonogram_from_dict,
            {"rows": [[1]], "cols": [[1]], "solution": [[1, 0]]},
            "rows must have 1 cells",
        )

    def test_nurikabe(self) -> None:
        self.assertMalformed(
            nurikabe_from_dict, {"width": 2, "height": 2, "clues": [[1, -1]]}, "must have 2 rows"
        )
        self.assertMalformed(nurikabe_from_dict, {"width": 0, "height": 2, "clues": []}, "must be positive")

    def test_skyscrapers(self) -> None:
        payload = {"size": 3, "top": [0, 0], "bottom": [0, 0, 0], "left": [0, 0, 0], "right": [0, 0, 0]}
        self.assertMalformed(skyscrapers_from_dict, payload, "skyscrapers.top must have 3 entries")
        payload["top"] = [0, 0, 0]
        payload["mode"] = {"visibility": "height"}
        self.assertMalformed(skyscrapers_from_dict, payload, "count' or 'sum'")

    def test_grid(self) -> None:
        self.assertIsNone(grid_from_payload(None))
        self.assertEqual(grid_from_payload([[1, 0], [0, 1]]), [[1, 0], [0, 1]])
        with self.assertRaises(MalformedPuzzleError):
            grid_from_payload("1010")
        with self.assertRaises(MalformedPuzzleError):
            grid_from_payload([[1, "x"]])


class ResultPayloadTests(unittest.TestCase):
    def test_solve_result(self) -> None:
        result = SolveResult(status=SolveStatus.TIMED_OUT, nodes=3, elapsed=0.25)
        self.assertEqual(
            to_jsonable(result), {"status": "TIMED_OUT", "grid": None, "nodes": 3, "elapsed": 0.25}
        )

    def test_hints_and_validation(self) -> None:
        hints = [Hint(id="scan", title="Scan cages")]
        self.assertEqual(to_jsonable(hints), [{"id": "scan", "title": "Scan cages", "body": None}])
        self.assertEqual(
            to_jsonable(ValidationResult.from_violations(["Row 1 repeats a value"])),
            {"ok": False, "violations": ["Row 1 repeats a value"]},
        )

    def test_plain_values_pass_through(self) -> None:
        self.assertIs(to_jsonable(True), True)
        self.assertEqual(to_jsonable("x"), "x")


if __name__ == "__main__":
    unittest.main()
