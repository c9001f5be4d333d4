import unittest

from puzzlebox.core.constants import Operation, Visibility
from puzzlebox.core.models import Cage, KenKenPuzzle, SkyscrapersPuzzle
from puzzlebox.engine.uniqueness import count_kenken_solutions, count_skyscrapers_solutions
from puzzlebox.puzzles.skyscrapers.generator import SkyscrapersConfig, generate_skyscrapers


def kenken_puzzle() -> KenKenPuzzle:
    return KenKenPuzzle(
        size=3,
        cages=(
            Cage(cells=((0, 0), (0, 1)), op=Operation.ADD, target=3),
            Cage(cells=((0, 2), (1, 2)), op=Operation.SUB, target=2),
            Cage(cells=((1, 0), (2, 0)), op=Operation.MUL, target=6),
            Cage(cells=((1, 1), (2, 1)), op=Operation.DIV, target=3),
            Cage(cells=((2, 2),), op=Operation.ADD, target=2),
        ),
    )


def skyscrapers_puzzle(n: int, **kwargs) -> SkyscrapersPuzzle:
    blank = (0,) * n
    edges = {name: kwargs.pop(name, blank) for name in ("top", "bottom", "left", "right")}
    return SkyscrapersPuzzle(size=n, **edges, **kwargs)


class KenKenCountTests(unittest.TestCase):
    def test_every_operator_is_modelled(self) -> None:
        self.assertEqual(count_kenken_solutions(kenken_puzzle()), 1)

    def test_loose_cage_has_many_solutions(self) -> None:
        cells = tuple((r, c) for r in range(3) for c in range(3))
        puzzle = KenKenPuzzle(size=3, cages=(Cage(cells=cells, op=Operation.ADD, target=18),))
        self.assertEqual(count_kenken_solutions(puzzle), 2)
        self.assertEqual(count_kenken_solutions(puzzle, limit=5), 5)

    def test_impossible_target(self) -> None:
        cells = tuple((r, c) for r in range(3) for c in range(3))
        puzzle = KenKenPuzzle(size=3, cages=(Cage(cells=cells, op=Operation.ADD, target=19),))
        self.assertEqual(count_kenken_solutions(puzzle), 0)

    def test_subtraction_needs_two_cells(self) -> None:
        cages = (Cage(cells=((0, 0), (0, 1), (0, 2)), op=Operation.SUB, target=1),)
        self.assertEqual(count_kenken_solutions(KenKenPuzzle(size=3, cages=cages)), 0)


class SkyscrapersCountTests(unittest.TestCase):
    def test_no_clues(self) -> None:
        self.assertEqual(count_skyscrapers_solutions(skyscrapers_puzzle(3)), 2)

    def test_full_clues(self) -> None:
        puzzle = skyscrapers_puzzle(3, top=(3, 2, 1), bottom=(1, 2, 2), left=(3, 2, 1), right=(1, 2, 2))
        self.assertEqual(count_skyscrapers_solutions(puzzle), 1)

    def test_contradictory_clues(self) -> None:
        self.assertEqual(count_skyscrapers_solutions(skyscrapers_puzzle(3, top=(3, 3, 3))), 0)

    def test_sum_mode(self) -> None:
        puzzle = skyscrapers_puzzle(3, left=(6, 0, 0), visibility=Visibility.SUM)
        self.assertEqual(count_skyscrapers_solutions(puzzle, limit=10), 2)
        puzzle = generate_skyscrapers(SkyscrapersConfig(size=4, visibility=Visibility.SUM, seed=6))
        self.assertGreaterEqual(count_skyscrapers_solutions(puzzle), 1)

    def test_diagonals_are_modelled(self) -> None:
        puzzle = skyscrapers_puzzle(4, diagonals=True, left=(4, 0, 0, 0))
        self.assertGreaterEqual(count_skyscrapers_solutions(puzzle), 1)
        puzzle = skyscrapers_puzzle(4, diagonals=True, left=(4, 0, 0, 0), top=(4, 0, 0, 0))
        self.assertEqual(count_skyscrapers_solutions(puzzle), 0)


if __name__ == "__main__":
    unittest.main()
