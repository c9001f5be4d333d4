import unittest

from puzzlebox.core.constants import CROSS, FILLED, ISLAND, NO_CLUE, SEA, UNKNOWN_CELL
from puzzlebox.core.models import NurikabePuzzle
from puzzlebox.utils.pretty import NONOGRAM_SYMBOLS, format_grid, format_nurikabe


class FormatGridTests(unittest.TestCase):
    def test_numbers_and_blanks(self) -> None:
        text = format_grid([[1, 0], [2, 3]])
        self.assertEqual(text.splitlines(), ["     0  1", "    -----", " 0 |  1  .", " 1 |  2  3"])

    def test_nonogram_symbols(self) -> None:
        text = format_grid([[FILLED, UNKNOWN_CELL], [CROSS, FILLED]], NONOGRAM_SYMBOLS)
        self.assertEqual(text.splitlines()[2:], [" 0 |  #  .", " 1 |  x  #"])


class FormatNurikabeTests(unittest.TestCase):
    def test_clues_sit_over_marks(self) -> None:
        puzzle = NurikabePuzzle(width=3, height=1, clues=[[2, NO_CLUE, 2]])
        self.assertEqual(
            format_nurikabe(puzzle).splitlines(),
            ["     0  1  2", "    --------", " 0 |  2  .  2"],
        )
        self.assertEqual(
            format_nurikabe(puzzle, [[ISLAND, SEA, ISLAND]]).splitlines()[2],
            " 0 |  2  ~  2",
        )

    def test_layout_matches_plain_grids(self) -> None:
        puzzle = NurikabePuzzle(width=2, height=2, clues=[[1, NO_CLUE], [NO_CLUE, NO_CLUE]])
        marks = [[ISLAND, SEA], [SEA, SEA]]
        self.assertEqual(
            format_nurikabe(puzzle, marks).splitlines()[:2],
            format_grid(marks).splitlines()[:2],
        )


if __name__ == "__main__":
    unittest.main()
