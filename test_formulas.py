import unittest

from cell import Cell, ERROR_PREFIX
from formulas import FormulaRange, SumFormula, default_formulas
from grid import Grid

def _grid_with_formula(formula_text, rows=None):
    rows = rows or [["1", "2", ""], ["3", "4", ""]]
    grid = Grid.from_rows(rows)
    grid.cells[1][3].text = formula_text
    return grid

class SumFormulaTests(unittest.TestCase):
    def test_sums_rectangle_with_two_decimals(self):
        grid = _grid_with_formula("=SUM(0,0;1,1)")

        rng = grid.compute(1, 3)

        cell = grid.get_cell(1, 3)
        self.assertEqual(cell.display_text, "10.00")
        self.assertFalse(cell.has_error)
        self.assertEqual(rng, FormulaRange(0, 0, 1, 1))

    def test_spaces_are_ignored(self):
        grid = _grid_with_formula("= SUM( 0, 0 ; 1, 1 )")
        grid.compute(1, 3)
        self.assertEqual(grid.get_cell(1, 3).display_text, "10.00")

    def test_fractional_values(self):
        grid = _grid_with_formula("=SUM(0,0;0,1)", rows=[["1.25", "-0.5", ""]])
        grid.compute(1, 3)
        self.assertEqual(grid.get_cell(1, 3).display_text, "0.75")

    def test_start_after_end_is_an_error(self):
        grid = _grid_with_formula("=SUM(1,1;0,0)")

        rng = grid.compute(1, 3)

        cell = grid.get_cell(1, 3)
        self.assertIsNone(rng)
        self.assertTrue(cell.has_error)
        self.assertEqual(
            cell.error_message,
            "start coordinates must be less than or equal to end coordinates",
        )
        self.assertEqual(cell.display_text, ERROR_PREFIX + cell.error_message)

    def test_out_of_bounds(self):
        grid = _grid_with_formula("=SUM(0,0;5,5)")
        grid.compute(1, 3)
        self.assertEqual(grid.get_cell(1, 3).display_text, "#ERR:coordinates out of bounds")

    def test_non_numeric_cell_reports_data_coordinates(self):
        grid = _grid_with_formula("=SUM(0,0;1,1)", rows=[["1", "abc", ""], ["3", "4", ""]])
        grid.compute(1, 3)
        self.assertEqual(grid.get_cell(1, 3).error_message, "0,1 is not a number")

    def test_loosely_formatted_numbers_are_rejected(self):
        for text in (" 1 ", "1_000", "١", "1 ", "0x10", ""):
            with self.subTest(text=text):
                grid = _grid_with_formula("=SUM(0,0;0,0)", rows=[[text, "", ""]])
                grid.compute(1, 3)
                self.assertEqual(grid.get_cell(1, 3).error_message, "0,0 is not a number")

    def test_accepted_number_forms(self):
        for text, expected in (
            ("+3", "3.00"),
            ("-.5", "-0.50"),
            ("2.", "2.00"),
            ("1e2", "100.00"),
            ("1.5E-1", "0.15"),
            ("inf", "inf"),
            ("-Infinity", "-inf"),
            ("NaN", "nan"),
        ):
            with self.subTest(text=text):
                grid = _grid_with_formula("=SUM(0,0;0,0)", rows=[[text, "", ""]])
                grid.compute(1, 3)
                self.assertEqual(grid.get_cell(1, 3).display_text, expected)

    def test_non_ascii_coordinates_do_not_match(self):
        grid = _grid_with_formula("=SUM(٠,٠;٠,٠)", rows=[["4", "", ""]])
        grid.compute(1, 3)
        self.assertEqual(grid.get_cell(1, 3).display_text, "#ERR:no formula")

    def test_unknown_formula(self):
        grid = _grid_with_formula("=AVG(0,0;1,1)")
        grid.compute(1, 3)
        self.assertEqual(grid.get_cell(1, 3).display_text, "#ERR:no formula")

    def test_lowercase_does_not_match(self):
        self.assertFalse(SumFormula().match("sum(0,0;1,1)"))
        self.assertTrue(SumFormula().match("SUM(10,2;11,3)"))

    def test_error_clears_when_fixed(self):
        grid = _grid_with_formula("=SUM(1,1;0,0)")
        grid.compute(1, 3)
        grid.cells[1][3].text = "=SUM(0,0;1,1)"
        grid.compute(1, 3)
        cell = grid.get_cell(1, 3)
        self.assertFalse(cell.has_error)
        self.assertEqual(cell.error_message, "")

class CellComputeTests(unittest.TestCase):
    def test_plain_text_is_verbatim(self):
        cell = Cell("hello")
        self.assertIsNone(cell.compute(None, default_formulas()))
        self.assertEqual(cell.display_text, "hello")
        self.assertFalse(cell.has_error)

    def test_formula_with_empty_registry(self):
        cell = Cell("=SUM(0,0;0,0)")
        cell.compute(None, [])
        self.assertEqual(cell.display_text, "#ERR:no formula")

    def test_copy_is_independent(self):
        cell = Cell("a", width=4)
        dup = cell.copy()
        dup.text = "b"
        dup.width = 7
        self.assertEqual(cell.raw_text, "a")
        self.assertEqual(cell.width, 4)

class FormulaRangeTests(unittest.TestCase):
    def test_grid_cells_apply_header_offset(self):
        rng = FormulaRange(0, 0, 1, 0)
        self.assertEqual(list(rng.grid_cells()), [(1, 1), (2, 1)])

class HighlightTests(unittest.TestCase):
    def test_recompute_current_highlights_range(self):
        grid = _grid_with_formula("=SUM(0,0;1,0)")
        grid.set_current(1, 3)

        grid.recompute_current()

        flagged = {
            (r, c)
            for r, row in enumerate(grid.cells)
            for c, cell in enumerate(row)
            if cell.in_range
        }
        self.assertEqual(flagged, {(1, 1), (2, 1)})

    def test_moving_off_formula_clears_highlight(self):
        grid = _grid_with_formula("=SUM(0,0;1,0)")
        grid.set_current(1, 3)
        grid.recompute_current()

        grid.set_current(1, 1)
        grid.recompute_current()

        self.assertFalse(any(cell.in_range for row in grid.cells for cell in row))

if __name__ == "__main__":
    unittest.main()
