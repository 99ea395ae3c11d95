import unittest

import pandas as pd
import pytest

from cell import A_BOLD, A_DIM, A_UNDERLINE
from grid import SORT_ASC, SORT_DESC, SORT_NONE, Grid
from selection import MODE_VISUAL, Selection


def _shape_ok(grid):
    widths = {len(row) for row in grid.cells}
    return len(widths) == 1


class GridShapeTests(unittest.TestCase):
    def test_blank_grid_has_headers(self):
        grid = Grid.blank(3, 3)
        self.assertEqual(grid.row_count, 4)
        self.assertEqual(grid.col_count, 4)
        self.assertEqual([c.raw_text for c in grid.get_row(0)], ["", "0", "1", "2"])
        self.assertEqual([c.raw_text for c in grid.get_col(0)], ["", "0", "1", "2"])

    def test_ragged_rows_are_padded(self):
        grid = Grid.from_rows([["a"], ["b", "c", "d"], ["e", "f"]])
        self.assertTrue(_shape_ok(grid))
        self.assertEqual(grid.raw_texts(), [["a", "", ""], ["b", "c", "d"], ["e", "f", ""]])

    def test_get_cell_out_of_bounds(self):
        grid = Grid.blank(2, 2)
        self.assertIsNone(grid.get_cell(5, 1))
        self.assertIsNone(grid.get_cell(1, -1))

    def test_insert_and_remove_keep_rectangle(self):
        grid = Grid.from_rows([["1", "2"], ["3", "4"]])
        grid.insert_row(2)
        grid.insert_column(1)
        self.assertTrue(_shape_ok(grid))
        self.assertEqual(grid.raw_texts(), [["", "1", "2"], ["", "", ""], ["", "3", "4"]])

        grid.remove_rows(1, 2)
        grid.remove_column(1)
        self.assertTrue(_shape_ok(grid))
        self.assertEqual(grid.raw_texts(), [["3", "4"]])

    def test_insert_past_end_is_noop(self):
        grid = Grid.blank(2, 2)
        self.assertFalse(grid.insert_row(10))
        self.assertFalse(grid.insert_column(0))
        self.assertEqual((grid.row_count, grid.col_count), (3, 3))

    def test_removal_never_drops_below_floor(self):
        grid = Grid.blank(1, 1)
        self.assertEqual(grid.remove_row(1), [])
        self.assertEqual(grid.remove_column(1), [])
        self.assertEqual((grid.row_count, grid.col_count), (2, 2))

    def test_header_index_cannot_be_removed(self):
        grid = Grid.blank(3, 3)
        self.assertEqual(grid.remove_row(0), [])
        self.assertEqual(grid.remove_columns(0, 1), [])

    def test_remove_clamps_cursor(self):
        grid = Grid.blank(3, 3)
        grid.set_current(3, 3)
        grid.remove_row(3)
        grid.remove_column(3)
        self.assertEqual((grid.current_row, grid.current_col), (2, 2))


class GridHeaderTests(unittest.TestCase):
    def test_cursor_headers_are_bold_underlined(self):
        grid = Grid.blank(3, 3)
        grid.set_current(2, 3)
        self.assertEqual(grid.get_cell(2, 0).attributes, A_BOLD | A_UNDERLINE)
        self.assertEqual(grid.get_cell(0, 3).attributes, A_BOLD | A_UNDERLINE)
        self.assertEqual(grid.get_cell(1, 0).attributes, A_DIM)
        self.assertEqual(grid.get_cell(0, 1).attributes, A_DIM)

    def test_labels_follow_structural_changes(self):
        grid = Grid.blank(2, 2)
        grid.insert_row(1)
        self.assertEqual([c.raw_text for c in grid.get_col(0)], ["", "0", "1", "2"])

    def test_set_current_clamps_into_data(self):
        grid = Grid.blank(2, 2)
        grid.set_current(0, 99)
        self.assertEqual((grid.current_row, grid.current_col), (1, 2))


class GridSortTests(unittest.TestCase):
    def test_sort_is_stable_and_marks_header(self):
        grid = Grid.from_rows([["b", "1"], ["a", "2"], ["b", "3"], ["a", "4"]])

        grid.sort_column(1, SORT_ASC)

        self.assertEqual(
            grid.raw_texts(), [["a", "2"], ["a", "4"], ["b", "1"], ["b", "3"]]
        )
        self.assertEqual(grid.get_cell(0, 1).raw_text, "0↑")
        self.assertEqual((grid.sorted_col, grid.sort_order), (1, SORT_ASC))

    def test_sort_twice_is_idempotent(self):
        grid = Grid.from_rows([["c"], ["a"], ["b"]])
        grid.sort_column(1, SORT_DESC)
        once = grid.raw_texts()
        grid.sort_column(1, SORT_DESC)
        self.assertEqual(grid.raw_texts(), once)
        self.assertEqual(once, [["c"], ["b"], ["a"]])
        self.assertEqual(grid.get_cell(0, 1).raw_text, "0↓")

    def test_sort_is_lexicographic(self):
        grid = Grid.from_rows([["10"], ["9"], ["100"]])
        grid.sort_column(1, SORT_ASC)
        self.assertEqual(grid.raw_texts(), [["10"], ["100"], ["9"]])

    def test_sort_uses_computed_text(self):
        grid = Grid.from_rows([["1", "zzz"], ["5", "=SUM(0,0;0,0)"]])
        grid.sort_column(2, SORT_ASC)
        self.assertEqual(grid.raw_texts()[0], ["5", "=SUM(0,0;0,0)"])

    def test_deleting_sorted_column_clears_sort_state(self):
        grid = Grid.from_rows([["b", "x"], ["a", "y"]])
        grid.sort_column(1, SORT_ASC)
        grid.remove_column(1)
        self.assertEqual((grid.sorted_col, grid.sort_order), (-1, SORT_NONE))


class GridSnapshotTests(unittest.TestCase):
    def test_snapshot_restores_many_times(self):
        grid = Grid.from_rows([["a", "b"]])
        snap = grid.snapshot_cells()

        for _ in range(2):
            grid.cells[1][1].text = "changed"
            grid.restore_snapshot(snap)
            self.assertEqual(grid.raw_texts(), [["a", "b"]])


class GridSelectionPaintTests(unittest.TestCase):
    def test_paint_marks_only_the_rectangle(self):
        grid = Grid.blank(3, 3)
        sel = Selection(grid, MODE_VISUAL)
        sel.set_coordinates(3, 3)
        sel.update(2, 2)

        grid.paint_selection(sel)

        painted = {
            (r, c)
            for r, row in enumerate(grid.cells)
            for c, cell in enumerate(row)
            if cell.selected
        }
        self.assertEqual(painted, {(2, 2), (2, 3), (3, 2), (3, 3)})

    def test_empty_selection_clears_paint(self):
        grid = Grid.blank(2, 2)
        sel = Selection(grid, MODE_VISUAL)
        sel.set_coordinates(1, 1)
        grid.paint_selection(sel)
        sel.clear()
        grid.paint_selection(sel)
        self.assertFalse(any(cell.selected for row in grid.cells for cell in row))


@pytest.mark.parametrize(
    "rows, expected_shape",
    [
        ([["1", "2"], ["3", "4"]], (2, 2)),
        ([["x"]], (1, 1)),
        ([["a", None, "c"]], (1, 3)),
    ],
)
def test_to_frame_drops_headers(rows, expected_shape):
    grid = Grid.from_rows(rows)
    frame = grid.to_frame()
    assert frame.shape == expected_shape
    assert list(frame.columns) == list(range(expected_shape[1]))


def test_load_frame_converts_missing_values():
    grid = Grid()
    grid.load_frame(pd.DataFrame([["1", None], [float("nan"), "z"]]))
    assert grid.raw_texts() == [["1", ""], ["", "z"]]
    assert (grid.current_row, grid.current_col) == (1, 1)


def test_load_empty_frame_keeps_minimum_size():
    grid = Grid()
    grid.load_frame(pd.DataFrame())
    assert grid.row_count >= 2
    assert grid.col_count >= 2
