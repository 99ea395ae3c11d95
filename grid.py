import logging

import pandas as pd

from cell import A_BOLD, A_DIM, A_UNDERLINE, ALIGN_CENTER, DEFAULT_WIDTH, Cell
from formulas import default_formulas

SORT_NONE = "none"
SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_GLYPHS = {SORT_ASC: "↑", SORT_DESC: "↓"}

# row 0 / column 0 hold coordinate labels, so the smallest grid is one data cell
MIN_ROWS = 2
MIN_COLS = 2

logger = logging.getLogger(__name__)


class Grid:
    """Rectangular matrix of cells plus cursor and sort state.

    Row 0 and column 0 are coordinate headers that are re-derived after
    every structural change; user data lives at rows >= 1 and cols >= 1.
    """

    def __init__(self, formulas=None, cell_width: int = DEFAULT_WIDTH):
        self.cells: list[list[Cell]] = []
        self.formulas = list(formulas) if formulas is not None else default_formulas()
        self.cell_width = max(1, cell_width)
        self.current_row = 1
        self.current_col = 1
        self.sorted_col = -1
        self.sort_order = SORT_NONE

    @classmethod
    def blank(cls, rows: int, cols: int, formulas=None, cell_width: int = DEFAULT_WIDTH):
        """Grid with `rows` x `cols` empty data cells."""
        grid = cls(formulas=formulas, cell_width=cell_width)
        width = max(1, cols) + 1
        for _ in range(max(1, rows) + 1):
            grid.cells.append([grid.new_cell() for _ in range(width)])
        grid.refresh_coordinates()
        return grid

    @classmethod
    def from_rows(cls, rows, formulas=None, cell_width: int = DEFAULT_WIDTH):
        """Grid whose data region holds the given rows of text."""
        grid = cls(formulas=formulas, cell_width=cell_width)
        for values in rows:
            grid.append_record(values)
        if not grid.cells:
            return cls.blank(1, 1, formulas=formulas, cell_width=cell_width)
        grid.refresh_coordinates()
        return grid

    # ---------- shape ----------
    @property
    def row_count(self) -> int:
        return len(self.cells)

    @property
    def col_count(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def new_cell(self, text: str = "") -> Cell:
        return Cell(text, width=self.cell_width)

    def _new_row(self):
        return [self.new_cell() for _ in range(self.col_count)]

    # ---------- access ----------
    def get_cell(self, row: int, col: int) -> Cell | None:
        if row < 0 or col < 0 or row >= self.row_count or col >= self.col_count:
            return None
        return self.cells[row][col]

    def get_cells(self):
        return self.cells

    def get_row(self, row: int):
        return self.cells[row]

    def get_col(self, col: int):
        return [row[col] for row in self.cells]

    def get_current_cell(self) -> Cell:
        cell = self.get_cell(self.current_row, self.current_col)
        return cell if cell is not None else self.new_cell()

    def raw_texts(self):
        """Raw text of the data region, row by row."""
        return [[cell.raw_text for cell in row[1:]] for row in self.cells[1:]]

    # ---------- loading ----------
    def add_data_row(self, cells):
        """Append one fully formed row (header cell included); pads to stay rectangular."""
        row = list(cells)
        if self.cells:
            width = self.col_count
            if len(row) < width:
                row.extend(self.new_cell() for _ in range(width - len(row)))
            elif len(row) > width:
                extra = len(row) - width
                for existing in self.cells:
                    existing.extend(self.new_cell() for _ in range(extra))
        self.cells.append(row)

    def append_record(self, values):
        """Append a data row from plain values; the header row is created on first use."""
        texts = ["" if v is None else str(v) for v in values]
        if not self.cells:
            self.add_data_row([self.new_cell() for _ in range(len(texts) + 1)])
        self.add_data_row([self.new_cell()] + [self.new_cell(t) for t in texts])

    # ---------- structure ----------
    def insert_row(self, at: int) -> bool:
        if not self.cells or at < 1 or at > self.row_count:
            return False
        self.cells.insert(at, self._new_row())
        self.refresh_coordinates()
        return True

    def insert_row_cells(self, at: int, cells) -> bool:
        if not self.cells or at < 1 or at > self.row_count or len(cells) != self.col_count:
            return False
        self.cells.insert(at, list(cells))
        self.refresh_coordinates()
        return True

    def insert_column(self, at: int) -> bool:
        if not self.cells or at < 1 or at > self.col_count:
            return False
        for row in self.cells:
            row.insert(at, self.new_cell())
        self._shift_sorted_col(at)
        self.refresh_coordinates()
        return True

    def insert_column_cells(self, at: int, cells) -> bool:
        if not self.cells or at < 1 or at > self.col_count or len(cells) != self.row_count:
            return False
        for row, cell in zip(self.cells, cells):
            row.insert(at, cell)
        self._shift_sorted_col(at)
        self.refresh_coordinates()
        return True

    def _shift_sorted_col(self, at: int):
        if self.sorted_col >= at:
            self.sorted_col += 1

    def remove_row(self, at: int):
        return self.remove_rows(at, at)

    def remove_rows(self, first: int, last: int):
        """Remove rows first..last inclusive; returns the removed rows ([] on no-op)."""
        if first > last or first < 1 or last >= self.row_count:
            return []
        if self.row_count - (last - first + 1) < MIN_ROWS:
            return []
        removed = self.cells[first : last + 1]
        del self.cells[first : last + 1]
        self.clamp_cursor()
        self.refresh_coordinates()
        return removed

    def remove_column(self, at: int):
        removed = self.remove_columns(at, at)
        return [cells[0] for cells in removed] if removed else []

    def remove_columns(self, first: int, last: int):
        """Remove cols first..last inclusive; returns per-row lists of removed cells."""
        if first > last or first < 1 or last >= self.col_count:
            return []
        if self.col_count - (last - first + 1) < MIN_COLS:
            return []
        removed = []
        for row in self.cells:
            removed.append(row[first : last + 1])
            del row[first : last + 1]
        if self.sorted_col > last:
            self.sorted_col -= last - first + 1
        elif self.sorted_col >= first:
            self.sorted_col = -1
            self.sort_order = SORT_NONE
        self.clamp_cursor()
        self.refresh_coordinates()
        return removed

    # ---------- sorting ----------
    def sort_column(self, col: int, order: str = SORT_ASC) -> bool:
        """Stable sort of the data rows by the computed text of column `col`."""
        if col < 1 or col >= self.col_count or order not in SORT_GLYPHS:
            return False
        data = self.cells[1:]
        keys = []
        for row in data:
            row[col].compute(self, self.formulas)
            keys.append(row[col].display_text)
        order_idx = sorted(
            range(len(data)), key=lambda i: keys[i], reverse=(order == SORT_DESC)
        )
        self.cells[1:] = [data[i] for i in order_idx]
        self.sorted_col = col
        self.sort_order = order
        self.refresh_coordinates()
        return True

    # ---------- cursor ----------
    def clamp_cursor(self):
        self.current_row = max(1, min(self.current_row, self.row_count - 1))
        self.current_col = max(1, min(self.current_col, self.col_count - 1))

    def set_current(self, row: int, col: int):
        self.current_row = row
        self.current_col = col
        self.clamp_cursor()
        self.refresh_coordinates()

    # ---------- headers ----------
    def refresh_coordinates(self):
        if not self.cells:
            return
        for row_idx, row in enumerate(self.cells):
            cell = row[0]
            cell.text = str(row_idx - 1)
            cell.align = ALIGN_CENTER
            cell.attributes = A_DIM
            if row_idx == self.current_row:
                cell.attributes = A_BOLD | A_UNDERLINE

        for col_idx, cell in enumerate(self.cells[0]):
            label = str(col_idx - 1)
            if self.sorted_col != -1 and col_idx == self.sorted_col:
                label += SORT_GLYPHS.get(self.sort_order, "")
            cell.text = label
            cell.align = ALIGN_CENTER
            cell.attributes = A_DIM
            if col_idx == self.current_col:
                cell.attributes = A_BOLD | A_UNDERLINE

        corner = self.cells[0][0]
        corner.text = ""
        corner.attributes = A_DIM

    # ---------- snapshots ----------
    def snapshot_cells(self):
        return [[cell.copy() for cell in row] for row in self.cells]

    def restore_snapshot(self, snapshot):
        self.cells = [[cell.copy() for cell in row] for row in snapshot]
        self.clamp_cursor()
        self.refresh_coordinates()

    def snapshot_state(self):
        return {
            "cells": self.snapshot_cells(),
            "current_row": self.current_row,
            "current_col": self.current_col,
            "sorted_col": self.sorted_col,
            "sort_order": self.sort_order,
        }

    def restore_state(self, snap):
        self.current_row = snap["current_row"]
        self.current_col = snap["current_col"]
        self.sorted_col = snap["sorted_col"]
        self.sort_order = snap["sort_order"]
        self.restore_snapshot(snap["cells"])

    # ---------- formulas ----------
    def compute(self, row: int, col: int):
        cell = self.get_cell(row, col)
        if cell is None or row == 0 or col == 0:
            return None
        return cell.compute(self, self.formulas)

    def recompute_current(self):
        """Recompute the cursor cell and move the dependency highlight to its range."""
        self.clear_formula_range()
        rng = self.compute(self.current_row, self.current_col)
        if rng is not None:
            self.highlight_formula_range(rng)
        return rng

    def highlight_formula_range(self, rng):
        for row, col in rng.grid_cells():
            cell = self.get_cell(row, col)
            if cell is not None:
                cell.in_range = True

    def clear_formula_range(self):
        # flagged cells may have moved since highlighting, so sweep everything
        for row in self.cells:
            for cell in row:
                cell.in_range = False

    # ---------- selection paint ----------
    def paint_selection(self, selection):
        self.clear_selection()
        if selection.is_empty():
            return
        for row in range(1, self.row_count):
            for col in range(1, self.col_count):
                if selection.contains(row, col):
                    self.cells[row][col].selected = True

    def clear_selection(self):
        for row in self.cells:
            for cell in row:
                cell.selected = False

    # ---------- frames ----------
    def to_frame(self) -> pd.DataFrame:
        """Data region raw texts as a DataFrame (headers dropped)."""
        return pd.DataFrame(self.raw_texts(), columns=range(max(0, self.col_count - 1)), dtype=object)

    def load_frame(self, frame: pd.DataFrame):
        self.cells = []
        self.sorted_col = -1
        self.sort_order = SORT_NONE
        for values in frame.itertuples(index=False, name=None):
            self.append_record("" if pd.isna(v) else v for v in values)
        if not self.cells:
            width = max(1, frame.shape[1]) + 1
            for _ in range(MIN_ROWS):
                self.cells.append([self.new_cell() for _ in range(width)])
        self.set_current(1, 1)
        logger.info("loaded %d rows x %d cols", self.row_count - 1, self.col_count - 1)
