import logging

from grid import SORT_ASC, SORT_DESC

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """A command could not be applied; the grid is left structurally valid."""


class Command:
    """Reversible unit of mutation handed to History.do()."""

    description = "command"

    def __init__(self, grid):
        self.grid = grid
        self._cursor = None

    def execute(self):
        raise NotImplementedError

    def unexecute(self):
        raise NotImplementedError

    def _save_cursor(self):
        self._cursor = (self.grid.current_row, self.grid.current_col)

    def _restore_cursor(self):
        if self._cursor is not None:
            self.grid.set_current(*self._cursor)


# ---------- inserts ----------
class InsertRowBelowCommand(Command):
    description = "insert row below"

    def __init__(self, grid, row: int):
        super().__init__(grid)
        self.row = row + 1

    def execute(self):
        self._save_cursor()
        if not self.grid.insert_row(self.row):
            raise CommandError(f"cannot insert row at {self.row - 1}")
        logger.info("inserted row %d below", self.row)

    def unexecute(self):
        self.grid.remove_row(self.row)
        self._restore_cursor()
        logger.info("undo inserted row %d below", self.row)


class InsertRowAboveCommand(Command):
    description = "insert row above"

    def __init__(self, grid, row: int, col: int):
        super().__init__(grid)
        self.row = row
        self.col = col

    def execute(self):
        self._save_cursor()
        if not self.grid.insert_row(self.row):
            raise CommandError(f"cannot insert row at {self.row - 1}")
        # the cursor follows its row, which moved down by one
        self.grid.set_current(self.row + 1, self.col)
        logger.info("inserted row %d above", self.row)

    def unexecute(self):
        self.grid.remove_row(self.row)
        self._restore_cursor()
        logger.info("undo inserted row %d above", self.row)


class InsertColRightCommand(Command):
    description = "insert column right"

    def __init__(self, grid, col: int):
        super().__init__(grid)
        self.col = col + 1

    def execute(self):
        self._save_cursor()
        if not self.grid.insert_column(self.col):
            raise CommandError(f"cannot insert column at {self.col - 1}")
        logger.info("inserted col %d right", self.col)

    def unexecute(self):
        self.grid.remove_column(self.col)
        self._restore_cursor()
        logger.info("undo inserted col %d right", self.col)


class InsertColLeftCommand(Command):
    description = "insert column left"

    def __init__(self, grid, row: int, col: int):
        super().__init__(grid)
        self.row = row
        self.col = col

    def execute(self):
        self._save_cursor()
        if not self.grid.insert_column(self.col):
            raise CommandError(f"cannot insert column at {self.col - 1}")
        self.grid.set_current(self.row, self.col + 1)
        logger.info("inserted col %d left", self.col)

    def unexecute(self):
        self.grid.remove_column(self.col)
        self._restore_cursor()
        logger.info("undo inserted col %d left", self.col)


# ---------- deletes (slice capture) ----------
class DeleteRowCommand(Command):
    description = "delete row"

    def __init__(self, grid, row: int, col: int):
        super().__init__(grid)
        self.row = row
        self.col = col
        self.deleted_row = None

    def execute(self):
        self._save_cursor()
        removed = self.grid.remove_row(self.row)
        if not removed:
            raise CommandError(f"cannot delete row {self.row - 1}")
        self.deleted_row = removed[0]
        # deleting the last row leaves the cursor on the new last row
        self.grid.set_current(min(self.row, self.grid.row_count - 1), self.col)
        logger.info("deleted row %d", self.row)

    def unexecute(self):
        if self.deleted_row is None:
            return
        self.grid.insert_row_cells(self.row, self.deleted_row)
        self._restore_cursor()
        logger.info("undo deleted row %d", self.row)


class DeleteRowsCommand(Command):
    """Delete the rows spanned by a whole-row selection."""

    description = "delete rows"

    def __init__(self, grid, selection):
        super().__init__(grid)
        self.selection = selection
        self.empty = selection.is_empty()
        self.top_row, _, self.bottom_row, _ = selection.rect()
        self.deleted_rows = None

    def execute(self):
        if self.empty:
            raise CommandError("nothing selected")
        self._save_cursor()
        removed = self.grid.remove_rows(self.top_row, self.bottom_row)
        if not removed:
            raise CommandError(
                f"cannot delete rows {self.top_row - 1} to {self.bottom_row - 1}"
            )
        self.deleted_rows = removed
        self.grid.set_current(
            min(self.top_row, self.grid.row_count - 1), self.grid.current_col
        )
        self.grid.clear_selection()
        self.selection.clear()
        logger.info("deleted rows %d to %d", self.top_row, self.bottom_row)

    def unexecute(self):
        if self.deleted_rows is None:
            return
        for offset, row in enumerate(self.deleted_rows):
            self.grid.insert_row_cells(self.top_row + offset, row)
        self._restore_cursor()
        logger.info("undo deleted rows %d to %d", self.top_row, self.bottom_row)


class DeleteColumnCommand(Command):
    description = "delete column"

    def __init__(self, grid, row: int, col: int):
        super().__init__(grid)
        self.row = row
        self.col = col
        self.deleted_col = None
        self._sort_state = None

    def execute(self):
        self._save_cursor()
        self._sort_state = (self.grid.sorted_col, self.grid.sort_order)
        removed = self.grid.remove_column(self.col)
        if not removed:
            raise CommandError(f"cannot delete column {self.col - 1}")
        self.deleted_col = removed
        # deleting the last column leaves the cursor on the new last column
        self.grid.set_current(self.row, min(self.col, self.grid.col_count - 1))
        logger.info("deleted column %d", self.col)

    def unexecute(self):
        if self.deleted_col is None:
            return
        self.grid.insert_column_cells(self.col, self.deleted_col)
        self.grid.sorted_col, self.grid.sort_order = self._sort_state
        self._restore_cursor()
        logger.info("undo deleted column %d", self.col)


class DeleteColumnsCommand(Command):
    """Delete the columns spanned by a whole-column selection."""

    description = "delete columns"

    def __init__(self, grid, selection):
        super().__init__(grid)
        self.selection = selection
        self.empty = selection.is_empty()
        _, self.left_col, _, self.right_col = selection.rect()
        self.deleted_cols = None
        self._sort_state = None

    def execute(self):
        if self.empty:
            raise CommandError("nothing selected")
        self._save_cursor()
        self._sort_state = (self.grid.sorted_col, self.grid.sort_order)
        removed = self.grid.remove_columns(self.left_col, self.right_col)
        if not removed:
            raise CommandError(
                f"cannot delete columns {self.left_col - 1} to {self.right_col - 1}"
            )
        self.deleted_cols = removed
        self.grid.set_current(
            self.grid.current_row, min(self.left_col, self.grid.col_count - 1)
        )
        self.grid.clear_selection()
        self.selection.clear()
        logger.info("deleted columns %d to %d", self.left_col, self.right_col)

    def unexecute(self):
        if self.deleted_cols is None:
            return
        width = self.right_col - self.left_col + 1
        for offset in range(width):
            column = [cells[offset] for cells in self.deleted_cols]
            self.grid.insert_column_cells(self.left_col + offset, column)
        self.grid.sorted_col, self.grid.sort_order = self._sort_state
        self._restore_cursor()
        logger.info("undo deleted columns %d to %d", self.left_col, self.right_col)


# ---------- sorting (lazy full snapshot) ----------
class SortColumnCommand(Command):
    order = SORT_ASC

    def __init__(self, grid, col: int):
        super().__init__(grid)
        self.col = col
        self.original_state = None

    @property
    def description(self):
        return f"sort column {self.order}"

    def execute(self):
        if self.col < 1 or self.col >= self.grid.col_count:
            raise CommandError(f"cannot sort column {self.col - 1}")
        if self.original_state is None:
            self.original_state = self.grid.snapshot_state()
        self.grid.sort_column(self.col, self.order)
        logger.info("sorted %d col by string %s", self.col, self.order)

    def unexecute(self):
        if self.original_state is not None:
            self.grid.restore_state(self.original_state)
        logger.info("undo sorted %d col by string %s", self.col, self.order)


class SortColumnAscendingCommand(SortColumnCommand):
    order = SORT_ASC


class SortColumnDescendingCommand(SortColumnCommand):
    order = SORT_DESC


# ---------- column width ----------
class IncreaseColWidthCommand(Command):
    description = "increase column width"

    def __init__(self, grid, col: int):
        super().__init__(grid)
        self.col = col
        self.prev_widths = None

    def execute(self):
        if self.col < 0 or self.col >= self.grid.col_count:
            raise CommandError(f"no column {self.col - 1}")
        column = self.grid.get_col(self.col)
        self.prev_widths = [cell.width for cell in column]
        for cell in column:
            cell.width += 1
        logger.info("increased column %d width to %d", self.col, column[0].width)

    def unexecute(self):
        if self.prev_widths is None:
            return
        for cell, width in zip(self.grid.get_col(self.col), self.prev_widths):
            cell.width = width
        logger.info("undo increased column %d width", self.col)


class DecreaseColWidthCommand(Command):
    description = "decrease column width"

    def __init__(self, grid, col: int):
        super().__init__(grid)
        self.col = col
        self.prev_widths = None

    def execute(self):
        if self.col < 0 or self.col >= self.grid.col_count:
            raise CommandError(f"no column {self.col - 1}")
        column = self.grid.get_col(self.col)
        if all(cell.width <= 1 for cell in column):
            raise CommandError("column width is already 1")
        self.prev_widths = [cell.width for cell in column]
        for cell in column:
            cell.width = max(1, cell.width - 1)
        logger.info("decreased column %d width to %d", self.col, column[0].width)

    def unexecute(self):
        if self.prev_widths is None:
            return
        for cell, width in zip(self.grid.get_col(self.col), self.prev_widths):
            cell.width = width
        logger.info("undo decreased column %d width", self.col)


# ---------- cell text ----------
class ChangeCellValueCommand(Command):
    description = "change cell"

    def __init__(self, grid, row: int, col: int, text: str):
        super().__init__(grid)
        self.row = row
        self.col = col
        self.new_val = text
        self.prev_val = None

    def _cell(self):
        cell = self.grid.get_cell(self.row, self.col)
        if cell is None or self.row == 0 or self.col == 0:
            raise CommandError(f"no data cell at {self.row - 1}:{self.col - 1}")
        return cell

    def execute(self):
        cell = self._cell()
        self.prev_val = cell.raw_text
        cell.text = self.new_val
        self.grid.compute(self.row, self.col)
        logger.info(
            "%d:%d changed value from %s to %s",
            self.row,
            self.col,
            self.prev_val,
            self.new_val,
        )

    def unexecute(self):
        cell = self._cell()
        cell.text = self.prev_val
        self.grid.compute(self.row, self.col)
        logger.info(
            "%d:%d undo value from %s to %s",
            self.row,
            self.col,
            self.new_val,
            self.prev_val,
        )


class ReplaceTextCommand(Command):
    """Substring replace over the selection rectangle, undone from a full snapshot."""

    description = "replace"

    def __init__(self, grid, selection, search: str, replace: str):
        super().__init__(grid)
        self.selection = selection
        self.search = search
        self.replace = replace
        self.empty = selection.is_empty()
        self.rect = selection.rect()
        self.cell_snapshot = None

    def _coords(self):
        top, left, bottom, right = self.rect
        for row in range(max(1, top), min(bottom, self.grid.row_count - 1) + 1):
            for col in range(max(1, left), min(right, self.grid.col_count - 1) + 1):
                yield row, col

    def execute(self):
        if self.empty:
            raise CommandError("nothing selected")
        if not self.search:
            raise CommandError("search text is empty")
        targets = [
            (row, col)
            for row, col in self._coords()
            if self.search in self.grid.cells[row][col].raw_text
        ]
        if not targets:
            logger.error(
                "did not replace %s with %s in selection %s",
                self.search,
                self.replace,
                self.rect,
            )
            raise CommandError(
                f"did not replace {self.search} with {self.replace} in selection"
            )

        self.cell_snapshot = self.grid.snapshot_state()
        for row, col in targets:
            cell = self.grid.cells[row][col]
            cell.text = cell.raw_text.replace(self.search, self.replace)
            logger.info(
                "cell %d:%d replaced %s with %s", row, col, self.search, self.replace
            )

        self.grid.clear_selection()
        self.selection.clear()

    def unexecute(self):
        if self.cell_snapshot is None:
            return
        self.grid.restore_state(self.cell_snapshot)
        self.grid.paint_selection(self.selection)
        logger.info(
            "undo replace %s with %s in selection %s",
            self.search,
            self.replace,
            self.rect,
        )
