# ~/Apps/tblview/grid_pane.py
import curses

from cell import A_REVERSE, ALIGN_CENTER


class GridPane:
    PAIR_CELL_TEXT = 1
    PAIR_RANGE = 2
    PAIR_ERROR = 3
    PAIR_FORMULA = 4

    def __init__(self, grid):
        self.grid = grid
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(self.PAIR_RANGE, curses.COLOR_BLACK, curses.COLOR_GREEN)
            curses.init_pair(self.PAIR_ERROR, curses.COLOR_RED, -1)
            curses.init_pair(self.PAIR_FORMULA, curses.COLOR_GREEN, -1)
        except curses.error:
            pass

        # first data row / col shown after the frozen headers (1-based, like the grid)
        self.row_offset = 1
        self.col_offset = 1

        # edit buffer shown in place of the cursor cell while inserting
        self.insert_text = None

    @staticmethod
    def _pair(n):
        try:
            return curses.color_pair(n)
        except curses.error:
            return 0

    @staticmethod
    def _fit(text: str, width: int, align: str) -> str:
        text = text[:width]
        if align == ALIGN_CENTER:
            return text.center(width)
        return text.ljust(width)

    def _visible_col_count(self, avail_w: int, offset: int) -> int:
        header = self.grid.get_row(0)
        used = 0
        count = 0
        for cell in header[offset:]:
            if used + cell.width + 1 > avail_w and count > 0:
                break
            used += cell.width + 1
            count += 1
        return max(1, count)

    def adjust_viewport(self, win=None):
        """Slide the row/col offsets so the cursor cell is on screen."""
        if win is not None:
            h, w = win.getmaxyx()
        else:
            h, w = 24, 120  # reasonable fallback

        grid = self.grid
        if grid.row_count < 2 or grid.col_count < 2:
            self.row_offset = self.col_offset = 1
            return

        visible_rows = max(1, h - 1)
        avail_w = max(1, w - (grid.get_cell(0, 0).width + 1))

        self.row_offset = max(1, min(self.row_offset, grid.row_count - 1))
        if grid.current_row < self.row_offset:
            self.row_offset = grid.current_row
        elif grid.current_row >= self.row_offset + visible_rows:
            self.row_offset = grid.current_row - visible_rows + 1

        self.col_offset = max(1, min(self.col_offset, grid.col_count - 1))
        if grid.current_col < self.col_offset:
            self.col_offset = grid.current_col
        else:
            while (
                self.col_offset < grid.current_col
                and grid.current_col
                >= self.col_offset + self._visible_col_count(avail_w, self.col_offset)
            ):
                self.col_offset += 1

    def cell_attr(self, cell, row: int, col: int) -> int:
        """Attribute for a data cell: cursor beats selection beats range highlight."""
        attr = cell.attributes
        if cell.has_error:
            attr |= self._pair(self.PAIR_ERROR)
        elif cell.is_formula():
            attr |= self._pair(self.PAIR_FORMULA)
        else:
            attr |= self._pair(self.PAIR_CELL_TEXT)

        if row == self.grid.current_row and col == self.grid.current_col:
            return attr | A_REVERSE
        if cell.selected:
            return attr | curses.A_STANDOUT
        if cell.in_range:
            return cell.attributes | self._pair(self.PAIR_RANGE)
        return attr

    def _visible_rows(self, h: int):
        last = min(self.grid.row_count, self.row_offset + max(1, h - 1))
        return [0] + list(range(self.row_offset, last))

    def _visible_cols(self, w: int):
        cols = [0]
        x = self.grid.get_cell(0, 0).width + 1
        for col in range(self.col_offset, self.grid.col_count):
            if x >= w:
                break
            cols.append(col)
            x += self.grid.get_cell(0, col).width + 1
        return cols

    # ---------- rendering ----------
    def draw(self, win):
        win.erase()
        try:
            win.bkgd(" ", self._pair(self.PAIR_CELL_TEXT))
        except curses.error:
            pass
        h, w = win.getmaxyx()
        self.adjust_viewport(win)

        grid = self.grid
        for y, row in enumerate(self._visible_rows(h)):
            if y >= h:
                break
            x = 0
            for col in self._visible_cols(w):
                # recomputed on every redraw
                grid.compute(row, col)
                cell = grid.get_cell(row, col)
                if cell is None:
                    continue
                eff_w = min(cell.width, max(0, w - x - 1))
                if eff_w <= 0:
                    break

                if row == 0 or col == 0:
                    attr = cell.attributes
                    text = cell.display_text
                else:
                    attr = self.cell_attr(cell, row, col)
                    text = cell.display_text
                    if (
                        self.insert_text is not None
                        and row == grid.current_row
                        and col == grid.current_col
                    ):
                        text = self.insert_text[-eff_w:]

                try:
                    win.addnstr(y, x, self._fit(text, eff_w, cell.align), eff_w, attr)
                except curses.error:
                    pass
                x += eff_w + 1

        win.refresh()
