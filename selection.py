MODE_NONE = "none"
MODE_CELL = "cell"
MODE_VISUAL = "visual"
MODE_VISUAL_LINE = "visual_line"
MODE_VISUAL_BLOCK = "visual_block"

MODES = (MODE_NONE, MODE_CELL, MODE_VISUAL, MODE_VISUAL_LINE, MODE_VISUAL_BLOCK)


class Selection:
    """Anchor point plus a normalized rectangle, shaped by the selection mode."""

    def __init__(self, grid, mode: str = MODE_NONE):
        self.grid = grid
        self.mode = mode if mode in MODES else MODE_NONE
        self.anchor_row = 0
        self.anchor_col = 0
        self.top_row = 0
        self.left_col = 0
        self.bottom_row = 0
        self.right_col = 0

    def __repr__(self):
        return (
            f"Selection({self.mode}, {self.top_row}:{self.left_col}"
            f"-{self.bottom_row}:{self.right_col})"
        )

    def set_mode(self, mode: str):
        if mode not in MODES:
            raise ValueError(f"unknown selection mode: {mode}")
        self.mode = mode

    def set_coordinates(self, row: int, col: int):
        """Start a new selection anchored at (row, col)."""
        if self.mode == MODE_NONE:
            self.mode = MODE_CELL
        self.anchor_row = row
        self.anchor_col = col
        self.update(row, col)

    def update(self, row: int, col: int):
        """Recompute the rectangle from the anchor and the live cursor position."""
        top, bottom = sorted((self.anchor_row, row))
        left, right = sorted((self.anchor_col, col))

        if self.mode == MODE_CELL:
            top = bottom = row
            left = right = col
        elif self.mode == MODE_VISUAL_LINE:
            left, right = 1, max(1, self.grid.col_count - 1)
        elif self.mode == MODE_VISUAL_BLOCK:
            top, bottom = 1, max(1, self.grid.row_count - 1)

        self.top_row = top
        self.left_col = left
        self.bottom_row = bottom
        self.right_col = right

    def clear(self):
        self.mode = MODE_NONE
        self.anchor_row = 0
        self.anchor_col = 0
        self.top_row = 0
        self.left_col = 0
        self.bottom_row = 0
        self.right_col = 0

    def is_empty(self) -> bool:
        return self.mode == MODE_NONE

    def rect(self):
        return (self.top_row, self.left_col, self.bottom_row, self.right_col)

    def contains(self, row: int, col: int) -> bool:
        if self.is_empty():
            return False
        return self.top_row <= row <= self.bottom_row and self.left_col <= col <= self.right_col

    def is_row_selected(self) -> bool:
        """True when the rectangle spans every data column."""
        if self.is_empty():
            return False
        return self.left_col == 1 and self.right_col == self.grid.col_count - 1

    def is_column_selected(self) -> bool:
        """True when the rectangle spans every data row."""
        if self.is_empty():
            return False
        return self.top_row == 1 and self.bottom_row == self.grid.row_count - 1
