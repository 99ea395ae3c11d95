from cell import DEFAULT_WIDTH
from grid import Grid


class DefaultGridInitializer:
    ROWS = 3
    COLS = 3

    def create(self, formulas=None, cell_width: int = DEFAULT_WIDTH) -> Grid:
        return Grid.blank(self.ROWS, self.COLS, formulas=formulas, cell_width=cell_width)
