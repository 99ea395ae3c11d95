import csv
import json
import logging
import os
import sys

import pandas as pd

from cell import DEFAULT_WIDTH, Cell
from default_grid_initializer import DefaultGridInitializer
from grid import SORT_GLYPHS, SORT_NONE, Grid

logger = logging.getLogger(__name__)


class FileTypeHandler:
    SEPARATORS = {".csv": ",", ".tsv": "\t"}
    SUPPORTED = {".csv", ".tsv", ".json"}

    def __init__(self, path: str):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()

        if self.ext not in self.SUPPORTED:
            print("Unsupported file type (use .csv, .tsv, or .json)")
            sys.exit(1)

    def load_or_create(self, formulas=None, cell_width: int = DEFAULT_WIDTH) -> Grid:
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return self._default_grid(formulas, cell_width)

        if self.ext == ".json":
            return self._load_json(formulas, cell_width)

        sep = self.SEPARATORS[self.ext]
        width = self._widest_row(sep)
        if width == 0:
            return self._default_grid(formulas, cell_width)
        try:
            # rows may be ragged in either direction; short ones come back as NA
            df = pd.read_csv(
                self.path,
                sep=sep,
                header=None,
                names=range(width),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
            )
        except pd.errors.EmptyDataError:
            return self._default_grid(formulas, cell_width)
        if df.empty or df.shape[1] == 0:
            return self._default_grid(formulas, cell_width)

        grid = Grid(formulas=formulas, cell_width=cell_width)
        grid.load_frame(df)
        logger.info("read %s", self.path)
        return grid

    def save(self, grid: Grid) -> None:
        if self.ext == ".json":
            self._write_json(grid)
        else:
            grid.to_frame().to_csv(
                self.path, sep=self.SEPARATORS[self.ext], header=False, index=False
            )
        logger.info("wrote to file %s", self.path)

    def _widest_row(self, sep: str) -> int:
        with open(self.path, "r", encoding="utf-8", newline="") as f:
            return max((len(row) for row in csv.reader(f, delimiter=sep)), default=0)

    def _default_grid(self, formulas, cell_width) -> Grid:
        return DefaultGridInitializer().create(formulas=formulas, cell_width=cell_width)

    def _load_json(self, formulas, cell_width) -> Grid:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        grid = Grid(formulas=formulas, cell_width=cell_width)
        for row in data.get("cells") or []:
            cells = []
            for item in row:
                cell = Cell(str(item.get("text", "")), width=cell_width)
                width = item.get("width")
                if isinstance(width, int) and width >= 1:
                    cell.width = width
                cells.append(cell)
            grid.add_data_row(cells)
        if grid.row_count < 2 or grid.col_count < 2:
            return self._default_grid(formulas, cell_width)

        sorted_col = data.get("sorted_col", -1)
        sort_order = data.get("sort_order", SORT_NONE)
        if sort_order in SORT_GLYPHS and isinstance(sorted_col, int) and 1 <= sorted_col < grid.col_count:
            grid.sorted_col = sorted_col
            grid.sort_order = sort_order
        grid.set_current(int(data.get("current_row", 1)), int(data.get("current_col", 1)))
        logger.info("loaded file %s", self.path)
        return grid

    def _write_json(self, grid: Grid) -> None:
        payload = {
            "cells": [
                [{"text": cell.raw_text, "width": cell.width} for cell in row]
                for row in grid.get_cells()
            ],
            "current_row": grid.current_row,
            "current_col": grid.current_col,
            "sorted_col": grid.sorted_col,
            "sort_order": grid.sort_order,
        }
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)
