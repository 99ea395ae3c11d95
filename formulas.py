import re
from dataclasses import dataclass

import numpy as np

FLOAT_FORMAT = "{:.2f}"

# plain ASCII decimal or scientific notation, inf/infinity/nan; no padding or '_'
NUMBER_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.ASCII | re.IGNORECASE,
)


def parse_number(text: str) -> float:
    """float(text) restricted to NUMBER_RE; raises ValueError otherwise."""
    if NUMBER_RE.fullmatch(text) is None:
        raise ValueError(f"not a number: {text!r}")
    return float(text)


class FormulaError(Exception):
    """Raised by Formula.calculate; the message is shown in the cell."""


@dataclass(frozen=True)
class FormulaRange:
    """Rectangle of data cells a formula reads, in 0-based data coordinates."""

    start_row: int
    start_col: int
    end_row: int
    end_col: int

    def grid_cells(self):
        """Yield (row, col) grid coordinates covered by the range (header offset applied)."""
        for row in range(self.start_row + 1, self.end_row + 2):
            for col in range(self.start_col + 1, self.end_col + 2):
                yield row, col


class Formula:
    """Base class for cell formulas. `text` never includes the leading '='."""

    pattern: re.Pattern | None = None

    def match(self, text: str) -> bool:
        return self.pattern is not None and self.pattern.fullmatch(text) is not None

    def calculate(self, grid, text: str):
        raise NotImplementedError


class SumFormula(Formula):
    pattern = re.compile(r"SUM\((\d+),(\d+);(\d+),(\d+)\)", re.ASCII)

    def calculate(self, grid, text: str):
        m = self.pattern.fullmatch(text)
        if m is None:
            raise FormulaError("string does not match formula")

        start_row, start_col, end_row, end_col = (int(g) for g in m.groups())
        total = self._sum(grid, start_row + 1, start_col + 1, end_row + 1, end_col + 1)
        rng = FormulaRange(start_row, start_col, end_row, end_col)
        return FLOAT_FORMAT.format(total), rng

    @staticmethod
    def _sum(grid, start_row, start_col, end_row, end_col) -> float:
        if start_col > end_col or start_row > end_row:
            raise FormulaError(
                "start coordinates must be less than or equal to end coordinates"
            )
        if (
            start_row < 1
            or start_col < 1
            or end_row >= grid.row_count
            or end_col >= grid.col_count
        ):
            raise FormulaError("coordinates out of bounds")

        values = []
        for row in range(start_row, end_row + 1):
            for col in range(start_col, end_col + 1):
                text = grid.get_cell(row, col).raw_text
                try:
                    values.append(parse_number(text))
                except ValueError:
                    raise FormulaError(f"{row - 1},{col - 1} is not a number") from None
        return float(np.sum(np.asarray(values, dtype=np.float64)))


def default_formulas():
    return [SumFormula()]
