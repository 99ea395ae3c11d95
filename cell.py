import curses
import logging

from formulas import FormulaError

DEFAULT_WIDTH = 10
ERROR_PREFIX = "#ERR:"

ALIGN_LEFT = "left"
ALIGN_CENTER = "center"

A_NONE = 0
A_BOLD = curses.A_BOLD
A_DIM = curses.A_DIM
A_UNDERLINE = curses.A_UNDERLINE
A_REVERSE = curses.A_REVERSE

logger = logging.getLogger(__name__)


class Cell:
    """Single grid cell: raw text plus everything derived from it."""

    __slots__ = (
        "raw_text",
        "display_text",
        "has_error",
        "error_message",
        "width",
        "attributes",
        "align",
        "in_range",
        "selected",
    )

    def __init__(self, text: str = "", width: int = DEFAULT_WIDTH):
        self.raw_text = text
        self.display_text = text
        self.has_error = False
        self.error_message = ""
        self.width = max(1, width)
        self.attributes = A_NONE
        self.align = ALIGN_LEFT
        self.in_range = False
        self.selected = False

    def __repr__(self):
        return f"Cell({self.raw_text!r}, width={self.width})"

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    __hash__ = None

    @property
    def text(self) -> str:
        return self.raw_text

    @text.setter
    def text(self, value: str):
        self.raw_text = "" if value is None else str(value)
        if not self.is_formula():
            self.display_text = self.raw_text
            self.has_error = False
            self.error_message = ""

    def is_formula(self) -> bool:
        return self.raw_text.startswith("=")

    def copy(self) -> "Cell":
        dup = Cell.__new__(Cell)
        for name in self.__slots__:
            setattr(dup, name, getattr(self, name))
        return dup

    def set_error(self, message: str):
        self.has_error = True
        self.error_message = message
        self.display_text = ERROR_PREFIX + message

    def compute(self, grid, formulas):
        """Refresh display_text; return the FormulaRange read by the formula, if any."""
        if not self.is_formula():
            self.display_text = self.raw_text
            self.has_error = False
            self.error_message = ""
            return None

        # spaces are insignificant inside formulas
        text = self.raw_text[1:].replace(" ", "")
        for formula in formulas or []:
            if not formula.match(text):
                continue
            try:
                display, rng = formula.calculate(grid, text)
            except FormulaError as exc:
                logger.debug("formula %r failed: %s", self.raw_text, exc)
                self.set_error(str(exc))
                return None
            self.display_text = display
            self.has_error = False
            self.error_message = ""
            return rng

        self.set_error("no formula")
        return None
