import curses
from typing import List

HELP_LINES = [
    "tblview keys",
    "",
    "  h j k l / arrows   move (counts allowed, e.g. 5j)",
    "  0 / $              first / last column",
    "  ,h ,l ,k ,j        jump to first col / last col / first row / last row",
    "  i / Enter          edit cell (Esc commits, Enter commits and moves down)",
    "  x                  clear cell",
    "  o / O              insert row below / above",
    "  ,ira ,irb          insert row above / below",
    "  ,ica ,icb          insert column after / before",
    "  ,dr ,dc            delete row / column",
    "  f / F              sort column ascending / descending",
    "  > / <              widen / narrow column",
    "  u / Ctrl+R         undo / redo",
    "  v V Ctrl+V         visual / visual-line / visual-block",
    "  d (visual)         delete selected rows or columns",
    "  :                  command line",
    "",
    "commands",
    "",
    "  :sortasc :sortdesc              sort cursor column",
    "  :replace 'foo' with 'bar'       replace text in selection",
    "  :w [path] :wq :q                write / write and quit / quit",
    "  :u :redo                        undo / redo",
    "",
    "Ctrl+S save, Ctrl+T save and quit, Ctrl+C / Ctrl+X quit",
]


class OverlayView:
    """Modal window over the table: error messages and the key help."""

    def __init__(self, layout):
        self.layout = layout
        self.visible = False
        self.lines: List[str] = []
        self.scroll = 0
        self.win = None
        self.mode: str | None = None

    def open_help(self, lines: List[str] | None = None):
        self._open(list(lines or HELP_LINES), mode="help")

    def open_error(self, message: str):
        lines = ["Error", ""] + str(message).splitlines() + ["", "[ OK ]"]
        self._open(lines, mode="error")

    def _open(self, lines: List[str], *, mode: str):
        self.mode = mode
        self.lines = lines
        self.scroll = 0

        if mode == "help":
            overlay_h = max(3, self.layout.H)
            overlay_w = self.layout.W
            overlay_y = overlay_x = 0
        else:
            # centered box sized to the message
            content_w = max(len(line) for line in lines) + 4
            overlay_w = max(20, min(content_w, self.layout.W))
            overlay_h = max(3, min(len(lines) + 2, self.layout.H - 2))
            overlay_y = max(0, (self.layout.H - overlay_h) // 2)
            overlay_x = max(0, (self.layout.W - overlay_w) // 2)

        self.win = curses.newwin(overlay_h, overlay_w, overlay_y, overlay_x)
        self.win.leaveok(True)
        self.visible = True

    def close(self):
        self.visible = False
        self.lines = []
        self.scroll = 0
        self.win = None
        self.mode = None

    def handle_key(self, ch):
        if not self.visible or self.win is None:
            return
        if ch == -1:
            return

        # close
        if ch in (27, ord("q"), 10, 13, curses.KEY_ENTER, ord("?"), ord(" ")):
            self.close()
            return

        h, _ = self.win.getmaxyx()
        content_rows = max(0, h if self.mode == "help" else h - 2)
        max_scroll = max(0, len(self.lines) - content_rows)

        if ch in (ord("j"), curses.KEY_DOWN):
            self.scroll = min(max_scroll, self.scroll + 1)
        elif ch in (ord("k"), curses.KEY_UP):
            self.scroll = max(0, self.scroll - 1)

    def draw(self):
        if not self.visible or not self.win:
            return

        win = self.win
        win.erase()
        h, w = win.getmaxyx()
        if self.mode == "help":
            top, left, max_visible = 0, 0, h
        else:
            win.box()
            top, left, max_visible = 1, 2, max(0, h - 2)

        for i, line in enumerate(self.lines[self.scroll : self.scroll + max_visible]):
            attr = 0
            if self.mode == "error" and i + self.scroll == 0:
                attr = curses.A_BOLD
            try:
                win.addnstr(top + i, left, line, max(1, w - left - 1), attr)
            except curses.error:
                pass

        win.refresh()
