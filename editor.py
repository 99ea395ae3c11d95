# ~/Apps/tblview/editor.py
import curses

from commands import (
    ChangeCellValueCommand,
    DecreaseColWidthCommand,
    DeleteColumnCommand,
    DeleteColumnsCommand,
    DeleteRowCommand,
    DeleteRowsCommand,
    IncreaseColWidthCommand,
    InsertColLeftCommand,
    InsertColRightCommand,
    InsertRowAboveCommand,
    InsertRowBelowCommand,
    SortColumnAscendingCommand,
    SortColumnDescendingCommand,
)
from selection import MODE_VISUAL, MODE_VISUAL_BLOCK, MODE_VISUAL_LINE

KEY_ESC = 27
KEY_CTRL_R = 18
KEY_CTRL_V = 22

# each counted repeat pushes its own undo entry
MAX_COUNT = 999
KEYS_ENTER = (10, 13, curses.KEY_ENTER)
KEYS_BACKSPACE = (curses.KEY_BACKSPACE, 127, 8)

VISUAL_KEYS = {
    ord("v"): MODE_VISUAL,
    ord("V"): MODE_VISUAL_LINE,
    KEY_CTRL_V: MODE_VISUAL_BLOCK,
}


class Editor:
    """Translates key presses into cursor moves and History commands."""

    def __init__(self, grid, selection, history, set_status_cb):
        self.grid = grid
        self.selection = selection
        self.history = history
        self._set_status = set_status_cb
        self._leader_ttl = 1.5

        self.mode = "normal"  # normal | visual | visual_line | visual_block | cell_insert
        self.cell_buffer = ""
        self.cell_cursor = 0
        self.leader_state = None  # None | 'leader' | 'i' | 'ir' | 'ic' | 'd'

        self.pending_count: int | None = None

    # ---------- helpers ----------
    def _leader_seq(self, state: str | None) -> str:
        if not state:
            return ""
        mapping = {
            "leader": ",",
            "i": ",i",
            "ir": ",ir",
            "ic": ",ic",
            "d": ",d",
        }
        return mapping.get(state, ",")

    def _show_leader_status(self, seq: str):
        if not seq:
            return
        self._set_status(f"Leader: {seq}", self._leader_ttl)

    def is_visual(self) -> bool:
        return self.mode in (MODE_VISUAL, MODE_VISUAL_LINE, MODE_VISUAL_BLOCK)

    def _take_count(self) -> int:
        """Pending count prefix (1 when none was typed); clears it."""
        count = self.pending_count or 1
        self.pending_count = None
        return count

    def _do(self, cmd) -> bool:
        done = self.history.do(cmd)
        self.sync()
        return done

    def sync(self):
        """Bring headers, selection paint and the formula highlight up to date."""
        self.grid.clamp_cursor()
        self.grid.refresh_coordinates()
        if self.is_visual() and self.selection.is_empty():
            self.mode = "normal"
        if self.is_visual():
            self.selection.update(self.grid.current_row, self.grid.current_col)
        self.grid.paint_selection(self.selection)
        self.grid.recompute_current()

    def move_to(self, row: int, col: int):
        self.grid.set_current(row, col)
        self.sync()

    def _move_by(self, d_row: int, d_col: int):
        self.move_to(self.grid.current_row + d_row, self.grid.current_col + d_col)

    # ---------- visual ----------
    def enter_visual(self, mode: str):
        if self.mode == mode:
            self.exit_visual()
            return
        self.selection.set_mode(mode)
        if not self.is_visual():
            self.selection.set_coordinates(self.grid.current_row, self.grid.current_col)
        self.mode = mode
        self.sync()

    def exit_visual(self):
        self.mode = "normal"
        self.selection.clear()
        self.grid.clear_selection()
        self.sync()

    def _delete_selection(self):
        rows = self.selection.is_row_selected()
        cols = self.selection.is_column_selected()
        if cols and (self.mode == MODE_VISUAL_BLOCK or not rows):
            cmd = DeleteColumnsCommand(self.grid, self.selection)
        elif rows:
            cmd = DeleteRowsCommand(self.grid, self.selection)
        else:
            self._set_status("Select whole rows or columns to delete", 3)
            return
        if self._do(cmd):
            self.mode = "normal"
            self._set_status(cmd.description.capitalize(), 2)

    # ---------- cell editing ----------
    def start_cell_edit(self):
        self.cell_buffer = self.grid.get_current_cell().raw_text
        self.cell_cursor = len(self.cell_buffer)
        self.mode = "cell_insert"
        self.pending_count = None

    def _commit_cell(self):
        r, c = self.grid.current_row, self.grid.current_col
        if self.cell_buffer != self.grid.get_current_cell().raw_text:
            self._do(ChangeCellValueCommand(self.grid, r, c, self.cell_buffer))
        self.mode = "normal"
        self.cell_buffer = ""
        self.cell_cursor = 0

    def _handle_cell_insert(self, ch):
        if ch == KEY_ESC:
            self._commit_cell()
            self.sync()
            return

        if ch in KEYS_ENTER:
            self._commit_cell()
            # push the cursor down, if possible
            self._move_by(1, 0)
            return

        if ch in KEYS_BACKSPACE:
            if self.cell_cursor > 0:
                self.cell_buffer = (
                    self.cell_buffer[: self.cell_cursor - 1]
                    + self.cell_buffer[self.cell_cursor :]
                )
                self.cell_cursor -= 1
            return

        if ch == curses.KEY_LEFT:
            self.cell_cursor = max(0, self.cell_cursor - 1)
            return
        if ch == curses.KEY_RIGHT:
            self.cell_cursor = min(len(self.cell_buffer), self.cell_cursor + 1)
            return
        if ch == curses.KEY_HOME:
            self.cell_cursor = 0
            return
        if ch == curses.KEY_END:
            self.cell_cursor = len(self.cell_buffer)
            return

        # curses function keys (KEY_MIN and up) are not text
        if 32 <= ch < curses.KEY_MIN and ch != 127:
            ch_str = chr(ch)
            self.cell_buffer = (
                self.cell_buffer[: self.cell_cursor]
                + ch_str
                + self.cell_buffer[self.cell_cursor :]
            )
            self.cell_cursor += 1

    # ---------- leader ----------
    def _handle_leader(self, ch):
        state = self.leader_state
        self.leader_state = None
        r, c = self.grid.current_row, self.grid.current_col

        if state == "leader":
            if ch == ord("j"):
                self.move_to(self.grid.row_count - 1, c)
            elif ch == ord("k"):
                self.move_to(1, c)
            elif ch == ord("h"):
                self.move_to(r, 1)
            elif ch == ord("l"):
                self.move_to(r, self.grid.col_count - 1)
            elif ch in (ord("i"), ord("d")):
                self.leader_state = chr(ch)
                self._show_leader_status(self._leader_seq(self.leader_state))
                return
            self.pending_count = None
            return

        if state == "i":
            if ch in (ord("r"), ord("c")):
                self.leader_state = "i" + chr(ch)
                self._show_leader_status(self._leader_seq(self.leader_state))
                return
            self.pending_count = None
            return

        if state == "ir":
            count = self._take_count()
            if ch == ord("a"):
                self._show_leader_status(",ira")
                for _ in range(count):
                    self._do(InsertRowAboveCommand(self.grid, self.grid.current_row, c))
            elif ch == ord("b"):
                self._show_leader_status(",irb")
                for _ in range(count):
                    self._do(InsertRowBelowCommand(self.grid, r))
            return

        if state == "ic":
            count = self._take_count()
            if ch == ord("a"):
                self._show_leader_status(",ica")
                for _ in range(count):
                    self._do(InsertColRightCommand(self.grid, c))
            elif ch == ord("b"):
                self._show_leader_status(",icb")
                for _ in range(count):
                    self._do(InsertColLeftCommand(self.grid, r, self.grid.current_col))
            return

        if state == "d":
            if ch == ord("r"):
                self._show_leader_status(",dr")
                self._do(DeleteRowCommand(self.grid, r, c))
            elif ch == ord("c"):
                self._show_leader_status(",dc")
                self._do(DeleteColumnCommand(self.grid, r, c))
            self.pending_count = None
            return

    # ---------- public API ----------
    def handle_key(self, ch):
        if self.mode == "cell_insert":
            self._handle_cell_insert(ch)
            return

        if self.leader_state:
            self._handle_leader(ch)
            return

        if ord("0") <= ch <= ord("9"):
            digit = ch - ord("0")
            # a leading 0 is a motion to the first column
            if digit == 0 and self.pending_count is None:
                self.move_to(self.grid.current_row, 1)
                return
            self.pending_count = min(MAX_COUNT, (self.pending_count or 0) * 10 + digit)
            return

        if ch in VISUAL_KEYS:
            self.pending_count = None
            self.enter_visual(VISUAL_KEYS[ch])
            return

        if ch == KEY_ESC:
            self.pending_count = None
            if self.is_visual():
                self.exit_visual()
            return

        if ch == ord(","):
            self.leader_state = "leader"
            self._show_leader_status(self._leader_seq("leader"))
            return

        count = self._take_count()

        if ch in (ord("h"), curses.KEY_LEFT):
            self._move_by(0, -count)
            return
        if ch in (ord("l"), curses.KEY_RIGHT):
            self._move_by(0, count)
            return
        if ch in (ord("j"), curses.KEY_DOWN):
            self._move_by(count, 0)
            return
        if ch in (ord("k"), curses.KEY_UP):
            self._move_by(-count, 0)
            return
        if ch == ord("$"):
            self.move_to(self.grid.current_row, self.grid.col_count - 1)
            return

        if self.is_visual():
            if ch == ord("d"):
                self._delete_selection()
            return

        r, c = self.grid.current_row, self.grid.current_col

        if ch == ord("i") or ch in KEYS_ENTER:
            self.start_cell_edit()
            return

        if ch == ord("x"):
            if self.grid.get_current_cell().raw_text:
                self._do(ChangeCellValueCommand(self.grid, r, c, ""))
                self._set_status("Cell cleared", 2)
            return

        if ch == ord("o"):
            for _ in range(count):
                self._do(InsertRowBelowCommand(self.grid, r))
            return
        if ch == ord("O"):
            for _ in range(count):
                self._do(InsertRowAboveCommand(self.grid, self.grid.current_row, c))
            return

        if ch == ord("f"):
            self._do(SortColumnAscendingCommand(self.grid, c))
            return
        if ch == ord("F"):
            self._do(SortColumnDescendingCommand(self.grid, c))
            return

        if ch == ord(">"):
            for _ in range(count):
                self._do(IncreaseColWidthCommand(self.grid, c))
            return
        if ch == ord("<"):
            for _ in range(count):
                if not self._do(DecreaseColWidthCommand(self.grid, c)):
                    break
            return

        if ch == ord("u"):
            if not self.history.can_undo:
                self._set_status("Nothing to undo", 2)
            for _ in range(count):
                if not self.history.can_undo:
                    break
                self.history.undo()
            self.sync()
            return
        if ch == KEY_CTRL_R:
            if not self.history.can_redo:
                self._set_status("Nothing to redo", 2)
            for _ in range(count):
                if not self.history.can_redo:
                    break
                self.history.redo()
            self.sync()
            return
