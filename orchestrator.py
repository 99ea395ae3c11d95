# ~/Apps/tblview/orchestrator.py
import curses
import logging
import os
import time

from command_line import parse_command_line
from config_paths import ensure_config_dirs
from editor import Editor
from file_type_handler import FileTypeHandler
from grid_pane import GridPane
from history import History
from overlay import OverlayView
from prompt import Prompt
from screen_layout import ScreenLayout
from selection import Selection
import status_bar

logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(self, stdscr, grid, file_path=None, file_handler=None, config=None):
        self.stdscr = stdscr
        curses.curs_set(0)
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        ensure_config_dirs()
        config = config or {}

        self.grid = grid
        self.file_path = file_path
        self.file_handler = file_handler

        self.layout = ScreenLayout(stdscr)
        self.pane = GridPane(grid)

        # ---- overlay ----
        self.overlay = OverlayView(self.layout)

        # ---- command line / save-as prompt ----
        self.prompt = Prompt()

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0
        self.exit_requested = False

        # ---- undo/redo ----
        self.history = History(
            report_error=self._show_error,
            max_depth=config.get("UNDO_MAX_DEPTH", 100),
        )

        # ---- editor ----
        self.selection = Selection(grid)
        self.editor = Editor(grid, self.selection, self.history, self._set_status)
        self.grid.set_current(self.grid.current_row, self.grid.current_col)
        self.grid.recompute_current()

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _show_error(self, message):
        self.overlay.open_error(message)

    def _mode(self):
        if self.prompt.active:
            return "command"
        return self.editor.mode

    # ---------------- UI ----------------

    def _draw_input(self):
        win = self.layout.input_win
        win.erase()
        _, w = win.getmaxyx()
        if self.editor.mode == "cell_insert":
            text = self.editor.cell_buffer
            cursor = self.editor.cell_cursor
        else:
            text = self.grid.get_current_cell().raw_text
            cursor = None

        label = f"{self.grid.current_row - 1}:{self.grid.current_col - 1} > "
        text_w = max(1, w - len(label) - 1)
        start = 0
        if cursor is not None and cursor > text_w:
            start = cursor - text_w
        try:
            win.addnstr(0, 0, label, len(label), curses.A_DIM)
            win.addnstr(0, len(label), text[start : start + text_w], text_w)
            if cursor is not None:
                win.move(0, len(label) + cursor - start)
        except curses.error:
            pass
        win.refresh()

    def _draw_status(self):
        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        context = {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "mode": self._mode(),
            "file_path": self.file_path,
            "shape": (self.grid.row_count - 1, self.grid.col_count - 1),
            "current_row": self.grid.current_row,
            "current_col": self.grid.current_col,
            "sorted_col": self.grid.sorted_col,
            "sort_order": self.grid.sort_order,
            "pending_count": self.editor.pending_count,
        }
        try:
            sw.addnstr(0, 0, status_bar.render_status(context, w), max(1, w - 1), curses.A_REVERSE)
        except curses.error:
            pass
        sw.refresh()

    def redraw(self):
        inserting = self.editor.mode == "cell_insert"
        try:
            if self.overlay.visible:
                curses.curs_set(0)
            else:
                curses.curs_set(1 if (self.prompt.active or inserting) else 0)
        except curses.error:
            pass

        if not self.overlay.visible:
            self.pane.insert_text = self.editor.cell_buffer if inserting else None
            self.pane.draw(self.layout.table_win)
            self._draw_status()

            cw = self.layout.cmd_win
            cw.erase()
            if self.prompt.active:
                self._draw_input()
                self.prompt.draw(cw)
            else:
                cw.refresh()
                self._draw_input()

        if self.overlay.visible:
            self.overlay.draw()

    # ---------------- command exec ----------------

    def _execute_command_line(self, text):
        action = parse_command_line(text, self.grid, self.selection)

        if action.kind == "error":
            self._set_status(action.message, 3)
        elif action.kind == "command":
            if self.history.do(action.command):
                self._set_status(f"{action.command.description.capitalize()} done", 3)
            # a consumed selection drops the editor back to normal mode
            self.editor.sync()
        elif action.kind == "undo":
            if self.history.can_undo:
                self.history.undo()
            else:
                self._set_status("Nothing to undo", 2)
            self.editor.sync()
        elif action.kind == "redo":
            if self.history.can_redo:
                self.history.redo()
            else:
                self._set_status("Nothing to redo", 2)
            self.editor.sync()
        elif action.kind == "quit":
            self.exit_requested = True
        elif action.kind in ("write", "write_quit"):
            self._save(path=action.path, save_and_exit=(action.kind == "write_quit"))

    # ---------------- saving ----------------

    def _save(self, path=None, save_and_exit=False):
        if path:
            if not self._set_target(path):
                return False
        elif self.file_handler is None:
            purpose = "save_quit" if save_and_exit else "save"
            self.prompt.start("Save as: ", purpose=purpose, initial=self.file_path or "")
            return False

        try:
            self.file_handler.save(self.grid)
        except (OSError, ValueError) as e:
            logger.error("save to %s failed: %s", self.file_path, e)
            msg = f"Save failed: {e}"[: self.layout.W - 2]
            self._set_status(msg, 4)
            return False

        self._set_status(f"Saved {self.file_path}", 3)
        if save_and_exit:
            self.exit_requested = True
        return True

    def _set_target(self, path):
        _, ext = os.path.splitext(path)
        if ext.lower() not in FileTypeHandler.SUPPORTED:
            self._set_status("Save failed: use .csv, .tsv or .json", 4)
            return False
        self.file_handler = FileTypeHandler(path)
        self.file_path = path
        return True

    def _submit_prompt(self):
        text = self.prompt.buffer
        purpose = self.prompt.purpose
        self.prompt.reset()
        if purpose == "command":
            self._execute_command_line(text)
            return
        path = text.strip()
        if not path:
            self._set_status("Path required", 3)
            return
        self._save(path=path, save_and_exit=(purpose == "save_quit"))

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while True:
            ch = self.stdscr.getch()

            if ch in (3, 24):  # Ctrl+C / Ctrl+X
                break

            if ch == curses.KEY_RESIZE:
                self.layout = ScreenLayout(self.stdscr)
                self.overlay.layout = self.layout
                self.stdscr.clear()
                self.stdscr.refresh()
                self.redraw()
                continue

            if self.overlay.visible:
                self.overlay.handle_key(ch)
                self.redraw()
                continue

            if ch == -1:
                self.redraw()
                continue

            if self.prompt.active:
                result = self.prompt.handle_key(ch)
                if result == "submit":
                    self._submit_prompt()
                elif result == "cancel":
                    if self.prompt.purpose != "command":
                        self._set_status("Save canceled", 3)
                    self.prompt.reset()
            elif self.editor.mode == "cell_insert":
                self.editor.handle_key(ch)
            elif ch in (19, 20):  # Ctrl+S / Ctrl+T
                self._save(save_and_exit=(ch == 20))
            elif ch == ord(":") and not self.editor.leader_state:
                self.prompt.start(":", purpose="command")
            elif ch == ord("?") and not self.editor.leader_state:
                self.overlay.open_help()
            else:
                self.editor.handle_key(ch)

            self.redraw()

            if self.exit_requested:
                break
