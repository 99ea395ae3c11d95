import curses


class ScreenLayout:
    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        # layout: cell input (1 line), table (main), status bar (1 line), command bar (1 line)
        self.input_h = 1
        self.status_h = 1
        self.cmd_h = 1

        self.table_h = max(1, self.H - self.input_h - self.status_h - self.cmd_h)

        # shows the raw text of the cursor cell, or the edit buffer while inserting
        self.input_win = curses.newwin(self.input_h, self.W, 0, 0)

        self.table_win = curses.newwin(self.table_h, self.W, self.input_h, 0)
        # grid pane must never own cursor
        self.table_win.leaveok(True)

        status_y = self.input_h + self.table_h
        self.status_win = curses.newwin(self.status_h, self.W, status_y, 0)
        # do not let status bar steal cursor
        self.status_win.leaveok(True)

        self.cmd_win = curses.newwin(self.cmd_h, self.W, status_y + self.status_h, 0)
