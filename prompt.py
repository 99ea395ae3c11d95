import curses


class Prompt:
    """Single-line input on the command bar, used for ':' commands and 'Save as:'."""

    def __init__(self):
        self.active = False
        self.label = ":"
        self.purpose = None  # 'command' | 'save' | 'save_quit'
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def start(self, label: str = ":", purpose: str = "command", initial: str = ""):
        self.active = True
        self.label = label
        self.purpose = purpose
        self.buffer = initial or ""
        self.cursor = len(self.buffer)
        self.hscroll = 0

    def reset(self):
        self.active = False
        self.purpose = None
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def handle_key(self, ch):
        """Edit the buffer; returns 'submit', 'cancel' or None."""
        if not self.active:
            return None

        if ch in (10, 13, curses.KEY_ENTER):
            return "submit"

        if ch == 27:  # Esc
            return "cancel"

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
            elif not self.buffer:
                # backspace on an empty line leaves the prompt, like vim
                return "cancel"
            return None

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return None

        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return None

        if ch in (curses.KEY_HOME, 1):  # Home / Ctrl+A
            self.cursor = 0
            return None

        if ch in (curses.KEY_END, 5):  # End / Ctrl+E
            self.cursor = len(self.buffer)
            return None

        if ch == 21:  # Ctrl+U
            self.buffer = self.buffer[self.cursor :]
            self.cursor = 0
            return None

        if 32 <= ch <= 126:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1
        return None

    def draw(self, win):
        prompt = self.label
        h, w = win.getmaxyx()
        text_w = max(1, w - len(prompt) - 1)

        # adjust hscroll
        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        start = self.hscroll
        end = start + text_w
        visible = self.buffer[start:end]

        try:
            win.addnstr(0, 0, prompt, len(prompt))
            win.addnstr(0, len(prompt), visible, text_w)
            win.move(0, len(prompt) + (self.cursor - self.hscroll))
        except curses.error:
            pass
        win.refresh()
