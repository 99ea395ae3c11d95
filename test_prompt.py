import curses

from prompt import Prompt


def _feed(prompt: Prompt, keys):
    result = None
    for k in keys:
        result = prompt.handle_key(k if isinstance(k, int) else ord(k))
    return result


def test_typing_and_submit():
    prompt = Prompt()
    prompt.start(":")
    assert _feed(prompt, list("sortasc") + [10]) == "submit"
    assert prompt.buffer == "sortasc"


def test_escape_cancels():
    prompt = Prompt()
    prompt.start(":")
    assert _feed(prompt, ["w", 27]) == "cancel"


def test_backspace_on_empty_line_cancels():
    prompt = Prompt()
    prompt.start(":")
    assert _feed(prompt, [127]) == "cancel"


def test_cursor_editing():
    prompt = Prompt()
    prompt.start("Save as: ", purpose="save", initial="out.cv")
    _feed(prompt, [curses.KEY_LEFT, "s", curses.KEY_HOME, "x", curses.KEY_END])
    assert prompt.buffer == "xout.csv"
    assert prompt.cursor == len("xout.csv")


def test_ctrl_u_kills_to_start():
    prompt = Prompt()
    prompt.start(":", initial="abc def")
    prompt.cursor = len("abc ")
    _feed(prompt, [21])  # Ctrl+U
    assert prompt.buffer == "def"
    assert prompt.cursor == 0


def test_reset():
    prompt = Prompt()
    prompt.start(":", initial="q")
    prompt.reset()
    assert not prompt.active
    assert prompt.buffer == ""
    assert prompt.handle_key(ord("a")) is None
