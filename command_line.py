import re
from dataclasses import dataclass
from typing import Any, Optional

from commands import (
    ReplaceTextCommand,
    SortColumnAscendingCommand,
    SortColumnDescendingCommand,
)

_REPLACE_RE = re.compile(r"replace '([^']*)' with '([^']*)'")
_WRITE_RE = re.compile(r"(wq|w|x)(?:\s+(\S.*))?")


@dataclass
class CommandLineAction:
    """What a ':' line asks for. `command` is set when kind == 'command'."""

    kind: str  # command | undo | redo | write | quit | write_quit | error
    command: Optional[Any] = None
    path: Optional[str] = None
    message: str = ""


def parse_replace(text: str):
    """Return (ok, search, replace) for "replace 'foo' with 'bar'"."""
    m = _REPLACE_RE.fullmatch(text.strip())
    if m is None:
        return False, "", ""
    return True, m.group(1), m.group(2)


def parse_command_line(text: str, grid, selection) -> CommandLineAction:
    code = (text or "").strip()
    if code.startswith(":"):
        code = code[1:].strip()
    if not code:
        return CommandLineAction("error", message="No command to execute")

    if code == "sortasc":
        return CommandLineAction(
            "command", command=SortColumnAscendingCommand(grid, grid.current_col)
        )
    if code == "sortdesc":
        return CommandLineAction(
            "command", command=SortColumnDescendingCommand(grid, grid.current_col)
        )

    ok, search, replace = parse_replace(code)
    if ok:
        return CommandLineAction(
            "command", command=ReplaceTextCommand(grid, selection, search, replace)
        )

    if code in ("u", "undo"):
        return CommandLineAction("undo")
    if code in ("redo", "red"):
        return CommandLineAction("redo")
    if code in ("q", "q!"):
        return CommandLineAction("quit")

    m = _WRITE_RE.fullmatch(code)
    if m:
        kind = "write" if m.group(1) == "w" else "write_quit"
        return CommandLineAction(kind, path=m.group(2))

    return CommandLineAction("error", message=f"Unknown command: {code}")
