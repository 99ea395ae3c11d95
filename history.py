import logging
from typing import Callable, List, Optional

from commands import Command, CommandError

logger = logging.getLogger(__name__)


class History:
    """Undo/redo stacks of executed commands (most recent last)."""

    def __init__(
        self,
        report_error: Optional[Callable[[str], None]] = None,
        max_depth: Optional[int] = 100,
    ):
        self.undo_stack: List[Command] = []
        self.redo_stack: List[Command] = []
        self.max_depth = max_depth
        self._report_error = report_error

    def _report(self, message: str):
        logger.error(message)
        if self._report_error is not None:
            self._report_error(message)

    def do(self, cmd: Command) -> bool:
        """Execute cmd and record it. Failed commands are reported, not recorded."""
        try:
            cmd.execute()
        except CommandError as exc:
            self._report(str(exc))
            return False
        self.undo_stack.append(cmd)
        if self.max_depth is not None and len(self.undo_stack) > self.max_depth:
            self.undo_stack.pop(0)
        # a new action invalidates everything that was undone
        self.redo_stack.clear()
        return True

    def undo(self) -> Optional[Command]:
        if not self.undo_stack:
            return None
        cmd = self.undo_stack.pop()
        try:
            cmd.unexecute()
        except CommandError as exc:
            self._report(str(exc))
        self.redo_stack.append(cmd)
        return cmd

    def redo(self) -> Optional[Command]:
        if not self.redo_stack:
            return None
        cmd = self.redo_stack.pop()
        try:
            cmd.execute()
        except CommandError as exc:
            self._report(str(exc))
        self.undo_stack.append(cmd)
        return cmd

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)
