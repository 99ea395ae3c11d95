import sys
import os
import curses
import logging

from config_paths import ensure_config_dirs, load_config
from default_grid_initializer import DefaultGridInitializer
from file_type_handler import FileTypeHandler
from formulas import default_formulas
from log_setup import setup_logging

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from orchestrator import Orchestrator

from _version import __version__

logger = logging.getLogger(__name__)

USAGE = "tblview - terminal spreadsheet editor\n\nUsage:\n  tblview [path]\n  tblview -v\n  tblview -h\n"


def load_grid(path, config):
    """Grid for `path` (csv/tsv/json), or the default blank grid when no path is given."""
    formulas = default_formulas()
    cell_width = config.get("CELL_WIDTH", 10)
    if path:
        handler = FileTypeHandler(path)
        return handler.load_or_create(formulas=formulas, cell_width=cell_width), handler
    return DefaultGridInitializer().create(formulas=formulas, cell_width=cell_width), None


def main():
    args = sys.argv[1:]

    if "-v" in args or "-V" in args:
        print(__version__)
        return

    if "-h" in args:
        print(USAGE)
        return

    if len(args) > 1:
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    ensure_config_dirs()
    config = load_config()
    setup_logging(config["LOG_LEVEL"])

    path = args[0] if args else None
    try:
        grid, handler = load_grid(path, config)
    except (OSError, ValueError) as e:
        logger.error("load of %s failed: %s", path, e)
        print(f"Load failed: {e}", file=sys.stderr)
        sys.exit(1)

    def curses_main(stdscr):
        Orchestrator(stdscr, grid, path, handler, config).run()

    curses.wrapper(curses_main)


if __name__ == "__main__":
    main()
