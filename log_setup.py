import logging
import os

import config_paths

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: str | None = None) -> logging.Logger:
    """Route all tblview logging to a file; curses owns the terminal."""
    path = os.path.abspath(log_file or config_paths.LOG_PATH)
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return root

    f_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    f_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(f_handler)
    return root
