import logging
import tempfile
from pathlib import Path

from log_setup import setup_logging


def _file_handlers(root, path):
    return [
        h
        for h in root.handlers
        if isinstance(h, logging.FileHandler) and h.baseFilename == str(path)
    ]


def test_setup_logging_writes_to_file_once():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "tblview.log"
        root = setup_logging("DEBUG", str(path))
        try:
            setup_logging("DEBUG", str(path))
            assert len(_file_handlers(root, path)) == 1

            logging.getLogger("commands").info("inserted row %d below", 3)
            for handler in _file_handlers(root, path):
                handler.flush()

            text = path.read_text()
            assert "commands - INFO - inserted row 3 below" in text
        finally:
            for handler in _file_handlers(root, path):
                root.removeHandler(handler)
                handler.close()
