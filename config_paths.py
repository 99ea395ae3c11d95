import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "tblview")
LOG_PATH = os.path.join(CONFIG_DIR, "tblview.log")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
CELL_WIDTH_DEFAULT = 10
UNDO_MAX_DEPTH_DEFAULT = 100
LOG_LEVEL_DEFAULT = "INFO"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def load_config():
    cfg = {
        "CELL_WIDTH": CELL_WIDTH_DEFAULT,
        "UNDO_MAX_DEPTH": UNDO_MAX_DEPTH_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }

    if os.path.exists(CONFIG_JSON):
        try:
            with open(CONFIG_JSON, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            return cfg

        if isinstance(data, dict):
            width = data.get("cell_width")
            if isinstance(width, int) and not isinstance(width, bool) and width >= 1:
                cfg["CELL_WIDTH"] = width

            if "undo_max_depth" in data:
                depth = data.get("undo_max_depth")
                if depth is None:
                    cfg["UNDO_MAX_DEPTH"] = None
                elif isinstance(depth, int) and not isinstance(depth, bool) and depth >= 1:
                    cfg["UNDO_MAX_DEPTH"] = depth

            level = data.get("log_level")
            if isinstance(level, str) and level.upper() in _LOG_LEVELS:
                cfg["LOG_LEVEL"] = level.upper()

    return cfg
