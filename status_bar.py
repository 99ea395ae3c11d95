import os
import time

from grid import SORT_GLYPHS

MODE_LABELS = {
    "normal": "NORMAL",
    "cell_insert": "INSERT",
    "visual": "VISUAL",
    "visual_line": "V-LINE",
    "visual_block": "V-BLOCK",
    "command": "CMD",
}


def render_status(context, width):
    """
    context keys: status_msg, status_until, mode, file_path, shape,
                   current_row, current_col, sorted_col, sort_order, pending_count
    """
    text = ""
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    else:
        mode = MODE_LABELS.get(context.get("mode", "normal"), "NORMAL")
        fname = context.get("file_path") or ""
        fname = os.path.basename(fname) if fname else "[no file]"
        rows, cols = context.get("shape", (0, 0))
        # user-facing coordinates are 0-based data indices
        row = context.get("current_row", 1) - 1
        col = context.get("current_col", 1) - 1
        text = f" {mode} | {fname} | {rows}x{cols} | {row}:{col}"

        sorted_col = context.get("sorted_col", -1)
        glyph = SORT_GLYPHS.get(context.get("sort_order"), "")
        if sorted_col >= 1 and glyph:
            text += f" | sort {sorted_col - 1}{glyph}"

        count = context.get("pending_count")
        if count:
            text += f" | Count: {count}"

    return text.ljust(width)[:width]
