"""Reading and writing JSON Canvas files."""

from canvasintent.storage.canvas_file import dump_canvas, load_canvas, parse_canvas, save_canvas

__all__ = ["dump_canvas", "load_canvas", "parse_canvas", "save_canvas"]
