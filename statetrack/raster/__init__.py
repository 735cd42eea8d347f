from .canvas import draw_hline, draw_vline, fill_rect, new_canvas
from .draw_lines import draw_polyline
from .draw_text import draw_text, load_font, text_advance, text_size

__all__ = [
    "draw_hline",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "load_font",
    "new_canvas",
    "text_advance",
    "text_size",
]
