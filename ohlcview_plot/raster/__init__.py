from .canvas import blend_mask, clear, draw_hline, draw_vline, fill_rect, new_canvas
from .draw_lines import draw_line, draw_polyline
from .draw_markers import draw_circle
from .draw_text import draw_text, text_size
from .rasterize import rasterize_scene

__all__ = [
    "blend_mask",
    "clear",
    "draw_circle",
    "draw_hline",
    "draw_line",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "rasterize_scene",
    "text_size",
]
