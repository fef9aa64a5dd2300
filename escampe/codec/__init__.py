"""Text codecs for moves and board files."""

from .notation import format_cell, format_move, parse_cell, parse_move
from .board_file import board_from_text, board_to_text, load_board, render_board, save_board

__all__ = [
    "format_cell",
    "format_move",
    "parse_cell",
    "parse_move",
    "board_from_text",
    "board_to_text",
    "load_board",
    "render_board",
    "save_board",
]
