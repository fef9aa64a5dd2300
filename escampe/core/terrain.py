"""Static terrain (lisère) map of the Escampe board."""

from __future__ import annotations

import numpy as np

from .state import BOARD_SIZE, Cell

# Indexed [row, col]; row 0 is line 1 and col 0 is column A.
TERRAIN_MAP = np.array(
    [
        [1, 2, 2, 3, 1, 2],
        [3, 1, 3, 1, 3, 2],
        [2, 3, 1, 2, 1, 3],
        [2, 1, 3, 2, 3, 1],
        [1, 3, 1, 3, 1, 2],
        [3, 2, 2, 1, 3, 2],
    ],
    dtype=np.int8,
)
TERRAIN_MAP.setflags(write=False)

TERRAIN_CLASSES = (1, 2, 3)


def terrain_of(cell: Cell) -> int:
    return int(TERRAIN_MAP[cell.row, cell.col])


def format_terrain_map() -> str:
    columns = "  " + " ".join(chr(ord("A") + col) for col in range(BOARD_SIZE))
    lines = [columns]
    for row in range(BOARD_SIZE - 1, -1, -1):
        values = " ".join(str(int(value)) for value in TERRAIN_MAP[row])
        lines.append(f"{row + 1} {values} {row + 1}")
    lines.append(columns)
    return "\n".join(lines)
