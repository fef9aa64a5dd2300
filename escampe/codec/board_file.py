"""Board files.

A board file lists one line per board row, numbered ``01`` to ``06``, holding
six piece symbols (``-`` empty, ``N``/``n`` black unicorn/paladin, ``B``/``b``
white unicorn/paladin), optionally followed by the row number again::

    % ABCDEF
    01 bb---- 01
    ...
    06 n-N-n- 06
    % ABCDEF

A state whose last move left a terrain constraint carries one extra line,
``% last A2``, naming the destination of that move. Other lines starting with
``%`` and blank lines are ignored.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np

from escampe.core.state import BOARD_SIZE, PIECE_SYMBOLS, Cell, GameState, Piece, Side
from escampe.core.terrain import terrain_of
from escampe.validation import InvalidInputError, validate_state

from .notation import format_cell, parse_cell

COMMENT_PREFIX = "%"
HEADER = "% " + "".join(chr(ord("A") + col) for col in range(BOARD_SIZE))
_ROW_PATTERN = re.compile(r"^(\d{1,2})\s+(\S+)(?:\s+(\d{1,2}))?$")
_LAST_PATTERN = re.compile(r"^%\s*last\s+(\S+)$", re.IGNORECASE)

PathLike = Union[str, Path]


def board_from_text(text: str) -> GameState:
    rows: Dict[int, str] = {}
    last_destination: Optional[Cell] = None
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        last = _LAST_PATTERN.match(line)
        if last is not None:
            last_destination = parse_cell(last.group(1))
            continue
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        match = _ROW_PATTERN.match(line)
        if match is None:
            raise InvalidInputError(f"line {line_number}: cannot parse {raw!r}")
        number = int(match.group(1))
        if match.group(3) is not None and int(match.group(3)) != number:
            raise InvalidInputError(f"line {line_number}: row numbers {match.group(1)} and {match.group(3)} differ")
        if not 1 <= number <= BOARD_SIZE:
            raise InvalidInputError(f"line {line_number}: row number {number} out of range")
        if number in rows:
            raise InvalidInputError(f"line {line_number}: row {number:02d} listed twice")
        content = match.group(2)
        if len(content) != BOARD_SIZE:
            raise InvalidInputError(f"line {line_number}: expected {BOARD_SIZE} cells, got {len(content)}")
        rows[number] = content

    missing = [number for number in range(1, BOARD_SIZE + 1) if number not in rows]
    if missing:
        raise InvalidInputError(f"missing rows: {', '.join(f'{number:02d}' for number in missing)}")

    board = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for number, content in rows.items():
        for col, symbol in enumerate(content):
            try:
                board[number - 1, col] = int(Piece.from_symbol(symbol))
            except ValueError as exc:
                raise InvalidInputError(f"row {number:02d}: {exc}") from exc

    state = GameState(board=board, last_destination=last_destination)
    state.black_placed = state.count_pieces(Side.BLACK) > 0
    state.white_placed = state.count_pieces(Side.WHITE) > 0
    validate_state(state)
    return state


def board_to_text(state: GameState) -> str:
    lines = [HEADER]
    for row in range(BOARD_SIZE):
        symbols = "".join(PIECE_SYMBOLS[Piece(int(value))] for value in state.board[row])
        lines.append(f"{row + 1:02d} {symbols} {row + 1:02d}")
    lines.append(HEADER)
    if state.last_destination is not None:
        lines.append(f"{COMMENT_PREFIX} last {format_cell(state.last_destination)}")
    return "\n".join(lines) + "\n"


def load_board(path: PathLike) -> GameState:
    return board_from_text(Path(path).read_text(encoding="utf-8"))


def save_board(state: GameState, path: PathLike) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(board_to_text(state), encoding="utf-8")


def render_board(state: GameState) -> str:
    """Human-facing view, line 6 at the top."""
    columns = "  " + " ".join(chr(ord("A") + col) for col in range(BOARD_SIZE))
    lines = [columns]
    for row in range(BOARD_SIZE - 1, -1, -1):
        symbols = " ".join(PIECE_SYMBOLS[Piece(int(value))] for value in state.board[row])
        lines.append(f"{row + 1} {symbols} {row + 1}")
    lines.append(columns)
    if state.last_destination is not None:
        lines.append(
            f"Last move to {format_cell(state.last_destination)} (terrain {terrain_of(state.last_destination)})"
        )
    return "\n".join(lines)
