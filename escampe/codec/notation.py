"""Text notation for moves: ``C6/A6/B5/D5/E6/F5``, ``B1-D1`` and ``E``."""

from __future__ import annotations

from escampe.core.state import BOARD_SIZE, PASS, PIECES_PER_SIDE, Cell, Move, Pass, Placement, Step
from escampe.validation import InvalidInputError

PASS_TOKEN = "E"
STEP_SEPARATOR = "-"
PLACEMENT_SEPARATOR = "/"


def format_cell(cell: Cell) -> str:
    return f"{chr(ord('A') + cell.col)}{cell.row + 1}"


def parse_cell(text: str) -> Cell:
    token = text.strip().upper()
    if len(token) != 2:
        raise InvalidInputError(f"Invalid cell {text!r}.")
    col = ord(token[0]) - ord("A")
    row = ord(token[1]) - ord("1")
    cell = Cell(col, row)
    if not cell.in_bounds():
        raise InvalidInputError(f"Cell {text!r} is off the board (A1-F{BOARD_SIZE}).")
    return cell


def format_move(move: Move) -> str:
    if isinstance(move, Pass):
        return PASS_TOKEN
    if isinstance(move, Step):
        return f"{format_cell(move.origin)}{STEP_SEPARATOR}{format_cell(move.destination)}"
    if isinstance(move, Placement):
        return PLACEMENT_SEPARATOR.join(format_cell(cell) for cell in move.cells)
    raise TypeError(f"Unsupported move type {type(move).__name__}.")


def parse_move(text: str) -> Move:
    if text is None or not text.strip():
        raise InvalidInputError("Empty move.")
    token = text.strip().upper()

    if token == PASS_TOKEN:
        return PASS

    if STEP_SEPARATOR in token:
        parts = token.split(STEP_SEPARATOR)
        if len(parts) != 2:
            raise InvalidInputError(f"Invalid step {text!r}.")
        origin, destination = parse_cell(parts[0]), parse_cell(parts[1])
        try:
            return Step(origin, destination)
        except ValueError as exc:
            raise InvalidInputError(f"Invalid step {text!r}: {exc}") from exc

    if PLACEMENT_SEPARATOR in token:
        parts = token.split(PLACEMENT_SEPARATOR)
        if len(parts) != PIECES_PER_SIDE:
            raise InvalidInputError(f"Placement needs {PIECES_PER_SIDE} cells: {text!r}.")
        cells = tuple(parse_cell(part) for part in parts)
        try:
            return Placement(cells=cells)
        except ValueError as exc:
            raise InvalidInputError(f"Invalid placement {text!r}: {exc}") from exc

    raise InvalidInputError(f"Unrecognised move {text!r}.")
