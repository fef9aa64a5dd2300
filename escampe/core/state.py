from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, NamedTuple, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

BoardArray = NDArray[np.int8]

BOARD_SIZE = 6
PIECES_PER_SIDE = 6


class Side(IntEnum):
    BLACK = 1
    WHITE = 2

    def opponent(self) -> "Side":
        return Side.WHITE if self == Side.BLACK else Side.BLACK


class Piece(IntEnum):
    EMPTY = 0
    BLACK_UNICORN = 1
    BLACK_PALADIN = 2
    WHITE_UNICORN = 3
    WHITE_PALADIN = 4

    @property
    def side(self) -> Optional[Side]:
        if self in (Piece.BLACK_UNICORN, Piece.BLACK_PALADIN):
            return Side.BLACK
        if self in (Piece.WHITE_UNICORN, Piece.WHITE_PALADIN):
            return Side.WHITE
        return None

    @property
    def is_unicorn(self) -> bool:
        return self in (Piece.BLACK_UNICORN, Piece.WHITE_UNICORN)

    @property
    def is_paladin(self) -> bool:
        return self in (Piece.BLACK_PALADIN, Piece.WHITE_PALADIN)

    def belongs_to(self, side: Side) -> bool:
        return self.side == side

    @property
    def symbol(self) -> str:
        return PIECE_SYMBOLS[self]

    @staticmethod
    def from_symbol(symbol: str) -> "Piece":
        for piece, candidate in PIECE_SYMBOLS.items():
            if candidate == symbol:
                return piece
        raise ValueError(f"Unknown piece symbol {symbol!r}.")


PIECE_SYMBOLS = {
    Piece.EMPTY: "-",
    Piece.BLACK_UNICORN: "N",
    Piece.BLACK_PALADIN: "n",
    Piece.WHITE_UNICORN: "B",
    Piece.WHITE_PALADIN: "b",
}


def unicorn_of(side: Side) -> Piece:
    return Piece.BLACK_UNICORN if side == Side.BLACK else Piece.WHITE_UNICORN


def paladin_of(side: Side) -> Piece:
    return Piece.BLACK_PALADIN if side == Side.BLACK else Piece.WHITE_PALADIN


class GameResult(Enum):
    ONGOING = "ongoing"
    BLACK_WIN = "black_win"
    WHITE_WIN = "white_win"
    DRAW = "draw"


class Cell(NamedTuple):
    """Board coordinate; column A-F is 0-5 and row 1-6 is 0-5."""

    col: int
    row: int

    @property
    def index(self) -> int:
        return self.row * BOARD_SIZE + self.col

    @staticmethod
    def from_index(index: int) -> "Cell":
        return Cell(index % BOARD_SIZE, index // BOARD_SIZE)

    def in_bounds(self) -> bool:
        return 0 <= self.col < BOARD_SIZE and 0 <= self.row < BOARD_SIZE


@dataclass(frozen=True)
class Placement:
    """Initial placement: ``cells[0]`` receives the unicorn, ``cells[1:]`` the paladins."""

    cells: Tuple[Cell, ...]

    def __post_init__(self) -> None:
        if len(self.cells) != PIECES_PER_SIDE:
            raise ValueError(f"Placement needs {PIECES_PER_SIDE} cells, got {len(self.cells)}.")
        if len(set(self.cells)) != PIECES_PER_SIDE:
            raise ValueError("Placement cells must be distinct.")

    @property
    def unicorn(self) -> Cell:
        return self.cells[0]

    @property
    def paladins(self) -> Tuple[Cell, ...]:
        return self.cells[1:]


@dataclass(frozen=True)
class Step:
    origin: Cell
    destination: Cell

    def __post_init__(self) -> None:
        if self.origin == self.destination:
            raise ValueError("Step origin and destination must differ.")


@dataclass(frozen=True)
class Pass:
    pass


PASS = Pass()

Move = Union[Placement, Step, Pass]


@dataclass
class GameState:
    board: BoardArray  # shape (6, 6), dtype=np.int8, indexed [row, col], values from Piece
    last_destination: Optional[Cell] = None
    black_placed: bool = False
    white_placed: bool = False

    def copy(self) -> "GameState":
        return GameState(
            board=self.board.copy(),
            last_destination=self.last_destination,
            black_placed=self.black_placed,
            white_placed=self.white_placed,
        )

    def piece_at(self, cell: Cell) -> Piece:
        return Piece(int(self.board[cell.row, cell.col]))

    def set_piece(self, cell: Cell, piece: Piece) -> None:
        self.board[cell.row, cell.col] = int(piece)

    def has_placed(self, side: Side) -> bool:
        return self.black_placed if side == Side.BLACK else self.white_placed

    def mark_placed(self, side: Side) -> None:
        if side == Side.BLACK:
            self.black_placed = True
        else:
            self.white_placed = True

    def occupied_cells(self, side: Side) -> Iterable[Cell]:
        mask = np.isin(self.board, (int(unicorn_of(side)), int(paladin_of(side))))
        for row, col in np.argwhere(mask):
            yield Cell(int(col), int(row))

    def count_pieces(self, side: Side) -> int:
        return int(np.isin(self.board, (int(unicorn_of(side)), int(paladin_of(side)))).sum())

    def has_unicorn(self, side: Side) -> bool:
        return bool(np.any(self.board == int(unicorn_of(side))))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameState):
            return NotImplemented
        return (
            np.array_equal(self.board, other.board)
            and self.last_destination == other.last_destination
            and self.black_placed == other.black_placed
            and self.white_placed == other.white_placed
        )

    def __repr__(self) -> str:
        board_str = "\n".join(
            "".join(PIECE_SYMBOLS[Piece(int(cell))] for cell in self.board[row])
            for row in range(BOARD_SIZE - 1, -1, -1)
        )
        return (
            f"GameState(last_destination={self.last_destination}, "
            f"black_placed={self.black_placed}, white_placed={self.white_placed})\n"
            f"{board_str}"
        )
