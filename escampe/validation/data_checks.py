from __future__ import annotations

import numpy as np

from escampe.core.state import BOARD_SIZE, PIECES_PER_SIDE, GameState, Piece, Side, paladin_of, unicorn_of


class InvalidInputError(ValueError):
    pass


def validate_state(state: GameState) -> None:
    board = state.board
    if board.shape != (BOARD_SIZE, BOARD_SIZE):
        raise InvalidInputError(f"board must have shape ({BOARD_SIZE}, {BOARD_SIZE}), got {board.shape}")
    if not np.isin(board, [int(piece) for piece in Piece]).all():
        raise InvalidInputError("board contains unknown piece values")
    for side in Side:
        if int((board == int(unicorn_of(side))).sum()) > 1:
            raise InvalidInputError(f"{side.name} has more than one unicorn")
        pieces = int(np.isin(board, (int(unicorn_of(side)), int(paladin_of(side)))).sum())
        if pieces > PIECES_PER_SIDE:
            raise InvalidInputError(f"{side.name} has {pieces} pieces, at most {PIECES_PER_SIDE} allowed")
    if state.last_destination is not None and not state.last_destination.in_bounds():
        raise InvalidInputError("last destination is off the board")
