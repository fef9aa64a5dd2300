import numpy as np
import pytest

from escampe.core import Cell, Piece, new_empty_state
from escampe.validation import InvalidInputError, validate_state


def test_validate_state_ok():
    state = new_empty_state()
    state.board[5, :] = Piece.BLACK_PALADIN
    state.board[5, 2] = Piece.BLACK_UNICORN
    state.last_destination = Cell(2, 3)
    validate_state(state)


def test_validate_state_two_unicorns():
    state = new_empty_state()
    state.board[0, 0] = Piece.WHITE_UNICORN
    state.board[0, 1] = Piece.WHITE_UNICORN
    with pytest.raises(InvalidInputError):
        validate_state(state)


def test_validate_state_too_many_pieces():
    state = new_empty_state()
    state.board[0, :] = Piece.WHITE_PALADIN
    state.board[1, 0] = Piece.WHITE_PALADIN
    with pytest.raises(InvalidInputError):
        validate_state(state)


def test_validate_state_unknown_value_and_shape():
    state = new_empty_state()
    state.board[2, 2] = 9
    with pytest.raises(InvalidInputError):
        validate_state(state)

    state = new_empty_state()
    state.board = np.zeros((5, 6), dtype=np.int8)
    with pytest.raises(InvalidInputError):
        validate_state(state)


def test_validate_state_last_destination_off_board():
    state = new_empty_state()
    state.last_destination = Cell(6, 0)
    with pytest.raises(InvalidInputError):
        validate_state(state)
