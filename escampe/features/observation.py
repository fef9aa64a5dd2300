from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import torch

from escampe.core import BOARD_SIZE, TERRAIN_MAP, GameState, Piece, Side, required_terrain

BOARD_CHANNELS = 8  # 4 piece kinds + 3 terrain classes + required-terrain plane
AUX_VECTOR_SIZE = 7  # side to move (2) + placed flags (2) + required terrain one-hot (3)

_PIECE_CHANNELS = {
    Piece.BLACK_UNICORN: 0,
    Piece.BLACK_PALADIN: 1,
    Piece.WHITE_UNICORN: 2,
    Piece.WHITE_PALADIN: 3,
}


def build_board_tensor(state: GameState) -> np.ndarray:
    """Return board tensor with shape (8, 6, 6) channel-first, indexed [row, col]."""
    tensor = np.zeros((BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE), dtype=np.float32)
    for piece, channel in _PIECE_CHANNELS.items():
        tensor[channel] = state.board == int(piece)
    for terrain in (1, 2, 3):
        tensor[3 + terrain] = TERRAIN_MAP == terrain
    required = required_terrain(state)
    if required is None:
        tensor[7] = 1.0
    else:
        tensor[7] = TERRAIN_MAP == required
    return tensor


def build_aux_vector(state: GameState, side: Side) -> np.ndarray:
    aux = np.zeros((AUX_VECTOR_SIZE,), dtype=np.float32)
    aux[int(side) - 1] = 1.0
    aux[2] = float(state.black_placed)
    aux[3] = float(state.white_placed)
    required = required_terrain(state)
    if required is not None:
        aux[3 + required] = 1.0
    return aux


def state_to_numpy(state: GameState, side: Side) -> Tuple[np.ndarray, np.ndarray]:
    return build_board_tensor(state), build_aux_vector(state, side)


def state_to_torch(
    state: GameState,
    side: Side,
    *,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float32,
) -> Tuple[torch.Tensor, torch.Tensor]:
    board_np, aux_np = state_to_numpy(state, side)
    board = torch.from_numpy(board_np).to(device=device, dtype=dtype)
    aux = torch.from_numpy(aux_np).to(device=device, dtype=dtype)
    return board, aux
