from __future__ import annotations

from typing import Sequence

from .rules import DEFAULT_PLACEMENT_LIMIT
from .state import BOARD_SIZE, PASS, Cell, Move, Pass, Placement, Step

NUM_CELLS = BOARD_SIZE * BOARD_SIZE
STEP_ACTIONS = NUM_CELLS * NUM_CELLS
PASS_ACTION = STEP_ACTIONS
PLACEMENT_OFFSET = PASS_ACTION + 1
PLACEMENT_SLOTS = DEFAULT_PLACEMENT_LIMIT
ACTION_VECTOR_SIZE = PLACEMENT_OFFSET + PLACEMENT_SLOTS


def encode_move(move: Move, placements: Sequence[Placement] = ()) -> int:
    """Map a move to its action index.

    Placements are indexed by their position in ``placements``, the ordered
    list returned by ``enumerate_placements`` for the current state.
    """
    if isinstance(move, Pass):
        return PASS_ACTION
    if isinstance(move, Step):
        return move.origin.index * NUM_CELLS + move.destination.index
    if isinstance(move, Placement):
        try:
            slot = list(placements).index(move)
        except ValueError:
            raise ValueError("Placement is not among the indexed placements.") from None
        if slot >= PLACEMENT_SLOTS:
            raise ValueError("Placement slot out of range.")
        return PLACEMENT_OFFSET + slot
    raise TypeError(f"Unsupported move type {type(move).__name__}.")


def decode_move(index: int, placements: Sequence[Placement] = ()) -> Move:
    if not 0 <= index < ACTION_VECTOR_SIZE:
        raise ValueError("Action index out of range.")
    if index < STEP_ACTIONS:
        return Step(Cell.from_index(index // NUM_CELLS), Cell.from_index(index % NUM_CELLS))
    if index == PASS_ACTION:
        return PASS
    slot = index - PLACEMENT_OFFSET
    if slot >= len(placements):
        raise ValueError("Placement action has no matching placement.")
    return placements[slot]
