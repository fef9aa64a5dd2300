"""Core game logic for Escampe."""

from .state import (
    BOARD_SIZE,
    PASS,
    PIECES_PER_SIDE,
    Cell,
    GameResult,
    GameState,
    Move,
    Pass,
    Piece,
    Placement,
    Side,
    Step,
)
from .terrain import TERRAIN_MAP, format_terrain_map, terrain_of
from .rules import (
    DEFAULT_PLACEMENT_LIMIT,
    PlacementConfig,
    PlacementPolicy,
    apply_move,
    enumerate_legal_moves,
    enumerate_placements,
    enumerate_steps,
    evaluate_result,
    is_legal,
    is_over,
    legal_moves,
    new_empty_state,
    placement_rows,
    placement_allowed,
    required_terrain,
    side_to_move_after,
    winner,
)
from .actions import ACTION_VECTOR_SIZE, PASS_ACTION, PLACEMENT_OFFSET, decode_move, encode_move

__all__ = [
    "BOARD_SIZE",
    "PASS",
    "PIECES_PER_SIDE",
    "Cell",
    "GameResult",
    "GameState",
    "Move",
    "Pass",
    "Piece",
    "Placement",
    "Side",
    "Step",
    "TERRAIN_MAP",
    "format_terrain_map",
    "terrain_of",
    "DEFAULT_PLACEMENT_LIMIT",
    "PlacementConfig",
    "PlacementPolicy",
    "apply_move",
    "enumerate_legal_moves",
    "enumerate_placements",
    "enumerate_steps",
    "evaluate_result",
    "is_legal",
    "is_over",
    "legal_moves",
    "new_empty_state",
    "placement_rows",
    "placement_allowed",
    "required_terrain",
    "side_to_move_after",
    "winner",
    "ACTION_VECTOR_SIZE",
    "PASS_ACTION",
    "PLACEMENT_OFFSET",
    "decode_move",
    "encode_move",
]
