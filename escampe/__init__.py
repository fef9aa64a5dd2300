"""Escampe rules engine package."""

from . import codec, core, env, evaluation, features, validation
from .codec import board_from_text, board_to_text, format_move, load_board, parse_move, render_board, save_board
from .core import (
    PASS,
    Cell,
    GameResult,
    GameState,
    Piece,
    Placement,
    PlacementConfig,
    PlacementPolicy,
    Side,
    Step,
    apply_move,
    enumerate_legal_moves,
    is_legal,
    is_over,
    legal_moves,
    new_empty_state,
    winner,
)
from .env import EscampeEnv
from .evaluation import EvaluationResult, RandomPolicy, evaluate_policies
from .features import AUX_VECTOR_SIZE, BOARD_CHANNELS, build_aux_vector, build_board_tensor, state_to_numpy, state_to_torch
from .validation import InvalidInputError, validate_state

__all__ = [
    "codec",
    "core",
    "env",
    "evaluation",
    "features",
    "validation",
    "board_from_text",
    "board_to_text",
    "format_move",
    "load_board",
    "parse_move",
    "render_board",
    "save_board",
    "PASS",
    "Cell",
    "GameResult",
    "GameState",
    "Piece",
    "Placement",
    "PlacementConfig",
    "PlacementPolicy",
    "Side",
    "Step",
    "apply_move",
    "enumerate_legal_moves",
    "is_legal",
    "is_over",
    "legal_moves",
    "new_empty_state",
    "winner",
    "EscampeEnv",
    "EvaluationResult",
    "RandomPolicy",
    "evaluate_policies",
    "AUX_VECTOR_SIZE",
    "BOARD_CHANNELS",
    "build_aux_vector",
    "build_board_tensor",
    "state_to_numpy",
    "state_to_torch",
    "InvalidInputError",
    "validate_state",
]
