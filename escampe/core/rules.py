from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Sequence, Set, Tuple

import numpy as np

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
    paladin_of,
    unicorn_of,
)
from .terrain import terrain_of

logger = logging.getLogger(__name__)

BLACK_HOME_ROWS: Tuple[int, int] = (4, 5)  # lines 5-6
OPPOSITE_HOME_ROWS: Tuple[int, int] = (0, 1)  # lines 1-2
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, 1), (0, -1), (-1, 0), (1, 0))  # (d_col, d_row)
DEFAULT_PLACEMENT_LIMIT = 100


class PlacementPolicy(Enum):
    FIRST = "first"
    SAMPLE = "sample"


@dataclass(frozen=True)
class PlacementConfig:
    """Bounds placement enumeration.

    ``limit`` caps how many placements are produced (``None`` for all of them).
    With ``FIRST`` the first ``limit`` arrangements in enumeration order are
    kept; with ``SAMPLE`` ``limit`` distinct arrangements are drawn uniformly.
    """

    limit: Optional[int] = DEFAULT_PLACEMENT_LIMIT
    policy: PlacementPolicy = PlacementPolicy.FIRST
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 1:
            raise ValueError("Placement limit must be positive or None.")


def new_empty_state() -> GameState:
    return GameState(board=np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8))


# ----------------------------------------------------------------------
# Legal move generation
# ----------------------------------------------------------------------
def placement_rows(state: GameState, side: Side) -> Optional[Tuple[int, int]]:
    """Return the rows ``side`` places on, or ``None`` outside its placement phase."""
    if side == Side.BLACK and not state.black_placed:
        return BLACK_HOME_ROWS
    if side == Side.WHITE and state.black_placed and not state.white_placed:
        return OPPOSITE_HOME_ROWS if _black_on_home_rows(state) else BLACK_HOME_ROWS
    return None


def required_terrain(state: GameState) -> Optional[int]:
    if state.last_destination is None:
        return None
    return terrain_of(state.last_destination)


def enumerate_placements(
    state: GameState,
    side: Side,
    config: Optional[PlacementConfig] = None,
    *,
    rng: Optional[np.random.Generator] = None,
) -> List[Placement]:
    rows = placement_rows(state, side)
    if rows is None:
        return []
    cells = _empty_cells(state, rows)
    if len(cells) < PIECES_PER_SIDE:
        return []

    config = config or PlacementConfig()
    total = math.perm(len(cells), PIECES_PER_SIDE)
    if config.limit is None or config.limit >= total:
        return [Placement(cells=arrangement) for arrangement in itertools.permutations(cells, PIECES_PER_SIDE)]

    logger.debug(
        "Capping %s placements at %d of %d (%s).", side.name, config.limit, total, config.policy.value
    )
    if config.policy == PlacementPolicy.FIRST:
        arrangements = itertools.islice(itertools.permutations(cells, PIECES_PER_SIDE), config.limit)
        return [Placement(cells=arrangement) for arrangement in arrangements]

    rng = rng or np.random.default_rng(config.seed)
    return _sample_placements(cells, config.limit, total, rng)


def enumerate_steps(state: GameState, side: Side) -> Set[Step]:
    required = required_terrain(state)
    steps: Set[Step] = set()
    for origin in state.occupied_cells(side):
        distance = terrain_of(origin)
        if required is not None and distance != required:
            continue
        for destination in _reachable_destinations(state.board, origin, distance):
            steps.add(Step(origin, destination))
    return steps


def enumerate_legal_moves(
    state: GameState,
    side: Side,
    *,
    placement: Optional[PlacementConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> FrozenSet[Move]:
    if placement_rows(state, side) is not None:
        return frozenset(enumerate_placements(state, side, placement, rng=rng))

    steps = enumerate_steps(state, side)
    if not steps:
        return frozenset((PASS,))
    return frozenset(steps)


legal_moves = enumerate_legal_moves


def is_legal(
    state: GameState,
    move: Move,
    side: Side,
    *,
    placement: Optional[PlacementConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> bool:
    """Membership test against ``enumerate_legal_moves`` with the same placement bounds.

    Pass ``PlacementConfig(limit=None)`` to accept every arrangement the rules allow.
    """
    return move in enumerate_legal_moves(state, side, placement=placement, rng=rng)


def placement_allowed(state: GameState, move: Placement, side: Side) -> bool:
    """True when ``move`` puts six pieces on empty cells of ``side``'s placement rows.

    Unlike ``is_legal`` this ignores the enumeration cap, so any arrangement
    is accepted without listing them all.
    """
    rows = placement_rows(state, side)
    if rows is None:
        return False
    return all(cell.in_bounds() and cell.row in rows and state.piece_at(cell) == Piece.EMPTY for cell in move.cells)


# ----------------------------------------------------------------------
# Move application
# ----------------------------------------------------------------------
def apply_move(state: GameState, move: Move, side: Side, *, in_place: bool = False) -> GameState:
    if isinstance(move, Placement):
        if state.has_placed(side):
            raise ValueError(f"{side.name} has already placed its pieces.")
        if not all(cell.in_bounds() for cell in move.cells):
            raise ValueError("Placement cell out of bounds.")
    elif isinstance(move, Step):
        if not (move.origin.in_bounds() and move.destination.in_bounds()):
            raise ValueError("Step cell out of bounds.")
        if not state.piece_at(move.origin).belongs_to(side):
            raise ValueError(f"No {side.name} piece at the step origin.")
    elif not isinstance(move, Pass):
        raise TypeError(f"Unsupported move type {type(move).__name__}.")

    target = state if in_place else state.copy()
    if isinstance(move, Pass):
        # The following player is no longer constrained by terrain.
        target.last_destination = None
    elif isinstance(move, Placement):
        target.set_piece(move.unicorn, unicorn_of(side))
        for cell in move.paladins:
            target.set_piece(cell, paladin_of(side))
        target.mark_placed(side)
        target.last_destination = None
    else:
        mover = target.piece_at(move.origin)
        target.set_piece(move.destination, mover)
        target.set_piece(move.origin, Piece.EMPTY)
        target.last_destination = move.destination
    return target


def side_to_move_after(move: Move, mover: Side) -> Side:
    """White places second and then opens play, otherwise sides alternate."""
    if isinstance(move, Placement) and mover == Side.WHITE:
        return Side.WHITE
    return mover.opponent()


# ----------------------------------------------------------------------
# Terminal detection
# ----------------------------------------------------------------------
def is_over(state: GameState) -> bool:
    if not (state.black_placed and state.white_placed):
        return False
    return not (state.has_unicorn(Side.BLACK) and state.has_unicorn(Side.WHITE))


def evaluate_result(state: GameState) -> GameResult:
    if not is_over(state):
        return GameResult.ONGOING
    black_alive = state.has_unicorn(Side.BLACK)
    white_alive = state.has_unicorn(Side.WHITE)
    if black_alive:
        return GameResult.BLACK_WIN
    if white_alive:
        return GameResult.WHITE_WIN
    logger.warning("Both unicorns are missing from the board; scoring the game as a draw.")
    return GameResult.DRAW


def winner(state: GameState) -> Optional[Side]:
    result = evaluate_result(state)
    if result == GameResult.BLACK_WIN:
        return Side.BLACK
    if result == GameResult.WHITE_WIN:
        return Side.WHITE
    return None


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _black_on_home_rows(state: GameState) -> bool:
    black = (int(Piece.BLACK_UNICORN), int(Piece.BLACK_PALADIN))
    return bool(np.isin(state.board[list(BLACK_HOME_ROWS)], black).any())


def _empty_cells(state: GameState, rows: Sequence[int]) -> List[Cell]:
    return [Cell(col, row) for row in rows for col in range(BOARD_SIZE) if state.board[row, col] == Piece.EMPTY]


def _sample_placements(
    cells: Sequence[Cell], limit: int, total: int, rng: np.random.Generator
) -> List[Placement]:
    if limit * 2 > total:
        # Dense sample: pick enumeration indices directly.
        chosen = {int(index) for index in rng.choice(total, size=limit, replace=False)}
        arrangements = itertools.permutations(cells, PIECES_PER_SIDE)
        return [Placement(cells=arrangement) for index, arrangement in enumerate(arrangements) if index in chosen]

    seen: Set[Tuple[Cell, ...]] = set()
    placements: List[Placement] = []
    while len(placements) < limit:
        order = rng.permutation(len(cells))[:PIECES_PER_SIDE]
        arrangement = tuple(cells[int(i)] for i in order)
        if arrangement in seen:
            continue
        seen.add(arrangement)
        placements.append(Placement(cells=arrangement))
    return placements


def _reachable_destinations(board: np.ndarray, origin: Cell, distance: int) -> Set[Cell]:
    """Destinations of simple orthogonal paths of exactly ``distance`` steps."""
    mover = Piece(int(board[origin.row, origin.col]))
    destinations: Set[Cell] = set()
    stack: List[Tuple[Cell, Tuple[Cell, ...]]] = [(origin, (origin,))]
    while stack:
        position, path = stack.pop()
        remaining = distance - (len(path) - 1)
        for d_col, d_row in DIRECTIONS:
            nxt = Cell(position.col + d_col, position.row + d_row)
            if not nxt.in_bounds() or nxt in path:
                continue
            occupant = Piece(int(board[nxt.row, nxt.col]))
            if remaining > 1:
                if occupant == Piece.EMPTY:
                    stack.append((nxt, path + (nxt,)))
            elif _can_land(mover, occupant):
                destinations.add(nxt)
    return destinations


def _can_land(mover: Piece, occupant: Piece) -> bool:
    if occupant == Piece.EMPTY:
        return True
    # Only a paladin takes, and only the enemy unicorn.
    return mover.is_paladin and occupant.is_unicorn and occupant.side != mover.side
