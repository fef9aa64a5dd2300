from __future__ import annotations

from typing import Dict, List, Optional, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from escampe.codec import load_board, render_board
from escampe.core import (
    ACTION_VECTOR_SIZE,
    BOARD_SIZE,
    GameResult,
    GameState,
    Placement,
    PlacementConfig,
    Side,
    apply_move,
    decode_move,
    encode_move,
    enumerate_legal_moves,
    enumerate_placements,
    evaluate_result,
    new_empty_state,
    placement_rows,
    side_to_move_after,
)
from escampe.core.actions import PLACEMENT_OFFSET, PLACEMENT_SLOTS
from escampe.features import AUX_VECTOR_SIZE, BOARD_CHANNELS, build_aux_vector, build_board_tensor


class EscampeEnv(gym.Env):
    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        max_ply: int = 400,
        enforce_legal_actions: bool = True,
        render_mode: Optional[str] = None,
        placement: Optional[PlacementConfig] = None,
    ) -> None:
        super().__init__()
        placement = placement or PlacementConfig()
        if placement.limit is None or placement.limit > PLACEMENT_SLOTS:
            raise ValueError(f"Placement limit must be between 1 and {PLACEMENT_SLOTS} for the action space.")
        self._max_ply = max_ply
        self._enforce_legal = enforce_legal_actions
        self._placement = placement
        self.render_mode = render_mode

        board_shape = (BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0.0, high=1.0, shape=board_shape, dtype=np.float32),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(AUX_VECTOR_SIZE,), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(ACTION_VECTOR_SIZE)

        self._state = new_empty_state()
        self._side = Side.BLACK
        self._ply = 0
        self._placements: List[Placement] = []
        self._refresh_placements()

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def side(self) -> Side:
        return self._side

    @property
    def ply(self) -> int:
        return self._ply

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        options = options or {}
        self._max_ply = options.get("max_ply", self._max_ply)
        board_path = options.get("board_path")
        self._state = load_board(board_path) if board_path else new_empty_state()
        self._side = _coerce_side(options.get("side")) if options.get("side") else _default_side(self._state)
        self._ply = 0
        self._refresh_placements()
        observation = self._build_observation()
        info = self._build_info()
        return observation, info

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")

        legal_mask = self.legal_action_mask()
        if self._enforce_legal and not legal_mask[action_index]:
            raise ValueError("Illegal action provided and enforce_legal_actions=True.")

        move = decode_move(int(action_index), self._placements)
        self._state = apply_move(self._state, move, self._side)
        self._side = side_to_move_after(move, self._side)
        self._ply += 1
        self._refresh_placements()

        observation = self._build_observation()
        info = self._build_info()

        result = evaluate_result(self._state)
        reward = self._compute_reward(result)
        terminated = result != GameResult.ONGOING
        truncated = not terminated and self._ply >= self._max_ply

        return observation, reward, terminated, truncated, info

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        if placement_rows(self._state, self._side) is not None:
            mask[PLACEMENT_OFFSET : PLACEMENT_OFFSET + len(self._placements)] = 1
            return mask
        for move in enumerate_legal_moves(self._state, self._side):
            mask[encode_move(move)] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return f"{render_board(self._state)}\nTo move: {self._side.name}"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _refresh_placements(self) -> None:
        # Placement actions index into this list, so it is fixed for the whole turn.
        self._placements = enumerate_placements(
            self._state, self._side, self._placement, rng=self.np_random
        )

    def _build_observation(self) -> Dict[str, np.ndarray]:
        board = build_board_tensor(self._state)
        aux = build_aux_vector(self._state, self._side)
        return {"board": board, "aux": aux}

    def _build_info(self) -> Dict[str, object]:
        return {"legal_action_mask": self.legal_action_mask(), "side": self._side}

    def _compute_reward(self, result: GameResult) -> float:
        if result == GameResult.BLACK_WIN:
            return 1.0
        if result == GameResult.WHITE_WIN:
            return -1.0
        return 0.0


def _coerce_side(value: Union[str, Side]) -> Side:
    if isinstance(value, Side):
        return value
    return Side[str(value).upper()]


def _default_side(state: GameState) -> Side:
    if not state.black_placed:
        return Side.BLACK
    return Side.WHITE
