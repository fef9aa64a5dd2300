from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from escampe.core import GameResult, GameState, Side, evaluate_result
from escampe.env import EscampeEnv


class Policy:
    """Policy interface producing action probabilities over legal moves."""

    def act(self, state: GameState, legal_mask: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def spawn(self, seed: Optional[int] = None) -> "Policy":
        """Return a copy of this policy for an independent game."""
        return self


class RandomPolicy(Policy):
    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def act(self, state: GameState, legal_mask: np.ndarray) -> np.ndarray:
        logits = legal_mask.astype(np.float64)
        if logits.sum() == 0:
            return logits.astype(np.float32)
        probs = logits / logits.sum()
        return probs.astype(np.float32, copy=True)

    def spawn(self, seed: Optional[int] = None) -> "RandomPolicy":
        return RandomPolicy(np.random.default_rng(seed))


@dataclass
class EvaluationResult:
    games_played: int
    black_wins: int
    white_wins: int
    draws: int
    average_length: float

    def winrate_black(self) -> float:
        return self.black_wins / max(1, self.games_played)

    def winrate_white(self) -> float:
        return self.white_wins / max(1, self.games_played)


def sample_action(probs: np.ndarray, legal_mask: np.ndarray, rng: np.random.Generator) -> Optional[int]:
    probs = probs.astype(np.float64) * legal_mask
    if probs.sum() <= 0:
        probs = legal_mask.astype(np.float64)
    total = probs.sum()
    if total <= 0:
        return None
    return int(rng.choice(len(probs), p=probs / total))


def evaluate_policies(
    black_policy: Policy,
    white_policy: Policy,
    *,
    episodes: int,
    env_factory: Optional[Callable[[], EscampeEnv]] = None,
    rng: Optional[np.random.Generator] = None,
) -> EvaluationResult:
    env_factory = env_factory or EscampeEnv
    rng = rng or np.random.default_rng()

    black_wins = 0
    white_wins = 0
    draws = 0
    total_ply = 0

    for _ in range(episodes):
        env = env_factory()
        obs, info = env.reset(seed=int(rng.integers(2**31)))
        finished = False

        while not finished:
            state_snapshot = env.state.copy()
            legal_mask = info["legal_action_mask"]
            policy = black_policy if env.side == Side.BLACK else white_policy
            action_index = sample_action(policy.act(state_snapshot, legal_mask), legal_mask, rng)
            if action_index is None:
                # No legal action at all: a stalled position is scored as a draw.
                break
            obs, reward, terminated, truncated, info = env.step(action_index)
            finished = terminated or truncated

        total_ply += env.ply
        result = evaluate_result(env.state)
        if result == GameResult.BLACK_WIN:
            black_wins += 1
        elif result == GameResult.WHITE_WIN:
            white_wins += 1
        else:
            draws += 1

    average_length = total_ply / max(1, episodes)
    return EvaluationResult(
        games_played=episodes,
        black_wins=black_wins,
        white_wins=white_wins,
        draws=draws,
        average_length=average_length,
    )
