#!/usr/bin/env python3
"""
Play Escampe in the console against a random opponent, simulate random games,
or replay a logged game.

Examples:
  python scripts/play_match.py --human-side black --log-file logs/game.json
  python scripts/play_match.py --simulate 20 --seed 0
  python scripts/play_match.py --replay-log logs/game.json
Settings are read from --config (YAML) and overridden by command-line flags.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import yaml

from escampe import EscampeEnv, RandomPolicy, evaluate_policies
from escampe.codec import board_from_text, board_to_text, format_move, load_board, parse_move, render_board
from escampe.core import (
    GameResult,
    GameState,
    Move,
    Placement,
    PlacementConfig,
    PlacementPolicy,
    Side,
    apply_move,
    enumerate_legal_moves,
    evaluate_result,
    is_legal,
    is_over,
    new_empty_state,
    placement_allowed,
    side_to_move_after,
)
from escampe.validation import InvalidInputError

logger = logging.getLogger("play_match")

DEFAULTS: Dict[str, object] = {
    "max_ply": 400,
    "human_side": "black",
    "seed": None,
    "placement_limit": 100,
    "placement_policy": "first",
    "log_level": "WARNING",
}


def load_yaml_config(path_str: Optional[str]) -> Dict:
    if not path_str:
        return {}
    path = Path(path_str)
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def build_settings(args: argparse.Namespace, cfg: Dict) -> Dict[str, object]:
    settings = dict(DEFAULTS)
    settings.update({key: value for key, value in cfg.items() if key in DEFAULTS})
    for key in DEFAULTS:
        value = getattr(args, key, None)
        if value is not None:
            settings[key] = value
    return settings


def placement_config(settings: Dict[str, object]) -> PlacementConfig:
    return PlacementConfig(
        limit=settings["placement_limit"],
        policy=PlacementPolicy(settings["placement_policy"]),
        seed=settings["seed"],
    )


def choose_random_move(
    state: GameState, side: Side, rng: np.random.Generator, placement: PlacementConfig
) -> Optional[Move]:
    moves = sorted(enumerate_legal_moves(state, side, placement=placement, rng=rng), key=format_move)
    if not moves:
        return None
    return moves[int(rng.integers(len(moves)))]


def move_allowed(state: GameState, move: Move, side: Side) -> bool:
    # Typed placements are checked against the rule itself, not the capped list.
    if isinstance(move, Placement):
        return placement_allowed(state, move, side)
    return is_legal(state, move, side)


def prompt_human_move(state: GameState, side: Side) -> Move:
    while True:
        raw = input(f"{side.name} move (e.g. C6/A6/B5/D5/E6/F5, B1-D1, E; q to quit): ").strip()
        if raw.lower() in {"q", "quit", "exit"}:
            print("Leaving the game.")
            sys.exit(0)
        try:
            move = parse_move(raw)
        except InvalidInputError as exc:
            print(f"Could not read that move: {exc}")
            continue
        if move_allowed(state, move, side):
            return move
        print("Illegal move, try again.")


def save_log(log: Dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(log, indent=2))
    print(f"Game log saved to {path}.")


def replay_logged_game(log_path: Path, *, verbose: bool = True) -> Dict[str, object]:
    data = json.loads(Path(log_path).read_text())
    metadata = data.get("metadata", {})
    moves = data.get("moves", [])
    initial_board = metadata.get("initial_board")
    state = board_from_text(initial_board) if initial_board else new_empty_state()
    side = Side[metadata.get("first_side", "black").upper()]
    if verbose:
        print("Replaying logged game.")
        print(render_board(state))
    for entry in moves:
        move = parse_move(entry["move"])
        if not move_allowed(state, move, side):
            raise InvalidInputError(f"move {entry.get('move_index')} ({entry['move']}) is illegal for {side.name}")
        state = apply_move(state, move, side)
        if verbose:
            print(f"{entry.get('actor', 'unknown')} ({side.name}) plays {format_move(move)}")
            print(render_board(state))
        side = side_to_move_after(move, side)
    result = evaluate_result(state)
    summary = {
        "result": result.value,
        "moves": len(moves),
        "board": state.board.tolist(),
    }
    if verbose:
        print("Replay finished.")
        print(f"Result: {summary['result']}")
    return summary


def play_interactive(args: argparse.Namespace, settings: Dict[str, object]) -> None:
    rng = np.random.default_rng(settings["seed"])
    placement = placement_config(settings)
    human_side = Side[str(settings["human_side"]).upper()]
    max_ply = int(settings["max_ply"])

    state = load_board(args.board) if args.board else new_empty_state()
    side = Side[args.first_side.upper()] if args.first_side else (Side.WHITE if state.black_placed else Side.BLACK)
    metadata = {
        "human_side": human_side.name.lower(),
        "first_side": side.name.lower(),
        "initial_board": board_to_text(state),
        "seed": settings["seed"],
    }
    log_records: List[Dict] = []

    ply = 0
    while not is_over(state) and ply < max_ply:
        print("\nCurrent board:")
        print(render_board(state))
        print(f"To move: {side.name}")

        if side == human_side:
            if not enumerate_legal_moves(state, side, placement=placement):
                logger.warning("%s has no legal move; stopping the game.", side.name)
                break
            move = prompt_human_move(state, side)
            actor = "human"
        else:
            move = choose_random_move(state, side, rng, placement)
            actor = "random"
            if move is None:
                logger.warning("%s has no legal move; stopping the game.", side.name)
                break
            print(f"Random ({side.name}) plays {format_move(move)}")

        log_records.append({"move_index": ply, "actor": actor, "side": side.name.lower(), "move": format_move(move)})
        state = apply_move(state, move, side)
        side = side_to_move_after(move, side)
        ply += 1

    print("\nFinal board:")
    print(render_board(state))
    result = evaluate_result(state)
    if result == GameResult.BLACK_WIN:
        print("Black wins!")
    elif result == GameResult.WHITE_WIN:
        print("White wins!")
    else:
        print("No winner.")

    if args.log_file:
        metadata["result"] = result.value
        save_log({"metadata": metadata, "moves": log_records}, Path(args.log_file))


def simulate(episodes: int, settings: Dict[str, object]) -> Dict[str, object]:
    seed = settings["seed"]
    rng = np.random.default_rng(seed)
    placement = placement_config(settings)
    max_ply = int(settings["max_ply"])

    def factory() -> EscampeEnv:
        return EscampeEnv(max_ply=max_ply, placement=placement)

    result = evaluate_policies(
        RandomPolicy(np.random.default_rng(rng.integers(2**31))),
        RandomPolicy(np.random.default_rng(rng.integers(2**31))),
        episodes=episodes,
        env_factory=factory,
        rng=rng,
    )
    output = asdict(result)
    output["winrate_black"] = result.winrate_black()
    output["winrate_white"] = result.winrate_white()
    return output


def main() -> None:
    parser = argparse.ArgumentParser(description="Play, simulate or replay Escampe games.")
    parser.add_argument("--config", type=str, default="configs/play_match.yaml")
    parser.add_argument("--human-side", dest="human_side", choices=["black", "white"])
    parser.add_argument("--first-side", choices=["black", "white"], help="Side to move first (defaults from board)")
    parser.add_argument("--board", type=str, help="Start from a board file")
    parser.add_argument("--max-ply", dest="max_ply", type=int)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--placement-limit", dest="placement_limit", type=int)
    parser.add_argument("--placement-policy", dest="placement_policy", choices=["first", "sample"])
    parser.add_argument("--log-level", dest="log_level", type=str)
    parser.add_argument("--log-file", type=str)
    parser.add_argument("--simulate", type=int, help="Play N random-vs-random games and print a JSON summary")
    parser.add_argument("--replay-log", type=str, help="Replay a logged game and exit")
    parser.add_argument("--replay-quiet", action="store_true")
    args = parser.parse_args()

    settings = build_settings(args, load_yaml_config(args.config))
    logging.basicConfig(level=str(settings["log_level"]).upper(), format="%(levelname)s: %(message)s")

    if args.replay_log:
        replay_logged_game(Path(args.replay_log), verbose=not args.replay_quiet)
        return

    if args.simulate:
        print(json.dumps(simulate(args.simulate, settings), indent=2))
        return

    play_interactive(args, settings)


if __name__ == "__main__":
    main()
