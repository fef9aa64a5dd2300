import numpy as np
import pytest

from escampe.codec import format_move, parse_cell, parse_move
from escampe.core import (
    PASS,
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
    enumerate_placements,
    enumerate_steps,
    evaluate_result,
    is_legal,
    is_over,
    new_empty_state,
    placement_allowed,
    required_terrain,
    side_to_move_after,
    terrain_of,
    winner,
)
from escampe.validation import validate_state


def placed_state() -> GameState:
    state = new_empty_state()
    state.black_placed = True
    state.white_placed = True
    return state


def put(state: GameState, label: str, piece: Piece) -> None:
    state.set_piece(parse_cell(label), piece)


def steps_from(state: GameState, side: Side, label: str) -> set:
    origin = parse_cell(label)
    return {format_move(move) for move in enumerate_steps(state, side) if move.origin == origin}


def test_terrain_map_lookup() -> None:
    assert terrain_of(parse_cell("A1")) == 1
    assert terrain_of(parse_cell("A2")) == 3
    assert terrain_of(parse_cell("C6")) == 2
    assert terrain_of(parse_cell("D6")) == 1
    assert terrain_of(parse_cell("F3")) == 3


def test_black_placement_phase_yields_only_placements_on_home_rows() -> None:
    state = new_empty_state()
    moves = enumerate_legal_moves(state, Side.BLACK)

    assert len(moves) == 100
    for move in moves:
        assert isinstance(move, Placement)
        assert len(set(move.cells)) == 6
        assert all(cell.row in (4, 5) for cell in move.cells)
        assert all(state.piece_at(cell) == Piece.EMPTY for cell in move.cells)


def test_placement_enumeration_keeps_first_arrangements_in_order() -> None:
    placements = enumerate_placements(new_empty_state(), Side.BLACK)

    assert format_move(placements[0]) == "A5/B5/C5/D5/E5/F5"
    assert format_move(placements[1]) == "A5/B5/C5/D5/E5/A6"
    # The cap keeps a prefix, so every kept arrangement starts from A5.
    assert all(placement.unicorn == parse_cell("A5") for placement in placements)


def test_uncapped_placements_treat_paladins_as_distinct() -> None:
    state = new_empty_state()
    for label in ("A5", "B5", "C5", "D5", "E5", "F5"):
        put(state, label, Piece.WHITE_PALADIN)

    placements = enumerate_placements(state, Side.BLACK, PlacementConfig(limit=None))

    assert len(placements) == 720
    # Only the unicorn slot changes the resulting board: 720 moves, 6 distinct boards.
    boards = {(placement.unicorn, frozenset(placement.paladins)) for placement in placements}
    assert len(boards) == 6


def test_too_few_empty_cells_yields_no_placement() -> None:
    state = new_empty_state()
    for label in ("A5", "B5", "C5", "D5", "E5", "F5", "A6"):
        put(state, label, Piece.WHITE_PALADIN)

    assert enumerate_legal_moves(state, Side.BLACK) == frozenset()


def test_sampled_placements_are_distinct_legal_and_seeded() -> None:
    state = new_empty_state()
    config = PlacementConfig(limit=50, policy=PlacementPolicy.SAMPLE, seed=3)

    first = enumerate_placements(state, Side.BLACK, config)
    second = enumerate_placements(state, Side.BLACK, config)

    assert len(first) == 50
    assert len(set(first)) == 50
    assert first == second
    assert all(placement_allowed(state, placement, Side.BLACK) for placement in first)


def test_dense_sample_draws_without_replacement() -> None:
    state = new_empty_state()
    for label in ("A5", "B5", "C5", "D5", "E5", "F5"):
        put(state, label, Piece.WHITE_PALADIN)
    config = PlacementConfig(limit=500, policy=PlacementPolicy.SAMPLE)

    placements = enumerate_placements(state, Side.BLACK, config, rng=np.random.default_rng(0))

    assert len(placements) == 500
    assert len(set(placements)) == 500


def test_placement_config_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        PlacementConfig(limit=0)


def test_black_placement_scenario() -> None:
    state = new_empty_state()
    move = parse_move("C6/A6/B5/D5/E6/F5")

    assert placement_allowed(state, move, Side.BLACK)
    assert is_legal(state, move, Side.BLACK) == (move in enumerate_legal_moves(state, Side.BLACK))

    next_state = apply_move(state, move, Side.BLACK)

    assert next_state.piece_at(parse_cell("C6")) == Piece.BLACK_UNICORN
    assert next_state.piece_at(parse_cell("A6")) == Piece.BLACK_PALADIN
    assert next_state.count_pieces(Side.BLACK) == 6
    assert next_state.black_placed
    assert next_state.last_destination is None
    assert not is_over(next_state)
    assert state.count_pieces(Side.BLACK) == 0


def test_is_legal_follows_the_enumerated_placements() -> None:
    state = new_empty_state()
    for label in ("B5", "C5", "D5", "E5", "F5"):
        put(state, label, Piece.WHITE_PALADIN)
    move = parse_move("F6/E6/D6/C6/B6/A6")

    assert move not in enumerate_legal_moves(state, Side.BLACK)
    assert not is_legal(state, move, Side.BLACK)
    assert is_legal(state, move, Side.BLACK, placement=PlacementConfig(limit=None))
    assert placement_allowed(state, move, Side.BLACK)
    assert not placement_allowed(state, parse_move("F6/E6/D6/C6/B6/B5"), Side.BLACK)
    assert not placement_allowed(state, move, Side.WHITE)


def test_white_places_on_the_opposite_edge() -> None:
    state = apply_move(new_empty_state(), parse_move("C6/A6/B5/D5/E6/F5"), Side.BLACK)

    moves = enumerate_legal_moves(state, Side.WHITE)

    assert moves
    assert all(isinstance(move, Placement) for move in moves)
    assert all(cell.row in (0, 1) for move in moves for cell in move.cells)
    assert placement_allowed(state, parse_move("C1/A1/B2/D2/E1/F2"), Side.WHITE)
    assert not placement_allowed(state, parse_move("C5/A5/B6/D6/E5/F6"), Side.WHITE)


def test_white_places_on_top_when_black_took_the_bottom() -> None:
    state = new_empty_state()
    for label in ("A1", "B1", "C1", "D1", "E1"):
        put(state, label, Piece.BLACK_PALADIN)
    put(state, "F1", Piece.BLACK_UNICORN)
    state.black_placed = True

    moves = enumerate_legal_moves(state, Side.WHITE)

    assert all(cell.row in (4, 5) for move in moves for cell in move.cells)


def test_white_before_black_placement_can_only_pass() -> None:
    state = new_empty_state()
    assert enumerate_legal_moves(state, Side.WHITE) == frozenset({PASS})


def test_placing_twice_fails_fast() -> None:
    state = apply_move(new_empty_state(), parse_move("C6/A6/B5/D5/E6/F5"), Side.BLACK)
    with pytest.raises(ValueError):
        apply_move(state, parse_move("A5/C5/E5/F6/D6/B6"), Side.BLACK)


def test_terrain_one_piece_moves_one_step() -> None:
    state = placed_state()
    put(state, "B2", Piece.WHITE_PALADIN)

    assert steps_from(state, Side.WHITE, "B2") == {"B2-B1", "B2-B3", "B2-A2", "B2-C2"}


def test_terrain_two_paths_are_deduplicated_by_destination() -> None:
    state = placed_state()
    put(state, "A3", Piece.WHITE_PALADIN)

    # B4 and B2 are each reached by two different paths.
    assert steps_from(state, Side.WHITE, "A3") == {"A3-A5", "A3-B4", "A3-A1", "A3-B2", "A3-C3"}


def test_terrain_three_paths_never_revisit_cells() -> None:
    state = placed_state()
    put(state, "A2", Piece.WHITE_PALADIN)

    expected = {"A2-D2", "A2-C3", "A2-C1", "A2-B4", "A2-A5", "A2-A1", "A2-A3", "A2-B2"}
    assert steps_from(state, Side.WHITE, "A2") == expected


def test_occupied_intermediate_cell_blocks_paths() -> None:
    state = placed_state()
    put(state, "A3", Piece.WHITE_PALADIN)
    put(state, "B3", Piece.WHITE_PALADIN)

    assert steps_from(state, Side.WHITE, "A3") == {"A3-A5", "A3-B4", "A3-A1", "A3-B2"}


def test_paladin_captures_unicorn_and_wins() -> None:
    state = placed_state()
    put(state, "A2", Piece.WHITE_PALADIN)
    put(state, "A3", Piece.BLACK_UNICORN)
    put(state, "F1", Piece.WHITE_UNICORN)

    capture = Step(parse_cell("A2"), parse_cell("A3"))
    moves = enumerate_legal_moves(state, Side.WHITE)
    assert capture in moves
    assert not is_over(state)

    next_state = apply_move(state, capture, Side.WHITE)

    assert next_state.piece_at(parse_cell("A3")) == Piece.WHITE_PALADIN
    assert next_state.piece_at(parse_cell("A2")) == Piece.EMPTY
    assert next_state.last_destination == parse_cell("A3")
    assert is_over(next_state)
    assert winner(next_state) == Side.WHITE
    assert evaluate_result(next_state) == GameResult.WHITE_WIN


def test_unicorn_never_captures() -> None:
    state = placed_state()
    put(state, "A2", Piece.WHITE_UNICORN)
    put(state, "A3", Piece.BLACK_UNICORN)

    assert "A2-A3" not in steps_from(state, Side.WHITE, "A2")


def test_paladin_cannot_land_on_paladins() -> None:
    state = placed_state()
    put(state, "A2", Piece.WHITE_PALADIN)
    put(state, "A3", Piece.BLACK_PALADIN)
    put(state, "A1", Piece.WHITE_PALADIN)

    destinations = steps_from(state, Side.WHITE, "A2")

    assert "A2-A3" not in destinations
    assert "A2-A1" not in destinations


def test_last_destination_gates_origin_terrain() -> None:
    state = placed_state()
    put(state, "A2", Piece.WHITE_PALADIN)  # terrain 3
    put(state, "A4", Piece.WHITE_PALADIN)  # terrain 2
    put(state, "C3", Piece.WHITE_PALADIN)  # terrain 1
    state.last_destination = parse_cell("E1")  # terrain 1

    moves = enumerate_legal_moves(state, Side.WHITE)

    assert required_terrain(state) == 1
    assert moves
    assert {move.origin for move in moves} == {parse_cell("C3")}


def test_forced_pass_when_no_piece_stands_on_required_terrain() -> None:
    state = placed_state()
    put(state, "A2", Piece.BLACK_PALADIN)  # terrain 3
    put(state, "A3", Piece.BLACK_UNICORN)  # terrain 2
    state.last_destination = parse_cell("B2")  # terrain 1

    moves = enumerate_legal_moves(state, Side.BLACK)

    assert moves == frozenset({PASS})
    assert is_legal(state, PASS, Side.BLACK)
    assert not is_legal(state, Step(parse_cell("A3"), parse_cell("A5")), Side.BLACK)


def test_pass_is_illegal_while_steps_exist() -> None:
    state = placed_state()
    put(state, "A2", Piece.BLACK_PALADIN)

    assert not is_legal(state, PASS, Side.BLACK)


def test_pass_clears_terrain_constraint_only() -> None:
    state = placed_state()
    put(state, "A2", Piece.BLACK_PALADIN)
    state.last_destination = parse_cell("B2")

    next_state = apply_move(state, PASS, Side.BLACK)

    assert next_state.last_destination is None
    assert np.array_equal(next_state.board, state.board)
    assert state.last_destination == parse_cell("B2")


def test_apply_in_place_mutates_given_state() -> None:
    state = placed_state()
    put(state, "B2", Piece.WHITE_PALADIN)

    result = apply_move(state, Step(parse_cell("B2"), parse_cell("B3")), Side.WHITE, in_place=True)

    assert result is state
    assert state.piece_at(parse_cell("B3")) == Piece.WHITE_PALADIN


def test_step_from_foreign_origin_fails_without_mutation() -> None:
    state = placed_state()
    put(state, "B2", Piece.BLACK_PALADIN)
    snapshot = state.copy()

    with pytest.raises(ValueError):
        apply_move(state, Step(parse_cell("B2"), parse_cell("B3")), Side.WHITE, in_place=True)
    assert state == snapshot


def test_not_over_before_both_sides_placed() -> None:
    state = new_empty_state()
    put(state, "A2", Piece.WHITE_PALADIN)
    state.white_placed = True

    assert not is_over(state)
    assert winner(state) is None
    assert evaluate_result(state) == GameResult.ONGOING


def test_both_unicorns_missing_scores_a_draw() -> None:
    state = placed_state()
    put(state, "A2", Piece.WHITE_PALADIN)
    put(state, "A5", Piece.BLACK_PALADIN)

    assert is_over(state)
    assert is_over(state)
    assert winner(state) is None
    assert evaluate_result(state) == GameResult.DRAW


def test_turn_order_after_each_move_kind() -> None:
    black_placement = parse_move("C6/A6/B5/D5/E6/F5")
    white_placement = parse_move("C1/A1/B2/D2/E1/F2")

    assert side_to_move_after(black_placement, Side.BLACK) == Side.WHITE
    assert side_to_move_after(white_placement, Side.WHITE) == Side.WHITE
    assert side_to_move_after(parse_move("A1-A2"), Side.WHITE) == Side.BLACK
    assert side_to_move_after(PASS, Side.BLACK) == Side.WHITE


def test_random_playouts_respect_move_invariants() -> None:
    rng = np.random.default_rng(7)
    for _ in range(4):
        state = new_empty_state()
        side = Side.BLACK
        for _ in range(80):
            if is_over(state):
                break
            moves = sorted(enumerate_legal_moves(state, side), key=format_move)
            assert moves
            required = required_terrain(state)
            for move in moves:
                assert is_legal(state, move, side)
                if isinstance(move, Step):
                    assert state.piece_at(move.origin).belongs_to(side)
                    distance = terrain_of(move.origin)
                    if required is not None:
                        assert distance == required
                    manhattan = abs(move.origin.col - move.destination.col) + abs(
                        move.origin.row - move.destination.row
                    )
                    assert manhattan <= distance
                    assert (distance - manhattan) % 2 == 0
            if PASS in moves:
                assert moves == [PASS]

            move = moves[int(rng.integers(len(moves)))]
            own_before = state.count_pieces(side)
            enemy_before = state.count_pieces(side.opponent())
            next_state = apply_move(state, move, side)

            if isinstance(move, Placement):
                assert next_state.count_pieces(side) == own_before + 6
            else:
                assert next_state.count_pieces(side) == own_before
            assert enemy_before - next_state.count_pieces(side.opponent()) in (0, 1)
            validate_state(next_state)

            state = next_state
            side = side_to_move_after(move, side)
