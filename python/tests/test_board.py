import pytest

from wheel_checkers.game.board import SIDE_A, SIDE_B, Board, Jump, Piece, Step, board_from, opponent
from wheel_checkers.game.rules import legal_jumps_all, legal_jumps_from, legal_steps
from wheel_checkers.topology import ALL_NODES, CENTER


RING_NODES = {node for node in ALL_NODES if node != CENTER}


def test_initial_board_layout():
    board = Board.initial()
    assert board.remaining(SIDE_A) == 24
    assert board.remaining(SIDE_B) == 24
    assert board.is_empty(CENTER)
    assert board.occupant("O5") == SIDE_A
    assert board.occupant("O6") == SIDE_B
    assert board.occupant("I0") == SIDE_A
    assert board.occupant("I11") == SIDE_B
    assert not any(piece.king for _, piece in board.items())


def test_board_rejects_unknown_nodes():
    with pytest.raises(ValueError):
        Board({"Z9": Piece(SIDE_A)})


def test_with_changes_returns_new_board():
    board = board_from({"O0": SIDE_A})
    moved = board.with_changes({"O0": None, "O1": Piece(SIDE_A)})
    assert board.occupant("O0") == SIDE_A
    assert moved.occupant("O1") == SIDE_A
    assert moved.is_empty("O0")


def test_opponent_flips_sides():
    assert opponent(SIDE_A) == SIDE_B
    assert opponent(SIDE_B) == SIDE_A


def test_regular_steps_go_to_adjacent_empty_nodes(make_state):
    state = make_state({"O0": SIDE_A})
    assert legal_steps(state, SIDE_A) == [Step("O0", "O1"), Step("O0", "O11"), Step("O0", "MO0")]


def test_minimal_capture_yields_exactly_one_jump(make_state):
    state = make_state({"O0": SIDE_A, "O1": SIDE_B})
    assert legal_jumps_from(state, SIDE_A, "O0") == [Jump("O0", "O1", "O2")]


def test_capture_across_ring_seam(make_state):
    state = make_state({"O11": SIDE_A, "O0": SIDE_B})
    assert legal_jumps_from(state, SIDE_A, "O11") == [Jump("O11", "O0", "O1")]
    assert legal_jumps_from(state, SIDE_B, "O0") == [Jump("O0", "O11", "O10")]


def test_capture_along_spoke(make_state):
    state = make_state({"MO3": SIDE_A, "MI3": SIDE_B})
    assert legal_jumps_from(state, SIDE_A, "MO3") == [Jump("MO3", "MI3", "I3")]


def test_capture_through_center_lands_on_opposite_spoke(make_state):
    state = make_state({"I2": SIDE_A, CENTER: SIDE_B})
    assert legal_jumps_from(state, SIDE_A, "I2") == [Jump("I2", CENTER, "I8")]


def test_no_capture_when_landing_is_occupied(make_state):
    state = make_state({"O0": SIDE_A, "O1": SIDE_B, "O2": SIDE_A})
    assert legal_jumps_from(state, SIDE_A, "O0") == []


def test_no_capture_off_the_end_of_a_spoke(make_state):
    state = make_state({"MO0": SIDE_A, "O0": SIDE_B})
    assert legal_jumps_from(state, SIDE_A, "MO0") == []


def test_no_capture_over_own_piece(make_state):
    state = make_state({"O0": SIDE_A, "O1": SIDE_A})
    assert legal_jumps_all(state, SIDE_A) == []


def test_jumps_from_requires_own_piece(make_state):
    state = make_state({"O0": SIDE_A, "O1": SIDE_B})
    assert legal_jumps_from(state, SIDE_B, "O0") == []
    assert legal_jumps_from(state, SIDE_A, "O5") == []


def test_king_slides_along_every_spoke_from_center(make_state):
    state = make_state({CENTER: Piece(SIDE_A, king=True)})
    steps = legal_steps(state, SIDE_A)
    assert len(steps) == 48
    assert {step.target for step in steps} == RING_NODES


def test_king_slides_around_ring_and_down_spoke(make_state):
    state = make_state({"O0": Piece(SIDE_A, king=True)})
    targets = [step.target for step in legal_steps(state, SIDE_A)]
    # O6 sits on both the ring and the spoke through O0 but is listed once
    assert len(targets) == len(set(targets)) == 18
    assert targets.count("O6") == 1
    assert CENTER in targets


def test_king_slide_stops_at_first_occupied_node(make_state):
    state = make_state({"O0": Piece(SIDE_A, king=True), "O3": SIDE_A, "MI0": SIDE_B})
    targets = {step.target for step in legal_steps(state, SIDE_A) if step.origin == "O0"}
    assert {"O1", "O2", "O4", "O11", "MO0"} <= targets
    assert "O3" not in targets
    assert "MI0" not in targets
    assert CENTER not in targets


def test_king_captures_at_distance(make_state):
    state = make_state({CENTER: Piece(SIDE_A, king=True), "MI2": SIDE_B})
    assert legal_jumps_from(state, SIDE_A, CENTER) == [Jump(CENTER, "MI2", "MO2")]


def test_king_captures_only_first_enemy_per_direction(make_state):
    state = make_state({CENTER: Piece(SIDE_A, king=True), "I2": SIDE_B, "MO2": SIDE_B})
    assert legal_jumps_from(state, SIDE_A, CENTER) == [Jump(CENTER, "I2", "MI2")]


def test_king_capture_blocked_by_occupied_landing_or_ally(make_state):
    blocked = make_state({CENTER: Piece(SIDE_A, king=True), "I2": SIDE_B, "MI2": SIDE_B})
    assert legal_jumps_from(blocked, SIDE_A, CENTER) == []

    shielded = make_state({CENTER: Piece(SIDE_A, king=True), "I2": SIDE_A, "MI2": SIDE_B})
    assert legal_jumps_from(shielded, SIDE_A, CENTER) == []


def test_king_captures_in_both_directions_around_a_ring(make_state):
    state = make_state({"O0": Piece(SIDE_A, king=True), "O5": SIDE_B})
    assert set(legal_jumps_from(state, SIDE_A, "O0")) == {Jump("O0", "O5", "O6"), Jump("O0", "O5", "O4")}


def test_jumps_all_unions_every_piece(make_state):
    state = make_state({"O0": SIDE_A, "O1": SIDE_B, "MO5": SIDE_A, "MI5": SIDE_B})
    assert legal_jumps_all(state, SIDE_A) == [Jump("O0", "O1", "O2"), Jump("MO5", "MI5", "I5")]
