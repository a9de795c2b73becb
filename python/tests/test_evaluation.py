import pytest

from wheel_checkers.evaluation import Weights, evaluate, material
from wheel_checkers.game.board import SIDE_A, SIDE_B, Piece
from wheel_checkers.topology import CENTER


def test_opening_is_balanced(opening):
    assert evaluate(opening, SIDE_A) == 0.0
    assert evaluate(opening, SIDE_B) == 0.0


def test_material_counts_kings_triple(make_state):
    state = make_state({"O0": SIDE_A, "O4": Piece(SIDE_A, king=True), "O8": SIDE_B})
    assert material(state, SIDE_A) == pytest.approx(3.0)
    assert material(state, SIDE_B) == pytest.approx(-3.0)


def test_capture_bonus_only_for_side_on_move(make_state):
    state = make_state({"O0": SIDE_A, "O1": SIDE_B, "MO5": SIDE_B}, turn=SIDE_A)
    # material 1 - 2, plus one available capture
    assert evaluate(state, SIDE_A) == pytest.approx(-0.5)
    assert evaluate(state, SIDE_B) == pytest.approx(1.0)


def test_center_bonus(make_state):
    state = make_state({CENTER: SIDE_A, "O6": SIDE_B}, turn=SIDE_B)
    assert evaluate(state, SIDE_A) == pytest.approx(0.3)
    assert evaluate(state, SIDE_B) == pytest.approx(0.0)


def test_custom_weights(make_state):
    state = make_state({CENTER: Piece(SIDE_A, king=True), "O6": SIDE_B}, turn=SIDE_B)
    weights = Weights(man=2.0, king=5.0, capture=0.0, center=1.0)
    assert evaluate(state, SIDE_A, weights) == pytest.approx(4.0)
