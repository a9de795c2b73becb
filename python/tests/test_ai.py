import itertools
import random
import time

import pytest

from wheel_checkers.ai import (
    PROFILES,
    Difficulty,
    SearchAgent,
    order_moves,
    search,
    select_move,
)
from wheel_checkers.game.board import SIDE_A, SIDE_B, Jump, Piece, Step
from wheel_checkers.game.rules import apply_move, legal_moves
from wheel_checkers.topology import CENTER


# Side A's lone piece must not step next to B on O3, or it gets captured
TRAP_LAYOUT = {"O1": SIDE_A, "O3": SIDE_B, "I9": SIDE_B}


def _ticking_clock(step: float = 1.0):
    counter = itertools.count()
    return lambda: next(counter) * step


def test_difficulty_parse():
    assert Difficulty.parse("HARD") is Difficulty.HARD
    assert Difficulty.parse(Difficulty.EASY) is Difficulty.EASY
    with pytest.raises(ValueError):
        Difficulty.parse("insane")


def test_profiles_keep_thinking_window_above_budget():
    assert PROFILES[Difficulty.MID].depth == 1
    assert PROFILES[Difficulty.MID].max_candidates == 6
    assert PROFILES[Difficulty.HARD].depth == 2
    assert PROFILES[Difficulty.HARD].max_candidates == 8
    for profile in PROFILES.values():
        assert profile.think_window >= profile.time_budget


@pytest.mark.parametrize("difficulty", ["easy", "mid", "hard"])
def test_select_move_returns_a_legal_move(opening, difficulty):
    move = select_move(opening, difficulty, SIDE_A, rng=random.Random(3))
    assert move in legal_moves(opening)


def test_select_move_for_side_not_on_move_returns_none(opening):
    assert select_move(opening, "hard", SIDE_B) is None


def test_select_move_on_finished_game_returns_none(make_state):
    state = make_state({"O0": SIDE_A}, turn=SIDE_B)
    assert select_move(state, "mid", SIDE_B) is None


def test_easy_plays_a_capture_when_one_exists(make_state):
    state = make_state({"O0": SIDE_A, "O1": SIDE_B, "MO5": SIDE_A, "I9": SIDE_B})
    for seed in range(5):
        assert select_move(state, "easy", SIDE_A, rng=random.Random(seed)) == Jump("O0", "O1", "O2")


@pytest.mark.parametrize("difficulty", ["mid", "hard"])
def test_search_avoids_stepping_into_a_capture(make_state, difficulty):
    state = make_state(TRAP_LAYOUT)
    move = select_move(state, difficulty, SIDE_A)
    assert move in legal_moves(state)
    assert move != Step("O1", "O2")


def test_search_reports_statistics(make_state):
    result = search(make_state(TRAP_LAYOUT), SIDE_A, PROFILES[Difficulty.HARD])
    assert result.move is not None
    assert result.nodes > 0
    assert not result.timed_out


def test_search_falls_back_to_first_candidate_when_time_runs_out(opening):
    result = search(opening, SIDE_A, PROFILES[Difficulty.HARD], clock=_ticking_clock())
    assert result.timed_out
    assert result.move == legal_moves(opening)[0]


def test_expired_deadline_still_returns_a_move(opening):
    move = select_move(opening, "hard", SIDE_A, deadline=time.monotonic() - 1.0)
    assert move in legal_moves(opening)


def test_hard_search_respects_deadline(opening):
    # B now has to answer with a capture through the center
    state = apply_move(opening, Step("I0", CENTER))

    budget = 0.25
    started = time.monotonic()
    move = select_move(state, "hard", state.turn, deadline=started + budget)
    elapsed = time.monotonic() - started
    assert move in legal_moves(state)
    assert elapsed < budget + 1.0


def test_order_moves_puts_captures_then_promotions_first(make_state):
    state = make_state({"O0": SIDE_A, "O1": SIDE_B, "I4": SIDE_A, "MO8": SIDE_A, "MI8": Piece(SIDE_B, king=True)})
    plain = Step("O0", "O11")
    promote = Step("I4", CENTER)
    capture = Jump("O0", "O1", "O2")
    capture_king = Jump("MO8", "MI8", "I8")
    assert order_moves(state, [plain, promote, capture, capture_king]) == [capture_king, capture, promote, plain]


def test_search_agent_wraps_select_move(opening):
    agent = SearchAgent(SIDE_A, "mid", rng=random.Random(0))
    assert agent.description.startswith("Minimax(mid")
    assert SearchAgent(SIDE_B, "easy").description == "Random(easy)"
    assert agent.choose_move(opening) in legal_moves(opening)
