import builtins

import pytest

from wheel_checkers import cli
from wheel_checkers.config import ENV_AI_SIDE, ENV_DIFFICULTY, ENV_TIMER


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (ENV_DIFFICULTY, ENV_TIMER, ENV_AI_SIDE):
        monkeypatch.delenv(name, raising=False)


def test_parser_defaults():
    args = cli.build_parser().parse_args([])
    assert args.mode == "human"
    assert args.difficulty is None
    assert args.opponent_difficulty == "easy"
    assert args.max_turns == 300


def test_parse_pair_accepts_loose_input():
    assert cli._parse_pair("i0 c") == ("I0", "C")
    assert cli._parse_pair("MO3->MI3") == ("MO3", "MI3")
    assert cli._parse_pair("X1 C") is None
    assert cli._parse_pair("I0") is None


def test_ai_vs_ai_runs_limited_match(capsys):
    assert cli.main(["--mode", "ai", "--difficulty", "easy", "--max-turns", "4"]) == 0
    out = capsys.readouterr().out
    assert "Game start!" in out
    assert "AI vs AI match complete." in out


def test_human_game_plays_a_move_then_quits(monkeypatch, capsys):
    answers = iter(["nonsense", "O0 O1", "i0 c", "q"])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(answers))
    assert cli.main(["--difficulty", "easy"]) == 0
    out = capsys.readouterr().out
    assert "Please enter two nodes" in out
    assert "That move is not legal here." in out
    assert "Moved I0 -> C." in out
    assert "AI plays" in out
    assert "Thanks for playing!" in out


def test_invalid_environment_exits_with_error(monkeypatch, capsys):
    monkeypatch.setenv(ENV_TIMER, "soon")
    assert cli.main(["--mode", "ai"]) == 2
    assert "Invalid settings" in capsys.readouterr().err
