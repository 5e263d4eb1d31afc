import math
import random

import pytest

from nerdle_solver.candidates import CandidateStore
from nerdle_solver.simulate import (
    GameResult,
    main,
    median_remaining_by_turn,
    realised_bits,
    simulate_game,
    summarize,
)

CLASSIC = [
    "1+2*3=7",
    "1+2*4=9",
    "2*3+1=7",
    "3*3-2=7",
    "9-2*1=7",
    "8-1*1=7",
    "4+5-2=7",
    "7*1+0=7",
    "6+3-2=7",
    "5+6-4=7",
    "6+5-4=7",
]


def _write(tmp_path, name, equations):
    path = tmp_path / name
    path.write_text("\n".join(equations) + "\n", encoding="utf-8")
    return str(path)


def test_every_secret_is_found():
    store = CandidateStore.load(CLASSIC)
    for secret in CLASSIC:
        result = simulate_game(secret=secret, store=store, sample_size=100, rng=random.Random(0), max_turns=len(CLASSIC))
        assert result.solved, result
        assert result.guesses[-1] == secret
        assert result.first_guess in CLASSIC
        # one filtered turn per guess that didn't win
        assert len(result.remaining) == result.turns - 1
        assert list(result.remaining) == sorted(result.remaining, reverse=True)
        assert all(n >= 1 for n in result.remaining)
        assert all(h <= 0 for h in result.information)


def test_singleton_universe_plays_the_forced_guess():
    store = CandidateStore.load(["1+1=2"])
    result = simulate_game(secret="1+1=2", store=store, sample_size=10, rng=random.Random(0), max_turns=6)
    assert result == GameResult("1+1=2", True, ("1+1=2",), (), (0.0,))
    assert result.turns == 1


def test_runs_out_of_turns():
    store = CandidateStore.load(CLASSIC)
    result = simulate_game(secret="6+5-4=7", store=store, sample_size=100, rng=random.Random(0), max_turns=0)
    assert not result.solved
    assert result.turns == 0
    assert result.first_guess == ""


def test_realised_bits():
    r = GameResult("x", True, ("a", "b", "c"), (4, 1), (-2.0, -2.0, 0.0))
    assert realised_bits(r, 16) == pytest.approx([2.0, 2.0])
    assert math.isclose(sum(realised_bits(r, 16)), math.log2(16))


def test_median_remaining_by_turn():
    results = [
        GameResult("a", True, ("g", "h", "a"), (5, 1), (-1.0, -1.0, 0.0)),
        GameResult("b", True, ("g", "b"), (3,), (-1.0, -1.0)),
        GameResult("c", True, ("c",), (), (-1.0,)),
    ]
    assert median_remaining_by_turn(results, 10) == [10.0, 4.0, 1.0]
    assert median_remaining_by_turn([], 10) == [10.0]


def test_summarize():
    results = [
        GameResult("1+1=2", True, ("1+1=2",), (), (-1.5,)),
        GameResult("2+1=3", True, ("1+1=2", "2+1=3"), (1,), (-1.5, 0.0)),
        GameResult("1+2=3", False, ("1+1=2",), (0,), (-1.5,)),
    ]
    text = summarize(results, universe=3, sample_size=1000)
    assert "Games: 3 over 3 equations, scoring up to 1000 guesses per turn" in text
    assert "Solved: 2 (66.67%)" in text
    assert "mean 1.500, median 1.5, worst 2" in text
    assert "Turn distribution: 1:1, 2:1" in text
    assert "Median options left after turn: 1:0.5" in text
    assert f"Opening guess: estimated 1.500 bits, realised {math.log2(3):.3f} bits" in text
    assert "Most common opener: 1+1=2 (3 / 3)" in text
    assert "1+2=3 (0 left)" in text
    assert summarize([], universe=3, sample_size=10) == "No results."


def test_main(tmp_path, capsys):
    path = _write(tmp_path, "classic.txt", CLASSIC)
    secrets = _write(tmp_path, "secrets.txt", ["1+2*3=7", "9-2*1=7", "9-9*1=0"])
    assert main([path, "--secrets", secrets, "--seed", "1", "--no-progress", "--max-turns", "11"]) == 0
    out = capsys.readouterr().out
    assert "Skipped 1 secrets not in the candidate list." in out
    assert "Games: 2 over 11 equations" in out
    assert "Solved: 2 (100.00%)" in out


def test_main_limit_and_shuffle(tmp_path, capsys):
    path = _write(tmp_path, "classic.txt", CLASSIC)
    assert main([path, "--limit", "4", "--shuffle", "--seed", "5", "--no-progress"]) == 0
    assert "Games: 4 over 11 equations" in capsys.readouterr().out


def test_main_bad_file(tmp_path, capsys):
    path = _write(tmp_path, "bad.txt", ["1+1=2", "12+1=13"])
    assert main([path, "--no-progress"]) == 2
    assert "line 2" in capsys.readouterr().err
