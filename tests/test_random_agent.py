from __future__ import annotations

import random

from block_puzzle_engine.agents import play_random_game, run_random
from block_puzzle_engine.agents.random_agent import main
from block_puzzle_engine.game import BlockPuzzleEngine, GameConfig


def test_random_game_runs_to_game_over():
    engine = BlockPuzzleEngine(GameConfig(random_seed=12))
    session = engine.new_session()
    stats = play_random_game(engine, session, random.Random(12))
    assert session.over
    assert stats["pieces_placed"] > 0
    assert stats["final_score"] % 100 == 0
    assert engine.high_score == session.high_score


def test_run_random_reports_each_game(capsys):
    results = run_random(games=2, seed=4)
    out = capsys.readouterr().out
    assert len(results) == 2
    assert "game 1/2" in out and "game 2/2" in out
    assert f"High score: {max(r['final_score'] for r in results)}" in out


def test_cli_shows_board(capsys):
    main(["--games", "1", "--seed", "9", "--show"])
    out = capsys.readouterr().out
    assert "High score:" in out
    assert any(ch in out for ch in "█·")
