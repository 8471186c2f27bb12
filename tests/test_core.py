from __future__ import annotations

import random

import numpy as np
import pytest

from block_puzzle_engine.game import (
    DEFAULT_TEMPLATES,
    BlockPuzzleEngine,
    ConfigurationError,
    GameConfig,
    GameGrid,
    PieceCatalog,
    WeightClass,
    as_shape,
    can_place_any,
)
from conftest import brute_can_place, make_piece


def test_new_session_deals_three_pieces(session):
    assert [p.id for p in session.offer] == [0, 1, 2]
    assert len({p.color for p in session.offer}) == 3
    assert session.score == 0
    assert not session.over
    assert session.grid.filled_count == 0
    assert session.stats.offers_dealt == 1


def test_place_line_without_clear(engine, session):
    session.offer = [make_piece([[1, 1, 1, 1, 1]])]
    outcome = engine.try_place(session, 0, 0, 0)
    assert outcome.accepted
    assert outcome.lines_cleared == 0
    assert outcome.points_awarded == 0
    assert outcome.cleared_cells == ()
    for col in range(5):
        assert not session.grid.is_empty(0, col)
    assert session.grid.is_empty(0, 5)
    assert session.score == 0


def test_completing_row_scores_100(engine, session):
    for col in range(9):
        session.grid.place(0, col, as_shape([[1]]), "#FFD700")
    session.offer = [make_piece([[1]])]
    outcome = engine.try_place(session, 0, 0, 9)
    assert outcome.accepted
    assert outcome.lines_cleared == 1
    assert outcome.points_awarded == 100
    assert outcome.cleared_cells == tuple(range(10))
    assert not session.grid.cells[0].any()
    assert session.score == 100
    assert session.high_score == 100
    assert engine.high_score == 100


def test_row_and_column_in_one_commit(engine, session):
    for i in range(10):
        if i != 4:
            session.grid.place(4, i, as_shape([[1]]), "#FFD700")
            session.grid.place(i, 4, as_shape([[1]]), "#FFD700")
    session.offer = [make_piece([[1]])]
    outcome = engine.try_place(session, 0, 4, 4)
    assert outcome.lines_cleared == 2
    assert outcome.points_awarded == 400
    assert len(outcome.cleared_cells) == 19
    assert session.grid.filled_count == 0


@pytest.mark.parametrize(
    "piece_id, row, col",
    [
        (0, 9, 9),  # runs off the board
        (0, -1, 0),
        (1, 0, 0),  # overlaps the existing block
        (7, 5, 5),  # no such piece
    ],
)
def test_rejected_placement_changes_nothing(engine, session, piece_id, row, col):
    session.grid.place(0, 0, as_shape([[1]]), "#4169E1")
    session.offer = [
        make_piece([[1, 1], [1, 1]], piece_id=0),
        make_piece([[1]], piece_id=1, color="#50C878"),
    ]
    cells_before = session.grid.cells.copy()
    colors_before = session.grid.colors.copy()
    offer_before = list(session.offer)
    stats_before = (session.stats.pieces_placed, session.stats.offers_dealt)

    outcome = engine.try_place(session, piece_id, row, col)

    assert not outcome.accepted
    assert outcome.points_awarded == 0
    assert np.array_equal(session.grid.cells, cells_before)
    assert (session.grid.colors == colors_before).all()
    assert session.offer == offer_before
    assert session.score == 0
    assert (session.stats.pieces_placed, session.stats.offers_dealt) == stats_before


def test_placed_piece_leaves_offer(engine, session):
    session.offer = [make_piece([[1]], piece_id=0), make_piece([[1]], piece_id=1, color="#50C878")]
    assert engine.try_place(session, 1, 3, 3).accepted
    assert [p.id for p in session.offer] == [0]
    assert not engine.try_place(session, 1, 4, 4).accepted


def test_empty_offer_is_refilled(engine, session):
    session.offer = [make_piece([[1]])]
    engine.try_place(session, 0, 0, 0)
    assert [p.id for p in session.offer] == [0, 1, 2]
    assert session.stats.offers_dealt == 2
    assert not session.over


def test_empty_offer_waits_without_refill():
    engine = BlockPuzzleEngine(GameConfig(random_seed=3, refill_when_empty=False))
    session = engine.new_session()
    session.offer = [make_piece([[1]])]
    outcome = engine.try_place(session, 0, 0, 0)
    assert outcome.accepted
    assert session.offer == []
    assert not session.over
    assert engine.is_over(session)
    engine.offer_pieces(session)
    assert len(session.offer) == 3
    assert not session.over


def test_isolated_gaps_end_the_game():
    grid = GameGrid(10)
    grid.cells[:] = True
    grid.cells[::2, ::2] = False
    pieces = [
        make_piece([[1, 1]], piece_id=0),
        make_piece([[1], [1]], piece_id=1),
        make_piece([[1, 1], [1, 0], [1, 0]], piece_id=2),
    ]
    assert not can_place_any(pieces, grid)
    assert can_place_any(pieces + [make_piece([[1]], piece_id=3)], grid)


def test_single_gap_fits_monomino_only():
    grid = GameGrid(10)
    grid.cells[:] = True
    grid.cells[6, 2] = False
    assert can_place_any([make_piece([[1]])], grid)
    assert not can_place_any([make_piece([[1, 1]])], grid)


def test_empty_offer_cannot_place(grid):
    assert not can_place_any([], grid)


def test_can_place_any_matches_exhaustive_scan():
    rng = np.random.default_rng(5)
    pieces = [make_piece(rows, piece_id=i) for i, rows in enumerate(DEFAULT_TEMPLATES)]
    grid = GameGrid(10)
    for density in (0.3, 0.6, 0.8, 0.9, 0.97):
        for _ in range(10):
            grid.cells[:] = rng.random((10, 10)) < density
            for piece in pieces:
                expected = any(
                    brute_can_place(grid.cells, r, c, piece.shape)
                    for r in range(10) for c in range(10)
                )
                assert can_place_any([piece], grid) == expected


def test_game_over_after_deal_and_rejects_moves():
    catalog = PieceCatalog(
        templates=[[[1, 1]]],
        weight_classes=[WeightClass("only", (0,), 1)],
        rng=random.Random(1),
    )
    engine = BlockPuzzleEngine(GameConfig(random_seed=1), catalog=catalog)
    session = engine.new_session()
    session.grid.cells[:] = True
    session.grid.cells[0, 0] = False
    engine.offer_pieces(session)
    assert session.over
    outcome = engine.try_place(session, 0, 0, 0)
    assert not outcome.accepted
    assert outcome.game_over


def test_placement_that_leaves_no_move_reports_game_over(engine, session):
    # Gaps on every third diagonal: no two gaps touch and no line is full
    rows, cols = np.indices((10, 10))
    session.grid.cells[:] = (rows + cols) % 3 != 0
    session.offer = [
        make_piece([[1]], piece_id=0),
        make_piece([[1, 1]], piece_id=1, color="#50C878"),
    ]
    assert not session.grid.full_rows() and not session.grid.full_cols()

    outcome = engine.try_place(session, 0, 0, 0)
    assert outcome.accepted
    assert outcome.lines_cleared == 0
    assert outcome.game_over
    assert session.over
    assert engine.is_over(session)


def test_restart_keeps_high_score(engine, session):
    for col in range(9):
        session.grid.place(0, col, as_shape([[1]]), "#FFD700")
    session.offer = [make_piece([[1]])]
    engine.try_place(session, 0, 0, 9)
    session.grid.place(5, 5, as_shape([[1]]), "#FFD700")
    session.over = True

    engine.restart(session)
    assert session.score == 0
    assert session.high_score == 100
    assert not session.over
    assert session.grid.filled_count == 0
    assert session.stats.pieces_placed == 0
    assert len(session.offer) == 3

    fresh = engine.new_session()
    assert fresh.high_score == 100
    assert fresh.score == 0


def test_seeded_engines_deal_identically():
    first = BlockPuzzleEngine(GameConfig(random_seed=7)).new_session()
    second = BlockPuzzleEngine(GameConfig(random_seed=7)).new_session()
    assert [(p.template_index, p.color) for p in first.offer] == [
        (p.template_index, p.color) for p in second.offer
    ]


def test_valid_actions_are_accepted(engine, session):
    actions = engine.get_valid_actions(session)
    assert actions
    piece_id, row, col = actions[-1]
    assert engine.try_place(session, piece_id, row, col).accepted


def test_state_snapshot(engine, session):
    state = session.get_state()
    assert state["grid"].shape == (10, 10)
    assert state["pieces_remaining"] == 3
    assert not state["game_over"]
    state["pieces"][0]["shape"][:] = 0
    assert session.offer[0].shape.any()


@pytest.mark.parametrize("field", ["grid_size", "pieces_per_set", "history_size", "preview_size"])
def test_invalid_config_refused(field):
    with pytest.raises(ConfigurationError):
        BlockPuzzleEngine(GameConfig(**{field: 0}))


@pytest.mark.parametrize("row, col", [(2**70, 0), (0, -2**70), (-2**64, 2**64)])
def test_try_place_rejects_huge_coordinates(engine, session, row, col):
    session.offer = [make_piece([[1]])]
    outcome = engine.try_place(session, 0, row, col)
    assert not outcome.accepted
    assert session.grid.filled_count == 0
    assert [p.id for p in session.offer] == [0]


def test_restart_brings_engine_high_score_to_older_session(engine):
    first = engine.new_session()
    second = engine.new_session()
    for col in range(9):
        first.grid.place(0, col, as_shape([[1]]), "#FFD700")
    first.offer = [make_piece([[1]])]
    assert engine.try_place(first, 0, 0, 9).points_awarded == 100
    assert second.high_score == 0

    engine.restart(second)
    assert second.high_score == 100
    assert second.score == 0
    assert engine.high_score == 100
