"""Tests for the minimax AI."""

from functools import lru_cache
import math
import random

import pytest

from tictactoe.ai import (
    BASE_SCORE,
    MinimaxAI,
    best_move,
    minimax,
    move_priority,
    random_move,
    score_moves,
)
from tictactoe.errors import NoAvailableMoves
from tictactoe.game import (
    apply_move,
    available_moves,
    empty_board,
    evaluate,
    is_full,
    make_board,
    winner,
)

_ = None


def _reachable_positions():
    """Every non-terminal position reachable from the empty board, X first."""
    seen = set()
    stack = [(empty_board(), "X")]
    while stack:
        board, to_move = stack.pop()
        if (board, to_move) in seen or evaluate(board).is_over:
            continue
        seen.add((board, to_move))
        nxt = "O" if to_move == "X" else "X"
        for move in available_moves(board):
            stack.append((apply_move(board, move, to_move), nxt))
    return seen


@lru_cache(maxsize=None)
def _exhaustive(board, depth, maximizing, maximizer, minimizer):
    w = winner(board)
    if w == maximizer:
        return BASE_SCORE - depth
    if w == minimizer:
        return -(BASE_SCORE - depth)
    if is_full(board):
        return 0
    mover = maximizer if maximizing else minimizer
    scores = [
        _exhaustive(
            apply_move(board, m, mover), depth + 1, not maximizing, maximizer, minimizer
        )
        for m in available_moves(board)
    ]
    return max(scores) if maximizing else min(scores)


def test_move_priority_prefers_center_then_corners():
    assert move_priority(4) == 4
    assert {move_priority(i) for i in (0, 2, 6, 8)} == {3}
    assert {move_priority(i) for i in (1, 3, 5, 7)} == {2}


@pytest.mark.parametrize("player,opponent", [("X", "O"), ("O", "X")])
def test_empty_board_takes_center(player, opponent):
    assert best_move(empty_board(), player, opponent) == 4


def test_ai_takes_immediate_win():
    board = make_board(["X", "X", _, "O", "O", _, _, _, _])
    assert best_move(board, "X", "O") == 2


def test_ai_blocks_imminent_loss():
    board = make_board(["X", "X", _, "O", _, _, _, _, _])
    assert best_move(board, "O", "X") == 2


def test_ai_prefers_faster_win():
    # O completes the top row at 2; X is threatening both 2 and 5.
    board = make_board(["O", "O", _, "X", "X", _, "X", _, _])
    scores = score_moves(board, "O", "X")
    assert scores[2] == BASE_SCORE - 1
    assert best_move(board, "O", "X") == 2


def test_only_move_is_returned():
    board = make_board(["X", "O", "X", "X", "O", "O", "O", "X", _])
    assert best_move(board, "X", "O") == 8


def test_best_move_fails_without_moves():
    full = make_board(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
    with pytest.raises(NoAvailableMoves):
        best_move(full, "O", "X")
    won = make_board(["X", "X", "X", "O", "O", _, _, _, _])
    with pytest.raises(NoAvailableMoves):
        best_move(won, "O", "X")


def test_tie_break_is_center_then_corner_then_lowest_index():
    # Every reply to a corner opening that is not the center loses for O,
    # so the center must be chosen among drawing moves.
    board = make_board(["X", _, _, _, _, _, _, _, _])
    assert best_move(board, "O", "X") == 4
    # After X center, all corners draw and edges lose: lowest corner wins the tie.
    board = make_board([_, _, _, _, "X", _, _, _, _])
    assert best_move(board, "O", "X") == 0


def test_minimax_scores_terminal_positions():
    won = make_board(["X", "X", "X", "O", "O", _, _, _, _])
    assert minimax(won, 3, False, -math.inf, math.inf, "X", "O") == BASE_SCORE - 3
    assert minimax(won, 3, True, -math.inf, math.inf, "O", "X") == -(BASE_SCORE - 3)
    drawn = make_board(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
    assert minimax(drawn, 9, True, -math.inf, math.inf, "X", "O") == 0


def test_pruned_search_matches_exhaustive_for_all_reachable_positions():
    positions = _reachable_positions()
    assert len(positions) == 4520
    for board, to_move in positions:
        opponent = "O" if to_move == "X" else "X"
        pruned = score_moves(board, to_move, opponent)
        expected = {
            m: _exhaustive(apply_move(board, m, to_move), 1, False, to_move, opponent)
            for m in available_moves(board)
        }
        assert pruned == expected
        best = max(expected, key=lambda m: (expected[m], move_priority(m), -m))
        assert best_move(board, to_move, opponent) == best


def test_prune_flag_does_not_change_scores():
    board = make_board(["X", _, _, _, "O", _, _, _, _])
    assert score_moves(board, "X", "O", prune=False) == score_moves(board, "X", "O")


def test_random_move_is_legal():
    board = make_board(["X", "O", _, "X", _, "O", _, _, "X"])
    rng = random.Random(1234)
    for _i in range(50):
        assert random_move(board, rng) in available_moves(board)


def test_random_move_fails_on_full_board():
    full = make_board(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
    with pytest.raises(NoAvailableMoves):
        random_move(full)


def test_minimax_ai_object():
    ai = MinimaxAI(player="O")
    assert ai.opponent == "X"
    board = make_board(["X", "X", _, _, "O", _, _, _, _])
    assert ai.choose(board) == 2
