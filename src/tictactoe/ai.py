"""Full-depth minimax with alpha-beta pruning for 3x3 tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import math
import random

from .errors import NoAvailableMoves
from .game import (
    BOARD_SIZE,
    WINNING_LINES,
    Board,
    Player,
    apply_move,
    available_moves,
    is_full,
    other_player,
    winner,
)

# Terminal score is BASE_SCORE - depth: faster wins and slower losses score higher.
BASE_SCORE = 100

# Number of winning lines through each cell: center 4, corners 3, edges 2.
MOVE_PRIORITY = tuple(
    sum(1 for line in WINNING_LINES if cell in line) for cell in range(BOARD_SIZE)
)


def move_priority(move: int) -> int:
    return MOVE_PRIORITY[move]


def minimax(
    board: Board,
    depth: int,
    maximizing: bool,
    alpha: float,
    beta: float,
    maximizer: Player,
    minimizer: Player,
    prune: bool = True,
) -> float:
    """
    Score ``board`` from the maximizer's point of view.

    ``depth`` is the number of plies already played since the search root.
    With ``prune=False`` every branch is visited; the result is identical.
    """
    w = winner(board)
    if w == maximizer:
        return BASE_SCORE - depth
    if w == minimizer:
        return -(BASE_SCORE - depth)
    if is_full(board):
        return 0

    if maximizing:
        value = -math.inf
        for move in available_moves(board):
            child = apply_move(board, move, maximizer)
            score = minimax(
                child, depth + 1, False, alpha, beta, maximizer, minimizer, prune
            )
            value = max(value, score)
            alpha = max(alpha, value)
            if prune and beta <= alpha:
                break
        return value

    value = math.inf
    for move in available_moves(board):
        child = apply_move(board, move, minimizer)
        score = minimax(
            child, depth + 1, True, alpha, beta, maximizer, minimizer, prune
        )
        value = min(value, score)
        beta = min(beta, value)
        if prune and beta <= alpha:
            break
    return value


def score_moves(
    board: Board, maximizer: Player, minimizer: Player, prune: bool = True
) -> Dict[int, float]:
    """Exact minimax score of every legal move for ``maximizer``."""
    if winner(board) is not None:
        raise NoAvailableMoves("Game already finished")
    moves = available_moves(board)
    if not moves:
        raise NoAvailableMoves("No available moves")

    # Each root move gets a full window so its score is exact, not a bound.
    return {
        move: minimax(
            apply_move(board, move, maximizer),
            1,
            False,
            -math.inf,
            math.inf,
            maximizer,
            minimizer,
            prune,
        )
        for move in moves
    }


def best_move(board: Board, maximizer: Player, minimizer: Player) -> int:
    """Optimal move for ``maximizer``; ties go to center, then corners, then edges."""
    scores = score_moves(board, maximizer, minimizer)
    return max(scores, key=lambda m: (scores[m], move_priority(m), -m))


def random_move(board: Board, rng: Optional[random.Random] = None) -> int:
    moves = available_moves(board)
    if not moves:
        raise NoAvailableMoves("No available moves")
    return (rng or random).choice(moves)


@dataclass
class MinimaxAI:
    """Perfect player for one mark.

      - MinimaxAI(player="O")
      - choose(board) -> cell index
    """

    player: Player
    opponent: Optional[Player] = None

    def __post_init__(self) -> None:
        if self.opponent is None:
            self.opponent = other_player(self.player)

    def choose(self, board: Board) -> int:
        return best_move(board, self.player, self.opponent)
