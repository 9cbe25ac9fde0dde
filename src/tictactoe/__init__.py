"""Tic-tac-toe engine with a minimax AI opponent and a JSON web API."""

from .ai import MinimaxAI, best_move
from .difficulty import Difficulty, choose_move, parse_difficulty
from .game import Outcome, evaluate
from .session import GameConfig, GameSession, GameStats

__all__ = [
    "Difficulty",
    "GameConfig",
    "GameSession",
    "GameStats",
    "MinimaxAI",
    "Outcome",
    "best_move",
    "choose_move",
    "evaluate",
    "parse_difficulty",
]
