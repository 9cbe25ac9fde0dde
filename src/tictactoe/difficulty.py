"""Difficulty levels: how often the AI plays the optimal move over a random one."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional
import random

from .ai import best_move, random_move
from .game import Board, Player


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_CONFIG: Dict[Difficulty, Dict[str, Any]] = {
    Difficulty.EASY: {
        "optimal_chance": 0.3,
        "description": "AI makes optimal moves 30% of the time",
    },
    Difficulty.MEDIUM: {
        "optimal_chance": 0.7,
        "description": "AI makes optimal moves 70% of the time",
    },
    Difficulty.HARD: {
        "optimal_chance": 1.0,
        "description": "AI always makes optimal moves",
    },
}

DEFAULT_DIFFICULTY = Difficulty.MEDIUM


def optimal_chance(difficulty: Difficulty) -> float:
    return DIFFICULTY_CONFIG[Difficulty(difficulty)]["optimal_chance"]


def difficulty_description(difficulty: Difficulty) -> str:
    return DIFFICULTY_CONFIG[Difficulty(difficulty)]["description"]


def difficulty_levels() -> List[Difficulty]:
    return list(Difficulty)


def is_valid_difficulty(value: object) -> bool:
    return isinstance(value, str) and value in [d.value for d in Difficulty]


def parse_difficulty(value: object) -> Difficulty:
    """
    Map an exact lowercase name to a ``Difficulty``.

    Anything else (other casing, surrounding whitespace, unknown names,
    non-strings) falls back to ``Difficulty.MEDIUM`` rather than raising.
    """
    if is_valid_difficulty(value):
        return Difficulty(value)
    return DEFAULT_DIFFICULTY


def choose_move(
    board: Board,
    difficulty: Difficulty,
    ai_player: Player,
    human_player: Player,
    rng: Optional[random.Random] = None,
) -> int:
    """Pick the AI's move: optimal with probability ``optimal_chance``, else random."""
    if (rng or random).random() < optimal_chance(difficulty):
        return best_move(board, ai_player, human_player)
    return random_move(board, rng)
