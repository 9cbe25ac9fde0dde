"""Turn sequencing, configuration and running statistics for a human-vs-AI game."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Union
import random

from .difficulty import DEFAULT_DIFFICULTY, Difficulty, choose_move, parse_difficulty
from .errors import GameNotInProgress, InvalidMove, NotAiTurn, NotPlayerTurn
from .game import (
    O,
    PLAYERS,
    X,
    Board,
    Outcome,
    Player,
    apply_move,
    available_moves,
    empty_board,
    evaluate,
    is_valid_move,
    make_board,
    other_player,
)


@dataclass(frozen=True)
class GameConfig:
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    human_mark: Player = X
    ai_mark: Player = O

    def __post_init__(self) -> None:
        if self.human_mark not in PLAYERS or self.ai_mark not in PLAYERS:
            raise ValueError("Marks must be 'X' or 'O'")
        if self.human_mark == self.ai_mark:
            raise ValueError("Human and AI marks must differ")
        # Accept plain strings, store the enum.
        object.__setattr__(self, "difficulty", Difficulty(self.difficulty))


@dataclass(frozen=True)
class GameStats:
    human_wins: int = 0
    ai_wins: int = 0
    draws: int = 0

    def record(self, outcome: Outcome, config: GameConfig) -> "GameStats":
        """Counters after ``outcome``; unchanged while the game is still playing."""
        if outcome.state == "draw":
            return replace(self, draws=self.draws + 1)
        if outcome.winner == config.human_mark:
            return replace(self, human_wins=self.human_wins + 1)
        if outcome.winner == config.ai_mark:
            return replace(self, ai_wins=self.ai_wins + 1)
        return self


@dataclass(frozen=True)
class MoveResult:
    new_board: Board
    outcome: Outcome
    is_game_over: bool


@dataclass(frozen=True)
class SessionState:
    board: Board
    current_turn: Player
    outcome: Outcome
    config: GameConfig
    stats: GameStats


class GameSession:
    """
    One human-vs-AI game plus statistics that survive ``new_game``.

    State is only changed through the command methods. Everything handed out
    (tuple boards, frozen dataclasses) is immutable, so callers can never
    reach the live state through a snapshot. The session is not thread-safe;
    callers serialize access (see ``tictactoe.api``).
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config or GameConfig()
        self._rng = rng
        self._stats = GameStats()
        self.new_game()

    # ---- queries ----

    @property
    def board(self) -> Board:
        return self._board

    @property
    def current_turn(self) -> Player:
        return self._current_turn

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def stats(self) -> GameStats:
        return self._stats

    def get_state(self) -> SessionState:
        return SessionState(
            board=self._board,
            current_turn=self._current_turn,
            outcome=self._outcome,
            config=self._config,
            stats=self._stats,
        )

    def is_player_turn(self) -> bool:
        return (
            not self._outcome.is_over
            and self._current_turn == self._config.human_mark
        )

    def is_ai_turn(self) -> bool:
        return (
            not self._outcome.is_over and self._current_turn == self._config.ai_mark
        )

    def available_moves(self) -> List[int]:
        return available_moves(self._board)

    def is_valid_move(self, index: int) -> bool:
        return is_valid_move(self._board, index)

    # ---- commands ----

    def player_move(self, index: int) -> MoveResult:
        if self._outcome.is_over:
            raise GameNotInProgress("Game is not in progress")
        if self._current_turn != self._config.human_mark:
            raise NotPlayerTurn("Not player turn")
        if not is_valid_move(self._board, index):
            raise InvalidMove(f"Invalid move at index {index!r}")
        return self._commit(index, self._config.human_mark)

    def ai_move(self) -> MoveResult:
        if self._outcome.is_over:
            raise GameNotInProgress("Game is not in progress")
        if self._current_turn != self._config.ai_mark:
            raise NotAiTurn("Not AI turn")
        index = choose_move(
            self._board,
            self._config.difficulty,
            self._config.ai_mark,
            self._config.human_mark,
            self._rng,
        )
        return self._commit(index, self._config.ai_mark)

    def new_game(self) -> MoveResult:
        self._board = empty_board()
        self._current_turn = self._config.human_mark
        self._outcome = Outcome.playing()
        return self._result()

    def change_difficulty(self, difficulty: Union[Difficulty, str]) -> MoveResult:
        self._config = replace(self._config, difficulty=parse_difficulty(difficulty))
        return self.new_game()

    def update_config(
        self,
        difficulty: Union[Difficulty, str, None] = None,
        human_mark: Optional[Player] = None,
        ai_mark: Optional[Player] = None,
    ) -> MoveResult:
        """Replace config fields, then start a new game. One mark implies the other."""
        if human_mark is not None and ai_mark is None:
            ai_mark = other_player(human_mark)
        elif ai_mark is not None and human_mark is None:
            human_mark = other_player(ai_mark)
        self._config = GameConfig(
            difficulty=(
                self._config.difficulty
                if difficulty is None
                else parse_difficulty(difficulty)
            ),
            human_mark=human_mark or self._config.human_mark,
            ai_mark=ai_mark or self._config.ai_mark,
        )
        return self.new_game()

    def reset_stats(self) -> MoveResult:
        self._stats = GameStats()
        return self._result()

    # ---- testing hook ----

    def load_position(
        self, cells: Iterable[Optional[str]], current_turn: Optional[Player] = None
    ) -> None:
        """
        Seed an arbitrary position, for tests and tooling only.

        The outcome is re-derived from the board; statistics are not touched.
        """
        board = make_board(cells)
        turn = self._config.human_mark if current_turn is None else current_turn
        if turn not in PLAYERS:
            raise ValueError(f"Unknown player {turn!r}")
        self._board = board
        self._current_turn = turn
        self._outcome = evaluate(board)

    # ---- helpers ----

    def _commit(self, index: int, player: Player) -> MoveResult:
        # Compute everything first so a failure leaves the session untouched.
        board = apply_move(self._board, index, player)
        outcome = evaluate(board)
        stats = self._stats.record(outcome, self._config)
        next_turn = other_player(player)

        self._board = board
        self._outcome = outcome
        self._stats = stats
        self._current_turn = next_turn
        return self._result()

    def _result(self) -> MoveResult:
        return MoveResult(
            new_board=self._board,
            outcome=self._outcome,
            is_game_over=self._outcome.is_over,
        )
