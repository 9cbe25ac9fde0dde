"""Board model and rules for classic 3x3 tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .errors import InvalidMove

Player = str  # "X" or "O"
Board = Tuple[str, ...]

EMPTY = " "
X: Player = "X"
O: Player = "O"
PLAYERS: Tuple[Player, Player] = (X, O)

BOARD_DIMENSION = 3
BOARD_SIZE = BOARD_DIMENSION * BOARD_DIMENSION


def _generate_winning_lines(n: int) -> Tuple[Tuple[int, ...], ...]:
    """Rows, then columns, then the main and anti diagonals of an n x n grid."""
    rows = [tuple(r * n + c for c in range(n)) for r in range(n)]
    cols = [tuple(r * n + c for r in range(n)) for c in range(n)]
    main_diagonal = tuple(i * n + i for i in range(n))
    anti_diagonal = tuple(i * n + (n - 1 - i) for i in range(n))
    return tuple(rows + cols + [main_diagonal, anti_diagonal])


WINNING_LINES: Tuple[Tuple[int, ...], ...] = _generate_winning_lines(BOARD_DIMENSION)


# ---------- Board model ----------


def empty_board() -> Board:
    return (EMPTY,) * BOARD_SIZE


def make_board(cells: Iterable[Optional[str]]) -> Board:
    """
    Build a validated board from 9 cells.

    ``None`` and ``""`` are accepted as empty cells so that JSON-shaped boards
    can be loaded directly.
    """
    board: List[str] = []
    for cell in cells:
        if cell is None or cell == "":
            cell = EMPTY
        if cell not in (EMPTY, X, O):
            raise ValueError(f"Invalid cell value: {cell!r}")
        board.append(cell)
    if len(board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")
    return tuple(board)


def other_player(player: Player) -> Player:
    if player not in PLAYERS:
        raise ValueError(f"Unknown player {player!r}")
    return O if player == X else X


def is_valid_move(board: Board, index: int) -> bool:
    # bool is an int subclass; True/False are not cell indices
    if not isinstance(index, int) or isinstance(index, bool):
        return False
    return 0 <= index < BOARD_SIZE and board[index] == EMPTY


def apply_move(board: Board, index: int, player: Player) -> Board:
    """Return a new board with ``player`` placed at ``index``."""
    if player not in PLAYERS:
        raise InvalidMove(f"Unknown player {player!r}")
    if not is_valid_move(board, index):
        raise InvalidMove(f"Invalid move at index {index!r}")
    return board[:index] + (player,) + board[index + 1 :]


def available_moves(board: Board) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


# ---------- Rules ----------


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating a board: ``playing``, ``won`` (with winner) or ``draw``."""

    state: str
    winner: Optional[Player] = None

    def __post_init__(self) -> None:
        if self.state not in ("playing", "won", "draw"):
            raise ValueError(f"Unknown outcome state {self.state!r}")
        if (self.state == "won") != (self.winner in PLAYERS):
            raise ValueError("Outcome winner must be set exactly when state is 'won'")

    @classmethod
    def playing(cls) -> "Outcome":
        return cls("playing")

    @classmethod
    def won(cls, player: Player) -> "Outcome":
        return cls("won", player)

    @classmethod
    def draw(cls) -> "Outcome":
        return cls("draw")

    @property
    def is_over(self) -> bool:
        return self.state != "playing"


def winning_line(board: Board) -> Optional[Tuple[int, ...]]:
    """First complete line in ``WINNING_LINES`` order, or None."""
    for line in WINNING_LINES:
        v = board[line[0]]
        if v != EMPTY and all(board[i] == v for i in line):
            return line
    return None


def winner(board: Board) -> Optional[Player]:
    # If both marks complete a line (unreachable in legal play) the first
    # line in rows/columns/diagonals order decides.
    line = winning_line(board)
    return board[line[0]] if line else None


def is_full(board: Board) -> bool:
    return all(c != EMPTY for c in board)


def evaluate(board: Board) -> Outcome:
    w = winner(board)
    if w:
        return Outcome.won(w)
    if is_full(board):
        return Outcome.draw()
    return Outcome.playing()
