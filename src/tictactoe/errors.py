"""Error kinds raised by the tic-tac-toe engine and session."""

from __future__ import annotations


class GameError(ValueError):
    """Base class for recoverable, caller-fault game errors."""

    kind = "GameError"


class InvalidMove(GameError):
    """Index out of range, cell occupied, or mark not a player."""

    kind = "InvalidMove"


class GameNotInProgress(GameError):
    kind = "GameNotInProgress"


class NotPlayerTurn(GameError):
    kind = "NotPlayerTurn"


class NotAiTurn(GameError):
    kind = "NotAiTurn"


class NoAvailableMoves(GameError):
    """Search or random selection was asked to move on a finished board."""

    kind = "NoAvailableMoves"
