"""FastAPI JSON API that a browser or mobile shell drives a game through."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .difficulty import (
    DEFAULT_DIFFICULTY,
    difficulty_description,
    difficulty_levels,
    optimal_chance,
    parse_difficulty,
)
from .errors import GameError, InvalidMove
from .game import EMPTY, other_player, winning_line
from .session import GameConfig, GameSession

logger = logging.getLogger(__name__)


@dataclass
class HostedGame:
    """A session plus the bookkeeping needed to serve it over HTTP."""

    session: GameSession
    ai_pending: bool = False
    last_active: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


GAMES: Dict[str, HostedGame] = {}
GAMES_LOCK = threading.Lock()
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe against a minimax AI")

AI_THINK_DELAY: Tuple[float, float] = (0.3, 0.8)
GAME_TTL_SECONDS = 60 * 60  # 1 hour


@app.exception_handler(GameError)
def _handle_game_error(request: Request, exc: GameError) -> JSONResponse:
    status = 400 if isinstance(exc, InvalidMove) else 409
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.kind)
    return JSONResponse(
        status_code=status, content={"detail": str(exc), "error": exc.kind}
    )


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    difficulty: str = Field(
        default=DEFAULT_DIFFICULTY.value,
        description="easy, medium or hard; anything else means medium",
    )
    human_mark: Literal["X", "O"] = Field(default="X", alias="humanMark")


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    index: int = Field(ge=0, le=8)


class DifficultyRequest(BaseModel):
    difficulty: str


def _cleanup_games() -> None:
    """Drop games nobody has touched for ``GAME_TTL_SECONDS``."""

    now = time.time()
    with GAMES_LOCK:
        expired = [
            game_id
            for game_id, hosted in list(GAMES.items())
            if not hosted.ai_pending and now - hosted.last_active >= GAME_TTL_SECONDS
        ]
        for game_id in expired:
            GAMES.pop(game_id, None)
    if expired:
        logger.info("Expired %d idle game(s)", len(expired))


def _get_game(game_id: str) -> HostedGame:
    try:
        hosted = GAMES[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc
    hosted.last_active = time.time()
    return hosted


def _run_ai_turn(game_id: str) -> None:
    hosted = GAMES.get(game_id)
    if not hosted:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with hosted.lock:
        try:
            session = hosted.session
            if not session.is_ai_turn():
                return
            result = session.ai_move()
            logger.info(
                "Game %s: AI played, outcome %s", game_id, result.outcome.state
            )
        finally:
            hosted.ai_pending = False


def _schedule_ai_if_due(
    game_id: str, hosted: HostedGame, background_tasks: BackgroundTasks
) -> None:
    # Caller holds hosted.lock.
    if hosted.session.is_ai_turn() and not hosted.ai_pending:
        hosted.ai_pending = True
        background_tasks.add_task(_run_ai_turn, game_id)


def _serialize_game(game_id: str, hosted: HostedGame) -> Dict[str, object]:
    with hosted.lock:
        state = hosted.session.get_state()
        moves: List[int] = hosted.session.available_moves()
        ai_pending = hosted.ai_pending

    line = winning_line(state.board)
    return {
        "id": game_id,
        "board": ["" if c == EMPTY else c for c in state.board],
        "currentTurn": state.current_turn,
        "state": state.outcome.state,
        "winner": state.outcome.winner,
        "winningLine": list(line) if line else None,
        "isGameOver": state.outcome.is_over,
        "difficulty": state.config.difficulty.value,
        "humanMark": state.config.human_mark,
        "aiMark": state.config.ai_mark,
        "stats": {
            "humanWins": state.stats.human_wins,
            "aiWins": state.stats.ai_wins,
            "draws": state.stats.draws,
        },
        "availableMoves": moves if not state.outcome.is_over else [],
        "aiPending": ai_pending,
    }


@app.get("/api/difficulties")
def list_difficulties() -> List[Dict[str, object]]:
    return [
        {
            "name": level.value,
            "description": difficulty_description(level),
            "optimalChance": optimal_chance(level),
        }
        for level in difficulty_levels()
    ]


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    _cleanup_games()
    human = request.human_mark
    config = GameConfig(
        difficulty=parse_difficulty(request.difficulty),
        human_mark=human,
        ai_mark=other_player(human),
    )
    hosted = HostedGame(session=GameSession(config=config))
    game_id = uuid.uuid4().hex
    with GAMES_LOCK:
        GAMES[game_id] = hosted
    logger.info(
        "Game %s created (difficulty=%s, human=%s)",
        game_id,
        config.difficulty.value,
        config.human_mark,
    )
    return _serialize_game(game_id, hosted)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    return _serialize_game(game_id, _get_game(game_id))


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    hosted = _get_game(game_id)
    with hosted.lock:
        hosted.session.player_move(request.index)
        _schedule_ai_if_due(game_id, hosted, background_tasks)
    return _serialize_game(game_id, hosted)


@app.post("/api/game/{game_id}/new")
def new_game(game_id: str) -> Dict[str, object]:
    hosted = _get_game(game_id)
    with hosted.lock:
        hosted.session.new_game()
    return _serialize_game(game_id, hosted)


@app.post("/api/game/{game_id}/difficulty")
def change_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    hosted = _get_game(game_id)
    with hosted.lock:
        hosted.session.change_difficulty(request.difficulty)
    return _serialize_game(game_id, hosted)


@app.post("/api/game/{game_id}/stats/reset")
def reset_stats(game_id: str) -> Dict[str, object]:
    hosted = _get_game(game_id)
    with hosted.lock:
        hosted.session.reset_stats()
    return _serialize_game(game_id, hosted)
