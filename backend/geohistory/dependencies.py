import logging
from typing import Dict
from uuid import uuid4

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database.session import get_db
from .services.game import GameSession
from .services.leaderboard import LeaderboardStore
from .services.round_provider import GroqRoundProvider

logger = logging.getLogger(__name__)

# In-memory game storage, one entry per player's game, least recently used first
games: Dict[str, GameSession] = {}


def register_game(game: GameSession) -> str:
    """Store a new game, dropping the least recently used ones past the cap."""
    max_games = get_settings().MAX_ACTIVE_GAMES
    while games and len(games) >= max_games:
        stale_id = next(iter(games))
        games.pop(stale_id)
        logger.info("Evicted idle game %s", stale_id)

    game_id = uuid4().hex
    games[game_id] = game
    return game_id


def get_round_provider() -> GroqRoundProvider:
    """Build the round provider from current settings."""
    settings = get_settings()
    return GroqRoundProvider(
        api_url=settings.GROQ_API_URL,
        api_key=settings.GROQ_API_KEY,
        model=settings.GROQ_MODEL,
        temperature=settings.GROQ_TEMPERATURE,
        max_tokens=settings.GROQ_MAX_TOKENS,
        timeout=settings.GROQ_TIMEOUT_SEC,
        total_rounds=settings.ROUNDS_PER_GAME
    )


def get_game(game_id: str) -> GameSession:
    """Look up a game by id."""
    game = games.pop(game_id, None)
    if game is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Game not found. Start a new game."
        )
    # Re-insert so the dict stays ordered by last use
    games[game_id] = game
    return game


def get_leaderboard(db: AsyncSession = Depends(get_db)) -> LeaderboardStore:
    """Leaderboard store bound to the request's database session."""
    settings = get_settings()
    return LeaderboardStore(db, slot=settings.LEADERBOARD_SLOT, size=settings.LEADERBOARD_SIZE)
