from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""
    
    # Groq (OpenAI-compatible) chat completions
    GROQ_API_KEY: str = ""
    GROQ_API_URL: str = "https://api.groq.com/openai/v1"
    GROQ_MODEL: str = "llama-3.1-8b-instant"
    GROQ_TEMPERATURE: float = 0.8
    GROQ_MAX_TOKENS: int = 2000
    GROQ_TIMEOUT_SEC: Optional[float] = None  # None waits for the model indefinitely
    
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./geohistory.db"
    
    # Game Configuration
    ROUNDS_PER_GAME: int = 3
    INITIAL_PIN_MIN_KM: float = 100.0
    INITIAL_PIN_MAX_KM: float = 800.0
    NEXT_PIN_MIN_KM: float = 300.0
    NEXT_PIN_MAX_KM: float = 800.0
    
    # Leaderboard
    LEADERBOARD_SLOT: str = "geoHistoryHighScores"
    LEADERBOARD_SIZE: int = 10
    PLAYER_NAME_MAX_LENGTH: int = 20
    
    # Games kept in memory; the least recently used one is dropped past this
    MAX_ACTIVE_GAMES: int = 1000
    
    # Logging
    LOG_LEVEL: str = "INFO"
    
    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
