import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .database.session import init_db, close_db
from .routers import game, leaderboard, rounds
from .config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle events for the application."""
    # Startup: Initialize database
    await init_db(get_settings().DATABASE_URL)
    yield
    # Shutdown: Release pooled connections
    await close_db()


# Create FastAPI application
app = FastAPI(
    title="Geo History Guesser",
    description="Pin historical events on the map and answer follow-up questions about them",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(rounds.router, prefix="/api")
app.include_router(game.router, prefix="/api")
app.include_router(leaderboard.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to Geo History Guesser API",
        "docs": "/docs",
        "health": "ok"
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
