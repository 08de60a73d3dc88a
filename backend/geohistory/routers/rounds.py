from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from ..dependencies import get_round_provider
from ..models.game import (
    Category, Difficulty, GameRound, GenerateRoundRequest, OptionDescription
)
from ..services.round_provider import GroqRoundProvider, RoundGenerationError

router = APIRouter(tags=["Rounds"])


@router.get("/categories", response_model=List[OptionDescription])
async def list_categories():
    """List the historical periods a game can be played in."""
    return [OptionDescription(name=c.value, description=c.description) for c in Category]


@router.get("/difficulties", response_model=List[OptionDescription])
async def list_difficulties():
    """List the available difficulties."""
    return [OptionDescription(name=d.value, description=d.description) for d in Difficulty]


@router.post("/generate-round", response_model=GameRound)
async def generate_round(
    request: GenerateRoundRequest,
    provider: GroqRoundProvider = Depends(get_round_provider)
):
    """Generate a single round without starting a game."""
    try:
        return await provider.generate_round(request.category, request.difficulty, request.round_number)
    except RoundGenerationError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to generate game round"
        )
