from fastapi import APIRouter, Depends

from ..dependencies import get_leaderboard
from ..models.game import LeaderboardResponse
from ..services.leaderboard import LeaderboardStore

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def read_leaderboard(store: LeaderboardStore = Depends(get_leaderboard)):
    """Get the top scores leaderboard."""
    return LeaderboardResponse(entries=await store.load())
