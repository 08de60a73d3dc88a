import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from ..config import get_settings
from ..dependencies import games, get_game, get_leaderboard, get_round_provider, register_game
from ..models.game import (
    AnswerResultResponse, Coordinates, FollowUpResponse, GameStateResponse,
    HighScore, HighScoreRequest, HighScoreSubmitResponse, LocationPrompt,
    PinResultResponse, SelectCategoryRequest, SelectDifficultyRequest,
    SelectOptionRequest
)
from ..services.game import GameSession, InvalidActionError, Phase
from ..services.leaderboard import LeaderboardStore
from ..services.round_provider import GroqRoundProvider, RoundGenerationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/game", tags=["Game"])
settings = get_settings()


def build_state_response(game_id: str, game: GameSession) -> GameStateResponse:
    """Render a game for the player, hiding answers that are not yet revealed."""
    state = game.state
    game_round = game.current_round

    location_question = None
    if game_round is not None:
        location_question = LocationPrompt(question=game_round.location_question.question)

    pin_result = None
    if game.pin_result is not None:
        pin_result = PinResultResponse(
            distance_km=game.pin_result.distance_km,
            points=game.pin_result.points,
            answer=game.pin_result.answer,
            coordinates=game.pin_result.coordinates,
            score=state.score
        )

    follow_up = None
    if game.follow_up is not None:
        view = game.follow_up
        follow_up = FollowUpResponse(
            index=state.current_follow_up_index,
            question=view.question,
            options=view.options,
            selected=view.selected,
            revealed=view.revealed,
            correct_index=view.correct_index if view.revealed else None,
            is_correct=view.is_correct if view.revealed else None
        )

    return GameStateResponse(
        id=game_id,
        phase=game.phase.value,
        category=state.category,
        difficulty=state.difficulty,
        current_round=state.current_round,
        total_rounds=state.total_rounds,
        score=state.score,
        max_score=game.max_score,
        round_scores=list(state.round_scores),
        user_pin=state.user_pin,
        has_submitted_pin=state.has_submitted_pin,
        current_follow_up_index=state.current_follow_up_index,
        location_question=location_question,
        pin_result=pin_result,
        follow_up=follow_up,
        leaderboard_submitted=game.leaderboard_submitted,
        error=game.error
    )


def invalid_action(e: InvalidActionError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("", response_model=GameStateResponse, status_code=status.HTTP_201_CREATED)
async def create_game():
    """Start a new game at category selection."""
    game = GameSession(settings)
    game_id = register_game(game)
    return build_state_response(game_id, game)


@router.get("/{game_id}", response_model=GameStateResponse)
async def get_game_state(game_id: str, game: GameSession = Depends(get_game)):
    """Get the current state of a game."""
    return build_state_response(game_id, game)


@router.delete("/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_game(game_id: str, game: GameSession = Depends(get_game)):
    """Abandon a game."""
    games.pop(game_id, None)
    return None


@router.post("/{game_id}/category", response_model=GameStateResponse)
async def select_category(
    game_id: str,
    request: SelectCategoryRequest,
    game: GameSession = Depends(get_game)
):
    """Choose the historical period."""
    try:
        game.select_category(request.category)
    except InvalidActionError as e:
        raise invalid_action(e)
    return build_state_response(game_id, game)


@router.post("/{game_id}/back", response_model=GameStateResponse)
async def back_to_category(game_id: str, game: GameSession = Depends(get_game)):
    """Return from difficulty selection to category selection."""
    try:
        game.back_to_category()
    except InvalidActionError as e:
        raise invalid_action(e)
    return build_state_response(game_id, game)


@router.post("/{game_id}/difficulty", response_model=GameStateResponse)
async def select_difficulty(
    game_id: str,
    request: SelectDifficultyRequest,
    game: GameSession = Depends(get_game),
    provider: GroqRoundProvider = Depends(get_round_provider)
):
    """Choose the difficulty and generate all rounds."""
    try:
        await game.select_difficulty(request.difficulty, provider)
    except InvalidActionError as e:
        raise invalid_action(e)
    except RoundGenerationError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=game.error
        )
    return build_state_response(game_id, game)


@router.put("/{game_id}/pin", response_model=GameStateResponse)
async def move_pin(
    game_id: str,
    coordinates: Coordinates,
    game: GameSession = Depends(get_game)
):
    """Move the pending pin."""
    try:
        game.move_pin(coordinates)
    except InvalidActionError as e:
        raise invalid_action(e)
    return build_state_response(game_id, game)


@router.post("/{game_id}/pin/submit", response_model=PinResultResponse)
async def submit_pin(game_id: str, game: GameSession = Depends(get_game)):
    """Submit the pin for the current round."""
    try:
        result = game.submit_pin()
    except InvalidActionError as e:
        raise invalid_action(e)

    return PinResultResponse(
        distance_km=result.distance_km,
        points=result.points,
        answer=result.answer,
        coordinates=result.coordinates,
        score=game.state.score
    )


@router.post("/{game_id}/answer/select", response_model=GameStateResponse)
async def select_option(
    game_id: str,
    request: SelectOptionRequest,
    game: GameSession = Depends(get_game)
):
    """Pick one of the displayed options."""
    try:
        game.select_option(request.index)
    except InvalidActionError as e:
        raise invalid_action(e)
    return build_state_response(game_id, game)


@router.post("/{game_id}/answer/submit", response_model=AnswerResultResponse)
async def submit_answer(game_id: str, game: GameSession = Depends(get_game)):
    """Submit the picked option for the current follow-up."""
    try:
        is_correct = game.submit_answer()
    except InvalidActionError as e:
        raise invalid_action(e)

    return AnswerResultResponse(
        is_correct=is_correct,
        correct_index=game.follow_up.correct_index,
        score=game.state.score
    )


@router.post("/{game_id}/next", response_model=GameStateResponse)
async def next_step(game_id: str, game: GameSession = Depends(get_game)):
    """Go to the next question, the next round, or the scoreboard."""
    try:
        game.next()
    except InvalidActionError as e:
        raise invalid_action(e)
    return build_state_response(game_id, game)


@router.post("/{game_id}/play-again", response_model=GameStateResponse)
async def play_again(game_id: str, game: GameSession = Depends(get_game)):
    """Reset a finished game."""
    try:
        game.play_again()
    except InvalidActionError as e:
        raise invalid_action(e)
    return build_state_response(game_id, game)


@router.post("/{game_id}/leaderboard", response_model=HighScoreSubmitResponse)
async def submit_high_score(
    game_id: str,
    request: HighScoreRequest,
    game: GameSession = Depends(get_game),
    store: LeaderboardStore = Depends(get_leaderboard)
):
    """Save the finished game's score under the player's name."""
    if game.phase != Phase.SCOREBOARD:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Game is not finished yet."
        )

    # Blank names are ignored, long ones are cut to the input limit
    name = request.name.strip()[:settings.PLAYER_NAME_MAX_LENGTH].strip()
    if not name:
        return HighScoreSubmitResponse(submitted=False, entries=await store.load())

    try:
        game.mark_leaderboard_submitted()
    except InvalidActionError as e:
        raise invalid_action(e)

    entry = HighScore(
        name=name,
        score=game.state.score,
        category=game.state.category,
        difficulty=game.state.difficulty,
        date=datetime.now(timezone.utc)
    )
    try:
        entries = await store.submit(entry)
    except BaseException:
        # Nothing was saved, let the player try again
        game.leaderboard_submitted = False
        raise
    return HighScoreSubmitResponse(submitted=True, entries=entries)
