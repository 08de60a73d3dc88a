from enum import Enum
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime


FOLLOW_UP_QUESTIONS_PER_ROUND = 5
OPTIONS_PER_QUESTION = 4


class Category(str, Enum):
    """Historical period a game is played in."""
    WW1 = "WW1"
    WW2 = "WW2"
    COLD_WAR = "Cold War"
    ANCIENT_ROME = "Ancient Rome"

    @property
    def description(self) -> str:
        return CATEGORY_DESCRIPTIONS[self]


class Difficulty(str, Enum):
    """How obscure the generated events should be."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    PROFESSOR = "Professor"

    @property
    def description(self) -> str:
        return DIFFICULTY_DESCRIPTIONS[self]


CATEGORY_DESCRIPTIONS = {
    Category.WW1: "World War I (1914-1918)",
    Category.WW2: "World War II (1939-1945)",
    Category.COLD_WAR: "Cold War Era (1947-1991)",
    Category.ANCIENT_ROME: "Roman Empire & Republic",
}

DIFFICULTY_DESCRIPTIONS = {
    Difficulty.EASY: "Major events and well-known locations",
    Difficulty.MEDIUM: "Requires solid historical knowledge",
    Difficulty.HARD: "Detailed knowledge required",
    Difficulty.PROFESSOR: "Expert level - very challenging",
}


class WireModel(BaseModel):
    """Base for models exchanged as camelCase JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Coordinates(WireModel):
    """A point on the globe in degrees."""
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    class Config:
        frozen = True


class LocationQuestion(WireModel):
    """Where-did-it-happen question with its answer."""
    question: str
    answer: str
    coordinates: Coordinates
    radius_km: Optional[float] = None

    class Config:
        frozen = True


class MultipleChoiceQuestion(WireModel):
    """Follow-up question with four options in their original order."""
    question: str
    options: List[str] = Field(min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correct_answer: int = Field(ge=0, le=OPTIONS_PER_QUESTION - 1)

    class Config:
        frozen = True


class GameRound(WireModel):
    """One location question plus its follow-ups."""
    location_question: LocationQuestion
    follow_up_questions: List[MultipleChoiceQuestion] = Field(
        min_length=FOLLOW_UP_QUESTIONS_PER_ROUND,
        max_length=FOLLOW_UP_QUESTIONS_PER_ROUND,
    )

    class Config:
        frozen = True


class HighScore(WireModel):
    """Leaderboard entry."""
    name: str
    score: int
    category: Category
    difficulty: Difficulty
    date: datetime

    class Config:
        frozen = True


class OptionDescription(BaseModel):
    """Selectable category or difficulty."""
    name: str
    description: str


class GenerateRoundRequest(WireModel):
    """Request for a single generated round."""
    category: Category
    difficulty: Difficulty
    round_number: int = Field(ge=1)


class SelectCategoryRequest(BaseModel):
    """Request for choosing the game's category."""
    category: Category


class SelectDifficultyRequest(BaseModel):
    """Request for choosing the difficulty and generating rounds."""
    difficulty: Difficulty


class SelectOptionRequest(BaseModel):
    """Request for choosing one of the displayed options."""
    index: int = Field(ge=0, le=OPTIONS_PER_QUESTION - 1)


class HighScoreRequest(BaseModel):
    """Request for saving the finished game's score."""
    name: str


class LocationPrompt(BaseModel):
    """Location question as shown before the pin is submitted."""
    question: str


class PinResultResponse(WireModel):
    """Response after submitting a pin."""
    distance_km: float
    points: int
    answer: str
    coordinates: Coordinates
    score: int


class FollowUpResponse(WireModel):
    """Follow-up question as currently displayed."""
    index: int
    question: str
    options: List[str]
    selected: Optional[int] = None
    revealed: bool = False
    correct_index: Optional[int] = None
    is_correct: Optional[bool] = None


class AnswerResultResponse(WireModel):
    """Response after submitting a follow-up answer."""
    is_correct: bool
    correct_index: int
    score: int


class GameStateResponse(WireModel):
    """Snapshot of a game for the player."""
    id: str
    phase: str
    category: Optional[Category] = None
    difficulty: Optional[Difficulty] = None
    current_round: int
    total_rounds: int
    score: int
    max_score: int
    round_scores: List[int]
    user_pin: Optional[Coordinates] = None
    has_submitted_pin: bool
    current_follow_up_index: int
    location_question: Optional[LocationPrompt] = None
    pin_result: Optional[PinResultResponse] = None
    follow_up: Optional[FollowUpResponse] = None
    leaderboard_submitted: bool = False
    error: Optional[str] = None


class LeaderboardResponse(BaseModel):
    """Response with leaderboard."""
    entries: List[HighScore]


class HighScoreSubmitResponse(BaseModel):
    """Response after a leaderboard submission."""
    submitted: bool
    entries: List[HighScore]
