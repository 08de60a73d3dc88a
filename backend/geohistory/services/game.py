"""Round state machine for a single playthrough.

A GameSession walks through category selection, difficulty selection,
round generation, then for every round a pin placement followed by the
round's follow-up questions, and finally the scoreboard. Each public
method is one player action; calling it in the wrong phase raises
InvalidActionError and leaves the session untouched.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..config import Settings, get_settings
from ..models.game import Category, Coordinates, Difficulty, GameRound
from .geodesy import haversine_distance
from .pins import generate_random_pin
from .round_provider import RoundGenerationError
from .scoring import POINTS_PER_CORRECT_ANSWER, calculate_score, max_possible_score
from .shuffle import shuffle_options

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to generate game. Please try again."


class Phase(str, Enum):
    SELECTING_CATEGORY = "selecting_category"
    SELECTING_DIFFICULTY = "selecting_difficulty"
    GENERATING_ROUNDS = "generating_rounds"
    PLACING_PIN = "placing_pin"
    ANSWERING_FOLLOW_UP = "answering_follow_up"
    SCOREBOARD = "scoreboard"


class InvalidActionError(Exception):
    """The requested action is not allowed in the session's current phase."""


@dataclass
class GameState:
    category: Optional[Category] = None
    difficulty: Optional[Difficulty] = None
    current_round: int = 0
    total_rounds: int = 3
    score: int = 0
    rounds: List[GameRound] = field(default_factory=list)
    user_pin: Optional[Coordinates] = None
    has_submitted_pin: bool = False
    current_follow_up_index: int = 0
    round_scores: List[int] = field(default_factory=list)


@dataclass
class PinResult:
    distance_km: float
    points: int
    answer: str
    coordinates: Coordinates


@dataclass
class FollowUpView:
    """The current follow-up as displayed: shuffled options and the player's pick."""
    question: str
    options: List[str]
    correct_index: int
    selected: Optional[int] = None
    revealed: bool = False

    @property
    def is_correct(self) -> bool:
        return self.selected == self.correct_index


class GameSession:
    """One player's game, mutated in place by player actions."""

    def __init__(self, settings: Optional[Settings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or get_settings()
        self.rng = rng or random.Random()
        self.reset()

    def reset(self) -> None:
        """Discard everything and start over at category selection."""
        self.phase = Phase.SELECTING_CATEGORY
        self.state = GameState(total_rounds=self.settings.ROUNDS_PER_GAME)
        self.pin_result: Optional[PinResult] = None
        self.follow_up: Optional[FollowUpView] = None
        self.error: Optional[str] = None
        self.leaderboard_submitted = False

    @property
    def current_round(self) -> Optional[GameRound]:
        if self.phase not in (Phase.PLACING_PIN, Phase.ANSWERING_FOLLOW_UP):
            return None
        return self.state.rounds[self.state.current_round]

    @property
    def max_score(self) -> int:
        return max_possible_score(self.state.total_rounds)

    def _require(self, *phases: Phase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise InvalidActionError(f"Action not allowed in phase '{self.phase.value}' (expected {allowed})")

    def select_category(self, category: Category) -> None:
        self._require(Phase.SELECTING_CATEGORY)
        self.state.category = category
        self.phase = Phase.SELECTING_DIFFICULTY

    def back_to_category(self) -> None:
        """Leave difficulty selection (e.g. after a failed generation) and pick again."""
        self._require(Phase.SELECTING_DIFFICULTY)
        self.state.category = None
        self.state.difficulty = None
        self.error = None
        self.phase = Phase.SELECTING_CATEGORY

    async def select_difficulty(self, difficulty: Difficulty, provider) -> None:
        """
        Choose the difficulty and generate every round, one after another.

        Args:
            difficulty: Chosen difficulty
            provider: Object with an async generate_round(category, difficulty, round_number)

        Raises:
            RoundGenerationError: A round failed; the session is back in difficulty
                selection with an error message and no rounds kept
        """
        self._require(Phase.SELECTING_DIFFICULTY)
        self.state.difficulty = difficulty
        self.error = None
        self.phase = Phase.GENERATING_ROUNDS

        category = self.state.category
        rounds = []
        try:
            for round_number in range(1, self.state.total_rounds + 1):
                logger.info("Generating round %d/%d (%s, %s)", round_number, self.state.total_rounds,
                            category.value, difficulty.value)
                rounds.append(await provider.generate_round(category, difficulty, round_number))
        except RoundGenerationError as e:
            logger.warning("Round generation failed: %s", e)
            self._abort_generation()
            raise
        except Exception:
            logger.exception("Unexpected error while generating rounds")
            self._abort_generation()
            raise
        except BaseException:
            # Cancelled mid-flight (client gone, server shutting down)
            logger.warning("Round generation interrupted")
            self._abort_generation()
            raise

        self.state.rounds = rounds
        self.state.user_pin = generate_random_pin(
            rounds[0].location_question.coordinates,
            self.settings.INITIAL_PIN_MIN_KM,
            self.settings.INITIAL_PIN_MAX_KM,
            self.rng
        )
        self.phase = Phase.PLACING_PIN

    def _abort_generation(self) -> None:
        self.state.rounds = []
        self.error = GENERATION_FAILED_MESSAGE
        self.phase = Phase.SELECTING_DIFFICULTY

    def move_pin(self, coordinates: Coordinates) -> None:
        self._require(Phase.PLACING_PIN)
        self.state.user_pin = coordinates

    def submit_pin(self) -> PinResult:
        """Score the pin for the current round. Happens exactly once per round."""
        self._require(Phase.PLACING_PIN)
        if self.state.user_pin is None:
            raise InvalidActionError("Place a pin on the map first")

        location = self.current_round.location_question
        distance = haversine_distance(self.state.user_pin, location.coordinates)
        points = calculate_score(distance)

        self.state.round_scores.append(points)
        self.state.score += points
        self.state.has_submitted_pin = True
        self.pin_result = PinResult(
            distance_km=distance,
            points=points,
            answer=location.answer,
            coordinates=location.coordinates
        )
        logger.info("Round %d pin scored: %.1f km -> %d points", self.state.current_round + 1, distance, points)

        self.phase = Phase.ANSWERING_FOLLOW_UP
        self._present_follow_up(0)
        return self.pin_result

    def _present_follow_up(self, index: int) -> None:
        question = self.current_round.follow_up_questions[index]
        options, correct_index = shuffle_options(question, self.rng)
        self.state.current_follow_up_index = index
        self.follow_up = FollowUpView(question=question.question, options=options, correct_index=correct_index)

    def select_option(self, index: int) -> None:
        self._require(Phase.ANSWERING_FOLLOW_UP)
        if self.follow_up.revealed:
            raise InvalidActionError("Answer already submitted")
        if not 0 <= index < len(self.follow_up.options):
            raise InvalidActionError(f"No option at index {index}")
        self.follow_up.selected = index

    def submit_answer(self) -> bool:
        """Reveal the current follow-up's result; a correct pick is worth one point."""
        self._require(Phase.ANSWERING_FOLLOW_UP)
        if self.follow_up.revealed:
            raise InvalidActionError("Answer already submitted")
        if self.follow_up.selected is None:
            raise InvalidActionError("Select an option first")

        self.follow_up.revealed = True
        if self.follow_up.is_correct:
            self.state.score += POINTS_PER_CORRECT_ANSWER
        return self.follow_up.is_correct

    def next(self) -> Phase:
        """Move on to the next follow-up, the next round, or the scoreboard."""
        self._require(Phase.ANSWERING_FOLLOW_UP)
        if not self.follow_up.revealed:
            raise InvalidActionError("Submit an answer first")

        last_question = len(self.current_round.follow_up_questions) - 1
        if self.state.current_follow_up_index < last_question:
            self._present_follow_up(self.state.current_follow_up_index + 1)
        elif self.state.current_round < self.state.total_rounds - 1:
            self.state.current_round += 1
            self.state.has_submitted_pin = False
            self.state.current_follow_up_index = 0
            self.pin_result = None
            self.follow_up = None
            self.phase = Phase.PLACING_PIN
            self.state.user_pin = generate_random_pin(
                self.current_round.location_question.coordinates,
                self.settings.NEXT_PIN_MIN_KM,
                self.settings.NEXT_PIN_MAX_KM,
                self.rng
            )
        else:
            self.follow_up = None
            self.phase = Phase.SCOREBOARD
            logger.info("Game finished with %d/%d points", self.state.score, self.max_score)
        return self.phase

    def mark_leaderboard_submitted(self) -> None:
        self._require(Phase.SCOREBOARD)
        if self.leaderboard_submitted:
            raise InvalidActionError("Score already saved to the leaderboard")
        self.leaderboard_submitted = True

    def play_again(self) -> None:
        self._require(Phase.SCOREBOARD)
        self.reset()
