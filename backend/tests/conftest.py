import random

import pytest
from fastapi.testclient import TestClient

from geohistory.config import Settings, get_settings
from geohistory.dependencies import games, get_round_provider
from geohistory.main import app
from geohistory.models.game import GameRound
from geohistory.services.game import GameSession
from geohistory.services.round_provider import RoundGenerationError


# (answer, lat, lng) for each generated round
TARGETS = [
    ("Sarajevo", 43.8563, 18.4131),
    ("Verdun", 49.1598, 5.3844),
    ("Gallipoli", 40.3553, 26.6967),
]


def make_round(number, answer, lat, lng):
    """Build a round whose follow-ups put the right answer at varying positions."""
    return GameRound.model_validate({
        "locationQuestion": {
            "question": f"Where did event #{number} take place?",
            "answer": answer,
            "coordinates": {"lat": lat, "lng": lng},
        },
        "followUpQuestions": [
            {
                "question": f"Round {number} question {q}",
                "options": [f"R{number}Q{q} option {k}" for k in range(4)],
                "correctAnswer": (number + q) % 4,
            }
            for q in range(5)
        ],
    })


class FakeRoundProvider:
    """Serves canned rounds and records every request."""

    def __init__(self, rounds, fail_on=None):
        self.rounds = rounds
        self.fail_on = fail_on
        self.calls = []

    async def generate_round(self, category, difficulty, round_number):
        self.calls.append((category, difficulty, round_number))
        if self.fail_on == round_number:
            raise RoundGenerationError("Groq returned an error")
        return self.rounds[round_number - 1]


def correct_option_text(game_round, follow_up_index):
    question = game_round.follow_up_questions[follow_up_index]
    return question.options[question.correct_answer]


@pytest.fixture()
def rounds():
    return [make_round(i + 1, *target) for i, target in enumerate(TARGETS)]


@pytest.fixture()
def provider(rounds):
    return FakeRoundProvider(rounds)


@pytest.fixture()
def game():
    return GameSession(Settings(), rng=random.Random(1234))


@pytest.fixture()
def database_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


@pytest.fixture()
def client(database_url, provider):
    app.dependency_overrides[get_round_provider] = lambda: provider
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    games.clear()
