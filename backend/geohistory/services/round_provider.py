import json
import logging
import re
from typing import Optional

import httpx
from pydantic import ValidationError

from ..models.game import Category, Difficulty, GameRound

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant that generates historical geography questions in JSON format."

DIFFICULTY_GUIDELINES = {
    Difficulty.EASY: "- Use well-known events and major cities\n  - Questions should be straightforward",
    Difficulty.MEDIUM: "- Use moderately known events\n  - Require some historical knowledge",
    Difficulty.HARD: "- Use lesser-known events or specific battle locations\n  - Require detailed historical knowledge",
    Difficulty.PROFESSOR: "- Use very obscure events or precise military positions\n  - Require expert-level knowledge",
}

PROMPT_TEMPLATE = """You are a historical geography game master. Generate a location-based question for a game.

Category: {category}
Difficulty: {difficulty}
Round: {round_number} of {total_rounds}

Generate a JSON object with the following structure:
{{
  "locationQuestion": {{
    "question": "A specific question about where a historical event occurred (be precise about the date and event)",
    "answer": "The name of the location (city, region, or battlefield)",
    "coordinates": {{
      "lat": <latitude as number>,
      "lng": <longitude as number>
    }}
  }},
  "followUpQuestions": [
    {{
      "question": "Question about the event or location",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": <index 0-3 of correct option>
    }}
    // ... 4 more questions (5 total)
  ]
}}

Guidelines:
- For {difficulty} difficulty:
  {guideline}
- Location question should ask "Where did X occur on [date]" or similar
- Provide exact coordinates (latitude, longitude)
- Follow-up questions should test knowledge about the event, its consequences, key figures, or the location
- Make sure options are plausible but only one is correct
- Vary the correct answer position (don't always make it option A)

Return ONLY the JSON object, no additional text."""

# Outermost {...} block; any prose or code fence around it is dropped
JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class RoundGenerationError(Exception):
    """A round could not be fetched or did not match the GameRound contract."""


def build_prompt(category: Category, difficulty: Difficulty, round_number: int, total_rounds: int = 3) -> str:
    """Render the game-master prompt for one round."""
    return PROMPT_TEMPLATE.format(
        category=category.value,
        difficulty=difficulty.value,
        round_number=round_number,
        total_rounds=total_rounds,
        guideline=DIFFICULTY_GUIDELINES[difficulty],
    )


def parse_round(content: str) -> GameRound:
    """
    Extract and validate a GameRound from raw model output.

    Raises:
        RoundGenerationError: No JSON object found, or it is malformed or incomplete
    """
    match = JSON_BLOCK.search(content)
    if not match:
        raise RoundGenerationError("No JSON found in response")

    try:
        data = json.loads(match.group(0))
        return GameRound.model_validate(data)
    except json.JSONDecodeError as e:
        raise RoundGenerationError(f"Malformed JSON in response: {e}")
    except ValidationError as e:
        raise RoundGenerationError(f"Response does not describe a valid round: {e}")


class GroqRoundProvider:
    """Client generating game rounds through Groq's OpenAI-compatible chat API."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        model: str,
        temperature: float = 0.8,
        max_tokens: int = 2000,
        timeout: Optional[float] = None,
        total_rounds: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_url = api_url.rstrip('/')
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.total_rounds = total_rounds
        self.transport = transport
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json"
        }

    async def generate_round(self, category: Category, difficulty: Difficulty, round_number: int) -> GameRound:
        """
        Ask the model for one round.

        Args:
            category: Historical period
            difficulty: How obscure the event should be
            round_number: 1-based round number, included in the prompt

        Returns:
            The validated round

        Raises:
            RoundGenerationError: On any transport, status or content failure
        """
        if not self.api_key:
            raise RoundGenerationError("GROQ_API_KEY is not configured")

        payload = {
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(category, difficulty, round_number, self.total_rounds)},
            ],
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.api_url}/chat/completions",
                    headers=self.headers,
                    json=payload
                )
                response.raise_for_status()
                result = response.json()
            except httpx.HTTPStatusError as e:
                raise RoundGenerationError(f"Groq returned an error: {e}")
            except httpx.RequestError as e:
                raise RoundGenerationError(f"Cannot reach Groq: {e}")
            except ValueError as e:
                raise RoundGenerationError(f"Groq returned a non-JSON body: {e}")

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise RoundGenerationError("No content received from Groq")

        game_round = parse_round(content)
        logger.debug("Generated round %d for %s/%s: %s", round_number, category.value, difficulty.value,
                     game_round.location_question.answer)
        return game_round
