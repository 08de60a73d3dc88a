import json
import logging
from typing import List

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import StorageSlot
from ..models.game import HighScore

logger = logging.getLogger(__name__)

_high_scores = TypeAdapter(List[HighScore])


class LeaderboardStore:
    """Top-N high scores kept as one JSON list in a named storage slot."""

    def __init__(self, db: AsyncSession, slot: str = "geoHistoryHighScores", size: int = 10):
        self.db = db
        self.slot = slot
        self.size = size

    async def load(self) -> List[HighScore]:
        """
        Read the leaderboard, best score first.

        A missing or unreadable slot is an empty leaderboard.
        """
        result = await self.db.execute(select(StorageSlot).where(StorageSlot.key == self.slot))
        row = result.scalar_one_or_none()
        if row is None:
            return []

        try:
            return _high_scores.validate_python(json.loads(row.value))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring corrupt leaderboard in slot '%s': %s", self.slot, e)
            return []

    async def submit(self, entry: HighScore) -> List[HighScore]:
        """
        Add an entry and keep only the best scores.

        Equal scores keep their existing order, so older entries stay ahead.

        Returns:
            The updated leaderboard
        """
        entries = await self.load()
        entries.append(entry)
        entries = sorted(entries, key=lambda e: e.score, reverse=True)[:self.size]

        value = json.dumps(_high_scores.dump_python(entries, mode="json", by_alias=True))
        row = await self.db.get(StorageSlot, self.slot)
        if row is None:
            self.db.add(StorageSlot(key=self.slot, value=value))
        else:
            row.value = value
        await self.db.commit()

        logger.info("Saved score %d for '%s' to the leaderboard", entry.score, entry.name)
        return entries
