"""Win/loss record persisted between games."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

SCORES_KEY = "battleship-scores"


class ScoreRecord(BaseModel):
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)

    @property
    def total_games(self) -> int:
        return self.wins + self.losses


class JsonScoreStore:
    """Keeps a :class:`ScoreRecord` under ``SCORES_KEY`` in a JSON document."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("scores_unreadable", extra={"path": str(self.path), "error": str(exc)})
            return {}
        if not isinstance(document, dict):
            logger.warning("scores_malformed", extra={"path": str(self.path)})
            return {}
        return document

    def load(self) -> ScoreRecord:
        """Return the stored record, or zeroes when nothing usable is stored."""
        raw = self._read_document().get(SCORES_KEY) or {}
        try:
            return ScoreRecord.model_validate(raw)
        except ValidationError as exc:
            logger.warning("scores_malformed", extra={"path": str(self.path), "error": str(exc)})
            return ScoreRecord()

    def save(self, record: ScoreRecord) -> None:
        document = self._read_document()
        document[SCORES_KEY] = record.model_dump()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        logger.debug("scores_saved", extra={"path": str(self.path), **record.model_dump()})

    def record_win(self) -> ScoreRecord:
        record = self.load()
        record.wins += 1
        self.save(record)
        return record

    def record_loss(self) -> ScoreRecord:
        record = self.load()
        record.losses += 1
        self.save(record)
        return record
