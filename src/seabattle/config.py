"""Game settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field

from seabattle.engine.player import Difficulty

DEFAULT_SCORES_PATH = Path.home() / ".seabattle" / "scores.json"

_ENV_FIELDS = {
    "SEABATTLE_BOARD_SIZE": "board_size",
    "SEABATTLE_DIFFICULTY": "difficulty",
    "SEABATTLE_SCORES_PATH": "scores_path",
    "SEABATTLE_COMPUTER_DELAY": "computer_delay",
    "SEABATTLE_PLACEMENT_ATTEMPTS": "placement_attempts",
}


class GameConfig(BaseModel):
    """Settings for one game session and the terminal front end."""

    board_size: int = Field(default=10, ge=6, le=26)
    difficulty: Difficulty = Difficulty.MEDIUM
    scores_path: Path = DEFAULT_SCORES_PATH
    computer_delay: float = Field(default=0.5, ge=0.0)
    placement_attempts: int = Field(default=1000, ge=1)

    @classmethod
    def from_env(cls, **overrides: Any) -> "GameConfig":
        """Construct config from `SEABATTLE_*` env vars; non-None overrides win."""

        data: Dict[str, Any] = {}
        for env_name, field_name in _ENV_FIELDS.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                data[field_name] = value.strip()
        if "difficulty" in data:
            data["difficulty"] = data["difficulty"].lower()
        if "scores_path" in data:
            data["scores_path"] = Path(data["scores_path"]).expanduser()

        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)
