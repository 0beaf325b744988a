"""Tests for the persisted win/loss record."""

import json
from pathlib import Path

from seabattle.scores import SCORES_KEY, JsonScoreStore, ScoreRecord


def test_missing_file_loads_as_zero(tmp_path: Path) -> None:
    record = JsonScoreStore(tmp_path / "none.json").load()
    assert record == ScoreRecord()
    assert record.total_games == 0


def test_wins_and_losses_are_saved_under_fixed_key(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "scores.json"
    store = JsonScoreStore(path)
    store.record_win()
    store.record_win()
    record = store.record_loss()

    assert (record.wins, record.losses, record.total_games) == (2, 1, 3)
    document = json.loads(path.read_text(encoding="utf-8"))
    assert document[SCORES_KEY] == {"wins": 2, "losses": 1}


def test_other_keys_in_the_document_survive(tmp_path: Path) -> None:
    path = tmp_path / "scores.json"
    path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
    JsonScoreStore(path).record_loss()
    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["theme"] == "dark"
    assert document[SCORES_KEY]["losses"] == 1


def test_corrupt_or_malformed_files_load_as_zero(tmp_path: Path) -> None:
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert JsonScoreStore(corrupt).load() == ScoreRecord()

    malformed = tmp_path / "malformed.json"
    malformed.write_text(json.dumps({SCORES_KEY: {"wins": -3}}), encoding="utf-8")
    assert JsonScoreStore(malformed).load() == ScoreRecord()
