"""Flat JSON persistence for submitted scores and daily winners.

Two files under the data directory:

    scores.json   list of entries, in submission order
    winners.json  {"YYYY-MM-DD": entry}

Missing files are created on startup; unreadable ones are logged and
recreated empty. Writes go to a temp file first and are moved into place.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, List

from runner.logger import get_logger
from runner.scoreboard import ScoreStoreError

log = get_logger("score_store")

SCORES_FILE = "scores.json"
WINNERS_FILE = "winners.json"


class JsonScoreStore:
    def __init__(self, data_dir) -> None:
        self.data_dir = Path(data_dir)
        self.scores_path = self.data_dir / SCORES_FILE
        self.winners_path = self.data_dir / WINNERS_FILE
        self.ensure_files()

    def ensure_files(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ScoreStoreError(f"Cannot create data directory {self.data_dir}: {e}") from e
        if not self.scores_path.exists():
            self._write(self.scores_path, [])
        if not self.winners_path.exists():
            self._write(self.winners_path, {})

    def _write(self, path: Path, payload) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            try:
                if tmp.exists():
                    tmp.unlink()
            except OSError:
                pass
            raise ScoreStoreError(f"Failed to write {path}: {e}") from e

    def _read(self, path: Path, expected: type):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            data = None
        except (OSError, ValueError) as e:
            log.warn(f"{path.name} unreadable, recreating:", e)
            data = None
        if not isinstance(data, expected):
            if data is not None:
                log.warn(f"{path.name} has unexpected shape, recreating")
            data = expected()
            self._write(path, data)
        return data

    def load_scores(self) -> List[dict]:
        return [s for s in self._read(self.scores_path, list) if isinstance(s, dict)]

    def save_scores(self, scores: List[dict]) -> None:
        self._write(self.scores_path, scores)

    def append_score(self, entry: dict) -> None:
        scores = self.load_scores()
        scores.append(entry)
        self.save_scores(scores)

    def load_winners(self) -> Dict[str, dict]:
        return self._read(self.winners_path, dict)

    def save_winners(self, winners: Dict[str, dict]) -> None:
        self._write(self.winners_path, winners)


__all__ = ["JsonScoreStore", "SCORES_FILE", "WINNERS_FILE"]
