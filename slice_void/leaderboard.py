"""
Leaderboard Storage
====================
Top-5 high scores kept in a small JSON key-value file.

The file maps keys to values; the scores live under a single fixed key as
a list of {name, score, date} records, best first. Anything unreadable is
treated as an empty board.
"""

import json
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional

from .settings import LEADERBOARD_KEY, LEADERBOARD_SIZE, NAME_MAX_LEN, SCORES_PATH

logger = logging.getLogger(__name__)


class LeaderboardError(Exception):
    """The score file could not be written."""


@dataclass
class LeaderboardEntry:
    name: str
    score: int
    date: str

    @classmethod
    def from_dict(cls, data) -> Optional['LeaderboardEntry']:
        """Build an entry from stored JSON, or None if it is malformed."""
        if not isinstance(data, dict):
            return None
        name = data.get('name')
        score = data.get('score')
        date = data.get('date')
        if not isinstance(name, str) or not isinstance(date, str):
            return None
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            return None
        return cls(name=name[:NAME_MAX_LEN], score=score, date=date)


def rank_entries(entries: List[LeaderboardEntry],
                 size: int = LEADERBOARD_SIZE) -> List[LeaderboardEntry]:
    """Sort best-first (stable for ties) and keep the top `size`."""
    return sorted(entries, key=lambda e: e.score, reverse=True)[:size]


class LeaderboardStore:
    """JSON file acting as the key-value store for high scores."""

    def __init__(self, path: Path = SCORES_PATH, key: str = LEADERBOARD_KEY,
                 size: int = LEADERBOARD_SIZE):
        self.path = Path(path)
        self.key = key
        self.size = size

    def _read_document(self) -> dict:
        try:
            with open(self.path, encoding='utf-8') as fh:
                document = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning('Unreadable score file %s: %s', self.path, exc)
            return {}
        if not isinstance(document, dict):
            logger.warning('Score file %s is not a JSON object', self.path)
            return {}
        return document

    def load(self) -> List[LeaderboardEntry]:
        """Stored entries, best first. Missing or malformed data is empty."""
        raw = self._read_document().get(self.key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning('Malformed leaderboard under %r, ignoring', self.key)
            return []

        entries = []
        for item in raw:
            entry = LeaderboardEntry.from_dict(item)
            if entry is None:
                logger.warning('Malformed leaderboard under %r, ignoring', self.key)
                return []
            entries.append(entry)
        return rank_entries(entries, self.size)

    def save(self, entries: List[LeaderboardEntry]) -> List[LeaderboardEntry]:
        """Rank, truncate and atomically replace the stored board."""
        ranked = rank_entries(entries, self.size)
        document = self._read_document()
        document[self.key] = [asdict(entry) for entry in ranked]

        tmp_path = self.path.with_name(self.path.name + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as fh:
                json.dump(document, fh, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            # The parent may be a file, where unlink(missing_ok=True) still raises
            if tmp_path.exists():
                tmp_path.unlink()
            raise LeaderboardError(f'cannot write {self.path}: {exc}') from exc
        return ranked

    def submit(self, entry: LeaderboardEntry) -> List[LeaderboardEntry]:
        """Add one entry and persist the new top list."""
        return self.save(self.load() + [entry])
