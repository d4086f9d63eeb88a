"""Daily score board.

Scores are grouped by UTC calendar day. Each day has a leaderboard (top 50,
highest first) and, once the day is over, a single winner. Winners are
computed lazily the first time they are asked for and never recomputed.

The service is storage agnostic: it talks to a store exposing
`load_scores/append_score/load_winners/save_winners` (see
`runner.score_store.JsonScoreStore`).
"""

from __future__ import annotations

import datetime as _dt
import math
import threading
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Optional
from urllib.parse import quote

from runner.constants import LEADERBOARD_LIMIT, TWITTER_MAX_LEN, WALLET_MAX_LEN
from runner.logger import get_logger

log = get_logger("scoreboard")

SHARE_TEXT = "I scored {score} in Virgen Jump! @virgenfts"
TWEET_INTENT_URL = "https://twitter.com/intent/tweet"


class ScoreServiceError(Exception):
    """Base class for score service failures."""


class InvalidScoreError(ScoreServiceError):
    pass


class ScoreStoreError(ScoreServiceError):
    """Persistence failed (unwritable data directory, disk full...)."""


@dataclass(frozen=True)
class ScoreEntry:
    id: str
    date: str
    score: float
    twitter: str
    wallet: str
    created_at: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["createdAt"] = data.pop("created_at")
        return data


def _utc_now() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


def today_key(now: Optional[_dt.datetime] = None) -> str:
    """UTC calendar day as YYYY-MM-DD."""
    now = now or _utc_now()
    if now.tzinfo is not None:
        now = now.astimezone(_dt.timezone.utc)
    return now.strftime("%Y-%m-%d")


def _base36(n: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(digits[r])
    return "".join(reversed(out))


def _is_valid_score(score) -> bool:
    # bool is an int subclass but never a valid score
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return False
    try:
        finite = math.isfinite(score)
    except OverflowError:
        # int too large for a float
        return False
    return finite and score >= 0


def validate_score(score) -> float:
    if not _is_valid_score(score):
        raise InvalidScoreError("Invalid score")
    return score


def _rankable(entries: List[dict]) -> List[dict]:
    kept = [e for e in entries if _is_valid_score(e.get("score"))]
    if len(kept) != len(entries):
        log.warn(f"ignoring {len(entries) - len(kept)} stored score(s) with an invalid value")
    return kept


def _sanitize(value, limit: int) -> str:
    if value is None:
        return ""
    return str(value)[:limit]


def _top_entry(entries: List[dict]) -> Optional[dict]:
    # max() keeps the first of equal scores, i.e. the earliest submission
    if not entries:
        return None
    return max(entries, key=lambda e: e.get("score", 0))


def share_url(score, page_url: str = "") -> str:
    text = quote(SHARE_TEXT.format(score=int(math.floor(score))), safe="")
    return f"{TWEET_INTENT_URL}?text={text}&url={quote(page_url, safe='')}"


class ScoreService:
    def __init__(self, store, clock: Callable[[], _dt.datetime] = _utc_now) -> None:
        self.store = store
        self.clock = clock
        self._lock = threading.Lock()
        self._last_id_ms = 0

    @classmethod
    def from_data_dir(cls, data_dir: str, **kwargs) -> "ScoreService":
        from runner.score_store import JsonScoreStore

        return cls(JsonScoreStore(data_dir), **kwargs)

    def _today(self) -> str:
        return today_key(self.clock())

    def _next_id(self, now: _dt.datetime) -> str:
        ms = int(now.timestamp() * 1000)
        # Two submissions in the same millisecond must not share an id
        if ms <= self._last_id_ms:
            ms = self._last_id_ms + 1
        self._last_id_ms = ms
        return _base36(ms)

    def submit_score(self, twitter, wallet, score) -> ScoreEntry:
        score = validate_score(score)
        now = self.clock()
        with self._lock:
            entry = ScoreEntry(
                id=self._next_id(now),
                date=today_key(now),
                score=score,
                twitter=_sanitize(twitter, TWITTER_MAX_LEN),
                wallet=_sanitize(wallet, WALLET_MAX_LEN),
                created_at=now.astimezone(_dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            )
            self.store.append_score(entry.to_dict())
        log.info(f"score submitted: {entry.score} on {entry.date}", f"({entry.twitter or '-'})")
        return entry

    def daily_leaderboard(self, date: Optional[str] = None) -> Dict[str, object]:
        date_key = str(date) if date else self._today()
        scores = _rankable([s for s in self.store.load_scores() if s.get("date") == date_key])
        # sorted() is stable, so equal scores keep submission order
        scores = sorted(scores, key=lambda e: e.get("score", 0), reverse=True)[:LEADERBOARD_LIMIT]
        return {"date": date_key, "leaderboard": scores}

    def _fill_winners(self) -> Dict[str, dict]:
        today = self._today()
        scores = _rankable(self.store.load_scores())
        winners = self.store.load_winners()
        by_date: Dict[str, List[dict]] = {}
        for s in scores:
            by_date.setdefault(s.get("date", ""), []).append(s)
        added = 0
        for date, entries in by_date.items():
            if date == today or date in winners:
                continue
            top = _top_entry(entries)
            if top is not None:
                winners[date] = top
                added += 1
        self.store.save_winners(winners)
        if added:
            log.info(f"computed {added} daily winner(s)")
        return winners

    def winners(self) -> Dict[str, dict]:
        """Map of finished day -> winning entry, computing any missing days."""
        with self._lock:
            return self._fill_winners()

    def compute_winners(self) -> Dict[str, dict]:
        with self._lock:
            return self._fill_winners()


__all__ = [
    "ScoreServiceError",
    "InvalidScoreError",
    "ScoreStoreError",
    "ScoreEntry",
    "ScoreService",
    "today_key",
    "validate_score",
    "share_url",
]
