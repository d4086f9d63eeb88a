"""Score client used by the game front-end.

Network and disk access never run on the frame loop. `ScoreClient` owns a
daemon thread running an asyncio event loop; each request is scheduled there
with `run_coroutine_threadsafe` and the caller gets a
`concurrent.futures.Future` back which the UI polls once per frame
(`future.done()`), so a slow server only delays the notice, never a frame.

Two transports:

- `LocalTransport` wraps an in-process `ScoreService` (data dir on disk);
  used when no API URL is configured.
- `HttpTransport` talks to the Flask API with aiohttp.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import threading
from typing import Optional

import aiohttp

from runner.logger import get_logger
from runner.scoreboard import ScoreService, ScoreServiceError

log = get_logger("score_client")

DEFAULT_TIMEOUT_S = 5.0


class LocalTransport:
    def __init__(self, service: ScoreService) -> None:
        self.service = service

    async def submit(self, twitter: str, wallet: str, score) -> dict:
        entry = self.service.submit_score(twitter, wallet, score)
        return {"ok": True, "entry": entry.to_dict()}

    async def daily_leaderboard(self, date: Optional[str] = None) -> dict:
        return self.service.daily_leaderboard(date)

    async def winners(self) -> dict:
        return self.service.winners()

    async def close(self) -> None:
        pass


class HttpTransport:
    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_S) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"Content-Type": "application/json"},
            )
        return self._session

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        session = await self._get_session()
        url = f"{self.base_url}{path}"
        try:
            async with session.request(method, url, **kwargs) as response:
                if response.status != 200:
                    try:
                        data = await response.json()
                        error = data.get("error", f"HTTP {response.status}")
                    except (aiohttp.ContentTypeError, ValueError):
                        error = f"HTTP {response.status}"
                    raise ScoreServiceError(error)
                return await response.json()
        except asyncio.TimeoutError as e:
            raise ScoreServiceError(f"Timeout calling {url}") from e
        except aiohttp.ClientError as e:
            raise ScoreServiceError(f"Network error calling {url}: {e}") from e

    async def submit(self, twitter: str, wallet: str, score) -> dict:
        return await self._request("POST", "/api/score", json={"twitter": twitter, "wallet": wallet, "score": score})

    async def daily_leaderboard(self, date: Optional[str] = None) -> dict:
        params = {"date": date} if date else None
        return await self._request("GET", "/api/leaderboard/daily", params=params)

    async def winners(self) -> dict:
        return await self._request("GET", "/api/winners")

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


class ScoreClient:
    """Fire-and-forget facade over a transport.

    Usage:
        client = ScoreClient.from_settings(settings)
        fut = client.submit("@me", "", 123)
        ...each frame...
        if fut.done(): ok = fut.exception() is None
    """

    def __init__(self, transport) -> None:
        self.transport = transport
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings, data_dir: Optional[str] = None) -> "ScoreClient":
        if settings.api_url:
            log.info("score API:", settings.api_url)
            return cls(HttpTransport(settings.api_url))
        from runner.settings import DATA_DIR

        return cls(LocalTransport(ScoreService.from_data_dir(data_dir or DATA_DIR)))

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(target=loop.run_forever, name="score-client", daemon=True)
                thread.start()
                self._loop = loop
                self._thread = thread
                log.debug("background loop started")
            return self._loop

    def _schedule(self, coro) -> concurrent.futures.Future:
        return asyncio.run_coroutine_threadsafe(coro, self._ensure_loop())

    def submit(self, twitter: str, wallet: str, score) -> concurrent.futures.Future:
        return self._schedule(self.transport.submit(twitter, wallet, score))

    def daily_leaderboard(self, date: Optional[str] = None) -> concurrent.futures.Future:
        return self._schedule(self.transport.daily_leaderboard(date))

    def winners(self) -> concurrent.futures.Future:
        return self._schedule(self.transport.winners())

    def close(self, timeout: float = 2.0) -> None:
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None
        if loop is None:
            return
        try:
            asyncio.run_coroutine_threadsafe(self.transport.close(), loop).result(timeout)
        except (concurrent.futures.TimeoutError, ScoreServiceError, aiohttp.ClientError) as e:
            log.warn("error closing score transport:", e)
        loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout)
        if not loop.is_running():
            loop.close()


class LeaderboardFeed:
    """Polled view of today's leaderboard and past winners.

    `refresh()` schedules both requests; `poll()` is called every frame and
    swaps in whatever has completed. A failed refresh keeps the previous
    rows.
    """

    def __init__(self, client: ScoreClient) -> None:
        self.client = client
        self.date: Optional[str] = None
        self.leaderboard: list = []
        self.winners: dict = {}
        self._pending_board: Optional[concurrent.futures.Future] = None
        self._pending_winners: Optional[concurrent.futures.Future] = None

    @property
    def loading(self) -> bool:
        return self._pending_board is not None or self._pending_winners is not None

    def refresh(self) -> None:
        if self._pending_board is None:
            self._pending_board = self.client.daily_leaderboard()
        if self._pending_winners is None:
            self._pending_winners = self.client.winners()

    def poll(self) -> bool:
        """Apply finished requests; returns True when anything changed."""
        changed = False
        fut = self._pending_board
        if fut is not None and fut.done():
            self._pending_board = None
            if fut.exception() is not None:
                log.debug("leaderboard refresh failed:", fut.exception())
            else:
                data = fut.result()
                self.date = data.get("date")
                self.leaderboard = list(data.get("leaderboard", []))
                changed = True
        fut = self._pending_winners
        if fut is not None and fut.done():
            self._pending_winners = None
            if fut.exception() is not None:
                log.debug("winners refresh failed:", fut.exception())
            else:
                self.winners = dict(fut.result())
                changed = True
        return changed

    def recent_winners(self, limit: int = 3) -> list:
        """(date, entry) pairs, newest day first."""
        return [(d, self.winners[d]) for d in sorted(self.winners, reverse=True)[:limit]]


__all__ = ["ScoreClient", "LocalTransport", "HttpTransport", "LeaderboardFeed"]
