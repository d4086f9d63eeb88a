"""Application states.

A small stack based state manager drives the front-end:

    TitleState -> RunState -> GameOverState (pushed over the frozen run)
                     |
                     +-> PauseState (pushed over the run, popped to resume)

Usage (see `app.py`):

    sm = StateManager()
    sm.set(TitleState(client))
    while running:
        actions = router.process(events, sm.current.name)
        sm.handle_actions(actions)
        sm.update(dt)
        sm.render(screen)

Only the top state receives loop callbacks, so an overlay freezes the run
beneath it simply by not forwarding `update`.
"""

from __future__ import annotations

import webbrowser
from typing import List, Sequence

import pygame

from runner.constants import BASE_H, BASE_W
from runner.input_router import IntentTracker
from runner.logger import get_logger
from runner.renderer import SurfaceRenderer, format_score, render
from runner.scoreboard import share_url
from runner.simulation import RunPhase, new_session, start_run, tick

_state_log = get_logger("state")

SUBMIT_OK = "Score submitted!"
SUBMIT_FAILED = "Could not submit score."
GAME_PAGE_URL = "https://virgenfts.com"


class State:
    """Base class for an application state.

    All hooks are optional no-ops.
    """

    name: str = "State"
    manager: "StateManager | None" = None

    # Lifecycle -----------------------------------------------------
    def on_enter(self, previous: "State | None") -> None:  # pragma: no cover - default no-op
        pass

    def on_exit(self, next_state: "State | None") -> None:  # pragma: no cover - default no-op
        pass

    # Main loop hooks -----------------------------------------------
    def handle_actions(self, actions: Sequence[str]) -> None:  # pragma: no cover
        pass

    def update(self, dt: float) -> None:  # pragma: no cover - default no-op
        pass

    def render(self, surface: pygame.Surface) -> None:  # pragma: no cover - default no-op
        pass


class StateManager:
    """Stack-based state manager.

    Provides push/pop semantics and a `set` convenience to replace the
    current stack with a single state. Only the top state receives loop
    callbacks.
    """

    def __init__(self) -> None:
        self._stack: List[State] = []
        self.quit_requested = False
        _state_log.debug("StateManager init (empty stack)")

    # Introspection -------------------------------------------------
    @property
    def current(self) -> State | None:
        return self._stack[-1] if self._stack else None

    def stack_size(self) -> int:
        return len(self._stack)

    def below(self, state: State) -> State | None:
        """State directly underneath `state` on the stack, if any."""
        try:
            idx = self._stack.index(state)
        except ValueError:
            return None
        return self._stack[idx - 1] if idx > 0 else None

    # Transitions ---------------------------------------------------
    def push(self, state: State) -> None:
        state.manager = self
        prev = self.current
        self._stack.append(state)
        state.on_enter(prev)
        _state_log.debug("push", state.name, "-> stack:", [s.name for s in self._stack])

    def pop(self) -> State | None:
        if not self._stack:
            return None
        top = self._stack.pop()
        next_state = self.current
        top.on_exit(next_state)
        _state_log.debug("pop", top.name, "-> stack:", [s.name for s in self._stack])
        return top

    def set(self, state: State) -> None:
        state.manager = self
        # Exit all existing states (LIFO) before setting new root.
        while self._stack:
            popped = self._stack.pop()
            popped.on_exit(None if not self._stack else state)
            _state_log.debug("discard", popped.name)
        self._stack.append(state)
        state.on_enter(None)
        _state_log.debug("set", state.name, "(root)")

    # Loop dispatch -------------------------------------------------
    def handle_actions(self, actions: Sequence[str]) -> None:
        if self.current:
            if actions:
                _state_log.debug("actions ->", self.current.name, actions)
            self.current.handle_actions(actions)

    def update(self, dt: float) -> None:
        if self.current:
            self.current.update(dt)

    def render(self, surface: pygame.Surface) -> None:
        if self.current:
            self.current.render(surface)


def _board_lines(feed) -> List[str]:
    if feed is None:
        return []
    rows = [f"{i + 1}. {row.get('twitter') or '-'}  {row.get('score', 0)}" for i, row in enumerate(feed.leaderboard[:5])]
    if not rows:
        rows = ["No scores yet today"]
    return rows


class TitleState(State):
    name = "TitleState"

    def __init__(self, client=None, renderer: SurfaceRenderer | None = None, seed=None) -> None:
        from runner.score_client import LeaderboardFeed
        from runner.ui import UI

        self.client = client
        self.renderer = renderer or SurfaceRenderer()
        self.seed = seed
        self.feed = LeaderboardFeed(client) if client is not None else None
        # Idle session drawn behind the title
        self.preview = new_session(seed)
        self.start_requested = False
        self._ui = UI

    def on_enter(self, previous: "State | None") -> None:
        if self.feed is not None:
            self.feed.refresh()

    def handle_actions(self, actions: Sequence[str]) -> None:
        for act in actions:
            if act == "start":
                self.start_requested = True
            elif act == "quit" and self.manager:
                self.manager.quit_requested = True

    def update(self, dt: float) -> None:
        if self.feed is not None:
            self.feed.poll()
        if self.start_requested and self.manager:
            self.start_requested = False
            self.manager.set(RunState(self.client, self.renderer, self.seed))

    def render(self, surface: pygame.Surface) -> None:
        UI = self._ui
        self.renderer.present(render(self.preview, self.renderer.has_image("character")), surface)
        UI.render_overlay(surface, alpha=60)
        UI.render_title(surface, "VIRGEN JUMP", surface.get_height() // 5)
        UI.render_msg(surface, "Press SPACE or click to play", surface.get_height() // 5 + 50)
        y = surface.get_height() // 2
        UI.draw_text(surface, "Today's top scores", surface.get_width() // 2, y, size=22, align="center")
        for line in _board_lines(self.feed):
            y += 22
            UI.draw_text(surface, line, surface.get_width() // 2, y, size=20, color=UI.MUTED_COLOR, align="center")
        if self.feed is not None:
            for date, entry in self.feed.recent_winners(1):
                y += 26
                winner = f"Winner {date}: {entry.get('twitter') or '-'} ({entry.get('score', 0)})"
                UI.draw_text(surface, winner, surface.get_width() // 2, y, size=20, color=UI.ACCENT_COLOR, align="center")
        UI.render_hint(surface, "SPACE/UP jump (hold to float)   DOWN duck   ESC pause")


class RunState(State):
    name = "RunState"

    def __init__(self, client=None, renderer: SurfaceRenderer | None = None, seed=None) -> None:
        self.client = client
        self.renderer = renderer or SurfaceRenderer()
        self.seed = seed
        self.sim = new_session(seed, width=BASE_W, height=BASE_H)
        self.intents = IntentTracker()
        self.request_pause = False

    def on_enter(self, previous: "State | None") -> None:
        self.intents.clear()
        start_run(self.sim)

    def restart(self) -> None:
        self.intents.clear()
        start_run(self.sim)

    def handle_actions(self, actions: Sequence[str]) -> None:
        self.intents.feed(actions)
        if "pause_toggle" in actions:
            self.request_pause = True

    def update(self, dt: float) -> None:
        if self.request_pause and self.manager:
            self.request_pause = False
            # Held keys are not reported again after resuming
            self.intents.clear()
            self.manager.push(PauseState())
            return
        tick(self.sim, dt * 1000.0, self.intents.sample())
        if self.sim.phase is RunPhase.ENDED and self.manager:
            self.intents.clear()
            self.manager.push(GameOverState(self.sim.result, self.client, self.renderer))

    def render(self, surface: pygame.Surface) -> None:
        self.renderer.present(render(self.sim, self.renderer.has_image("character")), surface)


class PauseState(State):
    name = "PauseState"

    def __init__(self) -> None:
        from runner.ui import UI

        self.closed = False
        self.return_to_menu = False
        self._underlying: State | None = None  # set in on_enter
        self._ui = UI

    def on_enter(self, previous: "State | None") -> None:  # capture underlying
        self._underlying = previous

    def handle_actions(self, actions: Sequence[str]) -> None:
        for act in actions:
            if act == "pause_close":
                self.closed = True
            elif act == "pause_menu":
                self.return_to_menu = True
                self.closed = True

    def update(self, dt: float) -> None:
        if not self.closed or not self.manager:
            return
        underlying = self._underlying
        self.manager.pop()
        if self.return_to_menu:
            client = getattr(underlying, "client", None)
            renderer = getattr(underlying, "renderer", None)
            self.manager.set(TitleState(client, renderer))

    def render(self, surface: pygame.Surface) -> None:
        UI = self._ui
        # Frozen run frame underneath
        if self._underlying is not None:
            self._underlying.render(surface)
        UI.render_overlay(surface)
        UI.render_title(surface, "PAUSED", surface.get_height() // 3)
        UI.render_hint(surface, "ESC resume   M menu")


class GameOverState(State):
    name = "GameOverState"

    def __init__(self, result, client=None, renderer: SurfaceRenderer | None = None) -> None:
        from runner.score_client import LeaderboardFeed
        from runner.settings import settings
        from runner.ui import UI

        self.result = result
        self.client = client
        self.renderer = renderer
        self.settings = settings
        self.feed = LeaderboardFeed(client) if client is not None else None
        self.notice: str | None = None
        self.submitted = False
        self._pending_submit = None
        self._underlying: State | None = None
        self._ui = UI
        self.share_link = share_url(result.score if result else 0, GAME_PAGE_URL)

    def on_enter(self, previous: "State | None") -> None:
        self._underlying = previous
        if self.feed is not None:
            self.feed.refresh()

    @property
    def submitting(self) -> bool:
        return self._pending_submit is not None

    def submit(self) -> None:
        if self.client is None or self.result is None or self.submitting or self.submitted:
            return
        self.notice = None
        self._pending_submit = self.client.submit(self.settings.twitter_handle, self.settings.wallet, self.result.score)

    def _poll_submit(self) -> None:
        fut = self._pending_submit
        if fut is None or not fut.done():
            return
        self._pending_submit = None
        err = fut.exception()
        if err is not None:
            _state_log.warn("score submission failed:", err)
            self.notice = SUBMIT_FAILED
            return
        self.submitted = True
        self.notice = SUBMIT_OK
        if self.feed is not None:
            self.feed.refresh()

    def handle_actions(self, actions: Sequence[str]) -> None:
        for act in actions:
            if act == "dismiss" and self.notice:
                self.notice = None
            elif act == "submit":
                self.submit()
            elif act == "share":
                _state_log.info("share:", self.share_link)
                webbrowser.open(self.share_link)
            elif act == "retry" and self.manager:
                underlying = self._underlying
                self.manager.pop()
                if isinstance(underlying, RunState):
                    underlying.restart()
                else:
                    self.manager.set(RunState(self.client, self.renderer))
                return
            elif act == "menu" and self.manager:
                self.manager.set(TitleState(self.client, self.renderer))
                return

    def update(self, dt: float) -> None:
        self._poll_submit()
        if self.feed is not None:
            self.feed.poll()

    def render(self, surface: pygame.Surface) -> None:
        UI = self._ui
        if self._underlying is not None:
            self._underlying.render(surface)
        UI.render_overlay(surface, alpha=120)
        w, h = surface.get_width(), surface.get_height()
        UI.render_panel(surface, (w // 6, h // 10, w * 2 // 3, h * 4 // 5))
        y = h // 10 + 30
        UI.render_title(surface, "GAME OVER", y)
        score = self.result.score if self.result else 0
        seconds = self.result.seconds if self.result else 0
        UI.render_msg(surface, f"Score {format_score(score)}   Time {seconds}s", y + 45)
        y += 80
        for line in _board_lines(self.feed):
            UI.draw_text(surface, line, w // 2, y, size=20, align="center")
            y += 20
        if self.submitting:
            UI.render_msg(surface, "Submitting...", y + 20, color=UI.MUTED_COLOR)
        elif self.notice:
            color = UI.ACCENT_COLOR if self.notice == SUBMIT_OK else UI.ERROR_COLOR
            UI.render_msg(surface, self.notice, y + 20, color=color)
        UI.render_hint(surface, "R retry   S submit   T share   ESC menu", h - h // 10 - 24)
