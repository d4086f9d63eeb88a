"""Centralized input routing.

Transforms raw pygame events into high-level *actions* depending on the
active state, so states never parse device events themselves.

- A dict from state name -> list of rules processed in declaration order.
- Each rule is a function(event) -> action|None. The first matching rule
  adds its action to the output list. An action repeated back to back
  (two jump keys in one frame) is collapsed; otherwise event order is kept
  so press/release/press within a frame still ends held.
- Keyboard, mouse and touch all map onto the same actions, so the run only
  ever sees "jump"/"jump_release" and "duck"/"duck_release".

`IntentTracker` folds the run actions of one frame into the InputState the
simulation consumes.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

import pygame

from runner.simulation import InputState

Action = str
Rule = Callable[[pygame.event.Event], Action | None]


def _key_rule(key: int, action: Action, event_type=pygame.KEYDOWN) -> Rule:
    def _r(e: pygame.event.Event):
        if e.type == event_type and getattr(e, "key", None) == key:
            return action
        return None

    return _r


def _mouse_button_rule(button: int, action: Action, event_type=pygame.MOUSEBUTTONDOWN) -> Rule:
    def _r(e: pygame.event.Event):
        if e.type == event_type and getattr(e, "button", None) == button:
            return action
        return None

    return _r


def _event_type_rule(event_type: int, action: Action) -> Rule:
    def _r(e: pygame.event.Event):
        return action if e.type == event_type else None

    return _r


class InputRouter:
    """Maps pygame events to semantic actions for the active state."""

    def __init__(self) -> None:
        self._rules: Dict[str, List[Rule]] = {}
        self._register_default_rules()

    def _register_default_rules(self) -> None:
        from runner.settings import settings

        def bind(keys, action, event_type=pygame.KEYDOWN):
            return [_key_rule(k, action, event_type) for k in keys]

        def simple(state_name: str) -> List[Rule]:
            rules: List[Rule] = []
            for act, keys in settings.key_bindings.get(state_name, {}).items():
                rules.extend(bind(keys, act))
            return rules

        title_rules = simple("TitleState")
        title_rules.append(_mouse_button_rule(1, "start"))
        title_rules.append(_event_type_rule(pygame.FINGERDOWN, "start"))

        # Run: press/release pairs so held state can be tracked
        run_binds = settings.key_bindings.get("RunState", {})
        run_rules: List[Rule] = []
        for act in ("jump", "duck"):
            if act in run_binds:
                run_rules.extend(bind(run_binds[act], act, pygame.KEYDOWN))
                run_rules.extend(bind(run_binds[act], f"{act}_release", pygame.KEYUP))
        if "pause_toggle" in run_binds:
            run_rules.extend(bind(run_binds["pause_toggle"], "pause_toggle"))
        run_rules.append(_mouse_button_rule(1, "jump", pygame.MOUSEBUTTONDOWN))
        run_rules.append(_mouse_button_rule(1, "jump_release", pygame.MOUSEBUTTONUP))
        run_rules.append(_event_type_rule(pygame.FINGERDOWN, "jump"))
        run_rules.append(_event_type_rule(pygame.FINGERUP, "jump_release"))

        game_over_rules = simple("GameOverState")
        game_over_rules.append(_mouse_button_rule(1, "retry"))

        self._rules.update(
            {
                "TitleState": title_rules,
                "RunState": run_rules,
                "PauseState": simple("PauseState"),
                "GameOverState": game_over_rules,
            }
        )

    def register_rules(self, state_name: str, rules: Iterable[Rule], append: bool = True) -> None:
        lst = self._rules.setdefault(state_name, [])
        if append:
            lst.extend(rules)
        else:
            self._rules[state_name] = list(rules)

    def process(self, events: Iterable[pygame.event.Event], state_name: str) -> List[Action]:
        rules = self._rules.get(state_name, [])
        actions: List[Action] = []
        for e in events:
            for rule in rules:
                a = rule(e)
                if a:
                    if not actions or actions[-1] != a:
                        actions.append(a)
                    break
        return actions


class IntentTracker:
    """Accumulates jump/duck actions into per-tick InputState values."""

    def __init__(self) -> None:
        self.jump_held = False
        self.duck_held = False
        self._jump_pressed = False

    def feed(self, actions: Iterable[Action]) -> None:
        for act in actions:
            if act == "jump":
                if not self.jump_held:
                    self._jump_pressed = True
                self.jump_held = True
            elif act == "jump_release":
                self.jump_held = False
            elif act == "duck":
                self.duck_held = True
            elif act == "duck_release":
                self.duck_held = False

    def sample(self) -> InputState:
        # "Pressed this frame" semantics; the edge is consumed by the sample.
        pressed = self._jump_pressed
        self._jump_pressed = False
        return InputState(jump_pressed=pressed, jump_held=self.jump_held, duck_held=self.duck_held)

    def clear(self) -> None:
        self.jump_held = False
        self.duck_held = False
        self._jump_pressed = False


__all__ = ["InputRouter", "IntentTracker", "Action"]
