import json
import os

import pygame

from runner.logger import get_logger

log = get_logger("settings")

DATA_DIR = os.environ.get("RUNNER_DATA_DIR", "data")


class Settings:
    SETTINGS_FILE = os.path.join(DATA_DIR, "settings.json")

    def __init__(self):
        # Default settings
        self._fullscreen = False
        self._window_scale = 1
        self._twitter_handle = ""
        self._wallet = ""
        self._api_url = os.environ.get("RUNNER_API_URL", "")
        self._dirty = False
        # Key bindings use pygame key integers, grouped by the state that reads them
        self.key_bindings = {
            "TitleState": {
                "start": [pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE],
                "quit": [pygame.K_ESCAPE],
            },
            "RunState": {
                "jump": [pygame.K_SPACE, pygame.K_UP],
                "duck": [pygame.K_DOWN],
                "pause_toggle": [pygame.K_ESCAPE],
            },
            "PauseState": {
                "pause_close": [pygame.K_ESCAPE],
                "pause_menu": [pygame.K_m],
            },
            "GameOverState": {
                "retry": [pygame.K_r, pygame.K_RETURN],
                "submit": [pygame.K_s],
                "share": [pygame.K_t],
                "dismiss": [pygame.K_SPACE],
                "menu": [pygame.K_ESCAPE],
            },
        }
        self.load_settings()

    @property
    def fullscreen(self) -> bool:
        return self._fullscreen

    @fullscreen.setter
    def fullscreen(self, value: bool) -> None:
        new_val = bool(value)
        if new_val != self._fullscreen:
            self._fullscreen = new_val
            self._dirty = True
            self.flush()

    @property
    def window_scale(self) -> int:
        return self._window_scale

    @window_scale.setter
    def window_scale(self, value: int) -> None:
        new_val = max(1, min(4, int(value)))
        if new_val != self._window_scale:
            self._window_scale = new_val
            self._dirty = True
            self.flush()

    @property
    def twitter_handle(self) -> str:
        return self._twitter_handle

    @twitter_handle.setter
    def twitter_handle(self, value: str) -> None:
        new_val = (value or "").strip()
        if new_val != self._twitter_handle:
            self._twitter_handle = new_val
            self._dirty = True
            self.flush()

    @property
    def wallet(self) -> str:
        return self._wallet

    @wallet.setter
    def wallet(self, value: str) -> None:
        new_val = (value or "").strip()
        if new_val != self._wallet:
            self._wallet = new_val
            self._dirty = True
            self.flush()

    @property
    def api_url(self) -> str:
        """Base URL of a remote score API; empty means use the local data dir."""
        return self._api_url

    @api_url.setter
    def api_url(self, value: str) -> None:
        new_val = (value or "").rstrip("/")
        if new_val != self._api_url:
            self._api_url = new_val
            self._dirty = True
            self.flush()

    def load_settings(self):
        """Load settings from the JSON file."""
        if os.path.exists(self.SETTINGS_FILE):
            try:
                with open(self.SETTINGS_FILE, "r") as f:
                    data = json.load(f)
                    self._fullscreen = bool(data.get("fullscreen", self._fullscreen))
                    self._window_scale = int(data.get("window_scale", self._window_scale))
                    self._twitter_handle = str(data.get("twitter_handle", self._twitter_handle))
                    self._wallet = str(data.get("wallet", self._wallet))
                    # Environment wins over the file so deployments can point at a server
                    if not os.environ.get("RUNNER_API_URL"):
                        self._api_url = str(data.get("api_url", self._api_url))

                    # Merge loaded bindings over defaults so new actions keep their keys
                    loaded_bindings = data.get("key_bindings", {})
                    for state, binds in loaded_bindings.items():
                        if state in self.key_bindings:
                            for action, keys in binds.items():
                                self.key_bindings[state][action] = keys

            except (json.JSONDecodeError, IOError, ValueError, TypeError) as e:
                log.warn("Error loading settings; regenerating", e)
                self._dirty = True
                self.flush()
        else:
            self._dirty = True
            self.flush()

    def save_settings(self):
        if self._dirty:
            self.flush()

    def flush(self):
        """Write settings to disk if dirty and clear dirty flag."""
        if not self._dirty:
            return
        data = {
            "fullscreen": self._fullscreen,
            "window_scale": self._window_scale,
            "twitter_handle": self._twitter_handle,
            "wallet": self._wallet,
            "api_url": self._api_url,
            "key_bindings": self.key_bindings,
        }
        try:
            directory = os.path.dirname(self.SETTINGS_FILE)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.SETTINGS_FILE, "w") as f:
                json.dump(data, f, indent=4)
            self._dirty = False
            log.debug("Settings flushed")
        except IOError as e:
            log.error("Error saving settings", e)


settings = Settings()
