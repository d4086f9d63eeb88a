"""Lightweight leveled logging.

Each module grabs a named logger via `get_logger(name)`. The minimum level is
read once from the RUNNER_LOG_LEVEL environment variable (default INFO).
Lines look like:

    [12:04:55] INFO  spawner: cluster of 3 at x=830.0
"""

from __future__ import annotations

import os
import sys
import time
from dataclasses import dataclass
from typing import TextIO

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}
_DEFAULT_LEVEL_NAME = os.environ.get("RUNNER_LOG_LEVEL", "INFO").upper()
_MIN_LEVEL = _LEVELS.get(_DEFAULT_LEVEL_NAME, 20)


@dataclass
class Logger:
    name: str
    stream: TextIO | None = None
    min_level: int | None = None

    def _log(self, level: str, *parts):
        numeric = _LEVELS[level]
        threshold = _MIN_LEVEL if self.min_level is None else self.min_level
        if numeric < threshold:
            return
        stream = self.stream if self.stream is not None else sys.stderr
        if stream is None:
            return
        ts = time.strftime("%H:%M:%S")
        msg = " ".join(str(p) for p in parts)
        line = f"[{ts}] {level:<5} {self.name}: {msg}\n"
        try:
            stream.write(line)
            stream.flush()
        except Exception:
            # pythonw and some wrapped terminals have no usable stderr.
            return

    def debug(self, *parts):
        self._log("DEBUG", *parts)

    def info(self, *parts):
        self._log("INFO", *parts)

    def warn(self, *parts):
        self._log("WARN", *parts)

    def error(self, *parts):
        self._log("ERROR", *parts)


_default_logger = Logger("runner")


def get_logger(name: str = "runner") -> Logger:
    return Logger(name)


info = _default_logger.info
debug = _default_logger.debug
warn = _default_logger.warn
error = _default_logger.error

__all__ = ["get_logger", "info", "debug", "warn", "error", "Logger"]
