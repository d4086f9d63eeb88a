"""AssetManager

Central lazy loading and caching for images under `assets/`. The game runs
without any art: the character image is optional and a missing or
unreadable file degrades to the placeholder rectangle drawn by the
renderer. Failures are logged once and cached as misses.
"""

from __future__ import annotations

import os
from typing import Dict, Optional

import pygame

from runner.logger import get_logger

log = get_logger("assets")

IMG_ROOT = os.environ.get("RUNNER_ASSET_DIR", "assets")
CHARACTER_IMAGE = "character.png"

_MISSING = object()


class AssetManager:
    def __init__(self, root: str = IMG_ROOT) -> None:
        self.root = root
        self._images: Dict[str, object] = {}

    def get_image(self, rel_path: str) -> pygame.Surface:
        """Load (and cache) an image; raises if it cannot be read."""
        surf = self._images.get(rel_path)
        if surf is None or surf is _MISSING:
            full = os.path.join(self.root, rel_path)
            raw = pygame.image.load(full)
            # convert_alpha() needs a display mode; headless runs keep the raw format
            if pygame.display.get_init() and pygame.display.get_surface():
                try:
                    raw = raw.convert_alpha()
                except pygame.error:
                    pass
            surf = raw
            self._images[rel_path] = surf
        return surf  # type: ignore[return-value]

    def get_optional_image(self, rel_path: str) -> Optional[pygame.Surface]:
        cached = self._images.get(rel_path)
        if cached is _MISSING:
            return None
        if cached is not None:
            return cached  # type: ignore[return-value]
        try:
            return self.get_image(rel_path)
        except (pygame.error, FileNotFoundError, OSError) as e:
            log.warn(f"image {rel_path!r} unavailable, using placeholder:", e)
            self._images[rel_path] = _MISSING
            return None

    def character_image(self) -> Optional[pygame.Surface]:
        return self.get_optional_image(CHARACTER_IMAGE)


__all__ = ["AssetManager", "CHARACTER_IMAGE"]
