"""Application entry point.

Opens the window, wires the input router, score client and state stack,
then runs the frame loop. The simulation itself never sees pygame time:
each frame's delta goes through FrameClock before reaching the states.
"""

from __future__ import annotations

import pygame

from runner.asset_manager import AssetManager
from runner.constants import BASE_H, BASE_W
from runner.frame_clock import FrameClock
from runner.input_router import InputRouter
from runner.logger import get_logger
from runner.renderer import SurfaceRenderer
from runner.score_client import ScoreClient
from runner.settings import settings
from runner.state_manager import StateManager, TitleState

log = get_logger("app")


def main():
    pygame.init()
    pygame.display.set_caption("Virgen Jump")
    if settings.fullscreen:
        screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    else:
        scale = settings.window_scale
        screen = pygame.display.set_mode((BASE_W * scale, BASE_H * scale), pygame.RESIZABLE)
    clock = pygame.time.Clock()
    frame_clock = FrameClock()

    assets = AssetManager()
    renderer = SurfaceRenderer(images={"character": assets.character_image()})
    client = ScoreClient.from_settings(settings)

    sm = StateManager()
    router = InputRouter()
    sm.set(TitleState(client, renderer))

    running = True
    try:
        while running:
            # --- Single central event poll ---
            events = pygame.event.get()
            for e in events:
                if e.type == pygame.QUIT:
                    running = False

            current_name = sm.current.name if sm.current else ""
            actions = router.process(events, current_name)
            sm.handle_actions(actions)
            if sm.quit_requested:
                running = False

            # --- Update & Render cycle ---
            clock.tick(60)
            dt_ms = frame_clock.advance(pygame.time.get_ticks())
            sm.update(dt_ms / 1000.0)
            current_surface = pygame.display.get_surface()
            if current_surface is not None and current_surface != screen:
                screen = current_surface
            sm.render(screen)
            pygame.display.flip()
    finally:
        settings.save_settings()
        client.close()
        pygame.quit()
        log.info("bye")


if __name__ == "__main__":  # pragma: no cover
    main()
