"""Frame composition.

Rendering is split in two:

1. `render(state)` is a pure read of a SimulationState that returns a list
   of draw commands in layer order (bottom -> top):
       clear, ground line, ground dots, clouds, character, obstacles, score
2. `SurfaceRenderer.draw(commands, surface)` executes them with pygame on
   the base canvas and scales the result to the window.

Keeping step 1 free of pygame lets tests assert exact shapes and offsets
(e.g. a sign's post is centred under its board) without a display.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

import pygame

from runner.constants import BASE_H, BASE_W
from runner.logger import get_logger

_log = get_logger("renderer")

BACKGROUND = "#f7f7f7"
GROUND_COLOR = "#535353"
DOT_COLOR = "#9e9e9e"
CLOUD_COLOR = "#cfcfcf"
CHARACTER_COLOR = "#222222"
POST_COLOR = "#222222"
BOARD_COLOR = "#2e7d32"
BOARD_TEXT_COLOR = "#ffffff"
SCORE_COLOR = "#222222"

SIGN_LABEL = "PUMP"
DOT_SPACING = 48
DOT_SCROLL_PX_PER_MS = 0.12


# ---- Draw commands ----------------------------------------------------
@dataclass(frozen=True)
class Clear:
    color: str


@dataclass(frozen=True)
class Line:
    start: Tuple[float, float]
    end: Tuple[float, float]
    color: str
    width: int = 1


@dataclass(frozen=True)
class FillRect:
    rect: Tuple[float, float, float, float]
    color: str
    tag: str = ""


@dataclass(frozen=True)
class Text:
    text: str
    pos: Tuple[float, float]
    size: int
    color: str
    anchor: str = "topleft"  # any pygame.Rect anchor attribute name
    bold: bool = False


@dataclass(frozen=True)
class Image:
    key: str
    rect: Tuple[float, float, float, float]


DrawCommand = Union[Clear, Line, FillRect, Text, Image]


# ---- Pure scene description -------------------------------------------
def _draw_background(state) -> List[DrawCommand]:
    gy = state.ground_y
    cmds: List[DrawCommand] = [Line((0, gy), (state.width, gy), GROUND_COLOR, 2)]

    offset = (state.clock_ms * DOT_SCROLL_PX_PER_MS) % DOT_SPACING
    i = -offset
    idx = 0
    while i < state.width:
        y = gy + 6 + (2 if idx % 2 else -2)
        cmds.append(FillRect((i, y, 8, 2), DOT_COLOR, tag="dot"))
        i += DOT_SPACING
        idx += 1

    for cl in state.clouds:
        cmds.append(FillRect((cl.x, cl.y, cl.w, 6), CLOUD_COLOR, tag="cloud"))
        cmds.append(FillRect((cl.x + 10, cl.y - 4, cl.w * 0.6, 6), CLOUD_COLOR, tag="cloud"))
    return cmds


def _draw_character(state, has_image: bool) -> List[DrawCommand]:
    c = state.character
    rect = (c.x, c.y, c.w, c.h)
    if has_image:
        return [Image("character", rect)]
    return [FillRect(rect, CHARACTER_COLOR, tag="character")]


def _draw_sign(o) -> List[DrawCommand]:
    post = o.post_rect()
    board = o.board_rect()
    return [
        FillRect((post.x, post.y, post.w, post.h), POST_COLOR, tag="post"),
        FillRect((board.x, board.y, board.w, board.h), BOARD_COLOR, tag="board"),
        Text(SIGN_LABEL, (board.x + board.w / 2, board.y + board.h / 2 + 1), 12, BOARD_TEXT_COLOR, "center", True),
    ]


def _draw_box(o) -> List[DrawCommand]:
    b = o.bounds()
    return [FillRect((b.x, b.y, b.w, b.h), POST_COLOR, tag="obstacle")]


_OBSTACLE_DRAWERS: Dict[str, Callable[[object], List[DrawCommand]]] = {"sign": _draw_sign}


def register_obstacle_drawer(kind: str, drawer: Callable[[object], List[DrawCommand]]) -> None:
    _OBSTACLE_DRAWERS[kind] = drawer


def format_score(score: float) -> str:
    return str(int(score // 1)).zfill(5)


def render(state, has_character_image: bool = False) -> List[DrawCommand]:
    cmds: List[DrawCommand] = [Clear(BACKGROUND)]
    cmds.extend(_draw_background(state))
    cmds.extend(_draw_character(state, has_character_image))
    for o in state.obstacles:
        cmds.extend(_OBSTACLE_DRAWERS.get(o.kind, _draw_box)(o))
    cmds.append(Text(format_score(state.score), (state.width - 16, 10), 16, SCORE_COLOR, "topright"))
    return cmds


# ---- pygame execution --------------------------------------------------
class SurfaceRenderer:
    """Executes draw commands on an off-screen base canvas.

    Usage:
        r = SurfaceRenderer(images={"character": surf})
        r.present(render(state, r.has_image("character")), window)
    """

    def __init__(self, images: Optional[Dict[str, pygame.Surface]] = None, size=(BASE_W, BASE_H)) -> None:
        self.images: Dict[str, pygame.Surface] = {k: v for k, v in (images or {}).items() if v is not None}
        self.canvas = pygame.Surface(size)
        self._fonts: Dict[Tuple[int, bool], pygame.font.Font] = {}

    def has_image(self, key: str) -> bool:
        return key in self.images

    def _font(self, size: int, bold: bool) -> pygame.font.Font:
        key = (size, bold)
        font = self._fonts.get(key)
        if font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            font = pygame.font.Font(None, int(size * 1.4))
            font.set_bold(bold)
            self._fonts[key] = font
        return font

    def draw(self, commands: List[DrawCommand], surface: pygame.Surface, capture_sequence: Optional[List[str]] = None):
        for cmd in commands:
            if isinstance(cmd, Clear):
                surface.fill(pygame.Color(cmd.color))
            elif isinstance(cmd, Line):
                pygame.draw.line(surface, pygame.Color(cmd.color), cmd.start, cmd.end, cmd.width)
            elif isinstance(cmd, FillRect):
                x, y, w, h = cmd.rect
                pygame.draw.rect(surface, pygame.Color(cmd.color), pygame.Rect(round(x), round(y), round(w), round(h)))
            elif isinstance(cmd, Image):
                img = self.images.get(cmd.key)
                x, y, w, h = cmd.rect
                if img is None:
                    pygame.draw.rect(surface, pygame.Color(CHARACTER_COLOR), pygame.Rect(round(x), round(y), round(w), round(h)))
                else:
                    surface.blit(pygame.transform.scale(img, (round(w), round(h))), (round(x), round(y)))
            elif isinstance(cmd, Text):
                text_surf = self._font(cmd.size, cmd.bold).render(cmd.text, True, pygame.Color(cmd.color))
                rect = text_surf.get_rect()
                setattr(rect, cmd.anchor, (round(cmd.pos[0]), round(cmd.pos[1])))
                surface.blit(text_surf, rect)
            else:  # pragma: no cover - unknown command types are a programming error
                _log.warn("unknown draw command", cmd)
                continue
            if capture_sequence is not None:
                capture_sequence.append(type(cmd).__name__)

    def present(self, commands: List[DrawCommand], target_surface: pygame.Surface) -> None:
        self.draw(commands, self.canvas)
        if self.canvas.get_size() != target_surface.get_size():
            scaled = pygame.transform.scale(self.canvas, target_surface.get_size())
            target_surface.blit(scaled, (0, 0))
        else:
            target_surface.blit(self.canvas, (0, 0))


__all__ = [
    "Clear",
    "Line",
    "FillRect",
    "Text",
    "Image",
    "DrawCommand",
    "render",
    "format_score",
    "register_obstacle_drawer",
    "SurfaceRenderer",
]
