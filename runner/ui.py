from collections import OrderedDict

import pygame


class UI:
    TEXT_COLOR = "#222222"
    MUTED_COLOR = "#757575"
    ACCENT_COLOR = "#2e7d32"
    ERROR_COLOR = "#c62828"
    PANEL_COLOR = (247, 247, 247, 230)

    _fonts: "dict[int, pygame.font.Font]" = {}
    # Rendered text cache keyed by (text, size, color)
    _text_cache: "OrderedDict[tuple[str, int, str], pygame.Surface]" = OrderedDict()
    _text_cache_capacity: int = 128
    _text_cache_stats = {"hits": 0, "misses": 0, "evictions": 0}

    @staticmethod
    def clear_text_cache():
        UI._text_cache.clear()
        UI._text_cache_stats = {"hits": 0, "misses": 0, "evictions": 0}

    @staticmethod
    def get_text_cache_stats():
        return dict(UI._text_cache_stats | {"size": len(UI._text_cache), "capacity": UI._text_cache_capacity})

    @staticmethod
    def get_font(size):
        font = UI._fonts.get(size)
        if font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            font = pygame.font.Font(None, size)
            UI._fonts[size] = font
        return font

    @staticmethod
    def render_text(text, size, color=TEXT_COLOR):
        key = (text, size, str(color))
        cached = UI._text_cache.get(key)
        if cached is not None:
            UI._text_cache.move_to_end(key)
            UI._text_cache_stats["hits"] += 1
            return cached
        UI._text_cache_stats["misses"] += 1
        surf = UI.get_font(size).render(text, True, pygame.Color(color))
        while len(UI._text_cache) >= UI._text_cache_capacity:
            UI._text_cache.popitem(last=False)
            UI._text_cache_stats["evictions"] += 1
        UI._text_cache[key] = surf
        return surf

    @staticmethod
    def draw_text(surface, text, x, y, size=24, color=TEXT_COLOR, align="left"):
        surf = UI.render_text(text, size, color)
        if align == "center":
            rect = surf.get_rect(center=(x, y))
        elif align == "right":
            rect = surf.get_rect(topright=(x, y))
        else:
            rect = surf.get_rect(topleft=(x, y))
        surface.blit(surf, rect)
        return rect

    @staticmethod
    def render_title(surface, title, y):
        UI.draw_text(surface, title, surface.get_width() // 2, y, size=48, color=UI.ACCENT_COLOR, align="center")

    @staticmethod
    def render_msg(surface, msg, y, color=None):
        UI.draw_text(surface, msg, surface.get_width() // 2, y, size=28, color=color or UI.TEXT_COLOR, align="center")

    @staticmethod
    def render_hint(surface, text, y=None):
        if y is None:
            y = surface.get_height() - 24
        UI.draw_text(surface, text, surface.get_width() // 2, y, size=18, color=UI.MUTED_COLOR, align="center")

    @staticmethod
    def render_overlay(surface, alpha=140):
        overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, alpha))
        surface.blit(overlay, (0, 0))

    @staticmethod
    def render_panel(surface, rect):
        panel = pygame.Surface((rect[2], rect[3]), pygame.SRCALPHA)
        panel.fill(UI.PANEL_COLOR)
        surface.blit(panel, (rect[0], rect[1]))
        pygame.draw.rect(surface, pygame.Color(UI.TEXT_COLOR), pygame.Rect(rect), 1)
