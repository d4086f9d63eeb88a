import pygame

from runner.ui import UI


def test_text_cache_hits_and_eviction():
    pygame.init()
    UI.clear_text_cache()
    original = UI._text_cache_capacity
    try:
        UI._text_cache_capacity = 2
        a = UI.render_text("a", 20)
        assert UI.render_text("a", 20) is a
        UI.render_text("b", 20)
        UI.render_text("c", 20)
        stats = UI.get_text_cache_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 3
        assert stats["evictions"] == 1
        assert stats["size"] == 2
    finally:
        UI._text_cache_capacity = original
        UI.clear_text_cache()


def test_draw_text_alignment():
    pygame.init()
    surface = pygame.Surface((200, 100))
    left = UI.draw_text(surface, "hi", 10, 10)
    assert left.topleft == (10, 10)
    right = UI.draw_text(surface, "hi", 190, 10, align="right")
    assert right.topright == (190, 10)
    center = UI.draw_text(surface, "hi", 100, 50, align="center")
    assert center.center == (100, 50)
