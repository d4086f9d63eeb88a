import pygame
import pytest

from runner.asset_manager import CHARACTER_IMAGE, AssetManager


def test_missing_character_image_degrades_to_none(tmp_path):
    am = AssetManager(root=str(tmp_path))
    assert am.character_image() is None
    # miss is cached; a file appearing later is not picked up mid-session
    pygame.image.save(pygame.Surface((4, 4)), str(tmp_path / CHARACTER_IMAGE))
    assert am.get_optional_image(CHARACTER_IMAGE) is None


def test_unreadable_image_degrades_to_none(tmp_path):
    (tmp_path / "broken.png").write_bytes(b"not a png")
    am = AssetManager(root=str(tmp_path))
    assert am.get_optional_image("broken.png") is None


def test_loads_and_caches_image(tmp_path):
    pygame.init()
    surf = pygame.Surface((70, 76))
    surf.fill((10, 20, 30))
    pygame.image.save(surf, str(tmp_path / CHARACTER_IMAGE))
    am = AssetManager(root=str(tmp_path))
    img = am.character_image()
    assert img is not None
    assert img.get_size() == (70, 76)
    assert am.get_image(CHARACTER_IMAGE) is img


def test_get_image_raises_when_missing(tmp_path):
    am = AssetManager(root=str(tmp_path))
    with pytest.raises((FileNotFoundError, pygame.error)):
        am.get_image("nope.png")
