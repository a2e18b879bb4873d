from pathlib import Path

import pytest

from gallery.config import ConfigError, GalleryConfig, config_from_env, load_config

def test_defaults():
    cfg = config_from_env({})
    assert cfg == GalleryConfig()
    assert cfg.default_price == 25.00
    assert (cfg.preview_max_width, cfg.preview_max_height) == (900, 900)
    assert cfg.preview_quality == 82
    assert cfg.preview_upscale is False

def test_env_values():
    cfg = config_from_env({
        "GALLERY_DIR": "/srv/art",
        "GALLERY_CURRENCY": "EUR",
        "GALLERY_DEFAULT_PRICE": "19.99",
        "GALLERY_PREVIEW_MAX_WIDTH": "640",
        "GALLERY_PREVIEW_MAX_HEIGHT": "480",
        "GALLERY_PREVIEW_UPSCALE": "yes",
        "GALLERY_SITE_TITLE": "  ",
    })
    assert cfg.root == Path("/srv/art")
    assert cfg.currency == "EUR"
    assert cfg.default_price == 19.99
    assert (cfg.preview_max_width, cfg.preview_max_height) == (640, 480)
    assert cfg.preview_upscale is True
    assert cfg.site_title == "My Art Shop"

@pytest.mark.parametrize("key,value", [
    ("GALLERY_DEFAULT_PRICE", "cheap"),
    ("GALLERY_DEFAULT_PRICE", "-1"),
    ("GALLERY_PREVIEW_MAX_WIDTH", "wide"),
    ("GALLERY_PREVIEW_MAX_HEIGHT", "0"),
    ("GALLERY_PREVIEW_QUALITY", "101"),
    ("GALLERY_PREVIEW_UPSCALE", "maybe"),
])
def test_bad_values_raise(key, value):
    with pytest.raises(ConfigError):
        config_from_env({key: value})

def test_config_is_immutable():
    cfg = GalleryConfig()
    with pytest.raises(Exception):
        cfg.currency = "EUR"
    assert cfg.with_overrides(currency="EUR", root=None).currency == "EUR"
    assert cfg.with_overrides(root=None).root == cfg.root

def test_load_config_reads_dotenv(tmp_path, monkeypatch):
    monkeypatch.setenv("GALLERY_CURRENCY", "placeholder")
    monkeypatch.delenv("GALLERY_CURRENCY")
    monkeypatch.setenv("GALLERY_DEFAULT_PRICE", "5")
    env = tmp_path / ".env"
    env.write_text("GALLERY_CURRENCY=GBP\nGALLERY_DEFAULT_PRICE=99\n")
    cfg = load_config(env)
    assert cfg.currency == "GBP"
    assert cfg.default_price == 5.0  # exported values win over .env
