from __future__ import annotations
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional
import os

from dotenv import load_dotenv

ENV_PREFIX = "GALLERY_"

class ConfigError(RuntimeError):
    pass

@dataclass(frozen=True)
class GalleryConfig:
    root: Path = Path("gallery")
    site_title: str = "My Art Shop"
    currency: str = "USD"           # passed through untouched
    default_price: float = 25.00    # fallback when price.txt is missing or junk
    preview_max_width: int = 900
    preview_max_height: int = 900
    preview_quality: int = 82
    preview_upscale: bool = False

    def with_overrides(self, **kw) -> "GalleryConfig":
        return replace(self, **{k: v for k, v in kw.items() if v is not None})

def _get(env: Mapping[str, str], key: str) -> Optional[str]:
    v = env.get(key)
    if v is None: return None
    v = v.strip()
    return v or None

def _as_int(key: str, raw: str, lo: int = 1, hi: Optional[int] = None) -> int:
    try:
        v = int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}")
    if v < lo or (hi is not None and v > hi):
        raise ConfigError(f"{key} out of range: {v}")
    return v

def _as_float(key: str, raw: str) -> float:
    try:
        v = float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}")
    if v != v or v < 0 or v == float("inf"):
        raise ConfigError(f"{key} must be a non-negative number, got {raw!r}")
    return v

def _as_bool(key: str, raw: str) -> bool:
    low = raw.lower()
    if low in ("1", "true", "yes", "on"): return True
    if low in ("0", "false", "no", "off"): return False
    raise ConfigError(f"{key} must be a boolean, got {raw!r}")

def config_from_env(env: Optional[Mapping[str, str]] = None) -> GalleryConfig:
    """Build a GalleryConfig from GALLERY_* variables; unset ones keep their defaults."""
    env = os.environ if env is None else env
    kw = {}
    if (v := _get(env, "GALLERY_DIR")): kw["root"] = Path(v).expanduser()
    if (v := _get(env, ENV_PREFIX + "SITE_TITLE")): kw["site_title"] = v
    if (v := _get(env, ENV_PREFIX + "CURRENCY")): kw["currency"] = v
    if (v := _get(env, ENV_PREFIX + "DEFAULT_PRICE")):
        kw["default_price"] = _as_float(ENV_PREFIX + "DEFAULT_PRICE", v)
    if (v := _get(env, ENV_PREFIX + "PREVIEW_MAX_WIDTH")):
        kw["preview_max_width"] = _as_int(ENV_PREFIX + "PREVIEW_MAX_WIDTH", v)
    if (v := _get(env, ENV_PREFIX + "PREVIEW_MAX_HEIGHT")):
        kw["preview_max_height"] = _as_int(ENV_PREFIX + "PREVIEW_MAX_HEIGHT", v)
    if (v := _get(env, ENV_PREFIX + "PREVIEW_QUALITY")):
        kw["preview_quality"] = _as_int(ENV_PREFIX + "PREVIEW_QUALITY", v, lo=1, hi=95)
    if (v := _get(env, ENV_PREFIX + "PREVIEW_UPSCALE")):
        kw["preview_upscale"] = _as_bool(ENV_PREFIX + "PREVIEW_UPSCALE", v)
    return GalleryConfig(**kw)

def load_config(dotenv_path: Optional[Path] = None) -> GalleryConfig:
    # .env never overrides variables already exported by the caller
    load_dotenv(dotenv_path=dotenv_path, override=False)
    return config_from_env()
