from __future__ import annotations
from pathlib import Path
from typing import Optional, Tuple, Union
import logging, os, shutil, tempfile, threading, weakref

from gallery.config import GalleryConfig
from gallery.schemas import Item
from gallery.services.metadata import PRIMARY_KIND, PREVIEW_SUFFIX, resolve_asset
from gallery.services.utils import is_file

logger = logging.getLogger(__name__)

# ---------- Optional deps (graceful fallbacks) ----------
HAS_PIL = False
try:
    from PIL import Image, ImageOps, features
    HAS_PIL = True
except Exception:
    pass

PathLike = Union[str, Path]

def preview_path(cache_dir: PathLike, base_name: str) -> Path:
    return Path(cache_dir) / f"{base_name}{PREVIEW_SUFFIX}"

def fit_size(w: int, h: int, max_w: int, max_h: int, upscale: bool = False) -> Tuple[int, int]:
    """Best-fit (w, h) inside max_w x max_h keeping aspect ratio; never crops."""
    scale = min(max_w / w, max_h / h)
    if not upscale:
        scale = min(scale, 1.0)
    return max(1, round(w * scale)), max(1, round(h * scale))

# ---------- Transformers ----------
class ImageTransformer:
    name = "base"

    def write(self, source: Path, dest: Path, max_w: int, max_h: int) -> None:
        raise NotImplementedError

class CopyTransformer(ImageTransformer):
    """Verbatim copy; used when Pillow can't be used or gave up on a file."""
    name = "copy"

    def write(self, source: Path, dest: Path, max_w: int, max_h: int) -> None:
        shutil.copyfile(source, dest)

class PillowTransformer(ImageTransformer):
    """RGB, best-fit resize, JPEG at a fixed quality, no EXIF/ICC carried over."""
    name = "pillow"

    def __init__(self, quality: int = 82, upscale: bool = False):
        self.quality = quality
        self.upscale = upscale

    @staticmethod
    def _to_rgb(im: "Image.Image") -> "Image.Image":
        if im.mode in ("RGBA", "LA") or (im.mode == "P" and "transparency" in im.info):
            im = im.convert("RGBA")
            bg = Image.new("RGB", im.size, (255, 255, 255))
            bg.paste(im, mask=im.getchannel("A"))
            return bg
        return im if im.mode == "RGB" else im.convert("RGB")

    def write(self, source: Path, dest: Path, max_w: int, max_h: int) -> None:
        with Image.open(source) as src:
            im = ImageOps.exif_transpose(src)
            im = self._to_rgb(im)
            size = fit_size(im.width, im.height, max_w, max_h, self.upscale)
            if size != im.size:
                im = im.resize(size, Image.LANCZOS)
            im.save(dest, format="JPEG", quality=self.quality, optimize=True, exif=b"", icc_profile=None)

def detect_transformer(quality: int = 82, upscale: bool = False) -> ImageTransformer:
    """Pick the transformer once, at startup: Pillow when it can write JPEG, else copy."""
    if HAS_PIL:
        try:
            if features.check_codec("jpg"):
                return PillowTransformer(quality=quality, upscale=upscale)
        except Exception as e:
            logger.warning("Pillow JPEG support check failed: %s", e)
    logger.info("Image transforms unavailable; previews will be plain copies")
    return CopyTransformer()

# ---------- Per-preview locks (process scoped) ----------
# entries vanish once no caller holds the lock
_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
_locks_guard = threading.Lock()

def _lock_for(path: Path) -> threading.Lock:
    with _locks_guard:
        lock = _locks.get(str(path))
        if lock is None:
            lock = _locks[str(path)] = threading.Lock()
        return lock

def _mtime_ns(p: Path) -> Optional[int]:
    try:
        return p.stat().st_mtime_ns
    except OSError:
        return None

class PreviewCache:
    """
    Keeps <item>.preview.jpg next to (or apart from) the item's source image.

    A preview is fresh iff it exists and is not older than its source; anything
    else is rebuilt synchronously before ensure() returns. Rebuilds go through
    the injected transformer, fall back to a plain copy, and finally give up
    with None. Writes land in a temp file that is renamed over the preview, so
    readers never see a half-written file.
    """
    def __init__(self, transformer: Optional[ImageTransformer] = None,
                 max_width: int = 900, max_height: int = 900):
        self.transformer = transformer or detect_transformer()
        self.max_width = max_width
        self.max_height = max_height
        self._copy = CopyTransformer()

    @classmethod
    def from_config(cls, cfg: GalleryConfig, transformer: Optional[ImageTransformer] = None) -> "PreviewCache":
        if transformer is None:
            transformer = detect_transformer(quality=cfg.preview_quality, upscale=cfg.preview_upscale)
        return cls(transformer, max_width=cfg.preview_max_width, max_height=cfg.preview_max_height)

    @staticmethod
    def resolve_source(item_dir: Path, base_name: str, source: Optional[PathLike] = None) -> Optional[Path]:
        if source is not None and is_file(Path(source)):
            return Path(source)
        return resolve_asset(item_dir, base_name, PRIMARY_KIND)

    @staticmethod
    def is_stale(source: Path, preview: Path) -> bool:
        dst = _mtime_ns(preview)
        if dst is None:
            return True
        src = _mtime_ns(source)
        return src is not None and src > dst

    def ensure(self, item_dir: PathLike, base_name: str, source: Optional[PathLike] = None,
               cache_dir: Optional[PathLike] = None,
               max_width: Optional[int] = None, max_height: Optional[int] = None) -> Optional[Path]:
        """Path to a usable preview for the item, or None if there is nothing to show."""
        item_dir = Path(item_dir)
        src = self.resolve_source(item_dir, base_name, source)
        if src is None or _mtime_ns(src) is None:
            return None
        dest = preview_path(cache_dir if cache_dir is not None else item_dir, base_name)
        if not self.is_stale(src, dest):
            return dest

        with _lock_for(dest):
            # another thread may have rebuilt it while we waited
            if not self.is_stale(src, dest):
                return dest
            return self._regenerate(src, dest, max_width or self.max_width, max_height or self.max_height)

    def ensure_item(self, item: Item, cache_dir: Optional[PathLike] = None) -> Optional[Path]:
        return self.ensure(item.path, item.name, source=item.primary_image, cache_dir=cache_dir)

    def _regenerate(self, src: Path, dest: Path, max_w: int, max_h: int) -> Optional[Path]:
        if not isinstance(self.transformer, CopyTransformer):
            try:
                self._write_atomic(self.transformer, src, dest, max_w, max_h)
                logger.debug("Built preview %s (%s)", dest, self.transformer.name)
                return dest
            except Exception as e:
                logger.warning("Preview transform failed for %s, copying source instead: %s", src, e)
        try:
            self._write_atomic(self._copy, src, dest, max_w, max_h)
            return dest
        except OSError as e:
            logger.warning("Cannot write preview %s: %s", dest, e)
            return None

    @staticmethod
    def _write_atomic(tf: ImageTransformer, src: Path, dest: Path, max_w: int, max_h: int) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".tmp", dir=dest.parent)
        os.close(fd)
        tmp = Path(tmp_name)
        try:
            tf.write(src, tmp, max_w, max_h)
            os.chmod(tmp, 0o644)
            os.replace(tmp, dest)
        finally:
            tmp.unlink(missing_ok=True)

_default_cache: Optional[PreviewCache] = None

def ensure_preview(item_dir: PathLike, base_name: str, max_width: int, max_height: int) -> Optional[Path]:
    """Module-level shortcut with a lazily created, auto-detected cache."""
    global _default_cache
    if _default_cache is None:
        _default_cache = PreviewCache()
    return _default_cache.ensure(item_dir, base_name, max_width=max_width, max_height=max_height)
