from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging, math, re, unicodedata

logger = logging.getLogger(__name__)

def is_dir(p: Path) -> bool:
    try:
        return p.is_dir()
    except OSError:
        return False

def is_file(p: Path) -> bool:
    try:
        return p.is_file()
    except OSError:
        return False

def read_text_or_none(path: Path) -> Optional[str]:
    """Trimmed file contents, or None if the file is missing, unreadable or blank."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None
    text = text.strip()
    return text or None

_NUM_RX = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

def parse_price(raw: Optional[str]) -> Optional[float]:
    if not raw: return None
    s = raw.strip().replace(",", "")
    if not _NUM_RX.match(s):
        return None
    v = float(s)
    if not math.isfinite(v) or v < 0:
        logger.debug("Ignoring price %r", raw)
        return None
    return v

def slugify(text: str) -> str:
    """
    ASCII, lowercase, dash-separated id for cards and anchors.
      "Cartoons - Project 1" -> "cartoons-project-1"
      "Café Noir"            -> "cafe-noir"
    """
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^\w]+", "-", text).strip("-_")
    text = re.sub(r"-+", "-", text)
    return text.lower() or "n-a"

_DIGITS = re.compile(r"(\d+)")

def natural_key(s: str) -> Tuple[Tuple[int, Union[int, str]], ...]:
    parts: List[Union[int, str]] = []
    for i, chunk in enumerate(_DIGITS.split(s.casefold())):
        if not chunk: continue
        parts.append(int(chunk) if i % 2 else chunk)
    # keep int/str slots aligned so tuples stay comparable
    return tuple((0, p) if isinstance(p, int) else (1, p) for p in parts)
