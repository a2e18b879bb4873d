from __future__ import annotations
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence
import logging

from gallery.schemas import Item
from gallery.services.utils import is_file, read_text_or_none, parse_price

logger = logging.getLogger(__name__)

PRIMARY_KIND = "jpg"
SECONDARY_KINDS = ("png", "bmp")
PREVIEW_SUFFIX = ".preview.jpg"

DESCRIPTION_FILE = "description.txt"
PRICE_FILE = "price.txt"
SKU_FILE = "sku.txt"

# A rule looks at (item name, sorted file names) and returns the chosen file name or None.
MatchRule = Callable[[str, Sequence[str]], Optional[str]]

def _has_ext(fname: str, ext: str) -> bool:
    low = fname.lower()
    # our own generated previews are never source assets
    if low.endswith(PREVIEW_SUFFIX): return False
    return low.endswith("." + ext)

def exact_name(ext: str) -> MatchRule:
    def rule(base: str, names: Sequence[str]) -> Optional[str]:
        want = f"{base}.{ext}".lower()
        for n in names:
            if n.lower() == want and _has_ext(n, ext):
                return n
        return None
    return rule

def first_with_ext(ext: str) -> MatchRule:
    def rule(base: str, names: Sequence[str]) -> Optional[str]:
        for n in names:
            if _has_ext(n, ext):
                return n
        return None
    return rule

ASSET_RULES: Dict[str, List[MatchRule]] = {
    kind: [exact_name(kind), first_with_ext(kind)]
    for kind in (PRIMARY_KIND, *SECONDARY_KINDS)
}

def list_files(d: Path) -> List[str]:
    """Sorted names of the regular files directly inside d; [] if d can't be listed."""
    try:
        return sorted(p.name for p in d.iterdir() if is_file(p))
    except OSError as e:
        logger.debug("Cannot list %s: %s", d, e)
        return []

def resolve_asset(d: Path, base: str, kind: str, names: Optional[Sequence[str]] = None) -> Optional[Path]:
    if names is None:
        names = list_files(d)
    for rule in ASSET_RULES[kind]:
        hit = rule(base, names)
        if hit:
            return d / hit
    return None

def extract(item_dir: Path, category: str) -> Item:
    """
    Build the Item for one <root>/<category>/<item>/ folder.
    Every field except category/name is best effort; nothing here raises.
    """
    name = item_dir.name
    names = list_files(item_dir)

    primary = resolve_asset(item_dir, name, PRIMARY_KIND, names)
    assets = {k: resolve_asset(item_dir, name, k, names) for k in SECONDARY_KINDS}

    description = read_text_or_none(item_dir / DESCRIPTION_FILE) or ""
    price = parse_price(read_text_or_none(item_dir / PRICE_FILE))
    sku = read_text_or_none(item_dir / SKU_FILE)

    return Item(
        category=category,
        name=name,
        path=item_dir,
        primary_image=primary,
        assets=assets,
        description=description,
        price_override=price,
        sku=sku,
    )
