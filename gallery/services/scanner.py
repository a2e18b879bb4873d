from __future__ import annotations
from pathlib import Path
from typing import List
import logging

from gallery.schemas import Item
from gallery.services.metadata import extract
from gallery.services.utils import is_dir, natural_key

logger = logging.getLogger(__name__)

def _subdirs(d: Path) -> List[Path]:
    try:
        return [p for p in d.iterdir() if is_dir(p) and not p.name.startswith(".")]
    except OSError as e:
        logger.warning("Skipping unreadable directory %s: %s", d, e)
        return []

def sort_key(it: Item):
    return (
        it.category.casefold(), it.name.casefold(),
        natural_key(it.category), natural_key(it.name),
        it.category, it.name,
    )

def scan(root: Path) -> List[Item]:
    """
    Walk root/<category>/<item>/ and return one Item per item folder, sorted
    by (category, name) ignoring case. A missing root is an empty catalog.
    """
    root = Path(root)
    if not is_dir(root):
        logger.debug("Gallery root %s not found", root)
        return []

    items: List[Item] = []
    for cat_dir in _subdirs(root):
        for item_dir in _subdirs(cat_dir):
            items.append(extract(item_dir, cat_dir.name))

    items.sort(key=sort_key)
    logger.debug("Scanned %d items under %s", len(items), root)
    return items
