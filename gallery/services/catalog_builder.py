from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Optional
import logging

from gallery.config import GalleryConfig
from gallery.schemas import CatalogEntry, CatalogResponse, Item
from gallery.services.metadata import SECONDARY_KINDS
from gallery.services.scanner import scan
from gallery.services.utils import natural_key, slugify

logger = logging.getLogger(__name__)

def default_sku(item: Item) -> str:
    return f"{item.category}/{item.name}"

def _link(item: Item) -> Optional[Path]:
    if item.primary_image:
        return item.primary_image
    for kind in SECONDARY_KINDS:
        if item.assets.get(kind):
            return item.assets[kind]
    return None

def resolve(item: Item, default_price: float, currency: str = "USD") -> CatalogEntry:
    price = item.price_override if item.price_override is not None else default_price
    return CatalogEntry(
        item=item,
        price=price,
        sku=item.sku or default_sku(item),
        currency=currency,
        slug=slugify(f"{item.category}-{item.name}"),
        link=_link(item),
    )

def categories(entries: Iterable[CatalogEntry]) -> List[str]:
    """Distinct category names in natural, case-insensitive order."""
    return sorted({e.category for e in entries}, key=lambda c: (natural_key(c), c))

class CatalogBuilder:
    """
    Scan + price/SKU resolution. Read-only: previews are left to whoever
    renders the catalog (see PreviewCache).
    """
    def __init__(self, cfg: Optional[GalleryConfig] = None):
        self.cfg = cfg or GalleryConfig()

    def build(self, root: Optional[Path] = None, default_price: Optional[float] = None) -> List[CatalogEntry]:
        root = Path(root) if root is not None else self.cfg.root
        price = default_price if default_price is not None else self.cfg.default_price
        entries = [resolve(it, price, self.cfg.currency) for it in scan(root)]
        logger.info("Catalog built: %d items from %s", len(entries), root)
        return entries

    def response(self, root: Optional[Path] = None, default_price: Optional[float] = None) -> CatalogResponse:
        entries = self.build(root, default_price)
        return CatalogResponse(
            title=self.cfg.site_title,
            currency=self.cfg.currency,
            categories=categories(entries),
            items=entries,
        )

def build_catalog(root: Path, default_price: float) -> List[CatalogEntry]:
    return CatalogBuilder().build(root, default_price)
