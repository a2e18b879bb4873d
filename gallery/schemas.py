from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

class Item(BaseModel):
    category: str
    name: str
    path: Path                     # the item directory
    primary_image: Optional[Path] = None
    assets: Dict[str, Optional[Path]] = Field(default_factory=dict)  # png/bmp downloads
    description: str = ""
    price_override: Optional[float] = None
    sku: Optional[str] = None

class CatalogEntry(BaseModel):
    item: Item
    price: float
    sku: str
    currency: str
    slug: str
    link: Optional[Path] = None    # best file to open from a card: jpg, then png, then bmp

    @property
    def category(self) -> str:
        return self.item.category

    @property
    def name(self) -> str:
        return self.item.name

class CatalogResponse(BaseModel):
    title: str
    currency: str
    categories: List[str]
    items: List[CatalogEntry]
