"""Data models for extracted pages and ingestion results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from phonespecs.config import METADATA_KEYS

__all__ = [
    "SpecSheet",
    "GalleryImage",
    "OtherImage",
    "ImageSet",
    "PhoneImage",
    "IngestResult",
]


@dataclass
class SpecSheet:
    """Specification data extracted from one device page.

    ``metadata`` holds free-form page facts ("Phone Name", "Price",
    "Release Date"); ``specs`` maps category name -> attribute -> value,
    with insertion order following the page.
    """

    metadata: Dict[str, str] = field(default_factory=dict)
    specs: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @property
    def phone_name(self) -> Optional[str]:
        return self.metadata.get(METADATA_KEYS["name"])

    @property
    def price(self) -> Optional[str]:
        return self.metadata.get(METADATA_KEYS["price"])

    @property
    def release_date(self) -> Optional[str]:
        return self.metadata.get(METADATA_KEYS["release_date"])

    def is_empty(self) -> bool:
        return not self.specs

    def to_dict(self) -> Dict[str, Any]:
        return {"metadata": dict(self.metadata), "specs": {k: dict(v) for k, v in self.specs.items()}}


@dataclass
class GalleryImage:
    """Product photo; ``index`` is the 1-based display position."""

    index: int
    url: str
    alt: Optional[str] = None
    type: str = "gallery"


@dataclass
class OtherImage:
    """Incidental page image on the product image host."""

    url: str
    alt: Optional[str] = None
    type: str = "other"


@dataclass
class ImageSet:
    gallery: List[GalleryImage] = field(default_factory=list)
    other: List[OtherImage] = field(default_factory=list)

    @property
    def first_gallery_url(self) -> Optional[str]:
        return self.gallery[0].url if self.gallery else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gallery": [vars(img).copy() for img in self.gallery],
            "other": [vars(img).copy() for img in self.other],
        }


@dataclass
class PhoneImage:
    """A row of the phone_images table (``image_index`` is 0-based)."""

    image_url: str
    image_index: int
    alt_text: Optional[str] = None
    image_type: str = "gallery"


@dataclass
class IngestResult:
    """Summary of a successful ingestion."""

    phone_id: int
    name: str
    spec_category_count: int
    gallery_image_count: int

    @property
    def message(self) -> str:
        return f"{self.name} added successfully"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": self.message,
            "phone": {
                "id": self.phone_id,
                "name": self.name,
                "specs": self.spec_category_count,
                "images": self.gallery_image_count,
            },
        }
