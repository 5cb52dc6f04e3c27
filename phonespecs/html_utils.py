"""HTML parsing and extraction utilities for device spec pages.

The spec pages have no stable schema, so every step degrades gracefully:
a broken row or image is logged and skipped, and a broken page yields
whatever was collected before the failure.
"""

from typing import Any, Callable, Dict, Optional, Set, Tuple, TypeVar, Union

from bs4 import BeautifulSoup

from phonespecs.config import (
    CATEGORY_HEADER_SELECTOR,
    CATEGORY_SECTION_TAG,
    GALLERY_ALT_TOKENS,
    GALLERY_CLASS_SELECTOR,
    GALLERY_URL_MARKERS,
    IMAGE_HOST,
    IMAGE_NOISE_MARKERS,
    METADATA_KEYS,
    PRICE_SELECTOR,
    RELEASE_DATE_ATTR,
    RELEASE_DATE_SELECTOR,
    SPEC_LABEL_SELECTOR,
    SPEC_TBODY_SELECTOR,
    SPEC_TBODY_SUFFIX,
    SPEC_VALUE_SELECTOR,
    TITLE_SELECTOR,
)
from phonespecs.document import DocumentTree, Node
from phonespecs.logging_config import get_logger
from phonespecs.models import GalleryImage, ImageSet, OtherImage, SpecSheet
from phonespecs.url_validation import is_image_host_url, url_contains_any

__all__ = [
    "clean_text",
    "try_extract",
    "derive_category_name",
    "resolve_category_name",
    "extract_spec_row",
    "extract_specs",
    "image_source",
    "gallery_selector",
    "extract_images",
]

logger = get_logger("html_utils")

T = TypeVar("T")

Source = Union[str, bytes, BeautifulSoup, DocumentTree]


def _as_tree(source: Source) -> DocumentTree:
    if isinstance(source, DocumentTree):
        return source
    return DocumentTree(source)


def clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace runs (newlines included) to single spaces and trim.

    Returns None for None or empty input.
    """
    if not text:
        return None
    return " ".join(text.split())


def try_extract(fn: Callable[..., Optional[T]], *args: Any, what: str = "fragment") -> Optional[T]:
    """Run ``fn(*args)``; log and return None if it raises."""
    try:
        return fn(*args)
    except Exception as e:
        logger.warning(f"Skipping malformed {what}: {e}")
        return None


# =============================================================================
# Specification Extraction
# =============================================================================

def derive_category_name(tbody_id: str) -> str:
    """Turn a spec block id into a category label.

    >>> derive_category_name("camera-features-specs")
    'Camera Features'
    >>> derive_category_name("general&amp;connectivity-specs")
    'General&connectivity'
    """
    name = tbody_id
    if name.endswith(SPEC_TBODY_SUFFIX):
        name = name[: -len(SPEC_TBODY_SUFFIX)]
    name = name.replace("&amp;", "&").replace("-", " ")
    return " ".join(word[:1].upper() + word[1:] for word in name.split(" "))


def resolve_category_name(doc: DocumentTree, tbody: Node) -> str:
    """Category header of the enclosing section, else the name derived from the id."""
    name = derive_category_name(doc.attr(tbody, "id") or "")

    section = doc.closest(tbody, CATEGORY_SECTION_TAG)
    if section is not None:
        header = clean_text(doc.text(doc.select_first(CATEGORY_HEADER_SELECTOR, within=section)))
        if header:
            name = header
    return name


def extract_spec_row(doc: DocumentTree, row: Node) -> Optional[Tuple[str, str]]:
    """Return ``(label, value)`` for a spec row, or None if either is blank."""
    label = clean_text(doc.text(doc.select_first(SPEC_LABEL_SELECTOR, within=row)))
    value = clean_text(doc.text(doc.select_first(SPEC_VALUE_SELECTOR, within=row)))
    if label and value:
        return label, value
    return None


def _extract_metadata(doc: DocumentTree, metadata: Dict[str, str]) -> None:
    title = clean_text(doc.text(doc.select_first(TITLE_SELECTOR)))
    if title:
        metadata[METADATA_KEYS["name"]] = title

    release_date = clean_text(doc.attr(doc.select_first(RELEASE_DATE_SELECTOR), RELEASE_DATE_ATTR))
    if release_date:
        metadata[METADATA_KEYS["release_date"]] = release_date

    price = clean_text(doc.text(doc.select_first(PRICE_SELECTOR)))
    if price:
        metadata[METADATA_KEYS["price"]] = price


def extract_specs(source: Source) -> SpecSheet:
    """Extract page metadata and categorized specs.

    Every ``tbody`` whose id ends in ``-specs`` is one category block; each of
    its rows contributes a label/value pair. Categories that end up with no
    pairs are dropped. Never raises: on an unexpected failure the partial
    result collected so far is returned.
    """
    sheet = SpecSheet()
    try:
        doc = _as_tree(source)
        _extract_metadata(doc, sheet.metadata)

        for tbody in doc.select_all(SPEC_TBODY_SELECTOR):
            category = try_extract(resolve_category_name, doc, tbody, what="spec category")
            if category is None:
                continue
            entries = sheet.specs.setdefault(category, {})

            for row in doc.select_all("tr", within=tbody):
                pair = try_extract(extract_spec_row, doc, row, what="spec row")
                if pair:
                    entries[pair[0]] = pair[1]
    except Exception:
        logger.exception("Error extracting specs")
    finally:
        sheet.specs = {name: entries for name, entries in sheet.specs.items() if entries}

    logger.debug(
        f"Extracted {len(sheet.specs)} spec categories, "
        f"{sum(len(v) for v in sheet.specs.values())} attributes"
    )
    return sheet


# =============================================================================
# Image Classification
# =============================================================================

def image_source(doc: DocumentTree, img: Node) -> Optional[str]:
    """``src`` of an image, falling back to the lazy-load ``data-src``."""
    src = doc.attr(img, "src") or doc.attr(img, "data-src")
    return src.strip() if src and src.strip() else None


def gallery_selector(alt_tokens=GALLERY_ALT_TOKENS) -> str:
    parts = [GALLERY_CLASS_SELECTOR] + [f'img[alt*="{token}"]' for token in alt_tokens]
    return ", ".join(parts)


def _is_gallery_url(url: str) -> bool:
    return is_image_host_url(url, IMAGE_HOST) and url_contains_any(url, GALLERY_URL_MARKERS)


def _is_other_url(url: str) -> bool:
    return is_image_host_url(url, IMAGE_HOST) and not url_contains_any(url, IMAGE_NOISE_MARKERS)


def extract_images(source: Source) -> ImageSet:
    """Split the page's product-host images into gallery and other sets.

    Gallery candidates (slider images, or images whose alt names the product
    line) are taken first, in document order, and numbered from 1. Every
    remaining host image that isn't an icon or source image lands in
    ``other``. A URL appears at most once across both sets.
    """
    images = ImageSet()
    seen: Set[str] = set()

    def add_gallery(img: Node) -> None:
        src = image_source(doc, img)
        if src and src not in seen and _is_gallery_url(src):
            images.gallery.append(GalleryImage(
                index=len(images.gallery) + 1,
                url=src,
                alt=clean_text(doc.attr(img, "alt")),
            ))
            seen.add(src)

    def add_other(img: Node) -> None:
        src = image_source(doc, img)
        if src and src not in seen and _is_other_url(src):
            images.other.append(OtherImage(url=src, alt=clean_text(doc.attr(img, "alt"))))
            seen.add(src)

    try:
        doc = _as_tree(source)
        for img in doc.select_all(gallery_selector()):
            try_extract(add_gallery, img, what="gallery image")
        for img in doc.select_all("img"):
            try_extract(add_other, img, what="image")
    except Exception:
        logger.exception("Error extracting images")

    logger.debug(f"Classified {len(images.gallery)} gallery and {len(images.other)} other images")
    return images
