"""Merge an extracted page into the brand/phone store.

Re-ingesting the same page is idempotent: the brand and phone rows are
reused (stable ids) while the phone's detail and gallery images are fully
replaced by the latest extraction.

Note: an existing phone's name, price, release date
and first image are *not* refreshed on re-ingestion; only its detail and
images are.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Generator, List, Optional, Tuple

from phonespecs.config import BRAND_SUFFIX, SOURCE_TAG, UNKNOWN_PHONE_NAME
from phonespecs.db import PhoneStore
from phonespecs.errors import InvalidInputError
from phonespecs.logging_config import get_logger
from phonespecs.models import ImageSet, IngestResult, PhoneImage, SpecSheet

__all__ = [
    "brand_display_name",
    "phone_key",
    "resolve_brand",
    "resolve_phone",
    "build_gallery_rows",
    "reconcile_phone",
    "phone_lock",
]

logger = get_logger("reconcile")

_locks_guard = threading.Lock()
# (brand, key) -> [lock, number of holders and waiters]; dropped when unused
_key_locks: Dict[Tuple[str, str], List] = {}


@contextmanager
def phone_lock(brand_name: str, key: str) -> Generator[None, None, None]:
    """Serialize reconciliation of one (brand, phone key) within this process."""
    lock_key = (brand_name, key)
    with _locks_guard:
        entry = _key_locks.setdefault(lock_key, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                del _key_locks[lock_key]


def brand_display_name(brand_name: str) -> str:
    """'SamsungPhones' -> 'Samsung'; names without the suffix are unchanged."""
    if brand_name.endswith(BRAND_SUFFIX):
        return brand_name[: -len(BRAND_SUFFIX)].rstrip() or brand_name
    return brand_name


def phone_key(folder_name: Optional[str], sheet: SpecSheet) -> str:
    """Identify the phone within its brand: folder name, else the page title."""
    key = folder_name or sheet.phone_name
    if not key:
        raise InvalidInputError("Cannot identify phone: no folderName given and no title on page")
    return key


def resolve_brand(store: PhoneStore, brand_name: str) -> int:
    brand_id = store.find_brand_id(brand_name)
    if brand_id is None:
        brand_id = store.create_brand(brand_name, brand_display_name(brand_name))
        logger.info(f"Created brand {brand_name!r} (id={brand_id})")
    return brand_id


def resolve_phone(store: PhoneStore, brand_id: int, key: str, sheet: SpecSheet, images: ImageSet) -> int:
    phone_id = store.find_phone_id(brand_id, key)
    if phone_id is not None:
        logger.debug(f"Reusing phone {key!r} (id={phone_id})")
        return phone_id

    phone_id = store.create_phone(
        brand_id=brand_id,
        folder_name=key,
        name=sheet.phone_name or UNKNOWN_PHONE_NAME,
        price=sheet.price,
        release_date=sheet.release_date,
        first_image=images.first_gallery_url,
    )
    logger.info(f"Created phone {key!r} (id={phone_id})")
    return phone_id


def build_gallery_rows(images: ImageSet, fallback_alt: Optional[str]) -> List[PhoneImage]:
    """Gallery images as rows with dense 0-based ``image_index``."""
    return [
        PhoneImage(
            image_url=img.url,
            image_index=position,
            alt_text=img.alt or fallback_alt,
            image_type="gallery",
        )
        for position, img in enumerate(images.gallery)
    ]


def reconcile_phone(
    store: PhoneStore,
    brand_name: str,
    folder_name: Optional[str],
    sheet: SpecSheet,
    images: ImageSet,
) -> IngestResult:
    """Get-or-create brand and phone, then full-replace detail and images.

    ``images.other`` is classified upstream but not persisted.

    Raises:
        InvalidInputError: If no phone key can be determined
        sqlite3.Error: On any store failure (already-committed steps stay)
    """
    key = phone_key(folder_name, sheet)

    with phone_lock(brand_name, key):
        brand_id = resolve_brand(store, brand_name)
        phone_id = resolve_phone(store, brand_id, key, sheet, images)

        gallery_rows = build_gallery_rows(images, sheet.phone_name)
        store.replace_phone_content(
            phone_id,
            specs=sheet.specs,
            metadata=sheet.metadata,
            sources=[SOURCE_TAG],
            images=gallery_rows,
        )

    return IngestResult(
        phone_id=phone_id,
        name=sheet.phone_name or UNKNOWN_PHONE_NAME,
        spec_category_count=len(sheet.specs),
        gallery_image_count=len(gallery_rows),
    )
