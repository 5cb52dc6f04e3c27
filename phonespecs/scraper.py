"""Fetch a device page and ingest it into the store."""

import logging
from typing import Optional, Tuple

import requests  # type: ignore[import-untyped]

from phonespecs.config import DB_PATH, HEADERS, REQUEST_TIMEOUT
from phonespecs.db import PhoneStore
from phonespecs.document import DocumentTree
from phonespecs.errors import FetchError, InvalidInputError, NoSpecsFoundError
from phonespecs.html_utils import extract_images, extract_specs
from phonespecs.logging_config import get_logger, log_ingest_event
from phonespecs.models import ImageSet, IngestResult, SpecSheet
from phonespecs.reconcile import reconcile_phone
from phonespecs.url_validation import URLValidationError, validate_url

__all__ = [
    "create_session",
    "fetch_html",
    "parse_phone_page",
    "ingest_phone",
]

logger = get_logger("scraper")


def create_session() -> requests.Session:
    """Create a requests Session with the browser-like headers the site expects."""
    session = requests.Session()
    session.headers.update(HEADERS)
    session.headers.setdefault("Accept-Encoding", "gzip, deflate")
    return session


def fetch_html(url: str, session: Optional[requests.Session] = None) -> str:
    """Single HTTP GET. No retries: any failure is terminal for the ingestion.

    Raises:
        FetchError: On a transport error or a non-2xx response
    """
    sess = session or create_session()
    try:
        resp = sess.get(url, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error fetching {url}: {e}")
        raise FetchError(f"Failed to fetch: {e}") from e

    if not resp.ok:
        logger.error(f"HTTP {resp.status_code} fetching {url}")
        raise FetchError(f"Failed to fetch: {resp.reason}", status_code=resp.status_code)

    return str(resp.text)


def parse_phone_page(html: str) -> Tuple[SpecSheet, ImageSet]:
    """Parse once, then run the spec extractor and image classifier over the same tree."""
    doc = DocumentTree(html)
    return extract_specs(doc), extract_images(doc)


def ingest_phone(
    brand_name: str,
    url: str,
    folder_name: Optional[str] = None,
    store: Optional[PhoneStore] = None,
    session: Optional[requests.Session] = None,
) -> IngestResult:
    """Fetch ``url``, extract its specs and images, and reconcile them.

    Args:
        brand_name: Brand identifier, e.g. 'SamsungPhones'
        url: Device page URL
        folder_name: Stable per-phone key; defaults to the page title
        store: Target store (default: SQLite at DB_PATH)
        session: Optional requests.Session

    Raises:
        InvalidInputError: Missing brand/url or unfetchable URL
        FetchError: The page could not be fetched
        NoSpecsFoundError: The page has no specification blocks
        sqlite3.Error: Store failure
    """
    if not isinstance(brand_name, str) or not isinstance(url, str) or not brand_name or not url:
        raise InvalidInputError("brandName and url required")
    if folder_name is not None and not isinstance(folder_name, str):
        raise InvalidInputError("folderName must be a string")
    try:
        url = validate_url(url)
    except URLValidationError as e:
        raise InvalidInputError(f"Invalid URL: {e}") from e

    log_ingest_event("ingest_start", {
        "message": f"Ingesting {url} for {brand_name}",
        "brand": brand_name,
        "url": url,
        "folder_name": folder_name,
    })

    try:
        html = fetch_html(url, session=session)
        sheet, images = parse_phone_page(html)

        if sheet.is_empty():
            log_ingest_event("no_specs", {"url": url, "brand": brand_name}, level=logging.WARNING)
            raise NoSpecsFoundError()

        result = reconcile_phone(store or PhoneStore(DB_PATH), brand_name, folder_name, sheet, images)
    except Exception as e:
        log_ingest_event(
            "ingest_failed",
            {"url": url, "brand": brand_name, "error": str(e), "error_type": type(e).__name__},
            level=logging.ERROR,
        )
        raise

    log_ingest_event("ingest_complete", {
        "message": result.message,
        "url": url,
        "brand": brand_name,
        "phone_id": result.phone_id,
        "spec_categories": result.spec_category_count,
        "gallery_images": result.gallery_image_count,
        "other_images": len(images.other),
    })
    return result
