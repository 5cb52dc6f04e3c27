"""Configuration and constants for the phone spec ingester.

Environment overrides may come from a ``.env`` file at the project root.
"""

import os
from pathlib import Path
from typing import Dict, Tuple

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

__all__ = [
    "DB_PATH",
    "HEADERS",
    "REQUEST_TIMEOUT",
    "FLASK_HOST",
    "FLASK_PORT",
    "FLASK_DEBUG",
    "TITLE_SELECTOR",
    "RELEASE_DATE_SELECTOR",
    "RELEASE_DATE_ATTR",
    "PRICE_SELECTOR",
    "SPEC_TBODY_SUFFIX",
    "SPEC_TBODY_SELECTOR",
    "CATEGORY_SECTION_TAG",
    "CATEGORY_HEADER_SELECTOR",
    "SPEC_LABEL_SELECTOR",
    "SPEC_VALUE_SELECTOR",
    "IMAGE_HOST",
    "GALLERY_CLASS_SELECTOR",
    "GALLERY_ALT_TOKENS",
    "GALLERY_URL_MARKERS",
    "IMAGE_NOISE_MARKERS",
    "SOURCE_TAG",
    "BRAND_SUFFIX",
    "UNKNOWN_PHONE_NAME",
    "METADATA_KEYS",
]

# Storage
DB_PATH = os.getenv("PHONESPECS_DB_PATH", "data/phones.db")

# HTTP fetch settings (single attempt, no retries)
HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
}
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "20"))

# Flask app settings
FLASK_HOST = os.getenv("FLASK_HOST", "127.0.0.1")
FLASK_PORT = int(os.getenv("FLASK_PORT", os.getenv("PORT", "5000")))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"


# =============================================================================
# Page selectors (91mobiles spec page markup)
# =============================================================================

TITLE_SELECTOR = "h1.prd_title, h1"
RELEASE_DATE_SELECTOR = "#release-cal"
RELEASE_DATE_ATTR = "data-content"
PRICE_SELECTOR = ".pricesection_cntr, .storeprices"

SPEC_TBODY_SUFFIX = "-specs"
SPEC_TBODY_SELECTOR = f'tbody[id$="{SPEC_TBODY_SUFFIX}"]'
CATEGORY_SECTION_TAG = "section"
CATEGORY_HEADER_SELECTOR = "h2.key-spec-ttl"
SPEC_LABEL_SELECTOR = "td.spl_heading"
SPEC_VALUE_SELECTOR = "td.spl_text"

# Images
IMAGE_HOST = "91-img.com"
GALLERY_CLASS_SELECTOR = ".sliderImage"
GALLERY_ALT_TOKENS: Tuple[str, ...] = ("Galaxy", "iPhone")
GALLERY_URL_MARKERS: Tuple[str, ...] = ("gallery", "pictures")
IMAGE_NOISE_MARKERS: Tuple[str, ...] = ("sourceimg", "icon")


# =============================================================================
# Reconciliation
# =============================================================================

# Provenance tag stored on every PhoneDetail row
SOURCE_TAG = "91mobiles"

# "SamsungPhones" -> display name "Samsung"
BRAND_SUFFIX = "Phones"

UNKNOWN_PHONE_NAME = "Unknown"

# Metadata keys produced by the extractor
METADATA_KEYS: Dict[str, str] = {
    "name": "Phone Name",
    "release_date": "Release Date",
    "price": "Price",
}
