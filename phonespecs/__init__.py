"""Phone specification page ingester package."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from phonespecs.config import DB_PATH, SOURCE_TAG
from phonespecs.db import PhoneStore, get_phone_detail, init_db, list_brands, list_phones
from phonespecs.document import DocumentTree
from phonespecs.errors import FetchError, IngestError, InvalidInputError, NoSpecsFoundError
from phonespecs.html_utils import clean_text, extract_images, extract_specs
from phonespecs.models import GalleryImage, ImageSet, IngestResult, OtherImage, SpecSheet
from phonespecs.reconcile import reconcile_phone
from phonespecs.scraper import ingest_phone, parse_phone_page

__all__ = [
    # Version
    "__version__",
    # Config
    "DB_PATH",
    "SOURCE_TAG",
    # Models
    "SpecSheet",
    "GalleryImage",
    "OtherImage",
    "ImageSet",
    "IngestResult",
    # Errors
    "IngestError",
    "InvalidInputError",
    "FetchError",
    "NoSpecsFoundError",
    # Extraction
    "DocumentTree",
    "clean_text",
    "extract_specs",
    "extract_images",
    "parse_phone_page",
    # Storage + reconciliation
    "PhoneStore",
    "init_db",
    "list_brands",
    "list_phones",
    "get_phone_detail",
    "reconcile_phone",
    "ingest_phone",
]
