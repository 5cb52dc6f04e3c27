"""SQLite schema, write-side store and read-side queries."""

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Iterable, List, Optional

from phonespecs.config import DB_PATH
from phonespecs.logging_config import get_logger
from phonespecs.models import PhoneImage

__all__ = [
    "get_connection",
    "init_db",
    "PhoneStore",
    "list_brands",
    "list_phones",
    "get_phone_detail",
    "get_table_counts",
]

logger = get_logger("db")

TABLES = ("brands", "phones", "phone_details", "phone_images")


@contextmanager
def get_connection(db_path: str = DB_PATH) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections (foreign keys enforced)."""
    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=30)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str = DB_PATH) -> None:
    """Create the brands / phones / phone_details / phone_images tables."""
    with get_connection(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS brands (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT UNIQUE NOT NULL,
                display_name TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS phones (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                brand_id INTEGER NOT NULL,
                folder_name TEXT NOT NULL,
                name TEXT NOT NULL,
                price TEXT,
                release_date TEXT,
                first_image TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (brand_id, folder_name),
                FOREIGN KEY (brand_id) REFERENCES brands(id) ON DELETE CASCADE
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS phone_details (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                phone_id INTEGER UNIQUE NOT NULL,
                specs_json TEXT NOT NULL,
                metadata_json TEXT NOT NULL,
                sources_json TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (phone_id) REFERENCES phones(id) ON DELETE CASCADE
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS phone_images (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                phone_id INTEGER NOT NULL,
                image_url TEXT NOT NULL,
                alt_text TEXT,
                image_type TEXT NOT NULL CHECK (image_type IN ('gallery', 'other')),
                image_index INTEGER NOT NULL,
                UNIQUE (phone_id, image_type, image_index),
                FOREIGN KEY (phone_id) REFERENCES phones(id) ON DELETE CASCADE
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_phones_brand_id ON phones(brand_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_phone_images_phone_id ON phone_images(phone_id)")

        conn.commit()


class PhoneStore:
    """Write operations used by the reconciliation engine.

    Each method opens its own connection; ``replace_phone_content`` runs the
    detail and image replacement in a single transaction.
    """

    def __init__(self, db_path: str = DB_PATH, initialize: bool = True):
        self.db_path = db_path
        if initialize:
            init_db(db_path)

    def find_brand_id(self, name: str) -> Optional[int]:
        with get_connection(self.db_path) as conn:
            row = conn.execute("SELECT id FROM brands WHERE name = ?", (name,)).fetchone()
            return row["id"] if row else None

    def create_brand(self, name: str, display_name: str) -> int:
        """Insert a brand; if one with ``name`` already exists, return its id."""
        with get_connection(self.db_path) as conn:
            conn.execute("""
                INSERT INTO brands (name, display_name) VALUES (?, ?)
                ON CONFLICT(name) DO NOTHING
            """, (name, display_name))
            conn.commit()
            row = conn.execute("SELECT id FROM brands WHERE name = ?", (name,)).fetchone()
            return row["id"]

    def find_phone_id(self, brand_id: int, folder_name: str) -> Optional[int]:
        with get_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT id FROM phones WHERE brand_id = ? AND folder_name = ?",
                (brand_id, folder_name),
            ).fetchone()
            return row["id"] if row else None

    def create_phone(
        self,
        brand_id: int,
        folder_name: str,
        name: str,
        price: Optional[str] = None,
        release_date: Optional[str] = None,
        first_image: Optional[str] = None,
    ) -> int:
        """Insert a phone; an existing ``(brand_id, folder_name)`` row wins."""
        with get_connection(self.db_path) as conn:
            conn.execute("""
                INSERT INTO phones (brand_id, folder_name, name, price, release_date, first_image)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(brand_id, folder_name) DO NOTHING
            """, (brand_id, folder_name, name, price, release_date, first_image))
            conn.commit()
            row = conn.execute(
                "SELECT id FROM phones WHERE brand_id = ? AND folder_name = ?",
                (brand_id, folder_name),
            ).fetchone()
            return row["id"]

    def replace_phone_content(
        self,
        phone_id: int,
        specs: Dict[str, Dict[str, str]],
        metadata: Dict[str, str],
        sources: Iterable[str],
        images: Iterable[PhoneImage],
    ) -> None:
        """Full-replace the detail row and image rows of a phone atomically."""
        images = list(images)
        with get_connection(self.db_path) as conn:
            with conn:
                conn.execute("DELETE FROM phone_details WHERE phone_id = ?", (phone_id,))
                conn.execute("""
                    INSERT INTO phone_details (phone_id, specs_json, metadata_json, sources_json)
                    VALUES (?, ?, ?, ?)
                """, (
                    phone_id,
                    json.dumps(specs, ensure_ascii=False),
                    json.dumps(metadata, ensure_ascii=False),
                    json.dumps(list(sources), ensure_ascii=False),
                ))

                conn.execute("DELETE FROM phone_images WHERE phone_id = ?", (phone_id,))
                conn.executemany("""
                    INSERT INTO phone_images (phone_id, image_url, alt_text, image_type, image_index)
                    VALUES (?, ?, ?, ?, ?)
                """, [
                    (phone_id, img.image_url, img.alt_text, img.image_type, img.image_index)
                    for img in images
                ])
        logger.debug(f"Replaced detail and images for phone {phone_id}")


# =============================================================================
# Read side
# =============================================================================

def list_brands(db_path: str = DB_PATH) -> List[Dict[str, Any]]:
    """All brands sorted by display name."""
    with get_connection(db_path) as conn:
        rows = conn.execute(
            "SELECT id, name, display_name, created_at FROM brands ORDER BY display_name"
        ).fetchall()
        return [dict(row) for row in rows]


def list_phones(db_path: str, brand_id: int) -> List[Dict[str, Any]]:
    """Phones of one brand sorted by name."""
    with get_connection(db_path) as conn:
        rows = conn.execute("""
            SELECT id, name, price, first_image, release_date
            FROM phones
            WHERE brand_id = ?
            ORDER BY name
        """, (brand_id,)).fetchall()
        return [dict(row) for row in rows]


def get_phone_detail(db_path: str, phone_id: int) -> Optional[Dict[str, Any]]:
    """Detail row of a phone with its images, or None if it has no detail.

    Images are ordered by type, then index.
    """
    with get_connection(db_path) as conn:
        row = conn.execute(
            "SELECT * FROM phone_details WHERE phone_id = ?", (phone_id,)
        ).fetchone()
        if row is None:
            return None

        detail = dict(row)
        for column, key in (("specs_json", "specs"), ("metadata_json", "metadata"), ("sources_json", "sources")):
            detail[key] = json.loads(detail.pop(column))

        images = conn.execute("""
            SELECT id, phone_id, image_url, alt_text, image_type, image_index
            FROM phone_images
            WHERE phone_id = ?
            ORDER BY image_type, image_index
        """, (phone_id,)).fetchall()
        detail["images"] = [dict(img) for img in images]
        return detail


def get_table_counts(db_path: str = DB_PATH) -> Dict[str, int]:
    """Row count per table."""
    with get_connection(db_path) as conn:
        return {
            table: conn.execute(f"SELECT COUNT(*) AS count FROM {table}").fetchone()["count"]
            for table in TABLES
        }
