"""Shared fixtures: temporary databases and synthetic spec pages."""

import logging
import tempfile
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from phonespecs.db import PhoneStore, init_db

IMG = "https://www.91-img.com"


def _spec_block(tbody_id: str, rows: Dict[str, str], header: Optional[str] = None) -> str:
    """Markup for one spec table; wrapped in a <section> when ``header`` is given."""
    body = "".join(
        f'<tr><td class="spl_heading">{label}</td><td class="spl_text">{value}</td></tr>'
        for label, value in rows.items()
    )
    table = f'<table><tbody id="{tbody_id}">{body}</tbody></table>'
    if header is None:
        return table
    return f'<section><h2 class="key-spec-ttl">{header}</h2>{table}</section>'


def _phone_page(
    title: Optional[str] = "Phone X",
    blocks: Optional[List[str]] = None,
    gallery: Optional[List[str]] = None,
    extra: str = "",
    price: Optional[str] = None,
    release_date: Optional[str] = None,
) -> str:
    """Build a minimal device page."""
    parts = ["<html><body>"]
    if title is not None:
        parts.append(f'<h1 class="prd_title">{title}</h1>')
    if release_date is not None:
        parts.append(f'<span id="release-cal" data-content="{release_date}">Released</span>')
    if price is not None:
        parts.append(f'<div class="pricesection_cntr">{price}</div>')
    for url in gallery or []:
        parts.append(f'<img class="sliderImage" src="{url}" alt="{title} image">')
    parts.extend(blocks or [])
    parts.append(extra)
    parts.append("</body></html>")
    return "\n".join(parts)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging() during a test."""
    logger = logging.getLogger("phonespecs")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


@pytest.fixture
def temp_db():
    """Create a temporary, initialized database."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    init_db(db_path)
    yield db_path
    Path(db_path).unlink(missing_ok=True)


@pytest.fixture
def store(temp_db):
    return PhoneStore(temp_db)


@pytest.fixture
def phone_x_html():
    """Phone X: one Display category and two gallery images."""
    return _phone_page(
        title="Phone X",
        blocks=[_spec_block("display-specs", {"Size": "6.5 inches"})],
        gallery=[f"{IMG}/gallery/phone-x-1.jpg", f"{IMG}/gallery/phone-x-2.jpg"],
    )


def _make_session(html: str = "", status_code: int = 200, reason: str = "OK") -> MagicMock:
    """Mock requests.Session whose get() returns a canned response."""
    response = MagicMock()
    response.text = html
    response.status_code = status_code
    response.reason = reason
    response.ok = 200 <= status_code < 400
    session = MagicMock()
    session.get.return_value = response
    return session


@pytest.fixture
def build_page():
    return _phone_page


@pytest.fixture
def build_block():
    return _spec_block


@pytest.fixture
def mock_session():
    return _make_session
