"""Tests for fetching and the ingest_phone entry point."""

import sqlite3
from unittest.mock import MagicMock

import pytest
import requests

from phonespecs.db import get_table_counts
from phonespecs.errors import FetchError, InvalidInputError, NoSpecsFoundError
from phonespecs.scraper import create_session, fetch_html, ingest_phone, parse_phone_page

URL = "https://www.91mobiles.com/phone-x-price-in-india"


class TestFetchHtml:
    """Tests for fetch_html."""

    def test_returns_body(self, mock_session):
        session = mock_session("<html>ok</html>")

        assert fetch_html(URL, session=session) == "<html>ok</html>"
        session.get.assert_called_once()
        assert session.get.call_args.args[0] == URL

    def test_non_success_status_is_terminal(self, mock_session):
        session = mock_session(status_code=404, reason="Not Found")

        with pytest.raises(FetchError, match="Failed to fetch: Not Found") as exc_info:
            fetch_html(URL, session=session)

        assert exc_info.value.status_code == 404
        assert session.get.call_count == 1

    def test_transport_error(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(FetchError, match="connection refused"):
            fetch_html(URL, session=session)

    def test_session_headers(self):
        session = create_session()

        assert session.headers["User-Agent"].startswith("Mozilla/5.0")


class TestParsePhonePage:
    def test_parses_specs_and_images_from_one_tree(self, phone_x_html):
        sheet, images = parse_phone_page(phone_x_html)

        assert sheet.specs == {"Display": {"Size": "6.5 inches"}}
        assert len(images.gallery) == 2


class TestIngestPhone:
    """Tests for the ingestion entry point."""

    def test_success(self, store, mock_session, phone_x_html):
        result = ingest_phone("TestBrand", URL, store=store, session=mock_session(phone_x_html))

        assert result.to_dict() == {
            "success": True,
            "message": "Phone X added successfully",
            "phone": {"id": result.phone_id, "name": "Phone X", "specs": 1, "images": 2},
        }
        assert get_table_counts(store.db_path)["phone_images"] == 2

    def test_folder_name_keeps_identity(self, store, mock_session, phone_x_html):
        first = ingest_phone("TestBrand", URL, "phone-x", store=store, session=mock_session(phone_x_html))
        second = ingest_phone("TestBrand", URL, "phone-x", store=store, session=mock_session(phone_x_html))

        assert first.phone_id == second.phone_id
        assert get_table_counts(store.db_path)["phones"] == 1

    @pytest.mark.parametrize("brand,url", [("", URL), ("TestBrand", ""), (None, URL), (123, URL), ("TestBrand", b"https://a.com")])
    def test_missing_input(self, store, brand, url):
        with pytest.raises(InvalidInputError, match="brandName and url required"):
            ingest_phone(brand, url, store=store)

    def test_invalid_url(self, store, mock_session):
        session = mock_session("<html></html>")

        with pytest.raises(InvalidInputError, match="Invalid URL"):
            ingest_phone("TestBrand", "javascript:alert(1)", store=store, session=session)

        session.get.assert_not_called()

    def test_no_specs_found(self, store, mock_session, build_page):
        session = mock_session(build_page(title="Phone X"))

        with pytest.raises(NoSpecsFoundError, match="No specs found on page"):
            ingest_phone("TestBrand", URL, store=store, session=session)

        assert get_table_counts(store.db_path) == {
            "brands": 0, "phones": 0, "phone_details": 0, "phone_images": 0,
        }

    def test_fetch_failure_persists_nothing(self, store, mock_session):
        with pytest.raises(FetchError):
            ingest_phone("TestBrand", URL, store=store, session=mock_session(status_code=503, reason="Service Unavailable"))

        assert get_table_counts(store.db_path)["brands"] == 0

    def test_store_failure_propagates(self, mock_session, phone_x_html):
        store = MagicMock()
        store.find_brand_id.side_effect = sqlite3.OperationalError("unable to open database file")

        with pytest.raises(sqlite3.OperationalError):
            ingest_phone("TestBrand", URL, store=store, session=mock_session(phone_x_html))

    def test_non_string_folder_name(self, store, mock_session):
        session = mock_session("<html></html>")

        with pytest.raises(InvalidInputError, match="folderName must be a string"):
            ingest_phone("TestBrand", URL, 42, store=store, session=session)

        session.get.assert_not_called()
