"""HTTP API: page ingestion plus the brand/phone read endpoints."""

import logging
import sqlite3
from typing import Any, Dict, Optional, Tuple, Union

from flask import Blueprint, Response, current_app, jsonify, request

from phonespecs.db import PhoneStore, get_phone_detail, list_brands, list_phones
from phonespecs.errors import FetchError, InvalidInputError, NoSpecsFoundError
from phonespecs.scraper import ingest_phone

__all__ = ["api"]

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")

ApiResponse = Union[Response, Tuple[Response, int]]


def _db_path() -> str:
    return current_app.config["DB_PATH"]


def _error(message: str, status: int) -> Tuple[Response, int]:
    return jsonify({"error": message}), status


def _int_arg(name: str) -> Tuple[Optional[int], Optional[str]]:
    """Parse a required integer query argument; return (value, error message)."""
    raw = request.args.get(name)
    if not raw:
        return None, f"{name} required"
    try:
        return int(raw), None
    except ValueError:
        return None, f"{name} must be an integer"


def _cached(response: Response, max_age: int) -> Response:
    response.headers["Cache-Control"] = f"public, max-age={max_age}"
    return response


@api.route("/parse-and-store", methods=["POST"])
def parse_and_store() -> ApiResponse:
    """Ingest one device page.

    Body: ``{"brandName": str, "url": str, "folderName": str?}``
    """
    body: Dict[str, Any] = request.get_json(silent=True) or {}
    brand_name = body.get("brandName")
    url = body.get("url")
    folder_name = body.get("folderName") or None

    if not isinstance(brand_name, str) or not isinstance(url, str) or not brand_name or not url:
        return _error("brandName and url required", 400)
    if folder_name is not None and not isinstance(folder_name, str):
        return _error("folderName must be a string", 400)

    try:
        result = ingest_phone(
            brand_name,
            url,
            folder_name=folder_name,
            store=PhoneStore(_db_path(), initialize=False),
            session=current_app.config.get("HTTP_SESSION"),
        )
    except (InvalidInputError, NoSpecsFoundError) as e:
        return _error(str(e), 400)
    except FetchError as e:
        return _error(str(e), 500)
    except sqlite3.Error as e:
        logger.exception("Store failure during ingestion")
        return _error(str(e), 500)
    except Exception as e:
        logger.exception("Unexpected failure during ingestion")
        return _error(str(e), 500)

    return jsonify(result.to_dict())


@api.route("/brands", methods=["GET"])
def brands() -> ApiResponse:
    try:
        data = list_brands(_db_path())
    except sqlite3.Error as e:
        return _error(str(e), 500)
    return _cached(jsonify(data), 3600)


@api.route("/phones", methods=["GET"])
def phones() -> ApiResponse:
    brand_id, problem = _int_arg("brandId")
    if problem:
        return _error(problem, 400)
    try:
        data = list_phones(_db_path(), brand_id)
    except sqlite3.Error as e:
        return _error(str(e), 500)
    return _cached(jsonify(data), 3600)


@api.route("/phone-detail", methods=["GET"])
def phone_detail() -> ApiResponse:
    phone_id, problem = _int_arg("id")
    if problem:
        return _error(problem, 400)
    try:
        detail = get_phone_detail(_db_path(), phone_id)
    except sqlite3.Error as e:
        return _error(str(e), 500)
    if detail is None:
        return _error(f"No details for phone {phone_id}", 404)
    return _cached(jsonify(detail), 86400)
