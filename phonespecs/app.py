"""Flask app serving the ingestion and catalog API.

Run locally with ``python -m phonespecs.app`` or
``flask --app "phonespecs.app:create_app()" run``.
"""

from typing import Any, Dict, Optional

from flask import Flask

from phonespecs import config
from phonespecs.api import api
from phonespecs.db import init_db

__all__ = ["create_app"]


def create_app(db_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """Build the Flask app and make sure the schema exists at ``db_path``."""
    app = Flask(__name__)
    app.config["DB_PATH"] = db_path or config.DB_PATH
    app.config["HTTP_SESSION"] = None
    if overrides:
        app.config.update(overrides)

    init_db(app.config["DB_PATH"])
    app.register_blueprint(api)
    return app


if __name__ == "__main__":
    from phonespecs.logging_config import setup_logging

    setup_logging()
    create_app().run(host=config.FLASK_HOST, port=config.FLASK_PORT, debug=config.FLASK_DEBUG)
