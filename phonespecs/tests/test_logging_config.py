"""Tests for logging setup and structured ingestion events."""

import json
import logging

from phonespecs.logging_config import get_logger, log_ingest_event, setup_logging


def _read_entries(log_dir):
    files = list(log_dir.glob("ingest_*.jsonl"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]


def test_get_logger_namespacing():
    assert get_logger().name == "phonespecs"
    assert get_logger("scraper").name == "phonespecs.scraper"
    assert get_logger("phonespecs.db").name == "phonespecs.db"


def test_structured_event_written_to_jsonl(tmp_path):
    setup_logging(log_to_console=False, log_dir=tmp_path)

    log_ingest_event("ingest_complete", {
        "message": "Phone X added successfully",
        "phone_id": 3,
        "gallery_images": 2,
    })

    [entry] = _read_entries(tmp_path)
    assert entry["event_type"] == "ingest_complete"
    assert entry["message"] == "Phone X added successfully"
    assert entry["phone_id"] == 3
    assert entry["gallery_images"] == 2
    assert entry["level"] == "INFO"
    assert entry["logger"] == "phonespecs"


def test_plain_child_logger_records_reach_file(tmp_path):
    setup_logging(log_to_console=False, log_dir=tmp_path)

    get_logger("reconcile").warning("Created brand %r", "AcmePhones")

    [entry] = _read_entries(tmp_path)
    assert entry["message"] == "Created brand 'AcmePhones'"
    assert entry["logger"] == "phonespecs.reconcile"
    assert "event_type" not in entry


def test_console_only(tmp_path, capsys):
    logger = setup_logging(level=logging.WARNING, log_to_file=False)

    logger.info("hidden")
    logger.warning("shown")

    err = capsys.readouterr().err
    assert "shown" in err
    assert "hidden" not in err
    assert not list(tmp_path.iterdir())
