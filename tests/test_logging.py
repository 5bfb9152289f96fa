"""Tests for logging configuration and the JSONL handler."""

import json
import logging
import os
import sys
import time

import pytest

from fgwork.logging import (
    ComponentFormatter,
    JSONLHandler,
    configure_logging,
    prune_old_logs,
    record_extras,
)


def _record(name: str = "fgwork.scheduling.manager", **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, logging.INFO, __file__, 1, "job_added", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestRecordExtras:
    def test_returns_only_extra_fields(self):
        record = _record(**{"queue.id": "q", "job.id": "j"})

        assert record_extras(record) == {"queue.id": "q", "job.id": "j"}

    def test_plain_record_has_no_extras(self):
        assert record_extras(_record()) == {}


class TestComponentFormatter:
    def test_shortens_logger_name(self):
        formatter = ComponentFormatter("%(component)s | %(message)s")

        assert formatter.format(_record()) == "scheduling | job_added"

    def test_foreign_logger_uses_first_segment(self):
        formatter = ComponentFormatter("%(component)s | %(message)s")

        assert formatter.format(_record("asyncio.events")) == "asyncio | job_added"

    def test_appends_extras(self):
        formatter = ComponentFormatter("%(message)s")

        message = formatter.format(_record(**{"queue.id": "q"}))

        assert message == "job_added queue.id=q"


class TestJSONLHandler:
    def test_writes_structured_entry(self, tmp_path):
        handler = JSONLHandler(tmp_path / "logs")
        try:
            handler.emit(_record(**{"queue.id": "q", "job.id": "j"}))
        finally:
            handler.close()

        files = list((tmp_path / "logs").glob("*.jsonl"))
        assert len(files) == 1
        entry = json.loads(files[0].read_text().strip())
        assert entry["level"] == "INFO"
        assert entry["component"] == "scheduling"
        assert entry["logger"] == "fgwork.scheduling.manager"
        assert entry["message"] == "job_added"
        assert entry["extra"] == {"queue.id": "q", "job.id": "j"}
        assert "exception" not in entry

    def test_records_exception(self, tmp_path):
        handler = JSONLHandler(tmp_path / "logs")
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "fgwork.scheduling.manager",
                logging.ERROR,
                __file__,
                1,
                "job_process_failed",
                None,
                sys.exc_info(),
            )
        try:
            handler.emit(record)
        finally:
            handler.close()

        entry = json.loads(next((tmp_path / "logs").glob("*.jsonl")).read_text())
        assert entry["level"] == "ERROR"
        assert "RuntimeError: boom" in entry["exception"]


class TestPruneOldLogs:
    def test_missing_dir(self, tmp_path):
        assert prune_old_logs(tmp_path / "nope") == 0

    def test_deletes_only_old_jsonl_files(self, tmp_path):
        old = tmp_path / "2020-01-01.jsonl"
        recent = tmp_path / "today.jsonl"
        other = tmp_path / "notes.txt"
        for path in (old, recent, other):
            path.write_text("{}\n")
        stale = time.time() - 30 * 86400
        os.utime(old, (stale, stale))
        os.utime(other, (stale, stale))

        deleted = prune_old_logs(tmp_path, retention_days=7)

        assert deleted == 1
        assert not old.exists()
        assert recent.exists()
        assert other.exists()


class TestConfigureLogging:
    def test_explicit_level(self, restore_root_logger):
        configure_logging(level="debug")

        assert restore_root_logger.level == logging.DEBUG

    def test_level_from_env(self, monkeypatch, restore_root_logger):
        monkeypatch.setenv("FGWORK_LOG_LEVEL", "WARNING")

        configure_logging()

        assert restore_root_logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        configure_logging(level="chatty")

        assert restore_root_logger.level == logging.INFO

    def test_log_to_file_adds_jsonl_handler(self, fgwork_home, restore_root_logger):
        configure_logging(level="INFO", log_to_file=True)

        assert any(isinstance(h, JSONLHandler) for h in restore_root_logger.handlers)
        assert (fgwork_home.resolve() / "logs").is_dir()
