"""
Logging Tests
-------------
Turn id propagation and structured output.
"""

import json
import logging

import pytest

import infra.logging as monad_logging
from infra.logging import (
    JSONFormatter, TurnContext, TurnIdFilter, configure_logging,
    generate_turn_id, get_logger, get_turn_id, log_turn_end
)


@pytest.fixture
def fresh_logging(monkeypatch):
    """Allow configure_logging to run again and undo its handlers."""
    monkeypatch.setattr(monad_logging, "_logging_initialized", False)
    root = logging.getLogger(monad_logging.ROOT_LOGGER)
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def make_record(message="hello", **extra):
    record = logging.LogRecord("monad.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestTurnContext:

    def test_sets_and_resets(self):
        assert get_turn_id() is None
        with TurnContext() as turn_id:
            assert get_turn_id() == turn_id
            assert turn_id.startswith("turn_")
        assert get_turn_id() is None

    def test_explicit_id(self):
        with TurnContext("turn_fixed") as turn_id:
            assert turn_id == "turn_fixed"

    def test_nested(self):
        with TurnContext("outer"):
            with TurnContext("inner"):
                assert get_turn_id() == "inner"
            assert get_turn_id() == "outer"

    def test_unique_ids(self):
        assert generate_turn_id() != generate_turn_id()


class TestFormatting:

    def test_filter_adds_turn_id(self):
        record = make_record()
        with TurnContext("turn_abc"):
            TurnIdFilter().filter(record)
        assert record.turn_id == "turn_abc"

    def test_filter_default(self):
        record = make_record()
        TurnIdFilter().filter(record)
        assert record.turn_id == "-"

    def test_json_formatter(self):
        record = make_record("executed", turn_id="turn_1", executor="send-tx", execution_time_ms=3.5)
        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "executed"
        assert entry["turn_id"] == "turn_1"
        assert entry["executor"] == "send-tx"
        assert entry["execution_time_ms"] == 3.5
        assert "intent" not in entry

    def test_get_logger_namespace(self):
        assert get_logger("core").name == "monad.core"
        assert get_logger("monad.tools").name == "monad.tools"


class TestConfigureLogging:

    def test_file_output(self, tmp_path, fresh_logging):
        configure_logging(level=logging.INFO, log_dir=str(tmp_path), console=False)

        with TurnContext("turn_file"):
            log_turn_end("turn_file", success=True, intent="swap")

        for handler in logging.getLogger("monad").handlers:
            handler.flush()

        lines = (tmp_path / "monad.log").read_text(encoding="utf-8").strip().splitlines()
        entry = json.loads(lines[-1])
        assert entry["turn_id"] == "turn_file"
        assert entry["intent"] == "swap"
        assert entry["success"] is True

    def test_only_first_call_applies(self, tmp_path, fresh_logging):
        configure_logging(log_dir=str(tmp_path), console=False)
        handlers = list(logging.getLogger("monad").handlers)

        configure_logging(log_dir=str(tmp_path / "other"), console=False)

        assert logging.getLogger("monad").handlers == handlers
        assert not (tmp_path / "other").exists()
