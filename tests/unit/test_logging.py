"""
Unit tests for the logging helpers: context binding and JSON rendering.
"""

import json
import logging
import sys

import pytest

from switchboard.core.logging.logger import (
    ContextFilter,
    JSONFormatter,
    LogContext,
    clear_log_context,
    get_log_context,
    set_log_context,
)


def _record(message="hello", **extra):
    record = logging.LogRecord("switchboard.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    def test_sync_block_binds_and_resets(self):
        clear_log_context()

        with LogContext(user_id=1, guild_id=2, command="ping", correlation_id="abc"):
            context = get_log_context()

        assert context["user_id"] == "1"
        assert context["command"] == "ping"
        assert context["correlation_id"] == "abc"
        assert get_log_context() == {}

    @pytest.mark.asyncio
    async def test_async_block(self):
        async with LogContext(command="settings"):
            assert get_log_context()["command"] == "settings"
            assert get_log_context()["guild_id"] == "N/A"

    def test_set_log_context_merges(self):
        clear_log_context()

        set_log_context(user_id=5, command=None)
        set_log_context(guild_id=6)

        assert get_log_context() == {"user_id": "5", "guild_id": "6"}
        clear_log_context()

    def test_filter_copies_context_onto_record(self):
        record = _record()

        with LogContext(command="ping", interaction_id=99):
            ContextFilter().filter(record)

        assert record.command == "ping"
        assert record.interaction_id == "99"
        assert record.user_id == "N/A"


class TestJSONFormatter:
    def test_includes_context_and_extra(self):
        record = _record(command="ping", user_id="N/A", module_name="commands")

        payload = json.loads(JSONFormatter().format(record))

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["command"] == "ping"
        assert "user_id" not in payload
        assert payload["extra"] == {"module_name": "commands"}

    def test_exception_is_rendered(self):
        try:
            raise ValueError("broken")
        except ValueError:
            record = logging.LogRecord(
                "switchboard.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        payload = json.loads(JSONFormatter().format(record))

        assert "ValueError: broken" in payload["exception"]
