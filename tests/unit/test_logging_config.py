"""Unit tests for logging formatters."""

import json
import logging

from formbuilder.logging_config import (
    DevelopmentFormatter,
    JSONFormatter,
)


def make_record(message="Accepted submission", **extra):
    """Build a log record carrying the given extra attributes."""
    record = logging.LogRecord(
        name="formbuilder.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_includes_core_fields(self):
        """Records are rendered as JSON with level, logger and message."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "formbuilder.test"
        assert data["message"] == "Accepted submission"
        assert "timestamp" in data

    def test_includes_extra_fields(self):
        """Fields passed through ``extra=`` are carried into the output."""
        data = json.loads(JSONFormatter().format(make_record(form_id=7, response_id=3)))

        assert data["form_id"] == 7
        assert data["response_id"] == 3


class TestDevelopmentFormatter:
    """Tests for DevelopmentFormatter."""

    def test_shows_correlation_fields(self):
        """Known context fields are appended in brackets."""
        output = DevelopmentFormatter().format(
            make_record(form_id=7, airtable_record_id="recABC")
        )

        assert "Accepted submission" in output
        assert "[form_id=7 airtable_record_id=recABC]" in output

    def test_omits_context_when_absent(self):
        """Records without context have no bracketed suffix."""
        output = DevelopmentFormatter().format(make_record())
        assert "[form_id" not in output
