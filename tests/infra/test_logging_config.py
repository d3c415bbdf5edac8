import io
import json
import logging
import sys
from datetime import date
from decimal import Decimal

from ifrs16_lite.domain.errors import InvalidTermError
from ifrs16_lite.domain.modification import ModificationType
from ifrs16_lite.infra.logging_config import (
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("ifrs16_lite.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# ==============================================================================
# StructuredFormatter
# ==============================================================================


def test_formatter_emits_single_json_line() -> None:
    line = StructuredFormatter().format(_record())
    payload = json.loads(line)

    assert "\n" not in line
    assert payload["level"] == "INFO"
    assert payload["logger"] == "ifrs16_lite.test"
    assert payload["message"] == "hello"
    assert "ts" in payload


def test_formatter_serializes_domain_values() -> None:
    line = StructuredFormatter().format(
        _record(
            liability_change=Decimal("-123.45"),
            effective_date=date(2025, 1, 1),
            modification_type=ModificationType.TERMINATION,
        )
    )
    payload = json.loads(line)

    assert payload["liability_change"] == "-123.45"
    assert payload["effective_date"] == "2025-01-01"
    assert payload["modification_type"] == "termination"


def test_formatter_skips_stdlib_attributes() -> None:
    payload = json.loads(StructuredFormatter().format(_record()))

    assert "args" not in payload
    assert "levelno" not in payload
    assert "pathname" not in payload


def test_formatter_includes_error_code_of_domain_errors() -> None:
    try:
        raise InvalidTermError("lease_term_months must be > 0")
    except InvalidTermError:
        record = logging.LogRecord(
            "ifrs16_lite.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["exc_type"] == "InvalidTermError"
    assert payload["exc_message"] == "lease_term_months must be > 0"
    assert payload["exc_code"] == "INVALID_TERM"
    assert "Traceback" in payload["traceback"]


# ==============================================================================
# configure_logging()
# ==============================================================================


def test_configure_logging_writes_json_to_stream() -> None:
    stream = io.StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)

    logging.getLogger("ifrs16_lite.use_cases.sample").info("measured", extra={"periods": 36})

    payload = json.loads(stream.getvalue().strip())
    assert payload["message"] == "measured"
    assert payload["periods"] == 36


def test_configure_logging_is_idempotent() -> None:
    configure_logging(stream=io.StringIO())
    configure_logging(stream=io.StringIO())

    assert len(logging.getLogger("ifrs16_lite").handlers) == 1


def test_configure_logging_reads_level_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("IFRS16_LOG_LEVEL", "WARNING")

    configure_logging(stream=io.StringIO())

    assert logging.getLogger("ifrs16_lite").level == logging.WARNING


def test_configured_logger_does_not_propagate() -> None:
    configure_logging(stream=io.StringIO())

    assert logging.getLogger("ifrs16_lite").propagate is False


def test_reset_logging_restores_defaults() -> None:
    configure_logging(stream=io.StringIO())

    reset_logging()

    logger = logging.getLogger("ifrs16_lite")
    assert logger.handlers == []
    assert logger.propagate is True
    assert logger.level == logging.NOTSET
