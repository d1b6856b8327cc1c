import json
import logging
import sys

import pytest

from cep_service.core.config import get_settings
from cep_service.core.logging import (
    CorrelationIdFilter,
    StructuredLogFormatter,
    configure_logging,
    get_logger,
    set_correlation_id,
)
from cep_service.domain.models import ProviderName


def _record(msg="hello", **attrs):
    record = logging.LogRecord("cep_service.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


def test_structured_formatter_emits_one_json_object():
    line = StructuredLogFormatter().format(_record(data={"cep": "01001-000", "api": "ViaCEP"}))
    payload = json.loads(line)

    assert payload["level"] == "INFO"
    assert payload["message"] == "hello"
    assert payload["logger"] == "cep_service.test"
    assert payload["cep"] == "01001-000"
    assert payload["api"] == "ViaCEP"
    assert payload["timestamp"].endswith("Z")


def test_structured_formatter_includes_correlation_id():
    corr_id = set_correlation_id("abc-123")
    payload = json.loads(StructuredLogFormatter().format(_record()))
    assert payload["correlation_id"] == corr_id == "abc-123"


def test_structured_formatter_includes_exception():
    try:
        raise ValueError("bad body")
    except ValueError:
        record = _record(exc_info=sys.exc_info())

    payload = json.loads(StructuredLogFormatter().format(record))
    assert payload["exception"]["type"] == "ValueError"
    assert payload["exception"]["message"] == "bad body"


@pytest.fixture
def root_logger():
    """Restore the root logger and the settings cache after reconfiguring."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    get_settings.cache_clear()
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    get_settings.cache_clear()


def test_configure_logging_replaces_root_handlers(root_logger):
    root_logger.addHandler(logging.NullHandler())

    configure_logging()
    configure_logging()

    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0].formatter, StructuredLogFormatter)


def test_plain_format_when_structured_logging_disabled(root_logger, monkeypatch):
    monkeypatch.setenv("ENABLE_STRUCTURED_LOGGING", "false")
    get_settings.cache_clear()

    configure_logging()

    handler = root_logger.handlers[0]
    assert not isinstance(handler.formatter, StructuredLogFormatter)
    assert "[%(correlation_id)s]" in handler.formatter._fmt

    set_correlation_id("plain-7")
    record = _record()
    handler.filter(record)
    assert "[plain-7] - hello" in handler.format(record)


def test_get_logger_attaches_filter_once():
    logger = get_logger("cep_service.test.filters")
    assert get_logger("cep_service.test.filters") is logger

    filters = [f for f in logger.filters if isinstance(f, CorrelationIdFilter)]
    assert len(filters) == 1


def test_request_completed_is_logged_with_data(client, override_coordinator, make_adapter, caplog):
    override_coordinator(make_adapter(ProviderName.VIACEP))
    caplog.set_level(logging.INFO, logger="cep_service.main")

    assert client.get("/", params={"cep": "01001-000"}).status_code == 200

    records = [r for r in caplog.records if r.getMessage() == "Request completed"]
    assert len(records) == 1
    data = records[0].data
    assert data["request_path"] == "/"
    assert data["method"] == "GET"
    assert data["status_code"] == 200
    assert isinstance(data["process_time_ms"], (int, float))
