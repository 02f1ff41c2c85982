import logging

import structlog

from content_safety import logging_utils


def test_setup_logging_configures_once(monkeypatch):
    monkeypatch.setattr(logging_utils.setup_logging, "_configured", False, raising=False)
    calls = []
    monkeypatch.setattr(logging_utils.structlog, "configure", lambda **kwargs: calls.append(kwargs))

    logging_utils.setup_logging(level="debug", log_format="console")
    logging_utils.setup_logging()

    assert len(calls) == 1
    assert isinstance(calls[0]["processors"][-1], structlog.dev.ConsoleRenderer)


def test_setup_logging_defaults_to_json(monkeypatch):
    monkeypatch.setattr(logging_utils.setup_logging, "_configured", False, raising=False)
    calls = []
    monkeypatch.setattr(logging_utils.structlog, "configure", lambda **kwargs: calls.append(kwargs))

    logging_utils.setup_logging(log_format="json")

    assert isinstance(calls[0]["processors"][-1], structlog.processors.JSONRenderer)


def test_resolve_level():
    assert logging_utils._resolve_level("debug") == logging.DEBUG
    assert logging_utils._resolve_level(logging.WARNING) == logging.WARNING
    assert logging_utils._resolve_level("not-a-level") == logging.INFO
