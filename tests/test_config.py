import logging

from parseos.config import get_settings
from parseos.logging_setup import _parse_level


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("PARSEOS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PARSEOS_STRICT_LINE_LENGTH", raising=False)
    s = get_settings()
    assert s.log_level == "INFO"
    assert s.strict_line_length is False


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PARSEOS_LOG_LEVEL", "debug")
    monkeypatch.setenv("PARSEOS_STRICT_LINE_LENGTH", "true")
    s = get_settings()
    assert _parse_level(s.log_level) == logging.DEBUG
    assert s.strict_line_length is True


def test_parse_level():
    assert _parse_level(10) == 10
    assert _parse_level("warning") == logging.WARNING
    assert _parse_level("15") == 15
    assert _parse_level("nonsense") == logging.INFO
