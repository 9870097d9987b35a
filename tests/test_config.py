import logging
import math

import pytest
from pydantic import ValidationError

from syncemit import EmitterSettings, EventEmitter, InvalidArgument, create_event_emitter
from syncemit.config import check_max_listeners
from syncemit.logging_config import configure_logging, resolve_level


def test_settings_defaults():
    settings = EmitterSettings()
    assert settings.max_listeners == 10
    assert settings.log_dropped_errors is True


def test_settings_feed_emitter():
    emitter = create_event_emitter(EmitterSettings(max_listeners=25))
    assert emitter.get_max_listeners() == 25


def test_settings_validation_rejects_negative_bound():
    with pytest.raises(ValidationError):
        EmitterSettings(max_listeners=-5)


def test_check_max_listeners():
    assert check_max_listeners(0) == 0
    assert check_max_listeners(2.5) == 2.5
    assert check_max_listeners(math.inf) == math.inf
    with pytest.raises(InvalidArgument):
        check_max_listeners(False)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SYNCEMIT_MAX_LISTENERS", "inf")
    monkeypatch.setenv("SYNCEMIT_LOG_DROPPED_ERRORS", "false")

    settings = EmitterSettings.from_env()

    assert math.isinf(settings.max_listeners)
    assert settings.log_dropped_errors is False
    assert EventEmitter(settings).get_max_listeners() == math.inf


def test_settings_from_env_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("SYNCEMIT_MAX_LISTENERS", raising=False)
    monkeypatch.delenv("SYNCEMIT_LOG_DROPPED_ERRORS", raising=False)

    assert EmitterSettings.from_env() == EmitterSettings()


def test_settings_from_env_rejects_garbage(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SYNCEMIT_MAX_LISTENERS", "lots")
    with pytest.raises(InvalidArgument):
        EmitterSettings.from_env()


def test_configure_logging_honours_env_level(monkeypatch: pytest.MonkeyPatch):
    captured = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
    monkeypatch.setenv("SYNCEMIT_LOG_LEVEL", "debug")
    package_logger = logging.getLogger("syncemit")
    previous = package_logger.level

    try:
        configure_logging()
        assert package_logger.level == logging.DEBUG
    finally:
        package_logger.setLevel(previous)
    assert "%(name)s" in captured["format"]


def test_resolve_level_falls_back_on_unknown_name(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SYNCEMIT_LOG_LEVEL", "chatty")
    assert resolve_level(logging.WARNING) == logging.WARNING

    monkeypatch.delenv("SYNCEMIT_LOG_LEVEL")
    assert resolve_level(logging.ERROR) == logging.ERROR
