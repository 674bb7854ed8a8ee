import logging

import pytest

from scialg.utils import log_config


@pytest.mark.parametrize("value, expected", [
    (None, logging.INFO),
    ("", logging.INFO),
    ("debug", logging.DEBUG),
    (" WARNING ", logging.WARNING),
    ("chatty", logging.INFO),
])
def test_level_from_env(monkeypatch, value, expected):
    if value is None:
        monkeypatch.delenv(log_config.LOG_LEVEL_ENV, raising=False)
    else:
        monkeypatch.setenv(log_config.LOG_LEVEL_ENV, value)
    assert log_config._level_from_env() == expected


def test_set_level_only_touches_package_logger():
    root_level = logging.getLogger().level
    previous = log_config.logger.level
    try:
        log_config.set_level(logging.ERROR)
        assert log_config.logger.level == logging.ERROR
        assert logging.getLogger().level == root_level
    finally:
        log_config.logger.setLevel(previous)
