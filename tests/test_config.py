import logging

import pytest

from app.core.config import Settings


def _settings(env, key=""):
    s = Settings()
    s.ENV = env
    s.JWT_SECRET_KEY = key
    return s


def test_jwt_secret_required_outside_dev():
    with pytest.raises(RuntimeError):
        _settings("prod").jwt_secret()
    assert _settings("prod", "k").jwt_secret() == "k"


def test_dev_secret_warns_once(caplog):
    s = _settings("dev")
    with caplog.at_level(logging.WARNING, logger="app.core.config"):
        s.jwt_secret()
        s.jwt_secret()
        s.jwt_secret()
    warnings = [r for r in caplog.records if "JWT_SECRET_KEY" in r.getMessage()]
    assert len(warnings) == 1
