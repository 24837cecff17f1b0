import pytest
from pydantic import ValidationError

from core import config


def test_defaults():
    s = config.Settings(_env_file=None)
    assert s.timeout_s == 10.0
    assert s.port == 443
    assert s.deadline_covers_exchange is True
    assert s.ldap_read_size == 1024
    assert s.ldap_min_response_bytes == 10
    assert s.process_name == "mattermost"
    assert s.env_prefix_filter == "MM_"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MMDEBUG_TIMEOUT_S", "2.5")
    monkeypatch.setenv("MMDEBUG_DEADLINE_COVERS_EXCHANGE", "false")
    monkeypatch.setenv("MMDEBUG_PROCESS_NAME", "postgres")
    monkeypatch.setenv("MMDEBUG_LOG_LEVEL", "debug")
    s = config.Settings(_env_file=None)
    assert s.timeout_s == 2.5
    assert s.deadline_covers_exchange is False
    assert s.process_name == "postgres"
    assert s.log_level == "DEBUG"


def test_invalid_values_rejected(monkeypatch):
    monkeypatch.setenv("MMDEBUG_LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        config.Settings(_env_file=None)
    monkeypatch.delenv("MMDEBUG_LOG_LEVEL")
    monkeypatch.setenv("MMDEBUG_TIMEOUT_S", "0")
    with pytest.raises(ValidationError):
        config.Settings(_env_file=None)


def test_get_settings_cached():
    assert config.get_settings() is config.get_settings()
