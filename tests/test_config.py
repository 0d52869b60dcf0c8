"""
Tests for settings defaults and overrides.
"""

from courierdesk.config import Settings, get_settings


def test_fee_defaults():
    settings = Settings(_env_file=None)
    assert settings.first_pound_fee_jmd == 700
    assert settings.additional_pound_fee_jmd == 350
    assert settings.free_storage_days == 7
    assert settings.storage_fee_per_day_jmd == 50
    assert settings.tracking_prefix == "TAS"
    assert settings.max_page_size == 100


def test_env_override(monkeypatch):
    monkeypatch.setenv("TRACKING_PREFIX", "JMX")
    monkeypatch.setenv("FREE_STORAGE_DAYS", "10")
    settings = Settings(_env_file=None)
    assert settings.tracking_prefix == "JMX"
    assert settings.free_storage_days == 10


def test_settings_are_cached():
    assert get_settings() is get_settings()
