# tests/test_config_validator.py

"""
Tests for startup configuration checks.
"""

import pytest

from core import config_validator
from core.config import settings


def test_missing_config_only_warns_outside_production(monkeypatch):
    monkeypatch.setattr(settings, "ENV", "development")
    monkeypatch.setattr(settings, "SUPABASE_URL", None)

    config_validator.validate_config_on_startup()


def test_missing_config_fails_in_production(monkeypatch):
    monkeypatch.setattr(settings, "ENV", "production")
    monkeypatch.setattr(settings, "SUPABASE_URL", None)

    with pytest.raises(RuntimeError, match="SUPABASE_URL"):
        config_validator.validate_config_on_startup()


def test_default_secret_is_reported(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_SERVICE_ROLE_KEY", "service-key")
    monkeypatch.setattr(settings, "ACCESS_TOKEN_SECRET", "change-me-in-production")

    assert config_validator.validate_required_config() == ["ACCESS_TOKEN_SECRET"]


def test_cors_origins_are_parsed(monkeypatch):
    monkeypatch.setattr(settings, "FRONTEND_ORIGINS", "https://bms.example.com/, http://localhost:5173,")

    assert settings.cors_origins == ["http://localhost:5173", "https://bms.example.com"]
