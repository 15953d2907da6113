"""Unit tests for application settings."""

import pytest

from core.config import Settings


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        assert settings.POINT_LABEL_TRANSFORM == "reverse"
        assert settings.STOPS_ID_COLUMN == ""
        assert settings.STOPS_LAT_COLUMNS[0] == "StopLat"
        settings.validate_settings()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("POINT_LABEL_TRANSFORM", "upper")
        monkeypatch.setenv("STOPS_ID_COLUMN", "StopOffset")
        monkeypatch.setenv("STOPS_NAME_COLUMNS", '["title"]')
        settings = Settings()
        assert settings.POINT_LABEL_TRANSFORM == "upper"
        assert settings.STOPS_ID_COLUMN == "StopOffset"
        assert settings.STOPS_NAME_COLUMNS == ["title"]

    def test_invalid_label_transform(self):
        settings = Settings(POINT_LABEL_TRANSFORM="rot13")
        with pytest.raises(ValueError, match="POINT_LABEL_TRANSFORM"):
            settings.validate_settings()

    def test_debug_in_production(self):
        settings = Settings(ENVIRONMENT="production", DEBUG=True)
        with pytest.raises(ValueError, match="DEBUG"):
            settings.validate_settings()
