"""Tests for configuration loading and validation."""

import pytest

from leadbot.config import (
    AppConfig,
    BusinessConfig,
    FlowSettings,
    IntegrationConfig,
    _safe_bool,
    _safe_float,
    _safe_int,
    _validate_config,
    settings,
)


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_invalid_timeout(self):
        config = AppConfig(integrations=IntegrationConfig(http_timeout_sec=0))
        with pytest.raises(ValueError, match="HTTP_TIMEOUT_SEC"):
            _validate_config(config)

    def test_invalid_port(self):
        with pytest.raises(ValueError, match="PORT"):
            _validate_config(AppConfig(port=70000))

    def test_invalid_latitude(self):
        config = AppConfig(business=BusinessConfig(office_latitude=-120.0))
        with pytest.raises(ValueError, match="OFFICE_LATITUDE"):
            _validate_config(config)

    def test_invalid_longitude(self):
        config = AppConfig(business=BusinessConfig(office_longitude=200.0))
        with pytest.raises(ValueError, match="OFFICE_LONGITUDE"):
            _validate_config(config)

    def test_empty_vertical(self):
        config = AppConfig(flow=FlowSettings(vertical="  "))
        with pytest.raises(ValueError, match="BOT_VERTICAL"):
            _validate_config(config)

    def test_empty_channel(self):
        config = AppConfig(flow=FlowSettings(channel_tag=""))
        with pytest.raises(ValueError, match="CHANNEL_TAG"):
            _validate_config(config)


class TestEnvParsing:
    def test_safe_int_parsing(self):
        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("LEADBOT_TEST_INT", "abc")
        with pytest.raises(ValueError, match="LEADBOT_TEST_INT"):
            _safe_int("LEADBOT_TEST_INT", "1")

    def test_safe_float_parsing(self):
        assert _safe_float("NONEXISTENT_VAR_12345", "3.14") == pytest.approx(3.14)

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("1", True), ("YES", True), ("on", True),
        ("false", False), ("0", False), ("no", False), ("", False),
    ])
    def test_safe_bool_parsing(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LEADBOT_TEST_BOOL", raw)
        assert _safe_bool("LEADBOT_TEST_BOOL", "false") is expected

    def test_safe_bool_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("LEADBOT_TEST_BOOL", "maybe")
        with pytest.raises(ValueError, match="LEADBOT_TEST_BOOL"):
            _safe_bool("LEADBOT_TEST_BOOL", "false")


class TestDefaults:
    def test_strict_validation_off_by_default(self):
        assert _safe_bool("NONEXISTENT_VAR_12345", "false") is False

    def test_settings_singleton(self):
        assert settings.flow.vertical
        assert settings.integrations.http_timeout_sec > 0
