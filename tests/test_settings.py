"""Tests for structsyslog.settings."""

from __future__ import annotations

import pytest

from structsyslog.settings import Settings, configure, get_settings, reset_settings, settings_from_env


class TestSettings:
    def test_strict_by_default(self) -> None:
        assert get_settings() == Settings(allow_long_sd_names=False)

    def test_configure(self) -> None:
        assert configure(allow_long_sd_names=True).allow_long_sd_names is True
        assert get_settings().allow_long_sd_names is True

    def test_configure_none_keeps_value(self) -> None:
        configure(allow_long_sd_names=True)
        assert configure().allow_long_sd_names is True

    def test_reset(self) -> None:
        configure(allow_long_sd_names=True)
        reset_settings()
        assert get_settings().allow_long_sd_names is False


class TestSettingsFromEnv:
    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", " yes ", "on"])
    def test_truthy(self, raw: str) -> None:
        assert settings_from_env({"SYSLOG_ALLOW_LONG_SD_NAMES": raw}).allow_long_sd_names is True

    @pytest.mark.parametrize("raw", ["", "0", "false", "no"])
    def test_falsy(self, raw: str) -> None:
        assert settings_from_env({"SYSLOG_ALLOW_LONG_SD_NAMES": raw}).allow_long_sd_names is False

    def test_missing(self) -> None:
        assert settings_from_env({}) == Settings()

    def test_does_not_apply(self) -> None:
        settings_from_env({"SYSLOG_ALLOW_LONG_SD_NAMES": "1"})
        assert get_settings().allow_long_sd_names is False
