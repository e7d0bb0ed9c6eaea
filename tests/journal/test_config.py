"""Tests for journal config dataclasses."""

import pytest

from quill.core.config import Config
from quill.core.exceptions import ConfigurationError
from quill.journal.config import AnalyticsConfig, SyncConfig


class TestSyncConfig:
    def test_defaults(self):
        config = SyncConfig()
        assert config.enabled is False
        assert config.max_attempts == 3
        assert config.timeout == 30.0

    def test_rejects_zero_attempts(self):
        with pytest.raises(ConfigurationError):
            SyncConfig(max_attempts=0)

    def test_from_config_file(self, tmp_config_file):
        config = SyncConfig.from_config(Config(config_file=tmp_config_file, env_prefix=""))
        assert config.max_attempts == 5
        assert config.enabled is False

    def test_from_env_strings(self, monkeypatch):
        monkeypatch.setenv("QUILL_SYNC__ENABLED", "true")
        monkeypatch.setenv("QUILL_SYNC__ENDPOINT", "https://sync.example.test")
        monkeypatch.setenv("QUILL_SYNC__TIMEOUT", "0")
        config = SyncConfig.from_config(Config())

        assert config.enabled is True
        assert config.endpoint == "https://sync.example.test"
        assert config.timeout is None


class TestAnalyticsConfig:
    def test_defaults(self):
        config = AnalyticsConfig()
        assert config.heatmap_days == 90
        assert config.week_start_index == 6

    def test_week_start_case_insensitive(self):
        assert AnalyticsConfig(week_start="Monday").week_start_index == 0

    def test_unknown_week_start(self):
        with pytest.raises(ConfigurationError):
            AnalyticsConfig(week_start="someday")

    def test_from_config_file(self, tmp_config_file):
        config = AnalyticsConfig.from_config(Config(config_file=tmp_config_file, env_prefix=""))
        assert config.heatmap_days == 28
        assert config.emotion_top_n == 10
