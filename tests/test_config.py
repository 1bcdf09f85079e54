"""
Tests for settings loading and config paths.
"""

from pathlib import Path

import pytest

from itemdumper.config import DumperConfig, DumperSettings, load_settings
from itemdumper.errors import ConfigError


class TestSettings:
    """Test YAML and environment settings."""

    def test_defaults(self, tmp_path, monkeypatch):
        """No file and no environment gives defaults."""
        monkeypatch.setattr("itemdumper.config.CONFIG_SEARCH_PATHS", [tmp_path / "missing.yaml"])
        settings = load_settings(environ={})
        assert settings == DumperSettings()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("workers: 4\nstrict_links: false\nlog_level: debug\n")
        settings = load_settings(path, environ={})
        assert settings.workers == 4
        assert settings.strict_links is False
        assert settings.log_level == "DEBUG"

    def test_env_overrides_file(self, tmp_path):
        """Environment variables win over the file."""
        path = tmp_path / "config.yaml"
        path.write_text("workers: 4\n")
        settings = load_settings(path, environ={
            "ITEMDUMPER_WORKERS": "8",
            "ITEMDUMPER_DEDUPE_NAMES": "yes",
        })
        assert settings.workers == 8
        assert settings.dedupe_names is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_settings(path, environ={}) == DumperSettings()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "nope.yaml", environ={})

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("colour: red\n")
        with pytest.raises(ConfigError):
            load_settings(path, environ={})

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_settings(path, environ={})

    @pytest.mark.parametrize("values", [
        {"workers": 0},
        {"workers": "many"},
        {"strict_links": "maybe"},
        {"log_level": "LOUD"},
    ])
    def test_bad_values(self, values):
        with pytest.raises(ConfigError):
            DumperSettings().merged(values)


class TestDumperConfig:
    """Test derived paths."""

    def test_paths(self):
        config = DumperConfig(Path("caches"), "2024-05-01", Path("out"))
        assert config.read_path == Path("caches") / "2024-05-01" / "cache"
        assert config.write_path == Path("out") / "2024-05-01" / "items"

    def test_to_dict(self):
        config = DumperConfig(Path("c"), "n", Path("o"))
        d = config.to_dict()
        assert d["cache_name"] == "n"
        assert d["workers"] == 1
        assert d["strict_links"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
