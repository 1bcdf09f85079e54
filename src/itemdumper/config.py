"""
Dumper Configuration

Settings come from an optional YAML file, then environment variables, then
the command line. DumperSettings holds the tunables; DumperConfig is the
validated result of argument parsing, including the derived paths.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from itemdumper.errors import ConfigError


# Settings file locations (checked in order)
CONFIG_SEARCH_PATHS = [
    Path.home() / ".itemdumper" / "config.yaml",
]

ENV_MAPPINGS = {
    "ITEMDUMPER_WORKERS": "workers",
    "ITEMDUMPER_STRICT_LINKS": "strict_links",
    "ITEMDUMPER_DEDUPE_NAMES": "dedupe_names",
    "ITEMDUMPER_SKIP_UNCHANGED": "skip_unchanged",
    "ITEMDUMPER_LOG_LEVEL": "log_level",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class DumperSettings:
    """Tunables that can be set from a file or the environment."""
    workers: int = 1
    strict_links: bool = True
    dedupe_names: bool = False
    skip_unchanged: bool = True
    log_level: str = "INFO"

    def merged(self, values: Mapping[str, Any]) -> "DumperSettings":
        """Return a copy with values applied, validating each one."""
        known = {f.name for f in fields(self)}
        updates: Dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                raise ConfigError(f"Unknown setting {key!r}")
            updates[key] = _coerce(key, value, getattr(self, key))
        return replace(self, **updates)


def _coerce(key: str, value: Any, default: Any) -> Any:
    """Coerce a setting value to the type of its default."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in _TRUE | _FALSE:
            return value.lower() in _TRUE
        raise ConfigError(f"Setting {key!r} must be a boolean, got {value!r}")

    if isinstance(default, int):
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"Setting {key!r} must be a positive integer, got {value!r}")
        return value

    if key == "log_level":
        level = str(value).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"Setting 'log_level' must be one of {', '.join(LOG_LEVELS)}")
        return level

    return value


def load_settings(config_path: Optional[Path] = None,
                  environ: Optional[Mapping[str, str]] = None) -> DumperSettings:
    """
    Load settings from a YAML file and environment overrides.

    An explicit config_path must exist; otherwise the search paths are tried
    and a missing file just means defaults.
    """
    settings = DumperSettings()

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        search_paths = [config_path]
    else:
        search_paths = CONFIG_SEARCH_PATHS

    for path in search_paths:
        if path.is_file():
            settings = settings.merged(_read_yaml(path))
            break

    env = os.environ if environ is None else environ
    overrides = {key: env[var] for var, key in ENV_MAPPINGS.items() if var in env}
    if overrides:
        settings = settings.merged(overrides)

    return settings


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


@dataclass(frozen=True)
class DumperConfig:
    """Validated configuration for one dumper run."""
    cache_dir: Path
    cache_name: str
    output_dir: Path
    settings: DumperSettings = DumperSettings()

    @property
    def read_path(self) -> Path:
        """<cachedir>/<cachename>/cache"""
        return self.cache_dir / self.cache_name / "cache"

    @property
    def write_path(self) -> Path:
        """<outputdir>/<cachename>/items"""
        return self.output_dir / self.cache_name / "items"

    @property
    def log_level(self) -> int:
        return getattr(logging, self.settings.log_level)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cache_dir": str(self.cache_dir),
            "cache_name": self.cache_name,
            "output_dir": str(self.output_dir),
            "read_path": str(self.read_path),
            "write_path": str(self.write_path),
            "workers": self.settings.workers,
            "strict_links": self.settings.strict_links,
            "dedupe_names": self.settings.dedupe_names,
            "skip_unchanged": self.settings.skip_unchanged,
            "log_level": self.settings.log_level,
        }
