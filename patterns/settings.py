"""
Settings loader for settings.yaml.

Usage:
    from patterns.settings import settings

    level = settings.logging.level
    copy_rules = settings.patterns.copy_rules
"""

import yaml
from pathlib import Path
from typing import List, Any


# Path to the bundled settings file
SETTINGS_FILE = Path(__file__).parent / "settings.yaml"

# Defaults (used when a key is missing from YAML)
DEFAULTS = {
    "logging": {
        "level": "INFO",
    },
    "patterns": {
        "copy_rules": False,
        "tracing": {
            "log_traces": False,
            "max_entries": 1000,
        },
    },
}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class DotDict(dict):
    """Dict with attribute access: d.key instead of d['key']"""

    def __getattr__(self, key: str) -> Any:
        try:
            value = self[key]
            if isinstance(value, dict):
                return DotDict(value)
            return value
        except KeyError:
            raise AttributeError(f"Setting '{key}' not found")

    def __setattr__(self, key: str, value: Any) -> None:
        self[key] = value

    def get_nested(self, path: str, default: Any = None) -> Any:
        """Get a value by dotted path: 'patterns.tracing.log_traces'"""
        keys = path.split('.')
        value = self
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge of dicts (override wins)"""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(filepath: Path = None) -> DotDict:
    """
    Load settings from a YAML file.

    Priority:
    1. Values from the YAML file (highest)
    2. DEFAULTS

    Args:
        filepath: Path to the settings file (defaults to settings.yaml)

    Returns:
        DotDict with settings
    """
    filepath = filepath or SETTINGS_FILE

    config = _deep_merge({}, DEFAULTS)

    if filepath.exists():
        with open(filepath, "r", encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        config = _deep_merge(config, yaml_config)
    else:
        print(f"[settings] Settings file not found: {filepath}")
        print("[settings] Using defaults")

    return DotDict(config)


def validate_settings(settings: DotDict) -> List[str]:
    """
    Validate settings.

    Returns:
        List of errors (empty if everything is OK)
    """
    errors = []

    level = settings.get_nested("logging.level")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        errors.append(f"logging.level must be one of {sorted(LOG_LEVELS)}")

    if not isinstance(settings.get_nested("patterns.copy_rules"), bool):
        errors.append("patterns.copy_rules must be a boolean")

    if not isinstance(settings.get_nested("patterns.tracing.log_traces"), bool):
        errors.append("patterns.tracing.log_traces must be a boolean")

    max_entries = settings.get_nested("patterns.tracing.max_entries")
    if not isinstance(max_entries, int) or isinstance(max_entries, bool) or max_entries < 1:
        errors.append("patterns.tracing.max_entries must be an integer >= 1")

    return errors


# Global settings instance (lazy)
_settings = None


def get_settings() -> DotDict:
    """Get global settings (singleton)"""
    global _settings
    if _settings is None:
        _settings = load_settings()
        errors = validate_settings(_settings)
        if errors:
            print("[settings] Invalid settings:")
            for err in errors:
                print(f"  - {err}")
    return _settings


def reload_settings() -> DotDict:
    """Reload settings from file"""
    global _settings
    _settings = None
    return get_settings()


# For convenient import: from patterns.settings import settings
settings = get_settings()
