"""Configuration management."""
import os
import yaml
from pathlib import Path

_DEFAULT_CONFIG = Path(__file__).parent / "default_config.yaml"

# Environment variable -> (config path, type)
ENV_OVERRIDES = {
    "BIOGAS_MONITOR_DB_PATH": (("database", "path"), str),
    "BIOGAS_MONITOR_API_URL": (("api", "base_url"), str),
    "BIOGAS_MONITOR_API_KEY": (("api", "api_key"), str),
    "BIOGAS_MONITOR_REFRESH_INTERVAL": (("monitor", "refresh_interval"), int),
    "BIOGAS_MONITOR_LOG_LEVEL": (("logging", "level"), str),
}


def load_config(path=None):
    """Load config from YAML, merging defaults with optional overrides."""
    with open(_DEFAULT_CONFIG) as f:
        config = yaml.safe_load(f)

    if path and Path(path).exists():
        with open(path) as f:
            overrides = yaml.safe_load(f) or {}
        config = _deep_merge(config, overrides)

    for env_key, (config_path, cast) in ENV_OVERRIDES.items():
        val = os.environ.get(env_key)
        if val:
            d = config
            for k in config_path[:-1]:
                d = d.setdefault(k, {})
            try:
                d[config_path[-1]] = cast(val)
            except ValueError:
                raise ValueError(f"{env_key} must be {cast.__name__}, got {val!r}")

    _validate_config(config)
    return config


def _deep_merge(base, override):
    """Recursively merge override into base dict."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _validate_config(config):
    """Basic config validation."""
    required_sections = ["api", "monitor", "alerts", "database", "logging"]
    for section in required_sections:
        if section not in config:
            raise ValueError(f"Missing required config section: {section}")

    if config["monitor"]["refresh_interval"] < 10:
        raise ValueError("refresh_interval must be >= 10 seconds")
