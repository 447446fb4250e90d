"""Config file loading and validation."""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from rpcshell.errors import ConfigError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "50051"

_STRING_FIELDS = (
    "host",
    "schema_path",
    "package",
    "service",
    "splash_text_path",
    "history_path",
    "log_file",
)


@dataclass(frozen=True)
class Config:
    """Resolved shell settings."""

    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT
    schema_path: Optional[str] = None
    package: Optional[str] = None
    service: Optional[str] = None
    splash_text_path: Optional[str] = None
    history_path: Optional[str] = None
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Config":
        """Build config from a parsed JSON object, validating field types."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        for name in _STRING_FIELDS:
            value = payload.get(name)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{name} must be a string")

        values = dict(payload)
        if "port" in values:
            values["port"] = _normalize_port(values["port"])
        if "host" in values and not values["host"]:
            raise ConfigError("host must be a non-empty string")

        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "Config":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "port" in values:
            values["port"] = _normalize_port(values["port"])
        return replace(self, **values)


def _normalize_port(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ConfigError("port must be a number or numeric string")
    text = str(value).strip()
    if not text.isdigit() or not 0 < int(text) < 65536:
        raise ConfigError(f"Invalid port: {value}")
    return text


def load_config(path: str) -> Config:
    """Load config from a JSON file.

    Raises:
        ConfigError: If the file is missing, not JSON, or has invalid values
    """
    config_path = Path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read config file: {e}") from e

    if not isinstance(payload, dict):
        raise ConfigError("Config root must be an object")
    return Config.from_dict(payload)
