"""Configuration loading.

Supports:
- An optional YAML config file (``veriflow.yaml`` or ``$VERIFLOW_CONFIG``)
- Environment variable expansion (${VAR}) inside string values
- ``VERIFLOW_*`` environment overrides, with ``.env`` files loaded first

Example veriflow.yaml:
    db_path: ./db/SalesDB.json
    model: ${VERIFLOW_MODEL}
    llm_enabled: true
    log_level: INFO
"""

from __future__ import annotations

import dataclasses
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from veriflow.errors import ConfigError
from veriflow.llm.detection import load_env_files

DEFAULT_CONFIG_FILE = "veriflow.yaml"
DEFAULT_DB_PATH = "db/SalesDB.json"

ENV_OVERRIDES = {
    "VERIFLOW_DB_PATH": "db_path",
    "VERIFLOW_DB_URL": "db_url",
    "VERIFLOW_MODEL": "model",
    "VERIFLOW_LLM_ENABLED": "llm_enabled",
    "VERIFLOW_LOG_LEVEL": "log_level",
    "VERIFLOW_HOST": "host",
    "VERIFLOW_PORT": "port",
    "VERIFLOW_ROW_LIMIT": "row_limit",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass
class Settings:
    """Runtime settings for the service and the CLI."""

    db_path: str = DEFAULT_DB_PATH
    db_url: str | None = None
    model: str | None = None
    temperature: float = 0.2
    llm_enabled: bool = True
    row_limit: int = 50
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    config_path: Path | None = field(default=None, compare=False)


def expand_env_vars(value: str, environ: Mapping[str, str] | None = None) -> str:
    """Expand ${VAR} to environ["VAR"].

    Args:
        value: String potentially containing ${VAR} patterns
        environ: Variables to expand from (defaults to os.environ)

    Returns:
        String with environment variables expanded (missing ones become "")

    Example:
        >>> os.environ["VERIFLOW_MODEL"] = "gpt-4o-mini"
        >>> expand_env_vars("${VERIFLOW_MODEL}")
        'gpt-4o-mini'
    """
    env = os.environ if environ is None else environ
    return re.sub(r"\$\{(\w+)\}", lambda m: env.get(m.group(1), ""), value)


def _coerce(
    name: str,
    value: Any,
    target: str,
    optional: bool = False,
    environ: Mapping[str, str] | None = None,
) -> Any:
    """Convert a raw YAML/env value to the field's declared type."""
    if value is None:
        return None
    if isinstance(value, str) and "${" in value:
        value = expand_env_vars(value, environ)

    if target == "bool":
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ConfigError(f"'{name}' must be a boolean, got {value!r}")
    if target == "int":
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'{name}' must be an integer, got {value!r}") from e
    if target == "float":
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'{name}' must be a number, got {value!r}") from e
    if not isinstance(value, str):
        raise ConfigError(f"'{name}' must be a string, got {type(value).__name__}")
    # An unset ${VAR} expands to "", which means "not configured"
    if optional and not value:
        return None
    return value


def parse_settings(
    config: Mapping[str, Any], environ: Mapping[str, str] | None = None
) -> Settings:
    """Build Settings from a mapping.

    ${VAR} placeholders are expanded from environ (os.environ by default).

    Raises:
        ConfigError: On unknown keys or values of the wrong type
    """
    fields = {f.name: f for f in dataclasses.fields(Settings) if f.name != "config_path"}
    unknown = set(config) - set(fields)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    values = {}
    for name, value in config.items():
        # Annotations are strings under postponed evaluation, e.g. "str | None"
        annotation = str(fields[name].type)
        target = annotation.split("|")[0].strip()
        optional = "None" in annotation
        coerced = _coerce(name, value, target, optional, environ)
        if coerced is not None or optional:
            values[name] = coerced
    return Settings(**values)


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from a YAML file and the environment.

    Precedence, lowest to highest: defaults, YAML file, ``VERIFLOW_*``
    environment variables.

    Args:
        path: Config file; defaults to $VERIFLOW_CONFIG, then ./veriflow.yaml
            if it exists
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Parsed Settings

    Raises:
        FileNotFoundError: If an explicitly given config file doesn't exist
        ConfigError: If the file or overrides are invalid
    """
    load_env_files()
    env = os.environ if environ is None else environ

    config_path: Path | None = None
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    elif env.get("VERIFLOW_CONFIG"):
        config_path = Path(env["VERIFLOW_CONFIG"])
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    elif Path(DEFAULT_CONFIG_FILE).exists():
        config_path = Path(DEFAULT_CONFIG_FILE)

    raw: dict[str, Any] = {}
    if config_path is not None:
        try:
            loaded = yaml.safe_load(config_path.read_text())
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config must be a mapping, got {type(loaded).__name__}")
        raw.update(loaded)

    for var, name in ENV_OVERRIDES.items():
        if var in env:
            raw[name] = env[var]

    settings = parse_settings(raw, env)
    settings.config_path = config_path
    return settings


__all__ = ["Settings", "load_settings", "parse_settings", "expand_env_vars"]
