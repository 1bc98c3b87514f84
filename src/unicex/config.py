"""Settings loader: YAML file plus UNICEX_* environment overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .settings import Settings

logger = logging.getLogger(__name__)

ENV_PREFIX = "UNICEX_"
# Variables with a meaning of their own, never treated as overrides.
RESERVED_ENV = {"CONFIG", "LOG_LEVEL"}


def _deep_set(obj: dict[str, Any], path: list[str], value: Any) -> None:
    cur = obj
    for key in path[:-1]:
        nxt = cur.get(key)
        if not isinstance(nxt, dict):
            nxt = cur[key] = {}
        cur = nxt
    cur[path[-1]] = value


def _parse_env_value(raw: str) -> Any:
    """Interpret an override as a YAML scalar ("30" -> 30, "true" -> True)."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def apply_env_overrides(
    data: dict[str, Any],
    environ: dict[str, str] | None = None,
    *,
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:
    """Merge ``UNICEX_A__B=value`` variables into ``data['a']['b']``.

    e.g. UNICEX_EXCHANGES__POLONIEX__RATE_CACHE_SECONDS=10
    """
    if environ is None:
        environ = dict(os.environ)

    merged = dict(data)
    for key, raw_value in sorted(environ.items()):
        if not key.startswith(prefix):
            continue
        remainder = key[len(prefix):]
        if remainder in RESERVED_ENV:
            continue
        path = [p.lower() for p in remainder.split("__") if p]
        if path:
            _deep_set(merged, path, _parse_env_value(raw_value))
    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be a mapping, got: {type(loaded)!r}")
    return loaded


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from YAML (if present) and the environment.

    Raises:
        ValueError: If the file is malformed or the merged settings are invalid
    """
    if config_path is None:
        config_path = os.environ.get(f"{ENV_PREFIX}CONFIG", "config.yml")

    path = Path(config_path).expanduser()
    if path.exists():
        data = _read_yaml(path)
        logger.debug("Loaded config from %s", path)
    else:
        logger.debug("Config file %s not found, using defaults", path)
        data = {}

    try:
        return Settings.model_validate(apply_env_overrides(data))
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
