"""Run configuration loading.

Reads an optional YAML file (``godmt.yaml``) and ``GODMT_*`` environment
overrides into a ``RunConfig``. In non-strict mode invalid input falls back
to defaults with a warning; strict mode raises ``ConfigValidationError``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "godmt.yaml"
ENV_PREFIX = "GODMT_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigValidationError(RuntimeError):
    """Raised when strict configuration validation fails."""


@dataclass(frozen=True)
class RunConfig:
    """Settings for one scan run."""

    source_dir: str = "."
    result_root: str = "result"
    report_dir: str = "result/run_reports"
    per_package_index: bool = True
    record_omissions: bool = False
    include_tests: bool = False
    log_level: str = "INFO"


_BOOL_FIELDS = {f.name for f in fields(RunConfig) if f.type in ("bool", bool)}
_KNOWN_FIELDS = {f.name for f in fields(RunConfig)}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``GODMT_STRICT_CONFIG`` env."""
    return _env_flag(f"{ENV_PREFIX}STRICT_CONFIG", default=default)


def _fail(msg: str, strict: bool) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; continuing with defaults", msg)


def _coerce(key: str, value: Any, strict: bool) -> Optional[Any]:
    """Coerce a raw YAML/env value to the field type, None if invalid."""
    if key in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        _fail(f"Config key '{key}' expects a boolean, got {value!r}", strict)
        return None

    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        _fail(f"Config key '{key}' expects a string, got {type(value).__name__}", strict)
        return None
    return str(value)


def load_config_file(config_path: str, strict: bool = False) -> dict[str, Any]:
    """Load and parse a YAML run configuration.

    In non-strict mode this returns an empty dict on read/parse failures.
    In strict mode this raises ``ConfigValidationError``.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Config file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse config YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        return {}

    if not isinstance(payload, dict):
        _fail(f"Unexpected config payload type: {type(payload).__name__}", strict)
        return {}

    return payload


def _apply(config: RunConfig, values: dict[str, Any], origin: str, strict: bool) -> RunConfig:
    updates: dict[str, Any] = {}
    for key, raw in values.items():
        if key not in _KNOWN_FIELDS:
            _fail(f"Unknown config key '{key}' in {origin}", strict)
            continue
        value = _coerce(key, raw, strict)
        if value is not None:
            updates[key] = value
    return replace(config, **updates) if updates else config


def _env_overrides() -> dict[str, str]:
    overrides = {}
    for name in _KNOWN_FIELDS:
        raw = os.getenv(ENV_PREFIX + name.upper())
        if raw is not None:
            overrides[name] = raw
    return overrides


def load_run_config(
    config_path: Optional[str] = None,
    strict: Optional[bool] = None,
    **overrides: Any,
) -> RunConfig:
    """Build the effective run configuration.

    Precedence, lowest first: defaults, YAML file, ``GODMT_*`` environment
    variables, explicit keyword overrides (``None`` values are ignored).

    Args:
        config_path: YAML file to read. When None, ``godmt.yaml`` in the
            working directory is used if it exists.
        strict: Raise on invalid input instead of falling back. Defaults to
            the ``GODMT_STRICT_CONFIG`` environment flag.
    """
    if strict is None:
        strict = resolve_strict_config_validation()

    config = RunConfig()

    if config_path is None and os.path.isfile(DEFAULT_CONFIG_FILE):
        config_path = DEFAULT_CONFIG_FILE
    if config_path is not None:
        config = _apply(config, load_config_file(config_path, strict=strict), config_path, strict)

    config = _apply(config, _env_overrides(), "environment", strict)

    explicit = {key: value for key, value in overrides.items() if value is not None}
    config = _apply(config, explicit, "arguments", strict)

    logger.debug("Effective run config: %s", config)
    return config
