from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml

DEFAULT_LOCK_DENIED_MESSAGE = (
    "Access to the requested lock is denied because the lock is currently held by another entity."
)
DEFAULT_IN_USE_MESSAGE = "The request requires a resource that already is in use."
DEFAULT_MISSING_ELEMENT_MESSAGE = "An expected element is missing."

ENV_STRICT = "NCERRORS_STRICT"


class ConfigError(RuntimeError):
    pass


@dataclass
class TranslatorConfig:
    version: int
    source_file: Path | None
    # Logging configuration
    logging_json_enabled: bool
    logging_level: str
    # Translator behaviour
    strict: bool
    lock_denied_message: str
    in_use_message: str
    missing_element_message: str


def _resolve_env_var(value: Any, env_var_name: str | None = None) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith('$'):
        env_name = env_var_name or value[1:]  # Remove $ prefix
        return os.getenv(env_name, value)  # Fallback to original if not found
    return value


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    return raw.strip().lower() in {'1', 'true', 'yes', 'on'}


def _message(messages: dict[str, Any], key: str, default: str) -> str:
    value = messages.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f'messages.{key} must be a non-empty string')
    return value


def _build(raw: dict[str, Any], source_file: Path | None) -> TranslatorConfig:
    logging_config = cast(dict[str, Any], raw.get('logging', {}) or {})
    translator = cast(dict[str, Any], raw.get('translator', {}) or {})
    messages = cast(dict[str, Any], raw.get('messages', {}) or {})
    level = _resolve_env_var(logging_config.get('level', 'INFO'))
    return TranslatorConfig(
        version=int(raw.get('version', 1)),
        source_file=source_file,
        logging_json_enabled=bool(logging_config.get('json_enabled', False)),
        logging_level=str(level),
        strict=_env_flag(ENV_STRICT, bool(translator.get('strict', True))),
        lock_denied_message=_message(messages, 'lock_denied', DEFAULT_LOCK_DENIED_MESSAGE),
        in_use_message=_message(messages, 'in_use', DEFAULT_IN_USE_MESSAGE),
        missing_element_message=_message(
            messages, 'missing_element', DEFAULT_MISSING_ELEMENT_MESSAGE
        ),
    )


def default_config() -> TranslatorConfig:
    return _build({}, None)


def load_config(path: str | Path) -> TranslatorConfig:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f'Configuration file not found: {p}')
    try:
        loaded = yaml.safe_load(p.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid YAML in {p}: {exc}') from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f'Configuration root in {p} must be a mapping')
    return _build(cast(dict[str, Any], loaded), p)


__all__ = ["TranslatorConfig", "ConfigError", "load_config", "default_config"]
