"""Runtime helpers for ncerrors CLI orchestration."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import Any, Protocol

from ncerrors.config import TranslatorConfig, default_config, load_config
from ncerrors.logging import StructuredLogger, configure_logging

ENV_QUIET = "NCERRORS_QUIET"


class _HandlerCallable(Protocol):
    def __call__(self) -> Any: ...


def prepare_config(
    args: Any, *, loader: Callable[[str], TranslatorConfig] = load_config
) -> TranslatorConfig:
    """Load and post-process TranslatorConfig for the given argparse namespace."""
    path = getattr(args, "config", None)
    cfg = loader(path) if path else default_config()
    if getattr(args, "lenient", False):
        cfg.strict = False
    if getattr(args, "json_logs", False):
        cfg.logging_json_enabled = True
    return cfg


def prepare_logger(args: Any, cfg: TranslatorConfig) -> StructuredLogger:
    """Configure the CLI logger; logs go to stderr so stdout carries only results."""
    quiet = getattr(args, "quiet", False) or os.environ.get(ENV_QUIET) == "1"
    level = "ERROR" if quiet else cfg.logging_level
    return configure_logging(
        json_logging=cfg.logging_json_enabled, level=level, stream=sys.stderr
    )


def execute_command(
    handler: _HandlerCallable, logger: StructuredLogger, command: str
) -> int:
    """Execute a command handler inside a timed, logged operation."""
    with logger.timed_operation(f"cli_{command}"):
        result = handler()
    return int(result) if result is not None else 0


__all__ = ["prepare_config", "prepare_logger", "execute_command"]
