"""ncerrors CLI, a developer aid for checking how messages translate.

Subcommands:
  classify  -> show which validation rule a message matches and what it extracts
  translate -> run a translator operation against in-memory sessions and print
               the resulting rpc-error content as JSON
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ncerrors.config import ConfigError, TranslatorConfig
from ncerrors.errors import ContractViolation
from ncerrors.logging import StructuredLogger
from ncerrors.models import DiagnosticRecord
from ncerrors.patterns import classify
from ncerrors.runtime import execute_command, prepare_config, prepare_logger
from ncerrors.sessions import InMemorySessionRegistry, RecordingSink, Session
from ncerrors.translator import ErrorTranslator

EXIT_CONTRACT_VIOLATION = 2
OPERATIONS = ("validation", "lock-denied", "in-use")

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _session_spec(value: str) -> tuple[int, int]:
    numeric, sep, protocol = value.partition("=")
    try:
        if not sep:
            raise ValueError(value)
        return int(numeric), int(protocol)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected NUMERIC=PROTOCOL session ids, got {value!r}"
        ) from None


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog="ncerrors", description="Translate datastore diagnostics into NETCONF errors"
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational logging (env: NCERRORS_QUIET=1)",
    )
    p.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    p.add_argument("--config", help="YAML configuration file")
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    pc = sub.add_parser("classify", help="Show the validation rule a message matches")
    pc.add_argument("message")

    pt = sub.add_parser("translate", help="Translate a message and print the rpc-error")
    pt.add_argument("message")
    pt.add_argument("--operation", choices=OPERATIONS, default="validation")
    pt.add_argument(
        "--session",
        action="append",
        type=_session_spec,
        default=[],
        metavar="NUMERIC=PROTOCOL",
        help="Register a live session (repeatable)",
    )
    pt.add_argument(
        "--lenient",
        action="store_true",
        help="Pass malformed validation messages through instead of failing",
    )
    return p


def _print_json(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2))


def _cmd_classify(args: argparse.Namespace) -> int:
    try:
        found = classify(args.message)
    except ContractViolation as exc:
        print(f"[ncerrors] contract violation: {exc}", file=sys.stderr)
        return EXIT_CONTRACT_VIOLATION
    if found is None:
        _print_json({"kind": None})
        return 0
    _print_json({"kind": found.kind, "fields": dict(found.fields)})
    return 0


def _cmd_translate(
    cfg: TranslatorConfig, logger: StructuredLogger, args: argparse.Namespace
) -> int:
    registry = InMemorySessionRegistry(
        [Session(numeric_id=n, protocol_id=pid) for n, pid in args.session]
    )
    translator = ErrorTranslator(registry, source=registry, config=cfg, logger=logger)
    sink = RecordingSink()
    record = DiagnosticRecord.from_messages(args.message)
    try:
        if args.operation == "lock-denied":
            translator.translate_lock_denied(sink, record)
        elif args.operation == "in-use":
            translator.translate_in_use(sink, record)
        else:
            # the failed session is not registered, it only carries the error
            failed = Session(numeric_id=-1, protocol_id=0, error=record)
            translator.translate_validation_error(sink, failed)
    except ContractViolation as exc:
        logger.log_error("translation failed", error=str(exc), rule=exc.rule)
        print(f"[ncerrors] contract violation: {exc}", file=sys.stderr)
        return EXIT_CONTRACT_VIOLATION
    if sink.errors:
        _print_json({"result": "error", "rpc-error": sink.errors[0].to_dict()})
    elif sink.copied_from:
        _print_json({"result": "passthrough", "error-message": args.message})
    else:
        _print_json({"result": "no-op"})
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = prepare_config(args)
    except ConfigError as exc:
        print(f"[ncerrors] {exc}", file=sys.stderr)
        return 1
    logger = prepare_logger(args, cfg)
    handlers = {
        "classify": lambda: _cmd_classify(args),
        "translate": lambda: _cmd_translate(cfg, logger, args),
    }
    handler = handlers.get(args.cmd)
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return 1
    return execute_command(handler, logger, args.cmd)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
