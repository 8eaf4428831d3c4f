"""Translate datastore diagnostics into NETCONF ``rpc-error`` content.

Usage::

    translator = ErrorTranslator(registry, source=registry)
    translator.translate_lock_denied(sink, record)
    translator.translate_validation_error(sink, failed_session)

Every operation writes at most one error to the sink and returns ``None``.
Not emitting anything is a defined outcome (lock holder not named in the
diagnostic). Inputs that break the expected message format raise
:class:`~ncerrors.errors.ContractViolation`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from .config import TranslatorConfig, default_config
from .errors import ContractViolation
from .interfaces import DiagnosticSource, ErrorSink, SessionRegistry
from .logging import StructuredLogger, get_logger
from .models import (
    BAD_ELEMENT,
    IN_USE,
    INVALID_VALUE,
    LOCK_DENIED,
    MISSING_ELEMENT,
    NO_SUCH_SUBSCRIPTION,
    DiagnosticRecord,
    ErrorType,
    StructuredError,
)
from .patterns import classify

LOCK_MARKER = "DS-locked by session "
# protocol session id reported when the lock holder is gone
UNKNOWN_SESSION_ID = 0

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

Diagnostic = DiagnosticRecord | str | Iterable[str]


def parse_lock_holder(message: str) -> int | None:
    """Return the numeric id of the session holding the lock.

    ``None`` when the message does not name a holder. Text after the marker
    that is not a number reads as ``0``.
    """
    idx = message.find(LOCK_MARKER)
    if idx == -1:
        return None
    m = _LEADING_INT.match(message, idx + len(LOCK_MARKER))
    return int(m.group(1)) if m else 0


class ErrorTranslator:
    def __init__(
        self,
        registry: SessionRegistry,
        source: DiagnosticSource | None = None,
        *,
        config: TranslatorConfig | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        self.registry = registry
        self.source = source
        self.config = config or default_config()
        self.logger = logger or get_logger()

    def _emit(self, sink: ErrorSink, operation: str, error: StructuredError) -> None:
        self.logger.log_translation(operation, error.error_tag, error.error_app_tag)
        sink.set_structured_error(error)

    def _peer_protocol_id(self, numeric_id: int) -> int:
        session = self.registry.lookup_session(numeric_id)
        if session is None:
            self.logger.debug("lock holder session not found", numeric_id=numeric_id)
            return UNKNOWN_SESSION_ID
        return self.registry.protocol_id(session)

    def _translate_locked(
        self, sink: ErrorSink, diagnostic: Diagnostic, operation: str, tag: str, message: str
    ) -> None:
        text = DiagnosticRecord.coerce(diagnostic).first_message
        holder = parse_lock_holder(text)
        if holder is None:
            self.logger.debug("diagnostic names no lock holder", operation=operation)
            return
        session_id = self._peer_protocol_id(holder)
        error = StructuredError(
            ErrorType.PROTOCOL, tag, message, info={"session-id": str(session_id)}
        )
        self._emit(sink, operation, error)

    def translate_lock_denied(self, sink: ErrorSink, diagnostic: Diagnostic) -> None:
        self._translate_locked(
            sink, diagnostic, "lock-denied", LOCK_DENIED, self.config.lock_denied_message
        )

    def translate_in_use(self, sink: ErrorSink, diagnostic: Diagnostic) -> None:
        self._translate_locked(sink, diagnostic, "in-use", IN_USE, self.config.in_use_message)

    def translate_same_datastore(self, sink: ErrorSink, message: str) -> None:
        error = StructuredError(ErrorType.APPLICATION, INVALID_VALUE, message)
        self._emit(sink, "same-datastore", error)

    def translate_missing_element(self, sink: ErrorSink, element_name: str) -> None:
        error = StructuredError(
            ErrorType.PROTOCOL,
            MISSING_ELEMENT,
            self.config.missing_element_message,
            info={"bad-element": element_name},
        )
        self._emit(sink, "missing-element", error)

    def translate_bad_element(self, sink: ErrorSink, element_name: str, description: str) -> None:
        error = StructuredError(
            ErrorType.PROTOCOL, BAD_ELEMENT, description, info={"bad-element": element_name}
        )
        self._emit(sink, "bad-element", error)

    def translate_invalid_value(
        self, sink: ErrorSink, description: str, bad_element: str | None = None
    ) -> None:
        info = {"bad-element": bad_element} if bad_element is not None else {}
        error = StructuredError(ErrorType.APPLICATION, INVALID_VALUE, description, info=info)
        self._emit(sink, "invalid-value", error)

    def translate_no_such_subscription(self, sink: ErrorSink, message: str) -> None:
        error = StructuredError(
            ErrorType.APPLICATION, INVALID_VALUE, message, error_app_tag=NO_SUCH_SUBSCRIPTION
        )
        self._emit(sink, "no-such-subscription", error)

    def translate_validation_error(self, sink: ErrorSink, source_session: Any) -> None:
        """Translate the error a failed edit/commit left on ``source_session``.

        Known validator messages become their NETCONF counterpart; anything else
        is copied to the sink unchanged.
        """
        if self.source is None:
            raise ContractViolation("no diagnostic source configured", rule="validation")
        record = self.source.current_error_record(source_session)
        if record is None:
            raise ContractViolation("source session holds no error", rule="validation")
        message = record.first_message
        try:
            classification = classify(message)
        except ContractViolation as exc:
            if self.config.strict:
                raise
            self.logger.warning(
                "malformed validation message passed through", rule=exc.rule, error=str(exc)
            )
            classification = None
        if classification is None:
            self.logger.info("validation error passed through", operation="validation")
            sink.copy_error(source_session)
            return
        self._emit(sink, f"validation:{classification.kind}", classification.to_error())


__all__ = ["ErrorTranslator", "parse_lock_holder", "LOCK_MARKER", "UNKNOWN_SESSION_ID"]
