"""In-memory collaborators for embedding the translator and for tests.

A server integrating :mod:`ncerrors` normally adapts its own session table to
the protocols in :mod:`ncerrors.interfaces`; these classes are the reference
implementations of that contract.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from .models import DiagnosticEntry, DiagnosticRecord, StructuredError

NETCONF_FORMAT = "NETCONF"


@dataclass
class Session:
    """A datastore session and the protocol session it serves.

    ``error`` is the record left by the last failed operation. Structured
    errors set on the session are appended to it as ``NETCONF`` formatted
    entries.
    """

    numeric_id: int
    protocol_id: int
    error: DiagnosticRecord | None = None

    def structured_errors(self) -> list[StructuredError]:
        if self.error is None:
            return []
        return [
            e.error_data
            for e in self.error.entries
            if e.error_format == NETCONF_FORMAT and isinstance(e.error_data, StructuredError)
        ]


class InMemorySessionRegistry:
    """Thread-safe session table keyed by numeric id.

    Serves both as :class:`~ncerrors.interfaces.SessionRegistry` and
    :class:`~ncerrors.interfaces.DiagnosticSource`.
    """

    def __init__(self, sessions: list[Session] | None = None) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[int, Session] = {}
        for s in sessions or []:
            self.add(s)

    def add(self, session: Session) -> Session:
        with self._lock:
            self._sessions[session.numeric_id] = session
        return session

    def remove(self, numeric_id: int) -> Session | None:
        with self._lock:
            return self._sessions.pop(numeric_id, None)

    def lookup_session(self, numeric_id: int) -> Session | None:
        with self._lock:
            return self._sessions.get(numeric_id)

    def protocol_id(self, session: Session) -> int:
        return session.protocol_id

    def current_error_record(self, session: Session) -> DiagnosticRecord | None:
        return session.error

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class SessionErrorSink:
    """Writes translated errors onto a destination :class:`Session`."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def set_structured_error(self, error: StructuredError) -> None:
        entry = DiagnosticEntry(error.message, NETCONF_FORMAT, error)
        previous = self.session.error.entries if self.session.error else ()
        self.session.error = DiagnosticRecord(previous + (entry,))

    def copy_error(self, source_session: Session) -> None:
        self.session.error = source_session.error


@dataclass
class RecordingSink:
    """Collects whatever the translator emits, for inspection."""

    errors: list[StructuredError] = field(default_factory=list)
    copied_from: list[Any] = field(default_factory=list)

    def set_structured_error(self, error: StructuredError) -> None:
        self.errors.append(error)

    def copy_error(self, source_session: Any) -> None:
        self.copied_from.append(source_session)

    @property
    def emitted(self) -> bool:
        return bool(self.errors or self.copied_from)


__all__ = [
    "Session",
    "InMemorySessionRegistry",
    "SessionErrorSink",
    "RecordingSink",
    "NETCONF_FORMAT",
]
