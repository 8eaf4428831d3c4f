from __future__ import annotations

from typing import Any, Protocol

from .models import DiagnosticRecord, StructuredError

# Collaborators the translator consumes. Session handles are opaque to it.


class SessionRegistry(Protocol):
    def lookup_session(self, numeric_id: int) -> Any | None:
        """Return the live session with this id, ``None`` when unknown or stale."""
        ...

    def protocol_id(self, session: Any) -> int: ...


class DiagnosticSource(Protocol):
    def current_error_record(self, session: Any) -> DiagnosticRecord | None: ...


class ErrorSink(Protocol):
    """Destination of translated errors, bound to one session."""

    def set_structured_error(self, error: StructuredError) -> None: ...

    def copy_error(self, source_session: Any) -> None:
        """Duplicate the error currently held by ``source_session`` verbatim."""
        ...


__all__ = ["SessionRegistry", "DiagnosticSource", "ErrorSink"]
