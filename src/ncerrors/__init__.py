"""ncerrors - datastore diagnostic to NETCONF error translation.

High-level public API (stable):

from ncerrors import ErrorTranslator, InMemorySessionRegistry, SessionErrorSink

registry = InMemorySessionRegistry()
translator = ErrorTranslator(registry, source=registry)
translator.translate_lock_denied(sink, 'DS-locked by session 7 (...)')
translator.translate_validation_error(sink, failed_session)

The translator only depends on the protocols in ``ncerrors.interfaces``; the
in-memory classes are reference implementations a server can replace.
"""

from __future__ import annotations

from .config import TranslatorConfig, default_config, load_config
from .errors import ContractViolation, TranslationError
from .models import DiagnosticEntry, DiagnosticRecord, ErrorType, StructuredError
from .patterns import Classification, classify
from .sessions import InMemorySessionRegistry, RecordingSink, Session, SessionErrorSink
from .translator import ErrorTranslator

# Version constant (sync manually with pyproject)
__version__ = "0.1.0"

__all__ = [
    "ErrorTranslator",
    "StructuredError",
    "ErrorType",
    "DiagnosticEntry",
    "DiagnosticRecord",
    "Classification",
    "classify",
    "TranslationError",
    "ContractViolation",
    "TranslatorConfig",
    "load_config",
    "default_config",
    "Session",
    "InMemorySessionRegistry",
    "SessionErrorSink",
    "RecordingSink",
    "__version__",
]
