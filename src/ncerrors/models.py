from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from .errors import ContractViolation


class ErrorType(str, Enum):
    """NETCONF ``error-type`` values."""

    PROTOCOL = "protocol"
    APPLICATION = "application"
    TRANSPORT = "transport"
    RPC = "rpc"


# error-tag vocabulary (RFC 6241 appendix A)
LOCK_DENIED = "lock-denied"
IN_USE = "in-use"
INVALID_VALUE = "invalid-value"
MISSING_ELEMENT = "missing-element"
BAD_ELEMENT = "bad-element"
OPERATION_FAILED = "operation-failed"
DATA_MISSING = "data-missing"

ERROR_TAGS = frozenset(
    {
        IN_USE,
        INVALID_VALUE,
        "too-big",
        "missing-attribute",
        "bad-attribute",
        "unknown-attribute",
        MISSING_ELEMENT,
        BAD_ELEMENT,
        "unknown-element",
        "unknown-namespace",
        "access-denied",
        LOCK_DENIED,
        "resource-denied",
        "rollback-failed",
        "data-exists",
        DATA_MISSING,
        "operation-not-supported",
        OPERATION_FAILED,
        "partial-operation",
        "malformed-message",
    }
)

# error-app-tag values
DATA_NOT_UNIQUE = "data-not-unique"
TOO_MANY_ELEMENTS = "too-many-elements"
TOO_FEW_ELEMENTS = "too-few-elements"
INSTANCE_REQUIRED = "instance-required"
MANDATORY_CHOICE = "mandatory-choice"
MUST_VIOLATION = "must-violation"
NO_SUCH_SUBSCRIPTION = "ietf-subscribed-notifications:no-such-subscription"


@dataclass(frozen=True)
class StructuredError:
    """A protocol level error as handed to an error sink.

    ``info`` holds the ``error-info`` children in emission order; being a
    mapping, each element name appears at most once. It is a read-only view,
    so an emitted error can be hashed and shared.
    """

    error_type: ErrorType
    error_tag: str
    message: str
    error_app_tag: str | None = None
    error_path: str | None = None
    info: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.error_tag not in ERROR_TAGS:
            raise ContractViolation(
                f"unknown error-tag {self.error_tag!r}", rule="structured-error"
            )
        if not self.message:
            raise ContractViolation(
                "error message must not be empty", rule="structured-error"
            )
        # private copy so callers cannot mutate an emitted error
        object.__setattr__(self, "info", MappingProxyType(dict(self.info)))

    def __hash__(self) -> int:
        return hash(
            (
                self.error_type,
                self.error_tag,
                self.message,
                self.error_app_tag,
                self.error_path,
                frozenset(self.info.items()),
            )
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "error-type": self.error_type.value,
            "error-tag": self.error_tag,
        }
        if self.error_app_tag is not None:
            out["error-app-tag"] = self.error_app_tag
        if self.error_path is not None:
            out["error-path"] = self.error_path
        out["error-message"] = self.message
        if self.info:
            out["error-info"] = dict(self.info)
        return out


@dataclass(frozen=True)
class DiagnosticEntry:
    """One item of a datastore error report."""

    message: str
    error_format: str | None = None
    error_data: Any | None = None


@dataclass(frozen=True)
class DiagnosticRecord:
    """Error report of the last failed datastore operation.

    Only the first entry is consulted by the translator; the remaining ones are
    carried along so that a verbatim copy keeps them.
    """

    entries: tuple[DiagnosticEntry, ...]

    @classmethod
    def from_messages(cls, *messages: str) -> DiagnosticRecord:
        return cls(tuple(DiagnosticEntry(m) for m in messages))

    @classmethod
    def coerce(cls, value: DiagnosticRecord | str | Iterable[str]) -> DiagnosticRecord:
        if isinstance(value, DiagnosticRecord):
            return value
        if isinstance(value, str):
            return cls.from_messages(value)
        return cls.from_messages(*value)

    @property
    def first_message(self) -> str:
        if not self.entries:
            raise ContractViolation("diagnostic record has no entries", rule="diagnostic")
        return self.entries[0].message


__all__ = [
    "ErrorType",
    "StructuredError",
    "DiagnosticEntry",
    "DiagnosticRecord",
    "ERROR_TAGS",
]
