"""Classification rules for datastore validation messages.

The validator reports failures as prose such as::

    Unique data leaf(s) "name" not satisfied in "/a/b[k='1']" and "/a/b[k='2']". data location /a/b".
    Mandatory choice "ch" data do not exist. Schema location /x/y.

Each supported message family is a :class:`ValidationRule`: a predicate over
the message, an extractor pulling out the pieces the error needs, and a
builder turning those pieces into a :class:`StructuredError`. Rules are tried
in the order of :data:`VALIDATION_RULES` and the first match wins; the
prefixes do not overlap for messages the validator actually emits, but the
order is still the contract.

Extractors raise :class:`ContractViolation` when a message matches a rule yet
lacks what the rule needs (no location, no quoted value, ...).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from .errors import ContractViolation
from .models import (
    DATA_MISSING,
    DATA_NOT_UNIQUE,
    INSTANCE_REQUIRED,
    MANDATORY_CHOICE,
    MUST_VIOLATION,
    OPERATION_FAILED,
    TOO_FEW_ELEMENTS,
    TOO_MANY_ELEMENTS,
    ErrorType,
    StructuredError,
)

# searched in this order, the first one present wins
LOCATION_MARKERS = ("data location ", "Schema location ")
# a location runs to the end of the message, minus its closing punctuation
_QUOTED_TERMINATOR = '".'
_PLAIN_TERMINATOR = "."

UNIQUE_PREFIX = "Unique data leaf(s)"
TOO_MANY_PREFIX = "Too many"
TOO_FEW_PREFIX = "Too few"
MUST_PREFIX = "Must condition"
LEAFREF_PREFIX = "Invalid leafref value"
LEAFREF_MARKER = "no existing target instance"
INSTID_PREFIX = "Invalid instance-identifier"
INSTID_MARKER = "required instance not found"
CHOICE_PREFIX = "Mandatory choice"


@dataclass(frozen=True)
class Classification:
    """Tagged result of :func:`classify`: the rule kind and what it extracted."""

    kind: str
    fields: Mapping[str, str]

    def to_error(self) -> StructuredError:
        return RULES_BY_KIND[self.kind].build(self.fields)


@dataclass(frozen=True)
class ValidationRule:
    kind: str
    matches: Callable[[str], bool]
    extract: Callable[[str, str], dict[str, str]]
    build: Callable[[Mapping[str, str]], StructuredError]


def extract_path(message: str) -> str:
    """Return the data-model path named by a location marker, or ``""``."""
    for marker in LOCATION_MARKERS:
        idx = message.find(marker)
        if idx != -1:
            tail = message[idx + len(marker) :]
            break
    else:
        return ""
    if tail.endswith(_QUOTED_TERMINATOR):
        return tail[: -len(_QUOTED_TERMINATOR)]
    if tail.endswith(_PLAIN_TERMINATOR):
        return tail[: -len(_PLAIN_TERMINATOR)]
    return tail[:-2]


def parent_path(path: str) -> str:
    """Truncate ``path`` at its last ``/``; a top-level node keeps ``/``."""
    idx = path.rfind("/")
    if idx == -1:
        raise ContractViolation("path has no '/' separator", rule="parent-path", diagnostic=path)
    return "/" if idx == 0 else path[:idx]


def quoted_value(message: str, prefix: str, *, rule: str) -> str:
    """Return the ``"value"`` that immediately follows ``prefix`` and a space."""
    rest = message[len(prefix) :]
    if not rest.startswith(' "'):
        raise ContractViolation(
            f"expected a quoted value after {prefix!r}", rule=rule, diagnostic=message
        )
    end = rest.find('"', 2)
    if end == -1:
        raise ContractViolation("unterminated quoted value", rule=rule, diagnostic=message)
    return rest[2:end]


def _require_path(path: str, message: str, rule: str) -> str:
    if not path:
        raise ContractViolation("message carries no location", rule=rule, diagnostic=message)
    return path


def _starts(prefix: str, marker: str | None = None) -> Callable[[str], bool]:
    def predicate(message: str) -> bool:
        if not message.startswith(prefix):
            return False
        return marker is None or marker in message

    return predicate


def _path_only(rule: str) -> Callable[[str, str], dict[str, str]]:
    def extract(message: str, path: str) -> dict[str, str]:
        return {"path": _require_path(path, message, rule)}

    return extract


def _extract_must(message: str, path: str) -> dict[str, str]:
    _require_path(path, message, "must-violation")
    # drop the " (<xpath>)" the validator appends
    idx = message.rfind("(")
    if idx == -1:
        raise ContractViolation(
            "no '(' annotation to strip", rule="must-violation", diagnostic=message
        )
    return {"path": path, "message": message[: max(idx - 1, 0)]}


def _extract_leafref(message: str, path: str) -> dict[str, str]:
    _require_path(path, message, "leafref-instance-required")
    value = quoted_value(message, LEAFREF_PREFIX, rule="leafref-instance-required")
    return {"path": path, "value": value}


def _extract_instid(message: str, path: str) -> dict[str, str]:
    _require_path(path, message, "instid-instance-required")
    value = quoted_value(message, INSTID_PREFIX, rule="instid-instance-required")
    return {"path": path, "value": value}


def _extract_choice(message: str, path: str) -> dict[str, str]:
    _require_path(path, message, "mandatory-choice")
    return {"path": path, "parent": parent_path(path)}


def _build_unique(fields: Mapping[str, str]) -> StructuredError:
    return StructuredError(
        ErrorType.PROTOCOL,
        OPERATION_FAILED,
        "Unique constraint violated.",
        error_app_tag=DATA_NOT_UNIQUE,
        info={"non-unique": fields["path"]},
    )


def _build_too_many(fields: Mapping[str, str]) -> StructuredError:
    return StructuredError(
        ErrorType.PROTOCOL,
        OPERATION_FAILED,
        "Too many elements.",
        error_app_tag=TOO_MANY_ELEMENTS,
        error_path=fields["path"],
    )


def _build_too_few(fields: Mapping[str, str]) -> StructuredError:
    return StructuredError(
        ErrorType.PROTOCOL,
        OPERATION_FAILED,
        "Too few elements.",
        error_app_tag=TOO_FEW_ELEMENTS,
        error_path=fields["path"],
    )


def _build_must(fields: Mapping[str, str]) -> StructuredError:
    return StructuredError(
        ErrorType.PROTOCOL,
        OPERATION_FAILED,
        fields["message"],
        error_app_tag=MUST_VIOLATION,
        error_path=fields["path"],
    )


def _build_leafref(fields: Mapping[str, str]) -> StructuredError:
    return StructuredError(
        ErrorType.PROTOCOL,
        DATA_MISSING,
        f'Required leafref target with value "{fields["value"]}" missing.',
        error_app_tag=INSTANCE_REQUIRED,
        error_path=fields["path"],
    )


def _build_instid(fields: Mapping[str, str]) -> StructuredError:
    return StructuredError(
        ErrorType.PROTOCOL,
        DATA_MISSING,
        f'Required instance-identifier "{fields["value"]}" missing.',
        error_app_tag=INSTANCE_REQUIRED,
        error_path=fields["path"],
    )


def _build_choice(fields: Mapping[str, str]) -> StructuredError:
    return StructuredError(
        ErrorType.PROTOCOL,
        DATA_MISSING,
        "Missing mandatory choice.",
        error_app_tag=MANDATORY_CHOICE,
        error_path=fields["parent"],
        info={"missing-choice": fields["path"]},
    )


VALIDATION_RULES: tuple[ValidationRule, ...] = (
    ValidationRule("data-not-unique", _starts(UNIQUE_PREFIX), _path_only("data-not-unique"), _build_unique),
    ValidationRule("too-many-elements", _starts(TOO_MANY_PREFIX), _path_only("too-many-elements"), _build_too_many),
    ValidationRule("too-few-elements", _starts(TOO_FEW_PREFIX), _path_only("too-few-elements"), _build_too_few),
    ValidationRule("must-violation", _starts(MUST_PREFIX), _extract_must, _build_must),
    ValidationRule(
        "leafref-instance-required",
        _starts(LEAFREF_PREFIX, LEAFREF_MARKER),
        _extract_leafref,
        _build_leafref,
    ),
    ValidationRule(
        "instid-instance-required",
        _starts(INSTID_PREFIX, INSTID_MARKER),
        _extract_instid,
        _build_instid,
    ),
    ValidationRule("mandatory-choice", _starts(CHOICE_PREFIX), _extract_choice, _build_choice),
)

RULES_BY_KIND: dict[str, ValidationRule] = {rule.kind: rule for rule in VALIDATION_RULES}


def classify(message: str) -> Classification | None:
    """Match ``message`` against :data:`VALIDATION_RULES`.

    Returns ``None`` when no rule applies; the caller then passes the original
    error through unchanged.
    """
    path = extract_path(message)
    for rule in VALIDATION_RULES:
        if rule.matches(message):
            return Classification(rule.kind, rule.extract(message, path))
    return None


__all__ = [
    "Classification",
    "ValidationRule",
    "VALIDATION_RULES",
    "classify",
    "extract_path",
    "parent_path",
    "quoted_value",
]
