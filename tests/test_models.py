from __future__ import annotations

import pytest

from ncerrors.errors import ContractViolation, TranslationError
from ncerrors.models import (
    ERROR_TAGS,
    DiagnosticEntry,
    DiagnosticRecord,
    ErrorType,
    StructuredError,
)


def test_to_dict_uses_netconf_names():
    err = StructuredError(
        ErrorType.PROTOCOL,
        'data-missing',
        'Missing mandatory choice.',
        error_app_tag='mandatory-choice',
        error_path='/x',
        info={'missing-choice': '/x/y'},
    )
    assert err.to_dict() == {
        'error-type': 'protocol',
        'error-tag': 'data-missing',
        'error-app-tag': 'mandatory-choice',
        'error-path': '/x',
        'error-message': 'Missing mandatory choice.',
        'error-info': {'missing-choice': '/x/y'},
    }


def test_to_dict_omits_unset_fields():
    err = StructuredError(ErrorType.APPLICATION, 'invalid-value', 'Bad.')
    assert err.to_dict() == {
        'error-type': 'application',
        'error-tag': 'invalid-value',
        'error-message': 'Bad.',
    }


def test_info_is_copied():
    info = {'bad-element': 'a'}
    err = StructuredError(ErrorType.PROTOCOL, 'bad-element', 'Bad.', info=info)
    info['bad-element'] = 'changed'
    assert err.info['bad-element'] == 'a'


def test_unknown_tag_rejected():
    with pytest.raises(ContractViolation):
        StructuredError(ErrorType.PROTOCOL, 'not-a-tag', 'x')


def test_empty_message_rejected():
    with pytest.raises(TranslationError):
        StructuredError(ErrorType.PROTOCOL, 'in-use', '')


def test_record_coerce():
    rec = DiagnosticRecord.from_messages('a', 'b')
    assert DiagnosticRecord.coerce(rec) is rec
    assert DiagnosticRecord.coerce('a').first_message == 'a'
    assert DiagnosticRecord.coerce(['x', 'y']).entries == (DiagnosticEntry('x'), DiagnosticEntry('y'))


def test_empty_record_is_contract_violation():
    with pytest.raises(ContractViolation) as exc:
        DiagnosticRecord(()).first_message
    assert exc.value.rule == 'diagnostic'


def test_contract_violation_message():
    exc = ContractViolation('no path', rule='too-many-elements', diagnostic='Too many.')
    assert str(exc) == "too-many-elements: no path (diagnostic: 'Too many.')"
    assert isinstance(exc, RuntimeError)


def test_must_violation_is_an_app_tag_not_an_error_tag():
    assert 'must-violation' not in ERROR_TAGS
    with pytest.raises(ContractViolation):
        StructuredError(ErrorType.PROTOCOL, 'must-violation', 'x')


def test_structured_error_is_hashable():
    a = StructuredError(ErrorType.PROTOCOL, 'in-use', 'Busy.', info={'session-id': '4', 'x': 'y'})
    b = StructuredError(ErrorType.PROTOCOL, 'in-use', 'Busy.', info={'x': 'y', 'session-id': '4'})
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1


def test_info_is_read_only():
    err = StructuredError(ErrorType.PROTOCOL, 'bad-element', 'Bad.', info={'bad-element': 'a'})
    with pytest.raises(TypeError):
        err.info['bad-element'] = 'b'  # type: ignore[index]
