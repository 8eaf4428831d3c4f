from __future__ import annotations

import pytest

from ncerrors.errors import ContractViolation
from ncerrors.models import ErrorType
from ncerrors.patterns import (
    VALIDATION_RULES,
    classify,
    extract_path,
    parent_path,
    quoted_value,
)

UNIQUE = 'Unique data leaf(s) "name" not satisfied in "/a/b[k=\'1\']" and "/a/b[k=\'2\']". data location /a/b/c".'
TOO_MANY = 'Too many "entry" instances. data location /t/list".'
TOO_FEW = 'Too few "entry" instances. data location /t/list".'
MUST = 'Must condition "count(x) > 1" not satisfied (/m:cont). data location /m/cont".'
LEAFREF = 'Invalid leafref value "foo" - no existing target instance "/p:r". data location /p/q".'
INSTID = 'Invalid instance-identifier "/a:b[k=\'1\']" value - required instance not found. data location /r/s".'
CHOICE = 'Mandatory choice ch missing. Schema location /x/y.'


def test_extract_path_quoted_terminator():
    assert extract_path(UNIQUE) == '/a/b/c'


def test_extract_path_plain_terminator():
    assert extract_path(CHOICE) == '/x/y'


def test_extract_path_prefers_data_location():
    msg = 'Too many entries. Schema location /s/t. data location /d/e".'
    assert extract_path(msg) == '/d/e'


def test_extract_path_unterminated_tail_drops_two_chars():
    assert extract_path('Too many entries. data location /a/b")') == '/a/b'


def test_extract_path_without_marker():
    assert extract_path('Some other validation failure.') == ''


def test_parent_path():
    assert parent_path('/x/y') == '/x'
    assert parent_path('/x/y/z') == '/x/y'
    assert parent_path('/x') == '/'


def test_parent_path_requires_separator():
    with pytest.raises(ContractViolation):
        parent_path('x')


def test_quoted_value_unterminated():
    with pytest.raises(ContractViolation) as exc:
        quoted_value('Invalid leafref value "foo', 'Invalid leafref value', rule='leafref')
    assert exc.value.rule == 'leafref'


def test_rule_order_is_stable():
    assert [r.kind for r in VALIDATION_RULES] == [
        'data-not-unique',
        'too-many-elements',
        'too-few-elements',
        'must-violation',
        'leafref-instance-required',
        'instid-instance-required',
        'mandatory-choice',
    ]


def test_classify_unique():
    found = classify(UNIQUE)
    assert found is not None
    err = found.to_error()
    assert err.error_type is ErrorType.PROTOCOL
    assert err.error_tag == 'operation-failed'
    assert err.error_app_tag == 'data-not-unique'
    assert err.error_path is None
    assert err.message == 'Unique constraint violated.'
    assert dict(err.info) == {'non-unique': '/a/b/c'}


@pytest.mark.parametrize(
    'message, app_tag, text',
    [
        (TOO_MANY, 'too-many-elements', 'Too many elements.'),
        (TOO_FEW, 'too-few-elements', 'Too few elements.'),
    ],
)
def test_classify_element_counts(message, app_tag, text):
    found = classify(message)
    assert found is not None
    err = found.to_error()
    assert err.error_tag == 'operation-failed'
    assert err.error_app_tag == app_tag
    assert err.error_path == '/t/list'
    assert err.message == text
    assert not err.info


def test_classify_must_strips_annotation():
    found = classify(MUST)
    assert found is not None
    assert found.kind == 'must-violation'
    err = found.to_error()
    assert err.error_tag == 'operation-failed'
    assert err.error_app_tag == 'must-violation'
    assert err.error_path == '/m/cont'
    assert err.message == 'Must condition "count(x) > 1" not satisfied'


def test_classify_must_without_annotation():
    with pytest.raises(ContractViolation):
        classify('Must condition "x" not satisfied. data location /m".')


def test_classify_leafref():
    found = classify(LEAFREF)
    assert found is not None
    assert found.fields['value'] == 'foo'
    err = found.to_error()
    assert err.error_tag == 'data-missing'
    assert err.error_app_tag == 'instance-required'
    assert err.error_path == '/p/q'
    assert err.message == 'Required leafref target with value "foo" missing.'


def test_classify_leafref_without_target_marker_is_unclassified():
    assert classify('Invalid leafref value "foo" - bad type. data location /p/q".') is None


def test_classify_leafref_unquoted_value():
    with pytest.raises(ContractViolation):
        classify('Invalid leafref value foo - no existing target instance. data location /p/q".')


def test_classify_instance_identifier():
    found = classify(INSTID)
    assert found is not None
    err = found.to_error()
    assert err.error_tag == 'data-missing'
    assert err.error_app_tag == 'instance-required'
    assert err.error_path == '/r/s'
    assert err.message == 'Required instance-identifier "/a:b[k=\'1\']" missing.'


def test_classify_mandatory_choice():
    found = classify(CHOICE)
    assert found is not None
    err = found.to_error()
    assert err.error_tag == 'data-missing'
    assert err.error_app_tag == 'mandatory-choice'
    assert err.error_path == '/x'
    assert err.message == 'Missing mandatory choice.'
    assert dict(err.info) == {'missing-choice': '/x/y'}


def test_classify_mandatory_choice_at_top_level():
    err = classify('Mandatory choice ch missing. Schema location /top.').to_error()
    assert err.error_path == '/'
    assert err.info['missing-choice'] == '/top'


@pytest.mark.parametrize(
    'message',
    [
        'Unique data leaf(s) "name" not satisfied.',
        'Too many "entry" instances.',
        'Too few "entry" instances.',
        'Mandatory choice ch missing.',
    ],
)
def test_classify_requires_location(message):
    with pytest.raises(ContractViolation) as exc:
        classify(message)
    assert exc.value.diagnostic == message


def test_classify_unknown():
    assert classify('Some other validation failure.') is None
