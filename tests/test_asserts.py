"""
Tests for the deepassert.asserts file. Failures are collected with a RecordingReporter so the tests themselves don't
fail, except for the pytest-check wiring which gets its `check` swapped out.
"""

from deepassert import asserts
from deepassert.asserts import Assert, PytestCheckReporter, RecordingReporter, new
import logging
import pytest


class _FakeCheck:
    def __init__(self):
        self.messages = []

    def fail(self, message):
        self.messages.append(message)


def _new_assert(**kwargs):
    reporter = RecordingReporter()
    return Assert(reporter, **kwargs), reporter


def test_equals():
    a, reporter = _new_assert()
    assert a.equals({'x': [1, 2, 3]}, {'x': [1, 2, 3]})
    assert not a.failed and reporter.failures == []

    assert not a.equals({'x': [1, 2, 3]}, {'x': [1, 9, 3]})
    assert a.failed
    assert reporter.failures == ['["x"] [1] expected: 2, actual: 9']


def test_failures_do_not_stop():
    """Every failed check gets reported, the test body keeps going after each one"""
    a, reporter = _new_assert()
    a.equals(1, 2)
    a.true(False)
    a.nil(5)
    a.equals([1], [1])
    a.equals('a', 1)
    assert reporter.failures == [
        'expected: 1, actual: 2',
        'expected: true, actual: false',
        'expected: nil, actual: 5',
        'expected: "a" (type str), actual: 1 (type int)',
    ]


def test_equalsf():
    a, reporter = _new_assert()
    assert a.equalsf([1], [1], 'row %d', 3)
    assert not a.equalsf([1, 2], [1], 'row %d of %s', 3, 'users')
    assert not a.equalsf(None, 0, 'no args 100%')
    assert reporter.failures == [
        "row 3 of users: slice/array lengths don't match - expected: 2, actual: 1",
        'no args 100%: expected: nil, actual: 0',
    ]


def test_true_and_nil():
    a, reporter = _new_assert()
    assert a.true(True) and a.true(1) and a.true([0])
    assert a.nil(None)
    assert not a.failed

    assert not a.true(0)
    assert not a.true([])
    assert not a.nil(0)
    assert not a.nil({'a': None})
    assert reporter.failures == [
        'expected: true, actual: false',
        'expected: true, actual: false',
        'expected: nil, actual: 0',
        'expected: nil, actual: {"a": nil}',
    ]


def test_errorf_and_fail():
    a, reporter = _new_assert()
    assert not a.errorf('%d items left, wanted %s', 3, 'none')
    assert not a.errorf('100% broken')
    assert not a.errorf('100%%')
    assert not a.errorf('%d%% done', 50)
    assert not a.fail()
    assert reporter.failures == ['3 items left, wanted none', '100% broken', '100%%', '50% done', 'Assertion failed']


def test_comparator_kwargs():
    a, reporter = _new_assert(max_depth=1, max_str_len=5)
    a.equals({'a': {'b': 1}}, {'a': {'b': 1}})
    a.equals('a' * 10, 'b' * 10)
    assert reporter.failures == [
        '["a"] maximum comparison depth (1) exceeded - expected: {"b":..., actual: {"b":...',
        'expected: "aaaa..., actual: "bbbb...',
    ]


def test_bad_reporter():
    with pytest.raises(TypeError):
        Assert(reporter=object())


def test_new_uses_pytest_check(monkeypatch):
    """The default reporter hands failures to pytest-check"""
    fake_check = _FakeCheck()
    monkeypatch.setattr(asserts, 'check', fake_check)

    a = new()
    assert isinstance(a.reporter, PytestCheckReporter)
    a.equals([1, 2], [1, 3])
    a.equals([1, 2], [1, 2])
    assert fake_check.messages == ['[1] expected: 2, actual: 3']


def test_failure_logging(caplog):
    a, _ = _new_assert()
    with caplog.at_level(logging.DEBUG, logger='deepassert.asserts'):
        a.equals(1, 2)
    assert 'Assertion failed: expected: 1, actual: 2' in caplog.text


def test_pytest_check_soft_failures(pytester):
    """Runs a real test through pytest-check: it fails once, reports both checks, and still runs to the end"""
    pytester.makepyfile("""
        from deepassert import new

        def test_soft():
            a = new()
            a.equals(1, 2)
            a.equals({'a': [1]}, {'a': [1, 2]})
            print('BODY_FINISHED')
    """)
    result = pytester.runpytest('-s')
    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(['*BODY_FINISHED*'])
    output = result.stdout.str()
    assert 'FAILURE: expected: 1, actual: 2' in output
    assert 'FAILURE: ["a"] slice/array lengths don\'t match - expected: 1, actual: 2' in output
