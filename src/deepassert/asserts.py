"""
Soft assertions built on top of :func:`~deepassert.equality.compare`

A failed check is reported to a Reporter and the test keeps running, so a single test can surface several failures.
Under pytest the default reporter is pytest-check, which marks the current test as failed at the end of the test body:

    def test_response():
        a = new()
        a.equals({'status': 'ok'}, response)
        a.nil(response.get('error'))
"""

import logging
from pytest_check import check
from .equality import Comparator
from .formatting import NIL_STR, format_value
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from typing import Any, List, Optional
    from typing_extensions import Self


_LOGGER = logging.getLogger(__name__)

DEFAULT_FAIL_MESSAGE = 'Assertion failed'


@runtime_checkable
class Reporter(Protocol):
    def fail(self, message: str) -> None:
        pass


class PytestCheckReporter:
    """Reports failures with pytest-check, failing the running test without stopping it"""

    def fail(self: 'Self', message: 'str') -> 'None':
        check.fail(message)


class RecordingReporter:
    """Keeps every reported failure message in `failures`. Useful outside of pytest, and for testing assertions"""

    def __init__(self: 'Self'):
        self.failures: 'List[str]' = []

    def fail(self: 'Self', message: 'str') -> 'None':
        self.failures.append(message)


class Assert:
    """
    Soft assertion helper. Every check returns True if it passed, and False after reporting a failure.
    """

    def __init__(self: 'Self', reporter: 'Optional[Reporter]' = None, **comparator_kwargs: 'Any'):
        """
        Args:
            reporter (Optional[Reporter]): where to report failures. Defaults to a PytestCheckReporter.
            comparator_kwargs (Any): passed to :class:`~deepassert.equality.Comparator`
        """
        if reporter is not None and not isinstance(reporter, Reporter):
            raise TypeError("`reporter` must have a fail(message) method, got %s" % repr(type(reporter).__name__))

        self.reporter = PytestCheckReporter() if reporter is None else reporter
        self.comparator = Comparator(**comparator_kwargs)
        self.failed = False

    def errorf(self: 'Self', format: 'str', *args: 'Any') -> 'bool':
        """Reports a failure with the message `format % args`. Without args `format` is reported as is, so '100%' is
        reported as '100%' and '100%%' as '100%%'
        """
        message = format % args if args else format
        _LOGGER.debug("Assertion failed: %s", message)
        self.failed = True
        self.reporter.fail(message)
        return False

    def fail(self: 'Self') -> 'bool':
        return self.errorf(DEFAULT_FAIL_MESSAGE)

    def true(self: 'Self', value: 'Any') -> 'bool':
        if not value:
            return self.errorf("expected: true, actual: false")
        return True

    def nil(self: 'Self', value: 'Any') -> 'bool':
        if value is not None:
            return self.errorf("expected: %s, actual: %s", NIL_STR, format_value(value, self.comparator.max_str_len))
        return True

    def equals(self: 'Self', expected: 'Any', actual: 'Any') -> 'bool':
        """Checks `expected` and `actual` are deeply equal, reporting the first divergence otherwise"""
        res = self.comparator.compare(expected, actual)
        if res is not None:
            return self.errorf("%s", res)
        return True

    def equalsf(self: 'Self', expected: 'Any', actual: 'Any', format: 'str', *args: 'Any') -> 'bool':
        """Same as :meth:`equals`, but prefixes the diagnostic with the message `format % args` (`format` as is without args)"""
        res = self.comparator.compare(expected, actual)
        if res is not None:
            return self.errorf("%s: %s", format % args if args else format, res)
        return True


def new(reporter: 'Optional[Reporter]' = None, **comparator_kwargs: 'Any') -> 'Assert':
    """Returns a new :class:`Assert`. See there for the args"""
    return Assert(reporter, **comparator_kwargs)
