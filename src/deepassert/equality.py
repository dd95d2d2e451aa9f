"""
Deep equality checking with diagnostics for test assertions

Handled shapes (see :mod:`~deepassert.pytypes`):
    - absent (None)
    - mappings (dict, OrderedDict, any other Mapping), compared key by key
    - sequences (list, tuple, numpy ndarray, other non-text Sequences), compared index by index
    - scalars, compared with '=='. numpy array results of '==' are reduced with np.array_equal

Values of different types are never equal: 1 != 1.0 != True != '1', and [1] != (1,).

Only the first divergence is reported. Each level of nesting prefixes the diagnostic with its accessor, eg:

    >>> compare({'x': [1, 2, 3]}, {'x': [1, 9, 3]})
    '["x"] [1] expected: 2, actual: 9'
"""

import logging
import numpy as np
from .formatting import _MAX_STR_LEN, NIL_STR, format_key, format_value, type_name
from .pytypes import Shape, classify
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Optional, Set, Tuple


_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 200
NOT_FOUND_STR = '<notfound>'


class _GuardDiagnostic(str):
    """A diagnostic from the depth or cycle guard. Sequences pass these up instead of printing their own elements"""


def _prefixed(prefix, res):
    return (_GuardDiagnostic if isinstance(res, _GuardDiagnostic) else str)('%s %s' % (prefix, res))


class Comparator:
    """
    Compares an expected value against an actual one, returning None if they are equal, or a diagnostic string
    describing the first divergence otherwise. Instances hold configuration only, so one comparator can be shared
    between threads.
    """

    def __init__(self, max_depth: 'int' = DEFAULT_MAX_DEPTH, max_str_len: 'Optional[int]' = _MAX_STR_LEN):
        """
        Args:
            max_depth (int): maximum nesting depth to recurse into before giving up with a diagnostic. Defaults to
                DEFAULT_MAX_DEPTH.
            max_str_len (Optional[int]): maximum length of each value printed in a diagnostic. None means no limit.
                Defaults to _MAX_STR_LEN.
        """
        if isinstance(max_depth, bool) or not isinstance(max_depth, int):
            raise EqualityCheckingError("`max_depth` must be int, not %s" % repr(type(max_depth).__name__))
        if max_depth < 1:
            raise EqualityCheckingError("`max_depth` must be >= 1, got %d" % max_depth)
        if max_str_len is not None:
            if isinstance(max_str_len, bool) or not isinstance(max_str_len, int):
                raise EqualityCheckingError("`max_str_len` must be int or None, not %s" % repr(type(max_str_len).__name__))
            if max_str_len < 1:
                raise EqualityCheckingError("`max_str_len` must be >= 1, got %d" % max_str_len)

        self.max_depth = max_depth
        self.max_str_len = max_str_len

    def compare(self, expected: 'Any', actual: 'Any') -> 'Optional[str]':
        """
        Compares `expected` against `actual`.

        The outcome is symmetric (compare(a, b) is None iff compare(b, a) is None), but the diagnostic always names the
        expected value first.

        Args:
            expected (Any): the expected value
            actual (Any): the actual value

        Returns:
            Optional[str]: None if the values are equal, otherwise a diagnostic for the first divergence found
        """
        res = self._compare(expected, actual, 1, set())
        return None if res is None else str(res)

    def _fmt(self, value):
        return format_value(value, self.max_str_len)

    def _compare(self, expected, actual, depth: 'int', active: 'Set[Tuple[int, int]]'):
        # Same object is always equal, NaN included
        if expected is actual:
            return None

        if expected is None:
            return "expected: %s, actual: %s" % (NIL_STR, self._fmt(actual))
        elif actual is None:
            return "expected: %s, actual: %s" % (self._fmt(expected), NIL_STR)

        if type(expected) is not type(actual):
            return "expected: %s (type %s), actual: %s (type %s)" % \
                (self._fmt(expected), type_name(expected), self._fmt(actual), type_name(actual))

        shape = classify(expected)
        if shape is not classify(actual):
            # Same type but different shapes only happens with numpy arrays of different dimensions
            return "expected: %s, actual: %s" % (self._fmt(expected), self._fmt(actual))

        if shape is Shape.SCALAR:
            return self._compare_scalars(expected, actual)

        # Mappings and sequences recurse, so guard against runaway nesting and cycles
        if depth > self.max_depth:
            return _GuardDiagnostic("maximum comparison depth (%d) exceeded - expected: %s, actual: %s" %
                (self.max_depth, self._fmt(expected), self._fmt(actual)))

        pair = (id(expected), id(actual))
        if pair in active:
            return _GuardDiagnostic(
                "cyclic reference detected - expected: %s, actual: %s" % (self._fmt(expected), self._fmt(actual)))

        active.add(pair)
        try:
            if shape is Shape.MAPPING:
                return self._compare_mappings(expected, actual, depth, active)
            return self._compare_sequences(expected, actual, depth, active)
        finally:
            active.discard(pair)

    def _compare_mappings(self, expected, actual, depth, active):
        # Keys that are '==' but of different types (1 and True) don't match
        actual_keys = {k: k for k in actual}
        for k, ve in expected.items():
            if k not in actual_keys or type(actual_keys[k]) is not type(k):
                return "%s - expected: %s, actual: %s" % (format_key(k, self.max_str_len), self._fmt(ve), NOT_FOUND_STR)

            res = self._compare(ve, actual[k], depth + 1, active)
            if res is not None:
                return _prefixed(format_key(k, self.max_str_len), res)

        for k, va in actual.items():
            if k not in expected:
                return "%s shouldn't exist, actual: %s" % (format_key(k, self.max_str_len), self._fmt(va))

        return None

    def _compare_sequences(self, expected, actual, depth, active):
        if len(expected) != len(actual):
            return "slice/array lengths don't match - expected: %d, actual: %d" % (len(expected), len(actual))

        # Arrays can match on their first axis but not on the rest, or on dtype (which empty arrays never reveal)
        if isinstance(expected, np.ndarray) and (expected.shape != actual.shape or expected.dtype != actual.dtype):
            return "expected: %s (shape %s, dtype %s), actual: %s (shape %s, dtype %s)" % \
                (self._fmt(expected), expected.shape, expected.dtype, self._fmt(actual), actual.shape, actual.dtype)

        for idx, (elem_e, elem_a) in enumerate(zip(expected, actual)):
            # None is the only absent value, at the top level and inside containers alike
            if elem_e is None:
                if elem_a is not None:
                    return "[%d] expected: %s, actual: %s" % (idx, NIL_STR, self._fmt(elem_a))
                continue
            elif elem_a is None:
                return "[%d] expected: %s, actual: %s" % (idx, self._fmt(elem_e), NIL_STR)

            res = self._compare(elem_e, elem_a, depth + 1, active)
            if isinstance(res, _GuardDiagnostic):
                return _prefixed('[%d]' % idx, res)
            if res is not None:
                return "[%d] expected: %s, actual: %s" % (idx, self._fmt(elem_e), self._fmt(elem_a))

        return None

    def _compare_scalars(self, expected, actual):
        if not _scalars_equal(expected, actual):
            return "expected: %s, actual: %s" % (self._fmt(expected), self._fmt(actual))
        return None


def _scalars_equal(a, b):
    """'==' equality that tolerates array results and objects whose __eq__ raises"""
    if isinstance(a, np.ndarray):
        return np.array_equal(a, b)

    try:
        checked = a == b
        if isinstance(checked, np.ndarray):
            return bool(np.all(checked)) and np.shape(a) == np.shape(b)
        return bool(checked)
    except Exception as e:
        _LOGGER.debug("'==' raised %s comparing %s objects, treating them as unequal", repr(e), repr(type_name(a)))
        return False


_DEFAULT_COMPARATOR = Comparator()


def compare(expected: 'Any', actual: 'Any', max_depth: 'int' = DEFAULT_MAX_DEPTH,
    max_str_len: 'Optional[int]' = _MAX_STR_LEN) -> 'Optional[str]':
    """
    Compares `expected` against `actual`, returning None if they are equal, or a diagnostic for the first divergence.
    See :class:`~deepassert.equality.Comparator` for the args.
    """
    if max_depth == DEFAULT_MAX_DEPTH and max_str_len == _MAX_STR_LEN:
        return _DEFAULT_COMPARATOR.compare(expected, actual)
    return Comparator(max_depth=max_depth, max_str_len=max_str_len).compare(expected, actual)


def equal(expected: 'Any', actual: 'Any', raise_err: 'bool' = False, **kwargs: 'Any') -> 'bool':
    """
    Determines whether `expected` and `actual` are deeply equal.

    Args:
        expected (Any): the expected value
        actual (Any): the actual value
        raise_err (bool): if True, then an ``EqualityError`` will be raised whenever the values are unequal, carrying
            the diagnostic of the first divergence. Defaults to False.
        kwargs (Any): passed to :class:`~deepassert.equality.Comparator`

    Returns:
        bool: True if the values are equal, False otherwise (only when `raise_err=False`)
    """
    diagnostic = compare(expected, actual, **kwargs)
    if diagnostic is None:
        return True
    if raise_err:
        raise EqualityError(expected, actual, diagnostic)
    return False


class EqualityError(Exception):
    """Error raised whenever an :func:`~deepassert.equality.equal` check fails and `raise_err=True`"""

    def __init__(self, expected, actual, diagnostic):
        super().__init__(diagnostic)
        self.expected = expected
        self.actual = actual
        self.diagnostic = diagnostic


class EqualityCheckingError(Exception):
    """Error raised whenever a comparator is set up with invalid arguments"""
