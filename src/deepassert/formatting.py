"""
Printing of values for comparison diagnostics.

Values are printed close to how they would be written as literals, except that absent values print as 'nil' and
strings are always double-quoted, so that `1` and `"1"` can never be confused in a message.
"""

import json
import numpy as np
from collections.abc import Mapping
from .pytypes import Shape, classify
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Optional, Set


_MAX_STR_LEN = 1000
_MAX_FORMAT_DEPTH = 50
NIL_STR = 'nil'


def format_value(value: 'Any', limit: 'Optional[int]' = _MAX_STR_LEN) -> 'str':
    """Returns the printed form of `value` used in diagnostics

    Args:
        value (Any): the value to print
        limit (Optional[int]): maximum length of the returned string before it is cut and suffixed with '...'. None
            means no limit. Defaults to _MAX_STR_LEN.

    Returns:
        str: the printed value
    """
    return limit_str(_format(value, set(), 0), limit)


def format_key(key: 'Any', limit: 'Optional[int]' = _MAX_STR_LEN) -> 'str':
    """Accessor path element for a mapping key, eg: '["a"]'"""
    return '[%s]' % format_value(key, limit)


def type_name(value: 'Any') -> 'str':
    return type(value).__name__


def limit_str(s: 'str', limit: 'Optional[int]' = _MAX_STR_LEN) -> 'str':
    return s if limit is None or len(s) <= limit else (s[:limit] + '...')


def _format(value, seen: 'Set[int]', depth: 'int'):
    """Recursive printer. `seen` holds the ids of containers currently being printed to stop on self-references"""
    shape = classify(value)

    if shape is Shape.ABSENT:
        return NIL_STR
    
    if shape is Shape.SCALAR:
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        if isinstance(value, np.generic):
            return str(value)
        if isinstance(value, np.ndarray):
            return np.array2string(value, separator=', ')
        return repr(value)

    # Containers from here on
    if id(value) in seen or depth >= _MAX_FORMAT_DEPTH:
        return '{...}' if shape is Shape.MAPPING else '[...]'
    
    seen.add(id(value))
    try:
        if isinstance(value, Mapping):
            return '{%s}' % ', '.join('%s: %s' % (_format(k, seen, depth + 1), _format(v, seen, depth + 1))
                for k, v in value.items())
        
        if isinstance(value, np.ndarray):
            if value.dtype == object:
                return '[%s]' % ', '.join(_format(v, seen, depth + 1) for v in value)
            return np.array2string(value, separator=', ')

        items = [_format(v, seen, depth + 1) for v in value]
        if isinstance(value, tuple):
            return '(%s,)' % items[0] if len(items) == 1 else '(%s)' % ', '.join(items)
        return '[%s]' % ', '.join(items)
    finally:
        seen.discard(id(value))
