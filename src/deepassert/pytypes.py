"""
Shape classification for values handed to the comparator.

Every value falls into one of four shapes:
    - ABSENT: None
    - MAPPING: any collections.abc.Mapping
    - SEQUENCE: list, tuple, other non-text sequences, numpy arrays with at least one dimension
    - SCALAR: everything else (numbers, strings, bytes, sets, 0-d arrays, arbitrary objects)
"""

import numpy as np
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any


# Sequences that should be compared as a whole instead of element by element
TextTypes = (str, bytes, bytearray, memoryview)


class Shape(Enum):
    ABSENT = 'absent'
    SCALAR = 'scalar'
    SEQUENCE = 'sequence'
    MAPPING = 'mapping'


def classify(value: 'Any') -> 'Shape':
    """Returns the Shape of the given value

    Args:
        value (Any): the value to classify

    Returns:
        Shape: the shape tag of `value`
    """
    if value is None:
        return Shape.ABSENT
    
    if isinstance(value, Mapping):
        return Shape.MAPPING
    
    # 0-d arrays have no len(), so they are compared like any other scalar
    if isinstance(value, np.ndarray):
        return Shape.SEQUENCE if value.ndim > 0 else Shape.SCALAR
    
    if isinstance(value, Sequence) and not isinstance(value, TextTypes):
        return Shape.SEQUENCE
    
    return Shape.SCALAR
