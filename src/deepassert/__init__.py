from .equality import Comparator, EqualityCheckingError, EqualityError, compare, equal
from .asserts import Assert, PytestCheckReporter, RecordingReporter, Reporter, new

__all__ = ['Comparator', 'EqualityCheckingError', 'EqualityError', 'compare', 'equal',
    'Assert', 'PytestCheckReporter', 'RecordingReporter', 'Reporter', 'new']
