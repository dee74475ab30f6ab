"""
XMCDA Aggregate Problems Domain

Composes entity codecs into complete decision problems:
- Problem, sorting and group sorting readers over one or several sources
- Referential integrity pass across parsed entities
- Sorting problem writer producing canonical documents
"""

from .group_reader import GroupSortingProblemReader
from .problem_reader import ProblemReader, ReadCache, ReaderState, SourceKind
from .sorting_reader import SortingProblemReader
from .writer import SortingProblemWriter

__all__ = [
    # Readers
    "ProblemReader",
    "SortingProblemReader",
    "GroupSortingProblemReader",
    "ReadCache",
    "ReaderState",
    "SourceKind",
    # Writer
    "SortingProblemWriter",
]
