"""
Domain layer for releaser.

Contains pure domain objects with no I/O or side effects:
- ArchiveRecord / NotMatched: Parsed identity of an archive path
- ReleaseIndex: Immutable group -> version -> archive mapping
- SyncOutcome: Structured result of a sync run

These objects are immutable where possible and provide
serialization methods for JSON output.
"""

from .archive import ArchivePattern, ArchiveRecord, NotMatched, parse_archive
from .release_index import ReleaseIndex, DuplicateEntry
from .operation import ReconcileResult, SyncOutcome, SyncState

__all__ = [
    'ArchivePattern',
    'ArchiveRecord',
    'NotMatched',
    'parse_archive',
    'ReleaseIndex',
    'DuplicateEntry',
    'ReconcileResult',
    'SyncOutcome',
    'SyncState',
]
