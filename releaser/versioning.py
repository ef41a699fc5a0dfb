"""
Ordering functions for group keys and release versions.

Both orderings are plain sort keys so callers can inject any other key
function. Parsing is strict: a value that is not a valid version raises
``packaging.version.InvalidVersion`` instead of being silently misplaced.
"""

from typing import Callable

from packaging.version import Version

SortKey = Callable[[str], object]


def group_sort_key(group: str) -> Version:
    """Numeric-aware key for dotted group keys ("3.9" sorts before "3.10")."""
    return Version(group)


def version_sort_key(version: str) -> Version:
    """Semantic ordering for ``major.minor.patch`` release versions."""
    return Version(version)

