"""
Archive domain objects for releaser.

Archive files follow one naming convention:

    <anything>/<group>/<name>-<version>.tar.xz

where ``group`` is ``major.minor`` (e.g. an OS release series such as
``22.04``) and ``version`` is ``major.minor.patch``. Parsing a path yields
either an ``ArchiveRecord`` or a ``NotMatched`` explaining the rejection.
"""

import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, Union

ARCHIVE_SUFFIX = ".tar.xz"

GROUP_PATTERN = r"\d+\.\d+"
VERSION_PATTERN = r"\d+\.\d+\.\d+"
ANY_NAME = r"[^/]+"


@dataclass(frozen=True)
class ArchiveRecord:
    """
    Parsed identity of one archive file.

    Examples:
        parse_archive("/tmp/x/3.10/python-3.10.4.tar.xz")
            -> ArchiveRecord(group_key="3.10", version="3.10.4",
                             canonical_name="3.10/python-3.10.4.tar.xz")

    Attributes:
        group_key: Release series the archive belongs to (e.g. "22.04")
        version: Semantic version of the archive (e.g. "3.10.4")
        canonical_name: Relative path inside the data tree, ``group/basename``
    """

    group_key: str
    version: str
    canonical_name: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'group': self.group_key,
            'version': self.version,
            'name': self.canonical_name,
        }


@dataclass(frozen=True)
class NotMatched:
    """A path that does not follow the archive naming convention."""

    path: str
    reason: str = "does not match <group>/<name>-<version>.tar.xz"

    def __bool__(self) -> bool:
        return False


ParseResult = Union[ArchiveRecord, NotMatched]


def _normalize(path: Union[str, PurePath]) -> str:
    if isinstance(path, PurePath):
        return path.as_posix()
    return str(path).replace('\\', '/')


class ArchivePattern:
    """
    Compiled archive naming convention.

    Args:
        name: Regular expression for the archive name prefix. Defaults to any
            name without a slash; pass ``re.escape("python")`` to pin it.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or ANY_NAME
        self.regex = re.compile(
            r"/(?P<canonical>(?P<group>" + GROUP_PATTERN + r")/"
            r"(?:" + self.name + r")-(?P<version>" + VERSION_PATTERN + r")"
            + re.escape(ARCHIVE_SUFFIX) + r")$"
        )

    def parse(self, path: Union[str, PurePath]) -> ParseResult:
        """
        Parse a path into an ``ArchiveRecord``.

        Args:
            path: Filesystem path of an archive (absolute or relative)

        Returns:
            ArchiveRecord on match, NotMatched otherwise
        """
        text = _normalize(path)
        if not text.endswith(ARCHIVE_SUFFIX):
            return NotMatched(text, reason=f"not a {ARCHIVE_SUFFIX} archive")

        # Relative paths like "3.10/python-3.10.4.tar.xz" still need the
        # leading separator the convention anchors on.
        m = self.regex.search(text if text.startswith('/') else '/' + text)
        if not m:
            return NotMatched(text)

        return ArchiveRecord(
            group_key=m.group('group'),
            version=m.group('version'),
            canonical_name=m.group('canonical'),
        )

    def __repr__(self) -> str:
        return f"ArchivePattern(name={self.name!r})"


DEFAULT_PATTERN = ArchivePattern()


def parse_archive(path: Union[str, PurePath], pattern: Optional[ArchivePattern] = None) -> ParseResult:
    """Parse ``path`` with ``pattern`` (the default convention if omitted)."""
    return (pattern or DEFAULT_PATTERN).parse(path)
