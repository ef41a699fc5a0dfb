"""
Release index domain object for releaser.

A ReleaseIndex maps group key -> version -> canonical name. It is built once
per run from a full rescan of the data tree and rendered into the Markdown
index document. Instances are immutable; rebuilding is the only way to
change one.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..versioning import SortKey, group_sort_key, version_sort_key
from .archive import ArchiveRecord

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "python releases"
DEFAULT_INTRO = "Prebuild python builds for ubuntu"
DEFAULT_SECTION_HEADING = "ubuntu {group}"


@dataclass(frozen=True)
class DuplicateEntry:
    """Two archives published the same (group, version) pair."""
    group_key: str
    version: str
    previous: str
    replacement: str


@dataclass(frozen=True)
class ReleaseIndex:
    """
    Immutable two-level mapping of published archives.

    Example:
        index = ReleaseIndex.build(records)
        text = index.render()
        index.versions("22.04")  # {"3.10.4": "22.04/python-3.10.4.tar.xz"}
    """

    groups: Mapping[str, Mapping[str, str]] = field(default_factory=lambda: MappingProxyType({}))
    duplicates: Tuple[DuplicateEntry, ...] = ()

    @classmethod
    def build(
        cls,
        records: Iterable[ArchiveRecord],
        log: Optional[logging.Logger] = None
    ) -> 'ReleaseIndex':
        """
        Fold records into an index.

        A later record with the same (group, version) replaces the earlier
        one. Each replacement is logged as a warning and kept in
        ``duplicates``.

        Args:
            records: Parsed archive records, in scan order
            log: Logger for duplicate warnings (module logger if None)

        Returns:
            New ReleaseIndex
        """
        log = log or logger
        groups: Dict[str, Dict[str, str]] = {}
        duplicates: List[DuplicateEntry] = []

        for record in records:
            versions = groups.setdefault(record.group_key, {})
            previous = versions.get(record.version)
            if previous is not None:
                duplicates.append(DuplicateEntry(
                    group_key=record.group_key,
                    version=record.version,
                    previous=previous,
                    replacement=record.canonical_name,
                ))
                log.warning(
                    f"Duplicate release {record.group_key}/{record.version}: "
                    f"{previous} replaced by {record.canonical_name}"
                )
            versions[record.version] = record.canonical_name

        frozen = {group: MappingProxyType(dict(versions)) for group, versions in groups.items()}
        return cls(groups=MappingProxyType(frozen), duplicates=tuple(duplicates))

    def versions(self, group_key: str) -> Mapping[str, str]:
        """Versions published under ``group_key`` (empty if unknown)."""
        return self.groups.get(group_key, MappingProxyType({}))

    def records(
        self,
        group_key: SortKey = group_sort_key,
        version_key: SortKey = version_sort_key
    ) -> Iterator[ArchiveRecord]:
        """Iterate all entries in rendering order."""
        for group in sorted(self.groups, key=group_key):
            versions = self.groups[group]
            for version in sorted(versions, key=version_key):
                yield ArchiveRecord(group, version, versions[version])

    def render(
        self,
        group_key: SortKey = group_sort_key,
        version_key: SortKey = version_sort_key,
        title: str = DEFAULT_TITLE,
        intro: str = DEFAULT_INTRO,
        section_heading: str = DEFAULT_SECTION_HEADING
    ) -> str:
        """
        Render the Markdown index document.

        The output depends only on the index contents and the arguments, so
        rendering an unchanged index always yields identical text.

        Args:
            group_key: Sort key for sections
            version_key: Sort key for bullets inside a section
            title: Document title
            intro: Line below the title
            section_heading: Section heading template, ``{group}`` is replaced

        Returns:
            Document text
        """
        parts = [f"# {title}\n\n", f"{intro}\n\n"]

        for group in sorted(self.groups, key=group_key):
            parts.append(f"\n\n## {section_heading.format(group=group)}\n\n")
            versions = self.groups[group]
            for version in sorted(versions, key=version_key):
                parts.append(f"* [{version}]({versions[version]})\n")

        return ''.join(parts)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        """Convert to plain nested dicts for JSON serialization."""
        return {group: dict(versions) for group, versions in self.groups.items()}

    def __len__(self) -> int:
        return sum(len(versions) for versions in self.groups.values())

    def __contains__(self, item) -> bool:
        if isinstance(item, ArchiveRecord):
            return self.versions(item.group_key).get(item.version) == item.canonical_name
        return False
