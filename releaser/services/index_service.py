"""
Index service for releaser.

Rescans the data tree, rebuilds the ReleaseIndex and writes the rendered
document next to the archives.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional, Union

from ..domain.archive import ARCHIVE_SUFFIX, ArchivePattern, NotMatched, parse_archive
from ..domain.release_index import (
    DEFAULT_INTRO,
    DEFAULT_SECTION_HEADING,
    DEFAULT_TITLE,
    ReleaseIndex,
)
from ..infra.file_store import FileStore
from ..versioning import SortKey, group_sort_key, version_sort_key

logger = logging.getLogger(__name__)


@dataclass
class IndexOptions:
    """How the index document is named, ordered and worded."""
    filename: str = "README.md"
    title: str = DEFAULT_TITLE
    intro: str = DEFAULT_INTRO
    section_heading: str = DEFAULT_SECTION_HEADING
    group_key: SortKey = group_sort_key
    version_key: SortKey = version_sort_key

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'IndexOptions':
        index = config.get('index', {})
        archives = config.get('archives', {})
        return cls(
            filename=archives.get('index_file') or cls.filename,
            title=index.get('title', DEFAULT_TITLE),
            intro=index.get('intro', DEFAULT_INTRO),
            section_heading=index.get('section_heading', DEFAULT_SECTION_HEADING),
        )


class IndexService:
    """
    Service for regenerating the index document from on-disk archives.

    The index is always rebuilt from a full scan of the data tree, never
    patched incrementally.
    """

    def __init__(
        self,
        file_store: Optional[FileStore] = None,
        pattern: Optional[ArchivePattern] = None,
        options: Optional[IndexOptions] = None,
        log: Optional[logging.Logger] = None
    ):
        self.files = file_store or FileStore()
        self.pattern = pattern
        self.options = options or IndexOptions()
        self.log = log or logger

    def scan(self, data_root: Union[str, Path]) -> ReleaseIndex:
        """Build a ReleaseIndex from every archive below ``data_root``."""
        files = self.files.find(data_root, ARCHIVE_SUFFIX)
        self.log.info(f"Processing files: {len(files)}")

        records = []
        for file in files:
            record = parse_archive(file, self.pattern)
            if isinstance(record, NotMatched):
                self.log.warning(f"Invalid file: {file}")
                continue
            records.append(record)

        return ReleaseIndex.build(records, log=self.log)

    def render(self, index: ReleaseIndex) -> str:
        opts = self.options
        return index.render(
            group_key=opts.group_key,
            version_key=opts.version_key,
            title=opts.title,
            intro=opts.intro,
            section_heading=opts.section_heading,
        )

    def update(self, data_root: Union[str, Path]) -> ReleaseIndex:
        """
        Rescan ``data_root`` and rewrite its index document.

        Returns:
            The freshly built ReleaseIndex
        """
        index = self.scan(data_root)
        text = self.render(index)
        path = self.files.write_text(Path(data_root) / self.options.filename, text)
        self.log.debug(f"Wrote {path} ({len(index)} archives)")
        return index
