"""
Reconcile service for releaser.

Copies archives from the incoming cache into the persisted data tree and
works out which versions have not been released (tagged) yet.
"""

import logging
from pathlib import Path
from typing import AbstractSet, Optional, Union

from ..domain.archive import ARCHIVE_SUFFIX, ArchivePattern, NotMatched, parse_archive
from ..domain.operation import ReconcileResult
from ..infra.file_store import FileStore

logger = logging.getLogger(__name__)


class ReconcileService:
    """
    Service for moving cached archives into the data tree.

    Example:
        service = ReconcileService()
        result = service.reconcile(Path(".cache"), Path("data"), {"3.10.3"})
        print(result.new_versions)  # ["3.10.4"]
    """

    def __init__(
        self,
        file_store: Optional[FileStore] = None,
        pattern: Optional[ArchivePattern] = None,
        log: Optional[logging.Logger] = None
    ):
        """
        Initialize ReconcileService.

        Args:
            file_store: FileStore instance (creates new if None)
            pattern: Archive naming convention (default convention if None)
            log: Logger for progress and warnings (module logger if None)
        """
        self.files = file_store or FileStore()
        self.pattern = pattern
        self.log = log or logger
        self.last_result: Optional[ReconcileResult] = None

    def reconcile(
        self,
        cache_root: Union[str, Path],
        data_root: Union[str, Path],
        existing_tags: AbstractSet[str]
    ) -> ReconcileResult:
        """
        Copy every well-formed cached archive into the data tree.

        Copies happen for already-tagged versions too, so the data tree stays
        complete; only untagged versions end up in ``new_versions``.
        Malformed names are logged and skipped. Filesystem errors propagate.

        Args:
            cache_root: Incoming cache directory (may not exist)
            data_root: Data checkout root
            existing_tags: Tag names already present in the repository

        Returns:
            ReconcileResult with the new versions and copy details
        """
        result = ReconcileResult()
        self.last_result = result

        cache_root = Path(cache_root)
        data_root = Path(data_root)

        files = self.files.find(cache_root, ARCHIVE_SUFFIX)
        self.log.info(f"Processing files: {len(files)}")

        for file in files:
            record = parse_archive(file, self.pattern)

            if isinstance(record, NotMatched):
                self.log.warning(f"Invalid file: {file}")
                result.invalid.append(str(file))
                continue
            self.log.info(f"Processing file: {file}")

            self.files.ensure_dir(data_root / record.group_key)
            self.files.copy(file, data_root / record.canonical_name)
            result.copied.append(record.canonical_name)

            if record.version in existing_tags:
                self.log.info(f"Skipping existing version: {record.version}")
                result.already_tagged.append(record.version)
                continue

            result.add_new_version(record.version)

        return result
