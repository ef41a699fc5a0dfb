"""
File store infrastructure for releaser.

Provides the filesystem operations the catalog needs:
- Recursive suffix search with stable ordering
- Directory creation
- Overwriting copies
- Atomic text writes (write to temp, then rename)
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Union
import logging

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FileStore:
    """
    Filesystem access for archives and the index document.

    Every call either completes or raises OSError.

    Example:
        store = FileStore()
        for archive in store.find(Path(".cache"), ".tar.xz"):
            store.copy(archive, Path("data") / archive.name)
    """

    def find(self, root: PathLike, suffix: str) -> List[Path]:
        """
        Find files below ``root`` whose name ends with ``suffix``.

        Args:
            root: Directory to search (missing directories yield nothing)
            suffix: Filename suffix, e.g. ".tar.xz"

        Returns:
            Sorted list of matching file paths
        """
        root = Path(root)
        if not root.is_dir():
            return []
        return sorted(
            path for path in root.rglob(f"*{suffix}")
            if path.is_file() and '.git' not in path.relative_to(root).parts
        )

    def ensure_dir(self, path: PathLike) -> Path:
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def copy(self, source: PathLike, dest: PathLike) -> Path:
        """Copy ``source`` to ``dest``, replacing any existing file."""
        dest = Path(dest)
        shutil.copy2(source, dest)
        logger.debug(f"Copied {source} -> {dest}")
        return dest

    def write_text(self, path: PathLike, text: str) -> Path:
        """Write ``text`` as UTF-8 atomically using temp file and rename."""
        path = Path(path)
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(text)

            # Atomic rename
            os.replace(temp_path, path)

        except Exception:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

        return path
