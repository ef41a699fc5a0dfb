"""
releaser - Versioned catalog of prebuilt release archives.

releaser keeps a git branch of prebuilt ``.tar.xz`` archives in sync with a
local build cache. Archives are named ``<group>/<name>-<version>.tar.xz``;
every run copies new ones into the data checkout, regenerates the Markdown
index, commits, and tags each version that has no tag yet.

Quick Start:
    from pathlib import Path
    from releaser import SyncOptions, SyncService

    outcome = SyncService(SyncOptions(workspace=Path("."), dry_run=True)).run()
    print(outcome.state, outcome.new_versions)

    # Parse a single archive path
    from releaser import parse_archive
    parse_archive("/tmp/x/3.10/python-3.10.4.tar.xz").canonical_name
    # -> "3.10/python-3.10.4.tar.xz"

Domain Objects:
    ArchiveRecord / NotMatched - Parsed archive path
    ReleaseIndex - Immutable group -> version -> archive mapping
    SyncOutcome - Result of a sync run

Services:
    ReconcileService - Cache to data tree copies
    IndexService - Index document generation
    WorkspaceService - Data checkout preparation
    SyncService - Commit, tag and push orchestration
"""

__version__ = "0.3.0"

# Domain objects
from .domain import (
    ArchivePattern,
    ArchiveRecord,
    NotMatched,
    parse_archive,
    ReleaseIndex,
    ReconcileResult,
    SyncOutcome,
    SyncState,
)

# Services
from .services import (
    ReconcileService,
    IndexOptions,
    IndexService,
    WorkspaceOptions,
    WorkspaceService,
    SyncOptions,
    SyncService,
)

# Configuration
from .config import load_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "ArchivePattern",
    "ArchiveRecord",
    "NotMatched",
    "parse_archive",
    "ReleaseIndex",
    "ReconcileResult",
    "SyncOutcome",
    "SyncState",
    # Services
    "ReconcileService",
    "IndexOptions",
    "IndexService",
    "WorkspaceOptions",
    "WorkspaceService",
    "SyncOptions",
    "SyncService",
    # Configuration
    "load_config",
]
