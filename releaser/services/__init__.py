"""
Service layer for releaser.

Contains business logic that orchestrates domain objects and infrastructure:
- ReconcileService: Cache -> data tree copies, new version detection
- IndexService: Data tree rescan and index document generation
- WorkspaceService: Data checkout preparation
- SyncService: The end-to-end commit/tag/push run

Services are the primary API for commands to use.
"""

from .reconcile_service import ReconcileService
from .index_service import IndexOptions, IndexService
from .workspace_service import WorkspaceOptions, WorkspaceService
from .sync_service import SyncOptions, SyncService

__all__ = [
    'ReconcileService',
    'IndexOptions',
    'IndexService',
    'WorkspaceOptions',
    'WorkspaceService',
    'SyncOptions',
    'SyncService',
]
