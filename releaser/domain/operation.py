"""
Run result domain objects for releaser.

Provides the sync state machine states and the structured outcome the
coordinator returns instead of exiting the process itself.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class SyncState(Enum):
    """States of one sync run, in forward order."""
    INIT = "init"
    PREPARED = "prepared"
    RECONCILED = "reconciled"
    INDEXED = "indexed"
    COMMITTED = "committed"
    CLEAN_NOOP = "clean_noop"
    TAGGED = "tagged"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ReconcileResult:
    """
    Result of copying the incoming cache into the data tree.

    ``new_versions`` keeps discovery order and holds each version once.
    """
    new_versions: List[str] = field(default_factory=list)
    copied: List[str] = field(default_factory=list)
    already_tagged: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)

    def add_new_version(self, version: str) -> None:
        if version not in self.new_versions:
            self.new_versions.append(version)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'new_versions': list(self.new_versions),
            'copied': len(self.copied),
            'already_tagged': sorted(set(self.already_tagged)),
            'invalid': list(self.invalid),
        }


@dataclass
class SyncOutcome:
    """
    Outcome of a sync run.

    ``state`` is DONE on success and FAILED otherwise; ``failed_state`` is the
    last state reached before the failure.
    """
    state: SyncState = SyncState.INIT
    dry_run: bool = False
    failed_state: Optional[SyncState] = None
    error: Optional[str] = None
    exit_code: int = 0
    data_path: Optional[str] = None
    new_versions: List[str] = field(default_factory=list)
    tags_created: List[str] = field(default_factory=list)
    committed: bool = False
    pushed: bool = False
    tags_pushed: bool = False
    archives_indexed: int = 0
    states: List[SyncState] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if the run reached DONE."""
        return self.state == SyncState.DONE

    def advance(self, state: SyncState) -> None:
        """Record a forward transition."""
        self.state = state
        self.states.append(state)

    def fail(self, error: BaseException, exit_code: int) -> None:
        """Move to FAILED, remembering where the run stopped."""
        self.failed_state = self.state
        self.state = SyncState.FAILED
        self.states.append(SyncState.FAILED)
        self.error = str(error) or error.__class__.__name__
        self.exit_code = exit_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'type': 'summary',
            'operation': 'sync',
            'state': self.state.value,
            'success': self.success,
            'dry_run': self.dry_run,
            'new_versions': list(self.new_versions),
            'tags_created': list(self.tags_created),
            'committed': self.committed,
            'pushed': self.pushed,
            'tags_pushed': self.tags_pushed,
            'archives_indexed': self.archives_indexed,
        }
        if self.data_path:
            result['data_path'] = self.data_path
        if self.error:
            result['error'] = self.error
            result['failed_state'] = self.failed_state.value if self.failed_state else None
            result['exit_code'] = self.exit_code
        return result
