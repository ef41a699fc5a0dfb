"""
Sync service for releaser.

Runs one end-to-end publication: prepare the data checkout, reconcile the
incoming cache, rebuild the index, then commit, tag and push. Each step is a
forward transition of SyncState; any exception moves the run to FAILED and
is reported through the returned SyncOutcome rather than raised.

Nothing is rolled back on failure. A re-run recopies archives, finds a clean
tree when nothing changed, pushes a branch the remote is behind on and never
re-tags a version that already has a published tag, so the next run
completes whatever the failed one left undone.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

from ..domain.archive import ArchivePattern
from ..domain.operation import SyncOutcome, SyncState
from ..exit_codes import get_exit_code_for_exception
from ..infra.file_store import FileStore
from ..infra.git_client import GitClient
from .index_service import IndexOptions, IndexService
from .reconcile_service import ReconcileService
from .workspace_service import WorkspaceOptions, WorkspaceService

logger = logging.getLogger(__name__)

DRY_RUN = "[DRY_RUN]"


@dataclass
class SyncOptions:
    """Options for a sync run."""
    workspace: Path = Path(".")
    data_dir: str = "data"
    cache_dir: str = ".cache"
    dry_run: bool = False
    ci: bool = False
    remote: str = "origin"
    remote_url: Optional[str] = None
    branch: str = "releases"
    force_push: bool = True
    commit_message: str = "updated files"
    bot_name: str = "Renovate Bot"
    bot_email: str = "bot@renovateapp.com"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'SyncOptions':
        ws = config.get('workspace', {})
        git = config.get('git', {})
        run = config.get('run', {})
        return cls(
            workspace=Path(ws.get('root') or '.').expanduser(),
            data_dir=ws.get('data_dir') or cls.data_dir,
            cache_dir=ws.get('cache_dir') or cls.cache_dir,
            dry_run=bool(run.get('dry_run', False)),
            ci=bool(run.get('ci', False)),
            remote=git.get('remote') or cls.remote,
            remote_url=git.get('remote_url') or None,
            branch=git.get('branch') or cls.branch,
            force_push=bool(git.get('force_push', True)),
            commit_message=git.get('commit_message') or cls.commit_message,
            bot_name=git.get('bot_name') or cls.bot_name,
            bot_email=git.get('bot_email') or cls.bot_email,
        )

    def workspace_options(self) -> WorkspaceOptions:
        return WorkspaceOptions(
            data_dir=self.data_dir,
            remote=self.remote,
            remote_url=self.remote_url,
            branch=self.branch,
            ci=self.ci,
            bot_name=self.bot_name,
            bot_email=self.bot_email,
        )


class SyncService:
    """
    Service that publishes new archives to the release branch.

    Example:
        service = SyncService(SyncOptions(workspace=Path("."), dry_run=True))
        outcome = service.run()
        if not outcome.success:
            sys.exit(outcome.exit_code)
    """

    def __init__(
        self,
        options: SyncOptions,
        git_client: Optional[GitClient] = None,
        file_store: Optional[FileStore] = None,
        pattern: Optional[ArchivePattern] = None,
        index_options: Optional[IndexOptions] = None,
        log: Optional[logging.Logger] = None
    ):
        """
        Initialize SyncService.

        Args:
            options: Run options
            git_client: GitClient instance (creates new if None)
            file_store: FileStore instance (creates new if None)
            pattern: Archive naming convention (default convention if None)
            index_options: Index document options (defaults if None)
            log: Logger for the run (module logger if None)
        """
        self.options = options
        self.git = git_client or GitClient()
        self.files = file_store or FileStore()
        self.log = log or logger
        self.workspace = WorkspaceService(self.git, log=self.log)
        self.reconciler = ReconcileService(self.files, pattern=pattern, log=self.log)
        self.indexer = IndexService(self.files, pattern=pattern, options=index_options, log=self.log)
        self.data: Optional[Path] = None
        self.last_result: Optional[SyncOutcome] = None

    def run(self) -> SyncOutcome:
        """
        Execute one sync run.

        Returns:
            SyncOutcome in state DONE, or FAILED with the error message
        """
        opts = self.options
        outcome = SyncOutcome(dry_run=opts.dry_run)
        outcome.advance(SyncState.INIT)
        self.last_result = outcome

        try:
            self.log.info("Releaser started")
            if opts.dry_run:
                self.log.warning(f"{DRY_RUN} detected")

            self._prepare(outcome)
            self._reconcile(outcome)
            self._index(outcome)
            self._commit(outcome)
            self._tag(outcome)
            self._push_tags(outcome)
        except Exception as e:
            self.log.exception(f"Sync failed while {outcome.state.value}: {e}")
            outcome.fail(e, get_exit_code_for_exception(e))

        return outcome

    def _prepare(self, outcome: SyncOutcome) -> None:
        self.log.info("Prepare worktree")
        self.data = self.workspace.prepare(self.options.workspace, self.options.workspace_options())
        outcome.data_path = str(self.data)
        outcome.advance(SyncState.PREPARED)

    def _reconcile(self, outcome: SyncOutcome) -> None:
        self.log.info("Checking for new builds")
        existing_tags = frozenset(self.git.tags(self.data))
        cache = self.options.workspace / self.options.cache_dir
        result = self.reconciler.reconcile(cache, self.data, existing_tags)
        outcome.new_versions = list(result.new_versions)
        outcome.advance(SyncState.RECONCILED)

    def _index(self, outcome: SyncOutcome) -> None:
        self.log.info("Update readme")
        index = self.indexer.update(self.data)
        outcome.archives_indexed = len(index)
        self.git.add_all(self.data)
        outcome.advance(SyncState.INDEXED)

    def _commit(self, outcome: SyncOutcome) -> None:
        opts = self.options
        self.log.info("Update releases")
        status = self.git.status(self.data)
        if status.clean:
            self.log.info("Nothing to commit")
            if not self.git.is_published(self.data, opts.branch, opts.remote):
                # Commits from an earlier dry run or failed push
                self.log.info(f"Branch {opts.branch} is ahead of {opts.remote}")
                self._push_branch(outcome)
            outcome.advance(SyncState.CLEAN_NOOP)
            return

        self.log.info(f"Committing files ({status.changed_files} changed)")
        self.git.commit(self.data, opts.commit_message)
        outcome.committed = True
        self._push_branch(outcome)
        outcome.advance(SyncState.COMMITTED)

    def _push_branch(self, outcome: SyncOutcome) -> None:
        opts = self.options
        if opts.dry_run:
            self.log.warning(f"{DRY_RUN} Would push: {opts.branch}")
        else:
            self.git.push(self.data, remote=opts.remote, branch=opts.branch, force=opts.force_push)
            outcome.pushed = True

    def _tag(self, outcome: SyncOutcome) -> None:
        self.log.info("Update tags")
        for version in outcome.new_versions:
            self.log.info(f"Add tag {version}")
            self.git.add_tag(self.data, version)
            outcome.tags_created.append(version)
        outcome.advance(SyncState.TAGGED)

    def _push_tags(self, outcome: SyncOutcome) -> None:
        self.log.info("Push tags")
        if self.options.dry_run:
            self.log.warning(f"{DRY_RUN} Would push tags")
        else:
            self.git.push_tags(self.data, remote=self.options.remote)
            outcome.tags_pushed = True
        outcome.advance(SyncState.DONE)
