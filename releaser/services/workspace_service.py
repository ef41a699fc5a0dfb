"""
Workspace service for releaser.

Prepares the data checkout: a clone of the publishing repository with the
release branch checked out.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..exit_codes import ConfigError
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


@dataclass
class WorkspaceOptions:
    """Where the data checkout lives and what it tracks."""
    data_dir: str = "data"
    remote: str = "origin"
    remote_url: Optional[str] = None
    branch: str = "releases"
    ci: bool = False
    bot_name: str = "Renovate Bot"
    bot_email: str = "bot@renovateapp.com"


class WorkspaceService:
    """
    Service for acquiring the data checkout.

    Example:
        service = WorkspaceService()
        data = service.prepare(Path("."), WorkspaceOptions(branch="releases"))
    """

    def __init__(self, git_client: Optional[GitClient] = None, log: Optional[logging.Logger] = None):
        self.git = git_client or GitClient()
        self.log = log or logger

    def prepare(self, workspace: Union[str, Path], options: WorkspaceOptions) -> Path:
        """
        Clone or update the data checkout and switch to the release branch.

        The release branch is taken from the remote when it exists there,
        otherwise an existing local branch is reused, otherwise a new orphan
        branch is started. Local tags the remote does not have are
        deleted, so the tag set always reflects what was published.

        Args:
            workspace: Workspace root (holds the data and cache directories)
            options: Workspace options

        Returns:
            Path of the data checkout

        Raises:
            ConfigError: No remote URL is configured or discoverable
            GitCommandError: A git command failed
        """
        workspace = Path(workspace)
        data = workspace / options.data_dir

        if self.git.is_git_repo(data):
            self.log.debug(f"Updating existing checkout {data}")
            self.git.fetch(data, options.remote)
            stale = self.git.prune_tags(data, options.remote)
            if stale:
                # Left behind by dry runs or a failed tag push
                self.log.info(f"Dropped unpublished tags: {', '.join(stale)}")
        else:
            url = options.remote_url or self.git.remote_url(workspace, options.remote)
            if not url:
                raise ConfigError(
                    f"No remote URL for '{options.remote}': set git.remote_url "
                    f"or run inside a clone of the publishing repository"
                )
            self.log.debug(f"Cloning {url} into {data}")
            self.git.clone(url, data)

        if self.git.has_remote_branch(data, options.branch, options.remote):
            self.git.checkout_tracking(data, options.branch, options.remote)
        elif self.git.has_local_branch(data, options.branch):
            self.git.checkout(data, options.branch)
        else:
            self.log.info(f"Creating release branch {options.branch}")
            self.git.checkout_orphan(data, options.branch)

        if options.ci:
            self.git.set_config(data, 'user.name', options.bot_name)
            self.git.set_config(data, 'user.email', options.bot_email)

        return data
