"""
Git client infrastructure for releaser.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Query helpers return empty results when git reports nothing; every command
that changes a repository raises GitCommandError on failure.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union
import logging

from ..exit_codes import GitCommandError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class GitStatus:
    """Result of git status command."""
    clean: bool = True
    untracked_files: int = 0
    staged_files: int = 0
    modified_files: int = 0

    @property
    def changed_files(self) -> int:
        return self.untracked_files + self.staged_files + self.modified_files


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient()
        client.add_all("/path/to/repo")
        if not client.status("/path/to/repo").clean:
            client.commit("/path/to/repo", "updated files")
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: no timeout)
        """
        self.timeout = timeout

    def _run(
        self,
        args: Sequence[str],
        cwd: PathLike,
        check: bool = False
    ) -> Tuple[str, int]:
        """
        Run a git command.

        Args:
            args: Git arguments (e.g., ['status', '--porcelain'])
            cwd: Working directory
            check: Raise GitCommandError on non-zero exit

        Returns:
            Tuple of (stdout, returncode)
        """
        logger.debug(f"git {' '.join(args)} (in {cwd})")
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=str(cwd),
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(args, -1, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise GitCommandError(args, -1, str(e)) from e

        if check and result.returncode != 0:
            raise GitCommandError(args, result.returncode, result.stderr or result.stdout)

        return (result.stdout or "").rstrip(), result.returncode

    # -- queries ---------------------------------------------------------

    def is_git_repo(self, path: PathLike) -> bool:
        """Check if path is a git repository."""
        return (Path(path) / ".git").exists()

    def remote_url(self, path: PathLike, remote: str = "origin") -> Optional[str]:
        """
        Get remote URL.

        Returns:
            Remote URL or None if not found
        """
        output, code = self._run(['config', '--get', f'remote.{remote}.url'], cwd=path)
        if code == 0 and output:
            return output
        return None

    def has_remote_branch(self, path: PathLike, branch: str, remote: str = "origin") -> bool:
        _, code = self._run(
            ['show-ref', '--verify', '--quiet', f'refs/remotes/{remote}/{branch}'], cwd=path
        )
        return code == 0

    def has_local_branch(self, path: PathLike, branch: str) -> bool:
        _, code = self._run(['show-ref', '--verify', '--quiet', f'refs/heads/{branch}'], cwd=path)
        return code == 0

    def tags(self, path: PathLike) -> List[str]:
        """List all tag names in the repository."""
        output, _ = self._run(['tag', '--list'], cwd=path, check=True)
        return [line.strip() for line in output.splitlines() if line.strip()]

    def remote_tags(self, path: PathLike, remote: str = "origin") -> List[str]:
        """List the tag names published on ``remote``."""
        output, _ = self._run(['ls-remote', '--tags', '--refs', remote], cwd=path, check=True)
        names = []
        for line in output.splitlines():
            _, _, ref = line.partition('\t')
            if ref.startswith('refs/tags/'):
                names.append(ref[len('refs/tags/'):])
        return names

    def is_published(self, path: PathLike, branch: str, remote: str = "origin") -> bool:
        """
        Check whether ``remote/branch`` already contains HEAD.

        An unborn HEAD counts as published since there is nothing to push.
        Relies on the remote-tracking ref, so fetch first.
        """
        if self.head(path) is None:
            return True
        if not self.has_remote_branch(path, branch, remote):
            return False
        output, code = self._run(['rev-list', '--count', f'{remote}/{branch}..HEAD'], cwd=path)
        return code == 0 and output == '0'

    def status(self, path: PathLike) -> GitStatus:
        """
        Get working tree status.

        Args:
            path: Path to git repository

        Returns:
            GitStatus with clean flag and file counts
        """
        output, _ = self._run(['status', '--porcelain'], cwd=path, check=True)
        if not output:
            return GitStatus(clean=True)

        lines = [line for line in output.split('\n') if line]
        return GitStatus(
            clean=False,
            untracked_files=sum(1 for line in lines if line.startswith('??')),
            staged_files=sum(1 for line in lines if line[0] in 'MADRC'),
            modified_files=sum(1 for line in lines if len(line) > 1 and line[1] in 'MADRC')
        )

    def head(self, path: PathLike) -> Optional[str]:
        """Current commit hash, or None on an unborn branch."""
        output, code = self._run(['rev-parse', '--verify', '--quiet', 'HEAD'], cwd=path)
        if code == 0 and output:
            return output
        return None

    # -- working tree ----------------------------------------------------

    def clone(self, url: str, dest: PathLike, no_checkout: bool = True) -> None:
        """Clone ``url`` into ``dest``."""
        dest = Path(dest)
        args = ['clone']
        if no_checkout:
            args.append('--no-checkout')
        args += [url, str(dest)]
        self._run(args, cwd=dest.parent, check=True)

    def fetch(self, path: PathLike, remote: str = "origin", tags: bool = True) -> None:
        args = ['fetch', remote]
        if tags:
            args.append('--tags')
        self._run(args, cwd=path, check=True)

    def checkout_tracking(self, path: PathLike, branch: str, remote: str = "origin") -> None:
        """Force ``branch`` to match ``remote/branch`` and check it out."""
        self._run(['checkout', '-f', '-B', branch, f'{remote}/{branch}'], cwd=path, check=True)

    def checkout(self, path: PathLike, branch: str) -> None:
        self._run(['checkout', '-f', branch], cwd=path, check=True)

    def checkout_orphan(self, path: PathLike, branch: str) -> None:
        """Start an unborn ``branch`` with an empty index."""
        if self.head(path) is None:
            # Nothing committed yet (fresh clone of an empty remote)
            self._run(['symbolic-ref', 'HEAD', f'refs/heads/{branch}'], cwd=path, check=True)
        else:
            self._run(['checkout', '--orphan', branch], cwd=path, check=True)
        self._run(['rm', '-r', '-f', '--cached', '--quiet', '--ignore-unmatch', '.'], cwd=path, check=True)

    def set_config(self, path: PathLike, key: str, value: str) -> None:
        """Set a repository-local config value."""
        self._run(['config', key, value], cwd=path, check=True)

    # -- commits and tags ------------------------------------------------

    def add_all(self, path: PathLike) -> None:
        """Stage every change in the working tree."""
        self._run(['add', '--all', '.'], cwd=path, check=True)

    def commit(self, path: PathLike, message: str) -> None:
        self._run(['commit', '-m', message], cwd=path, check=True)

    def add_tag(self, path: PathLike, name: str) -> None:
        """Create a lightweight tag at HEAD."""
        self._run(['tag', name], cwd=path, check=True)

    def prune_tags(self, path: PathLike, remote: str = "origin") -> List[str]:
        """
        Delete local tags that ``remote`` does not have.

        Returns:
            Names of the deleted tags, sorted
        """
        stale = sorted(set(self.tags(path)) - set(self.remote_tags(path, remote)))
        if stale:
            self._run(['tag', '-d', *stale], cwd=path, check=True)
        return stale

    def push(
        self,
        path: PathLike,
        remote: str = "origin",
        branch: Optional[str] = None,
        force: bool = False
    ) -> str:
        """
        Push a branch to remote.

        Args:
            path: Path to git repository
            remote: Remote name
            branch: Branch to push (current branch if None)
            force: Overwrite the remote branch

        Returns:
            Output of git push
        """
        args = ['push']
        if force:
            args.append('--force')
        args.append(remote)
        if branch:
            args.append(branch)
        output, _ = self._run(args, cwd=path, check=True)
        return output

    def push_tags(self, path: PathLike, remote: str = "origin") -> str:
        """Push all tags to remote."""
        output, _ = self._run(['push', remote, '--tags'], cwd=path, check=True)
        return output
