"""
Infrastructure layer for releaser.

Contains abstractions for external systems:
- GitClient: Git command execution
- FileStore: Archive copies and index file writes

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, GitStatus
from .file_store import FileStore

__all__ = [
    'GitClient',
    'GitStatus',
    'FileStore',
]
