"""Tests for WorkspaceService with a mocked GitClient."""

from unittest.mock import MagicMock, call

import pytest

from releaser.exit_codes import ConfigError
from releaser.infra.git_client import GitClient
from releaser.services.workspace_service import WorkspaceOptions, WorkspaceService


@pytest.fixture
def mock_git_client():
    client = MagicMock(spec=GitClient)
    client.is_git_repo.return_value = False
    client.remote_url.return_value = "https://example.com/org/builds.git"
    client.has_remote_branch.return_value = True
    client.has_local_branch.return_value = False
    client.prune_tags.return_value = []
    return client


class TestPrepare:
    """Tests for WorkspaceService.prepare."""

    def test_clone_when_missing(self, mock_git_client, tmp_path):
        data = WorkspaceService(mock_git_client).prepare(tmp_path, WorkspaceOptions())

        assert data == tmp_path / "data"
        mock_git_client.remote_url.assert_called_once_with(tmp_path, "origin")
        mock_git_client.clone.assert_called_once_with("https://example.com/org/builds.git", tmp_path / "data")
        mock_git_client.fetch.assert_not_called()
        mock_git_client.prune_tags.assert_not_called()
        mock_git_client.checkout_tracking.assert_called_once_with(tmp_path / "data", "releases", "origin")

    def test_configured_url_wins(self, mock_git_client, tmp_path):
        options = WorkspaceOptions(remote_url="git@example.com:other.git")
        WorkspaceService(mock_git_client).prepare(tmp_path, options)
        mock_git_client.remote_url.assert_not_called()
        mock_git_client.clone.assert_called_once_with("git@example.com:other.git", tmp_path / "data")

    def test_no_remote_is_config_error(self, mock_git_client, tmp_path):
        mock_git_client.remote_url.return_value = None
        with pytest.raises(ConfigError):
            WorkspaceService(mock_git_client).prepare(tmp_path, WorkspaceOptions())
        mock_git_client.clone.assert_not_called()

    def test_fetch_existing_checkout(self, mock_git_client, tmp_path):
        mock_git_client.is_git_repo.return_value = True
        WorkspaceService(mock_git_client).prepare(tmp_path, WorkspaceOptions(remote="upstream"))
        mock_git_client.fetch.assert_called_once_with(tmp_path / "data", "upstream")
        mock_git_client.prune_tags.assert_called_once_with(tmp_path / "data", "upstream")
        mock_git_client.clone.assert_not_called()

    def test_local_branch_reused(self, mock_git_client, tmp_path):
        mock_git_client.has_remote_branch.return_value = False
        mock_git_client.has_local_branch.return_value = True
        WorkspaceService(mock_git_client).prepare(tmp_path, WorkspaceOptions())
        mock_git_client.checkout.assert_called_once_with(tmp_path / "data", "releases")
        mock_git_client.checkout_orphan.assert_not_called()

    def test_orphan_branch_created(self, mock_git_client, tmp_path):
        mock_git_client.has_remote_branch.return_value = False
        WorkspaceService(mock_git_client).prepare(tmp_path, WorkspaceOptions(branch="dist"))
        mock_git_client.checkout_orphan.assert_called_once_with(tmp_path / "data", "dist")

    def test_ci_sets_bot_identity(self, mock_git_client, tmp_path):
        options = WorkspaceOptions(ci=True, bot_name="Bot", bot_email="bot@example.com")
        WorkspaceService(mock_git_client).prepare(tmp_path, options)
        assert mock_git_client.set_config.call_args_list == [
            call(tmp_path / "data", 'user.name', "Bot"),
            call(tmp_path / "data", 'user.email', "bot@example.com"),
        ]

    def test_no_identity_outside_ci(self, mock_git_client, tmp_path):
        WorkspaceService(mock_git_client).prepare(tmp_path, WorkspaceOptions())
        mock_git_client.set_config.assert_not_called()

    def test_custom_data_dir(self, mock_git_client, tmp_path):
        data = WorkspaceService(mock_git_client).prepare(tmp_path, WorkspaceOptions(data_dir="out"))
        assert data == tmp_path / "out"
