"""
Unit tests for releaser.config module
"""
import json
import os
import logging

import pytest

from releaser.config import (
    apply_ci_environment,
    apply_env_overrides,
    configure_logging,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
)
from releaser.exit_codes import ConfigError


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Point HOME at an empty directory and drop CI variables."""
    monkeypatch.setenv('HOME', str(tmp_path))
    for key in ('RELEASER_CONFIG', 'DRY_RUN', 'CI', 'GITHUB_WORKSPACE'):
        monkeypatch.delenv(key, raising=False)
    for key in list(os.environ):
        if key.startswith('RELEASER_'):
            monkeypatch.delenv(key, raising=False)
    return tmp_path


class TestDefaults:
    """Tests for default configuration."""

    def test_default_sections(self):
        config = get_default_config()
        for section in ('workspace', 'git', 'archives', 'index', 'run', 'logging'):
            assert section in config
        assert config['git']['branch'] == "releases"
        assert config['git']['commit_message'] == "updated files"
        assert config['index']['title'] == "python releases"
        assert config['run']['dry_run'] is False

    def test_load_without_file(self):
        config = load_config()
        assert config == get_default_config()

    def test_default_path(self, clean_env):
        assert get_config_path() == clean_env / '.releaser' / 'config.json'


class TestConfigFiles:
    """Tests for loading JSON, TOML and YAML files."""

    def test_json_file(self, clean_env):
        path = clean_env / '.releaser' / 'config.json'
        path.parent.mkdir()
        path.write_text(json.dumps({'git': {'branch': 'dist'}}))

        config = load_config()
        assert config['git']['branch'] == 'dist'
        assert config['git']['remote'] == 'origin'

    def test_toml_file(self, clean_env, monkeypatch):
        path = clean_env / 'releaser.toml'
        path.write_text('[index]\ntitle = "node releases"\n')
        monkeypatch.setenv('RELEASER_CONFIG', str(path))

        assert load_config()['index']['title'] == "node releases"

    def test_yaml_file(self, clean_env, monkeypatch):
        path = clean_env / 'releaser.yaml'
        path.write_text('archives:\n  name: python\n')
        monkeypatch.setenv('RELEASER_CONFIG', str(path))

        assert load_config()['archives']['name'] == "python"

    def test_invalid_file_raises(self, clean_env, monkeypatch):
        path = clean_env / 'broken.json'
        path.write_text('{not json')
        monkeypatch.setenv('RELEASER_CONFIG', str(path))

        with pytest.raises(ConfigError):
            load_config()

    def test_non_mapping_raises(self, clean_env, monkeypatch):
        path = clean_env / 'list.yaml'
        path.write_text('- a\n- b\n')
        monkeypatch.setenv('RELEASER_CONFIG', str(path))

        with pytest.raises(ConfigError):
            load_config()


class TestEnvironment:
    """Tests for environment variable handling."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv('RELEASER_GIT_FORCE_PUSH', 'false')
        monkeypatch.setenv('RELEASER_GIT_REMOTE_URL', 'git@example.com:b.git')
        monkeypatch.setenv('RELEASER_GIT_TIMEOUT_SECONDS', '600')

        config = apply_env_overrides(get_default_config())
        assert config['git']['force_push'] is False
        assert config['git']['remote_url'] == 'git@example.com:b.git'
        assert config['git']['remote'] == 'origin'
        assert config['git']['timeout_seconds'] == 600

    def test_unknown_env_ignored(self, monkeypatch):
        monkeypatch.setenv('RELEASER_NOPE_VALUE', '1')
        assert apply_env_overrides(get_default_config()) == get_default_config()

    def test_ci_variables(self, monkeypatch):
        monkeypatch.setenv('DRY_RUN', 'true')
        monkeypatch.setenv('CI', 'true')
        monkeypatch.setenv('GITHUB_WORKSPACE', '/github/workspace')

        config = load_config()
        assert config['run']['dry_run'] is True
        assert config['run']['ci'] is True
        assert config['workspace']['root'] == '/github/workspace'

    def test_releaser_variables_win(self, monkeypatch):
        monkeypatch.setenv('DRY_RUN', 'true')
        monkeypatch.setenv('RELEASER_RUN_DRY_RUN', 'false')

        config = load_config()
        assert config['run']['dry_run'] is False

    def test_ci_false_value(self, monkeypatch):
        monkeypatch.setenv('CI', 'false')
        assert apply_ci_environment(get_default_config())['run']['ci'] is False


def test_merge_configs_nested():
    merged = merge_configs({'a': {'b': 1, 'c': 2}}, {'a': {'c': 3}, 'd': 4})
    assert merged == {'a': {'b': 1, 'c': 3}, 'd': 4}


def test_configure_logging_levels():
    config = get_default_config()
    assert configure_logging(config).level == logging.INFO
    assert configure_logging(config, debug=True).level == logging.DEBUG
    config['logging']['level'] = 'warning'
    assert configure_logging(config).level == logging.WARNING
    configure_logging(get_default_config())


def test_merge_configs_leaves_base_untouched():
    base = get_default_config()
    merged = merge_configs(base, {'git': {'branch': 'dist'}})
    assert merged['git']['branch'] == 'dist'
    assert base['git']['branch'] == 'releases'


def test_unknown_key_in_known_section_ignored(monkeypatch):
    monkeypatch.setenv('RELEASER_GIT_NOT_A_KEY', 'x')
    assert 'not_a_key' not in apply_env_overrides(get_default_config())['git']
