#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("releaser")

TRUE_VALUES = ('true', '1', 'yes', 'on')
FALSE_VALUES = ('false', '0', 'no', 'off')
ENV_PREFIX = "RELEASER_"


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. RELEASER_CONFIG environment variable
    2. ~/.releaser/ directory
    """
    # Check for environment variable override
    if 'RELEASER_CONFIG' in os.environ:
        path = Path(os.environ['RELEASER_CONFIG'])
        if path.exists():
            return path

    releaser_dir = Path.home() / '.releaser'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = releaser_dir / filename
        if path.exists() and path.stat().st_size > 10:  # Not empty/trivial
            return path

    # If no file exists, return default path
    return releaser_dir / 'config.json'


def read_config_file(config_path):
    """Read a JSON, TOML or YAML config file into a dict."""
    suffix = config_path.suffix.lower()
    try:
        if suffix == '.toml':
            with open(config_path, 'rb') as f:
                return tomllib.load(f)
        if suffix in ['.yaml', '.yml']:
            with open(config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        with open(config_path, 'r') as f:
            return json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config from {config_path}: {e}") from e


def load_config():
    """Load configuration from file, then environment."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        file_config = read_config_file(config_path)
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        # Merge file config with defaults
        config = merge_configs(config, file_config)
        logger.debug(f"Loaded config from {config_path}")

    # Apply environment variable overrides
    config = apply_env_overrides(config)
    config = apply_ci_environment(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "workspace": {
            "root": "",             # Empty means current directory
            "data_dir": "data",
            "cache_dir": ".cache",
        },
        "git": {
            "remote": "origin",
            "remote_url": "",       # Empty means the workspace repo's remote
            "branch": "releases",
            "force_push": True,
            "commit_message": "updated files",
            "bot_name": "Renovate Bot",
            "bot_email": "bot@renovateapp.com",
            "timeout_seconds": 0,   # 0 disables the timeout
        },
        "archives": {
            "name": "",             # Regex for the archive name prefix, empty = any
            "index_file": "README.md",
        },
        "index": {
            "title": "python releases",
            "intro": "Prebuild python builds for ubuntu",
            "section_heading": "ubuntu {group}",
        },
        "run": {
            "dry_run": False,
            "ci": False,
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
    }


def merge_configs(base_config, override_config):
    """
    Overlay a configuration onto another one section at a time.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Sections whose keys replace the base ones

    Returns:
        dict: Merged configuration
    """
    merged = {
        section: dict(values) if isinstance(values, dict) else values
        for section, values in base_config.items()
    }
    for section, values in override_config.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def _typed(value):
    if value.lower() in TRUE_VALUES:
        return True
    if value.lower() in FALSE_VALUES:
        return False
    if value.isdigit():
        return int(value)
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: RELEASER_SECTION_KEY
    For example: RELEASER_GIT_FORCE_PUSH=false

    Section names hold no underscore, so everything after the first one
    is the key. Unknown sections and keys are ignored.
    """
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX) or env_key == 'RELEASER_CONFIG':
            continue

        section, _, key = env_key[len(ENV_PREFIX):].lower().partition('_')
        values = config.get(section)
        if isinstance(values, dict) and key in values:
            values[key] = _typed(value)

    return config


def apply_ci_environment(config):
    """
    Honor the conventional CI variables DRY_RUN, CI and GITHUB_WORKSPACE.

    RELEASER_* variables win over these.
    """
    run = config.setdefault("run", {})
    workspace = config.setdefault("workspace", {})

    if 'RELEASER_RUN_DRY_RUN' not in os.environ and os.environ.get('DRY_RUN'):
        run["dry_run"] = os.environ['DRY_RUN'].lower() in TRUE_VALUES
    if 'RELEASER_RUN_CI' not in os.environ and os.environ.get('CI'):
        run["ci"] = os.environ['CI'].lower() in TRUE_VALUES
    if 'RELEASER_WORKSPACE_ROOT' not in os.environ and os.environ.get('GITHUB_WORKSPACE'):
        workspace["root"] = os.environ['GITHUB_WORKSPACE']

    return config


def configure_logging(config, debug=False):
    """Apply the logging section of ``config`` to the releaser logger."""
    settings = config.get("logging", {})
    level = logging.DEBUG if debug else getattr(logging, str(settings.get("level", "INFO")).upper(), logging.INFO)
    logger.setLevel(level)
    fmt = settings.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))
    return logger
