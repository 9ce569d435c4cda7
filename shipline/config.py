#!/usr/bin/env python3

import copy
import json
import os
import sys
import tomllib
import logging
from pathlib import Path
from typing import Optional

import yaml

from .exit_codes import ConfigError

logger = logging.getLogger("shipline")

CONFIG_FILENAMES = ['shipline.json', 'shipline.toml', 'shipline.yaml', 'shipline.yml']

SECRET_KEYS = (
    'feed_source',
    'feed_access_token',
    'nuget_api_key',
    'github_token',
    'teams_webhook_url',
)

DEFAULT_LOG_FORMAT = "%(levelname)s: %(message)s"


def setup_logging(level="INFO", fmt: Optional[str] = None):
    """Configure root logging to stderr, keeping stdout clean for output."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=fmt or DEFAULT_LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr)
        ],
        force=True,
    )


def get_config_path(root=None):
    """Get the path to the configuration file.

    Checks in order:
    1. SHIPLINE_CONFIG environment variable
    2. shipline.{json,toml,yaml,yml} in the repository root

    Returns None when no config file exists.
    """
    if 'SHIPLINE_CONFIG' in os.environ:
        path = Path(os.environ['SHIPLINE_CONFIG'])
        if path.exists():
            return path
        logger.warning(f"SHIPLINE_CONFIG points to missing file {path}")

    root_dir = Path(root) if root else Path.cwd()
    for filename in CONFIG_FILENAMES:
        path = root_dir / filename
        if path.exists():
            return path

    return None


def read_config_file(config_path: Path) -> dict:
    """Read a JSON, TOML or YAML config file into a dict."""
    try:
        suffix = config_path.suffix.lower()
        if suffix == '.toml':
            with open(config_path, 'rb') as f:
                file_config = tomllib.load(f)
        elif suffix in ('.yaml', '.yml'):
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f)
        else:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config from {config_path}: {e}") from e

    if file_config is None:
        return {}
    if not isinstance(file_config, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping at top level")
    return file_config


def load_config(root=None):
    """Load configuration: defaults, then config file, then environment overrides."""
    config = get_default_config()

    config_path = get_config_path(root)
    if config_path is not None:
        logger.debug(f"Using config from {config_path}")
        config = merge_configs(config, read_config_file(config_path))

    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "project": {
            "name": "",
            "project_dir": "src",
            "test_dir": "test",
            "changelog": "CHANGELOG.md",
            "output_dir": "output"
        },
        "parameters": {
            # Empty means: Debug for local builds, Release for server builds
            "configuration": ""
        },
        "secrets": {
            "feed_source": "",
            "feed_access_token": "",
            "nuget_api_key": "",
            "github_token": "",
            "teams_webhook_url": ""
        },
        "key_vault": {
            "base_url": "",
            "client_id": "",
            "client_secret": "",
            "tenant_id": "",
            "secret_names": {
                "feed_source": "PublicFeedSource",
                "feed_access_token": "FeedzAccessToken",
                "nuget_api_key": "NuGetApiKey",
                "github_token": "GitHubAuthenticationToken",
                "teams_webhook_url": "CiCdTeamsWebhookUrl"
            }
        },
        "tools": {
            "dotnet": "dotnet",
            "gitversion": ["dotnet-gitversion"],
            "timeout_seconds": 3600
        },
        "feeds": {
            "public_source": "https://api.nuget.org/v3/index.json"
        },
        "git": {
            "remote": "origin",
            "main_branches": ["main", "origin/main"]
        },
        "logging": {
            "level": "INFO",
            "format": DEFAULT_LOG_FORMAT
        }
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def coerce_env_value(env_key, value, current):
    """
    Convert an environment override to the type of the value it replaces.

    Strings (secrets, URLs, names) are kept verbatim. Lists are
    comma-separated, e.g. SHIPLINE_GIT_MAIN_BRANCHES=main,origin/main.
    """
    if isinstance(current, bool):
        lowered = value.strip().lower()
        if lowered in ('true', 'yes', 'on', '1'):
            return True
        if lowered in ('false', 'no', 'off', '0'):
            return False
        raise ConfigError(f"{env_key} must be a boolean, got '{value}'")
    if isinstance(current, int):
        try:
            return int(value)
        except ValueError as e:
            raise ConfigError(f"{env_key} must be an integer, got '{value}'") from e
    if isinstance(current, list):
        return [item.strip() for item in value.split(',') if item.strip()]
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: SHIPLINE_SECTION_KEY
    For example: SHIPLINE_SECRETS_NUGET_API_KEY=abc123
    """
    env_prefix = "SHIPLINE_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'SHIPLINE_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = coerce_env_value(env_key, value, current_level[matched_key])
                    break

                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    break
            else:
                break

    return config


def mask_secrets(config):
    """Return a copy of config with secret values replaced for display."""
    masked = copy.deepcopy(config)
    for key in SECRET_KEYS:
        if masked.get('secrets', {}).get(key):
            masked['secrets'][key] = '***'
    if masked.get('key_vault', {}).get('client_secret'):
        masked['key_vault']['client_secret'] = '***'
    return masked
