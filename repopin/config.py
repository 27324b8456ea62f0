#!/usr/bin/env python3

import os
import json
import tomllib
import hashlib
from pathlib import Path

import logging
import sys

import toml
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
logger = logging.getLogger("repopin")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. REPOPIN_CONFIG environment variable
    2. ~/.repopin/ directory
    """
    if 'REPOPIN_CONFIG' in os.environ:
        path = Path(os.environ['REPOPIN_CONFIG'])
        if path.exists():
            return path

    repopin_dir = Path.home() / '.repopin'
    for filename in CONFIG_FILENAMES:
        path = repopin_dir / filename
        if path.exists() and path.stat().st_size > 10:  # Not empty/trivial
            return path

    # If no file exists, return default path for saving
    return repopin_dir / 'config.json'


def _read_config_file(config_path: Path) -> dict:
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    # Load from file if it exists
    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        config = merge_configs(config, file_config)

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    validate_config(config)
    return config


def save_config(config, config_path=None):
    """Save configuration to file."""
    config_path = Path(config_path) if config_path else get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = config_path.suffix.lower()
    with open(config_path, 'w') as f:
        if suffix == '.toml':
            toml.dump(config, f)
        elif suffix in ('.yaml', '.yml'):
            yaml.safe_dump(config, f, default_flow_style=False)
        else:
            json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def get_default_config():
    """Get default configuration."""
    return {
        "git": {
            "executable": "git",
            "timeout_seconds": 300,
            "clone_depth": 1
        },
        "verify": {
            "executable": "git",
            "io_mode": "silent"
        },
        "digest": {
            "algorithm": "sha512",
            "workers": 1,
            "chunk_size": 65536
        },
        "versions": {
            "scheme": "semver"
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        }
    }


def check_hash_algorithm(name):
    """
    Ensure `name` is a hashlib algorithm with a fixed digest size.

    SHAKE variants have no fixed digest size and are rejected.

    Raises:
        ConfigError: If the algorithm is unknown or variable-length
    """
    try:
        digest_size = hashlib.new(name).digest_size
    except (TypeError, ValueError):
        digest_size = 0
    if not digest_size:
        raise ConfigError(f"Unsupported hash algorithm: {name}")
    return name


def validate_config(config):
    """
    Reject settings that would only fail later, mid-operation.

    Raises:
        ConfigError: If a value is unusable
    """
    check_hash_algorithm(config.get("digest", {}).get("algorithm", "sha512"))

    workers = config.get("digest", {}).get("workers", 1)
    if not isinstance(workers, int) or workers < 1:
        raise ConfigError(f"digest.workers must be a positive integer, got {workers!r}")

    io_mode = config.get("verify", {}).get("io_mode", "silent")
    if io_mode not in ("silent", "inherit", "capture"):
        raise ConfigError(f"verify.io_mode must be silent, inherit or capture, got {io_mode!r}")

    depth = config.get("git", {}).get("clone_depth", 1)
    if not isinstance(depth, int) or depth < 1:
        raise ConfigError(f"git.clone_depth must be a positive integer, got {depth!r}")


def configure_logging(config, verbose=False):
    """Apply the configured log level and format to the repopin logger."""
    log_config = config.get("logging", {})
    level = "DEBUG" if verbose else str(log_config.get("level", "INFO")).upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    fmt = log_config.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


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
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: REPOPIN_SECTION_KEY
    For example: REPOPIN_DIGEST_ALGORITHM=sha256
    """
    env_prefix = "REPOPIN_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "REPOPIN_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

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
                # If we are at the end of the env var, we have found the key to set
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                # Otherwise, we descend into the dictionary
                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                # No match found
                break

    return config
