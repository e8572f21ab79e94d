"""
Path utility module for oura-cli.

Config locations are pure functions of a home directory so callers (and
tests) decide which root is used instead of the process-wide home lookup.
"""
from pathlib import Path
from typing import Optional, Union

CONFIG_DIR_NAME = "oura-cli"
CONFIG_FILE_NAME = "config.json"


def get_home_dir(override: Optional[Union[str, Path]] = None) -> Path:
    """
    Returns the home directory used as the configuration root.

    Args:
        override: Explicit root to use instead of the user's home directory.
    """
    if override:
        return Path(override).expanduser().resolve()
    return Path.home()


def get_config_dir(home: Union[str, Path]) -> Path:
    """Returns ``<home>/.config/oura-cli``."""
    return Path(home) / ".config" / CONFIG_DIR_NAME


def get_config_path(home: Union[str, Path]) -> Path:
    """Returns the credential file path under ``home``."""
    return get_config_dir(home) / CONFIG_FILE_NAME
