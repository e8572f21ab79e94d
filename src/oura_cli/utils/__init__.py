"""Utility helpers for oura-cli."""
from oura_cli.utils.paths import get_config_dir, get_config_path, get_home_dir

__all__ = ["get_config_dir", "get_config_path", "get_home_dir"]
