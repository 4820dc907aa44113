"""
Configuration file loading.
"""

from .loader import CONFIG_FILENAMES, find_config, read_config, load_config

__all__ = ["CONFIG_FILENAMES", "find_config", "read_config", "load_config"]
