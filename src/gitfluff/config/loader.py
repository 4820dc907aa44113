"""
Project configuration file discovery and decoding.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from ..errors import ConfigError

logger = logging.getLogger(__name__)

# Checked in order in each directory; .fluff.toml is the legacy name
CONFIG_FILENAMES = (".gitfluff.toml", ".fluff.toml")


def find_config(start_dir: Union[str, Path, None] = None) -> Optional[Path]:
    """
    Search `start_dir` and its parents for a config file.

    Args:
        start_dir: Directory to start from (defaults to the working directory)

    Returns:
        Path of the nearest config file, or None
    """
    directory = Path(start_dir or Path.cwd()).resolve()

    for candidate_dir in (directory, *directory.parents):
        for filename in CONFIG_FILENAMES:
            candidate = candidate_dir / filename
            if candidate.is_file():
                logger.debug(f"Found config file {candidate}")
                return candidate

    return None


def read_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read and decode one TOML config file.

    Raises:
        ConfigError: If the file can't be read or isn't valid TOML
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        reason = getattr(e, "strerror", None) or e
        raise ConfigError(f"failed to read config file {path}: {reason}", cause=e)

    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"failed to parse config file {path}: {e}", cause=e)


def load_config(
    explicit_path: Union[str, Path, None] = None,
    start_dir: Union[str, Path, None] = None,
) -> Optional[Tuple[Path, Dict[str, Any]]]:
    """
    Load the project config.

    An explicit path must exist; otherwise the nearest `.gitfluff.toml` or
    `.fluff.toml` is used when there is one.

    Returns:
        (path, decoded table) or None when no config file applies
    """
    if explicit_path is not None:
        path = Path(explicit_path)
        return path, read_config(path)

    path = find_config(start_dir)
    if path is None:
        logger.debug("No config file found, using preset defaults")
        return None

    return path, read_config(path)
