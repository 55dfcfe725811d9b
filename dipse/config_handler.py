# --- API DOCUMENTATION for dipse/config_handler.py ---
#
# **Purpose:** Finds, creates, reads and writes the alias configuration file.
#
# **Public Functions:**
#
# def locate(start_dir: Optional[str] = None) -> Optional[str]:
#     """Walks upwards from start_dir (default: cwd) looking for a .d.toml file."""
#
# def global_config_path() -> str:
#     """Returns <user config dir>/dipse/d.toml."""
#
# def find_config_path(override: Optional[str] = None, allow_new: bool = False) -> str:
#     """
#     Resolves which configuration file applies: the override, then the
#     nearest .d.toml, then the global file (created empty on first use).
#     """
#
# def read_config_text(path: str) -> str:
# def write_config_text(path: str, text: str):
#     """Reads / atomically rewrites the whole configuration file."""
#
# def init_project_config(directory: Optional[str] = None) -> str:
#     """Creates a .d.toml holding an empty table for the directory."""
#
# **Key Global Constants/Variables:**
# - MARKER_FILENAME: name of the project-local configuration file (".d.toml").
# - APP_NAME / GLOBAL_CONFIG_FILENAME: used to build the global config path.
#
# --- END API DOCUMENTATION ---

import os
import stat
import tempfile
import logging
from typing import Optional

import platformdirs

from dipse import mapping_parser
from dipse.errors import (
    ConfigDirCreationError,
    ConfigDirError,
    ConfigExistsError,
    ConfigFileCreationError,
    ConfigFileWriteError,
    CurrentDirError,
    NewConfigError,
    NoFileError,
    ParseError,
)

# --- Module-specific logger ---
logger = logging.getLogger(__name__)

APP_NAME = "dipse"
MARKER_FILENAME = ".d.toml"
GLOBAL_CONFIG_FILENAME = "d.toml"


def get_current_dir() -> str:
    """Returns the canonical current working directory."""
    try:
        return os.path.realpath(os.getcwd())
    except OSError as e:
        raise CurrentDirError(e) from e


def locate(start_dir: Optional[str] = None) -> Optional[str]:
    """
    Looks for MARKER_FILENAME in start_dir and then in each parent directory.

    Args:
        start_dir (Optional[str]): Directory to start from. Defaults to the
                                   canonical current working directory.

    Returns:
        Optional[str]: Path of the first marker file found, or None once the
                       filesystem root has been checked.
    """
    current = get_current_dir() if start_dir is None else os.path.realpath(start_dir)

    while True:
        candidate = os.path.join(current, MARKER_FILENAME)
        if os.path.isfile(candidate):
            logger.debug(f"Found project config at {candidate}")
            return candidate
        parent = os.path.dirname(current)
        if parent == current:
            logger.debug(f"No {MARKER_FILENAME} found above {start_dir or current}")
            return None
        current = parent


def global_config_path() -> str:
    config_dir = platformdirs.user_config_dir(APP_NAME, appauthor=False)
    if not config_dir:
        raise ConfigDirError()
    return os.path.join(config_dir, GLOBAL_CONFIG_FILENAME)


def ensure_global_config() -> str:
    """
    Returns the global config path, creating an empty file there first if needed.

    Raises:
        NewConfigError: The file did not exist and was just created. The user
                        has to fill it in before dipse can do anything useful.
    """
    config_file = global_config_path()
    if os.path.exists(config_file):
        return config_file

    config_dir = os.path.dirname(config_file)
    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        raise ConfigDirCreationError(config_dir, e) from e

    try:
        with open(config_file, 'w', encoding='utf-8'):
            pass
    except OSError as e:
        raise ConfigFileCreationError(config_file, e) from e

    logger.info(f"Created empty global configuration at {config_file}")
    raise NewConfigError(config_file)


def find_config_path(override: Optional[str] = None, allow_new: bool = False) -> str:
    """
    Resolves the configuration file for this invocation.

    An explicit override always wins. Otherwise the nearest project-local
    marker file is used, and failing that the global configuration.

    Args:
        override (Optional[str]): Path given with --config-path.
        allow_new (bool): Return a freshly created global file instead of
                          raising NewConfigError (used by `edit`).
    """
    if override:
        logger.info(f"Using configuration from --config-path: {override}")
        return override

    project_config = locate()
    if project_config:
        logger.info(f"Using project configuration: {project_config}")
        return project_config

    try:
        config_file = ensure_global_config()
    except NewConfigError as e:
        if not allow_new:
            raise
        config_file = e.path
    logger.info(f"Using global configuration: {config_file}")
    return config_file


def read_config_text(path: str) -> str:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as e:
        logger.error(f"Error reading config file {path}: {e}")
        raise NoFileError(path, e) from e
    except UnicodeDecodeError as e:
        logger.error(f"Config file {path} is not valid UTF-8: {e}")
        raise ParseError(f"Could not parse configuration {path}: not valid UTF-8 ({e})") from e


def write_config_text(path: str, text: str):
    """
    Replaces the configuration file content with text.

    The new content is written to a temporary file next to the target and
    renamed over it, so readers see either the old or the new file.
    A symlinked path is resolved first so the link target gets the new
    content and the link itself stays in place.
    """
    path = os.path.realpath(path)
    directory = os.path.dirname(path)
    try:
        mode = stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        mode = None
    except OSError as e:
        raise ConfigFileWriteError(path, e) from e

    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".dipse-", suffix=".tmp", dir=directory)
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError as e:
        logger.error(f"Error writing config file {path}: {e}", exc_info=True)
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise ConfigFileWriteError(path, e) from e

    logger.info(f"Successfully saved configuration to {path}")


def init_project_config(directory: Optional[str] = None) -> str:
    """
    Creates MARKER_FILENAME in directory (default: cwd) with an empty table
    keyed by the canonical directory path.

    Returns:
        str: Path of the created file.
    """
    directory = get_current_dir() if directory is None else os.path.realpath(directory)
    config_file = os.path.join(directory, MARKER_FILENAME)
    if os.path.exists(config_file):
        raise ConfigExistsError(config_file)

    text = mapping_parser.encode({directory: {}})
    try:
        with open(config_file, 'x', encoding='utf-8') as f:
            f.write(text)
    except FileExistsError as e:
        raise ConfigExistsError(config_file) from e
    except OSError as e:
        raise ConfigFileCreationError(config_file, e) from e

    logger.info(f"Initialized project configuration at {config_file}")
    return config_file
