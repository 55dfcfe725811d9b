# dipse/resolver.py

"""
Chooses which configured directory applies to the working directory.

A configured path applies when it is the working directory itself or one
of its ancestors, compared segment by segment (/a/b covers /a/b/c but not
/a/bc). Among the applicable paths the deepest one wins.
"""

import os
import logging
from typing import List, Tuple

from dipse.errors import NoConfigForPathError
from dipse.mapping_parser import ConfigMapping, Entry

logger = logging.getLogger(__name__)


def _segments(path: str) -> List[str]:
    return [part for part in os.path.normpath(path).split(os.sep) if part]


def is_ancestor_or_self(path: str, cwd: str) -> bool:
    """True if path equals cwd or is one of its parent directories."""
    if not os.path.isabs(path):
        return False
    path_parts = _segments(path)
    cwd_parts = _segments(cwd)
    return cwd_parts[:len(path_parts)] == path_parts


def _specificity(path: str):
    # Most segments first, then longest string, then name for a stable order.
    return (-len(_segments(path)), -len(os.path.normpath(path)), path)


def matching_paths(mapping: ConfigMapping, cwd: str, legacy: bool = False) -> List[str]:
    """
    Returns the configured paths covering cwd, best match first.

    Args:
        mapping (ConfigMapping): The full configuration.
        cwd (str): Absolute working directory.
        legacy (bool): Order lexicographically instead of by depth. Older
                       releases picked the first path in that order, which
                       can prefer /a over /a/b.
    """
    candidates = [path for path in mapping if is_ancestor_or_self(path, cwd)]
    if legacy:
        return sorted(candidates)
    return sorted(candidates, key=_specificity)


def resolve(mapping: ConfigMapping, cwd: str, legacy: bool = False) -> Tuple[str, Entry]:
    """
    Returns the (path, entry) pair that applies to cwd.

    Raises:
        NoConfigForPathError: No configured path covers cwd.
    """
    candidates = matching_paths(mapping, cwd, legacy=legacy)
    if not candidates:
        raise NoConfigForPathError(cwd)

    logger.debug(f"Entries applying to {cwd}: {candidates}")
    path = candidates[0]
    logger.info(f"Resolved {cwd} to configured path {path}")
    return path, mapping[path]
