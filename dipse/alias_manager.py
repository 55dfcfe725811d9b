# dipse/alias_manager.py

import copy
import logging
from typing import Optional

from dipse.errors import AliasExistsError, AliasNotFoundError
from dipse.mapping_parser import ConfigMapping, Entry

logger = logging.getLogger(__name__)


def format_alias(name: str, cmd: str) -> str:
    return f"{name}: {cmd}"


def list_aliases(entry: Entry, path: str, name: Optional[str] = None) -> str:
    """
    Returns a single "name: command" line for name, or every alias in the
    entry (one per line, sorted) when name is None.
    """
    if name is not None:
        if name not in entry:
            raise AliasNotFoundError(path, name)
        return format_alias(name, entry[name])
    return "\n".join(format_alias(n, entry[n]) for n in sorted(entry))


def _copy_with_entry(mapping: ConfigMapping, path: str):
    new_mapping = copy.deepcopy(mapping)
    return new_mapping, new_mapping.setdefault(path, {})


def add_alias(mapping: ConfigMapping, path: str, name: str, cmd: str) -> ConfigMapping:
    """Adds name to the entry for path. Never overwrites an existing alias."""
    new_mapping, entry = _copy_with_entry(mapping, path)
    if name in entry:
        raise AliasExistsError(path, name, entry[name])
    entry[name] = cmd
    logger.info(f"Added alias '{name}' -> '{cmd}' for {path}")
    return new_mapping


def update_alias(mapping: ConfigMapping, path: str, name: str, cmd: str) -> ConfigMapping:
    new_mapping, entry = _copy_with_entry(mapping, path)
    if name not in entry:
        raise AliasNotFoundError(path, name)
    old_cmd = entry[name]
    entry[name] = cmd
    logger.info(f"Updated alias '{name}' for {path}: '{old_cmd}' -> '{cmd}'")
    return new_mapping


def delete_alias(mapping: ConfigMapping, path: str, name: str) -> ConfigMapping:
    new_mapping, entry = _copy_with_entry(mapping, path)
    if name not in entry:
        raise AliasNotFoundError(path, name)
    del entry[name]
    logger.info(f"Deleted alias '{name}' for {path}")
    return new_mapping
