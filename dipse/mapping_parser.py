# dipse/mapping_parser.py

import logging
import tomllib
from typing import Dict

import tomli_w

from dipse.errors import EntryNotTableError, ParseError, SerializeError

logger = logging.getLogger(__name__)

# alias name -> shell command
Entry = Dict[str, str]
# absolute directory path -> Entry
ConfigMapping = Dict[str, Entry]


def parse(text: str) -> ConfigMapping:
    """
    Decodes configuration text into a ConfigMapping.

    Every top-level key must hold a table, and every value inside that table
    must be a string. Anything else fails the whole document.
    """
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ParseError(f"Could not parse configuration: {e}") from e

    mapping = {}
    for path, entry in document.items():
        if not isinstance(entry, dict):
            raise EntryNotTableError(path)
        for name, cmd in entry.items():
            if not isinstance(cmd, str):
                raise ParseError(
                    f"Command {name} for path {path} must be a string, got {type(cmd).__name__}"
                )
        mapping[path] = dict(entry)

    logger.debug(f"Parsed {len(mapping)} directory entries")
    return mapping


def encode(mapping: ConfigMapping) -> str:
    try:
        return tomli_w.dumps(mapping)
    except (TypeError, ValueError) as e:
        raise SerializeError(f"Could not serialize configuration: {e}") from e
