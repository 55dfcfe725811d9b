# --- API DOCUMENTATION for dipse/command_runner.py ---
#
# **Purpose:** Turns alias invocation tokens into shell commands and runs
# them one after another with the terminal handed straight to the child.
#
# **Public Functions:**
#
# def parse_invocation(tokens: List[str]) -> List[Tuple[str, List[str]]]:
#     """
#     Splits tokens into (alias, params) pairs. Tokens after the first "--"
#     are params of the alias right before it; every other alias gets none.
#     e.g. ["build", "run", "--", "--release"]
#          -> [("build", []), ("run", ["--release"])]
#     """
#
# def execute(tokens, entry, path, debug=False, dry_run=False) -> int:
#     """
#     Resolves every alias (fail-fast), then runs each command through
#     `sh -c`. Stops at the first command that exits nonzero.
#
#     Returns:
#         int: 0, or the exit code of the first failing command.
#     """
#
# def open_editor(path: str) -> int:
#     """Opens $VISUAL / $EDITOR (default: vi) on path."""
#
# --- END API DOCUMENTATION ---

import os
import shlex
import subprocess
import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from dipse.errors import AliasNotFoundError, CommandError, InvocationError
from dipse.mapping_parser import Entry

logger = logging.getLogger(__name__)

SEPARATOR = "--"
SHELL = "sh"
DEFAULT_EDITOR = "vi"


@dataclass
class CommandParams:
    """A resolved command string and the params appended to it."""
    alias: str
    cmd_str: str
    params: List[str] = field(default_factory=list)

    def __str__(self):
        if not self.params:
            return self.cmd_str
        return f"{self.cmd_str} {' '.join(self.params)}"


def parse_invocation(tokens: List[str]) -> List[Tuple[str, List[str]]]:
    if SEPARATOR not in tokens:
        return [(token, []) for token in tokens]

    idx = tokens.index(SEPARATOR)
    if idx == 0:
        raise InvocationError(f"Expected an alias before '{SEPARATOR}'")

    invocation = [(token, []) for token in tokens[:idx - 1]]
    invocation.append((tokens[idx - 1], list(tokens[idx + 1:])))
    return invocation


def build_commands(invocation: List[Tuple[str, List[str]]], entry: Entry, path: str) -> List[CommandParams]:
    commands = []
    for alias, params in invocation:
        if alias not in entry:
            raise AliasNotFoundError(path, alias)
        commands.append(CommandParams(alias=alias, cmd_str=entry[alias], params=params))
    return commands


def run_shell_command(command: str) -> int:
    """Runs command via `sh -c` with inherited stdin/stdout/stderr and waits for it."""
    logger.info(f"Running: {command}")
    try:
        completed = subprocess.run([SHELL, "-c", command], check=False)
    except OSError as e:
        logger.error(f"Failed to spawn '{command}': {e}", exc_info=True)
        raise CommandError(command, e) from e
    returncode = completed.returncode
    if returncode < 0:
        # Killed by a signal; report it the way shells do.
        returncode = 128 - returncode
    logger.info(f"Command exited with code {returncode}: {command}")
    return returncode


def execute(tokens: List[str], entry: Entry, path: str, debug: bool = False, dry_run: bool = False) -> int:
    commands = build_commands(parse_invocation(tokens), entry, path)

    for cmd in commands:
        if debug:
            print(f"`{cmd}`")
        if dry_run:
            logger.info(f"Dry run, not executing: {cmd}")
            continue
        returncode = run_shell_command(str(cmd))
        if returncode != 0:
            logger.warning(f"Alias '{cmd.alias}' failed with exit code {returncode}; stopping.")
            return returncode
    return 0


def open_editor(path: str) -> int:
    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR
    return run_shell_command(f"{editor} {shlex.quote(path)}")
