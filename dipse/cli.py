# dipse/cli.py

import os
import sys
import argparse
import logging
from typing import List, Optional

import platformdirs
from rich.console import Console
from rich.table import Table
from rich.text import Text

from dipse import alias_manager, command_runner, config_handler, mapping_parser, resolver
from dipse.errors import ConfigExistsError, DipseError, NewConfigError

logger = logging.getLogger(__name__)

VERSION = "0.3.0"
LOG_FILENAME = "dipse.log"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'

# --- Help Text ---
HELP_TEXT = """
dipse: Directory Independent Project Script Executor

The same alias runs a different command depending on the project you are in.
A `run` alias can be `cargo run` in one directory and `npm run start` in another.

Usage:
  dipse [options] <alias> [<alias> ...] [-- <args...>]
  dipse [options] <subcommand> [arguments]

Running aliases:
  dipse build                 - Runs the command mapped to 'build'.
  dipse build run             - Runs 'build', then 'run'. Stops at the first failure.
  dipse build run -- --release
                              - Appends '--release' to the last alias before '--'.

Subcommands:
  add <name> <cmd>            - Adds an alias for the current directory.
  list [name]                 - Lists all aliases, or just one.
  update <name> <cmd>         - Changes the command of an existing alias.
                                A command starting with a dash goes after "--":
                                dipse add verbose -- -v
  delete <name>               - Removes an alias.
  edit                        - Opens the configuration file in $EDITOR.
  init                        - Creates a .d.toml in the current directory.

Options:
  -f, --config-path <path>    - Uses this configuration file instead of searching for one.
  -d, --debug                 - Prints each command before running it.
  -n, --no-op, --dry-run      - Resolves aliases but runs and writes nothing.
  -h, --help                  - Shows this help message.
  --version                   - Shows the version.

Configuration:
  dipse looks for a .d.toml file in the current directory and its parents,
  then falls back to the global file in your config directory (dipse/d.toml).
  Each table maps a directory to its aliases:

    ["/home/user/project"]
    run = "cargo run"
    build = "cargo build"
"""

SUBCOMMANDS = ("add", "list", "update", "delete", "edit", "init")
FLAGS_WITH_VALUE = ("-f", "--config-path")


class HelpAction(argparse.Action):
    def __init__(self, option_strings, dest, **kwargs):
        super(HelpAction, self).__init__(option_strings, dest, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        print(HELP_TEXT)
        parser.exit()


def _add_global_flags(parser, suppress: bool):
    """
    Adds the options accepted both before and after a subcommand.

    After a subcommand the defaults are suppressed so that values given
    before the subcommand are not reset.
    """
    default = argparse.SUPPRESS
    parser.add_argument('-f', '--config-path', metavar='<path>',
                        default=default if suppress else None,
                        help="Configuration file to use instead of searching for one.")
    parser.add_argument('-d', '--debug', action='store_true',
                        default=default if suppress else False,
                        help="Print each command before running it.")
    parser.add_argument('-n', '--no-op', '--dry-run', dest='no_op', action='store_true',
                        default=default if suppress else False,
                        help="Resolve aliases but do not run or write anything.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dipse", description="Directory scoped command aliases.", add_help=False)
    parser.add_argument('-h', '--help', action=HelpAction, help='show this help message and exit')
    parser.add_argument('--version', action='version', version=f"%(prog)s {VERSION}")
    _add_global_flags(parser, suppress=False)
    return parser


def build_subcommand_parser(name: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=f"dipse {name}")
    _add_global_flags(parser, suppress=True)
    if name in ("add", "update"):
        parser.add_argument('name', help="Alias name.")
        parser.add_argument('cmd', help="Shell command the alias runs.")
    elif name == "list":
        parser.add_argument('name', nargs='?', default=None, help="Only show this alias.")
    elif name == "delete":
        parser.add_argument('name', help="Alias name.")
    return parser


def split_argv(argv: List[str]):
    """
    Splits argv into the leading global options and the rest.

    The rest starts at the first token that is not an option (or at "--").
    Everything from there on belongs to the subcommand or the alias
    invocation, including tokens that look like options.
    """
    i = 0
    while i < len(argv):
        token = argv[i]
        if token == command_runner.SEPARATOR or not token.startswith('-'):
            break
        i += 2 if token in FLAGS_WITH_VALUE else 1
    return argv[:i], argv[i:]


def print_entry(path: str, entry: dict, console: Optional[Console] = None):
    console = console or Console()
    if not entry:
        console.print(Text(f"No aliases configured for {path}."))
        return

    table = Table(title=Text(path), show_header=True, header_style="bold")
    table.add_column("Alias", style="cyan", no_wrap=True)
    table.add_column("Command")
    for name in sorted(entry):
        table.add_row(Text(name), Text(entry[name]))
    console.print(table)


def load_context(config_path: Optional[str]):
    """Runs the locate -> read -> parse -> resolve pipeline."""
    config_file = config_handler.find_config_path(config_path)
    mapping = mapping_parser.parse(config_handler.read_config_text(config_file))
    cwd = config_handler.get_current_dir()
    path, entry = resolver.resolve(mapping, cwd)
    return config_file, mapping, path, entry


def handle_init(opts) -> int:
    if opts.config_path:
        raise ConfigExistsError(opts.config_path)
    if opts.no_op:
        config_file = os.path.join(config_handler.get_current_dir(), config_handler.MARKER_FILENAME)
        logger.info(f"Dry run, not creating {config_file}")
        print(f"(dry run) Would create {config_file}.")
        return 0
    config_file = config_handler.init_project_config()
    print(f"✅ Created {config_file}. Add aliases with `dipse add <name> <cmd>`.")
    return 0


def handle_edit(opts) -> int:
    config_file = config_handler.find_config_path(opts.config_path, allow_new=True)
    return command_runner.open_editor(config_file)


def handle_crud(command: str, opts) -> int:
    config_file, mapping, path, entry = load_context(opts.config_path)

    if command == "list":
        if opts.name is not None:
            print(alias_manager.list_aliases(entry, path, opts.name))
        else:
            print_entry(path, entry)
        return 0

    if command == "add":
        new_mapping = alias_manager.add_alias(mapping, path, opts.name, opts.cmd)
        done = f"✅ Alias '{opts.name}' added for {path}."
    elif command == "update":
        new_mapping = alias_manager.update_alias(mapping, path, opts.name, opts.cmd)
        done = f"✅ Alias '{opts.name}' updated for {path}."
    else:
        new_mapping = alias_manager.delete_alias(mapping, path, opts.name)
        done = f"🗑️ Alias '{opts.name}' removed for {path}."

    new_text = mapping_parser.encode(new_mapping)
    if opts.no_op:
        logger.info(f"Dry run, not writing {config_file}")
        print(f"(dry run) {done}")
        return 0
    config_handler.write_config_text(config_file, new_text)
    print(done)
    return 0


def handle_invocation(tokens: List[str], opts) -> int:
    _config_file, _mapping, path, entry = load_context(opts.config_path)
    return command_runner.execute(tokens, entry, path, debug=opts.debug, dry_run=opts.no_op)


def run(argv: Optional[List[str]] = None) -> int:
    """Runs one dipse invocation and returns the process exit code."""
    argv = sys.argv[1:] if argv is None else list(argv)
    leading, rest = split_argv(argv)
    opts = build_parser().parse_args(leading)

    if not rest:
        print(HELP_TEXT)
        return 0

    command = rest[0]
    logger.info(f"dipse invoked with {argv}")
    try:
        if command in SUBCOMMANDS:
            opts = build_subcommand_parser(command).parse_args(rest[1:], namespace=opts)
            if command == "init":
                return handle_init(opts)
            if command == "edit":
                return handle_edit(opts)
            return handle_crud(command, opts)
        return handle_invocation(rest, opts)
    except NewConfigError as e:
        logger.info(str(e))
        print(f"ℹ️ {e}", file=sys.stderr)
        return e.exit_code
    except DipseError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"❌ Error: {e}", file=sys.stderr)
        return e.exit_code


def setup_logging():
    level = logging.getLevelName(os.environ.get("DIPSE_LOG_LEVEL", "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    log_dir = platformdirs.user_log_dir(config_handler.APP_NAME, appauthor=False)
    try:
        os.makedirs(log_dir, exist_ok=True)
        handlers = [logging.FileHandler(os.path.join(log_dir, LOG_FILENAME))]
    except OSError:
        handlers = [logging.NullHandler()]

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)


def main():
    setup_logging()
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        print()
        sys.exit(130)


if __name__ == "__main__":
    main()
