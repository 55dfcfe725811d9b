# dipse/errors.py

"""
Exceptions raised by dipse.

Every error carries a message that is shown to the user as-is, so the
message must name the path or alias involved.
"""


class DipseError(Exception):
    """Base class for all errors that end a dipse invocation."""
    exit_code = 1

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


# --- I/O ---

class NoFileError(DipseError):
    def __init__(self, path, cause):
        super().__init__(f"Could not read file: {path}\n{cause}")
        self.path = path


class CurrentDirError(DipseError):
    def __init__(self, cause=None):
        message = "Unable to access the current working directory."
        if cause is not None:
            message = f"{message}\n{cause}"
        super().__init__(message)


class ConfigDirError(DipseError):
    def __init__(self):
        super().__init__("Could not access config directory")


class ConfigDirCreationError(DipseError):
    def __init__(self, path, cause):
        super().__init__(f"Could not create configuration directory: {path}\n{cause}")
        self.path = path


class ConfigFileCreationError(DipseError):
    def __init__(self, path, cause):
        super().__init__(f"Could not create configuration file: {path}\n{cause}")
        self.path = path


class ConfigFileWriteError(DipseError):
    def __init__(self, path, cause):
        super().__init__(f"Could not write to config file: {path}\n{cause}")
        self.path = path


# --- Parsing ---

class ParseError(DipseError):
    pass


class EntryNotTableError(ParseError):
    def __init__(self, path):
        super().__init__(f"Entry for {path} is not a table")
        self.path = path


class SerializeError(DipseError):
    pass


# --- Lookup ---

class NoConfigForPathError(DipseError):
    def __init__(self, path):
        super().__init__(f"No entries found for path: {path}")
        self.path = path


class AliasNotFoundError(DipseError):
    def __init__(self, path, name):
        super().__init__(f"No command {name} found for path: {path}")
        self.path = path
        self.name = name


class AliasExistsError(DipseError):
    def __init__(self, path, name, existing_cmd):
        super().__init__(
            f"Command {name} already exists for path: {path} ({name} = {existing_cmd!r})"
        )
        self.path = path
        self.name = name
        self.existing_cmd = existing_cmd


class ConfigExistsError(DipseError):
    def __init__(self, path):
        super().__init__(f"Configuration file already exists: {path}")
        self.path = path


class InvocationError(DipseError):
    pass


# --- Execution ---

class CommandError(DipseError):
    def __init__(self, command, cause):
        super().__init__(f"Could not run `{command}`\n{cause}")
        self.command = command


# --- Bootstrap ---

class NewConfigError(DipseError):
    """A configuration file was just created empty and has to be filled in."""

    def __init__(self, path):
        super().__init__(f"Empty configuration file. Please edit {path}")
        self.path = path
