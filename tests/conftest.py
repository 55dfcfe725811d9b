# tests/conftest.py
#
# Shared fixtures for the dipse test suite.

import sys
import os

import pytest

# Add the project root to the Python path so 'dipse' imports without installing.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


@pytest.fixture
def project_dir(tmp_path):
    """A canonical project directory with a nested subdirectory."""
    root = tmp_path / "project"
    (root / "src" / "pkg").mkdir(parents=True)
    return os.path.realpath(str(root))


@pytest.fixture
def write_config():
    """Writes a mapping-shaped TOML document to path and returns the path."""
    def _write(path, text):
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
        return str(path)
    return _write
