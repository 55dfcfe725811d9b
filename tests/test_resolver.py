# tests/test_resolver.py

import logging

import pytest

from dipse import resolver
from dipse.errors import NoConfigForPathError

MAPPING = {
    "/home/user": {"run": "echo home"},
    "/home/user/project": {"run": "cargo run"},
    "/home/user/project/web": {"run": "npm start"},
    "/srv/app": {"run": "./serve"},
}


@pytest.mark.parametrize("cwd, expected", [
    ("/home/user/project", "/home/user/project"),
    ("/home/user/project/src/bin", "/home/user/project"),
    ("/home/user/project/web", "/home/user/project/web"),
    ("/home/user/project/web/assets", "/home/user/project/web"),
    ("/home/user/notes", "/home/user"),
    ("/srv/app", "/srv/app"),
])
def test_resolve_picks_deepest_ancestor(cwd, expected):
    path, entry = resolver.resolve(MAPPING, cwd)
    assert path == expected
    assert entry is MAPPING[expected]


def test_resolve_uses_segment_prefix_not_string_prefix():
    mapping = {"/home/user/proj": {"run": "a"}}
    with pytest.raises(NoConfigForPathError):
        resolver.resolve(mapping, "/home/user/project")


def test_resolve_no_config_for_path():
    with pytest.raises(NoConfigForPathError) as excinfo:
        resolver.resolve(MAPPING, "/opt/elsewhere")
    assert excinfo.value.path == "/opt/elsewhere"
    assert "No entries found for path: /opt/elsewhere" in str(excinfo.value)


def test_resolve_empty_mapping():
    with pytest.raises(NoConfigForPathError):
        resolver.resolve({}, "/home/user")


def test_resolve_root_entry_covers_everything():
    path, _ = resolver.resolve({"/": {"ls": "ls"}}, "/var/log")
    assert path == "/"


def test_resolve_ignores_trailing_slash_in_keys():
    mapping = {"/home/user/project/": {"run": "cargo run"}}
    path, _ = resolver.resolve(mapping, "/home/user/project/src")
    assert path == "/home/user/project/"


def test_relative_keys_never_match():
    assert not resolver.is_ancestor_or_self("home/user", "/home/user")


def test_legacy_resolution_picks_lexicographically_first():
    path, _ = resolver.resolve(MAPPING, "/home/user/project/web", legacy=True)
    assert path == "/home/user"


def test_matching_paths_order():
    assert resolver.matching_paths(MAPPING, "/home/user/project/web/x") == [
        "/home/user/project/web",
        "/home/user/project",
        "/home/user",
    ]


def test_resolve_logs_choice(caplog):
    caplog.set_level(logging.INFO)
    resolver.resolve(MAPPING, "/srv/app/static")
    assert "Resolved /srv/app/static to configured path /srv/app" in caplog.text
