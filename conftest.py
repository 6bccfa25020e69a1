"""Root conftest.py - excludes example scripts from pytest collection."""

collect_ignore_glob = [
    "examples/*.py",
]
