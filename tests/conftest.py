"""
Shared pytest fixtures for chgit tests.

Every test gets its own repository under ``tmp_path``.
"""

from pathlib import Path

import pytest

from chgit.models import Repository
from chgit.repo_utils import init_repository


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    """An initialized, empty repository rooted at tmp_path."""
    repository, created = init_repository(tmp_path)
    assert created
    return repository


@pytest.fixture
def write_file(tmp_path: Path):
    """Write text to a path relative to tmp_path, creating parent directories."""

    def _write(relative: str, text: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def object_files(repo: Repository):
    """Names of the files currently in the object store."""

    def _list() -> set[str]:
        return {p.name for p in repo.objects_dir.iterdir()}

    return _list
