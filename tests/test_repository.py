"""Tests for repository discovery and initialization."""

import pytest

from chgit.errors import NotInitializedError, UsageError
from chgit.repo_utils import find_chgit_root_dir, init_repository, open_repository, relative_to_root


def test_init_creates_layout(tmp_path):
    repo, created = init_repository(tmp_path)

    assert created
    assert repo.objects_dir.is_dir()
    assert not repo.index_path.exists()
    assert not repo.head_path.exists()


def test_init_twice_is_a_no_op(tmp_path):
    init_repository(tmp_path)
    _, created = init_repository(tmp_path)
    assert not created


def test_root_is_found_from_subdirectory(repo, tmp_path):
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_chgit_root_dir(nested) == repo.root
    assert open_repository(nested) == repo


def test_open_uninitialized_directory(tmp_path):
    with pytest.raises(NotInitializedError):
        open_repository(tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_repositories_are_independent(tmp_path):
    first, _ = init_repository(tmp_path / "one")
    second, _ = init_repository(tmp_path / "two")
    assert first.objects_dir != second.objects_dir


class TestRelativeToRoot:
    def test_nested_file(self, repo, write_file):
        assert relative_to_root(repo, write_file("x/y.txt", "")) == "x/y.txt"

    def test_outside_repository(self, repo, tmp_path):
        with pytest.raises(UsageError):
            relative_to_root(repo, tmp_path.parent / "elsewhere.txt")

    def test_metadata_directory(self, repo):
        with pytest.raises(UsageError):
            relative_to_root(repo, repo.head_path)
