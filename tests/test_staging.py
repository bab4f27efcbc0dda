"""Tests for the staging index."""

import pytest

from chgit.errors import CorruptIndexError
from chgit.models import IndexEntry
from chgit.staging_helpers import clear_staging_info, entries, get_staging_info, stage, stage_all

A = "a" * 64
B = "b" * 64
C = "c" * 64


def test_empty_index_has_no_entries(repo):
    assert entries(repo) == []
    assert not repo.index_path.exists()


def test_new_paths_are_appended_in_order(repo):
    stage(repo, "one.txt", A)
    stage(repo, "two.txt", B)

    assert [e.path for e in entries(repo)] == ["one.txt", "two.txt"]


def test_restaging_replaces_in_place(repo):
    stage(repo, "one.txt", A)
    stage(repo, "two.txt", B)
    stage(repo, "one.txt", C)

    assert entries(repo) == [
        IndexEntry(path="one.txt", digest=C),
        IndexEntry(path="two.txt", digest=B),
    ]


def test_index_file_format(repo):
    stage(repo, "dir/one.txt", A)
    stage(repo, "two.txt", B)

    assert repo.index_path.read_text() == f"dir/one.txt\t{A}\ntwo.txt\t{B}\n"


def test_index_survives_reload(repo):
    stage(repo, "one.txt", A)
    assert get_staging_info(repo) == {"one.txt": A}


def test_clear_removes_entries(repo):
    stage(repo, "one.txt", A)
    clear_staging_info(repo)

    assert entries(repo) == []
    assert not repo.index_path.exists()


def test_paths_with_tabs_are_rejected(repo):
    with pytest.raises(ValueError):
        stage(repo, "bad\tname", A)
    assert entries(repo) == []


def test_malformed_index_line_is_fatal(repo):
    repo.index_path.write_text("no-tab-here\n")
    with pytest.raises(CorruptIndexError) as excinfo:
        entries(repo)
    assert excinfo.value.fatal


def test_stage_all_writes_entries_in_order(repo):
    stage(repo, "one.txt", A)
    stage_all(repo, [("two.txt", B), ("one.txt", C)])

    assert get_staging_info(repo) == {"one.txt": C, "two.txt": B}


def test_stage_all_with_bad_path_leaves_index(repo):
    stage(repo, "one.txt", A)
    with pytest.raises(ValueError):
        stage_all(repo, [("two.txt", B), ("bad\nname", C)])
    assert get_staging_info(repo) == {"one.txt": A}


def test_undecodable_index_is_fatal(repo):
    repo.index_path.write_bytes(b"\xff\xfe\n")
    with pytest.raises(CorruptIndexError):
        entries(repo)
