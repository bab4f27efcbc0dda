import time
from pathlib import Path
from typing import Callable

from .commit_helpers import create_commit, iter_commits, resolve_commit, verify_history
from .errors import CorruptHistoryError, UsageError
from .file_helpers import get_file_hash, store_file
from .history import HistoryChain
from .recreatedirectory import iter_restore
from .repo_utils import init_repository, open_repository, relative_to_root
from .staging_helpers import get_staging_info, stage_all


def map_command(command: str) -> Callable:
    commandsMap = {
        "init": init,
        "add": add,
        "status": status,
        "commit": commit,
        "log": log,
        "checkout": checkout,
        "verify": verify,
    }
    if command not in commandsMap:
        raise UsageError(f"Unknown command: {command}")
    return commandsMap[command]


def init(args):
    repo, created = init_repository(Path.cwd())
    if not created:
        print(f"chgit repository already initialized in {repo.chgit_dir}")
        return
    print(f"Initialized empty chgit repository in {repo.chgit_dir}")


def files_to_add(path: Path) -> list[Path]:
    if path.is_file():
        return [path]
    return sorted(
        p for p in path.rglob("*")
        if p.is_file() and ".chgit" not in p.relative_to(path).parts
    )


def add(args):
    repo = open_repository()
    path = Path(args.path)
    if not path.exists():
        raise UsageError(f"pathspec '{args.path}' did not match any files")

    candidates = files_to_add(path)
    if not candidates:
        print("No files matched the given path.")
        return
    # resolve every path before storing anything
    relative_paths = [relative_to_root(repo, candidate) for candidate in candidates]
    staged = [(relative_path, store_file(repo, candidate)) for candidate, relative_path in zip(candidates, relative_paths)]
    stage_all(repo, staged)
    for relative_path, _ in staged:
        print(f"Added {relative_path} to staging.")


def status(args):
    repo = open_repository()
    tail = HistoryChain(repo).last()
    print(f"Repository status: at commit {tail}" if tail else "Repository status: no commits yet")
    staging_info = get_staging_info(repo)
    if not staging_info:
        print("No files staged.")
        return
    print("Staged files:")
    for filepath, digest in staging_info.items():
        working_file = repo.root / filepath
        if not working_file.is_file():
            note = " (missing from working tree)"
        elif get_file_hash(working_file) != digest:
            note = " (modified since staged)"
        else:
            note = ""
        print(f" - {filepath}{note}")


def commit(args):
    repo = open_repository()
    commit_hash = create_commit(repo, args.message)
    print(f"Committed changes as commit {commit_hash}")


def log(args):
    repo = open_repository()
    any_commits = False
    for commit_hash, commit_info in iter_commits(repo):
        any_commits = True
        print(f"Commit: {commit_hash}")
        print(f"Date: {time.ctime(commit_info.timestamp)}")
        message = "\n    ".join(commit_info.message.splitlines() or [""])
        print(f"\n    {message}\n")
    if not any_commits:
        print("No commits yet.")


def checkout(args):
    repo = open_repository()
    commit_hash = resolve_commit(repo, args.commit)
    for restored in iter_restore(repo, commit_hash):
        print(f"Restored {restored.relative_to(repo.root).as_posix()}")
    print(f"Checked out commit {commit_hash}")


def verify(args):
    repo = open_repository()
    problems = verify_history(repo)
    if problems:
        raise CorruptHistoryError("history is inconsistent:\n  " + "\n  ".join(problems))
    print(f"History OK ({len(HistoryChain(repo))} commits)")
