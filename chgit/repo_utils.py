import logging
from pathlib import Path

from .errors import NotInitializedError, StorageIOError, UsageError
from .models import Repository

logger = logging.getLogger(__name__)


def find_chgit_root_dir(start: Path | None = None) -> Path | None:
    start = (start or Path.cwd()).resolve()
    for directory in [start] + list(start.parents):
        if (directory / ".chgit").is_dir():
            return directory
        if directory == Path.home():    # won't look past home directory
            return None
    return None


def open_repository(start: Path | None = None) -> Repository:
    root = find_chgit_root_dir(start)
    if root is None:
        raise NotInitializedError(start)
    repo = Repository(root=root)
    if not repo.is_initialized():
        raise NotInitializedError(start)
    return repo


def init_repository(root: Path) -> tuple[Repository, bool]:
    """Create the repository layout under ``root``.

    Returns the handle and whether anything was created; an existing
    repository is left untouched.
    """
    repo = Repository(root=root.resolve())
    if repo.is_initialized():
        return repo, False
    try:
        repo.objects_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageIOError(repo.objects_dir, e) from e
    logger.debug("initialized repository at %s", repo.chgit_dir)
    return repo, True


def relative_to_root(repo: Repository, path: Path) -> str:
    """Repository-relative POSIX form of ``path``, as stored in the index."""
    absolute = path.resolve()
    try:
        relative = absolute.relative_to(repo.root)
    except ValueError:
        raise UsageError(f"{path} is outside repository at {repo.root}") from None
    if relative.parts and relative.parts[0] == ".chgit":
        raise UsageError(f"{path} is inside the repository metadata directory")
    if not relative.parts:
        raise UsageError(f"{path} is the repository root, not a file")
    if any(char in relative.as_posix() for char in "\t\n\r"):
        raise UsageError(f"{str(path)!r}: file names containing tabs or newlines cannot be staged")
    return relative.as_posix()
