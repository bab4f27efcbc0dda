import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from .commit_helpers import get_commit_info
from .errors import ObjectNotFoundError, RestoreIntegrityError, StorageIOError
from .file_helpers import get_object, hash_bytes, write_atomic
from .models import Digest, IndexEntry, Repository

logger = logging.getLogger(__name__)


def working_path(repo: Repository, entry: IndexEntry) -> Path:
    relative = PurePosixPath(entry.path)
    if relative.is_absolute() or ".." in relative.parts or not relative.parts:
        raise RestoreIntegrityError(f"refusing to restore unsafe path {entry.path!r}")
    if relative.parts[0] == ".chgit":
        raise RestoreIntegrityError(f"refusing to restore into metadata directory: {entry.path!r}")
    return repo.root.joinpath(*relative.parts)


def working_file_mode(dest_path: Path) -> int:
    """Mode of the file being replaced, or the umask default for a new file."""
    try:
        return stat.S_IMODE(dest_path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def read_blob(repo: Repository, entry: IndexEntry) -> bytes:
    try:
        content = get_object(repo, entry.digest)
    except ObjectNotFoundError as e:
        raise RestoreIntegrityError(f"{entry.path} references missing object {entry.digest}") from e
    if hash_bytes(content) != entry.digest:
        raise RestoreIntegrityError(f"object {entry.digest} for {entry.path} does not match its digest")
    return content


def iter_restore(repo: Repository, commit_hash: Digest) -> Iterator[Path]:
    """Overwrite the working files recorded in ``commit_hash``, yielding each path.

    Files not recorded in the commit are left alone. Any failure stops the
    restore at that file.
    """
    commit_info = get_commit_info(repo, commit_hash)
    for entry in commit_info.files:
        dest_path = working_path(repo, entry)
        content = read_blob(repo, entry)
        try:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(dest_path.parent, e) from e
        write_atomic(dest_path, content, mode=working_file_mode(dest_path))
        logger.debug("restored %s from %s", entry.path, entry.digest)
        yield dest_path
