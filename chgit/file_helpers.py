import hashlib
import logging
import os
import re
import tempfile
from pathlib import Path

from .errors import ObjectNotFoundError, StorageIOError
from .models import DIGEST_PATTERN, Digest, Repository

logger = logging.getLogger(__name__)


def hash_bytes(content: bytes) -> Digest:
    return hashlib.sha256(content).hexdigest()


def get_file_hash(filepath: Path) -> Digest:
    hasher = hashlib.sha256()
    with open(filepath, "rb") as f:
        while chunk := f.read(8192):
            hasher.update(chunk)
    return hasher.hexdigest()


def write_atomic(dest_path: Path, content: bytes, mode: int | None = None) -> None:
    """Replace ``dest_path`` with ``content`` without exposing a partial file.

    The temporary file is created owner-only; pass ``mode`` to give the
    result other permissions.
    """
    try:
        fd, tmp_name = tempfile.mkstemp(dir=dest_path.parent, prefix=f".{dest_path.name}.", suffix=".tmp")
    except OSError as e:
        raise StorageIOError(dest_path, e) from e
    try:
        with os.fdopen(fd, "wb") as f_out:
            f_out.write(content)
            f_out.flush()
            os.fsync(f_out.fileno())
        if mode is not None:
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, dest_path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise StorageIOError(dest_path, e) from e


def object_path(repo: Repository, digest: Digest) -> Path:
    if not re.fullmatch(DIGEST_PATTERN, digest):
        raise ObjectNotFoundError(digest)
    return repo.objects_dir / digest


def has_object(repo: Repository, digest: Digest) -> bool:
    try:
        return object_path(repo, digest).is_file()
    except ObjectNotFoundError:
        return False


def put_object(repo: Repository, content: bytes) -> Digest:
    digest = hash_bytes(content)
    if has_object(repo, digest):
        return digest
    write_atomic(object_path(repo, digest), content)
    logger.debug("stored object %s (%d bytes)", digest, len(content))
    return digest


def get_object(repo: Repository, digest: Digest) -> bytes:
    path = object_path(repo, digest)
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        raise ObjectNotFoundError(digest) from None
    except OSError as e:
        raise StorageIOError(path, e) from e


def store_file(repo: Repository, filepath: Path) -> Digest:
    try:
        with open(filepath, "rb") as f_in:
            content = f_in.read()
    except OSError as e:
        raise StorageIOError(filepath, e) from e
    return put_object(repo, content)
