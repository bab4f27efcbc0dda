import logging

from .errors import CorruptIndexError, StorageIOError
from .file_helpers import write_atomic
from .models import Digest, IndexEntry, Repository, StagingInfo

logger = logging.getLogger(__name__)


def get_staging_info(repo: Repository) -> StagingInfo:
    staging_path = repo.index_path
    try:
        with open(staging_path, encoding="utf-8") as f:
            lines = f.read().splitlines()
    except FileNotFoundError:
        return {}
    except OSError as e:
        raise StorageIOError(staging_path, e) from e
    except UnicodeDecodeError as e:
        raise CorruptIndexError(f"{staging_path} is not valid UTF-8: {e}") from e

    info: StagingInfo = {}
    for number, line in enumerate(lines, start=1):
        if not line:
            continue
        try:
            entry = IndexEntry.from_line(line)
        except ValueError as e:
            raise CorruptIndexError(f"{staging_path}:{number}: {e}") from e
        info[entry.path] = entry.digest
    return info


def update_staging_info(repo: Repository, info: StagingInfo) -> None:
    staging_path = repo.index_path
    if not info:
        try:
            staging_path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageIOError(staging_path, e) from e
        return
    text = "".join(IndexEntry(path=path, digest=digest).to_line() + "\n" for path, digest in info.items())
    write_atomic(staging_path, text.encode("utf-8"))


def entries(repo: Repository) -> list[IndexEntry]:
    return [IndexEntry(path=path, digest=digest) for path, digest in get_staging_info(repo).items()]


def stage(repo: Repository, path: str, digest: Digest) -> None:
    stage_all(repo, [(path, digest)])


def stage_all(repo: Repository, staged: list[tuple[str, Digest]]) -> None:
    """Upsert several entries with a single rewrite of the index."""
    new_entries = [IndexEntry(path=path, digest=digest) for path, digest in staged]
    staging_info = get_staging_info(repo)
    # assignment to an existing key keeps its position in the dict
    for entry in new_entries:
        staging_info[entry.path] = entry.digest
    update_staging_info(repo, staging_info)
    for entry in new_entries:
        logger.debug("staged %s as %s", entry.path, entry.digest)


def clear_staging_info(repo: Repository) -> None:
    update_staging_info(repo, {})
