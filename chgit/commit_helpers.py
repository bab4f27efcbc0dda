import logging
import time
from collections.abc import Iterator

from .errors import CommitNotFoundError, CorruptHistoryError, EmptyCommitError, ObjectNotFoundError, UsageError
from .file_helpers import get_object, put_object
from .history import HistoryChain
from .models import CommitRecord, Digest, IndexEntry, Repository
from .staging_helpers import clear_staging_info
from .staging_helpers import entries as staged_entries

logger = logging.getLogger(__name__)


def create_commit(repo: Repository, message: str, entries: list[IndexEntry] | None = None) -> Digest:
    """Record the staged entries as a new commit on top of the chain tail.

    The record object is written first, then its digest is appended to the
    chain, and only then is the index cleared. A failure at any step leaves
    the index as it was.
    """
    if entries is None:
        entries = staged_entries(repo)
    if not entries:
        raise EmptyCommitError()

    chain = HistoryChain(repo)
    commit_info = CommitRecord(
        parent=chain.last(),
        timestamp=int(time.time()),
        message=message,
        files=[entry.model_copy() for entry in entries],
    )
    commit_hash = put_object(repo, commit_info.serialize())
    chain.append(commit_hash)
    clear_staging_info(repo)
    logger.debug("committed %s with %d file(s)", commit_hash, len(entries))
    return commit_hash


def get_commit_info(repo: Repository, commit_hash: Digest) -> CommitRecord:
    try:
        content = get_object(repo, commit_hash)
    except ObjectNotFoundError:
        raise CommitNotFoundError(commit_hash) from None
    try:
        return CommitRecord.parse(content)
    except ValueError:
        # a blob, not a commit record
        raise CommitNotFoundError(commit_hash) from None


def iter_commits(repo: Repository) -> Iterator[tuple[Digest, CommitRecord]]:
    """Yield ``(digest, record)`` newest first, in reverse chain order."""
    for commit_hash in reversed(HistoryChain(repo).all()):
        try:
            yield commit_hash, get_commit_info(repo, commit_hash)
        except CommitNotFoundError:
            raise CorruptHistoryError(f"history references missing commit {commit_hash}") from None


def resolve_commit(repo: Repository, name: str) -> Digest:
    """Turn a full digest or a unique prefix of a recorded commit into a digest."""
    name = name.strip().lower()
    if not name:
        raise UsageError("empty commit name")
    chain = HistoryChain(repo).all()
    if name in chain:
        return name
    matches = sorted({commit_hash for commit_hash in chain if commit_hash.startswith(name)})
    if len(matches) > 1:
        raise UsageError(f"commit prefix '{name}' is ambiguous: " + ", ".join(m[:12] for m in matches))
    if matches:
        return matches[0]
    # not in the chain; it may still name a stored record
    return name


def verify_history(repo: Repository) -> list[str]:
    problems = []
    expected_parent = None
    for commit_hash in HistoryChain(repo).all():
        try:
            commit_info = get_commit_info(repo, commit_hash)
        except CommitNotFoundError:
            problems.append(f"{commit_hash}: missing commit record")
            expected_parent = commit_hash
            continue
        if commit_info.parent != expected_parent:
            problems.append(f"{commit_hash}: parent is {commit_info.parent}, expected {expected_parent}")
        expected_parent = commit_hash
    return problems
