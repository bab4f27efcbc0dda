from pathlib import Path


class ChgitError(Exception):
    """Base class for every error the chgit core raises."""

    fatal = False


class UsageError(ChgitError):
    pass


class NotInitializedError(ChgitError):
    def __init__(self, start: Path | None = None):
        where = f" (searched from {start})" if start else ""
        super().__init__(f"not in a chgit repository{where}; run 'chgit init' first")


class ObjectNotFoundError(ChgitError):
    def __init__(self, digest: str):
        self.digest = digest
        super().__init__(f"object {digest} does not exist")


class CommitNotFoundError(ChgitError):
    def __init__(self, digest: str):
        self.digest = digest
        super().__init__(f"no match for commit {digest}")


class EmptyCommitError(ChgitError):
    def __init__(self):
        super().__init__("no files staged for commit")


class RestoreIntegrityError(ChgitError):
    fatal = True


class CorruptHistoryError(ChgitError):
    fatal = True


class CorruptIndexError(ChgitError):
    fatal = True


class StorageIOError(ChgitError):
    fatal = True

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"I/O failure on {path}: {cause.strerror or cause}")
