import logging
import os
import re

from .errors import CorruptHistoryError, StorageIOError
from .models import DIGEST_PATTERN, Digest, Repository

logger = logging.getLogger(__name__)


class HistoryChain:
    """Ordered list of commit digests, oldest first, backed by the HEAD file.

    The file is only ever appended to. ``append`` returns once the new line
    has been flushed and fsynced.
    """

    def __init__(self, repo: Repository):
        self.path = repo.head_path

    def all(self) -> list[Digest]:
        try:
            with open(self.path, encoding="utf-8") as f:
                lines = [line.strip() for line in f]
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageIOError(self.path, e) from e
        except UnicodeDecodeError as e:
            raise CorruptHistoryError(f"{self.path} is not valid UTF-8: {e}") from e

        digests = [line for line in lines if line]
        for digest in digests:
            if not re.fullmatch(DIGEST_PATTERN, digest):
                raise CorruptHistoryError(f"malformed entry {digest!r} in {self.path}")
        return digests

    def last(self) -> Digest | None:
        digests = self.all()
        return digests[-1] if digests else None

    def append(self, digest: Digest) -> None:
        if not re.fullmatch(DIGEST_PATTERN, digest):
            raise ValueError(f"not a digest: {digest!r}")
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(digest + "\n")
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise StorageIOError(self.path, e) from e
        logger.debug("appended %s to %s", digest, self.path)

    def __len__(self) -> int:
        return len(self.all())
