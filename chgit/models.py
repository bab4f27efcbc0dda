import json
import re
from pathlib import Path
from typing import TypeAlias

from pydantic import BaseModel, Field, field_validator

DIGEST_PATTERN = r"^[0-9a-f]{64}$"

Digest: TypeAlias = str
StagingInfo: TypeAlias = dict[str, Digest]


class IndexEntry(BaseModel):
    path: str
    digest: str = Field(pattern=DIGEST_PATTERN)

    @field_validator("path")
    @classmethod
    def _single_line_path(cls, value: str) -> str:
        if not value or "\t" in value or "\n" in value or "\r" in value:
            raise ValueError(f"unsupported path {value!r}")
        return value

    def to_line(self) -> str:
        return f"{self.path}\t{self.digest}"

    @classmethod
    def from_line(cls, line: str) -> "IndexEntry":
        path, sep, digest = line.rstrip("\r\n").rpartition("\t")
        if not sep:
            raise ValueError(f"malformed entry line {line!r}")
        return cls(path=path, digest=digest)


class CommitRecord(BaseModel):
    parent: str | None = None
    timestamp: int
    message: str
    files: list[IndexEntry]

    @field_validator("parent")
    @classmethod
    def _parent_is_digest(cls, value: str | None) -> str | None:
        if value is not None and not re.fullmatch(DIGEST_PATTERN, value):
            raise ValueError(f"malformed parent digest {value!r}")
        return value

    def serialize(self) -> bytes:
        lines = [
            f"parent {self.parent or ''}".rstrip(),
            f"timestamp {self.timestamp}",
            f"message {json.dumps(self.message)}",
            f"files {len(self.files)}",
        ]
        lines.extend(entry.to_line() for entry in self.files)
        return ("\n".join(lines) + "\n").encode("utf-8")

    @classmethod
    def parse(cls, content: bytes) -> "CommitRecord":
        """Parse the canonical form written by ``serialize``.

        Header fields are located by label; the file list length comes from
        the ``files`` header rather than from the position of the lines.
        Raises ``ValueError`` for anything that is not a commit record.
        """
        text = content.decode("utf-8")
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        fields: dict[str, str] = {}
        position = 0
        while position < len(lines):
            label, _, value = lines[position].partition(" ")
            position += 1
            if label in fields or label not in ("parent", "timestamp", "message", "files"):
                raise ValueError(f"unexpected header {label!r}")
            fields[label] = value
            if label == "files":
                break

        if set(fields) != {"parent", "timestamp", "message", "files"}:
            raise ValueError("incomplete commit header")

        count = int(fields["files"])
        file_lines = lines[position:]
        if count != len(file_lines):
            raise ValueError(f"expected {count} file lines, found {len(file_lines)}")

        message = json.loads(fields["message"])
        if not isinstance(message, str):
            raise ValueError("commit message is not a string")

        return cls(
            parent=fields["parent"] or None,
            timestamp=int(fields["timestamp"]),
            message=message,
            files=[IndexEntry.from_line(line) for line in file_lines],
        )


class Repository(BaseModel):
    """Handle on one repository; every core operation takes one of these."""

    root: Path

    @property
    def chgit_dir(self) -> Path:
        return self.root / ".chgit"

    @property
    def objects_dir(self) -> Path:
        return self.chgit_dir / "objects"

    @property
    def index_path(self) -> Path:
        return self.chgit_dir / "index"

    @property
    def head_path(self) -> Path:
        return self.chgit_dir / "HEAD"

    def is_initialized(self) -> bool:
        return self.objects_dir.is_dir()
