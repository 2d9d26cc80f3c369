"""Data models for group configuration, matches and per-group statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Operation(StrEnum):
    """Classification attached to a resolved file."""

    INSERT = "insert"
    UPDATE = "update"


@dataclass(frozen=True, slots=True)
class GroupConfig:
    """One entry of the JSON configuration array.

    Attributes:
        group_name: Output folder name for the group.
        raw_name: Group label exactly as found in the configuration.
        links: Raw link strings in configuration order.
    """

    group_name: str
    raw_name: str
    links: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ResolvedFile:
    """A configured link that matched an archive entry."""

    group_name: str
    file_name: str
    operation: Operation
    content: bytes
    source_path: str = ""


@dataclass(slots=True)
class GroupFile:
    name: str
    operation: Operation


@dataclass(slots=True)
class GroupStats:
    """Per-group statistics accumulated while links are resolved.

    ``insert_count + update_count == file_count == len(files)`` holds as long
    as files are only added through :meth:`record`.
    """

    name: str
    file_count: int = 0
    insert_count: int = 0
    update_count: int = 0
    files: list[GroupFile] = field(default_factory=list)

    def record(self, file_name: str, operation: Operation) -> None:
        self.files.append(GroupFile(name=file_name, operation=operation))
        self.file_count += 1
        if operation is Operation.UPDATE:
            self.update_count += 1
        else:
            self.insert_count += 1


@dataclass(slots=True)
class BundleResult:
    """Final report of a bundling run.

    Attributes:
        stats: One entry per processed group, in configuration order.
        resolved: Every resolved file, in processing order.
        archive_bytes: Serialized output ZIP.
        download_name: Suggested download filename, None without a batch id.
        log: Timestamped processing log lines.
    """

    stats: list[GroupStats]
    resolved: list[ResolvedFile]
    archive_bytes: bytes
    download_name: str | None = None
    log: list[str] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.resolved)
