"""Data models for archive entries and the display tree."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    """A single file or directory record inside an input archive.

    Attributes:
        path: Normalized path of the entry inside the archive.
        is_directory: True when the entry is a directory marker.
        size_bytes: Uncompressed size as recorded by the archive.
        raw_name: Name exactly as stored in the archive.
        index: Position of the record in the archive listing.
    """

    path: str
    is_directory: bool
    size_bytes: int
    raw_name: str = ""
    index: int = 0


@dataclass(slots=True)
class FileNode:
    """Represents a file in the directory tree.

    Attributes:
        name: Name of the file.
        path: Full path from root of the archive.
        size_bytes: Byte length of the decoded file contents.
    """

    name: str
    path: str
    size_bytes: int = 0

    @property
    def is_empty(self) -> bool:
        return self.size_bytes == 0


@dataclass(slots=True)
class FolderStats:
    """Aggregate counts over every file below a directory."""

    empty_count: int = 0
    non_empty_count: int = 0
    total_count: int = 0


@dataclass(slots=True)
class DirectoryNode:
    """Represents a directory in the tree structure.

    Attributes:
        name: Name of the directory.
        path: Full path from root of the archive.
        children: Child nodes (files and subdirectories) in first-seen order.
        stats: Counts over all descendant files, filled in after insertion.
    """

    name: str
    path: str
    children: list[FileNode | DirectoryNode] = field(default_factory=list)
    stats: FolderStats = field(default_factory=FolderStats)


TreeNode = FileNode | DirectoryNode


@dataclass(slots=True)
class ArchiveInspection:
    """Display metadata for an uploaded archive.

    Attributes:
        filename: Name of the uploaded archive.
        size_bytes: Size of the archive in bytes.
        file_count: Number of file entries (directory markers excluded).
        tree: Top-level nodes of the archive contents.
    """

    filename: str
    size_bytes: int
    file_count: int
    tree: list[TreeNode] = field(default_factory=list)
